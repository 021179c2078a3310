"""Reshape nested ORM query results into flat, API-friendly JSON data."""

from .transform import (
    InvalidInputError,
    MissingPrimaryKeyError,
    PipelineConfig,
    TransformError,
    TransformPipeline,
    transform,
)

__version__ = "0.1.0"

__all__ = [
    "InvalidInputError",
    "MissingPrimaryKeyError",
    "PipelineConfig",
    "TransformError",
    "TransformPipeline",
    "transform",
]
