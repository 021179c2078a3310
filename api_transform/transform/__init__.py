"""Data transformation modules.

Handles:
- Primary record flattening
- Association key renaming
- Number casting
- Date to Unix time conversion
"""

from .casts import (
    DateToEpoch,
    NumericCoercion,
    ValueTransformer,
    cast_number,
    date_to_epoch,
)
from .errors import InvalidInputError, MissingPrimaryKeyError, TransformError
from .inflector import InflectionInflector, Inflector
from .keys import AssociationKeyRename, KeyTransformer
from .nesting import flatten_nesting
from .pipeline import PipelineConfig, TransformPipeline, transform
from .values import AssociationShape, association_shape

__all__ = [
    # Values
    "AssociationShape",
    "association_shape",
    # Inflection
    "Inflector",
    "InflectionInflector",
    # Value transformers
    "ValueTransformer",
    "NumericCoercion",
    "DateToEpoch",
    "cast_number",
    "date_to_epoch",
    # Key transformers
    "KeyTransformer",
    "AssociationKeyRename",
    # Nesting
    "flatten_nesting",
    # Errors
    "TransformError",
    "InvalidInputError",
    "MissingPrimaryKeyError",
    # Full pipeline
    "PipelineConfig",
    "TransformPipeline",
    "transform",
]
