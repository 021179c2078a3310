"""Utility modules for the transformer.

Includes:
- Logging configuration
- Structured run logging
- JSON file I/O helpers
"""

from .file_io import read_json, write_json
from .logging_config import JsonFormatter, setup_logging
from .pipeline_logger import PipelineLogger, timed_operation

__all__ = [
    "setup_logging",
    "JsonFormatter",
    "read_json",
    "write_json",
    "PipelineLogger",
    "timed_operation",
]
