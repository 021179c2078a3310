"""Exceptions raised by the transformation pipeline."""

from typing import Optional


class TransformError(Exception):
    """Base class for pipeline errors."""


class InvalidInputError(TransformError):
    """Raised when the input is not a record or a list of records."""

    def __init__(self, message: str, index: Optional[int] = None):
        self.index = index
        if index is not None:
            message = f"{message} (record index {index})"
        super().__init__(message)


class MissingPrimaryKeyError(TransformError):
    """Raised when a record lacks the primary alias needed for flattening."""

    def __init__(self, primary_alias: str):
        self.primary_alias = primary_alias
        super().__init__(f"Record has no primary record under key: {primary_alias}")
