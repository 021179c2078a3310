"""Value transformers applied to every scalar leaf."""

import logging
import math
import re
from abc import ABC, abstractmethod
from datetime import datetime

from api_transform.transform.values import Scalar

logger = logging.getLogger(__name__)

NUMERIC_PATTERN = re.compile(
    r"^\s*[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?\s*$"
)
INTEGER_PATTERN = re.compile(r"^\s*[+-]?\d+\s*$")

DATE_PREFIX_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}")

# Layouts tried in order when converting a date string to a timestamp
DATE_FORMATS = [
    "%Y-%m-%d",
    "%Y-%m-%d %H:%M",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d %H:%M:%S.%f",
    "%Y-%m-%d %H:%M:%S%z",
    "%Y-%m-%d %H:%M:%S.%f%z",
    "%Y-%m-%dT%H:%M",
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%dT%H:%M:%S.%f",
    "%Y-%m-%dT%H:%M:%S%z",
    "%Y-%m-%dT%H:%M:%S.%f%z",
]


class ValueTransformer(ABC):
    """Rewrites a single scalar value.

    Subclasses must return their input unchanged when it is outside the
    values they handle, so transformers can be chained freely.
    """

    @abstractmethod
    def apply(self, value: Scalar) -> Scalar:
        """Transform a scalar value."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


def cast_number(value: Scalar) -> Scalar:
    """Change "1" to 1 and "123.456" to 123.456.

    Strings without a decimal point or exponent become ints, everything else
    numeric becomes a float. Leading zeros are dropped ("0010" -> 10).
    Numerals too large for a finite float are returned as is.
    Non-numeric strings and non-string values are returned as is.
    """
    if not isinstance(value, str) or not NUMERIC_PATTERN.match(value):
        return value

    if INTEGER_PATTERN.match(value):
        try:
            return int(value)
        except ValueError:
            # Past the interpreter's int string conversion limit
            return value

    number = float(value)
    if not math.isfinite(number):
        # "1e999" overflows to inf
        return value
    return number


def date_to_epoch(value: Scalar) -> Scalar:
    """Convert a database date string to a Unix timestamp.

    Only strings starting with YYYY-MM-DD are considered. Naive values are
    read in the local time zone. Strings that look like dates but cannot be
    parsed or converted to a timestamp are returned unchanged.

    Example:
        >>> date_to_epoch("1970-01-02 00:00:00+00:00")
        86400
    """
    if not isinstance(value, str) or not DATE_PREFIX_PATTERN.match(value):
        return value

    text = value.strip()
    for fmt in DATE_FORMATS:
        try:
            dt = datetime.strptime(text, fmt)
        except ValueError:
            continue
        try:
            return int(dt.timestamp())
        except (ValueError, OverflowError, OSError):
            # Year 1 and 9999 dates can leave the datetime range in the local zone
            break

    logger.debug(f"Could not parse date: {value}")
    return value


class NumericCoercion(ValueTransformer):
    """Casts numeric strings to int or float."""

    def apply(self, value: Scalar) -> Scalar:
        return cast_number(value)


class DateToEpoch(ValueTransformer):
    """Replaces date strings with integer Unix timestamps."""

    def apply(self, value: Scalar) -> Scalar:
        return date_to_epoch(value)
