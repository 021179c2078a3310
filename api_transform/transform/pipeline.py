"""Transformation pipeline from ORM-shaped results to API-friendly data.

A result record looks like::

    {"Post": {"id": "1", "created": "2021-01-01"}, "Comment": [{"id": "2"}]}

and comes out as::

    {"id": 1, "created": 1609459200, "comments": [{"id": 2}]}

The pipeline:
- detects whether it got one record or a list of them
- hoists the primary record's fields to the top level
- renames association keys at every level
- casts every scalar leaf (numbers, dates)
"""

import logging
import os
from dataclasses import dataclass, replace
from typing import Optional

from api_transform.transform.casts import DateToEpoch, NumericCoercion, ValueTransformer
from api_transform.transform.errors import InvalidInputError
from api_transform.transform.inflector import Inflector
from api_transform.transform.keys import AssociationKeyRename, KeyTransformer
from api_transform.transform.nesting import flatten_nesting
from api_transform.transform.values import Record, Value, is_container, is_record, is_sequence
from api_transform.utils.pipeline_logger import timed_operation

logger = logging.getLogger(__name__)

ENV_PREFIX = "API_TRANSFORM_"
TRUE_VALUES = {"1", "true", "yes", "on"}
FALSE_VALUES = {"0", "false", "no", "off"}


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(f"{ENV_PREFIX}{name}")
    if raw is None or not raw.strip():
        return default

    value = raw.strip().lower()
    if value in TRUE_VALUES:
        return True
    if value in FALSE_VALUES:
        return False
    raise ValueError(f"Invalid boolean for {ENV_PREFIX}{name}: {raw!r}")


@dataclass(frozen=True)
class PipelineConfig:
    """Settings for one transformation run.

    Attributes:
        change_nesting: Hoist the primary record to the top level
        change_keys: Rename association keys (Comment -> comments)
        cast_numbers: Cast numeric strings to numbers
        change_time: Convert date strings to Unix timestamps
        key_transformers: Extra key transformers, run after the built-ins
        value_transformers: Extra value transformers, run after the built-ins
        inflector: Inflector used for key renaming (inflection package if None)
    """

    change_nesting: bool = True
    change_keys: bool = True
    cast_numbers: bool = True
    change_time: bool = True
    key_transformers: tuple[KeyTransformer, ...] = ()
    value_transformers: tuple[ValueTransformer, ...] = ()
    inflector: Optional[Inflector] = None

    def __post_init__(self):
        # Accept lists from callers but keep the config immutable
        object.__setattr__(self, "key_transformers", tuple(self.key_transformers))
        object.__setattr__(self, "value_transformers", tuple(self.value_transformers))

    @classmethod
    def from_env(cls, **overrides) -> "PipelineConfig":
        """Build a config from API_TRANSFORM_* environment variables.

        Keyword arguments override the environment.

        Raises:
            ValueError: If a flag variable holds something that is not a boolean
        """
        settings = {
            "change_nesting": _env_flag("CHANGE_NESTING", True),
            "change_keys": _env_flag("CHANGE_KEYS", True),
            "cast_numbers": _env_flag("CAST_NUMBERS", True),
            "change_time": _env_flag("CHANGE_TIME", True),
        }
        settings.update(overrides)
        return cls(**settings)

    def with_overrides(self, **changes) -> "PipelineConfig":
        """Return a copy with some settings changed."""
        return replace(self, **changes)

    def build_key_transformers(self) -> tuple[KeyTransformer, ...]:
        """Built-in key transformers enabled by the flags, then custom ones."""
        built_in = []
        if self.change_keys:
            built_in.append(AssociationKeyRename(self.inflector))
        return tuple(built_in) + self.key_transformers

    def build_value_transformers(self) -> tuple[ValueTransformer, ...]:
        """Built-in value transformers enabled by the flags, then custom ones.

        Numbers are cast before dates are converted.
        """
        built_in = []
        if self.cast_numbers:
            built_in.append(NumericCoercion())
        if self.change_time:
            built_in.append(DateToEpoch())
        return tuple(built_in) + self.value_transformers


class TransformPipeline:
    """Applies a PipelineConfig to result records."""

    def __init__(self, config: Optional[PipelineConfig] = None):
        self.config = config or PipelineConfig()
        self.key_transformers = self.config.build_key_transformers()
        self.value_transformers = self.config.build_value_transformers()

    def transform(self, data: Value, primary_alias: str) -> Value:
        """Transform a single result record or a list of them.

        Args:
            data: Record containing ``primary_alias``, or a list of such records
            primary_alias: Key of the primary model in each record

        Returns:
            Transformed data with the same cardinality as the input

        Raises:
            InvalidInputError: If ``data`` is not a record or list of records
            MissingPrimaryKeyError: If flattening a record without a primary record
        """
        if is_container(data) and not data:
            return type(data)()

        records, wrapped = self._normalize(data, primary_alias)

        with timed_operation("transform", logger) as timer:
            formatted = []
            for record in records:
                if self.config.change_nesting:
                    record = flatten_nesting(record, primary_alias)
                formatted.append(self.recurse(record))

        logger.debug(
            f"Transformed {len(formatted)} {primary_alias} records",
            extra={
                "primary_alias": primary_alias,
                "record_count": len(formatted),
                "wrapped": wrapped,
                "duration_ms": timer.duration_ms,
            }
        )

        if wrapped:
            return formatted[0]
        return formatted

    def recurse(
        self,
        value: Value,
        key_transformers: Optional[tuple[KeyTransformer, ...]] = None,
        value_transformers: Optional[tuple[ValueTransformer, ...]] = None,
    ) -> Value:
        """Apply key transformers to containers and value transformers to leaves.

        Keys of a container are rewritten before its children are visited.
        Returns new containers; the input is left untouched.
        """
        if key_transformers is None:
            key_transformers = self.key_transformers
        if value_transformers is None:
            value_transformers = self.value_transformers

        if is_container(value):
            for transformer in key_transformers:
                value = transformer.apply(value)

            if is_record(value):
                return {
                    key: self.recurse(child, key_transformers, value_transformers)
                    for key, child in value.items()
                }
            return [
                self.recurse(child, key_transformers, value_transformers)
                for child in value
            ]

        for transformer in value_transformers:
            value = transformer.apply(value)
        return value

    def _normalize(self, data: Value, primary_alias: str) -> tuple[list[Record], bool]:
        """Return the records to process and whether the input was a single record."""
        if is_record(data):
            if primary_alias in data:
                return [data], True
            raise InvalidInputError(
                f"Record does not contain primary alias {primary_alias!r}"
            )

        if not is_sequence(data):
            raise InvalidInputError(
                f"Expected a record or a list of records, got {type(data).__name__}"
            )

        for i, record in enumerate(data):
            if not is_record(record):
                raise InvalidInputError(
                    f"Expected a record, got {type(record).__name__}", index=i
                )
            if primary_alias not in record:
                raise InvalidInputError(
                    f"Record does not contain primary alias {primary_alias!r}", index=i
                )

        return list(data), False


def transform(
    data: Value,
    primary_alias: str,
    config: Optional[PipelineConfig] = None,
) -> Value:
    """Transform result data with a one-off pipeline.

    Example:
        >>> transform({"Post": {"id": "1"}, "Comment": [{"id": "2"}]}, "Post")
        {'id': 1, 'comments': [{'id': 2}]}
    """
    return TransformPipeline(config).transform(data, primary_alias)
