"""Shapes of the nested result values handled by the pipeline.

A value is one of:
- a scalar (str, int, float, bool or None)
- a record (dict keyed by str, insertion ordered)
- a sequence (list of values)

Records and sequences are both containers. Whether a record key is a plain
field or an association is decided only by the shape of its value.
"""

from enum import Enum
from typing import Any, Optional, Union

Scalar = Union[str, int, float, bool, None]
Record = dict
Sequence = list
Container = Union[Record, Sequence]
Value = Any


class AssociationShape(Enum):
    """Cardinality of an association, derived from its value."""

    SINGLE = "single"
    MULTIPLE = "multiple"


def is_record(value: Value) -> bool:
    return isinstance(value, dict)


def is_sequence(value: Value) -> bool:
    return isinstance(value, list)


def is_container(value: Value) -> bool:
    return isinstance(value, (dict, list))


def association_shape(value: Value) -> Optional[AssociationShape]:
    """Return the association shape of a value, or None for scalars.

    An empty list is still MULTIPLE: the data source decides cardinality by
    handing over a list, not by how many items it holds.
    """
    if is_record(value):
        return AssociationShape.SINGLE
    if is_sequence(value):
        return AssociationShape.MULTIPLE
    return None
