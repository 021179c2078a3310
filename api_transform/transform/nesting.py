"""Hoisting of the primary record to the top level of a result record."""

from api_transform.transform.errors import MissingPrimaryKeyError
from api_transform.transform.values import Record, is_record


def flatten_nesting(record: Record, primary_alias: str) -> Record:
    """Move the primary record's fields up next to its associations.

    Args:
        record: Result record keyed by model alias
        primary_alias: Key holding the primary record

    Returns:
        New record with the primary fields first, followed by the remaining
        keys of ``record``. Primary fields win on key collisions.

    Raises:
        MissingPrimaryKeyError: If ``primary_alias`` is absent or does not
            hold a record

    Example:
        >>> flatten_nesting({"Post": {"id": 1}, "Tag": [{"id": 2}]}, "Post")
        {'id': 1, 'Tag': [{'id': 2}]}
    """
    primary = record.get(primary_alias)
    if not is_record(primary):
        raise MissingPrimaryKeyError(primary_alias)

    flattened = dict(primary)
    for key, value in record.items():
        if key == primary_alias or key in flattened:
            continue
        flattened[key] = value

    return flattened
