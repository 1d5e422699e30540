"""
Value formatting for failure messages.

Only needs to be readable and deterministic; it is not a serializer.
A container that contains itself is rendered as <cycle> at the repeat.
"""

from enum import Enum
from typing import Any

from tablequiv.domain.constants import CYCLE_DESCRIPTION, MAX_FORMATTED_ITEMS, NULL_DESCRIPTION
from tablequiv.domain.tables import (
    Constraint,
    DataColumn,
    DataRelation,
    DataRow,
    DataSet,
    DataTable,
)


def format_value(value: Any) -> str:
    """
    Render a value for a failure message.

    Examples:
        None → <null>
        "abc" → "abc"
        DataTable → DataTable 'Customers'
        [1, 2] → [1, 2]
        a = [1]; a.append(a) → [1, <cycle>]
    """
    return _format(value, frozenset())


def _format(value: Any, seen: frozenset[int]) -> str:
    if value is None:
        return NULL_DESCRIPTION
    if isinstance(value, Enum):
        return f"{type(value).__name__}.{value.name}"
    if isinstance(value, str):
        return f'"{value}"'
    if isinstance(value, bool):
        return str(value)
    if isinstance(value, type):
        return value.__name__
    if isinstance(value, DataTable):
        return f"{type(value).__name__} '{value.table_name}'"
    if isinstance(value, DataSet):
        return f"{type(value).__name__} '{value.dataset_name}'"
    if isinstance(value, DataColumn):
        return f"{type(value).__name__} '{value.column_name}'"
    if isinstance(value, DataRelation):
        return f"{type(value).__name__} '{value.relation_name}'"
    if isinstance(value, Constraint):
        return f"{type(value).__name__} '{value.constraint_name}'"

    if not isinstance(value, (DataRow, dict, list, tuple)):
        return repr(value)

    if id(value) in seen:
        return CYCLE_DESCRIPTION
    seen = seen | {id(value)}

    if isinstance(value, DataRow):
        items = [_format(item, seen) for item in value.values]
        return f"{type(value).__name__} [{_join_truncated(items)}]"
    if isinstance(value, dict):
        items = [f"{_format(k, seen)}: {_format(v, seen)}" for k, v in value.items()]
        return "{" + _join_truncated(items) + "}"
    return "[" + _join_truncated([_format(item, seen) for item in value]) + "]"


def _join_truncated(items: list[str]) -> str:
    if len(items) <= MAX_FORMATTED_ITEMS:
        return ", ".join(items)
    shown = ", ".join(items[:MAX_FORMATTED_ITEMS])
    return f"{shown}, ... ({len(items) - MAX_FORMATTED_ITEMS} more)"
