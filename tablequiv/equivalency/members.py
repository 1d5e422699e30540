"""
Member model: the named attributes that take part in a comparison.

Members of the model types come from an explicit closed enumeration, one
tuple per type. Nothing here inspects instances at runtime; other dataclasses
fall back to their declared fields.

Relations and constraints refer to tables and columns owned elsewhere; those
members are references and compare the names of what they point at.
"""

import dataclasses
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from operator import attrgetter
from typing import Any

from tablequiv.domain.tables import (
    AcceptRejectRule,
    Constraint,
    DataColumn,
    DataRelation,
    DataRow,
    DataSet,
    DataTable,
    ForeignKeyConstraint,
    RowState,
    Rule,
    SerializationFormat,
    UniqueConstraint,
)


class MemberKind(str, Enum):
    """How a member's value is compared."""
    SCALAR = "scalar"          # exact equality
    COLLECTION = "collection"  # list/dict, delegated item by item
    REFERENCE = "reference"    # another document, compared by name only


@dataclass(frozen=True)
class Member:
    """Named, typed attribute with an accessor. Immutable."""
    name: str
    declared_type: Any
    kind: MemberKind = MemberKind.SCALAR
    accessor: Callable[[Any], Any] | None = field(default=None, compare=False, repr=False)

    @property
    def is_scalar(self) -> bool:
        return self.kind == MemberKind.SCALAR

    def get_value(self, obj: Any) -> Any:
        """
        Read the member from obj.

        Raises:
            AttributeError: obj does not expose the member
        """
        if self.accessor is not None:
            return self.accessor(obj)
        return getattr(obj, self.name)


def _scalar(name: str, declared_type: Any) -> Member:
    return Member(name, declared_type, MemberKind.SCALAR, attrgetter(name))


def _collection(name: str, declared_type: Any = list) -> Member:
    return Member(name, declared_type, MemberKind.COLLECTION, attrgetter(name))


def _table_reference(name: str) -> Member:
    getter = attrgetter(name)
    return Member(name, str, MemberKind.REFERENCE, lambda obj: _table_name_of(getter(obj)))


def _column_references(name: str) -> Member:
    getter = attrgetter(name)
    return Member(name, list, MemberKind.REFERENCE, lambda obj: _column_names_of(getter(obj)))


def _table_name_of(table: DataTable | None) -> str | None:
    return table.table_name if table is not None else None


def _column_names_of(columns: list[DataColumn]) -> list[str]:
    return [column.column_name for column in columns]


# =============================================================================
# Closed Member Sets
# =============================================================================

TABLE_MEMBERS: tuple[Member, ...] = (
    _scalar("table_name", str),
    _scalar("case_sensitive", bool),
    _scalar("display_expression", str),
    _scalar("has_errors", bool),
    _scalar("locale", str),
    _scalar("namespace", str),
    _scalar("prefix", str),
    _scalar("remoting_format", SerializationFormat),
    _collection("child_relations"),
    _collection("columns"),
    _collection("constraints"),
    _collection("extended_properties", dict),
    _collection("parent_relations"),
    _collection("primary_key"),
    _collection("rows"),
)

COLUMN_MEMBERS: tuple[Member, ...] = (
    _scalar("column_name", str),
    _scalar("data_type", type),
    _scalar("allow_db_null", bool),
    _scalar("auto_increment", bool),
    _scalar("caption", str),
    _scalar("default_value", object),
    _scalar("expression", str),
    _scalar("max_length", int),
    _scalar("read_only", bool),
    _scalar("unique", bool),
    _scalar("ordinal", int),
    _collection("extended_properties", dict),
)

ROW_MEMBERS: tuple[Member, ...] = (
    _scalar("row_state", RowState),
    _scalar("row_error", str),
    _scalar("has_errors", bool),
    _collection("values"),
)

RELATION_MEMBERS: tuple[Member, ...] = (
    _scalar("relation_name", str),
    _scalar("nested", bool),
    _column_references("parent_columns"),
    _column_references("child_columns"),
    _collection("extended_properties", dict),
    _table_reference("parent_table"),
    _table_reference("child_table"),
)

CONSTRAINT_MEMBERS: tuple[Member, ...] = (
    _scalar("constraint_name", str),
    _collection("extended_properties", dict),
)

UNIQUE_CONSTRAINT_MEMBERS: tuple[Member, ...] = CONSTRAINT_MEMBERS + (
    _scalar("is_primary_key", bool),
    _column_references("columns"),
)

FOREIGN_KEY_MEMBERS: tuple[Member, ...] = CONSTRAINT_MEMBERS + (
    _scalar("delete_rule", Rule),
    _scalar("update_rule", Rule),
    _scalar("accept_reject_rule", AcceptRejectRule),
    _column_references("columns"),
    _column_references("related_columns"),
    _table_reference("related_table"),
)

DATASET_MEMBERS: tuple[Member, ...] = (
    _scalar("dataset_name", str),
    _scalar("case_sensitive", bool),
    _scalar("enforce_constraints", bool),
    _scalar("has_errors", bool),
    _scalar("locale", str),
    _scalar("namespace", str),
    _scalar("prefix", str),
    _scalar("remoting_format", SerializationFormat),
    _collection("extended_properties", dict),
    _collection("relations"),
    _collection("tables"),
)

_MEMBER_REGISTRY: dict[type, tuple[Member, ...]] = {
    DataTable: TABLE_MEMBERS,
    DataColumn: COLUMN_MEMBERS,
    DataRow: ROW_MEMBERS,
    DataRelation: RELATION_MEMBERS,
    Constraint: CONSTRAINT_MEMBERS,
    UniqueConstraint: UNIQUE_CONSTRAINT_MEMBERS,
    ForeignKeyConstraint: FOREIGN_KEY_MEMBERS,
    DataSet: DATASET_MEMBERS,
}


# =============================================================================
# Lookup
# =============================================================================

def register_members(node_type: type, members: tuple[Member, ...]) -> None:
    """Declare the closed member set of a custom type."""
    _MEMBER_REGISTRY[node_type] = tuple(members)


def has_declared_members(node_type: Any) -> bool:
    """True when node_type (or a base) has a closed member set or is a dataclass."""
    return bool(members_for(node_type))


def members_for(node_type: Any) -> tuple[Member, ...]:
    """
    Members of a type, most specific registration first.

    Unregistered dataclasses expose their public fields; anything else has
    no members.
    """
    for klass in getattr(node_type, "__mro__", ()):
        if klass in _MEMBER_REGISTRY:
            return _MEMBER_REGISTRY[klass]

    if isinstance(node_type, type) and dataclasses.is_dataclass(node_type):
        return tuple(
            Member(f.name, f.type, MemberKind.SCALAR, attrgetter(f.name))
            for f in dataclasses.fields(node_type)
            if not f.name.startswith("_")
        )
    return ()


def find_member(node_type: Any, name: str) -> Member | None:
    for member in members_for(node_type):
        if member.name == name:
            return member
    return None
