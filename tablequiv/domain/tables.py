"""
Table document model: DataTable and its columns, rows, constraints, relations.

Documents are built in memory through this API (loading them from files is
somebody else's job).

Invariants enforced here:
- every row has exactly one value per column
- primary key columns belong to the table
- a relation is registered on both ends at once
  (parent.child_relations + child.parent_relations)
- identity equality (eq=False): the cycle tracker keys on id()
"""

from dataclasses import dataclass, field, replace
from copy import deepcopy
from enum import Enum
from typing import Any

# =============================================================================
# Enums
# =============================================================================

class SerializationFormat(str, Enum):
    """Remoting format of a table or dataset."""
    XML = "xml"
    BINARY = "binary"


class RowState(str, Enum):
    """Change-tracking state of a row."""
    DETACHED = "detached"
    ADDED = "added"
    UNCHANGED = "unchanged"
    MODIFIED = "modified"
    DELETED = "deleted"


class Rule(str, Enum):
    """Foreign key update/delete action."""
    NONE = "none"
    CASCADE = "cascade"
    SET_NULL = "set_null"
    SET_DEFAULT = "set_default"


class AcceptRejectRule(str, Enum):
    """Foreign key accept/reject propagation."""
    NONE = "none"
    CASCADE = "cascade"


# =============================================================================
# Columns and Rows
# =============================================================================

@dataclass(eq=False)
class DataColumn:
    """Named, typed column. `table` is a back-reference and is never compared."""
    column_name: str
    data_type: type = str
    allow_db_null: bool = True
    auto_increment: bool = False
    caption: str = ""  # defaults to column_name
    default_value: Any = None
    expression: str = ""
    max_length: int = -1
    read_only: bool = False
    unique: bool = False
    extended_properties: dict[str, Any] = field(default_factory=dict)
    table: "DataTable | None" = field(default=None, repr=False)

    def __post_init__(self) -> None:
        if not self.caption:
            self.caption = self.column_name

    @property
    def ordinal(self) -> int:
        """Position in the owning table (-1 when detached)."""
        if self.table is None:
            return -1
        for index, column in enumerate(self.table.columns):
            if column is self:
                return index
        return -1


@dataclass(eq=False)
class DataRow:
    """One record; `values` is aligned with `table.columns`."""
    table: "DataTable" = field(repr=False)
    values: list[Any] = field(default_factory=list)
    row_state: RowState = RowState.ADDED
    row_error: str = ""

    @property
    def has_errors(self) -> bool:
        return bool(self.row_error)

    @property
    def item_array(self) -> tuple[Any, ...]:
        return tuple(self.values)

    def __getitem__(self, key: int | str) -> Any:
        if isinstance(key, str):
            key = self.table.column_index(key)
        return self.values[key]

    def __setitem__(self, key: int | str, value: Any) -> None:
        if isinstance(key, str):
            key = self.table.column_index(key)
        self.values[key] = value


# =============================================================================
# Constraints
# =============================================================================

@dataclass(eq=False)
class Constraint:
    """Named integrity rule on a table."""
    constraint_name: str = ""
    extended_properties: dict[str, Any] = field(default_factory=dict)
    table: "DataTable | None" = field(default=None, repr=False)


@dataclass(eq=False)
class UniqueConstraint(Constraint):
    """Uniqueness over one or more columns; the primary key is one of these."""
    columns: list[DataColumn] = field(default_factory=list)
    is_primary_key: bool = False


@dataclass(eq=False)
class ForeignKeyConstraint(Constraint):
    """Child columns referencing columns of a related (parent) table."""
    columns: list[DataColumn] = field(default_factory=list)
    related_columns: list[DataColumn] = field(default_factory=list)
    delete_rule: Rule = Rule.CASCADE
    update_rule: Rule = Rule.CASCADE
    accept_reject_rule: AcceptRejectRule = AcceptRejectRule.NONE

    @property
    def related_table(self) -> "DataTable | None":
        return self.related_columns[0].table if self.related_columns else None


# =============================================================================
# Relations
# =============================================================================

@dataclass(eq=False)
class DataRelation:
    """
    Directed parent → child link between two tables.

    Always create through add_relation() so both tables see the relation.
    """
    relation_name: str
    parent_columns: list[DataColumn] = field(default_factory=list)
    child_columns: list[DataColumn] = field(default_factory=list)
    nested: bool = False
    extended_properties: dict[str, Any] = field(default_factory=dict)

    @property
    def parent_table(self) -> "DataTable | None":
        return self.parent_columns[0].table if self.parent_columns else None

    @property
    def child_table(self) -> "DataTable | None":
        return self.child_columns[0].table if self.child_columns else None


def _as_column_list(columns: "DataColumn | list[DataColumn]") -> list[DataColumn]:
    if isinstance(columns, DataColumn):
        return [columns]
    return list(columns)


def _single_owner(columns: list[DataColumn], role: str) -> "DataTable":
    if not columns:
        raise ValueError(f"{role} columns must not be empty")
    owner = columns[0].table
    if owner is None or any(column.table is not owner for column in columns):
        raise ValueError(f"{role} columns must belong to one table")
    return owner


def add_relation(
    relation_name: str,
    parent_columns: "DataColumn | list[DataColumn]",
    child_columns: "DataColumn | list[DataColumn]",
    nested: bool = False,
    create_constraints: bool = False,
) -> DataRelation:
    """
    Create a relation and register it on both tables.

    Args:
        relation_name: Relation name
        parent_columns: Key column(s) of the parent table
        child_columns: Referencing column(s) of the child table
        nested: Nested relation flag
        create_constraints: Also add a ForeignKeyConstraint to the child table

    Returns:
        The registered DataRelation

    Raises:
        ValueError: Empty/mixed-table column lists or mismatched key width
    """
    parents = _as_column_list(parent_columns)
    children = _as_column_list(child_columns)
    parent_table = _single_owner(parents, "parent")
    child_table = _single_owner(children, "child")

    if len(parents) != len(children):
        raise ValueError(
            f"Relation '{relation_name}' has {len(parents)} parent column(s) "
            f"but {len(children)} child column(s)"
        )

    relation = DataRelation(
        relation_name=relation_name,
        parent_columns=parents,
        child_columns=children,
        nested=nested,
    )
    parent_table.child_relations.append(relation)
    child_table.parent_relations.append(relation)

    if parent_table.dataset is not None:
        parent_table.dataset.relations.append(relation)

    if create_constraints:
        child_table.add_constraint(ForeignKeyConstraint(
            constraint_name=relation_name,
            columns=children,
            related_columns=parents,
        ))

    return relation


# =============================================================================
# DataTable
# =============================================================================

@dataclass(eq=False)
class DataTable:
    """
    Table document: scalar metadata + columns + rows + constraints + relations.

    Scalars compared by the engine: table_name, case_sensitive,
    display_expression, has_errors, locale, namespace, prefix, remoting_format.
    """
    table_name: str = ""
    case_sensitive: bool = False
    display_expression: str = ""
    locale: str = "en-US"
    namespace: str = ""
    prefix: str = ""
    remoting_format: SerializationFormat = SerializationFormat.XML

    columns: list[DataColumn] = field(default_factory=list)
    rows: list[DataRow] = field(default_factory=list)
    constraints: list[Constraint] = field(default_factory=list)
    extended_properties: dict[str, Any] = field(default_factory=dict)
    child_relations: list[DataRelation] = field(default_factory=list)
    parent_relations: list[DataRelation] = field(default_factory=list)

    dataset: "DataSet | None" = field(default=None, repr=False)

    def __post_init__(self) -> None:
        for column in self.columns:
            column.table = self

    @property
    def has_errors(self) -> bool:
        return any(row.has_errors for row in self.rows)

    @property
    def primary_key(self) -> list[DataColumn]:
        for constraint in self.constraints:
            if isinstance(constraint, UniqueConstraint) and constraint.is_primary_key:
                return list(constraint.columns)
        return []

    # -------------------------------------------------------------------------
    # Columns
    # -------------------------------------------------------------------------

    def add_column(
        self,
        column_name: str,
        data_type: type = str,
        **attributes: Any,
    ) -> DataColumn:
        """
        Append a column. Existing rows get the column's default_value.

        Raises:
            ValueError: Duplicate column name
        """
        if self._find_column_index(column_name) is not None:
            raise ValueError(f"Column '{column_name}' already exists in '{self.table_name}'")

        column = DataColumn(column_name=column_name, data_type=data_type, **attributes)
        column.table = self
        self.columns.append(column)

        for row in self.rows:
            row.values.append(column.default_value)

        return column

    def column(self, name: str) -> DataColumn:
        """Column by name (case-insensitive fallback unless case_sensitive)."""
        return self.columns[self.column_index(name)]

    def column_index(self, name: str) -> int:
        index = self._find_column_index(name)
        if index is None:
            raise KeyError(f"Column '{name}' does not belong to table '{self.table_name}'")
        return index

    def has_column(self, name: str) -> bool:
        return self._find_column_index(name) is not None

    def _find_column_index(self, name: str) -> int | None:
        for index, column in enumerate(self.columns):
            if column.column_name == name:
                return index
        if not self.case_sensitive:
            folded = name.casefold()
            for index, column in enumerate(self.columns):
                if column.column_name.casefold() == folded:
                    return index
        return None

    # -------------------------------------------------------------------------
    # Rows
    # -------------------------------------------------------------------------

    def add_row(
        self,
        *values: Any,
        row_state: RowState = RowState.ADDED,
        row_error: str = "",
    ) -> DataRow:
        """
        Append a row.

        Raises:
            ValueError: Value count differs from column count
        """
        if len(values) != len(self.columns):
            raise ValueError(
                f"Table '{self.table_name}' has {len(self.columns)} column(s) "
                f"but row has {len(values)} value(s)"
            )
        row = DataRow(table=self, values=list(values), row_state=row_state, row_error=row_error)
        self.rows.append(row)
        return row

    # -------------------------------------------------------------------------
    # Constraints
    # -------------------------------------------------------------------------

    def add_constraint(self, constraint: Constraint) -> Constraint:
        """
        Attach a constraint.

        Raises:
            ValueError: Constraint columns that belong to another table
        """
        owned = getattr(constraint, "columns", [])
        if any(column.table is not self for column in owned):
            raise ValueError(
                f"Constraint '{constraint.constraint_name}' references columns "
                f"outside table '{self.table_name}'"
            )
        if not constraint.constraint_name:
            constraint.constraint_name = f"Constraint{len(self.constraints) + 1}"
        constraint.table = self
        self.constraints.append(constraint)
        return constraint

    def set_primary_key(self, *column_names: str) -> UniqueConstraint:
        """
        Replace the primary key. Key columns become unique and non-nullable.

        Raises:
            KeyError: Unknown column name
        """
        columns = [self.column(name) for name in column_names]

        self.constraints = [
            c for c in self.constraints
            if not (isinstance(c, UniqueConstraint) and c.is_primary_key)
        ]
        for column in columns:
            column.allow_db_null = False
            if len(columns) == 1:
                column.unique = True

        constraint = UniqueConstraint(
            constraint_name=f"PK_{self.table_name}" if self.table_name else "",
            columns=columns,
            is_primary_key=True,
        )
        self.add_constraint(constraint)
        return constraint

    # -------------------------------------------------------------------------
    # Copy
    # -------------------------------------------------------------------------

    def copy(self) -> "DataTable":
        """
        Deep structural copy: metadata, columns, rows, constraints.

        Relations are not copied (they involve other tables).
        """
        clone = DataTable(
            table_name=self.table_name,
            case_sensitive=self.case_sensitive,
            display_expression=self.display_expression,
            locale=self.locale,
            namespace=self.namespace,
            prefix=self.prefix,
            remoting_format=self.remoting_format,
            extended_properties=deepcopy(self.extended_properties),
        )

        for column in self.columns:
            copied = replace(
                column,
                table=None,
                extended_properties=deepcopy(column.extended_properties),
            )
            copied.table = clone
            clone.columns.append(copied)

        def own(columns: list[DataColumn]) -> list[DataColumn]:
            return [clone.columns[column.ordinal] for column in columns]

        for constraint in self.constraints:
            if isinstance(constraint, ForeignKeyConstraint):
                copied_constraint: Constraint = replace(
                    constraint, table=None, columns=own(constraint.columns),
                    extended_properties=deepcopy(constraint.extended_properties),
                )
            elif isinstance(constraint, UniqueConstraint):
                copied_constraint = replace(
                    constraint, table=None, columns=own(constraint.columns),
                    extended_properties=deepcopy(constraint.extended_properties),
                )
            else:
                copied_constraint = replace(
                    constraint, table=None,
                    extended_properties=deepcopy(constraint.extended_properties),
                )
            clone.add_constraint(copied_constraint)

        for row in self.rows:
            clone.rows.append(DataRow(
                table=clone,
                values=deepcopy(row.values),
                row_state=row.row_state,
                row_error=row.row_error,
            ))

        return clone


# =============================================================================
# DataSet
# =============================================================================

@dataclass(eq=False)
class DataSet:
    """Collection of tables plus the relations between them."""
    dataset_name: str = "NewDataSet"
    case_sensitive: bool = False
    enforce_constraints: bool = True
    locale: str = "en-US"
    namespace: str = ""
    prefix: str = ""
    remoting_format: SerializationFormat = SerializationFormat.XML
    extended_properties: dict[str, Any] = field(default_factory=dict)
    tables: list[DataTable] = field(default_factory=list)
    relations: list[DataRelation] = field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        return any(table.has_errors for table in self.tables)

    def add_table(self, table: DataTable | str) -> DataTable:
        """
        Add a table (or create an empty one by name).

        Relations between the table and tables already in this dataset are
        added to relations.

        Raises:
            ValueError: Duplicate table name or table owned by another dataset
        """
        if isinstance(table, str):
            table = DataTable(table_name=table)
        if table.dataset is not None and table.dataset is not self:
            raise ValueError(f"Table '{table.table_name}' already belongs to another dataset")
        if any(existing.table_name == table.table_name for existing in self.tables):
            raise ValueError(f"Table '{table.table_name}' already exists in '{self.dataset_name}'")

        table.dataset = self
        self.tables.append(table)

        for relation in table.child_relations + table.parent_relations:
            if relation in self.relations:
                continue
            endpoints = (relation.parent_table, relation.child_table)
            if all(endpoint is not None and endpoint.dataset is self for endpoint in endpoints):
                self.relations.append(relation)
        return table

    def table(self, name: str) -> DataTable:
        for table in self.tables:
            if table.table_name == name:
                return table
        raise KeyError(f"Table '{name}' does not belong to dataset '{self.dataset_name}'")

    def has_table(self, name: str) -> bool:
        return any(table.table_name == name for table in self.tables)

    def add_relation(
        self,
        relation_name: str,
        parent_columns: DataColumn | list[DataColumn],
        child_columns: DataColumn | list[DataColumn],
        nested: bool = False,
        create_constraints: bool = False,
    ) -> DataRelation:
        """
        add_relation() restricted to tables of this dataset.

        Raises:
            ValueError: Either table is not part of this dataset
        """
        for columns in (_as_column_list(parent_columns), _as_column_list(child_columns)):
            owner = columns[0].table if columns else None
            if owner is None or owner.dataset is not self:
                raise ValueError(
                    f"Relation '{relation_name}' references a table outside '{self.dataset_name}'"
                )
        return add_relation(
            relation_name,
            parent_columns,
            child_columns,
            nested=nested,
            create_constraints=create_constraints,
        )
