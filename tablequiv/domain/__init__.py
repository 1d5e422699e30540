"""Domain layer: table document model, records, errors."""

from .errors import EquivalencyConfigError, ErrorCodes
from .schemas import FailureRecord, RunLog
from .tables import (
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
    add_relation,
)

__all__ = [
    "EquivalencyConfigError",
    "ErrorCodes",
    "FailureRecord",
    "RunLog",
    # tables
    "AcceptRejectRule",
    "Constraint",
    "DataColumn",
    "DataRelation",
    "DataRow",
    "DataSet",
    "DataTable",
    "ForeignKeyConstraint",
    "RowState",
    "Rule",
    "SerializationFormat",
    "UniqueConstraint",
    "add_relation",
]
