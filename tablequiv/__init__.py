"""tablequiv: structural equivalence assertions for in-memory table documents."""

from .domain import DataColumn, DataRow, DataSet, DataTable, EquivalencyConfigError, ErrorCodes
from .equivalency import (
    DataSetEquivalencyOptions,
    DataTableEquivalencyOptions,
    EquivalencyOptions,
    EquivalencyResult,
    assert_datasets_equivalent,
    assert_tables_equivalent,
    compare_datasets,
    compare_equivalency,
    compare_tables,
    load_options,
)

__version__ = "0.1.0"

__all__ = [
    "DataColumn",
    "DataRow",
    "DataSet",
    "DataTable",
    "DataSetEquivalencyOptions",
    "DataTableEquivalencyOptions",
    "EquivalencyConfigError",
    "EquivalencyOptions",
    "EquivalencyResult",
    "ErrorCodes",
    "assert_datasets_equivalent",
    "assert_tables_equivalent",
    "compare_datasets",
    "compare_equivalency",
    "compare_tables",
    "load_options",
]
