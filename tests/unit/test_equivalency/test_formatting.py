"""
test_formatting.py - value formatting for failure messages
"""

import pytest

from tablequiv.domain.tables import DataColumn, DataSet, DataTable, RowState, SerializationFormat
from tablequiv.equivalency.formatting import format_value


class TestFormatValue:
    """format_value tests."""

    @pytest.mark.parametrize("value,expected", [
        (None, "<null>"),
        ("abc", '"abc"'),
        (True, "True"),
        (42, "42"),
        (1.5, "1.5"),
        (int, "int"),
        (RowState.MODIFIED, "RowState.MODIFIED"),
        (SerializationFormat.BINARY, "SerializationFormat.BINARY"),
        ({"a": 1}, '{"a": 1}'),
        ([1, "x", None], '[1, "x", <null>]'),
    ])
    def test_simple_values(self, value, expected):
        assert format_value(value) == expected

    def test_documents_by_name(self):
        assert format_value(DataTable(table_name="Customers")) == "DataTable 'Customers'"
        assert format_value(DataSet(dataset_name="Shop")) == "DataSet 'Shop'"
        assert format_value(DataColumn(column_name="Id")) == "DataColumn 'Id'"

    def test_row(self, customers: DataTable):
        assert format_value(customers.rows[0]) == 'DataRow [1, "Ada", "London"]'

    def test_long_list_truncated(self):
        formatted = format_value(list(range(12)))

        assert formatted == "[0, 1, 2, 3, 4, 5, 6, 7, 8, 9, ... (2 more)]"

    def test_subclass_uses_own_name(self):
        class AuditTable(DataTable):
            pass

        assert format_value(AuditTable(table_name="Log")) == "AuditTable 'Log'"


class TestSelfReferencingValues:
    """Containers that contain themselves."""

    def test_list_cycle(self):
        value: list = [1]
        value.append(value)

        assert format_value(value) == "[1, <cycle>]"

    def test_dict_cycle(self):
        value: dict = {"id": 1}
        value["self"] = value

        assert format_value(value) == '{"id": 1, "self": <cycle>}'

    def test_indirect_cycle(self):
        outer: list = []
        inner = {"outer": outer}
        outer.append(inner)

        assert format_value(outer) == '[{"outer": <cycle>}]'

    def test_repeated_value_is_not_a_cycle(self):
        shared = [1]

        assert format_value([shared, shared]) == "[[1], [1]]"
