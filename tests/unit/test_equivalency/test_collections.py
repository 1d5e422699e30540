"""
test_collections.py - row collections, lists and dictionaries

DoD:
- surplus/missing items → STRUCTURAL_MISMATCH at the collection path
- strict ordering compares item by item; non-strict finds an equivalent item
- dictionaries compare by key
"""

import math

from tablequiv.domain.errors import ErrorCodes
from tablequiv.domain.tables import DataTable
from tablequiv.equivalency import DataTableEquivalencyOptions, EquivalencyOptions, compare_equivalency, compare_tables
from tablequiv.equivalency.steps import values_equal

# =============================================================================
# Rows
# =============================================================================


class TestRowCollection:
    """rows collection of a table."""

    def test_extra_row(self, customers: DataTable):
        subject = customers.copy()
        subject.add_row(3, "Linus", "Helsinki")

        result = compare_tables(subject, customers)

        assert len(result.failures) == 1
        failure = result.failures[0]
        assert failure.code == ErrorCodes.STRUCTURAL_MISMATCH
        assert failure.path == "rows"
        assert "1 surplus item(s)" in failure.message
        assert '[DataRow [3, "Linus", "Helsinki"]]' in failure.message

    def test_missing_row(self, customers: DataTable):
        subject = customers.copy()
        subject.rows.pop()

        result = compare_tables(subject, customers)

        assert [(f.code, f.path) for f in result.failures] == [(ErrorCodes.STRUCTURAL_MISMATCH, "rows")]
        assert "Expected rows to contain 2 item(s), but 1 item(s) are missing" in result.failures[0].message

    def test_reordered_rows_fail_with_strict_ordering(self, customers: DataTable):
        subject = customers.copy()
        subject.rows.reverse()

        result = compare_tables(subject, customers)

        assert not result.succeeded
        assert {f.path for f in result.failures} >= {"rows[0][Id]", "rows[1][Id]"}

    def test_reordered_rows_pass_without_strict_ordering(self, customers: DataTable):
        subject = customers.copy()
        subject.rows.reverse()

        options = DataTableEquivalencyOptions().without_strict_ordering()

        assert compare_tables(subject, customers, options).succeeded

    def test_unordered_extra_row(self, customers: DataTable):
        subject = customers.copy()
        subject.rows.reverse()
        subject.add_row(3, "Linus", "Helsinki")

        result = compare_tables(subject, customers, DataTableEquivalencyOptions().without_strict_ordering())

        assert len(result.failures) == 1
        assert result.failures[0].code == ErrorCodes.STRUCTURAL_MISMATCH
        assert result.failures[0].path == "rows[2]"
        assert "surplus item" in result.failures[0].message

    def test_unordered_changed_row(self, customers: DataTable):
        subject = customers.copy()
        subject.rows[0]["Name"] = "Bob"

        result = compare_tables(subject, customers, DataTableEquivalencyOptions().without_strict_ordering())

        assert [f.path for f in result.failures] == ["rows[0]", "rows[0]"]
        assert "no such item was found" in result.failures[0].message
        assert "surplus item" in result.failures[1].message


# =============================================================================
# Lists
# =============================================================================


class TestListEquivalency:
    """Plain lists through the collection step."""

    def test_equal_lists(self):
        assert compare_equivalency([1, 2, 3], [1, 2, 3]).succeeded

    def test_tuple_subject(self):
        assert compare_equivalency((1, 2), [1, 2]).succeeded

    def test_item_difference(self):
        result = compare_equivalency([1, 5, 3], [1, 2, 3])

        assert [(f.code, f.path, f.message) for f in result.failures] == [
            (ErrorCodes.SCALAR_MISMATCH, "[1]", "Expected [1] to be 2, but found 5"),
        ]

    def test_unordered(self):
        options = EquivalencyOptions().without_strict_ordering()

        assert compare_equivalency([3, 1, 2], [1, 2, 3], options).succeeded

    def test_unordered_duplicates_counted(self):
        options = EquivalencyOptions().without_strict_ordering()

        result = compare_equivalency([1, 1, 2], [1, 2, 2], options)

        assert len(result.failures) == 2

    def test_null_subject(self):
        result = compare_equivalency(None, [1])

        assert [f.code for f in result.failures] == [ErrorCodes.NULLITY_MISMATCH]
        assert result.failures[0].message == "Expected collection to be [1], but found <null>"

    def test_subject_not_a_collection(self):
        result = compare_equivalency("abc", ["a", "b", "c"])

        assert [f.code for f in result.failures] == [ErrorCodes.TYPE_MISMATCH]


# =============================================================================
# Dictionaries
# =============================================================================


class TestDictionaryEquivalency:
    """extended_properties and other mappings."""

    def test_equal(self):
        assert compare_equivalency({"a": 1, "b": [1, 2]}, {"b": [1, 2], "a": 1}).succeeded

    def test_missing_and_extra_keys(self):
        result = compare_equivalency({"a": 1, "b": 2}, {"a": 1, "c": 3})

        assert [(f.code, f.path) for f in result.failures] == [
            (ErrorCodes.STRUCTURAL_MISMATCH, "[c]"),
            (ErrorCodes.STRUCTURAL_MISMATCH, "[b]"),
        ]

    def test_value_difference(self):
        result = compare_equivalency({"a": 1}, {"a": 2})

        assert result.failures[0].message == "Expected [a] to be 2, but found 1"

    def test_extended_properties(self, customers: DataTable):
        customers.extended_properties["source"] = "crm"
        subject = customers.copy()
        subject.extended_properties["source"] = "erp"

        result = compare_tables(subject, customers)

        assert [f.path for f in result.failures] == ["extended_properties[source]"]


# =============================================================================
# Leaf equality
# =============================================================================


class TestValuesEqual:
    """values_equal rules."""

    def test_nan_equals_nan(self):
        assert values_equal(math.nan, math.nan)

    def test_bool_is_not_int(self):
        assert not values_equal(True, 1)
        assert not values_equal(0, False)

    def test_int_equals_float(self):
        assert values_equal(1, 1.0)

    def test_nan_cells(self):
        expectation = DataTable(table_name="T")
        expectation.add_column("X", float)
        expectation.add_row(math.nan)

        assert compare_tables(expectation.copy(), expectation).succeeded
