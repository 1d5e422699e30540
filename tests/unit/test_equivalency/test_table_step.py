"""
test_table_step.py - DataTable equivalency step

DoD:
- a table is equivalent to itself and to its copy
- each scalar difference → exactly one SCALAR_MISMATCH naming the member
- null/type gate: four null cases, concrete type check (optional)
- exclusions suppress exactly the excluded members/columns
"""

import pytest

from tablequiv.domain.errors import ErrorCodes
from tablequiv.domain.tables import DataTable, SerializationFormat
from tablequiv.equivalency import (
    DataSetEquivalencyOptions,
    DataTableEquivalencyOptions,
    EquivalencyOptions,
    compare_tables,
)


class CustomerTable(DataTable):
    """Typed table subclass."""


# =============================================================================
# Reflexivity
# =============================================================================


class TestReflexivity:
    """A table is equivalent to itself and to a copy."""

    def test_same_instance(self, customers: DataTable):
        result = compare_tables(customers, customers)

        assert result.succeeded
        assert result.failures == ()

    def test_copy(self, customers: DataTable):
        assert compare_tables(customers.copy(), customers).succeeded

    def test_independent_builds(self, make_customers):
        assert compare_tables(make_customers(), make_customers()).succeeded

    def test_empty_tables(self):
        assert compare_tables(DataTable(table_name="T"), DataTable(table_name="T")).succeeded


# =============================================================================
# Scalars
# =============================================================================


class TestScalarMembers:
    """One failure per differing scalar, nothing else."""

    @pytest.mark.parametrize("name,value", [
        ("table_name", "Clients"),
        ("case_sensitive", True),
        ("display_expression", "Name + City"),
        ("locale", "ko-KR"),
        ("namespace", "urn:shop"),
        ("prefix", "sh"),
        ("remoting_format", SerializationFormat.BINARY),
    ])
    def test_single_scalar_difference(self, customers: DataTable, name, value):
        subject = customers.copy()
        setattr(subject, name, value)

        result = compare_tables(subject, customers)

        assert len(result.failures) == 1
        failure = result.failures[0]
        assert failure.code == ErrorCodes.SCALAR_MISMATCH
        assert failure.path == name
        assert name in failure.message

    def test_has_errors_difference(self, customers: DataTable):
        """has_errors follows the rows, so rows are left out here."""
        subject = customers.copy()
        subject.rows[0].row_error = "bad"

        result = compare_tables(subject, customers, DataTableEquivalencyOptions().excluding("rows"))

        assert [f.path for f in result.failures] == ["has_errors"]
        assert result.failures[0].message == (
            "Expected DataTable to have has_errors value of False, but found True instead"
        )

    def test_all_scalars_reported(self, customers: DataTable):
        """No fail-fast between scalars."""
        subject = customers.copy()
        subject.table_name = "X"
        subject.locale = "fr-FR"
        subject.prefix = "p"

        result = compare_tables(subject, customers)

        assert [f.path for f in result.failures] == ["table_name", "locale", "prefix"]

    def test_customers_scenario(self, customers: DataTable):
        """'Customers' vs 'customers' → one table_name failure."""
        subject = customers.copy()
        subject.table_name = "customers"

        result = compare_tables(subject, customers)

        assert len(result.failures) == 1
        assert result.failures[0].message == (
            'Expected DataTable to have table_name value of "Customers", but found "customers" instead'
        )

    def test_reason_in_message(self, customers: DataTable):
        subject = customers.copy()
        subject.locale = "de-DE"

        result = compare_tables(subject, customers, because="exports are locale neutral")

        assert result.failures[0].message == (
            'Expected DataTable to have locale value of "en-US" because exports are locale neutral, '
            'but found "de-DE" instead'
        )


# =============================================================================
# Exclusions
# =============================================================================


class TestExclusions:
    """Excluded members produce no failures."""

    def test_excluded_scalar(self, customers: DataTable):
        subject = customers.copy()
        subject.table_name = "customers"

        assert compare_tables(subject, customers, DataTableEquivalencyOptions().excluding("table_name")).succeeded

    def test_excluded_collection(self, customers: DataTable):
        subject = customers.copy()
        subject.add_row(3, "Linus", "Helsinki")

        result = compare_tables(subject, customers, DataTableEquivalencyOptions().excluding("rows"))

        assert result.succeeded

    def test_excluded_row_error_path(self, customers: DataTable):
        subject = customers.copy()
        subject.rows[0].row_error = "bad"
        options = DataTableEquivalencyOptions().excluding("has_errors").excluding_path("rows.row_error")

        assert compare_tables(subject, customers, options).succeeded

    def test_excluded_column(self, make_customers):
        expectation = make_customers()
        subject = make_customers()
        subject.rows[0]["City"] = "Cambridge"
        subject.column("City").caption = "Town"

        options = DataTableEquivalencyOptions().excluding_column("Customers", "City")

        assert compare_tables(subject, expectation, options).succeeded

    def test_excluded_column_in_other_table_still_compared(self, make_customers):
        expectation = make_customers()
        subject = make_customers()
        subject.rows[0]["City"] = "Cambridge"

        options = DataTableEquivalencyOptions().excluding_column("Orders", "City")

        assert not compare_tables(subject, expectation, options).succeeded

    def test_excluded_column_in_all_tables(self, make_customers):
        expectation = make_customers()
        subject = make_customers()
        subject.rows[1]["City"] = "Boston"

        options = DataTableEquivalencyOptions().excluding_column_in_all_tables("City")

        assert compare_tables(subject, expectation, options).succeeded


# =============================================================================
# Columns
# =============================================================================


class TestColumns:
    """Column set differences."""

    def test_extra_subject_column(self, make_customers):
        expectation = make_customers()
        subject = make_customers()
        subject.add_column("Email", str)

        result = compare_tables(subject, expectation)

        assert [(f.code, f.path) for f in result.failures] == [(ErrorCodes.STRUCTURAL_MISMATCH, "columns")]

    def test_extra_subject_column_ignored(self, make_customers):
        expectation = make_customers()
        subject = make_customers()
        subject.add_column("Email", str)

        options = DataTableEquivalencyOptions().ignoring_unmatched_columns()

        assert compare_tables(subject, expectation, options).succeeded

    def test_missing_subject_column(self, make_customers):
        expectation = make_customers()
        subject = DataTable(table_name="Customers")
        subject.add_column("Id", int)
        subject.add_column("Name", str)
        subject.set_primary_key("Id")
        subject.add_row(1, "Ada")
        subject.add_row(2, "Grace")

        result = compare_tables(subject, expectation)

        assert ("columns", ErrorCodes.STRUCTURAL_MISMATCH) in [(f.path, f.code) for f in result.failures]
        missing = [f for f in result.failures if f.code == ErrorCodes.MISSING_MEMBER]
        assert [f.path for f in missing] == ["rows[0][City]", "rows[1][City]"]

        options = DataTableEquivalencyOptions().ignoring_unmatched_columns()
        assert compare_tables(subject, expectation, options).succeeded

    def test_column_attribute_difference(self, make_customers):
        expectation = make_customers()
        subject = make_customers()
        subject.column("Name").max_length = 50

        result = compare_tables(subject, expectation)

        assert [f.path for f in result.failures] == ["columns[1].max_length"]
        assert result.failures[0].message == "Expected columns[1].max_length to be -1, but found 50"


# =============================================================================
# Null / type gate
# =============================================================================


class TestNullAndTypeGate:
    """Four null cases and the concrete type check."""

    def test_both_null(self):
        assert compare_tables(None, None).succeeded

    def test_expectation_null(self, customers: DataTable):
        result = compare_tables(customers, None)

        assert len(result.failures) == 1
        assert result.failures[0].code == ErrorCodes.NULLITY_MISMATCH
        assert result.failures[0].message == "Expected DataTable value to be null, but found DataTable 'Customers'"

    def test_subject_null(self, customers: DataTable):
        result = compare_tables(None, customers)

        assert len(result.failures) == 1
        assert result.failures[0].code == ErrorCodes.NULLITY_MISMATCH
        assert result.failures[0].message == "Expected DataTable to be non-null, but found null"

    def test_subject_not_a_table(self, customers: DataTable):
        result = compare_tables("Customers", customers)

        assert len(result.failures) == 1
        assert result.failures[0].code == ErrorCodes.TYPE_MISMATCH
        assert result.failures[0].message == (
            "Expected DataTable to be of type DataTable, but found str instead"
        )

    def test_subclass_mismatch_reported(self, make_customers):
        subject = make_customers(table_cls=CustomerTable)

        result = compare_tables(subject, make_customers())

        assert len(result.failures) == 1
        assert result.failures[0].code == ErrorCodes.TYPE_MISMATCH
        assert result.failures[0].message == (
            "Expected DataTable to be of type DataTable, but found CustomerTable"
        )

    def test_subclass_mismatch_allowed(self, make_customers):
        subject = make_customers(table_cls=CustomerTable)
        options = DataTableEquivalencyOptions().allowing_mismatched_types()

        assert compare_tables(subject, make_customers(), options).succeeded

    def test_dataset_options_flag_applies_to_tables(self, make_customers):
        subject = make_customers(table_cls=CustomerTable)
        options = DataSetEquivalencyOptions().allowing_mismatched_types()

        assert compare_tables(subject, make_customers(), options).succeeded

    def test_generic_options_check_type(self, make_customers):
        subject = make_customers(table_cls=CustomerTable)

        result = compare_tables(subject, make_customers(), EquivalencyOptions())

        assert [f.code for f in result.failures] == [ErrorCodes.TYPE_MISMATCH]

    def test_allow_only_suppresses_type_failure(self, make_customers):
        subject = make_customers(table_cls=CustomerTable)
        subject.locale = "ko-KR"
        options = DataTableEquivalencyOptions().allowing_mismatched_types()

        result = compare_tables(subject, make_customers(), options)

        assert [f.path for f in result.failures] == ["locale"]
