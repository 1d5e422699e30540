"""
test_rules.py - selection and matching rules

DoD:
- selection rules fold in order, last rule wins
- path exclusion ignores indexes
- matching: first non-None wins; strict matching records MISSING_MEMBER
"""

from types import SimpleNamespace

from tablequiv.domain.errors import ErrorCodes
from tablequiv.domain.tables import DataTable
from tablequiv.equivalency.context import ComparisonContext, Node
from tablequiv.equivalency.members import MemberKind, find_member
from tablequiv.equivalency.options import DataTableEquivalencyOptions
from tablequiv.equivalency.rules import (
    MappedMemberMatchingRule,
    MustMatchByNameRule,
    TryMatchByNameRule,
    strip_indexes,
)
from tablequiv.equivalency.scope import AssertionScope
from tablequiv.equivalency.steps import find_match, select_members


def _root_context(subject, expectation, path: str = "") -> ComparisonContext:
    return ComparisonContext(
        subject=subject,
        expectation=expectation,
        compile_time_type=DataTable,
        scope=AssertionScope(),
        path=path,
    )


# =============================================================================
# Selection
# =============================================================================


class TestSelectionRules:
    """select_members fold tests."""

    def test_default_selects_all_declared(self, customers: DataTable):
        selected = select_members(_root_context(customers, customers), DataTableEquivalencyOptions())

        assert len(selected) == 15
        assert "table_name" in selected
        assert "rows" in selected

    def test_exclude_by_name(self, customers: DataTable):
        options = DataTableEquivalencyOptions().excluding("locale", "rows")

        selected = select_members(_root_context(customers, customers), options)

        assert "locale" not in selected
        assert "rows" not in selected
        assert len(selected) == 13

    def test_include_after_exclude(self, customers: DataTable):
        options = DataTableEquivalencyOptions().excluding("locale").including("locale")

        selected = select_members(_root_context(customers, customers), options)

        assert "locale" in selected

    def test_exclude_after_include_wins(self, customers: DataTable):
        options = DataTableEquivalencyOptions().including("locale").excluding("locale")

        selected = select_members(_root_context(customers, customers), options)

        assert "locale" not in selected

    def test_exclude_by_path_ignores_indexes(self, customers: DataTable):
        row = customers.rows[1]
        context = ComparisonContext(
            subject=row, expectation=row, compile_time_type=object,
            scope=AssertionScope(), path="rows[1]", depth=2,
        )
        options = DataTableEquivalencyOptions().excluding_path("rows[0].row_error")

        selected = select_members(context, options)

        assert "row_error" not in selected
        assert "row_state" in selected

    def test_exclude_by_path_only_at_that_path(self, customers: DataTable):
        options = DataTableEquivalencyOptions().excluding_path("columns.caption")

        selected = select_members(_root_context(customers, customers), options)

        assert len(selected) == 15

    def test_exclude_by_predicate(self, customers: DataTable):
        options = DataTableEquivalencyOptions().excluding_members_where(
            lambda member, node: member.kind == MemberKind.COLLECTION,
            "collections",
        )

        selected = select_members(_root_context(customers, customers), options)

        assert all(member.is_scalar for member in selected.values())

    def test_strip_indexes(self):
        assert strip_indexes("rows[3][Name]") == "rows"
        assert strip_indexes("tables[Customers].rows[0].row_error") == "tables.rows.row_error"


# =============================================================================
# Matching
# =============================================================================


class TestMatchingRules:
    """Matching rule tests."""

    def test_try_match_by_name(self, customers: DataTable):
        member = find_member(DataTable, "rows")

        match = TryMatchByNameRule().match(member, customers, Node("", "", DataTable, 0), None, AssertionScope())

        assert match is not None
        assert match.name == "rows"

    def test_try_match_missing_is_silent(self):
        member = find_member(DataTable, "rows")
        scope = AssertionScope()

        match = TryMatchByNameRule().match(member, SimpleNamespace(), Node("", "", DataTable, 0), None, scope)

        assert match is None
        assert scope.succeeded

    def test_must_match_missing_records_failure(self):
        member = find_member(DataTable, "rows")
        scope = AssertionScope()

        match = MustMatchByNameRule().match(
            member, SimpleNamespace(), Node("tables[T]", "[T]", DataTable, 2), None, scope,
        )

        assert match is None
        record = scope.records[0]
        assert record.code == ErrorCodes.MISSING_MEMBER
        assert record.path == "tables[T].rows"
        assert "that the other object does not have" in record.message

    def test_mapped_member(self):
        member = find_member(DataTable, "rows")
        subject = SimpleNamespace(records=[1, 2])

        match = MappedMemberMatchingRule("rows", "records").match(
            member, subject, Node("", "", DataTable, 0), None, AssertionScope(),
        )

        assert match.name == "records"
        assert match.get_value(subject) == [1, 2]

    def test_mapping_ignores_other_members(self, customers: DataTable):
        member = find_member(DataTable, "columns")

        match = MappedMemberMatchingRule("rows", "records").match(
            member, customers, Node("", "", DataTable, 0), None, AssertionScope(),
        )

        assert match is None

    def test_first_match_wins(self, customers: DataTable):
        subject = SimpleNamespace(rows=["by name"], records=["mapped"])
        options = DataTableEquivalencyOptions().with_mapping("rows", "records")
        context = _root_context(subject, customers)

        match = find_match(find_member(DataTable, "rows"), context, options)

        assert match.get_value(subject) == ["mapped"]
