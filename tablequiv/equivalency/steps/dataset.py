"""
DataSet equivalency step.

Scalars are compared like the table scalars. Tables are matched by name
(honoring excluded tables), missing and surplus tables are structural
mismatches, and each matched pair is handed to the table step through the
validator. Relations and extended properties are delegated as collections;
relations touching an excluded table are left out on both sides.
"""

from typing import TYPE_CHECKING

from tablequiv.domain.constants import DATASET_COLLECTION_MEMBER_NAMES, DATASET_SCALAR_MEMBER_NAMES
from tablequiv.domain.errors import ErrorCodes
from tablequiv.domain.tables import DataSet, DataTable
from tablequiv.equivalency.context import ComparisonContext
from tablequiv.equivalency.members import Member
from tablequiv.equivalency.options import EquivalencyOptions
from tablequiv.equivalency.steps.base import (
    EquivalencyStep,
    assert_document_pair,
    assert_same_concrete_type,
    data_options,
    delegate_member,
    expectation_type,
    find_match,
    is_subtype,
    select_members,
    without_excluded_tables,
)

if TYPE_CHECKING:
    from tablequiv.equivalency.validator import EquivalencyValidator


class DataSetEquivalencyStep(EquivalencyStep):
    """Compares dataset documents and every table they hold."""

    def can_handle(self, context: ComparisonContext, options: EquivalencyOptions) -> bool:
        return is_subtype(expectation_type(context, options), DataSet)

    def handle(
        self,
        context: ComparisonContext,
        parent: "EquivalencyValidator",
        options: EquivalencyOptions,
    ) -> bool:
        if not assert_document_pair(context, DataSet, "DataSet"):
            return True

        assert_same_concrete_type(context, options, "DataSet")

        selected = select_members(context, options)

        self._compare_scalars(context, selected)

        for name in DATASET_COLLECTION_MEMBER_NAMES:
            member = selected.get(name)
            if member is None:
                continue
            if name == "tables":
                self._compare_tables(context, parent, options, member)
            elif name == "relations":
                self._compare_relations(context, parent, options, member)
            else:
                delegate_member(member, context, parent, options)

        return True

    def _compare_scalars(self, context: ComparisonContext, selected: dict[str, Member]) -> None:
        node = context.current_node
        for name in DATASET_SCALAR_MEMBER_NAMES:
            if name not in selected:
                continue

            expected_value = getattr(context.expectation, name)
            actual_value = getattr(context.subject, name)

            context.scope.for_condition(actual_value == expected_value).fail_with(
                f"Expected {{context:DataSet}} to have {name} value of {{0}}{{reason}}, "
                f"but found {{1}} instead",
                expected_value,
                actual_value,
                code=ErrorCodes.SCALAR_MISMATCH,
                path=node.path_for(name),
            )

    def _compare_relations(
        self,
        context: ComparisonContext,
        parent: "EquivalencyValidator",
        options: EquivalencyOptions,
        member: Member,
    ) -> None:
        match = find_match(member, context, options)
        if match is None:
            return
        nested = context.as_nested_member(member, match)
        if nested is None:
            return

        data = data_options(options)
        if data is not None:
            nested = nested.with_values(
                subject=without_excluded_tables(nested.subject, data),
                expectation=without_excluded_tables(nested.expectation, data),
            )
        parent.assert_equality_using(nested)

    def _compare_tables(
        self,
        context: ComparisonContext,
        parent: "EquivalencyValidator",
        options: EquivalencyOptions,
        member: Member,
    ) -> None:
        match = find_match(member, context, options)
        if match is None:
            return
        tables_context = context.as_nested_member(member, match)
        if tables_context is None:
            return

        data = data_options(options)

        def included(tables: list[DataTable]) -> dict[str, DataTable]:
            return {
                table.table_name: table
                for table in tables
                if data is None or not data.is_table_excluded(table.table_name)
            }

        expected_tables = included(tables_context.expectation)
        actual_tables = included(tables_context.subject)

        for table_name, expected_table in expected_tables.items():
            actual_table = actual_tables.get(table_name)
            if actual_table is None:
                context.scope.for_condition(False).fail_with(
                    "Expected {context:DataSet} to contain table {0}{reason}, but it does not",
                    table_name,
                    code=ErrorCodes.STRUCTURAL_MISMATCH,
                    path=f"{tables_context.path}[{table_name}]",
                )
                continue

            parent.assert_equality_using(
                tables_context.as_dictionary_item(table_name, expected_table, actual_table).as_dataset_table()
            )

        for table_name in actual_tables:
            if table_name not in expected_tables:
                context.scope.for_condition(False).fail_with(
                    "Expected {context:DataSet} not to contain table {0}{reason}, but it does",
                    table_name,
                    code=ErrorCodes.STRUCTURAL_MISMATCH,
                    path=f"{tables_context.path}[{table_name}]",
                )
