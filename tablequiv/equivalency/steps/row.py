"""
DataRow equivalency step.

Row scalars (state, error text) go through member selection like any other
member. Values are matched by column name, not by position, so a subject
table with reordered columns still compares cell by cell.
"""

from typing import TYPE_CHECKING

from tablequiv.domain.errors import ErrorCodes
from tablequiv.domain.tables import DataRow
from tablequiv.equivalency.context import ComparisonContext
from tablequiv.equivalency.options import EquivalencyOptions
from tablequiv.equivalency.steps.base import (
    EquivalencyStep,
    assert_both_present,
    data_options,
    delegate_member,
    expectation_type,
    is_subtype,
    select_members,
)

if TYPE_CHECKING:
    from tablequiv.equivalency.validator import EquivalencyValidator


class DataRowEquivalencyStep(EquivalencyStep):

    def can_handle(self, context: ComparisonContext, options: EquivalencyOptions) -> bool:
        return is_subtype(expectation_type(context, options), DataRow)

    def handle(
        self,
        context: ComparisonContext,
        parent: "EquivalencyValidator",
        options: EquivalencyOptions,
    ) -> bool:
        if not assert_both_present(context, "DataRow"):
            return True

        if not isinstance(context.subject, DataRow):
            context.scope.for_condition(False).fail_with(
                "Expected {context:DataRow} to be of type {0}{reason}, but found {1}",
                type(context.expectation),
                type(context.subject),
                code=ErrorCodes.TYPE_MISMATCH,
            )
            return True

        selected = select_members(context, options)

        for name, member in selected.items():
            if name == "values":
                self._compare_values(context, parent, options)
            else:
                delegate_member(member, context, parent, options)

        return True

    def _compare_values(
        self,
        context: ComparisonContext,
        parent: "EquivalencyValidator",
        options: EquivalencyOptions,
    ) -> None:
        expectation: DataRow = context.expectation
        subject: DataRow = context.subject
        data = data_options(options)
        ignore_unmatched = data is not None and data.ignore_unmatched_columns

        for index, column in enumerate(expectation.table.columns):
            column_name = column.column_name
            if data is not None and data.is_column_excluded(expectation.table.table_name, column_name):
                continue

            if not subject.table.has_column(column_name):
                if not ignore_unmatched:
                    context.scope.for_condition(False).fail_with(
                        "Expected {context:DataRow} to have a value for column {0}{reason}, "
                        "but the subject table has no such column",
                        column_name,
                        code=ErrorCodes.MISSING_MEMBER,
                        path=f"{context.path}[{column_name}]",
                    )
                continue

            parent.assert_equality_using(
                context.as_dictionary_item(column_name, expectation.values[index], subject[column_name])
            )
