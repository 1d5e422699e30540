"""
DataTable equivalency step.

Order of work for a table pair:
1. null/type gate (four null cases, concrete type check)
2. scalar phase: one SCALAR_MISMATCH per differing selected scalar
3. collection phase: each selected collection is matched on the subject
   and delegated back to the validator
   (a table inside a dataset leaves its relations to the dataset step)

Keep the member names in sync with TABLE_MEMBERS (members.py) and
TABLE_*_MEMBER_NAMES (domain/constants.py).
"""

import logging
from typing import TYPE_CHECKING, Any

from tablequiv.domain.constants import (
    COLUMN_COLLECTION_MEMBER_NAMES,
    RELATION_COLLECTION_MEMBER_NAMES,
    TABLE_COLLECTION_MEMBER_NAMES,
    TABLE_SCALAR_MEMBER_NAMES,
)
from tablequiv.domain.errors import ErrorCodes
from tablequiv.domain.tables import DataColumn, DataTable
from tablequiv.equivalency.context import ComparisonContext
from tablequiv.equivalency.members import Member
from tablequiv.equivalency.options import DataEquivalencyOptions, EquivalencyOptions
from tablequiv.equivalency.steps.base import (
    EquivalencyStep,
    assert_document_pair,
    assert_same_concrete_type,
    data_options,
    expectation_type,
    find_match,
    is_subtype,
    select_members,
    without_excluded_tables,
)

if TYPE_CHECKING:
    from tablequiv.equivalency.validator import EquivalencyValidator

logger = logging.getLogger(__name__)


class DataTableEquivalencyStep(EquivalencyStep):
    """Compares table documents member by member."""

    def can_handle(self, context: ComparisonContext, options: EquivalencyOptions) -> bool:
        return is_subtype(expectation_type(context, options), DataTable)

    def handle(
        self,
        context: ComparisonContext,
        parent: "EquivalencyValidator",
        options: EquivalencyOptions,
    ) -> bool:
        if not assert_document_pair(context, DataTable, "DataTable"):
            return True

        assert_same_concrete_type(context, options, "DataTable")

        selected = select_members(context, options)

        compare_scalar_members(context, selected)
        compare_collection_members(context, parent, options, selected)

        return True


def compare_scalar_members(context: ComparisonContext, selected: dict[str, Member]) -> None:
    """Exact equality per selected scalar; no fail-fast."""
    subject: DataTable = context.subject
    expectation: DataTable = context.expectation
    node = context.current_node

    for name in TABLE_SCALAR_MEMBER_NAMES:
        if name not in selected:
            continue

        expected_value = getattr(expectation, name)
        actual_value = getattr(subject, name)

        context.scope.for_condition(actual_value == expected_value).fail_with(
            f"Expected {{context:DataTable}} to have {name} value of {{0}}{{reason}}, "
            f"but found {{1}} instead",
            expected_value,
            actual_value,
            code=ErrorCodes.SCALAR_MISMATCH,
            path=node.path_for(name),
        )


def compare_collection_members(
    context: ComparisonContext,
    parent: "EquivalencyValidator",
    options: EquivalencyOptions,
    selected: dict[str, Member],
) -> None:
    """Match each selected collection on the subject and recurse into it."""
    for name in TABLE_COLLECTION_MEMBER_NAMES:
        expectation_member = selected.get(name)
        if expectation_member is None:
            continue
        if name in RELATION_COLLECTION_MEMBER_NAMES and context.in_dataset:
            continue

        matching_member = find_match(expectation_member, context, options)
        if matching_member is None:
            logger.debug(f"No subject member matches '{name}' at {context.path_description}")
            continue

        nested = context.as_nested_member(expectation_member, matching_member)
        if nested is None:
            continue

        data = data_options(options)
        if name in COLUMN_COLLECTION_MEMBER_NAMES and data is not None:
            nested = nested.with_values(
                subject=_filter_columns(nested.subject, nested.expectation, context.subject, data),
                expectation=_filter_columns(nested.expectation, nested.subject, context.expectation, data),
            )
        elif name in RELATION_COLLECTION_MEMBER_NAMES and data is not None:
            nested = nested.with_values(
                subject=without_excluded_tables(nested.subject, data),
                expectation=without_excluded_tables(nested.expectation, data),
            )

        parent.assert_equality_using(nested)


def _filter_columns(
    columns: Any,
    other_columns: Any,
    table: DataTable,
    options: DataEquivalencyOptions,
) -> Any:
    """Drop excluded columns (and unmatched ones when ignoring them)."""
    if not isinstance(columns, list) or not all(isinstance(c, DataColumn) for c in columns):
        return columns

    kept = [c for c in columns if not options.is_column_excluded(table.table_name, c.column_name)]

    if options.ignore_unmatched_columns and isinstance(other_columns, list):
        other_names = {getattr(c, "column_name", None) for c in other_columns}
        kept = [c for c in kept if c.column_name in other_names]

    return kept
