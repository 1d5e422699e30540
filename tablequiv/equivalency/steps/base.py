"""
Equivalency step interface and the helpers every step shares.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

from tablequiv.domain.errors import ErrorCodes
from tablequiv.domain.tables import DataRelation
from tablequiv.equivalency.context import ComparisonContext
from tablequiv.equivalency.members import Member
from tablequiv.equivalency.options import DataEquivalencyOptions, EquivalencyOptions
from tablequiv.equivalency.rules import MemberSelectionContext

if TYPE_CHECKING:
    from tablequiv.equivalency.validator import EquivalencyValidator


class EquivalencyStep(ABC):
    """
    One comparison strategy.

    can_handle() claims a pair; handle() compares it and returns True when
    the pair needs no further steps. Mismatches are recorded, not returned.
    """

    @abstractmethod
    def can_handle(self, context: ComparisonContext, options: EquivalencyOptions) -> bool:
        ...

    @abstractmethod
    def handle(
        self,
        context: ComparisonContext,
        parent: "EquivalencyValidator",
        options: EquivalencyOptions,
    ) -> bool:
        ...

    def __repr__(self) -> str:
        return f"<{type(self).__name__}>"


# =============================================================================
# Helpers
# =============================================================================

def expectation_type(context: ComparisonContext, options: EquivalencyOptions) -> Any:
    return options.get_expectation_type(context.runtime_type, context.compile_time_type)


def is_subtype(candidate: Any, base: type | tuple[type, ...]) -> bool:
    return isinstance(candidate, type) and issubclass(candidate, base)


def data_options(options: EquivalencyOptions) -> DataEquivalencyOptions | None:
    return options if isinstance(options, DataEquivalencyOptions) else None


def select_members(context: ComparisonContext, options: EquivalencyOptions) -> dict[str, Member]:
    """
    Fold the selection rules over the current node.

    Returns:
        Selected members keyed by name (last rule wins on duplicate names)
    """
    selection_context = MemberSelectionContext(
        compile_time_type=context.compile_time_type,
        runtime_type=context.runtime_type,
        options=options,
    )
    members: list[Member] = []
    for rule in options.selection_rules:
        members = rule.select_members(context.current_node, members, selection_context)
    return {member.name: member for member in members}


def find_match(
    member: Member,
    context: ComparisonContext,
    options: EquivalencyOptions,
) -> Member | None:
    """First non-None result of the matching rules."""
    for rule in options.matching_rules:
        match = rule.match(member, context.subject, context.current_node, options, context.scope)
        if match is not None:
            return match
    return None


def delegate_member(
    member: Member,
    context: ComparisonContext,
    parent: "EquivalencyValidator",
    options: EquivalencyOptions,
) -> None:
    """Match member on the subject and recurse; skip silently when impossible."""
    match = find_match(member, context, options)
    if match is None:
        return
    nested = context.as_nested_member(member, match)
    if nested is None:
        return
    parent.assert_equality_using(nested)


def without_excluded_tables(relations: Any, options: DataEquivalencyOptions) -> Any:
    """Drop relations whose parent or child table is excluded."""
    if not isinstance(relations, list) or not options.excluded_tables:
        return relations
    return [
        relation for relation in relations
        if not (
            isinstance(relation, DataRelation)
            and _touches_excluded_table(relation, options)
        )
    ]


def _touches_excluded_table(relation: DataRelation, options: DataEquivalencyOptions) -> bool:
    for table in (relation.parent_table, relation.child_table):
        if table is not None and options.is_table_excluded(table.table_name):
            return True
    return False


def assert_document_pair(context: ComparisonContext, document_type: type, label: str) -> bool:
    """
    Null/type gate for documents (tables, datasets).

    1. both null                  → nothing to do
    2. expectation null only      → NULLITY_MISMATCH
    3. subject null only          → NULLITY_MISMATCH
    4. subject of another type    → TYPE_MISMATCH

    Returns:
        True when both sides are documents and comparison should go on
    """
    scope = context.scope

    if context.expectation is None:
        if context.subject is not None:
            scope.for_condition(False).fail_with(
                f"Expected {{context:{label}}} value to be null, but found {{0}}",
                context.subject,
                code=ErrorCodes.NULLITY_MISMATCH,
            )
        return False

    if context.subject is None:
        scope.for_condition(False).fail_with(
            f"Expected {{context:{label}}} to be non-null, but found null",
            code=ErrorCodes.NULLITY_MISMATCH,
        )
        return False

    if not isinstance(context.subject, document_type):
        scope.for_condition(False).fail_with(
            f"Expected {{context:{label}}} to be of type {{0}}, but found {{1}} instead",
            type(context.expectation),
            type(context.subject),
            code=ErrorCodes.TYPE_MISMATCH,
        )
        return False

    return True


def assert_same_concrete_type(
    context: ComparisonContext,
    options: EquivalencyOptions,
    label: str,
) -> None:
    """Concrete type check unless the data options allow mismatched types."""
    data = data_options(options)
    if data is not None and data.allow_mismatched_types:
        return

    context.scope.for_condition(type(context.subject) is type(context.expectation)).fail_with(
        f"Expected {{context:{label}}} to be of type {{0}}{{reason}}, but found {{1}}",
        type(context.expectation),
        type(context.subject),
        code=ErrorCodes.TYPE_MISMATCH,
    )


def assert_both_present(context: ComparisonContext, label: str) -> bool:
    """
    Null check for non-document values.

    Returns:
        True when both sides are non-null
    """
    if context.expectation is None or context.subject is None:
        context.scope.for_condition(context.expectation is context.subject).fail_with(
            f"Expected {{context:{label}}} to be {{0}}{{reason}}, but found {{1}}",
            context.expectation,
            context.subject,
            code=ErrorCodes.NULLITY_MISMATCH,
        )
        return False
    return True
