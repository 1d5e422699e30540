"""
Selection and matching rules.

Selection rules run as an ordered fold: each receives the members selected
so far and returns the new selection. Matching rules are tried in order;
the first non-None match wins.
"""

import re
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from operator import attrgetter
from typing import TYPE_CHECKING, Any

from tablequiv.domain.errors import ErrorCodes
from tablequiv.equivalency.context import Node
from tablequiv.equivalency.members import Member, find_member, members_for
from tablequiv.equivalency.scope import AssertionScope

if TYPE_CHECKING:
    from tablequiv.equivalency.options import EquivalencyOptions

_INDEX_PATTERN = re.compile(r"\[[^\]]*\]")


def strip_indexes(path: str) -> str:
    """'rows[3].values[Name]' → 'rows.values'"""
    return _INDEX_PATTERN.sub("", path)


# =============================================================================
# Selection Rules
# =============================================================================

@dataclass(frozen=True)
class MemberSelectionContext:
    """Type context handed to every selection rule."""
    compile_time_type: Any
    runtime_type: Any
    options: "EquivalencyOptions"

    @property
    def expectation_type(self) -> Any:
        return self.options.get_expectation_type(self.runtime_type, self.compile_time_type)


class SelectionRule(ABC):
    """Adds, removes or keeps members of the current selection."""

    @abstractmethod
    def select_members(
        self,
        current_node: Node,
        selected_members: list[Member],
        context: MemberSelectionContext,
    ) -> list[Member]:
        ...

    def __repr__(self) -> str:
        return f"<{type(self).__name__}>"


class AllDeclaredMembersSelectionRule(SelectionRule):
    """Selects the closed member set of the expectation type."""

    def select_members(self, current_node, selected_members, context):
        return [*selected_members, *members_for(context.expectation_type)]


class ExcludeMemberByNameSelectionRule(SelectionRule):
    """Removes a member by name, at every level of the graph."""

    def __init__(self, name: str):
        self.name = name

    def select_members(self, current_node, selected_members, context):
        return [m for m in selected_members if m.name != self.name]

    def __repr__(self) -> str:
        return f"<Exclude member {self.name!r}>"


class ExcludeMemberByPathSelectionRule(SelectionRule):
    """
    Removes the member at one path. Indexes are ignored, so "rows.row_error"
    excludes row_error of every row.
    """

    def __init__(self, path: str):
        self.path = strip_indexes(path)

    def select_members(self, current_node, selected_members, context):
        return [
            m for m in selected_members
            if strip_indexes(current_node.path_for(m.name)) != self.path
        ]

    def __repr__(self) -> str:
        return f"<Exclude path {self.path!r}>"


class IncludeMemberByNameSelectionRule(SelectionRule):
    """Re-adds a declared member removed by an earlier rule."""

    def __init__(self, name: str):
        self.name = name

    def select_members(self, current_node, selected_members, context):
        if any(m.name == self.name for m in selected_members):
            return selected_members
        member = find_member(context.expectation_type, self.name)
        if member is None:
            return selected_members
        return [*selected_members, member]

    def __repr__(self) -> str:
        return f"<Include member {self.name!r}>"


class ExcludeMemberByPredicateSelectionRule(SelectionRule):
    """Removes members for which predicate(member, node) is true."""

    def __init__(self, predicate: Callable[[Member, Node], bool], description: str = ""):
        self.predicate = predicate
        self.description = description

    def select_members(self, current_node, selected_members, context):
        return [m for m in selected_members if not self.predicate(m, current_node)]

    def __repr__(self) -> str:
        return f"<Exclude members where {self.description or self.predicate!r}>"


# =============================================================================
# Matching Rules
# =============================================================================

class MatchingRule(ABC):
    """Finds the subject-side counterpart of an expectation member."""

    @abstractmethod
    def match(
        self,
        expectation_member: Member,
        subject: Any,
        current_node: Node,
        options: "EquivalencyOptions",
        scope: AssertionScope,
    ) -> Member | None:
        ...

    def __repr__(self) -> str:
        return f"<{type(self).__name__}>"


def _member_by_name(subject: Any, name: str, template: Member) -> Member | None:
    if subject is None:
        return None
    declared = find_member(type(subject), name)
    if declared is not None:
        return declared
    if hasattr(subject, name):
        return Member(name, template.declared_type, template.kind, attrgetter(name))
    return None


class TryMatchByNameRule(MatchingRule):
    """Same name on the subject, or no match (silently)."""

    def match(self, expectation_member, subject, current_node, options, scope):
        return _member_by_name(subject, expectation_member.name, expectation_member)


class MustMatchByNameRule(MatchingRule):
    """Same name on the subject; a missing counterpart is a failure."""

    def match(self, expectation_member, subject, current_node, options, scope):
        found = _member_by_name(subject, expectation_member.name, expectation_member)
        if found is None and subject is not None:
            scope.for_condition(False).fail_with(
                "Expectation has member {0} that the other object does not have",
                current_node.path_for(expectation_member.name),
                code=ErrorCodes.MISSING_MEMBER,
                path=current_node.path_for(expectation_member.name),
            )
        return found


class MappedMemberMatchingRule(MatchingRule):
    """Maps an expectation member onto a differently named subject member."""

    def __init__(self, expectation_name: str, subject_name: str):
        self.expectation_name = expectation_name
        self.subject_name = subject_name

    def match(self, expectation_member, subject, current_node, options, scope):
        if expectation_member.name != self.expectation_name:
            return None
        return _member_by_name(subject, self.subject_name, expectation_member)

    def __repr__(self) -> str:
        return f"<Map {self.expectation_name!r} → {self.subject_name!r}>"
