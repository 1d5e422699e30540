"""
Equivalency engine: structural comparison of table documents.

Pipeline:
- api.compare_*() creates the scope and root context
- EquivalencyValidator dispatches each pair to the first matching step
- steps select members (selection rules), match them on the subject
  (matching rules) and recurse
"""

from .api import (
    assert_datasets_equivalent,
    assert_tables_equivalent,
    compare_datasets,
    compare_equivalency,
    compare_tables,
)
from .context import ComparisonContext, Node
from .formatting import format_value
from .members import Member, MemberKind, find_member, members_for, register_members
from .options import (
    DataEquivalencyOptions,
    DataSetEquivalencyOptions,
    DataTableEquivalencyOptions,
    EquivalencyOptions,
    load_options,
    options_from_dict,
)
from .report import EquivalencyResult, format_failure_report
from .rules import (
    AllDeclaredMembersSelectionRule,
    ExcludeMemberByNameSelectionRule,
    ExcludeMemberByPathSelectionRule,
    ExcludeMemberByPredicateSelectionRule,
    IncludeMemberByNameSelectionRule,
    MappedMemberMatchingRule,
    MatchingRule,
    MemberSelectionContext,
    MustMatchByNameRule,
    SelectionRule,
    TryMatchByNameRule,
)
from .scope import AssertionScope, assertion_scope
from .steps import DataTableEquivalencyStep, EquivalencyStep, default_steps
from .validator import EquivalencyValidator

__all__ = [
    # api
    "assert_datasets_equivalent",
    "assert_tables_equivalent",
    "compare_datasets",
    "compare_equivalency",
    "compare_tables",
    # engine
    "AssertionScope",
    "ComparisonContext",
    "DataTableEquivalencyStep",
    "EquivalencyStep",
    "EquivalencyValidator",
    "Node",
    "assertion_scope",
    "default_steps",
    # members
    "Member",
    "MemberKind",
    "find_member",
    "members_for",
    "register_members",
    # options
    "DataEquivalencyOptions",
    "DataSetEquivalencyOptions",
    "DataTableEquivalencyOptions",
    "EquivalencyOptions",
    "load_options",
    "options_from_dict",
    # rules
    "AllDeclaredMembersSelectionRule",
    "ExcludeMemberByNameSelectionRule",
    "ExcludeMemberByPathSelectionRule",
    "ExcludeMemberByPredicateSelectionRule",
    "IncludeMemberByNameSelectionRule",
    "MappedMemberMatchingRule",
    "MatchingRule",
    "MemberSelectionContext",
    "MustMatchByNameRule",
    "SelectionRule",
    "TryMatchByNameRule",
    # reporting
    "EquivalencyResult",
    "format_failure_report",
    "format_value",
]
