"""
Member-wise step for every other type with a declared member set
(columns, relations, constraints, plain dataclasses).
"""

from typing import TYPE_CHECKING

from tablequiv.equivalency.context import ComparisonContext
from tablequiv.equivalency.members import has_declared_members
from tablequiv.equivalency.options import EquivalencyOptions
from tablequiv.equivalency.steps.base import (
    EquivalencyStep,
    assert_both_present,
    delegate_member,
    expectation_type,
    select_members,
)

if TYPE_CHECKING:
    from tablequiv.equivalency.validator import EquivalencyValidator


class MemberwiseEquivalencyStep(EquivalencyStep):

    def can_handle(self, context: ComparisonContext, options: EquivalencyOptions) -> bool:
        return has_declared_members(expectation_type(context, options))

    def handle(
        self,
        context: ComparisonContext,
        parent: "EquivalencyValidator",
        options: EquivalencyOptions,
    ) -> bool:
        if not assert_both_present(context, "object"):
            return True

        for member in select_members(context, options).values():
            delegate_member(member, context, parent, options)
        return True
