"""
Leaf steps: identity shortcut first, plain equality last.
"""

import math
from typing import TYPE_CHECKING, Any

from tablequiv.domain.errors import ErrorCodes
from tablequiv.equivalency.context import ComparisonContext
from tablequiv.equivalency.options import EquivalencyOptions
from tablequiv.equivalency.steps.base import EquivalencyStep, assert_both_present

if TYPE_CHECKING:
    from tablequiv.equivalency.validator import EquivalencyValidator


class ReferenceEqualityStep(EquivalencyStep):
    """The same object (or both None) is always equivalent to itself."""

    def can_handle(self, context: ComparisonContext, options: EquivalencyOptions) -> bool:
        return True

    def handle(self, context, parent, options) -> bool:
        return context.subject is context.expectation


class SimpleEqualityStep(EquivalencyStep):
    """Fallback for anything no other step claims."""

    def can_handle(self, context: ComparisonContext, options: EquivalencyOptions) -> bool:
        return True

    def handle(
        self,
        context: ComparisonContext,
        parent: "EquivalencyValidator",
        options: EquivalencyOptions,
    ) -> bool:
        if not assert_both_present(context, "value"):
            return True

        context.scope.for_condition(values_equal(context.subject, context.expectation)).fail_with(
            "Expected {context:value} to be {0}{reason}, but found {1}",
            context.expectation,
            context.subject,
            code=ErrorCodes.SCALAR_MISMATCH,
        )
        return True


def values_equal(actual: Any, expected: Any) -> bool:
    """== with NaN equal to NaN and bool never equal to int."""
    if isinstance(actual, bool) != isinstance(expected, bool):
        return False
    if isinstance(actual, float) and isinstance(expected, float):
        if math.isnan(actual) and math.isnan(expected):
            return True
    return bool(actual == expected)
