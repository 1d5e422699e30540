"""
Collection and dictionary steps.

Lists and tuples compare item by item in order (strict ordering) or by
finding, for each expectation item, an unused equivalent subject item.
Dictionaries compare by key.
"""

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from tablequiv.domain.errors import ErrorCodes
from tablequiv.equivalency.context import ComparisonContext
from tablequiv.equivalency.options import EquivalencyOptions
from tablequiv.equivalency.steps.base import EquivalencyStep, assert_both_present, expectation_type, is_subtype

if TYPE_CHECKING:
    from tablequiv.equivalency.validator import EquivalencyValidator

logger = logging.getLogger(__name__)


class CollectionEquivalencyStep(EquivalencyStep):
    """Lists and tuples."""

    def can_handle(self, context: ComparisonContext, options: EquivalencyOptions) -> bool:
        return is_subtype(expectation_type(context, options), (list, tuple))

    def handle(
        self,
        context: ComparisonContext,
        parent: "EquivalencyValidator",
        options: EquivalencyOptions,
    ) -> bool:
        if not assert_both_present(context, "collection"):
            return True

        if not isinstance(context.subject, (list, tuple)):
            context.scope.for_condition(False).fail_with(
                "Expected {context:collection} to be a collection{reason}, but found {0}",
                context.subject,
                code=ErrorCodes.TYPE_MISMATCH,
            )
            return True

        if options.strict_ordering:
            self._compare_in_order(context, parent)
        else:
            self._compare_in_any_order(context, parent)
        return True

    def _compare_in_order(self, context: ComparisonContext, parent: "EquivalencyValidator") -> None:
        expectation = list(context.expectation)
        subject = list(context.subject)

        if len(subject) < len(expectation):
            missing = expectation[len(subject):]
            context.scope.for_condition(False).fail_with(
                "Expected {context:collection} to contain {0} item(s){reason}, "
                "but {1} item(s) are missing: {2}",
                len(expectation),
                len(missing),
                missing,
                code=ErrorCodes.STRUCTURAL_MISMATCH,
            )
        elif len(subject) > len(expectation):
            surplus = subject[len(expectation):]
            context.scope.for_condition(False).fail_with(
                "Expected {context:collection} to contain {0} item(s){reason}, "
                "but found {1} surplus item(s): {2}",
                len(expectation),
                len(surplus),
                surplus,
                code=ErrorCodes.STRUCTURAL_MISMATCH,
            )

        for index, (expected_item, actual_item) in enumerate(zip(expectation, subject)):
            parent.assert_equality_using(context.as_collection_item(index, expected_item, actual_item))

    def _compare_in_any_order(self, context: ComparisonContext, parent: "EquivalencyValidator") -> None:
        expectation = list(context.expectation)
        subject = list(context.subject)
        unmatched = list(range(len(subject)))

        for index, expected_item in enumerate(expectation):
            match = self._find_equivalent(context, parent, index, expected_item, subject, unmatched)
            if match is None:
                context.scope.for_condition(False).fail_with(
                    "Expected {context:collection} to contain an item equivalent to {0}{reason}, "
                    "but no such item was found",
                    expected_item,
                    code=ErrorCodes.STRUCTURAL_MISMATCH,
                    path=f"{context.path}[{index}]",
                )
                continue
            unmatched.remove(match)

        for subject_index in unmatched:
            context.scope.for_condition(False).fail_with(
                "Expected {context:collection} not to contain surplus item {0}{reason}",
                subject[subject_index],
                code=ErrorCodes.STRUCTURAL_MISMATCH,
                path=f"{context.path}[{subject_index}]",
            )

    def _find_equivalent(
        self,
        context: ComparisonContext,
        parent: "EquivalencyValidator",
        index: int,
        expected_item: Any,
        subject: list[Any],
        unmatched: list[int],
    ) -> int | None:
        """Index of the first unused subject item equivalent to expected_item."""
        # Same position first
        candidates = sorted(unmatched, key=lambda i: (i != index, i))
        for candidate in candidates:
            trial = context.as_collection_item(index, expected_item, subject[candidate])
            trial = trial.with_scope(context.scope.child())
            parent.assert_equality_using(trial)
            if trial.scope.succeeded:
                return candidate
        logger.debug(f"No equivalent for {context.path_description}[{index}]")
        return None


class DictionaryEquivalencyStep(EquivalencyStep):
    """Mappings, e.g. extended properties."""

    def can_handle(self, context: ComparisonContext, options: EquivalencyOptions) -> bool:
        return is_subtype(expectation_type(context, options), Mapping)

    def handle(
        self,
        context: ComparisonContext,
        parent: "EquivalencyValidator",
        options: EquivalencyOptions,
    ) -> bool:
        if not assert_both_present(context, "dictionary"):
            return True

        expectation = context.expectation
        subject = context.subject

        if not isinstance(subject, Mapping):
            context.scope.for_condition(False).fail_with(
                "Expected {context:dictionary} to be a dictionary{reason}, but found {0}",
                subject,
                code=ErrorCodes.TYPE_MISMATCH,
            )
            return True

        for key, expected_value in expectation.items():
            if key not in subject:
                context.scope.for_condition(False).fail_with(
                    "Expected {context:dictionary} to contain key {0}{reason}, but it does not",
                    key,
                    code=ErrorCodes.STRUCTURAL_MISMATCH,
                    path=f"{context.path}[{key}]",
                )
                continue
            parent.assert_equality_using(context.as_dictionary_item(key, expected_value, subject[key]))

        for key in subject:
            if key not in expectation:
                context.scope.for_condition(False).fail_with(
                    "Expected {context:dictionary} not to contain key {0}{reason}",
                    key,
                    code=ErrorCodes.STRUCTURAL_MISMATCH,
                    path=f"{context.path}[{key}]",
                )

        return True
