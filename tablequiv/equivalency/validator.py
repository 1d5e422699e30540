"""
Equivalency validator: the recursive engine.

Every (subject, expectation) pair, the root and each nested member or item,
goes through assert_equality_using(), which runs the step pipeline until one
step handles the pair.

Rules:
- depth beyond options.max_depth → DEPTH_EXCEEDED failure, branch abandoned
- an identity pair already in progress on the path → treated as equivalent
"""

import logging

from tablequiv.domain.errors import ErrorCodes
from tablequiv.equivalency.context import ComparisonContext
from tablequiv.equivalency.options import EquivalencyOptions

logger = logging.getLogger(__name__)


class EquivalencyValidator:
    """Dispatches comparison contexts to the configured steps."""

    def __init__(self, options: EquivalencyOptions):
        self.options = options

    def assert_equality_using(self, context: ComparisonContext) -> None:
        """
        Compare one pair; failures go to context.scope.

        Args:
            context: Pair, path and scope to compare under
        """
        if context.depth > self.options.max_depth:
            logger.warning(
                f"Maximum depth {self.options.max_depth} reached at {context.path_description}"
            )
            context.scope.for_condition(False).fail_with(
                "The maximum recursion depth of {0} was reached at {1}; "
                "the object graph may be too deep or contain a cycle",
                self.options.max_depth,
                context.path_description,
                code=ErrorCodes.DEPTH_EXCEEDED,
                path=context.path_description,
            )
            return

        if context.is_cyclic:
            logger.debug(f"Cyclic reference at {context.path_description}, treated as equivalent")
            return

        with context.scope.using_context(context.path):
            for step in self.options.steps:
                if step.can_handle(context, self.options) and step.handle(context, self, self.options):
                    return

        logger.debug(f"No step handled {context.path_description}")
