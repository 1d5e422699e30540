"""
Comparison context: path and identity state threaded through the recursion.

A context is created by the top-level call, extended (never mutated) for
each nested member/item, and dropped when its branch completes.
"""

import logging
from dataclasses import dataclass, replace
from typing import Any

from tablequiv.core.ids import identity_key
from tablequiv.domain.constants import ROOT_PATH_DESCRIPTION
from tablequiv.equivalency.members import Member
from tablequiv.equivalency.scope import AssertionScope

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Node:
    """Position in the object graph, as seen by selection/matching rules."""
    path: str
    name: str
    declared_type: Any
    depth: int

    @property
    def is_root(self) -> bool:
        return self.depth == 0

    def path_for(self, member_name: str) -> str:
        return f"{self.path}.{member_name}" if self.path else member_name


@dataclass(frozen=True)
class ComparisonContext:
    """
    One (subject, expectation) pair under comparison.

    ancestors holds the identity pairs already in progress on the path from
    the root to this context; the validator uses it to cut cycles.
    in_dataset marks a table reached through its dataset, whose relations are
    compared once at the dataset level.
    """
    subject: Any
    expectation: Any
    compile_time_type: Any
    scope: AssertionScope
    path: str = ""
    name: str = ""
    depth: int = 0
    ancestors: frozenset[tuple[int, int]] = frozenset()
    in_dataset: bool = False

    @property
    def runtime_type(self) -> Any:
        if self.expectation is None:
            return self.compile_time_type
        return type(self.expectation)

    @property
    def current_node(self) -> Node:
        return Node(
            path=self.path,
            name=self.name,
            declared_type=self.compile_time_type,
            depth=self.depth,
        )

    @property
    def path_description(self) -> str:
        return self.path or ROOT_PATH_DESCRIPTION

    @property
    def is_cyclic(self) -> bool:
        """True if this pair is already being compared further up the path."""
        key = identity_key(self.expectation, self.subject)
        return key is not None and key in self.ancestors

    # -------------------------------------------------------------------------
    # Nesting
    # -------------------------------------------------------------------------

    def as_nested_member(
        self,
        expectation_member: Member,
        subject_member: Member,
    ) -> "ComparisonContext | None":
        """
        Context for a member pair, path extended with the expectation name.

        Returns:
            None if either side's value cannot be read
        """
        try:
            expectation = expectation_member.get_value(self.expectation)
            subject = subject_member.get_value(self.subject)
        except (AttributeError, KeyError, IndexError, TypeError) as e:
            logger.debug(
                f"Skipping member '{expectation_member.name}' at {self.path_description}: {e}"
            )
            return None

        return self._nested(
            subject=subject,
            expectation=expectation,
            compile_time_type=expectation_member.declared_type,
            path=self.current_node.path_for(expectation_member.name),
            name=expectation_member.name,
        )

    def as_collection_item(
        self,
        index: int,
        expectation_item: Any,
        subject_item: Any,
    ) -> "ComparisonContext":
        return self._nested(
            subject=subject_item,
            expectation=expectation_item,
            compile_time_type=object,
            path=f"{self.path}[{index}]",
            name=f"[{index}]",
        )

    def as_dictionary_item(
        self,
        key: Any,
        expectation_value: Any,
        subject_value: Any,
    ) -> "ComparisonContext":
        return self._nested(
            subject=subject_value,
            expectation=expectation_value,
            compile_time_type=object,
            path=f"{self.path}[{key}]",
            name=f"[{key}]",
        )

    def with_values(self, subject: Any, expectation: Any) -> "ComparisonContext":
        """Same position, different values (e.g. a filtered column list)."""
        return replace(self, subject=subject, expectation=expectation)

    def with_scope(self, scope: AssertionScope) -> "ComparisonContext":
        return replace(self, scope=scope)

    def as_dataset_table(self) -> "ComparisonContext":
        return replace(self, in_dataset=True)

    def _nested(
        self,
        subject: Any,
        expectation: Any,
        compile_time_type: Any,
        path: str,
        name: str,
    ) -> "ComparisonContext":
        key = identity_key(self.expectation, self.subject)
        ancestors = self.ancestors | {key} if key is not None else self.ancestors
        return ComparisonContext(
            subject=subject,
            expectation=expectation,
            compile_time_type=compile_time_type,
            scope=self.scope,
            path=path,
            name=name,
            depth=self.depth + 1,
            ancestors=ancestors,
        )
