"""
Assertion scope: failure accumulator for one top-level comparison.

Rules:
- failures are recorded, never raised; comparison always continues
- one scope per top-level call, shared by reference through every
  nested ComparisonContext
- the scope is sealed when the top-level call ends

Message templates:
- {0}, {1}, ...        → formatted positional args
- {context:Default}    → current path (or Default at the root)
- {reason}             → " because <reason>" or ""
"""

import re
from collections.abc import Generator
from contextlib import contextmanager
from typing import Any

from tablequiv.domain.constants import ROOT_PATH_DESCRIPTION
from tablequiv.domain.schemas import FailureRecord
from tablequiv.equivalency.formatting import format_value

_PLACEHOLDER = re.compile(
    r"\{(?:(?P<index>\d+)|(?P<reason>reason)|context(?::(?P<default>[^}]*))?)\}"
)


class AssertionScope:
    """
    Collects FailureRecords.

    Usage:
        scope.for_condition(actual == expected).fail_with(
            "Expected {context:value} to be {0}{reason}, but found {1}",
            expected, actual,
            code=ErrorCodes.SCALAR_MISMATCH,
        )
    """

    def __init__(self, reason: str = "", context: str = ""):
        """
        Args:
            reason: Text substituted for {reason}
            context: Current path description
        """
        self.reason = reason
        self.context = context
        self._records: list[FailureRecord] = []
        self._condition: bool | None = None
        self._sealed = False

    # -------------------------------------------------------------------------
    # Reporting
    # -------------------------------------------------------------------------

    def because(self, reason: str) -> "AssertionScope":
        self.reason = reason
        return self

    def for_condition(self, condition: bool) -> "AssertionScope":
        """Arm the next fail_with(); it only records when condition is False."""
        self._condition = bool(condition)
        return self

    def fail_with(
        self,
        template: str,
        *args: Any,
        code: str,
        path: str | None = None,
    ) -> bool:
        """
        Record a failure unless the armed condition holds.

        Args:
            template: Message template
            *args: Values for {0}, {1}, ...
            code: ErrorCodes value
            path: Failure path (defaults to the current context)

        Returns:
            True if the condition held (nothing recorded)

        Raises:
            RuntimeError: Scope already sealed
        """
        condition, self._condition = self._condition, None
        if condition:
            return True

        if self._sealed:
            raise RuntimeError("Assertion scope is sealed; start a new comparison")

        formatted = tuple(format_value(arg) for arg in args)
        self._records.append(FailureRecord(
            code=code,
            path=path if path is not None else (self.context or ROOT_PATH_DESCRIPTION),
            message=self._render(template, formatted),
            template=template,
            args=formatted,
        ))
        return False

    def _render(self, template: str, formatted: tuple[str, ...]) -> str:
        def substitute(match: re.Match) -> str:
            if match.group("index") is not None:
                index = int(match.group("index"))
                return formatted[index] if index < len(formatted) else match.group(0)
            if match.group("reason") is not None:
                return self._format_reason()
            return self.context or match.group("default") or "object"

        return _PLACEHOLDER.sub(substitute, template)

    def _format_reason(self) -> str:
        reason = self.reason.strip()
        if not reason:
            return ""
        if reason.lower().startswith("because"):
            return f" {reason}"
        return f" because {reason}"

    @contextmanager
    def using_context(self, path: str) -> Generator["AssertionScope", None, None]:
        """Temporarily switch the path used for {context} and default paths."""
        previous = self.context
        self.context = path
        try:
            yield self
        finally:
            self.context = previous

    # -------------------------------------------------------------------------
    # Results
    # -------------------------------------------------------------------------

    @property
    def records(self) -> tuple[FailureRecord, ...]:
        return tuple(self._records)

    @property
    def messages(self) -> list[str]:
        return [record.message for record in self._records]

    @property
    def succeeded(self) -> bool:
        return not self._records

    @property
    def sealed(self) -> bool:
        return self._sealed

    def child(self) -> "AssertionScope":
        """Detached scope with the same reason/context (for trial comparisons)."""
        return AssertionScope(reason=self.reason, context=self.context)

    def seal(self) -> None:
        self._sealed = True

    def __len__(self) -> int:
        return len(self._records)


@contextmanager
def assertion_scope(reason: str = "") -> Generator[AssertionScope, None, None]:
    """
    Acquire the scope for one top-level comparison; sealed on exit.

    Usage:
        with assertion_scope("the import is lossless") as scope:
            validator.assert_equality_using(context)
        result = scope.records
    """
    scope = AssertionScope(reason=reason)
    try:
        yield scope
    finally:
        scope.seal()
