"""
Comparison results and human-readable failure reports.
"""

from dataclasses import dataclass, field

from tablequiv.domain.constants import DEFAULT_MAX_REPORTED_FAILURES
from tablequiv.domain.schemas import FailureRecord, RunLog


@dataclass
class EquivalencyResult:
    """Outcome of one top-level comparison."""
    succeeded: bool
    failures: tuple[FailureRecord, ...] = ()
    run_log: RunLog | None = field(default=None, repr=False)

    @property
    def messages(self) -> list[str]:
        return [failure.message for failure in self.failures]

    def codes(self) -> list[str]:
        return [failure.code for failure in self.failures]

    def failures_at(self, path_prefix: str) -> list[FailureRecord]:
        """Failures whose path is path_prefix or below it."""
        return [
            f for f in self.failures
            if f.path == path_prefix
            or f.path.startswith(f"{path_prefix}.")
            or f.path.startswith(f"{path_prefix}[")
        ]

    def __bool__(self) -> bool:
        return self.succeeded

    def __str__(self) -> str:
        return format_failure_report(list(self.failures))


def format_failure_report(
    failures: list[FailureRecord],
    max_failures: int = DEFAULT_MAX_REPORTED_FAILURES,
) -> str:
    """
    Format failures into a human-readable report.

    Args:
        failures: Failure records, in discovery order
        max_failures: Maximum number of failures to show

    Returns:
        Formatted report string
    """
    if not failures:
        return "No differences found."

    lines = [f"Found {len(failures)} difference(s):"]
    lines.append("-" * 60)

    for i, failure in enumerate(failures[:max_failures]):
        lines.append(f"\n{i+1}. [{failure.code}] at '{failure.path}': {failure.message}")

    if len(failures) > max_failures:
        lines.append(f"\n... and {len(failures) - max_failures} more differences")

    return "\n".join(lines)
