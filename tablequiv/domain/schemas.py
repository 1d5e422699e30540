"""
Record schemas: failure records and comparison run logs.

Rules:
- FailureRecord is immutable once created (frozen)
- to_dict() on everything that ends up in a run log JSON
"""

from dataclasses import dataclass, field
from typing import Any

# =============================================================================
# Failure Record
# =============================================================================

@dataclass(frozen=True)
class FailureRecord:
    """
    One mismatch found during a comparison.

    template keeps the raw message (with placeholders) so failures can be
    grouped by kind; args are the already formatted substitution values.
    """
    code: str  # ErrorCodes value
    path: str  # e.g. "rows[2].values[Name]"
    message: str
    template: str = ""
    args: tuple[str, ...] = ()

    def __str__(self) -> str:
        return self.message

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "path": self.path,
            "message": self.message,
            "template": self.template,
            "args": list(self.args),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "FailureRecord":
        return cls(
            code=data["code"],
            path=data["path"],
            message=data["message"],
            template=data.get("template", ""),
            args=tuple(data.get("args", ())),
        )


# =============================================================================
# Run Log
# =============================================================================

@dataclass
class RunLog:
    """
    Run log.

    One top-level comparison: who was compared, when, and what failed.
    """
    run_id: str
    started_at: str  # ISO 8601
    subject: str = ""
    expectation: str = ""
    finished_at: str | None = None
    result: str = "pending"  # pending, success, failed

    failures: list[FailureRecord] = field(default_factory=list)

    # Error (comparison could not run)
    error_code: str | None = None
    error_context: dict[str, Any] | None = None

    @property
    def failure_count(self) -> int:
        return len(self.failures)

    def to_dict(self) -> dict[str, Any]:
        return {
            "run_id": self.run_id,
            "started_at": self.started_at,
            "finished_at": self.finished_at,
            "result": self.result,
            "subject": self.subject,
            "expectation": self.expectation,
            "failure_count": self.failure_count,
            "failures": [f.to_dict() for f in self.failures],
            "error_code": self.error_code,
            "error_context": self.error_context,
        }
