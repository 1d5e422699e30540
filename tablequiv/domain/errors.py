"""
Error definitions for the equivalency engine.

Rules:
- Ordinary mismatches are never raised → recorded in the AssertionScope
- Misconfiguration is a programming error → EquivalencyConfigError
- Model invariant violations (row shape, primary key) → ValueError
"""

from typing import Any


class EquivalencyConfigError(Exception):
    """
    Raised when options or rules cannot be used as configured.

    Only for errors that make a comparison impossible to start:
    - max_depth not positive
    - empty step pipeline
    - unknown or malformed keys in an options file

    Usage:
        raise EquivalencyConfigError("INVALID_OPTION", option="max_depth", value=0)
    """

    def __init__(self, code: str, **context: Any) -> None:
        self.code = code
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        ctx_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
        return f"[{self.code}] {ctx_str}" if ctx_str else f"[{self.code}]"

    def to_dict(self) -> dict[str, Any]:
        """For logs and JSON serialization."""
        return {
            "code": self.code,
            **self.context,
        }


# =============================================================================
# Error Codes
# =============================================================================

class ErrorCodes:
    """Failure and configuration error codes."""

    # === Failure records (collected, never raised) ===
    NULLITY_MISMATCH = "NULLITY_MISMATCH"
    TYPE_MISMATCH = "TYPE_MISMATCH"
    SCALAR_MISMATCH = "SCALAR_MISMATCH"
    STRUCTURAL_MISMATCH = "STRUCTURAL_MISMATCH"
    MISSING_MEMBER = "MISSING_MEMBER"
    DEPTH_EXCEEDED = "DEPTH_EXCEEDED"

    # === Configuration (raised) ===
    INVALID_OPTION = "INVALID_OPTION"
    OPTIONS_FILE_INVALID = "OPTIONS_FILE_INVALID"

    FAILURE_CODES = frozenset([
        NULLITY_MISMATCH,
        TYPE_MISMATCH,
        SCALAR_MISMATCH,
        STRUCTURAL_MISMATCH,
        MISSING_MEMBER,
        DEPTH_EXCEEDED,
    ])
