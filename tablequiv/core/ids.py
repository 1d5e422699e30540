"""
ID generation: run_id, identity keys for cycle tracking.

Rules:
- run_id is unique per top-level comparison
- identity keys are only valid while both objects are alive
  (the cycle tracker only holds keys of ancestors on the current path)
"""

import uuid
from datetime import UTC, date, datetime, time, timedelta
from decimal import Decimal
from enum import Enum
from typing import Any

# Values that can never be part of a reference cycle
_SIMPLE_TYPES = (
    str, bytes, bool, int, float, complex, Decimal,
    date, datetime, time, timedelta, Enum, type,
)


def generate_run_id() -> str:
    """
    Generate a run ID.

    Format: RUN-{timestamp}-{uuid[:8]}

    Returns:
        run_id string
    """
    now = datetime.now(UTC)
    timestamp = now.strftime("%Y%m%d%H%M%S")
    unique = uuid.uuid4().hex[:8]

    return f"RUN-{timestamp}-{unique}"


def is_tracked(value: Any) -> bool:
    """True for values that may take part in a reference cycle."""
    return value is not None and not isinstance(value, _SIMPLE_TYPES)


def identity_key(expectation: Any, subject: Any) -> tuple[int, int] | None:
    """
    Identity pair of an (expectation, subject) comparison.

    Returns:
        (id(expectation), id(subject)), or None when neither side is tracked
    """
    if not (is_tracked(expectation) or is_tracked(subject)):
        return None
    return id(expectation), id(subject)
