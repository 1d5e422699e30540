"""
Core layer: run ids, identity keys and run logs.
"""

from .ids import generate_run_id, identity_key, is_tracked
from .logging import (
    atomic_write_json,
    complete_run_log,
    create_run_log,
    list_run_logs,
    load_run_log,
    record_failures,
    save_run_log,
)

__all__ = [
    # ids
    "generate_run_id",
    "identity_key",
    "is_tracked",
    # logging
    "atomic_write_json",
    "complete_run_log",
    "create_run_log",
    "list_run_logs",
    "load_run_log",
    "record_failures",
    "save_run_log",
]
