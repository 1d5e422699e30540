"""
Run logging: one JSON run log per top-level comparison.

Rules:
- a run log is created before the comparison starts (result=pending)
- failures are copied in once the scope is final
- files are written atomically (temp → rename), never half-written
"""

import json
import logging
import os
import tempfile
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from tablequiv.core.ids import generate_run_id
from tablequiv.domain.schemas import FailureRecord, RunLog

logger = logging.getLogger(__name__)

# =============================================================================
# Run Log Management
# =============================================================================


def create_run_log(subject: str = "", expectation: str = "") -> RunLog:
    """
    Create a new RunLog.

    Args:
        subject: Formatted description of the subject
        expectation: Formatted description of the expectation

    Returns:
        Initialized RunLog
    """
    return RunLog(
        run_id=generate_run_id(),
        started_at=datetime.now(UTC).isoformat(),
        subject=subject,
        expectation=expectation,
    )


def record_failures(run_log: RunLog, failures: list[FailureRecord] | tuple[FailureRecord, ...]) -> None:
    """Append failure records to the run log."""
    run_log.failures.extend(failures)


def complete_run_log(
    run_log: RunLog,
    success: bool,
    error_code: str | None = None,
    error_context: dict[str, Any] | None = None,
) -> None:
    """
    Mark a RunLog as finished.

    Args:
        run_log: RunLog to update
        success: No failures recorded
        error_code: Error code if the comparison could not run
        error_context: Error context if the comparison could not run
    """
    run_log.finished_at = datetime.now(UTC).isoformat()
    run_log.result = "success" if success else "failed"

    if error_code is not None:
        run_log.error_code = error_code
        run_log.error_context = error_context

    logger.info(
        f"Comparison {run_log.run_id} finished: {run_log.result} "
        f"({run_log.failure_count} failure(s))"
    )


def save_run_log(run_log: RunLog, logs_dir: Path) -> Path:
    """
    Save a RunLog as JSON.

    Args:
        run_log: RunLog to update
        logs_dir: Log directory (created if missing)

    Returns:
        Path of the written file
    """
    logs_dir.mkdir(parents=True, exist_ok=True)
    log_path = logs_dir / f"run_{run_log.run_id}.json"
    atomic_write_json(log_path, run_log.to_dict())
    return log_path


def load_run_log(log_path: Path) -> dict[str, Any]:
    """
    Load a saved RunLog.

    Returns:
        RunLog data as a dict
    """
    data: dict[str, Any] = json.loads(log_path.read_text(encoding="utf-8"))
    return data


def list_run_logs(logs_dir: Path) -> list[Path]:
    """
    All run log files in a directory.

    Returns:
        Log file paths, newest first
    """
    if not logs_dir.exists():
        return []

    logs = list(logs_dir.glob("run_*.json"))
    logs.sort(key=lambda p: p.stat().st_mtime, reverse=True)
    return logs


# =============================================================================
# Atomic Write
# =============================================================================


def atomic_write_json(path: Path, data: dict) -> None:
    """
    Atomic JSON write.

    - no partial file: temp → rename
    - fsync failure is logged as a warning, the write goes on
    - on failure the temp file is removed and the old file kept

    Args:
        path: Target file
        data: JSON-serializable data
    """
    dir_path = path.parent
    dir_path.mkdir(parents=True, exist_ok=True)

    temp_path = None
    try:
        with tempfile.NamedTemporaryFile(
            mode="w",
            dir=dir_path,
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        ) as f:
            temp_path = Path(f.name)
            json.dump(data, f, indent=2, ensure_ascii=False, default=str)
            f.flush()
            try:
                os.fsync(f.fileno())
            except OSError as e:
                logger.warning(f"File fsync failed for {path}: {e}")

        os.replace(temp_path, path)

    except Exception:
        if temp_path and temp_path.exists():
            try:
                temp_path.unlink()
            except OSError:
                logger.warning(f"Could not remove temp file {temp_path}")
        raise
