"""
Top-level comparison entry points.

compare_*() return an EquivalencyResult; assert_*() raise AssertionError
with a formatted report when the subject is not equivalent.

Usage:
    result = compare_tables(actual, expected, because="the import is lossless")
    if not result:
        print(result)

    assert_tables_equivalent(
        actual, expected,
        options=DataTableEquivalencyOptions().excluding_column("Orders", "ModifiedAt"),
    )
"""

import logging
from pathlib import Path
from typing import Any

from tablequiv.core.logging import complete_run_log, create_run_log, record_failures, save_run_log
from tablequiv.domain.tables import DataSet, DataTable
from tablequiv.equivalency.context import ComparisonContext
from tablequiv.equivalency.formatting import format_value
from tablequiv.equivalency.options import (
    DataSetEquivalencyOptions,
    DataTableEquivalencyOptions,
    EquivalencyOptions,
)
from tablequiv.equivalency.report import EquivalencyResult, format_failure_report
from tablequiv.equivalency.scope import assertion_scope
from tablequiv.equivalency.validator import EquivalencyValidator

logger = logging.getLogger(__name__)


def compare_equivalency(
    subject: Any,
    expectation: Any,
    options: EquivalencyOptions | None = None,
    because: str = "",
    compile_time_type: Any = None,
    logs_dir: Path | None = None,
) -> EquivalencyResult:
    """
    Compare subject against expectation structurally.

    Args:
        subject: Value under test
        expectation: Expected value
        options: Comparison options (defaults to EquivalencyOptions())
        because: Reason appended to every failure message
        compile_time_type: Declared type, used when expectation is None
        logs_dir: If given, the run log is saved there as JSON

    Returns:
        EquivalencyResult (failures in discovery order)

    Raises:
        EquivalencyConfigError: Invalid options
    """
    options = options if options is not None else EquivalencyOptions()
    options.validate()

    if compile_time_type is None:
        compile_time_type = type(expectation) if expectation is not None else object

    run_log = create_run_log(subject=format_value(subject), expectation=format_value(expectation))
    logger.debug(f"Comparison {run_log.run_id} started ({type(options).__name__})")

    with assertion_scope(because) as scope:
        context = ComparisonContext(
            subject=subject,
            expectation=expectation,
            compile_time_type=compile_time_type,
            scope=scope,
        )
        EquivalencyValidator(options).assert_equality_using(context)

    record_failures(run_log, scope.records)
    complete_run_log(run_log, success=scope.succeeded)

    if logs_dir is not None:
        save_run_log(run_log, logs_dir)

    return EquivalencyResult(succeeded=scope.succeeded, failures=scope.records, run_log=run_log)


def compare_tables(
    subject: DataTable | None,
    expectation: DataTable | None,
    options: EquivalencyOptions | None = None,
    because: str = "",
    logs_dir: Path | None = None,
) -> EquivalencyResult:
    return compare_equivalency(
        subject,
        expectation,
        options=options if options is not None else DataTableEquivalencyOptions(),
        because=because,
        compile_time_type=DataTable,
        logs_dir=logs_dir,
    )


def compare_datasets(
    subject: DataSet | None,
    expectation: DataSet | None,
    options: EquivalencyOptions | None = None,
    because: str = "",
    logs_dir: Path | None = None,
) -> EquivalencyResult:
    return compare_equivalency(
        subject,
        expectation,
        options=options if options is not None else DataSetEquivalencyOptions(),
        because=because,
        compile_time_type=DataSet,
        logs_dir=logs_dir,
    )


def assert_tables_equivalent(
    subject: DataTable | None,
    expectation: DataTable | None,
    options: EquivalencyOptions | None = None,
    because: str = "",
) -> None:
    """
    Raises:
        AssertionError: With formatted failure report if not equivalent
    """
    _raise_on_failure(compare_tables(subject, expectation, options, because))


def assert_datasets_equivalent(
    subject: DataSet | None,
    expectation: DataSet | None,
    options: EquivalencyOptions | None = None,
    because: str = "",
) -> None:
    """
    Raises:
        AssertionError: With formatted failure report if not equivalent
    """
    _raise_on_failure(compare_datasets(subject, expectation, options, because))


def _raise_on_failure(result: EquivalencyResult) -> None:
    if not result.succeeded:
        report = format_failure_report(list(result.failures))
        raise AssertionError(f"Equivalency comparison failed:\n{report}")
