"""Coarse correlation from the driver's aggregate summary line."""

import re
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from cljr_test_adapter.correlation.base import CorrelationStrategy
from cljr_test_adapter.models.discovery import DiscoveredTest
from cljr_test_adapter.models.result import RunSummary, TestResult
from cljr_test_adapter.runner.process import ProcessInvocation

# "Ran 5 tests containing 12 assertions.\n0 failures, 0 errors."
SUMMARY_PATTERN = re.compile(
    r"Ran (\d+) tests(?: containing (\d+) assertions)?\D*?(\d+) failures, (\d+) errors"
)

ALL_TESTS_NAMESPACE = "cljr-tests"
ALL_TESTS_NAME = "all-tests"
GENERIC_FAILURE_MESSAGE = "Test failed - see output for details"


def parse_summary(output: str) -> RunSummary | None:
    """Parse the first summary line found in output."""
    if (match := SUMMARY_PATTERN.search(output)) is None:
        return None

    tests, assertions, failures, errors = match.groups()
    return RunSummary(
        tests=int(tests),
        assertions=int(assertions) if assertions is not None else None,
        failures=int(failures),
        errors=int(errors),
    )


@dataclass(frozen=True, kw_only=True)
class SummaryCorrelation(CorrelationStrategy):
    """Assigns every test of a group the outcome of the summary line."""

    name: str = "summary"

    def correlate(
        self,
        invocation: ProcessInvocation,
        tests: Sequence[DiscoveredTest],
    ) -> Sequence[TestResult] | None:
        if not tests:
            return None
        if (summary := parse_summary(invocation.stdout_text)) is None:
            return None

        message = None if summary.succeeded else GENERIC_FAILURE_MESSAGE
        return [
            TestResult(
                test=test,
                outcome="passed" if summary.succeeded else "failed",
                start_time=invocation.started_at,
                end_time=invocation.finished_at,
                message=message,
            )
            for test in tests
        ]


def all_tests_identity(source: Path, project_dir: Path, count: int) -> DiscoveredTest:
    """Synthetic test standing for a whole-suite run."""
    return DiscoveredTest(
        namespace=ALL_TESTS_NAMESPACE,
        name=ALL_TESTS_NAME,
        source_file=project_dir,
        source=source,
        label=f"Clojure tests ({count} tests)",
    )


def summarize_suite(
    invocation: ProcessInvocation,
    source: Path,
    project_dir: Path,
) -> tuple[TestResult, RunSummary] | None:
    """Derive the result of a whole-suite run from its summary line.

    Returns:
        The synthetic result and the parsed summary, or None when the
        output holds no summary line

    """
    if (summary := parse_summary(invocation.stdout_text)) is None:
        return None

    result = TestResult(
        test=all_tests_identity(source, project_dir, summary.tests),
        outcome="passed" if summary.succeeded else "failed",
        start_time=invocation.started_at,
        end_time=invocation.finished_at,
        message=(
            None
            if summary.succeeded
            else f"Tests failed: {summary.failures} failures, {summary.errors} errors"
        ),
    )
    return result, summary
