"""Tests for the console host handles."""

import logging

import pytest

from cljr_test_adapter.reporting.console import (
    CollectingDiscoverySink,
    ConsoleFrameworkHandle,
)
from cljr_test_adapter.testing.factories import DiscoveredTestFactory, TestResultFactory


def test_collecting_sink_keeps_order() -> None:
    """Keeps discovered tests in the order they were sent."""
    tests = DiscoveredTestFactory.batch(3)
    sink = CollectingDiscoverySink()

    for test in tests:
        sink.send_test_case(test)

    assert sink.tests == tests


@pytest.mark.parametrize(
    ("level", "expected"),
    [
        ("informational", logging.INFO),
        ("warning", logging.WARNING),
        ("error", logging.ERROR),
    ],
)
def test_send_message_logs_at_level(
    caplog: pytest.LogCaptureFixture, level: str, expected: int
) -> None:
    """Maps host message levels onto logging levels."""
    handle = ConsoleFrameworkHandle()

    with caplog.at_level(logging.DEBUG):
        handle.send_message(level, "hello")  # type: ignore[arg-type]

    records = [(r.levelno, r.getMessage()) for r in caplog.records]
    assert records == [(expected, "hello")]


def test_records_results(caplog: pytest.LogCaptureFixture) -> None:
    """Keeps results and logs start and end at debug level."""
    result = TestResultFactory.build(outcome="failed", message="FAIL")
    handle = ConsoleFrameworkHandle()

    with caplog.at_level(logging.DEBUG):
        handle.record_start(result.test)
        handle.record_end(result.test, result.outcome)
        handle.record_result(result)

    assert handle.results == [result]
    assert f"Started {result.test.fully_qualified_name}" in caplog.text
    assert f"Finished {result.test.fully_qualified_name}: failed" in caplog.text
