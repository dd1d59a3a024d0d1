"""Tests for the correlator chain."""

from collections.abc import Sequence
from dataclasses import dataclass, field

from cljr_test_adapter.correlation.base import CorrelationStrategy, Correlator
from cljr_test_adapter.correlation.markers import MarkerCorrelation
from cljr_test_adapter.correlation.summary import SummaryCorrelation
from cljr_test_adapter.models.discovery import DiscoveredTest
from cljr_test_adapter.models.result import TestResult
from cljr_test_adapter.runner.process import ProcessInvocation
from cljr_test_adapter.testing.factories import DiscoveredTestFactory, TestResultFactory
from cljr_test_adapter.testing.output import invocation


@dataclass(frozen=True, kw_only=True)
class FixedStrategy(CorrelationStrategy):
    """Returns a fixed answer and counts calls."""

    name: str = "fixed"
    answer: Sequence[TestResult] | None = None
    calls: list[int] = field(default_factory=list)

    def correlate(
        self,
        invocation: ProcessInvocation,
        tests: Sequence[DiscoveredTest],
    ) -> Sequence[TestResult] | None:
        self.calls.append(len(tests))
        return self.answer


def test_first_strategy_with_signal_wins() -> None:
    """Stops at the first strategy returning results."""
    expected = [TestResultFactory.build()]
    silent = FixedStrategy()
    answering = FixedStrategy(answer=expected)
    unused = FixedStrategy(answer=[])

    results = Correlator(strategies=[silent, answering, unused]).correlate(
        invocation(), []
    )

    assert results == expected
    assert silent.calls == [0]
    assert unused.calls == []


def test_empty_answer_is_a_signal() -> None:
    """An empty result list stops the chain."""
    empty = FixedStrategy(answer=[])
    fallback = FixedStrategy(answer=[TestResultFactory.build()])

    assert Correlator(strategies=[empty, fallback]).correlate(invocation(), []) == []
    assert fallback.calls == []


def test_returns_none_when_no_strategy_finds_signal() -> None:
    """Returns None when every strategy returns None."""
    correlator = Correlator(strategies=[FixedStrategy(), FixedStrategy()])

    assert correlator.correlate(invocation(), []) is None


def test_falls_back_to_summary_without_markers() -> None:
    """Markers take precedence; the summary is used only without markers."""
    tests = DiscoveredTestFactory.batch(5)
    correlator = Correlator(strategies=[MarkerCorrelation(), SummaryCorrelation()])
    output = invocation(
        "Loading namespace\n"
        "Ran 5 tests containing 12 assertions. 0 failures, 0 errors\n"
    )

    results = correlator.correlate(output, tests) or []

    assert len(results) == 5
    assert all(r.outcome == "passed" for r in results)


def test_markers_preferred_over_summary() -> None:
    """Marker results are used even when a summary is present."""
    a = DiscoveredTestFactory.build(namespace="ns", name="a")
    b = DiscoveredTestFactory.build(namespace="ns", name="b")
    correlator = Correlator(strategies=[MarkerCorrelation(), SummaryCorrelation()])
    output = invocation(
        "Testing ns/a\nRan 2 tests containing 2 assertions. 1 failures, 0 errors\n"
    )

    results = correlator.correlate(output, [a, b]) or []

    assert [r.test for r in results] == [a]
