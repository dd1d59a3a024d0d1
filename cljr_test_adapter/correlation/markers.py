"""Fine-grained correlation from per-test marker lines."""

from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime
from typing import Self

from cljr_test_adapter.config import AdapterConfig
from cljr_test_adapter.correlation.base import CorrelationStrategy
from cljr_test_adapter.models.discovery import DiscoveredTest
from cljr_test_adapter.models.result import TestResult
from cljr_test_adapter.runner.process import ProcessInvocation


def start_markers(test: DiscoveredTest) -> tuple[str, str]:
    """Texts that announce the start of a test in driver output."""
    return f"Testing {test.fully_qualified_name}", f"test-{test.name}"


@dataclass(kw_only=True)
class _ActiveTest:
    test: DiscoveredTest
    started_at: datetime
    errors: list[str] = field(default_factory=list)

    def finish(self, ended_at: datetime) -> TestResult:
        if self.errors:
            return TestResult(
                test=self.test,
                outcome="failed",
                start_time=self.started_at,
                end_time=ended_at,
                message="\n".join(self.errors),
            )
        return TestResult(
            test=self.test,
            outcome="passed",
            start_time=self.started_at,
            end_time=ended_at,
        )


@dataclass(frozen=True, kw_only=True)
class MarkerCorrelation(CorrelationStrategy):
    """Matches marker lines such as ``Testing ns/name`` to individual tests.

    Lines after a marker that contain a failure indicator are attributed
    to the active test. Each test is started at most once; when several
    tests share a marker (duplicate names) they are taken in group order.
    """

    name: str = "markers"
    failure_indicators: Sequence[str] = ("FAIL", "ERROR", "expected:")

    @classmethod
    def from_config(cls, config: AdapterConfig) -> Self:
        return cls(failure_indicators=tuple(config.failure_indicators))

    def correlate(
        self,
        invocation: ProcessInvocation,
        tests: Sequence[DiscoveredTest],
    ) -> Sequence[TestResult] | None:
        markers = [start_markers(test) for test in tests]
        started: set[int] = set()
        results: list[TestResult] = []
        active: _ActiveTest | None = None

        for line in invocation.stdout:
            index = self._match_start(line.text, markers, started)
            if index is not None:
                if active is not None:
                    results.append(active.finish(line.received_at))
                active = _ActiveTest(test=tests[index], started_at=line.received_at)
                started.add(index)

            if active is not None and self._is_failure(line.text):
                active.errors.append(line.text)

        if active is not None:
            results.append(active.finish(invocation.finished_at))

        return results if started else None

    def _match_start(
        self,
        text: str,
        markers: Sequence[tuple[str, str]],
        started: set[int],
    ) -> int | None:
        """Return the unstarted test whose longest marker occurs in text.

        The most specific marker wins, so ``ns/add`` never claims the
        line of ``ns/add-two``. Ties go to the earliest test in the group.
        """
        best: int | None = None
        best_length = 0
        for index, test_markers in enumerate(markers):
            if index in started:
                continue
            for marker in test_markers:
                if len(marker) > best_length and marker in text:
                    best, best_length = index, len(marker)
        return best

    def _is_failure(self, text: str) -> bool:
        return any(indicator in text for indicator in self.failure_indicators)
