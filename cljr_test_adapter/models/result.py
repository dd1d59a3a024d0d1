"""Models for test execution results."""

from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal

from cljr_test_adapter.models.discovery import DiscoveredTest

TestOutcome = Literal["passed", "failed", "skipped"]


@dataclass(frozen=True, kw_only=True)
class TestResult:
    """Terminal outcome of a single discovered test."""

    __test__ = False

    test: DiscoveredTest
    outcome: TestOutcome
    start_time: datetime
    end_time: datetime
    message: str | None = None

    @property
    def duration(self) -> float:
        """Duration in seconds between start and end."""
        return (self.end_time - self.start_time).total_seconds()


@dataclass(frozen=True, kw_only=True)
class RunSummary:
    """Aggregate counts parsed from a driver's summary line."""

    tests: int
    failures: int
    errors: int
    assertions: int | None = None

    @property
    def succeeded(self) -> bool:
        return self.failures == 0 and self.errors == 0


@dataclass(frozen=True, kw_only=True)
class RunReport:
    """Everything reported during one execution run."""

    results: Sequence[TestResult] = field(default_factory=list)
    errors: Sequence[str] = field(default_factory=list)

    @property
    def passed(self) -> int:
        return sum(1 for r in self.results if r.outcome == "passed")

    @property
    def failed(self) -> int:
        return sum(1 for r in self.results if r.outcome == "failed")

    @property
    def skipped(self) -> int:
        return sum(1 for r in self.results if r.outcome == "skipped")
