"""Host handles used when the adapter runs from the command line."""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field

from cljr_test_adapter.models.discovery import DiscoveredTest
from cljr_test_adapter.models.result import TestOutcome, TestResult
from cljr_test_adapter.reporting.base import (
    DiscoverySink,
    FrameworkHandle,
    MessageLevel,
)

log = logging.getLogger(__name__)

LEVELS: Mapping[MessageLevel, int] = {
    "informational": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


@dataclass(frozen=True, kw_only=True)
class CollectingDiscoverySink(DiscoverySink):
    """Keeps discovered tests in discovery order."""

    tests: list[DiscoveredTest] = field(default_factory=list)

    def send_test_case(self, test: DiscoveredTest) -> None:
        self.tests.append(test)


@dataclass(frozen=True, kw_only=True)
class ConsoleFrameworkHandle(FrameworkHandle):
    """Mirrors host events into the log and keeps the results."""

    logger: logging.Logger = field(default=log)
    results: list[TestResult] = field(default_factory=list)

    def send_message(self, level: MessageLevel, message: str) -> None:
        self.logger.log(LEVELS[level], "%s", message)

    def record_start(self, test: DiscoveredTest) -> None:
        self.logger.debug("Started %s", test.fully_qualified_name)

    def record_end(self, test: DiscoveredTest, outcome: TestOutcome) -> None:
        self.logger.debug("Finished %s: %s", test.fully_qualified_name, outcome)

    def record_result(self, result: TestResult) -> None:
        self.results.append(result)
