"""Abstract interfaces of the host test framework.

The adapter never owns the host's data structures; it only talks to them
through these callbacks.
"""

from abc import ABC, abstractmethod
from typing import Literal, TypeAlias

from cljr_test_adapter.models.discovery import DiscoveredTest
from cljr_test_adapter.models.result import TestOutcome, TestResult

MessageLevel: TypeAlias = Literal["informational", "warning", "error"]


class MessageLogger(ABC):
    """Receives free-form diagnostic messages."""

    @abstractmethod
    def send_message(self, level: MessageLevel, message: str) -> None:
        """Send a message to the host.

        Args:
            level: Severity of the message
            message: Text of the message

        """


class DiscoverySink(ABC):
    """Receives test identities found during discovery."""

    @abstractmethod
    def send_test_case(self, test: DiscoveredTest) -> None:
        """Register a discovered test with the host."""


class FrameworkHandle(MessageLogger):
    """Receives execution events for individual tests.

    For each test the adapter sends ``record_start``, then ``record_end``
    and ``record_result`` exactly once.
    """

    @abstractmethod
    def record_start(self, test: DiscoveredTest) -> None:
        """Notify the host that a test started."""

    @abstractmethod
    def record_end(self, test: DiscoveredTest, outcome: TestOutcome) -> None:
        """Notify the host that a test finished with the given outcome."""

    @abstractmethod
    def record_result(self, result: TestResult) -> None:
        """Deliver the full result of a finished test."""
