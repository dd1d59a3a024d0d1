"""Interface for turning captured driver output into test results."""

import logging
from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Self

from cljr_test_adapter.config import AdapterConfig
from cljr_test_adapter.models.discovery import DiscoveredTest
from cljr_test_adapter.models.result import TestResult
from cljr_test_adapter.runner.process import ProcessInvocation

log = logging.getLogger(__name__)


@dataclass(frozen=True, kw_only=True)
class CorrelationStrategy(ABC):
    """Derives test results from the output of one driver invocation."""

    name: str

    @classmethod
    def from_config(cls, config: AdapterConfig) -> Self:
        """Build the strategy from adapter configuration."""
        return cls()

    @abstractmethod
    def correlate(
        self,
        invocation: ProcessInvocation,
        tests: Sequence[DiscoveredTest],
    ) -> Sequence[TestResult] | None:
        """Correlate captured output with the tests of a group.

        Args:
            invocation: Finished driver invocation
            tests: Tests the invocation was expected to run, in group order

        Returns:
            One result per correlated test, or None when the output holds
            no signal this strategy understands

        """


@dataclass(frozen=True, kw_only=True)
class Correlator:
    """Tries strategies in order; the first one finding a signal wins."""

    strategies: Sequence[CorrelationStrategy]

    def correlate(
        self,
        invocation: ProcessInvocation,
        tests: Sequence[DiscoveredTest],
    ) -> Sequence[TestResult] | None:
        for strategy in self.strategies:
            if (results := strategy.correlate(invocation, tests)) is not None:
                log.debug(
                    "Correlated %d result(s) using %s", len(results), strategy.name
                )
                return results
        return None
