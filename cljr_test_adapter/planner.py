"""Group tests into driver invocations."""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from cljr_test_adapter.models.discovery import DiscoveredTest


@dataclass(frozen=True, kw_only=True)
class RunGroup:
    """Tests run by one driver invocation.

    A group without a namespace runs the whole suite of its source.
    """

    source: Path
    namespace: str | None = None
    tests: Sequence[DiscoveredTest] = ()

    @property
    def mode(self) -> Literal["test", "test-namespace"]:
        return "test" if self.namespace is None else "test-namespace"

    def driver_arguments(self) -> Sequence[str]:
        """Arguments passed to the driver for this group."""
        args = ["--assembly", str(self.source), "--mode", self.mode]
        if self.namespace is not None:
            args += ["--namespace", self.namespace]
        return args


def plan(tests: Iterable[DiscoveredTest]) -> Sequence[RunGroup]:
    """Group tests by (source, namespace), keeping first-seen order."""
    grouped: dict[tuple[Path, str], list[DiscoveredTest]] = {}
    for test in tests:
        grouped.setdefault((test.source, test.namespace), []).append(test)

    return [
        RunGroup(source=source, namespace=namespace, tests=tuple(group))
        for (source, namespace), group in grouped.items()
    ]


def plan_whole_suite(sources: Iterable[Path]) -> Sequence[RunGroup]:
    """Create one whole-suite group per distinct source."""
    return [RunGroup(source=source) for source in dict.fromkeys(sources)]
