"""Test executor coordinating driver runs and result reporting."""

import logging
import threading
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from pathlib import Path

from cljr_test_adapter.config import AdapterConfig
from cljr_test_adapter.correlation.base import Correlator
from cljr_test_adapter.correlation.loading import build_correlator
from cljr_test_adapter.correlation.summary import summarize_suite
from cljr_test_adapter.errors import DriverLaunchError, DriverNotFoundError
from cljr_test_adapter.models.discovery import DiscoveredTest
from cljr_test_adapter.models.result import RunReport, TestResult
from cljr_test_adapter.planner import RunGroup, plan, plan_whole_suite
from cljr_test_adapter.reporting.base import FrameworkHandle
from cljr_test_adapter.runner.driver import resolve_driver
from cljr_test_adapter.runner.process import ProcessInvocation, ProcessRunner

log = logging.getLogger(__name__)


@dataclass(kw_only=True)
class _RunSession:
    """Reporting state of one run. Each test identity is reported once."""

    handle: FrameworkHandle
    results: list[TestResult] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    reported: set[DiscoveredTest] = field(default_factory=set)
    drivers: dict[Path, Path | None] = field(default_factory=dict)

    def report(self, results: Iterable[TestResult]) -> None:
        for result in results:
            if result.test in self.reported:
                log.warning(
                    "Ignoring second result for %s", result.test.fully_qualified_name
                )
                continue

            self.reported.add(result.test)
            self.handle.record_start(result.test)
            self.handle.record_end(result.test, result.outcome)
            self.handle.record_result(result)
            self.results.append(result)

    def info(self, message: str) -> None:
        self.handle.send_message("informational", message)

    def error(self, message: str) -> None:
        self.errors.append(message)
        self.handle.send_message("error", message)

    def finish(self) -> RunReport:
        report = RunReport(results=list(self.results), errors=list(self.errors))
        message = (
            f"Test execution completed: {report.passed} passed, "
            f"{report.failed} failed, {report.skipped} skipped, "
            f"{len(report.errors)} error(s)"
        )
        if report.failed or report.errors:
            self.handle.send_message("error", message)
        else:
            self.info(message)
        return report


@dataclass(frozen=True, kw_only=True)
class TestExecutor:
    """Runs groups of tests one at a time and reports their results.

    Cancellation is cooperative: it is checked between groups and never
    interrupts a running driver.
    """

    __test__ = False

    config: AdapterConfig
    handle: FrameworkHandle
    correlator: Correlator
    runner: ProcessRunner
    _cancelled: threading.Event = field(
        default_factory=threading.Event, init=False, repr=False
    )

    @classmethod
    def from_config(
        cls, config: AdapterConfig, handle: FrameworkHandle
    ) -> "TestExecutor":
        """Create an executor with the configured correlators and launcher."""
        return cls(
            config=config,
            handle=handle,
            correlator=build_correlator(config),
            runner=ProcessRunner(launcher=config.launcher),
        )

    def cancel(self) -> None:
        """Request cancellation before the next group starts."""
        log.info("Cancellation requested")
        self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    async def run_tests(self, tests: Iterable[DiscoveredTest]) -> RunReport:
        """Run selected tests, one driver invocation per namespace.

        Args:
            tests: Tests to run, usually produced by discovery

        Returns:
            Everything reported during the run

        """
        self._cancelled.clear()
        session = _RunSession(handle=self.handle)
        session.info("Starting test execution")

        groups = plan(tests)
        log.info("Planned %d group(s)", len(groups))

        for group in groups:
            if self.cancelled:
                log.info("Run cancelled, skipping remaining groups")
                break

            if (driver := self._resolve_driver(group.source, session)) is None:
                continue

            await self._run_namespace(group, driver, session)

        return session.finish()

    async def run_all(self, sources: Iterable[Path]) -> RunReport:
        """Run every test of each source in a single driver invocation.

        The outcome is reported as one synthetic test per source.
        """
        self._cancelled.clear()
        session = _RunSession(handle=self.handle)
        session.info("Starting full test run")

        for group in plan_whole_suite(sources):
            if self.cancelled:
                log.info("Run cancelled, skipping remaining sources")
                break

            if (driver := self._resolve_driver(group.source, session)) is None:
                continue

            await self._run_whole_suite(group, driver, session)

        return session.finish()

    def _resolve_driver(self, source: Path, session: _RunSession) -> Path | None:
        """Resolve the driver once per source; report when it is missing."""
        if source in session.drivers:
            return session.drivers[source]

        project_dir = self.config.project_dir_for(source)
        try:
            driver = resolve_driver(project_dir, self.config.driver_candidates)
        except DriverNotFoundError as e:
            session.error(str(e))
            driver = None
        else:
            log.info("Using driver %s for %s", driver, source)

        session.drivers[source] = driver
        return driver

    async def _launch(
        self,
        group: RunGroup,
        driver: Path,
        session: _RunSession,
        *,
        stream_output: bool = False,
    ) -> ProcessInvocation | None:
        project_dir = self.config.project_dir_for(group.source)
        try:
            return await self.runner.run(
                group,
                driver,
                project_dir,
                on_stdout=session.info if stream_output else None,
            )
        except DriverLaunchError as e:
            session.error(str(e))
            return None

    async def _run_namespace(
        self, group: RunGroup, driver: Path, session: _RunSession
    ) -> None:
        log.info(
            "Running %d test(s) in namespace %s", len(group.tests), group.namespace
        )
        if (invocation := await self._launch(group, driver, session)) is None:
            return

        results = self.correlator.correlate(invocation, group.tests)
        if results is None:
            session.error(
                f"No test results could be parsed for namespace {group.namespace}"
            )
        else:
            session.report(results)
            self._warn_unreported(group.tests, results)

        self._check_exit_code(invocation, session)

    async def _run_whole_suite(
        self, group: RunGroup, driver: Path, session: _RunSession
    ) -> None:
        invocation = await self._launch(group, driver, session, stream_output=True)
        if invocation is None:
            return

        project_dir = self.config.project_dir_for(group.source)
        summarized = summarize_suite(invocation, group.source, project_dir)
        if summarized is None:
            session.error(f"No test summary could be parsed for {group.source}")
        else:
            result, summary = summarized
            session.report([result])
            if result.message:
                self.handle.send_message("error", result.message)
            else:
                session.info(f"All {summary.tests} Clojure tests passed successfully")

        self._check_exit_code(invocation, session)

    def _check_exit_code(
        self, invocation: ProcessInvocation, session: _RunSession
    ) -> None:
        if invocation.exit_code != 0:
            session.error(
                f"Test execution failed with exit code {invocation.exit_code}: "
                f"{invocation.stderr_text}"
            )

    def _warn_unreported(
        self, tests: Sequence[DiscoveredTest], results: Sequence[TestResult]
    ) -> None:
        correlated = {result.test for result in results}
        for test in tests:
            if test not in correlated:
                log.warning(
                    "No output found for %s (%s:%s)",
                    test.fully_qualified_name,
                    test.source_file,
                    test.line_number,
                )
