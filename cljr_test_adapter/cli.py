"""CLI entry point for the Clojure CLR test adapter."""

import argparse
import asyncio
import json
import logging
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from cljr_test_adapter.config import AdapterConfig
from cljr_test_adapter.executor import TestExecutor
from cljr_test_adapter.models.discovery import DiscoveredTest
from cljr_test_adapter.models.result import RunReport
from cljr_test_adapter.reporting.console import (
    CollectingDiscoverySink,
    ConsoleFrameworkHandle,
)
from cljr_test_adapter.scanner import TestDiscoverer

EXIT_OK = 0
EXIT_TEST_FAILURES = 1
EXIT_ENVIRONMENT_ERROR = 2

STATUS_SYMBOLS = {
    "passed": "✅",
    "failed": "❌",
    "skipped": "⏭️",
}


def log_results_summary(log: logging.Logger, report: RunReport) -> None:
    """Log a formatted summary of test results."""
    log.info("=" * 80)
    log.info("Test Results Summary:")
    log.info("=" * 80)

    for result in report.results:
        symbol = STATUS_SYMBOLS.get(result.outcome, "?")
        log.info(
            "%s %s: %s (%.2fs)",
            symbol,
            result.test.fully_qualified_name,
            result.outcome,
            result.duration,
        )
        if result.message:
            log.info("  Message: %s", result.message)

    for error in report.errors:
        log.info("❗ %s", error)


def load_config(config_json: str | None) -> AdapterConfig:
    """Parse adapter configuration from a JSON document."""
    if not config_json:
        return AdapterConfig()
    return AdapterConfig(**json.loads(config_json))


def discover_tests(
    config: AdapterConfig, sources: Sequence[Path]
) -> Sequence[DiscoveredTest]:
    """Discover the tests of all sources."""
    sink = CollectingDiscoverySink()
    TestDiscoverer(config=config).discover_tests(sources, sink)
    return sink.tests


def select_tests(
    tests: Sequence[DiscoveredTest], names: Sequence[str]
) -> Sequence[DiscoveredTest]:
    """Keep tests whose fully-qualified name or namespace was requested."""
    wanted = set(names)
    return [
        test
        for test in tests
        if test.fully_qualified_name in wanted or test.namespace in wanted
    ]


def format_discovery(tests: Sequence[DiscoveredTest]) -> dict[str, Any]:
    """Format discovered tests for JSON output."""
    return {
        "total": len(tests),
        "tests": [
            {
                "display_name": test.display_name,
                "fully_qualified_name": test.fully_qualified_name,
                "source": str(test.source),
                "code_file_path": str(test.source_file),
                "line_number": test.line_number,
                "traits": dict(test.traits),
            }
            for test in tests
        ],
    }


def format_output(report: RunReport) -> dict[str, Any]:
    """Format a run report for JSON output."""
    return {
        "total": len(report.results),
        "passed": report.passed,
        "failed": report.failed,
        "skipped": report.skipped,
        "errors": list(report.errors),
        "results": [
            {
                "test": result.test.fully_qualified_name,
                "outcome": result.outcome,
                "duration": result.duration,
                "message": result.message,
                "code_file_path": str(result.test.source_file),
                "line_number": result.test.line_number,
            }
            for result in report.results
        ],
    }


def exit_code_for(report: RunReport) -> int:
    """Map a run report to the process exit status."""
    if report.errors:
        return EXIT_ENVIRONMENT_ERROR
    if report.failed:
        return EXIT_TEST_FAILURES
    return EXIT_OK


def discover(config: AdapterConfig, sources: Sequence[Path]) -> int:
    """Discover tests and print them as JSON."""
    tests = discover_tests(config, sources)
    print(json.dumps(format_discovery(tests), indent=2))
    return EXIT_OK


async def run(
    config: AdapterConfig,
    sources: Sequence[Path],
    test_names: Sequence[str] = (),
) -> int:
    """Run tests and return exit code.

    Without test names the whole suite of every source runs in one driver
    invocation per source.
    """
    log = logging.getLogger("cljr_test_adapter")
    handle = ConsoleFrameworkHandle()
    executor = TestExecutor.from_config(config, handle)

    if test_names:
        tests = select_tests(discover_tests(config, sources), test_names)
        if not tests:
            log.info("No tests matched: %s", ", ".join(test_names))
            print(json.dumps(format_output(RunReport()), indent=2))
            return EXIT_OK

        log.info("Running %d selected test(s)...", len(tests))
        report = await executor.run_tests(tests)
    else:
        log.info("Running all tests for %d source(s)...", len(sources))
        report = await executor.run_all(sources)

    log_results_summary(log, report)
    print(json.dumps(format_output(report), indent=2))

    return exit_code_for(report)


def main() -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Discover and run Clojure CLR tests through the test driver"
    )
    parser.add_argument(
        "--config",
        default=None,
        help="JSON configuration for the adapter",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    discover_parser = subparsers.add_parser("discover", help="List discovered tests")
    discover_parser.add_argument(
        "--source",
        type=Path,
        action="append",
        required=True,
        help="Compiled artifact owning the tests (repeatable)",
    )

    run_parser = subparsers.add_parser("run", help="Run tests")
    run_parser.add_argument(
        "--source",
        type=Path,
        action="append",
        required=True,
        help="Compiled artifact owning the tests (repeatable)",
    )
    run_parser.add_argument(
        "--test",
        action="append",
        default=[],
        help="Fully-qualified test name or namespace to run (repeatable)",
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    config = load_config(args.config)
    sources = [source.absolute() for source in args.source]

    if args.command == "discover":
        exit_code = discover(config, sources)
    else:
        exit_code = asyncio.run(run(config, sources, args.test))
    sys.exit(exit_code)


if __name__ == "__main__":  # pragma: no cover
    main()
