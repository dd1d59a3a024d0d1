"""Discover deftest declarations in test-source files without executing them."""

import logging
import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from pathlib import Path

from cljr_test_adapter.config import AdapterConfig
from cljr_test_adapter.models.discovery import DiscoveredTest, TestFile
from cljr_test_adapter.reporting.base import DiscoverySink, MessageLogger

log = logging.getLogger(__name__)

DEFTEST_PATTERN = re.compile(r"^\s*\(deftest\s+([A-Za-z0-9\-_]+)", re.MULTILINE)


def infer_namespace(path: Path) -> str:
    """Infer a namespace from a file name (e.g. ``math_test.cljr`` -> ``math-test``)."""
    return path.stem.replace("_", "-")


def line_number(content: str, offset: int) -> int:
    """Return the 1-based line number of a character offset."""
    return content.count("\n", 0, offset) + 1


def iter_test_files(root_dir: Path, suffix: str = "_test.cljr") -> Iterator[Path]:
    """Yield files under root_dir whose name ends with suffix.

    Files are yielded in filesystem traversal order. A missing directory
    yields nothing.
    """
    for dirpath, _dirnames, filenames in root_dir.walk():
        for filename in filenames:
            if filename.endswith(suffix):
                yield dirpath / filename


def read_test_file(path: Path) -> TestFile:
    """Read a test file and infer its namespace."""
    return TestFile(
        path=path.absolute(),
        namespace=infer_namespace(path),
        content=path.read_text(encoding="utf-8", errors="replace"),
    )


def extract_tests(test_file: TestFile, source: Path) -> Iterator[DiscoveredTest]:
    """Yield one DiscoveredTest per deftest declaration, in file order."""
    for match in DEFTEST_PATTERN.finditer(test_file.content):
        yield DiscoveredTest(
            namespace=test_file.namespace,
            name=match.group(1),
            source_file=test_file.path,
            line_number=line_number(test_file.content, match.start(1)),
            source=source,
        )


def discover(
    root_dir: Path,
    source: Path,
    suffix: str = "_test.cljr",
) -> Iterator[DiscoveredTest]:
    """Lazily discover all tests declared under root_dir.

    Args:
        root_dir: Directory holding the test sources
        source: Compiled artifact that will be loaded to run the tests
        suffix: File name suffix identifying test files

    Returns:
        Iterator over discovered tests. Re-invoke to re-scan.

    """
    for path in iter_test_files(root_dir, suffix):
        test_file = read_test_file(path)
        log.debug("Scanning %s (namespace %s)", path, test_file.namespace)
        yield from extract_tests(test_file, source)


@dataclass(frozen=True, kw_only=True)
class TestDiscoverer:
    """Discovers tests for compiled artifacts and registers them with the host."""

    __test__ = False

    config: AdapterConfig
    logger: MessageLogger | None = None

    def discover_tests(self, sources: Iterable[Path], sink: DiscoverySink) -> int:
        """Discover tests for every artifact and send them to the sink.

        Returns:
            Number of tests sent to the sink

        """
        self._message("Starting test discovery")
        count = 0

        for source in sources:
            self._message(f"Discovering tests in: {source}")
            test_dir = self.config.test_dir_for(source)

            if not test_dir.is_dir():
                self._message(f"No test directory found at: {test_dir}")
                continue

            for test in discover(test_dir, source, self.config.test_file_suffix):
                sink.send_test_case(test)
                count += 1
                self._message(f"Discovered test: {test.fully_qualified_name}")

        self._message(f"Test discovery completed: {count} test(s)")
        return count

    def _message(self, message: str) -> None:
        if self.logger is None:
            log.info("%s", message)
        else:
            self.logger.send_message("informational", message)
