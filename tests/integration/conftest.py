"""Fixtures for integration tests running a fake driver process."""

import sys
from pathlib import Path
from typing import Protocol

import pytest

from cljr_test_adapter.config import AdapterConfig

FAKE_DRIVER = '''\
"""Stand-in for the test driver: prints canned clojure.test output."""

import sys

args = sys.argv[1:]
mode = args[args.index("--mode") + 1]

if mode == "test-namespace":
    namespace = args[args.index("--namespace") + 1]
    if namespace == "math-test":
        print("Testing math-test/addition")
        print("")
        print("Testing math-test/subtraction")
        print("FAIL in (subtraction) (math_test.cljr:8)")
        print("expected: (= 1 (- 2 2))")
        print("  actual: (not (= 1 0))")
        print("Ran 2 tests containing 2 assertions.")
        print("1 failures, 0 errors.")
    elif namespace == "strings-test":
        print("Ran 2 tests containing 3 assertions.")
        print("0 failures, 0 errors.")
    else:
        print(f"Could not load namespace {namespace}", file=sys.stderr)
        sys.exit(1)
else:
    for name in ("math-test/addition", "math-test/subtraction"):
        print(f"Testing {name}")
    print("Ran 5 tests containing 7 assertions.")
    print("1 failures, 0 errors.")
'''

MATH_TEST = """\
(ns math-test
  (:require [clojure.test :refer [deftest is]]))

(deftest addition
  (is (= 4 (+ 2 2))))

(deftest subtraction
  (is (= 1 (- 2 2))))
"""

STRINGS_TEST = """\
(ns strings-test
  (:require [clojure.test :refer [deftest is]]))

(deftest upper-case
  (is (= "A" (clojure.string/upper-case "a"))))

(deftest lower-case
  (is (= "a" (clojure.string/lower-case "A"))))
"""


class WriteDriverFn(Protocol):
    """Protocol for driver creation function."""

    def __call__(self, body: str) -> Path:
        """Write a driver script and return its path."""


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """Create a project with test sources, an artifact and a fake driver."""
    (tmp_path / "test" / "nested").mkdir(parents=True)
    (tmp_path / "test" / "math_test.cljr").write_text(MATH_TEST)
    (tmp_path / "test" / "nested" / "strings_test.cljr").write_text(STRINGS_TEST)
    (tmp_path / "test" / "helpers.cljr").write_text("(deftest not-a-test-file)\n")
    (tmp_path / "tools").mkdir()
    (tmp_path / "tools" / "driver.py").write_text(FAKE_DRIVER)
    artifact_dir = tmp_path / "bin" / "Debug" / "net9.0"
    artifact_dir.mkdir(parents=True)
    (artifact_dir / "app.dll").write_text("")
    return tmp_path


@pytest.fixture
def source(project: Path) -> Path:
    return project / "bin" / "Debug" / "net9.0" / "app.dll"


@pytest.fixture
def config() -> AdapterConfig:
    """Run the fake driver with the current interpreter."""
    return AdapterConfig(
        launcher=sys.executable,
        driver_candidates=["{project_dir}/tools/driver.py"],
    )


@pytest.fixture
def write_driver(tmp_path: Path) -> WriteDriverFn:
    """Return a function to write ad-hoc driver scripts."""

    def _write(body: str) -> Path:
        path = tmp_path / "adhoc_driver.py"
        path.write_text(body)
        return path

    return _write
