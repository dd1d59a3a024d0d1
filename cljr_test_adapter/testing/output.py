"""Helpers for building captured driver output in tests."""

from datetime import timedelta
from pathlib import Path

from cljr_test_adapter.runner.process import OutputLine, ProcessInvocation
from cljr_test_adapter.testing.factories import STARTED_AT


def invocation(
    stdout: str = "",
    *,
    stderr: str = "",
    exit_code: int = 0,
) -> ProcessInvocation:
    """Create a finished invocation whose lines arrive one second apart."""
    stdout_lines = [line for line in stdout.splitlines() if line]
    stderr_lines = [line for line in stderr.splitlines() if line]

    def _lines(texts: list[str]) -> list[OutputLine]:
        return [
            OutputLine(text=text, received_at=STARTED_AT + timedelta(seconds=i + 1))
            for i, text in enumerate(texts)
        ]

    return ProcessInvocation(
        command=["dotnet", "driver.dll", "--mode", "test"],
        cwd=Path("/project"),
        started_at=STARTED_AT,
        stdout=_lines(stdout_lines),
        stderr=_lines(stderr_lines),
        exited_at=STARTED_AT + timedelta(seconds=len(stdout_lines) + 1),
        exit_code=exit_code,
    )
