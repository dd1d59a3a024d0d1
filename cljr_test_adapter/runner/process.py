"""Run the driver for one group and capture its output."""

import asyncio
import contextlib
import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path

from cljr_test_adapter.errors import DriverLaunchError
from cljr_test_adapter.planner import RunGroup

log = logging.getLogger(__name__)

STREAM_LIMIT = 1024 * 1024


@dataclass(frozen=True, kw_only=True)
class OutputLine:
    """A line of driver output and the time it arrived."""

    text: str
    received_at: datetime


@dataclass(kw_only=True)
class ProcessInvocation:
    """One launch of the driver process.

    stdout and stderr are kept as independent ordered sequences.
    """

    command: Sequence[str]
    cwd: Path
    started_at: datetime
    stdout: list[OutputLine] = field(default_factory=list)
    stderr: list[OutputLine] = field(default_factory=list)
    exited_at: datetime | None = None
    exit_code: int | None = None

    @property
    def stdout_text(self) -> str:
        return "\n".join(line.text for line in self.stdout)

    @property
    def stderr_text(self) -> str:
        return "\n".join(line.text for line in self.stderr)

    @property
    def finished_at(self) -> datetime:
        """Exit time, or the last line's arrival while still running."""
        if self.exited_at is not None:
            return self.exited_at
        if self.stdout:
            return self.stdout[-1].received_at
        return self.started_at


async def _next_line(stream: asyncio.StreamReader) -> bytes:
    """Read one line of any length; b"" at end of stream.

    Unlike ``StreamReader.readline`` a line longer than the stream limit
    is drained in chunks instead of raising.
    """
    chunks: list[bytes] = []
    while True:
        try:
            chunks.append(await stream.readuntil(b"\n"))
        except asyncio.IncompleteReadError as e:
            chunks.append(e.partial)
        except asyncio.LimitOverrunError as e:
            chunks.append(await stream.read(e.consumed))
            continue
        return b"".join(chunks)


async def _read_lines(
    stream: asyncio.StreamReader,
    sink: list[OutputLine],
    on_line: Callable[[str], None] | None = None,
    max_length: int = STREAM_LIMIT,
) -> None:
    """Append every non-empty line of stream to sink as it arrives.

    Lines longer than max_length characters are truncated.
    """
    while raw := await _next_line(stream):
        text = raw.decode("utf-8", errors="replace").rstrip("\r\n")
        if not text:
            continue
        if len(text) > max_length:
            log.warning("Truncating driver output line of %d characters", len(text))
            text = text[:max_length]
        sink.append(OutputLine(text=text, received_at=datetime.now(timezone.utc)))
        if on_line is not None:
            on_line(text)


@dataclass(frozen=True, kw_only=True)
class ProcessRunner:
    """Launches the driver for run groups."""

    launcher: str | None = None

    def build_command(self, group: RunGroup, driver: Path) -> Sequence[str]:
        """Return the argument vector for running a group."""
        prefix = [self.launcher] if self.launcher else []
        return [*prefix, str(driver), *group.driver_arguments()]

    async def run(
        self,
        group: RunGroup,
        driver: Path,
        cwd: Path,
        on_stdout: Callable[[str], None] | None = None,
    ) -> ProcessInvocation:
        """Run the driver for a group and wait for it to exit.

        Args:
            group: Tests to run
            driver: Path of the driver executable
            cwd: Working directory (the project root)
            on_stdout: Called with each stdout line as it arrives

        Returns:
            The finished invocation with captured output and exit code

        Raises:
            DriverLaunchError: If the process cannot be started

        """
        command = self.build_command(group, driver)
        log.info("Launching driver: %s (cwd=%s)", " ".join(command), cwd)

        invocation = ProcessInvocation(
            command=command,
            cwd=cwd,
            started_at=datetime.now(timezone.utc),
        )

        try:
            process = await asyncio.create_subprocess_exec(
                *command,
                cwd=cwd,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                limit=STREAM_LIMIT,
            )
        except OSError as e:
            raise DriverLaunchError(f"Failed to launch {command[0]}: {e}") from e

        assert process.stdout is not None
        assert process.stderr is not None

        try:
            async with asyncio.TaskGroup() as readers:
                readers.create_task(
                    _read_lines(process.stdout, invocation.stdout, on_stdout)
                )
                readers.create_task(_read_lines(process.stderr, invocation.stderr))
        except BaseException:
            with contextlib.suppress(ProcessLookupError):
                process.kill()
            raise
        finally:
            invocation.exit_code = await process.wait()
        invocation.exited_at = datetime.now(timezone.utc)

        log.info(
            "Driver exited with code %d (%d stdout line(s), %d stderr line(s))",
            invocation.exit_code,
            len(invocation.stdout),
            len(invocation.stderr),
        )
        return invocation
