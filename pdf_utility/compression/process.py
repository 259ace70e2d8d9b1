"""Async external command execution with a bounded timeout.

The event loop is never blocked while a tool runs: processes are spawned
with asyncio and awaited, and a process that outlives its timeout, or whose
awaiting task is cancelled, is killed and reaped before control returns.
"""

import asyncio
import contextlib
import logging
import time
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)

# Keep tool chatter out of logs and error reports
MAX_OUTPUT_CHARS = 2000


@dataclass(frozen=True)
class CommandOutcome:
    """Result of one external command run.

    Attributes:
        returncode: Exit status, or None when the process was killed on timeout.
        stdout: Decoded standard output (tail only).
        stderr: Decoded standard error (tail only).
        timed_out: Whether the timeout expired before the process exited.
        elapsed_ms: Wall-clock duration in milliseconds.
    """

    returncode: int | None
    stdout: str = ""
    stderr: str = ""
    timed_out: bool = False
    elapsed_ms: int = 0

    @property
    def ok(self) -> bool:
        return self.returncode == 0 and not self.timed_out


class CommandRunner(Protocol):
    """Callable that runs ``argv`` and reports how it went.

    Implementations raise ``OSError`` when the program cannot be spawned.
    """

    async def __call__(
        self,
        argv: Sequence[str],
        *,
        cwd: Path | None = None,
        timeout: float,
    ) -> CommandOutcome: ...


def _decode(data: bytes | None) -> str:
    if not data:
        return ""
    return data.decode("utf-8", errors="replace").strip()[-MAX_OUTPUT_CHARS:]


async def _kill(process: asyncio.subprocess.Process) -> None:
    if process.returncode is None:
        with contextlib.suppress(ProcessLookupError):
            process.kill()
    await process.wait()


async def run_command(
    argv: Sequence[str],
    *,
    cwd: Path | None = None,
    timeout: float,
) -> CommandOutcome:
    """Run an external program and wait for it without blocking the loop.

    Args:
        argv: Program and arguments; no shell is involved.
        cwd: Working directory for the child process.
        timeout: Seconds to wait before the process is killed.

    Returns:
        CommandOutcome describing exit status and captured output.

    Raises:
        OSError: If the program cannot be started.
    """
    start = time.perf_counter()
    process = await asyncio.create_subprocess_exec(
        *argv,
        cwd=str(cwd) if cwd is not None else None,
        stdin=asyncio.subprocess.DEVNULL,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
    )

    try:
        stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=timeout)
    except asyncio.TimeoutError:
        await _kill(process)
        elapsed_ms = int((time.perf_counter() - start) * 1000)
        logger.debug(f"Command timed out after {timeout}s: {argv[0]}")
        return CommandOutcome(returncode=None, timed_out=True, elapsed_ms=elapsed_ms)
    except asyncio.CancelledError:
        await _kill(process)
        raise

    elapsed_ms = int((time.perf_counter() - start) * 1000)
    return CommandOutcome(
        returncode=process.returncode,
        stdout=_decode(stdout),
        stderr=_decode(stderr),
        elapsed_ms=elapsed_ms,
    )
