"""Run a single compression strategy in isolation.

A strategy always writes to its own candidate file, never to the requested
output path. Any failure (spawn error, timeout, bad exit status, missing
or empty output) is returned as data on the attempt so the remaining
strategies still run.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from pdf_utility.compression.files import file_size, safe_unlink
from pdf_utility.compression.process import CommandRunner, run_command
from pdf_utility.compression.strategies import CompressionStrategy, candidate_path
from pdf_utility.compression.tools import ToolAvailability, ToolFamily
from pdf_utility.models.schemas import AttemptReport

logger = logging.getLogger(__name__)

DEFAULT_STRATEGY_TIMEOUT = 60.0


class StrategyErrorKind(str, Enum):
    """Ways a strategy run can fail."""

    SPAWN_FAILED = "spawn_failed"
    TIMEOUT = "timeout"
    EXIT_STATUS = "exit_status"
    MISSING_OUTPUT = "missing_output"
    EMPTY_OUTPUT = "empty_output"


@dataclass(frozen=True)
class StrategyError:
    """Why a strategy run produced no usable candidate."""

    kind: StrategyErrorKind
    detail: str = ""

    def __str__(self) -> str:
        return f"{self.kind.value}: {self.detail}" if self.detail else self.kind.value


@dataclass(frozen=True)
class CompressionAttempt:
    """One candidate produced (or not) by a strategy.

    The synthetic attempt standing for the untouched input has
    ``is_original=True`` and is never deleted.
    """

    strategy: str
    path: Path
    size: int
    family: ToolFamily | None = None
    error: StrategyError | None = None
    elapsed_ms: int = 0
    is_original: bool = False

    @property
    def succeeded(self) -> bool:
        return self.error is None and self.size > 0

    def to_report(self) -> AttemptReport:
        return AttemptReport(
            strategy=self.strategy,
            tool_family=self.family.value if self.family else "",
            size=self.size,
            succeeded=self.succeeded,
            error=str(self.error) if self.error else None,
            elapsed_ms=self.elapsed_ms,
        )


def _failed(
    strategy: CompressionStrategy,
    candidate: Path,
    error: StrategyError,
    elapsed_ms: int = 0,
) -> CompressionAttempt:
    logger.warning(f"Strategy {strategy.name} failed: {error}")
    return CompressionAttempt(
        strategy=strategy.name,
        path=candidate,
        size=0,
        family=strategy.family,
        error=error,
        elapsed_ms=elapsed_ms,
    )


async def execute_strategy(
    strategy: CompressionStrategy,
    input_path: Path,
    work_dir: Path,
    *,
    request_id: str,
    availability: ToolAvailability,
    runner: CommandRunner = run_command,
    timeout: float = DEFAULT_STRATEGY_TIMEOUT,
) -> CompressionAttempt:
    """Run one strategy against the input file.

    Args:
        strategy: Strategy to run. Its tool family must be available.
        input_path: Source PDF (read only).
        work_dir: Directory receiving the candidate file.
        request_id: Unique identifier of the compression request.
        availability: Tool snapshot for this request.
        runner: Command runner used to invoke the tool.
        timeout: Seconds before the tool is killed.

    Returns:
        CompressionAttempt with the candidate size, or size 0 and an error.
    """
    candidate = candidate_path(work_dir, request_id, strategy)
    safe_unlink(candidate)

    argv = strategy.argv(availability.executable(strategy.family), input_path, candidate)
    logger.debug(f"Running strategy {strategy.name}: {' '.join(argv)}")

    try:
        outcome = await runner(argv, cwd=work_dir, timeout=timeout)
    except Exception as e:
        return _failed(strategy, candidate, StrategyError(StrategyErrorKind.SPAWN_FAILED, str(e)))

    if outcome.timed_out:
        return _failed(
            strategy,
            candidate,
            StrategyError(StrategyErrorKind.TIMEOUT, f"no result after {timeout}s"),
            outcome.elapsed_ms,
        )

    if outcome.returncode not in strategy.success_exit_codes:
        detail = f"exit status {outcome.returncode}"
        if outcome.stderr:
            detail = f"{detail}: {outcome.stderr.splitlines()[-1]}"
        return _failed(
            strategy,
            candidate,
            StrategyError(StrategyErrorKind.EXIT_STATUS, detail),
            outcome.elapsed_ms,
        )

    try:
        size = file_size(candidate)
    except OSError:
        return _failed(
            strategy,
            candidate,
            StrategyError(StrategyErrorKind.MISSING_OUTPUT, "tool wrote no output file"),
            outcome.elapsed_ms,
        )

    if size == 0:
        return _failed(
            strategy,
            candidate,
            StrategyError(StrategyErrorKind.EMPTY_OUTPUT, "tool wrote an empty file"),
            outcome.elapsed_ms,
        )

    logger.info(f"Strategy {strategy.name} produced {size} bytes in {outcome.elapsed_ms}ms")
    return CompressionAttempt(
        strategy=strategy.name,
        path=candidate,
        size=size,
        family=strategy.family,
        elapsed_ms=outcome.elapsed_ms,
    )
