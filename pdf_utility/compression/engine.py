"""Adaptive PDF compression engine.

Runs every installed compression strategy against the input, keeps the
smallest strictly-better result, and always leaves a usable file at the
output path on success.

Pipeline:
    Probing -> Executing (each strategy, in catalog order) -> Fallback? -> Finalize

Guarantees:
    - Candidates are written next to the output (or in ``work_dir``) under
      names derived from a per-request id, so concurrent requests never
      share a path and the final rename stays on one filesystem.
    - Every candidate that is not promoted to the output is deleted before
      ``compress`` returns, including on failure and cancellation.
    - "No strategy helped" is a success: the input is copied through and
      reported with strategy "none" and ratio 0.
"""

import logging
import os
from collections.abc import Sequence
from pathlib import Path
from uuid import uuid4

from pdf_utility.compression.executor import CompressionAttempt, execute_strategy
from pdf_utility.compression.files import atomic_copy, atomic_move, file_size, safe_unlink
from pdf_utility.compression.process import CommandRunner, run_command
from pdf_utility.compression.selector import original_attempt, select_best
from pdf_utility.compression.strategies import (
    DEFAULT_CATALOG,
    CompressionStrategy,
    available_strategies,
    candidate_path,
)
from pdf_utility.compression.tools import (
    SubprocessToolProbe,
    ToolAvailability,
    ToolFamily,
    ToolProbe,
    probe_tools,
)
from pdf_utility.config import CompressionSettings, get_settings
from pdf_utility.models.schemas import NO_COMPRESSION_STRATEGY, CompressionResult

logger = logging.getLogger(__name__)


class CompressionError(Exception):
    """Raised when a compression request cannot be completed."""

    pass


class InputValidationError(CompressionError):
    """Raised when the input file is missing, unreadable, or empty."""

    pass


class FinalizeError(CompressionError):
    """Raised when the result cannot be written to the output path."""

    pass


def compression_ratio(original_size: int, compressed_size: int) -> float:
    """Percentage reduction rounded to one decimal, within [0, 100]."""
    if original_size <= 0:
        return 0.0
    ratio = (original_size - compressed_size) / original_size * 100
    # + 0.0 turns a rounded -0.0 into 0.0
    return round(min(max(ratio, 0.0), 100.0), 1) + 0.0


def _mb(size: int) -> str:
    return f"{size / 1024 / 1024:.2f} MB"


class PDFCompressor:
    """Best-of-N PDF compressor over external tools.

    Collaborators are injectable so the pipeline can run without real tools:
    - probe: decides which tool families are installed
    - runner: executes tool command lines
    """

    def __init__(
        self,
        settings: CompressionSettings | None = None,
        *,
        probe: ToolProbe | None = None,
        runner: CommandRunner = run_command,
        catalog: Sequence[CompressionStrategy] = DEFAULT_CATALOG,
    ) -> None:
        """Initialize the compressor.

        Args:
            settings: Timeouts and directories. Loads from environment if not provided.
            probe: Tool availability detector. Defaults to a subprocess probe.
            runner: Command runner for strategy execution.
            catalog: Ordered strategies to try.
        """
        self._settings = settings or get_settings()
        self._probe = probe or SubprocessToolProbe(
            {
                ToolFamily.GENERALIZED_FILTER: self._settings.qpdf_binary,
                ToolFamily.RASTERIZER: self._settings.ghostscript_binary,
            },
            timeout=self._settings.probe_timeout_seconds,
        )
        self._runner = runner
        self._catalog = tuple(catalog)

        names = [s.name for s in self._catalog]
        if len(names) != len(set(names)):
            raise ValueError(f"Strategy names must be unique: {names}")

    @property
    def catalog(self) -> tuple[CompressionStrategy, ...]:
        return self._catalog

    async def check_tools(self) -> ToolAvailability:
        """Probe which tool families are installed right now."""
        return await probe_tools(self._probe)

    def _validate_input(self, input_path: Path, output_path: Path) -> int:
        if not input_path.exists():
            raise InputValidationError(f"Input file does not exist: {input_path}")
        if not input_path.is_file():
            raise InputValidationError(f"Input path is not a file: {input_path}")
        if not os.access(input_path, os.R_OK):
            raise InputValidationError(f"Input file is not readable: {input_path}")

        try:
            size = file_size(input_path)
        except OSError as e:
            raise InputValidationError(f"Cannot read input file: {e}") from e
        if size == 0:
            raise InputValidationError("Input file is empty")

        if input_path.resolve() == output_path.resolve():
            raise InputValidationError("Output path must differ from input path")
        return size

    def _work_dir(self, output_path: Path) -> Path:
        work_dir = self._settings.work_dir or output_path.parent
        work_dir.mkdir(parents=True, exist_ok=True)
        return work_dir

    async def compress(
        self,
        input_path: str | Path,
        output_path: str | Path,
        *,
        request_id: str | None = None,
    ) -> CompressionResult:
        """Compress ``input_path`` into ``output_path``.

        The input is never modified or deleted; removing it is the caller's job.

        Args:
            input_path: Existing, non-empty PDF.
            output_path: Destination for the compressed (or copied) PDF.
            request_id: Unique id for candidate names. Generated if not provided.

        Returns:
            CompressionResult. ``success`` is False only for invalid input or a
            failure writing the output; no file is left at ``output_path`` then.
        """
        input_path = Path(input_path)
        output_path = Path(output_path)
        request_id = request_id or uuid4().hex

        try:
            original_size = self._validate_input(input_path, output_path)
            work_dir = self._work_dir(output_path)
        except InputValidationError as e:
            logger.warning(f"Rejected compression request {request_id}: {e}")
            return self._failure(output_path, 0, str(e))
        except OSError as e:
            logger.error(f"Cannot prepare work directory for {request_id}: {e}")
            return self._failure(output_path, 0, f"Cannot prepare work directory: {e}")

        logger.info(f"Starting PDF compression: {input_path.name} ({_mb(original_size)})")

        attempts: list[CompressionAttempt] = []
        try:
            availability = await probe_tools(self._probe)
            strategies = available_strategies(self._catalog, availability)
            if not strategies:
                logger.warning("No compression tools installed; the original will be kept")

            best = original_attempt(input_path, original_size)
            for strategy in strategies:
                attempt = await execute_strategy(
                    strategy,
                    input_path,
                    work_dir,
                    request_id=request_id,
                    availability=availability,
                    runner=self._runner,
                    timeout=self._settings.strategy_timeout_seconds,
                )
                attempts.append(attempt)
                best = select_best(best, attempt)

            return self._finalize(input_path, output_path, original_size, best, attempts)
        finally:
            for strategy in self._catalog:
                safe_unlink(candidate_path(work_dir, request_id, strategy))

    @staticmethod
    def _write_output(input_path: Path, output_path: Path, best: CompressionAttempt) -> None:
        try:
            if best.is_original:
                logger.info("No strategy produced a smaller file; keeping the original")
                atomic_copy(input_path, output_path)
            else:
                atomic_move(best.path, output_path)
        except OSError as e:
            raise FinalizeError(f"Failed to write output file: {e}") from e

    def _finalize(
        self,
        input_path: Path,
        output_path: Path,
        original_size: int,
        best: CompressionAttempt,
        attempts: list[CompressionAttempt],
    ) -> CompressionResult:
        try:
            self._write_output(input_path, output_path, best)
        except FinalizeError as e:
            logger.error(str(e))
            return self._failure(output_path, original_size, str(e), attempts)

        compressed_size = best.size
        ratio = compression_ratio(original_size, compressed_size)
        logger.info(
            f"Compression finished: {_mb(original_size)} -> {_mb(compressed_size)} "
            f"({ratio}% saved, strategy={best.strategy})"
        )

        return CompressionResult(
            success=True,
            output_path=output_path,
            original_size=original_size,
            compressed_size=compressed_size,
            compression_ratio=ratio,
            strategy=best.strategy,
            attempts=[a.to_report() for a in attempts],
        )

    @staticmethod
    def _failure(
        output_path: Path,
        original_size: int,
        error: str,
        attempts: list[CompressionAttempt] | None = None,
    ) -> CompressionResult:
        return CompressionResult(
            success=False,
            output_path=output_path,
            original_size=original_size,
            compressed_size=0,
            compression_ratio=0.0,
            strategy=NO_COMPRESSION_STRATEGY,
            error=error,
            attempts=[a.to_report() for a in attempts or []],
        )


# Module-level singleton instance
_compressor: PDFCompressor | None = None


def get_compressor() -> PDFCompressor:
    """Get or create the global compressor.

    Returns:
        The PDFCompressor instance.
    """
    global _compressor
    if _compressor is None:
        _compressor = PDFCompressor()
    return _compressor


async def compress_pdf(input_path: str | Path, output_path: str | Path) -> CompressionResult:
    """Compress a PDF with the global compressor."""
    return await get_compressor().compress(input_path, output_path)
