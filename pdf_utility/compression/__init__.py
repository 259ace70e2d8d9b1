"""Adaptive PDF compression over external tools.

Tries every installed strategy, measures real output sizes, and keeps the
smallest strictly-better file.

Responsibilities:
    - Tool availability probing (qpdf, Ghostscript)
    - Ordered strategy catalog with per-strategy command lines
    - Isolated, time-bounded strategy execution
    - Best-of-N selection with candidate cleanup
    - Fallback to the original file and atomic finalization
"""

from pdf_utility.compression.engine import (
    CompressionError,
    FinalizeError,
    InputValidationError,
    PDFCompressor,
    compress_pdf,
    compression_ratio,
    get_compressor,
)
from pdf_utility.compression.executor import (
    CompressionAttempt,
    StrategyError,
    StrategyErrorKind,
    execute_strategy,
)
from pdf_utility.compression.process import CommandOutcome, CommandRunner, run_command
from pdf_utility.compression.selector import is_improvement, original_attempt, select_best
from pdf_utility.compression.strategies import (
    DEFAULT_CATALOG,
    CompressionStrategy,
    available_strategies,
)
from pdf_utility.compression.tools import (
    StaticToolProbe,
    SubprocessToolProbe,
    ToolAvailability,
    ToolFamily,
    ToolProbe,
    probe_tools,
)

__all__ = [
    "DEFAULT_CATALOG",
    "CommandOutcome",
    "CommandRunner",
    "CompressionAttempt",
    "CompressionError",
    "CompressionStrategy",
    "FinalizeError",
    "InputValidationError",
    "PDFCompressor",
    "StaticToolProbe",
    "StrategyError",
    "StrategyErrorKind",
    "SubprocessToolProbe",
    "ToolAvailability",
    "ToolFamily",
    "ToolProbe",
    "available_strategies",
    "compress_pdf",
    "compression_ratio",
    "execute_strategy",
    "get_compressor",
    "is_improvement",
    "original_attempt",
    "probe_tools",
    "run_command",
    "select_best",
]
