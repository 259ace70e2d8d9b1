"""Catalog of PDF compression strategies.

Each strategy pairs a tool family with a fixed parameter set and a pure
function that turns (executable, input, candidate) into an argv list.
Adding or removing a strategy is a change to ``DEFAULT_CATALOG`` only.

Catalog order is significant: when two strategies produce files of the same
size, the one listed first is kept.
"""

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from pathlib import Path

from pdf_utility.compression.tools import ToolAvailability, ToolFamily

# qpdf exits 3 when it wrote its output but emitted warnings
QPDF_SUCCESS_CODES = frozenset({0, 3})
GHOSTSCRIPT_SUCCESS_CODES = frozenset({0})


@dataclass(frozen=True)
class CompressionStrategy:
    """A named tool invocation.

    Attributes:
        name: Unique identifier reported back to callers.
        family: Tool family required to run the strategy.
        build_argv: Builds the command line for one run.
        quality: Quality tier (Ghostscript PDFSETTINGS preset).
        resolution: Image downsampling target in DPI, None for the tool default.
        flags: Extra tool flags.
        success_exit_codes: Exit statuses that mean the output was written.
    """

    name: str
    family: ToolFamily
    build_argv: "ArgvBuilder" = field(repr=False, compare=False)
    quality: str | None = None
    resolution: int | None = None
    flags: tuple[str, ...] = ()
    success_exit_codes: frozenset[int] = frozenset({0})

    def argv(self, executable: str, input_path: Path, candidate_path: Path) -> list[str]:
        return self.build_argv(self, executable, input_path, candidate_path)


ArgvBuilder = Callable[[CompressionStrategy, str, Path, Path], list[str]]


def qpdf_argv(
    strategy: CompressionStrategy,
    executable: str,
    input_path: Path,
    candidate_path: Path,
) -> list[str]:
    return [executable, *strategy.flags, str(input_path), str(candidate_path)]


def ghostscript_argv(
    strategy: CompressionStrategy,
    executable: str,
    input_path: Path,
    candidate_path: Path,
) -> list[str]:
    argv = [
        executable,
        "-sDEVICE=pdfwrite",
        "-dCompatibilityLevel=1.4",
        f"-dPDFSETTINGS=/{strategy.quality or 'default'}",
        "-dNOPAUSE",
        "-dQUIET",
        "-dBATCH",
        "-dSAFER",
    ]
    if strategy.resolution is not None:
        argv += [
            "-dDownsampleColorImages=true",
            f"-dColorImageResolution={strategy.resolution}",
            "-dDownsampleGrayImages=true",
            f"-dGrayImageResolution={strategy.resolution}",
        ]
    argv += [*strategy.flags, f"-sOutputFile={candidate_path}", str(input_path)]
    return argv


DEFAULT_CATALOG: tuple[CompressionStrategy, ...] = (
    CompressionStrategy(
        name="qpdf-aggressive",
        family=ToolFamily.GENERALIZED_FILTER,
        build_argv=qpdf_argv,
        flags=(
            "--linearize",
            "--compress-streams=y",
            "--decode-level=generalized",
            "--recompress-flate",
            "--compression-level=9",
            "--optimize-images",
            "--object-streams=generate",
        ),
        success_exit_codes=QPDF_SUCCESS_CODES,
    ),
    CompressionStrategy(
        name="gs-screen",
        family=ToolFamily.RASTERIZER,
        build_argv=ghostscript_argv,
        quality="screen",
        resolution=72,
        flags=(
            "-dColorImageDownsampleType=/Bicubic",
            "-dGrayImageDownsampleType=/Bicubic",
            "-dDetectDuplicateImages=true",
            "-dCompressFonts=true",
            "-dSubsetFonts=true",
        ),
        success_exit_codes=GHOSTSCRIPT_SUCCESS_CODES,
    ),
    CompressionStrategy(
        name="gs-ebook",
        family=ToolFamily.RASTERIZER,
        build_argv=ghostscript_argv,
        quality="ebook",
        resolution=150,
        success_exit_codes=GHOSTSCRIPT_SUCCESS_CODES,
    ),
    CompressionStrategy(
        name="gs-printer",
        family=ToolFamily.RASTERIZER,
        build_argv=ghostscript_argv,
        quality="printer",
        resolution=300,
        success_exit_codes=GHOSTSCRIPT_SUCCESS_CODES,
    ),
    CompressionStrategy(
        name="gs-prepress",
        family=ToolFamily.RASTERIZER,
        build_argv=ghostscript_argv,
        quality="prepress",
        success_exit_codes=GHOSTSCRIPT_SUCCESS_CODES,
    ),
    CompressionStrategy(
        name="qpdf-linearize",
        family=ToolFamily.GENERALIZED_FILTER,
        build_argv=qpdf_argv,
        flags=("--linearize", "--object-streams=generate"),
        success_exit_codes=QPDF_SUCCESS_CODES,
    ),
)


def available_strategies(
    catalog: Iterable[CompressionStrategy],
    availability: ToolAvailability,
) -> list[CompressionStrategy]:
    """Filter the catalog down to strategies whose tool is installed.

    Catalog order is preserved.
    """
    return [s for s in catalog if availability.is_available(s.family)]


def candidate_path(work_dir: Path, request_id: str, strategy: CompressionStrategy) -> Path:
    """Return the per-request, per-strategy path a strategy writes to."""
    return work_dir / f"{request_id}.{strategy.name}.candidate.pdf"
