"""Integration tests against installed qpdf and Ghostscript.

Each test is skipped when the tool it needs is not on PATH.
"""

import shutil
from pathlib import Path

import pytest
import pytest_check as check
from pypdf import PdfReader

from pdf_utility.compression.engine import PDFCompressor
from pdf_utility.compression.strategies import DEFAULT_CATALOG
from pdf_utility.compression.tools import (
    DEFAULT_EXECUTABLES,
    SubprocessToolProbe,
    ToolFamily,
    probe_tools,
)
from pdf_utility.config import CompressionSettings
from pdf_utility.models.schemas import NO_COMPRESSION_STRATEGY

HAS_QPDF = shutil.which("qpdf") is not None
HAS_GHOSTSCRIPT = any(
    shutil.which(name) for name in DEFAULT_EXECUTABLES[ToolFamily.RASTERIZER]
)

requires_qpdf = pytest.mark.skipif(not HAS_QPDF, reason="qpdf not installed")
requires_ghostscript = pytest.mark.skipif(
    not HAS_GHOSTSCRIPT, reason="Ghostscript not installed"
)


class TestRealProbe:
    @requires_qpdf
    async def test_detects_qpdf(self) -> None:
        availability = await probe_tools(SubprocessToolProbe())

        assert availability.is_available(ToolFamily.GENERALIZED_FILTER)

    @requires_ghostscript
    async def test_detects_ghostscript(self) -> None:
        availability = await probe_tools(SubprocessToolProbe())

        assert availability.is_available(ToolFamily.RASTERIZER)


class TestRealCompression:
    """End-to-end runs with whatever tools are installed."""

    @requires_qpdf
    async def test_qpdf_only_output_is_valid_pdf(
        self, settings: CompressionSettings, sample_pdf_path: Path, tmp_path: Path
    ) -> None:
        """Result is a readable PDF with the same pages, never larger than the input."""
        catalog = [s for s in DEFAULT_CATALOG if s.family is ToolFamily.GENERALIZED_FILTER]
        compressor = PDFCompressor(settings, catalog=catalog)
        output = tmp_path / "out.pdf"

        result = await compressor.compress(sample_pdf_path, output)

        check.is_true(result.success)
        check.less_equal(result.compressed_size, result.original_size)
        check.equal(output.stat().st_size, result.compressed_size)
        check.equal(len(PdfReader(str(output)).pages), 2)
        check.equal(len(result.attempts), len(catalog))

    @requires_ghostscript
    async def test_full_catalog_leaves_only_output(
        self, settings: CompressionSettings, sample_pdf_path: Path, tmp_path: Path
    ) -> None:
        work = tmp_path / "work"
        settings.work_dir = work
        compressor = PDFCompressor(settings)
        output = tmp_path / "out.pdf"

        result = await compressor.compress(sample_pdf_path, output)

        check.is_true(result.success)
        check.is_true(output.exists())
        check.equal(list(work.iterdir()), [])
        if result.strategy == NO_COMPRESSION_STRATEGY:
            check.equal(output.read_bytes(), sample_pdf_path.read_bytes())
        else:
            check.less(result.compressed_size, result.original_size)
