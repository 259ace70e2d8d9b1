"""Pytest fixtures and shared test configuration.

Provides reusable fixtures for unit and integration tests.

Fixtures:
    - settings: CompressionSettings pointing at a temporary directory
    - sample_pdf_path: A small, valid PDF generated with pypdf
    - make_compressor: Factory for PDFCompressor with fake tools
    - async_client: HTTPX client for API testing

No external compression tools are needed; tests that use real qpdf or
Ghostscript are skipped when those are not installed.
"""

from collections.abc import AsyncGenerator, Callable
from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient
from pypdf import PdfWriter

from pdf_utility.api.app import app
from pdf_utility.compression.engine import PDFCompressor, get_compressor
from pdf_utility.compression.tools import StaticToolProbe, ToolFamily
from pdf_utility.config import CompressionSettings, get_settings
from tests.fakes import FakeRunner


@pytest.fixture
def settings(tmp_path: Path) -> CompressionSettings:
    """Return settings rooted in a per-test temporary directory.

    Args:
        tmp_path: Pytest temporary directory.

    Returns:
        CompressionSettings with short timeouts and no cleanup delay.
    """
    return CompressionSettings(
        strategy_timeout_seconds=5.0,
        probe_timeout_seconds=5.0,
        work_dir=None,
        upload_dir=tmp_path / "uploads",
        output_dir=tmp_path / "compressed",
        max_upload_bytes=1024 * 1024,
        cleanup_delay_seconds=0.0,
        qpdf_binary=None,
        ghostscript_binary=None,
    )


@pytest.fixture
def sample_pdf_path(tmp_path: Path) -> Path:
    """Generate a small valid PDF for testing.

    Returns:
        Path to a two-page blank PDF.
    """
    writer = PdfWriter()
    writer.add_blank_page(width=612, height=792)
    writer.add_blank_page(width=612, height=792)
    path = tmp_path / "sample.pdf"
    with open(path, "wb") as f:
        writer.write(f)
    return path


@pytest.fixture
def make_compressor(
    settings: CompressionSettings,
) -> Callable[..., tuple[PDFCompressor, FakeRunner, StaticToolProbe]]:
    """Build compressors backed by a static probe and a fake runner.

    Returns:
        Factory taking tool availability flags and per-strategy behaviors.
    """

    def factory(
        *,
        qpdf: bool = True,
        ghostscript: bool = True,
        behaviors: dict[str, int | str] | None = None,
        **kwargs,
    ) -> tuple[PDFCompressor, FakeRunner, StaticToolProbe]:
        probe = StaticToolProbe(
            {ToolFamily.GENERALIZED_FILTER: qpdf, ToolFamily.RASTERIZER: ghostscript}
        )
        runner = FakeRunner(behaviors)
        compressor = PDFCompressor(settings, probe=probe, runner=runner, **kwargs)
        return compressor, runner, probe

    return factory


@pytest.fixture
async def async_client(
    settings: CompressionSettings,
    make_compressor: Callable[..., tuple[PDFCompressor, FakeRunner, StaticToolProbe]],
) -> AsyncGenerator[AsyncClient]:
    """Create async HTTP client with a fake-tool compressor injected.

    Yields:
        Configured AsyncClient for making test requests.
    """
    compressor, _, _ = make_compressor(behaviors={"qpdf-aggressive": 100, "gs-ebook": 80})
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_compressor] = lambda: compressor

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
