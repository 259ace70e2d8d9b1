"""Unit tests for PDF inspection module."""

from pathlib import Path

import pytest
import pytest_check as check
from pypdf import PdfWriter

from pdf_utility.inspection.pdf_inspector import PDFInspectionError, inspect_pdf


class TestInspectPdfValid:
    """Tests for readable PDFs."""

    def test_reports_page_count(self, sample_pdf_path: Path) -> None:
        """Valid PDF returns its page count and is not encrypted."""
        info = inspect_pdf(sample_pdf_path)

        check.equal(info.pages, 2)
        check.is_false(info.encrypted)

    def test_detects_encryption(self, tmp_path: Path) -> None:
        writer = PdfWriter()
        writer.add_blank_page(width=100, height=100)
        writer.encrypt("secret")
        path = tmp_path / "locked.pdf"
        with open(path, "wb") as f:
            writer.write(f)

        info = inspect_pdf(path)

        check.is_true(info.encrypted)
        check.equal(info.pages, 0)


class TestInspectPdfRejection:
    """Tests for PDF validation and rejection."""

    def test_rejects_empty_file(self, tmp_path: Path) -> None:
        """Empty file raises PDFInspectionError."""
        path = tmp_path / "empty.pdf"
        path.write_bytes(b"")

        with pytest.raises(PDFInspectionError, match="Empty file"):
            inspect_pdf(path)

    def test_rejects_non_pdf_file(self, tmp_path: Path) -> None:
        """File without a PDF header raises PDFInspectionError."""
        path = tmp_path / "notes.pdf"
        path.write_bytes(b"just some text, not a document")

        with pytest.raises(PDFInspectionError, match="Invalid PDF"):
            inspect_pdf(path)

    def test_rejects_truncated_pdf(self, tmp_path: Path) -> None:
        """Truncated PDF raises PDFInspectionError."""
        path = tmp_path / "truncated.pdf"
        path.write_bytes(b"%PDF-1.4\n1 0 obj\n<<")

        with pytest.raises(PDFInspectionError, match="Corrupt|Failed|no pages"):
            inspect_pdf(path)
