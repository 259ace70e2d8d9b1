"""PDF inspection using pypdf.

Checks that an uploaded file is a readable, unencrypted PDF before it is
handed to the compression engine.
"""

import logging
from pathlib import Path

from pydantic import BaseModel, Field
from pypdf import PdfReader
from pypdf.errors import PdfReadError

logger = logging.getLogger(__name__)

PDF_MAGIC_BYTES = b"%PDF"
HEADER_SCAN_BYTES = 1024


class PDFInfo(BaseModel):
    """Basic facts about a PDF file.

    Attributes:
        pages: Number of pages (0 when the document is encrypted).
        encrypted: Whether the document requires a password.
    """

    pages: int = Field(ge=0)
    encrypted: bool = False


class PDFInspectionError(Exception):
    """Raised when a file is not a usable PDF."""

    pass


def _validate_pdf_header(head: bytes) -> None:
    """Validate the first bytes of a PDF file.

    Args:
        head: Leading bytes of the file.

    Raises:
        PDFInspectionError: If the file is empty or lacks a PDF header.
    """
    if not head:
        raise PDFInspectionError("Empty file provided")

    if not head.lstrip()[:10].startswith(PDF_MAGIC_BYTES):
        raise PDFInspectionError("Invalid PDF: file does not start with PDF header")


def inspect_pdf(path: Path) -> PDFInfo:
    """Inspect a PDF file on disk.

    Args:
        path: Location of the file.

    Returns:
        PDFInfo with page count and encryption flag.

    Raises:
        PDFInspectionError: If the file is empty, not a PDF, or corrupt.
    """
    with open(path, "rb") as f:
        _validate_pdf_header(f.read(HEADER_SCAN_BYTES))

    try:
        reader = PdfReader(str(path))
    except PdfReadError as e:
        raise PDFInspectionError(f"Corrupt or invalid PDF: {e}") from e
    except Exception as e:
        raise PDFInspectionError(f"Failed to read PDF: {e}") from e

    if reader.is_encrypted:
        logger.info(f"{path.name} is encrypted")
        return PDFInfo(pages=0, encrypted=True)

    try:
        pages = len(reader.pages)
    except Exception as e:
        raise PDFInspectionError(f"Corrupt or invalid PDF: {e}") from e

    if pages == 0:
        raise PDFInspectionError("PDF contains no pages")

    return PDFInfo(pages=pages)
