"""PDF upload inspection.

Rejects files that the compression tools cannot work with.

Responsibilities:
    - PDF header check
    - Structural readability check with pypdf
    - Encryption detection
"""

from pdf_utility.inspection.pdf_inspector import PDFInfo, PDFInspectionError, inspect_pdf

__all__ = ["PDFInfo", "PDFInspectionError", "inspect_pdf"]
