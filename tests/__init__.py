"""Test package for PDF Utility.

Structure:
    - unit/: Engine pieces tested in isolation with fake tools
    - integration/: HTTP endpoints and runs against installed qpdf/Ghostscript

Sample PDFs are generated with pypdf at test time.
Leverages pytest with pytest-check for soft assertions.
"""
