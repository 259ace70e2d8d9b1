"""PDF Utility - adaptive PDF compression backend.

Combines FastAPI for the HTTP surface, qpdf and Ghostscript for compression,
pypdf for upload inspection, and Pydantic for configuration and results.

Components:
    - compression: strategy catalog, execution, best-of-N selection
    - inspection: PDF validation before compression
    - api: HTTP endpoints
    - models: Result and response schemas
"""

__version__ = "0.1.0"
