"""Integration tests for components working together as a system.

Coverage:
    - API endpoints with real HTTP requests through ASGITransport
    - Compression with real qpdf and Ghostscript (skipped when not installed)
"""
