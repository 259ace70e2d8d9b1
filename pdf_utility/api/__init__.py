"""FastAPI endpoints for the PDF utility backend.

Endpoints:
    - GET /health: Service health status
    - POST /compress: Compress an uploaded PDF and return the result
    - GET /compress/tools: Installed compression tools
"""

from pdf_utility.api.app import app, create_app

__all__ = ["app", "create_app"]
