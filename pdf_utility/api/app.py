"""FastAPI application factory and configuration.

Main application entry point with lifespan management, middleware,
and router registration.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from pdf_utility.api.routes import router as compress_router
from pdf_utility.config import get_settings

logger = logging.getLogger(__name__)

# Sizes and strategy are reported in headers; browsers only see them if exposed
EXPOSED_HEADERS = [
    "Content-Disposition",
    "X-Original-Size",
    "X-Compressed-Size",
    "X-Compression-Ratio",
    "X-Compression-Strategy",
]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Manage application startup and shutdown lifecycle.

    Creates the upload and output directories on startup.

    Args:
        app: The FastAPI application instance.

    Yields:
        Control to the application while it runs.
    """
    settings = get_settings()
    for directory in (settings.upload_dir, settings.output_dir):
        if not directory.exists():
            directory.mkdir(parents=True, exist_ok=True)
            logger.info(f"Created directory: {directory}")

    logger.info("Starting PDF Utility API...")
    yield
    logger.info("Shutting down PDF Utility API...")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance.
    """
    application = FastAPI(
        title="PDF Utility API",
        description=(
            "PDF utility backend. Compresses uploaded PDFs by running several "
            "qpdf and Ghostscript strategies and returning the smallest result."
        ),
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=EXPOSED_HEADERS,
    )

    application.include_router(compress_router)

    @application.get("/health")
    async def health_check() -> dict[str, str]:
        """Check service health status."""
        return {"status": "healthy", "service": "pdf-utility"}

    return application


app = create_app()
