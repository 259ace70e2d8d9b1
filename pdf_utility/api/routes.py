"""PDF compression endpoints.

Handles upload validation, runs the compression engine, and streams the
result back. Uploaded and compressed files are removed after the response
has been sent.
"""

import asyncio
import logging
from pathlib import Path
from uuid import uuid4

from fastapi import APIRouter, Depends, HTTPException, UploadFile, status
from fastapi.responses import FileResponse
from starlette.background import BackgroundTask

from pdf_utility.compression.engine import PDFCompressor, get_compressor
from pdf_utility.compression.files import safe_unlink
from pdf_utility.compression.strategies import available_strategies
from pdf_utility.config import CompressionSettings, get_settings
from pdf_utility.inspection.pdf_inspector import PDFInspectionError, inspect_pdf
from pdf_utility.models.schemas import ToolStatusResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/compress", tags=["compress"])

PDF_CONTENT_TYPE = "application/pdf"


def _validate_upload(file: UploadFile) -> str:
    """Validate that the upload claims to be a PDF.

    Args:
        file: The uploaded file.

    Returns:
        The validated filename.

    Raises:
        HTTPException: 400 if no file name is given or the file is not a PDF.
    """
    if not file.filename:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No file uploaded",
        )

    if not file.filename.lower().endswith(".pdf") or (
        file.content_type and file.content_type != PDF_CONTENT_TYPE
    ):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Only PDF files are allowed",
        )

    return file.filename


async def _read_and_validate_size(file: UploadFile, max_bytes: int) -> bytes:
    """Read upload content and enforce the size limit.

    Raises:
        HTTPException: 413 if the file exceeds the limit.
    """
    content = await file.read()

    if len(content) > max_bytes:
        size_mb = len(content) / (1024 * 1024)
        limit_mb = max_bytes / (1024 * 1024)
        raise HTTPException(
            status_code=status.HTTP_413_CONTENT_TOO_LARGE,
            detail=f"File size ({size_mb:.1f}MB) exceeds maximum allowed ({limit_mb:.0f}MB)",
        )

    return content


async def _cleanup_later(paths: list[Path], delay: float) -> None:
    if delay > 0:
        await asyncio.sleep(delay)
    for path in paths:
        safe_unlink(path)


@router.post("", response_class=FileResponse)
async def compress_upload(
    file: UploadFile,
    settings: CompressionSettings = Depends(get_settings),
    compressor: PDFCompressor = Depends(get_compressor),
) -> FileResponse:
    """Compress an uploaded PDF and return the smaller file.

    Response headers report the sizes, reduction and winning strategy.

    Raises:
        400: Not a PDF, empty, corrupt, or password-protected.
        413: File exceeds the upload limit.
        500: Compression failed.
    """
    filename = _validate_upload(file)
    content = await _read_and_validate_size(file, settings.max_upload_bytes)

    file_id = uuid4().hex
    settings.upload_dir.mkdir(parents=True, exist_ok=True)
    settings.output_dir.mkdir(parents=True, exist_ok=True)
    input_path = settings.upload_dir / f"{file_id}.pdf"
    output_path = settings.output_dir / f"compressed_{file_id}.pdf"
    logger.info(f"Compression request: {filename} ({len(content) / 1024 / 1024:.2f} MB)")

    try:
        input_path.write_bytes(content)
        info = inspect_pdf(input_path)
        if info.encrypted:
            raise PDFInspectionError("Password-protected PDFs cannot be compressed")
        result = await compressor.compress(input_path, output_path, request_id=file_id)
    except PDFInspectionError as e:
        safe_unlink(input_path)
        logger.warning(f"Rejected upload {filename}: {e}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        ) from e
    except BaseException:
        safe_unlink(input_path)
        safe_unlink(output_path)
        raise

    if not result.success:
        safe_unlink(input_path)
        safe_unlink(output_path)
        logger.error(f"Compression failed for {filename}: {result.error}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Compression failed: {result.error}",
        )

    logger.info(
        f"Compressed {filename}: {result.original_size} -> {result.compressed_size} bytes "
        f"({result.compression_ratio}% saved, strategy={result.strategy})"
    )

    return FileResponse(
        path=output_path,
        media_type=PDF_CONTENT_TYPE,
        filename=f"compressed_{filename}",
        headers={
            "X-Original-Size": str(result.original_size),
            "X-Compressed-Size": str(result.compressed_size),
            "X-Compression-Ratio": str(result.compression_ratio),
            "X-Compression-Strategy": result.strategy,
        },
        background=BackgroundTask(
            _cleanup_later, [input_path, output_path], settings.cleanup_delay_seconds
        ),
    )


@router.get("/tools", response_model=ToolStatusResponse)
async def compression_tools(
    compressor: PDFCompressor = Depends(get_compressor),
) -> ToolStatusResponse:
    """Report installed compression tools and the strategies they enable."""
    availability = await compressor.check_tools()
    strategies = available_strategies(compressor.catalog, availability)
    return ToolStatusResponse(
        tools=availability.as_dict(),
        strategies=[s.name for s in strategies],
    )
