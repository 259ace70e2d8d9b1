"""Pydantic models for compression results and API responses.

Models:
    - AttemptReport: Outcome of a single strategy run
    - CompressionResult: Final result of a compression request
    - ToolStatusResponse: Installed tools and runnable strategies
"""

from pdf_utility.models.schemas import (
    NO_COMPRESSION_STRATEGY,
    AttemptReport,
    CompressionResult,
    ToolStatusResponse,
)

__all__ = [
    "NO_COMPRESSION_STRATEGY",
    "AttemptReport",
    "CompressionResult",
    "ToolStatusResponse",
]
