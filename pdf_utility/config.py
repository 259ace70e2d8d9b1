"""Compression service configuration with environment variable loading.

Pydantic-based settings for the compression engine and the HTTP layer.
Values come from the process environment or a local .env file.
"""

import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator

# Load environment variables from .env file
load_dotenv()

DEFAULT_MAX_UPLOAD_BYTES = 100 * 1024 * 1024  # 100MB


def _optional_env(name: str) -> str | None:
    value = os.getenv(name, "").strip()
    return value or None


class CompressionSettings(BaseModel):
    """Configuration for the PDF compression pipeline.

    Attributes:
        strategy_timeout_seconds: Upper bound for a single external tool run.
        probe_timeout_seconds: Upper bound for a tool availability check.
        work_dir: Directory for candidate files (None = next to the output file).
        upload_dir: Where the HTTP layer stores incoming uploads.
        output_dir: Where the HTTP layer writes compressed files.
        max_upload_bytes: Largest accepted upload.
        cleanup_delay_seconds: Delay before served files are deleted.
        qpdf_binary: Explicit qpdf executable (None = search PATH).
        ghostscript_binary: Explicit Ghostscript executable (None = search PATH).
    """

    model_config = ConfigDict(validate_default=True)

    strategy_timeout_seconds: float = Field(
        default_factory=lambda: float(os.getenv("COMPRESS_STRATEGY_TIMEOUT", "60")),
        gt=0.0,
        le=3600.0,
        description="Timeout for one compression strategy run",
    )
    probe_timeout_seconds: float = Field(
        default_factory=lambda: float(os.getenv("COMPRESS_PROBE_TIMEOUT", "10")),
        gt=0.0,
        le=120.0,
        description="Timeout for a tool availability probe",
    )
    work_dir: Path | None = Field(
        default_factory=lambda: _optional_env("COMPRESS_WORK_DIR"),
        description="Directory for candidate files",
    )
    upload_dir: Path = Field(
        default_factory=lambda: Path(os.getenv("UPLOAD_DIR", "uploads")),
        description="Directory for uploaded PDFs",
    )
    output_dir: Path = Field(
        default_factory=lambda: Path(os.getenv("COMPRESSED_DIR", "compressed")),
        description="Directory for compressed PDFs",
    )
    max_upload_bytes: int = Field(
        default_factory=lambda: int(
            os.getenv("MAX_UPLOAD_BYTES", str(DEFAULT_MAX_UPLOAD_BYTES))
        ),
        ge=1,
        description="Maximum accepted upload size in bytes",
    )
    cleanup_delay_seconds: float = Field(
        default_factory=lambda: float(os.getenv("COMPRESS_CLEANUP_DELAY", "1.0")),
        ge=0.0,
        description="Delay before served files are removed",
    )
    qpdf_binary: str | None = Field(
        default_factory=lambda: _optional_env("QPDF_BINARY"),
        description="qpdf executable override",
    )
    ghostscript_binary: str | None = Field(
        default_factory=lambda: _optional_env("GHOSTSCRIPT_BINARY"),
        description="Ghostscript executable override",
    )

    @field_validator("qpdf_binary", "ghostscript_binary")
    @classmethod
    def strip_binary(cls, v: str | None) -> str | None:
        """Treat blank executable overrides as unset."""
        if v is None:
            return None
        return v.strip() or None


def get_settings() -> CompressionSettings:
    """Create compression settings from environment.

    Returns:
        Configured CompressionSettings instance.

    Raises:
        ValidationError: If an environment value is out of range.
    """
    return CompressionSettings()
