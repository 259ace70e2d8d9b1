from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

# Reported strategy when no tool produced a smaller file and the original was kept
NO_COMPRESSION_STRATEGY = "none"


class AttemptReport(BaseModel):
    """Outcome of one strategy run.

    Attributes:
        strategy: Strategy name.
        tool_family: Tool family the strategy used.
        size: Candidate size in bytes (0 when the run failed).
        succeeded: Whether the tool produced a non-empty file.
        error: Failure description if the run failed.
        elapsed_ms: Wall-clock duration of the tool run.
    """

    model_config = ConfigDict(frozen=True)

    strategy: str
    tool_family: str
    size: int = Field(ge=0)
    succeeded: bool
    error: str | None = None
    elapsed_ms: int = Field(default=0, ge=0)


class CompressionResult(BaseModel):
    """Final outcome of a compression request.

    Attributes:
        success: Whether a file now exists at output_path.
        output_path: Requested output location.
        original_size: Input size in bytes.
        compressed_size: Output size in bytes.
        compression_ratio: Percentage size reduction, rounded to one decimal.
        strategy: Winning strategy name, or "none" if the original was kept.
        error: Failure description when success is False.
        attempts: Per-strategy outcomes in the order they ran.
    """

    model_config = ConfigDict(frozen=True)

    success: bool
    output_path: Path
    original_size: int = Field(ge=0)
    compressed_size: int = Field(ge=0)
    compression_ratio: float = Field(ge=0.0, le=100.0)
    strategy: str = NO_COMPRESSION_STRATEGY
    error: str | None = None
    attempts: list[AttemptReport] = Field(default_factory=list)


class ToolStatusResponse(BaseModel):
    """Installed compression tools and the strategies they enable.

    Attributes:
        tools: Availability per tool family.
        strategies: Strategy names that would run, in catalog order.
    """

    tools: dict[str, bool]
    strategies: list[str]
