"""Best-of-N selection over compression attempts.

Selection is a fold: start from the original file at its real size and
feed each attempt through ``select_best``. The fold step is also the only
place candidate files are deleted, so exactly one attempt is ever kept.
"""

import logging
from pathlib import Path

from pdf_utility.compression.executor import CompressionAttempt
from pdf_utility.compression.files import safe_unlink
from pdf_utility.models.schemas import NO_COMPRESSION_STRATEGY

logger = logging.getLogger(__name__)


def original_attempt(input_path: Path, size: int) -> CompressionAttempt:
    """Seed attempt representing the untouched input file."""
    return CompressionAttempt(
        strategy=NO_COMPRESSION_STRATEGY,
        path=input_path,
        size=size,
        is_original=True,
    )


def is_improvement(best: CompressionAttempt, candidate: CompressionAttempt) -> bool:
    """Whether ``candidate`` strictly beats ``best``.

    Same-size results never win, which keeps the earliest strategy on ties
    and keeps the original when nothing shrank it.
    """
    return candidate.succeeded and not candidate.is_original and candidate.size < best.size


def _discard(attempt: CompressionAttempt) -> None:
    if not attempt.is_original:
        safe_unlink(attempt.path)


def select_best(best: CompressionAttempt, candidate: CompressionAttempt) -> CompressionAttempt:
    """Keep the smaller of two attempts and delete the other's file.

    Args:
        best: Current best attempt (initially the original file).
        candidate: Newly finished attempt.

    Returns:
        The attempt to keep.
    """
    if is_improvement(best, candidate):
        logger.debug(
            f"{candidate.strategy} ({candidate.size} bytes) replaces "
            f"{best.strategy} ({best.size} bytes)"
        )
        _discard(best)
        return candidate

    _discard(candidate)
    return best

