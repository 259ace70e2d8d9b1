"""Filesystem helpers for candidate and output files."""

import errno
import logging
import os
import shutil
from pathlib import Path
from uuid import uuid4

logger = logging.getLogger(__name__)


def file_size(path: Path) -> int:
    """Return the size of ``path`` in bytes.

    Raises:
        OSError: If the file cannot be stat'ed.
    """
    return path.stat().st_size


def safe_unlink(path: Path) -> None:
    """Delete a file if it exists. Missing files are not an error."""
    try:
        path.unlink(missing_ok=True)
    except OSError as e:
        logger.warning(f"Failed to delete {path}: {e}")
    else:
        logger.debug(f"Deleted {path.name}")


def atomic_move(src: Path, dst: Path) -> None:
    """Rename ``src`` onto ``dst`` in one step, replacing any existing file.

    When the two paths are on different filesystems the bytes are staged
    next to ``dst`` with ``atomic_copy`` and ``src`` is removed afterwards.
    """
    try:
        os.replace(src, dst)
    except OSError as e:
        if e.errno != errno.EXDEV:
            raise
        logger.debug(f"{src} and {dst} are on different filesystems; copying")
        atomic_copy(src, dst)
        safe_unlink(src)


def atomic_copy(src: Path, dst: Path) -> None:
    """Copy ``src`` to ``dst`` so that ``dst`` never appears half-written.

    The bytes land in a hidden sibling file first, which is then renamed
    onto ``dst``. The sibling is removed if anything fails.
    """
    partial = dst.with_name(f".{dst.name}.{uuid4().hex}.part")
    try:
        shutil.copyfile(src, partial)
        os.replace(partial, dst)
    except BaseException:
        safe_unlink(partial)
        raise
