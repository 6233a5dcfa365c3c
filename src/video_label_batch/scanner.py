"""Input directory enumeration and video file reading."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from .errors import DirectoryError, ErrorCategory, FileReadError

logger = logging.getLogger(__name__)


def list_directory_files(directory: str | Path) -> list[Path]:
    """Return the regular files directly inside *directory*, sorted by name.

    Subdirectories are skipped (non-recursive).

    Raises:
        DirectoryError: If the path is empty, missing, not a directory, or
            cannot be listed.
    """
    if not str(directory).strip():
        raise DirectoryError("No input directory given")

    dir_path = Path(directory).expanduser()
    if not dir_path.exists():
        raise DirectoryError(f"Directory not found: {directory}")
    if not dir_path.is_dir():
        raise DirectoryError(f"Not a directory: {directory}")

    try:
        files = [entry for entry in dir_path.iterdir() if entry.is_file()]
    except OSError as exc:
        raise DirectoryError(
            f"Cannot list directory {directory}: {exc}",
            category=ErrorCategory.DIRECTORY_UNREADABLE,
        ) from exc

    files.sort(key=lambda p: p.name)
    logger.info("Found %d file(s) in %s", len(files), dir_path)
    return files


async def read_video_bytes(path: Path) -> bytes:
    """Read a whole video file without blocking the event loop.

    Raises:
        FileReadError: On any OS-level read failure.
    """
    try:
        return await asyncio.to_thread(path.read_bytes)
    except OSError as exc:
        raise FileReadError(f"Cannot read {path}: {exc}") from exc
