"""
repostage.infrastructure.files - File Operations
==================================================

The only two file-system writes staging performs: creating directories and
copying files. Both translate ``OSError`` into ``StagingIOError`` so the
failing path ends up in the error details.
"""

from __future__ import annotations

import shutil
from pathlib import Path

import structlog

from repostage.core.exceptions import StagingIOError


logger = structlog.get_logger()


def ensure_directory(path: Path) -> Path:
    """Create ``path`` and its parents if missing.

    Raises:
        StagingIOError: If the directory cannot be created.
    """
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise StagingIOError(
            message=f"Failed to create directory: {path}",
            details={"path": str(path), "reason": str(exc)},
        ) from exc
    return path


def copy_file(source: Path, destination: Path) -> Path:
    """Copy ``source`` to ``destination``, preserving the modification time.

    Parent directories of ``destination`` are created as needed. Copying a
    file onto itself is a no-op (staging into the source repository).

    Raises:
        StagingIOError: If the copy fails.
    """
    if destination.exists() and source.resolve() == destination.resolve():
        return destination

    ensure_directory(destination.parent)
    try:
        shutil.copy2(source, destination)
    except OSError as exc:
        raise StagingIOError(
            message=f"Failed to copy {source} to {destination}",
            details={
                "source": str(source),
                "destination": str(destination),
                "reason": str(exc),
            },
        ) from exc

    logger.debug("file_copied", source=str(source), destination=str(destination))
    return destination
