"""
Directory enumerator shared by every fileman command.

Features:
- Iterative walk with an explicit worklist (no recursion, deep trees are safe)
- Optional recursion; subdirectories are emitted as entries too
- Best-effort: entries whose metadata cannot be read are skipped
- Read-only

Ordering: within one directory entries come in OS-reported order. The
worklist is a stack, so sibling directories are visited depth-first in
reverse push order; callers must not rely on a global order.
"""

from __future__ import annotations

import os
import stat
from datetime import datetime
from pathlib import Path

import structlog

from fileman.src.core.models import FileEntry

logger = structlog.get_logger(__name__)


def scan(root_dir: str | Path, recursive: bool = False) -> list[FileEntry]:
    """
    Enumerate a directory.

    Args:
        root_dir: Existing directory (callers validate it first)
        recursive: Descend into subdirectories

    Returns:
        Flat list of FileEntry, files and directories alike

    Raises:
        OSError: If root_dir itself cannot be listed
    """
    root = Path(root_dir).absolute()
    results: list[FileEntry] = []
    stack: list[Path] = [root]

    while stack:
        current = stack.pop()

        try:
            names = os.listdir(current)
        except OSError as e:
            if current == root:
                raise
            logger.debug("scan_directory_unreadable", directory=str(current), error=str(e))
            continue

        for name in names:
            entry = _make_entry(current, name)
            if entry is None:
                continue

            results.append(entry)

            if recursive and entry.is_directory and not entry.is_symlink:
                stack.append(entry.path)

    logger.debug(
        "scan_completed",
        root_dir=str(root),
        recursive=recursive,
        entries=len(results),
    )

    return results


def _make_entry(directory: Path, name: str) -> FileEntry | None:
    """Stat one child; None when its metadata is unreadable."""
    full = directory / name

    try:
        stats = full.stat()
        is_symlink = full.is_symlink()
        modified_at = datetime.fromtimestamp(stats.st_mtime)
    except (OSError, OverflowError, ValueError) as e:
        # Unreadable metadata or an mtime datetime cannot represent
        logger.debug("scan_entry_skipped", path=str(full), error=str(e))
        return None

    is_dir = stat.S_ISDIR(stats.st_mode)

    return FileEntry(
        path=full,
        parent_dir=directory,
        name=name,
        is_directory=is_dir,
        is_symlink=is_symlink,
        size_bytes=0 if is_dir else stats.st_size,
        modified_at=modified_at,
    )
