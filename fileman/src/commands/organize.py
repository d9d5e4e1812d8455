"""
organize command: move files into folders by extension or by date.

Layout under <root>/<organized_folder>:
- by-ext/<ext>/<name>        (ext without dot, "noext" when missing)
- by-date/<YYYY>/<MM>/<name> (from modification time)
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

import structlog

from fileman.config.exceptions import InvalidDirectoryError
from fileman.src.core.enumerator import scan
from fileman.src.core.fs_utils import ensure_dir, move_file, require_directory
from fileman.src.core.models import FileEntry
from fileman.src.core.outcome import CommandOutcome
from fileman.src.core.sink import LineEmitter, Sink

logger = structlog.get_logger(__name__)

GroupMode = Literal["ext", "date"]
GROUP_MODES = ("ext", "date")


def destination_for(entry: FileEntry, organized_root: Path, by: GroupMode) -> Path:
    """Compute where an entry lands."""
    if by == "date":
        dt = entry.modified_at
        return organized_root / "by-date" / f"{dt.year:04d}" / f"{dt.month:02d}" / entry.name
    if by == "ext":
        ext = Path(entry.name).suffix[1:] or "noext"
        return organized_root / "by-ext" / ext / entry.name
    raise ValueError(f"Unknown group mode: {by}")


def organize(
    root_dir: str | Path,
    by: GroupMode = "ext",
    recursive: bool = False,
    dry_run: bool = False,
    organized_folder: str = "organized",
    sink: Sink | None = None,
) -> CommandOutcome:
    """
    Move every file of root_dir into the organized tree.

    Files already inside the organized tree are left alone. An existing file
    at the destination makes that move fail; it is reported and skipped.
    """
    if by not in GROUP_MODES:
        raise ValueError(f"Unknown group mode: {by}")

    emitter = LineEmitter(sink)

    try:
        target = require_directory(root_dir)
    except InvalidDirectoryError as e:
        emitter.err(str(e))
        return CommandOutcome.failed(str(e))

    organized_root = target / organized_folder
    try:
        entries = scan(target, recursive)
    except OSError as e:
        message = f"Cannot read directory: {target} {e}"
        emitter.err(message)
        logger.error("organize_root_unreadable", root_dir=str(target), error=str(e))
        return CommandOutcome.failed(message)

    files = [entry for entry in entries if not entry.is_directory]

    if not dry_run:
        ensure_dir(organized_root)

    moved = 0
    failures = 0
    for entry in files:
        if entry.path.is_relative_to(organized_root):
            continue

        dest = destination_for(entry, organized_root, by)

        if dry_run:
            emitter.out(f"[dry-run] move {entry.path} => {dest}")
            continue

        try:
            if dest.exists():
                raise FileExistsError(f"destination exists: {dest}")
            move_file(entry.path, dest)
        except OSError as e:
            failures += 1
            emitter.err(f"Failed to move: {entry.path} {e}")
            logger.info("organize_move_failed", file_path=str(entry.path), error=str(e))
            continue

        moved += 1
        logger.debug("organize_file_moved", src=str(entry.path), dest=str(dest))

    if not dry_run:
        emitter.out(f"Moved files: {moved}")

    logger.info("organize_completed", root_dir=str(target), by=by, moved=moved, failures=failures)

    return CommandOutcome.finished(count=moved, failures=failures)
