"""
rename command: batch rename the files of one directory by regex.

Only the first match in each name is replaced. Subdirectories are not
visited.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Optional

import structlog

from fileman.config.exceptions import InvalidDirectoryError
from fileman.src.core.enumerator import scan
from fileman.src.core.fs_utils import require_directory
from fileman.src.core.outcome import CommandOutcome
from fileman.src.core.sink import LineEmitter, Sink

logger = structlog.get_logger(__name__)


def new_name_for(name: str, pattern: Optional[re.Pattern], replace: str) -> str:
    if pattern is None:
        return name
    return pattern.sub(replace, name, count=1)


def rename_files(
    root_dir: str | Path,
    match: str = "",
    replace: str = "",
    ext: Optional[str] = None,
    dry_run: bool = False,
    sink: Sink | None = None,
) -> CommandOutcome:
    """
    Rename regular files of root_dir whose name matches the regex.

    Args:
        root_dir: Directory containing the files
        match: Regex searched in each file name (empty = no renaming)
        replace: Replacement, may use \\1 group references
        ext: Only files whose suffix is exactly this (".pdf")
        dry_run: Report renames without performing them
    """
    emitter = LineEmitter(sink)

    try:
        target = require_directory(root_dir)
        pattern = re.compile(match) if match else None
    except InvalidDirectoryError as e:
        emitter.err(str(e))
        return CommandOutcome.failed(str(e))
    except re.error as e:
        message = f"Invalid pattern {match!r}: {e}"
        emitter.err(message)
        return CommandOutcome.failed(message)

    try:
        entries = scan(target, recursive=False)
    except OSError as e:
        message = f"Cannot read directory: {target} {e}"
        emitter.err(message)
        logger.error("rename_root_unreadable", root_dir=str(target), error=str(e))
        return CommandOutcome.failed(message)

    renamed = 0
    failures = 0
    for entry in entries:
        if not entry.is_regular_file:
            continue
        if ext and entry.suffix != ext:
            continue

        new_name = new_name_for(entry.name, pattern, replace)
        if new_name == entry.name:
            continue

        new_path = target / new_name
        if dry_run:
            emitter.out(f"[dry-run] rename {entry.path} => {new_path}")
            continue

        try:
            if new_path.exists():
                raise FileExistsError(f"target exists: {new_path}")
            entry.path.rename(new_path)
        except (OSError, ValueError) as e:
            failures += 1
            emitter.err(f"Failed to rename: {entry.path} {e}")
            logger.info("rename_failed", file_path=str(entry.path), error=str(e))
            continue

        renamed += 1

    if not dry_run:
        emitter.out(f"Renamed files: {renamed}")

    logger.info("rename_completed", root_dir=str(target), renamed=renamed, failures=failures)

    return CommandOutcome.finished(count=renamed, failures=failures)
