"""clean-empty command: remove empty directories bottom-up."""

from __future__ import annotations

import os
from pathlib import Path

import structlog

from fileman.config.exceptions import InvalidDirectoryError
from fileman.src.core.enumerator import scan
from fileman.src.core.fs_utils import require_directory
from fileman.src.core.outcome import CommandOutcome
from fileman.src.core.sink import LineEmitter, Sink

logger = structlog.get_logger(__name__)


def clean_empty(root_dir: str | Path, sink: Sink | None = None) -> CommandOutcome:
    """
    Remove every directory under root_dir that is empty once its own empty
    subdirectories are gone. root_dir itself is removed too if it ends up empty.
    """
    emitter = LineEmitter(sink)

    try:
        target = require_directory(root_dir)
    except InvalidDirectoryError as e:
        emitter.err(str(e))
        return CommandOutcome.failed(str(e))

    try:
        entries = scan(target, recursive=True)
    except OSError as e:
        message = f"Cannot read directory: {target} {e}"
        emitter.err(message)
        logger.error("clean_empty_root_unreadable", root_dir=str(target), error=str(e))
        return CommandOutcome.failed(message)

    directories = [
        entry.path for entry in entries if entry.is_directory and not entry.is_symlink
    ]
    # Deepest first so children are gone before their parents are checked
    directories.sort(key=lambda p: len(p.parts), reverse=True)
    directories.append(target)

    removed = 0
    for directory in directories:
        try:
            with os.scandir(directory) as it:
                if any(it):
                    continue
            directory.rmdir()
        except OSError as e:
            logger.debug("clean_empty_skipped", directory=str(directory), error=str(e))
            continue

        removed += 1
        emitter.out(f"Removed empty dir: {directory}")

    logger.info("clean_empty_completed", root_dir=str(target), removed=removed)

    return CommandOutcome.finished(count=removed)
