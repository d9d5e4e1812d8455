"""tree command: print a directory tree."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

import structlog

from fileman.config.exceptions import InvalidDirectoryError
from fileman.src.core.fs_utils import require_directory
from fileman.src.core.outcome import CommandOutcome
from fileman.src.core.sink import LineEmitter, Sink

logger = structlog.get_logger(__name__)

INDENT = "  "
ROOT_ICON = "📂"
DIR_ICON = "📁"
FILE_ICON = "📄"


def _sorted_entries(entries: list[os.DirEntry], dirs_first: bool) -> list[os.DirEntry]:
    def is_dir(ent: os.DirEntry) -> bool:
        try:
            return ent.is_dir()
        except OSError:
            return False

    if dirs_first:
        return sorted(entries, key=lambda e: (not is_dir(e), e.name.lower()))
    return sorted(entries, key=lambda e: e.name.lower())


def render_tree(
    root_dir: str | Path,
    depth: Optional[int] = None,
    dirs_first: bool = False,
    emitter: LineEmitter | None = None,
) -> list[str]:
    """
    Build the tree lines for an existing directory.

    Level 1 is the root's children; levels deeper than depth are not shown.
    Directories that cannot be listed are reported on the err stream.
    """
    emitter = emitter or LineEmitter()
    root = Path(root_dir)
    lines = [f"{ROOT_ICON} {root.name}"]

    # Worklist of pending lines and (directory, level) pairs
    stack: list[tuple[Path, int] | str] = [(root, 1)]
    while stack:
        item = stack.pop()
        if isinstance(item, str):
            lines.append(item)
            continue

        current, level = item
        if depth is not None and level > depth:
            continue

        try:
            with os.scandir(current) as it:
                entries = _sorted_entries(list(it), dirs_first)
        except OSError as e:
            emitter.err(f"Cannot read: {current} {e}")
            logger.info("tree_directory_unreadable", directory=str(current), error=str(e))
            continue

        pending: list[tuple[Path, int] | str] = []
        for ent in entries:
            try:
                ent_is_dir = ent.is_dir()
            except OSError:
                ent_is_dir = False
            icon = DIR_ICON if ent_is_dir else FILE_ICON
            pending.append(f"{INDENT * level}{icon} {ent.name}")
            if ent_is_dir:
                pending.append((Path(ent.path), level + 1))

        # A directory's line, then its subtree, then its next sibling
        stack.extend(reversed(pending))

    return lines


def tree(
    root_dir: str | Path,
    depth: Optional[int] = None,
    dirs_first: bool = False,
    sink: Sink | None = None,
) -> CommandOutcome:
    """Print the tree of root_dir through the sink."""
    emitter = LineEmitter(sink)

    try:
        target = require_directory(root_dir)
    except InvalidDirectoryError as e:
        emitter.err(str(e))
        return CommandOutcome.failed(str(e))

    lines = render_tree(target, depth=depth, dirs_first=dirs_first, emitter=emitter)
    for line in lines:
        emitter.out(line)

    return CommandOutcome.finished(count=len(lines) - 1)
