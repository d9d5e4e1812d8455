"""
Deletion phase for dedupe.

Features:
- Dry-run: report intended deletions, touch nothing
- Real run: os.unlink, or send2trash when trash mode is on
- Keeper must still exist before any of its duplicates is removed
- Per-file failures are recorded and never abort the remaining deletions
"""

from __future__ import annotations

import os

import structlog
from send2trash import send2trash

from fileman.src.commands.dedupe.models import DeleteFailure, HashGroup
from fileman.src.core.models import FileEntry
from fileman.src.core.sink import LineEmitter

logger = structlog.get_logger(__name__)


class DeletionResult:
    """Counters accumulated across all groups of one run."""

    def __init__(self):
        self.deleted: int = 0
        self.would_delete: int = 0
        self.space_reclaimed_bytes: int = 0
        self.failures: list[DeleteFailure] = []
        self.deleted_files: list[str] = []


class SafeDeleter:
    """
    Remove duplicate candidates of each group, keeping the group keeper.

    Nothing is removed unless dry_run is False; the caller only builds a
    deleter when the delete flag was given.
    """

    def __init__(
        self,
        dry_run: bool = False,
        use_trash: bool = False,
        emitter: LineEmitter | None = None,
    ):
        """
        Initialize deleter.

        Args:
            dry_run: Only report what would be deleted
            use_trash: Send files to the OS trash instead of unlinking them
            emitter: Where per-action lines go
        """
        self.dry_run = dry_run
        self.use_trash = use_trash
        self.emitter = emitter or LineEmitter()
        self.result = DeletionResult()

    def delete_group(self, group: HashGroup) -> None:
        """Process every candidate of one duplicate group."""
        for entry in group.candidates:
            if self.dry_run:
                self.result.would_delete += 1
                self.emitter.out(f"[dry-run] delete {entry.path}")
                logger.info("dedupe_dry_run_delete", file_path=str(entry.path))
                continue

            if not group.keeper.path.exists():
                self._fail(entry, f"keeper no longer exists: {group.keeper.path}")
                continue

            try:
                self._remove(entry)
            except OSError as e:
                self._fail(entry, str(e))
                continue

            self.result.deleted += 1
            self.result.space_reclaimed_bytes += entry.size_bytes
            self.result.deleted_files.append(str(entry.path))
            logger.info(
                "dedupe_file_deleted",
                file_path=str(entry.path),
                size_bytes=entry.size_bytes,
                trash=self.use_trash,
            )

    def _remove(self, entry: FileEntry) -> None:
        if self.use_trash:
            send2trash(str(entry.path))
        else:
            os.unlink(entry.path)

    def _fail(self, entry: FileEntry, error: str) -> None:
        self.result.failures.append(DeleteFailure(path=entry.path, error=error))
        self.emitter.err(f"Delete failed: {entry.path} {error}")
        logger.info("dedupe_delete_failed", file_path=str(entry.path), error=error)
