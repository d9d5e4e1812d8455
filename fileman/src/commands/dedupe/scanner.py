"""
Content hasher and duplicate grouper for dedupe.

Features:
- Chunked SHA-256 hashing (memory use independent of file size)
- Hashing runs in a worker thread (asyncio.to_thread)
- Optional concurrent hashing, groups still built in enumeration order
- Per-file hash failures recorded, never fatal
"""

from __future__ import annotations

import asyncio
import hashlib
from pathlib import Path
from typing import Callable, Optional

import structlog

from fileman.src.commands.dedupe.models import HashFailure, HashGroup
from fileman.src.core.models import FileEntry

logger = structlog.get_logger(__name__)

DEFAULT_CHUNK_SIZE = 65536


def hash_file(file_path: Path, chunk_size: int = DEFAULT_CHUNK_SIZE) -> str:
    """
    Compute SHA-256 hex digest of a file, reading chunk_size bytes at a time.

    Raises:
        OSError: File unreadable or I/O error mid-read
    """
    sha256 = hashlib.sha256()

    with open(file_path, "rb") as f:
        while chunk := f.read(chunk_size):
            sha256.update(chunk)

    return sha256.hexdigest()


class DedupScanner:
    """
    Hash a list of files and group them by digest.

    Group order is first-seen digest order and member order is the order of
    the input list, whatever order the hashes complete in.
    """

    def __init__(
        self,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        workers: int = 1,
        failure_callback: Optional[Callable[[HashFailure], None]] = None,
    ):
        """
        Initialize scanner.

        Args:
            chunk_size: Bytes per read
            workers: Files hashed concurrently (1 = strictly sequential)
            failure_callback: Called for each file that fails to hash, in input order
        """
        self.chunk_size = chunk_size
        self.workers = max(1, workers)
        self.failure_callback = failure_callback
        self.failures: list[HashFailure] = []
        self._hash_groups: dict[str, list[FileEntry]] = {}
        # Failures seen out of order under concurrency; logged at once, recorded
        # and passed to failure_callback during the in-order rebuild
        self._pending_errors: dict[Path, str] = {}

    async def scan(self, entries: list[FileEntry]) -> list[HashGroup]:
        """
        Hash every entry and return all groups (duplicates and singletons).

        Args:
            entries: Regular files in enumeration order

        Returns:
            HashGroup list in first-seen digest order
        """
        self.failures = []
        self._hash_groups = {}
        self._pending_errors = {}

        logger.info("dedupe_hashing_started", files=len(entries), workers=self.workers)

        if self.workers == 1:
            for entry in entries:
                digest = await self._hash_entry(entry)
                self._add(entry, digest)
        else:
            semaphore = asyncio.Semaphore(self.workers)

            async def bounded(entry: FileEntry) -> Optional[str]:
                async with semaphore:
                    return await self._hash_entry(entry, report_failure=False)

            digests = await asyncio.gather(*(bounded(entry) for entry in entries))

            # Rebuild in enumeration order, not completion order
            for entry, digest in zip(entries, digests):
                if digest is None:
                    self._record_failure(entry, self._pending_errors.pop(entry.path))
                self._add(entry, digest)

        groups = [
            HashGroup(digest=digest, members=members)
            for digest, members in self._hash_groups.items()
        ]

        logger.info(
            "dedupe_hashing_completed",
            files=len(entries),
            digests=len(groups),
            failures=len(self.failures),
        )

        return groups

    async def _hash_entry(self, entry: FileEntry, report_failure: bool = True) -> Optional[str]:
        """Hash one file off the event loop; None on failure."""
        try:
            return await asyncio.to_thread(hash_file, entry.path, self.chunk_size)
        except OSError as e:
            logger.info("dedupe_hash_failed", file_path=str(entry.path), error=str(e))
            if report_failure:
                self._record_failure(entry, str(e))
            else:
                self._pending_errors[entry.path] = str(e)
            return None

    def _record_failure(self, entry: FileEntry, error: str) -> None:
        failure = HashFailure(path=entry.path, error=error)
        self.failures.append(failure)
        if self.failure_callback:
            self.failure_callback(failure)

    def _add(self, entry: FileEntry, digest: Optional[str]) -> None:
        if digest is None:
            return
        self._hash_groups.setdefault(digest, []).append(entry)

