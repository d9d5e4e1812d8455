"""
dedupe entry point.

Steps:
1. Validate the target directory (fatal, failed outcome)
2. Enumerate its immediate regular files (never recurses)
3. Hash and group by SHA-256
4. List each duplicate group, keeper first
5. Optionally delete (or dry-run) every non-keeper member
6. Return a DedupeOutcome with the report
"""

from __future__ import annotations

from pathlib import Path

import structlog

from fileman.config.exceptions import InvalidDirectoryError
from fileman.src.commands.dedupe.deleter import SafeDeleter
from fileman.src.commands.dedupe.models import (
    DedupeOptions,
    DedupeOutcome,
    DedupeReport,
    DedupeStatus,
    HashFailure,
    HashGroup,
)
from fileman.src.commands.dedupe.scanner import DedupScanner
from fileman.src.core.enumerator import scan
from fileman.src.core.fs_utils import require_directory
from fileman.src.core.sink import LineEmitter, Sink

logger = structlog.get_logger(__name__)


async def dedupe(
    root_dir: str | Path,
    options: DedupeOptions | None = None,
    sink: Sink | None = None,
) -> DedupeOutcome:
    """
    Find duplicate files in root_dir by content hash.

    Args:
        root_dir: Directory whose immediate files are compared
        options: delete / dry_run / trash / hashing options
        sink: Receives every user-facing line as it happens

    Returns:
        DedupeOutcome; status failed only when root_dir is not a directory
    """
    options = options or DedupeOptions()
    emitter = LineEmitter(sink)

    try:
        target = require_directory(root_dir)
    except InvalidDirectoryError as e:
        emitter.err(str(e))
        logger.error("dedupe_invalid_root", root_dir=str(e.path))
        return DedupeOutcome(status=DedupeStatus.failed, error=str(e))

    logger.info(
        "dedupe_started",
        root_dir=str(target),
        delete=options.delete,
        dry_run=options.dry_run,
        trash=options.use_trash,
    )

    try:
        entries = scan(target, recursive=False)
    except OSError as e:
        message = f"Cannot read directory: {target} {e}"
        emitter.err(message)
        logger.error("dedupe_invalid_root", root_dir=str(target), error=str(e))
        return DedupeOutcome(status=DedupeStatus.failed, error=message)

    files = [entry for entry in entries if entry.is_regular_file]

    def on_hash_failure(failure: HashFailure) -> None:
        emitter.err(f"Hash failed: {failure.path} {failure.error}")

    scanner = DedupScanner(
        chunk_size=options.chunk_size,
        workers=options.workers,
        failure_callback=on_hash_failure,
    )
    groups = await scanner.scan(files)
    duplicate_groups = [group for group in groups if group.is_duplicate]

    deleter = None
    if options.delete:
        deleter = SafeDeleter(
            dry_run=options.dry_run,
            use_trash=options.use_trash,
            emitter=emitter,
        )

    for group in duplicate_groups:
        _emit_group(emitter, group)
        if deleter is not None:
            deleter.delete_group(group)

    report = DedupeReport(
        root_dir=target,
        total_files=len(files),
        duplicate_groups=len(duplicate_groups),
        duplicate_files=sum(len(group.candidates) for group in duplicate_groups),
        space_reclaimable_bytes=sum(
            entry.size_bytes for group in duplicate_groups for entry in group.candidates
        ),
        groups=duplicate_groups,
        hash_failures=scanner.failures,
    )

    if deleter is not None:
        report.deleted = deleter.result.deleted
        report.would_delete = deleter.result.would_delete
        report.delete_failures = deleter.result.failures

    if options.mutates:
        emitter.out(f"Deleted duplicates: {report.deleted}")

    status = DedupeStatus.completed_with_warnings if report.has_warnings else DedupeStatus.ok

    logger.info(
        "dedupe_completed",
        root_dir=str(target),
        status=status.value,
        total_files=report.total_files,
        duplicate_groups=report.duplicate_groups,
        duplicate_files=report.duplicate_files,
        deleted=report.deleted,
        would_delete=report.would_delete,
        hash_failures=report.hash_failure_count,
        delete_failures=report.delete_failure_count,
    )

    return DedupeOutcome(status=status, report=report)


def _emit_group(emitter: LineEmitter, group: HashGroup) -> None:
    emitter.out(f"Duplicate group (hash={group.digest}):")
    for index, entry in enumerate(group.members):
        marker = "[keep] " if index == 0 else "[dup]  "
        emitter.out(f"  {marker}{entry.path}")
