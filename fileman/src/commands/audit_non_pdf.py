"""audit-nonpdf command: list non-PDF files and whether a same-name PDF exists."""

from __future__ import annotations

from pathlib import Path

import structlog

from fileman.config.exceptions import InvalidDirectoryError
from fileman.src.core.enumerator import scan
from fileman.src.core.fs_utils import require_directory
from fileman.src.core.outcome import CommandOutcome
from fileman.src.core.sink import LineEmitter, Sink

logger = structlog.get_logger(__name__)


def audit_non_pdf(
    root_dir: str | Path,
    recursive: bool = False,
    sink: Sink | None = None,
) -> CommandOutcome:
    """
    Emit "<path> | pdf: yes|no" for each non-PDF file, then totals.

    count in the outcome is the number of non-PDF files.
    """
    emitter = LineEmitter(sink)

    try:
        target = require_directory(root_dir)
    except InvalidDirectoryError as e:
        emitter.err(str(e))
        return CommandOutcome.failed(str(e))

    try:
        entries = scan(target, recursive)
    except OSError as e:
        message = f"Cannot read directory: {target} {e}"
        emitter.err(message)
        logger.error("audit_non_pdf_root_unreadable", root_dir=str(target), error=str(e))
        return CommandOutcome.failed(message)

    total = 0
    with_pdf = 0
    for entry in entries:
        if entry.is_directory:
            continue
        suffix = entry.suffix.lower()
        if suffix == ".pdf":
            continue

        total += 1
        stem = entry.name[: -len(suffix)] if suffix else entry.name
        exists = (entry.parent_dir / f"{stem}.pdf").exists()
        if exists:
            with_pdf += 1
        emitter.out(f"{entry.path} | pdf: {'yes' if exists else 'no'}")

    emitter.out("——")
    emitter.out(f"Non-PDF files: {total}")
    emitter.out(f"With same-name PDF: {with_pdf}")

    logger.info("audit_non_pdf_completed", root_dir=str(target), total=total, with_pdf=with_pdf)

    return CommandOutcome.finished(count=total)
