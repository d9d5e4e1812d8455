"""
dedupe command.

Modules:
- scanner: chunked SHA-256 hashing and grouping
- deleter: dry-run / unlink / trash deletion of non-keeper duplicates
- engine: validation, output lines, outcome
- report_generator: CSV report
- models: Pydantic data models
"""

from fileman.src.commands.dedupe.engine import dedupe
from fileman.src.commands.dedupe.models import (
    DedupeOptions,
    DedupeOutcome,
    DedupeReport,
    DedupeStatus,
    HashGroup,
)

__all__ = [
    "DedupeOptions",
    "DedupeOutcome",
    "DedupeReport",
    "DedupeStatus",
    "HashGroup",
    "dedupe",
]
