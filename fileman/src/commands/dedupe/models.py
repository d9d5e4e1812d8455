"""
Pydantic models for the dedupe command.

Models:
- DedupeOptions: what to do with duplicates (report, dry-run, delete, trash)
- HashGroup: files sharing one SHA-256 digest
- HashFailure / DeleteFailure: per-file errors absorbed into the report
- DedupeReport: summary of one run
- DedupeOutcome: status + report (or precondition error)
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field

from fileman.src.core.models import FileEntry
from fileman.src.core.outcome import CommandStatus

DedupeStatus = CommandStatus


class DedupAction(str, Enum):
    """Action assigned to a member of a duplicate group."""

    keep = "keep"
    delete = "delete"


class DedupeOptions(BaseModel):
    """Options for one dedupe run."""

    delete: bool = Field(default=False, description="Enable the deletion phase")
    dry_run: bool = Field(default=False, description="Report deletions without performing them")
    use_trash: bool = Field(default=False, description="send2trash instead of unlink")
    chunk_size: int = Field(default=65536, ge=1, description="SHA-256 read chunk size in bytes")
    workers: int = Field(default=1, ge=1, description="Files hashed concurrently")

    @property
    def mutates(self) -> bool:
        """True only when files will actually be removed."""
        return self.delete and not self.dry_run


class HashGroup(BaseModel):
    """Files sharing one digest, in enumeration order."""

    digest: str
    members: list[FileEntry] = Field(default_factory=list, min_length=1)

    @property
    def is_duplicate(self) -> bool:
        return len(self.members) >= 2

    @property
    def keeper(self) -> FileEntry:
        """First member in enumeration order."""
        return self.members[0]

    @property
    def candidates(self) -> list[FileEntry]:
        """Every member except the keeper."""
        return self.members[1:]

    def action_for(self, entry: FileEntry) -> DedupAction:
        return DedupAction.keep if entry.path == self.keeper.path else DedupAction.delete


class HashFailure(BaseModel):
    path: Path
    error: str


class DeleteFailure(BaseModel):
    path: Path
    error: str


class DedupeReport(BaseModel):
    """Summary of one dedupe run."""

    root_dir: Path
    scan_date: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    total_files: int = 0
    duplicate_groups: int = 0
    duplicate_files: int = 0
    deleted: int = 0
    would_delete: int = 0
    space_reclaimable_bytes: int = 0
    groups: list[HashGroup] = Field(default_factory=list)
    hash_failures: list[HashFailure] = Field(default_factory=list)
    delete_failures: list[DeleteFailure] = Field(default_factory=list)

    @property
    def hash_failure_count(self) -> int:
        return len(self.hash_failures)

    @property
    def delete_failure_count(self) -> int:
        return len(self.delete_failures)

    @property
    def has_warnings(self) -> bool:
        return bool(self.hash_failures or self.delete_failures)


class DedupeOutcome(BaseModel):
    """Status of a dedupe run; report is None when the run never started."""

    status: DedupeStatus
    report: Optional[DedupeReport] = None
    error: Optional[str] = None
