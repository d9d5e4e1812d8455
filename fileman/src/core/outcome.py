"""
Outcome values returned by commands instead of touching process exit state.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel


class CommandStatus(str, Enum):
    """Overall status of one command run."""

    ok = "ok"
    completed_with_warnings = "completed_with_warnings"
    failed = "failed"


class CommandOutcome(BaseModel):
    """
    Result of a simple command (organize, tree, clean-empty, rename, audit).

    count is the number of items the command acted on (moved, removed,
    renamed, audited); failures counts per-item errors that were absorbed.
    """

    status: CommandStatus = CommandStatus.ok
    count: int = 0
    failures: int = 0
    error: Optional[str] = None

    @classmethod
    def failed(cls, error: str) -> "CommandOutcome":
        return cls(status=CommandStatus.failed, error=error)

    @classmethod
    def finished(cls, count: int, failures: int = 0) -> "CommandOutcome":
        status = CommandStatus.completed_with_warnings if failures else CommandStatus.ok
        return cls(status=status, count=count, failures=failures)
