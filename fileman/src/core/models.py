"""
Pydantic models for the core filesystem layer.

Models:
- FileEntry: one filesystem object discovered during a scan
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


class FileEntry(BaseModel):
    """Single filesystem entry with metadata (immutable once produced)."""

    model_config = ConfigDict(frozen=True)

    path: Path = Field(description="Absolute path, unique within one scan")
    parent_dir: Path = Field(description="Absolute path of the containing directory")
    name: str
    is_directory: bool = False
    is_symlink: bool = False
    size_bytes: int = Field(default=0, ge=0)
    modified_at: datetime

    @property
    def is_regular_file(self) -> bool:
        """Plain file: not a directory and not a symlink."""
        return not self.is_directory and not self.is_symlink

    @property
    def suffix(self) -> str:
        return self.path.suffix
