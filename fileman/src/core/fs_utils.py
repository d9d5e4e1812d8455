"""Small path helpers shared by commands."""

from __future__ import annotations

import shutil
from pathlib import Path

from fileman.config.exceptions import InvalidDirectoryError

SIZE_UNITS = ["B", "KB", "MB", "GB", "TB"]


def is_directory(path: str | Path) -> bool:
    """True if path exists and is a directory; False on any stat error."""
    try:
        return Path(path).is_dir()
    except OSError:
        return False


def require_directory(path: str | Path) -> Path:
    """
    Resolve path to an absolute directory.

    Raises:
        InvalidDirectoryError: If path does not exist or is not a directory
    """
    target = Path(path).resolve()
    if not is_directory(target):
        raise InvalidDirectoryError(target)
    return target


def ensure_dir(path: str | Path) -> None:
    Path(path).mkdir(parents=True, exist_ok=True)


def move_file(src: str | Path, dest: str | Path) -> None:
    """Move src to dest, creating dest's parent directories."""
    dest = Path(dest)
    ensure_dir(dest.parent)
    shutil.move(str(src), str(dest))


def format_bytes(size_bytes: int) -> str:
    """
    Format bytes to human-readable size.

    >>> format_bytes(0)
    '0 B'
    >>> format_bytes(1536)
    '1.5 KB'
    """
    if size_bytes <= 0:
        return "0 B"
    value = float(size_bytes)
    for unit in SIZE_UNITS[:-1]:
        if value < 1024:
            return f"{value:.1f} {unit}"
        value /= 1024
    return f"{value:.1f} {SIZE_UNITS[-1]}"
