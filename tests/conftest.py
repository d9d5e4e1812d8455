"""
Shared pytest fixtures for fileman tests.

Provides:
- sink: CollectingSink capturing every output line of a command
- make_file: helper writing a file with given bytes under tmp_path
- settings reset between tests

Async tests use pytest-asyncio with explicit @pytest.mark.asyncio.
"""

import os
import sys
from datetime import datetime
from pathlib import Path

import pytest

# ==========================================
# PYTHONPATH Setup
# ==========================================

# Add repo root to PYTHONPATH so tests run without installing the package
repo_root = Path(__file__).parent.parent
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

from fileman.config.settings import reset_settings  # noqa: E402
from fileman.src.core.sink import CollectingSink  # noqa: E402


@pytest.fixture
def sink() -> CollectingSink:
    """Sink collecting command output lines."""
    return CollectingSink()


@pytest.fixture
def make_file(tmp_path):
    """
    Factory writing a file under tmp_path.

    Usage:
        >>> path = make_file("a.txt", b"hello")
        >>> path = make_file("sub/b.txt", b"hello", mtime=datetime(2024, 3, 5))
    """

    def _make(relative: str, content: bytes = b"", mtime: datetime | None = None) -> Path:
        path = tmp_path / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)
        if mtime is not None:
            ts = mtime.timestamp()
            os.utime(path, (ts, ts))
        return path

    return _make


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    """No settings file or log env leaks between tests."""
    monkeypatch.delenv("FILEMAN_CONFIG", raising=False)
    monkeypatch.delenv("FILEMAN_LOG_LEVEL", raising=False)
    monkeypatch.delenv("FILEMAN_LOG_FORMAT", raising=False)
    reset_settings()
    yield
    reset_settings()

