"""
Unit tests for DedupScanner.

Tests:
- SHA-256 chunked hashing (idempotent, matches hashlib)
- Grouping by digest, first-seen order
- Hash failures recorded, scan continues
- Concurrent hashing keeps enumeration order
"""

import hashlib
import time
from datetime import datetime
from pathlib import Path
from unittest.mock import patch

import pytest

from fileman.src.commands.dedupe import scanner as scanner_module
from fileman.src.commands.dedupe.scanner import DedupScanner, hash_file
from fileman.src.core.models import FileEntry


def _entry(path: Path) -> FileEntry:
    return FileEntry(
        path=path,
        parent_dir=path.parent,
        name=path.name,
        size_bytes=path.stat().st_size,
        modified_at=datetime.fromtimestamp(path.stat().st_mtime),
    )


def _entries(make_file, layout: list[tuple[str, bytes]]) -> list[FileEntry]:
    return [_entry(make_file(name, content)) for name, content in layout]


# ============================================================================
# Hashing
# ============================================================================


class TestHashing:
    """Test SHA-256 chunked hashing."""

    def test_hash_file_chunked(self, make_file):
        """Multi-chunk file hashed correctly."""
        content = b"Hello World! " * 10000  # ~130 KB
        f = make_file("test.txt", content)

        assert hash_file(f, chunk_size=4096) == hashlib.sha256(content).hexdigest()

    def test_hash_file_small(self, make_file):
        content = b"small file content"
        f = make_file("small.txt", content)

        assert hash_file(f) == hashlib.sha256(content).hexdigest()

    def test_hash_file_empty(self, make_file):
        f = make_file("empty.txt", b"")

        assert hash_file(f) == hashlib.sha256(b"").hexdigest()

    def test_hash_idempotent(self, make_file):
        """Hashing an unmodified file twice yields the same digest."""
        f = make_file("stable.bin", bytes(range(256)) * 100)

        assert hash_file(f) == hash_file(f)

    def test_chunk_size_does_not_change_digest(self, make_file):
        f = make_file("data.bin", b"abcdefghij" * 1000)

        assert hash_file(f, chunk_size=1) == hash_file(f, chunk_size=65536)

    def test_digest_is_256_bit_hex(self, make_file):
        f = make_file("x.txt", b"x")

        digest = hash_file(f)

        assert len(digest) == 64
        int(digest, 16)

    def test_hash_missing_file_raises(self, tmp_path):
        with pytest.raises(OSError):
            hash_file(tmp_path / "missing.txt")


# ============================================================================
# Grouping
# ============================================================================


class TestGrouping:
    """Test grouping by digest."""

    @pytest.mark.asyncio
    async def test_same_content_grouped(self, make_file):
        entries = _entries(
            make_file,
            [("a.txt", b"hello"), ("b.txt", b"hello"), ("c.txt", b"world")],
        )

        groups = await DedupScanner().scan(entries)

        by_digest = {g.digest: [m.name for m in g.members] for g in groups}
        assert by_digest[hashlib.sha256(b"hello").hexdigest()] == ["a.txt", "b.txt"]
        assert by_digest[hashlib.sha256(b"world").hexdigest()] == ["c.txt"]

    @pytest.mark.asyncio
    async def test_no_false_positives(self, make_file):
        """Files of equal size but different bytes never share a group."""
        entries = _entries(make_file, [("a", b"abcd"), ("b", b"abce"), ("c", b"abcd")])

        groups = await DedupScanner().scan(entries)

        for group in groups:
            contents = {m.path.read_bytes() for m in group.members}
            assert len(contents) == 1
        assert sorted(len(g.members) for g in groups) == [1, 2]

    @pytest.mark.asyncio
    async def test_member_order_is_input_order(self, make_file):
        """Keeper is whatever came first, not the oldest, smallest or first by name."""
        entries = _entries(
            make_file,
            [("zzz.txt", b"same"), ("aaa.txt", b"same"), ("mmm.txt", b"same")],
        )

        groups = await DedupScanner().scan(entries)

        assert [m.name for m in groups[0].members] == ["zzz.txt", "aaa.txt", "mmm.txt"]
        assert groups[0].keeper.name == "zzz.txt"
        assert [m.name for m in groups[0].candidates] == ["aaa.txt", "mmm.txt"]

    @pytest.mark.asyncio
    async def test_group_order_is_first_seen(self, make_file):
        entries = _entries(
            make_file,
            [("b1", b"B"), ("a1", b"A"), ("b2", b"B"), ("a2", b"A")],
        )

        groups = await DedupScanner().scan(entries)

        assert [g.members[0].name for g in groups] == ["b1", "a1"]

    @pytest.mark.asyncio
    async def test_singletons_not_duplicates(self, make_file):
        entries = _entries(make_file, [(f"u{i}", f"unique {i}".encode()) for i in range(4)])

        groups = await DedupScanner().scan(entries)

        assert len(groups) == 4
        assert not any(g.is_duplicate for g in groups)

    @pytest.mark.asyncio
    async def test_empty_input(self):
        assert await DedupScanner().scan([]) == []


# ============================================================================
# Failures
# ============================================================================


class TestHashFailures:
    """A failing file is excluded and the scan continues."""

    @pytest.mark.asyncio
    async def test_failure_recorded_and_excluded(self, make_file):
        entries = _entries(
            make_file,
            [("a.txt", b"same"), ("bad.txt", b"same"), ("c.txt", b"same")],
        )
        real_hash = scanner_module.hash_file

        def flaky_hash(path, chunk_size):
            if path.name == "bad.txt":
                raise PermissionError(13, "Permission denied", str(path))
            return real_hash(path, chunk_size)

        failures = []
        scanner = DedupScanner(failure_callback=failures.append)
        with patch.object(scanner_module, "hash_file", flaky_hash):
            groups = await scanner.scan(entries)

        assert len(scanner.failures) == 1
        assert scanner.failures[0].path.name == "bad.txt"
        assert "Permission denied" in scanner.failures[0].error
        assert failures == scanner.failures
        assert [m.name for m in groups[0].members] == ["a.txt", "c.txt"]

    @pytest.mark.asyncio
    async def test_file_vanished_before_hash(self, make_file):
        entries = _entries(make_file, [("a.txt", b"x"), ("gone.txt", b"x")])
        entries[1].path.unlink()

        scanner = DedupScanner()
        groups = await scanner.scan(entries)

        assert len(scanner.failures) == 1
        assert [[m.name for m in g.members] for g in groups] == [["a.txt"]]


# ============================================================================
# Concurrency
# ============================================================================


class TestConcurrentHashing:
    """workers > 1 must not change membership order."""

    @pytest.mark.asyncio
    async def test_same_result_as_sequential(self, make_file):
        layout = [(f"f{i:02d}", b"dup" if i % 3 == 0 else f"u{i}".encode()) for i in range(15)]
        entries = _entries(make_file, layout)

        sequential = await DedupScanner(workers=1).scan(entries)
        concurrent = await DedupScanner(workers=4).scan(entries)

        assert [(g.digest, [m.path for m in g.members]) for g in sequential] == [
            (g.digest, [m.path for m in g.members]) for g in concurrent
        ]

    @pytest.mark.asyncio
    async def test_completion_order_ignored(self, make_file):
        """First entry finishing last is still the keeper."""
        entries = _entries(make_file, [("first", b"same"), ("second", b"same")])
        real_hash = scanner_module.hash_file

        def slow_first(path, chunk_size):
            if path.name == "first":
                time.sleep(0.2)
            return real_hash(path, chunk_size)

        with patch.object(scanner_module, "hash_file", slow_first):
            groups = await DedupScanner(workers=2).scan(entries)

        assert groups[0].keeper.name == "first"

    @pytest.mark.asyncio
    async def test_failure_logged_before_other_hashes_finish(self, make_file):
        """A failing file is logged while a slower file is still hashing."""
        entries = _entries(make_file, [("slow", b"same"), ("gone", b"same")])
        entries[1].path.unlink()
        real_hash = scanner_module.hash_file
        seen_while_hashing = []

        with patch.object(scanner_module, "logger") as mock_logger:

            def slow_first(path, chunk_size):
                if path.name == "slow":
                    time.sleep(0.2)
                    seen_while_hashing.extend(
                        c.args[0] for c in mock_logger.info.call_args_list
                    )
                return real_hash(path, chunk_size)

            with patch.object(scanner_module, "hash_file", slow_first):
                scanner = DedupScanner(workers=2)
                await scanner.scan(entries)

        assert "dedupe_hash_failed" in seen_while_hashing
        assert [f.path.name for f in scanner.failures] == ["gone"]

    @pytest.mark.asyncio
    async def test_concurrent_failure_reported_once(self, make_file):
        entries = _entries(make_file, [("a", b"1"), ("b", b"2"), ("c", b"3")])
        entries[1].path.unlink()

        scanner = DedupScanner(workers=3)
        groups = await scanner.scan(entries)

        assert [f.path.name for f in scanner.failures] == ["b"]
        assert len(groups) == 2
