"""Tests for atomic, change-aware output writes."""
from __future__ import annotations

import pytest

from fsmgen.utils.files import (
    AtomicWriteError,
    atomic_write,
    get_content_hash,
    read_content_hash,
    write_if_changed,
)


class TestWriteIfChanged:
    def test_writes_new_file(self, tmp_path) -> None:
        path = tmp_path / "gen" / "door_fsm.py"

        assert write_if_changed(path, "x = 1\n") is True
        assert path.read_text(encoding="utf-8") == "x = 1\n"

    def test_skips_identical_content(self, tmp_path) -> None:
        path = tmp_path / "door_fsm.py"
        write_if_changed(path, "x = 1\n")
        mtime = path.stat().st_mtime_ns

        assert write_if_changed(path, "x = 1\n") is False
        assert path.stat().st_mtime_ns == mtime

    def test_rewrites_changed_content(self, tmp_path) -> None:
        path = tmp_path / "door_fsm.py"
        write_if_changed(path, "x = 1\n")

        assert write_if_changed(path, "x = 2\n") is True
        assert path.read_text(encoding="utf-8") == "x = 2\n"

    def test_replaces_file_that_is_not_utf8(self, tmp_path) -> None:
        path = tmp_path / "door_fsm.py"
        path.write_bytes(b"# caf\xe9\n")

        assert write_if_changed(path, "x = 1\n") is True
        assert path.read_text(encoding="utf-8") == "x = 1\n"

    def test_force(self, tmp_path) -> None:
        path = tmp_path / "door_fsm.py"
        write_if_changed(path, "x = 1\n")

        assert write_if_changed(path, "x = 1\n", force=True) is True

    def test_no_temp_files_left(self, tmp_path) -> None:
        write_if_changed(tmp_path / "door_fsm.py", "x = 1\n")

        assert [p.name for p in tmp_path.iterdir()] == ["door_fsm.py"]


class TestAtomicWrite:
    def test_failure_keeps_original(self, tmp_path) -> None:
        path = tmp_path / "door_fsm.py"
        path.write_text("original\n", encoding="utf-8")

        with pytest.raises(AtomicWriteError):
            with atomic_write(path) as f:
                f.write("partial")
                raise RuntimeError("interrupted")

        assert path.read_text(encoding="utf-8") == "original\n"
        assert [p.name for p in tmp_path.iterdir()] == ["door_fsm.py"]


class TestHashes:
    def test_read_hash_matches_content_hash(self, tmp_path) -> None:
        path = tmp_path / "a.py"
        path.write_text("pass\n", encoding="utf-8")

        assert read_content_hash(path) == get_content_hash("pass\n")

    def test_hashes_bytes_that_are_not_utf8(self, tmp_path) -> None:
        path = tmp_path / "a.py"
        path.write_bytes(b"\xff\xfe")

        assert read_content_hash(path) != get_content_hash("")

    def test_missing_file_has_no_hash(self, tmp_path) -> None:
        assert read_content_hash(tmp_path / "missing.py") is None
