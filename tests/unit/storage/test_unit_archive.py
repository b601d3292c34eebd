# tests/unit/storage/test_unit_archive.py — v1
"""Tests for storage.archive: deterministic STORED zip archives."""

from __future__ import annotations

import os
import zipfile
import zlib
from pathlib import Path

import pytest

from endecode.storage.archive import ArchiveWriter, is_excluded


def _tree(root: Path) -> Path:
    (root / "sub" / "deep").mkdir(parents=True)
    (root / "empty").mkdir()
    (root / "__MACOSX" / "junk").mkdir(parents=True)
    (root / ".hidden").mkdir()
    (root / "a.txt").write_bytes(b"alpha")
    (root / "sub" / "b.jpg").write_bytes(b"\xff\xd8" + b"b" * 300)
    (root / "sub" / "deep" / "c.mp4").write_bytes(b"c" * 50)
    (root / ".DS_Store").write_bytes(b"meta")
    (root / "sub" / "._b.jpg").write_bytes(b"fork")
    (root / "__MACOSX" / "junk" / "x.txt").write_bytes(b"x")
    (root / ".hidden" / "secret.txt").write_bytes(b"s")
    return root


class TestIsExcluded:
    @pytest.mark.parametrize("name", [".DS_Store", ".git", "._photo.jpg", "__MACOSX", "Icon.DS_Store"])
    def test_excluded(self, name: str):
        assert is_excluded(name)

    @pytest.mark.parametrize("name", ["Photo-001.jpg", "notes.txt", "MACOSX", "a.DS_Store.txt"])
    def test_kept(self, name: str):
        assert not is_excluded(name)


class TestArchiveWriter:
    def test_default_destination_beside_tree(self, tmp_path: Path):
        src = _tree(tmp_path / "Shoot")
        target = ArchiveWriter().write(src)
        assert target == tmp_path / "Shoot.zip"
        assert target.is_file()

    def test_entries_sorted_and_filtered(self, tmp_path: Path):
        src = _tree(tmp_path / "Shoot")
        target = ArchiveWriter().write(src)
        with zipfile.ZipFile(target) as zf:
            names = zf.namelist()
        assert names == [
            "a.txt",
            "empty/",
            "sub/",
            "sub/b.jpg",
            "sub/deep/",
            "sub/deep/c.mp4",
        ]

    def test_entries_are_stored_with_crc(self, tmp_path: Path):
        src = _tree(tmp_path / "Shoot")
        target = ArchiveWriter().write(src)
        with zipfile.ZipFile(target) as zf:
            for info in zf.infolist():
                assert info.compress_type == zipfile.ZIP_STORED
                assert info.compress_size == info.file_size
                if not info.is_dir():
                    data = zf.read(info)
                    assert info.CRC == zlib.crc32(data)
                else:
                    assert info.file_size == 0

    def test_extraction_reproduces_tree(self, tmp_path: Path):
        src = _tree(tmp_path / "Shoot")
        target = ArchiveWriter().write(src)
        out = tmp_path / "out"
        with zipfile.ZipFile(target) as zf:
            zf.extractall(out)
        assert (out / "sub" / "b.jpg").read_bytes() == (src / "sub" / "b.jpg").read_bytes()
        assert (out / "empty").is_dir()
        assert not (out / ".DS_Store").exists()
        assert not (out / "__MACOSX").exists()
        assert not (out / ".hidden").exists()
        assert not (out / "sub" / "._b.jpg").exists()

    def test_deterministic(self, tmp_path: Path):
        src = _tree(tmp_path / "Shoot")
        first = ArchiveWriter().write(src, tmp_path / "one.zip").read_bytes()
        second = ArchiveWriter().write(src, tmp_path / "two.zip").read_bytes()
        assert first == second

    def test_old_mtime_clamped(self, tmp_path: Path):
        src = tmp_path / "Old"
        src.mkdir()
        f = src / "old.txt"
        f.write_bytes(b"old")
        os.utime(f, (0, 0))
        target = ArchiveWriter().write(src)
        with zipfile.ZipFile(target) as zf:
            assert zf.getinfo("old.txt").date_time[0] == 1980

    def test_empty_tree(self, tmp_path: Path):
        src = tmp_path / "Empty"
        src.mkdir()
        with zipfile.ZipFile(ArchiveWriter().write(src)) as zf:
            assert zf.namelist() == []

    def test_missing_source_raises(self, tmp_path: Path):
        with pytest.raises(NotADirectoryError):
            ArchiveWriter().write(tmp_path / "missing")
