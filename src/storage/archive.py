# src/storage/archive.py — v1
"""Uncompressed (STORED) zip archives built from a directory tree.

Every file entry carries its size, CRC-32 and method in the local header
(no data descriptor, no compression). Every directory gets a zero-size
``name/`` entry so empty folders survive extraction. OS metadata
(dotfiles, ``__MACOSX``, ``.DS_Store``) is never archived, nor is
anything beneath an excluded directory.
"""

from __future__ import annotations

import logging
import shutil
import zipfile
from collections.abc import Iterator
from pathlib import Path

from endecode.storage.layout import archive_path

logger = logging.getLogger(__name__)

EXCLUDED_PREFIXES = (".", "__MACOSX")
EXCLUDED_SUFFIXES = (".DS_Store",)

_COPY_CHUNK_SIZE = 1024 * 1024


def is_excluded(name: str) -> bool:
    """Return True for OS metadata names that must not be archived."""
    return name.startswith(EXCLUDED_PREFIXES) or name.endswith(EXCLUDED_SUFFIXES)


class ArchiveWriter:
    """Write deterministic STORED zip archives of directory trees."""

    def write(self, source_dir: Path, destination: Path | None = None) -> Path:
        """Archive ``source_dir``.

        Args:
            source_dir: Tree to archive; entry names are relative to it.
            destination: Archive path. Defaults to ``<source_dir>.zip``
                beside the tree.

        Returns:
            Path of the written archive.
        """
        source_dir = Path(source_dir)
        if not source_dir.is_dir():
            msg = f"Archive source is not a directory: {source_dir}"
            raise NotADirectoryError(msg)
        target = Path(destination) if destination else archive_path(source_dir)

        entries = 0
        with zipfile.ZipFile(target, "w", compression=zipfile.ZIP_STORED) as zf:
            for path, arcname in self.iter_entries(source_dir):
                info = zipfile.ZipInfo.from_file(
                    path, arcname, strict_timestamps=False,
                )
                info.compress_type = zipfile.ZIP_STORED
                if path.is_dir():
                    zf.writestr(info, b"")
                else:
                    with path.open("rb") as src, zf.open(info, "w") as dst:
                        shutil.copyfileobj(src, dst, _COPY_CHUNK_SIZE)
                    logger.debug(
                        "Stored %s (%d bytes, crc=%08x)",
                        arcname, info.file_size, info.CRC,
                    )
                entries += 1

        logger.info("Created ZIP archive %s (%d entries)", target, entries)
        return target

    def iter_entries(self, source_dir: Path) -> Iterator[tuple[Path, str]]:
        """Yield ``(path, arcname)`` pairs in sorted top-down order.

        Directories precede their contents and their arcname ends with "/".
        """
        for child in sorted(Path(source_dir).iterdir()):
            if is_excluded(child.name):
                continue
            relative = child.relative_to(source_dir).as_posix()
            if child.is_dir():
                yield child, f"{relative}/"
                for path, arcname in self.iter_entries(child):
                    yield path, f"{relative}/{arcname}"
            elif child.is_file():
                yield child, relative
