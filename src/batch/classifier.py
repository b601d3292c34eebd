# src/batch/classifier.py — v2
"""Extension-based file classification and working-tree discovery.

Matching is case-insensitive and looks at the final extension only.
Files outside the allow-list are unsupported and skipped by every batch
and folder operation. Symlinked files whose target lies outside the scanned
root are skipped as well, so folder operations never write outside it.
"""

from __future__ import annotations

import logging
from pathlib import Path

from endecode.core.models import FileKind, FileRecord

logger = logging.getLogger(__name__)

# Supported file extensions mapped to file kinds
SUPPORTED_FORMATS: dict[str, FileKind] = {
    ".txt": "text",
    ".jpg": "image",
    ".jpeg": "image",
    ".png": "image",
    ".mp4": "video",
    ".avi": "video",
    ".mov": "video",
    ".mkv": "video",
}


def classify(path: Path | str) -> FileKind:
    """Return the kind of ``path`` based on its extension."""
    return SUPPORTED_FORMATS.get(Path(path).suffix.lower(), "unsupported")


def is_supported(path: Path | str) -> bool:
    return classify(path) != "unsupported"


def is_image(path: Path | str) -> bool:
    return classify(path) == "image"


def is_video(path: Path | str) -> bool:
    return classify(path) == "video"


def is_text(path: Path | str) -> bool:
    return classify(path) == "text"


class FileClassifier:
    """Discover supported files under a directory."""

    def scan(self, root: Path, kinds: set[FileKind] | None = None) -> list[FileRecord]:
        """List supported files under ``root`` recursively, sorted by path.

        Args:
            root: Directory to walk.
            kinds: If provided, only include these kinds.

        Returns:
            FileRecord for each supported regular file.
        """
        root = Path(root)
        if not root.is_dir():
            msg = f"Scan root is not a directory: {root}"
            raise ValueError(msg)
        real_root = root.resolve()

        records: list[FileRecord] = []
        for path in sorted(root.rglob("*")):
            if not path.is_file():
                continue
            kind = classify(path)
            if kind == "unsupported":
                continue
            if kinds and kind not in kinds:
                continue
            if not path.resolve().is_relative_to(real_root):
                logger.warning("Skipping %s: links outside %s", path, root)
                continue
            records.append(FileRecord(
                path=real_root / path.relative_to(root),
                filename=path.name,
                kind=kind,
                size_bytes=path.stat().st_size,
            ))

        logger.debug("Scanned %s: found %d supported files", root, len(records))
        return records
