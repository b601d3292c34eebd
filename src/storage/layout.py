# src/storage/layout.py — v1
"""Batch output directory structure.

    {source.parent}/{source.name}-Copies/
        005/{source.name}/...        # working copy
        005/{source.name}.zip        # when archiving is enabled
"""

from __future__ import annotations

from pathlib import Path

COPIES_SUFFIX = "-Copies"
ARCHIVE_SUFFIX = ".zip"


def copies_root(source: Path, suffix: str = COPIES_SUFFIX) -> Path:
    """Return the folder that holds every numbered copy of ``source``."""
    return source.parent / f"{source.name}{suffix}"


def order_dir(root: Path, order_number: str) -> Path:
    """Return the folder for one order number."""
    return root / order_number


def destination_dir(root: Path, order_number: str, source_name: str) -> Path:
    """Return the working copy of the source tree for one order number."""
    return order_dir(root, order_number) / source_name


def archive_path(destination: Path) -> Path:
    """Return the archive written beside a working copy."""
    return destination.parent / f"{destination.name}{ARCHIVE_SUFFIX}"
