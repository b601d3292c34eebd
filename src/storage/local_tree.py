# src/storage/local_tree.py — v1
"""Local filesystem tree operations used by the batch."""

from __future__ import annotations

import shutil
from pathlib import Path


def copy_tree(source: Path, destination: Path) -> None:
    """Recursively copy ``source`` to ``destination``, overwriting files."""
    destination.parent.mkdir(parents=True, exist_ok=True)
    shutil.copytree(str(source), str(destination), dirs_exist_ok=True)


def remove_tree(path: Path) -> None:
    """Delete a directory tree."""
    shutil.rmtree(str(path))
