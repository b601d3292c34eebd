# src/batch/swap.py — v1
"""Pairwise image swap inside one copy: file N trades places with N+offset.

The swap is three renames (A -> temp, B -> A, temp -> B). If the second or
third rename fails, the completed renames are undone so the copy is left
as it was; a crash between renames can still leave a ``temp_*`` file.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Iterable
from pathlib import Path

from endecode.batch.numbering import extract_file_number

logger = logging.getLogger(__name__)

SWAP_OFFSET = 10
TEMP_PREFIX = "temp_"


def find_swap_pair(
    images: Iterable[Path],
    base_number: int,
    offset: int = SWAP_OFFSET,
) -> tuple[Path, Path] | None:
    """Return the first images numbered ``base_number`` and ``base_number + offset``.

    Returns None unless both exist.
    """
    file_a: Path | None = None
    file_b: Path | None = None
    for path in images:
        number = extract_file_number(path.name)
        if number == base_number and file_a is None:
            file_a = path
        elif number == base_number + offset and file_b is None:
            file_b = path
    if file_a is None or file_b is None:
        return None
    return file_a, file_b


def swap_files(file_a: Path, file_b: Path, temp_prefix: str = TEMP_PREFIX) -> None:
    """Exchange the names of two files.

    Raises:
        OSError: If a rename fails. Completed renames are rolled back first.
    """
    temp = file_a.with_name(f"{temp_prefix}{time.time_ns()}_{file_a.name}")

    file_a.rename(temp)
    try:
        file_b.rename(file_a)
    except OSError:
        temp.rename(file_a)
        raise
    try:
        temp.rename(file_b)
    except OSError:
        file_a.rename(file_b)
        temp.rename(file_a)
        raise
    logger.debug("Swapped %s <-> %s", file_a, file_b)
