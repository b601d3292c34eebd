# src/batch/numbering.py — v1
"""Order-number and filename-number parsing.

    extract_file_number("Photo-001.jpg")  -> 1
    extract_file_number("image-101.png")  -> 101
    extract_start_number("ORDER 007")     -> 7
    extract_start_number("ORDER")         -> 1
"""

from __future__ import annotations

import re

DEFAULT_START_NUMBER = 1
ORDER_NUMBER_WIDTH = 3

_TRAILING_DIGITS = re.compile(r"\d+$", re.ASCII)
_FIRST_DIGITS = re.compile(r"\d+", re.ASCII)


def extract_file_number(filename: str) -> int | None:
    """Return the first run of digits in ``filename``, or None."""
    match = _FIRST_DIGITS.search(filename)
    return int(match.group()) if match else None


def extract_start_number(text: str) -> int:
    """Return the digits ending ``text``, defaulting to 1."""
    match = _TRAILING_DIGITS.search(text)
    return int(match.group()) if match else DEFAULT_START_NUMBER


def strip_start_number(text: str) -> str:
    """Return ``text`` without its trailing digits, trimmed."""
    return _TRAILING_DIGITS.sub("", text).strip()


def format_order_number(value: int, width: int = ORDER_NUMBER_WIDTH) -> str:
    """Zero-pad ``value`` to ``width`` digits (wider values are kept)."""
    return str(value).zfill(width)


def order_numbers(base_text: str, count: int, width: int = ORDER_NUMBER_WIDTH) -> list[str]:
    """Contiguous ascending order numbers for ``count`` copies."""
    start = extract_start_number(base_text)
    return [format_order_number(start + i, width) for i in range(count)]
