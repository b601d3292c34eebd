# tests/unit/batch/test_unit_numbering.py — v1
"""Tests for batch.numbering: order numbers and filename numbers."""

from __future__ import annotations

import pytest

from endecode.batch.numbering import (
    extract_file_number,
    extract_start_number,
    format_order_number,
    order_numbers,
    strip_start_number,
)


class TestExtractFileNumber:
    @pytest.mark.parametrize("filename, expected", [
        ("Photo-001.jpg", 1),
        ("image-101.png", 101),
        ("no-digits.png", None),
        ("IMG_0042_v2.jpg", 42),
        ("13.jpeg", 13),
        ("photo.mp4", 4),
    ])
    def test_first_digit_run(self, filename: str, expected: int | None):
        assert extract_file_number(filename) == expected

    def test_non_ascii_digits_ignored(self):
        assert extract_file_number("photo-٣.jpg") is None


class TestStartNumber:
    def test_trailing_digits(self):
        assert extract_start_number("ORDER 007") == 7

    def test_default_one(self):
        assert extract_start_number("ORDER") == 1

    def test_only_trailing_run(self):
        assert extract_start_number("BATCH2 ORDER 15") == 15

    def test_digits_not_at_end(self):
        assert extract_start_number("ORDER 5 A") == 1

    def test_strip(self):
        assert strip_start_number("ORDER 007") == "ORDER"
        assert strip_start_number("ORDER") == "ORDER"
        assert strip_start_number("42") == ""


class TestOrderNumbers:
    def test_zero_padded(self):
        assert format_order_number(5) == "005"

    def test_wider_values_kept(self):
        assert format_order_number(1234) == "1234"

    def test_custom_width(self):
        assert format_order_number(7, width=5) == "00007"

    def test_sequence_from_base_text(self):
        assert order_numbers("ORDER 5", 3) == ["005", "006", "007"]

    def test_sequence_default_start(self):
        assert order_numbers("ORDER", 2) == ["001", "002"]
