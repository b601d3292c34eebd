# tests/unit/codec/test_unit_frame.py — v1
"""Tests for codec.frame: frame construction and tail-window search."""

from __future__ import annotations

import pytest

from endecode.codec.frame import (
    LEGACY_PREFIX,
    MIN_FRAME_LENGTH,
    PREFIX,
    SUFFIX,
    build_frame,
    decode_payload,
    find_frame,
    find_legacy,
    has_partial_marker,
)
from endecode.core.errors import FrameTooLongError


class TestBuildFrame:
    def test_layout(self):
        assert build_frame("ORDER 005") == b"<<==VYKLY 772==>>"

    def test_markers(self):
        assert PREFIX == b"<<=="
        assert SUFFIX == b"==>>"
        assert LEGACY_PREFIX == b"*/"
        assert MIN_FRAME_LENGTH == 8

    def test_empty_text(self):
        assert build_frame("") == PREFIX + SUFFIX

    def test_utf8_payload(self):
        frame = build_frame("é")
        assert frame == PREFIX + "é".encode("utf-8") + SUFFIX

    def test_too_long_raises(self):
        with pytest.raises(FrameTooLongError) as exc_info:
            build_frame("x" * 93)
        assert exc_info.value.frame_length == 101
        assert exc_info.value.window_size == 100

    def test_exactly_window_size_allowed(self):
        assert len(build_frame("x" * 92)) == 100

    def test_custom_window(self):
        with pytest.raises(FrameTooLongError):
            build_frame("abc", window_size=10)


class TestFindFrame:
    def test_frame_at_end(self):
        window = b"jpegdata" + b"<<==abc==>>"
        loc = find_frame(window)
        assert loc is not None
        assert loc.start == 8
        assert loc.payload_start == 12
        assert window[loc.payload_start:loc.suffix_start] == b"abc"
        assert loc.end == len(window)
        assert loc.length == 11

    def test_no_prefix(self):
        assert find_frame(b"plain data ==>>") is None

    def test_prefix_without_suffix(self):
        assert find_frame(b"data <<==abc") is None

    def test_suffix_before_prefix_ignored(self):
        assert find_frame(b"==>> data <<==abc") is None

    def test_last_prefix_wins(self):
        window = b"<<==old==>>" + b"<<==new==>>"
        loc = find_frame(window)
        assert window[loc.payload_start:loc.suffix_start] == b"new"

    def test_overlapping_markers_form_empty_frame(self):
        window = b"data<<==>>"
        loc = find_frame(window)
        assert loc is not None
        assert loc.start == 4
        assert loc.suffix_start == 6
        assert window[loc.payload_start:loc.suffix_start] == b""
        assert loc.end == len(window)

    def test_empty_payload(self):
        loc = find_frame(b"xx<<====>>")
        assert loc is not None
        assert loc.payload_start == loc.suffix_start


class TestLegacyAndPartial:
    def test_find_legacy(self):
        assert find_legacy(b"data*/VYKLY") == 4

    def test_find_legacy_last_occurrence(self):
        assert find_legacy(b"*/a*/b") == 3

    def test_find_legacy_absent(self):
        assert find_legacy(b"nothing here") is None

    def test_partial_markers(self):
        assert has_partial_marker(b"abc<<=xyz")
        assert has_partial_marker(b"abc=>>")
        assert not has_partial_marker(b"abc")

    def test_decode_payload(self):
        assert decode_payload(b"VYKLY 772") == "ORDER 005"

    def test_decode_payload_invalid_utf8(self):
        assert decode_payload(b"\xff") == "�"
