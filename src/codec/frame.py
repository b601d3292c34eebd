# src/codec/frame.py — v1
"""Watermark frame wire format and bounded tail search.

Current format (appended at the end of a file)::

    PREFIX + utf8(encode(plaintext)) + SUFFIX

Legacy format: ``LEGACY_PREFIX`` followed by ciphertext up to end of file,
with no terminator. It is decoded on a best-effort basis and never removed.

All searches operate on a tail window of at most ``window_size`` bytes:
PREFIX is looked up backward from the end of the window, then SUFFIX
forward from the PREFIX position. The markers may overlap, so a tail
ending in ``<<==>>`` holds an empty frame.
"""

from __future__ import annotations

from dataclasses import dataclass

from endecode.codec.text_codec import SHIFT, decode, encode
from endecode.core.errors import FrameTooLongError

PREFIX = b"<<=="
SUFFIX = b"==>>"
LEGACY_PREFIX = b"*/"

# Fragments of the current markers; a tail holding one of these without a
# complete frame is reported as a partial (likely corrupted) watermark.
PARTIAL_MARKERS = (b"<<=", b"=>>")

MIN_FRAME_LENGTH = len(PREFIX) + len(SUFFIX)
DEFAULT_WINDOW_SIZE = 100


@dataclass(frozen=True)
class FrameLocation:
    """Offsets of a frame inside a tail window."""

    start: int
    suffix_start: int

    @property
    def payload_start(self) -> int:
        return min(self.start + len(PREFIX), self.suffix_start)

    @property
    def end(self) -> int:
        return self.suffix_start + len(SUFFIX)

    @property
    def length(self) -> int:
        return self.end - self.start


def build_frame(
    plaintext: str,
    shift: int = SHIFT,
    window_size: int = DEFAULT_WINDOW_SIZE,
) -> bytes:
    """Encode ``plaintext`` and wrap it in PREFIX/SUFFIX.

    Raises:
        FrameTooLongError: If the frame would not fit in the tail window,
            which would make it undetectable after embedding.
    """
    frame = PREFIX + encode(plaintext, shift).encode("utf-8") + SUFFIX
    if len(frame) > window_size:
        raise FrameTooLongError(len(frame), window_size)
    return frame


def find_frame(window: bytes) -> FrameLocation | None:
    """Locate the last complete current-format frame in ``window``.

    Returns None when PREFIX is absent or no SUFFIX follows it.
    """
    start = window.rfind(PREFIX)
    if start == -1:
        return None
    suffix_start = window.find(SUFFIX, start)
    if suffix_start == -1:
        return None
    return FrameLocation(start=start, suffix_start=suffix_start)


def find_legacy(window: bytes) -> int | None:
    """Return the offset of the last legacy marker in ``window``, if any."""
    pos = window.rfind(LEGACY_PREFIX)
    return None if pos == -1 else pos


def has_partial_marker(window: bytes) -> bool:
    return any(marker in window for marker in PARTIAL_MARKERS)


def decode_payload(raw: bytes, shift: int = SHIFT) -> str:
    """Decode frame payload bytes back to plaintext."""
    return decode(raw.decode("utf-8", errors="replace"), shift)
