# src/watermark/store.py — v1
"""Tail-frame embed, detect, extract and remove on single files.

Every operation reads at most ``window_size`` bytes from the end of the
file and releases its handle before returning. I/O errors are logged and
reported through the return value so one unreadable file never aborts a
folder-wide pass.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import TYPE_CHECKING

from endecode.codec import frame as wire
from endecode.codec.text_codec import SHIFT
from endecode.core.models import EmbedStatus, WatermarkInspection

if TYPE_CHECKING:
    from endecode.config.settings import Settings

logger = logging.getLogger(__name__)


class WatermarkStore:
    """Read and mutate watermark frames at the tail of files.

    Args:
        window_size: Number of trailing bytes scanned for a frame.
        shift: Substitution shift used to encode and decode payloads.
    """

    def __init__(
        self,
        window_size: int = wire.DEFAULT_WINDOW_SIZE,
        shift: int = SHIFT,
    ) -> None:
        self._window_size = window_size
        self._shift = shift

    @classmethod
    def from_settings(cls, settings: Settings) -> WatermarkStore:
        return cls(window_size=settings.tail_window_size, shift=settings.codec_shift)

    @property
    def window_size(self) -> int:
        return self._window_size

    def build_frame(self, plaintext: str) -> bytes:
        """Build the frame this store would append for ``plaintext``."""
        return wire.build_frame(plaintext, self._shift, self._window_size)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def has_watermark(self, path: Path) -> bool:
        """Return True if a complete current-format frame ends the file."""
        tail = self._read_tail(path)
        if tail is None:
            return False
        window, _ = tail
        return wire.find_frame(window) is not None

    def extract_watermark_text(self, path: Path) -> str | None:
        """Return the decoded watermark text, or None if there is none.

        Falls back to the legacy prefix-only format when no current frame
        is present.
        """
        inspection = self.inspect(path)
        if inspection.status in ("current", "legacy"):
            return inspection.text
        return None

    def inspect(self, path: Path) -> WatermarkInspection:
        """Classify the tail of ``path`` and decode whatever it carries."""
        path = Path(path)
        tail = self._read_tail(path)
        if tail is None:
            return WatermarkInspection(path=path, status="none")
        window, _ = tail

        location = wire.find_frame(window)
        if location is not None:
            raw = window[location.payload_start:location.suffix_start]
            encoded = raw.decode("utf-8", errors="replace")
            text = wire.decode_payload(raw, self._shift)
            logger.debug("Found watermark in %s: %s", path.name, text)
            return WatermarkInspection(
                path=path, status="current", encoded=encoded, text=text,
            )

        legacy = wire.find_legacy(window)
        if legacy is not None:
            raw = window[legacy + len(wire.LEGACY_PREFIX):]
            encoded = raw.decode("utf-8", errors="replace").strip()
            text = wire.decode_payload(raw, self._shift).strip()
            logger.debug("Found legacy watermark in %s: %s", path.name, text)
            return WatermarkInspection(
                path=path, status="legacy", encoded=encoded, text=text,
            )

        if wire.has_partial_marker(window):
            logger.warning(
                "%s contains a partial watermark: %r", path.name, window,
            )
            return WatermarkInspection(path=path, status="partial")

        return WatermarkInspection(path=path, status="none")

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add_watermark(self, path: Path, plaintext: str) -> EmbedStatus:
        """Encode ``plaintext`` and append it as a frame.

        Returns "duplicate" without touching the file when a frame is
        already present.

        Raises:
            FrameTooLongError: If the frame would not fit in the window.
        """
        return self.append_frame(path, self.build_frame(plaintext))

    def append_frame(self, path: Path, frame: bytes) -> EmbedStatus:
        """Append a prebuilt frame unless the file already carries one."""
        path = Path(path)
        if self.has_watermark(path):
            logger.info("%s: already has watermark", path.name)
            return "duplicate"
        try:
            with path.open("r+b") as fh:
                fh.seek(0, os.SEEK_END)
                fh.write(frame)
        except OSError:
            logger.warning("Error adding watermark to %s", path.name, exc_info=True)
            return "error"
        logger.info("%s: watermark added", path.name)
        return "added"

    def remove_watermark(self, path: Path) -> bool:
        """Truncate the file just before its current-format frame.

        Returns False when there is no frame or the file cannot be written.
        """
        path = Path(path)
        tail = self._read_tail(path)
        if tail is None:
            return False
        window, file_size = tail

        location = wire.find_frame(window)
        if location is None:
            return False

        offset = file_size - (len(window) - location.start)
        try:
            with path.open("r+b") as fh:
                fh.truncate(offset)
        except OSError:
            logger.warning("Error removing watermark from %s", path.name, exc_info=True)
            return False
        logger.info("Removed watermark from %s", path.name)
        return True

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _read_tail(self, path: Path) -> tuple[bytes, int] | None:
        """Read up to ``window_size`` trailing bytes and the file size.

        Returns None for files too short to hold a frame, or on I/O error.
        """
        try:
            with Path(path).open("rb") as fh:
                file_size = fh.seek(0, os.SEEK_END)
                if file_size < wire.MIN_FRAME_LENGTH:
                    return None
                read_length = min(self._window_size, file_size)
                fh.seek(file_size - read_length)
                window = fh.read(read_length)
        except OSError:
            logger.warning(
                "Error reading watermark data from %s", Path(path).name,
                exc_info=True,
            )
            return None
        return window, file_size
