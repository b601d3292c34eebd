# src/core/errors.py — v1
"""Exception taxonomy shared by the codec, the watermark store and the batch.

Per-file problems (I/O failures, missing swap or photo targets, duplicate
frames) are reported as return values and log lines. Only the classes
below are ever raised to callers.
"""

from __future__ import annotations


class EndecodeError(Exception):
    """Base class for all errors raised by endecode."""


class FrameTooLongError(EndecodeError):
    """Raised when a watermark frame cannot fit inside the tail scan window."""

    def __init__(self, frame_length: int, window_size: int) -> None:
        super().__init__(
            f"Watermark frame is {frame_length} bytes but the tail window "
            f"only holds {window_size}; shorten the watermark text"
        )
        self.frame_length = frame_length
        self.window_size = window_size


class FatalBatchError(EndecodeError):
    """Directory copy or archive failure that aborts the remaining batch."""

    def __init__(
        self,
        message: str,
        order_number: str | None = None,
        step: str | None = None,
    ) -> None:
        super().__init__(message)
        self.order_number = order_number
        self.step = step
