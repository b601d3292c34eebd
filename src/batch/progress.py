# src/batch/progress.py — v1
"""Thread-safe step counter that reports monotonic progress fractions."""

from __future__ import annotations

import threading
from collections.abc import Callable

from endecode.batch.models import ProgressReport

ProgressCallback = Callable[[ProgressReport], None]


class ProgressTracker:
    """Count completed steps out of a fixed total.

    The fraction never decreases and only reaches 1.0 once every step has
    been counted. Callbacks run outside the lock.
    """

    def __init__(self, total_steps: int, callback: ProgressCallback | None = None) -> None:
        if total_steps <= 0:
            raise ValueError("total_steps must be > 0")
        self._total = total_steps
        self._completed = 0
        self._callback = callback
        self._lock = threading.Lock()

    @property
    def total_steps(self) -> int:
        return self._total

    @property
    def completed_steps(self) -> int:
        with self._lock:
            return self._completed

    @property
    def fraction(self) -> float:
        with self._lock:
            return self._completed / self._total

    def advance(self, steps: int = 1) -> ProgressReport:
        """Count ``steps`` more completed steps and notify the callback."""
        if steps < 0:
            raise ValueError("steps must be >= 0")
        with self._lock:
            self._completed = min(self._total, self._completed + steps)
            report = ProgressReport(
                fraction=self._completed / self._total,
                completed_steps=self._completed,
                total_steps=self._total,
            )
        if self._callback is not None:
            self._callback(report)
        return report
