# src/batch/events.py — v1
"""Event sinks: where progress reports and user-facing messages go.

The batch and folder operations never write to a global console. They
receive a sink and call ``on_progress`` / ``on_message`` on it. Messages
are the human-readable lines a UI would show; diagnostics still go
through the module loggers.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable

from endecode.batch.models import ProgressReport

logger = logging.getLogger("endecode.events")


class BaseEventSink(ABC):
    """Receiver for progress and message events."""

    @abstractmethod
    def on_progress(self, report: ProgressReport) -> None:
        """Called after every completed step."""

    @abstractmethod
    def on_message(self, level: int, message: str) -> None:
        """Called for every user-facing log line."""


class LoggingEventSink(BaseEventSink):
    """Forward events to the ``endecode.events`` logger (default sink)."""

    def on_progress(self, report: ProgressReport) -> None:
        logger.debug(
            "Progress %.1f%% (%d/%d)",
            report.fraction * 100, report.completed_steps, report.total_steps,
        )

    def on_message(self, level: int, message: str) -> None:
        logger.log(level, message)


class CallbackEventSink(BaseEventSink):
    """Adapt plain callables (e.g. a UI progress bar and console)."""

    def __init__(
        self,
        progress: Callable[[float], None] | None = None,
        message: Callable[[str], None] | None = None,
    ) -> None:
        self._progress = progress
        self._message = message

    def on_progress(self, report: ProgressReport) -> None:
        if self._progress is not None:
            self._progress(report.fraction)

    def on_message(self, level: int, message: str) -> None:
        if self._message is not None:
            self._message(message)


class RecordingEventSink(BaseEventSink):
    """Keep every event in memory."""

    def __init__(self) -> None:
        self.reports: list[ProgressReport] = []
        self.messages: list[tuple[int, str]] = []

    def on_progress(self, report: ProgressReport) -> None:
        self.reports.append(report)

    def on_message(self, level: int, message: str) -> None:
        self.messages.append((level, message))

    @property
    def fractions(self) -> list[float]:
        return [r.fraction for r in self.reports]

    @property
    def texts(self) -> list[str]:
        return [text for _, text in self.messages]
