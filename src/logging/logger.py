# src/logging/logger.py — v3
"""Logger setup for the ``endecode`` namespace.

A ``ContextFilter`` on each handler copies the current LogContext onto
records as ``batch_id``, ``order_number`` and ``step``; the formatters
only read record attributes.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path

from endecode.logging.context import get_context

ROOT_LOGGER = "endecode"

_CONTEXT_FIELDS = ("batch_id", "order_number", "step")

# Third-party loggers that are chatty at DEBUG.
_NOISY_LOGGERS = ("PIL",)


class ContextFilter(logging.Filter):
    """Attach the current logging context to every record."""

    def filter(self, record: logging.LogRecord) -> bool:
        ctx = get_context()
        for name in _CONTEXT_FIELDS:
            setattr(record, name, getattr(ctx, name))
        return True


def _timestamp(record: logging.LogRecord) -> datetime:
    return datetime.fromtimestamp(record.created, tz=timezone.utc)


class JsonFormatter(logging.Formatter):
    """One JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, object] = {
            "timestamp": _timestamp(record).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        context = {
            name: getattr(record, name)
            for name in _CONTEXT_FIELDS
            if getattr(record, name, None) is not None
        }
        if context:
            entry["context"] = context
        if record.exc_info and record.exc_info[1] is not None:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


class TextFormatter(logging.Formatter):
    """``2026-01-01 12:00:00 [INFO    ] endecode.x [005] (encode) - message``"""

    def format(self, record: logging.LogRecord) -> str:
        head = f"{_timestamp(record):%Y-%m-%d %H:%M:%S} [{record.levelname:8s}] {record.name}"
        order = getattr(record, "order_number", None)
        step = getattr(record, "step", None)
        if order:
            head += f" [{order}]"
        if step:
            head += f" ({step})"
        text = f"{head} - {record.getMessage()}"
        if record.exc_info and record.exc_info[1] is not None:
            text += "\n" + self.formatException(record.exc_info)
        return text


def get_logger(name: str) -> logging.Logger:
    """Return ``endecode.<name>``; handlers come from setup_logging()."""
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")


def setup_logging(
    level: str = "INFO",
    log_format: str = "text",
    log_file: str | Path | None = None,
    rotation: str = "10MB",
    retention: int = 30,
) -> logging.Logger:
    """Install console (stderr) and optional rotating file handlers.

    Calling it again replaces the handlers installed by the previous call.

    Args:
        level: DEBUG, INFO, WARNING or ERROR.
        log_format: "json" or "text".
        log_file: Optional log file path.
        rotation: Max file size before rotation (e.g. "10MB").
        retention: Number of rotated files to keep.

    Returns:
        The configured ``endecode`` logger.
    """
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(logging.getLevelName(level.upper()))
    for old in list(logger.handlers):
        logger.removeHandler(old)
        old.close()

    formatter = JsonFormatter() if log_format == "json" else TextFormatter()
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        from endecode.logging.handlers import create_rotating_handler

        handlers.append(create_rotating_handler(log_file, rotation, retention))

    for handler in handlers:
        handler.setFormatter(formatter)
        handler.addFilter(ContextFilter())
        logger.addHandler(handler)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    return logger
