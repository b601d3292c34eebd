# src/logging/context.py — v3
"""Per-run logging context: batch_id, order_number and step.

The context is one immutable snapshot held in a ContextVar, so it follows
``asyncio`` tasks and ``asyncio.to_thread`` workers automatically.
"""

from __future__ import annotations

import contextvars
from dataclasses import asdict, dataclass, replace
from typing import Any


@dataclass(frozen=True)
class LogContext:
    """Immutable snapshot of the current logging context."""

    batch_id: str | None = None
    order_number: str | None = None
    step: str | None = None

    def as_dict(self) -> dict[str, Any]:
        """Return the fields that are set."""
        return {k: v for k, v in asdict(self).items() if v is not None}


_EMPTY = LogContext()
_current: contextvars.ContextVar[LogContext] = contextvars.ContextVar(
    "endecode_log_context", default=_EMPTY
)


def get_context() -> LogContext:
    return _current.get()


def set_batch_context(batch_id: str) -> None:
    """Start a new batch; order number and step are cleared."""
    _current.set(LogContext(batch_id=batch_id))


def set_copy_context(order_number: str | None, step: str | None = None) -> None:
    """Set the copy being processed and its current step."""
    _current.set(replace(_current.get(), order_number=order_number, step=step))


def clear_context() -> None:
    _current.set(_EMPTY)

