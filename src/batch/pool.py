# src/batch/pool.py — v1
"""Bounded concurrent execution of blocking per-file work."""

from __future__ import annotations

import asyncio
import threading
from collections.abc import Callable, Sequence
from typing import TypeVar

T = TypeVar("T")
R = TypeVar("R")


async def map_bounded(
    items: Sequence[T],
    fn: Callable[[T], R],
    max_workers: int,
    cancel_event: threading.Event | None = None,
    on_done: Callable[[T, R], None] | None = None,
) -> list[R | None]:
    """Run ``fn`` over ``items`` in worker threads, at most ``max_workers`` at once.

    Each item is scheduled exactly once. Items not yet started when
    ``cancel_event`` is set are skipped and yield None. Returns when every
    item has finished, in input order.
    """
    semaphore = asyncio.Semaphore(max(1, max_workers))

    async def _run(item: T) -> R | None:
        async with semaphore:
            if cancel_event is not None and cancel_event.is_set():
                return None
            result = await asyncio.to_thread(fn, item)
        if on_done is not None:
            on_done(item, result)
        return result

    return list(await asyncio.gather(*(_run(item) for item in items)))
