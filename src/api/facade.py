# src/api/facade.py — v2
"""Public API facade: folder-level watermark operations and batch runs.

Usage:
    from endecode.api.facade import encode_folder, run_batch
    report = await encode_folder(Path("shoot"), "ORDER 001")
    result = await run_batch(BatchRequest(source_folder=..., num_copies=3,
                                          base_text="ORDER 1"))

Every function accepts an optional ``progress`` callable receiving
fractions in [0, 1]. Per-file failures are reported in the returned
model, never raised.
"""

from __future__ import annotations

import asyncio
import logging
import threading
import time
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING

from endecode.api.models import DecodeReport, FileReport, FolderReport, StampReport
from endecode.batch.classifier import FileClassifier
from endecode.batch.events import BaseEventSink, LoggingEventSink
from endecode.batch.models import BatchRequest, BatchResult, ProgressReport
from endecode.batch.numbering import extract_file_number
from endecode.batch.orchestrator import BatchOrchestrator
from endecode.batch.pool import map_bounded
from endecode.batch.progress import ProgressTracker
from endecode.config.settings import Settings
from endecode.core.models import FileRecord
from endecode.watermark.store import WatermarkStore

if TYPE_CHECKING:
    from endecode.imaging.base_renderer import BaseVisibleRenderer

logger = logging.getLogger(__name__)

ProgressFn = Callable[[float], None]


async def encode_folder(
    folder: Path,
    text: str,
    settings: Settings | None = None,
    progress: ProgressFn | None = None,
    cancel_event: threading.Event | None = None,
) -> FolderReport:
    """Append the frame for ``text`` to every supported file under ``folder``.

    Files that already carry a frame are left untouched and reported as
    "duplicate".

    Raises:
        ValueError: If ``folder`` is not a directory.
        FrameTooLongError: If ``text`` cannot fit the tail window.
    """
    settings = settings or Settings()
    store = WatermarkStore.from_settings(settings)
    frame = store.build_frame(text)

    def _encode(record: FileRecord) -> FileReport:
        status = store.append_frame(record.path, frame)
        return FileReport(path=record.path, kind=record.kind, outcome=status)

    return await _run_folder(folder, _encode, settings, progress, cancel_event)


async def decode_folder(
    folder: Path,
    settings: Settings | None = None,
    progress: ProgressFn | None = None,
) -> DecodeReport:
    """Inspect every supported file under ``folder`` and decode its watermark."""
    settings = settings or Settings()
    store = WatermarkStore.from_settings(settings)
    records = FileClassifier().scan(Path(folder))
    tracker = _tracker(len(records), progress)

    def _done(record: FileRecord, _result: object) -> None:
        tracker.advance()

    inspections = await map_bounded(
        records, lambda r: store.inspect(r.path), settings.max_workers,
        on_done=_done,
    )
    report = DecodeReport(
        folder=Path(folder),
        inspections=[i for i in inspections if i is not None],
    )
    logger.info(
        "Decoded %s: %d of %d files watermarked",
        folder, len(report.watermarked), len(report.inspections),
    )
    return report


async def remove_folder_watermarks(
    folder: Path,
    settings: Settings | None = None,
    progress: ProgressFn | None = None,
    cancel_event: threading.Event | None = None,
) -> FolderReport:
    """Strip the current-format frame from every supported file under ``folder``.

    Files without a frame are reported as "unchanged".
    """
    settings = settings or Settings()
    store = WatermarkStore.from_settings(settings)

    def _remove(record: FileRecord) -> FileReport:
        if not store.has_watermark(record.path):
            return FileReport(path=record.path, kind=record.kind, outcome="unchanged")
        removed = store.remove_watermark(record.path)
        return FileReport(
            path=record.path,
            kind=record.kind,
            outcome="removed" if removed else "error",
        )

    return await _run_folder(folder, _remove, settings, progress, cancel_event)


async def stamp_photo(
    folder: Path,
    photo_number: int,
    text: str,
    settings: Settings | None = None,
    renderer: BaseVisibleRenderer | None = None,
) -> StampReport:
    """Render ``text`` onto the first image under ``folder`` numbered ``photo_number``.

    A watermark frame present before rendering is appended again afterwards,
    since re-encoding the image drops trailing bytes.
    """
    settings = settings or Settings()
    store = WatermarkStore.from_settings(settings)
    report = StampReport(folder=Path(folder), photo_number=photo_number)

    for record in FileClassifier().scan(Path(folder), {"image"}):
        if extract_file_number(record.filename) == photo_number:
            report.target = record.path
            break
    if report.target is None:
        logger.warning("No photo with number %d found in %s", photo_number, folder)
        return report

    if renderer is None:
        from endecode.imaging.pillow_renderer import PillowTextRenderer

        renderer = PillowTextRenderer.from_settings(settings)

    before = store.inspect(report.target)
    report.applied = await asyncio.to_thread(renderer.render, report.target, text)
    if report.applied and before.status == "current" and before.text is not None:
        store.add_watermark(report.target, before.text)
    return report


async def run_batch(
    request: BatchRequest,
    settings: Settings | None = None,
    sink: BaseEventSink | None = None,
    progress: ProgressFn | None = None,
    cancel_event: threading.Event | None = None,
    renderer: BaseVisibleRenderer | None = None,
) -> BatchResult:
    """Run one batch: numbered copies, frames, optional visible/swap/zip steps.

    Args:
        request: What to copy and which optional steps to run.
        settings: Global settings. Loaded from .env if None.
        sink: Receiver for progress and messages. Logs if None.
        progress: Extra fraction callback, used alongside the default sink.
        cancel_event: Set it to stop before the next copy or file.
        renderer: Visible-watermark renderer. Pillow if None.

    Raises:
        ValueError: If the source folder does not exist.
        FrameTooLongError: If the payload cannot fit the tail window.
        FatalBatchError: If a directory copy or archive write fails.
    """
    if sink is None:
        sink = _ProgressLoggingSink(progress) if progress else LoggingEventSink()
    orchestrator = BatchOrchestrator(settings=settings, renderer=renderer, sink=sink)
    result = await orchestrator.run(request, cancel_event)
    logger.info(
        "Batch %s: %d copies, %d files embedded, %d errors in %.2fs",
        result.status, len(result.copies), result.files_embedded,
        result.errors, result.duration_seconds,
    )
    return result


class _ProgressLoggingSink(LoggingEventSink):
    """Default logging sink that also forwards fractions to a callable."""

    def __init__(self, progress: ProgressFn) -> None:
        self._progress = progress

    def on_progress(self, report: ProgressReport) -> None:
        super().on_progress(report)
        self._progress(report.fraction)


async def _run_folder(
    folder: Path,
    fn: Callable[[FileRecord], FileReport],
    settings: Settings,
    progress: ProgressFn | None,
    cancel_event: threading.Event | None,
) -> FolderReport:
    t0 = time.perf_counter()
    folder = Path(folder)
    records = FileClassifier().scan(folder)
    tracker = _tracker(len(records), progress)

    def _done(record: FileRecord, report: FileReport) -> None:
        tracker.advance()

    results = await map_bounded(
        records, fn, settings.max_workers,
        cancel_event=cancel_event, on_done=_done,
    )
    report = FolderReport(
        folder=folder,
        files=[r for r in results if r is not None],
        duration_seconds=round(time.perf_counter() - t0, 2),
    )
    logger.info(
        "Processed %s: %d files, %d errors", folder, report.total_files, report.errors,
    )
    return report


def _tracker(total: int, progress: ProgressFn | None) -> ProgressTracker:
    callback = (lambda r: progress(r.fraction)) if progress else None
    # An empty folder still counts as one finished step.
    tracker = ProgressTracker(max(total, 1), callback)
    if total == 0:
        tracker.advance()
    return tracker
