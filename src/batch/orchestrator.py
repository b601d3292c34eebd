# src/batch/orchestrator.py — v1
"""Batch orchestrator: numbered, individually watermarked copies of a folder.

For each order number, in sequence:
  1. Copy the source tree to ``<source>-Copies/<NNN>/<sourceName>``
  2. Append the frame ``"<prefix> <NNN>"`` to every supported file
     (bounded worker pool, joined before the next step)
  3. Optionally render visible text onto one numbered photo
  4. Optionally swap photo NNN with photo NNN+10
Then, if requested, each copy is replaced by a STORED zip archive.

Per-file problems are logged and counted; a failed directory copy or
archive write aborts the run with FatalBatchError.
"""

from __future__ import annotations

import asyncio
import logging
import threading
import time
import uuid
from pathlib import Path
from typing import TYPE_CHECKING

from endecode.batch import numbering
from endecode.batch.classifier import FileClassifier
from endecode.batch.events import BaseEventSink, LoggingEventSink
from endecode.batch.models import BatchRequest, BatchResult, CopyJob
from endecode.batch.pool import map_bounded
from endecode.batch.progress import ProgressTracker
from endecode.batch.swap import find_swap_pair, swap_files
from endecode.config.settings import Settings
from endecode.core.errors import FatalBatchError
from endecode.core.models import EmbedStatus, FileRecord
from endecode.logging.context import clear_context, set_batch_context, set_copy_context
from endecode.storage import layout
from endecode.storage.archive import ArchiveWriter
from endecode.storage.local_tree import copy_tree, remove_tree
from endecode.watermark.store import WatermarkStore

if TYPE_CHECKING:
    from endecode.imaging.base_renderer import BaseVisibleRenderer

logger = logging.getLogger(__name__)


class BatchOrchestrator:
    """Drive one batch run from a BatchRequest to finished copies.

    Args:
        settings: Application settings. Loaded from .env if None.
        store: Watermark store. Built from settings if None.
        renderer: Visible-watermark renderer. A Pillow renderer is built
            from settings on first use if None.
        sink: Receiver for progress and messages. Logs if None.
        archive_writer: Zip writer used when ``create_zip`` is set.
        classifier: Supported-file discovery.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        store: WatermarkStore | None = None,
        renderer: BaseVisibleRenderer | None = None,
        sink: BaseEventSink | None = None,
        archive_writer: ArchiveWriter | None = None,
        classifier: FileClassifier | None = None,
    ) -> None:
        self._settings = settings or Settings()
        self._store = store or WatermarkStore.from_settings(self._settings)
        self._renderer = renderer
        self._sink = sink or LoggingEventSink()
        self._archive_writer = archive_writer or ArchiveWriter()
        self._classifier = classifier or FileClassifier()

    async def run(
        self,
        request: BatchRequest,
        cancel_event: threading.Event | None = None,
    ) -> BatchResult:
        """Execute the batch described by ``request``.

        Returns:
            BatchResult with status "completed" (progress 1.0) or
            "cancelled" (progress below 1.0, finished copies kept).

        Raises:
            ValueError: If the source folder does not exist.
            FrameTooLongError: If the payload cannot fit the tail window.
            FatalBatchError: If a directory copy or archive write fails.
        """
        source = Path(request.source_folder)
        if not source.is_dir():
            msg = f"Source folder is not a directory: {source}"
            raise ValueError(msg)

        t0 = time.perf_counter()
        set_batch_context(uuid.uuid4().hex[:8])
        try:
            tracker = ProgressTracker(request.total_steps, self._sink.on_progress)
            root = layout.copies_root(source, self._settings.copies_suffix)
            result = BatchResult(
                source_folder=source, copies_root=root, status="completed",
            )

            self._emit(logging.INFO, "Starting batch copy process...")
            self._emit(logging.INFO, "Number of copies: %d", request.num_copies)
            self._emit(logging.INFO, "Base text: %s", request.base_text)

            try:
                root.mkdir(exist_ok=True)
            except OSError as exc:
                raise self._fatal("Cannot create copies folder", None, "copy", exc) from exc

            cancelled = await self._create_copies(request, source, root, tracker, result, cancel_event)
            if not cancelled and request.create_zip:
                cancelled = await self._archive_copies(result, tracker, cancel_event)

            result.progress = tracker.fraction
            result.duration_seconds = round(time.perf_counter() - t0, 2)
            if cancelled:
                result.status = "cancelled"
                self._emit(logging.WARNING, "Batch processing cancelled")
            else:
                self._emit(logging.INFO, "Batch processing completed successfully")
            return result
        finally:
            clear_context()

    # ------------------------------------------------------------------
    # Phase 1: numbered copies
    # ------------------------------------------------------------------

    async def _create_copies(
        self,
        request: BatchRequest,
        source: Path,
        root: Path,
        tracker: ProgressTracker,
        result: BatchResult,
        cancel_event: threading.Event | None,
    ) -> bool:
        """Create, watermark and post-process every copy. Returns True if cancelled."""
        start = numbering.extract_start_number(request.base_text)
        prefix = numbering.strip_start_number(request.base_text)

        for i in range(request.num_copies):
            if _is_set(cancel_event):
                return True

            order = numbering.format_order_number(
                start + i, self._settings.order_number_width,
            )
            job = CopyJob(
                order_number=order,
                destination_dir=layout.destination_dir(root, order, source.name),
                watermark_text=f"{prefix} {order}",
                add_swap=request.add_swap,
            )
            if request.add_watermark:
                job.photo_number = (
                    request.photo_number if request.photo_number is not None else int(order)
                )
                job.visible_text = (
                    request.watermark_text if request.watermark_text is not None else order
                )
            frame = self._store.build_frame(job.watermark_text)

            set_copy_context(order, "copy")
            try:
                await asyncio.to_thread(copy_tree, source, job.destination_dir)
            except OSError as exc:
                raise self._fatal("Error copying directory", order, "copy", exc) from exc
            self._emit(logging.INFO, "Directory copied: %s", job.destination_dir)
            tracker.advance()

            set_copy_context(order, "encode")
            await self._embed_copy(job, frame, cancel_event)
            if _is_set(cancel_event):
                result.copies.append(job)
                return True
            tracker.advance()

            if request.add_watermark:
                set_copy_context(order, "visible")
                await self._apply_visible(job, frame)
                tracker.advance()

            if request.add_swap:
                set_copy_context(order, "swap")
                await self._apply_swap(job)
                tracker.advance()

            result.copies.append(job)
            self._emit(logging.INFO, "Processed folder: %s", order)

        return False

    async def _embed_copy(
        self,
        job: CopyJob,
        frame: bytes,
        cancel_event: threading.Event | None,
    ) -> None:
        """Append ``frame`` to every supported file of the copy.

        All files finish before this returns; later steps rely on it.
        """
        records = self._classifier.scan(job.destination_dir)

        def _embed(record: FileRecord) -> EmbedStatus:
            return self._store.append_frame(record.path, frame)

        def _report(record: FileRecord, status: EmbedStatus) -> None:
            if status == "added":
                kind = "video" if record.kind == "video" else "file"
                self._emit(logging.INFO, "Added watermark to %s: %s", kind, record.filename)
            elif status == "duplicate":
                self._emit(logging.INFO, "%s: Already has watermark", record.filename)
            else:
                self._emit(logging.ERROR, "Error adding watermark to %s", record.filename)

        statuses = await map_bounded(
            records, _embed, self._settings.max_workers,
            cancel_event=cancel_event, on_done=_report,
        )
        job.files_embedded = statuses.count("added")
        job.duplicates = statuses.count("duplicate")
        job.errors = statuses.count("error")

    async def _apply_visible(self, job: CopyJob, frame: bytes) -> None:
        """Render visible text onto the photo numbered ``job.photo_number``.

        Rendering rewrites the image and drops its tail frame, so the frame
        is appended again afterwards.
        """
        target = self._find_image(job.destination_dir, job.photo_number)
        if target is None:
            self._emit(
                logging.WARNING, "No photo with number %s found in %s",
                job.photo_number, job.destination_dir.name,
            )
            return

        renderer = self._get_renderer()
        try:
            rendered = await asyncio.to_thread(renderer.render, target, job.visible_text or "")
        except Exception:
            logger.exception("Visible watermark failed for %s", target.name)
            self._emit(logging.ERROR, "Error adding visible watermark to %s", target.name)
            job.errors += 1
            return

        if not rendered:
            self._emit(logging.ERROR, "Failed to add text to %s", target.name)
            job.errors += 1
            return

        await asyncio.to_thread(self._store.append_frame, target, frame)
        job.visible_applied = True
        self._emit(logging.INFO, "Added text to %s", target.name)

    async def _apply_swap(self, job: CopyJob) -> None:
        """Swap photo N with photo N+offset inside the copy, if both exist."""
        base_number = int(job.order_number)
        swap_number = base_number + self._settings.swap_offset
        self._emit(
            logging.INFO, "Starting swap operation for number %d with %d ...",
            base_number, swap_number,
        )

        images = [r.path for r in self._classifier.scan(job.destination_dir, {"image"})]
        pair = find_swap_pair(images, base_number, self._settings.swap_offset)
        if pair is None:
            self._emit(
                logging.WARNING,
                "No matching pair found for swapping in folder %s (need %d and %d)",
                job.destination_dir.name, base_number, swap_number,
            )
            return

        file_a, file_b = pair
        try:
            await asyncio.to_thread(
                swap_files, file_a, file_b, self._settings.swap_temp_prefix,
            )
        except OSError as exc:
            logger.warning("Swap failed in %s", job.destination_dir, exc_info=True)
            self._emit(
                logging.ERROR, "Error swapping files %s <--> %s: %s",
                file_a.name, file_b.name, exc,
            )
            job.errors += 1
            return

        job.swapped = True
        self._emit(logging.INFO, "Successfully swapped %s <--> %s", file_a.name, file_b.name)

    # ------------------------------------------------------------------
    # Phase 2: archives
    # ------------------------------------------------------------------

    async def _archive_copies(
        self,
        result: BatchResult,
        tracker: ProgressTracker,
        cancel_event: threading.Event | None,
    ) -> bool:
        """Replace each copy by ``<dirName>.zip``. Returns True if cancelled."""
        for job in result.copies:
            if _is_set(cancel_event):
                return True
            set_copy_context(job.order_number, "zip")
            try:
                archive = await asyncio.to_thread(
                    self._archive_writer.write, job.destination_dir,
                )
                await asyncio.to_thread(remove_tree, job.destination_dir)
            except OSError as exc:
                raise self._fatal(
                    "Error creating archive", job.order_number, "zip", exc,
                ) from exc
            job.archive_path = archive
            self._emit(logging.INFO, "Created ZIP archive: %s", archive)
            tracker.advance()
        return False

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _find_image(self, folder: Path, number: int | None) -> Path | None:
        if number is None:
            return None
        for record in self._classifier.scan(folder, {"image"}):
            if numbering.extract_file_number(record.filename) == number:
                return record.path
        return None

    def _get_renderer(self) -> BaseVisibleRenderer:
        if self._renderer is None:
            from endecode.imaging.pillow_renderer import PillowTextRenderer

            self._renderer = PillowTextRenderer.from_settings(self._settings)
        return self._renderer

    def _fatal(
        self,
        message: str,
        order_number: str | None,
        step: str,
        exc: BaseException,
    ) -> FatalBatchError:
        logger.error("%s (order=%s, step=%s)", message, order_number, step, exc_info=exc)
        self._emit(logging.ERROR, "Error during batch processing: %s: %s", message, exc)
        return FatalBatchError(f"{message}: {exc}", order_number=order_number, step=step)

    def _emit(self, level: int, message: str, *args: object) -> None:
        self._sink.on_message(level, message % args if args else message)


def _is_set(event: threading.Event | None) -> bool:
    return event is not None and event.is_set()
