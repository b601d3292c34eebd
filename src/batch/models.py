# src/batch/models.py — v2
"""Batch processing models: BatchRequest, CopyJob, ProgressReport, BatchResult."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field


class BatchRequest(BaseModel):
    """Everything the caller supplies for one batch run."""

    source_folder: Path
    num_copies: int = Field(gt=0)
    base_text: str
    add_swap: bool = False
    add_watermark: bool = False
    create_zip: bool = False
    watermark_text: str | None = None
    photo_number: int | None = None

    @property
    def enabled_flag_count(self) -> int:
        """Number of optional per-copy steps switched on."""
        return sum((self.add_watermark, self.add_swap, self.create_zip))

    @property
    def total_steps(self) -> int:
        """Progress steps: copy + encode per copy, plus one per enabled flag."""
        return self.num_copies * (2 + self.enabled_flag_count)


class CopyJob(BaseModel):
    """One numbered copy of the source tree and what happened to it."""

    order_number: str
    destination_dir: Path
    watermark_text: str
    visible_text: str | None = None
    photo_number: int | None = None
    add_swap: bool = False
    files_embedded: int = 0
    duplicates: int = 0
    errors: int = 0
    visible_applied: bool = False
    swapped: bool = False
    archive_path: Path | None = None


class ProgressReport(BaseModel):
    """Fraction of the run completed so far."""

    fraction: float = Field(ge=0.0, le=1.0)
    completed_steps: int
    total_steps: int


class BatchResult(BaseModel):
    """Summary of a finished (or cancelled) batch run."""

    source_folder: Path
    copies_root: Path
    status: Literal["completed", "cancelled"]
    copies: list[CopyJob] = Field(default_factory=list)
    progress: float = 0.0
    duration_seconds: float = 0.0

    @property
    def order_numbers(self) -> list[str]:
        return [job.order_number for job in self.copies]

    @property
    def files_embedded(self) -> int:
        return sum(job.files_embedded for job in self.copies)

    @property
    def errors(self) -> int:
        return sum(job.errors for job in self.copies)
