# src/api/models.py — v2
"""API-level reports returned by the folder operations of the facade."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field

from endecode.core.models import FileKind, WatermarkInspection

FileOutcome = Literal["added", "duplicate", "removed", "unchanged", "error"]


class FileReport(BaseModel):
    """What a folder operation did to one file."""

    path: Path
    kind: FileKind
    outcome: FileOutcome


class FolderReport(BaseModel):
    """Result of encode_folder / remove_folder_watermarks."""

    folder: Path
    files: list[FileReport] = Field(default_factory=list)
    duration_seconds: float = 0.0

    @property
    def total_files(self) -> int:
        return len(self.files)

    def count(self, outcome: FileOutcome) -> int:
        return sum(1 for f in self.files if f.outcome == outcome)

    @property
    def errors(self) -> int:
        return self.count("error")


class DecodeReport(BaseModel):
    """Result of decode_folder: one inspection per supported file."""

    folder: Path
    inspections: list[WatermarkInspection] = Field(default_factory=list)

    @property
    def watermarked(self) -> list[WatermarkInspection]:
        """Inspections that yielded text (current or legacy frames)."""
        return [i for i in self.inspections if i.status in ("current", "legacy")]

    def texts(self) -> dict[str, str]:
        """Map file name to decoded text for every watermarked file."""
        return {i.path.name: i.text or "" for i in self.watermarked}


class StampReport(BaseModel):
    """Result of stamp_photo."""

    folder: Path
    photo_number: int
    target: Path | None = None
    applied: bool = False
