# src/core/models.py — v1
"""Shared Pydantic domain models used across modules."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import BaseModel

FileKind = Literal["image", "video", "text", "unsupported"]

# Outcome of appending a frame to one file.
EmbedStatus = Literal["added", "duplicate", "error"]

# What the tail of a file carries.
WatermarkStatus = Literal["current", "legacy", "partial", "none"]


class FileRecord(BaseModel):
    """A single file discovered under a working tree."""

    path: Path
    filename: str
    kind: FileKind
    size_bytes: int


class WatermarkInspection(BaseModel):
    """Result of inspecting the tail of one file for a watermark."""

    path: Path
    status: WatermarkStatus
    encoded: str | None = None
    text: str | None = None
