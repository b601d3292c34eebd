# tests/conftest.py — v2
"""Shared test fixtures for all unit and integration tests.

Provides small media trees on disk, real images built with Pillow, and
settings isolated from any local .env file.
"""

from __future__ import annotations

from pathlib import Path

import pytest
from PIL import Image

from endecode.batch.events import RecordingEventSink
from endecode.config.settings import Settings
from endecode.logging.context import clear_context
from endecode.watermark.store import WatermarkStore

# Payload long enough that fixture files exceed the default tail window.
FILLER = b"0123456789abcdef" * 16


def write_image(path: Path, size: tuple[int, int] = (64, 48), color: str = "navy") -> Path:
    """Write a real image whose format follows the extension."""
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.new("RGB", size, color).save(path)
    return path


def write_bytes(path: Path, data: bytes = FILLER) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)
    return path


# === FIXTURES: Settings and collaborators ===


@pytest.fixture
def settings() -> Settings:
    """Default settings, ignoring any .env in the working directory."""
    return Settings(_env_file=None, max_workers=2)


@pytest.fixture
def store() -> WatermarkStore:
    return WatermarkStore()


@pytest.fixture
def sink() -> RecordingEventSink:
    return RecordingEventSink()


@pytest.fixture(autouse=True)
def _reset_log_context():
    yield
    clear_context()


# === FIXTURES: Trees on disk ===


@pytest.fixture
def media_folder(tmp_path: Path) -> Path:
    """Source folder with photos 1-13, a video, a text file and OS clutter.

        Shoot/
            Photo-001.jpg ... Photo-013.jpg
            clip-1.mp4
            notes.txt
            readme.pdf          (unsupported)
            .DS_Store
            extras/Photo-020.png
    """
    root = tmp_path / "Shoot"
    for n in range(1, 14):
        write_image(root / f"Photo-{n:03d}.jpg", color=(n * 15, 80, 120))
    write_bytes(root / "clip-1.mp4")
    write_bytes(root / "notes.txt", b"shoot notes\n" * 20)
    write_bytes(root / "readme.pdf")
    write_bytes(root / ".DS_Store", b"\x00\x00\x00\x01Bud1")
    write_image(root / "extras" / "Photo-020.png")
    return root


@pytest.fixture
def make_image():
    """Factory writing real images: ``make_image(path, size=..., color=...)``."""
    return write_image


@pytest.fixture
def make_file():
    """Factory writing raw bytes: ``make_file(path, data=...)``."""
    return write_bytes
