# src/imaging/base_renderer.py — v1
"""Abstract visible-watermark renderer interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path


class BaseVisibleRenderer(ABC):
    """Draws visible text onto an image file in place."""

    @abstractmethod
    def render(self, image_path: Path, text: str) -> bool:
        """Render ``text`` onto ``image_path``.

        Returns:
            True if the image was rewritten, False if it could not be
            loaded or saved.
        """
