# src/imaging/pillow_renderer.py — v1
"""Pillow implementation of the visible watermark: small semi-transparent text.

The text is drawn white on a transparent overlay and alpha-composited
onto the image, then the image is saved back in its original format.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Literal

from PIL import Image, ImageDraw, ImageFont, UnidentifiedImageError

from endecode.imaging.base_renderer import BaseVisibleRenderer

if TYPE_CHECKING:
    from endecode.config.settings import Settings

logger = logging.getLogger(__name__)

TextPosition = Literal["top_left", "top_right", "center", "bottom_left", "bottom_right"]

_TEXT_COLOR = (255, 255, 255)
_JPEG_QUALITY = 95


class PillowTextRenderer(BaseVisibleRenderer):
    """Render visible text with Pillow.

    Args:
        font_size: Pixel size of the default font.
        opacity: Text opacity in [0, 1].
        position: Corner (or center) the text is anchored to.
        padding: Distance in pixels from the image edges.
    """

    def __init__(
        self,
        font_size: int = 14,
        opacity: float = 0.5,
        position: TextPosition = "bottom_right",
        padding: int = 5,
    ) -> None:
        self._font_size = font_size
        self._opacity = opacity
        self._position = position
        self._padding = padding

    @classmethod
    def from_settings(cls, settings: Settings) -> PillowTextRenderer:
        return cls(
            font_size=settings.visible_font_size,
            opacity=settings.visible_opacity,
            position=settings.visible_position,
            padding=settings.visible_padding,
        )

    def render(self, image_path: Path, text: str) -> bool:
        image_path = Path(image_path)
        try:
            with Image.open(image_path) as img:
                img.load()
                fmt = img.format
                mode = img.mode
                base = img.convert("RGBA")
        except (OSError, UnidentifiedImageError):
            logger.warning("Failed to load image %s", image_path.name, exc_info=True)
            return False

        overlay = Image.new("RGBA", base.size, (0, 0, 0, 0))
        draw = ImageDraw.Draw(overlay)
        font = ImageFont.load_default(size=self._font_size)
        left, top, right, bottom = draw.textbbox((0, 0), text, font=font)
        x, y = self._anchor(base.size, (right - left, bottom - top))
        alpha = round(255 * self._opacity)
        draw.text((x - left, y - top), text, font=font, fill=(*_TEXT_COLOR, alpha))

        composed = Image.alpha_composite(base, overlay)
        if mode != "RGBA":
            composed = composed.convert("RGB" if mode not in ("L", "LA") else mode)

        save_kwargs = {"quality": _JPEG_QUALITY} if fmt == "JPEG" else {}
        try:
            composed.save(image_path, format=fmt, **save_kwargs)
        except (OSError, ValueError):
            logger.error("Failed to save image %s", image_path.name, exc_info=True)
            return False

        logger.info("Added text to %s", image_path.name)
        return True

    def _anchor(self, image_size: tuple[int, int], text_size: tuple[int, int]) -> tuple[int, int]:
        """Top-left corner of the text box for the configured position."""
        width, height = image_size
        text_w, text_h = text_size
        pad = self._padding
        right = max(0, width - text_w - pad)
        bottom = max(0, height - text_h - pad)
        positions = {
            "top_left": (pad, pad),
            "top_right": (right, pad),
            "center": (max(0, (width - text_w) // 2), max(0, (height - text_h) // 2)),
            "bottom_left": (pad, bottom),
            "bottom_right": (right, bottom),
        }
        return positions[self._position]
