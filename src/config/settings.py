# src/config/settings.py — v2
"""Typed configuration loaded from .env via pydantic-settings.

Every variable is read with the ``ENDECODE_`` prefix, e.g.
``ENDECODE_MAX_WORKERS=8``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from endecode.codec.frame import MIN_FRAME_LENGTH


class ConfigurationError(Exception):
    """Raised when configuration is internally inconsistent."""


class Settings(BaseSettings):
    """Application settings loaded from .env file."""

    model_config = SettingsConfigDict(
        env_prefix="ENDECODE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === Watermark frame ===
    tail_window_size: int = 100
    codec_shift: int = 7

    # === Batch ===
    max_workers: int = 4
    copies_suffix: str = "-Copies"
    order_number_width: int = 3
    swap_offset: int = 10
    swap_temp_prefix: str = "temp_"

    # === Visible watermark ===
    visible_font_size: int = 14
    visible_opacity: float = 0.5
    visible_position: Literal[
        "top_left", "top_right", "center", "bottom_left", "bottom_right"
    ] = "bottom_right"
    visible_padding: int = 5

    # === Logging ===
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "text"] = "text"
    log_file: Path | None = None
    log_rotation: str = "10MB"
    log_retention: int = 30

    # --- Validators ---

    @field_validator("max_workers", "order_number_width", "visible_font_size")
    @classmethod
    def validate_positive(cls, v: int) -> int:  # noqa: N805
        if v < 1:
            raise ValueError("must be >= 1")
        return v

    @field_validator("visible_opacity")
    @classmethod
    def validate_opacity(cls, v: float) -> float:  # noqa: N805
        if not 0.0 <= v <= 1.0:
            raise ValueError("visible_opacity must be between 0 and 1")
        return v

    @model_validator(mode="after")
    def validate_config_consistency(self) -> Settings:
        """Validate cross-field consistency rules."""
        errors: list[str] = []

        if self.tail_window_size <= MIN_FRAME_LENGTH:
            errors.append(
                f"TAIL_WINDOW_SIZE must exceed the {MIN_FRAME_LENGTH} marker bytes"
            )

        if self.codec_shift % 26 == 0:
            errors.append("CODEC_SHIFT must not be a multiple of 26")

        if self.swap_offset == 0:
            errors.append("SWAP_OFFSET must not be 0")

        if not self.swap_temp_prefix or "/" in self.swap_temp_prefix:
            errors.append("SWAP_TEMP_PREFIX must be a plain filename prefix")

        if errors:
            raise ConfigurationError("; ".join(errors))

        return self


def load_settings(**overrides: object) -> Settings:
    """Load settings from .env with optional overrides.

    Raises:
        ConfigurationError: If configuration is internally inconsistent.
    """
    return Settings(**overrides)  # type: ignore[arg-type]
