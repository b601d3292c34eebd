# tests/unit/config/test_settings.py — v2
"""Tests for config/settings.py: defaults, env loading and validation."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from endecode.config.settings import ConfigurationError, Settings, load_settings


class TestDefaults:
    def test_values(self):
        s = Settings(_env_file=None)
        assert s.tail_window_size == 100
        assert s.codec_shift == 7
        assert s.max_workers == 4
        assert s.copies_suffix == "-Copies"
        assert s.order_number_width == 3
        assert s.swap_offset == 10
        assert s.swap_temp_prefix == "temp_"
        assert s.visible_position == "bottom_right"
        assert s.log_level == "INFO"
        assert s.log_file is None


class TestEnvironment:
    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("ENDECODE_MAX_WORKERS", "8")
        monkeypatch.setenv("ENDECODE_LOG_FORMAT", "json")
        s = Settings(_env_file=None)
        assert s.max_workers == 8
        assert s.log_format == "json"

    def test_env_file(self, tmp_path: Path):
        env = tmp_path / ".env"
        env.write_text("ENDECODE_SWAP_OFFSET=5\nUNRELATED=1\n")
        s = Settings(_env_file=env)
        assert s.swap_offset == 5

    def test_load_settings_overrides(self):
        s = load_settings(_env_file=None, copies_suffix="-Orders")
        assert s.copies_suffix == "-Orders"


class TestValidation:
    @pytest.mark.parametrize("field", ["max_workers", "order_number_width", "visible_font_size"])
    def test_positive_fields(self, field: str):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, **{field: 0})

    @pytest.mark.parametrize("opacity", [-0.1, 1.5])
    def test_opacity_range(self, opacity: float):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, visible_opacity=opacity)

    def test_invalid_position(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, visible_position="middle")

    def test_window_must_exceed_markers(self):
        with pytest.raises(ConfigurationError, match="TAIL_WINDOW_SIZE"):
            Settings(_env_file=None, tail_window_size=8)

    def test_shift_multiple_of_26(self):
        with pytest.raises(ConfigurationError, match="CODEC_SHIFT"):
            Settings(_env_file=None, codec_shift=52)

    def test_errors_joined(self):
        with pytest.raises(ConfigurationError) as exc_info:
            Settings(_env_file=None, swap_offset=0, swap_temp_prefix="a/b")
        assert "SWAP_OFFSET" in str(exc_info.value)
        assert "SWAP_TEMP_PREFIX" in str(exc_info.value)
