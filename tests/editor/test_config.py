"""
Unit Tests for EditorConfig

Tests for configuration defaults and validation.
"""

import pytest

from ielts_toolkit.editor.config import DEFAULT_CONFIG, EditorConfig


class TestEditorConfig:
    """Tests for EditorConfig dataclass."""

    def test_defaults_when_created_then_documented_limits(self):
        assert DEFAULT_CONFIG.field_width_range == (80, 300)
        assert DEFAULT_CONFIG.field_height_range == (20, 100)
        assert DEFAULT_CONFIG.blank_width_range == (50, 500)
        assert DEFAULT_CONFIG.max_image_bytes == 10 * 1024 * 1024
        assert DEFAULT_CONFIG.max_audio_bytes == 25 * 1024 * 1024
        assert DEFAULT_CONFIG.resize_debounce_ms == 150
        assert DEFAULT_CONFIG.clamp_bottom_edge is False

    def test_init_when_range_inverted_then_raises_error(self):
        with pytest.raises(ValueError, match="field_width_range"):
            EditorConfig(field_width_range=(300, 80))

    def test_init_when_default_outside_range_then_raises_error(self):
        with pytest.raises(ValueError, match="default_blank_width"):
            EditorConfig(default_blank_width=40)

    def test_init_when_negative_debounce_then_raises_error(self):
        with pytest.raises(ValueError, match="resize_debounce_ms"):
            EditorConfig(resize_debounce_ms=-1)

    def test_config_when_frozen_then_cannot_modify(self):
        with pytest.raises(AttributeError):
            DEFAULT_CONFIG.clamp_bottom_edge = True
