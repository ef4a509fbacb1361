"""
Module: editor.config

Purpose:
    Configuration dataclass for the authoring editors.
    Immutable configuration with validation on construction.

Key Classes:
    - EditorConfig: Sizes, clamp ranges, upload limits and timings
    - DEFAULT_CONFIG: Shared default instance

Dependencies:
    - dataclasses (std)

Used By:
    - editor.field_editor.SpatialFieldEditor
    - editor.table_editor.TableStructureEditor
    - editor.upload
    - gui.widgets.preview_widget
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from ielts_toolkit.core.models.fields import (
    DEFAULT_FIELD_HEIGHT,
    DEFAULT_FIELD_WIDTH,
    FIELD_HEIGHT_RANGE,
    FIELD_WIDTH_RANGE,
)
from ielts_toolkit.core.models.table import BLANK_WIDTH_RANGE, DEFAULT_BLANK_WIDTH

MB = 1024 * 1024


@dataclass(frozen=True)
class EditorConfig:
    """
    Configuration for the authoring editors (immutable).

    Attributes:
        default_field_width: Width of a newly clicked field
        default_field_height: Height of a newly clicked field
        field_width_range: Allowed (min, max) field width
        field_height_range: Allowed (min, max) field height
        default_blank_width: Width of a new table blank
        blank_width_range: Allowed (min, max) blank width
        max_image_bytes: Largest accepted image upload
        max_audio_bytes: Largest accepted audio upload
        min_upload_bytes: Smaller uploads are treated as empty/corrupt
        resize_debounce_ms: Delay before the preview rescales after a resize
        clamp_bottom_edge: Keep dragged fields fully above the lower edge
            (off by default: only the top edge is clamped vertically)

    Invariants:
        - Every range is (min, max) with 0 < min <= max
        - Defaults lie inside their ranges

    Example:
        >>> EditorConfig().field_width_range
        (80, 300)
    """

    default_field_width: int = DEFAULT_FIELD_WIDTH
    default_field_height: int = DEFAULT_FIELD_HEIGHT
    field_width_range: Tuple[int, int] = FIELD_WIDTH_RANGE
    field_height_range: Tuple[int, int] = FIELD_HEIGHT_RANGE
    default_blank_width: int = DEFAULT_BLANK_WIDTH
    blank_width_range: Tuple[int, int] = BLANK_WIDTH_RANGE
    max_image_bytes: int = 10 * MB
    max_audio_bytes: int = 25 * MB
    min_upload_bytes: int = 1024
    resize_debounce_ms: int = 150
    clamp_bottom_edge: bool = False

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        for name in ("field_width_range", "field_height_range", "blank_width_range"):
            low, high = getattr(self, name)
            if not (0 < low <= high):
                raise ValueError(f"{name} must satisfy 0 < min <= max: {(low, high)}")
        checks = (
            ("default_field_width", self.default_field_width, self.field_width_range),
            ("default_field_height", self.default_field_height, self.field_height_range),
            ("default_blank_width", self.default_blank_width, self.blank_width_range),
        )
        for name, value, (low, high) in checks:
            if not (low <= value <= high):
                raise ValueError(f"{name} must be within {(low, high)}: {value}")
        if self.min_upload_bytes < 0:
            raise ValueError(f"min_upload_bytes must be non-negative: {self.min_upload_bytes}")
        if self.resize_debounce_ms < 0:
            raise ValueError(f"resize_debounce_ms must be non-negative: {self.resize_debounce_ms}")


DEFAULT_CONFIG = EditorConfig()
