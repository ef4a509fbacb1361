"""
Module: preview.renderer

Purpose:
    Render a flow chart preview: the image resized to a display size
    with each question's answer box and number drawn on top.

Key Functions:
    - render_preview(): Resize and draw overlays
    - draw_overlay_box(): Draw one box and its label

Dependencies:
    - PIL: Image resizing and drawing
    - preview.scaling: Coordinate transform

Used By:
    - gui.main_window (preview export)
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional, Tuple

from PIL import Image, ImageDraw, ImageFont

from .scaling import OverlayBox, compute_scale, scale_questions

logger = logging.getLogger(__name__)

DEFAULT_BOX_COLOR = "white"
DEFAULT_OUTLINE_COLOR = (37, 99, 235)
DEFAULT_TEXT_COLOR = "black"
MIN_FONT_SIZE = 10


def render_preview(
    image: Image.Image,
    questions: Iterable[object],
    display_size: Tuple[int, int],
    *,
    reference_size: Optional[Tuple[int, int]] = None,
    outline_color=DEFAULT_OUTLINE_COLOR,
    box_color: str = DEFAULT_BOX_COLOR,
    text_color: str = DEFAULT_TEXT_COLOR,
) -> Image.Image:
    """
    Render a preview of a flow chart group.

    Args:
        image: Source image at its natural size (not modified)
        questions: Questions of one group; non flow chart entries are skipped
        display_size: (width, height) of the preview
        reference_size: (width, height) the fields were authored against;
            defaults to the image's own size

    Returns:
        New RGB image of display_size with overlays applied

    Example:
        >>> out = render_preview(img, group_questions, (500, 400))
        >>> out.size
        (500, 400)
    """
    factors = compute_scale(reference_size or image.size, display_size)
    result = image.convert("RGB").resize(display_size, Image.Resampling.LANCZOS)
    draw = ImageDraw.Draw(result)

    boxes = scale_questions(questions, factors)
    for box in boxes:
        draw_overlay_box(
            draw,
            box,
            outline_color=outline_color,
            box_color=box_color,
            text_color=text_color,
        )

    logger.debug(f"Rendered preview {display_size} with {len(boxes)} overlays (scale {factors.x:.3f}x{factors.y:.3f})")
    return result


def draw_overlay_box(
    draw: ImageDraw.ImageDraw,
    box: OverlayBox,
    *,
    outline_color=DEFAULT_OUTLINE_COLOR,
    box_color: str = DEFAULT_BOX_COLOR,
    text_color: str = DEFAULT_TEXT_COLOR,
) -> None:
    bbox = box.as_bbox()
    draw.rectangle(bbox, fill=box_color, outline=outline_color, width=2)
    if not box.label:
        return
    font = _load_font(max(MIN_FONT_SIZE, int(box.height * 0.6)))
    text_x, text_y = calculate_center_position(bbox, box.label, font, draw)
    draw.text((text_x, text_y), box.label, fill=text_color, font=font)


def calculate_center_position(
    bbox: Tuple[int, int, int, int],
    text: str,
    font,
    draw: ImageDraw.ImageDraw,
) -> Tuple[int, int]:
    """Top-left position that centers text in bbox."""
    x1, y1, x2, y2 = bbox
    text_bbox = draw.textbbox((0, 0), text, font=font)
    text_width = text_bbox[2] - text_bbox[0]
    text_height = text_bbox[3] - text_bbox[1]
    return x1 + (x2 - x1 - text_width) // 2, y1 + (y2 - y1 - text_height) // 2


def _load_font(size: int):
    """
    Load a bold TrueType font, falling back to Pillow's default.
    """
    font_options = [
        "arialbd.ttf",
        "Arial Bold.ttf",
        "DejaVuSans-Bold.ttf",
        "arial.ttf",
        "Arial.ttf",
        "DejaVuSans.ttf",
    ]

    for font_name in font_options:
        try:
            return ImageFont.truetype(font_name, size)
        except (IOError, OSError):
            continue

    logger.warning("Could not load TrueType font, using default")
    return ImageFont.load_default()
