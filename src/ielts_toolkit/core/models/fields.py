"""
Module: fields

Purpose:
    Provides the ImageField dataclass - a fillable answer box positioned
    over a flow chart image. Coordinates are expressed in the pixel space
    of the image as it was rendered while authoring, not its natural
    resolution (see preview.scaling for the conversion).

Key Functions:
    - create_field(at): New field with default size and empty value
    - resize_field(field, dw, dh): Resize with width/height clamping
    - move_field(field, dx, dy, container): Move within container bounds
    - ImageField.to_dict() / ImageField.from_dict(): Serialization

Dependencies:
    - dataclasses (std)
    - typing (std)

Used By:
    - core.models.questions.FlowChartQuestion
    - editor.field_editor.SpatialFieldEditor
    - preview.scaling
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional, Tuple

# Size limits for image fields (authoring pixels)
DEFAULT_FIELD_WIDTH = 140
DEFAULT_FIELD_HEIGHT = 32
FIELD_WIDTH_RANGE: Tuple[int, int] = (80, 300)
FIELD_HEIGHT_RANGE: Tuple[int, int] = (20, 100)


def clamp(value: float, low: float, high: float) -> float:
    """Clamp value into [low, high]."""
    return max(low, min(high, value))


@dataclass(frozen=True, slots=True)
class ImageField:
    """
    Answer box placed on a flow chart image (immutable).

    Attributes:
        id: Stable opaque identifier, unique within one editor
        x: Left edge in authoring-viewport pixels
        y: Top edge in authoring-viewport pixels
        width: Box width in pixels
        height: Box height in pixels
        value: Correct answer typed into the box
        question_number: Explicit question number override (None = auto)

    Invariants:
        - id is non-empty
        - x >= 0 and y >= 0
        - width > 0 and height > 0
        - question_number is None or >= 1

    Example:
        >>> f = ImageField("field-1", x=10, y=20)
        >>> f.right
        150
    """

    id: str
    x: float
    y: float
    width: float = DEFAULT_FIELD_WIDTH
    height: float = DEFAULT_FIELD_HEIGHT
    value: str = ""
    question_number: Optional[int] = None

    def __post_init__(self) -> None:
        """Validate field on construction."""
        if not self.id or not self.id.strip():
            raise ValueError("field id must be non-empty")
        if self.x < 0 or self.y < 0:
            raise ValueError(f"field position must be >= 0: ({self.x}, {self.y})")
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"field size must be > 0: {self.width}x{self.height}")
        if self.question_number is not None and self.question_number < 1:
            raise ValueError(f"question_number must be >= 1: {self.question_number}")

    # ─────────────────────────────────────────────────────────────────────────
    # Properties
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def right(self) -> float:
        """X-coordinate of the right edge."""
        return self.x + self.width

    @property
    def bottom(self) -> float:
        """Y-coordinate of the bottom edge."""
        return self.y + self.height

    def contains(self, px: float, py: float) -> bool:
        """Check if a point lies inside this box (edges inclusive)."""
        return self.x <= px <= self.right and self.y <= py <= self.bottom

    # ─────────────────────────────────────────────────────────────────────────
    # Serialization
    # ─────────────────────────────────────────────────────────────────────────

    def to_dict(self) -> dict:
        """
        Serialize to the persisted field payload.

        Returns:
            Dict with id, x, y, width, height, value and optionally questionNumber
        """
        d = {
            "id": self.id,
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height,
            "value": self.value,
        }
        if self.question_number is not None:
            d["questionNumber"] = self.question_number
        return d

    @classmethod
    def from_dict(cls, data: dict, *, default_height: float = DEFAULT_FIELD_HEIGHT) -> ImageField:
        """
        Deserialize from a persisted field payload.

        Older payloads may omit height; default_height is used then.

        Raises:
            ValueError: If the payload violates field invariants
            KeyError: If id or coordinates are missing
        """
        return cls(
            id=str(data["id"]),
            x=data["x"],
            y=data["y"],
            width=data.get("width", DEFAULT_FIELD_WIDTH),
            height=data.get("height") or default_height,
            value=data.get("value") or "",
            question_number=data.get("questionNumber"),
        )

    def __repr__(self) -> str:
        """Concise representation for debugging."""
        return f"ImageField({self.id!r}, ({self.x}, {self.y}), {self.width}x{self.height})"


# ─────────────────────────────────────────────────────────────────────────────
# Field Operations
# ─────────────────────────────────────────────────────────────────────────────

def create_field(
    at: Tuple[float, float],
    *,
    id: str,
    width: float = DEFAULT_FIELD_WIDTH,
    height: float = DEFAULT_FIELD_HEIGHT,
) -> ImageField:
    """
    Create a field with its top-left corner at a point.

    Args:
        at: (x, y) in authoring-viewport pixels
        id: Identifier for the new field
        width: Initial width
        height: Initial height

    Returns:
        New ImageField with an empty value
    """
    x, y = at
    return ImageField(id=id, x=max(0.0, x), y=max(0.0, y), width=width, height=height)


def resize_field(
    field: ImageField,
    dw: float = 0,
    dh: float = 0,
    *,
    width_range: Tuple[int, int] = FIELD_WIDTH_RANGE,
    height_range: Tuple[int, int] = FIELD_HEIGHT_RANGE,
) -> ImageField:
    """
    Resize a field by a delta, clamping into the allowed ranges.

    The clamp is applied regardless of delta magnitude, so a huge
    negative delta yields the minimum size.
    """
    return replace(
        field,
        width=clamp(field.width + dw, *width_range),
        height=clamp(field.height + dh, *height_range),
    )


def move_field_to(
    field: ImageField,
    x: float,
    y: float,
    container: Tuple[float, float],
    *,
    clamp_bottom_edge: bool = False,
) -> ImageField:
    """
    Move a field to a position, clamped to the rendered container.

    Horizontally the whole box stays inside [0, width]. Vertically only
    the top edge is kept inside [0, height], so the box may overflow below
    the container unless clamp_bottom_edge is set.

    Args:
        field: Field to move
        x: Requested left edge
        y: Requested top edge
        container: (rendered_width, rendered_height) of the image
        clamp_bottom_edge: Keep the bottom edge inside the container too
    """
    rendered_width, rendered_height = container
    max_x = max(0.0, rendered_width - field.width)
    max_y = rendered_height - field.height if clamp_bottom_edge else rendered_height
    return replace(
        field,
        x=clamp(x, 0.0, max_x),
        y=clamp(y, 0.0, max(0.0, max_y)),
    )


def move_field(
    field: ImageField,
    dx: float,
    dy: float,
    container: Tuple[float, float],
    *,
    clamp_bottom_edge: bool = False,
) -> ImageField:
    """Move a field by a delta. See move_field_to for clamping rules."""
    return move_field_to(
        field,
        field.x + dx,
        field.y + dy,
        container,
        clamp_bottom_edge=clamp_bottom_edge,
    )
