"""
Module: preview.scaling

Purpose:
    Map fields authored in the image's rendered (authoring) pixel space
    onto a display of any size. That reference size is the natural size
    unless the editor showed the image scaled down. Overlays use separate
    x/y factors so a stretched display still lines up with the picture
    underneath.

Key Functions:
    - compute_scale(): Factors from natural and displayed sizes
    - scale_field(): One field to an OverlayBox
    - scale_questions(): Overlay boxes for the flow chart questions of a list

Used By:
    - preview.renderer: Pillow preview images
    - gui.widgets.preview_widget: Live overlay painting
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from ielts_toolkit.core.models.fields import ImageField
from ielts_toolkit.core.models.questions import FlowChartQuestion

Size = Tuple[int, int]


@dataclass(frozen=True, slots=True)
class ScaleFactors:
    """Horizontal and vertical display/natural ratios."""

    x: float
    y: float

    def __post_init__(self) -> None:
        if self.x <= 0 or self.y <= 0:
            raise ValueError(f"Scale factors must be positive: ({self.x}, {self.y})")

    @classmethod
    def identity(cls) -> ScaleFactors:
        return cls(1.0, 1.0)


@dataclass(frozen=True, slots=True)
class OverlayBox:
    """
    A field positioned in display space.

    Attributes:
        left, top: Offset from the displayed image's top-left corner
        width, height: Displayed size
        label: Text drawn with the box (question number)
    """

    left: float
    top: float
    width: float
    height: float
    label: str = ""

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def bottom(self) -> float:
        return self.top + self.height

    def as_bbox(self) -> Tuple[int, int, int, int]:
        """Rounded (x1, y1, x2, y2) for Pillow drawing."""
        return (round(self.left), round(self.top), round(self.right), round(self.bottom))


def compute_scale(natural_size: Size, displayed_size: Size) -> ScaleFactors:
    """
    Compute display/natural ratios.

    Args:
        natural_size: (width, height) the fields were authored against;
            the image file size when it was shown unscaled
        displayed_size: (width, height) the image is shown at

    Raises:
        ValueError: If either size has a non-positive dimension

    Example:
        >>> compute_scale((1000, 800), (500, 400))
        ScaleFactors(x=0.5, y=0.5)
    """
    nw, nh = natural_size
    dw, dh = displayed_size
    if nw <= 0 or nh <= 0:
        raise ValueError(f"Invalid natural size: {natural_size}")
    if dw <= 0 or dh <= 0:
        raise ValueError(f"Invalid displayed size: {displayed_size}")
    return ScaleFactors(dw / nw, dh / nh)


def scale_field(field: ImageField, factors: ScaleFactors, label: Optional[str] = None) -> OverlayBox:
    return OverlayBox(
        left=field.x * factors.x,
        top=field.y * factors.y,
        width=field.width * factors.x,
        height=field.height * factors.y,
        label=label if label is not None else "",
    )


def scale_questions(questions: Iterable[object], factors: ScaleFactors) -> List[OverlayBox]:
    """Overlay boxes, labelled with question numbers, in number order."""
    flow = sorted(
        (q for q in questions if isinstance(q, FlowChartQuestion)),
        key=lambda q: q.number,
    )
    return [scale_field(q.field, factors, str(q.number)) for q in flow]
