"""
Preview rendering: scale authored fields to any display size.
"""

from .renderer import render_preview
from .scaling import OverlayBox, ScaleFactors, compute_scale, scale_field, scale_questions

__all__ = [
    "OverlayBox",
    "ScaleFactors",
    "compute_scale",
    "render_preview",
    "scale_field",
    "scale_questions",
]
