"""
IELTS Toolkit Core Package

Shared data models and utilities for the authoring editors, the
synchronizer and the preview renderer.
"""

from .models import ImageField, Part, Question, TableStructure

__all__ = [
    "ImageField",
    "Part",
    "Question",
    "TableStructure",
]
