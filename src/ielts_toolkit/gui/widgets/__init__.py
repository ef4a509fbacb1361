"""
Authoring widgets: field canvas, table answer panel and preview.
"""

from .field_canvas import FieldCanvas
from .preview_widget import PreviewWidget
from .table_panel import TableAnswerPanel

__all__ = ["FieldCanvas", "PreviewWidget", "TableAnswerPanel"]
