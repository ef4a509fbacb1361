"""
Flow Chart Field Canvas.

Shows the flow chart image and lets the author place, drag and delete
answer boxes. All state lives in the SpatialFieldEditor; the canvas
translates mouse and key events into editor calls and paints the result.
"""
from typing import Optional

from PySide6.QtCore import QPointF, QRectF, Qt, Signal
from PySide6.QtGui import QColor, QFont, QPainter, QPen, QPixmap
from PySide6.QtWidgets import QSizePolicy, QWidget

from ielts_toolkit.editor.field_editor import SpatialFieldEditor

FIELD_COLOR = QColor(37, 99, 235)
EDITING_COLOR = QColor(234, 88, 12)
FIELD_FILL = QColor(255, 255, 255, 200)
LABEL_COLOR = QColor(17, 24, 39)


class FieldCanvas(QWidget):
    """
    Authoring surface for one flow chart image.

    The image is shown at most max_width pixels wide; field coordinates
    are in that displayed space.
    """

    fieldsChanged = Signal()
    fieldSelected = Signal(str)

    def __init__(self, editor: SpatialFieldEditor, parent: Optional[QWidget] = None, max_width: int = 900):
        super().__init__(parent)
        self.editor = editor
        self.editor.on_change = self._on_editor_changed
        self._max_width = max_width
        self._pixmap: Optional[QPixmap] = None

        self.setFocusPolicy(Qt.FocusPolicy.StrongFocus)
        self.setSizePolicy(QSizePolicy.Policy.Fixed, QSizePolicy.Policy.Fixed)
        self.setMinimumSize(200, 120)

    # ─────────────────────────────────────────────────────────────────────────
    # Image
    # ─────────────────────────────────────────────────────────────────────────

    def set_pixmap(self, pixmap: QPixmap) -> None:
        """Show an image, scaled down to max_width, and record its rendered size."""
        if pixmap.isNull():
            raise ValueError("Cannot display an empty image")
        if pixmap.width() > self._max_width:
            pixmap = pixmap.scaledToWidth(self._max_width, Qt.TransformationMode.SmoothTransformation)
        self._pixmap = pixmap
        self.setFixedSize(pixmap.size())
        self.editor.set_rendered_size(pixmap.width(), pixmap.height())
        self.update()

    def set_image_data(self, data: bytes) -> None:
        pixmap = QPixmap()
        if not pixmap.loadFromData(data):
            raise ValueError("Image data could not be decoded")
        self.set_pixmap(pixmap)

    def clear_image(self) -> None:
        self._pixmap = None
        self.editor.remove_image()
        self.update()

    def set_editor(self, editor: SpatialFieldEditor) -> None:
        """Switch to another group's editor; its image must be shown again."""
        self.editor.on_change = None
        self.editor = editor
        self.editor.on_change = self._on_editor_changed
        self._pixmap = None
        self.setMinimumSize(200, 120)
        self.setMaximumSize(16777215, 16777215)
        self.update()
        self.fieldsChanged.emit()

    # ─────────────────────────────────────────────────────────────────────────
    # Events
    # ─────────────────────────────────────────────────────────────────────────

    def _on_editor_changed(self) -> None:
        self.update()
        self.fieldsChanged.emit()

    def _release_pointer(self) -> None:
        self.unsetCursor()

    def mousePressEvent(self, event):
        if (
            event.button() != Qt.MouseButton.LeftButton
            or self._pixmap is None
            or not self.editor.has_image
        ):
            super().mousePressEvent(event)
            return
        pos = event.position()
        point = (pos.x(), pos.y())
        target = self.editor.field_at(point)
        if target is not None:
            self.editor.begin_drag(target.id, point, release=self._release_pointer)
            self.setCursor(Qt.CursorShape.ClosedHandCursor)
            self.fieldSelected.emit(target.id)
        else:
            created = self.editor.click(point)
            self.fieldSelected.emit(created.id)
        self.setFocus()
        self.update()

    def mouseMoveEvent(self, event):
        if self.editor.drag.is_active:
            pos = event.position()
            self.editor.drag_to((pos.x(), pos.y()))
        else:
            super().mouseMoveEvent(event)

    def mouseReleaseEvent(self, event):
        if event.button() == Qt.MouseButton.LeftButton and self.editor.end_drag():
            self.update()
            return
        super().mouseReleaseEvent(event)

    def keyPressEvent(self, event):
        selected = self.editor.editing_field_id
        if selected is not None and event.key() in (Qt.Key.Key_Delete, Qt.Key.Key_Backspace):
            self.editor.delete_field(selected)
            return
        if event.key() == Qt.Key.Key_Escape:
            self.editor.select(None)
            self.update()
            return
        super().keyPressEvent(event)

    # ─────────────────────────────────────────────────────────────────────────
    # Painting
    # ─────────────────────────────────────────────────────────────────────────

    def paintEvent(self, event):
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)

        if self._pixmap is None:
            painter.setPen(QPen(LABEL_COLOR))
            painter.drawText(self.rect(), Qt.AlignmentFlag.AlignCenter, "Upload a flow chart image")
            return

        painter.drawPixmap(0, 0, self._pixmap)

        label_font = QFont(self.font())
        label_font.setBold(True)
        numbers = self.editor.question_numbers()
        for f in self.editor.fields:
            rect = QRectF(f.x, f.y, f.width, f.height)
            editing = f.id == self.editor.editing_field_id
            painter.setPen(QPen(EDITING_COLOR if editing else FIELD_COLOR, 3 if editing else 2))
            painter.setBrush(FIELD_FILL)
            painter.drawRect(rect)

            painter.setPen(QPen(LABEL_COLOR))
            painter.setFont(self.font())
            painter.drawText(rect.adjusted(4, 0, -4, 0), Qt.AlignmentFlag.AlignVCenter, f.value)

            number = numbers.get(f.id)
            if number is not None:
                painter.setFont(label_font)
                painter.drawText(QPointF(f.x, max(f.y - 4, 12)), f"Q{number}")
