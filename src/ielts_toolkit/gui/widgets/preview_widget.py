"""
Flow Chart Preview Widget.

Read-only view of a flow chart group at whatever size the widget has.
Overlay positions are recomputed after resizes settle, using a short
single-shot timer so a window drag does not rescale on every pixel.
"""
from typing import List, Optional, Sequence, Tuple

from PySide6.QtCore import QRectF, Qt, QTimer
from PySide6.QtGui import QColor, QPainter, QPen, QPixmap
from PySide6.QtWidgets import QWidget

from ielts_toolkit.editor.config import DEFAULT_CONFIG, EditorConfig
from ielts_toolkit.preview.scaling import OverlayBox, ScaleFactors, compute_scale, scale_questions

BOX_COLOR = QColor(37, 99, 235)
BOX_FILL = QColor(255, 255, 255, 220)


class PreviewWidget(QWidget):
    """
    Scaled preview of an image with question overlays.

    Fields are authored against reference_size (the size the image had
    in the editor); by default that is the image's own size.
    """

    def __init__(self, parent: Optional[QWidget] = None, config: EditorConfig = DEFAULT_CONFIG):
        super().__init__(parent)
        self._pixmap: Optional[QPixmap] = None
        self._reference_size: Optional[Tuple[int, int]] = None
        self._questions: List[object] = []
        self._display_rect = QRectF()
        self.factors: Optional[ScaleFactors] = None
        self.boxes: List[OverlayBox] = []

        self._resize_timer = QTimer(self)
        self._resize_timer.setSingleShot(True)
        self._resize_timer.setInterval(config.resize_debounce_ms)
        self._resize_timer.timeout.connect(self.recompute)

        self.setMinimumSize(120, 80)

    def set_content(
        self,
        pixmap: QPixmap,
        questions: Sequence[object],
        reference_size: Optional[Tuple[int, int]] = None,
    ) -> None:
        self._pixmap = pixmap
        self._questions = list(questions)
        self._reference_size = reference_size or (pixmap.width(), pixmap.height())
        self.recompute()

    def set_questions(self, questions: Sequence[object]) -> None:
        self._questions = list(questions)
        self.recompute()

    def resizeEvent(self, event):
        super().resizeEvent(event)
        self._resize_timer.start()

    def recompute(self) -> None:
        """Fit the image into the widget and rescale every overlay."""
        if self._pixmap is None or self._pixmap.isNull() or self.width() <= 0 or self.height() <= 0:
            self.factors = None
            self.boxes = []
            self.update()
            return

        fitted = self._pixmap.size().scaled(self.size(), Qt.AspectRatioMode.KeepAspectRatio)
        left = (self.width() - fitted.width()) / 2
        top = (self.height() - fitted.height()) / 2
        self._display_rect = QRectF(left, top, fitted.width(), fitted.height())

        self.factors = compute_scale(self._reference_size, (fitted.width(), fitted.height()))
        self.boxes = scale_questions(self._questions, self.factors)
        self.update()

    def paintEvent(self, event):
        if self._pixmap is None or self.factors is None:
            return
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.SmoothPixmapTransform)
        painter.drawPixmap(self._display_rect, self._pixmap, QRectF(self._pixmap.rect()))

        origin_x = self._display_rect.left()
        origin_y = self._display_rect.top()
        for box in self.boxes:
            rect = QRectF(origin_x + box.left, origin_y + box.top, box.width, box.height)
            painter.setPen(QPen(BOX_COLOR, 2))
            painter.setBrush(BOX_FILL)
            painter.drawRect(rect)
            painter.drawText(rect, Qt.AlignmentFlag.AlignCenter, box.label)
