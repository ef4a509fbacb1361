"""
Table Answer Panel.

Renders a table completion structure as a grid: text cells become
labels and blank cells become line edits where the author types the
correct answer. Inputs are bound to blank ids, so answers survive
structural edits that regenerate cell ids.
"""
from typing import Dict, Optional

from PySide6.QtCore import Qt, Signal
from PySide6.QtWidgets import (
    QGridLayout,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QVBoxLayout,
    QWidget,
)

from ielts_toolkit.core.models.table import BlankCell, TableStructure
from ielts_toolkit.editor.table_editor import TableStructureEditor


class TableAnswerPanel(QWidget):
    """
    Answer entry view over a TableStructureEditor.

    Rebuilds itself whenever the structure changes, except for changes
    it made itself by writing an answer.
    """

    answersChanged = Signal(object)  # Dict[int, str]

    def __init__(self, editor: TableStructureEditor, parent: Optional[QWidget] = None):
        super().__init__(parent)
        self.editor = editor
        self.editor.on_change = self.on_structure_changed
        self._writing_answer = False

        self._layout = QVBoxLayout(self)
        self._layout.setContentsMargins(0, 0, 0, 0)
        self._title = QLabel()
        self._title.setObjectName("table-title")
        self._layout.addWidget(self._title)
        self._grid_host: Optional[QWidget] = None

        self.rebuild()

    def set_editor(self, editor: TableStructureEditor) -> None:
        """Show another table group; the panel takes over its on_change."""
        self.editor = editor
        self.editor.on_change = self.on_structure_changed
        self.rebuild()

    def blank_edit(self, blank_id: int) -> Optional[QLineEdit]:
        return self.findChild(QLineEdit, f"blank-{blank_id}")

    def on_structure_changed(self, structure: TableStructure) -> None:
        if not self._writing_answer:
            self.rebuild()

    def rebuild(self) -> None:
        """Recreate the grid from the editor's current structure."""
        structure = self.editor.structure
        self._title.setText(structure.title)
        self._title.setVisible(bool(structure.title))

        if self._grid_host is not None:
            self._layout.removeWidget(self._grid_host)
            # Detach first so findChild never sees the stale grid
            self._grid_host.setParent(None)
            self._grid_host.deleteLater()
        self._grid_host = QWidget(self)
        grid = QGridLayout(self._grid_host)
        grid.setSpacing(6)

        for col, column in enumerate(structure.columns):
            header = QLabel(column.label)
            header.setStyleSheet("font-weight: bold;")
            grid.addWidget(header, 0, col)

        numbers = self.editor.question_numbers()
        for row_index, row in enumerate(structure.rows, start=1):
            for col, run in enumerate(row.columns):
                slot = QWidget()
                slot_layout = QHBoxLayout(slot)
                slot_layout.setContentsMargins(0, 0, 0, 0)
                slot_layout.setSpacing(4)
                for cell in run:
                    if isinstance(cell, BlankCell):
                        slot_layout.addWidget(self._make_blank(cell, numbers.get(cell.blank_id)))
                    else:
                        text = QLabel(cell.content)
                        text.setWordWrap(True)
                        slot_layout.addWidget(text)
                slot_layout.addStretch(1)
                grid.addWidget(slot, row_index, col, alignment=Qt.AlignmentFlag.AlignTop)

        self._layout.addWidget(self._grid_host)

    def _make_blank(self, cell: BlankCell, number: Optional[int]) -> QLineEdit:
        edit = QLineEdit(cell.value)
        edit.setObjectName(f"blank-{cell.blank_id}")
        edit.setFixedWidth(cell.width)
        edit.setPlaceholderText(f"({number})" if number is not None else f"[{cell.blank_id}]")
        blank_id = cell.blank_id
        edit.textEdited.connect(lambda text: self._on_answer_edited(blank_id, text))
        return edit

    def _on_answer_edited(self, blank_id: int, text: str) -> None:
        self._writing_answer = True
        try:
            self.editor.set_answer(blank_id, text)
        finally:
            self._writing_answer = False
        answers: Dict[int, str] = self.editor.answers
        self.answersChanged.emit(answers)
