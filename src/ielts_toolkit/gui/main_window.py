"""
Main Window for the IELTS authoring toolkit.

Three tabs share one Part: a flow chart editor, a table completion
editor and a scaled preview. Saving a tab commits its group through the
GroupSynchronizer and writes the Part to the store. Groups already in
the store are listed above the tabs and can be reopened for editing.
"""
import io
import logging
from pathlib import Path
from typing import Callable, Optional

from PIL import Image
from PySide6.QtCore import Qt
from PySide6.QtGui import QPixmap
from PySide6.QtWidgets import (
    QComboBox,
    QFileDialog,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QMainWindow,
    QPushButton,
    QScrollArea,
    QSpinBox,
    QTabWidget,
    QVBoxLayout,
    QWidget,
)

from ielts_toolkit.core.models.groups import FlowChartArtifact
from ielts_toolkit.core.models.parts import Part
from ielts_toolkit.core.models.questions import QuestionKind
from ielts_toolkit.core.utils.ids import IdGenerator
from ielts_toolkit.editor.errors import EditorError
from ielts_toolkit.editor.field_editor import SpatialFieldEditor
from ielts_toolkit.editor.table_editor import TableStructureEditor
from ielts_toolkit.editor.upload import UploadError, UploadFile, Uploader
from ielts_toolkit.gui.widgets.field_canvas import FieldCanvas
from ielts_toolkit.gui.widgets.preview_widget import PreviewWidget
from ielts_toolkit.gui.widgets.table_panel import TableAnswerPanel
from ielts_toolkit.preview.renderer import render_preview
from ielts_toolkit.sync.store import InMemoryPartStore, PartNotFoundError, PartStore
from ielts_toolkit.sync.submission import SubmissionError, validate_submission
from ielts_toolkit.sync.synchronizer import GroupSynchronizer, NumberingConflictError

logger = logging.getLogger(__name__)

IMAGE_FILTER = "Images (*.png *.jpg *.jpeg *.gif *.webp)"

ImageFetcher = Callable[[str], bytes]


class MainWindow(QMainWindow):
    """
    Authoring window for one Part of one test.

    fetch_image, when given, downloads the bytes of a durable image URL so
    a reopened flow chart group shows its picture again.
    """

    def __init__(
        self,
        uploader: Optional[Uploader] = None,
        store: Optional[PartStore] = None,
        test_id: str = "draft",
        part_number: int = 1,
        fetch_image: Optional[ImageFetcher] = None,
    ):
        super().__init__()
        self.setWindowTitle(f"IELTS Toolkit - {test_id} part {part_number}")
        self.resize(1100, 760)

        self.uploader = uploader
        self.fetch_image = fetch_image
        self.store = store or InMemoryPartStore()
        self.test_id = test_id
        try:
            self.sync, warnings = GroupSynchronizer.load(self.store, test_id, part_number)
        except PartNotFoundError:
            self.sync, warnings = GroupSynchronizer(Part(part_number)), []
        for warning in warnings:
            logger.warning(f"Loaded with warning: {warning}")

        self.flow_editor = SpatialFieldEditor(
            uploader, starting_question_number=self.sync.next_question_number()
        )
        self.flow_editor.group_id = IdGenerator.group_id()
        self.table_editor = TableStructureEditor()
        self.table_editor.group_id = IdGenerator.group_id()
        self._last_image_data: Optional[bytes] = None

        central = QWidget()
        layout = QVBoxLayout(central)
        layout.addLayout(self._build_group_row())
        self.tabs = QTabWidget()
        self.tabs.addTab(self._build_flow_tab(), "Flow Chart")
        self.tabs.addTab(self._build_table_tab(), "Table")
        self.preview = PreviewWidget()
        self.tabs.addTab(self.preview, "Preview")
        layout.addWidget(self.tabs, 1)
        self.setCentralWidget(central)

        self.status = QLabel()
        self.status.setObjectName("status")
        self.statusBar().addWidget(self.status)

        self._refresh_groups()
        self._open_stored_groups()

    # ─────────────────────────────────────────────────────────────────────────
    # Stored groups
    # ─────────────────────────────────────────────────────────────────────────

    def _build_group_row(self) -> QHBoxLayout:
        row = QHBoxLayout()
        self.group_picker = QComboBox()
        self.group_picker.setMinimumWidth(260)
        open_btn = QPushButton("Open group")
        open_btn.clicked.connect(self._open_picked_group)
        submit_btn = QPushButton("Check submission")
        submit_btn.clicked.connect(self.check_submission)
        row.addWidget(QLabel("Saved groups"))
        row.addWidget(self.group_picker)
        row.addWidget(open_btn)
        row.addStretch(1)
        row.addWidget(submit_btn)
        return row

    def _refresh_groups(self) -> None:
        self.group_picker.clear()
        for group in self.sync.groups():
            label = "Flow chart" if group.kind is QuestionKind.FLOW_CHART else "Table"
            self.group_picker.addItem(
                f"{label}: questions {group.start_question_number}-{group.end_question_number}",
                group.group_id,
            )

    def _open_stored_groups(self) -> None:
        """Open the earliest stored group of each kind."""
        opened = set()
        for group in self.sync.groups():
            if group.kind not in opened:
                self.open_group(group.group_id)
                opened.add(group.kind)

    def _open_picked_group(self) -> None:
        group_id = self.group_picker.currentData()
        if group_id:
            self.open_group(group_id)

    def open_group(self, group_id: str) -> None:
        """
        Load a committed group into its editor for further editing.

        Raises:
            KeyError: If the Part has no such group
        """
        artifact = self.sync.artifact(group_id)
        if not isinstance(artifact, FlowChartArtifact):
            self.table_editor = TableStructureEditor.from_artifact(artifact)
            self.table_panel.set_editor(self.table_editor)
            self.table_editor.on_change = self._on_table_changed
            self.table_title.setText(artifact.structure.title)
            self._refresh_columns()
            self.tabs.setCurrentIndex(1)
            self.show_message(f"Opened table at question {artifact.start_question_number}")
            return

        self.flow_editor = SpatialFieldEditor.from_artifact(artifact, self.uploader)
        self.canvas.set_editor(self.flow_editor)
        self.flow_start.setValue(artifact.start_question_number)
        self._last_image_data = None
        self.tabs.setCurrentIndex(0)
        if self.fetch_image is None:
            self.show_message(
                f"Opened flow chart at question {artifact.start_question_number}; "
                "the image is not loaded but its fields can still be saved"
            )
            return
        try:
            data = self.fetch_image(artifact.image_url)
            self.canvas.set_image_data(data)
        except (OSError, ValueError) as e:
            self.show_message(f"Could not load image {artifact.image_url}: {e}")
            return
        self._last_image_data = data
        self._refresh_preview(self.sync.questions_in(group_id))
        self.show_message(f"Opened flow chart at question {artifact.start_question_number}")

    def check_submission(self) -> bool:
        """Run the whole-Part completeness check and report the result."""
        try:
            validate_submission([self.sync.part])
        except SubmissionError as e:
            self.show_message(str(e))
            return False
        self.show_message("Every question is ready to submit")
        return True

    # ─────────────────────────────────────────────────────────────────────────
    # Flow chart tab
    # ─────────────────────────────────────────────────────────────────────────

    def _build_flow_tab(self) -> QWidget:
        tab = QWidget()
        layout = QVBoxLayout(tab)

        controls = QHBoxLayout()
        self.upload_btn = QPushButton("Upload image…")
        self.upload_btn.clicked.connect(self._choose_image)
        self.flow_start = QSpinBox()
        self.flow_start.setRange(1, 200)
        self.flow_start.setValue(self.flow_editor.starting_question_number or 1)
        self.flow_start.valueChanged.connect(self._on_flow_start_changed)
        self.flow_save_btn = QPushButton("Save fields")
        self.flow_save_btn.clicked.connect(self.save_flow_chart)
        export_btn = QPushButton("Export preview…")
        export_btn.clicked.connect(self._choose_export_path)
        controls.addWidget(self.upload_btn)
        controls.addWidget(QLabel("Start at question"))
        controls.addWidget(self.flow_start)
        controls.addStretch(1)
        controls.addWidget(export_btn)
        controls.addWidget(self.flow_save_btn)
        layout.addLayout(controls)

        value_row = QHBoxLayout()
        self.field_value = QLineEdit()
        self.field_value.setPlaceholderText("Correct answer for the selected field")
        self.field_value.textEdited.connect(self._on_field_value_edited)
        value_row.addWidget(self.field_value)
        layout.addLayout(value_row)

        self.canvas = FieldCanvas(self.flow_editor)
        self.canvas.fieldSelected.connect(self._on_field_selected)
        scroll = QScrollArea()
        scroll.setWidget(self.canvas)
        scroll.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(scroll, 1)
        return tab

    def _choose_image(self) -> None:
        path, _ = QFileDialog.getOpenFileName(self, "Choose flow chart image", "", IMAGE_FILTER)
        if path:
            self.upload_image(UploadFile.from_path(Path(path)))

    def upload_image(self, file: UploadFile) -> None:
        """Upload through the editor and show the result on the canvas."""
        self.upload_btn.setEnabled(False)
        try:
            outcome = self.flow_editor.upload_image(file)
        except (UploadError, EditorError) as e:
            self.show_message(str(e))
            return
        finally:
            self.upload_btn.setEnabled(True)
        self.canvas.set_image_data(file.data)
        self._last_image_data = file.data
        if not outcome.durable:
            self.show_message(f"Upload failed, showing a local preview only: {outcome.error}")
        else:
            self.show_message("Image uploaded. Click on the image to add answer fields.")

    def _on_flow_start_changed(self, value: int) -> None:
        self.flow_editor.starting_question_number = value
        self.canvas.update()

    def _on_field_selected(self, field_id: str) -> None:
        self.field_value.setText(self.flow_editor.get(field_id).value)
        self.field_value.setFocus()

    def _on_field_value_edited(self, text: str) -> None:
        selected = self.flow_editor.editing_field_id
        if selected is not None:
            self.flow_editor.set_value(selected, text)

    def save_flow_chart(self) -> bool:
        try:
            fields = self.flow_editor.save()
            questions = self.sync.save_flow_chart_fields(
                self.flow_editor.group_id,
                self.flow_editor.image_url,
                fields,
                start=self.flow_start.value(),
            )
        except (EditorError, NumberingConflictError) as e:
            self.show_message(str(e))
            return False
        self.sync.commit(self.store, self.test_id)
        self._refresh_groups()
        self._refresh_preview(questions)
        self.show_message(f"Saved questions {questions[0].number}-{questions[-1].number}")
        return True

    def _reference_size(self) -> Optional[tuple]:
        rendered = self.flow_editor.rendered_size
        return (round(rendered[0]), round(rendered[1])) if rendered else None

    def _refresh_preview(self, questions) -> None:
        if self._last_image_data is None:
            return
        pixmap = QPixmap()
        if pixmap.loadFromData(self._last_image_data):
            self.preview.set_content(pixmap, questions, self._reference_size())

    def _choose_export_path(self) -> None:
        path, _ = QFileDialog.getSaveFileName(self, "Export preview", "preview.png", "PNG (*.png)")
        if path:
            self.export_preview(Path(path))

    def export_preview(self, path: Path) -> bool:
        """Write the saved group's overlays on the full-size image to path."""
        reference = self._reference_size()
        if self._last_image_data is None or reference is None:
            self.show_message("Show a flow chart image before exporting a preview")
            return False
        questions = self.sync.questions_in(self.flow_editor.group_id)
        with Image.open(io.BytesIO(self._last_image_data)) as image:
            rendered = render_preview(image, questions, image.size, reference_size=reference)
        try:
            rendered.save(path)
        except OSError as e:
            self.show_message(f"Could not write {path}: {e}")
            return False
        self.show_message(f"Exported preview with {len(questions)} answer boxes to {path}")
        return True

    # ─────────────────────────────────────────────────────────────────────────
    # Table tab
    # ─────────────────────────────────────────────────────────────────────────

    def _build_table_tab(self) -> QWidget:
        tab = QWidget()
        layout = QVBoxLayout(tab)

        controls = QHBoxLayout()
        self.table_title = QLineEdit()
        self.table_title.setPlaceholderText("Table title")
        self.table_title.textEdited.connect(lambda text: self.table_editor.set_title(text))
        add_row = QPushButton("Add row")
        add_row.clicked.connect(lambda: self.table_editor.add_row())
        add_column = QPushButton("Add column")
        add_column.clicked.connect(lambda: self.table_editor.add_column())
        controls.addWidget(self.table_title, 1)
        controls.addWidget(add_row)
        controls.addWidget(add_column)
        layout.addLayout(controls)

        cell_row = QHBoxLayout()
        self.cell_column = QComboBox()
        self.cell_text = QLineEdit()
        self.cell_text.setPlaceholderText("Text to add to the last row")
        add_text = QPushButton("Add text")
        add_text.clicked.connect(self._add_text_cell)
        add_blank = QPushButton("Add blank")
        add_blank.clicked.connect(self._add_blank_cell)
        self.table_save_btn = QPushButton("Save table")
        self.table_save_btn.clicked.connect(self.save_table)
        cell_row.addWidget(QLabel("Column"))
        cell_row.addWidget(self.cell_column)
        cell_row.addWidget(self.cell_text, 1)
        cell_row.addWidget(add_text)
        cell_row.addWidget(add_blank)
        cell_row.addWidget(self.table_save_btn)
        layout.addLayout(cell_row)

        self.table_panel = TableAnswerPanel(self.table_editor)
        self._refresh_columns()
        self.table_editor.on_change = self._on_table_changed
        scroll = QScrollArea()
        scroll.setWidgetResizable(True)
        scroll.setWidget(self.table_panel)
        layout.addWidget(scroll, 1)
        return tab

    def _on_table_changed(self, structure) -> None:
        self.table_panel.on_structure_changed(structure)
        self._refresh_columns()

    def _refresh_columns(self) -> None:
        current = self.cell_column.currentIndex()
        self.cell_column.clear()
        self.cell_column.addItems([c.label for c in self.table_editor.structure.columns])
        self.cell_column.setCurrentIndex(max(0, min(current, self.cell_column.count() - 1)))

    def _target_row(self) -> str:
        rows = self.table_editor.structure.rows
        return rows[-1].id if rows else self.table_editor.add_row()

    def _add_text_cell(self) -> None:
        row_id = self._target_row()
        cell = self.table_editor.add_cell(row_id, self.cell_column.currentIndex())
        self.table_editor.update_text(cell.id, self.cell_text.text())
        self.cell_text.clear()

    def _add_blank_cell(self) -> None:
        self.table_editor.add_blank(self._target_row(), self.cell_column.currentIndex())

    def save_table(self) -> bool:
        try:
            structure = self.table_editor.snapshot()
            questions = self.sync.save_table_structure(self.table_editor.group_id, structure)
        except (EditorError, NumberingConflictError) as e:
            self.show_message(str(e))
            return False
        self.table_editor.starting_question_number = questions[0].number
        self.table_panel.rebuild()
        self.sync.commit(self.store, self.test_id)
        self._refresh_groups()
        self.show_message(f"Saved questions {questions[0].number}-{questions[-1].number}")
        return True

    def show_message(self, text: str) -> None:
        self.status.setText(text)
        logger.info(text)
