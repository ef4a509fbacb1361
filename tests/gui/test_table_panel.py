"""Unit tests for TableAnswerPanel answer entry."""

import pytest

from ielts_toolkit.editor.table_editor import TableStructureEditor
from ielts_toolkit.gui.widgets.table_panel import TableAnswerPanel


@pytest.fixture
def panel(qtbot, ocean_table):
    editor = TableStructureEditor(ocean_table, starting_question_number=5)
    widget = TableAnswerPanel(editor)
    qtbot.addWidget(widget)
    widget.show()
    return widget


class TestRendering:
    """Tests for grid construction."""

    def test_blanks_show_current_answers(self, panel):
        assert panel.blank_edit(1).text() == "ocean"
        assert panel.blank_edit(2).text() == "current"

    def test_blank_placeholder_shows_question_number(self, panel):
        assert panel.blank_edit(1).placeholderText() == "(5)"
        assert panel.blank_edit(2).placeholderText() == "(6)"

    def test_placeholder_falls_back_to_blank_id(self, qtbot, ocean_table):
        widget = TableAnswerPanel(TableStructureEditor(ocean_table))
        qtbot.addWidget(widget)
        assert widget.blank_edit(2).placeholderText() == "[2]"


class TestAnswerEntry:
    """Tests for typing answers into blanks."""

    def test_typing_sets_answer_and_emits(self, panel, qtbot):
        emitted = []
        panel.answersChanged.connect(emitted.append)
        edit = panel.blank_edit(2)
        edit.clear()
        qtbot.keyClicks(edit, "tide")
        assert panel.editor.answers == {1: "ocean", 2: "tide"}
        assert emitted[-1] == {1: "ocean", 2: "tide"}

    def test_typing_does_not_rebuild_grid(self, panel, qtbot):
        edit = panel.blank_edit(1)
        qtbot.keyClicks(edit, "s")
        assert panel.blank_edit(1) is edit


class TestStructureChanges:
    """Tests for rebuilding after structural edits."""

    def test_removed_row_drops_its_blank(self, panel):
        panel.editor.remove_row("row-2")
        assert panel.blank_edit(2) is None
        assert panel.blank_edit(1).text() == "ocean"

    def test_added_blank_gets_input(self, panel):
        blank = panel.editor.add_blank("row-1", 0)
        edit = panel.blank_edit(blank.blank_id)
        assert edit is not None
        assert edit.width() == blank.width
