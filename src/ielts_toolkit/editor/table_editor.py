"""
Module: editor.table_editor

Purpose:
    Tabular structure editor for table completion. The author builds a
    grid of rows x columns where each slot holds an ordered run of text
    and blank cells, and types the correct answer for each blank.

    Every mutation produces a new immutable TableStructure, so the
    row/column invariant and blank id uniqueness are re-checked on each
    edit. Answers live in the blank cells and are keyed by blank_id, the
    durable identity; cell ids are only used to address cells while
    editing.

Key Classes:
    - TableStructureEditor: Editor state and operations

Dependencies:
    - ielts_toolkit.core.models.table: TableStructure and cells

Used By:
    - gui.widgets.table_panel.TableAnswerPanel
    - sync.synchronizer (consumes snapshot())
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Callable, Dict, List, Optional, Tuple

from ielts_toolkit.core.models.groups import TableArtifact
from ielts_toolkit.core.models.table import (
    BlankCell,
    Cell,
    TableColumn,
    TableRow,
    TableStructure,
    TextCell,
)
from ielts_toolkit.core.utils.ids import IdGenerator

from .config import DEFAULT_CONFIG, EditorConfig
from .errors import EmptyGroupError, TableEditError

logger = logging.getLogger(__name__)


class TableStructureEditor:
    """
    Editor for a table completion structure.

    Example:
        >>> editor = TableStructureEditor()
        >>> row_id = editor.add_row()
        >>> blank = editor.add_blank(row_id, 0)
        >>> blank.blank_id
        1
        >>> editor.set_answer(1, "ocean")
        >>> editor.answers
        {1: 'ocean'}
    """

    def __init__(
        self,
        structure: Optional[TableStructure] = None,
        *,
        config: EditorConfig = DEFAULT_CONFIG,
        ids: Optional[IdGenerator] = None,
        starting_question_number: Optional[int] = None,
        on_change: Optional[Callable[[TableStructure], None]] = None,
    ) -> None:
        self.config = config
        self.ids = ids or IdGenerator()
        self.starting_question_number = starting_question_number
        self.on_change = on_change
        self.group_id: Optional[str] = None
        self._structure = structure or TableStructure()

    @classmethod
    def from_artifact(cls, artifact: TableArtifact, **kwargs) -> TableStructureEditor:
        """Open a committed table group for editing."""
        editor = cls(
            artifact.structure,
            starting_question_number=artifact.start_question_number,
            **kwargs,
        )
        editor.group_id = artifact.group_id
        return editor

    @property
    def structure(self) -> TableStructure:
        return self._structure

    def _commit(self, structure: TableStructure) -> None:
        self._structure = structure
        if self.on_change is not None:
            self.on_change(structure)

    # ─────────────────────────────────────────────────────────────────────────
    # Title & Columns
    # ─────────────────────────────────────────────────────────────────────────

    def set_title(self, title: str) -> None:
        self._commit(replace(self._structure, title=title))

    def add_column(self, label: Optional[str] = None, width: Optional[str] = "auto") -> int:
        """
        Append a column and an empty cell run to every row.

        Returns:
            Index of the new column
        """
        s = self._structure
        column = TableColumn(label if label is not None else f"Column {len(s.columns) + 1}", width)
        rows = tuple(replace(row, columns=row.columns + ((),)) for row in s.rows)
        self._commit(replace(s, columns=s.columns + (column,), rows=rows))
        return len(s.columns)

    def update_column(self, index: int, *, label: Optional[str] = None, width: Optional[str] = None) -> None:
        s = self._structure
        self._check_column(index)
        current = s.columns[index]
        updated = TableColumn(
            label=current.label if label is None else label,
            width=current.width if width is None else width,
        )
        columns = s.columns[:index] + (updated,) + s.columns[index + 1:]
        self._commit(replace(s, columns=columns))

    def remove_column(self, index: int) -> None:
        """
        Remove a column and its cells from every row.

        Raises:
            TableEditError: If it is the last column
            IndexError: If index is out of range
        """
        s = self._structure
        self._check_column(index)
        if len(s.columns) <= 1:
            raise TableEditError("A table must keep at least one column")
        rows = tuple(
            replace(row, columns=row.columns[:index] + row.columns[index + 1:])
            for row in s.rows
        )
        self._commit(replace(s, columns=s.columns[:index] + s.columns[index + 1:], rows=rows))

    def _check_column(self, index: int) -> None:
        if not (0 <= index < len(self._structure.columns)):
            raise IndexError(f"Column index out of range: {index}")

    # ─────────────────────────────────────────────────────────────────────────
    # Rows
    # ─────────────────────────────────────────────────────────────────────────

    def add_row(self) -> str:
        """Append a row with one empty cell run per column; returns its id."""
        s = self._structure
        row = TableRow(id=self.ids.next("row"), columns=tuple(() for _ in s.columns))
        self._commit(replace(s, rows=s.rows + (row,)))
        return row.id

    def remove_row(self, row_id: str) -> None:
        """Remove a row; its blanks (and their answers) go with it."""
        s = self._structure
        index = s.find_row(row_id)
        self._commit(replace(s, rows=s.rows[:index] + s.rows[index + 1:]))
        logger.debug(f"Removed row {row_id!r}")

    # ─────────────────────────────────────────────────────────────────────────
    # Cells
    # ─────────────────────────────────────────────────────────────────────────

    def _with_run(self, row_index: int, col_index: int, run: Tuple[Cell, ...]) -> TableStructure:
        s = self._structure
        row = s.rows[row_index]
        columns = row.columns[:col_index] + (run,) + row.columns[col_index + 1:]
        rows = s.rows[:row_index] + (replace(row, columns=columns),) + s.rows[row_index + 1:]
        return replace(s, rows=rows)

    def _insert(self, row_id: str, col_index: int, cell: Cell, after: Optional[str]) -> None:
        s = self._structure
        row_index = s.find_row(row_id)
        self._check_column(col_index)
        run = s.rows[row_index].columns[col_index]
        if after is None:
            position = len(run)
        else:
            ids = [c.id for c in run]
            if after not in ids:
                raise KeyError(f"Cell {after!r} is not in row {row_id!r} column {col_index}")
            position = ids.index(after) + 1
        self._commit(self._with_run(row_index, col_index, run[:position] + (cell,) + run[position:]))

    def add_cell(self, row_id: str, col_index: int, after: Optional[str] = None) -> TextCell:
        """Insert an empty text cell at the end of a slot (or after a cell)."""
        cell = TextCell(id=self.ids.next("cell"))
        self._insert(row_id, col_index, cell, after)
        return cell

    def add_blank(self, row_id: str, col_index: int, after: Optional[str] = None) -> BlankCell:
        """Insert a blank with the smallest unused blank id."""
        cell = BlankCell(
            id=self.ids.next("cell"),
            blank_id=self._structure.next_blank_id(),
            width=self.config.default_blank_width,
        )
        self._insert(row_id, col_index, cell, after)
        logger.debug(f"Added blank {cell.blank_id} to row {row_id!r}")
        return cell

    def get_cell(self, cell_id: str) -> Cell:
        row_index, col_index, position = self._structure.find_cell(cell_id)
        return self._structure.rows[row_index].columns[col_index][position]

    def _replace_cell(self, cell_id: str, new_cell: Cell) -> Cell:
        row_index, col_index, position = self._structure.find_cell(cell_id)
        run = self._structure.rows[row_index].columns[col_index]
        self._commit(self._with_run(row_index, col_index, run[:position] + (new_cell,) + run[position + 1:]))
        return new_cell

    def remove_cell(self, cell_id: str) -> None:
        row_index, col_index, position = self._structure.find_cell(cell_id)
        run = self._structure.rows[row_index].columns[col_index]
        self._commit(self._with_run(row_index, col_index, run[:position] + run[position + 1:]))

    def update_text(self, cell_id: str, content: str) -> TextCell:
        cell = self.get_cell(cell_id)
        if not isinstance(cell, TextCell):
            raise TableEditError(f"Cell {cell_id!r} is a blank; set its answer instead")
        return self._replace_cell(cell_id, replace(cell, content=content))

    def set_blank_width(self, cell_id: str, width: int) -> BlankCell:
        """Set a blank's width, clamped to the configured range."""
        cell = self.get_cell(cell_id)
        if not isinstance(cell, BlankCell):
            raise TableEditError(f"Cell {cell_id!r} is not a blank")
        return self._replace_cell(
            cell_id, cell.with_width(width, width_range=self.config.blank_width_range)
        )

    def resize_blank(self, cell_id: str, dw: int) -> BlankCell:
        cell = self.get_cell(cell_id)
        if not isinstance(cell, BlankCell):
            raise TableEditError(f"Cell {cell_id!r} is not a blank")
        return self.set_blank_width(cell_id, cell.width + dw)

    def toggle_cell_type(self, cell_id: str) -> Cell:
        """
        Switch a cell between text and blank.

        Text -> blank allocates the smallest unused blank id. Blank -> text
        drops the blank id, width and answer and starts with empty content.
        """
        cell = self.get_cell(cell_id)
        if isinstance(cell, TextCell):
            new_cell: Cell = BlankCell(
                id=cell.id,
                blank_id=self._structure.next_blank_id(),
                width=self.config.default_blank_width,
            )
        else:
            new_cell = TextCell(id=cell.id)
        return self._replace_cell(cell_id, new_cell)

    # ─────────────────────────────────────────────────────────────────────────
    # Answers & Numbering
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def answers(self) -> Dict[int, str]:
        return self._structure.answers

    def set_answer(self, blank_id: int, value: str) -> None:
        """
        Set the correct answer for a blank.

        Raises:
            KeyError: If no blank has this id
        """
        if blank_id not in self._structure.answers:
            raise KeyError(f"Unknown blank id: {blank_id}")
        answers = self._structure.answers
        answers[blank_id] = value
        self._commit(self._structure.with_answers(answers))

    def blank_ids(self) -> List[int]:
        return self._structure.blank_ids()

    def question_numbers(self, start: Optional[int] = None) -> Dict[int, int]:
        """
        Map blank id -> question number, numbering blanks in ascending id
        order from start (or the editor's starting number).
        """
        first = start if start is not None else self.starting_question_number
        if first is None:
            return {}
        return {blank_id: first + i for i, blank_id in enumerate(self.blank_ids())}

    def snapshot(self) -> TableStructure:
        """
        The structure to commit.

        Raises:
            EmptyGroupError: If the table has no blanks
        """
        if self._structure.blank_count == 0:
            raise EmptyGroupError("Add at least one blank to the table before saving")
        return self._structure
