"""
Module: table

Purpose:
    Provides the TableStructure dataclass and its cell types - the
    authored artifact behind table completion questions. A structure is
    a grid of rows x columns where every (row, column) slot holds an
    ordered run of text and blank cells, so a single visual line such as
    "Item with ___ and more text." is three cells in one slot.

Key Functions:
    - TableStructure.blanks(): Blank cells in row-major scan order
    - TableStructure.blank_ids(): Canonical (ascending) blank id ordering
    - TableStructure.next_blank_id(): Smallest unused positive blank id
    - TableStructure.answers: Blank id -> value map
    - TableStructure.with_answers(answers): Copy with blank values filled
    - TableStructure.to_dict() / TableStructure.from_dict(): Serialization

Dependencies:
    - dataclasses (std)
    - typing (std)

Used By:
    - core.models.questions.TableCompletionQuestion
    - editor.table_editor.TableStructureEditor
    - sync.synchronizer.GroupSynchronizer

Identity:
    Cell ids are opaque and may be regenerated whenever the structure is
    rebuilt. blank_id is the durable key that answers and question
    numbers are joined on.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Dict, Iterator, List, Mapping, Optional, Tuple, Union

DEFAULT_BLANK_WIDTH = 120
BLANK_WIDTH_RANGE: Tuple[int, int] = (50, 500)


@dataclass(frozen=True, slots=True)
class TextCell:
    """Literal text inside a table slot."""

    id: str
    content: str = ""

    @property
    def kind(self) -> str:
        return "text"

    def to_dict(self) -> dict:
        return {"id": self.id, "type": "text", "content": self.content}


@dataclass(frozen=True, slots=True)
class BlankCell:
    """
    Fillable blank inside a table slot.

    Attributes:
        id: Opaque cell identifier (not durable)
        blank_id: Positive integer, unique within one TableStructure
        width: Render width in pixels
        value: Correct answer for this blank
    """

    id: str
    blank_id: int
    width: int = DEFAULT_BLANK_WIDTH
    value: str = ""

    def __post_init__(self) -> None:
        if self.blank_id < 1:
            raise ValueError(f"blank_id must be >= 1: {self.blank_id}")
        if self.width <= 0:
            raise ValueError(f"blank width must be > 0: {self.width}")

    @property
    def kind(self) -> str:
        return "blank"

    def with_width(self, width: int, *, width_range: Tuple[int, int] = BLANK_WIDTH_RANGE) -> BlankCell:
        """Return a copy with the width clamped into width_range."""
        low, high = width_range
        return replace(self, width=int(max(low, min(high, width))))

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "type": "blank",
            "content": self.value,
            "blankId": self.blank_id,
            "width": self.width,
        }


Cell = Union[TextCell, BlankCell]


def cell_from_dict(data: dict) -> Cell:
    """
    Deserialize a cell from its payload.

    Raises:
        ValueError: If the type is unknown or a blank has no blankId
    """
    kind = data.get("type", "text")
    if kind == "text":
        return TextCell(id=str(data["id"]), content=data.get("content") or "")
    if kind == "blank":
        if data.get("blankId") is None:
            raise ValueError(f"blank cell {data.get('id')!r} has no blankId")
        return BlankCell(
            id=str(data["id"]),
            blank_id=int(data["blankId"]),
            width=int(data.get("width") or DEFAULT_BLANK_WIDTH),
            value=data.get("content") or "",
        )
    raise ValueError(f"Unknown cell type: {kind!r}")


@dataclass(frozen=True, slots=True)
class TableColumn:
    """Column definition: header label and optional width hint ("30%", "auto")."""

    label: str
    width: Optional[str] = "auto"

    def to_dict(self) -> dict:
        d = {"label": self.label}
        if self.width is not None:
            d["width"] = self.width
        return d

    @classmethod
    def from_dict(cls, data: dict) -> TableColumn:
        return cls(label=data.get("label") or "", width=data.get("width", "auto"))


@dataclass(frozen=True, slots=True)
class TableRow:
    """One table row: a cell run per column index."""

    id: str
    columns: Tuple[Tuple[Cell, ...], ...] = ()

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "columns": [[cell.to_dict() for cell in run] for run in self.columns],
        }


@dataclass(frozen=True, slots=True)
class TableStructure:
    """
    Authored table completion artifact (immutable).

    Attributes:
        title: Table title shown above the grid
        columns: Ordered column definitions
        rows: Ordered rows, each holding one cell run per column

    Invariants:
        - At least one column
        - Every row holds exactly len(columns) cell runs
        - Blank ids are unique positive integers across the structure

    Example:
        >>> s = TableStructure("Ocean", (TableColumn("Item"),), (
        ...     TableRow("r1", ((TextCell("c1", "Warm"), BlankCell("c2", 1)),)),
        ... ))
        >>> s.blank_ids()
        [1]
    """

    title: str = ""
    columns: Tuple[TableColumn, ...] = (TableColumn("Column 1"),)
    rows: Tuple[TableRow, ...] = ()

    def __post_init__(self) -> None:
        """Validate grid shape and blank id uniqueness."""
        if not self.columns:
            raise ValueError("TableStructure must have at least one column")
        width = len(self.columns)
        for row in self.rows:
            if len(row.columns) != width:
                raise ValueError(
                    f"Row {row.id!r} has {len(row.columns)} cell runs, expected {width}"
                )
        seen: set[int] = set()
        for blank in self.blanks():
            if blank.blank_id in seen:
                raise ValueError(f"Duplicate blank_id {blank.blank_id} in table {self.title!r}")
            seen.add(blank.blank_id)

    # ─────────────────────────────────────────────────────────────────────────
    # Iteration & Queries
    # ─────────────────────────────────────────────────────────────────────────

    def iter_cells(self) -> Iterator[Tuple[int, int, Cell]]:
        """
        Iterate over every cell in row-major order.

        Yields:
            (row_index, column_index, cell), left-to-right within each row
        """
        for row_index, row in enumerate(self.rows):
            for col_index, run in enumerate(row.columns):
                for cell in run:
                    yield row_index, col_index, cell

    def blanks(self) -> List[BlankCell]:
        """Blank cells in row-major scan order."""
        return [cell for _, _, cell in self.iter_cells() if isinstance(cell, BlankCell)]

    def blank_ids(self) -> List[int]:
        """
        Canonical blank id ordering.

        Collected by a row-major scan and then sorted ascending, so question
        numbers follow blank ids rather than visual position.
        """
        return sorted(blank.blank_id for blank in self.blanks())

    @property
    def blank_count(self) -> int:
        return len(self.blanks())

    def next_blank_id(self) -> int:
        """Smallest positive integer not used as a blank id."""
        used = {blank.blank_id for blank in self.blanks()}
        candidate = 1
        while candidate in used:
            candidate += 1
        return candidate

    def find_row(self, row_id: str) -> int:
        """
        Index of a row by id.

        Raises:
            KeyError: If no row has this id
        """
        for index, row in enumerate(self.rows):
            if row.id == row_id:
                return index
        raise KeyError(f"Unknown row: {row_id!r}")

    def find_cell(self, cell_id: str) -> Tuple[int, int, int]:
        """
        Locate a cell by id.

        Returns:
            (row_index, column_index, position_in_run)

        Raises:
            KeyError: If no cell has this id
        """
        for row_index, row in enumerate(self.rows):
            for col_index, run in enumerate(row.columns):
                for position, cell in enumerate(run):
                    if cell.id == cell_id:
                        return row_index, col_index, position
        raise KeyError(f"Unknown cell: {cell_id!r}")

    # ─────────────────────────────────────────────────────────────────────────
    # Answers
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def answers(self) -> Dict[int, str]:
        """Blank id -> value for every blank."""
        return {blank.blank_id: blank.value for blank in self.blanks()}

    def with_answers(self, answers: Mapping[int, str]) -> TableStructure:
        """
        Copy with blank values taken from answers.

        Blanks absent from answers get an empty value; answer keys with no
        matching blank are ignored.
        """
        def fill(cell: Cell) -> Cell:
            if isinstance(cell, BlankCell):
                return replace(cell, value=answers.get(cell.blank_id, ""))
            return cell

        rows = tuple(
            replace(row, columns=tuple(tuple(fill(c) for c in run) for run in row.columns))
            for row in self.rows
        )
        return replace(self, rows=rows)

    def without_answers(self) -> TableStructure:
        """Copy with every blank value cleared (the shape only)."""
        return self.with_answers({})

    # ─────────────────────────────────────────────────────────────────────────
    # Serialization
    # ─────────────────────────────────────────────────────────────────────────

    def to_dict(self) -> dict:
        return {
            "title": self.title,
            "columns": [col.to_dict() for col in self.columns],
            "rows": [row.to_dict() for row in self.rows],
        }

    @classmethod
    def from_dict(cls, data: dict) -> TableStructure:
        """
        Deserialize from a persisted tableStructure payload.

        Rows with fewer cell runs than columns are padded with empty runs
        and extra runs are dropped, so legacy data satisfies the grid
        invariant.

        Raises:
            ValueError: If cells are malformed or blank ids collide
        """
        columns = tuple(TableColumn.from_dict(c) for c in data.get("columns") or [])
        if not columns:
            columns = (TableColumn("Column 1"),)
        rows = []
        for index, row_data in enumerate(data.get("rows") or []):
            runs = list(row_data.get("columns") or [])
            runs = (runs + [[]] * len(columns))[: len(columns)]
            rows.append(
                TableRow(
                    id=str(row_data.get("id") or f"row-{index + 1}"),
                    columns=tuple(tuple(cell_from_dict(c) for c in run) for run in runs),
                )
            )
        return cls(title=data.get("title") or "", columns=columns, rows=tuple(rows))

    def __repr__(self) -> str:
        return (
            f"TableStructure({self.title!r}, columns={len(self.columns)}, "
            f"rows={len(self.rows)}, blanks={self.blank_count})"
        )
