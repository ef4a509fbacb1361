"""
Unit Tests for TableStructure Model

Tests for the grid invariant, blank id handling and serialization.
"""

import pytest

from ielts_toolkit.core.models.table import (
    BlankCell,
    TableColumn,
    TableRow,
    TableStructure,
    TextCell,
    cell_from_dict,
)


class TestCells:
    """Tests for TextCell and BlankCell."""

    def test_blank_when_blank_id_zero_then_raises_error(self):
        with pytest.raises(ValueError, match="blank_id must be >= 1"):
            BlankCell("c1", 0)

    def test_with_width_when_out_of_range_then_clamps(self):
        blank = BlankCell("c1", 1)
        assert blank.with_width(5000).width == 500
        assert blank.with_width(-5000).width == 50
        assert blank.with_width(200).width == 200

    def test_blank_to_dict_when_value_set_then_stored_as_content(self):
        d = BlankCell("c1", 3, width=90, value="tide").to_dict()
        assert d == {"id": "c1", "type": "blank", "content": "tide", "blankId": 3, "width": 90}

    def test_cell_from_dict_when_blank_without_id_then_raises_error(self):
        with pytest.raises(ValueError, match="no blankId"):
            cell_from_dict({"id": "c1", "type": "blank"})

    def test_cell_from_dict_when_unknown_type_then_raises_error(self):
        with pytest.raises(ValueError, match="Unknown cell type"):
            cell_from_dict({"id": "c1", "type": "image"})

    def test_cell_from_dict_when_type_missing_then_text(self):
        cell = cell_from_dict({"id": "c1", "content": "Warm"})
        assert isinstance(cell, TextCell)
        assert cell.content == "Warm"


class TestTableStructure:
    """Tests for TableStructure dataclass."""

    # ─────────────────────────────────────────────────────────────────────────
    # Invariant Tests
    # ─────────────────────────────────────────────────────────────────────────

    def test_init_when_no_columns_then_raises_error(self):
        with pytest.raises(ValueError, match="at least one column"):
            TableStructure(columns=())

    def test_init_when_row_run_count_mismatch_then_raises_error(self):
        with pytest.raises(ValueError, match="expected 2"):
            TableStructure(
                columns=(TableColumn("A"), TableColumn("B")),
                rows=(TableRow("r1", ((),)),),
            )

    def test_init_when_duplicate_blank_ids_then_raises_error(self):
        with pytest.raises(ValueError, match="Duplicate blank_id 1"):
            TableStructure(rows=(TableRow("r1", ((BlankCell("a", 1), BlankCell("b", 1)),)),))

    # ─────────────────────────────────────────────────────────────────────────
    # Blank Query Tests
    # ─────────────────────────────────────────────────────────────────────────

    def test_blanks_when_scanned_then_row_major_order(self, ocean_table):
        assert [b.id for b in ocean_table.blanks()] == ["c2", "c4"]

    def test_blank_ids_when_visual_order_differs_then_sorted_ascending(self):
        s = TableStructure(rows=(
            TableRow("r1", ((BlankCell("a", 3),),)),
            TableRow("r2", ((BlankCell("b", 1), TextCell("t", "and"), BlankCell("c", 2)),)),
        ))
        assert s.blank_ids() == [1, 2, 3]

    def test_next_blank_id_when_gap_then_returns_smallest_unused(self):
        s = TableStructure(rows=(TableRow("r1", ((BlankCell("a", 1), BlankCell("b", 3)),)),))
        assert s.next_blank_id() == 2

    def test_next_blank_id_when_empty_then_returns_one(self):
        assert TableStructure().next_blank_id() == 1

    def test_find_cell_when_present_then_returns_location(self, ocean_table):
        assert ocean_table.find_cell("c4") == (1, 1, 0)

    def test_find_cell_when_missing_then_raises_key_error(self, ocean_table):
        with pytest.raises(KeyError):
            ocean_table.find_cell("nope")

    # ─────────────────────────────────────────────────────────────────────────
    # Answer Tests
    # ─────────────────────────────────────────────────────────────────────────

    def test_answers_when_values_set_then_keyed_by_blank_id(self, ocean_table):
        assert ocean_table.answers == {1: "ocean", 2: "current"}

    def test_with_answers_when_partial_map_then_others_cleared(self, ocean_table):
        s = ocean_table.with_answers({2: "tide", 9: "ignored"})
        assert s.answers == {1: "", 2: "tide"}

    def test_without_answers_when_called_then_same_shape(self, ocean_table):
        s = ocean_table.without_answers()
        assert s.answers == {1: "", 2: ""}
        assert s.blank_ids() == ocean_table.blank_ids()

    # ─────────────────────────────────────────────────────────────────────────
    # Serialization Tests
    # ─────────────────────────────────────────────────────────────────────────

    def test_from_dict_when_to_dict_output_then_equal(self, ocean_table):
        assert TableStructure.from_dict(ocean_table.to_dict()) == ocean_table

    def test_from_dict_when_row_short_then_padded(self):
        s = TableStructure.from_dict({
            "columns": [{"label": "A"}, {"label": "B"}],
            "rows": [{"id": "r1", "columns": [[{"id": "c1", "type": "text", "content": "x"}]]}],
        })
        assert len(s.rows[0].columns) == 2
        assert s.rows[0].columns[1] == ()

    def test_from_dict_when_no_columns_then_single_default_column(self):
        s = TableStructure.from_dict({"rows": []})
        assert [c.label for c in s.columns] == ["Column 1"]
