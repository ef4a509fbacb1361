"""
Unit Tests for DragSession

Tests for the drag gesture state machine.
"""

from unittest.mock import MagicMock

import pytest

from ielts_toolkit.editor.drag import DragError, DragSession, DragState


class TestDragSession:
    """Tests for DragSession transitions."""

    def test_begin_when_idle_then_dragging(self):
        session = DragSession()
        session.begin("f1", (0, 0), (10, 10), MagicMock())
        assert session.state is DragState.DRAGGING
        assert session.target_id == "f1"

    def test_begin_when_already_dragging_then_raises_error(self):
        session = DragSession()
        session.begin("f1", (0, 0), (10, 10), MagicMock())
        with pytest.raises(DragError, match="Already dragging"):
            session.begin("f2", (0, 0), (0, 0), MagicMock())

    def test_move_when_dragging_then_reports_start_plus_cumulative_delta(self):
        on_move = MagicMock()
        session = DragSession()
        session.begin("f1", (100, 100), (20, 30), on_move)
        session.move((110, 95))
        session.move((150, 140))
        assert on_move.call_args_list[0].args == (30, 25)
        assert on_move.call_args_list[1].args == (70, 70)

    def test_move_when_idle_then_ignored(self):
        on_move = MagicMock()
        session = DragSession()
        session.move((5, 5))
        session.begin("f1", (0, 0), (0, 0), on_move)
        session.end()
        session.move((5, 5))
        on_move.assert_not_called()

    def test_end_when_called_twice_then_cleanup_runs_once(self):
        cleanup = MagicMock()
        session = DragSession()
        session.begin("f1", (0, 0), (0, 0), MagicMock(), cleanup)
        assert session.end() is True
        assert session.end() is False
        cleanup.assert_called_once()
        assert session.state is DragState.IDLE

    def test_cancel_for_when_other_target_then_keeps_dragging(self):
        cleanup = MagicMock()
        session = DragSession()
        session.begin("f1", (0, 0), (0, 0), MagicMock(), cleanup)
        assert session.cancel_for("f2") is False
        assert session.is_active
        assert session.cancel_for("f1") is True
        cleanup.assert_called_once()

    def test_begin_when_previous_gesture_ended_then_allowed(self):
        session = DragSession()
        session.begin("f1", (0, 0), (0, 0), MagicMock())
        session.end()
        session.begin("f2", (0, 0), (0, 0), MagicMock())
        assert session.target_id == "f2"
