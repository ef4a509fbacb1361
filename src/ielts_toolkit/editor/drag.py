"""
Module: editor.drag

Purpose:
    Drag gesture state machine for moving fields. A DragSession is either
    IDLE or DRAGGING; while dragging it owns the pointer origin, the
    field's start position, a move handler and exactly one cleanup
    callback. The cleanup runs once when the gesture ends, whether by
    pointer release or because the dragged field was deleted.

Key Classes:
    - DragState: IDLE / DRAGGING
    - DragSession: One-gesture-at-a-time state machine
    - DragError: Raised when a second gesture starts mid-drag

Dependencies:
    - enum (std)

Used By:
    - editor.field_editor.SpatialFieldEditor
    - gui.widgets.field_canvas.FieldCanvas (via the editor)
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, Optional, Tuple

logger = logging.getLogger(__name__)

Point = Tuple[float, float]
MoveHandler = Callable[[float, float], None]
Cleanup = Callable[[], None]


class DragState(str, Enum):
    IDLE = "idle"
    DRAGGING = "dragging"


class DragError(Exception):
    """Invalid drag transition (e.g. starting while already dragging)."""


class DragSession:
    """
    State machine for a single drag gesture.

    The move handler receives the requested (x, y): the start position
    plus the cumulative pointer delta. Clamping is the handler's job.

    Example:
        >>> moves = []
        >>> session = DragSession()
        >>> session.begin("f1", (10, 10), (100, 50), lambda x, y: moves.append((x, y)))
        >>> session.move((15, 30))
        >>> moves
        [(105, 70)]
        >>> session.end()
        True
    """

    def __init__(self) -> None:
        self.state = DragState.IDLE
        self.target_id: Optional[str] = None
        self._origin: Point = (0.0, 0.0)
        self._start_position: Point = (0.0, 0.0)
        self._on_move: Optional[MoveHandler] = None
        self._cleanup: Optional[Cleanup] = None

    @property
    def is_active(self) -> bool:
        return self.state is DragState.DRAGGING

    def begin(
        self,
        target_id: str,
        pointer: Point,
        start_position: Point,
        on_move: MoveHandler,
        cleanup: Optional[Cleanup] = None,
    ) -> None:
        """
        Start a gesture.

        Args:
            target_id: Id of the dragged field
            pointer: Pointer position at gesture start
            start_position: Field (x, y) at gesture start
            on_move: Called with the requested (x, y) on every move
            cleanup: Called exactly once when the gesture ends

        Raises:
            DragError: If a gesture is already active
        """
        if self.is_active:
            raise DragError(f"Already dragging {self.target_id!r}")
        self.state = DragState.DRAGGING
        self.target_id = target_id
        self._origin = pointer
        self._start_position = start_position
        self._on_move = on_move
        self._cleanup = cleanup
        logger.debug(f"Drag started on {target_id!r} at {pointer}")

    def move(self, pointer: Point) -> None:
        """Forward a pointer move; ignored while idle."""
        if not self.is_active or self._on_move is None:
            return
        dx = pointer[0] - self._origin[0]
        dy = pointer[1] - self._origin[1]
        self._on_move(self._start_position[0] + dx, self._start_position[1] + dy)

    def end(self) -> bool:
        """
        Finish the gesture and run its cleanup.

        Returns:
            True if a gesture was ended, False if already idle
        """
        if not self.is_active:
            return False
        cleanup = self._cleanup
        target = self.target_id
        self.state = DragState.IDLE
        self.target_id = None
        self._on_move = None
        self._cleanup = None
        if cleanup is not None:
            cleanup()
        logger.debug(f"Drag ended on {target!r}")
        return True

    def cancel_for(self, target_id: str) -> bool:
        """End the gesture if it is dragging target_id."""
        if self.is_active and self.target_id == target_id:
            return self.end()
        return False
