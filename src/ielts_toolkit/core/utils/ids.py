"""
Module: core.utils.ids

Purpose:
    Collision-free identifiers for fields, cells, rows and groups. Each
    generator owns a random namespace plus a monotonic counter, so two
    ids created in the same clock tick never collide.

Key Classes:
    - IdGenerator: Per-editor id source
"""

from __future__ import annotations

import itertools
import uuid


class IdGenerator:
    """
    Monotonic id source owned by one editor instance.

    Example:
        >>> ids = IdGenerator()
        >>> ids.next("field") != ids.next("field")
        True
    """

    def __init__(self, namespace: str | None = None) -> None:
        self.namespace = namespace or uuid.uuid4().hex[:8]
        self._counter = itertools.count(1)

    def next(self, prefix: str) -> str:
        """Return a new id like "field-3f2a9c1d-7"."""
        return f"{prefix}-{self.namespace}-{next(self._counter)}"

    @staticmethod
    def group_id() -> str:
        """Globally unique group identifier."""
        return f"group-{uuid.uuid4().hex}"
