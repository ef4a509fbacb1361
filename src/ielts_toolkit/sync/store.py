"""
Module: sync.store

Purpose:
    Persistence collaborator interface. The real transport (HTTP API,
    database) lives outside this package; the synchronizer only exchanges
    Part payloads through PartStore.

Key Classes:
    - PartStore: Abstract load/save of Part payloads
    - InMemoryPartStore: Dict-backed store (tests, offline authoring)
    - PartNotFoundError: Requested part does not exist
"""

from __future__ import annotations

import copy
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Tuple

logger = logging.getLogger(__name__)


class PartNotFoundError(KeyError):
    """No stored payload for (test_id, part_number)."""


class PartStore(ABC):
    """Abstract persistence collaborator for Part payloads."""

    @abstractmethod
    def load_part(self, test_id: str, part_number: int) -> Dict[str, Any]:
        """
        Load a Part payload.

        Raises:
            PartNotFoundError: If nothing is stored for the part
        """

    @abstractmethod
    def save_part(self, test_id: str, part_number: int, payload: Dict[str, Any]) -> None:
        """Store a Part payload, replacing any previous one."""


class InMemoryPartStore(PartStore):
    """Store payloads in a dict; payloads are deep-copied in and out."""

    def __init__(self) -> None:
        self._parts: Dict[Tuple[str, int], Dict[str, Any]] = {}

    def load_part(self, test_id: str, part_number: int) -> Dict[str, Any]:
        try:
            return copy.deepcopy(self._parts[(test_id, part_number)])
        except KeyError:
            raise PartNotFoundError(f"No part {part_number} stored for test {test_id!r}") from None

    def save_part(self, test_id: str, part_number: int, payload: Dict[str, Any]) -> None:
        self._parts[(test_id, part_number)] = copy.deepcopy(payload)
        logger.debug(f"Stored part {part_number} of test {test_id!r}")
