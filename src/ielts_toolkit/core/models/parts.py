"""
Module: parts

Purpose:
    Provides the Part dataclass (a top-level test section holding its
    Questions) and ModuleContent, the per-part passage/instruction/audio
    settings of a test module addressed by (part_number, PartAspect).

Key Functions:
    - Part.numbers(): Question numbers used in this part
    - Part.to_dict(): Serialize the part payload
    - ModuleContent.get/set(part, aspect): Typed per-part settings
    - ModuleContent.audio_range(part): Validated (start, end) seconds

Dependencies:
    - dataclasses (std)
    - enum (std)
    - .questions

Used By:
    - core.utils.serialization
    - sync.synchronizer.GroupSynchronizer
    - sync.submission
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Tuple

from .questions import Question


class PartAspect(str, Enum):
    """Per-part setting of a test module."""
    CONTENT = "content"
    INSTRUCTIONS = "instructions"
    AUDIO_START = "audioStart"
    AUDIO_END = "audioEnd"

    def __str__(self) -> str:
        return self.value


PartKey = Tuple[int, PartAspect]

_ASPECT_DEFAULTS: Dict[PartAspect, Any] = {
    PartAspect.CONTENT: "",
    PartAspect.INSTRUCTIONS: "",
    PartAspect.AUDIO_START: 0.0,
    PartAspect.AUDIO_END: 0.0,
}


@dataclass
class ModuleContent:
    """
    Per-part settings of a test module.

    Values are stored under (part_number, aspect) keys; unset keys read
    as the aspect default.

    Example:
        >>> content = ModuleContent(part_count=3)
        >>> content.set(2, PartAspect.AUDIO_START, 95.0)
        >>> content.get(2, PartAspect.AUDIO_START)
        95.0
    """

    part_count: int = 4
    values: Dict[PartKey, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.part_count < 1:
            raise ValueError(f"part_count must be >= 1: {self.part_count}")

    def _check_part(self, part_number: int) -> None:
        if not (1 <= part_number <= self.part_count):
            raise KeyError(f"Part {part_number} out of range 1-{self.part_count}")

    def get(self, part_number: int, aspect: PartAspect) -> Any:
        self._check_part(part_number)
        return self.values.get((part_number, aspect), _ASPECT_DEFAULTS[aspect])

    def set(self, part_number: int, aspect: PartAspect, value: Any) -> None:
        self._check_part(part_number)
        if aspect in (PartAspect.AUDIO_START, PartAspect.AUDIO_END):
            value = float(value)
            if value < 0:
                raise ValueError(f"{aspect} must be >= 0: {value}")
        self.values[(part_number, aspect)] = value

    def audio_range(self, part_number: int) -> Tuple[float, float]:
        """
        Audio (start, end) in seconds for a part.

        Raises:
            ValueError: If end is set and precedes start
        """
        start = self.get(part_number, PartAspect.AUDIO_START)
        end = self.get(part_number, PartAspect.AUDIO_END)
        if end and end < start:
            raise ValueError(f"Part {part_number} audio ends ({end}) before it starts ({start})")
        return start, end

    def to_dict(self) -> dict:
        """Nested payload: {"parts": {"1": {"content": ..., ...}}}."""
        parts: Dict[str, Dict[str, Any]] = {}
        for (number, aspect), value in sorted(self.values.items(), key=lambda kv: (kv[0][0], kv[0][1].value)):
            parts.setdefault(str(number), {})[aspect.value] = value
        return {"partCount": self.part_count, "parts": parts}

    @classmethod
    def from_dict(cls, data: dict) -> ModuleContent:
        content = cls(part_count=int(data.get("partCount", 4)))
        for number, aspects in (data.get("parts") or {}).items():
            for name, value in aspects.items():
                content.set(int(number), PartAspect(name), value)
        return content


@dataclass
class Part:
    """
    Top-level test section and its Questions.

    Questions are kept in ascending number order by the synchronizer;
    numbers are unique within a Part.
    """

    number: int
    questions: List[Question] = field(default_factory=list)
    title: str = ""

    def __post_init__(self) -> None:
        if self.number < 1:
            raise ValueError(f"part number must be >= 1: {self.number}")

    def __iter__(self) -> Iterator[Question]:
        return iter(self.questions)

    def numbers(self) -> List[int]:
        return [q.number for q in self.questions]

    def get(self, number: int) -> Optional[Question]:
        for question in self.questions:
            if question.number == number:
                return question
        return None

    def to_dict(self) -> dict:
        return {
            "number": self.number,
            "title": self.title,
            "questions": [q.to_dict() for q in sorted(self.questions, key=lambda q: q.number)],
        }
