"""
Module: questions

Purpose:
    Provides the persisted Question types produced from authored
    artifacts. Each Question is one gradable, numbered slot: a flow chart
    Question carries its image URL and one ImageField, a table completion
    Question carries a snapshot of the TableStructure, the full answer map
    and the blank id it answers.

Key Functions:
    - QuestionKind: Wire tags (FLOW_CHART, TABLE_COMPLETION)
    - FlowChartQuestion / TableCompletionQuestion: Frozen records
    - question_from_dict(data): Dispatch deserialization on "type"

Dependencies:
    - dataclasses (std)
    - enum (std)
    - .fields.ImageField
    - .table.TableStructure

Used By:
    - core.models.groups
    - core.models.parts.Part
    - sync.synchronizer.GroupSynchronizer
    - preview.scaling
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, Dict, Union

from .fields import ImageField
from .table import TableStructure


class QuestionKind(str, Enum):
    """Persisted question type tag."""
    FLOW_CHART = "FLOW_CHART"
    TABLE_COMPLETION = "TABLE_COMPLETION"

    def __str__(self) -> str:
        return self.value


def _check_common(number: int, group_id: str) -> None:
    if number < 1:
        raise ValueError(f"question number must be >= 1: {number}")
    if not group_id:
        raise ValueError("group_id must be non-empty")


@dataclass(frozen=True)
class FlowChartQuestion:
    """
    One answer box of a flow chart image, committed as a Question.

    Attributes:
        number: Question number, unique within the owning Part
        group_id: Group binding all boxes of the same image
        image_url: Durable URL of the flow chart image
        field: The box this Question answers
        correct_answer: Resolved answer (the field value at save time)
    """

    kind: ClassVar[QuestionKind] = QuestionKind.FLOW_CHART

    number: int
    group_id: str
    image_url: str
    field: ImageField
    correct_answer: str = ""

    def __post_init__(self) -> None:
        _check_common(self.number, self.group_id)

    def to_dict(self) -> dict:
        return {
            "number": self.number,
            "type": str(self.kind),
            "imageUrl": self.image_url,
            "field": self.field.to_dict(),
            "groupId": self.group_id,
            "correctAnswer": self.correct_answer,
        }

    @classmethod
    def from_dict(cls, data: dict) -> FlowChartQuestion:
        return cls(
            number=int(data["number"]),
            group_id=str(data["groupId"]),
            image_url=data.get("imageUrl") or "",
            field=ImageField.from_dict(data["field"]),
            correct_answer=data.get("correctAnswer") or "",
        )


@dataclass(frozen=True)
class TableCompletionQuestion:
    """
    One blank of a table structure, committed as a Question.

    Attributes:
        number: Question number, unique within the owning Part
        group_id: Group binding all blanks of the same table
        blank_id: Blank this Question answers
        table_structure: Snapshot of the table (shape only)
        answers: Blank id -> answer for the whole table
        correct_answer: Resolved answer for blank_id
    """

    kind: ClassVar[QuestionKind] = QuestionKind.TABLE_COMPLETION

    number: int
    group_id: str
    blank_id: int
    table_structure: TableStructure
    answers: Dict[int, str] = field(default_factory=dict)
    correct_answer: str = ""

    def __post_init__(self) -> None:
        _check_common(self.number, self.group_id)
        if self.blank_id not in self.table_structure.blank_ids():
            raise ValueError(
                f"blank_id {self.blank_id} is not in table {self.table_structure.title!r}"
            )

    def to_dict(self) -> dict:
        return {
            "number": self.number,
            "type": str(self.kind),
            "blankId": self.blank_id,
            "answers": {str(k): v for k, v in sorted(self.answers.items())},
            "tableStructure": self.table_structure.to_dict(),
            "groupId": self.group_id,
            "correctAnswer": self.correct_answer,
        }

    @classmethod
    def from_dict(cls, data: dict) -> TableCompletionQuestion:
        return cls(
            number=int(data["number"]),
            group_id=str(data["groupId"]),
            blank_id=int(data["blankId"]),
            table_structure=TableStructure.from_dict(data["tableStructure"]),
            answers={int(k): v or "" for k, v in (data.get("answers") or {}).items()},
            correct_answer=data.get("correctAnswer") or "",
        )


Question = Union[FlowChartQuestion, TableCompletionQuestion]


def question_from_dict(data: dict) -> Question:
    """
    Deserialize a question payload based on its "type" tag.

    Raises:
        ValueError: If the type is not a supported question kind
        KeyError: If a required key is missing
    """
    kind = QuestionKind(data.get("type"))
    if kind is QuestionKind.FLOW_CHART:
        return FlowChartQuestion.from_dict(data)
    return TableCompletionQuestion.from_dict(data)
