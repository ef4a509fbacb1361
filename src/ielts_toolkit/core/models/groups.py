"""
Module: groups

Purpose:
    Groups bind every Question that came from one authored artifact. This
    module provides the read-only QuestionGroup view and the two editable
    artifacts (FlowChartArtifact, TableArtifact) that a group is
    reassembled into when a Part is loaded for editing.

Key Functions:
    - group_questions(questions): Ordered group_id -> members mapping
    - QuestionGroup.from_members(members): Build the view for one group
    - reassemble_group(members): Rebuild the editable artifact

Dependencies:
    - dataclasses (std)
    - .questions, .fields, .table

Used By:
    - core.utils.serialization
    - sync.synchronizer.GroupSynchronizer
    - editor.field_editor / editor.table_editor (from_artifact)
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Dict, List, Sequence, Tuple, Union

from .fields import ImageField
from .questions import FlowChartQuestion, Question, QuestionKind, TableCompletionQuestion
from .table import TableStructure


@dataclass(frozen=True, slots=True)
class QuestionGroup:
    """
    Summary of one group within a Part.

    Attributes:
        group_id: Opaque group identifier
        kind: Question kind shared by all members
        numbers: Member question numbers, ascending
    """

    group_id: str
    kind: QuestionKind
    numbers: Tuple[int, ...]

    @property
    def start_question_number(self) -> int:
        return self.numbers[0]

    @property
    def end_question_number(self) -> int:
        return self.numbers[-1]

    @property
    def size(self) -> int:
        return len(self.numbers)

    @property
    def is_contiguous(self) -> bool:
        return list(self.numbers) == list(range(self.numbers[0], self.numbers[0] + len(self.numbers)))

    @classmethod
    def from_members(cls, members: Sequence[Question]) -> QuestionGroup:
        if not members:
            raise ValueError("A group needs at least one member")
        return cls(
            group_id=members[0].group_id,
            kind=members[0].kind,
            numbers=tuple(sorted(q.number for q in members)),
        )


@dataclass(frozen=True)
class FlowChartArtifact:
    """Editable flow chart: image plus its ordered answer boxes."""

    group_id: str
    image_url: str
    fields: Tuple[ImageField, ...]
    start_question_number: int


@dataclass(frozen=True)
class TableArtifact:
    """Editable table: structure with blank values holding the answers."""

    group_id: str
    structure: TableStructure
    start_question_number: int

    @property
    def answers(self) -> Dict[int, str]:
        return self.structure.answers


Artifact = Union[FlowChartArtifact, TableArtifact]


def group_questions(questions: Sequence[Question]) -> Dict[str, List[Question]]:
    """
    Bucket questions by group_id.

    Groups appear in order of their first member; members are sorted by
    question number.
    """
    groups: Dict[str, List[Question]] = {}
    for question in questions:
        groups.setdefault(question.group_id, []).append(question)
    for members in groups.values():
        members.sort(key=lambda q: q.number)
    return groups


def reassemble_group(members: Sequence[Question]) -> Artifact:
    """
    Merge the members of one group back into a single editable artifact.

    Flow chart fields keep their committed numbers: a field whose number
    does not follow start + index gets an explicit question_number
    override. Field values are restored from each member's correct answer.

    Raises:
        ValueError: If members are empty or mix kinds or artifacts
    """
    if not members:
        raise ValueError("Cannot reassemble an empty group")
    ordered = sorted(members, key=lambda q: q.number)
    kinds = {q.kind for q in ordered}
    if len(kinds) != 1:
        raise ValueError(f"Group {ordered[0].group_id!r} mixes question kinds: {sorted(map(str, kinds))}")
    start = ordered[0].number

    if isinstance(ordered[0], FlowChartQuestion):
        urls = {q.image_url for q in ordered}
        if len(urls) != 1:
            raise ValueError(f"Group {ordered[0].group_id!r} references {len(urls)} images")
        fields = []
        for index, question in enumerate(ordered):
            override = question.number if question.number != start + index else question.field.question_number
            fields.append(
                replace(
                    question.field,
                    value=question.correct_answer or question.field.value,
                    question_number=override,
                )
            )
        return FlowChartArtifact(
            group_id=ordered[0].group_id,
            image_url=ordered[0].image_url,
            fields=tuple(fields),
            start_question_number=start,
        )

    first: TableCompletionQuestion = ordered[0]
    shapes = {q.table_structure.without_answers() for q in ordered}
    if len(shapes) != 1:
        raise ValueError(f"Group {first.group_id!r} references {len(shapes)} different tables")
    answers = dict(first.answers)
    for question in ordered:
        if question.correct_answer:
            answers[question.blank_id] = question.correct_answer
    return TableArtifact(
        group_id=first.group_id,
        structure=first.table_structure.with_answers(answers),
        start_question_number=start,
    )
