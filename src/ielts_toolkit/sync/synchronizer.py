"""
Module: sync.synchronizer

Purpose:
    Converts authored artifacts into numbered Questions for one Part and
    keeps them consistent as the artifacts are edited.

    - A flow chart save replaces every Question of its group with one
      Question per field.
    - A table save resizes its group to the blank count, keeping the
      numbers (and answers) of surviving blanks.
    - Blocks that would collide with numbers used elsewhere in the Part
      are moved to start just after the current maximum.

Key Classes:
    - GroupSynchronizer: Group-level save/renumber/delete for one Part
    - DeleteResult: Outcome of deleting a Question
    - NumberingConflictError: Renumbering would collide or go below 1

Dependencies:
    - ielts_toolkit.core.models: Part, questions, groups
    - ielts_toolkit.core.utils.serialization: Part payload conversion
    - .store.PartStore: Persistence collaborator

Used By:
    - gui.main_window (save buttons, reopening stored groups)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Dict, List, Mapping, Optional, Sequence, Set

from ielts_toolkit.core.models.fields import ImageField
from ielts_toolkit.core.models.groups import (
    Artifact,
    QuestionGroup,
    group_questions,
    reassemble_group,
)
from ielts_toolkit.core.models.parts import Part
from ielts_toolkit.core.models.questions import (
    FlowChartQuestion,
    Question,
    TableCompletionQuestion,
)
from ielts_toolkit.core.models.table import TableStructure
from ielts_toolkit.core.utils.serialization import LoadWarning, deserialize_part, serialize_part
from ielts_toolkit.editor.errors import EmptyGroupError, NonDurableImageError
from ielts_toolkit.editor.upload import is_durable_url

from .store import PartStore

logger = logging.getLogger(__name__)


class NumberingConflictError(ValueError):
    """Question numbers would collide or drop below 1."""


@dataclass(frozen=True)
class DeleteResult:
    """
    Outcome of deleting one Question.

    Attributes:
        group_deleted: The Question was the last of its group
        released_image_url: Image no longer referenced (flow chart groups)
    """

    group_deleted: bool
    released_image_url: Optional[str] = None


class GroupSynchronizer:
    """
    Group/question reconciliation for one Part.

    Example:
        >>> sync = GroupSynchronizer(Part(1))
        >>> qs = sync.save_flow_chart_fields("g1", "https://cdn/x.png", fields, start=5)
        >>> [q.number for q in qs]
        [5, 6, 7]
    """

    def __init__(self, part: Part) -> None:
        self.part = part
        self._starts: Dict[str, int] = {
            group.group_id: group.start_question_number for group in self.groups()
        }

    # ─────────────────────────────────────────────────────────────────────────
    # Loading & Committing
    # ─────────────────────────────────────────────────────────────────────────

    @classmethod
    def load(
        cls,
        store: PartStore,
        test_id: str,
        part_number: int,
        *,
        strict: bool = False,
    ) -> tuple[GroupSynchronizer, List[LoadWarning]]:
        """Load a Part from the store; malformed questions become warnings."""
        result = deserialize_part(store.load_part(test_id, part_number), strict=strict)
        return cls(result.value), result.warnings

    def commit(self, store: PartStore, test_id: str) -> Dict:
        """Serialize the Part and send it to the store."""
        payload = serialize_part(self.part)
        store.save_part(test_id, self.part.number, payload)
        logger.info(
            f"Committed part {self.part.number} of {test_id!r}: "
            f"{len(self.part.questions)} questions"
        )
        return payload

    # ─────────────────────────────────────────────────────────────────────────
    # Queries
    # ─────────────────────────────────────────────────────────────────────────

    def questions_in(self, group_id: str) -> List[Question]:
        return sorted(
            (q for q in self.part.questions if q.group_id == group_id),
            key=lambda q: q.number,
        )

    def groups(self) -> List[QuestionGroup]:
        return [
            QuestionGroup.from_members(members)
            for members in group_questions(self.part.questions).values()
        ]

    def artifact(self, group_id: str) -> Artifact:
        """
        Editable artifact for a group.

        Raises:
            KeyError: If the group has no Questions
        """
        members = self.questions_in(group_id)
        if not members:
            raise KeyError(f"Unknown group: {group_id!r}")
        return reassemble_group(members)

    def next_question_number(self) -> int:
        numbers = self.part.numbers()
        return max(numbers) + 1 if numbers else 1

    def _numbers_outside(self, group_id: str) -> Set[int]:
        return {q.number for q in self.part.questions if q.group_id != group_id}

    # ─────────────────────────────────────────────────────────────────────────
    # Numbering
    # ─────────────────────────────────────────────────────────────────────────

    def _resolve_start(self, group_id: str, start: Optional[int]) -> int:
        if start is not None:
            if start < 1:
                raise NumberingConflictError(f"start question number must be >= 1: {start}")
            return start
        if group_id in self._starts:
            return self._starts[group_id]
        members = self.questions_in(group_id)
        if members:
            return members[0].number
        others = self._numbers_outside(group_id)
        return max(others) + 1 if others else 1

    def _place(self, group_id: str, numbers: List[int]) -> List[int]:
        """
        Move a block past the Part's maximum if it collides with other groups.

        The block is shifted as a whole, so internal order and gaps from
        explicit overrides are preserved.
        """
        if len(set(numbers)) != len(numbers):
            raise NumberingConflictError(f"Group {group_id!r} assigns the same number twice: {numbers}")
        others = self._numbers_outside(group_id)
        if not others.intersection(numbers):
            return numbers
        offset = max(others) + 1 - min(numbers)
        logger.info(f"Group {group_id!r} collides with existing numbers, shifting by {offset}")
        return [n + offset for n in numbers]

    def _replace_group(self, group_id: str, questions: Sequence[Question]) -> None:
        kept = [q for q in self.part.questions if q.group_id != group_id]
        self.part.questions = sorted(kept + list(questions), key=lambda q: q.number)

    # ─────────────────────────────────────────────────────────────────────────
    # Saving Artifacts
    # ─────────────────────────────────────────────────────────────────────────

    def save_flow_chart_fields(
        self,
        group_id: str,
        image_url: str,
        fields: Sequence[ImageField],
        start: Optional[int] = None,
    ) -> List[FlowChartQuestion]:
        """
        Replace a flow chart group with one Question per field.

        Fields are numbered in order from the start number (explicit, else
        the group's retained start, else after the Part's maximum), except
        fields with an explicit question_number. Each field's value becomes
        its correct answer.

        Raises:
            EmptyGroupError: If fields is empty (nothing is changed)
            NonDurableImageError: If image_url is a local preview
            NumberingConflictError: If two fields resolve to one number
        """
        if not fields:
            raise EmptyGroupError("Please create at least one input field on the flow chart image")
        if not is_durable_url(image_url):
            raise NonDurableImageError("Flow chart image must be uploaded before saving")

        first = self._resolve_start(group_id, start)
        requested = [
            f.question_number if f.question_number is not None else first + index
            for index, f in enumerate(fields)
        ]
        numbers = self._place(group_id, requested)
        offset = numbers[0] - requested[0]

        questions = [
            FlowChartQuestion(
                number=number,
                group_id=group_id,
                image_url=image_url,
                field=f,
                correct_answer=f.value,
            )
            for number, f in zip(numbers, fields)
        ]
        self._replace_group(group_id, questions)
        self._starts[group_id] = first + offset
        logger.info(f"Saved flow chart group {group_id!r} as questions {numbers}")
        return questions

    def save_table_structure(
        self,
        group_id: str,
        structure: TableStructure,
        answers: Optional[Mapping[int, str]] = None,
        start: Optional[int] = None,
    ) -> List[TableCompletionQuestion]:
        """
        Resize a table group to match the structure's blanks.

        Blanks are numbered contiguously in ascending blank id order from
        the start number (explicit, else the group's retained start, else
        after the Part's maximum), so blanks added or removed since the
        last save never leave gaps. Answers are the blank values in
        structure, overridden by the answers argument; entries for blank
        ids missing from the structure are discarded.

        Raises:
            EmptyGroupError: If the structure has no blanks
        """
        blank_ids = structure.blank_ids()
        if not blank_ids:
            raise EmptyGroupError("Add at least one blank to the table before saving")

        existing = self.questions_in(group_id)
        merged = structure.answers
        merged.update({k: v for k, v in (answers or {}).items() if k in merged})

        first = self._resolve_start(group_id, start)
        numbers = self._place(group_id, [first + i for i in range(len(blank_ids))])

        snapshot = structure.without_answers()
        questions = [
            TableCompletionQuestion(
                number=number,
                group_id=group_id,
                blank_id=blank_id,
                table_structure=snapshot,
                answers=dict(merged),
                correct_answer=merged[blank_id],
            )
            for number, blank_id in zip(numbers, blank_ids)
        ]
        dropped = len(existing) - len(questions)
        self._replace_group(group_id, questions)
        self._starts[group_id] = numbers[0]
        logger.info(
            f"Saved table group {group_id!r}: {len(questions)} questions"
            + (f", dropped {dropped}" if dropped > 0 else "")
        )
        return questions

    # ─────────────────────────────────────────────────────────────────────────
    # Renumbering & Deletion
    # ─────────────────────────────────────────────────────────────────────────

    def renumber_group(self, group_id: str, delta: int) -> List[Question]:
        """
        Shift every Question of a group by delta.

        Raises:
            KeyError: If the group has no Questions
            NumberingConflictError: If a number would drop below 1 or
                collide with another group
        """
        members = self.questions_in(group_id)
        if not members:
            raise KeyError(f"Unknown group: {group_id!r}")
        numbers = [q.number + delta for q in members]
        if min(numbers) < 1:
            raise NumberingConflictError(f"Renumbering {group_id!r} by {delta} goes below 1")
        clash = self._numbers_outside(group_id).intersection(numbers)
        if clash:
            raise NumberingConflictError(f"Renumbering {group_id!r} collides with {sorted(clash)}")
        shifted = [replace(q, number=n) for q, n in zip(members, numbers)]
        self._replace_group(group_id, shifted)
        self._starts[group_id] = self._starts.get(group_id, members[0].number) + delta
        logger.debug(f"Renumbered group {group_id!r} by {delta}")
        return shifted

    def delete_question(self, number: int) -> DeleteResult:
        """
        Delete one Question; siblings keep their numbers.

        Deleting the last member deletes the group and releases its image.
        The group's start number is retained, so an editor that saves
        the same group again gets its old numbers back.

        Raises:
            KeyError: If no Question has this number
        """
        question = self.part.get(number)
        if question is None:
            raise KeyError(f"No question numbered {number}")
        self.part.questions = [q for q in self.part.questions if q is not question]
        if self.questions_in(question.group_id):
            return DeleteResult(group_deleted=False)
        logger.info(f"Deleted last question of group {question.group_id!r}")
        image = question.image_url if isinstance(question, FlowChartQuestion) else None
        return DeleteResult(group_deleted=True, released_image_url=image)

    def delete_group(self, group_id: str) -> int:
        """Delete every Question of a group; returns how many were removed."""
        before = len(self.part.questions)
        self.part.questions = [q for q in self.part.questions if q.group_id != group_id]
        self._starts.pop(group_id, None)
        return before - len(self.part.questions)
