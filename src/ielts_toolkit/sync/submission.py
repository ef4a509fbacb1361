"""
Module: sync.submission

Purpose:
    Whole-test answer-completeness check, run only when a test is
    submitted. Editing never enforces it.

Key Functions:
    - validate_submission(): Fail fast on the first incomplete question

Dependencies:
    - ielts_toolkit.core.models: Part and question types
    - ielts_toolkit.editor.upload.is_durable_url

Used By:
    - gui.main_window (Check submission button)
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from ielts_toolkit.core.models.parts import Part
from ielts_toolkit.core.models.questions import FlowChartQuestion, TableCompletionQuestion
from ielts_toolkit.editor.upload import is_durable_url

logger = logging.getLogger(__name__)


class SubmissionError(Exception):
    """A question or group is not ready to be submitted."""

    def __init__(
        self,
        message: str,
        part_number: Optional[int] = None,
        question_number: Optional[int] = None,
    ):
        super().__init__(message)
        self.part_number = part_number
        self.question_number = question_number


def validate_submission(parts: Iterable[Part]) -> None:
    """
    Check every Part of a test, in part then question order.

    A question passes when its correct answer is non-empty and its group
    references a non-empty artifact: a durable image for flow charts, a
    table that contains the question's blank for table completion.

    Raises:
        SubmissionError: On the first violation found
    """
    checked = 0
    for part in sorted(parts, key=lambda p: p.number):
        for question in sorted(part.questions, key=lambda q: q.number):
            where = f"Part {part.number}, question {question.number}"
            if isinstance(question, FlowChartQuestion):
                if not question.image_url or not is_durable_url(question.image_url):
                    raise SubmissionError(
                        f"{where}: flow chart image is missing or was never uploaded",
                        part.number,
                        question.number,
                    )
            elif isinstance(question, TableCompletionQuestion):
                if question.table_structure.blank_count == 0:
                    raise SubmissionError(
                        f"{where}: table has no blanks", part.number, question.number
                    )
            if not question.correct_answer.strip():
                raise SubmissionError(
                    f"{where}: correct answer is empty", part.number, question.number
                )
            checked += 1
    logger.info(f"Submission check passed for {checked} questions")
