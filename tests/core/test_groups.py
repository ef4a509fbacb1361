"""
Unit Tests for Question Groups

Tests for grouping loaded Questions and reassembling editable artifacts.
"""

import pytest

from ielts_toolkit.core.models.fields import ImageField
from ielts_toolkit.core.models.groups import (
    FlowChartArtifact,
    QuestionGroup,
    TableArtifact,
    group_questions,
    reassemble_group,
)
from ielts_toolkit.core.models.questions import FlowChartQuestion, QuestionKind, TableCompletionQuestion

URL = "https://cdn.example.com/chart.png"


def flow(number, field_id, group="g1", url=URL, answer=""):
    return FlowChartQuestion(number, group, url, ImageField(field_id, x=number * 10, y=5), answer)


class TestQuestionGroup:
    """Tests for QuestionGroup view."""

    def test_from_members_when_unsorted_then_numbers_ascending(self):
        g = QuestionGroup.from_members([flow(7, "b"), flow(5, "a")])
        assert g.numbers == (5, 7)
        assert g.start_question_number == 5
        assert g.end_question_number == 7
        assert g.kind is QuestionKind.FLOW_CHART

    def test_is_contiguous_when_gap_then_false(self):
        assert not QuestionGroup.from_members([flow(5, "a"), flow(7, "b")]).is_contiguous
        assert QuestionGroup.from_members([flow(5, "a"), flow(6, "b")]).is_contiguous

    def test_from_members_when_empty_then_raises_error(self):
        with pytest.raises(ValueError):
            QuestionGroup.from_members([])


class TestGroupQuestions:
    """Tests for group_questions bucketing."""

    def test_group_questions_when_interleaved_then_first_seen_order(self):
        groups = group_questions([flow(3, "c", "g2"), flow(2, "b"), flow(1, "a")])
        assert list(groups) == ["g2", "g1"]
        assert [q.number for q in groups["g1"]] == [1, 2]


class TestReassembleGroup:
    """Tests for reassemble_group."""

    def test_reassemble_when_flow_chart_then_fields_in_number_order(self):
        artifact = reassemble_group([flow(6, "b", answer="delta"), flow(5, "a", answer="river")])
        assert isinstance(artifact, FlowChartArtifact)
        assert artifact.start_question_number == 5
        assert [f.id for f in artifact.fields] == ["a", "b"]
        assert [f.value for f in artifact.fields] == ["river", "delta"]
        assert all(f.question_number is None for f in artifact.fields)

    def test_reassemble_when_numbers_have_gap_then_override_recorded(self):
        artifact = reassemble_group([flow(5, "a"), flow(9, "b")])
        assert artifact.fields[1].question_number == 9

    def test_reassemble_when_mixed_images_then_raises_error(self):
        with pytest.raises(ValueError, match="2 images"):
            reassemble_group([flow(1, "a"), flow(2, "b", url="https://other/x.png")])

    def test_reassemble_when_mixed_kinds_then_raises_error(self, ocean_table):
        table_q = TableCompletionQuestion(2, "g1", 1, ocean_table.without_answers(), {1: "ocean"}, "ocean")
        with pytest.raises(ValueError, match="mixes question kinds"):
            reassemble_group([flow(1, "a"), table_q])

    def test_reassemble_when_table_then_answers_restored_into_cells(self, ocean_table):
        shape = ocean_table.without_answers()
        members = [
            TableCompletionQuestion(3, "t1", 1, shape, {1: "ocean", 2: "current"}, "ocean"),
            TableCompletionQuestion(4, "t1", 2, shape, {1: "ocean", 2: "current"}, "current"),
        ]
        artifact = reassemble_group(members)
        assert isinstance(artifact, TableArtifact)
        assert artifact.start_question_number == 3
        assert artifact.answers == {1: "ocean", 2: "current"}
        assert artifact.structure == ocean_table

    def test_reassemble_when_empty_then_raises_error(self):
        with pytest.raises(ValueError, match="empty group"):
            reassemble_group([])
