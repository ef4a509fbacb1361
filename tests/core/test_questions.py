"""
Unit Tests for Question Models

Tests for FlowChartQuestion, TableCompletionQuestion and type dispatch.
"""

import pytest

from ielts_toolkit.core.models.fields import ImageField
from ielts_toolkit.core.models.questions import (
    FlowChartQuestion,
    QuestionKind,
    TableCompletionQuestion,
    question_from_dict,
)


class TestFlowChartQuestion:
    """Tests for FlowChartQuestion."""

    def test_init_when_number_zero_then_raises_error(self):
        with pytest.raises(ValueError, match="question number must be >= 1"):
            FlowChartQuestion(0, "g1", "https://x/a.png", ImageField("f1", 0, 0))

    def test_init_when_group_empty_then_raises_error(self):
        with pytest.raises(ValueError, match="group_id"):
            FlowChartQuestion(1, "", "https://x/a.png", ImageField("f1", 0, 0))

    def test_to_dict_when_serialized_then_wire_keys(self):
        q = FlowChartQuestion(5, "g1", "https://x/a.png", ImageField("f1", 10, 20, value="river"), "river")
        d = q.to_dict()
        assert d["type"] == "FLOW_CHART"
        assert d["imageUrl"] == "https://x/a.png"
        assert d["groupId"] == "g1"
        assert d["correctAnswer"] == "river"
        assert d["field"]["x"] == 10

    def test_kind_when_accessed_then_flow_chart(self):
        assert FlowChartQuestion.kind is QuestionKind.FLOW_CHART


class TestTableCompletionQuestion:
    """Tests for TableCompletionQuestion."""

    def test_init_when_blank_missing_from_table_then_raises_error(self, ocean_table):
        with pytest.raises(ValueError, match="blank_id 7"):
            TableCompletionQuestion(1, "g1", 7, ocean_table)

    def test_to_dict_when_answers_then_keys_are_strings(self, ocean_table):
        q = TableCompletionQuestion(3, "g1", 1, ocean_table, {1: "ocean", 2: "current"}, "ocean")
        d = q.to_dict()
        assert d["answers"] == {"1": "ocean", "2": "current"}
        assert d["blankId"] == 1

    def test_from_dict_when_string_keys_then_parsed_to_int(self, ocean_table):
        q = TableCompletionQuestion(3, "g1", 2, ocean_table, {1: "ocean", 2: "current"}, "current")
        loaded = TableCompletionQuestion.from_dict(q.to_dict())
        assert loaded.answers == {1: "ocean", 2: "current"}
        assert loaded == q


class TestQuestionFromDict:
    """Tests for question_from_dict dispatch."""

    def test_from_dict_when_flow_chart_then_flow_chart_question(self):
        q = question_from_dict({
            "number": 2,
            "type": "FLOW_CHART",
            "imageUrl": "https://x/a.png",
            "field": {"id": "f1", "x": 1, "y": 2, "width": 100, "height": 30},
            "groupId": "g1",
        })
        assert isinstance(q, FlowChartQuestion)
        assert q.correct_answer == ""

    def test_from_dict_when_unknown_type_then_raises_value_error(self):
        with pytest.raises(ValueError):
            question_from_dict({"number": 1, "type": "ESSAY", "groupId": "g1"})

    def test_from_dict_when_field_missing_then_raises_key_error(self):
        with pytest.raises(KeyError):
            question_from_dict({"number": 1, "type": "FLOW_CHART", "groupId": "g1"})
