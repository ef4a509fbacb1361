"""
Unit Tests for Serialization Utilities

Tests for Part payload loading, legacy flattening and group reassembly.
"""

import pytest

from ielts_toolkit.core.models.fields import ImageField
from ielts_toolkit.core.models.groups import FlowChartArtifact
from ielts_toolkit.core.models.parts import Part
from ielts_toolkit.core.models.questions import FlowChartQuestion, TableCompletionQuestion
from ielts_toolkit.core.schemas.validator import ValidationError
from ielts_toolkit.core.utils.serialization import (
    deserialize_part,
    expand_grouped_flow_chart,
    reassemble_groups,
    serialize_part,
)

URL = "https://cdn.example.com/chart.png"


def field_payload(field_id="f1", **overrides):
    data = {"id": field_id, "x": 10, "y": 20, "width": 140, "height": 32, "value": ""}
    data.update(overrides)
    return data


def flow_payload(number, field=None, group="g1"):
    return {
        "number": number,
        "type": "FLOW_CHART",
        "imageUrl": URL,
        "field": field or field_payload(f"f{number}"),
        "groupId": group,
        "correctAnswer": "river",
    }


class TestExpandGroupedFlowChart:
    """Tests for flattening legacy grouped flow chart entries."""

    def test_expand_when_single_field_entry_then_unchanged(self):
        entry = flow_payload(1)
        assert expand_grouped_flow_chart(entry) == [entry]

    def test_expand_when_fields_array_then_one_entry_per_field(self):
        entry = {
            "number": 5,
            "type": "FLOW_CHART",
            "imageUrl": URL,
            "groupId": "g1",
            "fields": [
                field_payload("a", value="river"),
                field_payload("b", value="delta", questionNumber=9),
                field_payload("c", value="sea"),
            ],
        }
        expanded = expand_grouped_flow_chart(entry)
        assert [e["number"] for e in expanded] == [5, 9, 7]
        assert [e["correctAnswer"] for e in expanded] == ["river", "delta", "sea"]
        assert all(e["groupId"] == "g1" for e in expanded)

    def test_expand_when_no_group_id_then_derived_from_start(self):
        entry = {"number": 3, "type": "FLOW_CHART", "imageUrl": URL, "fields": [field_payload()]}
        assert expand_grouped_flow_chart(entry)[0]["groupId"] == "legacy-flow-chart-3"


class TestDeserializePart:
    """Tests for deserialize_part."""

    def test_deserialize_when_valid_then_no_warnings(self):
        result = deserialize_part({"number": 1, "questions": [flow_payload(2), flow_payload(1)]})
        assert result.ok
        assert result.value.numbers() == [1, 2]

    def test_deserialize_when_negative_coordinate_then_dropped_with_warning(self):
        bad = flow_payload(2, field=field_payload("f2", x=-5))
        result = deserialize_part({"number": 1, "questions": [flow_payload(1), bad]})
        assert result.value.numbers() == [1]
        assert len(result.warnings) == 1
        assert result.warnings[0].path == "questions[1]"
        assert "negative x" in result.warnings[0].message

    def test_deserialize_when_zero_width_or_empty_id_then_dropped(self):
        result = deserialize_part({"number": 1, "questions": [
            flow_payload(1, field=field_payload("f1", width=0)),
            flow_payload(2, field=field_payload("")),
        ]})
        assert result.value.questions == []
        assert len(result.warnings) == 2

    def test_deserialize_when_unknown_type_then_dropped_with_warning(self):
        result = deserialize_part({"number": 1, "questions": [{"number": 1, "type": "ESSAY", "groupId": "g"}]})
        assert result.value.questions == []
        assert "unreadable question" in result.warnings[0].message

    def test_deserialize_when_duplicate_numbers_then_second_dropped(self):
        result = deserialize_part({"number": 1, "questions": [flow_payload(1), flow_payload(1, group="g2")]})
        assert len(result.value.questions) == 1
        assert "duplicate question number 1" in result.warnings[0].message

    def test_deserialize_when_grouped_legacy_entry_then_flattened(self):
        entry = {"number": 4, "type": "FLOW_CHART", "imageUrl": URL, "groupId": "g1",
                 "fields": [field_payload("a"), field_payload("b")]}
        result = deserialize_part({"number": 1, "questions": [entry]})
        assert result.value.numbers() == [4, 5]

    def test_deserialize_when_grouped_entry_has_no_fields_then_warns(self):
        entry = {"number": 4, "type": "FLOW_CHART", "imageUrl": URL, "groupId": "g1", "fields": []}
        result = deserialize_part({"number": 1, "questions": [entry]})
        assert result.value.questions == []
        assert result.warnings[0].message == "flow chart has no fields"

    def test_deserialize_when_envelope_missing_questions_then_raises(self):
        with pytest.raises(ValidationError, match="Missing required fields"):
            deserialize_part({"number": 1})

    def test_deserialize_when_strict_and_schema_violation_then_raises(self):
        bad = flow_payload(1)
        bad["groupId"] = ""
        with pytest.raises(ValidationError, match="Schema validation failed"):
            deserialize_part({"number": 1, "questions": [bad]}, strict=True)

    def test_serialize_when_round_tripped_then_table_blanks_and_answers_kept(self, ocean_table):
        shape = ocean_table.without_answers()
        answers = {1: "ocean", 2: "current"}
        part = Part(1, [
            TableCompletionQuestion(1, "t1", 1, shape, answers, "ocean"),
            TableCompletionQuestion(2, "t1", 2, shape, answers, "current"),
        ])
        loaded = deserialize_part(serialize_part(part), strict=True).value
        assert [q.blank_id for q in loaded.questions] == [1, 2]
        assert loaded.questions[0].answers == answers
        assert loaded.questions[0].table_structure.blank_ids() == [1, 2]


class TestReassembleGroups:
    """Tests for reassemble_groups."""

    def test_reassemble_when_two_groups_then_one_artifact_each(self, ocean_table):
        shape = ocean_table.without_answers()
        questions = [
            FlowChartQuestion(1, "flow", URL, ImageField("a", 0, 0), "river"),
            FlowChartQuestion(2, "flow", URL, ImageField("b", 0, 50), "delta"),
            TableCompletionQuestion(3, "table", 1, shape, {1: "ocean"}, "ocean"),
        ]
        result = reassemble_groups(questions)
        assert result.ok
        assert set(result.value) == {"flow", "table"}
        assert isinstance(result.value["flow"], FlowChartArtifact)
        assert len(result.value["flow"].fields) == 2

    def test_reassemble_when_group_inconsistent_then_skipped_with_warning(self):
        questions = [
            FlowChartQuestion(1, "flow", URL, ImageField("a", 0, 0)),
            FlowChartQuestion(2, "flow", "https://other/y.png", ImageField("b", 0, 0)),
        ]
        result = reassemble_groups(questions)
        assert result.value == {}
        assert result.warnings[0].path == "groups[flow]"
