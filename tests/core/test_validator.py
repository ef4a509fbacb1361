"""
Unit Tests for Schema Validation

Tests for the validator module.
"""

import pytest

from ielts_toolkit.core.schemas.validator import (
    ValidationError,
    validate_field,
    validate_part_payload,
)


class TestValidateField:
    """Tests for validate_field function."""

    @pytest.fixture
    def valid_field(self) -> dict:
        return {"id": "f1", "x": 0, "y": 12.5, "width": 140, "height": 32, "value": "river"}

    def test_validate_when_valid_then_no_issues(self, valid_field):
        assert validate_field(valid_field) == []

    def test_validate_when_height_missing_then_tolerated(self, valid_field):
        del valid_field["height"]
        assert validate_field(valid_field) == []

    def test_validate_when_not_dict_then_single_issue(self):
        assert validate_field("f1") == ["field must be an object"]

    def test_validate_when_several_problems_then_all_listed(self):
        issues = validate_field({"id": "", "x": -1, "width": 0})
        assert "empty id" in issues
        assert "negative x: -1" in issues
        assert "missing y" in issues
        assert any(i.startswith("invalid width") for i in issues)

    def test_validate_when_bool_coordinate_then_missing(self, valid_field):
        valid_field["x"] = True
        assert validate_field(valid_field) == ["missing x"]

    def test_validate_when_question_number_zero_then_issue(self, valid_field):
        valid_field["questionNumber"] = 0
        assert validate_field(valid_field) == ["invalid questionNumber: 0"]


class TestValidatePartPayload:
    """Tests for validate_part_payload function."""

    def test_validate_when_not_dict_then_raises(self):
        with pytest.raises(ValidationError, match="must be an object"):
            validate_part_payload([])

    def test_validate_when_missing_fields_then_lists_them(self):
        with pytest.raises(ValidationError) as exc:
            validate_part_payload({})
        assert exc.value.errors == ["Missing field: number", "Missing field: questions"]

    def test_validate_when_bad_number_then_raises_with_path(self):
        with pytest.raises(ValidationError) as exc:
            validate_part_payload({"number": 0, "questions": []})
        assert exc.value.path == "number"

    def test_validate_when_strict_and_valid_then_passes(self):
        validate_part_payload({"number": 1, "questions": []}, strict=True)

    def test_validate_when_strict_and_answer_key_not_numeric_then_raises(self):
        question = {
            "number": 1,
            "type": "TABLE_COMPLETION",
            "blankId": 1,
            "answers": {"one": "ocean"},
            "tableStructure": {"columns": [{"label": "A"}], "rows": []},
            "groupId": "g1",
        }
        with pytest.raises(ValidationError, match="Schema validation failed"):
            validate_part_payload({"number": 1, "questions": [question]}, strict=True)
