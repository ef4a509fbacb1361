"""
Schema Validation Utilities

Validates persisted Part payloads before they are turned into models.

Two levels:
- `validate_field()` returns the list of problems with one field payload,
  used by the loader to drop malformed legacy fields with a warning
- `validate_part_payload()` checks the Part envelope and, in strict
  mode, the full JSON Schema (`part.schema.json`) via jsonschema; it
  fails fast by raising ValidationError
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import jsonschema

PART_SCHEMA_NAME = "part"

_SCHEMAS: dict[str, dict] = {}


def _load_schema(name: str) -> dict:
    """Load a schema from the schemas directory."""
    if name not in _SCHEMAS:
        schema_path = Path(__file__).parent / f"{name}.schema.json"
        if not schema_path.exists():
            raise FileNotFoundError(f"Schema not found: {schema_path}")
        with open(schema_path, "r", encoding="utf-8") as f:
            _SCHEMAS[name] = json.load(f)
    return _SCHEMAS[name]


class ValidationError(Exception):
    """Raised when data fails schema validation."""

    def __init__(self, message: str, path: str = "", errors: list[str] | None = None):
        super().__init__(message)
        self.path = path
        self.errors = errors or []


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def validate_field(data: Any) -> list[str]:
    """
    List the problems with one flow chart field payload.

    A field is usable when it has a non-empty id, non-negative x/y and a
    positive width and height. A missing height is tolerated (older
    payloads), the loader applies the default.

    Args:
        data: Field payload from storage

    Returns:
        Human-readable issues, empty when the field is usable
    """
    if not isinstance(data, dict):
        return ["field must be an object"]
    issues = []
    field_id = data.get("id")
    if not isinstance(field_id, str) or not field_id.strip():
        issues.append("empty id")
    for key in ("x", "y"):
        value = data.get(key)
        if not _is_number(value):
            issues.append(f"missing {key}")
        elif value < 0:
            issues.append(f"negative {key}: {value}")
    width = data.get("width")
    if not _is_number(width) or width <= 0:
        issues.append(f"invalid width: {width!r}")
    height = data.get("height")
    if height is not None and (not _is_number(height) or height <= 0):
        issues.append(f"invalid height: {height!r}")
    number = data.get("questionNumber")
    if number is not None and (not isinstance(number, int) or isinstance(number, bool) or number < 1):
        issues.append(f"invalid questionNumber: {number!r}")
    return issues


def validate_part_payload(data: dict[str, Any], *, strict: bool = False) -> None:
    """
    Validate a Part payload.

    Args:
        data: Part dictionary from the persistence collaborator
        strict: If True, also validate against part.schema.json

    Raises:
        ValidationError: On the first violation found
    """
    if not isinstance(data, dict):
        raise ValidationError("Part payload must be an object")

    missing = [f for f in ("number", "questions") if f not in data]
    if missing:
        raise ValidationError(
            f"Missing required fields: {missing}",
            path="",
            errors=[f"Missing field: {f}" for f in missing],
        )

    number = data["number"]
    if not isinstance(number, int) or number < 1:
        raise ValidationError(f"Invalid part number: {number!r}", path="number")

    if not isinstance(data["questions"], list):
        raise ValidationError("questions must be a list", path="questions")

    if strict:
        schema = _load_schema(PART_SCHEMA_NAME)
        try:
            jsonschema.validate(data, schema)
        except jsonschema.ValidationError as e:
            raise ValidationError(
                f"Schema validation failed: {e.message}",
                path=".".join(str(p) for p in e.absolute_path),
                errors=[e.message],
            ) from e
