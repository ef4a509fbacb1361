"""Schema validation for persisted Part payloads."""

from .validator import ValidationError, validate_field, validate_part_payload

__all__ = ["ValidationError", "validate_field", "validate_part_payload"]
