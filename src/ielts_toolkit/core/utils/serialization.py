"""
Serialization Utilities

Converts Part payloads exchanged with the persistence collaborator to and
from models, and regroups loaded Questions into editable artifacts.

Loading is tolerant: a malformed record (negative coordinates, zero size,
empty id, unknown type, broken table) is dropped, but never silently.
Every drop is reported as a LoadWarning in the LoadResult and logged, so
callers can surface it to the author.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Generic, List, TypeVar

from ..models.groups import Artifact, group_questions, reassemble_group
from ..models.parts import Part
from ..models.questions import Question, QuestionKind, question_from_dict
from ..schemas.validator import validate_field, validate_part_payload

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class LoadWarning:
    """A record that was skipped while loading."""

    path: str
    message: str

    def __str__(self) -> str:
        return f"{self.path}: {self.message}"


@dataclass
class LoadResult(Generic[T]):
    """Loaded value plus the warnings raised on the way."""

    value: T
    warnings: List[LoadWarning] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.warnings

    def warn(self, path: str, message: str) -> None:
        warning = LoadWarning(path, message)
        logger.warning(f"Dropped record {warning}")
        self.warnings.append(warning)


# ─────────────────────────────────────────────────────────────────────────────
# Legacy Payloads
# ─────────────────────────────────────────────────────────────────────────────

def expand_grouped_flow_chart(entry: Dict[str, Any]) -> List[Dict[str, Any]]:
    """
    Flatten a grouped flow chart entry into one entry per field.

    Older payloads stored a whole flow chart as a single entry with a
    "fields" array and a starting "number" (or "questionNumber"). Each
    field becomes its own Question: numbered by its override if set,
    else start + index, with the field value as correct answer.

    Entries that already carry a single "field" are returned unchanged.
    """
    fields = entry.get("fields")
    if entry.get("field") is not None or not isinstance(fields, list):
        return [entry]
    start = int(entry.get("number") or entry.get("questionNumber") or 1)
    group_id = entry.get("groupId") or f"legacy-flow-chart-{start}"
    expanded = []
    for index, field_data in enumerate(fields):
        override = field_data.get("questionNumber") if isinstance(field_data, dict) else None
        value = field_data.get("value", "") if isinstance(field_data, dict) else ""
        expanded.append({
            "number": override if override is not None else start + index,
            "type": str(QuestionKind.FLOW_CHART),
            "imageUrl": entry.get("imageUrl") or "",
            "field": field_data,
            "groupId": group_id,
            "correctAnswer": value if isinstance(value, str) else str(value),
        })
    return expanded


# ─────────────────────────────────────────────────────────────────────────────
# Part Serialization
# ─────────────────────────────────────────────────────────────────────────────

def serialize_part(part: Part) -> Dict[str, Any]:
    """Serialize a Part to the persistence payload."""
    return part.to_dict()


def deserialize_part(data: Dict[str, Any], *, strict: bool = False) -> LoadResult[Part]:
    """
    Deserialize a Part payload, dropping malformed questions with warnings.

    Args:
        data: Part payload from the persistence collaborator
        strict: Validate the payload against the JSON schema first

    Returns:
        LoadResult holding the Part and any warnings

    Raises:
        ValidationError: If the Part envelope itself is invalid (or, in
            strict mode, any part of the payload)
    """
    validate_part_payload(data, strict=strict)
    part = Part(number=data["number"], title=data.get("title") or "")
    result: LoadResult[Part] = LoadResult(part)

    entries: List[tuple[str, Dict[str, Any]]] = []
    for index, raw in enumerate(data["questions"]):
        path = f"questions[{index}]"
        if not isinstance(raw, dict):
            result.warn(path, "question must be an object")
            continue
        if raw.get("type") == QuestionKind.FLOW_CHART.value:
            expanded = expand_grouped_flow_chart(raw)
            if not expanded:
                result.warn(path, "flow chart has no fields")
                continue
            if expanded[0] is not raw:
                entries.extend((f"{path}.fields[{i}]", e) for i, e in enumerate(expanded))
                continue
        entries.append((path, raw))

    seen_numbers: set[int] = set()
    for path, entry in entries:
        if entry.get("type") == QuestionKind.FLOW_CHART.value:
            issues = validate_field(entry.get("field"))
            if issues:
                result.warn(path, f"invalid field ({', '.join(issues)})")
                continue
        try:
            question = question_from_dict(entry)
        except (KeyError, ValueError, TypeError) as e:
            result.warn(path, f"unreadable question: {e}")
            continue
        if question.number in seen_numbers:
            result.warn(path, f"duplicate question number {question.number}")
            continue
        seen_numbers.add(question.number)
        part.questions.append(question)

    part.questions.sort(key=lambda q: q.number)
    logger.debug(
        f"Loaded part {part.number}: {len(part.questions)} questions, "
        f"{len(result.warnings)} warnings"
    )
    return result


def reassemble_groups(questions: List[Question]) -> LoadResult[Dict[str, Artifact]]:
    """
    Merge loaded Questions sharing a group id into editable artifacts.

    Groups whose members disagree (mixed kinds, different images or
    tables) are skipped with a warning.

    Returns:
        LoadResult mapping group_id -> FlowChartArtifact | TableArtifact
    """
    result: LoadResult[Dict[str, Artifact]] = LoadResult({})
    for group_id, members in group_questions(questions).items():
        try:
            result.value[group_id] = reassemble_group(members)
        except ValueError as e:
            result.warn(f"groups[{group_id}]", str(e))
    return result
