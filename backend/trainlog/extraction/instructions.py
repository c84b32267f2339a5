"""Validation for caller-supplied confirm/correct/reject instructions."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from trainlog.errors import InvalidInputError
from trainlog.extraction.types import ConfirmField, CorrectField, MetadataInstruction, RejectField
from trainlog.vocabulary.fields import STRUCTURED_FIELDS, normalize_field_key

_ACTION_ALIASES: dict[str, str] = {
    "confirm": "confirm",
    "confirmed": "confirm",
    "correct": "correct",
    "corrected": "correct",
    "reject": "reject",
    "rejected": "reject",
}


def _clean_optional(value: object) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise InvalidInputError("Instruction values must be strings.")
    cleaned = " ".join(value.split())
    return cleaned or None


def _require_field(raw_field: object, position: int) -> str:
    field_name = normalize_field_key(raw_field) if isinstance(raw_field, str) else None
    if field_name is None:
        raise InvalidInputError(
            f"instructions[{position}].field must be one of: {', '.join(STRUCTURED_FIELDS)}."
        )
    return field_name


def parse_instruction(payload: Mapping[str, Any], position: int = 0) -> MetadataInstruction:
    """Build a typed instruction from a loosely-typed mapping."""

    raw_action = payload.get("action", payload.get("status"))
    action = _ACTION_ALIASES.get(str(raw_action).strip().lower()) if raw_action is not None else None
    if action is None:
        raise InvalidInputError(f"instructions[{position}].action must be confirm, correct, or reject.")

    field_name = _require_field(payload.get("field"), position)
    note = _clean_optional(payload.get("note"))
    if action == "confirm":
        return ConfirmField(field=field_name, value=_clean_optional(payload.get("value")), note=note)
    if action == "reject":
        return RejectField(field=field_name, note=note)

    correction = _clean_optional(payload.get("correction_value", payload.get("correctionValue")))
    if correction is None:
        raise InvalidInputError(f"instructions[{position}].correction_value is required for corrections.")
    return CorrectField(field=field_name, correction_value=correction, note=note)


def validate_instructions(instructions: Iterable[object]) -> tuple[MetadataInstruction, ...]:
    """Validate and normalize a list of instructions; at most one per field."""

    validated: list[MetadataInstruction] = []
    seen_fields: set[str] = set()
    for position, instruction in enumerate(instructions):
        if isinstance(instruction, Mapping):
            clean = parse_instruction(instruction, position)
        elif isinstance(instruction, ConfirmField):
            clean = ConfirmField(
                field=_require_field(instruction.field, position),
                value=_clean_optional(instruction.value),
                note=_clean_optional(instruction.note),
            )
        elif isinstance(instruction, CorrectField):
            correction = _clean_optional(instruction.correction_value)
            if correction is None:
                raise InvalidInputError(
                    f"instructions[{position}].correction_value is required for corrections."
                )
            clean = CorrectField(
                field=_require_field(instruction.field, position),
                correction_value=correction,
                note=_clean_optional(instruction.note),
            )
        elif isinstance(instruction, RejectField):
            clean = RejectField(
                field=_require_field(instruction.field, position),
                note=_clean_optional(instruction.note),
            )
        else:
            raise InvalidInputError(f"instructions[{position}] is not a recognised instruction.")

        if clean.field in seen_fields:
            raise InvalidInputError(f"instructions[{position}] repeats field '{clean.field}'.")
        seen_fields.add(clean.field)
        validated.append(clean)
    return tuple(validated)
