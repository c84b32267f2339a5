"""Canonical structured field keys (resolution order matters)."""

from __future__ import annotations


STRUCTURED_FIELDS: tuple[str, ...] = (
    "position",
    "technique",
    "outcome",
    "problem",
    "cue",
)
STRUCTURED_FIELD_SET = frozenset(STRUCTURED_FIELDS)

MULTI_VALUE_FIELDS: tuple[str, ...] = (
    "concepts",
    "failures",
    "conditioning_issues",
)

_FIELD_SYNONYMS: dict[str, str] = {
    "position": "position",
    "positions": "position",
    "technique": "technique",
    "techniques": "technique",
    "move": "technique",
    "outcome": "outcome",
    "result": "outcome",
    "problem": "problem",
    "issue": "problem",
    "cue": "cue",
    "coaching cue": "cue",
}


def normalize_field_key(raw_field: str | None) -> str | None:
    """Map a caller-supplied field name to a canonical key, or None when unknown."""

    if not raw_field:
        return None
    cleaned = " ".join(raw_field.strip().lower().replace("_", " ").split())
    return _FIELD_SYNONYMS.get(cleaned)
