"""Confidence levels and confidence flag derivation."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence

from trainlog.extraction.types import (
    CONFIDENCE_RANK,
    RESOLVED_STATUSES,
    ConfidenceFlag,
    ConfidenceLevel,
    FieldCandidate,
    FieldSuggestion,
)
from trainlog.vocabulary.fields import STRUCTURED_FIELDS

_TIER_CONFIDENCE: dict[str, ConfidenceLevel] = {
    "phrases": "high",
    "synonyms": "medium",
    "hints": "low",
}


def confidence_for_tier(tier: str) -> ConfidenceLevel:
    """Map a vocabulary matcher tier to a confidence level."""

    try:
        return _TIER_CONFIDENCE[tier]
    except KeyError:
        raise ValueError(f"Unknown vocabulary tier: {tier}") from None


def confidence_rank(level: ConfidenceLevel) -> int:
    return CONFIDENCE_RANK[level]


def needs_confirmation(level: ConfidenceLevel) -> bool:
    return level != "high"


def confirmation_prompt(field_name: str, value: str) -> str:
    return f"This sounds like {value} for {field_name}. Confirm?"


def build_confidence_flags(
    *,
    candidates: Mapping[str, FieldCandidate],
    conflicts: Mapping[str, Sequence[str]],
    suggestions: Iterable[FieldSuggestion],
    reevaluate_fields: Iterable[str] = (),
) -> tuple[ConfidenceFlag, ...]:
    """Flag single-value fields that are unresolved, weak, or contested.

    Fields holding a confirmed, corrected or rejected suggestion are skipped unless
    listed in ``reevaluate_fields``; for those the fresh candidate is assessed.
    """

    by_field = {suggestion.field: suggestion for suggestion in suggestions}
    reevaluate = set(reevaluate_fields)
    flags: list[ConfidenceFlag] = []

    for field_name in STRUCTURED_FIELDS:
        suggestion = by_field.get(field_name)
        candidate = candidates.get(field_name)
        resolved = suggestion is not None and suggestion.status in RESOLVED_STATUSES
        if resolved and field_name not in reevaluate:
            continue

        competing = conflicts.get(field_name)
        if competing:
            flags.append(
                ConfidenceFlag(
                    field=field_name,
                    reason="conflicting_candidates",
                    confidence=candidate.confidence if candidate is not None else None,
                    note="Competing values: " + ", ".join(competing),
                )
            )
            continue

        current_confidence: ConfidenceLevel | None
        if resolved or suggestion is None:
            current_confidence = candidate.confidence if candidate is not None else None
        else:
            current_confidence = suggestion.confidence

        if current_confidence is None:
            flags.append(
                ConfidenceFlag(
                    field=field_name,
                    reason="unresolved",
                    note=f"No {field_name} found in the journal text.",
                )
            )
        elif current_confidence == "low":
            flags.append(
                ConfidenceFlag(
                    field=field_name,
                    reason="low_confidence",
                    confidence="low",
                    note=f"The {field_name} was inferred from a weak signal.",
                )
            )
    return tuple(flags)
