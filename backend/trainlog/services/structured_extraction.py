"""Structured metadata extraction orchestration."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from datetime import datetime
from time import perf_counter
from types import MappingProxyType

from trainlog.errors import InvalidInputError
from trainlog.extraction.confidence import build_confidence_flags
from trainlog.extraction.extractor_interface import FieldExtractorInterface
from trainlog.extraction.instructions import validate_instructions
from trainlog.extraction.normalizer import build_spans
from trainlog.extraction.rule_based_extractor import RuleBasedFieldExtractor
from trainlog.extraction.types import (
    ActorRole,
    ExtractionResult,
    FieldSuggestion,
    JournalInput,
)
from trainlog.reconciliation import SuggestionReconciler
from trainlog.timestamps import isoformat_utc
from trainlog.vocabulary.fields import STRUCTURED_FIELD_SET, STRUCTURED_FIELDS, normalize_field_key

logger = logging.getLogger(__name__)

_DEFAULT_EXTRACTOR = RuleBasedFieldExtractor()


def get_default_extractor() -> FieldExtractorInterface:
    """Return the rule-based extractor implementation."""

    return _DEFAULT_EXTRACTOR


def project_structured_fields(
    prior_structured: Mapping[str, str],
    suggestions: Sequence[FieldSuggestion],
) -> dict[str, str]:
    """Resolve the structured field values implied by the suggestions."""

    by_field = {suggestion.field: suggestion for suggestion in suggestions}
    projected: dict[str, str] = {}
    for field_name in STRUCTURED_FIELDS:
        suggestion = by_field.get(field_name)
        if suggestion is None:
            prior = prior_structured.get(field_name)
            if prior and prior.strip():
                projected[field_name] = prior.strip()
            continue
        if suggestion.status == "rejected":
            continue
        if suggestion.status == "pending" and suggestion.confidence == "low":
            continue
        value = suggestion.effective_value
        if value:
            projected[field_name] = value
    return projected


def run_structured_extraction(
    journal_input: JournalInput,
    *,
    prior_suggestions: Sequence[FieldSuggestion] = (),
    reevaluate_fields: Iterable[str] = (),
    now: datetime | None = None,
    actor_role: ActorRole = "athlete",
    extractor: FieldExtractorInterface | None = None,
    reconciler: SuggestionReconciler | None = None,
) -> ExtractionResult:
    """Run normalize -> extract -> reconcile -> flag for one journal input."""

    started = perf_counter()
    _validate_journal_input(journal_input)
    instructions = validate_instructions(journal_input.instructions)
    reevaluate = _validate_reevaluate_fields(reevaluate_fields)
    if actor_role not in ("athlete", "coach"):
        raise InvalidInputError("actor_role must be athlete or coach.")
    now_iso = isoformat_utc(now)

    spans = build_spans(journal_input)
    extracted = (extractor or get_default_extractor()).extract(spans)
    suggestions = (reconciler or SuggestionReconciler()).reconcile(
        tuple(prior_suggestions),
        extracted.candidates,
        instructions,
        prior_structured=journal_input.prior_structured,
        now_iso=now_iso,
        actor_role=actor_role,
    )
    flags = build_confidence_flags(
        candidates=extracted.candidates,
        conflicts=extracted.conflicts,
        suggestions=suggestions,
        reevaluate_fields=reevaluate,
    )
    result = ExtractionResult(
        structured=MappingProxyType(project_structured_fields(journal_input.prior_structured, suggestions)),
        suggestions=suggestions,
        concepts=extracted.concepts,
        failures=extracted.failures,
        conditioning_issues=extracted.conditioning_issues,
        confidence_flags=flags,
        generated_at=now_iso,
    )
    logger.info(
        (
            "structured_extraction.completed spans=%d suggestions=%d pending=%d resolved=%d "
            "flags=%d concepts=%d failures=%d conditioning_issues=%d total_ms=%.2f"
        ),
        len(spans),
        len(suggestions),
        sum(1 for suggestion in suggestions if suggestion.status == "pending"),
        sum(1 for suggestion in suggestions if suggestion.status != "pending"),
        len(flags),
        len(result.concepts),
        len(result.failures),
        len(result.conditioning_issues),
        (perf_counter() - started) * 1000.0,
    )
    return result


def _validate_journal_input(journal_input: JournalInput) -> None:
    for name in ("quick_add_notes", "shared_section", "private_section"):
        if not isinstance(getattr(journal_input, name), str):
            raise InvalidInputError(f"{name} must be a string.")
    for index, mention in enumerate(journal_input.raw_technique_mentions):
        if not isinstance(mention, str):
            raise InvalidInputError(f"raw_technique_mentions[{index}] must be a string.")
    for key, value in journal_input.prior_structured.items():
        if key not in STRUCTURED_FIELD_SET:
            raise InvalidInputError(f"prior_structured has unknown field '{key}'.")
        if not isinstance(value, str):
            raise InvalidInputError(f"prior_structured.{key} must be a string.")


def _validate_reevaluate_fields(fields: Iterable[str]) -> frozenset[str]:
    validated: set[str] = set()
    for raw_field in fields:
        field_name = normalize_field_key(raw_field)
        if field_name is None:
            raise InvalidInputError(f"Cannot re-evaluate unknown field '{raw_field}'.")
        validated.add(field_name)
    return frozenset(validated)
