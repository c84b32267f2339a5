"""Suggestion reconciliation across extraction runs.

Each field moves through ``pending -> confirmed | corrected | rejected``. A resolved
suggestion is only changed by an explicit instruction in the current run, or by a
prior structured value that differs from what the suggestion already asserts.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import replace

from trainlog.errors import ReconciliationError
from trainlog.extraction.confidence import confidence_rank, confirmation_prompt, needs_confirmation
from trainlog.extraction.types import (
    RESOLVED_STATUSES,
    ActorRole,
    ConfirmField,
    CorrectField,
    FieldCandidate,
    FieldSuggestion,
    MetadataInstruction,
    RejectField,
)
from trainlog.vocabulary.fields import STRUCTURED_FIELD_SET, STRUCTURED_FIELDS


def same_value(left: str | None, right: str | None) -> bool:
    """Compare field values ignoring case and whitespace."""

    if left is None or right is None:
        return left is right
    return " ".join(left.split()).casefold() == " ".join(right.split()).casefold()


class SuggestionReconciler:
    """Pure ``(prior suggestions, candidates, instructions) -> suggestions`` function."""

    def reconcile(
        self,
        prior_suggestions: Sequence[FieldSuggestion],
        candidates: Mapping[str, FieldCandidate],
        instructions: Sequence[MetadataInstruction] = (),
        *,
        prior_structured: Mapping[str, str] | None = None,
        now_iso: str,
        actor_role: ActorRole = "athlete",
    ) -> tuple[FieldSuggestion, ...]:
        """Return the new per-field suggestions in canonical field order."""

        prior_by_field = _index_prior(prior_suggestions)
        instruction_by_field: dict[str, MetadataInstruction] = {}
        for instruction in instructions:
            if instruction.field in instruction_by_field:
                raise ReconciliationError(f"Multiple instructions for field '{instruction.field}'.")
            instruction_by_field[instruction.field] = instruction
        structured = {
            key: " ".join(value.split())
            for key, value in (prior_structured or {}).items()
            if key in STRUCTURED_FIELD_SET and isinstance(value, str) and value.strip()
        }

        reconciled: list[FieldSuggestion] = []
        for field_name in STRUCTURED_FIELDS:
            candidate = candidates.get(field_name)
            baseline = self._baseline(prior_by_field.get(field_name), candidate, now_iso)

            instruction = instruction_by_field.get(field_name)
            if instruction is None and field_name in structured:
                instruction = _instruction_from_structured(field_name, structured[field_name], baseline)

            if instruction is not None:
                suggestion = self._apply_instruction(
                    instruction,
                    baseline,
                    candidate,
                    now_iso=now_iso,
                    actor_role=actor_role,
                )
            else:
                suggestion = baseline
            if suggestion is not None:
                reconciled.append(suggestion)
        return tuple(reconciled)

    def _baseline(
        self,
        prior: FieldSuggestion | None,
        candidate: FieldCandidate | None,
        now_iso: str,
    ) -> FieldSuggestion | None:
        """State of a field before any caller instruction is applied."""

        if prior is None:
            return _pending_from_candidate(candidate, now_iso) if candidate is not None else None
        if prior.status in RESOLVED_STATUSES:
            return prior
        if candidate is not None and confidence_rank(candidate.confidence) > confidence_rank(prior.confidence):
            return _pending_from_candidate(candidate, now_iso)
        return prior

    def _apply_instruction(
        self,
        instruction: MetadataInstruction,
        baseline: FieldSuggestion | None,
        candidate: FieldCandidate | None,
        *,
        now_iso: str,
        actor_role: ActorRole,
    ) -> FieldSuggestion:
        field_name = instruction.field
        note = instruction.note if instruction.note is not None else (baseline.note if baseline else None)

        if isinstance(instruction, ConfirmField):
            value = instruction.value
            if value is None and baseline is not None:
                value = baseline.effective_value or baseline.value
            if value is None:
                raise ReconciliationError(f"Cannot confirm '{field_name}': no value was extracted or supplied.")
            return FieldSuggestion(
                field=field_name,
                value=value,
                confidence=baseline.confidence if baseline is not None else "high",
                status="confirmed",
                updated_at=now_iso,
                source_excerpt=baseline.source_excerpt if baseline is not None else None,
                note=note,
                updated_by_role=actor_role,
            )

        if isinstance(instruction, RejectField):
            if baseline is None:
                raise ReconciliationError(f"Cannot reject '{field_name}': there is no suggestion to reject.")
            return replace(
                baseline,
                status="rejected",
                correction_value=None,
                confirmation_prompt=None,
                updated_at=now_iso,
                note=note,
                updated_by_role=actor_role,
            )

        if isinstance(instruction, CorrectField):
            if candidate is not None:
                guess, confidence, excerpt = candidate.value, candidate.confidence, candidate.source_excerpt
            elif baseline is not None:
                guess, confidence, excerpt = baseline.value, baseline.confidence, baseline.source_excerpt
            else:
                guess, confidence, excerpt = None, "high", None
            return FieldSuggestion(
                field=field_name,
                value=guess,
                confidence=confidence,
                status="corrected",
                updated_at=now_iso,
                correction_value=instruction.correction_value,
                source_excerpt=excerpt,
                note=note,
                updated_by_role=actor_role,
            )

        raise ReconciliationError(f"Unsupported instruction type: {type(instruction).__name__}")


def _index_prior(prior_suggestions: Sequence[FieldSuggestion]) -> dict[str, FieldSuggestion]:
    indexed: dict[str, FieldSuggestion] = {}
    for suggestion in prior_suggestions:
        if suggestion.field not in STRUCTURED_FIELD_SET:
            raise ReconciliationError(f"Prior suggestion has unknown field '{suggestion.field}'.")
        if suggestion.field in indexed:
            raise ReconciliationError(f"Prior suggestions list field '{suggestion.field}' twice.")
        if suggestion.status == "corrected" and not suggestion.correction_value:
            raise ReconciliationError(f"Prior corrected suggestion for '{suggestion.field}' has no correction value.")
        if suggestion.status == "pending" and suggestion.value is None:
            raise ReconciliationError(f"Prior pending suggestion for '{suggestion.field}' has no value.")
        indexed[suggestion.field] = suggestion
    return indexed


def _pending_from_candidate(candidate: FieldCandidate, now_iso: str) -> FieldSuggestion:
    prompt = (
        confirmation_prompt(candidate.field, candidate.value)
        if needs_confirmation(candidate.confidence)
        else None
    )
    return FieldSuggestion(
        field=candidate.field,
        value=candidate.value,
        confidence=candidate.confidence,
        status="pending",
        updated_at=now_iso,
        confirmation_prompt=prompt,
        source_excerpt=candidate.source_excerpt,
    )


def _instruction_from_structured(
    field_name: str,
    value: str,
    baseline: FieldSuggestion | None,
) -> MetadataInstruction | None:
    """Treat a prior structured value as an implicit confirm or correct."""

    if baseline is None:
        return CorrectField(field=field_name, correction_value=value)
    if baseline.status in RESOLVED_STATUSES:
        asserted = baseline.value if baseline.status == "rejected" else baseline.effective_value
        if same_value(asserted, value):
            return None
    if same_value(baseline.value, value):
        return ConfirmField(field=field_name, value=value)
    return CorrectField(field=field_name, correction_value=value)
