"""Journal entry write services: import commit and metadata review."""

from __future__ import annotations

import logging
from dataclasses import asdict
from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import select
from sqlalchemy.orm import Session

from trainlog.config import Settings
from trainlog.errors import EntryNotFoundError, InvalidInputError
from trainlog.extraction.types import ExtractionResult, JournalInput
from trainlog.legacy_import.content import collapse
from trainlog.legacy_import.types import EntrySections, LegacyImportPreview, QuickAdd, SessionMetrics
from trainlog.models.journal_entry import JournalEntry
from trainlog.schemas.legacy_import import LegacyImportCommitRequest, LegacyImportCorrections
from trainlog.schemas.structured_metadata import MetadataReviewRequest
from trainlog.services.legacy_import import preview_legacy_import
from trainlog.services.structured_extraction import run_structured_extraction
from trainlog.storage.interface import EntryKey
from trainlog.storage.sql_store import SqlEntryStore, suggestion_to_json
from trainlog.timestamps import isoformat_utc, parse_timestamp

logger = logging.getLogger(__name__)

ENTRY_TAGS = frozenset({"guard-type", "top", "bottom", "submission", "sweep", "pass", "escape", "takedown"})
DUPLICATE_RESOLUTIONS = ("allow",)
CONFLICT_RESOLUTIONS = ("commit", "save-as-draft")


def _apply_extraction(entry: JournalEntry, result: ExtractionResult) -> None:
    entry.structured_json = dict(result.structured)
    entry.suggestions_json = [suggestion_to_json(suggestion) for suggestion in result.suggestions]
    entry.concepts_json = list(result.concepts)
    entry.failures_json = list(result.failures)
    entry.conditioning_issues_json = list(result.conditioning_issues)


def _merge_quick_add(base: QuickAdd, corrections: LegacyImportCorrections | None) -> QuickAdd:
    override = corrections.quick_add if corrections else None
    if override is None:
        return base
    time = base.time
    if override.time and override.time.strip():
        time = isoformat_utc(parse_timestamp(override.time))
    partners = base.partners
    if override.partners is not None:
        partners = tuple(item.strip() for item in override.partners if item.strip())
    return QuickAdd(
        time=time,
        class_name=collapse(override.class_name) if override.class_name else base.class_name,
        gym=collapse(override.gym) if override.gym else base.gym,
        partners=partners,
        rounds=override.rounds if override.rounds is not None else base.rounds,
        notes=collapse(override.notes) if override.notes else base.notes,
    )


def _merge_sections(base: EntrySections, corrections: LegacyImportCorrections | None) -> EntrySections:
    override = corrections.sections if corrections else None
    if override is None:
        return base
    return EntrySections(
        shared=collapse(override.shared) if override.shared is not None else base.shared,
        private=collapse(override.private) if override.private is not None else base.private,
    )


def _merge_metrics(
    base: SessionMetrics,
    tags: tuple[str, ...],
    corrections: LegacyImportCorrections | None,
) -> SessionMetrics:
    override = corrections.session_metrics if corrections else None
    if override is None:
        return SessionMetrics(
            duration_minutes=base.duration_minutes,
            intensity=base.intensity,
            rounds=base.rounds,
            gi_or_no_gi=base.gi_or_no_gi,
            tags=tags,
        )
    return SessionMetrics(
        duration_minutes=override.duration_minutes or base.duration_minutes,
        intensity=override.intensity or base.intensity,
        rounds=override.rounds if override.rounds is not None else base.rounds,
        gi_or_no_gi=override.gi_or_no_gi or base.gi_or_no_gi,
        tags=tags,
    )


def _sanitize_tags(tags: list[str]) -> tuple[str, ...]:
    return tuple(dict.fromkeys(tag.strip() for tag in tags if tag.strip() in ENTRY_TAGS))


def _sanitize_mentions(mentions: list[str]) -> tuple[str, ...]:
    cleaned = (collapse(mention) for mention in mentions)
    return tuple(dict.fromkeys(mention for mention in cleaned if mention))


def commit_legacy_import(
    db: Session,
    athlete_id: str,
    payload: LegacyImportCommitRequest,
    *,
    now: datetime | None = None,
    settings: Settings | None = None,
) -> tuple[JournalEntry, LegacyImportPreview]:
    """Rebuild the preview, enforce the athlete's resolutions, and persist the entry."""

    if payload.duplicate_resolution is not None and payload.duplicate_resolution not in DUPLICATE_RESOLUTIONS:
        raise InvalidInputError("duplicate_resolution must be allow when provided.")
    if payload.conflict_resolution is not None and payload.conflict_resolution not in CONFLICT_RESOLUTIONS:
        raise InvalidInputError("conflict_resolution must be commit or save-as-draft when provided.")

    moment = now or datetime.now(timezone.utc)
    preview = preview_legacy_import(
        db,
        athlete_id,
        payload.to_request(),
        import_id=payload.import_id,
        now=moment,
        settings=settings,
    )
    if preview.dedup_status == "duplicate" and payload.duplicate_resolution != "allow":
        raise InvalidInputError("Potential duplicate detected. Set duplicate_resolution to allow or skip this import.")
    if preview.conflict_status == "conflict" and payload.conflict_resolution not in CONFLICT_RESOLUTIONS:
        raise InvalidInputError("conflict_resolution must be commit or save-as-draft for conflicting imports.")

    corrections = payload.corrections
    draft = preview.draft_entry
    quick_add = _merge_quick_add(draft.quick_add, corrections)
    sections = _merge_sections(draft.sections, corrections)
    tags = _sanitize_tags(corrections.tags) if corrections and corrections.tags is not None else draft.tags
    metrics = _merge_metrics(draft.session_metrics, tags, corrections)
    mentions = draft.raw_technique_mentions
    if corrections and corrections.raw_technique_mentions:
        mentions = _sanitize_mentions(corrections.raw_technique_mentions)

    result = run_structured_extraction(
        JournalInput(
            quick_add_notes=quick_add.notes,
            shared_section=sections.shared,
            private_section=sections.private,
            raw_technique_mentions=mentions,
            prior_structured=corrections.structured if corrections else {},
            instructions=tuple(item.to_instruction() for item in corrections.instructions) if corrections else (),
        ),
        prior_suggestions=draft.extraction.suggestions,
        now=moment,
    )

    requires_review = preview.requires_coach_review
    if corrections and corrections.requires_coach_review is not None:
        requires_review = corrections.requires_coach_review

    entry = JournalEntry(
        entry_id=str(uuid4()),
        athlete_id=athlete_id,
        status="draft" if payload.conflict_resolution == "save-as-draft" else "committed",
        session_time=parse_timestamp(quick_add.time),
        class_name=quick_add.class_name,
        gym=quick_add.gym,
        partners_json=list(quick_add.partners),
        rounds=quick_add.rounds,
        quick_add_notes=quick_add.notes,
        shared_section=sections.shared,
        private_section=sections.private,
        raw_technique_mentions_json=list(mentions),
        tags_json=list(tags),
        session_metrics_json={**asdict(metrics), "tags": list(metrics.tags)},
        requires_coach_review=requires_review,
        content_hash=preview.source.content_hash,
        import_id=preview.import_id,
        import_source_type=preview.source.source_type,
    )
    _apply_extraction(entry, result)
    db.add(entry)
    db.commit()
    db.refresh(entry)
    logger.info(
        "legacy_import.commit athlete_id=%s entry_id=%s import_id=%s status=%s dedup_status=%s conflict_status=%s",
        athlete_id,
        entry.entry_id,
        preview.import_id,
        entry.status,
        preview.dedup_status,
        preview.conflict_status,
    )
    return entry, preview


def review_entry_metadata(
    db: Session,
    athlete_id: str,
    entry_id: str,
    payload: MetadataReviewRequest,
    *,
    now: datetime | None = None,
) -> tuple[JournalEntry, ExtractionResult]:
    """Re-run extraction on a stored entry with the caller's confirmations and corrections."""

    stored = SqlEntryStore(db).get_item(EntryKey(athlete_id=athlete_id, entry_id=entry_id))
    if stored is None:
        raise EntryNotFoundError(f"Entry '{entry_id}' not found for athlete '{athlete_id}'.")

    result = run_structured_extraction(
        JournalInput(
            quick_add_notes=stored.quick_add_notes,
            shared_section=stored.shared_section,
            private_section=stored.private_section,
            raw_technique_mentions=stored.raw_technique_mentions,
            prior_structured=payload.structured or {},
            instructions=tuple(item.to_instruction() for item in payload.instructions),
        ),
        prior_suggestions=stored.suggestions,
        reevaluate_fields=payload.reevaluate_fields,
        now=now,
        actor_role=payload.actor_role,
    )

    entry = db.scalar(
        select(JournalEntry).where(JournalEntry.athlete_id == athlete_id, JournalEntry.entry_id == entry_id)
    )
    if entry is None:
        raise EntryNotFoundError(f"Entry '{entry_id}' not found for athlete '{athlete_id}'.")
    _apply_extraction(entry, result)
    db.commit()
    db.refresh(entry)
    logger.info(
        "structured_metadata.review athlete_id=%s entry_id=%s actor_role=%s instructions=%d flags=%d",
        athlete_id,
        entry_id,
        payload.actor_role,
        len(payload.instructions),
        len(result.confidence_flags),
    )
    return entry, result
