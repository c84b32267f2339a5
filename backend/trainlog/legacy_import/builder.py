"""Legacy Import Builder: draft entry, content hash, duplicate and conflict verdicts.

The builder only reads from the entry store, once per preview. Committing the
draft is a separate action handled by the journal entry service.
"""

from __future__ import annotations

from datetime import datetime, timezone

from trainlog.errors import InvalidInputError
from trainlog.extraction.types import JournalInput
from trainlog.legacy_import.content import split_legacy_content
from trainlog.legacy_import.dedup import ConflictPolicy, content_hash, find_conflicts, find_duplicates
from trainlog.legacy_import.types import (
    SUPPORTED_SOURCE_TYPES,
    DraftEntry,
    ImportSource,
    LegacyImportPreview,
    LegacyImportRequest,
)
from trainlog.services.structured_extraction import run_structured_extraction
from trainlog.storage.interface import EntryQuery, EntryStore
from trainlog.timestamps import isoformat_utc, parse_timestamp


def _validate_request(athlete_id: str, request: LegacyImportRequest) -> None:
    if not isinstance(athlete_id, str) or not athlete_id.strip():
        raise InvalidInputError("athlete_id is required.")
    if request.source_type not in SUPPORTED_SOURCE_TYPES:
        raise InvalidInputError(f"source_type must be one of: {', '.join(SUPPORTED_SOURCE_TYPES)}.")
    if not isinstance(request.raw_content, str) or not request.raw_content.strip():
        raise InvalidInputError("raw_content is required.")


def build_legacy_import_preview(
    store: EntryStore,
    athlete_id: str,
    request: LegacyImportRequest,
    *,
    import_id: str,
    now: datetime | None = None,
    conflict_policy: ConflictPolicy | None = None,
    recent_entry_limit: int | None = None,
    quick_add_max_chars: int = 600,
    section_max_chars: int = 1600,
) -> LegacyImportPreview:
    """Build a preview of an import without writing anything."""

    _validate_request(athlete_id, request)
    moment = now or datetime.now(timezone.utc)
    captured_at = parse_timestamp(request.captured_at) if request.captured_at else None
    source_title = request.source_title.strip() if request.source_title and request.source_title.strip() else None

    content = split_legacy_content(
        request.source_type,
        request.raw_content,
        now=moment,
        captured_at=captured_at,
        source_title=source_title,
        quick_add_max_chars=quick_add_max_chars,
        section_max_chars=section_max_chars,
    )
    extraction = run_structured_extraction(
        JournalInput(
            quick_add_notes=content.quick_add.notes,
            shared_section=content.sections.shared,
            private_section=content.sections.private,
            raw_technique_mentions=content.raw_technique_mentions,
        ),
        now=moment,
    )
    source_hash = content_hash(request.raw_content.strip())

    existing = store.query_items(EntryQuery(athlete_id=athlete_id, limit=recent_entry_limit))

    session_time = parse_timestamp(content.quick_add.time)
    duplicates = find_duplicates(
        existing,
        source_hash=source_hash,
        draft_notes=content.quick_add.notes,
        session_time=session_time,
    )
    warnings = list(content.warnings)
    conflicting: tuple[str, ...] = ()
    if duplicates.status == "new":
        if content.session_time_explicit:
            conflicting = find_conflicts(
                existing,
                draft_structured=extraction.structured,
                session_time=session_time,
                policy=conflict_policy or ConflictPolicy(),
            )
        else:
            warnings.append("Conflict check skipped: the note has no session date.")

    return LegacyImportPreview(
        import_id=import_id,
        mode="heuristic",
        draft_entry=DraftEntry(
            quick_add=content.quick_add,
            sections=content.sections,
            session_metrics=content.session_metrics,
            tags=content.tags,
            raw_technique_mentions=content.raw_technique_mentions,
            structured=extraction.structured,
            extraction=extraction,
        ),
        dedup_status=duplicates.status,
        duplicate_entry_ids=duplicates.entry_ids,
        dedup_reason=duplicates.reason,
        conflict_status="conflict" if conflicting else "none",
        conflicting_entry_ids=conflicting,
        requires_coach_review=bool(conflicting),
        source=ImportSource(
            source_type=request.source_type,
            captured_at=isoformat_utc(captured_at or moment),
            content_hash=source_hash,
            source_title=source_title,
        ),
        warnings=tuple(warnings),
    )
