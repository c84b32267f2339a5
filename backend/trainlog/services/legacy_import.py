"""Legacy import preview service."""

from __future__ import annotations

import logging
from datetime import datetime
from time import perf_counter
from uuid import uuid4

from sqlalchemy.orm import Session

from trainlog.config import Settings, get_settings
from trainlog.legacy_import.builder import build_legacy_import_preview
from trainlog.legacy_import.dedup import ConflictPolicy
from trainlog.legacy_import.types import LegacyImportPreview, LegacyImportRequest
from trainlog.storage.sql_store import SqlEntryStore

logger = logging.getLogger(__name__)


def conflict_policy_from_settings(settings: Settings) -> ConflictPolicy:
    return ConflictPolicy(
        window_hours=settings.conflict_window_hours,
        min_disagreeing_fields=settings.conflict_min_disagreeing_fields,
        fields=tuple(settings.conflict_fields),
    )


def preview_legacy_import(
    db: Session,
    athlete_id: str,
    request: LegacyImportRequest,
    *,
    import_id: str | None = None,
    now: datetime | None = None,
    settings: Settings | None = None,
) -> LegacyImportPreview:
    """Build an import preview against the athlete's stored entries."""

    started = perf_counter()
    settings = settings or get_settings()
    preview = build_legacy_import_preview(
        SqlEntryStore(db),
        athlete_id,
        request,
        import_id=import_id or str(uuid4()),
        now=now,
        conflict_policy=conflict_policy_from_settings(settings),
        recent_entry_limit=settings.import_recent_entry_limit,
        quick_add_max_chars=settings.import_quick_add_max_chars,
        section_max_chars=settings.import_section_max_chars,
    )
    logger.info(
        (
            "legacy_import.preview athlete_id=%s import_id=%s source_type=%s dedup_status=%s "
            "conflict_status=%s duplicates=%d conflicts=%d warnings=%d elapsed_ms=%.2f"
        ),
        athlete_id,
        preview.import_id,
        request.source_type,
        preview.dedup_status,
        preview.conflict_status,
        len(preview.duplicate_entry_ids),
        len(preview.conflicting_entry_ids),
        len(preview.warnings),
        (perf_counter() - started) * 1000.0,
    )
    return preview
