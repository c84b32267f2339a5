"""SQLAlchemy-backed read access to journal entries."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import asdict
from datetime import timezone
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from trainlog.extraction.types import FieldSuggestion
from trainlog.models.journal_entry import JournalEntry
from trainlog.storage.interface import EntryKey, EntryQuery, StoredEntry

_SUGGESTION_KEYS = frozenset(FieldSuggestion.__dataclass_fields__)
_REQUIRED_SUGGESTION_KEYS = frozenset({"field", "value", "confidence", "status", "updated_at"})


def suggestion_to_json(suggestion: FieldSuggestion) -> dict[str, Any]:
    return {
        key: value
        for key, value in asdict(suggestion).items()
        if value is not None or key in _REQUIRED_SUGGESTION_KEYS
    }


def suggestion_from_json(payload: Mapping[str, Any]) -> FieldSuggestion:
    return FieldSuggestion(**{key: value for key, value in payload.items() if key in _SUGGESTION_KEYS})


def stored_entry_from_row(row: JournalEntry) -> StoredEntry:
    """Convert an ORM row into the read-only entry view."""

    session_time = row.session_time
    if session_time.tzinfo is None:
        session_time = session_time.replace(tzinfo=timezone.utc)
    return StoredEntry(
        entry_id=row.entry_id,
        athlete_id=row.athlete_id,
        session_time=session_time,
        quick_add_notes=row.quick_add_notes or "",
        shared_section=row.shared_section or "",
        private_section=row.private_section or "",
        raw_technique_mentions=tuple(row.raw_technique_mentions_json or ()),
        structured=dict(row.structured_json or {}),
        suggestions=tuple(suggestion_from_json(item) for item in row.suggestions_json or ()),
        content_hash=row.content_hash,
        class_name=row.class_name,
    )


class SqlEntryStore:
    """Read-only entry store over a SQLAlchemy session."""

    def __init__(self, db: Session) -> None:
        self._db = db

    def get_item(self, key: EntryKey) -> StoredEntry | None:
        row = self._db.scalar(
            select(JournalEntry).where(
                JournalEntry.athlete_id == key.athlete_id,
                JournalEntry.entry_id == key.entry_id,
            )
        )
        return stored_entry_from_row(row) if row is not None else None

    def query_items(self, query: EntryQuery) -> list[StoredEntry]:
        order = JournalEntry.session_time.desc() if query.newest_first else JournalEntry.session_time.asc()
        stmt = (
            select(JournalEntry)
            .where(JournalEntry.athlete_id == query.athlete_id)
            .order_by(order, JournalEntry.id.desc())
        )
        if query.limit is not None:
            stmt = stmt.limit(query.limit)
        return [stored_entry_from_row(row) for row in self._db.scalars(stmt).all()]
