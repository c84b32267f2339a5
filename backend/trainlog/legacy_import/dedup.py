"""Content hashing plus duplicate and conflict classification for imports."""

from __future__ import annotations

import hashlib
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta

from trainlog.legacy_import.types import DedupReason, DedupStatus
from trainlog.reconciliation import same_value
from trainlog.storage.interface import StoredEntry

NOTES_PREFIX_CHARS = 80


def normalize_for_hash(value: str) -> str:
    return " ".join(value.lower().split())


def content_hash(raw_content: str) -> str:
    """Stable sha256 hex digest of whitespace- and case-normalized content."""

    return hashlib.sha256(normalize_for_hash(raw_content).encode("utf-8")).hexdigest()


@dataclass(frozen=True, slots=True)
class DuplicateCheck:
    status: DedupStatus
    entry_ids: tuple[str, ...] = ()
    reason: DedupReason | None = None


@dataclass(frozen=True, slots=True)
class ConflictPolicy:
    """When a draft counts as disagreeing with an existing entry."""

    window_hours: int = 24
    min_disagreeing_fields: int = 2
    fields: tuple[str, ...] = ("position", "technique", "outcome")


def _notes_overlap(draft_notes: str, entry_notes: str) -> bool:
    if not draft_notes or not entry_notes:
        return False
    return draft_notes[:NOTES_PREFIX_CHARS] in entry_notes or entry_notes[:NOTES_PREFIX_CHARS] in draft_notes


def find_duplicates(
    existing: Sequence[StoredEntry],
    *,
    source_hash: str,
    draft_notes: str,
    session_time: datetime,
) -> DuplicateCheck:
    """Exact content-hash matches win; otherwise same-day entries with overlapping notes."""

    same_source = tuple(entry.entry_id for entry in existing if entry.content_hash == source_hash)
    if same_source:
        return DuplicateCheck(status="duplicate", entry_ids=same_source, reason="source_hash")

    normalized_notes = normalize_for_hash(draft_notes)
    same_day = tuple(
        entry.entry_id
        for entry in existing
        if entry.session_time.date() == session_time.date()
        and _notes_overlap(normalized_notes, normalize_for_hash(entry.quick_add_notes))
    )
    if same_day:
        return DuplicateCheck(status="duplicate", entry_ids=same_day, reason="same_day_notes")
    return DuplicateCheck(status="new")


def count_disagreements(
    draft_structured: Mapping[str, str],
    entry_structured: Mapping[str, str],
    fields: Sequence[str],
) -> int:
    """Fields both sides assert with different values."""

    disagreeing = 0
    for field_name in fields:
        left = draft_structured.get(field_name)
        right = entry_structured.get(field_name)
        if left and right and not same_value(left, right):
            disagreeing += 1
    return disagreeing


def find_conflicts(
    existing: Sequence[StoredEntry],
    *,
    draft_structured: Mapping[str, str],
    session_time: datetime,
    policy: ConflictPolicy,
) -> tuple[str, ...]:
    """Entries within the session window whose structured fields disagree with the draft."""

    window = timedelta(hours=policy.window_hours)
    return tuple(
        entry.entry_id
        for entry in existing
        if abs(entry.session_time - session_time) <= window
        and count_disagreements(draft_structured, entry.structured, policy.fields) >= policy.min_disagreeing_fields
    )
