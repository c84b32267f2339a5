"""Storage collaborator contract used by the import builder and review services."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Protocol

from trainlog.extraction.types import FieldSuggestion


@dataclass(frozen=True, slots=True)
class EntryKey:
    athlete_id: str
    entry_id: str


@dataclass(frozen=True, slots=True)
class EntryQuery:
    """Entries for one athlete, newest session first unless stated otherwise."""

    athlete_id: str
    limit: int | None = None
    newest_first: bool = True


@dataclass(frozen=True, slots=True)
class StoredEntry:
    """Read-only view of a persisted journal entry."""

    entry_id: str
    athlete_id: str
    session_time: datetime
    quick_add_notes: str
    shared_section: str = ""
    private_section: str = ""
    raw_technique_mentions: tuple[str, ...] = ()
    structured: Mapping[str, str] = field(default_factory=dict)
    suggestions: tuple[FieldSuggestion, ...] = ()
    content_hash: str | None = None
    class_name: str | None = None


class EntryStore(Protocol):
    """Read access to an athlete's journal entries."""

    def get_item(self, key: EntryKey) -> StoredEntry | None:
        """Return one entry or None when absent."""

    def query_items(self, query: EntryQuery) -> list[StoredEntry]:
        """Return entries matching the query in the requested order."""
