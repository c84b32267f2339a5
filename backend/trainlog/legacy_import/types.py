"""Typed legacy import requests and previews."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Literal

from trainlog.extraction.types import ExtractionResult

LegacyImportSourceType = Literal["markdown", "plain-text", "google-doc"]
SUPPORTED_SOURCE_TYPES: tuple[str, ...] = ("markdown", "plain-text", "google-doc")

ImportMode = Literal["heuristic"]
DedupStatus = Literal["new", "duplicate"]
DedupReason = Literal["source_hash", "same_day_notes"]
ConflictStatus = Literal["none", "conflict"]
GiOrNoGi = Literal["gi", "no-gi"]


@dataclass(frozen=True, slots=True)
class LegacyImportRequest:
    """Raw legacy note submitted for preview."""

    source_type: str
    raw_content: str
    captured_at: str | None = None
    source_title: str | None = None


@dataclass(frozen=True, slots=True)
class QuickAdd:
    time: str
    class_name: str
    gym: str
    partners: tuple[str, ...]
    rounds: int
    notes: str


@dataclass(frozen=True, slots=True)
class EntrySections:
    shared: str
    private: str


@dataclass(frozen=True, slots=True)
class SessionMetrics:
    duration_minutes: int
    intensity: int
    rounds: int
    gi_or_no_gi: GiOrNoGi
    tags: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class LegacyContent:
    """Journal pieces recovered from a legacy note before extraction."""

    quick_add: QuickAdd
    sections: EntrySections
    session_metrics: SessionMetrics
    tags: tuple[str, ...]
    raw_technique_mentions: tuple[str, ...]
    session_time_explicit: bool
    warnings: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class DraftEntry:
    """Entry the athlete would commit if they accept the preview."""

    quick_add: QuickAdd
    sections: EntrySections
    session_metrics: SessionMetrics
    tags: tuple[str, ...]
    raw_technique_mentions: tuple[str, ...]
    structured: Mapping[str, str]
    extraction: ExtractionResult


@dataclass(frozen=True, slots=True)
class ImportSource:
    source_type: str
    captured_at: str
    content_hash: str
    source_title: str | None = None


@dataclass(frozen=True, slots=True)
class LegacyImportPreview:
    """Result offered to the athlete before committing an import."""

    import_id: str
    mode: ImportMode
    draft_entry: DraftEntry
    dedup_status: DedupStatus
    duplicate_entry_ids: tuple[str, ...]
    conflict_status: ConflictStatus
    requires_coach_review: bool
    source: ImportSource
    dedup_reason: DedupReason | None = None
    conflicting_entry_ids: tuple[str, ...] = ()
    warnings: tuple[str, ...] = field(default_factory=tuple)
