"""Legacy import preview and commit schemas."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from trainlog.legacy_import.types import LegacyImportRequest
from trainlog.schemas.journal_entry import JournalEntryRead
from trainlog.schemas.structured_metadata import ExtractionResultRead, InstructionIn


class LegacyImportPreviewRequest(BaseModel):
    """Raw legacy note to preview."""

    source_type: str = Field(..., min_length=1)
    raw_content: str
    captured_at: str | None = None
    source_title: str | None = None

    def to_request(self) -> LegacyImportRequest:
        return LegacyImportRequest(
            source_type=self.source_type,
            raw_content=self.raw_content,
            captured_at=self.captured_at,
            source_title=self.source_title,
        )


class QuickAddRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    time: str
    class_name: str
    gym: str
    partners: list[str]
    rounds: int
    notes: str


class EntrySectionsRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    shared: str
    private: str


class SessionMetricsRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    duration_minutes: int
    intensity: int
    rounds: int
    gi_or_no_gi: Literal["gi", "no-gi"]
    tags: list[str]


class DraftEntryRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    quick_add: QuickAddRead
    sections: EntrySectionsRead
    session_metrics: SessionMetricsRead
    tags: list[str]
    raw_technique_mentions: list[str]
    structured: dict[str, str]
    extraction: ExtractionResultRead


class ImportSourceRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    source_type: str
    captured_at: str
    content_hash: str
    source_title: str | None = None


class LegacyImportPreviewRead(BaseModel):
    """Serialized import preview."""

    model_config = ConfigDict(from_attributes=True)

    import_id: str
    mode: Literal["heuristic"]
    draft_entry: DraftEntryRead
    dedup_status: Literal["new", "duplicate"]
    dedup_reason: Literal["source_hash", "same_day_notes"] | None = None
    duplicate_entry_ids: list[str]
    conflict_status: Literal["none", "conflict"]
    conflicting_entry_ids: list[str]
    requires_coach_review: bool
    source: ImportSourceRead
    warnings: list[str]


class QuickAddCorrections(BaseModel):
    time: str | None = None
    class_name: str | None = Field(default=None, min_length=1)
    gym: str | None = Field(default=None, min_length=1)
    partners: list[str] | None = None
    rounds: int | None = Field(default=None, ge=0)
    notes: str | None = Field(default=None, min_length=1)


class SectionCorrections(BaseModel):
    shared: str | None = None
    private: str | None = None


class SessionMetricCorrections(BaseModel):
    duration_minutes: int | None = Field(default=None, ge=1)
    intensity: int | None = Field(default=None, ge=1, le=10)
    rounds: int | None = Field(default=None, ge=0)
    gi_or_no_gi: Literal["gi", "no-gi"] | None = None


class LegacyImportCorrections(BaseModel):
    """Athlete edits applied to the draft before it is committed."""

    quick_add: QuickAddCorrections | None = None
    sections: SectionCorrections | None = None
    session_metrics: SessionMetricCorrections | None = None
    tags: list[str] | None = None
    raw_technique_mentions: list[str] | None = None
    structured: dict[str, str] = Field(default_factory=dict)
    instructions: list[InstructionIn] = Field(default_factory=list)
    requires_coach_review: bool | None = None


class LegacyImportCommitRequest(BaseModel):
    """Commit a previewed import; the preview is rebuilt from the same raw note."""

    import_id: str = Field(..., min_length=1)
    source_type: str = Field(..., min_length=1)
    raw_content: str
    captured_at: str | None = None
    source_title: str | None = None
    duplicate_resolution: str | None = None
    conflict_resolution: str | None = None
    corrections: LegacyImportCorrections | None = None

    def to_request(self) -> LegacyImportRequest:
        return LegacyImportRequest(
            source_type=self.source_type,
            raw_content=self.raw_content,
            captured_at=self.captured_at,
            source_title=self.source_title,
        )


class LegacyImportCommitResult(BaseModel):
    entry: JournalEntryRead
    dedup_status: Literal["new", "duplicate"]
    conflict_status: Literal["none", "conflict"]
