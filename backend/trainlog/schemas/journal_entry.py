"""Journal entry response schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from trainlog.schemas.structured_metadata import ExtractionResultRead


class JournalEntryRead(BaseModel):
    """Serialized journal entry."""

    model_config = ConfigDict(from_attributes=True)

    entry_id: str
    athlete_id: str
    status: str
    session_time: datetime
    class_name: str
    gym: str
    partners_json: list[str]
    rounds: int
    quick_add_notes: str
    shared_section: str
    private_section: str
    raw_technique_mentions_json: list[str]
    tags_json: list[str]
    session_metrics_json: dict[str, object]
    structured_json: dict[str, str]
    suggestions_json: list[dict[str, object]]
    concepts_json: list[str]
    failures_json: list[str]
    conditioning_issues_json: list[str]
    requires_coach_review: bool
    content_hash: str | None
    import_id: str | None
    import_source_type: str | None
    created_at: datetime
    updated_at: datetime


class MetadataReviewResult(BaseModel):
    entry: JournalEntryRead
    extraction: ExtractionResultRead
