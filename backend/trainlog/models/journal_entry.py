"""Journal entry ORM model."""

from datetime import datetime, timezone

from sqlalchemy import JSON, DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from trainlog.models.base import Base, CreatedAtMixin, IdMixin


class JournalEntry(Base, IdMixin, CreatedAtMixin):
    """Committed training journal entry."""

    __tablename__ = "journal_entries"

    entry_id: Mapped[str] = mapped_column(String(64), unique=True, index=True, nullable=False)
    athlete_id: Mapped[str] = mapped_column(String(255), index=True, nullable=False)
    status: Mapped[str] = mapped_column(String(16), default="committed", nullable=False)
    session_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), index=True, nullable=False)
    class_name: Mapped[str] = mapped_column(String(255), nullable=False)
    gym: Mapped[str] = mapped_column(String(255), nullable=False)
    partners_json: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    rounds: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    quick_add_notes: Mapped[str] = mapped_column(Text, default="", nullable=False)
    shared_section: Mapped[str] = mapped_column(Text, default="", nullable=False)
    private_section: Mapped[str] = mapped_column(Text, default="", nullable=False)
    raw_technique_mentions_json: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    tags_json: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    session_metrics_json: Mapped[dict[str, object]] = mapped_column(JSON, default=dict, nullable=False)
    structured_json: Mapped[dict[str, str]] = mapped_column(JSON, default=dict, nullable=False)
    suggestions_json: Mapped[list[dict[str, object]]] = mapped_column(JSON, default=list, nullable=False)
    concepts_json: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    failures_json: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    conditioning_issues_json: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    requires_coach_review: Mapped[bool] = mapped_column(default=False, nullable=False)
    content_hash: Mapped[str | None] = mapped_column(String(64), index=True, nullable=True)
    import_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    import_source_type: Mapped[str | None] = mapped_column(String(32), nullable=True)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
