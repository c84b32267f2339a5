"""journal entries

Revision ID: 20261019_0001
Revises:
Create Date: 2026-10-19 00:00:01
"""

from collections.abc import Sequence

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "20261019_0001"
down_revision: str | None = None
branch_labels: Sequence[str] | None = None
depends_on: Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "journal_entries",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("entry_id", sa.String(length=64), nullable=False),
        sa.Column("athlete_id", sa.String(length=255), nullable=False),
        sa.Column("status", sa.String(length=16), nullable=False),
        sa.Column("session_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("class_name", sa.String(length=255), nullable=False),
        sa.Column("gym", sa.String(length=255), nullable=False),
        sa.Column("partners_json", sa.JSON(), nullable=False),
        sa.Column("rounds", sa.Integer(), nullable=False),
        sa.Column("quick_add_notes", sa.Text(), nullable=False),
        sa.Column("shared_section", sa.Text(), nullable=False),
        sa.Column("private_section", sa.Text(), nullable=False),
        sa.Column("raw_technique_mentions_json", sa.JSON(), nullable=False),
        sa.Column("tags_json", sa.JSON(), nullable=False),
        sa.Column("session_metrics_json", sa.JSON(), nullable=False),
        sa.Column("structured_json", sa.JSON(), nullable=False),
        sa.Column("suggestions_json", sa.JSON(), nullable=False),
        sa.Column("concepts_json", sa.JSON(), nullable=False),
        sa.Column("failures_json", sa.JSON(), nullable=False),
        sa.Column("conditioning_issues_json", sa.JSON(), nullable=False),
        sa.Column("requires_coach_review", sa.Boolean(), nullable=False),
        sa.Column("content_hash", sa.String(length=64), nullable=True),
        sa.Column("import_id", sa.String(length=64), nullable=True),
        sa.Column("import_source_type", sa.String(length=32), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_journal_entries_entry_id", "journal_entries", ["entry_id"], unique=True)
    op.create_index("ix_journal_entries_athlete_id", "journal_entries", ["athlete_id"], unique=False)
    op.create_index("ix_journal_entries_session_time", "journal_entries", ["session_time"], unique=False)
    op.create_index("ix_journal_entries_content_hash", "journal_entries", ["content_hash"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_journal_entries_content_hash", table_name="journal_entries")
    op.drop_index("ix_journal_entries_session_time", table_name="journal_entries")
    op.drop_index("ix_journal_entries_athlete_id", table_name="journal_entries")
    op.drop_index("ix_journal_entries_entry_id", table_name="journal_entries")
    op.drop_table("journal_entries")
