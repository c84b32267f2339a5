"""ORM models package exports."""

from trainlog.models.journal_entry import JournalEntry

__all__ = ["JournalEntry"]
