"""SQLAlchemy metadata registry import."""

from trainlog.models import JournalEntry
from trainlog.models.base import Base

__all__ = ["Base", "JournalEntry"]
