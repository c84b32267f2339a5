"""Entry storage collaborators."""

from trainlog.storage.interface import EntryKey, EntryQuery, EntryStore, StoredEntry
from trainlog.storage.sql_store import SqlEntryStore

__all__ = ["EntryKey", "EntryQuery", "EntryStore", "SqlEntryStore", "StoredEntry"]
