"""Legacy note import: content splitting, dedup and conflict detection."""

from trainlog.legacy_import.builder import build_legacy_import_preview
from trainlog.legacy_import.dedup import ConflictPolicy, content_hash

__all__ = ["ConflictPolicy", "build_legacy_import_preview", "content_hash"]
