"""Print a legacy import preview for a local note file.

Usage (from repository root):
    python backend/scripts/preview_legacy_import.py notes/2024-03-02.md

Usage (from backend/):
    python scripts/preview_legacy_import.py notes.txt --source-type plain-text
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

BACKEND_DIR = Path(__file__).resolve().parents[1]
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

from trainlog.db.base import Base
from trainlog.db.session import SessionLocal, engine
from trainlog.legacy_import.types import SUPPORTED_SOURCE_TYPES, LegacyImportRequest
from trainlog.schemas.legacy_import import LegacyImportPreviewRead
from trainlog.services.legacy_import import preview_legacy_import


def _guess_source_type(path: Path) -> str:
    suffix = path.suffix.lower()
    if suffix in {".html", ".htm"}:
        return "google-doc"
    if suffix in {".md", ".markdown"}:
        return "markdown"
    return "plain-text"


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Preview a legacy journal note import.")
    parser.add_argument("path", type=Path, help="Note file to preview.")
    parser.add_argument("--athlete-id", default="athlete-demo-001")
    parser.add_argument("--source-type", choices=SUPPORTED_SOURCE_TYPES, default=None)
    parser.add_argument("--captured-at", default=None, help="ISO-8601 capture timestamp.")
    parser.add_argument("--title", default=None, help="Source title used as the class name fallback.")
    return parser.parse_args()


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    args = parse_args()
    raw_content = args.path.read_text(encoding="utf-8")
    request = LegacyImportRequest(
        source_type=args.source_type or _guess_source_type(args.path),
        raw_content=raw_content,
        captured_at=args.captured_at,
        source_title=args.title or args.path.stem,
    )

    Base.metadata.create_all(bind=engine)
    with SessionLocal() as db:
        preview = preview_legacy_import(db, args.athlete_id, request)

    print(LegacyImportPreviewRead.model_validate(preview).model_dump_json(indent=2))


if __name__ == "__main__":
    main()
