"""Seed a demo athlete journal by committing a few legacy notes.

Usage (from repository root):
    python backend/scripts/seed_demo.py

Usage (from backend directory):
    python scripts/seed_demo.py
    # or
    python -m scripts.seed_demo
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from sqlalchemy import delete

# Make `trainlog` imports work whether the script is run from repo root or backend/.
BACKEND_DIR = Path(__file__).resolve().parents[1]
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

from trainlog.db.base import Base
from trainlog.db.session import SessionLocal, engine
from trainlog.models.journal_entry import JournalEntry
from trainlog.schemas.legacy_import import LegacyImportCommitRequest
from trainlog.services.journal_entries import commit_legacy_import


DEFAULT_ATHLETE_ID = "athlete-demo-001"


def build_demo_notes() -> list[LegacyImportCommitRequest]:
    """Return three deterministic legacy notes from one training week."""

    notes = [
        (
            "markdown",
            "---\ndate: 2026-02-24T18:30:00Z\nclass: Fundamentals\ngym: North Mat Club\npartners: Sam, Ana\n---\n"
            "# Summary\nWorked half guard bottom for 5 rounds. Hit a knee shield sweep once.\n"
            "# Techniques\n- knee shield sweep\n- hip escape\n"
            "# Private\nGot gassed in the last round and kept getting flattened.\n",
        ),
        (
            "plain-text",
            "Summary: Mount top rounds, could not finish the armbar.\n"
            "Cue: elbows tight and pummel first.\n"
            "Private: grip fatigue again, forearm pump by round 4.\n",
        ),
        (
            "google-doc",
            "<h1>Open mat</h1><p>No gi open mat, 60 minutes, light drill then flow roll.</p>"
            "<h2>Techniques</h2><ul><li>single leg</li><li>guillotine</li></ul>",
        ),
    ]
    captured = ("2026-02-24T20:00:00Z", "2026-02-26T20:00:00Z", "2026-02-28T20:00:00Z")
    return [
        LegacyImportCommitRequest(
            import_id=f"demo-import-{index + 1}",
            source_type=source_type,
            raw_content=raw_content,
            captured_at=captured[index],
            source_title=f"Demo note {index + 1}",
        )
        for index, (source_type, raw_content) in enumerate(notes)
    ]


def reset_athlete(db, athlete_id: str) -> None:
    """Remove existing entries for the demo athlete."""

    db.execute(delete(JournalEntry).where(JournalEntry.athlete_id == athlete_id))
    db.commit()


def parse_args() -> argparse.Namespace:
    """Parse script CLI arguments."""

    parser = argparse.ArgumentParser(description="Seed a demo athlete journal from legacy notes.")
    parser.add_argument(
        "--athlete-id",
        default=DEFAULT_ATHLETE_ID,
        help=f"Athlete ID to seed (default: {DEFAULT_ATHLETE_ID})",
    )
    parser.add_argument(
        "--no-reset",
        action="store_true",
        help="Do not delete existing entries for the athlete before seeding.",
    )
    return parser.parse_args()


def main() -> None:
    """Seed demo entries and print a short summary."""

    args = parse_args()
    athlete_id: str = args.athlete_id
    Base.metadata.create_all(bind=engine)

    committed: list[JournalEntry] = []
    with SessionLocal() as db:
        if not args.no_reset:
            reset_athlete(db, athlete_id)
        for payload in build_demo_notes():
            resolved = payload.model_copy(update={"duplicate_resolution": "allow", "conflict_resolution": "commit"})
            entry, _ = commit_legacy_import(db, athlete_id, resolved)
            committed.append(entry)

    print("Seed complete")
    print(f"athlete_id={athlete_id}")
    print(f"entries_created={len(committed)}")
    for entry in committed:
        print(f"  {entry.entry_id} {entry.session_time.isoformat()} structured={entry.structured_json}")
    print()
    print("Try:")
    print(f"  POST /athletes/{athlete_id}/legacy-imports/preview")
    print(f"  POST /athletes/{athlete_id}/entries/<entry_id>/structured-metadata/review")


if __name__ == "__main__":
    main()
