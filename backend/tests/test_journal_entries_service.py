"""Integration tests for committing imports and reviewing stored metadata."""

from __future__ import annotations

import unittest
from datetime import datetime, timezone

from fastapi import HTTPException
from pydantic import ValidationError
from sqlalchemy import create_engine, delete, func, select
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from trainlog.errors import EntryNotFoundError, InvalidInputError
from trainlog.models.base import Base
from trainlog.models.journal_entry import JournalEntry
from trainlog.routers.legacy_import import commit_import, preview_import
from trainlog.routers.structured_metadata import extract_structured_metadata, review_structured_metadata
from trainlog.schemas.legacy_import import LegacyImportCommitRequest, LegacyImportPreviewRequest
from trainlog.schemas.structured_metadata import MetadataReviewRequest, StructuredExtractRequest
from trainlog.services.journal_entries import commit_legacy_import, review_entry_metadata
from trainlog.storage.interface import EntryKey, EntryQuery
from trainlog.storage.sql_store import SqlEntryStore

NOW = datetime(2026, 3, 2, 12, 0, tzinfo=timezone.utc)
ATHLETE_ID = "athlete-1"

HALF_GUARD_NOTE = """---
date: 2026-02-10T18:30:00Z
class: Fundamentals
---
# Quick notes
Half guard bottom rounds, got swept twice.

## Shared
Worked the knee shield. Hit the sweep once.

## Techniques
- Scissor sweep
"""

MOUNT_NOTE = """---
date: 2026-02-10T12:00:00Z
---
# Shared
Mount top rounds. Worked the armbar. Hit the sweep late.
"""


def _commit_request(raw_content: str = HALF_GUARD_NOTE, **overrides) -> LegacyImportCommitRequest:
    values = {"import_id": "import-1", "source_type": "markdown", "raw_content": raw_content}
    values.update(overrides)
    return LegacyImportCommitRequest.model_validate(values)


class JournalEntryServiceTestCase(unittest.TestCase):
    @classmethod
    def setUpClass(cls) -> None:
        cls.engine = create_engine(
            "sqlite+pysqlite:///:memory:",
            future=True,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        cls.SessionLocal = sessionmaker(bind=cls.engine, autoflush=False, autocommit=False, future=True)
        Base.metadata.create_all(cls.engine)

    @classmethod
    def tearDownClass(cls) -> None:
        Base.metadata.drop_all(cls.engine)
        cls.engine.dispose()

    def setUp(self) -> None:
        self.db: Session = self.SessionLocal()
        self.db.execute(delete(JournalEntry))
        self.db.commit()

    def tearDown(self) -> None:
        self.db.close()

    def _entry_count(self) -> int:
        return self.db.scalar(select(func.count()).select_from(JournalEntry))


class CommitLegacyImportTests(JournalEntryServiceTestCase):
    def test_commit_persists_draft_and_extraction(self) -> None:
        with self.assertLogs("trainlog.services.journal_entries", level="INFO") as captured:
            entry, preview = commit_legacy_import(self.db, ATHLETE_ID, _commit_request(), now=NOW)

        self.assertEqual(preview.dedup_status, "new")
        self.assertEqual(entry.status, "committed")
        self.assertEqual(entry.import_id, "import-1")
        self.assertEqual(entry.import_source_type, "markdown")
        self.assertEqual(entry.class_name, "Fundamentals")
        self.assertEqual(entry.content_hash, preview.source.content_hash)
        self.assertEqual(
            entry.structured_json,
            {"position": "half guard bottom", "technique": "Scissor sweep", "outcome": "sweep success"},
        )
        self.assertEqual(entry.raw_technique_mentions_json, ["Scissor sweep"])
        self.assertFalse(entry.requires_coach_review)
        self.assertTrue(any("legacy_import.commit" in line for line in captured.output))

        stored = SqlEntryStore(self.db).get_item(EntryKey(athlete_id=ATHLETE_ID, entry_id=entry.entry_id))
        self.assertIsNotNone(stored)
        self.assertEqual(stored.session_time, datetime(2026, 2, 10, 18, 30, tzinfo=timezone.utc))
        self.assertTrue(all(suggestion.status == "pending" for suggestion in stored.suggestions))

    def test_duplicate_requires_explicit_allow(self) -> None:
        commit_legacy_import(self.db, ATHLETE_ID, _commit_request(), now=NOW)

        with self.assertRaisesRegex(InvalidInputError, "Potential duplicate"):
            commit_legacy_import(self.db, ATHLETE_ID, _commit_request(import_id="import-2"), now=NOW)
        self.assertEqual(self._entry_count(), 1)

        entry, preview = commit_legacy_import(
            self.db,
            ATHLETE_ID,
            _commit_request(import_id="import-2", duplicate_resolution="allow"),
            now=NOW,
        )

        self.assertEqual(preview.dedup_status, "duplicate")
        self.assertEqual(preview.dedup_reason, "source_hash")
        self.assertEqual(entry.import_id, "import-2")
        self.assertEqual(self._entry_count(), 2)

    def test_unknown_resolutions_are_rejected(self) -> None:
        with self.assertRaises(InvalidInputError):
            commit_legacy_import(self.db, ATHLETE_ID, _commit_request(duplicate_resolution="skip"), now=NOW)
        with self.assertRaises(InvalidInputError):
            commit_legacy_import(self.db, ATHLETE_ID, _commit_request(conflict_resolution="merge"), now=NOW)
        self.assertEqual(self._entry_count(), 0)

    def test_conflict_requires_resolution_and_can_save_as_draft(self) -> None:
        commit_legacy_import(self.db, ATHLETE_ID, _commit_request(MOUNT_NOTE, import_id="import-0"), now=NOW)

        with self.assertRaisesRegex(InvalidInputError, "conflict_resolution"):
            commit_legacy_import(self.db, ATHLETE_ID, _commit_request(), now=NOW)

        entry, preview = commit_legacy_import(
            self.db,
            ATHLETE_ID,
            _commit_request(conflict_resolution="save-as-draft"),
            now=NOW,
        )

        self.assertEqual(preview.conflict_status, "conflict")
        self.assertEqual(entry.status, "draft")
        self.assertTrue(entry.requires_coach_review)

    def test_corrections_are_applied_before_extraction(self) -> None:
        entry, _ = commit_legacy_import(
            self.db,
            ATHLETE_ID,
            _commit_request(
                corrections={
                    "quick_add": {"class_name": "Open mat", "partners": ["Sam", " "]},
                    "tags": ["sweep", "invalid-tag"],
                    "structured": {"position": "deep half guard"},
                    "instructions": [{"action": "reject", "field": "outcome"}],
                }
            ),
            now=NOW,
        )

        self.assertEqual(entry.class_name, "Open mat")
        self.assertEqual(entry.partners_json, ["Sam"])
        self.assertEqual(entry.tags_json, ["sweep"])
        self.assertEqual(entry.session_metrics_json["tags"], ["sweep"])
        self.assertEqual(entry.structured_json["position"], "deep half guard")
        self.assertNotIn("outcome", entry.structured_json)
        statuses = {item["field"]: item["status"] for item in entry.suggestions_json}
        self.assertEqual(statuses["position"], "corrected")
        self.assertEqual(statuses["outcome"], "rejected")


class ReviewEntryMetadataTests(JournalEntryServiceTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.entry, _ = commit_legacy_import(self.db, ATHLETE_ID, _commit_request(), now=NOW)

    def test_confirmation_is_persisted(self) -> None:
        payload = MetadataReviewRequest.model_validate({"instructions": [{"action": "confirm", "field": "position"}]})

        entry, result = review_entry_metadata(self.db, ATHLETE_ID, self.entry.entry_id, payload, now=NOW)

        self.assertEqual(result.suggestion_for("position").status, "confirmed")
        self.assertEqual(entry.structured_json["position"], "half guard bottom")
        stored = SqlEntryStore(self.db).get_item(EntryKey(athlete_id=ATHLETE_ID, entry_id=self.entry.entry_id))
        position = next(item for item in stored.suggestions if item.field == "position")
        self.assertEqual(position.status, "confirmed")

    def test_structured_value_without_suggestion_round_trips(self) -> None:
        payload = MetadataReviewRequest(structured={"cue": "head over knee"}, actor_role="coach")

        entry, _ = review_entry_metadata(self.db, ATHLETE_ID, self.entry.entry_id, payload, now=NOW)

        self.assertEqual(entry.structured_json["cue"], "head over knee")
        stored = SqlEntryStore(self.db).get_item(EntryKey(athlete_id=ATHLETE_ID, entry_id=self.entry.entry_id))
        cue = next(item for item in stored.suggestions if item.field == "cue")
        self.assertEqual(cue.status, "corrected")
        self.assertIsNone(cue.value)
        self.assertEqual(cue.updated_by_role, "coach")

    def test_missing_entry_raises(self) -> None:
        payload = MetadataReviewRequest(reevaluate_fields=["position"])

        with self.assertRaises(EntryNotFoundError):
            review_entry_metadata(self.db, "athlete-2", self.entry.entry_id, payload)

    def test_empty_review_is_rejected_by_schema(self) -> None:
        with self.assertRaises(ValidationError):
            MetadataReviewRequest()


class SqlEntryStoreTests(JournalEntryServiceTestCase):
    def test_query_orders_newest_first_and_limits(self) -> None:
        older, _ = commit_legacy_import(self.db, ATHLETE_ID, _commit_request(MOUNT_NOTE, import_id="import-0"), now=NOW)
        newer, _ = commit_legacy_import(self.db, ATHLETE_ID, _commit_request(conflict_resolution="commit"), now=NOW)
        store = SqlEntryStore(self.db)

        newest_first = store.query_items(EntryQuery(athlete_id=ATHLETE_ID))
        oldest_first = store.query_items(EntryQuery(athlete_id=ATHLETE_ID, newest_first=False))
        limited = store.query_items(EntryQuery(athlete_id=ATHLETE_ID, limit=1))

        self.assertEqual([item.entry_id for item in newest_first], [newer.entry_id, older.entry_id])
        self.assertEqual([item.entry_id for item in oldest_first], [older.entry_id, newer.entry_id])
        self.assertEqual([item.entry_id for item in limited], [newer.entry_id])
        self.assertEqual(store.query_items(EntryQuery(athlete_id="athlete-2")), [])


class RouterErrorMappingTests(JournalEntryServiceTestCase):
    def test_preview_route_returns_preview(self) -> None:
        response = preview_import(
            LegacyImportPreviewRequest(source_type="markdown", raw_content=HALF_GUARD_NOTE),
            athlete_id=ATHLETE_ID,
            db=self.db,
        )

        self.assertEqual(response.data.dedup_status, "new")
        self.assertEqual(response.data.mode, "heuristic")
        self.assertEqual(self._entry_count(), 0)

    def test_unsupported_source_type_is_400(self) -> None:
        with self.assertRaises(HTTPException) as raised:
            preview_import(
                LegacyImportPreviewRequest(source_type="docx", raw_content="Rolled."),
                athlete_id=ATHLETE_ID,
                db=self.db,
            )
        self.assertEqual(raised.exception.status_code, 400)

    def test_commit_route_maps_duplicate_to_400(self) -> None:
        created = commit_import(_commit_request(), athlete_id=ATHLETE_ID, db=self.db)
        self.assertEqual(created.data.entry.status, "committed")

        with self.assertRaises(HTTPException) as raised:
            commit_import(_commit_request(import_id="import-2"), athlete_id=ATHLETE_ID, db=self.db)
        self.assertEqual(raised.exception.status_code, 400)

    def test_review_route_maps_missing_entry_to_404(self) -> None:
        with self.assertRaises(HTTPException) as raised:
            review_structured_metadata(
                MetadataReviewRequest(reevaluate_fields=["cue"]),
                athlete_id=ATHLETE_ID,
                entry_id="missing",
                db=self.db,
            )
        self.assertEqual(raised.exception.status_code, 404)

    def test_extract_route_maps_errors(self) -> None:
        with self.assertRaises(HTTPException) as bad_input:
            extract_structured_metadata(StructuredExtractRequest(prior_structured={"stance": "orthodox"}))
        with self.assertRaises(HTTPException) as impossible:
            extract_structured_metadata(
                StructuredExtractRequest.model_validate({"instructions": [{"action": "reject", "field": "cue"}]})
            )

        self.assertEqual(bad_input.exception.status_code, 400)
        self.assertEqual(impossible.exception.status_code, 409)

    def test_extract_route_serializes_result(self) -> None:
        response = extract_structured_metadata(
            StructuredExtractRequest(quick_add_notes="Mount top rounds, could not finish the armbar.")
        )

        self.assertEqual(response.data.structured["position"], "mount top")
        self.assertEqual(
            [(flag.field, flag.reason) for flag in response.data.confidence_flags],
            [("outcome", "unresolved"), ("cue", "unresolved")],
        )


if __name__ == "__main__":
    unittest.main()
