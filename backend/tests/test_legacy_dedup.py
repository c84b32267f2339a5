"""Tests for import content hashing and duplicate/conflict classification."""

from __future__ import annotations

import unittest
from datetime import datetime, timezone

from trainlog.legacy_import.dedup import (
    ConflictPolicy,
    content_hash,
    count_disagreements,
    find_conflicts,
    find_duplicates,
)
from trainlog.storage.interface import StoredEntry

SESSION = datetime(2026, 2, 10, 18, 30, tzinfo=timezone.utc)


def _entry(entry_id: str, session_time: datetime, notes: str = "Open mat.", **overrides) -> StoredEntry:
    return StoredEntry(
        entry_id=entry_id,
        athlete_id="athlete-1",
        session_time=session_time,
        quick_add_notes=notes,
        **overrides,
    )


class ContentHashTests(unittest.TestCase):
    def test_hash_ignores_case_and_whitespace(self) -> None:
        self.assertEqual(content_hash("Hit  the Sweep\n\n"), content_hash("hit the sweep"))
        self.assertNotEqual(content_hash("hit the sweep"), content_hash("hit the sweeps"))
        self.assertEqual(len(content_hash("anything")), 64)


class FindDuplicatesTests(unittest.TestCase):
    def test_source_hash_match_wins(self) -> None:
        source_hash = content_hash("Half guard bottom rounds.")
        existing = [
            _entry("entry-1", datetime(2025, 12, 1, tzinfo=timezone.utc), content_hash=source_hash),
            _entry("entry-2", SESSION, notes="Half guard bottom rounds."),
        ]

        check = find_duplicates(
            existing,
            source_hash=source_hash,
            draft_notes="Half guard bottom rounds.",
            session_time=SESSION,
        )

        self.assertEqual(check.status, "duplicate")
        self.assertEqual(check.reason, "source_hash")
        self.assertEqual(check.entry_ids, ("entry-1",))

    def test_same_day_overlapping_notes(self) -> None:
        existing = [
            _entry(
                "entry-1",
                datetime(2026, 2, 10, 9, 0, tzinfo=timezone.utc),
                notes="Half guard bottom rounds, got swept twice. Extra.",
            ),
            _entry(
                "entry-2",
                datetime(2026, 2, 11, 9, 0, tzinfo=timezone.utc),
                notes="Half guard bottom rounds, got swept twice.",
            ),
        ]

        check = find_duplicates(
            existing,
            source_hash=content_hash("something else"),
            draft_notes="half guard bottom  rounds, got swept twice.",
            session_time=SESSION,
        )

        self.assertEqual(check.status, "duplicate")
        self.assertEqual(check.reason, "same_day_notes")
        self.assertEqual(check.entry_ids, ("entry-1",))

    def test_unrelated_entries_are_new(self) -> None:
        check = find_duplicates(
            [_entry("entry-1", SESSION, notes="Takedown day.")],
            source_hash=content_hash("Half guard bottom rounds."),
            draft_notes="Half guard bottom rounds.",
            session_time=SESSION,
        )

        self.assertEqual(check.status, "new")
        self.assertEqual(check.entry_ids, ())
        self.assertIsNone(check.reason)


class FindConflictsTests(unittest.TestCase):
    draft = {"position": "half guard bottom", "technique": "kimura", "outcome": "sweep success"}

    def test_counts_only_fields_both_sides_assert(self) -> None:
        fields = ConflictPolicy().fields
        self.assertEqual(count_disagreements(self.draft, {"position": "mount top"}, fields), 1)
        self.assertEqual(count_disagreements(self.draft, {"position": "Half Guard Bottom"}, fields), 0)
        self.assertEqual(count_disagreements(self.draft, {"cue": "elbows in"}, fields), 0)

    def test_disagreeing_entry_within_window_conflicts(self) -> None:
        existing = [
            _entry(
                "near",
                datetime(2026, 2, 10, 12, 0, tzinfo=timezone.utc),
                structured={"position": "mount top", "technique": "armbar", "outcome": "sweep success"},
            ),
            _entry(
                "far",
                datetime(2026, 2, 12, 8, 0, tzinfo=timezone.utc),
                structured={"position": "mount top", "technique": "armbar"},
            ),
            _entry(
                "mostly-agrees",
                datetime(2026, 2, 10, 19, 0, tzinfo=timezone.utc),
                structured={"position": "mount top", "technique": "kimura"},
            ),
        ]

        conflicting = find_conflicts(
            existing,
            draft_structured=self.draft,
            session_time=SESSION,
            policy=ConflictPolicy(),
        )

        self.assertEqual(conflicting, ("near",))

    def test_policy_thresholds_are_configurable(self) -> None:
        existing = [
            _entry(
                "mostly-agrees",
                datetime(2026, 2, 10, 19, 0, tzinfo=timezone.utc),
                structured={"position": "mount top", "technique": "kimura"},
            ),
        ]

        conflicting = find_conflicts(
            existing,
            draft_structured=self.draft,
            session_time=SESSION,
            policy=ConflictPolicy(window_hours=1, min_disagreeing_fields=1),
        )

        self.assertEqual(conflicting, ("mostly-agrees",))


if __name__ == "__main__":
    unittest.main()
