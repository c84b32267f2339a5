"""Tests for splitting legacy notes into draft entry content."""

from __future__ import annotations

import unittest
from datetime import datetime, timezone

from trainlog.legacy_import.content import (
    DEFAULT_NOTES,
    classify_heading,
    detect_intensity,
    detect_tags,
    html_to_markdown,
    split_front_matter,
    split_legacy_content,
)

NOW = datetime(2026, 3, 2, 12, 0, tzinfo=timezone.utc)

MARKDOWN_NOTE = """---
date: 2026-02-10T18:30:00Z
class: Fundamentals
gym: North Side BJJ
partners: Sam, Riley
rounds: 5
---
# Quick notes
Half guard bottom rounds, got swept twice.

## Shared
Worked the knee shield. Hit the sweep once.

## Private
Felt gassed by round four.

## Techniques
- Scissor sweep
- Hip escape
"""


class HelperTests(unittest.TestCase):
    def test_classify_heading(self) -> None:
        self.assertEqual(classify_heading("Private reflections"), "private")
        self.assertEqual(classify_heading("Drills"), "techniques")
        self.assertEqual(classify_heading("Coach summary"), "shared")
        self.assertEqual(classify_heading("TL;DR"), "quick")
        self.assertIsNone(classify_heading("Warm up"))

    def test_front_matter_keys_are_normalized(self) -> None:
        meta, body = split_front_matter("---\nSession Date: 2026-02-10\nquick_add_notes: 'Flow rolls'\n---\nBody text")

        self.assertEqual(meta, {"sessiondate": "2026-02-10", "quickaddnotes": "Flow rolls"})
        self.assertEqual(body, "Body text")

    def test_note_without_front_matter_is_unchanged(self) -> None:
        self.assertEqual(split_front_matter("Just rolled."), ({}, "Just rolled."))

    def test_front_matter_lists_are_joined(self) -> None:
        meta, body = split_front_matter("---\npartners:\n  - Alex\n  - Sam\nrounds: 6\n---\nRolled.")

        self.assertEqual(meta, {"partners": "Alex, Sam", "rounds": "6"})
        self.assertEqual(body, "Rolled.")

    def test_front_matter_that_is_not_a_mapping(self) -> None:
        self.assertEqual(split_front_matter("---\npartners: [Alex\n---\nRolled."), (None, "Rolled."))
        self.assertEqual(split_front_matter("---\n- just a list\n---\nRolled."), (None, "Rolled."))

    def test_html_is_flattened_to_markdown(self) -> None:
        text = html_to_markdown("<h2>Summary</h2><p>Worked <b>armbar</b>&nbsp;today.</p><ul><li>Kimura</li></ul>")

        self.assertIn("## Summary", text)
        self.assertIn("- Kimura", text)
        self.assertNotIn("<", text)
        self.assertNotIn("\xa0", text)

    def test_html_attributes_and_comments_do_not_leak(self) -> None:
        text = html_to_markdown(
            '<p><img alt="a > b" src="x.png">Hit the sweep</p><!-- draft: ignore --><p>Second</p>'
        )

        self.assertEqual(text.strip().split("\n"), ["Hit the sweep", "Second"])
        self.assertNotIn("draft", text)
        self.assertNotIn("x.png", text)

    def test_detect_tags(self) -> None:
        self.assertEqual(
            detect_tags("Mount top pressure, passed guard, single leg entries."),
            ("guard-type", "top", "pass", "takedown"),
        )

    def test_detect_intensity(self) -> None:
        self.assertEqual(detect_intensity("Light drill day."), 4)
        self.assertEqual(detect_intensity("Intensity: 0"), 1)
        self.assertEqual(detect_intensity("Intensity 14, gassed."), 10)
        self.assertEqual(detect_intensity("Regular class."), 6)


class SplitLegacyContentTests(unittest.TestCase):
    def test_markdown_note_with_front_matter_and_headings(self) -> None:
        content = split_legacy_content("markdown", MARKDOWN_NOTE, now=NOW)

        self.assertEqual(content.quick_add.time, "2026-02-10T18:30:00.000Z")
        self.assertTrue(content.session_time_explicit)
        self.assertEqual(content.quick_add.class_name, "Fundamentals")
        self.assertEqual(content.quick_add.gym, "North Side BJJ")
        self.assertEqual(content.quick_add.partners, ("Sam", "Riley"))
        self.assertEqual(content.quick_add.rounds, 5)
        self.assertEqual(content.quick_add.notes, "Half guard bottom rounds, got swept twice.")
        self.assertEqual(content.sections.shared, "Worked the knee shield. Hit the sweep once.")
        self.assertEqual(content.sections.private, "Felt gassed by round four.")
        self.assertEqual(content.raw_technique_mentions, ("Scissor sweep", "Hip escape"))
        self.assertEqual(content.session_metrics.duration_minutes, 60)
        self.assertEqual(content.session_metrics.intensity, 8)
        self.assertEqual(content.session_metrics.gi_or_no_gi, "gi")
        self.assertEqual(content.tags, ("guard-type", "bottom", "sweep", "escape"))
        self.assertEqual(content.warnings, ())

    def test_plain_text_labels_route_lines(self) -> None:
        captured_at = datetime(2026, 2, 12, 20, 0, tzinfo=timezone.utc)
        content = split_legacy_content(
            "plain-text",
            "Shared: Drilled the knee cut pass with Jordan.\n"
            "Private: Frustrated with my frames.\n"
            "Notes: 3 rounds no-gi, 45 min, intensity 12.\n",
            now=NOW,
            captured_at=captured_at,
        )

        self.assertEqual(content.sections.shared, "Drilled the knee cut pass with Jordan.")
        self.assertEqual(content.sections.private, "Frustrated with my frames.")
        self.assertEqual(content.quick_add.notes, "3 rounds no-gi, 45 min, intensity 12.")
        self.assertEqual(content.quick_add.time, "2026-02-12T20:00:00.000Z")
        self.assertTrue(content.session_time_explicit)
        self.assertEqual(content.quick_add.rounds, 3)
        self.assertEqual(content.session_metrics.duration_minutes, 45)
        self.assertEqual(content.session_metrics.intensity, 10)
        self.assertEqual(content.session_metrics.gi_or_no_gi, "no-gi")
        self.assertEqual(content.raw_technique_mentions, ("knee cut",))
        self.assertEqual(content.tags, ("pass",))
        self.assertEqual(content.warnings, ())

    def test_google_doc_export(self) -> None:
        content = split_legacy_content(
            "google-doc",
            "<html><body><h2>Summary</h2><p>Worked <b>armbar</b> from closed guard&nbsp;today.</p>"
            "<h2>Reflection</h2><p>Need better grips.</p></body></html>",
            now=NOW,
            source_title="Tuesday class",
        )

        self.assertEqual(content.sections.shared, "Worked armbar from closed guard today.")
        self.assertEqual(content.sections.private, "Need better grips.")
        self.assertEqual(content.quick_add.notes, content.sections.shared)
        self.assertEqual(content.quick_add.class_name, "Tuesday class")
        self.assertEqual(content.raw_technique_mentions, ("armbar",))
        self.assertEqual(content.quick_add.time, "2026-03-02T12:00:00.000Z")
        self.assertFalse(content.session_time_explicit)
        self.assertEqual(content.warnings, ("No session date found; using the import time.",))

    def test_unreadable_date_falls_back_with_warning(self) -> None:
        content = split_legacy_content("markdown", "---\ndate: last tuesday\n---\nRolled light.", now=NOW)

        self.assertEqual(content.quick_add.time, "2026-03-02T12:00:00.000Z")
        self.assertFalse(content.session_time_explicit)
        self.assertEqual(
            content.warnings,
            ("Could not read session date 'last tuesday'; using the capture time.",),
        )
        self.assertEqual(content.quick_add.notes, "Rolled light.")
        self.assertEqual(content.sections.shared, "Rolled light.")

    def test_yaml_list_partners(self) -> None:
        note = "---\ndate: 2026-02-10\npartners:\n  - Alex\n  - Sam\n---\nDrilled the sweep."
        content = split_legacy_content("markdown", note, now=NOW)

        self.assertEqual(content.quick_add.partners, ("Alex", "Sam"))
        self.assertTrue(content.session_time_explicit)
        self.assertEqual(content.warnings, ())

    def test_unreadable_front_matter_is_ignored_with_warning(self) -> None:
        content = split_legacy_content("markdown", "---\npartners: [Alex\n---\nRolled light.", now=NOW)

        self.assertIn("Could not read the front matter; it was ignored.", content.warnings)
        self.assertEqual(content.quick_add.partners, ())
        self.assertEqual(content.quick_add.notes, "Rolled light.")

    def test_long_notes_are_clipped_on_a_word_boundary(self) -> None:
        content = split_legacy_content("plain-text", "word " * 200, now=NOW, quick_add_max_chars=600)

        self.assertLessEqual(len(content.quick_add.notes), 600)
        self.assertTrue(content.quick_add.notes.endswith("word"))
        self.assertIn("Long imported text was truncated.", content.warnings)

    def test_note_with_only_formatting_gets_placeholder(self) -> None:
        content = split_legacy_content("markdown", "# Shared\n\n```\ncode\n```\n", now=NOW)

        self.assertEqual(content.quick_add.notes, DEFAULT_NOTES)
        self.assertIn("No journal text found after removing formatting.", content.warnings)


if __name__ == "__main__":
    unittest.main()
