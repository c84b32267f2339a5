"""Tests for confidence flag derivation."""

from __future__ import annotations

import unittest

from trainlog.extraction.confidence import build_confidence_flags, confidence_for_tier, confirmation_prompt
from trainlog.extraction.types import FieldCandidate, FieldSuggestion

NOW = "2026-03-02T12:00:00.000Z"


def _candidate(field: str, value: str, confidence: str = "high") -> FieldCandidate:
    return FieldCandidate(
        field=field,
        value=value,
        confidence=confidence,
        span_ref="shared:0-10",
        span_source="shared",
        source_excerpt=value,
    )


def _suggestion(field: str, value: str | None, status: str = "pending", confidence: str = "high") -> FieldSuggestion:
    return FieldSuggestion(field=field, value=value, confidence=confidence, status=status, updated_at=NOW)


class ConfidenceHelpersTests(unittest.TestCase):
    def test_tiers_map_to_levels(self) -> None:
        self.assertEqual(confidence_for_tier("phrases"), "high")
        self.assertEqual(confidence_for_tier("synonyms"), "medium")
        self.assertEqual(confidence_for_tier("hints"), "low")
        with self.assertRaises(ValueError):
            confidence_for_tier("guesses")

    def test_prompt_names_value_and_field(self) -> None:
        self.assertEqual(
            confirmation_prompt("position", "side control top"),
            "This sounds like side control top for position. Confirm?",
        )


class BuildConfidenceFlagsTests(unittest.TestCase):
    def test_missing_fields_are_flagged_unresolved(self) -> None:
        candidates = {"position": _candidate("position", "mount top")}
        suggestions = [_suggestion("position", "mount top")]

        flags = build_confidence_flags(candidates=candidates, conflicts={}, suggestions=suggestions)

        self.assertEqual(
            [(flag.field, flag.reason) for flag in flags],
            [
                ("technique", "unresolved"),
                ("outcome", "unresolved"),
                ("problem", "unresolved"),
                ("cue", "unresolved"),
            ],
        )

    def test_low_confidence_is_flagged_but_medium_is_not(self) -> None:
        candidates = {
            "position": _candidate("position", "open guard", "low"),
            "technique": _candidate("technique", "knee cut pass", "medium"),
        }
        suggestions = [
            _suggestion("position", "open guard", confidence="low"),
            _suggestion("technique", "knee cut pass", confidence="medium"),
        ]

        flags = build_confidence_flags(candidates=candidates, conflicts={}, suggestions=suggestions)
        by_field = {flag.field: flag for flag in flags}

        self.assertEqual(by_field["position"].reason, "low_confidence")
        self.assertEqual(by_field["position"].confidence, "low")
        self.assertNotIn("technique", by_field)

    def test_conflicting_candidates_are_flagged(self) -> None:
        candidates = {"position": _candidate("position", "open guard")}
        flags = build_confidence_flags(
            candidates=candidates,
            conflicts={"position": ("open guard", "half guard")},
            suggestions=[_suggestion("position", "open guard")],
        )

        position_flag = next(flag for flag in flags if flag.field == "position")
        self.assertEqual(position_flag.reason, "conflicting_candidates")
        self.assertIn("half guard", position_flag.note or "")

    def test_resolved_fields_are_not_second_guessed(self) -> None:
        suggestions = [
            _suggestion("outcome", "stalled attack", status="confirmed", confidence="low"),
            _suggestion("cue", None, status="rejected", confidence="medium"),
        ]

        flags = build_confidence_flags(candidates={}, conflicts={}, suggestions=suggestions)

        self.assertNotIn("outcome", {flag.field for flag in flags})
        self.assertNotIn("cue", {flag.field for flag in flags})

    def test_reevaluation_flags_resolved_fields_again(self) -> None:
        suggestions = [_suggestion("outcome", "stalled attack", status="confirmed", confidence="low")]
        candidates = {"outcome": _candidate("outcome", "stalled attack", "low")}

        flags = build_confidence_flags(
            candidates=candidates,
            conflicts={},
            suggestions=suggestions,
            reevaluate_fields=("outcome",),
        )

        outcome_flag = next(flag for flag in flags if flag.field == "outcome")
        self.assertEqual(outcome_flag.reason, "low_confidence")


if __name__ == "__main__":
    unittest.main()
