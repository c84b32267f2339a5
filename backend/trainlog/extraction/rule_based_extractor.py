"""Deterministic field extractor using vocabulary phrase rules."""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from trainlog.extraction.confidence import confidence_for_tier, confidence_rank
from trainlog.extraction.extractor_interface import FieldExtractorInterface
from trainlog.extraction.normalizer import collapse_whitespace, normalize_text
from trainlog.extraction.types import (
    ConfidenceLevel,
    ExtractionCandidates,
    FieldCandidate,
    TextSpan,
)
from trainlog.vocabulary.tables import (
    CONCEPT_VOCABULARY,
    CONDITIONING_VOCABULARY,
    CUE_SOFT_MARKERS,
    CUE_STRONG_MARKERS,
    FAILURE_VOCABULARY,
    OUTCOME_VOCABULARY,
    POSITION_VOCABULARY,
    PROBLEM_MARKERS,
    TECHNIQUE_VOCABULARY,
    FieldVocabulary,
)

OUTCOME_SOURCES = frozenset({"shared", "private"})
EXCERPT_MAX_CHARS = 140
_VALUE_STRIP = " .,:;-–\"'"


@dataclass(frozen=True, slots=True)
class _Matcher:
    canonical: str
    phrase: str
    confidence: ConfidenceLevel
    pattern: re.Pattern[str]


@dataclass(frozen=True, slots=True)
class _Match:
    value: str
    confidence: ConfidenceLevel
    phrase: str
    span: TextSpan
    offset: int


def _phrase_pattern(phrase: str) -> re.Pattern[str]:
    words = normalize_text(phrase).split()
    body = r"\s+".join(re.escape(word) for word in words)
    return re.compile(rf"(?<![\w']){body}(?![\w'])")


def _marker_alternation(markers: Iterable[str]) -> str:
    ordered = sorted(markers, key=len, reverse=True)
    return "|".join(r"\s+".join(re.escape(word) for word in marker.split()) for marker in ordered)


def compile_vocabulary(vocabulary: FieldVocabulary) -> tuple[_Matcher, ...]:
    """Compile every phrase of a vocabulary into a word-bounded matcher."""

    matchers: list[_Matcher] = []
    for entry in vocabulary.entries:
        for tier in ("phrases", "synonyms", "hints"):
            confidence = confidence_for_tier(tier)
            for phrase in getattr(entry, tier):
                matchers.append(
                    _Matcher(
                        canonical=entry.canonical,
                        phrase=normalize_text(phrase),
                        confidence=confidence,
                        pattern=_phrase_pattern(phrase),
                    )
                )
    return tuple(matchers)


_CUE_STRONG_RE = re.compile(
    rf"\b(?:{_marker_alternation(CUE_STRONG_MARKERS)})(?:\s*[:–]|\s+-)\s*(?P<value>.+)",
    re.IGNORECASE,
)
_CUE_SOFT_RE = re.compile(
    rf"\b(?:{_marker_alternation(CUE_SOFT_MARKERS)})\b\s*[:\-–]?\s*(?P<value>.+)",
    re.IGNORECASE,
)
_PROBLEM_RE = re.compile(
    rf"(?<![\w'])(?:{_marker_alternation(PROBLEM_MARKERS)})(?![\w'])(?P<rest>[^.!?]*)",
    re.IGNORECASE,
)
_CURLY_APOSTROPHE_RE = re.compile(r"[‘’ʼ]")


def truncate(value: str, max_chars: int = EXCERPT_MAX_CHARS) -> str:
    if len(value) <= max_chars:
        return value
    return value[: max_chars - 1] + "…"


class RuleBasedFieldExtractor(FieldExtractorInterface):
    """Vocabulary-driven extractor; the same spans always yield the same candidates."""

    def __init__(
        self,
        *,
        position_vocabulary: FieldVocabulary = POSITION_VOCABULARY,
        technique_vocabulary: FieldVocabulary = TECHNIQUE_VOCABULARY,
        outcome_vocabulary: FieldVocabulary = OUTCOME_VOCABULARY,
        concept_vocabulary: FieldVocabulary = CONCEPT_VOCABULARY,
        failure_vocabulary: FieldVocabulary = FAILURE_VOCABULARY,
        conditioning_vocabulary: FieldVocabulary = CONDITIONING_VOCABULARY,
    ) -> None:
        self._position = (position_vocabulary, compile_vocabulary(position_vocabulary))
        self._technique = (technique_vocabulary, compile_vocabulary(technique_vocabulary))
        self._outcome = (outcome_vocabulary, compile_vocabulary(outcome_vocabulary))
        self._concepts = compile_vocabulary(concept_vocabulary)
        self._failures = compile_vocabulary(failure_vocabulary)
        self._conditioning = compile_vocabulary(conditioning_vocabulary)

    def extract(self, spans: Sequence[TextSpan]) -> ExtractionCandidates:
        """Extract candidates for every canonical field from ordered spans."""

        ordered = sorted(spans, key=lambda span: span.order)
        prose = [span for span in ordered if span.source != "raw_mention"]
        mentions = [span for span in ordered if span.source == "raw_mention" and span.text]

        candidates: dict[str, FieldCandidate] = {}
        conflicts: dict[str, tuple[str, ...]] = {}

        self._resolve_vocabulary_field(self._position, ordered, candidates, conflicts)
        if mentions:
            candidates["technique"] = self._candidate_from_mention(mentions[0])
        else:
            self._resolve_vocabulary_field(self._technique, prose, candidates, conflicts)
        outcome_spans = [span for span in prose if span.source in OUTCOME_SOURCES]
        self._resolve_vocabulary_field(self._outcome, outcome_spans, candidates, conflicts)

        concepts, _ = self._collect_all(self._concepts, ordered)
        failures, failure_spans = self._collect_all(self._failures, ordered)
        conditioning, _ = self._collect_all(self._conditioning, ordered)

        problem = self._extract_problem(prose, failures, failure_spans)
        if problem is not None:
            candidates["problem"] = problem
        cue = self._extract_cue(ordered)
        if cue is not None:
            candidates["cue"] = cue

        return ExtractionCandidates(
            candidates=candidates,
            conflicts=conflicts,
            concepts=concepts,
            failures=failures,
            conditioning_issues=conditioning,
        )

    def _resolve_vocabulary_field(
        self,
        compiled: tuple[FieldVocabulary, tuple[_Matcher, ...]],
        spans: Sequence[TextSpan],
        candidates: dict[str, FieldCandidate],
        conflicts: dict[str, tuple[str, ...]],
    ) -> None:
        """Pick the strongest match for a single-value field and record ties."""

        vocabulary, matchers = compiled
        matches = [match for span in spans for match in self._scan_span(matchers, span)]
        if not matches:
            return

        def strength(match: _Match) -> tuple[int, int]:
            length = len(match.phrase) if vocabulary.prefer_longest_match else 0
            return (confidence_rank(match.confidence), length)

        best = max(matches, key=lambda match: (strength(match), -match.span.order, -match.offset))
        candidates[vocabulary.field] = FieldCandidate(
            field=vocabulary.field,
            value=best.value,
            confidence=best.confidence,
            span_ref=best.span.ref,
            span_source=best.span.source,
            source_excerpt=truncate(best.span.raw),
            matched_phrase=best.phrase,
        )

        rivals = [
            match
            for match in matches
            if match.value != best.value
            and strength(match) == strength(best)
            and match.span.source != best.span.source
        ]
        if rivals:
            competing = [best.value]
            for rival in rivals:
                if rival.value not in competing:
                    competing.append(rival.value)
            conflicts[vocabulary.field] = tuple(competing)

    @staticmethod
    def _scan_span(matchers: Sequence[_Matcher], span: TextSpan) -> list[_Match]:
        found: list[_Match] = []
        for matcher in matchers:
            hit = matcher.pattern.search(span.text)
            if hit is None:
                continue
            found.append(
                _Match(
                    value=matcher.canonical,
                    confidence=matcher.confidence,
                    phrase=matcher.phrase,
                    span=span,
                    offset=hit.start(),
                )
            )
        return found

    @staticmethod
    def _collect_all(
        matchers: Sequence[_Matcher],
        spans: Sequence[TextSpan],
    ) -> tuple[tuple[str, ...], dict[str, TextSpan]]:
        """Collect every distinct canonical value in order of first occurrence."""

        values: list[str] = []
        seen: set[str] = set()
        first_spans: dict[str, TextSpan] = {}
        for span in spans:
            hits: list[tuple[int, int, str]] = []
            for index, matcher in enumerate(matchers):
                for hit in matcher.pattern.finditer(span.text):
                    hits.append((hit.start(), index, matcher.canonical))
            for _, _, canonical in sorted(hits):
                key = canonical.casefold()
                if key in seen:
                    continue
                seen.add(key)
                values.append(canonical)
                first_spans[canonical] = span
        return tuple(values), first_spans

    @staticmethod
    def _candidate_from_mention(span: TextSpan) -> FieldCandidate:
        return FieldCandidate(
            field="technique",
            value=span.raw,
            confidence="high",
            span_ref=span.ref,
            span_source=span.source,
            source_excerpt=truncate(span.raw),
            matched_phrase=span.text,
        )

    @staticmethod
    def _extract_problem(
        spans: Sequence[TextSpan],
        failures: Sequence[str],
        failure_spans: dict[str, TextSpan],
    ) -> FieldCandidate | None:
        for span in spans:
            raw = _CURLY_APOSTROPHE_RE.sub("'", span.raw)
            hit = _PROBLEM_RE.search(raw)
            if hit is None or len(hit.group("rest").strip(_VALUE_STRIP)) < 3:
                continue
            value = truncate(collapse_whitespace(hit.group(0)).strip(_VALUE_STRIP))
            return FieldCandidate(
                field="problem",
                value=value,
                confidence="medium",
                span_ref=span.ref,
                span_source=span.source,
                source_excerpt=truncate(span.raw),
                matched_phrase=normalize_text(hit.group(0)),
            )

        if failures:
            first = failures[0]
            span = failure_spans[first]
            return FieldCandidate(
                field="problem",
                value=first,
                confidence="low",
                span_ref=span.ref,
                span_source=span.source,
                source_excerpt=truncate(span.raw),
                matched_phrase=first,
            )
        return None

    @staticmethod
    def _extract_cue(spans: Sequence[TextSpan]) -> FieldCandidate | None:
        """Only explicit cue markers produce a cue; nothing is guessed otherwise."""

        best: tuple[int, int, FieldCandidate] | None = None
        for span in spans:
            for pattern, confidence in ((_CUE_STRONG_RE, "high"), (_CUE_SOFT_RE, "medium")):
                hit = pattern.search(span.raw)
                if hit is None:
                    continue
                value = collapse_whitespace(hit.group("value")).strip(_VALUE_STRIP)
                if len(value) < 3:
                    continue
                candidate = FieldCandidate(
                    field="cue",
                    value=truncate(value),
                    confidence=confidence,
                    span_ref=span.ref,
                    span_source=span.source,
                    source_excerpt=truncate(span.raw),
                    matched_phrase=normalize_text(hit.group(0)),
                )
                key = (confidence_rank(confidence), -span.order)
                if best is None or key > best[:2]:
                    best = (key[0], key[1], candidate)
                break
        return best[2] if best is not None else None
