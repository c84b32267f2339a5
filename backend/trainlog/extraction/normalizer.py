"""Text normalization and sentence segmentation for extraction."""

from __future__ import annotations

import re
from collections.abc import Iterable

from trainlog.extraction.types import JournalInput, SpanSource, TextSpan

_SENTENCE_RE = re.compile(r"[^.!?\n]+")
_APOSTROPHE_RE = re.compile(r"[‘’ʼ`]")
_JOINER_RE = re.compile(r"[-_/–—]")
_NOISE_RE = re.compile(r"[^\w\s':]")
_MULTISPACE_RE = re.compile(r"\s+")


def normalize_text(value: str) -> str:
    """Case-fold and strip punctuation noise, keeping apostrophes and colons."""

    folded = _APOSTROPHE_RE.sub("'", value.casefold())
    folded = _JOINER_RE.sub(" ", folded)
    folded = _NOISE_RE.sub(" ", folded)
    return _MULTISPACE_RE.sub(" ", folded).strip()


def collapse_whitespace(value: str) -> str:
    return _MULTISPACE_RE.sub(" ", value).strip()


def segment_source(source: SpanSource, text: str, *, first_order: int = 0) -> list[TextSpan]:
    """Split one source into sentence spans with offsets into the original text."""

    spans: list[TextSpan] = []
    if not text:
        return spans
    for match in _SENTENCE_RE.finditer(text):
        raw = collapse_whitespace(match.group(0))
        # Whitespace between sentences is not a fragment; punctuation-only fragments keep an empty span.
        if not raw:
            continue
        spans.append(
            TextSpan(
                source=source,
                order=first_order + len(spans),
                text=normalize_text(raw),
                raw=raw,
                start=match.start(),
                end=match.end(),
            )
        )
    return spans


def segment_mentions(mentions: Iterable[str], *, first_order: int = 0) -> list[TextSpan]:
    """Each raw technique mention becomes exactly one span, even when it is blank."""

    spans: list[TextSpan] = []
    for index, mention in enumerate(mentions):
        raw = collapse_whitespace(mention or "")
        spans.append(
            TextSpan(
                source="raw_mention",
                order=first_order + len(spans),
                text=normalize_text(raw),
                raw=raw,
                start=0,
                end=len(mention or ""),
                mention_index=index,
            )
        )
    return spans


def build_spans(journal_input: JournalInput) -> tuple[TextSpan, ...]:
    """Return spans in fixed resolution order: quick-add, shared, private, raw mentions."""

    spans: list[TextSpan] = []
    for source, text in (
        ("quick_add", journal_input.quick_add_notes),
        ("shared", journal_input.shared_section),
        ("private", journal_input.private_section),
    ):
        spans.extend(segment_source(source, text, first_order=len(spans)))
    spans.extend(segment_mentions(journal_input.raw_technique_mentions, first_order=len(spans)))
    return tuple(spans)
