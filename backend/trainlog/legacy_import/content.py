"""Content splitting for legacy journal notes.

Markdown notes are split on headings: a heading whose title names a known
section (shared, private, techniques, quick notes) routes the lines under it to
that section, anything else is treated as general session text. Plain-text notes
use ``Label:`` lines the same way. Google-doc exports are HTML and are first
flattened to markdown.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from datetime import date, datetime

import yaml
from bs4 import BeautifulSoup, Comment

from trainlog.errors import InvalidInputError
from trainlog.legacy_import.types import (
    EntrySections,
    LegacyContent,
    QuickAdd,
    SessionMetrics,
)
from trainlog.timestamps import isoformat_utc, parse_timestamp

DEFAULT_CLASS_NAME = "Imported legacy note"
DEFAULT_GYM = "Imported source"
DEFAULT_NOTES = "Imported note"
DEFAULT_DURATION_MINUTES = 60
DEFAULT_INTENSITY = 6
MAX_PARTNERS = 8
MAX_TECHNIQUE_MENTIONS = 16

_FRONT_MATTER_RE = re.compile(r"\A---[ \t]*\n(?P<body>.*?)\n---[ \t]*(?:\n|\Z)", re.DOTALL)
_CODE_FENCE_RE = re.compile(r"```.*?```", re.DOTALL)
_HEADING_RE = re.compile(r"^\s{0,3}#{1,6}\s+(?P<title>.+?)\s*#*\s*$")
_LABEL_RE = re.compile(r"^\s*(?P<title>[A-Za-z][A-Za-z;&/' -]{0,39}?)\s*:\s*(?P<rest>.*)$")
_BULLET_RE = re.compile(r"^\s*(?:[-*+]|\d{1,2}[.)])\s+")
_WHITESPACE_RE = re.compile(r"\s+")

_IMAGE_RE = re.compile(r"!\[[^\]]*\]\([^)]*\)")
_LINK_RE = re.compile(r"\[([^\]]+)\]\([^)]*\)")
_INLINE_CODE_RE = re.compile(r"`([^`]+)`")
_EMPHASIS_RE = re.compile(r"(\*\*|__|\*|~~)(?=\S)(.+?)(?<=\S)\1")
_QUOTE_RE = re.compile(r"^\s*>\s?")
_HEADING_TAGS = ("h1", "h2", "h3", "h4", "h5", "h6")
_BLOCK_TAGS = ("p", "div", "ul", "ol", "tr", "table")

_SECTION_KEYWORDS: tuple[tuple[str, frozenset[str]], ...] = (
    ("private", frozenset({"private", "personal", "reflection", "reflections", "journal", "feelings"})),
    ("techniques", frozenset({"technique", "techniques", "drills", "drilled", "moves"})),
    ("shared", frozenset({"shared", "summary", "coach", "public", "recap"})),
    ("quick", frozenset({"quick", "tldr", "tl;dr", "notes"})),
)

_TECHNIQUE_MENTION_RE = re.compile(
    r"\b(knee\s*(?:cut|slice)|armbar|triangle\s+choke|kimura|guillotine|single\s+leg|double\s+leg"
    r"|hip\s+escape|upa\s+escape|scissor\s+sweep|hip\s+bump\s+sweep|rear\s+naked\s+choke)\b",
    re.IGNORECASE,
)
_ROUNDS_RE = re.compile(r"\b(\d{1,2})\s+rounds?\b", re.IGNORECASE)
_DURATION_RE = re.compile(r"\b(\d{2,3})\s*(?:min|mins|minutes)\b", re.IGNORECASE)
_INTENSITY_RE = re.compile(r"\bintensity\s*[:=-]?\s*(\d{1,2})\b", re.IGNORECASE)
_HARD_SESSION_RE = re.compile(r"exhausted|gassed|dead tired|very hard roll", re.IGNORECASE)
_LIGHT_SESSION_RE = re.compile(r"light drill|flow roll", re.IGNORECASE)
_NO_GI_RE = re.compile(r"\bno[ -]?gi\b", re.IGNORECASE)

_TAG_PATTERNS: tuple[tuple[str, re.Pattern[str]], ...] = (
    ("guard-type", re.compile(r"\bguard\b", re.IGNORECASE)),
    ("top", re.compile(r"\btop\s+game\b|\bmount\s+top\b|\bside\s+control\s+top\b", re.IGNORECASE)),
    ("bottom", re.compile(r"\bbottom\s+game\b|\bguard\s+bottom\b|\bmounted\b", re.IGNORECASE)),
    ("submission", re.compile(r"choke|armbar|kimura|submission|triangle|guillotine", re.IGNORECASE)),
    ("sweep", re.compile(r"\bsweep|\breversal", re.IGNORECASE)),
    ("pass", re.compile(r"\bpass(?:ed|es|ing)?\b", re.IGNORECASE)),
    ("escape", re.compile(r"\bescape[sd]?\b|\breguard", re.IGNORECASE)),
    ("takedown", re.compile(r"single\s+leg|double\s+leg|takedown|wrestling", re.IGNORECASE)),
)


def collapse(value: str) -> str:
    return _WHITESPACE_RE.sub(" ", value).strip()


def html_to_markdown(raw: str) -> str:
    """Flatten a Google Docs HTML export to markdown-ish text."""

    soup = BeautifulSoup(raw, "html.parser")
    for node in soup.find_all(["style", "script"]):
        node.decompose()
    for comment in soup.find_all(string=lambda text: isinstance(text, Comment)):
        comment.extract()
    for heading in soup.find_all(_HEADING_TAGS):
        title = collapse(heading.get_text(" "))
        heading.replace_with(f"\n{'#' * int(heading.name[1])} {title}\n" if title else "\n")
    for item in soup.find_all("li"):
        item.insert(0, "\n- ")
        item.append("\n")
    for line_break in soup.find_all("br"):
        line_break.replace_with("\n")
    for block in soup.find_all(_BLOCK_TAGS):
        block.append("\n")
    return soup.get_text().replace("\xa0", " ")


def _front_matter_value(value: object) -> str | None:
    if value is None or isinstance(value, Mapping):
        return None
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, (list, tuple)):
        items = [_front_matter_value(item) for item in value]
        return ", ".join(item for item in items if item) or None
    return collapse(str(value)) or None


def split_front_matter(raw: str) -> tuple[dict[str, str] | None, str]:
    """Return ``(metadata, body)`` for a note with an optional YAML ``---`` header.

    Keys are lowercased with spaces, dashes and underscores removed; list values are
    joined with commas and nested mappings are ignored. Metadata is ``None`` when the
    header exists but is not a YAML mapping.
    """

    stripped = raw.lstrip()
    match = _FRONT_MATTER_RE.match(stripped)
    if match is None:
        return {}, raw
    body = stripped[match.end():]
    try:
        loaded = yaml.safe_load(match.group("body"))
    except yaml.YAMLError:
        return None, body
    if loaded is None:
        return {}, body
    if not isinstance(loaded, Mapping):
        return None, body

    meta: dict[str, str] = {}
    for key, value in loaded.items():
        name = re.sub(r"[\s_-]+", "", str(key)).lower()
        cleaned = _front_matter_value(value)
        if name and cleaned:
            meta[name] = cleaned
    return meta, body


def strip_inline_markdown(line: str) -> str:
    line = _IMAGE_RE.sub(" ", line)
    line = _LINK_RE.sub(r"\1", line)
    line = _INLINE_CODE_RE.sub(r"\1", line)
    line = _EMPHASIS_RE.sub(r"\2", line)
    return _QUOTE_RE.sub("", line)


def classify_heading(title: str) -> str | None:
    """Map a heading or label title to a section bucket, or None."""

    tokens = set(re.findall(r"[a-z;]+", title.lower()))
    for bucket, keywords in _SECTION_KEYWORDS:
        if tokens & keywords:
            return bucket
    return None


def split_sections(body: str) -> dict[str, list[str]]:
    """Group body lines by section bucket; unlabelled text lands in ``general``."""

    buckets: dict[str, list[str]] = {
        "general": [],
        "shared": [],
        "private": [],
        "techniques": [],
        "quick": [],
    }
    current = "general"
    for raw_line in _CODE_FENCE_RE.sub(" ", body).split("\n"):
        heading = _HEADING_RE.match(raw_line)
        if heading is not None:
            current = classify_heading(heading.group("title")) or "general"
            continue
        label = _LABEL_RE.match(raw_line)
        if label is not None and len(label.group("title").split()) <= 3:
            bucket = classify_heading(label.group("title"))
            if bucket is not None:
                current = bucket
                raw_line = label.group("rest")
        line = strip_inline_markdown(raw_line).strip()
        if line:
            buckets[current].append(line)
    return buckets


def detect_tags(text: str) -> tuple[str, ...]:
    return tuple(tag for tag, pattern in _TAG_PATTERNS if pattern.search(text))


def detect_intensity(text: str) -> int:
    explicit = _INTENSITY_RE.search(text)
    if explicit is not None:
        return max(1, min(10, int(explicit.group(1))))
    if _HARD_SESSION_RE.search(text):
        return 8
    if _LIGHT_SESSION_RE.search(text):
        return 4
    return DEFAULT_INTENSITY


def detect_technique_mentions(technique_lines: list[str], text: str) -> tuple[str, ...]:
    """Technique-section lines first, then well-known technique names found in prose."""

    mentions = [collapse(_BULLET_RE.sub("", line)) for line in technique_lines]
    mentions.extend(collapse(match.group(0)) for match in _TECHNIQUE_MENTION_RE.finditer(text))
    seen: set[str] = set()
    unique: list[str] = []
    for mention in mentions:
        key = mention.casefold()
        if mention and key not in seen:
            seen.add(key)
            unique.append(mention)
    return tuple(unique[:MAX_TECHNIQUE_MENTIONS])


def _parse_int(value: str | None, fallback: int) -> int:
    if not value:
        return fallback
    match = re.match(r"\s*(\d+)", value)
    return int(match.group(1)) if match else fallback


def _parse_partners(value: str | None) -> tuple[str, ...]:
    if not value:
        return ()
    return tuple(item.strip() for item in value.split(",") if item.strip())[:MAX_PARTNERS]


def _join(lines: list[str]) -> str:
    return collapse(" ".join(_BULLET_RE.sub("", line) for line in lines))


def _clip(text: str, limit: int) -> tuple[str, bool]:
    if len(text) <= limit:
        return text, False
    clipped = text[:limit]
    if " " in clipped:
        clipped = clipped.rsplit(" ", 1)[0]
    return clipped.rstrip(), True


def _first(meta: Mapping[str, str], *keys: str) -> str | None:
    for key in keys:
        value = meta.get(key)
        if value:
            return value
    return None


def split_legacy_content(
    source_type: str,
    raw_content: str,
    *,
    now: datetime,
    captured_at: datetime | None = None,
    source_title: str | None = None,
    quick_add_max_chars: int = 600,
    section_max_chars: int = 1600,
) -> LegacyContent:
    """Derive quick-add, sections, metrics and raw mentions from one legacy note."""

    text = raw_content.replace("\r\n", "\n").replace("\r", "\n")
    if source_type == "google-doc":
        text = html_to_markdown(text)
    warnings: list[str] = []
    meta, body = split_front_matter(text)
    if meta is None:
        warnings.append("Could not read the front matter; it was ignored.")
        meta = {}
    buckets = split_sections(body)

    general = _join(buckets["general"])
    shared = collapse(_first(meta, "shared", "summary") or "") or _join(buckets["shared"]) or general
    private = collapse(_first(meta, "private") or "") or _join(buckets["private"])
    notes = collapse(_first(meta, "quickaddnotes", "notes") or "") or _join(buckets["quick"]) or general or shared

    notes, notes_clipped = _clip(notes, quick_add_max_chars)
    shared, shared_clipped = _clip(shared, section_max_chars)
    private, private_clipped = _clip(private, section_max_chars)
    if notes_clipped or shared_clipped or private_clipped:
        warnings.append("Long imported text was truncated.")
    if not (notes or shared or private):
        warnings.append("No journal text found after removing formatting.")
        notes = DEFAULT_NOTES

    fallback = captured_at or now
    session_time = fallback
    session_time_explicit = captured_at is not None
    raw_date = _first(meta, "date", "time", "sessiondate")
    if raw_date is not None:
        try:
            session_time = parse_timestamp(raw_date)
            session_time_explicit = True
        except InvalidInputError:
            warnings.append(f"Could not read session date '{raw_date}'; using the capture time.")
    elif captured_at is None:
        warnings.append("No session date found; using the import time.")

    scan_text = " ".join(
        part
        for part in (notes, shared, private, _join(buckets["techniques"]), _join(buckets["general"]))
        if part
    )
    rounds = _parse_int(_first(meta, "rounds"), 0)
    if not rounds:
        rounds_match = _ROUNDS_RE.search(scan_text)
        rounds = int(rounds_match.group(1)) if rounds_match else 0
    duration_match = _DURATION_RE.search(scan_text)
    duration = _parse_int(
        _first(meta, "duration", "durationminutes"),
        int(duration_match.group(1)) if duration_match else DEFAULT_DURATION_MINUTES,
    )
    gi_source = " ".join(filter(None, (scan_text, _first(meta, "gi", "giornogi", "class", "session"))))
    tags = detect_tags(scan_text)

    return LegacyContent(
        quick_add=QuickAdd(
            time=isoformat_utc(session_time),
            class_name=collapse(_first(meta, "class", "session") or source_title or "") or DEFAULT_CLASS_NAME,
            gym=_first(meta, "gym") or DEFAULT_GYM,
            partners=_parse_partners(_first(meta, "partners")),
            rounds=rounds,
            notes=notes,
        ),
        sections=EntrySections(shared=shared, private=private),
        session_metrics=SessionMetrics(
            duration_minutes=max(1, duration),
            intensity=detect_intensity(scan_text),
            rounds=rounds,
            gi_or_no_gi="no-gi" if _NO_GI_RE.search(gi_source) else "gi",
            tags=tags,
        ),
        tags=tags,
        raw_technique_mentions=detect_technique_mentions(
            buckets["techniques"],
            " ".join(buckets["general"] + buckets["shared"] + buckets["quick"]),
        ),
        session_time_explicit=session_time_explicit,
        warnings=tuple(warnings),
    )
