"""Typed extraction inputs and outputs independent of persistence."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import ClassVar, Literal

ConfidenceLevel = Literal["high", "medium", "low"]
SuggestionStatus = Literal["pending", "confirmed", "corrected", "rejected"]
SpanSource = Literal["quick_add", "shared", "private", "raw_mention"]
ActorRole = Literal["athlete", "coach"]
FlagReason = Literal["unresolved", "low_confidence", "conflicting_candidates"]

CONFIDENCE_RANK: Mapping[str, int] = MappingProxyType({"low": 1, "medium": 2, "high": 3})
SPAN_SOURCE_ORDER: tuple[str, ...] = ("quick_add", "shared", "private", "raw_mention")
RESOLVED_STATUSES = frozenset({"confirmed", "corrected", "rejected"})


def _frozen_mapping(value: Mapping[str, str] | None) -> Mapping[str, str]:
    return MappingProxyType(dict(value or {}))


@dataclass(frozen=True, slots=True)
class TextSpan:
    """A normalized, sentence-bounded slice of one text source."""

    source: SpanSource
    order: int
    text: str
    raw: str
    start: int
    end: int
    mention_index: int | None = None

    @property
    def ref(self) -> str:
        if self.mention_index is not None:
            return f"{self.source}[{self.mention_index}]:{self.start}-{self.end}"
        return f"{self.source}:{self.start}-{self.end}"


@dataclass(frozen=True, slots=True)
class FieldCandidate:
    """One extractor guess for one single-value field."""

    field: str
    value: str
    confidence: ConfidenceLevel
    span_ref: str
    span_source: SpanSource
    source_excerpt: str
    matched_phrase: str = ""


@dataclass(frozen=True, slots=True)
class FieldSuggestion:
    """Durable, caller-facing record of the engine's belief about one field."""

    field: str
    value: str | None
    confidence: ConfidenceLevel
    status: SuggestionStatus
    updated_at: str
    correction_value: str | None = None
    confirmation_prompt: str | None = None
    source_excerpt: str | None = None
    note: str | None = None
    updated_by_role: ActorRole | None = None

    @property
    def effective_value(self) -> str | None:
        """Value a resolved suggestion asserts for the structured field."""

        if self.status == "rejected":
            return None
        if self.status == "corrected":
            return self.correction_value
        return self.value


@dataclass(frozen=True, slots=True)
class ConfidenceFlag:
    """Signal that a field's value is uncertain and needs the athlete's attention."""

    field: str
    reason: FlagReason
    confidence: ConfidenceLevel | None = None
    note: str | None = None


@dataclass(frozen=True, slots=True)
class ConfirmField:
    """Caller asserts the suggestion for ``field`` is right (optionally with a value)."""

    action: ClassVar[str] = "confirm"

    field: str
    value: str | None = None
    note: str | None = None


@dataclass(frozen=True, slots=True)
class CorrectField:
    """Caller replaces the extracted value for ``field`` with ``correction_value``."""

    action: ClassVar[str] = "correct"

    field: str
    correction_value: str
    note: str | None = None


@dataclass(frozen=True, slots=True)
class RejectField:
    """Caller rejects the suggestion for ``field``."""

    action: ClassVar[str] = "reject"

    field: str
    note: str | None = None


MetadataInstruction = ConfirmField | CorrectField | RejectField


@dataclass(frozen=True, slots=True)
class JournalInput:
    """Raw material for one extraction run."""

    quick_add_notes: str = ""
    shared_section: str = ""
    private_section: str = ""
    raw_technique_mentions: tuple[str, ...] = ()
    prior_structured: Mapping[str, str] = field(default_factory=dict)
    instructions: tuple[MetadataInstruction, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "raw_technique_mentions", tuple(self.raw_technique_mentions))
        object.__setattr__(self, "prior_structured", _frozen_mapping(self.prior_structured))
        object.__setattr__(self, "instructions", tuple(self.instructions))


@dataclass(frozen=True, slots=True)
class ExtractionCandidates:
    """Raw extractor output before reconciliation."""

    candidates: Mapping[str, FieldCandidate] = field(default_factory=dict)
    conflicts: Mapping[str, tuple[str, ...]] = field(default_factory=dict)
    concepts: tuple[str, ...] = ()
    failures: tuple[str, ...] = ()
    conditioning_issues: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class ExtractionResult:
    """Full output of one engine run."""

    structured: Mapping[str, str]
    suggestions: tuple[FieldSuggestion, ...]
    concepts: tuple[str, ...]
    failures: tuple[str, ...]
    conditioning_issues: tuple[str, ...]
    confidence_flags: tuple[ConfidenceFlag, ...]
    generated_at: str

    def suggestion_for(self, field_name: str) -> FieldSuggestion | None:
        for suggestion in self.suggestions:
            if suggestion.field == field_name:
                return suggestion
        return None
