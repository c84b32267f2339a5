"""Structured metadata extraction schemas."""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from trainlog.extraction.types import (
    ConfirmField,
    CorrectField,
    FieldSuggestion,
    JournalInput,
    MetadataInstruction,
    RejectField,
)


class ConfirmInstructionIn(BaseModel):
    action: Literal["confirm"]
    field: str
    value: str | None = None
    note: str | None = None

    def to_instruction(self) -> MetadataInstruction:
        return ConfirmField(field=self.field, value=self.value, note=self.note)


class CorrectInstructionIn(BaseModel):
    action: Literal["correct"]
    field: str
    correction_value: str
    note: str | None = None

    def to_instruction(self) -> MetadataInstruction:
        return CorrectField(field=self.field, correction_value=self.correction_value, note=self.note)


class RejectInstructionIn(BaseModel):
    action: Literal["reject"]
    field: str
    note: str | None = None

    def to_instruction(self) -> MetadataInstruction:
        return RejectField(field=self.field, note=self.note)


InstructionIn = Annotated[
    ConfirmInstructionIn | CorrectInstructionIn | RejectInstructionIn,
    Field(discriminator="action"),
]


class FieldSuggestionPayload(BaseModel):
    """Per-field suggestion as stored and returned by the API."""

    model_config = ConfigDict(from_attributes=True)

    field: str
    value: str | None
    confidence: Literal["high", "medium", "low"]
    status: Literal["pending", "confirmed", "corrected", "rejected"]
    updated_at: str
    correction_value: str | None = None
    confirmation_prompt: str | None = None
    source_excerpt: str | None = None
    note: str | None = None
    updated_by_role: Literal["athlete", "coach"] | None = None

    def to_suggestion(self) -> FieldSuggestion:
        return FieldSuggestion(**self.model_dump())


class ConfidenceFlagRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    field: str
    reason: Literal["unresolved", "low_confidence", "conflicting_candidates"]
    confidence: Literal["high", "medium", "low"] | None = None
    note: str | None = None


class ExtractionResultRead(BaseModel):
    """Serialized extraction run."""

    model_config = ConfigDict(from_attributes=True)

    structured: dict[str, str]
    suggestions: list[FieldSuggestionPayload]
    concepts: list[str]
    failures: list[str]
    conditioning_issues: list[str]
    confidence_flags: list[ConfidenceFlagRead]
    generated_at: str


class StructuredExtractRequest(BaseModel):
    """One extraction run over journal text and prior metadata state."""

    quick_add_notes: str = ""
    shared_section: str = ""
    private_section: str = ""
    raw_technique_mentions: list[str] = Field(default_factory=list)
    prior_structured: dict[str, str] = Field(default_factory=dict)
    prior_suggestions: list[FieldSuggestionPayload] = Field(default_factory=list)
    instructions: list[InstructionIn] = Field(default_factory=list)
    reevaluate_fields: list[str] = Field(default_factory=list)
    actor_role: Literal["athlete", "coach"] = "athlete"

    def to_journal_input(self) -> JournalInput:
        return JournalInput(
            quick_add_notes=self.quick_add_notes,
            shared_section=self.shared_section,
            private_section=self.private_section,
            raw_technique_mentions=tuple(self.raw_technique_mentions),
            prior_structured=self.prior_structured,
            instructions=tuple(instruction.to_instruction() for instruction in self.instructions),
        )


class MetadataReviewRequest(BaseModel):
    """Confirm, correct or reject suggestions on a committed entry."""

    instructions: list[InstructionIn] = Field(default_factory=list)
    structured: dict[str, str] | None = None
    reevaluate_fields: list[str] = Field(default_factory=list)
    actor_role: Literal["athlete", "coach"] = "athlete"

    @model_validator(mode="after")
    def validate_non_empty_review(self) -> "MetadataReviewRequest":
        if not self.instructions and self.structured is None and not self.reevaluate_fields:
            raise ValueError("At least one of instructions, structured or reevaluate_fields must be provided.")
        return self
