"""Controlled vocabularies for structured journal metadata."""

from trainlog.vocabulary.fields import (
    MULTI_VALUE_FIELDS,
    STRUCTURED_FIELDS,
    STRUCTURED_FIELD_SET,
    normalize_field_key,
)
from trainlog.vocabulary.tables import (
    CONCEPT_VOCABULARY,
    CONDITIONING_VOCABULARY,
    FAILURE_VOCABULARY,
    OUTCOME_VOCABULARY,
    POSITION_VOCABULARY,
    TECHNIQUE_VOCABULARY,
    FieldVocabulary,
    VocabularyEntry,
)

__all__ = [
    "CONCEPT_VOCABULARY",
    "CONDITIONING_VOCABULARY",
    "FAILURE_VOCABULARY",
    "MULTI_VALUE_FIELDS",
    "OUTCOME_VOCABULARY",
    "POSITION_VOCABULARY",
    "STRUCTURED_FIELDS",
    "STRUCTURED_FIELD_SET",
    "TECHNIQUE_VOCABULARY",
    "FieldVocabulary",
    "VocabularyEntry",
    "normalize_field_key",
]
