"""Extractor interface for pluggable field extraction implementations."""

from abc import ABC, abstractmethod
from collections.abc import Sequence

from trainlog.extraction.types import ExtractionCandidates, TextSpan


class FieldExtractorInterface(ABC):
    """Abstract field extractor interface."""

    @abstractmethod
    def extract(self, spans: Sequence[TextSpan]) -> ExtractionCandidates:
        """Extract single-value candidates and multi-value lists from normalized spans."""
