"""Structured training-journal metadata extraction and legacy import reconciliation."""
