"""Structured metadata extraction pipeline pieces."""
