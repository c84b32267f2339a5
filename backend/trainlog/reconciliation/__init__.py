"""Suggestion reconciliation package."""

from trainlog.reconciliation.reconciler import SuggestionReconciler, same_value

__all__ = [
    "SuggestionReconciler",
    "same_value",
]
