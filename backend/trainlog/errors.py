"""Error types shared by the extraction engine and the import builder."""


class InvalidInputError(ValueError):
    """Raised when caller-supplied input is malformed or unsupported."""


class ReconciliationError(RuntimeError):
    """Raised when the suggestion reconciler is asked for an impossible transition."""


class EntryNotFoundError(LookupError):
    """Raised when a journal entry does not exist for the athlete."""
