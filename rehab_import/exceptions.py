"""Errors raised for caller mistakes during an import review.

Data conditions (missing suggestions, empty extractions, sets with no active
members) never raise; they fall back to conservative defaults.
"""


class ImportReviewError(Exception):
    """Base class for import review errors."""


class InvalidDecisionError(ImportReviewError, ValueError):
    """A decision update would leave a record in an invalid state."""


class UnknownItemError(ImportReviewError, LookupError):
    """A command referenced a temp id that is not part of the session."""

    def __init__(self, kind: str, temp_id: str):
        self.kind = kind
        self.temp_id = temp_id
        super().__init__(f"Unknown {kind} temp id: {temp_id}")
