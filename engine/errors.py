"""
errors.py

Exception types raised by the engine. Input problems derive from ValueError
so callers that already guard with ``except ValueError`` keep working.
"""


class WordleError(Exception):
    """Base class for every error raised by the engine."""


class WordFormatError(WordleError, ValueError):
    """A vocabulary entry or guess is not a valid fixed-length word."""


class FeedbackFormatError(WordleError, ValueError):
    """A feedback string or color sequence has the wrong shape or symbols."""


class ContradictionError(WordleError):
    """The accumulated constraint rules out every word in the vocabulary."""

    def __init__(self, message: str = "no consistent words remain") -> None:
        super().__init__(message)


class ConstraintConflictError(WordleError):
    """Two constraints pin the same position to different letters."""


class SearchCancelled(WordleError):
    """A search was stopped through its cancel event."""
