"""
Exception types raised inside the matching engine.

Most of these never reach a caller: image and coordinate errors are
absorbed where they occur and degrade a single signal. Only
CandidatePoolError is allowed to escape find_matches().
"""


class MatchingError(Exception):
    """Base class for matching engine errors."""


class UnreadableImageError(MatchingError):
    """An image could not be found, decoded or resized."""

    def __init__(self, path, reason: str = "could not decode"):
        self.path = path
        self.reason = reason
        super().__init__(f"Unreadable image {path!r}: {reason}")


class InvalidCoordinateError(MatchingError, ValueError):
    """A latitude/longitude value is not numeric or out of range."""


class CandidatePoolError(MatchingError):
    """The candidate pool for a new item could not be obtained."""
