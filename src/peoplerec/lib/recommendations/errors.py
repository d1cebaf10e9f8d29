"""Errors surfaced by the recommendation pipeline."""


class RecommendationError(Exception):
    """Base class for errors that fail a recommendation request.

    ``kind`` is the structured error kind returned to the caller and
    ``message`` is safe to show to them.
    """

    kind = "Internal"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ProfileNotFoundError(RecommendationError):
    kind = "NotFound"


class ExclusionFetchError(RecommendationError):
    """The requester's following list could not be read in full."""

    kind = "Internal"
