"""
Error types raised by the matching engine.
"""

from typing import Optional


class MatchingError(Exception):
    """Base class for all matching engine errors."""


class InvalidInput(MatchingError):
    """A resume or job posting is malformed (bad band, overlapping skills, bad JSON)."""


class MalformedResponse(MatchingError):
    """The external analysis collaborator returned data outside the expected schema."""

    def __init__(self, message: str, raw_payload: Optional[str] = None):
        super().__init__(message)
        self.raw_payload = raw_payload


class TransportFailure(MatchingError):
    """Network, timeout or authentication error reaching the analysis collaborator."""

    def __init__(
        self,
        message: str,
        retryable: bool = True,
        status_code: Optional[int] = None,
    ):
        super().__init__(message)
        self.retryable = retryable
        self.status_code = status_code


class ConfigurationError(MatchingError):
    """Required configuration (usually an API credential) is missing."""


class AnalysisCancelled(MatchingError):
    """The caller aborted an external analysis before it completed."""
