"""
Exceptions raised by the Matomo client.

Transport failures (httpx.HTTPError and friends) are not wrapped; they
reach the caller exactly as httpx raised them.
"""
from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .core.validation import ValidationIssue


class MatomoClientError(Exception):
    """Base class for every error raised by this package."""
    pass


class ConfigurationError(MatomoClientError, ValueError):
    """Raised when the client configuration is missing or incomplete."""
    pass


class InvalidParameterError(MatomoClientError, ValueError):
    """Raised when a report method receives an absent or out-of-range argument."""
    pass


class UnexpectedMatomoResponse(MatomoClientError):
    """
    The API answered, but the payload did not match the expected report shape.

    Attributes:
        details: Every issue found while validating the payload
    """

    def __init__(self, details: list[ValidationIssue]):
        super().__init__(
            "The Matomo API returned an unexpected response and could not be safely typed"
        )
        self.details = list(details)


class MatomoResponseError(MatomoClientError):
    """Raised when Matomo returns its error payload (HTTP 200, result=error)."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(f"Matomo error response: {self.message}")
