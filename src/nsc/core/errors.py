"""Exception hierarchy for the Nightscout client.

Every failure surfaced to callers is a ``NightscoutError`` subclass, so a
single ``except NightscoutError`` covers transport, HTTP status and payload
problems alike.
"""

from __future__ import annotations


class NightscoutError(Exception):
    """Base exception for Nightscout client errors."""


class InvalidUrlError(NightscoutError):
    """The base URL or a request URL could not be parsed."""


class TransportError(NightscoutError):
    """The request never produced an HTTP response (connection, timeout)."""


class ApiError(NightscoutError):
    """Nightscout answered with a non-success status other than 401."""

    def __init__(self, status: int, message: str) -> None:
        super().__init__(f"Nightscout API error {status}: {message}")
        self.status = status
        self.message = message


class AuthenticationError(NightscoutError):
    """Nightscout rejected the request (401): API secret missing or invalid."""

    def __init__(self, message: str = "Authentication failed: API secret is missing or invalid") -> None:
        super().__init__(message)


class DeserializationError(NightscoutError):
    """The response body did not match the expected payload shape."""


class NotFoundError(NightscoutError):
    """A singular lookup returned no data."""


class UnsupportedOperationError(NightscoutError):
    """The requested HTTP verb is not supported by a query."""
