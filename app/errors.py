"""
app/errors.py

Exception taxonomy for the places proxy.

Startup errors (``ConfigError``, ``DatabaseConnectionError``) are fatal and
terminate the process. Request errors are mapped to HTTP statuses by the
router. ``PersistenceError`` never leaves the execution-log worker.
"""

from __future__ import annotations


class PlacesProxyError(Exception):
    """Base exception for all service failures."""


class ConfigError(PlacesProxyError):
    """Raised when the env file is missing, unreadable or incomplete."""


class DatabaseConnectionError(PlacesProxyError):
    """Raised when the execution-log database cannot be reached at startup."""


class UpstreamFetchError(PlacesProxyError):
    """
    Raised when the places API cannot be fetched or decoded.

    ``page`` is the page number that failed, when known.
    """

    def __init__(self, message: str, *, page: int | None = None) -> None:
        super().__init__(message)
        self.page = page


class UnsupportedFormatError(PlacesProxyError):
    """Raised when a serialization format string is not recognised."""

    def __init__(self, requested_format: str) -> None:
        super().__init__(f"Unsupported serialization format '{requested_format}'.")
        self.format = requested_format


class SerializationError(PlacesProxyError):
    """Raised when records cannot be encoded or a payload cannot be decoded."""


class PersistenceError(PlacesProxyError):
    """Raised when an execution log row cannot be written."""


class SinkClosedError(PlacesProxyError):
    """Raised when a record is enqueued after the execution-log sink was closed."""


class SinkFullError(PlacesProxyError):
    """Raised when the execution-log queue stays full past the enqueue timeout."""
