"""Exception hierarchy for the RediSearch client.

Every exception raised by this library is a subclass of
:class:`RediSearchError`.  Lower-level ``redis.exceptions.*`` errors are
caught at the transport boundary and re-raised as the matching
RediSearch-specific type with the server message left untouched.
"""

from __future__ import annotations


class RediSearchError(Exception):
    """Base exception for all RediSearch client errors."""


class RediSearchConnectionError(RediSearchError):
    """Raised when the client cannot reach the Redis server."""


class RediSearchTimeoutError(RediSearchError):
    """Raised when a command exceeds the transport timeout."""


class RediSearchCommandError(RediSearchError):
    """Raised when the server answers a command with an error reply."""


class RediSearchIndexExistsError(RediSearchCommandError):
    """Raised when creating an index that already exists."""


class RediSearchValidationError(RediSearchError, ValueError):
    """Raised when a request or configuration is missing required values.

    Always raised before anything is sent to the server.
    """


class RediSearchTargetError(RediSearchError, TypeError):
    """Raised when a search output target has an unsupported shape."""


class RediSearchResponseError(RediSearchError):
    """Raised when a server reply does not have the expected layout."""
