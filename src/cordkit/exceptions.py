"""Exception hierarchy for cordkit.

Every exception derives from :class:`CordkitError` and carries an
``exit_code`` taken from :mod:`cordkit.exit_codes`. The CLI entry point
catches ``CordkitError`` and exits with that code; library users can catch
the narrower classes.

Subclass hierarchy::

    CordkitError (exit 1)
    +-- InvalidUsageError   (exit 2)
    +-- HTTPError           (exit 1)
    |   +-- BadRequestError     (exit 2)
    |   +-- AuthError           (exit 3)
    |   +-- NotFoundError       (exit 4)
    |   +-- RateLimitedError    (exit 8)
    |   +-- ServerError         (exit 5)
    +-- ConnectionError_    (exit 6)
    +-- DecodeError         (exit 7)
    +-- ConfigError         (exit 1)
"""

from __future__ import annotations

from cordkit.exit_codes import (
    EXIT_AUTH_FAILURE,
    EXIT_CONNECTION_ERROR,
    EXIT_DECODE_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_NOT_FOUND,
    EXIT_RATE_LIMITED,
    EXIT_SERVER_ERROR,
)


class CordkitError(Exception):
    """Base exception for all cordkit errors.

    Args:
        message: Human-readable error description.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(CordkitError):
    """Raised when a method is called with arguments the API would refuse."""

    exit_code = EXIT_INVALID_USAGE


class HTTPError(CordkitError):
    """An error response from the API.

    Attributes:
        status: HTTP status code of the response.
        code: Discord JSON error code from the body (``0`` when absent).
        text: The ``message`` field of the error body, or the raw body.
    """

    def __init__(self, message: str, status: int, code: int = 0, text: str = ""):
        super().__init__(message)
        self.status = status
        self.code = code
        self.text = text


class BadRequestError(HTTPError):
    """HTTP 400: the request body or query was rejected."""

    exit_code = EXIT_INVALID_USAGE


class AuthError(HTTPError):
    """HTTP 401/403: the token is invalid or lacks the needed permission."""

    exit_code = EXIT_AUTH_FAILURE


class NotFoundError(HTTPError):
    """HTTP 404: the resource does not exist."""

    exit_code = EXIT_NOT_FOUND


class RateLimitedError(HTTPError):
    """HTTP 429. ``retry_after`` holds the advised wait in seconds."""

    exit_code = EXIT_RATE_LIMITED

    def __init__(
        self,
        message: str,
        status: int = 429,
        code: int = 0,
        text: str = "",
        retry_after: float = 0.0,
    ):
        super().__init__(message, status, code, text)
        self.retry_after = retry_after


class ServerError(HTTPError):
    """HTTP 5xx after the transport exhausted its retries."""

    exit_code = EXIT_SERVER_ERROR


class ConnectionError_(CordkitError):
    """Raised on network-level failures (timeout, DNS resolution, connection refused).

    Named with a trailing underscore to avoid shadowing the built-in
    ``ConnectionError``.
    """

    exit_code = EXIT_CONNECTION_ERROR


class DecodeError(CordkitError):
    """A full snapshot was missing a required field or carried a malformed one."""

    exit_code = EXIT_DECODE_ERROR


class ConfigError(CordkitError):
    """Raised for configuration problems (missing profiles, invalid JSON, bad credential sources)."""

    exit_code = EXIT_GENERIC_FAILURE
