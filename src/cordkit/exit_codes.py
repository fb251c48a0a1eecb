"""Numeric process exit codes used by the ``cordkit`` command line.

Each constant is attached to a :class:`~cordkit.exceptions.CordkitError`
subclass, so shell wrappers can tell failure classes apart without parsing
stderr::

    $ cordkit guild show 1234
    $ echo $?
    4   # EXIT_NOT_FOUND -- unknown guild
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""Invalid arguments, or the API rejected the request body (HTTP 400)."""

EXIT_AUTH_FAILURE = 3
"""The token was rejected or lacks access (HTTP 401/403)."""

EXIT_NOT_FOUND = 4
"""The requested resource does not exist (HTTP 404)."""

EXIT_SERVER_ERROR = 5
"""The API kept answering with HTTP 5xx after all retries."""

EXIT_CONNECTION_ERROR = 6
"""A network-level error occurred (timeout, DNS failure, connection refused)."""

EXIT_DECODE_ERROR = 7
"""A response could not be decoded into its model."""

EXIT_RATE_LIMITED = 8
"""The API answered HTTP 429."""
