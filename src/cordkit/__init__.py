"""cordkit -- an async Discord REST client with gateway-synchronised caches.

Entities (guilds, members, roles, channels, ...) are pydantic models decoded
from API snapshots and kept current by merging the partial-update fragments
that gateway events carry. List endpoints that page by snowflake cursor are
exposed as async iterators.

Typical use::

    async with Client(token) as client:
        guild = await client.request_guild(guild_id)
        bans = await guild.bans(limit=None).collect()

Modules:
    client: The Client entry point.
    state: Gateway event handlers that keep the caches in sync.
    models: Pydantic models for every API object.
    http: Async transport and REST endpoint wrappers.
    merge, pagination, cache: The cache-sync and paging primitives.
    config, auth, output, app: Profiles, credentials, diagnostics and the CLI.
"""

__version__ = "0.1.0"

from cordkit.client import Client  # noqa: E402
from cordkit.enums import Intents, Permissions, Status  # noqa: E402
from cordkit.exceptions import (  # noqa: E402
    AuthError,
    BadRequestError,
    ConfigError,
    ConnectionError_,
    CordkitError,
    DecodeError,
    HTTPError,
    InvalidUsageError,
    NotFoundError,
    RateLimitedError,
    ServerError,
)
from cordkit.utils import UNSET, File  # noqa: E402

__all__ = [
    "AuthError",
    "BadRequestError",
    "Client",
    "ConfigError",
    "ConnectionError_",
    "CordkitError",
    "DecodeError",
    "File",
    "HTTPError",
    "Intents",
    "InvalidUsageError",
    "NotFoundError",
    "Permissions",
    "RateLimitedError",
    "ServerError",
    "Status",
    "UNSET",
    "__version__",
]
