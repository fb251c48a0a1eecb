"""The :class:`Client`: an HTTP session plus the gateway-fed caches."""

from __future__ import annotations

import time
from typing import Any, Mapping, Optional, Union

import httpx

from cordkit.auth.manager import AuthManager, create_default_manager
from cordkit.enums import Intents, Status
from cordkit.http.cache import ResponseCache
from cordkit.http.client import HTTPClient
from cordkit.models.activity import PresenceActivity
from cordkit.models.config import AuthConfig, Profile
from cordkit.models.guild import Guild
from cordkit.models.guild_info import Preview
from cordkit.models.user import ClientUser, User
from cordkit.state import ConnectionState
from cordkit.utils import JSON, to_snowflake


class Client:
    """Entry point of the library.

    Either pass a ``token`` (a default profile is built around it) or a
    stored :class:`~cordkit.models.config.Profile`. ``intents`` defaults to
    the profile's declared intents and gates operations that need a
    privileged intent, e.g. :meth:`Guild.request_members`.

    Example::

        async with Client(os.environ["DISCORD_TOKEN"]) as client:
            guild = await client.request_guild(81384788765712384)
            async for page in guild.bans(limit=None):
                ...
    """

    def __init__(
        self,
        token: Optional[str] = None,
        *,
        intents: Union[Intents, int, None] = None,
        profile: Optional[Profile] = None,
        auth_manager: Optional[AuthManager] = None,
        cache: Optional[ResponseCache] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        if profile is None:
            profile = Profile(name="default", auth=AuthConfig())
        if token is not None:
            auth = profile.auth or AuthConfig()
            profile = profile.model_copy(update={"auth": auth.model_copy(update={"token": token})})
        self.profile = profile
        self._intents = Intents.from_value(profile.intents if intents is None else intents)
        self.http = HTTPClient(
            profile,
            auth_manager=auth_manager or create_default_manager(),
            cache=cache,
            transport=transport,
        )
        self._connection = ConnectionState(self)

    async def __aenter__(self) -> Client:
        await self.http.open()
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.close()

    async def close(self) -> None:
        await self.http.close()

    # ------------------------------------------------------------------ #
    # Cache accessors
    # ------------------------------------------------------------------ #

    @property
    def intents(self) -> Intents:
        return self._intents

    @property
    def user(self) -> Optional[ClientUser]:
        """The authenticated user, known after ``READY`` or :meth:`fetch_current_user`."""
        return self._connection.user

    @property
    def guilds(self) -> list[Guild]:
        return self._connection.guilds.values()

    @property
    def users(self) -> list[User]:
        return self._connection.users.values()

    def get_guild(self, guild_id: Any) -> Optional[Guild]:
        return self._connection.guilds.get(to_snowflake(guild_id))

    def get_user(self, user_id: Any) -> Optional[User]:
        return self._connection.users.get(to_snowflake(user_id))

    def dispatch(self, event: str, data: Mapping[str, Any]) -> None:
        """Feed one gateway dispatch into the caches."""
        self._connection.dispatch(event, data)

    # ------------------------------------------------------------------ #
    # REST
    # ------------------------------------------------------------------ #

    async def request_guild(self, guild_id: Any, *, with_counts: bool = True) -> Guild:
        """Fetch a guild over REST. The result is not added to the cache."""
        data = await self.http.get_guild(to_snowflake(guild_id), with_counts=with_counts)
        return Guild.from_snapshot(data, self)

    async def request_user(self, user_id: Any) -> User:
        data = await self.http.get_user(to_snowflake(user_id))
        return User.from_snapshot(data, self)

    async def request_guild_preview(self, guild_id: Any) -> Preview:
        """Fetch a guild's public preview. Works for discoverable guilds the bot is not in."""
        data = await self.http.get_guild_preview(to_snowflake(guild_id))
        return Preview.from_snapshot(data, self)

    async def fetch_current_user(self) -> ClientUser:
        data = await self.http.get_current_user()
        if self._connection.user is None:
            user = ClientUser.from_snapshot(data, self)
            self._connection.user = user
            self._connection.users.put(user)
        else:
            self._connection.user.update(data)
        return self._connection.user

    async def leave_guild(self, guild: Any) -> None:
        await self.http.leave_guild(to_snowflake(guild))

    # ------------------------------------------------------------------ #
    # Gateway payloads
    # ------------------------------------------------------------------ #

    def build_presence_update(
        self,
        status: Status = Status.ONLINE,
        activity: Optional[PresenceActivity] = None,
    ) -> JSON:
        """The opcode 3 payload that sets the bot's status and activity."""
        status = Status(status)
        if status is Status.OFFLINE:
            status = Status.INVISIBLE
        return {
            "op": 3,
            "d": {
                "since": int(time.time() * 1000) if status is Status.IDLE else None,
                "activities": [activity.to_payload()] if activity is not None else [],
                "status": status.value,
                "afk": status is Status.IDLE,
            },
        }
