"""Gateway cache synchronisation.

:class:`ConnectionState` owns the client-level caches and routes dispatch
events into them. Snapshots (``GUILD_CREATE``, ``*_CREATE``) build entities,
fragments (``*_UPDATE``) are merged into the cached entity with
:meth:`~cordkit.models.base.Entity.update`, and removal events drop them.
An event for something not cached is reported through ``debug`` and
otherwise ignored.

Handlers are the ``parse_<event_name>`` methods; :meth:`dispatch` looks
them up by the upper-cased event name.
"""

from __future__ import annotations

import inspect
from typing import Any, Callable, Mapping, Optional

from cordkit.cache import EntityCache
from cordkit.exceptions import DecodeError
from cordkit.models.channel import GuildChannel
from cordkit.models.guild import Guild
from cordkit.models.member import Member
from cordkit.models.role import Role
from cordkit.models.scheduled_event import ScheduledEvent
from cordkit.models.user import ClientUser, User
from cordkit.output import debug

Handler = Callable[[Mapping[str, Any]], None]


class ConnectionState:
    """Client-level caches plus the event handlers that keep them current.

    Args:
        client: Handle given to every entity built from an event.
    """

    def __init__(self, client: Any = None) -> None:
        self.client = client
        self.user: Optional[ClientUser] = None
        self.guilds: EntityCache[Guild] = EntityCache()
        self.users: EntityCache[User] = EntityCache()
        self.parsers: dict[str, Handler] = {
            name[len("parse_"):].upper(): func
            for name, func in inspect.getmembers(self, inspect.ismethod)
            if name.startswith("parse_")
        }

    def clear(self) -> None:
        self.user = None
        self.guilds.clear()
        self.users.clear()

    def dispatch(self, event: str, data: Mapping[str, Any]) -> None:
        """Route one gateway dispatch (``t`` and ``d`` of the payload)."""
        handler = self.parsers.get(event)
        if handler is None:
            debug(f"Ignoring unknown event {event}")
            return
        handler(data)

    # ------------------------------------------------------------------ #
    # Users
    # ------------------------------------------------------------------ #

    def store_user(self, data: Mapping[str, Any]) -> User:
        """Return the shared :class:`User` for ``data["id"]``, creating or refreshing it."""
        user = self.users.get(int(data["id"]))
        if user is not None:
            user.update(data)
            return user
        return self.users.put(User.from_snapshot(data, self.client))

    def _share_user(self, user: User) -> User:
        existing = self.users.get(user.id)
        if existing is None:
            return self.users.put(user)
        return existing

    def _share_member_user(self, member: Member) -> None:
        shared = self._share_user(member.user)
        if shared is not member.user:
            member.user = shared

    # ------------------------------------------------------------------ #
    # Lookups
    # ------------------------------------------------------------------ #

    def _guild_for(self, event: str, data: Mapping[str, Any]) -> Optional[Guild]:
        guild_id = data.get("guild_id")
        guild = self.guilds.get(int(guild_id)) if guild_id is not None else None
        if guild is None:
            debug(f"{event} for unknown guild {guild_id}, ignoring")
        return guild

    # ------------------------------------------------------------------ #
    # Session and user events
    # ------------------------------------------------------------------ #

    def parse_ready(self, data: Mapping[str, Any]) -> None:
        self.clear()
        self.user = ClientUser.from_snapshot(data["user"], self.client)
        self.users.put(self.user)
        pending = len(data.get("guilds") or ())
        debug(f"READY as {self.user} with {pending} guild(s) pending")

    def parse_user_update(self, data: Mapping[str, Any]) -> None:
        if self.user is None:
            debug("USER_UPDATE before READY, ignoring")
            return
        self.user.update(data)

    def parse_presence_update(self, data: Mapping[str, Any]) -> None:
        guild = self._guild_for("PRESENCE_UPDATE", data)
        if guild is None:
            return
        user = data.get("user") or {}
        # Presence user objects are partial; only refresh users already known.
        if "id" in user and len(user) > 1 and int(user["id"]) in self.users:
            self.store_user(user)
        guild._set_presence(data)

    # ------------------------------------------------------------------ #
    # Guilds
    # ------------------------------------------------------------------ #

    def parse_guild_create(self, data: Mapping[str, Any]) -> None:
        guild = Guild.from_snapshot(data, self.client)
        for member in guild.members:
            self._share_member_user(member)
        previous = self.guilds.get(guild.id)
        if previous is not None and previous.unavailable:
            debug(f"Guild {guild.id} is available again")
        self.guilds.put(guild)

    def parse_guild_update(self, data: Mapping[str, Any]) -> None:
        guild = self.guilds.get(int(data["id"]))
        if guild is None:
            debug(f"GUILD_UPDATE for unknown guild {data['id']}, ignoring")
            return
        guild.update(data)

    def parse_guild_delete(self, data: Mapping[str, Any]) -> None:
        guild_id = int(data["id"])
        if data.get("unavailable"):
            guild = self.guilds.get(guild_id)
            if guild is not None:
                guild._mark_unavailable()
            return
        if self.guilds.remove(guild_id) is None:
            debug(f"GUILD_DELETE for unknown guild {guild_id}, ignoring")

    def parse_guild_emojis_update(self, data: Mapping[str, Any]) -> None:
        guild = self._guild_for("GUILD_EMOJIS_UPDATE", data)
        if guild is not None:
            guild.update({"emojis": data.get("emojis", [])})

    def parse_guild_stickers_update(self, data: Mapping[str, Any]) -> None:
        guild = self._guild_for("GUILD_STICKERS_UPDATE", data)
        if guild is not None:
            guild.update({"stickers": data.get("stickers", [])})

    # ------------------------------------------------------------------ #
    # Members
    # ------------------------------------------------------------------ #

    def parse_guild_member_add(self, data: Mapping[str, Any]) -> None:
        guild = self._guild_for("GUILD_MEMBER_ADD", data)
        if guild is None:
            return
        member = Member.from_snapshot(data, self.client, guild_id=guild.id)
        self._share_member_user(member)
        guild._add_member(member)
        if isinstance(guild.member_count, int):
            guild.member_count += 1

    def parse_guild_member_update(self, data: Mapping[str, Any]) -> None:
        guild = self._guild_for("GUILD_MEMBER_UPDATE", data)
        if guild is None:
            return
        user = self.store_user(data["user"])
        member = guild.get_member(user.id)
        if member is None:
            try:
                member = Member.from_snapshot(data, self.client, guild_id=guild.id)
            except DecodeError as exc:
                debug(f"Could not cache member {user.id} of guild {guild.id}: {exc}")
                return
            member.user = user
            guild._add_member(member)
            return
        member.update({k: v for k, v in data.items() if k not in ("user", "guild_id")})

    def parse_guild_member_remove(self, data: Mapping[str, Any]) -> None:
        guild = self._guild_for("GUILD_MEMBER_REMOVE", data)
        if guild is None:
            return
        user_id = int(data["user"]["id"])
        if guild._remove_member(user_id) is None:
            debug(f"GUILD_MEMBER_REMOVE for uncached member {user_id}")
        if isinstance(guild.member_count, int) and guild.member_count > 0:
            guild.member_count -= 1

    # ------------------------------------------------------------------ #
    # Roles
    # ------------------------------------------------------------------ #

    def parse_guild_role_create(self, data: Mapping[str, Any]) -> None:
        guild = self._guild_for("GUILD_ROLE_CREATE", data)
        if guild is not None:
            guild._upsert_role(Role.from_snapshot(data["role"], self.client, guild_id=guild.id))

    def parse_guild_role_update(self, data: Mapping[str, Any]) -> None:
        guild = self._guild_for("GUILD_ROLE_UPDATE", data)
        if guild is None:
            return
        fragment = data["role"]
        role = guild.get_role(int(fragment["id"]))
        if role is None:
            guild._upsert_role(Role.from_snapshot(fragment, self.client, guild_id=guild.id))
        else:
            role.update(fragment)

    def parse_guild_role_delete(self, data: Mapping[str, Any]) -> None:
        guild = self._guild_for("GUILD_ROLE_DELETE", data)
        if guild is not None:
            guild._remove_role(int(data["role_id"]))

    # ------------------------------------------------------------------ #
    # Channels and threads
    # ------------------------------------------------------------------ #

    def parse_channel_create(self, data: Mapping[str, Any]) -> None:
        guild = self._guild_for("CHANNEL_CREATE", data)
        if guild is None:
            return
        try:
            channel = GuildChannel.from_snapshot(data, self.client, guild_id=guild.id)
        except DecodeError as exc:
            debug(f"Skipping channel {data.get('id')}: {exc}")
            return
        guild._add_channel(channel)

    def parse_channel_update(self, data: Mapping[str, Any]) -> None:
        guild = self._guild_for("CHANNEL_UPDATE", data)
        if guild is None:
            return
        channel = guild.get_channel(int(data["id"]))
        if channel is None:
            self.parse_channel_create(data)
        else:
            channel.update(data)

    def parse_channel_delete(self, data: Mapping[str, Any]) -> None:
        guild = self._guild_for("CHANNEL_DELETE", data)
        if guild is not None:
            guild._remove_channel(int(data["id"]))

    parse_thread_create = parse_channel_create
    parse_thread_update = parse_channel_update
    parse_thread_delete = parse_channel_delete

    # ------------------------------------------------------------------ #
    # Scheduled events
    # ------------------------------------------------------------------ #

    def parse_guild_scheduled_event_create(self, data: Mapping[str, Any]) -> None:
        guild = self._guild_for("GUILD_SCHEDULED_EVENT_CREATE", data)
        if guild is not None:
            guild._upsert_scheduled_event(ScheduledEvent.from_snapshot(data, self.client))

    def parse_guild_scheduled_event_update(self, data: Mapping[str, Any]) -> None:
        guild = self._guild_for("GUILD_SCHEDULED_EVENT_UPDATE", data)
        if guild is None:
            return
        event = guild.get_scheduled_event(int(data["id"]))
        if event is None:
            guild._upsert_scheduled_event(ScheduledEvent.from_snapshot(data, self.client))
        else:
            event.update(data)

    def parse_guild_scheduled_event_delete(self, data: Mapping[str, Any]) -> None:
        guild = self._guild_for("GUILD_SCHEDULED_EVENT_DELETE", data)
        if guild is not None:
            guild._remove_scheduled_event(int(data["id"]))
