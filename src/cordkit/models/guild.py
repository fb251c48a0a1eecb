"""Guilds: the snapshot model, its caches and every guild-scoped operation.

A :class:`Guild` is built from a full snapshot (``GUILD_CREATE`` or
``GET /guilds/{id}``) and then kept current by fragments applied with
:meth:`Guild.update`. Channels, threads and members live in per-guild
:class:`~cordkit.cache.EntityCache` objects that disappear with the guild.
"""

from __future__ import annotations

import datetime
from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

from cordkit.cache import EntityCache
from cordkit.enums import (
    ArchiveDuration,
    AutoModerationEventType,
    AutoModerationTriggerType,
    ChannelType,
    ExplicitContentFilterLevel,
    Feature,
    FeatureList,
    ForumLayout,
    ForumSortOrder,
    Intents,
    Locale,
    LocaleField,
    MessageNotificationLevel,
    MFALevel,
    NSFWLevel,
    Permissions,
    PremiumTier,
    ScheduledEventEntityType,
    ScheduledEventPrivacyLevel,
    SystemChannelFlags,
    SystemChannelFlagsField,
    VerificationLevel,
    VideoQualityMode,
)
from cordkit.exceptions import DecodeError, InvalidUsageError
from cordkit.models.activity import Presence
from cordkit.models.base import Asset, Entity, decode_list
from cordkit.models.channel import ForumTag, GuildChannel, PermissionOverwrite, StageInstance, VoiceState
from cordkit.models.emoji import Emoji, PartialEmoji
from cordkit.models.guild_info import (
    Ban,
    Integration,
    Onboarding,
    Preview,
    WelcomeScreen,
    WelcomeScreenEdit,
    Widget,
)
from cordkit.models.member import Member
from cordkit.models.misc import (
    ApplicationCommand,
    AuditLog,
    AutoModerationRule,
    GuildApplicationCommandPermissions,
    Invite,
    Webhook,
)
from cordkit.models.role import Role
from cordkit.models.scheduled_event import ScheduledEvent
from cordkit.models.sticker import GuildSticker
from cordkit.models.template import Template
from cordkit.output import debug
from cordkit.pagination import CursorPaginator, Direction
from cordkit.utils import (
    JSON,
    UNSET,
    File,
    ImageData,
    Maybe,
    Snowflake,
    optional_snowflake,
    to_snowflake,
)

MAX_BAN_DELETE_SECONDS = 604800

_BOUND_LISTS = ("roles", "emojis", "stickers", "stage_instances", "scheduled_events")


def _upsert(items: list[Any], entity: Any) -> list[Any]:
    return [item for item in items if item.id != entity.id] + [entity]


def _by_id(items: list[Any], ident: int) -> Optional[Any]:
    for item in items:
        if item.id == ident:
            return item
    return None


def _decode_channels(items: Any, client: Any, guild_id: int) -> list[GuildChannel]:
    """Decode channel snapshots, skipping channel types this library does not model."""
    channels = []
    for raw in items or ():
        try:
            channels.append(GuildChannel.from_snapshot(raw, client, guild_id=guild_id))
        except DecodeError as exc:
            debug(f"Skipping channel {raw.get('id')} in guild {guild_id}: {exc}")
    return channels


class Guild(Entity):
    name: str
    icon_hash: Maybe[str] = Field(default=UNSET, alias="icon")
    splash_hash: Maybe[str] = Field(default=UNSET, alias="splash")
    discovery_splash_hash: Maybe[str] = Field(default=UNSET, alias="discovery_splash")
    banner_hash: Maybe[str] = Field(default=UNSET, alias="banner")
    owner_id: Snowflake
    afk_channel_id: Maybe[Snowflake] = UNSET
    afk_timeout: int
    widget_enabled: Maybe[bool] = UNSET
    widget_channel_id: Maybe[Snowflake] = UNSET
    verification_level: VerificationLevel
    default_message_notifications: MessageNotificationLevel
    explicit_content_filter: ExplicitContentFilterLevel
    roles: list[Role]
    emojis: list[Emoji]
    features: FeatureList
    mfa_level: MFALevel
    application_id: Maybe[Snowflake] = UNSET
    system_channel_id: Maybe[Snowflake] = UNSET
    system_channel_flags: SystemChannelFlagsField = SystemChannelFlags(0)
    rules_channel_id: Maybe[Snowflake] = UNSET
    max_presences: Maybe[int] = UNSET
    max_members: Maybe[int] = UNSET
    vanity_url_code: Maybe[str] = UNSET
    description: Maybe[str] = UNSET
    premium_tier: PremiumTier
    premium_subscription_count: Maybe[int] = UNSET
    preferred_locale: LocaleField = Locale.ENGLISH_US
    public_updates_channel_id: Maybe[Snowflake] = UNSET
    max_video_channel_users: Maybe[int] = UNSET
    max_stage_video_channel_users: Maybe[int] = UNSET
    approximate_member_count: Maybe[int] = UNSET
    approximate_presence_count: Maybe[int] = UNSET
    welcome_screen_data: Maybe[WelcomeScreen] = Field(default=UNSET, alias="welcome_screen")
    nsfw_level: NSFWLevel = NSFWLevel.DEFAULT
    stickers: list[GuildSticker] = Field(default_factory=list)
    premium_progress_bar_enabled: bool = False
    safety_alerts_channel_id: Maybe[Snowflake] = UNSET

    # Only present in gateway snapshots.
    joined_at: Maybe[datetime.datetime] = UNSET
    large: Maybe[bool] = UNSET
    member_count: Maybe[int] = UNSET
    voice_states: list[VoiceState] = Field(default_factory=list)
    stage_instances: list[StageInstance] = Field(default_factory=list)
    scheduled_events: list[ScheduledEvent] = Field(default_factory=list, alias="guild_scheduled_events")

    _channels: EntityCache = PrivateAttr(default_factory=EntityCache)
    _threads: EntityCache = PrivateAttr(default_factory=EntityCache)
    _members: EntityCache = PrivateAttr(default_factory=EntityCache)
    _presences: dict = PrivateAttr(default_factory=dict)
    _unavailable: bool = PrivateAttr(default=False)

    @classmethod
    def from_snapshot(cls, data: Mapping[str, Any], client: Any = None, **context: Any) -> Guild:
        """Decode a guild; gateway snapshots also fill the channel, thread and member caches."""
        guild = super().from_snapshot(data, client, **context)
        guild._load_collections(data)
        return guild

    def _bind(self, client: Any, **context: Any) -> None:
        super()._bind(client)
        self._bind_children()

    def _bind_children(self) -> None:
        for key in _BOUND_LISTS:
            for child in getattr(self, key):
                child._bind(self._client, guild_id=self.id)

    def _load_collections(self, data: Mapping[str, Any]) -> None:
        for key in ("channels", "threads"):
            for channel in _decode_channels(data.get(key), self._client, self.id):
                self._add_channel(channel)
        for raw in data.get("members") or ():
            self._members.put(Member.from_snapshot(raw, self._client, guild_id=self.id))
        for raw in data.get("presences") or ():
            self._set_presence(raw)

    def update(self, fragment: Mapping[str, Any] | None) -> list[str]:
        changed = super().update(fragment)
        if any(key in changed for key in _BOUND_LISTS):
            self._bind_children()
        return changed

    def __str__(self) -> str:
        return self.name

    # ------------------------------------------------------------------ #
    # Cache bookkeeping (driven by ConnectionState)
    # ------------------------------------------------------------------ #

    def _add_channel(self, channel: GuildChannel) -> None:
        if channel.is_thread():
            self._threads.put(channel)
        else:
            self._channels.put(channel)

    def _remove_channel(self, channel_id: int) -> Optional[GuildChannel]:
        return self._channels.remove(channel_id) or self._threads.remove(channel_id)

    def _add_member(self, member: Member) -> None:
        self._members.put(member)

    def _remove_member(self, user_id: int) -> Optional[Member]:
        self._presences.pop(user_id, None)
        return self._members.remove(user_id)

    def _upsert_role(self, role: Role) -> None:
        role._bind(self._client, guild_id=self.id)
        self.roles = _upsert(self.roles, role)

    def _remove_role(self, role_id: int) -> Optional[Role]:
        role = self.get_role(role_id)
        if role is not None:
            self.roles = [r for r in self.roles if r.id != role_id]
            for member in self._members:
                if role_id in member.role_ids:
                    member.role_ids = [rid for rid in member.role_ids if rid != role_id]
        return role

    def _upsert_scheduled_event(self, event: ScheduledEvent) -> None:
        event._bind(self._client)
        self.scheduled_events = _upsert(self.scheduled_events, event)

    def _remove_scheduled_event(self, event_id: int) -> Optional[ScheduledEvent]:
        event = self.get_scheduled_event(event_id)
        if event is not None:
            self.scheduled_events = [e for e in self.scheduled_events if e.id != event_id]
        return event

    def _set_presence(self, data: Mapping[str, Any]) -> None:
        user = data.get("user") or {}
        if "id" not in user:
            return
        self._presences[int(user["id"])] = Presence.model_validate(
            {key: data[key] for key in ("status", "activities", "client_status") if key in data}
        )

    def _mark_unavailable(self) -> None:
        self._unavailable = True

    # ------------------------------------------------------------------ #
    # Accessors
    # ------------------------------------------------------------------ #

    @property
    def unavailable(self) -> bool:
        """True after an outage ``GUILD_DELETE``; the cached data may be stale."""
        return self._unavailable

    @property
    def icon(self) -> Optional[Asset]:
        return Asset.build("icons", self.id, self.icon_hash)

    @property
    def banner(self) -> Optional[Asset]:
        return Asset.build("banners", self.id, self.banner_hash)

    @property
    def splash(self) -> Optional[Asset]:
        return Asset.build("splashes", self.id, self.splash_hash)

    @property
    def channels(self) -> list[GuildChannel]:
        """Cached non-thread channels, ordered by position."""
        return sorted(self._channels.values(), key=lambda c: (c.position or 0, c.id))

    @property
    def text_channels(self) -> list[GuildChannel]:
        return [c for c in self.channels if c.is_text()]

    @property
    def voice_channels(self) -> list[GuildChannel]:
        return [c for c in self.channels if c.is_voice()]

    @property
    def stage_channels(self) -> list[GuildChannel]:
        return [c for c in self.channels if c.is_stage()]

    @property
    def forum_channels(self) -> list[GuildChannel]:
        return [c for c in self.channels if c.is_forum()]

    @property
    def categories(self) -> list[GuildChannel]:
        return [c for c in self.channels if c.is_category()]

    @property
    def threads(self) -> list[GuildChannel]:
        return self._threads.values()

    @property
    def members(self) -> list[Member]:
        return self._members.values()

    @property
    def default_role(self) -> Optional[Role]:
        return self.get_role(self.id)

    @property
    def owner(self) -> Optional[Member]:
        return self.get_member(self.owner_id)

    @property
    def me(self) -> Optional[Member]:
        user = self._client.user if self._client is not None else None
        return self.get_member(user.id) if user is not None else None

    def get_channel(self, channel_id: int) -> Optional[GuildChannel]:
        return self._channels.get(channel_id) or self._threads.get(channel_id)

    def get_thread(self, thread_id: int) -> Optional[GuildChannel]:
        return self._threads.get(thread_id)

    def get_member(self, user_id: int) -> Optional[Member]:
        return self._members.get(user_id)

    def get_role(self, role_id: int) -> Optional[Role]:
        return _by_id(self.roles, role_id)

    def get_emoji(self, emoji_id: int) -> Optional[Emoji]:
        return _by_id(self.emojis, emoji_id)

    def get_sticker(self, sticker_id: int) -> Optional[GuildSticker]:
        return _by_id(self.stickers, sticker_id)

    def get_scheduled_event(self, event_id: int) -> Optional[ScheduledEvent]:
        return _by_id(self.scheduled_events, event_id)

    def get_presence(self, user_id: int) -> Optional[Presence]:
        return self._presences.get(user_id)

    # ------------------------------------------------------------------ #
    # Guild itself
    # ------------------------------------------------------------------ #

    async def edit(self, edit: GuildEdit, *, reason: Optional[str] = None) -> Guild:
        """Apply a :class:`GuildEdit` and merge the returned snapshot into this guild.

        An edit with no fields set makes no request.
        """
        payload = edit.to_payload()
        if not payload:
            return self
        data = await self._http.modify_guild(self.id, payload, reason=reason)
        self.update(data)
        return self

    async def delete(self) -> None:
        """Delete the guild. The bot must own it."""
        await self._http.delete_guild(self.id)

    async def leave(self) -> None:
        await self._http.leave_guild(self.id)

    async def preview(self) -> Preview:
        return Preview.from_snapshot(await self._http.get_guild_preview(self.id), self._client)

    async def vanity_invite(self) -> Optional[Invite]:
        """The vanity invite, or ``None`` when the guild has no vanity code."""
        data = await self._http.get_guild_vanity_url(self.id)
        if not data.get("code"):
            return None
        return Invite.from_snapshot(data, self._client)

    async def invites(self) -> list[Invite]:
        return decode_list(Invite, await self._http.get_guild_invites(self.id), self._client)

    async def webhooks(self) -> list[Webhook]:
        return decode_list(Webhook, await self._http.get_guild_webhooks(self.id), self._client)

    async def integrations(self) -> list[Integration]:
        data = await self._http.get_guild_integrations(self.id)
        return decode_list(Integration, data, self._client, guild_id=self.id)

    async def onboarding(self) -> Onboarding:
        return Onboarding.from_snapshot(await self._http.get_guild_onboarding(self.id), self._client)

    async def widget(self) -> Widget:
        return Widget.from_snapshot(await self._http.get_guild_widget(self.id), self._client)

    async def welcome_screen(self) -> WelcomeScreen:
        return WelcomeScreen.from_snapshot(await self._http.get_guild_welcome_screen(self.id), self._client)

    async def edit_welcome_screen(
        self, edit: WelcomeScreenEdit, *, reason: Optional[str] = None
    ) -> WelcomeScreen:
        payload = edit.to_payload()
        if not payload:
            return await self.welcome_screen()
        data = await self._http.modify_guild_welcome_screen(self.id, payload, reason=reason)
        return WelcomeScreen.from_snapshot(data, self._client)

    async def audit_logs(
        self,
        *,
        user: Any = None,
        action_type: Optional[int] = None,
        limit: int = 50,
        before: Any = None,
        after: Any = None,
    ) -> AuditLog:
        """One page of audit log entries. ``limit`` is clamped to 1..100."""
        data = await self._http.get_guild_audit_log(
            self.id,
            user_id=optional_snowflake(user),
            action_type=action_type,
            before=optional_snowflake(before),
            after=optional_snowflake(after),
            limit=max(1, min(limit, 100)),
        )
        return AuditLog.from_snapshot(data, self._client)

    async def prune(
        self,
        *,
        days: int = 7,
        include_roles: Optional[list[Any]] = None,
        compute_prune_count: bool = True,
        reason: Optional[str] = None,
    ) -> Optional[int]:
        """Kick members inactive for ``days`` (1..30). Returns the count when computed."""
        if not 1 <= days <= 30:
            raise InvalidUsageError("days must be between 1 and 30")
        data = await self._http.begin_guild_prune(
            self.id,
            days=days,
            compute_prune_count=compute_prune_count,
            include_roles=[to_snowflake(r) for r in include_roles or ()],
            reason=reason,
        )
        return data.get("pruned")

    # ------------------------------------------------------------------ #
    # Bans
    # ------------------------------------------------------------------ #

    async def ban(self, user: Any, *, delete_message_seconds: int = 0, reason: Optional[str] = None) -> None:
        if not 0 <= delete_message_seconds <= MAX_BAN_DELETE_SECONDS:
            raise InvalidUsageError(
                f"delete_message_seconds must be between 0 and {MAX_BAN_DELETE_SECONDS}"
            )
        await self._http.create_guild_ban(
            self.id, to_snowflake(user), delete_message_seconds=delete_message_seconds, reason=reason
        )

    async def unban(self, user: Any, *, reason: Optional[str] = None) -> None:
        await self._http.remove_guild_ban(self.id, to_snowflake(user), reason=reason)

    async def request_ban(self, user: Any) -> Ban:
        return Ban.from_snapshot(await self._http.get_guild_ban(self.id, to_snowflake(user)), self._client)

    def bans(
        self,
        *,
        limit: Optional[int] = 1000,
        before: Any = None,
        after: Any = None,
    ) -> CursorPaginator[Ban]:
        """Iterate over bans page by page.

        Pages walk backwards from ``before`` when given, otherwise forwards
        from ``after``; with neither, they walk backwards from the newest ban.
        """
        if before is None and after is not None:
            direction, cursor = Direction.AFTER, to_snowflake(after)
        else:
            direction, cursor = Direction.BEFORE, optional_snowflake(before)

        async def fetch_page(limit: int, cursor: Optional[int]) -> list[JSON]:
            return await self._http.get_guild_bans(self.id, limit=limit, **{direction.value: cursor})

        return CursorPaginator(
            fetch_page,
            lambda raw: Ban.from_snapshot(raw, self._client),
            lambda ban: ban.user.id,
            direction=direction,
            limit=limit,
            cursor=cursor,
        )

    # ------------------------------------------------------------------ #
    # Members
    # ------------------------------------------------------------------ #

    async def request_member(self, user: Any) -> Member:
        data = await self._http.get_guild_member(self.id, to_snowflake(user))
        return Member.from_snapshot(data, self._client, guild_id=self.id)

    def request_members(self, *, limit: Optional[int] = 1000, after: Any = None) -> CursorPaginator[Member]:
        """Iterate over all members in ascending id order.

        Raises:
            InvalidUsageError: The client did not declare the ``GUILD_MEMBERS`` intent.
        """
        intents = self._client.intents if self._client is not None else Intents(0)
        if not intents & Intents.GUILD_MEMBERS:
            raise InvalidUsageError("Listing members requires the GUILD_MEMBERS intent")

        async def fetch_page(limit: int, cursor: Optional[int]) -> list[JSON]:
            return await self._http.list_guild_members(self.id, limit=limit, after=cursor)

        return CursorPaginator(
            fetch_page,
            lambda raw: Member.from_snapshot(raw, self._client, guild_id=self.id),
            lambda member: member.id,
            direction=Direction.AFTER,
            limit=limit,
            cursor=optional_snowflake(after),
        )

    async def search_members(self, query: str, *, limit: int = 1000) -> list[Member]:
        """Members whose username or nickname starts with ``query``; ``limit`` 1..1000."""
        data = await self._http.search_guild_members(self.id, query, limit=max(1, min(limit, 1000)))
        return decode_list(Member, data, self._client, guild_id=self.id)

    # ------------------------------------------------------------------ #
    # Channels
    # ------------------------------------------------------------------ #

    async def request_channels(self) -> list[GuildChannel]:
        data = await self._http.get_guild_channels(self.id)
        return _decode_channels(data, self._client, self.id)

    async def request_active_threads(self) -> list[GuildChannel]:
        data = await self._http.get_active_guild_threads(self.id)
        return _decode_channels(data.get("threads"), self._client, self.id)

    async def _create_channel(self, payload: JSON, reason: Optional[str]) -> GuildChannel:
        data = await self._http.create_guild_channel(self.id, payload, reason=reason)
        channel = GuildChannel.from_snapshot(data, self._client, guild_id=self.id)
        self._add_channel(channel)
        return channel

    async def create_category(
        self,
        name: str,
        *,
        position: Optional[int] = None,
        overwrites: Optional[list[PermissionOverwrite]] = None,
        reason: Optional[str] = None,
    ) -> GuildChannel:
        payload = _channel_payload(
            name, ChannelType.GUILD_CATEGORY, position=position, permission_overwrites=overwrites
        )
        return await self._create_channel(payload, reason)

    async def create_text_channel(
        self,
        name: str,
        *,
        topic: Optional[str] = None,
        category: Any = None,
        slowmode: Optional[int] = None,
        position: Optional[int] = None,
        overwrites: Optional[list[PermissionOverwrite]] = None,
        nsfw: bool = False,
        reason: Optional[str] = None,
    ) -> GuildChannel:
        payload = _channel_payload(
            name,
            ChannelType.GUILD_TEXT,
            topic=topic,
            parent_id=optional_snowflake(category),
            rate_limit_per_user=slowmode,
            position=position,
            permission_overwrites=overwrites,
            nsfw=nsfw,
        )
        return await self._create_channel(payload, reason)

    async def create_voice_channel(
        self,
        name: str,
        *,
        category: Any = None,
        bitrate: int = 64000,
        user_limit: int = 0,
        position: Optional[int] = None,
        overwrites: Optional[list[PermissionOverwrite]] = None,
        rtc_region: Optional[str] = None,
        video_quality_mode: VideoQualityMode = VideoQualityMode.AUTO,
        nsfw: bool = False,
        reason: Optional[str] = None,
    ) -> GuildChannel:
        """Create a voice channel. ``rtc_region=None`` lets the platform pick the region."""
        payload = _channel_payload(
            name,
            ChannelType.GUILD_VOICE,
            parent_id=optional_snowflake(category),
            bitrate=bitrate,
            user_limit=user_limit,
            position=position,
            permission_overwrites=overwrites,
            rtc_region=rtc_region,
            video_quality_mode=int(video_quality_mode),
            nsfw=nsfw,
        )
        return await self._create_channel(payload, reason)

    async def create_stage_channel(
        self,
        name: str,
        *,
        category: Any = None,
        bitrate: int = 64000,
        user_limit: int = 0,
        position: Optional[int] = None,
        overwrites: Optional[list[PermissionOverwrite]] = None,
        rtc_region: Optional[str] = None,
        reason: Optional[str] = None,
    ) -> GuildChannel:
        payload = _channel_payload(
            name,
            ChannelType.GUILD_STAGE_VOICE,
            parent_id=optional_snowflake(category),
            bitrate=bitrate,
            user_limit=user_limit,
            position=position,
            permission_overwrites=overwrites,
            rtc_region=rtc_region,
        )
        return await self._create_channel(payload, reason)

    async def create_forum(
        self,
        name: str,
        *,
        topic: Optional[str] = None,
        category: Any = None,
        position: Optional[int] = None,
        overwrites: Optional[list[PermissionOverwrite]] = None,
        nsfw: bool = False,
        slowmode: Optional[int] = None,
        default_auto_archive_duration: ArchiveDuration = ArchiveDuration.THREE_DAYS,
        default_reaction_emoji: Optional[PartialEmoji] = None,
        available_tags: Optional[list[ForumTag]] = None,
        default_sort_order: Optional[ForumSortOrder] = None,
        default_forum_layout: ForumLayout = ForumLayout.NOT_SET,
        default_thread_slowmode: Optional[int] = None,
        reason: Optional[str] = None,
    ) -> GuildChannel:
        reaction = None
        if default_reaction_emoji is not None:
            reaction = {"emoji_id": default_reaction_emoji.id, "emoji_name": default_reaction_emoji.name}
        payload = _channel_payload(
            name,
            ChannelType.GUILD_FORUM,
            topic=topic,
            parent_id=optional_snowflake(category),
            position=position,
            permission_overwrites=overwrites,
            nsfw=nsfw,
            rate_limit_per_user=slowmode,
            default_auto_archive_duration=int(default_auto_archive_duration),
            default_reaction_emoji=reaction,
            available_tags=[tag.to_payload() for tag in available_tags] if available_tags else None,
            default_sort_order=None if default_sort_order is None else int(default_sort_order),
            default_forum_layout=int(default_forum_layout),
            default_thread_rate_limit_per_user=default_thread_slowmode,
        )
        return await self._create_channel(payload, reason)

    # ------------------------------------------------------------------ #
    # Roles
    # ------------------------------------------------------------------ #

    async def request_roles(self) -> list[Role]:
        data = await self._http.get_guild_roles(self.id)
        return decode_list(Role, data, self._client, guild_id=self.id)

    async def create_role(
        self,
        *,
        name: Optional[str] = None,
        permissions: Optional[Permissions] = None,
        color: int = 0,
        hoist: bool = False,
        icon: Optional[File] = None,
        unicode_emoji: Optional[str] = None,
        mentionable: bool = False,
        reason: Optional[str] = None,
    ) -> Role:
        payload: JSON = {"color": color, "hoist": hoist, "mentionable": mentionable}
        if name is not None:
            payload["name"] = name
        if permissions is not None:
            payload["permissions"] = str(int(permissions))
        if icon is not None:
            payload["icon"] = icon.as_image_data()
        if unicode_emoji is not None:
            payload["unicode_emoji"] = unicode_emoji
        data = await self._http.create_guild_role(self.id, payload, reason=reason)
        role = Role.from_snapshot(data, self._client, guild_id=self.id)
        self._upsert_role(role)
        return role

    async def edit_role_positions(
        self, positions: Mapping[Any, int], *, reason: Optional[str] = None
    ) -> list[Role]:
        """Move roles. ``positions`` maps a role (or role id) to its new position."""
        payload = [{"id": to_snowflake(role), "position": pos} for role, pos in positions.items()]
        data = await self._http.modify_guild_role_positions(self.id, payload, reason=reason)
        self.update({"roles": data})
        return sorted(self.roles)

    # ------------------------------------------------------------------ #
    # Emojis and stickers
    # ------------------------------------------------------------------ #

    async def request_emoji(self, emoji_id: Any) -> Emoji:
        data = await self._http.get_guild_emoji(self.id, to_snowflake(emoji_id))
        return Emoji.from_snapshot(data, self._client, guild_id=self.id)

    async def request_emojis(self) -> list[Emoji]:
        data = await self._http.list_guild_emojis(self.id)
        return decode_list(Emoji, data, self._client, guild_id=self.id)

    async def create_emoji(
        self,
        name: str,
        image: File,
        *,
        roles: Optional[list[Any]] = None,
        reason: Optional[str] = None,
    ) -> Emoji:
        payload: JSON = {
            "name": name,
            "image": image.as_image_data(),
            "roles": [to_snowflake(r) for r in roles or ()],
        }
        data = await self._http.create_guild_emoji(self.id, payload, reason=reason)
        emoji = Emoji.from_snapshot(data, self._client, guild_id=self.id)
        self.emojis = _upsert(self.emojis, emoji)
        return emoji

    async def request_sticker(self, sticker_id: Any) -> GuildSticker:
        data = await self._http.get_guild_sticker(self.id, to_snowflake(sticker_id))
        return GuildSticker.from_snapshot(data, self._client, guild_id=self.id)

    async def request_all_stickers(self) -> list[GuildSticker]:
        data = await self._http.list_guild_stickers(self.id)
        return decode_list(GuildSticker, data, self._client, guild_id=self.id)

    async def create_sticker(
        self,
        name: str,
        *,
        description: str,
        emoji: str,
        file: File,
        reason: Optional[str] = None,
    ) -> GuildSticker:
        """Upload a sticker. ``emoji`` is the related unicode emoji name used as its tag."""
        form = {"name": name, "description": description, "tags": emoji}
        data = await self._http.create_guild_sticker(self.id, form, file, reason=reason)
        sticker = GuildSticker.from_snapshot(data, self._client, guild_id=self.id)
        self.stickers = _upsert(self.stickers, sticker)
        return sticker

    # ------------------------------------------------------------------ #
    # Scheduled events
    # ------------------------------------------------------------------ #

    async def request_scheduled_event(self, event_id: Any, *, with_user_count: bool = False) -> ScheduledEvent:
        data = await self._http.get_guild_scheduled_event(
            self.id, to_snowflake(event_id), with_user_count=with_user_count
        )
        return ScheduledEvent.from_snapshot(data, self._client)

    async def request_scheduled_events(self, *, with_user_count: bool = False) -> list[ScheduledEvent]:
        data = await self._http.list_scheduled_events_for_guild(self.id, with_user_count=with_user_count)
        return decode_list(ScheduledEvent, data, self._client)

    async def create_scheduled_event(
        self,
        name: str,
        *,
        start_time: datetime.datetime,
        entity_type: ScheduledEventEntityType,
        channel: Any = None,
        end_time: Optional[datetime.datetime] = None,
        location: Optional[str] = None,
        description: Optional[str] = None,
        image: Optional[File] = None,
        privacy_level: ScheduledEventPrivacyLevel = ScheduledEventPrivacyLevel.GUILD_ONLY,
        reason: Optional[str] = None,
    ) -> ScheduledEvent:
        """Schedule an event.

        Raises:
            InvalidUsageError: An external event lacks ``location`` or
                ``end_time``, or a voice/stage event lacks ``channel``.
        """
        payload: JSON = {
            "name": name,
            "privacy_level": int(privacy_level),
            "scheduled_start_time": start_time.isoformat(),
            "entity_type": int(entity_type),
        }
        if entity_type == ScheduledEventEntityType.EXTERNAL:
            if not location or end_time is None:
                raise InvalidUsageError("An external event needs a location and an end time")
            payload["entity_metadata"] = {"location": location}
        elif channel is None:
            raise InvalidUsageError("A voice or stage event needs a channel")
        else:
            payload["channel_id"] = to_snowflake(channel)
        if end_time is not None:
            payload["scheduled_end_time"] = end_time.isoformat()
        if description is not None:
            payload["description"] = description
        if image is not None:
            payload["image"] = image.as_image_data()

        data = await self._http.create_guild_scheduled_event(self.id, payload, reason=reason)
        event = ScheduledEvent.from_snapshot(data, self._client)
        self._upsert_scheduled_event(event)
        return event

    # ------------------------------------------------------------------ #
    # Templates
    # ------------------------------------------------------------------ #

    async def templates(self) -> list[Template]:
        return decode_list(Template, await self._http.get_guild_templates(self.id), self._client)

    async def create_template(self, name: str, *, description: Optional[str] = None) -> Template:
        payload: JSON = {"name": name}
        if description is not None:
            payload["description"] = description
        data = await self._http.create_guild_template(self.id, payload)
        return Template.from_snapshot(data, self._client)

    # ------------------------------------------------------------------ #
    # Auto moderation and application commands
    # ------------------------------------------------------------------ #

    async def auto_moderation_rules(self) -> list[AutoModerationRule]:
        data = await self._http.list_auto_moderation_rules(self.id)
        return decode_list(AutoModerationRule, data, self._client)

    async def request_auto_moderation_rule(self, rule_id: Any) -> AutoModerationRule:
        data = await self._http.get_auto_moderation_rule(self.id, to_snowflake(rule_id))
        return AutoModerationRule.from_snapshot(data, self._client)

    async def create_auto_moderation_rule(
        self,
        name: str,
        *,
        event_type: AutoModerationEventType,
        trigger_type: AutoModerationTriggerType,
        actions: list[JSON],
        trigger_metadata: Optional[JSON] = None,
        enabled: bool = False,
        exempt_roles: Optional[list[Any]] = None,
        exempt_channels: Optional[list[Any]] = None,
        reason: Optional[str] = None,
    ) -> AutoModerationRule:
        """Create a rule. Only spam triggers may omit ``trigger_metadata``."""
        if trigger_metadata is None and trigger_type != AutoModerationTriggerType.SPAM:
            raise InvalidUsageError(f"{trigger_type.name} rules need trigger_metadata")
        payload: JSON = {
            "name": name,
            "event_type": int(event_type),
            "trigger_type": int(trigger_type),
            "actions": actions,
            "enabled": enabled,
            "exempt_roles": [to_snowflake(r) for r in exempt_roles or ()],
            "exempt_channels": [to_snowflake(c) for c in exempt_channels or ()],
        }
        if trigger_metadata is not None:
            payload["trigger_metadata"] = trigger_metadata
        data = await self._http.create_auto_moderation_rule(self.id, payload, reason=reason)
        return AutoModerationRule.from_snapshot(data, self._client)

    def _application_id(self, application_id: Any) -> int:
        if application_id is not None:
            return to_snowflake(application_id)
        user = self._client.user if self._client is not None else None
        if user is None:
            raise InvalidUsageError("application_id is required before the client user is known")
        return user.id

    async def application_commands(self, *, application_id: Any = None) -> list[ApplicationCommand]:
        data = await self._http.get_guild_application_commands(self._application_id(application_id), self.id)
        return decode_list(ApplicationCommand, data, self._client)

    async def application_command_permissions(
        self, command: Any = None, *, application_id: Any = None
    ) -> list[GuildApplicationCommandPermissions]:
        """Permission overrides for every command, or for ``command`` only."""
        app_id = self._application_id(application_id)
        if command is None:
            data = await self._http.get_guild_application_command_permissions(app_id, self.id)
            return decode_list(GuildApplicationCommandPermissions, data, self._client)
        data = await self._http.get_application_command_permissions(app_id, self.id, to_snowflake(command))
        return [GuildApplicationCommandPermissions.from_snapshot(data, self._client)]


def _channel_payload(name: str, type: ChannelType, **fields: Any) -> JSON:
    payload: JSON = {"name": name, "type": int(type)}
    for key, value in fields.items():
        if value is None:
            continue
        if key == "permission_overwrites":
            value = [overwrite.to_payload() for overwrite in value]
        payload[key] = value
    return payload


class GuildEdit(BaseModel):
    """Changes to a guild. Omitted fields stay as they are; ``None`` clears.

    Example::

        await guild.edit(GuildEdit(name="Renamed", afk_channel_id=None))
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    name: Optional[str] = None
    verification_level: Optional[VerificationLevel] = None
    default_message_notifications: Optional[MessageNotificationLevel] = None
    explicit_content_filter: Optional[ExplicitContentFilterLevel] = None
    afk_channel_id: Optional[Snowflake] = None
    afk_timeout: Optional[int] = None
    icon: Optional[ImageData] = None
    owner_id: Optional[Snowflake] = None
    splash: Optional[ImageData] = None
    discovery_splash: Optional[ImageData] = None
    banner: Optional[ImageData] = None
    system_channel_id: Optional[Snowflake] = None
    system_channel_flags: Optional[SystemChannelFlagsField] = None
    rules_channel_id: Optional[Snowflake] = None
    public_updates_channel_id: Optional[Snowflake] = None
    preferred_locale: Optional[Locale] = None
    features: Optional[list[Feature]] = None
    description: Optional[str] = None
    premium_progress_bar_enabled: Optional[bool] = None
    safety_alerts_channel_id: Optional[Snowflake] = None

    def to_payload(self) -> JSON:
        return self.model_dump(mode="json", exclude_unset=True)
