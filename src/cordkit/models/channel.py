"""Guild channels, threads and the voice/stage state attached to them."""

from __future__ import annotations

import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field

from cordkit.enums import ChannelType, Permissions, PermissionsField
from cordkit.models.base import Entity
from cordkit.utils import JSON, UNSET, Maybe, Snowflake, mention

_TEXT_TYPES = {ChannelType.GUILD_TEXT, ChannelType.GUILD_ANNOUNCEMENT}
_VOICE_TYPES = {ChannelType.GUILD_VOICE, ChannelType.GUILD_STAGE_VOICE}
_THREAD_TYPES = {
    ChannelType.ANNOUNCEMENT_THREAD,
    ChannelType.PUBLIC_THREAD,
    ChannelType.PRIVATE_THREAD,
}


class PermissionOverwrite(BaseModel):
    """Explicit allow/deny for a role (``type`` 0) or a member (``type`` 1)."""

    id: Snowflake
    type: int = 0
    allow: PermissionsField = Permissions(0)
    deny: PermissionsField = Permissions(0)

    def to_payload(self) -> JSON:
        return self.model_dump(mode="json")


class ForumTag(BaseModel):
    id: Optional[Snowflake] = None
    name: str
    moderated: bool = False
    emoji_id: Optional[Snowflake] = None
    emoji_name: Optional[str] = None

    def to_payload(self) -> JSON:
        return self.model_dump(mode="json", exclude_none=True)


class ThreadMetadata(BaseModel):
    archived: bool = False
    auto_archive_duration: int = 1440
    archive_timestamp: Optional[datetime.datetime] = None
    locked: bool = False
    invitable: Optional[bool] = None
    create_timestamp: Optional[datetime.datetime] = None


class GuildChannel(Entity):
    """Any channel that lives in a guild, threads included."""

    type: ChannelType
    guild_id: Maybe[Snowflake] = UNSET
    name: Maybe[str] = UNSET
    position: Maybe[int] = UNSET
    permission_overwrites: list[PermissionOverwrite] = Field(default_factory=list)
    parent_id: Maybe[Snowflake] = UNSET
    topic: Maybe[str] = UNSET
    nsfw: bool = False
    last_message_id: Maybe[Snowflake] = UNSET
    bitrate: Maybe[int] = UNSET
    user_limit: Maybe[int] = UNSET
    rate_limit_per_user: Maybe[int] = UNSET
    rtc_region: Maybe[str] = UNSET
    video_quality_mode: Maybe[int] = UNSET
    owner_id: Maybe[Snowflake] = UNSET
    message_count: Maybe[int] = UNSET
    member_count: Maybe[int] = UNSET
    thread_metadata: Maybe[ThreadMetadata] = UNSET
    default_auto_archive_duration: Maybe[int] = UNSET
    available_tags: list[ForumTag] = Field(default_factory=list)
    applied_tags: list[Snowflake] = Field(default_factory=list)
    default_sort_order: Maybe[int] = UNSET
    default_forum_layout: Maybe[int] = UNSET
    default_thread_rate_limit_per_user: Maybe[int] = UNSET
    flags: int = 0

    def _bind(self, client: Any, guild_id: Optional[int] = None, **context: Any) -> None:
        super()._bind(client)
        # GUILD_CREATE omits guild_id on nested channels
        if guild_id is not None and not isinstance(self.guild_id, int):
            self.guild_id = guild_id

    @property
    def mention(self) -> str:
        return mention("channel", self.id)

    def is_text(self) -> bool:
        return self.type in _TEXT_TYPES

    def is_voice(self) -> bool:
        return self.type == ChannelType.GUILD_VOICE

    def is_stage(self) -> bool:
        return self.type == ChannelType.GUILD_STAGE_VOICE

    def is_category(self) -> bool:
        return self.type == ChannelType.GUILD_CATEGORY

    def is_forum(self) -> bool:
        return self.type in (ChannelType.GUILD_FORUM, ChannelType.GUILD_MEDIA)

    def is_thread(self) -> bool:
        return self.type in _THREAD_TYPES

    def is_connectable(self) -> bool:
        return self.type in _VOICE_TYPES

    def overwrite_for(self, target: Any) -> Optional[PermissionOverwrite]:
        ident = getattr(target, "id", target)
        for overwrite in self.permission_overwrites:
            if overwrite.id == ident:
                return overwrite
        return None

    async def delete(self, *, reason: Optional[str] = None) -> None:
        await self._http.delete_channel(self.id, reason=reason)


class VoiceState(BaseModel):
    guild_id: Optional[Snowflake] = None
    channel_id: Optional[Snowflake] = None
    user_id: Snowflake
    session_id: str = ""
    deaf: bool = False
    mute: bool = False
    self_deaf: bool = False
    self_mute: bool = False
    self_stream: bool = False
    self_video: bool = False
    suppress: bool = False
    request_to_speak_timestamp: Optional[datetime.datetime] = None


class StageInstance(Entity):
    guild_id: Snowflake
    channel_id: Snowflake
    topic: str
    privacy_level: int = 2
    guild_scheduled_event_id: Optional[Snowflake] = None


class WidgetChannel(BaseModel):
    id: Snowflake
    name: str
    position: int = 0

