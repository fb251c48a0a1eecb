"""Thin models for resources a guild can list but that are not cached."""

from __future__ import annotations

import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field

from cordkit.enums import AutoModerationEventType, AutoModerationTriggerType
from cordkit.models.base import Entity, Model
from cordkit.models.user import User
from cordkit.utils import UNSET, Maybe, Snowflake


class InviteGuild(BaseModel):
    id: Snowflake
    name: str
    icon: Optional[str] = None


class InviteChannel(BaseModel):
    id: Snowflake
    name: Optional[str] = None
    type: int


class Invite(Model):
    code: str
    guild: Maybe[InviteGuild] = UNSET
    channel: Maybe[InviteChannel] = UNSET
    inviter: Maybe[User] = UNSET
    uses: Maybe[int] = UNSET
    max_uses: Maybe[int] = UNSET
    max_age: Maybe[int] = UNSET
    temporary: Maybe[bool] = UNSET
    created_at: Maybe[datetime.datetime] = UNSET
    expires_at: Maybe[datetime.datetime] = UNSET
    approximate_member_count: Maybe[int] = UNSET
    approximate_presence_count: Maybe[int] = UNSET

    @property
    def url(self) -> str:
        return f"https://discord.gg/{self.code}"


class Webhook(Entity):
    type: int
    guild_id: Maybe[Snowflake] = UNSET
    channel_id: Optional[Snowflake] = None
    user: Maybe[User] = UNSET
    name: Optional[str] = None
    avatar: Optional[str] = None
    token: Maybe[str] = UNSET
    application_id: Optional[Snowflake] = None
    url: Maybe[str] = UNSET


class AuditLogChange(BaseModel):
    key: str
    new_value: Any = None
    old_value: Any = None


class AuditLogEntry(Entity):
    target_id: Optional[str] = None
    changes: list[AuditLogChange] = Field(default_factory=list)
    user_id: Optional[Snowflake] = None
    action_type: int
    options: Maybe[dict[str, Any]] = UNSET
    reason: Maybe[str] = UNSET


class AuditLog(Model):
    """One page of a guild's audit log, with the users it references."""

    entries: list[AuditLogEntry] = Field(default_factory=list, alias="audit_log_entries")
    users: list[User] = Field(default_factory=list)
    webhooks: list[Webhook] = Field(default_factory=list)

    def user_for(self, entry: AuditLogEntry) -> Optional[User]:
        for user in self.users:
            if user.id == entry.user_id:
                return user
        return None


class AutoModerationAction(BaseModel):
    type: int
    metadata: dict[str, Any] = Field(default_factory=dict)


class AutoModerationRule(Entity):
    guild_id: Snowflake
    name: str
    creator_id: Snowflake
    event_type: AutoModerationEventType
    trigger_type: AutoModerationTriggerType
    trigger_metadata: dict[str, Any] = Field(default_factory=dict)
    actions: list[AutoModerationAction] = Field(default_factory=list)
    enabled: bool = False
    exempt_roles: list[Snowflake] = Field(default_factory=list)
    exempt_channels: list[Snowflake] = Field(default_factory=list)


class ApplicationCommand(Entity):
    type: int = 1
    application_id: Snowflake
    guild_id: Maybe[Snowflake] = UNSET
    name: str
    description: str = ""
    options: list[dict[str, Any]] = Field(default_factory=list)
    default_member_permissions: Optional[str] = None
    nsfw: bool = False
    version: Snowflake


class ApplicationCommandPermission(BaseModel):
    """``type`` is 1 for a role, 2 for a user, 3 for a channel."""

    id: Snowflake
    type: int
    permission: bool


class GuildApplicationCommandPermissions(Entity):
    """Permission overrides for one command (``id``) or the whole application."""

    application_id: Snowflake
    guild_id: Snowflake
    permissions: list[ApplicationCommandPermission] = Field(default_factory=list)
