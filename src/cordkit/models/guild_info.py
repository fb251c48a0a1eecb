"""Guild-owned resources fetched on demand rather than cached.

Bans, the public preview, integrations, the welcome screen, the widget and
onboarding all hang off a guild but are only ever fetched by request.
"""

from __future__ import annotations

import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

from cordkit.enums import ExpireBehavior, FeatureList, PromptType
from cordkit.models.base import Asset, Entity, Model
from cordkit.models.channel import WidgetChannel
from cordkit.models.emoji import Emoji, PartialEmoji
from cordkit.models.sticker import Sticker
from cordkit.models.user import User
from cordkit.utils import JSON, UNSET, Maybe, Snowflake


class Ban(Model):
    user: User
    reason: Optional[str] = None

    def _bind(self, client: Any, **context: Any) -> None:
        super()._bind(client)
        self.user._bind(client)


class Preview(Entity):
    """Public information about a discoverable guild."""

    name: str
    icon_hash: Optional[str] = Field(default=None, alias="icon")
    splash_hash: Optional[str] = Field(default=None, alias="splash")
    discovery_splash_hash: Optional[str] = Field(default=None, alias="discovery_splash")
    emojis: list[Emoji] = Field(default_factory=list)
    features: FeatureList = Field(default_factory=list)
    approximate_member_count: int = 0
    approximate_presence_count: int = 0
    description: Optional[str] = None
    stickers: list[Sticker] = Field(default_factory=list)

    @property
    def icon(self) -> Optional[Asset]:
        return Asset.build("icons", self.id, self.icon_hash)


class IntegrationAccount(BaseModel):
    id: str
    name: str


class IntegrationApplication(BaseModel):
    id: Snowflake
    name: str
    icon: Optional[str] = None
    description: str = ""
    bot: Optional[User] = None


class Integration(Entity):
    name: str
    type: str
    enabled: Maybe[bool] = UNSET
    syncing: Maybe[bool] = UNSET
    role_id: Maybe[Snowflake] = UNSET
    enable_emoticons: Maybe[bool] = UNSET
    expire_behavior: Maybe[ExpireBehavior] = UNSET
    expire_grace_period: Maybe[int] = UNSET
    user: Maybe[User] = UNSET
    account: IntegrationAccount
    synced_at: Maybe[datetime.datetime] = UNSET
    subscriber_count: Maybe[int] = UNSET
    revoked: Maybe[bool] = UNSET
    application: Maybe[IntegrationApplication] = UNSET
    scopes: list[str] = Field(default_factory=list)

    _guild_id: Optional[int] = PrivateAttr(default=None)

    def _bind(self, client: Any, guild_id: Optional[int] = None, **context: Any) -> None:
        super()._bind(client)
        self._guild_id = guild_id

    async def delete(self, *, reason: Optional[str] = None) -> None:
        """Remove the integration and any webhooks or bots it added."""
        await self._http.delete_guild_integration(self._guild_id, self.id, reason=reason)


class WelcomeScreenChannel(BaseModel):
    channel_id: Snowflake
    description: str
    emoji_id: Optional[Snowflake] = None
    emoji_name: Optional[str] = None

    def to_payload(self) -> JSON:
        return self.model_dump(mode="json")


class WelcomeScreen(Model):
    description: Optional[str] = None
    welcome_channels: list[WelcomeScreenChannel] = Field(default_factory=list)


class WelcomeScreenEdit(BaseModel):
    """Changes to the welcome screen. Omitted fields stay; ``None`` clears."""

    enabled: Optional[bool] = None
    welcome_channels: Optional[list[WelcomeScreenChannel]] = None
    description: Optional[str] = None

    def to_payload(self) -> JSON:
        return self.model_dump(mode="json", exclude_unset=True)


class WidgetMember(BaseModel):
    """Widget members are anonymised; ``id`` is a per-widget index."""

    model_config = ConfigDict(populate_by_name=True)

    id: Snowflake
    name: str = Field(alias="username")
    status: str = "online"
    avatar_url: Optional[str] = None


class WidgetSettings(BaseModel):
    enabled: bool = False
    channel_id: Optional[Snowflake] = None


class Widget(Entity):
    """The public widget of a guild; ``id`` is the guild id."""

    name: str
    instant_invite: Optional[str] = None
    channels: list[WidgetChannel] = Field(default_factory=list)
    members: list[WidgetMember] = Field(default_factory=list)
    presence_count: int = 0

    async def settings(self) -> WidgetSettings:
        return WidgetSettings.model_validate(await self._http.get_guild_widget_settings(self.id))

    async def edit(
        self,
        *,
        enabled: Optional[bool] = None,
        channel_id: Any = UNSET,
        reason: Optional[str] = None,
    ) -> WidgetSettings:
        """Toggle the widget or point its invite at another channel (``None`` clears)."""
        payload: JSON = {}
        if enabled is not None:
            payload["enabled"] = enabled
        if channel_id is not UNSET:
            payload["channel_id"] = None if channel_id is None else int(getattr(channel_id, "id", channel_id))
        data = await self._http.modify_guild_widget(self.id, payload, reason=reason)
        return WidgetSettings.model_validate(data)


class OnboardingPromptOption(Entity):
    channel_ids: list[Snowflake] = Field(default_factory=list)
    role_ids: list[Snowflake] = Field(default_factory=list)
    emoji: Maybe[PartialEmoji] = UNSET
    title: str
    description: Optional[str] = None


class OnboardingPrompt(Entity):
    type: PromptType
    options: list[OnboardingPromptOption] = Field(default_factory=list)
    title: str
    single_select: bool = False
    required: bool = False
    in_onboarding: bool = True


class Onboarding(Model):
    guild_id: Snowflake
    prompts: list[OnboardingPrompt] = Field(default_factory=list)
    default_channel_ids: list[Snowflake] = Field(default_factory=list)
    enabled: bool = False
    mode: int = 0
