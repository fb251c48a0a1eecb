"""Typed models decoded from Discord API payloads."""

from cordkit.models.activity import (
    Activity,
    ActivityAssets,
    ActivityButton,
    ActivityParty,
    ActivityTimestamps,
    Presence,
    PresenceActivity,
)
from cordkit.models.base import Asset, Entity, Model
from cordkit.models.channel import (
    ForumTag,
    GuildChannel,
    PermissionOverwrite,
    StageInstance,
    ThreadMetadata,
    VoiceState,
    WidgetChannel,
)
from cordkit.models.emoji import Emoji, PartialEmoji
from cordkit.models.guild import Guild, GuildEdit
from cordkit.models.guild_info import (
    Ban,
    Integration,
    IntegrationAccount,
    IntegrationApplication,
    Onboarding,
    OnboardingPrompt,
    OnboardingPromptOption,
    Preview,
    WelcomeScreen,
    WelcomeScreenChannel,
    WelcomeScreenEdit,
    Widget,
    WidgetMember,
    WidgetSettings,
)
from cordkit.models.member import Member, MemberEdit
from cordkit.models.misc import (
    ApplicationCommand,
    AuditLog,
    AuditLogEntry,
    AutoModerationRule,
    GuildApplicationCommandPermissions,
    Invite,
    Webhook,
)
from cordkit.models.role import Role, RoleEdit
from cordkit.models.scheduled_event import ScheduledEvent, ScheduledEventEdit
from cordkit.models.sticker import GuildSticker, Sticker
from cordkit.models.template import Template, TemplateEdit
from cordkit.models.user import ClientUser, User

__all__ = [
    "Activity",
    "ActivityAssets",
    "ActivityButton",
    "ActivityParty",
    "ActivityTimestamps",
    "ApplicationCommand",
    "Asset",
    "AuditLog",
    "AuditLogEntry",
    "AutoModerationRule",
    "Ban",
    "ClientUser",
    "Emoji",
    "Entity",
    "ForumTag",
    "Guild",
    "GuildApplicationCommandPermissions",
    "GuildChannel",
    "GuildEdit",
    "GuildSticker",
    "Integration",
    "IntegrationAccount",
    "IntegrationApplication",
    "Invite",
    "Member",
    "MemberEdit",
    "Model",
    "Onboarding",
    "OnboardingPrompt",
    "OnboardingPromptOption",
    "PartialEmoji",
    "PermissionOverwrite",
    "Presence",
    "PresenceActivity",
    "Preview",
    "Role",
    "RoleEdit",
    "ScheduledEvent",
    "ScheduledEventEdit",
    "StageInstance",
    "Sticker",
    "Template",
    "TemplateEdit",
    "ThreadMetadata",
    "User",
    "VoiceState",
    "Webhook",
    "WelcomeScreen",
    "WelcomeScreenChannel",
    "WelcomeScreenEdit",
    "Widget",
    "WidgetChannel",
    "WidgetMember",
    "WidgetSettings",
]
