"""Tests for roles, channels, emojis, stickers and activities."""

from __future__ import annotations

import pytest

from cordkit.enums import ActivityType, ChannelType, Permissions
from cordkit.exceptions import DecodeError, InvalidUsageError
from cordkit.models.activity import Presence, PresenceActivity
from cordkit.models.channel import GuildChannel, PermissionOverwrite
from cordkit.models.emoji import Emoji, PartialEmoji
from cordkit.models.role import Role, RoleEdit
from cordkit.models.sticker import GuildSticker
from cordkit.utils import UNSET, File


class TestRole:
    def test_permissions_decode_from_string(self) -> None:
        role = Role.from_snapshot({"id": "3", "name": "mods", "permissions": "8"}, guild_id=1)
        assert role.permissions == Permissions.ADMINISTRATOR
        assert role.model_dump(mode="json", by_alias=True)["permissions"] == "8"

    def test_default_role_shares_guild_id(self) -> None:
        assert Role.from_snapshot({"id": "1", "name": "@everyone"}, guild_id=1).is_default()
        assert not Role.from_snapshot({"id": "2", "name": "x"}, guild_id=1).is_default()

    def test_ordering_by_position_then_id(self) -> None:
        low = Role.from_snapshot({"id": "9", "name": "low", "position": 1})
        tie = Role.from_snapshot({"id": "5", "name": "tie", "position": 1})
        high = Role.from_snapshot({"id": "2", "name": "high", "position": 4})
        assert sorted([high, low, tie]) == [tie, low, high]

    def test_icon_unset_and_null(self) -> None:
        assert Role.from_snapshot({"id": "2", "name": "x"}).icon_hash is UNSET
        assert Role.from_snapshot({"id": "2", "name": "x", "icon": None}).icon is None

    def test_edit_payload(self) -> None:
        edit = RoleEdit(name="new", permissions=Permissions.KICK_MEMBERS | Permissions.BAN_MEMBERS, icon=None)
        assert edit.to_payload() == {"name": "new", "permissions": "6", "icon": None}

    def test_edit_icon_is_a_data_uri(self) -> None:
        payload = RoleEdit(icon=File(b"GIF89a")).to_payload()
        assert payload["icon"].startswith("data:image/gif;base64,")


class TestGuildChannel:
    def test_decodes_text_channel_and_fills_guild_id(self) -> None:
        channel = GuildChannel.from_snapshot(
            {"id": "5", "type": 0, "name": "general", "position": 1, "topic": None},
            guild_id=1,
        )
        assert channel.guild_id == 1
        assert channel.is_text()
        assert not channel.is_thread()
        assert channel.topic is None
        assert channel.bitrate is UNSET
        assert channel.mention == "<#5>"

    def test_unknown_type_is_a_decode_error(self) -> None:
        with pytest.raises(DecodeError):
            GuildChannel.from_snapshot({"id": "5", "type": 99, "name": "?"})

    def test_kind_predicates(self) -> None:
        def make(kind: ChannelType) -> GuildChannel:
            return GuildChannel.from_snapshot({"id": "1", "type": int(kind)})

        assert make(ChannelType.GUILD_VOICE).is_voice()
        assert make(ChannelType.GUILD_STAGE_VOICE).is_stage()
        assert make(ChannelType.GUILD_STAGE_VOICE).is_connectable()
        assert make(ChannelType.GUILD_CATEGORY).is_category()
        assert make(ChannelType.GUILD_MEDIA).is_forum()
        assert make(ChannelType.PRIVATE_THREAD).is_thread()

    def test_overwrite_lookup(self) -> None:
        channel = GuildChannel.from_snapshot(
            {
                "id": "5",
                "type": 0,
                "permission_overwrites": [{"id": "7", "type": 0, "allow": "1024", "deny": "2048"}],
            }
        )
        overwrite = channel.overwrite_for(7)
        assert overwrite.allow == Permissions.VIEW_CHANNEL
        assert overwrite.deny == Permissions.SEND_MESSAGES
        assert channel.overwrite_for(8) is None

    def test_overwrite_payload(self) -> None:
        overwrite = PermissionOverwrite(id=7, type=1, allow=Permissions.VIEW_CHANNEL)
        assert overwrite.to_payload() == {"id": 7, "type": 1, "allow": "1024", "deny": "0"}


class TestEmoji:
    def test_url_and_str(self) -> None:
        emoji = Emoji.from_snapshot({"id": "4", "name": "blob", "animated": True}, guild_id=1)
        assert emoji.url == "https://cdn.discordapp.com/emojis/4.gif"
        assert str(emoji) == "<a:blob:4>"
        assert emoji.guild_id == 1

    def test_partial_emoji(self) -> None:
        assert str(PartialEmoji(name="🔥")) == "🔥"
        assert not PartialEmoji(name="🔥").is_custom
        assert str(PartialEmoji(id=4, name="blob")) == "<:blob:4>"


def test_guild_sticker_takes_guild_from_payload() -> None:
    sticker = GuildSticker.from_snapshot({"id": "6", "name": "wave", "format_type": 4, "guild_id": "1"})
    assert sticker._guild_id == 1
    assert sticker.url == "https://cdn.discordapp.com/stickers/6.gif"


class TestActivities:
    def test_presence_decodes_button_labels(self) -> None:
        presence = Presence.model_validate(
            {
                "status": "dnd",
                "activities": [{"name": "Chess", "type": 0, "buttons": ["Join"]}],
                "client_status": {"mobile": "dnd"},
            }
        )
        assert presence.activity.name == "Chess"
        assert presence.activity.buttons[0].label == "Join"

    def test_streaming_needs_url(self) -> None:
        with pytest.raises(InvalidUsageError):
            PresenceActivity(name="live", type=ActivityType.STREAMING).to_payload()

    def test_activity_payload(self) -> None:
        activity = PresenceActivity(name="live", type=ActivityType.STREAMING, url="https://twitch.tv/x")
        assert activity.to_payload() == {"name": "live", "type": 1, "url": "https://twitch.tv/x"}
        assert PresenceActivity(name="chess", state="winning").to_payload() == {
            "name": "chess",
            "type": 0,
            "state": "winning",
        }
