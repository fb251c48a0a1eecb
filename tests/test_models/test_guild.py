"""Tests for Guild decoding, its caches and the guild-scoped REST operations."""

from __future__ import annotations

import asyncio
import datetime
import json
from typing import Any

import pytest

from cordkit.enums import (
    AutoModerationEventType,
    AutoModerationTriggerType,
    ChannelType,
    Feature,
    Intents,
    Locale,
    Permissions,
    ScheduledEventEntityType,
    SystemChannelFlags,
    VerificationLevel,
)
from cordkit.exceptions import DecodeError, InvalidUsageError, NotFoundError
from cordkit.models.guild import Guild, GuildEdit
from cordkit.models.guild_info import WelcomeScreenEdit
from cordkit.utils import UNSET, File

GUILD_ID = 1000000000000000001
OWNER_ID = 2000000000000000001
BOT_ID = 2000000000000000002
GENERAL_ID = 5000000000000000001


def _body(request) -> Any:
    return json.loads(request.content)


# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------


class TestGuildSnapshot:
    def test_scalar_fields(self, guild_payload) -> None:
        guild = Guild.from_snapshot(guild_payload)
        assert guild.id == GUILD_ID
        assert guild.name == "Test Guild"
        assert str(guild) == "Test Guild"
        assert guild.owner_id == OWNER_ID
        assert guild.verification_level is VerificationLevel.MEDIUM
        assert guild.system_channel_flags == (
            SystemChannelFlags.SUPPRESS_JOIN_NOTIFICATIONS | SystemChannelFlags.SUPPRESS_GUILD_REMINDER_NOTIFICATIONS
        )
        assert guild.preferred_locale is Locale.ENGLISH_US
        assert guild.features == [Feature.COMMUNITY, Feature.NEWS]
        assert guild.member_count == 2

    def test_null_and_absent_fields(self, guild_payload) -> None:
        guild = Guild.from_snapshot(guild_payload)
        assert guild.description is None
        assert guild.afk_channel_id is None
        assert guild.safety_alerts_channel_id is UNSET
        assert guild.banner is None

    def test_icon_asset_is_animated(self, guild_payload) -> None:
        guild = Guild.from_snapshot(guild_payload)
        assert guild.icon.url == (
            f"https://cdn.discordapp.com/icons/{GUILD_ID}/a_1269e74af4df7417b13759eae50c83dc.gif"
        )
        assert guild.icon.with_size(64).endswith(".gif?size=64")

    def test_missing_required_field(self, guild_payload) -> None:
        del guild_payload["owner_id"]
        with pytest.raises(DecodeError, match="Guild"):
            Guild.from_snapshot(guild_payload)

    def test_roles_emojis_and_stickers_are_bound(self, guild_payload) -> None:
        guild = Guild.from_snapshot(guild_payload)
        assert [role.name for role in sorted(guild.roles)] == ["@everyone", "Member", "Moderator"]
        assert guild.default_role.is_default()
        assert guild.get_role(3000000000000000001).permissions == Permissions.ADMINISTRATOR
        assert guild.get_emoji(4000000000000000001).guild_id == GUILD_ID
        assert guild.get_sticker(6000000000000000001).name == "wave"
        assert guild.get_role(42) is None

    def test_channels_skip_unknown_types_and_sort_by_position(self, guild_payload) -> None:
        guild = Guild.from_snapshot(guild_payload)
        assert [c.name for c in guild.channels] == ["Text Channels", "general", "Lounge"]
        assert guild.get_channel(5000000000000000004) is None
        assert [c.name for c in guild.text_channels] == ["general"]
        assert [c.name for c in guild.voice_channels] == ["Lounge"]
        assert [c.name for c in guild.categories] == ["Text Channels"]
        assert guild.get_channel(GENERAL_ID).guild_id == GUILD_ID

    def test_threads_are_cached_apart_from_channels(self, guild_payload) -> None:
        guild = Guild.from_snapshot(guild_payload)
        thread = guild.get_thread(5000000000000000010)
        assert thread.type is ChannelType.PUBLIC_THREAD
        assert thread.thread_metadata.auto_archive_duration == 1440
        assert thread not in guild.channels
        assert guild.get_channel(thread.id) is thread

    def test_members_presences_and_events(self, guild_payload) -> None:
        guild = Guild.from_snapshot(guild_payload)
        owner = guild.owner
        assert owner.nick == "boss"
        assert owner.guild_id == GUILD_ID
        assert guild.get_member(BOT_ID).user.bot is True
        assert guild.get_presence(OWNER_ID).activity.name == "Chess"
        assert guild.get_presence(BOT_ID) is None
        event = guild.get_scheduled_event(7000000000000000001)
        assert event.location == "Central Park"
        assert event.entity_type is ScheduledEventEntityType.EXTERNAL

    def test_update_rebinds_replaced_lists(self, guild_payload) -> None:
        guild = Guild.from_snapshot(guild_payload)
        changed = guild.update({"name": "Renamed", "emojis": [{"id": "4000000000000000002", "name": "new"}]})
        assert set(changed) == {"name", "emojis"}
        assert guild.name == "Renamed"
        assert [e.name for e in guild.emojis] == ["new"]
        assert guild.emojis[0].guild_id == GUILD_ID
        # Collections not named in the fragment are untouched.
        assert len(guild.roles) == 3

    def test_me_without_client_is_none(self, guild_payload) -> None:
        assert Guild.from_snapshot(guild_payload).me is None


class TestGuildEdit:
    def test_payload_has_only_set_fields(self) -> None:
        edit = GuildEdit(name="Renamed", afk_channel_id=None, verification_level=VerificationLevel.HIGH)
        assert edit.to_payload() == {"name": "Renamed", "afk_channel_id": None, "verification_level": 3}

    def test_images_are_data_uris(self) -> None:
        payload = GuildEdit(icon=File(b"GIF89a")).to_payload()
        assert payload == {"icon": "data:image/gif;base64,R0lGODlh"}

    def test_flags_and_locale(self) -> None:
        payload = GuildEdit(
            system_channel_flags=SystemChannelFlags.SUPPRESS_JOIN_NOTIFICATIONS,
            preferred_locale=Locale.GERMAN,
        ).to_payload()
        assert payload == {"system_channel_flags": 1, "preferred_locale": "de"}


# ---------------------------------------------------------------------------
# REST operations
# ---------------------------------------------------------------------------


@pytest.fixture
def run_guild(router, make_client, rest_guild_payload):
    """Run ``coro(guild, client)`` against a guild fetched through ``router``."""

    def _run(coro: Any, **client_kwargs: Any) -> Any:
        router.add("GET", f"/guilds/{GUILD_ID}", rest_guild_payload)

        async def main() -> Any:
            async with make_client(**client_kwargs) as client:
                guild = await client.request_guild(GUILD_ID)
                return await coro(guild, client)

        return asyncio.run(main())

    return _run


class TestGuildEditRequest:
    def test_edit_merges_response(self, router, run_guild, rest_guild_payload) -> None:
        router.add("PATCH", f"/guilds/{GUILD_ID}", {**rest_guild_payload, "name": "Renamed"})

        async def scenario(guild, client):
            await guild.edit(GuildEdit(name="Renamed"), reason="tidy up")
            return guild

        guild = run_guild(scenario)
        assert guild.name == "Renamed"
        request = router.calls("PATCH", f"/guilds/{GUILD_ID}")[0]
        assert _body(request) == {"name": "Renamed"}
        assert request.headers["X-Audit-Log-Reason"] == "tidy up"

    def test_empty_edit_makes_no_request(self, router, run_guild) -> None:
        async def scenario(guild, client):
            return await guild.edit(GuildEdit())

        run_guild(scenario)
        assert router.calls("PATCH", f"/guilds/{GUILD_ID}") == []

    def test_request_guild_reads_counts(self, router, run_guild) -> None:
        guild = run_guild(lambda guild, client: asyncio.sleep(0, result=guild))
        assert guild.approximate_member_count == 42
        assert guild.member_count is UNSET
        assert router.requests[0].url.params["with_counts"] == "true"


class TestBans:
    def test_ban_validates_delete_seconds(self, run_guild) -> None:
        async def scenario(guild, client):
            await guild.ban(OWNER_ID, delete_message_seconds=604801)

        with pytest.raises(InvalidUsageError):
            run_guild(scenario)

    def test_ban_and_unban(self, router, run_guild) -> None:
        router.add("PUT", f"/guilds/{GUILD_ID}/bans/{OWNER_ID}", status=204)
        router.add("DELETE", f"/guilds/{GUILD_ID}/bans/{OWNER_ID}", status=204)

        async def scenario(guild, client):
            await guild.ban(OWNER_ID, delete_message_seconds=3600, reason="spam")
            await guild.unban(OWNER_ID)

        run_guild(scenario)
        put = router.calls("PUT", f"/guilds/{GUILD_ID}/bans/{OWNER_ID}")[0]
        assert _body(put) == {"delete_message_seconds": 3600}
        assert put.headers["X-Audit-Log-Reason"] == "spam"
        assert len(router.calls("DELETE", f"/guilds/{GUILD_ID}/bans/{OWNER_ID}")) == 1

    def test_bans_page_backwards_by_default(self, router, run_guild) -> None:
        def ban(ident: int) -> dict:
            return {"user": {"id": str(ident), "username": f"u{ident}", "discriminator": "0"}, "reason": None}

        router.add("GET", f"/guilds/{GUILD_ID}/bans", [ban(30), ban(20)])
        router.add("GET", f"/guilds/{GUILD_ID}/bans", [ban(10)])

        async def scenario(guild, client):
            paginator = guild.bans(limit=None)
            paginator._page_size = 2
            return await paginator.collect()

        bans = run_guild(scenario)
        assert [b.user.id for b in bans] == [30, 20, 10]
        first, second = router.calls("GET", f"/guilds/{GUILD_ID}/bans")
        assert dict(first.url.params) == {"limit": "2"}
        assert dict(second.url.params) == {"limit": "2", "before": "20"}

    def test_bans_after_cursor(self, router, run_guild) -> None:
        router.add("GET", f"/guilds/{GUILD_ID}/bans", [])

        async def scenario(guild, client):
            return await guild.bans(limit=5, after=100).collect()

        assert run_guild(scenario) == []
        request = router.calls("GET", f"/guilds/{GUILD_ID}/bans")[0]
        assert dict(request.url.params) == {"limit": "5", "after": "100"}

    def test_request_ban_not_found(self, router, run_guild) -> None:
        router.add("GET", f"/guilds/{GUILD_ID}/bans/5", {"code": 10026, "message": "Unknown Ban"}, status=404)

        async def scenario(guild, client):
            return await guild.request_ban(5)

        with pytest.raises(NotFoundError) as exc_info:
            run_guild(scenario)
        assert exc_info.value.code == 10026


class TestMembers:
    def _member(self, ident: int) -> dict:
        return {"user": {"id": str(ident), "username": f"m{ident}", "discriminator": "0"}, "roles": []}

    def test_request_members_needs_intent(self, run_guild) -> None:
        async def scenario(guild, client):
            return guild.request_members()

        with pytest.raises(InvalidUsageError, match="GUILD_MEMBERS"):
            run_guild(scenario)

    def test_request_members_pages_after(self, router, run_guild) -> None:
        router.add("GET", f"/guilds/{GUILD_ID}/members", [self._member(1), self._member(2)])

        async def scenario(guild, client):
            return await guild.request_members(limit=10, after=0).collect()

        members = run_guild(scenario, intents=Intents.default() | Intents.GUILD_MEMBERS)
        assert [m.id for m in members] == [1, 2]
        assert members[0].guild_id == GUILD_ID
        request = router.calls("GET", f"/guilds/{GUILD_ID}/members")[0]
        assert dict(request.url.params) == {"limit": "10", "after": "0"}

    def test_search_clamps_limit(self, router, run_guild) -> None:
        router.add("GET", f"/guilds/{GUILD_ID}/members/search", [self._member(3)])

        async def scenario(guild, client):
            return await guild.search_members("m", limit=5000)

        assert [m.id for m in run_guild(scenario)] == [3]
        request = router.calls("GET", f"/guilds/{GUILD_ID}/members/search")[0]
        assert dict(request.url.params) == {"query": "m", "limit": "1000"}

    def test_search_defaults_to_the_largest_page(self, router, run_guild) -> None:
        router.add("GET", f"/guilds/{GUILD_ID}/members/search", [self._member(3), self._member(4)])

        async def scenario(guild, client):
            found = await guild.search_members("ab")
            await client.http.search_guild_members(guild.id, "ab")
            return found

        assert [m.id for m in run_guild(scenario)] == [3, 4]
        calls = router.calls("GET", f"/guilds/{GUILD_ID}/members/search")
        assert [dict(request.url.params) for request in calls] == [{"query": "ab", "limit": "1000"}] * 2

    def test_member_role_changes(self, router, run_guild) -> None:
        router.add("GET", f"/guilds/{GUILD_ID}/members/3", self._member(3))
        router.add("PUT", f"/guilds/{GUILD_ID}/members/3/roles/77", status=204)
        router.add("DELETE", f"/guilds/{GUILD_ID}/members/3/roles/77", status=204)

        async def scenario(guild, client):
            member = await guild.request_member(3)
            await member.add_role(77)
            after_add = list(member.role_ids)
            await member.remove_role(77)
            return after_add, member.role_ids

        after_add, after_remove = run_guild(scenario)
        assert after_add == [77]
        assert after_remove == []


class TestCreation:
    def test_create_text_channel_caches_it(self, router, run_guild) -> None:
        router.add(
            "POST",
            f"/guilds/{GUILD_ID}/channels",
            {"id": "900", "type": 0, "name": "news", "position": 5, "parent_id": "5000000000000000003"},
        )

        async def scenario(guild, client):
            channel = await guild.create_text_channel("news", category=5000000000000000003, topic="Daily")
            return guild, channel

        guild, channel = run_guild(scenario)
        assert guild.get_channel(900) is channel
        body = _body(router.calls("POST", f"/guilds/{GUILD_ID}/channels")[0])
        assert body == {"name": "news", "type": 0, "topic": "Daily", "parent_id": 5000000000000000003, "nsfw": False}

    def test_create_role(self, router, run_guild) -> None:
        router.add("POST", f"/guilds/{GUILD_ID}/roles", {"id": "901", "name": "helpers", "permissions": "2"})

        async def scenario(guild, client):
            role = await guild.create_role(name="helpers", permissions=Permissions.KICK_MEMBERS)
            return guild, role

        guild, role = run_guild(scenario)
        assert guild.get_role(901) is role
        assert role.guild_id == GUILD_ID
        body = _body(router.calls("POST", f"/guilds/{GUILD_ID}/roles")[0])
        assert body["permissions"] == "2"

    def test_external_event_requires_location_and_end(self, run_guild) -> None:
        async def scenario(guild, client):
            await guild.create_scheduled_event(
                "party",
                start_time=datetime.datetime(2030, 1, 1, tzinfo=datetime.timezone.utc),
                entity_type=ScheduledEventEntityType.EXTERNAL,
                location="Park",
            )

        with pytest.raises(InvalidUsageError, match="location and an end time"):
            run_guild(scenario)

    def test_voice_event_requires_channel(self, run_guild) -> None:
        async def scenario(guild, client):
            await guild.create_scheduled_event(
                "talk",
                start_time=datetime.datetime(2030, 1, 1, tzinfo=datetime.timezone.utc),
                entity_type=ScheduledEventEntityType.VOICE,
            )

        with pytest.raises(InvalidUsageError, match="channel"):
            run_guild(scenario)

    def test_create_sticker_uploads_multipart(self, router, run_guild) -> None:
        router.add(
            "POST",
            f"/guilds/{GUILD_ID}/stickers",
            {"id": "902", "name": "wave", "format_type": 1, "guild_id": str(GUILD_ID)},
        )

        async def scenario(guild, client):
            sticker = await guild.create_sticker(
                "wave", description="hi", emoji="wave", file=File(b"\x89PNG\r\n\x1a\n", "wave.png")
            )
            return guild, sticker

        guild, sticker = run_guild(scenario)
        assert guild.get_sticker(902) is sticker
        request = router.calls("POST", f"/guilds/{GUILD_ID}/stickers")[0]
        assert request.headers["content-type"].startswith("multipart/form-data")

    def test_prune_validates_days(self, run_guild) -> None:
        async def scenario(guild, client):
            await guild.prune(days=31)

        with pytest.raises(InvalidUsageError):
            run_guild(scenario)

    def test_prune_returns_count(self, router, run_guild) -> None:
        router.add("POST", f"/guilds/{GUILD_ID}/prune", {"pruned": 4})

        async def scenario(guild, client):
            return await guild.prune(days=7, include_roles=[3000000000000000002])

        assert run_guild(scenario) == 4
        body = _body(router.calls("POST", f"/guilds/{GUILD_ID}/prune")[0])
        assert body == {"days": 7, "compute_prune_count": True, "include_roles": ["3000000000000000002"]}

    def test_auto_moderation_rule_needs_metadata(self, run_guild) -> None:
        async def scenario(guild, client):
            await guild.create_auto_moderation_rule(
                "no slurs",
                event_type=AutoModerationEventType.MESSAGE_SEND,
                trigger_type=AutoModerationTriggerType.KEYWORD,
                actions=[{"type": 1}],
            )

        with pytest.raises(InvalidUsageError, match="KEYWORD"):
            run_guild(scenario)


class TestGuildResources:
    def test_vanity_invite_without_code(self, router, run_guild) -> None:
        router.add("GET", f"/guilds/{GUILD_ID}/vanity-url", {"code": None, "uses": 0})

        async def scenario(guild, client):
            return await guild.vanity_invite()

        assert run_guild(scenario) is None

    def test_audit_log_clamps_limit(self, router, run_guild) -> None:
        router.add(
            "GET",
            f"/guilds/{GUILD_ID}/audit-logs",
            {
                "audit_log_entries": [
                    {"id": "10", "action_type": 22, "user_id": str(OWNER_ID), "target_id": "5", "reason": "spam"}
                ],
                "users": [],
                "webhooks": [],
            },
        )

        async def scenario(guild, client):
            return await guild.audit_logs(limit=500, user=OWNER_ID)

        log = run_guild(scenario)
        assert log.entries[0].reason == "spam"
        request = router.calls("GET", f"/guilds/{GUILD_ID}/audit-logs")[0]
        assert dict(request.url.params) == {"user_id": str(OWNER_ID), "limit": "100"}

    def test_welcome_screen_edit(self, router, run_guild) -> None:
        router.add(
            "PATCH",
            f"/guilds/{GUILD_ID}/welcome-screen",
            {"description": "Hi", "welcome_channels": [{"channel_id": str(GENERAL_ID), "description": "chat"}]},
        )

        async def scenario(guild, client):
            return await guild.edit_welcome_screen(WelcomeScreenEdit(description="Hi"))

        screen = run_guild(scenario)
        assert screen.welcome_channels[0].channel_id == GENERAL_ID
        body = _body(router.calls("PATCH", f"/guilds/{GUILD_ID}/welcome-screen")[0])
        assert body == {"description": "Hi"}

    def test_application_commands_default_to_client_user(self, router, run_guild, user_payload) -> None:
        router.add("GET", "/users/@me", user_payload)
        router.add("GET", f"/applications/{BOT_ID}/guilds/{GUILD_ID}/commands", [])

        async def scenario(guild, client):
            await client.fetch_current_user()
            return await guild.application_commands()

        assert run_guild(scenario) == []

    def test_application_commands_need_an_application(self, run_guild) -> None:
        async def scenario(guild, client):
            return await guild.application_commands()

        with pytest.raises(InvalidUsageError, match="application_id"):
            run_guild(scenario)
