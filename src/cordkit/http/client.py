"""Endpoint wrappers over :class:`~cordkit.http.transport.Transport`.

Each method maps to one REST route and returns the decoded JSON body
(``None`` for ``204 No Content``). Decoding into models happens in
:mod:`cordkit.models`; nothing here knows about entities.
"""

from __future__ import annotations

from typing import Any, Optional

from cordkit.http.transport import Transport
from cordkit.utils import JSON, File, Snowflake


class HTTPClient(Transport):
    """REST endpoints used by the models and the CLI.

    Example::

        async with HTTPClient(profile, auth_manager=create_default_manager()) as http:
            guild = await http.get_guild(81384788765712384, with_counts=True)
    """

    # ------------------------------------------------------------------ #
    # Users
    # ------------------------------------------------------------------ #

    async def get_current_user(self) -> JSON:
        return await self.request_json("GET", "/users/@me")

    async def get_user(self, user_id: Snowflake) -> JSON:
        return await self.request_json("GET", f"/users/{user_id}")

    async def leave_guild(self, guild_id: Snowflake) -> None:
        await self.request("DELETE", f"/users/@me/guilds/{guild_id}")

    # ------------------------------------------------------------------ #
    # Guild
    # ------------------------------------------------------------------ #

    async def get_guild(self, guild_id: Snowflake, *, with_counts: bool = True) -> JSON:
        return await self.request_json("GET", f"/guilds/{guild_id}", params={"with_counts": with_counts})

    async def get_guild_preview(self, guild_id: Snowflake) -> JSON:
        return await self.request_json("GET", f"/guilds/{guild_id}/preview")

    async def modify_guild(self, guild_id: Snowflake, payload: JSON, *, reason: Optional[str] = None) -> JSON:
        return await self.request_json("PATCH", f"/guilds/{guild_id}", json_body=payload, reason=reason)

    async def delete_guild(self, guild_id: Snowflake) -> None:
        await self.request("DELETE", f"/guilds/{guild_id}")

    async def get_guild_vanity_url(self, guild_id: Snowflake) -> JSON:
        return await self.request_json("GET", f"/guilds/{guild_id}/vanity-url")

    async def get_guild_invites(self, guild_id: Snowflake) -> list[JSON]:
        return await self.request_json("GET", f"/guilds/{guild_id}/invites")

    async def get_guild_webhooks(self, guild_id: Snowflake) -> list[JSON]:
        return await self.request_json("GET", f"/guilds/{guild_id}/webhooks")

    async def get_guild_integrations(self, guild_id: Snowflake) -> list[JSON]:
        return await self.request_json("GET", f"/guilds/{guild_id}/integrations")

    async def delete_guild_integration(
        self, guild_id: Snowflake, integration_id: Snowflake, *, reason: Optional[str] = None
    ) -> None:
        await self.request("DELETE", f"/guilds/{guild_id}/integrations/{integration_id}", reason=reason)

    async def get_guild_onboarding(self, guild_id: Snowflake) -> JSON:
        return await self.request_json("GET", f"/guilds/{guild_id}/onboarding")

    async def get_guild_widget(self, guild_id: Snowflake) -> JSON:
        return await self.request_json("GET", f"/guilds/{guild_id}/widget.json")

    async def get_guild_widget_settings(self, guild_id: Snowflake) -> JSON:
        return await self.request_json("GET", f"/guilds/{guild_id}/widget")

    async def modify_guild_widget(self, guild_id: Snowflake, payload: JSON, *, reason: Optional[str] = None) -> JSON:
        return await self.request_json("PATCH", f"/guilds/{guild_id}/widget", json_body=payload, reason=reason)

    async def get_guild_welcome_screen(self, guild_id: Snowflake) -> JSON:
        return await self.request_json("GET", f"/guilds/{guild_id}/welcome-screen")

    async def modify_guild_welcome_screen(
        self, guild_id: Snowflake, payload: JSON, *, reason: Optional[str] = None
    ) -> JSON:
        return await self.request_json(
            "PATCH", f"/guilds/{guild_id}/welcome-screen", json_body=payload, reason=reason
        )

    async def get_guild_audit_log(
        self,
        guild_id: Snowflake,
        *,
        user_id: Optional[Snowflake] = None,
        action_type: Optional[int] = None,
        before: Optional[Snowflake] = None,
        after: Optional[Snowflake] = None,
        limit: int = 50,
    ) -> JSON:
        params = {
            "user_id": user_id,
            "action_type": None if action_type is None else int(action_type),
            "before": before,
            "after": after,
            "limit": limit,
        }
        return await self.request_json("GET", f"/guilds/{guild_id}/audit-logs", params=params)

    async def begin_guild_prune(
        self,
        guild_id: Snowflake,
        *,
        days: int = 7,
        compute_prune_count: bool = True,
        include_roles: Optional[list[Snowflake]] = None,
        reason: Optional[str] = None,
    ) -> JSON:
        payload: JSON = {"days": days, "compute_prune_count": compute_prune_count}
        if include_roles:
            payload["include_roles"] = [str(r) for r in include_roles]
        return await self.request_json("POST", f"/guilds/{guild_id}/prune", json_body=payload, reason=reason)

    # ------------------------------------------------------------------ #
    # Bans
    # ------------------------------------------------------------------ #

    async def get_guild_bans(
        self,
        guild_id: Snowflake,
        *,
        limit: int = 1000,
        before: Optional[Snowflake] = None,
        after: Optional[Snowflake] = None,
    ) -> list[JSON]:
        params = {"limit": limit, "before": before, "after": after}
        return await self.request_json("GET", f"/guilds/{guild_id}/bans", params=params)

    async def get_guild_ban(self, guild_id: Snowflake, user_id: Snowflake) -> JSON:
        return await self.request_json("GET", f"/guilds/{guild_id}/bans/{user_id}")

    async def create_guild_ban(
        self,
        guild_id: Snowflake,
        user_id: Snowflake,
        *,
        delete_message_seconds: int = 0,
        reason: Optional[str] = None,
    ) -> None:
        payload = {"delete_message_seconds": delete_message_seconds}
        await self.request("PUT", f"/guilds/{guild_id}/bans/{user_id}", json_body=payload, reason=reason)

    async def remove_guild_ban(self, guild_id: Snowflake, user_id: Snowflake, *, reason: Optional[str] = None) -> None:
        await self.request("DELETE", f"/guilds/{guild_id}/bans/{user_id}", reason=reason)

    # ------------------------------------------------------------------ #
    # Members
    # ------------------------------------------------------------------ #

    async def get_guild_member(self, guild_id: Snowflake, user_id: Snowflake) -> JSON:
        return await self.request_json("GET", f"/guilds/{guild_id}/members/{user_id}")

    async def list_guild_members(
        self, guild_id: Snowflake, *, limit: int = 1000, after: Optional[Snowflake] = None
    ) -> list[JSON]:
        return await self.request_json(
            "GET", f"/guilds/{guild_id}/members", params={"limit": limit, "after": after}
        )

    async def search_guild_members(self, guild_id: Snowflake, query: str, *, limit: int = 1000) -> list[JSON]:
        return await self.request_json(
            "GET", f"/guilds/{guild_id}/members/search", params={"query": query, "limit": limit}
        )

    async def modify_guild_member(
        self, guild_id: Snowflake, user_id: Snowflake, payload: JSON, *, reason: Optional[str] = None
    ) -> JSON:
        return await self.request_json(
            "PATCH", f"/guilds/{guild_id}/members/{user_id}", json_body=payload, reason=reason
        )

    async def remove_guild_member(
        self, guild_id: Snowflake, user_id: Snowflake, *, reason: Optional[str] = None
    ) -> None:
        await self.request("DELETE", f"/guilds/{guild_id}/members/{user_id}", reason=reason)

    async def add_guild_member_role(
        self, guild_id: Snowflake, user_id: Snowflake, role_id: Snowflake, *, reason: Optional[str] = None
    ) -> None:
        await self.request("PUT", f"/guilds/{guild_id}/members/{user_id}/roles/{role_id}", reason=reason)

    async def remove_guild_member_role(
        self, guild_id: Snowflake, user_id: Snowflake, role_id: Snowflake, *, reason: Optional[str] = None
    ) -> None:
        await self.request("DELETE", f"/guilds/{guild_id}/members/{user_id}/roles/{role_id}", reason=reason)

    # ------------------------------------------------------------------ #
    # Channels
    # ------------------------------------------------------------------ #

    async def get_guild_channels(self, guild_id: Snowflake) -> list[JSON]:
        return await self.request_json("GET", f"/guilds/{guild_id}/channels")

    async def get_active_guild_threads(self, guild_id: Snowflake) -> JSON:
        return await self.request_json("GET", f"/guilds/{guild_id}/threads/active")

    async def create_guild_channel(
        self, guild_id: Snowflake, payload: JSON, *, reason: Optional[str] = None
    ) -> JSON:
        return await self.request_json("POST", f"/guilds/{guild_id}/channels", json_body=payload, reason=reason)

    async def delete_channel(self, channel_id: Snowflake, *, reason: Optional[str] = None) -> JSON:
        return await self.request_json("DELETE", f"/channels/{channel_id}", reason=reason)

    # ------------------------------------------------------------------ #
    # Roles
    # ------------------------------------------------------------------ #

    async def get_guild_roles(self, guild_id: Snowflake) -> list[JSON]:
        return await self.request_json("GET", f"/guilds/{guild_id}/roles")

    async def create_guild_role(self, guild_id: Snowflake, payload: JSON, *, reason: Optional[str] = None) -> JSON:
        return await self.request_json("POST", f"/guilds/{guild_id}/roles", json_body=payload, reason=reason)

    async def modify_guild_role_positions(
        self, guild_id: Snowflake, payload: list[JSON], *, reason: Optional[str] = None
    ) -> list[JSON]:
        return await self.request_json("PATCH", f"/guilds/{guild_id}/roles", json_body=payload, reason=reason)

    async def modify_guild_role(
        self, guild_id: Snowflake, role_id: Snowflake, payload: JSON, *, reason: Optional[str] = None
    ) -> JSON:
        return await self.request_json(
            "PATCH", f"/guilds/{guild_id}/roles/{role_id}", json_body=payload, reason=reason
        )

    async def delete_guild_role(self, guild_id: Snowflake, role_id: Snowflake, *, reason: Optional[str] = None) -> None:
        await self.request("DELETE", f"/guilds/{guild_id}/roles/{role_id}", reason=reason)

    # ------------------------------------------------------------------ #
    # Emojis and stickers
    # ------------------------------------------------------------------ #

    async def list_guild_emojis(self, guild_id: Snowflake) -> list[JSON]:
        return await self.request_json("GET", f"/guilds/{guild_id}/emojis")

    async def get_guild_emoji(self, guild_id: Snowflake, emoji_id: Snowflake) -> JSON:
        return await self.request_json("GET", f"/guilds/{guild_id}/emojis/{emoji_id}")

    async def create_guild_emoji(self, guild_id: Snowflake, payload: JSON, *, reason: Optional[str] = None) -> JSON:
        return await self.request_json("POST", f"/guilds/{guild_id}/emojis", json_body=payload, reason=reason)

    async def modify_guild_emoji(
        self, guild_id: Snowflake, emoji_id: Snowflake, payload: JSON, *, reason: Optional[str] = None
    ) -> JSON:
        return await self.request_json(
            "PATCH", f"/guilds/{guild_id}/emojis/{emoji_id}", json_body=payload, reason=reason
        )

    async def delete_guild_emoji(
        self, guild_id: Snowflake, emoji_id: Snowflake, *, reason: Optional[str] = None
    ) -> None:
        await self.request("DELETE", f"/guilds/{guild_id}/emojis/{emoji_id}", reason=reason)

    async def list_guild_stickers(self, guild_id: Snowflake) -> list[JSON]:
        return await self.request_json("GET", f"/guilds/{guild_id}/stickers")

    async def get_guild_sticker(self, guild_id: Snowflake, sticker_id: Snowflake) -> JSON:
        return await self.request_json("GET", f"/guilds/{guild_id}/stickers/{sticker_id}")

    async def create_guild_sticker(
        self, guild_id: Snowflake, form: dict[str, Any], file: File, *, reason: Optional[str] = None
    ) -> JSON:
        """Upload a sticker; the only multipart route in this client."""
        return await self.request_json(
            "POST",
            f"/guilds/{guild_id}/stickers",
            data=form,
            files={"file": file.as_multipart()},
            reason=reason,
        )

    async def modify_guild_sticker(
        self, guild_id: Snowflake, sticker_id: Snowflake, payload: JSON, *, reason: Optional[str] = None
    ) -> JSON:
        return await self.request_json(
            "PATCH", f"/guilds/{guild_id}/stickers/{sticker_id}", json_body=payload, reason=reason
        )

    async def delete_guild_sticker(
        self, guild_id: Snowflake, sticker_id: Snowflake, *, reason: Optional[str] = None
    ) -> None:
        await self.request("DELETE", f"/guilds/{guild_id}/stickers/{sticker_id}", reason=reason)

    # ------------------------------------------------------------------ #
    # Scheduled events
    # ------------------------------------------------------------------ #

    async def list_scheduled_events_for_guild(
        self, guild_id: Snowflake, *, with_user_count: bool = False
    ) -> list[JSON]:
        return await self.request_json(
            "GET", f"/guilds/{guild_id}/scheduled-events", params={"with_user_count": with_user_count}
        )

    async def get_guild_scheduled_event(
        self, guild_id: Snowflake, event_id: Snowflake, *, with_user_count: bool = False
    ) -> JSON:
        return await self.request_json(
            "GET",
            f"/guilds/{guild_id}/scheduled-events/{event_id}",
            params={"with_user_count": with_user_count},
        )

    async def create_guild_scheduled_event(
        self, guild_id: Snowflake, payload: JSON, *, reason: Optional[str] = None
    ) -> JSON:
        return await self.request_json(
            "POST", f"/guilds/{guild_id}/scheduled-events", json_body=payload, reason=reason
        )

    async def modify_guild_scheduled_event(
        self, guild_id: Snowflake, event_id: Snowflake, payload: JSON, *, reason: Optional[str] = None
    ) -> JSON:
        return await self.request_json(
            "PATCH", f"/guilds/{guild_id}/scheduled-events/{event_id}", json_body=payload, reason=reason
        )

    async def delete_guild_scheduled_event(self, guild_id: Snowflake, event_id: Snowflake) -> None:
        await self.request("DELETE", f"/guilds/{guild_id}/scheduled-events/{event_id}")

    async def get_guild_scheduled_event_users(
        self,
        guild_id: Snowflake,
        event_id: Snowflake,
        *,
        limit: int = 100,
        before: Optional[Snowflake] = None,
        after: Optional[Snowflake] = None,
    ) -> list[JSON]:
        params = {"limit": limit, "with_member": False, "before": before, "after": after}
        return await self.request_json(
            "GET", f"/guilds/{guild_id}/scheduled-events/{event_id}/users", params=params
        )

    # ------------------------------------------------------------------ #
    # Templates
    # ------------------------------------------------------------------ #

    async def get_guild_templates(self, guild_id: Snowflake) -> list[JSON]:
        return await self.request_json("GET", f"/guilds/{guild_id}/templates")

    async def create_guild_template(self, guild_id: Snowflake, payload: JSON) -> JSON:
        return await self.request_json("POST", f"/guilds/{guild_id}/templates", json_body=payload)

    async def sync_guild_template(self, guild_id: Snowflake, code: str) -> JSON:
        return await self.request_json("PUT", f"/guilds/{guild_id}/templates/{code}")

    async def modify_guild_template(self, guild_id: Snowflake, code: str, payload: JSON) -> JSON:
        return await self.request_json("PATCH", f"/guilds/{guild_id}/templates/{code}", json_body=payload)

    async def delete_guild_template(self, guild_id: Snowflake, code: str) -> JSON:
        return await self.request_json("DELETE", f"/guilds/{guild_id}/templates/{code}")

    # ------------------------------------------------------------------ #
    # Auto moderation
    # ------------------------------------------------------------------ #

    async def list_auto_moderation_rules(self, guild_id: Snowflake) -> list[JSON]:
        return await self.request_json("GET", f"/guilds/{guild_id}/auto-moderation/rules")

    async def get_auto_moderation_rule(self, guild_id: Snowflake, rule_id: Snowflake) -> JSON:
        return await self.request_json("GET", f"/guilds/{guild_id}/auto-moderation/rules/{rule_id}")

    async def create_auto_moderation_rule(
        self, guild_id: Snowflake, payload: JSON, *, reason: Optional[str] = None
    ) -> JSON:
        return await self.request_json(
            "POST", f"/guilds/{guild_id}/auto-moderation/rules", json_body=payload, reason=reason
        )

    # ------------------------------------------------------------------ #
    # Application commands
    # ------------------------------------------------------------------ #

    async def get_guild_application_commands(self, application_id: Snowflake, guild_id: Snowflake) -> list[JSON]:
        return await self.request_json("GET", f"/applications/{application_id}/guilds/{guild_id}/commands")

    async def get_guild_application_command_permissions(
        self, application_id: Snowflake, guild_id: Snowflake
    ) -> list[JSON]:
        return await self.request_json(
            "GET", f"/applications/{application_id}/guilds/{guild_id}/commands/permissions"
        )

    async def get_application_command_permissions(
        self, application_id: Snowflake, guild_id: Snowflake, command_id: Snowflake
    ) -> JSON:
        return await self.request_json(
            "GET", f"/applications/{application_id}/guilds/{guild_id}/commands/{command_id}/permissions"
        )
