"""Guild commands -- inspect a guild over REST.

Every command fetches fresh data as the active profile's bot; nothing is
written. Examples::

    cordkit guild show 81384788765712384
    cordkit guild bans 81384788765712384 --limit 0 --json
"""

from __future__ import annotations

from typing import Any, Optional

import typer

from cordkit.commands.session import run_with_client
from cordkit.output import format_response, info, print_table
from cordkit.utils import is_set


guild_app = typer.Typer(no_args_is_help=True)


def _opt(value: Any) -> str:
    if value is None or not is_set(value):
        return ""
    return str(value)


def _limit(value: int) -> Optional[int]:
    return None if value <= 0 else value


@guild_app.command("show")
def guild_show(
    ctx: typer.Context,
    guild_id: int = typer.Argument(help="Guild id."),
) -> None:
    """Show a summary of a guild."""

    async def _fetch(client: Any) -> dict[str, Any]:
        guild = await client.request_guild(guild_id)
        return {
            "id": str(guild.id),
            "name": guild.name,
            "owner_id": str(guild.owner_id),
            "description": guild.description or None,
            "members": guild.approximate_member_count or None,
            "online": guild.approximate_presence_count or None,
            "premium_tier": int(guild.premium_tier),
            "boosts": guild.premium_subscription_count or 0,
            "verification_level": guild.verification_level.name.lower(),
            "roles": len(guild.roles),
            "emojis": len(guild.emojis),
            "stickers": len(guild.stickers),
            "features": sorted(feature.value for feature in guild.features),
            "icon": guild.icon.url if guild.icon else None,
        }

    format_response(run_with_client(ctx, _fetch))


@guild_app.command("preview")
def guild_preview(
    ctx: typer.Context,
    guild_id: int = typer.Argument(help="Guild id."),
) -> None:
    """Show the public preview of a discoverable guild."""

    async def _fetch(client: Any) -> Any:
        return await client.request_guild_preview(guild_id)

    preview = run_with_client(ctx, _fetch)
    format_response(
        {
            "id": str(preview.id),
            "name": preview.name,
            "description": preview.description,
            "members": preview.approximate_member_count,
            "online": preview.approximate_presence_count,
            "emojis": len(preview.emojis),
            "features": sorted(feature.value for feature in preview.features),
        }
    )


@guild_app.command("roles")
def guild_roles(
    ctx: typer.Context,
    guild_id: int = typer.Argument(help="Guild id."),
) -> None:
    """List roles, highest first."""

    async def _fetch(client: Any) -> list[Any]:
        guild = await client.request_guild(guild_id, with_counts=False)
        return sorted(guild.roles, reverse=True)

    roles = run_with_client(ctx, _fetch)
    rows = [
        [str(r.id), r.name, str(r.position), f"#{r.color:06x}", "yes" if r.managed else ""]
        for r in roles
    ]
    print_table(["ID", "Name", "Position", "Color", "Managed"], rows, title="Roles")


@guild_app.command("channels")
def guild_channels(
    ctx: typer.Context,
    guild_id: int = typer.Argument(help="Guild id."),
) -> None:
    """List channels ordered by position."""

    async def _fetch(client: Any) -> list[Any]:
        guild = await client.request_guild(guild_id, with_counts=False)
        channels = await guild.request_channels()
        return sorted(channels, key=lambda c: (c.position or 0, c.id))

    rows = [
        [str(c.id), c.type.name.lower(), _opt(c.name), _opt(c.parent_id)]
        for c in run_with_client(ctx, _fetch)
    ]
    print_table(["ID", "Type", "Name", "Parent"], rows, title="Channels")


@guild_app.command("bans")
def guild_bans(
    ctx: typer.Context,
    guild_id: int = typer.Argument(help="Guild id."),
    limit: int = typer.Option(100, "--limit", "-l", help="Maximum bans to list (0 for all)."),
) -> None:
    """List banned users, newest first."""

    async def _fetch(client: Any) -> list[Any]:
        guild = await client.request_guild(guild_id, with_counts=False)
        return await guild.bans(limit=_limit(limit)).collect()

    bans = run_with_client(ctx, _fetch)
    if not bans:
        info("No bans.")
        return
    rows = [[str(b.user.id), str(b.user), _opt(b.reason)] for b in bans]
    print_table(["User ID", "User", "Reason"], rows, title="Bans")


@guild_app.command("members")
def guild_members(
    ctx: typer.Context,
    guild_id: int = typer.Argument(help="Guild id."),
    limit: int = typer.Option(100, "--limit", "-l", help="Maximum members to list (0 for all)."),
) -> None:
    """List members in join-id order. The profile must declare GUILD_MEMBERS."""

    async def _fetch(client: Any) -> list[Any]:
        guild = await client.request_guild(guild_id, with_counts=False)
        return await guild.request_members(limit=_limit(limit)).collect()

    rows = [
        [
            str(m.id),
            str(m.user),
            _opt(m.nick),
            m.joined_at.isoformat() if m.joined_at else "",
        ]
        for m in run_with_client(ctx, _fetch)
    ]
    print_table(["ID", "User", "Nick", "Joined"], rows, title="Members")
