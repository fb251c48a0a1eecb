"""User commands -- look up the bot's own account or any user."""

from __future__ import annotations

from typing import Any

import typer

from cordkit.commands.session import run_with_client
from cordkit.output import format_response


user_app = typer.Typer(no_args_is_help=True)


def _summary(user: Any) -> dict[str, Any]:
    return {
        "id": str(user.id),
        "username": user.name,
        "display_name": user.display_name,
        "bot": user.bot,
        "created_at": user.created_at.isoformat(),
        "avatar": user.display_avatar_url,
        "flags": [flag.name for flag in user.flags],
    }


@user_app.command("me")
def user_me(ctx: typer.Context) -> None:
    """Show the account the profile's token belongs to."""

    async def _fetch(client: Any) -> Any:
        return await client.fetch_current_user()

    format_response(_summary(run_with_client(ctx, _fetch)))


@user_app.command("show")
def user_show(
    ctx: typer.Context,
    user_id: int = typer.Argument(help="User id."),
) -> None:
    async def _fetch(client: Any) -> Any:
        return await client.request_user(user_id)

    format_response(_summary(run_with_client(ctx, _fetch)))
