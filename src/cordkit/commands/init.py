"""Init command -- create a bot profile.

Implements ``cordkit init``: writes a :class:`~cordkit.models.config.Profile`
describing where the bot token comes from and which intents the bot
declares, and pins it in a project-local ``cordkit.json``.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import typer

from cordkit.output import error, info, success, suggest


def init_command(
    name: str = typer.Option(..., "--name", "-n", help="Profile name."),
    token_source: str = typer.Option(
        "env:DISCORD_TOKEN",
        "--token-source",
        "-t",
        help="Where the token comes from: env:VAR, file:/path or prompt.",
    ),
    auth_type: str = typer.Option("bot", "--auth-type", help="bot or bearer."),
    intents: Optional[int] = typer.Option(
        None, "--intents", help="Gateway intents bitfield (default: non-privileged intents)."
    ),
    api_url: Optional[str] = typer.Option(None, "--api-url", help="Override the API root."),
) -> None:
    """Create a profile and make it the default for this directory.

    Example::

        cordkit init --name mybot
        cordkit init --name mybot --token-source file:~/.mybot-token --intents 3
    """
    from cordkit.auth import create_default_manager
    from cordkit.config import profile_exists, save_profile
    from cordkit.models.config import AuthConfig, Profile

    manager = create_default_manager()
    if auth_type not in manager.list_types():
        error(f"Unknown auth type '{auth_type}'. Available: {', '.join(manager.list_types())}")
        raise typer.Exit(code=2)
    if not (token_source.startswith(("env:", "file:")) or token_source == "prompt"):
        error(f"Invalid token source: {token_source}")
        raise typer.Exit(code=2)

    if profile_exists(name):
        info(f'Profile "{name}" already exists and will be overwritten.')

    profile = Profile(name=name, auth=AuthConfig(type=auth_type, source=token_source))
    if intents is not None:
        profile.intents = intents
    if api_url:
        profile.api_url = api_url
    save_profile(profile)

    Path("cordkit.json").write_text(json.dumps({"default_profile": name}, indent=2) + "\n")

    success(f'Profile "{name}" created.')
    suggest("Check the token: cordkit user me")
