"""Profile commands -- list, show and delete stored bot profiles."""

from __future__ import annotations

import typer

from cordkit.exit_codes import EXIT_NOT_FOUND
from cordkit.output import error, format_response, info, print_table, success


profile_app = typer.Typer(no_args_is_help=True)


@profile_app.command("list")
def profile_list() -> None:
    """List profiles; the default one is marked with ``*``."""
    from cordkit.config import list_profiles, load_global_config, load_profile

    names = list_profiles()
    if not names:
        info("No profiles. Create one with: cordkit init --name <bot>")
        return
    default = load_global_config().default_profile
    rows = []
    for name in names:
        profile = load_profile(name)
        auth = f"{profile.auth.type} ({profile.auth.source})" if profile.auth else "-"
        rows.append(["*" if name == default else "", name, profile.base_url, auth])
    print_table(["", "Name", "API", "Auth"], rows, title="Profiles")


@profile_app.command("show")
def profile_show(name: str = typer.Argument(help="Profile name.")) -> None:
    from cordkit.config import load_profile
    from cordkit.enums import Intents

    profile = load_profile(name)
    data = profile.model_dump(mode="json")
    data["intent_names"] = [flag.name for flag in Intents.from_value(profile.intents).members()]
    format_response(data)


@profile_app.command("delete")
def profile_delete(
    ctx: typer.Context,
    name: str = typer.Argument(help="Profile name."),
) -> None:
    """Delete a profile (asks first unless ``--force``)."""
    from cordkit.commands.session import is_forced
    from cordkit.config import delete_profile, profile_exists

    if not profile_exists(name):
        error(f"Profile '{name}' not found")
        raise typer.Exit(code=EXIT_NOT_FOUND)
    if not is_forced(ctx) and not typer.confirm(f"Delete profile '{name}'?"):
        info("Cancelled.")
        raise typer.Exit()
    delete_profile(name)
    success(f'Profile "{name}" deleted.')
