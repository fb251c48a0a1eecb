"""Typer application and CLI entry point for cordkit.

The CLI is a thin terminal front-end over :class:`~cordkit.client.Client`
for inspecting a server as a configured bot: ``cordkit guild show``,
``cordkit guild bans``, ``cordkit user me`` and so on. Profiles and
global settings are managed with ``init``, ``profile`` and ``config``.

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. It registers the sub-commands and invokes the Typer
app. :class:`~cordkit.exceptions.CordkitError` exits with the error's
``exit_code``; anything else is written to a crash log under the data
directory.
"""

from __future__ import annotations

import signal
import sys
import traceback
from datetime import datetime
from typing import Any, Optional

import typer

from cordkit import __version__
from cordkit.exit_codes import EXIT_GENERIC_FAILURE


app = typer.Typer(
    name="cordkit",
    help="Inspect Discord servers from the terminal as a configured bot.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

_registered = False


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"cordkit {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    profile: Optional[str] = typer.Option(
        None, "--profile", "-p", help="Profile name to use."
    ),
    json_output: bool = typer.Option(
        False, "--json", help="JSON output format."
    ),
    plain_output: bool = typer.Option(
        False, "--plain", help="Plain text output."
    ),
    no_color: bool = typer.Option(
        False, "--no-color", help="Disable color output."
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output."
    ),
    force: bool = typer.Option(
        False, "--force", "-f", help="Skip confirmations."
    ),
    output_file: Optional[str] = typer.Option(
        None, "-o", "--output", help="Output file path."
    ),
) -> None:
    """Root callback executed before every sub-command.

    Installs the global :class:`~cordkit.output.OutputManager` built from
    the flags and stores shared options in ``ctx.obj`` for sub-commands.
    """
    from cordkit.output import OutputFormat, OutputManager, set_output

    fmt = OutputFormat.AUTO
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN

    set_output(
        OutputManager(
            format=fmt,
            no_color=no_color,
            quiet=quiet,
            verbose=verbose,
            output_file=output_file,
        )
    )

    ctx.ensure_object(dict)
    ctx.obj["profile"] = profile
    ctx.obj["force"] = force
    ctx.obj["verbose"] = verbose


def register_commands() -> None:
    """Attach the built-in sub-commands (idempotent)."""
    global _registered
    if _registered:
        return

    from cordkit.commands.cache import cache_app
    from cordkit.commands.config import config_app
    from cordkit.commands.guild import guild_app
    from cordkit.commands.init import init_command
    from cordkit.commands.profile import profile_app
    from cordkit.commands.user import user_app

    app.command("init")(init_command)
    app.add_typer(config_app, name="config", help="Global configuration.")
    app.add_typer(profile_app, name="profile", help="Stored bot profiles.")
    app.add_typer(guild_app, name="guild", help="Inspect a guild.")
    app.add_typer(user_app, name="user", help="Look up users.")
    app.add_typer(cache_app, name="cache", help="Response cache management.")
    _registered = True


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log(exc: Exception) -> str:
    """Write the current traceback under ``<data_dir>/logs`` and return its path."""
    from cordkit.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(traceback.format_exc())
    return str(log_path)


def main() -> None:
    """CLI entry point invoked by the ``cordkit`` console script."""
    _setup_signal_handlers()
    try:
        register_commands()
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except Exception as exc:
        from cordkit.exceptions import CordkitError
        from cordkit.output import error

        if isinstance(exc, CordkitError):
            error(str(exc))
            sys.exit(exc.exit_code)
        log_path = _write_crash_log(exc)
        error(f"Unexpected error. Debug log: {log_path}")
        sys.exit(EXIT_GENERIC_FAILURE)
