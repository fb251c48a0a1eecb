"""Cache commands -- inspect and clear the GET response cache."""

from __future__ import annotations

import typer

from cordkit.output import format_response, info, success


cache_app = typer.Typer(no_args_is_help=True)


def _open_cache():
    from cordkit.config import get_cache_dir, load_global_config
    from cordkit.http.cache import ResponseCache

    return ResponseCache(get_cache_dir(), load_global_config().cache)


@cache_app.command("stats")
def cache_stats() -> None:
    """Show cache location, entry count and TTL."""
    cache = _open_cache()
    try:
        format_response(cache.stats())
    finally:
        cache.close()


@cache_app.command("clear")
def cache_clear() -> None:
    cache = _open_cache()
    try:
        if not cache.enabled:
            info("Response cache is disabled; nothing to clear.")
            return
        removed = cache.clear()
    finally:
        cache.close()
    success(f"Removed {removed} cached response(s).")
