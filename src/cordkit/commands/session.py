"""Glue between Typer commands and the async :class:`~cordkit.client.Client`."""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable, Optional, TypeVar

import typer

from cordkit.exceptions import ConfigError

T = TypeVar("T")


def _root_obj(ctx: typer.Context) -> dict[str, Any]:
    obj = ctx.find_root().obj
    return obj if isinstance(obj, dict) else {}


def run_with_client(ctx: typer.Context, func: Callable[[Any], Awaitable[T]]) -> T:
    """Resolve the active profile, open a client and run ``func(client)``.

    ``ctx.obj["transport"]`` may carry an :class:`httpx.AsyncBaseTransport`
    to use instead of the network.

    Raises:
        ConfigError: No profile is configured.
    """
    from cordkit.client import Client
    from cordkit.config import get_cache_dir, resolve_config
    from cordkit.http.cache import ResponseCache

    obj = _root_obj(ctx)
    global_cfg, profile = resolve_config(cli_profile=obj.get("profile"))
    if profile is None:
        raise ConfigError("No profile configured. Create one with: cordkit init --name <bot>")

    cache: Optional[ResponseCache] = None
    if global_cfg.cache.enabled:
        cache = ResponseCache(get_cache_dir(), global_cfg.cache, namespace=profile.name)

    async def _run() -> T:
        async with Client(profile=profile, cache=cache, transport=obj.get("transport")) as client:
            return await func(client)

    return asyncio.run(_run())


def is_forced(ctx: typer.Context) -> bool:
    return bool(_root_obj(ctx).get("force", False))
