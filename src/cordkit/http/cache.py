"""On-disk cache of GET responses, used by the CLI to avoid refetching.

Entries live in a :class:`diskcache.Cache` under ``responses/`` in the
cache directory and expire after ``CacheConfig.ttl_seconds``. Each entry is
tagged with its route path so a successful write to the same route (a
``PATCH /guilds/1`` after a cached ``GET /guilds/1``) evicts it.
"""

from __future__ import annotations

import hashlib
import json
from pathlib import Path
from typing import Any, Optional

import diskcache

from cordkit.models.config import CacheConfig


class ResponseCache:
    """Disk-backed cache for successful GET responses.

    Args:
        cache_dir: Root directory; entries go in its ``responses/`` subdirectory.
        config: ``enabled`` flag and ``ttl_seconds``.
        namespace: Keeps entries of different profiles (bots) apart.

    Example::

        cache = ResponseCache(get_cache_dir(), CacheConfig(enabled=True), namespace="mybot")
        cache.set("GET", "/guilds/1", None, {"status_code": 200, "headers": {}, "body": {...}})
        cache.get("GET", "/guilds/1")
    """

    def __init__(self, cache_dir: str | Path, config: CacheConfig, namespace: str = "") -> None:
        self._config = config
        self._namespace = namespace
        self._directory = Path(cache_dir) / "responses"
        self._cache: Optional[diskcache.Cache] = None
        if config.enabled:
            self._cache = diskcache.Cache(str(self._directory))

    @property
    def enabled(self) -> bool:
        return self._cache is not None

    def get(self, method: str, path: str, params: Optional[dict] = None) -> Optional[dict]:
        """Return the stored ``{status_code, headers, body}`` dict, or ``None``."""
        if self._cache is None or method.upper() != "GET":
            return None
        return self._cache.get(self._make_key(method, path, params))

    def set(self, method: str, path: str, params: Optional[dict], response_data: dict) -> None:
        """Store a response. Non-GET requests and non-2xx statuses are ignored."""
        if self._cache is None or method.upper() != "GET":
            return
        status = response_data.get("status_code", 0)
        if not 200 <= status < 300:
            return
        self._cache.set(
            self._make_key(method, path, params),
            response_data,
            expire=self._config.ttl_seconds,
            tag=self._tag(path),
        )

    def evict_route(self, path: str) -> int:
        """Drop every cached query of ``path``; returns the number removed."""
        if self._cache is None:
            return 0
        return self._cache.evict(self._tag(path))

    def clear(self) -> int:
        if self._cache is None:
            return 0
        return self._cache.clear()

    def stats(self) -> dict[str, Any]:
        if self._cache is None:
            return {"enabled": False}
        return {
            "enabled": True,
            "size": len(self._cache),
            "directory": str(self._directory),
            "ttl_seconds": self._config.ttl_seconds,
        }

    def close(self) -> None:
        if self._cache is not None:
            self._cache.close()

    def _tag(self, path: str) -> str:
        return f"{self._namespace}|{path}"

    def _make_key(self, method: str, path: str, params: Optional[dict]) -> str:
        parts = [self._namespace, method.upper(), path]
        if params:
            parts.append(json.dumps(params, sort_keys=True, default=str))
        return hashlib.sha256("|".join(parts).encode()).hexdigest()
