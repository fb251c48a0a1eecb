"""Asynchronous HTTP transport for the Discord REST API.

:class:`Transport` wraps :class:`httpx.AsyncClient` and adds what every
endpoint needs: the ``Authorization`` header resolved through
:class:`~cordkit.auth.manager.AuthManager`, the ``X-Audit-Log-Reason``
header, retry with exponential backoff on 5xx and network errors, typed
exceptions for error statuses and an optional on-disk GET cache.

Endpoint wrappers live on :class:`~cordkit.http.client.HTTPClient`.
"""

from __future__ import annotations

import asyncio
from typing import Any, Optional
from urllib.parse import quote

import httpx

from cordkit import __version__
from cordkit.auth.base import AuthResult
from cordkit.auth.manager import AuthManager
from cordkit.exceptions import (
    AuthError,
    BadRequestError,
    ConnectionError_,
    HTTPError,
    InvalidUsageError,
    NotFoundError,
    RateLimitedError,
    ServerError,
)
from cordkit.http.cache import ResponseCache
from cordkit.models.config import Profile
from cordkit.output import get_output

USER_AGENT = f"DiscordBot (https://github.com/cordkit/cordkit, {__version__})"


def extract_response_data(response: httpx.Response) -> Any:
    """Decoded JSON body, raw text when it isn't JSON, ``None`` when empty."""
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


def _clean_params(params: Optional[dict[str, Any]]) -> dict[str, Any]:
    # None means "not given"; the API rejects empty query values.
    return {k: v for k, v in (params or {}).items() if v is not None}


def _route_ancestors(path: str) -> list[str]:
    """``/guilds/1/roles/2`` -> ``[/guilds/1/roles/2, /guilds/1/roles, /guilds/1, /guilds]``."""
    segments = [s for s in path.split("?", 1)[0].split("/") if s]
    return ["/" + "/".join(segments[:i]) for i in range(len(segments), 0, -1)]


class Transport:
    """Asynchronous HTTP transport bound to one profile.

    Args:
        profile: Supplies ``base_url``, auth config and request settings
            (timeout, retries, SSL verify).
        auth_manager: Resolves the profile's credentials on enter. When
            ``None`` no ``Authorization`` header is sent.
        cache: Optional GET response cache.
        transport: Custom httpx transport, e.g. :class:`httpx.MockTransport`.

    Example::

        async with Transport(profile, auth_manager=create_default_manager()) as t:
            response = await t.get("/users/@me")
    """

    def __init__(
        self,
        profile: Profile,
        auth_manager: Optional[AuthManager] = None,
        cache: Optional[ResponseCache] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._profile = profile
        self._auth_manager = auth_manager
        self._cache = cache
        self._transport = transport
        self._auth_result: Optional[AuthResult] = None
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def profile(self) -> Profile:
        return self._profile

    @property
    def cache(self) -> Optional[ResponseCache]:
        return self._cache

    @property
    def is_open(self) -> bool:
        return self._client is not None

    # ------------------------------------------------------------------ #
    # Async context manager
    # ------------------------------------------------------------------ #

    async def __aenter__(self) -> Transport:
        await self.open()
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.close()

    async def open(self) -> None:
        if self._client is not None:
            return
        if self._auth_manager is not None and self._profile.auth is not None:
            self._auth_result = self._auth_manager.authenticate(self._profile)
        config = self._profile.request
        kwargs: dict[str, Any] = {
            "base_url": self._profile.base_url,
            "timeout": config.timeout,
            "headers": {"User-Agent": USER_AGENT},
        }
        if self._transport is not None:
            kwargs["transport"] = self._transport
        else:
            kwargs["verify"] = config.verify_ssl
        self._client = httpx.AsyncClient(**kwargs)

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
        if self._cache is not None:
            self._cache.close()

    # ------------------------------------------------------------------ #
    # Public request methods
    # ------------------------------------------------------------------ #

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[dict[str, Any]] = None,
        json_body: Optional[Any] = None,
        data: Optional[dict[str, Any]] = None,
        files: Optional[dict[str, Any]] = None,
        reason: Optional[str] = None,
        headers: Optional[dict[str, str]] = None,
    ) -> httpx.Response:
        """Send a request with auth, audit reason, cache, retry and error mapping.

        Args:
            method: HTTP method.
            path: Route relative to the versioned API root (``/guilds/1``).
            params: Query parameters; ``None`` values are dropped.
            json_body: JSON body.
            data: Form fields, sent multipart when *files* is given.
            files: Multipart files, ``{"file": (name, bytes, content_type)}``.
            reason: Audit log reason for the action.
            headers: Extra request headers.

        Raises:
            BadRequestError: On 400.
            AuthError: On 401 / 403.
            NotFoundError: On 404.
            RateLimitedError: On 429.
            ServerError: On 5xx after all retries are exhausted.
            ConnectionError_: On network / timeout errors after all retries.
        """
        if self._client is None:
            raise InvalidUsageError("Transport is not open -- use it as an async context manager")

        method = method.upper()
        merged_params = _clean_params(params)
        merged_headers: dict[str, str] = {}
        if self._auth_result is not None:
            merged_headers.update(self._auth_result.headers)
        merged_headers.update(headers or {})
        if reason:
            merged_headers["X-Audit-Log-Reason"] = quote(reason, safe="/ ")

        cached = self._cache_lookup(method, path, merged_params)
        if cached is not None:
            return cached

        output = get_output()
        output.debug(f"{method} {path}" + (f" {merged_params}" if merged_params else ""))

        response = await self._execute_with_retry(
            method, path, merged_headers, merged_params, json_body, data, files,
        )
        self._map_response_error(response)

        if self._cache is not None:
            if method == "GET":
                self._cache.set(method, path, merged_params, {
                    "status_code": response.status_code,
                    "headers": {"content-type": response.headers.get("content-type", "application/json")},
                    "body": extract_response_data(response),
                })
            else:
                for route in _route_ancestors(path):
                    self._cache.evict_route(route)

        return response

    async def get(self, path: str, **kwargs: Any) -> httpx.Response:
        return await self.request("GET", path, **kwargs)

    async def post(self, path: str, **kwargs: Any) -> httpx.Response:
        return await self.request("POST", path, **kwargs)

    async def put(self, path: str, **kwargs: Any) -> httpx.Response:
        return await self.request("PUT", path, **kwargs)

    async def patch(self, path: str, **kwargs: Any) -> httpx.Response:
        return await self.request("PATCH", path, **kwargs)

    async def delete(self, path: str, **kwargs: Any) -> httpx.Response:
        return await self.request("DELETE", path, **kwargs)

    async def request_json(self, method: str, path: str, **kwargs: Any) -> Any:
        """Like :meth:`request` but returns the decoded body."""
        return extract_response_data(await self.request(method, path, **kwargs))

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    def _cache_lookup(self, method: str, path: str, params: dict[str, Any]) -> Optional[httpx.Response]:
        if self._cache is None or method != "GET":
            return None
        entry = self._cache.get(method, path, params)
        if entry is None:
            return None
        get_output().debug(f"Cache hit: {method} {path}")
        return httpx.Response(
            status_code=entry["status_code"],
            headers=entry.get("headers", {}),
            json=entry.get("body"),
            request=httpx.Request(method, f"{self._profile.base_url}{path}"),
        )

    async def _execute_with_retry(
        self,
        method: str,
        path: str,
        headers: dict[str, str],
        params: dict[str, Any],
        json_body: Any,
        data: dict[str, Any] | None,
        files: dict[str, Any] | None,
    ) -> httpx.Response:
        """Execute the request, retrying 5xx and network errors.

        The delay doubles each attempt: 1 s, 2 s, 4 s, ... Rate limits are
        surfaced to the caller rather than retried.
        """
        assert self._client is not None

        max_retries = self._profile.request.max_retries
        output = get_output()

        for attempt in range(max_retries + 1):
            kwargs: dict[str, Any] = {
                "method": method,
                "url": path,
                "headers": headers,
                "params": params,
            }
            if files is not None:
                kwargs["files"] = files
                if data is not None:
                    kwargs["data"] = data
            elif data is not None:
                kwargs["data"] = data
            elif json_body is not None:
                kwargs["json"] = json_body

            try:
                response = await self._client.request(**kwargs)
            except (httpx.ConnectError, httpx.TimeoutException, httpx.NetworkError) as exc:
                if attempt < max_retries:
                    delay = 2 ** attempt
                    output.debug(
                        f"Connection error: {exc}, retrying in {delay}s "
                        f"(attempt {attempt + 1}/{max_retries})"
                    )
                    await asyncio.sleep(delay)
                    continue
                raise ConnectionError_(
                    f"Connection failed after {max_retries + 1} attempts: {exc}"
                ) from exc

            if response.status_code >= 500 and attempt < max_retries:
                delay = 2 ** attempt
                output.debug(
                    f"Server error {response.status_code}, retrying in {delay}s "
                    f"(attempt {attempt + 1}/{max_retries})"
                )
                await asyncio.sleep(delay)
                continue

            return response

        raise ServerError("Request failed after all retries", 500)  # pragma: no cover

    def _map_response_error(self, response: httpx.Response) -> None:
        """Raise a typed exception for error statuses.

        Error bodies look like ``{"code": 10004, "message": "Unknown Guild"}``.
        """
        status = response.status_code
        if status < 400:
            return

        code = 0
        text = ""
        detail = extract_response_data(response)
        if isinstance(detail, dict):
            code = int(detail.get("code") or 0)
            text = str(detail.get("message") or "")
        elif detail is not None:
            text = str(detail)[:200]

        msg = f"HTTP {status}: {text}" if text else f"HTTP {status}"
        if code:
            msg = f"{msg} (code {code})"

        if status == 400:
            raise BadRequestError(msg, status, code, text)
        if status in (401, 403):
            raise AuthError(msg, status, code, text)
        if status == 404:
            raise NotFoundError(msg, status, code, text)
        if status == 429:
            retry_after = 0.0
            if isinstance(detail, dict) and detail.get("retry_after") is not None:
                retry_after = float(detail["retry_after"])
            elif response.headers.get("Retry-After"):
                retry_after = float(response.headers["Retry-After"])
            raise RateLimitedError(msg, status, code, text, retry_after=retry_after)
        if status >= 500:
            raise ServerError(msg, status, code, text)
        raise HTTPError(msg, status, code, text)
