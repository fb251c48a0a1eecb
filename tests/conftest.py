"""Shared test fixtures for cordkit.

Provides JSON payload fixtures, isolated config environments, output state
management, a routing ``httpx.MockTransport`` handler and a client factory.
These fixtures are automatically discovered by pytest and available to all
test modules without explicit imports.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable, Optional

import httpx
import pytest

from cordkit.client import Client
from cordkit.models.config import AuthConfig, Profile, RequestConfig
from cordkit.output import OutputFormat, OutputManager, reset_output, set_output


FIXTURES_DIR = Path(__file__).parent / "fixtures"

GUILD_ID = 1000000000000000001
OWNER_ID = 2000000000000000001
BOT_ID = 2000000000000000002


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time. When Typer's CliRunner redirects those streams during
    a test and the test finishes, the cached references become stale.
    Resetting forces a fresh manager to be created on next use.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Payload fixtures (plain dicts loaded from JSON files)
# ---------------------------------------------------------------------------


def load_fixture(name: str) -> Any:
    with open(FIXTURES_DIR / name) as f:
        return json.load(f)


@pytest.fixture
def guild_payload() -> dict[str, Any]:
    """A gateway ``GUILD_CREATE`` snapshot with every cached collection filled."""
    return load_fixture("guild_create.json")


@pytest.fixture
def rest_guild_payload(guild_payload: dict[str, Any]) -> dict[str, Any]:
    """The same guild as ``GET /guilds/{id}?with_counts=true`` returns it."""
    gateway_only = (
        "joined_at", "large", "member_count", "voice_states", "members",
        "channels", "threads", "presences", "stage_instances", "guild_scheduled_events",
    )
    data = {k: v for k, v in guild_payload.items() if k not in gateway_only}
    data["approximate_member_count"] = 42
    data["approximate_presence_count"] = 7
    return data


@pytest.fixture
def user_payload() -> dict[str, Any]:
    return load_fixture("user.json")


# ---------------------------------------------------------------------------
# HTTP routing
# ---------------------------------------------------------------------------


class Router:
    """Callable ``httpx.MockTransport`` handler keyed on method and route.

    Routes are relative to the versioned API root. Several responses queued
    on one route are returned in order; the last one repeats. Unrouted
    requests get a Discord-style 404.
    """

    def __init__(self, prefix: str = "/api/v10") -> None:
        self.prefix = prefix
        self.routes: dict[tuple[str, str], list[Any]] = {}
        self.requests: list[httpx.Request] = []

    def add(
        self,
        method: str,
        path: str,
        json: Any = None,
        status: int = 200,
        headers: Optional[dict[str, str]] = None,
    ) -> Router:
        self.routes.setdefault((method.upper(), path), []).append((status, json, headers))
        return self

    def add_handler(self, method: str, path: str, handler: Callable[[httpx.Request], httpx.Response]) -> Router:
        self.routes.setdefault((method.upper(), path), []).append(handler)
        return self

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if path.startswith(self.prefix):
            path = path[len(self.prefix):]
        queue = self.routes.get((request.method, path))
        if not queue:
            return httpx.Response(404, json={"code": 0, "message": f"No route {request.method} {path}"})
        entry = queue.pop(0) if len(queue) > 1 else queue[0]
        if callable(entry):
            return entry(request)
        status, body, headers = entry
        if body is None:
            return httpx.Response(status, headers=headers)
        return httpx.Response(status, json=body, headers=headers)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def calls(self, method: str, path: str) -> list[httpx.Request]:
        return [
            r for r in self.requests
            if r.method == method and r.url.path == f"{self.prefix}{path}"
        ]


@pytest.fixture
def router() -> Router:
    return Router()


def make_profile(name: str = "test-bot", **overrides: Any) -> Profile:
    """A bot profile with a literal token and no retries."""
    fields: dict[str, Any] = {
        "name": name,
        "auth": AuthConfig(type="bot", token="s3cret"),
        "request": RequestConfig(timeout=5, max_retries=0),
    }
    fields.update(overrides)
    return Profile(**fields)


@pytest.fixture
def make_client(router: Router) -> Callable[..., Client]:
    """Factory for clients whose HTTP traffic goes to ``router``."""

    def _make(**kwargs: Any) -> Client:
        profile = kwargs.pop("profile", None) or make_profile()
        return Client(profile=profile, transport=httpx.MockTransport(router), **kwargs)

    return _make


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Sets XDG_CONFIG_HOME, XDG_CACHE_HOME, and XDG_DATA_HOME to
    subdirectories of tmp_path so that tests never touch real user
    config. Clears all CORDKIT_* environment variables and changes
    the working directory to tmp_path.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path / "cache"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.setattr("cordkit.config._is_xdg_platform", lambda: True)

    for var in ["CORDKIT_PROFILE", "CORDKIT_API_URL", "DISCORD_TOKEN"]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a PLAIN-format, quiet OutputManager as the global output."""
    output = OutputManager(format=OutputFormat.PLAIN, quiet=True)
    set_output(output)
    yield output
    reset_output()


@pytest.fixture
def verbose_output() -> OutputManager:
    """Install a verbose, colourless OutputManager so ``debug`` lines reach stderr."""
    output = OutputManager(format=OutputFormat.PLAIN, no_color=True, verbose=True)
    set_output(output)
    yield output
    reset_output()


@pytest.fixture
def json_output() -> OutputManager:
    output = OutputManager(format=OutputFormat.JSON)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
