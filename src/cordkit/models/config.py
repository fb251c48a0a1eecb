"""Configuration models persisted as JSON in the user's config directory.

:class:`GlobalConfig` holds settings shared by every profile; each
:class:`Profile` describes one bot (or OAuth2 bearer) identity: where the
API lives, how to obtain its token and which gateway intents it declares.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from cordkit.enums import Intents
from cordkit.utils import API_URL


class AuthConfig(BaseModel):
    """How a profile authenticates.

    ``type`` selects the plugin (``bot`` or ``bearer``). ``source`` names
    where the token comes from (``env:VAR``, ``file:/path`` or ``prompt``).
    ``token`` lets library callers hand a literal token over; it is never
    written to disk.
    """

    type: str = Field(default="bot", description="Auth plugin: bot | bearer")
    source: str = Field(
        default="env:DISCORD_TOKEN",
        description="Token source: env:VAR, file:/path or prompt",
    )
    token: Optional[str] = Field(default=None, exclude=True, repr=False)


class RequestConfig(BaseModel):
    """HTTP transport behaviour."""

    timeout: int = Field(default=30, description="Request timeout in seconds")
    verify_ssl: bool = Field(default=True, description="Verify SSL certificates")
    max_retries: int = Field(default=3, description="Retries on 5xx and network errors")


class OutputConfig(BaseModel):
    format: str = Field(default="auto", description="auto | json | plain | rich")


class CacheConfig(BaseModel):
    """On-disk cache of GET responses used by the CLI."""

    enabled: bool = Field(default=False, description="Enable response caching")
    ttl_seconds: int = Field(default=300, description="Cache TTL in seconds")


class GlobalConfig(BaseModel):
    default_profile: Optional[str] = None
    auto_select_single_profile: bool = True
    output: OutputConfig = Field(default_factory=OutputConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)


class Profile(BaseModel):
    """A named connection profile.

    Example::

        Profile(
            name="mybot",
            auth=AuthConfig(type="bot", source="env:MYBOT_TOKEN"),
            intents=int(Intents.default() | Intents.GUILD_MEMBERS),
        )
    """

    name: str
    api_url: str = Field(default=API_URL, description="API root without the version segment")
    api_version: int = Field(default=10, description="REST API version")
    auth: Optional[AuthConfig] = None
    intents: int = Field(
        default_factory=lambda: int(Intents.default()),
        description="Gateway intents bitfield declared by this bot",
    )
    request: RequestConfig = Field(default_factory=RequestConfig)

    @property
    def base_url(self) -> str:
        return f"{self.api_url.rstrip('/')}/v{self.api_version}"
