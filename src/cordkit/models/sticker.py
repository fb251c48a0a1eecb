"""Stickers, both standard packs and guild uploads."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import PrivateAttr

from cordkit.models.base import Entity
from cordkit.models.user import User
from cordkit.utils import CDN_URL, JSON, UNSET, Maybe, Snowflake

_FORMAT_EXTENSIONS = {1: "png", 2: "png", 3: "json", 4: "gif"}


class Sticker(Entity):
    name: str
    description: Optional[str] = None
    tags: str = ""
    type: int = 1
    format_type: int = 1
    pack_id: Maybe[Snowflake] = UNSET
    available: Maybe[bool] = UNSET
    guild_id: Maybe[Snowflake] = UNSET
    user: Maybe[User] = UNSET
    sort_value: Maybe[int] = UNSET

    @property
    def url(self) -> str:
        ext = _FORMAT_EXTENSIONS.get(self.format_type, "png")
        return f"{CDN_URL}/stickers/{self.id}.{ext}"


class GuildSticker(Sticker):
    """A sticker uploaded to a guild; can be edited and deleted."""

    _guild_id: Optional[int] = PrivateAttr(default=None)

    def _bind(self, client: Any, guild_id: Optional[int] = None, **context: Any) -> None:
        super()._bind(client)
        if guild_id is None and isinstance(self.guild_id, int):
            guild_id = self.guild_id
        self._guild_id = guild_id

    async def edit(
        self,
        *,
        name: Optional[str] = None,
        description: Optional[str] = None,
        tags: Optional[str] = None,
        reason: Optional[str] = None,
    ) -> GuildSticker:
        payload: JSON = {
            key: value
            for key, value in (("name", name), ("description", description), ("tags", tags))
            if value is not None
        }
        if not payload:
            return self
        data = await self._http.modify_guild_sticker(self._guild_id, self.id, payload, reason=reason)
        self.update(data)
        return self

    async def delete(self, *, reason: Optional[str] = None) -> None:
        await self._http.delete_guild_sticker(self._guild_id, self.id, reason=reason)
