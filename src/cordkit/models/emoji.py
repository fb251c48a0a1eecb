"""Custom guild emojis."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, Field, PrivateAttr

from cordkit.models.base import Entity
from cordkit.models.user import User
from cordkit.utils import CDN_URL, JSON, UNSET, Maybe, Snowflake


class PartialEmoji(BaseModel):
    """An emoji reference: a unicode character (``id`` is ``None``) or a custom emoji."""

    id: Optional[Snowflake] = None
    name: Optional[str] = None
    animated: bool = False

    def __str__(self) -> str:
        if self.id is None:
            return self.name or ""
        prefix = "a" if self.animated else ""
        return f"<{prefix}:{self.name}:{self.id}>"

    @property
    def is_custom(self) -> bool:
        return self.id is not None

    def to_payload(self) -> JSON:
        return {"id": self.id, "name": self.name}


class Emoji(Entity):
    """A custom emoji owned by a guild."""

    name: Optional[str]
    role_ids: list[Snowflake] = Field(default_factory=list, alias="roles")
    user: Maybe[User] = UNSET
    require_colons: bool = True
    managed: bool = False
    animated: bool = False
    available: bool = True

    _guild_id: Optional[int] = PrivateAttr(default=None)

    def _bind(self, client: Any, guild_id: Optional[int] = None, **context: Any) -> None:
        super()._bind(client)
        self._guild_id = guild_id

    def __str__(self) -> str:
        prefix = "a" if self.animated else ""
        return f"<{prefix}:{self.name}:{self.id}>"

    @property
    def guild_id(self) -> Optional[int]:
        return self._guild_id

    @property
    def url(self) -> str:
        ext = "gif" if self.animated else "png"
        return f"{CDN_URL}/emojis/{self.id}.{ext}"

    async def edit(
        self,
        *,
        name: Optional[str] = None,
        roles: Optional[list[Snowflake]] = None,
        reason: Optional[str] = None,
    ) -> Emoji:
        """Rename the emoji or restrict it to roles. Returns the updated emoji."""
        payload: JSON = {}
        if name is not None:
            payload["name"] = name
        if roles is not None:
            payload["roles"] = [int(r) for r in roles]
        if not payload:
            return self
        data = await self._http.modify_guild_emoji(self._guild_id, self.id, payload, reason=reason)
        self.update(data)
        return self

    async def delete(self, *, reason: Optional[str] = None) -> None:
        await self._http.delete_guild_emoji(self._guild_id, self.id, reason=reason)
