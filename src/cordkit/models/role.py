"""Guild roles."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

from cordkit.enums import Permissions, PermissionsField
from cordkit.models.base import Asset, Entity
from cordkit.utils import UNSET, ImageData, Maybe, Snowflake, mention


class RoleTags(BaseModel):
    """Marks managed roles. Presence of a ``null`` key means ``True`` on the wire."""

    bot_id: Optional[Snowflake] = None
    integration_id: Optional[Snowflake] = None
    subscription_listing_id: Optional[Snowflake] = None


class Role(Entity):
    name: str
    color: int = 0
    hoist: bool = False
    icon_hash: Maybe[str] = Field(default=UNSET, alias="icon")
    unicode_emoji: Maybe[str] = UNSET
    position: int = 0
    permissions: PermissionsField = Permissions(0)
    managed: bool = False
    mentionable: bool = False
    flags: int = 0
    tags: Maybe[RoleTags] = UNSET

    _guild_id: Optional[int] = PrivateAttr(default=None)

    def _bind(self, client: Any, guild_id: Optional[int] = None, **context: Any) -> None:
        super()._bind(client)
        self._guild_id = guild_id

    def __lt__(self, other: Role) -> bool:
        return (self.position, self.id) < (other.position, other.id)

    @property
    def guild_id(self) -> Optional[int]:
        return self._guild_id

    @property
    def mention(self) -> str:
        return mention("role", self.id)

    @property
    def icon(self) -> Optional[Asset]:
        return Asset.build("role-icons", self.id, self.icon_hash)

    def is_default(self) -> bool:
        """The ``@everyone`` role shares its id with the guild."""
        return self.id == self._guild_id

    async def edit(self, edit: RoleEdit, *, reason: Optional[str] = None) -> Role:
        """Apply a :class:`RoleEdit`; an empty edit makes no request."""
        payload = edit.to_payload()
        if not payload:
            return self
        data = await self._http.modify_guild_role(self._guild_id, self.id, payload, reason=reason)
        self.update(data)
        return self

    async def delete(self, *, reason: Optional[str] = None) -> None:
        await self._http.delete_guild_role(self._guild_id, self.id, reason=reason)


class RoleEdit(BaseModel):
    """Fields to change on a role. Omitted fields stay as they are; ``None`` clears."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    name: Optional[str] = None
    permissions: Optional[PermissionsField] = None
    color: Optional[int] = None
    hoist: Optional[bool] = None
    icon: Optional[ImageData] = None
    unicode_emoji: Optional[str] = None
    mentionable: Optional[bool] = None

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_unset=True)
