"""Guild members."""

from __future__ import annotations

import datetime
from typing import TYPE_CHECKING, Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

from cordkit.models.base import Asset, Entity
from cordkit.models.user import User
from cordkit.utils import UNSET, Maybe, Snowflake, mention, to_snowflake

if TYPE_CHECKING:
    from cordkit.models.guild import Guild
    from cordkit.models.role import Role


class Member(Entity):
    """A user's membership in one guild. ``id`` is the user's id."""

    user: User
    nick: Maybe[str] = UNSET
    avatar_hash: Maybe[str] = Field(default=UNSET, alias="avatar")
    role_ids: list[Snowflake] = Field(default_factory=list, alias="roles")
    joined_at: Maybe[datetime.datetime] = UNSET
    premium_since: Maybe[datetime.datetime] = UNSET
    deaf: bool = False
    mute: bool = False
    flags: int = 0
    pending: Maybe[bool] = UNSET
    communication_disabled_until: Maybe[datetime.datetime] = UNSET

    _guild_id: Optional[int] = PrivateAttr(default=None)

    @classmethod
    def from_snapshot(cls, data: Mapping[str, Any], client: Any = None, **context: Any) -> Member:
        user = data.get("user")
        if "id" not in data and isinstance(user, Mapping):
            data = {**data, "id": user.get("id")}
        return super().from_snapshot(data, client, **context)

    def _bind(self, client: Any, guild_id: Optional[int] = None, **context: Any) -> None:
        super()._bind(client)
        self.user._bind(client)
        self._guild_id = guild_id

    def __str__(self) -> str:
        return str(self.user)

    @property
    def guild_id(self) -> Optional[int]:
        return self._guild_id

    @property
    def guild(self) -> Optional[Guild]:
        if self._client is None or self._guild_id is None:
            return None
        return self._client.get_guild(self._guild_id)

    @property
    def display_name(self) -> str:
        return self.nick or self.user.display_name

    @property
    def mention(self) -> str:
        return mention("user", self.id)

    @property
    def guild_avatar(self) -> Optional[Asset]:
        if not isinstance(self.avatar_hash, str) or self._guild_id is None:
            return None
        return Asset(
            hash=self.avatar_hash,
            path=f"/guilds/{self._guild_id}/users/{self.id}/avatars/{self.avatar_hash}",
        )

    @property
    def roles(self) -> list[Role]:
        """Cached roles of this member, lowest first. Unknown ids are skipped."""
        guild = self.guild
        if guild is None:
            return []
        found = [role for role in (guild.get_role(rid) for rid in self.role_ids) if role is not None]
        return sorted(found)

    def is_timed_out(self) -> bool:
        until = self.communication_disabled_until
        if not isinstance(until, datetime.datetime):
            return False
        return until > datetime.datetime.now(datetime.timezone.utc)

    async def edit(self, edit: MemberEdit, *, reason: Optional[str] = None) -> Member:
        payload = edit.to_payload()
        if not payload:
            return self
        data = await self._http.modify_guild_member(self._guild_id, self.id, payload, reason=reason)
        data.pop("user", None)
        self.update(data)
        return self

    async def kick(self, *, reason: Optional[str] = None) -> None:
        await self._http.remove_guild_member(self._guild_id, self.id, reason=reason)

    async def ban(self, *, delete_message_seconds: int = 0, reason: Optional[str] = None) -> None:
        guild = self.guild
        if guild is not None:
            await guild.ban(self, delete_message_seconds=delete_message_seconds, reason=reason)
        else:
            await self._http.create_guild_ban(
                self._guild_id, self.id, delete_message_seconds=delete_message_seconds, reason=reason
            )

    async def add_role(self, role: Any, *, reason: Optional[str] = None) -> None:
        role_id = to_snowflake(role)
        await self._http.add_guild_member_role(self._guild_id, self.id, role_id, reason=reason)
        if role_id not in self.role_ids:
            self.role_ids = [*self.role_ids, role_id]

    async def remove_role(self, role: Any, *, reason: Optional[str] = None) -> None:
        role_id = to_snowflake(role)
        await self._http.remove_guild_member_role(self._guild_id, self.id, role_id, reason=reason)
        self.role_ids = [rid for rid in self.role_ids if rid != role_id]


class MemberEdit(BaseModel):
    """Fields to change on a member. Omitted fields stay; ``None`` clears."""

    model_config = ConfigDict(populate_by_name=True)

    nick: Optional[str] = None
    roles: Optional[list[Snowflake]] = None
    mute: Optional[bool] = None
    deaf: Optional[bool] = None
    channel_id: Optional[Snowflake] = None
    communication_disabled_until: Optional[datetime.datetime] = None

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_unset=True)
