"""Guild templates."""

from __future__ import annotations

import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field

from cordkit.merge import apply_partial
from cordkit.models.base import Model
from cordkit.models.user import User
from cordkit.utils import UNSET, Maybe, Snowflake


class Template(Model):
    """A snapshot of a guild's structure that new guilds can be created from."""

    code: str
    name: str
    description: Optional[str] = None
    usage_count: int = 0
    creator_id: Snowflake
    creator: Maybe[User] = UNSET
    created_at: datetime.datetime
    updated_at: datetime.datetime
    source_guild_id: Snowflake
    serialized_source_guild: dict[str, Any] = Field(default_factory=dict)
    is_dirty: Optional[bool] = None

    @property
    def url(self) -> str:
        return f"https://discord.new/{self.code}"

    async def edit(self, edit: TemplateEdit) -> Template:
        payload = edit.model_dump(mode="json", exclude_unset=True)
        if not payload:
            return self
        data = await self._http.modify_guild_template(self.source_guild_id, self.code, payload)
        apply_partial(self, data)
        return self

    async def sync(self) -> Template:
        """Refresh the template from the guild's current state."""
        data = await self._http.sync_guild_template(self.source_guild_id, self.code)
        apply_partial(self, data)
        return self

    async def delete(self) -> None:
        await self._http.delete_guild_template(self.source_guild_id, self.code)


class TemplateEdit(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
