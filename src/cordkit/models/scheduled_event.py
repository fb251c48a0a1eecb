"""Guild scheduled events."""

from __future__ import annotations

import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from cordkit.enums import (
    ScheduledEventEntityType,
    ScheduledEventPrivacyLevel,
    ScheduledEventStatus,
)
from cordkit.exceptions import InvalidUsageError
from cordkit.models.base import Asset, Entity
from cordkit.models.user import User
from cordkit.output import debug
from cordkit.utils import JSON, UNSET, ImageData, Maybe, Snowflake, to_snowflake

_FINISHED = (ScheduledEventStatus.COMPLETED, ScheduledEventStatus.CANCELED)


class EntityMetadata(BaseModel):
    location: Optional[str] = None


class ScheduledEvent(Entity):
    guild_id: Snowflake
    channel_id: Optional[Snowflake] = None
    creator_id: Maybe[Snowflake] = UNSET
    name: str
    description: Maybe[str] = UNSET
    scheduled_start_time: datetime.datetime
    scheduled_end_time: Optional[datetime.datetime] = None
    privacy_level: ScheduledEventPrivacyLevel = ScheduledEventPrivacyLevel.GUILD_ONLY
    status: ScheduledEventStatus
    entity_type: ScheduledEventEntityType
    entity_id: Optional[Snowflake] = None
    entity_metadata: Optional[EntityMetadata] = None
    creator: Maybe[User] = UNSET
    user_count: Maybe[int] = UNSET
    image_hash: Maybe[str] = Field(default=UNSET, alias="image")

    @property
    def location(self) -> Optional[str]:
        return self.entity_metadata.location if self.entity_metadata else None

    @property
    def cover_image(self) -> Optional[Asset]:
        return Asset.build("guild-events", self.id, self.image_hash)

    def is_finished(self) -> bool:
        return self.status in _FINISHED

    async def edit(self, edit: ScheduledEventEdit, *, reason: Optional[str] = None) -> ScheduledEvent:
        """Apply a :class:`ScheduledEventEdit`.

        Raises:
            InvalidUsageError: The edit would leave an external event without
                a location or end time, or a voice/stage event without a channel.
        """
        payload = edit.to_payload(self)
        if not payload:
            return self
        data = await self._http.modify_guild_scheduled_event(self.guild_id, self.id, payload, reason=reason)
        self.update(data)
        return self

    async def start(self, *, reason: Optional[str] = None) -> ScheduledEvent:
        return await self.edit(ScheduledEventEdit(status=ScheduledEventStatus.ACTIVE), reason=reason)

    async def stop(self, *, reason: Optional[str] = None) -> ScheduledEvent:
        return await self.edit(ScheduledEventEdit(status=ScheduledEventStatus.COMPLETED), reason=reason)

    async def cancel(self, *, reason: Optional[str] = None) -> ScheduledEvent:
        return await self.edit(ScheduledEventEdit(status=ScheduledEventStatus.CANCELED), reason=reason)

    async def delete(self) -> None:
        await self._http.delete_guild_scheduled_event(self.guild_id, self.id)

    async def users(
        self,
        *,
        limit: int = 100,
        before: Any = None,
        after: Any = None,
    ) -> list[User]:
        """Users subscribed to the event. ``limit`` is clamped to 1..100."""
        data = await self._http.get_guild_scheduled_event_users(
            self.guild_id,
            self.id,
            limit=max(1, min(limit, 100)),
            before=None if before is None else to_snowflake(before),
            after=None if after is None else to_snowflake(after),
        )
        return [User.from_snapshot(item["user"], self._client) for item in data]


class ScheduledEventEdit(BaseModel):
    """Changes to a scheduled event. Omitted fields stay; ``None`` clears."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    name: Optional[str] = None
    channel_id: Optional[Snowflake] = None
    privacy_level: Optional[ScheduledEventPrivacyLevel] = None
    scheduled_start_time: Optional[datetime.datetime] = None
    scheduled_end_time: Optional[datetime.datetime] = None
    description: Optional[str] = None
    entity_type: Optional[ScheduledEventEntityType] = None
    location: Optional[str] = None
    status: Optional[ScheduledEventStatus] = None
    image: Optional[ImageData] = None

    def to_payload(self, current: ScheduledEvent) -> JSON:
        fields = self.model_fields_set
        payload = self.model_dump(mode="json", exclude_unset=True, exclude={"location"})

        if "entity_type" in fields:
            if self.entity_type == ScheduledEventEntityType.EXTERNAL:
                location = self.location if "location" in fields else current.location
                end_time = (
                    self.scheduled_end_time
                    if "scheduled_end_time" in fields
                    else current.scheduled_end_time
                )
                if not location or end_time is None:
                    raise InvalidUsageError("An external event needs a location and an end time")
                payload["channel_id"] = None
                payload["entity_metadata"] = {"location": location}
                payload["scheduled_end_time"] = end_time.isoformat()
            else:
                channel_id = self.channel_id if "channel_id" in fields else current.channel_id
                if channel_id is None:
                    raise InvalidUsageError("A voice or stage event needs a channel_id")
                payload["channel_id"] = channel_id
                payload["entity_metadata"] = None
        elif "location" in fields:
            payload["entity_metadata"] = {"location": self.location}

        if "status" in payload and current.is_finished():
            debug(f"Scheduled event {current.id} is {current.status.name}; ignoring status change")
            del payload["status"]

        return payload
