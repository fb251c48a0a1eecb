"""Presence activities: what members are doing, and what the bot shows."""

from __future__ import annotations

import datetime
from typing import Annotated, Any, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field

from cordkit.enums import ActivityType, Status
from cordkit.exceptions import InvalidUsageError
from cordkit.models.emoji import PartialEmoji
from cordkit.utils import JSON


class ActivityTimestamps(BaseModel):
    start: Optional[datetime.datetime] = None
    end: Optional[datetime.datetime] = None


class ActivityParty(BaseModel):
    id: Optional[str] = None
    size: Optional[list[int]] = None

    @property
    def current_size(self) -> Optional[int]:
        return self.size[0] if self.size else None

    @property
    def max_size(self) -> Optional[int]:
        return self.size[1] if self.size and len(self.size) > 1 else None


class ActivityAssets(BaseModel):
    large_image: Optional[str] = None
    large_text: Optional[str] = None
    small_image: Optional[str] = None
    small_text: Optional[str] = None


class ActivityButton(BaseModel):
    label: str
    url: Optional[str] = None


def _buttons(value: Any) -> Any:
    # Presence payloads send bare labels; application payloads send objects.
    if isinstance(value, list):
        return [{"label": item} if isinstance(item, str) else item for item in value]
    return value


class Activity(BaseModel):
    """An activity as reported in a presence update."""

    model_config = ConfigDict(extra="ignore")

    name: str
    type: ActivityType
    url: Optional[str] = None
    created_at: Optional[datetime.datetime] = None
    timestamps: Optional[ActivityTimestamps] = None
    application_id: Optional[int] = None
    details: Optional[str] = None
    state: Optional[str] = None
    emoji: Optional[PartialEmoji] = None
    party: Optional[ActivityParty] = None
    assets: Optional[ActivityAssets] = None
    buttons: Annotated[list[ActivityButton], BeforeValidator(_buttons)] = Field(default_factory=list)


class Presence(BaseModel):
    """Last known status and activities of a guild member."""

    status: Status = Status.OFFLINE
    activities: list[Activity] = Field(default_factory=list)
    client_status: dict[str, Status] = Field(default_factory=dict)

    @property
    def activity(self) -> Optional[Activity]:
        return self.activities[0] if self.activities else None


class PresenceActivity(BaseModel):
    """An activity the bot sets for itself.

    Streaming activities must carry a Twitch or YouTube ``url``.
    """

    name: str
    type: ActivityType = ActivityType.GAME
    url: Optional[str] = None
    state: Optional[str] = None

    def to_payload(self) -> JSON:
        if self.type == ActivityType.STREAMING and not self.url:
            raise InvalidUsageError("A streaming activity needs a url")
        payload: JSON = {"name": self.name, "type": int(self.type)}
        if self.type == ActivityType.STREAMING:
            payload["url"] = self.url
        if self.state is not None:
            payload["state"] = self.state
        return payload
