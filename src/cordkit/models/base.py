"""Base classes for API models.

:class:`Model` is any object decoded from an API payload that may call back
into the API; it carries the owning :class:`~cordkit.client.Client` as a
private handle. :class:`Entity` adds the immutable snowflake ``id``, identity
semantics and in-place partial updates.
"""

from __future__ import annotations

import datetime
from typing import TYPE_CHECKING, Any, Mapping, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, ValidationError

from cordkit.exceptions import DecodeError, InvalidUsageError
from cordkit.merge import apply_partial
from cordkit.utils import CDN_URL, JSON, Snowflake, snowflake_time

if TYPE_CHECKING:
    from cordkit.client import Client
    from cordkit.http import HTTPClient

M = TypeVar("M", bound="Model")


class Model(BaseModel):
    model_config = ConfigDict(
        populate_by_name=True,
        validate_assignment=True,
        extra="ignore",
        arbitrary_types_allowed=True,
    )

    _client: Any = PrivateAttr(default=None)

    @classmethod
    def from_snapshot(cls: type[M], data: Mapping[str, Any], client: Optional[Client] = None, **context: Any) -> M:
        """Decode a full payload.

        Raises:
            DecodeError: A required field is missing or malformed.
        """
        try:
            obj = cls.model_validate(data)
        except ValidationError as exc:
            raise DecodeError(f"Could not decode {cls.__name__}: {exc}") from exc
        obj._bind(client, **context)
        return obj

    def _bind(self, client: Optional[Client], **context: Any) -> None:
        """Attach the client handle and any parent context (e.g. ``guild_id``)."""
        self._client = client

    @property
    def client(self) -> Optional[Client]:
        return self._client

    @property
    def _http(self) -> HTTPClient:
        if self._client is None:
            raise InvalidUsageError(f"{type(self).__name__} is not bound to a client")
        return self._client.http


class Entity(Model):
    """A model identified by a snowflake and updated in place by fragments."""

    id: Snowflake = Field(frozen=True)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, type(self)) and other.id == self.id

    def __hash__(self) -> int:
        return hash((type(self).__name__, self.id))

    def __repr__(self) -> str:
        name = getattr(self, "name", None)
        extra = f" name={name!r}" if isinstance(name, str) else ""
        return f"<{type(self).__name__} id={self.id}{extra}>"

    @property
    def created_at(self) -> datetime.datetime:
        return snowflake_time(self.id)

    def update(self, fragment: Mapping[str, Any] | None) -> list[str]:
        """Apply a partial-update fragment and return the changed attribute names."""
        return apply_partial(self, fragment)


class Asset(BaseModel):
    """An image on the CDN, e.g. ``/icons/{guild_id}/{hash}``."""

    model_config = ConfigDict(frozen=True)

    hash: str
    path: str

    @property
    def is_animated(self) -> bool:
        return self.hash.startswith("a_")

    @property
    def url(self) -> str:
        ext = "gif" if self.is_animated else "png"
        return f"{CDN_URL}{self.path}.{ext}"

    def with_size(self, size: int) -> str:
        return f"{self.url}?size={size}"

    def __str__(self) -> str:
        return self.url

    @classmethod
    def build(cls, kind: str, owner_id: int, hash: Any) -> Optional[Asset]:
        """Build an asset from a possibly unset or null hash."""
        if not isinstance(hash, str) or not hash:
            return None
        return cls(hash=hash, path=f"/{kind}/{owner_id}/{hash}")


def decode_list(model: type[M], items: list[JSON], client: Optional[Client] = None, **context: Any) -> list[M]:
    return [model.from_snapshot(item, client, **context) for item in items]
