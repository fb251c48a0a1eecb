"""Small helpers shared by the models, the HTTP layer and the CLI."""

from __future__ import annotations

import base64
import datetime
import mimetypes
from pathlib import Path
from typing import Annotated, Any, Optional, TypeVar, Union

from pydantic import PlainSerializer
from pydantic_core import core_schema

JSON = dict[str, Any]
Snowflake = int

DISCORD_EPOCH = 1420070400000
"""Milliseconds between the Unix epoch and 2015-01-01T00:00:00Z."""

API_URL = "https://discord.com/api"
CDN_URL = "https://cdn.discordapp.com"

T = TypeVar("T")


class UnsetType:
    """Marker for a field the server did not send.

    There is exactly one instance, :data:`UNSET`. It is falsy, serialises to
    ``null`` and survives copying, so ``value is UNSET`` always works.
    """

    _instance: Optional[UnsetType] = None

    def __new__(cls) -> UnsetType:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "UNSET"

    def __copy__(self) -> UnsetType:
        return self

    def __deepcopy__(self, memo: Any) -> UnsetType:
        return self

    def __reduce__(self) -> str:
        return "UNSET"

    @classmethod
    def __get_pydantic_core_schema__(cls, source_type: Any, handler: Any) -> core_schema.CoreSchema:
        return core_schema.is_instance_schema(
            cls,
            serialization=core_schema.plain_serializer_function_ser_schema(lambda _: None),
        )


UNSET: Any = UnsetType()

Maybe = Union[T, None, UnsetType]
"""A field that may be absent (``UNSET``), explicitly null (``None``) or set."""


def is_set(value: Any) -> bool:
    return value is not UNSET


def snowflake_time(snowflake: int) -> datetime.datetime:
    """Return the UTC creation time encoded in a snowflake."""
    ms = (int(snowflake) >> 22) + DISCORD_EPOCH
    return datetime.datetime.fromtimestamp(ms / 1000, tz=datetime.timezone.utc)


def time_snowflake(dt: datetime.datetime, high: bool = False) -> int:
    """Return the lowest (or, with ``high``, highest) snowflake for a moment.

    Naive datetimes are taken as local time, as ``datetime.timestamp`` does.
    """
    ms = int(dt.timestamp() * 1000) - DISCORD_EPOCH
    return (ms << 22) + (2**22 - 1 if high else 0)


def to_snowflake(value: Any) -> int:
    """Coerce an id, numeric string, entity-like object or datetime into a snowflake."""
    if isinstance(value, datetime.datetime):
        return time_snowflake(value)
    if isinstance(value, bool):
        raise TypeError("a bool is not a snowflake")
    if isinstance(value, (int, str)):
        return int(value)
    ident = getattr(value, "id", None)
    if ident is None:
        raise TypeError(f"cannot use {type(value).__name__} as a snowflake")
    return int(ident)


def optional_snowflake(value: Any) -> Optional[int]:
    return None if value is None else to_snowflake(value)


def parse_time(value: Optional[str]) -> Optional[datetime.datetime]:
    """Parse an ISO-8601 timestamp as sent by the API (``Z`` suffix allowed)."""
    if not value:
        return None
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    return datetime.datetime.fromisoformat(value)


def mention(kind: str, ident: int) -> str:
    """Build a mention string. ``kind`` is one of ``user``, ``role``, ``channel``."""
    prefix = {"user": "@", "role": "@&", "channel": "#"}[kind]
    return f"<{prefix}{ident}>"


def default_avatar_index(user_id: int, discriminator: str) -> int:
    """Index of the embedded default avatar for a user.

    Accounts on the unique-username system report discriminator ``"0"``
    and cycle through six avatars keyed on the id; legacy accounts use
    the discriminator modulo five.
    """
    if discriminator in ("0", ""):
        return (int(user_id) >> 22) % 6
    return int(discriminator) % 5


_IMAGE_SIGNATURES = (
    (b"\x89PNG\r\n\x1a\n", "image/png"),
    (b"\xff\xd8\xff", "image/jpeg"),
    (b"GIF87a", "image/gif"),
    (b"GIF89a", "image/gif"),
)


class File:
    """Bytes to upload, either as an image data URI or a multipart part.

    Args:
        fp: Raw bytes or a filesystem path.
        filename: Name reported to the API; defaults to the path name.
    """

    def __init__(self, fp: Union[bytes, str, Path], filename: Optional[str] = None):
        if isinstance(fp, (bytes, bytearray)):
            self.data = bytes(fp)
            self.filename = filename or "file"
        else:
            path = Path(fp)
            self.data = path.read_bytes()
            self.filename = filename or path.name

    def __repr__(self) -> str:
        return f"File(filename={self.filename!r}, size={len(self.data)})"

    @property
    def content_type(self) -> str:
        for signature, mime in _IMAGE_SIGNATURES:
            if self.data.startswith(signature):
                return mime
        if self.data[:4] == b"RIFF" and self.data[8:12] == b"WEBP":
            return "image/webp"
        guessed, _ = mimetypes.guess_type(self.filename)
        return guessed or "application/octet-stream"

    def as_image_data(self) -> str:
        """Encode as a ``data:`` URI, the form the API takes for icons and banners."""
        encoded = base64.b64encode(self.data).decode("ascii")
        return f"data:{self.content_type};base64,{encoded}"

    def as_multipart(self) -> tuple[str, bytes, str]:
        return (self.filename, self.data, self.content_type)


ImageData = Annotated[File, PlainSerializer(lambda f: f.as_image_data(), return_type=str)]
"""A :class:`File` field that serialises to a data URI in payloads."""
