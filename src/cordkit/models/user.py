"""Users and the connected bot user."""

from __future__ import annotations

from typing import Optional

from pydantic import Field

from cordkit.enums import LocaleField, PublicUserFlags, PublicUserFlagsField
from cordkit.models.base import Asset, Entity
from cordkit.utils import CDN_URL, UNSET, Maybe, default_avatar_index, mention


class User(Entity):
    """A Discord user. ``name`` is decoded from ``username``."""

    name: str = Field(alias="username")
    discriminator: str
    global_name: Maybe[str] = UNSET
    avatar_hash: Maybe[str] = Field(default=UNSET, alias="avatar")
    banner_hash: Maybe[str] = Field(default=UNSET, alias="banner")
    accent_color: Maybe[int] = UNSET
    bot: bool = Field(default=False, frozen=True)
    system: bool = Field(default=False, frozen=True)
    public_flags: Maybe[PublicUserFlagsField] = UNSET

    def __str__(self) -> str:
        if self.discriminator in ("0", ""):
            return self.name
        return f"{self.name}#{self.discriminator}"

    @property
    def mention(self) -> str:
        return mention("user", self.id)

    @property
    def display_name(self) -> str:
        return self.global_name or self.name

    @property
    def avatar(self) -> Optional[Asset]:
        return Asset.build("avatars", self.id, self.avatar_hash)

    @property
    def banner(self) -> Optional[Asset]:
        return Asset.build("banners", self.id, self.banner_hash)

    @property
    def default_avatar_url(self) -> str:
        index = default_avatar_index(self.id, self.discriminator)
        return f"{CDN_URL}/embed/avatars/{index}.png"

    @property
    def display_avatar_url(self) -> str:
        avatar = self.avatar
        return avatar.url if avatar else self.default_avatar_url

    @property
    def flags(self) -> list[PublicUserFlags]:
        if not self.public_flags:
            return []
        return self.public_flags.members()


class ClientUser(User):
    """The user the client is authenticated as."""

    mfa_enabled: Maybe[bool] = UNSET
    locale: Maybe[LocaleField] = UNSET
    verified: Maybe[bool] = UNSET
