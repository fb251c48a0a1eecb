"""In-memory entity caches kept in sync by gateway events."""

from __future__ import annotations

from typing import Generic, Iterator, Optional, TypeVar

from cordkit.utils import Snowflake

E = TypeVar("E")


class EntityCache(Generic[E]):
    """Identifier -> entity mapping scoped to one owner (a client or a guild).

    ``put`` overwrites, so inserting the same identifier twice keeps only the
    latest entity. Lookups of unknown identifiers return ``None``.
    """

    def __init__(self) -> None:
        self._items: dict[Snowflake, E] = {}

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, ident: object) -> bool:
        return ident in self._items

    def __iter__(self) -> Iterator[E]:
        return iter(list(self._items.values()))

    def __repr__(self) -> str:
        return f"<EntityCache size={len(self._items)}>"

    def get(self, ident: Snowflake) -> Optional[E]:
        return self._items.get(ident)

    def put(self, entity: E) -> E:
        self._items[entity.id] = entity  # type: ignore[attr-defined]
        return entity

    def remove(self, ident: Snowflake) -> Optional[E]:
        return self._items.pop(ident, None)

    def values(self) -> list[E]:
        return list(self._items.values())

    def clear(self) -> None:
        self._items.clear()
