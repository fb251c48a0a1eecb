"""Cursor-driven async iteration over paged REST list endpoints.

A :class:`CursorPaginator` asks ``fetch_page(limit, cursor)`` for raw items,
decodes them, yields them as one page and moves the cursor to the last
item's identifier. A page shorter than the requested size means the
endpoint is exhausted, so no trailing request is made after it. A page that
fails to decode ends the iteration too: the error propagates and the
paginator is marked exhausted rather than refetching the same page::

    async for page in guild.bans(limit=None):
        for ban in page:
            print(ban.user.name)

    members = await guild.request_members(limit=250).collect()
"""

from __future__ import annotations

import enum
from typing import Any, AsyncIterator, Awaitable, Callable, Generic, Optional, TypeVar

from cordkit.exceptions import DecodeError
from cordkit.output import debug
from cordkit.utils import JSON

T = TypeVar("T")

PAGE_SIZE = 1000

FetchPage = Callable[[int, Optional[int]], Awaitable[list[JSON]]]


class Direction(str, enum.Enum):
    """Which side of the cursor the next page is taken from."""

    BEFORE = "before"
    AFTER = "after"


class CursorPaginator(Generic[T]):
    """Async iterator of pages.

    Args:
        fetch_page: Coroutine function ``(limit, cursor) -> list[raw item]``.
        decode: Turns one raw item into a model.
        key: Returns the identifier used as the next cursor.
        direction: Whether ``cursor`` is a ``before`` or ``after`` bound.
        limit: Total number of items wanted. ``None`` for everything; values
            below 1 are raised to 1.
        cursor: Initial exclusive bound, or ``None`` to start at the edge.
        page_size: Maximum items per request.
    """

    def __init__(
        self,
        fetch_page: FetchPage,
        decode: Callable[[JSON], T],
        key: Callable[[T], int],
        *,
        direction: Direction,
        limit: Optional[int] = PAGE_SIZE,
        cursor: Optional[int] = None,
        page_size: int = PAGE_SIZE,
    ) -> None:
        self._fetch_page = fetch_page
        self._decode = decode
        self._key = key
        self.direction = direction
        self._remaining = None if limit is None else max(1, limit)
        self._cursor = cursor
        self._page_size = page_size
        self._exhausted = False
        self.requests_made = 0

    @property
    def cursor(self) -> Optional[int]:
        return self._cursor

    @property
    def exhausted(self) -> bool:
        return self._exhausted

    def __aiter__(self) -> CursorPaginator[T]:
        return self

    async def __anext__(self) -> list[T]:
        if self._exhausted:
            raise StopAsyncIteration

        size = self._page_size
        if self._remaining is not None:
            size = min(size, self._remaining)

        raw = await self._fetch_page(size, self._cursor)
        self.requests_made += 1
        debug(f"Fetched page of {len(raw)} item(s) {self.direction.value} {self._cursor}")

        if len(raw) < size:
            self._exhausted = True
        if not raw:
            self._exhausted = True
            raise StopAsyncIteration

        try:
            page = [self._decode(item) for item in raw]
        except DecodeError:
            self._exhausted = True
            raise
        if self._remaining is not None:
            page = page[: self._remaining]
            self._remaining -= len(page)
            if self._remaining <= 0:
                self._exhausted = True

        self._cursor = self._key(page[-1])
        return page

    async def flatten(self) -> AsyncIterator[T]:
        """Yield items one at a time instead of page by page."""
        async for page in self:
            for item in page:
                yield item

    async def collect(self) -> list[T]:
        items: list[T] = []
        async for page in self:
            items.extend(page)
        return items

