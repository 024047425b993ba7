"""Cursor-based pagination helpers."""

import logging
from dataclasses import dataclass, field
from typing import AsyncIterator, Awaitable, Callable, Generic, List, Optional, TypeVar

T = TypeVar('T')

logger = logging.getLogger(__name__)


@dataclass
class PagedList(Generic[T]):
    """One page of results plus the opaque offset of the next page."""
    data: List[T] = field(default_factory=list)
    offset: Optional[str] = None

    def __len__(self) -> int:
        return len(self.data)

    def __iter__(self):
        return iter(self.data)


async def iterate_pages(
    fetch: Callable[[Optional[str], int], Awaitable[PagedList[T]]],
    limit: int,
    offset: Optional[str] = None
) -> AsyncIterator[T]:
    """Yield items across pages.

    Stops on an empty page, a missing next offset, or an offset the
    gateway has already returned.

    Args:
        fetch: Coroutine function taking (offset, limit)
        limit: Page size
        offset: Offset to start at
    """
    seen = set()
    while True:
        page = await fetch(offset, limit)
        for item in page.data:
            yield item

        if not page.data or not page.offset or page.offset in seen:
            return
        seen.add(page.offset)
        logger.debug(f"Fetching next page at offset {page.offset}")
        offset = page.offset
