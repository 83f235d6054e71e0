"""Page-number pagination and infinite-scroll state."""

import math

from pydantic import BaseModel, Field

MAX_VISIBLE_PAGES = 4

# Marker for a gap in the page list
ELLIPSIS = "..."


def clamp_page(value: int, total: int) -> int:
    """Clamp a requested page number to ``1..total``."""
    return min(max(value, 1), max(total, 1))


def visible_pages(current: int, total: int) -> list[int | str]:
    """Page numbers to show in the pager, with ELLIPSIS for gaps.

    Up to MAX_VISIBLE_PAGES pages are all shown. Beyond that the first and
    last pages are always shown, with the neighbours of the current page in
    between.

    >>> visible_pages(5, 10)
    [1, '...', 4, 5, 6, '...', 10]
    """
    if total <= MAX_VISIBLE_PAGES:
        return list(range(1, total + 1))

    current = clamp_page(current, total)
    pages: list[int | str] = [1]
    if current > 3:
        pages.append(ELLIPSIS)
    pages.extend(range(max(2, current - 1), min(current + 1, total - 1) + 1))
    if current < total - 2:
        pages.append(ELLIPSIS)
    pages.append(total)
    return pages


def page_count(total_items: int, page_size: int) -> int:
    """Number of pages needed for ``total_items`` (at least 1)."""
    if page_size < 1:
        raise ValueError("page_size must be >= 1")
    return max(1, math.ceil(total_items / page_size))


def offset_for(page: int, page_size: int) -> int:
    """Offset of the first item of a page."""
    return (max(page, 1) - 1) * page_size


class Pagination(BaseModel):
    """Pager state for a page of results.

    Attributes:
        current: Current page (1-indexed).
        total_pages: Number of pages.
        pages: Page numbers and ellipses to render.
        has_previous: Whether a "previous" button is enabled.
        has_next: Whether a "next" button is enabled.
        previous_page: Page the "previous" button goes to.
        next_page: Page the "next" button goes to.
    """

    current: int
    total_pages: int
    pages: list[int | str] = Field(default_factory=list)
    has_previous: bool = False
    has_next: bool = False
    previous_page: int | None = None
    next_page: int | None = None

    @classmethod
    def build(cls, current: int, total_pages: int) -> "Pagination":
        total_pages = max(total_pages, 1)
        current = clamp_page(current, total_pages)
        has_previous = current != 1
        has_next = current != total_pages
        return cls(
            current=current,
            total_pages=total_pages,
            pages=visible_pages(current, total_pages),
            has_previous=has_previous,
            has_next=has_next,
            previous_page=current - 1 if has_previous else None,
            next_page=current + 1 if has_next else None,
        )

    @classmethod
    def for_items(cls, current: int, total_items: int, page_size: int) -> "Pagination":
        return cls.build(current, page_count(total_items, page_size))


class FeedCursor(BaseModel):
    """Infinite-scroll position in the news feed.

    ``advance`` is called with the number of posts a fetch returned. A
    short page means the end of the feed was reached.
    """

    limit: int = Field(10, ge=1)
    offset: int = Field(0, ge=0)
    has_more: bool = True

    def advance(self, received: int) -> "FeedCursor":
        self.offset += received
        if received < self.limit:
            self.has_more = False
        return self

    def reset(self) -> "FeedCursor":
        self.offset = 0
        self.has_more = True
        return self

    @classmethod
    def for_page(cls, page: int, limit: int = 10) -> "FeedCursor":
        return cls(limit=limit, offset=offset_for(page, limit))
