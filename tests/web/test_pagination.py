"""Tests for the pager and the feed scroll cursor."""

import pytest
from pydantic import ValidationError

from web.pagination import (
    ELLIPSIS,
    FeedCursor,
    Pagination,
    clamp_page,
    offset_for,
    page_count,
    visible_pages,
)


class TestVisiblePages:
    @pytest.mark.parametrize(
        ("current", "total", "expected"),
        [
            (1, 1, [1]),
            (2, 4, [1, 2, 3, 4]),
            (1, 10, [1, 2, ELLIPSIS, 10]),
            (3, 10, [1, 2, 3, 4, ELLIPSIS, 10]),
            (5, 10, [1, ELLIPSIS, 4, 5, 6, ELLIPSIS, 10]),
            (8, 10, [1, ELLIPSIS, 7, 8, 9, 10]),
            (10, 10, [1, ELLIPSIS, 9, 10]),
        ],
    )
    def test_window(self, current, total, expected):
        assert visible_pages(current, total) == expected

    def test_out_of_range_page_is_clamped(self):
        assert visible_pages(99, 10) == [1, ELLIPSIS, 9, 10]

    def test_no_pages(self):
        assert visible_pages(1, 0) == []


class TestHelpers:
    def test_clamp_page(self):
        assert clamp_page(0, 5) == 1
        assert clamp_page(7, 5) == 5
        assert clamp_page(3, 0) == 1

    def test_page_count(self):
        assert page_count(0, 10) == 1
        assert page_count(10, 10) == 1
        assert page_count(11, 10) == 2

    def test_page_count_rejects_bad_size(self):
        with pytest.raises(ValueError):
            page_count(10, 0)

    def test_offset_for(self):
        assert offset_for(1, 10) == 0
        assert offset_for(3, 10) == 20
        assert offset_for(0, 10) == 0


class TestPagination:
    def test_first_page(self):
        pager = Pagination.build(1, 3)
        assert pager.has_previous is False
        assert pager.has_next is True
        assert pager.previous_page is None
        assert pager.next_page == 2
        assert pager.pages == [1, 2, 3]

    def test_last_page(self):
        pager = Pagination.build(3, 3)
        assert pager.has_next is False
        assert pager.previous_page == 2

    def test_single_page(self):
        pager = Pagination.build(1, 1)
        assert pager.has_previous is False
        assert pager.has_next is False

    def test_clamps_current(self):
        assert Pagination.build(9, 3).current == 3

    def test_for_items(self):
        pager = Pagination.for_items(2, total_items=25, page_size=10)
        assert pager.total_pages == 3
        assert pager.current == 2

    def test_serializes_ellipsis(self):
        data = Pagination.build(5, 10).model_dump()
        assert data["pages"] == [1, "...", 4, 5, 6, "...", 10]


class TestFeedCursor:
    def test_full_page_keeps_going(self):
        cursor = FeedCursor(limit=10).advance(10)
        assert cursor.offset == 10
        assert cursor.has_more is True

    def test_short_page_ends_feed(self):
        cursor = FeedCursor(limit=10, offset=10).advance(3)
        assert cursor.offset == 13
        assert cursor.has_more is False

    def test_reset(self):
        cursor = FeedCursor(limit=10).advance(2).reset()
        assert cursor.offset == 0
        assert cursor.has_more is True

    def test_for_page(self):
        cursor = FeedCursor.for_page(3, limit=5)
        assert cursor.offset == 10
        assert cursor.limit == 5

    def test_limit_must_be_positive(self):
        with pytest.raises(ValidationError):
            FeedCursor(limit=0)
