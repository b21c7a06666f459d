"""Unit tests for list query parsing and pagination."""

from __future__ import annotations

from datetime import date

from pydantic import ValidationError
import pytest

from galaxyerp.application.interfaces.ingress import (
    DEFAULT_PAGE_SIZE,
    MAX_PAGE,
    MAX_PAGE_SIZE,
    ListQuery,
    SortOrder,
    build_pagination,
    clamp_page,
    clamp_page_size,
    parse_list_query,
)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [(-5, 1), (0, 1), (1, 1), (7, 7), (MAX_PAGE + 1, MAX_PAGE), (10**23, MAX_PAGE)],
)
def test_clamp_page(raw: int, expected: int) -> None:
    assert clamp_page(raw) == expected


@pytest.mark.parametrize(
    ("raw", "expected"),
    [(-1, 1), (0, 1), (50, 50), (100, 100), (101, MAX_PAGE_SIZE), (500, MAX_PAGE_SIZE)],
)
def test_clamp_page_size(raw: int, expected: int) -> None:
    assert clamp_page_size(raw) == expected


def test_out_of_range_values_are_clamped() -> None:
    query = parse_list_query({"page": "0", "page_size": "500"})

    assert query.page == 1
    assert query.page_size == 100


def test_huge_page_is_clamped_so_offset_stays_bounded() -> None:
    query = parse_list_query({"page": "99999999999999999999999", "page_size": "100"})

    assert query.page == MAX_PAGE
    assert query.offset == (MAX_PAGE - 1) * 100


def test_malformed_values_fall_back_to_defaults() -> None:
    query = parse_list_query({
        "page": "abc",
        "page_size": "",
        "start_date": "2024/01/01",
        "keyword": "   ",
    })

    assert query.page == 1
    assert query.page_size == DEFAULT_PAGE_SIZE
    assert query.start_date is None
    assert query.keyword is None


def test_default_page_size_is_per_endpoint() -> None:
    assert parse_list_query({}, default_page_size=20).page_size == 20
    assert parse_list_query({"page_size": "5"}, default_page_size=20).page_size == 5


def test_filters_and_sorting_are_parsed() -> None:
    query = parse_list_query({
        "page": "3",
        "page_size": "15",
        "sort_by": "code",
        "sort_order": "asc",
        "keyword": " 现金 ",
        "status": "active",
        "start_date": "2024-01-01",
        "end_date": "2024-12-31",
    })

    assert query.page == 3
    assert query.offset == 30
    assert query.limit == 15
    assert query.sort_by == "code"
    assert query.sort_desc is False
    assert query.order == SortOrder.ASC
    assert query.keyword == "现金"
    assert query.status == "active"
    assert query.start_date == date(2024, 1, 1)
    assert query.end_date == date(2024, 12, 31)


def test_sort_desc_flag_takes_precedence() -> None:
    query = parse_list_query({"sort_desc": "false", "sort_order": "desc"})

    assert query.sort_desc is False


def test_sort_field_outside_whitelist_falls_back_to_id() -> None:
    query = parse_list_query({"sort_by": "password_hash"})

    assert query.sort_field({"id", "code"}) == "id"
    assert parse_list_query({"sort_by": "code"}).sort_field({"id", "code"}) == "code"


def test_list_query_is_immutable() -> None:
    query = ListQuery()

    with pytest.raises(ValidationError):
        query.page = 2


def test_build_pagination() -> None:
    pagination = build_pagination(ListQuery(page=2, page_size=10), total=25)

    assert pagination.total_pages == 3
    assert pagination.has_next is True
    assert pagination.has_prev is True


def test_build_pagination_for_empty_result() -> None:
    pagination = build_pagination(ListQuery(), total=0)

    assert pagination.page == 1
    assert pagination.total_pages == 0
    assert pagination.has_next is False
    assert pagination.has_prev is False
