import pytest

from reflex_row_model import pagination as pg
from reflex_row_model.models import PaginationState


@pytest.mark.parametrize(
    ("row_count", "page_size", "expected"),
    [(10, 4, 3), (8, 4, 2), (0, 4, 1), (1, 8, 1), (5, 0, 5)],
)
def test_get_page_count(row_count: int, page_size: int, expected: int) -> None:
    assert pg.get_page_count(row_count, page_size) == expected


def test_paginate_slices_pages() -> None:
    rows = list(range(10))
    page = pg.paginate(rows, PaginationState(page_index=2, page_size=4))
    assert page.rows == [8, 9]
    assert page.page_count == 3


def test_pages_concatenate_to_all_rows() -> None:
    rows = list(range(11))
    page_count = pg.get_page_count(len(rows), 3)
    joined = []
    for index in range(page_count):
        joined.extend(pg.paginate(rows, PaginationState(index, 3)).rows)
    assert joined == rows


def test_navigation_is_clamped() -> None:
    state = PaginationState(page_index=0, page_size=4)
    assert pg.previous_page(state, 3).page_index == 0
    assert pg.last_page(state, 3).page_index == 2
    assert pg.next_page(pg.last_page(state, 3), 3).page_index == 2
    assert pg.go_to_page(state, 99, 3).page_index == 2
    assert pg.go_to_page(state, -5, 3).page_index == 0
    assert pg.first_page(PaginationState(2, 4), 3).page_index == 0


def test_can_previous_and_next() -> None:
    assert not pg.can_previous_page(PaginationState(0, 4))
    assert pg.can_next_page(PaginationState(0, 4), 3)
    assert pg.can_previous_page(PaginationState(2, 4))
    assert not pg.can_next_page(PaginationState(2, 4), 3)
    assert not pg.can_next_page(PaginationState(0, 4), 1)


def test_set_page_size_keeps_top_row_in_view() -> None:
    state = pg.set_page_size(PaginationState(page_index=2, page_size=4), 5)
    assert state == PaginationState(page_index=1, page_size=5)


@pytest.mark.parametrize("size", [0, -3, "abc", None])
def test_set_page_size_clamps_invalid_sizes(size: object) -> None:
    assert pg.set_page_size(PaginationState(), size).page_size == 1


@pytest.mark.parametrize("size", [float("inf"), float("-inf"), float("nan")])
def test_set_page_size_clamps_non_finite_sizes(size: float) -> None:
    assert pg.set_page_size(PaginationState(page_index=2, page_size=4), size).page_size == 1


@pytest.mark.parametrize(
    ("index", "expected"),
    [(1.7, 1), (float("inf"), 2), (float("-inf"), 0), (float("nan"), 0), ("x", 0)],
)
def test_clamp_page_index_handles_odd_values(index: object, expected: int) -> None:
    assert pg.clamp_page_index(index, 3) == expected
