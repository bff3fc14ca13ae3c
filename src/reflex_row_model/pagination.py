"""Pagination engine: page slicing, page counts and clamped navigation.

Every navigation helper is a pure function from the current
:class:`PaginationState` (and page count) to a new state whose page index
lies in ``[0, page_count - 1]``.  Out-of-range requests are clamped,
never rejected.
"""

import math
from collections.abc import Sequence
from dataclasses import dataclass, replace
from typing import Any

from reflex_row_model.models import PaginationState


@dataclass(frozen=True)
class Page:
    rows: list[Any]
    page_count: int


def get_page_count(row_count: int, page_size: int) -> int:
    """``ceil(row_count / page_size)``, never less than 1."""
    return max(1, math.ceil(row_count / max(1, page_size)))


def clamp_page_index(page_index: Any, page_count: int) -> int:
    """Clamp *page_index* into ``[0, page_count - 1]``.

    Fractional indexes are truncated, infinities clamp to the matching end
    and unparsable values (including NaN) fall back to the first page.
    """
    last = max(0, page_count - 1)
    if isinstance(page_index, float) and math.isinf(page_index):
        return 0 if page_index < 0 else last
    try:
        index = int(page_index)
    except (TypeError, ValueError):
        index = 0
    return min(max(0, index), last)


def paginate(rows: Sequence[Any], pagination: PaginationState) -> Page:
    """Slice *rows* to the page at ``pagination.page_index``.

    An out-of-range index yields an empty slice; callers clamp the index
    before the next render (see :meth:`RowModel._recompute`).
    """
    page_size = max(1, pagination.page_size)
    start = max(0, pagination.page_index) * page_size
    return Page(
        rows=list(rows[start:start + page_size]),
        page_count=get_page_count(len(rows), page_size),
    )


def can_previous_page(pagination: PaginationState) -> bool:
    return pagination.page_index > 0


def can_next_page(pagination: PaginationState, page_count: int) -> bool:
    return pagination.page_index < page_count - 1


def go_to_page(
    pagination: PaginationState,
    page_index: int,
    page_count: int,
) -> PaginationState:
    return replace(pagination, page_index=clamp_page_index(page_index, page_count))


def first_page(pagination: PaginationState, page_count: int) -> PaginationState:
    return go_to_page(pagination, 0, page_count)


def previous_page(pagination: PaginationState, page_count: int) -> PaginationState:
    return go_to_page(pagination, pagination.page_index - 1, page_count)


def next_page(pagination: PaginationState, page_count: int) -> PaginationState:
    return go_to_page(pagination, pagination.page_index + 1, page_count)


def last_page(pagination: PaginationState, page_count: int) -> PaginationState:
    return go_to_page(pagination, page_count - 1, page_count)


def set_page_size(pagination: PaginationState, page_size: Any) -> PaginationState:
    """Change the page size, keeping the current page's first row in view.

    Non-positive, non-finite or unparsable sizes are clamped to 1.  The
    new index is ``floor(page_index * old_size / new_size)``; the caller
    clamps it against the new page count.
    """
    try:
        new_size = max(1, int(page_size))
    except (TypeError, ValueError, OverflowError):
        new_size = 1
    top_row_index = max(0, pagination.page_index) * max(1, pagination.page_size)
    return PaginationState(page_index=top_row_index // new_size, page_size=new_size)
