"""Row pinning (top/bottom partition) and column pinning (left/right order)."""

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Literal

from reflex_row_model.models import (
    ColumnDef,
    ColumnPinningState,
    ColumnPinPosition,
    Record,
    RowId,
    RowPinningState,
    RowPinPosition,
)


@dataclass(frozen=True)
class PinnedPartition:
    top: list[Record]
    bottom: list[Record]
    center: list[Record]


def partition_rows(
    sorted_rows: Sequence[Record],
    pinning: RowPinningState,
    get_row_id: Callable[[Record], RowId],
) -> PinnedPartition:
    """Split *sorted_rows* into top-pinned, bottom-pinned and center rows.

    Top and bottom follow pin order and contain only identities still
    present in *sorted_rows*; a pinned row that was filtered out simply
    disappears.  Center keeps the sorted order of every unpinned row.

    Row identities are expected to be unique.  Records sharing one are
    pinned together, in sorted order, so the three groups still cover
    *sorted_rows* exactly.
    """
    by_id: dict[RowId, list[Record]] = {}
    for row in sorted_rows:
        by_id.setdefault(get_row_id(row), []).append(row)
    top = [row for row_id in dict.fromkeys(pinning.top) for row in by_id.get(row_id, ())]
    bottom = [
        row
        for row_id in dict.fromkeys(pinning.bottom)
        if row_id not in pinning.top
        for row in by_id.get(row_id, ())
    ]

    pinned_ids = set(pinning.top) | set(pinning.bottom)
    center = [row for row in sorted_rows if get_row_id(row) not in pinned_ids]
    return PinnedPartition(top=top, bottom=bottom, center=center)


def pin_row(
    pinning: RowPinningState,
    row_id: RowId,
    position: RowPinPosition | Literal[False] | None,
) -> RowPinningState:
    """Move *row_id* to the end of *position*, or unpin it when falsy."""
    top = tuple(r for r in pinning.top if r != row_id)
    bottom = tuple(r for r in pinning.bottom if r != row_id)
    if position == "top":
        top = (*top, row_id)
    elif position == "bottom":
        bottom = (*bottom, row_id)
    return RowPinningState(top=top, bottom=bottom)


def get_row_pinned_position(
    pinning: RowPinningState,
    row_id: RowId,
) -> RowPinPosition | None:
    if row_id in pinning.top:
        return "top"
    if row_id in pinning.bottom:
        return "bottom"
    return None


def get_row_pinned_index(
    rows: Sequence[Record],
    row_id: RowId,
    get_row_id: Callable[[Record], RowId],
) -> int:
    """Index of *row_id* within a rendered pinned group, or ``-1``."""
    for i, row in enumerate(rows):
        if get_row_id(row) == row_id:
            return i
    return -1


# ---------------------------------------------------------------------------
# Column pinning
# ---------------------------------------------------------------------------

def pin_column(
    pinning: ColumnPinningState,
    column_id: str,
    position: ColumnPinPosition | Literal[False] | None,
) -> ColumnPinningState:
    left = tuple(c for c in pinning.left if c != column_id)
    right = tuple(c for c in pinning.right if c != column_id)
    if position == "left":
        left = (*left, column_id)
    elif position == "right":
        right = (*right, column_id)
    return ColumnPinningState(left=left, right=right)


def get_column_pinned_position(
    pinning: ColumnPinningState,
    column_id: str,
) -> ColumnPinPosition | None:
    if column_id in pinning.left:
        return "left"
    if column_id in pinning.right:
        return "right"
    return None


def order_columns(
    columns: Sequence[ColumnDef],
    pinning: ColumnPinningState,
) -> list[ColumnDef]:
    """Left-pinned columns (pin order), then unpinned, then right-pinned."""
    by_id = {col.id: col for col in columns}
    left = [by_id[c] for c in pinning.left if c in by_id]
    right = [by_id[c] for c in pinning.right if c in by_id]
    pinned = set(pinning.left) | set(pinning.right)
    center = [col for col in columns if col.id not in pinned]
    return left + center + right
