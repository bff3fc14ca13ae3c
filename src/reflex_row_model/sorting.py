"""Sort engine: stable multi-key sorting and the header sort-toggle cycle."""

from collections.abc import Sequence

import polars as pl

from reflex_row_model.columns import ColumnRegistry
from reflex_row_model.models import Record, SortDirection, SortEntry
from reflex_row_model.polars_utils import _col_to_str_expr, records_to_frame, take_rows

_SORT_LABELS: dict[SortDirection | None, str] = {
    "asc": "Sort ascending",
    "desc": "Sort descending",
    None: "Clear sort",
}


def valid_sort_entries(
    sort_state: Sequence[SortEntry],
    registry: ColumnRegistry,
) -> list[SortEntry]:
    """Drop entries for unknown or non-sortable columns and repeated columns."""
    seen: set[str] = set()
    entries: list[SortEntry] = []
    for entry in sort_state:
        if entry.column_id in seen or not registry.can_sort(entry.column_id):
            continue
        seen.add(entry.column_id)
        entries.append(entry)
    return entries


def _sort_keys(column_id: str, dtype: pl.DataType, prefix: str) -> dict[str, pl.Expr]:
    """Rank, numeric and text sort keys for one column.

    Numbers (and strings that parse as finite numbers) rank before other
    values and compare numerically; the rest compare as text.  Missing
    values get a null rank, so they sort last in either direction.
    """
    col = pl.col(column_id)
    if dtype.is_numeric():
        num = col
    elif dtype == pl.String:
        num = col.cast(pl.Float64, strict=False)
        num = pl.when(num.is_finite()).then(num).otherwise(None)
    else:
        return {
            f"{prefix}_rank": pl.when(col.is_null()).then(None).otherwise(pl.lit(1)),
            f"{prefix}_text": _col_to_str_expr(col, dtype),
        }

    rank = (
        pl.when(col.is_null())
        .then(None)
        .when(num.is_not_null())
        .then(pl.lit(0))
        .otherwise(pl.lit(1))
    )
    return {
        f"{prefix}_rank": rank,
        f"{prefix}_num": num,
        f"{prefix}_text": pl.when(num.is_null()).then(_col_to_str_expr(col, dtype)).otherwise(None),
    }


def apply_sorting(
    rows: Sequence[Record],
    sort_state: Sequence[SortEntry],
    registry: ColumnRegistry,
) -> list[Record]:
    """Return *rows* ordered lexicographically by the sort-state entries.

    The first entry is the primary key.  Numbers compare numerically and
    strings lexicographically, also when one column mixes the two (see
    :func:`_sort_keys`); ``None`` values sort last whatever the
    direction.  The sort is stable, so rows equal under every entry keep
    their input order.
    """
    entries = valid_sort_entries(sort_state, registry)
    if not entries or not rows:
        return list(rows)

    df = records_to_frame(rows, registry, [e.column_id for e in entries])
    by: list[str] = []
    descending: list[bool] = []
    for i, entry in enumerate(entries):
        keys = _sort_keys(entry.column_id, df.schema[entry.column_id], f"__sort_{i}")
        df = df.with_columns(**keys)
        by.extend(keys)
        descending.extend([entry.desc] * len(keys))

    df = df.sort(
        by=by,
        descending=descending,
        nulls_last=True,
        maintain_order=True,
    )
    return take_rows(rows, df)


def get_sort_direction(
    sort_state: Sequence[SortEntry],
    column_id: str,
) -> SortDirection | None:
    for entry in sort_state:
        if entry.column_id == column_id:
            return entry.direction
    return None


def get_sort_index(sort_state: Sequence[SortEntry], column_id: str) -> int:
    """Return the priority of *column_id* in the sort state, or ``-1``."""
    for i, entry in enumerate(sort_state):
        if entry.column_id == column_id:
            return i
    return -1


def get_next_sorting_order(
    sort_state: Sequence[SortEntry],
    column_id: str,
) -> SortDirection | None:
    """Direction a toggle would give *column_id*: ``none → asc → desc → none``."""
    current = get_sort_direction(sort_state, column_id)
    if current is None:
        return "asc"
    if current == "asc":
        return "desc"
    return None


def next_sort_label(sort_state: Sequence[SortEntry], column_id: str) -> str:
    return _SORT_LABELS[get_next_sorting_order(sort_state, column_id)]


def toggle_sorting(
    sort_state: Sequence[SortEntry],
    column_id: str,
    registry: ColumnRegistry,
    *,
    multi: bool = False,
) -> tuple[SortEntry, ...]:
    """Advance *column_id* one step through the sort cycle.

    Without *multi* the result sorts by *column_id* alone (or by nothing,
    once the cycle clears it).  With *multi* the column's entry is updated
    in place, appended when new, and removed when the cycle clears it;
    other entries are kept.  Non-sortable columns leave the state unchanged.
    """
    if not registry.can_sort(column_id):
        return tuple(sort_state)

    next_order = get_next_sorting_order(sort_state, column_id)

    if not multi:
        if next_order is None:
            return ()
        return (SortEntry(column_id, next_order),)

    if next_order is None:
        return tuple(e for e in sort_state if e.column_id != column_id)
    if get_sort_index(sort_state, column_id) < 0:
        return (*sort_state, SortEntry(column_id, next_order))
    return tuple(
        SortEntry(column_id, next_order) if e.column_id == column_id else e
        for e in sort_state
    )
