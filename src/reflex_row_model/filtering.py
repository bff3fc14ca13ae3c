"""Filter engine: per-column text and range filters evaluated with polars.

The filter state maps a column id to a raw filter value:

* ``"text"`` columns take a string; a row passes when the column value,
  lower-cased, contains the lower-cased string.
* ``"range"`` columns take a ``(min, max)`` pair (a 2-sequence or a
  ``{"min": ..., "max": ...}`` mapping); either bound may be ``None`` or
  an empty string, meaning unbounded on that side.

Active filters AND-compose across columns and never reorder rows.
"""

from collections.abc import Mapping, Sequence
from typing import Any, Literal

import polars as pl

from reflex_row_model.columns import ColumnRegistry
from reflex_row_model.models import FilterVariant, Record
from reflex_row_model.polars_utils import (
    _coerce_numeric,
    _col_to_str_expr,
    records_to_frame,
    take_rows,
)

RangeValue = tuple[int | float | None, int | float | None]


def resolve_filter_value(variant: FilterVariant, value: Any) -> Any:
    """Normalise a raw filter value for *variant*.

    Returns ``None`` when the value means "no filter" (``None``, an empty
    string, or a range with both bounds open).  Range values come back as
    a ``(min, max)`` tuple of numbers or ``None``; bounds are kept in the
    order given (see :func:`_range_bounds` for the swap at evaluation).
    """
    if value is None:
        return None

    if variant == "range":
        if isinstance(value, Mapping):
            lo, hi = value.get("min"), value.get("max")
        elif isinstance(value, Sequence) and not isinstance(value, str):
            lo = value[0] if len(value) > 0 else None
            hi = value[1] if len(value) > 1 else None
        else:
            return None
        lo, hi = _coerce_numeric(lo), _coerce_numeric(hi)
        if lo is None and hi is None:
            return None
        return (lo, hi)

    text = str(value)
    return text or None


def set_range_bound(
    current: Any,
    bound: Literal["min", "max"],
    value: Any,
) -> RangeValue | None:
    """Update one half of a range filter value, leaving the other untouched.

    Returns the normalised pair, or ``None`` when both bounds end up open.
    """
    lo, hi = resolve_filter_value("range", current) or (None, None)
    if bound == "min":
        lo = _coerce_numeric(value)
    else:
        hi = _coerce_numeric(value)
    return resolve_filter_value("range", (lo, hi))


def _range_bounds(value: RangeValue) -> RangeValue:
    """Return ``(min, max)`` with the bounds swapped when ``min > max``."""
    lo, hi = value
    if lo is not None and hi is not None and lo > hi:
        return hi, lo
    return lo, hi


def _build_filter_expr(
    column_id: str,
    variant: FilterVariant,
    value: Any,
    dtype: pl.DataType,
) -> pl.Expr:
    """Translate one resolved filter value to a polars predicate.

    Null column values never pass.  Under a range filter, values that do
    not parse as numbers become null and are excluded.
    """
    col = pl.col(column_id)

    if variant == "range":
        num = col if dtype.is_numeric() else col.cast(pl.Float64, strict=False)
        lo, hi = _range_bounds(value)
        expr = num.is_not_null()
        if lo is not None:
            expr = expr & (num >= lo)
        if hi is not None:
            expr = expr & (num <= hi)
        return expr

    needle = str(value).lower()
    return _col_to_str_expr(col, dtype).str.to_lowercase().str.contains(needle, literal=True)


def active_filters(
    filter_state: Mapping[str, Any],
    registry: ColumnRegistry,
) -> dict[str, Any]:
    """Return the resolved filter values that actually constrain rows.

    Entries for unknown or non-filterable columns, and entries that resolve
    to "no filter", are dropped.
    """
    active: dict[str, Any] = {}
    for column_id, raw in filter_state.items():
        if not registry.can_filter(column_id):
            continue
        value = resolve_filter_value(registry.filter_variant(column_id), raw)
        if value is not None:
            active[column_id] = value
    return active


def apply_filters(
    rows: Sequence[Record],
    filter_state: Mapping[str, Any],
    registry: ColumnRegistry,
) -> list[Record]:
    """Return the rows of *rows* passing every active filter, in input order.

    Only the filtered columns' accessors are evaluated; they are collected
    into a polars DataFrame and the combined predicate is applied there.
    """
    active = active_filters(filter_state, registry)
    if not active or not rows:
        return list(rows)

    df = records_to_frame(rows, registry, list(active))

    exprs: list[pl.Expr] = [
        _build_filter_expr(
            column_id,
            registry.filter_variant(column_id),
            value,
            df.schema[column_id],
        )
        for column_id, value in active.items()
    ]
    combined = exprs[0]
    for e in exprs[1:]:
        combined = combined & e

    return take_rows(rows, df.filter(combined))
