"""Polars helpers: accessor-value frames, numeric coercion and fixture loading."""

import math
from collections.abc import Sequence
from pathlib import Path
from typing import Any

import polars as pl

from reflex_row_model.columns import ColumnRegistry
from reflex_row_model.models import ColumnDef, Record

ROW_INDEX_FIELD: str = "__row_idx__"
GENERATED_ID_FIELD: str = "__row_id__"


def _humanize_field_name(field: str) -> str:
    """Convert a snake_case or raw field name to a human-friendly header.

    Examples:
        ``"first_name"`` -> ``"First Name"``
        ``"id"`` -> ``"Id"``
        ``"__row_id__"`` -> ``"Row Id"``
    """
    return field.strip("_").replace("_", " ").title()


def _col_to_str_expr(col: pl.Expr, dtype: pl.DataType) -> pl.Expr:
    """Convert a column expression to a String, handling List/Array types.

    * ``List(T)`` / ``Array(T, n)`` → cast inner to String, then ``list.join(",")``
    * Everything else → ``cast(pl.String)``
    """
    if isinstance(dtype, (pl.List, pl.Array)):
        return col.cast(pl.List(pl.String)).list.join(",")
    return col.cast(pl.String)


def _coerce_numeric(value: Any) -> int | float | None:
    """Try to coerce *value* to a number.

    Empty strings, ``None``, booleans, NaN, infinities and anything
    unparsable yield ``None`` (an open bound).
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return None if isinstance(value, float) and not math.isfinite(value) else value
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
        # Try int first, then float
        for conv in (int, float):
            try:
                number = conv(value)
            except ValueError:
                continue
            return None if isinstance(number, float) and not math.isfinite(number) else number
    return None


def records_to_frame(
    rows: Sequence[Record],
    registry: ColumnRegistry,
    column_ids: Sequence[str],
) -> pl.DataFrame:
    """Evaluate the accessors of *column_ids* over *rows* into a DataFrame.

    The frame carries one column per requested column id plus a
    ``__row_idx__`` column holding each row's position in *rows*, so the
    result of a filter or sort can be mapped back to the original records.
    Mixed-type accessor values are coerced to their polars supertype
    (``strict=False``).
    """
    series = [
        pl.Series(column_id, [registry.value(row, column_id) for row in rows], strict=False)
        for column_id in dict.fromkeys(column_ids)
    ]
    return pl.DataFrame(series).with_row_index(ROW_INDEX_FIELD)


def take_rows(rows: Sequence[Record], df: pl.DataFrame) -> list[Record]:
    """Return the records of *rows* addressed by ``df["__row_idx__"]``, in frame order."""
    return [rows[i] for i in df.get_column(ROW_INDEX_FIELD).to_list()]


# ---------------------------------------------------------------------------
# Fixture loading
# ---------------------------------------------------------------------------

def scan_file(path: Path) -> pl.LazyFrame:
    """Scan a static data file into a LazyFrame.

    Auto-detects the file format from the extension:

    * ``.json`` -- uses ``pl.read_json().lazy()`` (no streaming scan).
    * ``.ndjson`` / ``.jsonl`` -- uses ``pl.scan_ndjson()``.
    * ``.csv`` -- uses ``pl.scan_csv()``.
    * ``.tsv`` -- uses ``pl.scan_csv(separator="\\t")``.
    * ``.parquet`` / ``.pq`` -- uses ``pl.scan_parquet()``.
    * ``.ipc`` / ``.arrow`` / ``.feather`` -- uses ``pl.scan_ipc()``.

    Raises:
        FileNotFoundError: If *path* does not exist.
        ValueError: If the file extension is not recognised.
    """
    path = Path(path).resolve()
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    suffix = path.suffix.lower()

    if suffix == ".json":
        return pl.read_json(path).lazy()
    if suffix in (".ndjson", ".jsonl"):
        return pl.scan_ndjson(path)
    if suffix == ".csv":
        return pl.scan_csv(path)
    if suffix == ".tsv":
        return pl.scan_csv(path, separator="\t")
    if suffix in (".parquet", ".pq"):
        return pl.scan_parquet(path)
    if suffix in (".ipc", ".arrow", ".feather"):
        return pl.scan_ipc(path)

    raise ValueError(
        f"Unsupported file extension: {suffix!r}. "
        "Supported: .json, .ndjson, .jsonl, .csv, .tsv, "
        ".parquet, .pq, .ipc, .arrow, .feather"
    )


def build_column_defs_from_schema(
    schema: pl.Schema,
    *,
    id_field: str | None = None,
    show_id_field: bool = True,
) -> list[ColumnDef]:
    """Build a list of :class:`ColumnDef` from a polars Schema.

    Numeric columns get the ``"range"`` filter variant (min/max inputs);
    every other dtype gets ``"text"``.

    Args:
        schema: A polars ``Schema`` (e.g. ``lf.collect_schema()``).
        id_field: Name of the column used as the unique row identifier.
        show_id_field: Whether to include the *id_field* column.
    """
    column_defs: list[ColumnDef] = []
    for col_name, dtype in schema.items():
        if not show_id_field and col_name == id_field:
            continue
        column_defs.append(
            ColumnDef(
                id=col_name,
                header=_humanize_field_name(col_name),
                filter_variant="range" if dtype.is_numeric() else "text",
            )
        )
    return column_defs


def load_fixture(
    path: Path,
    *,
    id_field: str | None = None,
    limit: int | None = None,
) -> tuple[list[dict[str, Any]], list[ColumnDef], str]:
    """Load a static data file into records and inferred column definitions.

    Args:
        path: Path to the data file (see :func:`scan_file`).
        id_field: Name of the column holding each record's identity.  If
            ``None`` and the file has no ``"id"`` column with unique values,
            a ``"__row_id__"`` column is added with a zero-based row index
            and hidden from the column definitions.
        limit: Optional maximum number of rows to collect.

    Returns:
        A ``(records, column_defs, id_field)`` tuple.
    """
    lf = scan_file(path)
    if limit is not None:
        lf = lf.head(limit)
    df = lf.collect()

    effective_id_field = id_field
    show_id_field = True
    if effective_id_field is None:
        if "id" in df.columns and df["id"].n_unique() == df.height:
            effective_id_field = "id"
        else:
            df = df.with_row_index(GENERATED_ID_FIELD)
            effective_id_field = GENERATED_ID_FIELD
            show_id_field = False

    records = _dataframe_to_dicts(df)
    column_defs = build_column_defs_from_schema(
        df.schema,
        id_field=effective_id_field,
        show_id_field=show_id_field,
    )
    return records, column_defs, effective_id_field


def _dataframe_to_dicts(df: pl.DataFrame) -> list[dict[str, Any]]:
    """Convert a DataFrame to a list of plain-Python dicts.

    Temporal columns become ISO-8601 strings and List/Struct columns
    become strings, so every record value is a scalar the filter and
    sort engines can compare.
    """
    needs_cast: set[str] = set()
    for name, dtype in df.schema.items():
        if isinstance(dtype, (pl.Date, pl.Datetime, pl.Time, pl.Duration, pl.Struct)):
            needs_cast.add(name)
        elif isinstance(dtype, (pl.List, pl.Array)):
            needs_cast.add(name)

    if not needs_cast:
        return df.to_dicts()

    exprs: list[pl.Expr] = []
    for c in df.columns:
        if c in needs_cast:
            exprs.append(_col_to_str_expr(pl.col(c), df.schema[c]))
        else:
            exprs.append(pl.col(c))

    return df.select(exprs).to_dicts()
