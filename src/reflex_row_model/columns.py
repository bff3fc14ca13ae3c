"""Column registry: ordered column metadata plus per-column value accessors."""

from collections.abc import Callable, Mapping, Sequence
from typing import Any

from reflex_row_model.models import ColumnDef, FilterVariant, Record

Accessor = Callable[[Record], Any]


def key_accessor(key: str) -> Accessor:
    """Return an accessor reading *key* from a mapping or an object attribute.

    Missing keys and attributes read as ``None``.
    """

    def _read(record: Record) -> Any:
        if isinstance(record, Mapping):
            return record.get(key)
        return getattr(record, key, None)

    return _read


class ColumnRegistry:
    """Fixed, ordered sequence of column definitions.

    Created once at start-up and never mutated; only per-column *state*
    (filters, sorting, visibility, pinning) changes, and that lives in
    :class:`~reflex_row_model.row_model.RowModel`.

    Args:
        columns: Column definitions in display order.
        accessors: Optional ``{column_id: accessor}`` overrides.  Columns
            without an explicit accessor read ``accessor_key`` (or their
            ``id``) from each record.

    Raises:
        ValueError: If two columns share an id.
    """

    def __init__(
        self,
        columns: Sequence[ColumnDef],
        accessors: Mapping[str, Accessor] | None = None,
    ) -> None:
        self._columns: tuple[ColumnDef, ...] = tuple(columns)
        self._by_id: dict[str, ColumnDef] = {}
        for col in self._columns:
            if col.id in self._by_id:
                raise ValueError(f"Duplicate column id: {col.id!r}")
            self._by_id[col.id] = col

        accessors = accessors or {}
        self._accessors: dict[str, Accessor] = {
            col.id: accessors.get(col.id) or key_accessor(col.accessor_key or col.id)
            for col in self._columns
        }

    def __iter__(self):
        return iter(self._columns)

    def __len__(self) -> int:
        return len(self._columns)

    def __contains__(self, column_id: object) -> bool:
        return column_id in self._by_id

    def columns(self) -> tuple[ColumnDef, ...]:
        return self._columns

    def ids(self) -> list[str]:
        return [col.id for col in self._columns]

    def get(self, column_id: str) -> ColumnDef | None:
        return self._by_id.get(column_id)

    def accessor(self, column_id: str) -> Accessor:
        return self._accessors[column_id]

    def value(self, record: Record, column_id: str) -> Any:
        return self._accessors[column_id](record)

    def filter_variant(self, column_id: str) -> FilterVariant:
        col = self._by_id.get(column_id)
        return col.variant if col is not None else "text"

    # -- capability flags (unknown columns have none) --

    def can_sort(self, column_id: str) -> bool:
        col = self._by_id.get(column_id)
        return col is not None and col.enable_sorting

    def can_filter(self, column_id: str) -> bool:
        col = self._by_id.get(column_id)
        return col is not None and col.enable_filtering

    def can_hide(self, column_id: str) -> bool:
        col = self._by_id.get(column_id)
        return col is not None and col.enable_hiding

    def can_pin(self, column_id: str) -> bool:
        col = self._by_id.get(column_id)
        return col is not None and col.enable_pinning

    def hideable_columns(self) -> list[ColumnDef]:
        return [col for col in self._columns if col.enable_hiding]


def as_registry(
    columns: "ColumnRegistry | Sequence[ColumnDef]",
) -> ColumnRegistry:
    """Wrap a plain sequence of :class:`ColumnDef` in a registry."""
    if isinstance(columns, ColumnRegistry):
        return columns
    return ColumnRegistry(columns)
