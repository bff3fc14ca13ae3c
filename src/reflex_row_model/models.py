"""Column definitions and table state slices for the row model."""

from dataclasses import dataclass, field
from typing import Any, Hashable, Literal, Mapping

Record = Any
RowId = Hashable

FilterVariant = Literal["text", "range"]
SortDirection = Literal["asc", "desc"]
RowPinPosition = Literal["top", "bottom"]
ColumnPinPosition = Literal["left", "right"]


@dataclass(frozen=True)
class ColumnDef:
    """Static metadata for one column of the registry.

    The value accessor is not part of the definition; it is looked up by
    column id in :class:`~reflex_row_model.columns.ColumnRegistry`, so a
    ``ColumnDef`` stays a plain, serialisable record.

    Attributes:
        id: Unique column identifier.
        header: Human-friendly header text.  Falls back to ``id``.
        accessor_key: Record key (or attribute) read by the default
            accessor.  Falls back to ``id``.
        filter_variant: ``"text"`` (substring) or ``"range"`` (inclusive
            numeric bounds).  ``None`` means ``"text"``.
        enable_sorting: Whether the column may appear in the sort state.
        enable_filtering: Whether the column may carry a filter value.
        enable_hiding: Whether the column visibility may be toggled.
        enable_pinning: Whether the column may be pinned left or right.
    """

    id: str
    header: str | None = None
    accessor_key: str | None = None
    filter_variant: FilterVariant | None = None
    enable_sorting: bool = True
    enable_filtering: bool = True
    enable_hiding: bool = True
    enable_pinning: bool = True

    @property
    def header_text(self) -> str:
        return self.header if self.header is not None else self.id

    @property
    def variant(self) -> FilterVariant:
        return self.filter_variant or "text"


@dataclass(frozen=True)
class SortEntry:
    """One ``(column, direction)`` key of the sort state."""

    column_id: str
    direction: SortDirection = "asc"

    @property
    def desc(self) -> bool:
        return self.direction == "desc"


@dataclass(frozen=True)
class PaginationState:
    page_index: int = 0
    page_size: int = 8


@dataclass(frozen=True)
class RowPinningState:
    """Row identities pinned to the top and bottom, in pin order."""

    top: tuple[RowId, ...] = ()
    bottom: tuple[RowId, ...] = ()


@dataclass(frozen=True)
class ColumnPinningState:
    """Column ids pinned to the left and right edges, in pin order."""

    left: tuple[str, ...] = ()
    right: tuple[str, ...] = ()


@dataclass(frozen=True)
class TableState:
    """Snapshot of every state slice owned by the row model."""

    column_filters: Mapping[str, Any] = field(default_factory=dict)
    sorting: tuple[SortEntry, ...] = ()
    pagination: PaginationState = field(default_factory=PaginationState)
    row_pinning: RowPinningState = field(default_factory=RowPinningState)
    row_selection: frozenset = frozenset()
    column_visibility: Mapping[str, bool] = field(default_factory=dict)
    column_pinning: ColumnPinningState = field(default_factory=ColumnPinningState)

    def to_snapshot(self) -> dict[str, Any]:
        """Return the state as plain dicts, lists and tuples.

        This is the form kept in a Reflex backend var, one per client
        session; :meth:`from_snapshot` restores it.
        """
        return {
            "column_filters": dict(self.column_filters),
            "sorting": [(e.column_id, e.direction) for e in self.sorting],
            "page_index": self.pagination.page_index,
            "page_size": self.pagination.page_size,
            "pinned_top": list(self.row_pinning.top),
            "pinned_bottom": list(self.row_pinning.bottom),
            "selection": list(self.row_selection),
            "column_visibility": dict(self.column_visibility),
            "pinned_left": list(self.column_pinning.left),
            "pinned_right": list(self.column_pinning.right),
        }

    @classmethod
    def from_snapshot(cls, snapshot: Mapping[str, Any]) -> "TableState":
        return cls(
            column_filters=dict(snapshot.get("column_filters", {})),
            sorting=tuple(
                SortEntry(column_id, direction)
                for column_id, direction in snapshot.get("sorting", ())
            ),
            pagination=PaginationState(
                page_index=snapshot.get("page_index", 0),
                page_size=snapshot.get("page_size", PaginationState.page_size),
            ),
            row_pinning=RowPinningState(
                top=tuple(snapshot.get("pinned_top", ())),
                bottom=tuple(snapshot.get("pinned_bottom", ())),
            ),
            row_selection=frozenset(snapshot.get("selection", ())),
            column_visibility=dict(snapshot.get("column_visibility", {})),
            column_pinning=ColumnPinningState(
                left=tuple(snapshot.get("pinned_left", ())),
                right=tuple(snapshot.get("pinned_right", ())),
            ),
        )
