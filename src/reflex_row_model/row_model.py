"""Row-model orchestrator: owns every state slice and the derived row views.

The derived model is a pure function of the raw records and the current
state, recomputed wholesale after every setter call in a fixed order::

    core rows -> filter -> sort -> pin partition -> paginate(center)

followed by clamping the page index into ``[0, page_count - 1]``.  Pinned
rows are exempt from pagination, so the page count depends on the
unpinned (center) rows alone.  Selection and visibility annotate the
result without taking part in row sequencing.

Typical usage::

    from reflex_row_model import ColumnDef, RowModel

    model = RowModel(
        records,
        [ColumnDef("id", filter_variant="range"), ColumnDef("name")],
        page_size=4,
    )
    model.set_column_filter("name", "ann")
    model.toggle_sorting("id")
    model.pin_row(5, "top")
    page = model.get_center_page_rows()

Every invalid request (sorting a non-sortable column, selecting an unknown
row, navigating past the last page, ...) is a silent no-op or is clamped;
nothing in here raises at runtime.
"""

import time
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, replace
from typing import Any, Literal

from reflex_row_model import pagination as pg
from reflex_row_model import selection as sel
from reflex_row_model import visibility as vis
from reflex_row_model.columns import ColumnRegistry, as_registry, key_accessor
from reflex_row_model.filtering import apply_filters, resolve_filter_value, set_range_bound
from reflex_row_model.models import (
    ColumnDef,
    ColumnPinningState,
    ColumnPinPosition,
    PaginationState,
    Record,
    RowId,
    RowPinningState,
    RowPinPosition,
    SortDirection,
    SortEntry,
    TableState,
)
from reflex_row_model.pinning import (
    get_column_pinned_position,
    get_row_pinned_position,
    order_columns,
    partition_rows,
    pin_column,
    pin_row,
)
from reflex_row_model.sorting import (
    apply_sorting,
    get_next_sorting_order,
    get_sort_direction,
    toggle_sorting,
    valid_sort_entries,
)

_DEFAULT_PAGE_SIZE: int = 8
_DEFAULT_PAGE_SIZE_OPTIONS: tuple[int, ...] = (4, 5, 8, 10)


@dataclass(frozen=True)
class DerivedRowModel:
    """Every derived view of one recomputation."""

    core_rows: list[Record]
    filtered_rows: list[Record]
    sorted_rows: list[Record]
    top_rows: list[Record]
    center_rows: list[Record]
    bottom_rows: list[Record]
    center_page_rows: list[Record]
    page_count: int
    page_index: int


def recompute(
    records: Sequence[Record],
    state: TableState,
    registry: ColumnRegistry,
    get_row_id: Callable[[Record], RowId],
) -> DerivedRowModel:
    """Run the full pipeline over *records* for *state*.

    The page index used for slicing is clamped against the page count of
    the center rows; the clamped value is reported as ``page_index``.
    """
    core_rows = list(records)
    filtered_rows = apply_filters(core_rows, state.column_filters, registry)
    sorted_rows = apply_sorting(filtered_rows, state.sorting, registry)
    partition = partition_rows(sorted_rows, state.row_pinning, get_row_id)

    page_count = pg.get_page_count(len(partition.center), state.pagination.page_size)
    page_index = pg.clamp_page_index(state.pagination.page_index, page_count)
    page = pg.paginate(partition.center, replace(state.pagination, page_index=page_index))

    return DerivedRowModel(
        core_rows=core_rows,
        filtered_rows=filtered_rows,
        sorted_rows=sorted_rows,
        top_rows=partition.top,
        center_rows=partition.center,
        bottom_rows=partition.bottom,
        center_page_rows=page.rows,
        page_count=page.page_count,
        page_index=page_index,
    )


class RowModel:
    """Stateful owner of the table state slices and their derived row model.

    Args:
        data: Initial raw records.
        columns: A :class:`ColumnRegistry` or a sequence of :class:`ColumnDef`.
        get_row_id: Returns a record's stable identity.  Defaults to the
            record's ``"id"`` key (or attribute).
        page_size: Initial page size; non-positive values become 1.
        page_size_options: Page sizes offered by the page-size selector.
        can_select: Optional predicate excluding rows from selection.
        can_pin_row: Optional predicate excluding rows from pinning.
        auto_reset_page_index: Return to the first page whenever the data,
            filters or sorting change.  The page index is clamped after
            every change regardless.
        debug_log: Print one line per recomputation and per ignored request.
        state: Start from this state snapshot instead of the defaults
            (*page_size* is then ignored).  The page index is clamped.
    """

    def __init__(
        self,
        data: Iterable[Record],
        columns: ColumnRegistry | Sequence[ColumnDef],
        *,
        get_row_id: Callable[[Record], RowId] | None = None,
        page_size: int = _DEFAULT_PAGE_SIZE,
        page_size_options: Sequence[int] = _DEFAULT_PAGE_SIZE_OPTIONS,
        can_select: Callable[[Record], bool] | None = None,
        can_pin_row: Callable[[Record], bool] | None = None,
        auto_reset_page_index: bool = True,
        debug_log: bool = False,
        state: TableState | None = None,
    ) -> None:
        self.registry: ColumnRegistry = as_registry(columns)
        self.page_size_options: tuple[int, ...] = tuple(page_size_options)
        self.auto_reset_page_index = auto_reset_page_index
        self.debug_log = debug_log
        self._get_row_id = get_row_id or key_accessor("id")
        self._can_select = can_select
        self._can_pin_row = can_pin_row

        self._data: list[Record] = list(data)
        self._rows_by_id: dict[RowId, Record] = {}
        if state is None:
            state = TableState(pagination=pg.set_page_size(PaginationState(), page_size))
        self._state = state
        self._recompute()

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _log(self, message: str) -> None:
        if self.debug_log:
            print(f"[RowModel] {message}")

    def _update(self, *, reset_page: bool = False, **changes: Any) -> None:
        state = replace(self._state, **changes)
        if reset_page and self.auto_reset_page_index:
            state = replace(state, pagination=replace(state.pagination, page_index=0))
        self._state = state
        self._recompute()

    def _recompute(self) -> None:
        t0 = time.perf_counter()
        self._rows_by_id = {self._get_row_id(row): row for row in self._data}
        model = recompute(self._data, self._state, self.registry, self._get_row_id)
        if model.page_index != self._state.pagination.page_index:
            self._state = replace(
                self._state,
                pagination=replace(self._state.pagination, page_index=model.page_index),
            )
        self._model = model
        elapsed_ms = (time.perf_counter() - t0) * 1000
        self._log(
            f"recompute: core={len(model.core_rows)}, "
            f"filtered={len(model.filtered_rows)}, "
            f"top={len(model.top_rows)}, bottom={len(model.bottom_rows)}, "
            f"page={model.page_index + 1}/{model.page_count}, "
            f"elapsed={elapsed_ms:.1f}ms"
        )

    def _ignore(self, action: str, target: Any) -> None:
        self._log(f"ignored {action}: {target!r}")

    # ------------------------------------------------------------------
    # Data
    # ------------------------------------------------------------------

    def set_data(self, data: Iterable[Record]) -> None:
        """Replace the raw records.  Stale pin/selection ids stay inert."""
        self._data = list(data)
        self._update(reset_page=True)

    def delete_selected_rows(self) -> list[Record]:
        """Remove every selected record (across all pages) and clear the selection.

        Returns the removed records.
        """
        selected = self._state.row_selection
        removed = [row for row in self._data if self._get_row_id(row) in selected]
        if not removed:
            return []
        self._data = [row for row in self._data if self._get_row_id(row) not in selected]
        self._update(reset_page=True, row_selection=frozenset())
        return removed

    # ------------------------------------------------------------------
    # Filtering
    # ------------------------------------------------------------------

    def set_column_filter(self, column_id: str, value: Any) -> None:
        """Set (or clear, with ``None``/``""``) the filter value of one column."""
        if not self.registry.can_filter(column_id):
            self._ignore("filter", column_id)
            return
        resolved = resolve_filter_value(self.registry.filter_variant(column_id), value)
        filters = dict(self._state.column_filters)
        if resolved is None:
            filters.pop(column_id, None)
        else:
            filters[column_id] = resolved
        self._update(reset_page=True, column_filters=filters)

    def set_range_filter_bound(
        self,
        column_id: str,
        bound: Literal["min", "max"],
        value: Any,
    ) -> None:
        """Update the min or max half of a range filter, keeping the other half."""
        if (
            not self.registry.can_filter(column_id)
            or self.registry.filter_variant(column_id) != "range"
        ):
            self._ignore("range filter", column_id)
            return
        current = self._state.column_filters.get(column_id)
        self.set_column_filter(column_id, set_range_bound(current, bound, value))

    def reset_column_filters(self) -> None:
        self._update(reset_page=True, column_filters={})

    def get_column_filter_value(self, column_id: str) -> Any:
        return self._state.column_filters.get(column_id)

    # ------------------------------------------------------------------
    # Sorting
    # ------------------------------------------------------------------

    def set_sorting(self, entries: Iterable[SortEntry | tuple[str, SortDirection]]) -> None:
        """Replace the sort state.  Entries for non-sortable columns are dropped."""
        normalized: list[SortEntry] = []
        for entry in entries:
            if not isinstance(entry, SortEntry):
                column_id, direction = entry
                if direction not in ("asc", "desc"):
                    self._ignore("sort direction", direction)
                    continue
                entry = SortEntry(column_id, direction)
            if not self.registry.can_sort(entry.column_id):
                self._ignore("sort", entry.column_id)
                continue
            normalized.append(entry)
        self._update(
            reset_page=True,
            sorting=tuple(valid_sort_entries(normalized, self.registry)),
        )

    def toggle_sorting(self, column_id: str, *, multi: bool = False) -> None:
        """Advance one column through ``none → asc → desc → none``."""
        if not self.registry.can_sort(column_id):
            self._ignore("sort", column_id)
            return
        self._update(
            reset_page=True,
            sorting=toggle_sorting(self._state.sorting, column_id, self.registry, multi=multi),
        )

    def reset_sorting(self) -> None:
        self._update(reset_page=True, sorting=())

    def get_sort_direction(self, column_id: str) -> SortDirection | None:
        return get_sort_direction(self._state.sorting, column_id)

    def get_next_sorting_order(self, column_id: str) -> SortDirection | None:
        return get_next_sorting_order(self._state.sorting, column_id)

    # ------------------------------------------------------------------
    # Pagination
    # ------------------------------------------------------------------

    def set_pagination(self, pagination: PaginationState) -> None:
        size = pg.set_page_size(PaginationState(), pagination.page_size).page_size
        self._update(pagination=PaginationState(pagination.page_index, size))

    def set_page_index(self, page_index: int) -> None:
        self._update(
            pagination=pg.go_to_page(self._state.pagination, page_index, self.get_page_count()),
        )

    def set_page_size(self, page_size: int) -> None:
        self._update(pagination=pg.set_page_size(self._state.pagination, page_size))

    def first_page(self) -> None:
        self._update(pagination=pg.first_page(self._state.pagination, self.get_page_count()))

    def previous_page(self) -> None:
        self._update(pagination=pg.previous_page(self._state.pagination, self.get_page_count()))

    def next_page(self) -> None:
        self._update(pagination=pg.next_page(self._state.pagination, self.get_page_count()))

    def last_page(self) -> None:
        self._update(pagination=pg.last_page(self._state.pagination, self.get_page_count()))

    def get_can_previous_page(self) -> bool:
        return pg.can_previous_page(self._state.pagination)

    def get_can_next_page(self) -> bool:
        return pg.can_next_page(self._state.pagination, self.get_page_count())

    # ------------------------------------------------------------------
    # Row pinning
    # ------------------------------------------------------------------

    def pin_row(
        self,
        row_id: RowId,
        position: RowPinPosition | Literal[False] | None,
    ) -> None:
        """Pin a row to ``"top"``/``"bottom"``, or unpin it with ``False``."""
        if position:
            row = self._rows_by_id.get(row_id)
            if row is None or not self.get_row_can_pin(row):
                self._ignore("row pin", row_id)
                return
        self._update(row_pinning=pin_row(self._state.row_pinning, row_id, position))

    def get_row_pinned_position(self, row_id: RowId) -> RowPinPosition | None:
        return get_row_pinned_position(self._state.row_pinning, row_id)

    def get_row_can_pin(self, row: Record) -> bool:
        return self._can_pin_row is None or bool(self._can_pin_row(row))

    # ------------------------------------------------------------------
    # Row selection
    # ------------------------------------------------------------------

    def toggle_row_selected(self, row_id: RowId) -> None:
        row = self._rows_by_id.get(row_id)
        if row is None or not self.get_row_can_select(row):
            self._ignore("row selection", row_id)
            return
        self._update(row_selection=sel.toggle_row(self._state.row_selection, row_id))

    def toggle_all_page_rows_selected(self) -> None:
        """Select every selectable rendered row, or clear them if all are selected."""
        self._update(
            row_selection=sel.toggle_all(self._state.row_selection, self.get_page_row_ids()),
        )

    def reset_row_selection(self) -> None:
        self._update(row_selection=frozenset())

    def get_row_can_select(self, row: Record) -> bool:
        return self._can_select is None or bool(self._can_select(row))

    def get_row_is_selected(self, row_id: RowId) -> bool:
        return row_id in self._state.row_selection

    def get_page_row_ids(self) -> list[RowId]:
        """Selection scope: rendered pinned rows plus the current page's center rows."""
        rendered = self._model.top_rows + self._model.center_page_rows + self._model.bottom_rows
        return [self._get_row_id(row) for row in rendered if self.get_row_can_select(row)]

    def get_is_all_page_rows_selected(self) -> bool:
        return sel.is_all_selected(self._state.row_selection, self.get_page_row_ids())

    def get_is_some_page_rows_selected(self) -> bool:
        return sel.is_some_selected(self._state.row_selection, self.get_page_row_ids())

    def get_selected_rows(self) -> list[Record]:
        """Selected records across the whole data set, in data order."""
        selected = self._state.row_selection
        return [row for row in self._data if self._get_row_id(row) in selected]

    # ------------------------------------------------------------------
    # Column visibility and pinning
    # ------------------------------------------------------------------

    def toggle_column_visibility(self, column_id: str) -> None:
        if not self.registry.can_hide(column_id):
            self._ignore("column visibility", column_id)
            return
        self._update(
            column_visibility=vis.toggle_column(
                self._state.column_visibility, column_id, self.registry
            ),
        )

    def toggle_all_columns_visible(self) -> None:
        self._update(
            column_visibility=vis.toggle_all(self._state.column_visibility, self.registry),
        )

    def get_is_column_visible(self, column_id: str) -> bool:
        return vis.is_visible(self._state.column_visibility, column_id)

    def get_is_all_columns_visible(self) -> bool:
        return vis.is_all_visible(self._state.column_visibility, self.registry)

    def get_is_some_columns_visible(self) -> bool:
        return vis.is_some_visible(self._state.column_visibility, self.registry)

    def pin_column(
        self,
        column_id: str,
        position: ColumnPinPosition | Literal[False] | None,
    ) -> None:
        if not self.registry.can_pin(column_id):
            self._ignore("column pin", column_id)
            return
        self._update(column_pinning=pin_column(self._state.column_pinning, column_id, position))

    def get_column_pinned_position(self, column_id: str) -> ColumnPinPosition | None:
        return get_column_pinned_position(self._state.column_pinning, column_id)

    def get_visible_columns(self) -> list[ColumnDef]:
        """Visible columns in display order (left-pinned, unpinned, right-pinned)."""
        return order_columns(
            vis.visible_columns(self._state.column_visibility, self.registry),
            self._state.column_pinning,
        )

    # ------------------------------------------------------------------
    # Derived views
    # ------------------------------------------------------------------

    def get_row_id(self, row: Record) -> RowId:
        return self._get_row_id(row)

    def get_row_model(self) -> DerivedRowModel:
        return self._model

    def get_core_rows(self) -> list[Record]:
        return self._model.core_rows

    def get_filtered_rows(self) -> list[Record]:
        return self._model.filtered_rows

    def get_sorted_rows(self) -> list[Record]:
        return self._model.sorted_rows

    def get_filtered_sorted_size(self) -> int:
        return len(self._model.sorted_rows)

    def get_top_rows(self) -> list[Record]:
        return self._model.top_rows

    def get_center_rows(self) -> list[Record]:
        return self._model.center_rows

    def get_center_page_rows(self) -> list[Record]:
        return self._model.center_page_rows

    def get_bottom_rows(self) -> list[Record]:
        return self._model.bottom_rows

    def get_page_count(self) -> int:
        return self._model.page_count

    # ------------------------------------------------------------------
    # State slices
    # ------------------------------------------------------------------

    def get_state(self) -> TableState:
        return self._state

    @property
    def column_filters(self) -> dict[str, Any]:
        return dict(self._state.column_filters)

    @property
    def sorting(self) -> tuple[SortEntry, ...]:
        return self._state.sorting

    @property
    def pagination(self) -> PaginationState:
        return self._state.pagination

    @property
    def row_pinning(self) -> RowPinningState:
        return self._state.row_pinning

    @property
    def row_selection(self) -> frozenset:
        return self._state.row_selection

    @property
    def column_visibility(self) -> dict[str, bool]:
        return dict(self._state.column_visibility)

    @property
    def column_pinning(self) -> ColumnPinningState:
        return self._state.column_pinning
