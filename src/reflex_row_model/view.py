"""Rendering contract: plain view objects built from a :class:`RowModel`.

The rendering layer depends on nothing but these dataclasses.  They hold
only strings, numbers, booleans and lists, so they can be sent to a
frontend as-is (the Reflex mixin in :mod:`reflex_row_model.table_grid`
stores them directly in state vars).
"""

from dataclasses import dataclass, field
from typing import Any

from reflex_row_model.models import ColumnDef, Record, RowId
from reflex_row_model.row_model import RowModel
from reflex_row_model.sorting import next_sort_label


@dataclass
class CellView:
    column_id: str = ""
    value: str = ""


@dataclass
class RowView:
    """One rendered row: visible cells in display order plus affordance state."""

    key: str = ""
    cells: list[CellView] = field(default_factory=list)
    pinned: str = ""
    pinned_index: int = -1
    selected: bool = False
    can_select: bool = True
    can_pin: bool = True


@dataclass
class HeaderView:
    """Header affordances of one column."""

    column_id: str = ""
    header: str = ""
    can_sort: bool = False
    sorted: str = ""
    next_sort_label: str = ""
    can_filter: bool = False
    filter_variant: str = "text"
    filter_text: str = ""
    filter_min: str = ""
    filter_max: str = ""
    can_pin: bool = False
    pinned: str = ""
    can_hide: bool = False
    visible: bool = True


@dataclass
class PageView:
    page_index: int = 0
    page_number: int = 1
    page_count: int = 1
    page_size: int = 8
    page_size_options: list[int] = field(default_factory=list)
    can_previous: bool = False
    can_next: bool = False
    row_count: int = 0


@dataclass
class TableView:
    top_rows: list[RowView] = field(default_factory=list)
    center_rows: list[RowView] = field(default_factory=list)
    bottom_rows: list[RowView] = field(default_factory=list)
    headers: list[HeaderView] = field(default_factory=list)
    column_toggles: list[HeaderView] = field(default_factory=list)
    page: PageView = field(default_factory=PageView)
    all_page_rows_selected: bool = False
    some_page_rows_selected: bool = False
    all_columns_visible: bool = True
    some_columns_visible: bool = False
    selected_count: int = 0
    can_reset_sorting: bool = False


def row_key(row_id: RowId) -> str:
    return str(row_id)


def row_key_map(model: RowModel) -> dict[str, RowId]:
    """Map every row key of the current data back to its row identity."""
    return {row_key(model.get_row_id(row)): model.get_row_id(row) for row in model.get_core_rows()}


def _format_value(value: Any) -> str:
    return "" if value is None else str(value)


def _build_row(
    model: RowModel,
    row: Record,
    columns: list[ColumnDef],
    pinned_index: int = -1,
) -> RowView:
    row_id = model.get_row_id(row)
    return RowView(
        key=row_key(row_id),
        cells=[
            CellView(column_id=col.id, value=_format_value(model.registry.value(row, col.id)))
            for col in columns
        ],
        pinned=model.get_row_pinned_position(row_id) or "",
        pinned_index=pinned_index,
        selected=model.get_row_is_selected(row_id),
        can_select=model.get_row_can_select(row),
        can_pin=model.get_row_can_pin(row),
    )


def build_header(model: RowModel, col: ColumnDef) -> HeaderView:
    registry = model.registry
    filter_value = model.get_column_filter_value(col.id)
    filter_text = filter_min = filter_max = ""
    if col.variant == "range":
        if filter_value is not None:
            filter_min, filter_max = (_format_value(v) for v in filter_value)
    elif filter_value is not None:
        filter_text = str(filter_value)

    return HeaderView(
        column_id=col.id,
        header=col.header_text,
        can_sort=registry.can_sort(col.id),
        sorted=model.get_sort_direction(col.id) or "",
        next_sort_label=next_sort_label(model.sorting, col.id) if registry.can_sort(col.id) else "",
        can_filter=registry.can_filter(col.id),
        filter_variant=col.variant,
        filter_text=filter_text,
        filter_min=filter_min,
        filter_max=filter_max,
        can_pin=registry.can_pin(col.id),
        pinned=model.get_column_pinned_position(col.id) or "",
        can_hide=registry.can_hide(col.id),
        visible=model.get_is_column_visible(col.id),
    )


def build_table_view(model: RowModel) -> TableView:
    """Materialise everything the rendering layer needs from *model*.

    Rows are grouped top / center-page / bottom; each row carries only
    the visible columns, in display order.  Headers cover the visible
    columns; ``column_toggles`` covers every column for the visibility
    menu.
    """
    columns = model.get_visible_columns()
    pagination = model.pagination

    return TableView(
        top_rows=[_build_row(model, row, columns, i) for i, row in enumerate(model.get_top_rows())],
        center_rows=[_build_row(model, row, columns) for row in model.get_center_page_rows()],
        bottom_rows=[
            _build_row(model, row, columns, i) for i, row in enumerate(model.get_bottom_rows())
        ],
        headers=[build_header(model, col) for col in columns],
        column_toggles=[build_header(model, col) for col in model.registry.columns()],
        page=PageView(
            page_index=pagination.page_index,
            page_number=pagination.page_index + 1,
            page_count=model.get_page_count(),
            page_size=pagination.page_size,
            page_size_options=list(model.page_size_options),
            can_previous=model.get_can_previous_page(),
            can_next=model.get_can_next_page(),
            row_count=model.get_filtered_sorted_size(),
        ),
        all_page_rows_selected=model.get_is_all_page_rows_selected(),
        some_page_rows_selected=model.get_is_some_page_rows_selected(),
        all_columns_visible=model.get_is_all_columns_visible(),
        some_columns_visible=model.get_is_some_columns_visible(),
        selected_count=len(model.get_selected_rows()),
        can_reset_sorting=bool(model.sorting),
    )
