"""Reusable Reflex table backed by a :class:`RowModel`: mixin and UI helper.

Users inherit from :class:`RowModelGridMixin` **and** ``rx.State``, call
:meth:`~RowModelGridMixin.set_row_model` with the raw records and column
definitions, and render with :func:`row_model_table`.

``RowModelGridMixin`` is a Reflex **state mixin** (``mixin=True``).  Each
subclass gets its own independent set of ``rm_grid_*`` reactive
variables, so multiple tables on the same page do not interfere with
each other.

The records, column registry and row-model options are not
JSON-serialisable, so they live in a module-level cache keyed by the
state class name and are never mutated after loading.  Everything a
user changes (filters, sorting, page, pins, selection, visibility and
deleted rows) is kept per client session in backend vars.  Each event
rebuilds a :class:`RowModel` from the cache plus the session's state,
applies one setter, stores the new state and copies the resulting
:class:`~reflex_row_model.view.TableView` into state vars; the frontend
never sees anything but those view objects.

Typical usage::

    from reflex_row_model import RowModelGridMixin, load_fixture, row_model_table

    class MyState(RowModelGridMixin, rx.State):
        def load_data(self):
            records, columns, _ = load_fixture(Path("people.json"))
            self.set_row_model(records, columns, page_size=8)

    def index():
        return rx.cond(MyState.rm_grid_loaded, row_model_table(MyState))
"""

import time
from collections.abc import Callable, Iterable, Mapping, Sequence
from typing import Any

import reflex as rx

from reflex_row_model.columns import ColumnRegistry, as_registry, key_accessor
from reflex_row_model.models import ColumnDef, Record, RowId, TableState
from reflex_row_model.polars_utils import _coerce_numeric
from reflex_row_model.row_model import RowModel
from reflex_row_model.view import HeaderView, PageView, RowView, build_table_view, row_key_map

_DEBOUNCE_TIMEOUT_MS: int = 500


# ---------------------------------------------------------------------------
# Module-level cache of read-only table data
# ---------------------------------------------------------------------------

class _RowModelCache:
    """Records, registry and row-model options shared by every session."""

    def __init__(self) -> None:
        self.data: list[Record] = []
        self.registry: ColumnRegistry | None = None
        self.get_row_id: Callable[[Record], RowId] = key_accessor("id")
        self.options: dict[str, Any] = {}


_cache_registry: dict[str, _RowModelCache] = {}


def _get_cache(cache_id: str) -> _RowModelCache:
    """Return (or create) the cache entry for *cache_id*."""
    if cache_id not in _cache_registry:
        _cache_registry[cache_id] = _RowModelCache()
    return _cache_registry[cache_id]


def _session_model(
    cache: _RowModelCache,
    snapshot: Mapping[str, Any],
    deleted: Iterable[RowId],
) -> RowModel:
    """Build the row model one session sees.

    The cached records minus the session's *deleted* row ids, under the
    session's state *snapshot* (see :meth:`TableState.to_snapshot`).  An
    empty snapshot starts from the cached options' defaults.
    """
    data = cache.data
    gone = set(deleted)
    if gone:
        data = [row for row in data if cache.get_row_id(row) not in gone]
    state = TableState.from_snapshot(snapshot) if snapshot else None
    return RowModel(
        data,
        cache.registry,
        get_row_id=cache.get_row_id,
        state=state,
        **cache.options,
    )


def _row_id_for_key(model: RowModel, key: str) -> RowId:
    """Map a rendered row key back to its row identity."""
    return row_key_map(model).get(key, key)


# ---------------------------------------------------------------------------
# RowModelGridMixin
# ---------------------------------------------------------------------------

class RowModelGridMixin(rx.State, mixin=True):
    """Reflex State mixin exposing a :class:`RowModel` to the frontend.

    Subclasses **must** also inherit from ``rx.State`` so that Reflex's
    metaclass registers the vars on the child::

        class MyTable(RowModelGridMixin, rx.State):
            ...

    Every ``handle_rm_grid_*`` event handler forwards to one row-model
    setter and then refreshes the view vars.  Requests the row model
    ignores (unknown rows, non-sortable columns, ...) still refresh, so
    the frontend always mirrors the engine state.
    """

    # -- Frontend state vars --
    rm_grid_top_rows: list[RowView] = []
    rm_grid_center_rows: list[RowView] = []
    rm_grid_bottom_rows: list[RowView] = []
    rm_grid_headers: list[HeaderView] = []
    rm_grid_column_toggles: list[HeaderView] = []
    rm_grid_page: PageView = PageView()
    rm_grid_page_size_options: list[str] = []
    rm_grid_all_page_rows_selected: bool = False
    rm_grid_all_columns_visible: bool = True
    rm_grid_selected_count: int = 0
    rm_grid_can_reset_sorting: bool = False
    rm_grid_loaded: bool = False
    rm_grid_stats: str = ""

    # -- Backend-only vars (not sent to frontend) --
    _rm_grid_cache_id: str = ""
    _rm_grid_snapshot: dict[str, Any] = {}
    _rm_grid_deleted: list[Any] = []

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def set_row_model(
        self,
        data: Iterable[Record],
        columns: ColumnRegistry | Sequence[ColumnDef],
        **options: Any,
    ) -> None:
        """Load the records for this state class and reset this session's table.

        The records are shared by every session of the state class; each
        session keeps its own filters, sorting, page, pins, selection and
        deletions.

        Args:
            data: The raw records.
            columns: A column registry or a sequence of column definitions.
            **options: Keyword arguments forwarded to :class:`RowModel`
                (``get_row_id``, ``page_size``, ``page_size_options``, ...).
        """
        cache_id = type(self).__name__
        self._rm_grid_cache_id = cache_id  # type: ignore[assignment]
        cache = _get_cache(cache_id)

        t0 = time.perf_counter()
        options = dict(options)
        cache.get_row_id = options.pop("get_row_id", None) or key_accessor("id")
        cache.data = list(data)
        cache.registry = as_registry(columns)
        cache.options = options

        self._rm_grid_snapshot = {}  # type: ignore[assignment]
        self._rm_grid_deleted = []  # type: ignore[assignment]
        model = _session_model(cache, {}, ())
        self.rm_grid_loaded = True  # type: ignore[assignment]
        self._refresh_rm_grid(model)
        print(
            f"[RowModelGrid] loaded {len(cache.data):,} rows, "
            f"{len(cache.registry)} columns "
            f"({(time.perf_counter() - t0) * 1000:.1f}ms)"
        )

    # ------------------------------------------------------------------
    # Event handlers -- sorting and filtering
    # ------------------------------------------------------------------

    def handle_rm_grid_sort(self, column_id: str) -> None:
        """Advance a column through ``none -> asc -> desc -> none``."""
        model = self._rm_grid_model()
        if model is None:
            return
        model.toggle_sorting(column_id)
        self._refresh_rm_grid(model)

    def handle_rm_grid_reset_sorting(self) -> None:
        model = self._rm_grid_model()
        if model is None:
            return
        model.reset_sorting()
        self._refresh_rm_grid(model)

    def handle_rm_grid_text_filter(self, column_id: str, value: str) -> None:
        """Commit a debounced text filter value."""
        model = self._rm_grid_model()
        if model is None:
            return
        model.set_column_filter(column_id, value)
        self._refresh_rm_grid(model)

    def handle_rm_grid_range_min(self, column_id: str, value: str) -> None:
        """Commit the lower bound of a range filter, keeping the upper bound."""
        model = self._rm_grid_model()
        if model is None:
            return
        model.set_range_filter_bound(column_id, "min", value)
        self._refresh_rm_grid(model)

    def handle_rm_grid_range_max(self, column_id: str, value: str) -> None:
        """Commit the upper bound of a range filter, keeping the lower bound."""
        model = self._rm_grid_model()
        if model is None:
            return
        model.set_range_filter_bound(column_id, "max", value)
        self._refresh_rm_grid(model)

    def clear_rm_grid_filters(self) -> None:
        model = self._rm_grid_model()
        if model is None:
            return
        model.reset_column_filters()
        self._refresh_rm_grid(model)

    # ------------------------------------------------------------------
    # Event handlers -- pagination
    # ------------------------------------------------------------------

    def handle_rm_grid_first_page(self) -> None:
        model = self._rm_grid_model()
        if model is None:
            return
        model.first_page()
        self._refresh_rm_grid(model)

    def handle_rm_grid_previous_page(self) -> None:
        model = self._rm_grid_model()
        if model is None:
            return
        model.previous_page()
        self._refresh_rm_grid(model)

    def handle_rm_grid_next_page(self) -> None:
        model = self._rm_grid_model()
        if model is None:
            return
        model.next_page()
        self._refresh_rm_grid(model)

    def handle_rm_grid_last_page(self) -> None:
        model = self._rm_grid_model()
        if model is None:
            return
        model.last_page()
        self._refresh_rm_grid(model)

    def handle_rm_grid_go_to_page(self, value: str) -> None:
        """Jump to a 1-based page number typed by the user (clamped)."""
        model = self._rm_grid_model()
        page_number = _coerce_numeric(value)
        if model is None or page_number is None:
            return
        model.set_page_index(int(page_number) - 1)
        self._refresh_rm_grid(model)

    def handle_rm_grid_page_size(self, value: str) -> None:
        model = self._rm_grid_model()
        page_size = _coerce_numeric(value)
        if model is None or page_size is None:
            return
        model.set_page_size(int(page_size))
        self._refresh_rm_grid(model)

    # ------------------------------------------------------------------
    # Event handlers -- rows
    # ------------------------------------------------------------------

    def handle_rm_grid_pin_row(self, key: str, position: str) -> None:
        """Pin a row ``"top"``/``"bottom"``; an empty position unpins it."""
        model = self._rm_grid_model()
        if model is None:
            return
        model.pin_row(
            _row_id_for_key(model, key),
            position if position in ("top", "bottom") else False,
        )
        self._refresh_rm_grid(model)

    def handle_rm_grid_toggle_row(self, key: str) -> None:
        model = self._rm_grid_model()
        if model is None:
            return
        model.toggle_row_selected(_row_id_for_key(model, key))
        self._refresh_rm_grid(model)

    def handle_rm_grid_toggle_page_rows(self) -> None:
        """Select-all checkbox: scoped to the rows rendered on this page."""
        model = self._rm_grid_model()
        if model is None:
            return
        model.toggle_all_page_rows_selected()
        self._refresh_rm_grid(model)

    def handle_rm_grid_delete_selected(self) -> None:
        """Delete every selected row, on this page or any other, for this session."""
        model = self._rm_grid_model()
        if model is None:
            return
        removed = model.delete_selected_rows()
        self._rm_grid_deleted = [  # type: ignore[assignment]
            *self._rm_grid_deleted,
            *(model.get_row_id(row) for row in removed),
        ]
        self._refresh_rm_grid(model)
        print(f"[RowModelGrid] deleted {len(removed)} selected rows")

    # ------------------------------------------------------------------
    # Event handlers -- columns
    # ------------------------------------------------------------------

    def handle_rm_grid_toggle_column(self, column_id: str) -> None:
        model = self._rm_grid_model()
        if model is None:
            return
        model.toggle_column_visibility(column_id)
        self._refresh_rm_grid(model)

    def handle_rm_grid_toggle_all_columns(self) -> None:
        model = self._rm_grid_model()
        if model is None:
            return
        model.toggle_all_columns_visible()
        self._refresh_rm_grid(model)

    def handle_rm_grid_pin_column(self, column_id: str, position: str) -> None:
        """Pin a column ``"left"``/``"right"``; an empty position unpins it."""
        model = self._rm_grid_model()
        if model is None:
            return
        model.pin_column(column_id, position if position in ("left", "right") else False)
        self._refresh_rm_grid(model)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _rm_grid_model(self) -> RowModel | None:
        cache_id = self._rm_grid_cache_id
        if not cache_id:
            return None
        cache = _get_cache(cache_id)
        if cache.registry is None:
            return None
        return _session_model(cache, self._rm_grid_snapshot, self._rm_grid_deleted)

    def _refresh_rm_grid(self, model: RowModel) -> None:
        """Store the session's table state and publish the view of *model*."""
        t0 = time.perf_counter()
        self._rm_grid_snapshot = model.get_state().to_snapshot()  # type: ignore[assignment]
        view = build_table_view(model)

        self.rm_grid_top_rows = view.top_rows  # type: ignore[assignment]
        self.rm_grid_center_rows = view.center_rows  # type: ignore[assignment]
        self.rm_grid_bottom_rows = view.bottom_rows  # type: ignore[assignment]
        self.rm_grid_headers = view.headers  # type: ignore[assignment]
        self.rm_grid_column_toggles = view.column_toggles  # type: ignore[assignment]
        self.rm_grid_page = view.page  # type: ignore[assignment]
        self.rm_grid_page_size_options = [  # type: ignore[assignment]
            str(n) for n in view.page.page_size_options
        ]
        self.rm_grid_all_page_rows_selected = view.all_page_rows_selected  # type: ignore[assignment]
        self.rm_grid_all_columns_visible = view.all_columns_visible  # type: ignore[assignment]
        self.rm_grid_selected_count = view.selected_count  # type: ignore[assignment]
        self.rm_grid_can_reset_sorting = view.can_reset_sorting  # type: ignore[assignment]

        elapsed_ms = (time.perf_counter() - t0) * 1000
        self.rm_grid_stats = (  # type: ignore[assignment]
            f"{view.page.row_count:,} rows  "
            f"pinned={len(view.top_rows)}+{len(view.bottom_rows)}  "
            f"selected={view.selected_count:,}  "
            f"{elapsed_ms:.0f}ms"
        )


# ---------------------------------------------------------------------------
# UI helper
# ---------------------------------------------------------------------------

def _filter_input(value: rx.Var, on_change: Any, placeholder: str, **props: Any) -> rx.Component:
    """A filter field committing its value after a quiet period.

    ``rx.debounce_input`` echoes keystrokes locally, commits once typing
    stops for ``_DEBOUNCE_TIMEOUT_MS`` and resyncs when *value* changes
    from the server (e.g. after "Clear filters").
    """
    return rx.debounce_input(
        rx.input(
            value=value,
            on_change=on_change,
            placeholder=placeholder,
            size="1",
            **props,
        ),
        debounce_timeout=_DEBOUNCE_TIMEOUT_MS,
    )


def _header_cell(state_cls: type, header: rx.Var) -> rx.Component:
    sort_label = rx.box(
        rx.text(
            header.header,
            rx.cond(header.sorted == "asc", " 🔼", rx.cond(header.sorted == "desc", " 🔽", "")),
            weight="medium",
        ),
        title=header.next_sort_label,
        cursor=rx.cond(header.can_sort, "pointer", "default"),
        user_select="none",
        on_click=state_cls.handle_rm_grid_sort(header.column_id),
    )

    filter_control = rx.cond(
        header.can_filter,
        rx.cond(
            header.filter_variant == "range",
            rx.hstack(
                _filter_input(
                    header.filter_min,
                    lambda value: state_cls.handle_rm_grid_range_min(header.column_id, value),
                    "min",
                    type="number",
                    width="5em",
                ),
                _filter_input(
                    header.filter_max,
                    lambda value: state_cls.handle_rm_grid_range_max(header.column_id, value),
                    "max",
                    type="number",
                    width="5em",
                ),
                spacing="1",
            ),
            _filter_input(
                header.filter_text,
                lambda value: state_cls.handle_rm_grid_text_filter(header.column_id, value),
                "Search...",
                width="100%",
            ),
        ),
    )

    pin_controls = rx.cond(
        header.can_pin,
        rx.hstack(
            rx.cond(
                header.pinned != "left",
                rx.button(
                    "<",
                    size="1",
                    variant="ghost",
                    on_click=state_cls.handle_rm_grid_pin_column(header.column_id, "left"),
                ),
            ),
            rx.cond(
                header.pinned != "right",
                rx.button(
                    ">",
                    size="1",
                    variant="ghost",
                    on_click=state_cls.handle_rm_grid_pin_column(header.column_id, "right"),
                ),
            ),
            rx.cond(
                header.pinned != "",
                rx.button(
                    "X",
                    size="1",
                    variant="ghost",
                    on_click=state_cls.handle_rm_grid_pin_column(header.column_id, ""),
                ),
            ),
            justify="between",
            width="100%",
        ),
    )

    return rx.table.column_header_cell(
        rx.vstack(sort_label, filter_control, pin_controls, spacing="2"),
    )


def _row(state_cls: type, row: rx.Var, pinned: bool) -> rx.Component:
    pin_cell = rx.table.cell(
        rx.cond(
            row.pinned != "",
            rx.button(
                "❌",
                size="1",
                variant="ghost",
                on_click=state_cls.handle_rm_grid_pin_row(row.key, ""),
            ),
            rx.cond(
                row.can_pin,
                rx.hstack(
                    rx.button(
                        "⬆️",
                        size="1",
                        variant="ghost",
                        on_click=state_cls.handle_rm_grid_pin_row(row.key, "top"),
                    ),
                    rx.button(
                        "⬇️",
                        size="1",
                        variant="ghost",
                        on_click=state_cls.handle_rm_grid_pin_row(row.key, "bottom"),
                    ),
                    spacing="1",
                ),
            ),
        ),
    )
    select_cell = rx.table.cell(
        rx.checkbox(
            checked=row.selected,
            disabled=~row.can_select,
            on_change=lambda _checked: state_cls.handle_rm_grid_toggle_row(row.key),
        ),
    )
    style: dict[str, Any] = {"background": "var(--blue-a3)"} if pinned else {}
    return rx.table.row(
        pin_cell,
        select_cell,
        rx.foreach(row.cells, lambda cell: rx.table.cell(cell.value)),
        **style,
    )


def row_model_table_toolbar(state_cls: type) -> rx.Component:
    """Column visibility checkboxes plus Reset Sorting / Delete Selected buttons."""
    visibility = rx.hstack(
        rx.text("Table Visibility:", weight="medium"),
        rx.checkbox(
            "Toggle All",
            checked=state_cls.rm_grid_all_columns_visible,
            on_change=lambda _checked: state_cls.handle_rm_grid_toggle_all_columns(),
        ),
        rx.foreach(
            state_cls.rm_grid_column_toggles,
            lambda col: rx.checkbox(
                col.column_id,
                checked=col.visible,
                disabled=~col.can_hide,
                on_change=lambda _checked: state_cls.handle_rm_grid_toggle_column(col.column_id),
            ),
        ),
        spacing="3",
        align="center",
        wrap="wrap",
        padding="0.5em 0.8em",
        border_radius="6px",
        background="var(--green-a3)",
        border="1px solid var(--green-a6)",
        width="100%",
    )
    actions = rx.hstack(
        rx.button(
            "Reset Sorting",
            size="2",
            disabled=~state_cls.rm_grid_can_reset_sorting,
            on_click=state_cls.handle_rm_grid_reset_sorting,
        ),
        rx.button(
            "Clear Filters",
            size="2",
            variant="outline",
            on_click=state_cls.clear_rm_grid_filters,
        ),
        rx.cond(
            state_cls.rm_grid_selected_count > 0,
            rx.button(
                "Delete Selected Rows",
                size="2",
                color_scheme="red",
                on_click=state_cls.handle_rm_grid_delete_selected,
            ),
        ),
        spacing="2",
    )
    return rx.vstack(visibility, actions, spacing="2", width="100%")


def row_model_table_pagination(state_cls: type) -> rx.Component:
    """Page navigation, "go to page" input and page-size selector."""
    page = state_cls.rm_grid_page
    return rx.hstack(
        rx.hstack(
            rx.button("<<", size="1", disabled=~page.can_previous, on_click=state_cls.handle_rm_grid_first_page),
            rx.button("Prev", size="1", disabled=~page.can_previous, on_click=state_cls.handle_rm_grid_previous_page),
            rx.text(
                page.page_number.to(str),  # type: ignore[union-attr]
                " of ",
                page.page_count.to(str),  # type: ignore[union-attr]
                weight="bold",
            ),
            rx.button("Next", size="1", disabled=~page.can_next, on_click=state_cls.handle_rm_grid_next_page),
            rx.button(">>", size="1", disabled=~page.can_next, on_click=state_cls.handle_rm_grid_last_page),
            spacing="3",
            align="center",
        ),
        rx.hstack(
            rx.text("Go to page:", size="2"),
            _filter_input(
                page.page_number.to(str),  # type: ignore[union-attr]
                state_cls.handle_rm_grid_go_to_page,
                "page",
                type="number",
                min=1,
                max=page.page_count,
                width="5em",
            ),
            align="center",
            spacing="2",
        ),
        rx.hstack(
            rx.text("Page Size", size="2"),
            rx.select(
                state_cls.rm_grid_page_size_options,
                value=page.page_size.to(str),  # type: ignore[union-attr]
                on_change=state_cls.handle_rm_grid_page_size,
                size="1",
            ),
            align="center",
            spacing="2",
        ),
        justify="between",
        align="center",
        width="100%",
    )


def row_model_table(
    state_cls: type,
    *,
    show_toolbar: bool = True,
    show_pagination: bool = True,
    show_stats: bool = False,
    **extra_props: Any,
) -> rx.Component:
    """Return a table bound to a :class:`RowModelGridMixin` state.

    Renders top-pinned rows, the current page of center rows and
    bottom-pinned rows, each with pin buttons and a selection checkbox,
    under headers carrying the sort toggle, the debounced filter inputs
    and the column pin buttons.

    Args:
        state_cls: The ``rx.State`` subclass that also inherits from
            :class:`RowModelGridMixin`.
        show_toolbar: Show the visibility / reset / delete toolbar above
            the table.
        show_pagination: Show the pagination footer below the table.
        show_stats: Show the one-line refresh stats below the table.
        **extra_props: Additional props forwarded to ``rx.table.root()``.

    Returns:
        A Reflex component.
    """
    header = rx.table.header(
        rx.table.row(
            rx.table.column_header_cell("Row Pin"),
            rx.table.column_header_cell(
                rx.hstack(
                    rx.text("select"),
                    rx.checkbox(
                        checked=state_cls.rm_grid_all_page_rows_selected,
                        on_change=lambda _checked: state_cls.handle_rm_grid_toggle_page_rows(),
                    ),
                    spacing="2",
                    align="center",
                ),
            ),
            rx.foreach(state_cls.rm_grid_headers, lambda h: _header_cell(state_cls, h)),
        ),
    )
    body = rx.table.body(
        rx.foreach(state_cls.rm_grid_top_rows, lambda row: _row(state_cls, row, pinned=True)),
        rx.foreach(state_cls.rm_grid_center_rows, lambda row: _row(state_cls, row, pinned=False)),
        rx.foreach(state_cls.rm_grid_bottom_rows, lambda row: _row(state_cls, row, pinned=True)),
    )
    table = rx.table.root(header, body, variant="surface", width="100%", **extra_props)

    parts: list[rx.Component] = []
    if show_toolbar:
        parts.append(row_model_table_toolbar(state_cls))
    parts.append(table)
    if show_pagination:
        parts.append(row_model_table_pagination(state_cls))
    if show_stats:
        parts.append(
            rx.text(
                state_cls.rm_grid_stats,
                size="1",
                color="var(--gray-9)",
                font_family="monospace",
            )
        )
    return rx.vstack(*parts, spacing="3", width="100%")
