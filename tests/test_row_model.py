from typing import Any

from reflex_row_model import ColumnDef, RowModel, recompute
from reflex_row_model.columns import ColumnRegistry, key_accessor
from reflex_row_model.models import PaginationState, SortEntry, TableState

from conftest import ids


def test_ten_rows_page_size_four(model: RowModel) -> None:
    assert model.get_page_count() == 3
    model.set_page_index(2)
    assert ids(model.get_center_page_rows()) == [9, 10]
    assert model.get_can_previous_page()
    assert not model.get_can_next_page()


def test_pinned_rows_are_exempt_from_pagination(model: RowModel) -> None:
    model.pin_row(1, "top")
    model.pin_row(2, "bottom")
    assert ids(model.get_top_rows()) == [1]
    assert ids(model.get_bottom_rows()) == [2]
    assert ids(model.get_center_rows()) == [3, 4, 5, 6, 7, 8, 9, 10]
    assert model.get_page_count() == 2
    model.next_page()
    assert ids(model.get_top_rows()) == [1]
    assert ids(model.get_center_page_rows()) == [7, 8, 9, 10]


def test_filter_hides_pinned_row(model: RowModel) -> None:
    model.pin_row(5, "top")
    model.set_column_filter("id", (1, 3))
    assert model.get_top_rows() == []
    assert ids(model.get_center_page_rows()) == [1, 2, 3]
    assert model.get_row_pinned_position(5) == "top"

    model.set_column_filter("id", None)
    assert ids(model.get_top_rows()) == [5]


def test_filter_and_sort_reset_page_index(model: RowModel) -> None:
    model.last_page()
    assert model.pagination.page_index == 2
    model.set_column_filter("name", "a")
    assert model.pagination.page_index == 0

    model.set_column_filter("name", "")
    model.last_page()
    assert model.pagination.page_index == 2
    model.toggle_sorting("name")
    assert model.pagination.page_index == 0


def test_pin_and_select_keep_page_index(model: RowModel) -> None:
    model.next_page()
    model.pin_row(9, "top")
    model.toggle_row_selected(5)
    model.toggle_column_visibility("email")
    assert model.pagination.page_index == 1


def test_page_index_is_clamped_without_auto_reset(people: list[dict[str, Any]], columns) -> None:
    model = RowModel(people, columns, page_size=4, auto_reset_page_index=False)
    model.last_page()
    model.set_column_filter("id", (1, 5))
    assert model.get_page_count() == 2
    assert model.pagination.page_index == 1
    assert ids(model.get_center_page_rows()) == [5]


def test_set_page_size_keeps_top_row(model: RowModel) -> None:
    model.set_page_index(2)
    model.set_page_size(5)
    assert model.pagination == PaginationState(page_index=1, page_size=5)
    assert ids(model.get_center_page_rows()) == [6, 7, 8, 9, 10]

    model.set_page_size(0)
    assert model.pagination.page_size == 1


def test_navigation_clamps(model: RowModel) -> None:
    model.previous_page()
    assert model.pagination.page_index == 0
    model.set_page_index(50)
    assert model.pagination.page_index == 2
    model.next_page()
    assert model.pagination.page_index == 2
    model.first_page()
    assert model.pagination.page_index == 0


def test_range_filter_bounds(model: RowModel) -> None:
    model.set_range_filter_bound("id", "min", "3")
    model.set_range_filter_bound("id", "max", "7")
    assert model.get_column_filter_value("id") == (3, 7)
    assert ids(model.get_filtered_rows()) == [3, 4, 5, 6, 7]

    model.set_range_filter_bound("name", "min", "3")
    assert model.get_column_filter_value("name") is None

    model.reset_column_filters()
    assert model.column_filters == {}
    assert model.get_filtered_sorted_size() == 10


def test_sorting_setters(model: RowModel) -> None:
    model.set_sorting([("id", "desc"), ("phone", "asc"), ("name", "sideways")])
    assert model.sorting == (SortEntry("id", "desc"),)
    assert ids(model.get_center_page_rows()) == [10, 9, 8, 7]
    assert model.get_next_sorting_order("id") is None

    model.toggle_sorting("phone")
    assert model.sorting == (SortEntry("id", "desc"),)

    model.reset_sorting()
    assert model.sorting == ()
    assert model.get_sort_direction("id") is None


def test_select_all_is_page_scoped(model: RowModel) -> None:
    model.pin_row(10, "top")
    model.toggle_all_page_rows_selected()
    assert model.row_selection == {10, 1, 2, 3, 4}
    assert model.get_is_all_page_rows_selected()

    model.next_page()
    assert not model.get_is_all_page_rows_selected()
    assert model.get_is_some_page_rows_selected()

    model.previous_page()
    model.toggle_all_page_rows_selected()
    assert model.row_selection == frozenset()


def test_selection_respects_can_select(people: list[dict[str, Any]], columns) -> None:
    model = RowModel(people, columns, page_size=4, can_select=lambda r: r["id"] % 2 == 0)
    model.toggle_row_selected(1)
    assert model.row_selection == frozenset()
    model.toggle_all_page_rows_selected()
    assert model.row_selection == {2, 4}
    assert model.get_is_all_page_rows_selected()


def test_unknown_rows_are_ignored(model: RowModel) -> None:
    model.toggle_row_selected(99)
    model.pin_row(99, "top")
    assert model.row_selection == frozenset()
    assert model.row_pinning.top == ()


def test_pinning_respects_can_pin_row(people: list[dict[str, Any]], columns) -> None:
    model = RowModel(people, columns, can_pin_row=lambda r: r["id"] != 3)
    model.pin_row(3, "top")
    model.pin_row(4, "top")
    assert ids(model.get_top_rows()) == [4]


def test_delete_selected_rows_spans_pages(model: RowModel) -> None:
    model.toggle_row_selected(2)
    model.toggle_row_selected(9)
    removed = model.delete_selected_rows()
    assert ids(removed) == [2, 9]
    assert model.row_selection == frozenset()
    assert len(model.get_core_rows()) == 8
    assert model.get_page_count() == 2
    assert model.delete_selected_rows() == []


def test_get_selected_rows_is_global(model: RowModel) -> None:
    model.toggle_row_selected(9)
    model.toggle_row_selected(1)
    assert ids(model.get_selected_rows()) == [1, 9]


def test_set_data_keeps_stale_ids_inert(model: RowModel, people: list[dict[str, Any]]) -> None:
    model.pin_row(10, "bottom")
    model.set_data(people[:5])
    assert model.get_bottom_rows() == []
    assert model.get_page_count() == 2
    model.set_data(people)
    assert ids(model.get_bottom_rows()) == [10]


def test_hidden_column_keeps_filter_and_sort(model: RowModel) -> None:
    model.set_column_filter("name", "an")
    model.toggle_sorting("name")
    model.toggle_column_visibility("name")
    assert not model.get_is_column_visible("name")
    assert [c.id for c in model.get_visible_columns()] == ["id", "email", "phone"]
    assert ids(model.get_sorted_rows()) == [1, 4]
    assert model.get_sort_direction("name") == "asc"


def test_column_visibility_aggregates(model: RowModel) -> None:
    assert model.get_is_all_columns_visible()
    model.toggle_all_columns_visible()
    assert model.get_visible_columns() == []
    assert not model.get_is_some_columns_visible()
    model.toggle_all_columns_visible()
    assert model.get_is_all_columns_visible()


def test_column_pinning_orders_visible_columns(model: RowModel) -> None:
    model.pin_column("email", "left")
    assert model.get_column_pinned_position("email") == "left"
    assert [c.id for c in model.get_visible_columns()] == ["email", "id", "name", "phone"]


def test_custom_row_id(people: list[dict[str, Any]], columns) -> None:
    model = RowModel(people, columns, get_row_id=key_accessor("email"))
    model.pin_row("cy3@example.com", "top")
    assert ids(model.get_top_rows()) == [3]


def test_recompute_is_pure(people: list[dict[str, Any]], registry: ColumnRegistry) -> None:
    state = TableState(
        column_filters={"id": (3, 9)},
        sorting=(SortEntry("id", "desc"),),
        pagination=PaginationState(page_index=5, page_size=4),
    )
    derived = recompute(people, state, registry, key_accessor("id"))
    assert derived.page_count == 2
    assert derived.page_index == 1
    assert ids(derived.center_page_rows) == [5, 4, 3]
    assert state.pagination.page_index == 5


def test_objects_as_records() -> None:
    class Item:
        def __init__(self, id: int, label: str) -> None:
            self.id = id
            self.label = label

    items = [Item(i, f"item {i}") for i in range(3)]
    model = RowModel(items, [ColumnDef("label")], page_size=2)
    model.toggle_sorting("label")
    model.toggle_sorting("label")
    assert [i.id for i in model.get_center_page_rows()] == [2, 1]


def test_debug_log_prints(people: list[dict[str, Any]], columns, capsys) -> None:
    model = RowModel(people, columns, debug_log=True)
    model.toggle_sorting("phone")
    out = capsys.readouterr().out
    assert "[RowModel] recompute:" in out
    assert "[RowModel] ignored sort: 'phone'" in out


def test_unpinned_row_returns_to_its_sorted_position(model: RowModel) -> None:
    model.toggle_sorting("email")
    before = ids(model.get_center_rows())
    model.pin_row(before[3], "top")
    assert before[3] not in ids(model.get_center_rows())
    model.pin_row(before[3], "bottom")
    model.pin_row(before[3], False)
    assert ids(model.get_center_rows()) == before


def test_repeating_a_filter_or_sort_changes_nothing(model: RowModel) -> None:
    model.set_column_filter("id", (2, 8))
    model.set_sorting([("name", "desc")])
    first = (ids(model.get_sorted_rows()), model.get_state())
    model.set_column_filter("id", (2, 8))
    model.set_sorting([("name", "desc")])
    assert (ids(model.get_sorted_rows()), model.get_state()) == first


def test_set_page_size_with_infinite_value_is_clamped(model: RowModel) -> None:
    model.set_page_size(float("inf"))
    assert model.pagination.page_size == 1
    assert model.get_page_count() == 10


def test_model_restored_from_snapshot(people: list[dict[str, Any]], columns) -> None:
    model = RowModel(people, columns, page_size=4)
    model.set_column_filter("name", "a")
    model.toggle_sorting("id")
    model.toggle_sorting("id")
    model.pin_row(4, "top")
    model.toggle_row_selected(7)
    model.toggle_column_visibility("phone")
    model.pin_column("email", "left")
    model.next_page()

    snapshot = model.get_state().to_snapshot()
    restored = RowModel(people, columns, state=TableState.from_snapshot(snapshot))
    assert restored.get_state() == model.get_state()
    assert ids(restored.get_center_page_rows()) == ids(model.get_center_page_rows())
    assert ids(restored.get_top_rows()) == [4]


def test_snapshot_page_index_is_clamped(people: list[dict[str, Any]], columns) -> None:
    state = TableState.from_snapshot({"page_index": 40, "page_size": 4})
    model = RowModel(people, columns, state=state)
    assert model.pagination == PaginationState(page_index=2, page_size=4)
