from typing import Any

import pytest

from reflex_row_model.columns import ColumnRegistry
from reflex_row_model.filtering import (
    active_filters,
    apply_filters,
    resolve_filter_value,
    set_range_bound,
)
from reflex_row_model.models import ColumnDef

from conftest import ids


def test_range_filter_is_inclusive(people: list[dict[str, Any]], registry: ColumnRegistry) -> None:
    rows = apply_filters(people, {"id": (3, 7)}, registry)
    assert ids(rows) == [3, 4, 5, 6, 7]


def test_range_filter_swaps_reversed_bounds(
    people: list[dict[str, Any]], registry: ColumnRegistry
) -> None:
    rows = apply_filters(people, {"id": (7, 3)}, registry)
    assert ids(rows) == [3, 4, 5, 6, 7]


def test_range_filter_open_bounds(people: list[dict[str, Any]], registry: ColumnRegistry) -> None:
    assert ids(apply_filters(people, {"id": ("", 2)}, registry)) == [1, 2]
    assert ids(apply_filters(people, {"id": {"min": "9"}}, registry)) == [9, 10]


def test_text_filter_is_case_insensitive_substring(
    people: list[dict[str, Any]], registry: ColumnRegistry
) -> None:
    rows = apply_filters(people, {"name": "AN"}, registry)
    assert ids(rows) == [1, 4]


@pytest.mark.parametrize("value", [None, "", ("", ""), (None, None)])
def test_empty_filter_values_are_no_ops(
    people: list[dict[str, Any]], registry: ColumnRegistry, value: Any
) -> None:
    column = "name" if isinstance(value, str) else "id"
    assert apply_filters(people, {column: value}, registry) == people


def test_filters_and_compose(people: list[dict[str, Any]], registry: ColumnRegistry) -> None:
    rows = apply_filters(people, {"id": (2, 10), "name": "an"}, registry)
    assert ids(rows) == [4]


def test_range_filter_excludes_non_numeric_and_missing() -> None:
    registry = ColumnRegistry([ColumnDef("age", filter_variant="range")])
    rows = [{"age": "12"}, {"age": "n/a"}, {"age": None}, {}, {"age": "30"}]
    assert apply_filters(rows, {"age": (10, None)}, registry) == [{"age": "12"}, {"age": "30"}]


def test_text_filter_excludes_missing_values() -> None:
    registry = ColumnRegistry([ColumnDef("name")])
    rows = [{"name": "Ann"}, {"name": None}, {}]
    assert apply_filters(rows, {"name": "a"}, registry) == [{"name": "Ann"}]


def test_filters_on_non_filterable_columns_are_ignored(people: list[dict[str, Any]]) -> None:
    registry = ColumnRegistry([ColumnDef("id"), ColumnDef("name", enable_filtering=False)])
    assert active_filters({"name": "x", "unknown": "y"}, registry) == {}
    assert apply_filters(people, {"name": "x"}, registry) == people


def test_resolve_filter_value() -> None:
    assert resolve_filter_value("text", "") is None
    assert resolve_filter_value("text", "ann") == "ann"
    assert resolve_filter_value("range", ["3", "7.5"]) == (3, 7.5)
    assert resolve_filter_value("range", {"min": "", "max": None}) is None
    assert resolve_filter_value("range", "3") is None


def test_set_range_bound_keeps_other_half() -> None:
    value = set_range_bound(None, "min", "3")
    assert value == (3, None)
    value = set_range_bound(value, "max", "7")
    assert value == (3, 7)
    value = set_range_bound(value, "min", "")
    assert value == (None, 7)
    assert set_range_bound(value, "max", "") is None


def test_filtering_twice_gives_the_same_rows(
    people: list[dict[str, Any]], registry: ColumnRegistry
) -> None:
    filters = {"id": (2, 9), "email": "example"}
    once = apply_filters(people, filters, registry)
    assert apply_filters(once, filters, registry) == once
