from typing import Any

import pytest

from reflex_row_model.columns import ColumnRegistry, key_accessor
from reflex_row_model.table_grid import (
    _cache_registry,
    _get_cache,
    _row_id_for_key,
    _RowModelCache,
    _session_model,
)
from reflex_row_model.view import build_table_view

from conftest import ids


@pytest.fixture
def cache(people: list[dict[str, Any]], registry: ColumnRegistry) -> _RowModelCache:
    cache = _RowModelCache()
    cache.data = people
    cache.registry = registry
    cache.options = {"page_size": 4}
    return cache


def test_get_cache_returns_one_entry_per_id() -> None:
    first = _get_cache("TableGridTestState")
    assert _get_cache("TableGridTestState") is first
    assert _get_cache("OtherTableGridTestState") is not first
    _cache_registry.pop("TableGridTestState")
    _cache_registry.pop("OtherTableGridTestState")


def test_fresh_session_uses_cached_options(cache: _RowModelCache) -> None:
    model = _session_model(cache, {}, [])
    assert model.pagination.page_size == 4
    assert model.get_page_count() == 3


def test_sessions_keep_separate_state(cache: _RowModelCache) -> None:
    alice = _session_model(cache, {}, [])
    alice.toggle_sorting("id")
    alice.toggle_sorting("id")
    alice.toggle_row_selected(3)
    alice_snapshot = alice.get_state().to_snapshot()

    bob = _session_model(cache, {}, [])
    bob.next_page()
    bob_snapshot = bob.get_state().to_snapshot()

    alice = _session_model(cache, alice_snapshot, [])
    bob = _session_model(cache, bob_snapshot, [])
    assert ids(alice.get_center_page_rows()) == [10, 9, 8, 7]
    assert alice.row_selection == {3}
    assert ids(bob.get_center_page_rows()) == [5, 6, 7, 8]
    assert bob.row_selection == frozenset()


def test_deleting_rows_only_affects_one_session(cache: _RowModelCache) -> None:
    alice = _session_model(cache, {}, [])
    alice.toggle_row_selected(3)
    removed = alice.delete_selected_rows()
    deleted = [alice.get_row_id(row) for row in removed]
    snapshot = alice.get_state().to_snapshot()

    alice = _session_model(cache, snapshot, deleted)
    assert 3 not in ids(alice.get_core_rows())
    assert len(alice.get_core_rows()) == 9

    bob = _session_model(cache, {}, [])
    assert len(bob.get_core_rows()) == 10
    assert len(cache.data) == 10


def test_session_model_uses_cached_row_id(cache: _RowModelCache) -> None:
    cache.get_row_id = key_accessor("email")
    model = _session_model(cache, {}, ["bob2@example.com"])
    assert 2 not in ids(model.get_core_rows())
    assert _row_id_for_key(model, "cy3@example.com") == "cy3@example.com"


def test_row_id_for_key_maps_rendered_keys(cache: _RowModelCache) -> None:
    model = _session_model(cache, {}, [])
    view = build_table_view(model)
    key = view.center_rows[1].key
    assert key == "2"
    assert _row_id_for_key(model, key) == 2
    model.toggle_row_selected(_row_id_for_key(model, key))
    assert build_table_view(model).center_rows[1].selected
    assert _row_id_for_key(model, "missing") == "missing"
