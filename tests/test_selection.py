from reflex_row_model import selection as sel


def test_toggle_row() -> None:
    selection = sel.toggle_row(frozenset(), 1)
    assert selection == {1}
    assert sel.toggle_row(selection, 1) == frozenset()


def test_toggle_all_twice_restores_scope() -> None:
    scope = [1, 2, 3]
    selected = sel.toggle_all(frozenset({9}), scope)
    assert selected == {1, 2, 3, 9}
    assert sel.is_all_selected(selected, scope)
    assert sel.toggle_all(selected, scope) == {9}


def test_toggle_all_with_partial_selection_selects_everything() -> None:
    selected = sel.toggle_all(frozenset({2}), [1, 2, 3])
    assert selected == {1, 2, 3}


def test_aggregates() -> None:
    assert not sel.is_all_selected(frozenset(), [])
    assert not sel.is_some_selected(frozenset(), [])
    assert sel.is_some_selected(frozenset({1}), [1, 2])
    assert not sel.is_some_selected(frozenset({1, 2}), [1, 2])
    assert not sel.is_some_selected(frozenset({5}), [1, 2])
