"""Row selection: a set of row identities with scoped "select all" aggregates.

"Select all" is a pure function over a *scope* of row identities: it
selects every member unless all of them are already selected, in which
case it clears them.  Identities outside the scope are never touched.
"""

from collections.abc import Iterable

from reflex_row_model.models import RowId


def toggle_row(selection: frozenset, row_id: RowId) -> frozenset:
    if row_id in selection:
        return selection - {row_id}
    return selection | {row_id}


def is_all_selected(selection: frozenset, scope: Iterable[RowId]) -> bool:
    """True iff *scope* is non-empty and every member is selected."""
    scope = list(scope)
    return bool(scope) and all(row_id in selection for row_id in scope)


def is_some_selected(selection: frozenset, scope: Iterable[RowId]) -> bool:
    """True when part, but not all, of *scope* is selected (indeterminate)."""
    scope = list(scope)
    selected = sum(1 for row_id in scope if row_id in selection)
    return 0 < selected < len(scope)


def toggle_all(selection: frozenset, scope: Iterable[RowId]) -> frozenset:
    scope = list(scope)
    if is_all_selected(selection, scope):
        return selection - set(scope)
    return selection | set(scope)
