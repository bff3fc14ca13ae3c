"""Column visibility: which columns render, with an "all visible" aggregate.

Visibility is pure annotation.  Hiding a column never changes its filter,
sort or pin configuration.
"""

from collections.abc import Mapping

from reflex_row_model.columns import ColumnRegistry
from reflex_row_model.models import ColumnDef


def is_visible(visibility: Mapping[str, bool], column_id: str) -> bool:
    return visibility.get(column_id, True)


def visible_columns(
    visibility: Mapping[str, bool],
    registry: ColumnRegistry,
) -> list[ColumnDef]:
    return [col for col in registry.columns() if is_visible(visibility, col.id)]


def toggle_column(
    visibility: Mapping[str, bool],
    column_id: str,
    registry: ColumnRegistry,
) -> dict[str, bool]:
    """Flip one column.  Non-hideable and unknown columns are left alone."""
    updated = dict(visibility)
    if registry.can_hide(column_id):
        updated[column_id] = not is_visible(visibility, column_id)
    return updated


def is_all_visible(visibility: Mapping[str, bool], registry: ColumnRegistry) -> bool:
    return all(is_visible(visibility, col.id) for col in registry.hideable_columns())


def is_some_visible(visibility: Mapping[str, bool], registry: ColumnRegistry) -> bool:
    """True when part, but not all, of the hideable columns is visible."""
    hideable = registry.hideable_columns()
    shown = sum(1 for col in hideable if is_visible(visibility, col.id))
    return 0 < shown < len(hideable)


def toggle_all(visibility: Mapping[str, bool], registry: ColumnRegistry) -> dict[str, bool]:
    """Show every hideable column, or hide them all if all are already shown."""
    target = not is_all_visible(visibility, registry)
    updated = dict(visibility)
    for col in registry.hideable_columns():
        updated[col.id] = target
    return updated
