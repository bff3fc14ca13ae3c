"""reflex-row-model – a derived row-model engine with a Reflex table front end.

The engine turns raw records plus a column registry into filtered, sorted,
row-pinned and paginated views, with row selection and column visibility
layered on top::

    pip install reflex-row-model

Render it in a Reflex app with :class:`RowModelGridMixin` and
:func:`row_model_table`, or browse a data file straight from the shell::

    reflex-row-model view people.json
"""

from reflex_row_model.columns import ColumnRegistry, key_accessor
from reflex_row_model.filtering import apply_filters, resolve_filter_value, set_range_bound
from reflex_row_model.models import (
    ColumnDef,
    ColumnPinningState,
    PaginationState,
    RowPinningState,
    SortEntry,
    TableState,
)
from reflex_row_model.pagination import get_page_count, paginate
from reflex_row_model.pinning import order_columns, partition_rows
from reflex_row_model.polars_utils import build_column_defs_from_schema, load_fixture, scan_file
from reflex_row_model.row_model import DerivedRowModel, RowModel, recompute
from reflex_row_model.sorting import apply_sorting, toggle_sorting
from reflex_row_model.table_grid import (
    RowModelGridMixin,
    row_model_table,
    row_model_table_pagination,
    row_model_table_toolbar,
)
from reflex_row_model.view import (
    CellView,
    HeaderView,
    PageView,
    RowView,
    TableView,
    build_table_view,
    row_key_map,
)
