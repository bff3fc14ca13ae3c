"""Example Reflex app demonstrating the row-model table.

Two tabs:
  1. People -- a hand-written column registry over a static JSON fixture
     (``data/people.json``): ``id`` uses the range filter, ``name`` and
     ``email`` use text filters, ``phone`` is not sortable and the email
     column reads through a custom accessor.
  2. Inferred -- the same fixture loaded with ``load_fixture``, which infers
     the column definitions from the polars schema.
"""

from pathlib import Path

import reflex as rx

from reflex_row_model import (
    ColumnDef,
    ColumnRegistry,
    RowModelGridMixin,
    load_fixture,
    row_model_table,
)

PEOPLE_PATH: Path = Path(__file__).parent / "data" / "people.json"

PEOPLE_COLUMNS = ColumnRegistry(
    [
        ColumnDef("id", header="Id", filter_variant="range"),
        ColumnDef("name", header="Name", filter_variant="text"),
        ColumnDef("email", header="Email", filter_variant="text"),
        ColumnDef("phone", header="Phone", filter_variant="text", enable_sorting=False),
    ],
    accessors={"email": lambda person: person["email"].lower()},
)


class PeopleState(RowModelGridMixin, rx.State):
    """Hand-written column registry over the people fixture."""

    def load_data(self):
        records, _, _ = load_fixture(PEOPLE_PATH)
        self.set_row_model(records, PEOPLE_COLUMNS, page_size=8)


class InferredState(RowModelGridMixin, rx.State):
    """Column definitions inferred from the fixture schema."""

    def load_data(self):
        records, columns, _ = load_fixture(PEOPLE_PATH)
        self.set_row_model(records, columns, page_size=5, page_size_options=(5, 10, 20))


def _people_tab() -> rx.Component:
    return rx.cond(
        PeopleState.rm_grid_loaded,
        row_model_table(PeopleState, show_stats=True),
        rx.text("Loading...", color="var(--gray-9)"),
    )


def _inferred_tab() -> rx.Component:
    return rx.cond(
        InferredState.rm_grid_loaded,
        row_model_table(InferredState),
        rx.text("Loading...", color="var(--gray-9)"),
    )


def index() -> rx.Component:
    return rx.box(
        rx.heading("Row Model Table Demo", size="7", margin_bottom="0.5em"),
        rx.tabs.root(
            rx.tabs.list(
                rx.tabs.trigger("People", value="people"),
                rx.tabs.trigger("Inferred", value="inferred"),
            ),
            rx.tabs.content(_people_tab(), value="people", padding_top="1em"),
            rx.tabs.content(_inferred_tab(), value="inferred", padding_top="1em"),
            default_value="people",
        ),
        padding="2em",
        max_width="1200px",
        margin="0 auto",
    )


app = rx.App()
app.add_page(index, on_load=[PeopleState.load_data, InferredState.load_data])
