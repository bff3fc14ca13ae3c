from typing import Any

import pytest

from reflex_row_model import ColumnDef, ColumnRegistry, RowModel

NAMES = ["Ann", "bob", "Cy", "ann", "Dee", "Eve", "Fay", "Gus", "Hal", "Ivy"]


@pytest.fixture
def people() -> list[dict[str, Any]]:
    return [
        {
            "id": i,
            "name": NAMES[i - 1],
            "email": f"{NAMES[i - 1].lower()}{i}@example.com",
            "phone": f"555-01{i:02d}",
        }
        for i in range(1, 11)
    ]


@pytest.fixture
def columns() -> list[ColumnDef]:
    return [
        ColumnDef("id", header="ID", filter_variant="range"),
        ColumnDef("name", header="Name"),
        ColumnDef("email", header="Email"),
        ColumnDef("phone", header="Phone", enable_sorting=False),
    ]


@pytest.fixture
def registry(columns: list[ColumnDef]) -> ColumnRegistry:
    return ColumnRegistry(columns)


@pytest.fixture
def model(people: list[dict[str, Any]], registry: ColumnRegistry) -> RowModel:
    return RowModel(people, registry, page_size=4)


def ids(rows: list[dict[str, Any]]) -> list[int]:
    return [row["id"] for row in rows]
