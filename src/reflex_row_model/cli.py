"""CLI for reflex-row-model -- browse a static data file as a paginated table.

Usage::

    # View a JSON fixture
    reflex-row-model view people.json

    # CSV / TSV / Parquet work too; pick the page size and port
    reflex-row-model view data.csv --page-size 10 --port 3001

The generated app uses ``RowModelGridMixin`` and ``row_model_table`` for
filtering, sorting, row pinning, selection and pagination.
"""

import os
import subprocess
import sys
import tempfile
from pathlib import Path
from typing import Annotated, Optional

import typer

app = typer.Typer(
    name="reflex-row-model",
    help="View a static data file in an interactive, paginated browser table.",
    no_args_is_help=True,
)

_VIEWER_APP_NAME: str = "viewer_app"

_SUPPORTED_SUFFIXES: set[str] = {
    ".json",
    ".ndjson",
    ".jsonl",
    ".csv",
    ".tsv",
    ".parquet",
    ".pq",
    ".ipc",
    ".arrow",
    ".feather",
}


def _build_app_code(
    file_path: Path,
    page_size: int,
    title: str,
) -> str:
    """Generate the Reflex app module source code for *file_path*."""
    abs_path = str(file_path.resolve())
    safe_path = abs_path.replace("\\", "\\\\").replace('"', '\\"')

    template = _APP_TEMPLATE
    template = template.replace("__FILENAME__", file_path.name)
    template = template.replace("__SAFE_PATH__", safe_path)
    template = template.replace("__PAGE_SIZE__", str(max(1, page_size)))
    template = template.replace("__TITLE__", title.replace('"', '\\"'))
    return template


# ---------------------------------------------------------------------------
# Generated app module. __NAME__ tokens are substituted by _build_app_code.
# ---------------------------------------------------------------------------

_APP_TEMPLATE = '''"""Auto-generated viewer app for: __FILENAME__"""

from pathlib import Path

import reflex as rx

from reflex_row_model import RowModelGridMixin, key_accessor, load_fixture, row_model_table


class ViewerState(RowModelGridMixin, rx.State):
    """Viewer state using RowModelGridMixin."""

    def load_data(self):
        records, columns, id_field = load_fixture(Path("__SAFE_PATH__"))
        self.set_row_model(
            records,
            columns,
            get_row_id=key_accessor(id_field),
            page_size=__PAGE_SIZE__,
        )


def index() -> rx.Component:
    return rx.box(
        rx.heading("__TITLE__", size="6", margin_bottom="0.5em"),
        rx.cond(
            ViewerState.rm_grid_loaded,
            row_model_table(ViewerState, show_stats=True),
            rx.text("Loading...", color="var(--gray-9)"),
        ),
        padding="2em",
        max_width="1400px",
        margin="0 auto",
    )


app = rx.App()
app.add_page(index, on_load=ViewerState.load_data)
'''


def _write_viewer_app(app_code: str, port: int) -> Path:
    """Lay out a throwaway Reflex project around *app_code* and return its root."""
    root = Path(tempfile.mkdtemp(prefix="row_model_viewer_"))
    package = root / _VIEWER_APP_NAME
    package.mkdir()
    (package / "__init__.py").touch()
    (package / f"{_VIEWER_APP_NAME}.py").write_text(app_code)
    (root / "rxconfig.py").write_text(
        "import reflex as rx\n"
        f"config = rx.Config(app_name=\"{_VIEWER_APP_NAME}\", frontend_port={port})\n"
    )
    return root


def _launch(app_dir: Path) -> None:
    """Initialise the project, then replace this process with `reflex run`.

    `reflex init` exits the interpreter when done, so it runs in a child.
    """
    os.chdir(app_dir)
    subprocess.run([sys.executable, "-m", "reflex", "init"], cwd=app_dir, check=True)
    os.execvp(sys.executable, [sys.executable, "-m", "reflex", "run"])


@app.callback()
def _callback() -> None:
    """View static data files as paginated tables."""


@app.command()
def view(
    file: Annotated[Path, typer.Argument(help="Path to the data file (JSON, CSV, TSV, Parquet, etc.)")],
    page_size: Annotated[int, typer.Option("--page-size", "-n", help="Rows per page")] = 8,
    port: Annotated[int, typer.Option("--port", "-p", help="Port for the Reflex frontend")] = 3000,
    title: Annotated[Optional[str], typer.Option("--title", "-t", help="Page title")] = None,
) -> None:
    """View a data file in an interactive browser table.

    Supports: JSON, NDJSON, CSV, TSV, Parquet, IPC/Arrow/Feather.
    """
    file = file.resolve()
    if not file.exists():
        typer.echo(f"Error: file not found: {file}", err=True)
        raise typer.Exit(code=1)

    if file.suffix.lower() not in _SUPPORTED_SUFFIXES:
        typer.echo(
            f"Error: unsupported file extension {file.suffix!r}.\n"
            f"Supported: {', '.join(sorted(_SUPPORTED_SUFFIXES))}",
            err=True,
        )
        raise typer.Exit(code=1)

    app_dir = _write_viewer_app(
        _build_app_code(file, page_size, title or f"{file.name} -- Row Model Viewer"),
        port,
    )
    typer.echo(f"Viewing {file.name} ({page_size} rows per page) on port {port}")
    _launch(app_dir)


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
