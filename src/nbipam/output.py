"""
Console output for command results.

Table mode renders a rich table with a header row and an optional
footer row. Plain mode prints bare rows, one per line, so results can
be piped into other text tools.
"""

from dataclasses import dataclass, field

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

console = Console()
err_console = Console(stderr=True)

# Placeholder for empty cells in plain output, keeps column positions stable
EMPTY_CELL = "-"


@dataclass
class TableView:
    """Rows to display, independent of the output mode."""
    columns: list[str]
    rows: list[list[str]] = field(default_factory=list)
    footer: list[str] | None = None
    title: str | None = None

    def add_row(self, *cells: str) -> None:
        self.rows.append(list(cells))


def render_plain(view: TableView) -> None:
    """Print rows only: no header, footer, borders or markup. Empty cells print as "-"."""
    for row in view.rows:
        click.echo(" ".join(cell or EMPTY_CELL for cell in row))


def render_table(view: TableView, out: Console | None = None) -> None:
    """Print the view as a rich table."""
    out = out or console

    table = Table(title=view.title, show_footer=view.footer is not None)
    for index, column in enumerate(view.columns):
        footer = ""
        if view.footer is not None and index < len(view.footer):
            footer = view.footer[index]
        table.add_column(column, footer=footer, style="cyan" if index == 0 else None)

    for row in view.rows:
        table.add_row(*(escape(cell) for cell in row))

    out.print(table)


def render(view: TableView, plain: bool = False) -> None:
    """Render the view in the requested output mode."""
    if plain:
        render_plain(view)
    else:
        render_table(view)


def print_error(message: str) -> None:
    """Report a failure on stderr."""
    err_console.print(f"[red]Error:[/red] {escape(message)}", soft_wrap=True)
