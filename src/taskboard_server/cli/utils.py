"""CLI utility functions shared across commands."""

from rich.console import Console
from rich.table import Table

console = Console()


def render_table(title: str, columns: tuple[str, ...], rows: list[tuple[str, ...]]) -> Table:
    """Build a Rich table with one header row and the given rows."""
    table = Table(title=title, title_justify="left")
    for column in columns:
        table.add_column(column)
    for row in rows:
        table.add_row(*row)
    return table
