"""Rich console display helpers for the CLI."""

from __future__ import annotations

from typing import Any

from rich.console import Console
from rich.table import Table

console = Console()
error_console = Console(stderr=True)


def print_success(message: str) -> None:
    console.print(f"[green]✓[/green] {message}")


def print_error(message: str) -> None:
    error_console.print(f"[red]✗[/red] {message}")


def print_warning(message: str) -> None:
    console.print(f"[yellow]![/yellow] {message}")


def print_discovery(found: Any) -> None:
    """Display where the exportable rows were found."""
    from rowscout.models import ExportableRows
    if not isinstance(found, ExportableRows):
        return

    table = Table(title="Exportable Rows", show_header=True)
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")
    table.add_row("Path", found.path)
    table.add_row("Depth", str(found.depth))
    table.add_row("Rows", str(len(found.rows)))
    table.add_row("Score", str(found.score))
    table.add_row("Candidates scored", str(found.candidate_count))
    table.add_row("Nodes inspected", str(found.inspected_node_count))
    console.print(table)


def print_rows_preview(headers: list[str], rows: list[list[str]], total: int) -> None:
    """Display the first rows of an export."""
    table = Table(title=f"Preview ({len(rows)} of {total})", show_header=True)
    table.add_column("#", style="dim", width=4)
    for header in headers:
        table.add_column(header, max_width=40, overflow="ellipsis")

    for i, row in enumerate(rows):
        table.add_row(str(i + 1), *row)

    console.print(table)


def print_conversion(result: Any) -> None:
    """Display CSV conversion counters."""
    table = Table(title="CSV Export", show_header=True)
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")
    table.add_row("Columns", str(len(result.headers)))
    table.add_row("Rows written", str(result.row_count))
    table.add_row("Rows skipped (empty)", str(result.skipped_row_count))
    table.add_row("Rows dropped (max rows)", str(result.truncated_row_count))
    table.add_row("Cells truncated", str(result.truncated_cell_count))
    console.print(table)
