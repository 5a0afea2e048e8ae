"""Discover command — locate the exportable table in a payload."""

from pathlib import Path
from typing import Optional

import typer

from rowscout.cli.app import app, state
from rowscout.cli.display import print_discovery, print_error, print_rows_preview, print_warning


@app.command()
def discover(
    source: Path = typer.Argument(..., help="Path to a JSON result file"),
    max_depth: Optional[int] = typer.Option(None, "--max-depth", "-d", help="Max search depth"),
    min_rows: Optional[int] = typer.Option(None, "--min-rows", "-m", help="Minimum row count"),
    require: Optional[list[str]] = typer.Option(
        None, "--require", "-r", help="Path token the table must contain (repeatable)"
    ),
    show: bool = typer.Option(False, "--show", "-s", help="Preview the first rows"),
    limit: int = typer.Option(10, "--limit", "-n", help="Rows to preview with --show"),
    raw: bool = typer.Option(False, "--raw", help="Do not unwrap a top-level 'data' field"),
):
    """Find the best array of records in a JSON result."""
    from rowscout.cells import stringify_cell
    from rowscout.cli.input import load_payload
    from rowscout.config import SearchOptions, build_options
    from rowscout.discovery import find_exportable_rows
    from rowscout.flatten import flatten_row
    from rowscout.models import MISSING

    overrides = {
        "max_depth": max_depth,
        "min_rows": min_rows,
        "require_path_tokens": require or None,
    }
    search = build_options(
        SearchOptions,
        {
            **state.settings.search.model_dump(),
            **{k: v for k, v in overrides.items() if v is not None},
        },
    )

    try:
        payload = load_payload(source, unwrap_data=not raw)
        found = find_exportable_rows(payload, search)
    except Exception as e:
        print_error(f"Failed to search {source}: {e}")
        raise typer.Exit(1)

    if found is None:
        print_warning(f"No exportable rows found in {source.name}")
        raise typer.Exit(0)

    print_discovery(found)

    if show and found.rows:
        csv_options = state.settings.csv
        flat_rows = [
            flatten_row(row, max_depth=csv_options.flatten_max_depth)
            for row in found.rows[: max(limit, 0)]
        ]
        headers = list(dict.fromkeys(key for flat in flat_rows for key in flat))
        preview = [
            [stringify_cell(flat.get(key, MISSING), csv_options)[0] for key in headers]
            for flat in flat_rows
        ]
        print_rows_preview(headers, preview, len(found.rows))
