"""Export command — write the discovered table as CSV, JSON or JSONL."""

from pathlib import Path
from typing import Optional

import typer

from rowscout.cli.app import app, state
from rowscout.cli.display import print_conversion, print_error, print_success, print_warning


@app.command()
def export(
    source: Path = typer.Argument(..., help="Path to a JSON result file"),
    fmt: Optional[str] = typer.Option(
        None, "--format", "-f", help="Output format: csv, json or jsonl"
    ),
    name: Optional[str] = typer.Option(
        None, "--name", "-n", help="Base name for <name>-result.<ext>"
    ),
    output_dir: Optional[Path] = typer.Option(
        None, "--output-dir", "-o", help="Directory to write to"
    ),
    delimiter: Optional[str] = typer.Option(None, "--delimiter", "-d", help="CSV delimiter"),
    bom: bool = typer.Option(False, "--bom", help="Prefix CSV with a UTF-8 byte order mark"),
    excel_safe: bool = typer.Option(False, "--excel-safe", help="Defuse spreadsheet formulas"),
    max_rows: Optional[int] = typer.Option(None, "--max-rows", help="Maximum CSV rows"),
    row_numbers: bool = typer.Option(False, "--row-numbers", help="Prepend a row number column"),
    stdout: bool = typer.Option(False, "--stdout", help="Print instead of writing a file"),
    raw: bool = typer.Option(False, "--raw", help="Do not unwrap a top-level 'data' field"),
):
    """Export the table found in a JSON result."""
    from rowscout.cli.input import load_payload
    from rowscout.config import CsvOptions, build_options
    from rowscout.csv_format import convert_to_csv
    from rowscout.discovery import find_exportable_rows
    from rowscout.export import (
        FORMATS,
        MIME_TYPES,
        download_text_file,
        format_payload,
        result_filename,
    )

    settings = state.settings
    fmt = (fmt or settings.output.default_format).lower()
    if fmt not in FORMATS:
        print_error(f"Unsupported format: {fmt}. Use json, jsonl, or csv.")
        raise typer.Exit(1)

    overrides = {
        "delimiter": delimiter,
        "include_bom": bom or None,
        "excel_safe_mode": excel_safe or None,
        "max_rows": max_rows,
        "include_row_number": row_numbers or None,
    }
    csv_options = build_options(
        CsvOptions,
        {**settings.csv.model_dump(), **{k: v for k, v in overrides.items() if v is not None}},
    )

    try:
        payload = load_payload(source, unwrap_data=not raw)
        if fmt == "csv":
            found = find_exportable_rows(payload, settings.search)
            result = convert_to_csv(found.rows if found else [], csv_options)
            content = result.csv
        else:
            result = None
            content = format_payload(payload, fmt, settings.search, csv_options)

        if not content:
            print_warning(f"Nothing to export from {source.name}")
            raise typer.Exit(0)

        if stdout:
            typer.echo(content)
            return

        written = download_text_file(
            content,
            result_filename(name or source.stem or settings.output.default_name, fmt),
            mime_type=MIME_TYPES[fmt],
            directory=output_dir or settings.output.directory,
        )
        if result is not None:
            print_conversion(result)
        print_success(f"Exported to {written}")
    except typer.Exit:
        raise
    except Exception as e:
        print_error(f"Failed to export {source}: {e}")
        raise typer.Exit(1)
