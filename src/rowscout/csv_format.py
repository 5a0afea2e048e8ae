"""Assemble flattened rows into CSV text."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from rowscout.cells import escape_cell, excel_safe, stringify_cell
from rowscout.config import CsvOptions, build_options
from rowscout.flatten import flatten_row, to_record
from rowscout.models import MISSING, ConversionResult

logger = logging.getLogger(__name__)

BOM = "\ufeff"

_ROW_NUMBER = object()


def normalize_csv_options(options: CsvOptions | Mapping[str, Any] | None) -> CsvOptions:
    """Coerce ``options`` into a CsvOptions, falling back to defaults for bad values."""
    if options is None:
        return CsvOptions()
    if isinstance(options, CsvOptions):
        return options
    return build_options(CsvOptions, dict(options))


def _discover_headers(flat_rows: list[dict[str, Any]], options: CsvOptions) -> list[str]:
    if options.headers is not None:
        return list(options.headers)

    # Collect all keys preserving insertion order
    keys: list[str] = []
    seen: set[str] = set()
    for row in flat_rows:
        for key in row:
            if key not in seen:
                keys.append(key)
                seen.add(key)
    if options.sort_headers:
        keys.sort()
    return keys


def _build_columns(keys: list[str], options: CsvOptions) -> list[tuple[Any, str]]:
    """Pair each source key with its display label.

    The row number column uses a private key so it never collides with data.
    """
    columns: list[tuple[Any, str]] = []
    if options.include_row_number:
        header = options.row_number_header
        columns.append((_ROW_NUMBER, options.header_label_map.get(header, header)))
    for key in keys:
        columns.append((key, options.header_label_map.get(key, key)))

    if options.trim_headers:
        columns = [(key, label.strip()) for key, label in columns]

    if options.dedupe_headers:
        deduped: list[tuple[Any, str]] = []
        seen: set[str] = set()
        for key, label in columns:
            if label in seen:
                logger.debug("Dropping duplicate CSV header %r (source key %r)", label, key)
                continue
            seen.add(label)
            deduped.append((key, label))
        columns = deduped

    return columns


def convert_to_csv(
    rows: Iterable[Any], options: CsvOptions | Mapping[str, Any] | None = None
) -> ConversionResult:
    """Convert records to CSV text and report row/skip/truncation counts."""
    options = normalize_csv_options(options)
    records = [to_record(row) for row in rows] if rows else []
    if not records:
        return ConversionResult(csv="")

    flat_rows = [flatten_row(record, max_depth=options.flatten_max_depth) for record in records]
    columns = _build_columns(_discover_headers(flat_rows, options), options)
    headers = [label for _, label in columns]

    lines: list[str] = []
    if not options.omit_header_row:
        header_cells = [escape_cell(excel_safe(label, options), options) for label in headers]
        lines.append(options.delimiter.join(header_cells))

    row_count = 0
    skipped_row_count = 0
    truncated_row_count = 0
    truncated_cell_count = 0

    for index, flat in enumerate(flat_rows):
        if options.max_rows is not None and row_count >= options.max_rows:
            truncated_row_count = len(flat_rows) - index
            logger.info(
                "CSV row limit reached: kept %d rows, dropped %d", row_count, truncated_row_count
            )
            break

        texts: list[str | None] = []
        row_truncations = 0
        for key, _ in columns:
            if key is _ROW_NUMBER:
                texts.append(None)
                continue
            text, truncated = stringify_cell(flat.get(key, MISSING), options)
            if truncated:
                row_truncations += 1
            texts.append(text)

        if options.skip_empty_rows and all(not text for text in texts if text is not None):
            skipped_row_count += 1
            continue

        row_count += 1
        truncated_cell_count += row_truncations
        cells = [
            escape_cell(str(row_count) if text is None else text, options) for text in texts
        ]
        lines.append(options.delimiter.join(cells))

    csv_text = options.line_terminator.join(lines)
    if options.include_bom:
        csv_text = BOM + csv_text

    logger.debug(
        "Converted %d rows to CSV (%d columns, %d skipped, %d rows truncated, %d cells truncated)",
        row_count,
        len(headers),
        skipped_row_count,
        truncated_row_count,
        truncated_cell_count,
    )
    return ConversionResult(
        csv=csv_text,
        headers=headers,
        row_count=row_count,
        skipped_row_count=skipped_row_count,
        truncated_row_count=truncated_row_count,
        truncated_cell_count=truncated_cell_count,
    )


def convert_array_to_csv(
    rows: Iterable[Any], options: CsvOptions | Mapping[str, Any] | None = None
) -> str:
    """Convert records to CSV text."""
    return convert_to_csv(rows, options).csv
