"""Export discovered rows and payloads to JSON, JSONL, CSV files."""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from rowscout.cells import json_default
from rowscout.config import CsvOptions, Settings
from rowscout.csv_format import convert_to_csv
from rowscout.discovery import SearchInput, find_exportable_rows
from rowscout.flatten import to_record

logger = logging.getLogger(__name__)

FORMATS = ("csv", "json", "jsonl")

MIME_TYPES = {
    "csv": "text/csv;charset=utf-8",
    "json": "application/json;charset=utf-8",
    "jsonl": "application/x-ndjson;charset=utf-8",
}

_ILLEGAL_FILENAME_CHARS = re.compile(r'[\\/:*?"<>|]')


def sanitize_filename(name: str) -> str:
    """Replace characters that are illegal in filenames with ``_``."""
    return _ILLEGAL_FILENAME_CHARS.sub("_", name)


def result_filename(name: str, ext: str) -> str:
    """Filename for an execution-result export: ``<name>-result.<ext>``."""
    return sanitize_filename(f"{name}-result.{ext}")


def format_rows(
    rows: list[Any], fmt: str, csv_options: CsvOptions | Mapping[str, Any] | None = None
) -> str:
    """Format rows as string in the given format."""
    if fmt == "csv":
        return convert_to_csv(rows, csv_options).csv

    records = [to_record(row) for row in rows]
    if fmt == "json":
        return json.dumps(records, indent=2, default=json_default, ensure_ascii=False)
    elif fmt == "jsonl":
        if not records:
            return ""
        lines = (json.dumps(r, default=json_default, ensure_ascii=False) for r in records)
        return "\n".join(lines) + "\n"
    else:
        raise ValueError(f"Unsupported format: {fmt}. Use json, jsonl, or csv.")


def format_payload(
    payload: Any,
    fmt: str,
    search_options: SearchInput = None,
    csv_options: CsvOptions | Mapping[str, Any] | None = None,
) -> str:
    """Format a whole result payload.

    JSON keeps the full payload. CSV and JSONL export the rows found by
    discovery, or nothing when no table exists.
    """
    if fmt == "json":
        return json.dumps(payload, indent=2, default=json_default, ensure_ascii=False)
    if fmt not in FORMATS:
        raise ValueError(f"Unsupported format: {fmt}. Use json, jsonl, or csv.")

    found = find_exportable_rows(payload, search_options)
    if found is None:
        return ""
    return format_rows(found.rows, fmt, csv_options)


def download_text_file(
    content: str,
    filename: str,
    mime_type: str = "text/plain;charset=utf-8",
    directory: str | Path = ".",
) -> Path | None:
    """Write ``content`` to ``directory/filename``.

    Returns the written path, or None when there is nothing to write.
    """
    if not content:
        logger.info("Skipping export of %s: content is empty", filename)
        return None

    output = Path(directory).expanduser() / sanitize_filename(filename)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(content, encoding="utf-8", newline="")
    logger.info("Exported %s (%s, %d chars)", output, mime_type, len(content))
    return output


def export_payload(
    payload: Any,
    name: str | None = None,
    fmt: str | None = None,
    settings: Settings | None = None,
) -> Path | None:
    """Discover, format and write ``payload`` as ``<name>-result.<fmt>``.

    Returns the written path, or None when the export would be empty.
    """
    settings = settings or Settings()

    fmt = fmt or settings.output.default_format
    name = name or settings.output.default_name
    content = format_payload(payload, fmt, settings.search, settings.csv)
    return download_text_file(
        content,
        result_filename(name, fmt),
        mime_type=MIME_TYPES[fmt],
        directory=settings.output.directory,
    )
