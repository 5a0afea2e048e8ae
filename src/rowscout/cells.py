"""Serialize single values into CSV cells."""

from __future__ import annotations

import json
from datetime import date, datetime
from typing import Any

from rowscout.config import CsvOptions
from rowscout.models import MISSING

FORMULA_PREFIXES = ("=", "+", "-", "@")


def json_default(value: Any) -> str:
    """``json.dumps`` hook: ISO-8601 for dates, ``str`` for anything else."""
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def _json_dumps(value: Any) -> str:
    try:
        return json.dumps(value, ensure_ascii=False, default=json_default, separators=(",", ":"))
    except (TypeError, ValueError):
        # circular containers and other values json cannot walk
        return str(value)


def _format_date(value: date, options: CsvOptions) -> str:
    if options.date_mode == "locale":
        if isinstance(value, datetime):
            return value.strftime("%x %X")
        return value.strftime("%x")
    return value.isoformat()


def _to_text(value: Any, options: CsvOptions) -> str:
    if value is MISSING:
        return options.undefined_value
    if value is None:
        return options.null_value
    if isinstance(value, bool):
        if options.boolean_mode == "numeric":
            return "1" if value else "0"
        return "true" if value else "false"
    if isinstance(value, date):
        return _format_date(value, options)
    if isinstance(value, (list, tuple)):
        if options.array_mode == "join":
            return options.array_join_delimiter.join(_to_text(item, options) for item in value)
        return _json_dumps(value)
    if isinstance(value, dict):
        return _json_dumps(value)
    try:
        return str(value)
    except Exception:
        pass
    try:
        return repr(value)
    except Exception:
        return f"<{type(value).__name__}>"


def _truncate(text: str, max_length: int, suffix: str) -> str:
    if len(suffix) >= max_length:
        return text[:max_length]
    return text[: max_length - len(suffix)] + suffix


def excel_safe(text: str, options: CsvOptions) -> str:
    """Prefix formula-like text with a quote when ``excel_safe_mode`` is on."""
    if options.excel_safe_mode and text.startswith(FORMULA_PREFIXES):
        return "'" + text
    return text


def stringify_cell(value: Any, options: CsvOptions | None = None) -> tuple[str, bool]:
    """Render ``value`` as unescaped cell text.

    Returns the text and whether it was cut to ``max_cell_length``.
    """
    options = options or CsvOptions()
    text = _to_text(value, options)

    if options.trim_string_values:
        text = text.strip()

    truncated = False
    if options.max_cell_length is not None and len(text) > options.max_cell_length:
        text = _truncate(text, options.max_cell_length, options.truncate_cell_suffix)
        truncated = True

    return excel_safe(text, options), truncated


def escape_cell(text: str, options: CsvOptions | None = None) -> str:
    """Quote ``text`` per RFC 4180 when needed (or always, in ``always`` mode)."""
    # Written by hand rather than with csv.writer: delimiters may be several
    # characters long and the last line carries no terminator.
    options = options or CsvOptions()
    needs_quotes = options.quote_mode == "always" or (
        options.delimiter in text or '"' in text or "\n" in text or "\r" in text
    )
    if not needs_quotes:
        return text
    return '"' + text.replace('"', '""') + '"'


def serialize_cell(value: Any, options: CsvOptions | None = None) -> str:
    """Convert one value into a finished, escaped CSV cell."""
    options = options or CsvOptions()
    text, _ = stringify_cell(value, options)
    return escape_cell(text, options)
