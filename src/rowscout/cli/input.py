"""Read result payloads for CLI commands."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from rowscout.safe_json import safe_json_parse


class PayloadError(Exception):
    """Raised when an input file cannot be used as a payload."""


def load_payload(source: Path, unwrap_data: bool = True) -> Any:
    """Load JSON from ``source``.

    A GraphQL response (a dict with a ``data`` key) is unwrapped to that field.
    """
    try:
        text = source.read_text(encoding="utf-8-sig")
    except OSError as exc:
        raise PayloadError(f"Cannot read {source}: {exc}") from exc

    parsed = safe_json_parse(text)
    if not parsed.ok:
        raise PayloadError(f"{source} is not valid JSON: {parsed.error_message}")

    payload = parsed.data
    if unwrap_data and isinstance(payload, dict) and "data" in payload:
        return payload["data"]
    return payload
