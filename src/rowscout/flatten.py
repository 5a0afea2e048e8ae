"""Flatten nested records into single-level rows with dotted keys."""

from __future__ import annotations

from dataclasses import asdict, is_dataclass
from typing import Any


def to_record(obj: Any) -> dict[str, Any]:
    """Convert dataclass or dict to dict."""
    if is_dataclass(obj) and not isinstance(obj, type):
        return asdict(obj)
    if isinstance(obj, dict):
        return obj
    return {"value": obj}


def flatten_row(row: dict[str, Any], max_depth: int = 32) -> dict[str, Any]:
    """Inline nested dicts as ``parent.child`` keys.

    Lists, dates and scalars stay as they are. An empty nested dict adds no
    keys. Dicts nested deeper than ``max_depth`` are kept whole.
    """
    flat: dict[str, Any] = {}

    def _walk(node: dict[str, Any], prefix: str, depth: int) -> None:
        for key, value in node.items():
            name = f"{prefix}.{key}" if prefix else str(key)
            if isinstance(value, dict) and depth < max_depth:
                _walk(value, name, depth + 1)
            else:
                flat[name] = value

    _walk(row, "", 0)
    return flat
