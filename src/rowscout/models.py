"""Data types flowing between rowscout components."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


class _Missing:
    """Marker for a key that is absent from a row."""

    _instance: _Missing | None = None

    def __new__(cls) -> _Missing:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Any = _Missing()


@dataclass
class ExportableRows:
    """The winning array of records found in a payload, with search diagnostics."""

    rows: list[dict[str, Any]]
    path: str
    depth: int
    score: float
    candidate_count: int = 0
    inspected_node_count: int = 0


@dataclass
class ConversionResult:
    """CSV text plus the counters describing how it was produced."""

    csv: str
    headers: list[str] = field(default_factory=list)
    row_count: int = 0
    skipped_row_count: int = 0
    truncated_row_count: int = 0
    truncated_cell_count: int = 0


@dataclass
class SafeJsonParseResult:
    """Outcome of parsing untrusted JSON text."""

    ok: bool
    data: Any = None
    error_message: str | None = None


@dataclass
class ExecutionSnapshot:
    """A captured execution result, kept for comparing runs."""

    created_at: str
    result: str
    payload: Any
    execution_time_ms: float
    response_size_bytes: int
    export_rows_path: str | None = None
    export_rows_count: int | None = None
