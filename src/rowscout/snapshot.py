"""Capture execution results for later comparison."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from rowscout.discovery import find_exportable_rows
from rowscout.models import ExecutionSnapshot


def build_execution_snapshot(
    payload: Any,
    result: str,
    execution_time_ms: float,
    response_size_bytes: int,
) -> ExecutionSnapshot:
    """Record a result together with the path and size of its first table.

    Both the raw payload and the pretty-printed result are kept so runs can be
    diffed while the export badge (path, row count) stays cheap to render.
    """
    exportable = find_exportable_rows(payload)
    return ExecutionSnapshot(
        created_at=datetime.now(timezone.utc).isoformat(),
        result=result,
        payload=payload,
        execution_time_ms=execution_time_ms,
        response_size_bytes=response_size_bytes,
        export_rows_path=exportable.path if exportable else None,
        export_rows_count=len(exportable.rows) if exportable else None,
    )
