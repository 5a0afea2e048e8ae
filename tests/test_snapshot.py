"""Tests for execution snapshots."""

from datetime import datetime

from rowscout.snapshot import build_execution_snapshot


class TestBuildExecutionSnapshot:
    def test_records_export_path_and_count(self, graphql_payload):
        snapshot = build_execution_snapshot(
            payload=graphql_payload,
            result='{"data": {}}',
            execution_time_ms=12.5,
            response_size_bytes=256,
        )
        assert snapshot.export_rows_path == "root.data.users"
        assert snapshot.export_rows_count == 2
        assert snapshot.execution_time_ms == 12.5
        assert snapshot.response_size_bytes == 256
        assert snapshot.payload is graphql_payload

    def test_without_table(self):
        snapshot = build_execution_snapshot({"ok": True}, "{}", 1, 2)
        assert snapshot.export_rows_path is None
        assert snapshot.export_rows_count is None

    def test_created_at_is_iso_utc(self):
        snapshot = build_execution_snapshot(None, "null", 0, 0)
        parsed = datetime.fromisoformat(snapshot.created_at)
        assert parsed.tzinfo is not None
