"""Tests for export module."""

import csv
import json
from datetime import date, datetime
from io import StringIO

import pytest

from rowscout.config import CsvOptions, Settings
from rowscout.export import (
    MIME_TYPES,
    download_text_file,
    export_payload,
    format_payload,
    format_rows,
    result_filename,
    sanitize_filename,
)


class TestFilenames:
    def test_sanitize_replaces_illegal_chars(self):
        assert sanitize_filename('a\\b/c:d*e?f"g<h>i|j') == "a_b_c_d_e_f_g_h_i_j"

    def test_sanitize_keeps_legal_chars(self):
        assert sanitize_filename("users-2024.csv") == "users-2024.csv"

    def test_result_filename(self):
        assert result_filename("GetUsers", "csv") == "GetUsers-result.csv"

    def test_result_filename_sanitized(self):
        assert result_filename("a/b", "json") == "a_b-result.json"


class TestFormatRows:
    def test_json_output(self):
        result = format_rows([{"id": 1}, {"id": 2}], "json")
        assert json.loads(result) == [{"id": 1}, {"id": 2}]

    def test_json_is_indented(self):
        result = format_rows([{"id": 1}], "json")
        assert result == '[\n  {\n    "id": 1\n  }\n]'

    def test_jsonl_output(self):
        result = format_rows([{"id": 1}, {"id": 2}], "jsonl")
        lines = [line for line in result.strip().split("\n") if line]
        assert len(lines) == 2
        assert json.loads(lines[1]) == {"id": 2}

    def test_jsonl_ends_with_newline(self):
        assert format_rows([{"id": 1}], "jsonl").endswith("\n")

    def test_jsonl_empty(self):
        assert format_rows([], "jsonl") == ""

    def test_json_dates_are_iso(self):
        result = format_rows([{"at": datetime(2024, 1, 2, 3, 4, 5)}], "json")
        assert json.loads(result) == [{"at": "2024-01-02T03:04:05"}]

    def test_jsonl_dates_are_iso(self):
        result = format_rows([{"day": date(2024, 1, 2)}], "jsonl")
        assert result == '{"day": "2024-01-02"}\n'

    def test_csv_output(self):
        result = format_rows([{"id": 1, "meta": {"tag": "x"}}], "csv")
        rows = list(csv.DictReader(StringIO(result)))
        assert rows == [{"id": "1", "meta.tag": "x"}]

    def test_csv_options_applied(self):
        result = format_rows([{"a": 1, "b": 2}], "csv", CsvOptions(delimiter="\t"))
        assert result == "a\tb\n1\t2"

    def test_csv_empty_records(self):
        assert format_rows([], "csv") == ""

    def test_unsupported_format_raises(self):
        with pytest.raises(ValueError, match="Unsupported format"):
            format_rows([], "xml")


class TestFormatPayload:
    def test_json_keeps_whole_payload(self, graphql_payload):
        result = format_payload(graphql_payload, "json")
        assert json.loads(result) == graphql_payload

    def test_csv_uses_discovered_rows(self, graphql_payload):
        result = format_payload(graphql_payload, "csv")
        assert result.split("\n")[0] == "id,name,address.city,address.zip"
        assert result.split("\n")[1] == "1,Ana,Lisbon,1000"

    def test_jsonl_uses_discovered_rows(self, connection_payload):
        result = format_payload(connection_payload, "jsonl")
        first = json.loads(result.split("\n")[0])
        assert first == {"node": {"name": "alpha", "stars": 10}}

    def test_nothing_found(self):
        assert format_payload({"stats": {"total": 1}}, "csv") == ""

    def test_search_options_forwarded(self, graphql_payload):
        assert format_payload(graphql_payload, "csv", {"min_rows": 5}) == ""

    def test_unsupported_format_raises(self):
        with pytest.raises(ValueError, match="Unsupported format"):
            format_payload({}, "xml")


class TestDownloadTextFile:
    def test_writes_file(self, tmp_output):
        path = download_text_file("a,b\n1,2", "out.csv", MIME_TYPES["csv"], tmp_output)
        assert path == tmp_output / "out.csv"
        assert path.read_text() == "a,b\n1,2"

    def test_empty_content_is_noop(self, tmp_output):
        assert download_text_file("", "empty.txt", directory=tmp_output) is None
        assert not (tmp_output / "empty.txt").exists()

    def test_sanitizes_filename(self, tmp_output):
        path = download_text_file("x", "a:b.txt", directory=tmp_output)
        assert path.name == "a_b.txt"

    def test_creates_parent_dirs(self, tmp_path):
        target = tmp_path / "nested" / "dir"
        path = download_text_file("x", "out.txt", directory=target)
        assert path.exists()

    def test_preserves_crlf(self, tmp_output):
        path = download_text_file("a\r\n1", "crlf.csv", directory=tmp_output)
        assert path.read_bytes() == b"a\r\n1"


class TestExportPayload:
    def test_default_csv(self, graphql_payload, settings, tmp_path):
        path = export_payload(graphql_payload, "users", settings=settings)
        assert path == tmp_path / "users-result.csv"
        assert path.read_text().startswith("id,name")

    def test_json(self, graphql_payload, settings):
        path = export_payload(graphql_payload, "users", "json", settings=settings)
        assert path.suffix == ".json"
        assert json.loads(path.read_text()) == graphql_payload

    def test_default_name(self, graphql_payload, settings):
        path = export_payload(graphql_payload, fmt="jsonl", settings=settings)
        assert path.name == "export-result.jsonl"

    def test_nothing_to_export(self, settings):
        assert export_payload({"stats": {}}, "empty", settings=settings) is None

    def test_settings_csv_options(self, graphql_payload, tmp_path):
        settings = Settings(output={"directory": str(tmp_path)}, csv={"delimiter": ";"})
        path = export_payload(graphql_payload, "users", settings=settings)
        assert path.read_text().split("\n")[0] == "id;name;address.city;address.zip"
