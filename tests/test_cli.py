"""Tests for the command line interface."""

import json

import pytest
import yaml
from typer.testing import CliRunner

from rowscout.cli.main import app


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def result_file(tmp_path, graphql_payload):
    path = tmp_path / "GetUsers.json"
    path.write_text(json.dumps(graphql_payload))
    return path


class TestDiscoverCLI:
    def test_reports_path(self, runner, result_file):
        result = runner.invoke(app, ["discover", str(result_file)])
        assert result.exit_code == 0
        assert "root.users" in result.output

    def test_raw_keeps_data_field(self, runner, result_file):
        result = runner.invoke(app, ["discover", str(result_file), "--raw"])
        assert result.exit_code == 0
        assert "root.data.users" in result.output

    def test_show_preview(self, runner, result_file):
        result = runner.invoke(app, ["discover", str(result_file), "--show"])
        assert result.exit_code == 0
        assert "Lisbon" in result.output

    def test_nothing_found(self, runner, tmp_path):
        path = tmp_path / "empty.json"
        path.write_text(json.dumps({"data": {"stats": {"total": 1}}}))
        result = runner.invoke(app, ["discover", str(path)])
        assert result.exit_code == 0
        assert "No exportable rows" in result.output

    def test_invalid_json(self, runner, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{not json")
        result = runner.invoke(app, ["discover", str(path)])
        assert result.exit_code == 1

    def test_min_rows_option(self, runner, result_file):
        result = runner.invoke(app, ["discover", str(result_file), "--min-rows", "5"])
        assert result.exit_code == 0
        assert "No exportable rows" in result.output


class TestExportCLI:
    def test_writes_csv(self, runner, result_file, tmp_path):
        out = tmp_path / "out"
        result = runner.invoke(app, ["export", str(result_file), "-o", str(out)])
        assert result.exit_code == 0
        written = out / "GetUsers-result.csv"
        assert written.exists()
        assert written.read_text().startswith("id,name,address.city,address.zip")

    def test_custom_name_and_format(self, runner, result_file, tmp_path):
        result = runner.invoke(
            app,
            ["export", str(result_file), "-f", "jsonl", "-n", "users", "-o", str(tmp_path)],
        )
        assert result.exit_code == 0
        lines = (tmp_path / "users-result.jsonl").read_text().strip().split("\n")
        assert len(lines) == 2

    def test_stdout_with_options(self, runner, result_file):
        result = runner.invoke(
            app,
            ["export", str(result_file), "--stdout", "--row-numbers", "--max-rows", "1"],
        )
        assert result.exit_code == 0
        assert result.output.splitlines()[:2] == [
            "#,id,name,address.city,address.zip",
            "1,1,Ana,Lisbon,1000",
        ]

    def test_unsupported_format(self, runner, result_file):
        result = runner.invoke(app, ["export", str(result_file), "-f", "xml"])
        assert result.exit_code == 1

    def test_nothing_to_export(self, runner, tmp_path):
        path = tmp_path / "empty.json"
        path.write_text(json.dumps({"data": {"stats": {"total": 1}}}))
        result = runner.invoke(app, ["export", str(path), "-o", str(tmp_path)])
        assert result.exit_code == 0
        assert not (tmp_path / "empty-result.csv").exists()


class TestConfigOption:
    def test_invalid_section_values_fall_back(self, runner, result_file, tmp_path):
        config_file = tmp_path / "config.yml"
        config_file.write_text(yaml.dump({
            "search": {"max_depth": "deep"},
            "csv": {"quote_mode": "sometimes"},
        }))
        result = runner.invoke(app, ["-c", str(config_file), "discover", str(result_file)])
        assert result.exit_code == 0
        assert "root.users" in result.output

    def test_invalid_top_level_value_exits_cleanly(self, runner, result_file, tmp_path):
        config_file = tmp_path / "config.yml"
        config_file.write_text(yaml.dump({"log_level": "LOUD"}))
        result = runner.invoke(app, ["-c", str(config_file), "discover", str(result_file)])
        assert result.exit_code == 1
        assert not isinstance(result.exception, ValueError)

    def test_malformed_yaml_exits_cleanly(self, runner, result_file, tmp_path):
        config_file = tmp_path / "config.yml"
        config_file.write_text("search: [unclosed")
        result = runner.invoke(app, ["-c", str(config_file), "discover", str(result_file)])
        assert result.exit_code == 1
        assert not isinstance(result.exception, yaml.YAMLError)
