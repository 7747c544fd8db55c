"""Tests for the querycomplete command line."""

from __future__ import annotations

import json

import pytest

from querycomplete.cli import main


@pytest.fixture
def schema_file(tmp_path):
    path = tmp_path / "schema.json"
    path.write_text(
        json.dumps(
            {
                "dialect": "mysql",
                "tables": ["users", "orders"],
                "columns": {"users": [{"name": "id", "type": "int"}, "email"]},
            }
        )
    )
    return path


def _json_output(capsys):
    return json.loads(capsys.readouterr().out)


class TestSqlCommand:
    """Tests for the sql subcommand."""

    def test_json_output(self, settings_path, schema_file, capsys):
        code = main(["sql", "SELECT * FROM us", "--metadata", str(schema_file), "--json"])
        payload = _json_output(capsys)
        assert code == 0
        assert payload["insertFrom"] == 14
        assert payload["context"]["expectedType"] == "table_or_schema"
        assert payload["candidates"][0]["label"] == "users"

    def test_cursor_option(self, settings_path, schema_file, capsys):
        code = main(["sql", "SELECT  FROM users", "-c", "7", "-m", str(schema_file), "--json"])
        labels = [c["label"] for c in _json_output(capsys)["candidates"]]
        assert code == 0
        assert "email" in labels

    def test_read_from_file(self, settings_path, tmp_path, capsys):
        query = tmp_path / "query.sql"
        query.write_text("SEL")
        code = main(["sql", "--file", str(query), "--json"])
        assert code == 0
        assert "SELECT" in [c["label"] for c in _json_output(capsys)["candidates"]]

    def test_missing_text(self, settings_path, capsys):
        assert main(["sql"]) == 1
        assert "Error:" in capsys.readouterr().out

    def test_missing_metadata_file(self, settings_path, tmp_path, capsys):
        code = main(["sql", "SELECT ", "-m", str(tmp_path / "nope.json")])
        assert code == 1
        assert "not found" in capsys.readouterr().out

    def test_table_output(self, settings_path, schema_file, capsys):
        code = main(["sql", "SELECT * FROM us", "-m", str(schema_file)])
        out = capsys.readouterr().out
        assert code == 0
        assert "users" in out

    def test_comment_has_no_suggestions(self, settings_path, capsys):
        code = main(["sql", "SELECT 1 -- FR"])
        assert code == 0
        assert "(no suggestions)" in capsys.readouterr().out


class TestMongoCommand:
    """Tests for the mongo subcommand."""

    def test_json_output(self, settings_path, capsys):
        text = '{"find": "users", "filter": {"age": {"$g'
        code = main(["mongo", text, "--json"])
        payload = _json_output(capsys)
        labels = [c["label"] for c in payload["candidates"]]
        assert code == 0
        assert payload["context"]["kind"] == "query"
        assert payload["insertFrom"] == text.index('"$g')
        assert "$gt" in labels

    def test_invalid_metadata(self, settings_path, tmp_path, capsys):
        path = tmp_path / "meta.json"
        path.write_text('{"fields": ["a"]}')
        code = main(["mongo", '{"', "-m", str(path)])
        assert code == 1
        assert "Error:" in capsys.readouterr().out


class TestConfigCommand:
    """Tests for the config subcommand."""

    def test_show_defaults(self, settings_path, capsys):
        assert main(["config", "show"]) == 0
        payload = _json_output(capsys)
        assert payload["settingsPath"] == str(settings_path)
        assert payload["default_dialect"] == "postgres"
        assert payload["completion_limits"]["max_total"] == 50

    def test_set_limit(self, settings_path, capsys):
        assert main(["config", "set-limit", "max_total", "5"]) == 0
        capsys.readouterr()
        main(["config", "show"])
        assert _json_output(capsys)["completion_limits"]["max_total"] == 5

    def test_set_limit_rejects_zero(self, settings_path, capsys):
        assert main(["config", "set-limit", "max_total", "0"]) == 1

    def test_limit_applies_to_completion(self, settings_path, capsys):
        main(["config", "set-limit", "max_total", "2"])
        capsys.readouterr()
        main(["sql", "", "--json"])
        assert len(_json_output(capsys)["candidates"]) == 2

    def test_set_dialect(self, settings_path, capsys):
        assert main(["config", "set-dialect", "sqlite"]) == 0
        capsys.readouterr()
        main(["config", "show"])
        assert _json_output(capsys)["default_dialect"] == "sqlite"

    def test_set_invalid_dialect(self, settings_path, capsys):
        assert main(["config", "set-dialect", "oracle"]) == 1
        assert "Invalid dialect" in capsys.readouterr().out

    def test_settings_flag(self, settings_path, tmp_path, capsys):
        path = tmp_path / "custom.json"
        assert main(["--settings", str(path), "config", "set-dialect", "mysql"]) == 0
        assert json.loads(path.read_text())["default_dialect"] == "mysql"


class TestNoCommand:
    def test_prints_help(self, capsys):
        assert main([]) == 1
        assert "usage" in capsys.readouterr().out.lower()
