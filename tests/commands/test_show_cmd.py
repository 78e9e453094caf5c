"""Tests for the show CLI command."""

from __future__ import annotations

import json
from importlib.resources import files
from pathlib import Path

import pytest
from click.testing import CliRunner

from sqlsheet.cli import cli


class TestShowCommand:
    def test_bytes_identical(self, cli_runner: CliRunner, sheet_path: Path) -> None:
        result = cli_runner.invoke(cli, ["show", str(sheet_path)])
        assert result.exit_code == 0
        assert result.stdout_bytes == sheet_path.read_bytes()

    def test_crlf_and_no_final_newline(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        path = tmp_path / "crlf.md"
        raw = b"# A\r\n\r\n```sql\r\nSELECT 1;\r\n```"
        path.write_bytes(raw)
        result = cli_runner.invoke(cli, ["show", str(path)])
        assert result.stdout_bytes == raw

    def test_builtin(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["show"])
        assert result.exit_code == 0
        expected = files("sqlsheet").joinpath("data", "sql-cheatsheet.md").read_bytes()
        assert result.stdout_bytes == expected

    def test_stdin(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["show", "-"], input=b"# Piped\r\ntext")
        assert result.exit_code == 0
        assert result.stdout_bytes == b"# Piped\r\ntext"

    def test_configured_document(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        docs = tmp_path / "docs"
        docs.mkdir()
        (docs / "mine.md").write_bytes(b"# Mine\n")
        (tmp_path / "sqlsheet.toml").write_text('[document]\npath = "docs/mine.md"\n')
        result = cli_runner.invoke(cli, ["show"])
        assert result.stdout_bytes == b"# Mine\n"

    def test_other_encoding(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        path = tmp_path / "latin.md"
        raw = "# Café\n".encode("latin-1")
        path.write_bytes(raw)
        result = cli_runner.invoke(
            cli, ["show", str(path)], env={"SQLSHEET_DOCUMENT__ENCODING": "latin-1"}
        )
        assert result.exit_code == 0
        assert result.stdout_bytes == raw

    @pytest.mark.parametrize(
        ("encoding", "raw"),
        [
            ("utf-8-sig", b"\xef\xbb\xbf# T\n"),
            ("utf-16", b"\xfe\xff" + "# T\n".encode("utf-16-be")),
        ],
    )
    def test_byte_order_mark_kept(
        self, cli_runner: CliRunner, tmp_path: Path, encoding: str, raw: bytes
    ) -> None:
        path = tmp_path / "bom.md"
        path.write_bytes(raw)
        result = cli_runner.invoke(
            cli, ["show", str(path)], env={"SQLSHEET_DOCUMENT__ENCODING": encoding}
        )
        assert result.exit_code == 0
        assert result.stdout_bytes == raw

    def test_missing(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        result = cli_runner.invoke(cli, ["show", str(tmp_path / "nope.md")])
        assert result.exit_code == 1
        assert result.stdout == ""
        assert "Document not found" in result.stderr

    def test_missing_json(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        missing = tmp_path / "nope.md"
        result = cli_runner.invoke(cli, ["--json", "show", str(missing)])
        assert result.exit_code == 1
        assert result.stdout == ""
        payload = json.loads(result.stderr)
        assert payload["ok"] is False
        assert payload["error"]["code"] == "NOT_FOUND"
        assert payload["error"]["detail"]["path"] == str(missing)

    def test_directory(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        result = cli_runner.invoke(cli, ["--json", "show", str(tmp_path)])
        assert result.exit_code == 1
        assert json.loads(result.stderr)["error"]["code"] == "READ_ERROR"

    def test_json(self, cli_runner: CliRunner, sheet_path: Path, sample_text: str) -> None:
        result = cli_runner.invoke(cli, ["--json", "show", str(sheet_path)])
        assert result.exit_code == 0
        data = json.loads(result.stdout)["data"]
        assert data["text"] == sample_text
        assert data["bytes"] == len(sample_text.encode())

    def test_verbose_logs_stay_off_stdout(self, cli_runner: CliRunner, sheet_path: Path) -> None:
        result = cli_runner.invoke(cli, ["-v", "--log-json", "show", str(sheet_path)])
        assert result.exit_code == 0
        assert result.stdout_bytes == sheet_path.read_bytes()
        assert "Loaded" in result.stderr
