"""Tests for CLI commands."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from rspec_outline.cli import app


@pytest.fixture
def cli_runner():
    """Return a CLI test runner."""
    return CliRunner()


@pytest.fixture
def spec_file(spec_project: Path) -> Path:
    return spec_project / "spec" / "models" / "invoice_spec.rb"


class TestShow:
    def test_tree_output(self, cli_runner: CliRunner, spec_file: Path) -> None:
        result = cli_runner.invoke(app, ["show", str(spec_file)])
        assert result.exit_code == 0, result.output
        assert "Invoice" in result.output
        assert "assigns a number" in result.output
        assert "(skipped)" in result.output

    def test_hide_hooks(self, cli_runner: CliRunner, spec_file: Path) -> None:
        result = cli_runner.invoke(app, ["show", str(spec_file), "--no-hooks"])
        assert result.exit_code == 0, result.output
        assert "around" not in result.output
        assert "sums line items" in result.output

    def test_json_output(self, cli_runner: CliRunner, spec_file: Path) -> None:
        result = cli_runner.invoke(app, ["show", str(spec_file), "--json"])
        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data["status"] == "ok"
        assert data["nodes"][0]["name"] == "Invoice"
        assert data["nodes"][0]["line"] == 3

    def test_rejects_non_spec_file(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        path = tmp_path / "invoice.rb"
        path.write_text('describe "x" do\n')
        result = cli_runner.invoke(app, ["show", str(path)])
        assert result.exit_code == 1
        assert "RSpec" in result.output

    def test_empty_spec(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        path = tmp_path / "empty_spec.rb"
        path.write_text("")
        result = cli_runner.invoke(app, ["show", str(path)])
        assert result.exit_code == 0
        assert "No RSpec nodes" in result.output


class TestScan:
    def test_summary_table(self, cli_runner: CliRunner, spec_project: Path) -> None:
        result = cli_runner.invoke(app, ["scan", str(spec_project)])
        assert result.exit_code == 0, result.output
        assert "invoice_spec.rb" in result.output
        assert "ok" in result.output

    def test_uses_project_config(self, cli_runner: CliRunner, spec_project: Path) -> None:
        (spec_project / "rspec_outline.toml").write_text('[outline]\nspec_dirs = ["features/"]\n')
        result = cli_runner.invoke(app, ["scan", str(spec_project)])
        assert result.exit_code == 0
        assert "No" in result.output
        assert "invoice_spec.rb" not in result.output


class TestLocate:
    def test_breadcrumb(self, cli_runner: CliRunner, spec_file: Path) -> None:
        result = cli_runner.invoke(app, ["locate", str(spec_file), "18"])
        assert result.exit_code == 0, result.output
        lines = result.output.strip().splitlines()
        assert lines[0] == "Invoice > #finalize > when the invoice is a draft > assigns a number"
        assert lines[1] == f"{spec_file}:17"

    def test_line_before_any_node(self, cli_runner: CliRunner, spec_file: Path) -> None:
        result = cli_runner.invoke(app, ["locate", str(spec_file), "1"])
        assert result.exit_code == 1

    def test_line_past_end_of_file(self, cli_runner: CliRunner, spec_file: Path) -> None:
        result = cli_runner.invoke(app, ["locate", str(spec_file), "9999"])
        assert result.exit_code == 1
        assert "outside" in result.output


class TestGlobalOptions:
    def test_version(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert "rspec-outline version" in result.output

    def test_bad_log_level(self, cli_runner: CliRunner, spec_file: Path) -> None:
        result = cli_runner.invoke(app, ["--log-level", "loud", "show", str(spec_file)])
        assert result.exit_code == 1

    def test_broken_config_in_working_directory_is_ignored(
        self,
        cli_runner: CliRunner,
        spec_file: Path,
        tmp_path_factory: pytest.TempPathFactory,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        elsewhere = tmp_path_factory.mktemp("elsewhere")
        (elsewhere / "rspec_outline.toml").write_text("[outline\n")
        monkeypatch.chdir(elsewhere)

        assert cli_runner.invoke(app, ["show", str(spec_file)]).exit_code == 0
        assert cli_runner.invoke(app, ["lsp", "check"]).exit_code == 0

    def test_broken_project_config_fails_cleanly(
        self, cli_runner: CliRunner, spec_project: Path, spec_file: Path
    ) -> None:
        (spec_project / "rspec_outline.toml").write_text('outline = ["x"]\n')
        result = cli_runner.invoke(app, ["show", str(spec_file)])
        assert result.exit_code == 1
        assert "table" in result.output
