"""Tests for configuration loading, file discovery and error formatting."""

from __future__ import annotations

from pathlib import Path

import pytest

from rspec_outline.core.config import (
    CONFIG_FILENAME,
    LOG_LEVEL_ENV,
    OutlineConfig,
    find_config,
    load_config,
)
from rspec_outline.core.errors import ConfigError, ErrorContext, OutlineError
from rspec_outline.core.fileset import discover_spec_files, is_spec_file


@pytest.fixture(autouse=True)
def _no_env_override(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(LOG_LEVEL_ENV, raising=False)


class TestLoadConfig:
    def test_full_file(self, tmp_path: Path) -> None:
        path = tmp_path / CONFIG_FILENAME
        path.write_text(
            "[outline]\n"
            'spec_suffix = "_test.rb"\n'
            'spec_dirs = ["test/", "engines/"]\n'
            "show_hooks = false\n"
            "\n"
            "[logging]\n"
            'level = "debug"\n'
        )
        config = load_config(path)

        assert config.spec_suffix == "_test.rb"
        assert config.spec_dirs == ["test/", "engines/"]
        assert config.show_hooks is False
        assert config.show_lets is True
        assert config.log_level == "DEBUG"
        assert config.source == path

    def test_empty_file_gives_defaults(self, tmp_path: Path) -> None:
        path = tmp_path / CONFIG_FILENAME
        path.write_text("")
        config = load_config(path)
        assert config.spec_suffix == "_spec.rb"
        assert config.spec_dirs == ["spec/"]
        assert config.log_level == "INFO"

    def test_invalid_toml(self, tmp_path: Path) -> None:
        path = tmp_path / CONFIG_FILENAME
        path.write_text("[outline\n")
        with pytest.raises(ConfigError):
            load_config(path)

    def test_invalid_toml_carries_source_lines(self, tmp_path: Path) -> None:
        lines = ["[outline]", "show_hooks = true", "show_lets = = false"]
        path = tmp_path / CONFIG_FILENAME
        path.write_text("\n".join(lines) + "\n")
        with pytest.raises(ConfigError) as exc_info:
            load_config(path)
        context = exc_info.value.context
        # Older tomllib releases do not report a position
        if context is not None:
            assert context.snippet is not None
            assert context.snippet.splitlines()[-1] == lines[context.line - 1]

    @pytest.mark.parametrize("body", ['outline = ["x"]\n', 'logging = "DEBUG"\n'])
    def test_section_must_be_a_table(self, tmp_path: Path, body: str) -> None:
        path = tmp_path / CONFIG_FILENAME
        path.write_text(body)
        with pytest.raises(ConfigError, match="must be a table"):
            load_config(path)

    def test_wrong_types(self, tmp_path: Path) -> None:
        path = tmp_path / CONFIG_FILENAME
        path.write_text('[outline]\nspec_dirs = "spec/"\n')
        with pytest.raises(ConfigError, match="spec_dirs"):
            load_config(path)

    def test_unknown_log_level(self, tmp_path: Path) -> None:
        path = tmp_path / CONFIG_FILENAME
        path.write_text('[logging]\nlevel = "loud"\n')
        with pytest.raises(ConfigError, match="unknown log level"):
            load_config(path)

    def test_env_overrides_level(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        path = tmp_path / CONFIG_FILENAME
        path.write_text('[logging]\nlevel = "INFO"\n')
        monkeypatch.setenv(LOG_LEVEL_ENV, "warning")
        assert load_config(path).log_level == "WARNING"


class TestFindConfig:
    def test_searches_parents(self, tmp_path: Path) -> None:
        (tmp_path / CONFIG_FILENAME).write_text('[outline]\nspec_suffix = "_check.rb"\n')
        nested = tmp_path / "spec" / "models"
        nested.mkdir(parents=True)
        assert find_config(nested).spec_suffix == "_check.rb"

    def test_pyproject_table(self, tmp_path: Path) -> None:
        (tmp_path / "pyproject.toml").write_text(
            '[project]\nname = "x"\n\n[tool.rspec-outline.outline]\nshow_lets = false\n'
        )
        config = find_config(tmp_path)
        assert config.show_lets is False
        assert config.source == tmp_path / "pyproject.toml"

    def test_pyproject_section_must_be_a_table(self, tmp_path: Path) -> None:
        (tmp_path / "pyproject.toml").write_text('[tool.rspec-outline]\noutline = "spec"\n')
        with pytest.raises(ConfigError, match="must be a table"):
            find_config(tmp_path)

    def test_config_file_beats_pyproject(self, tmp_path: Path) -> None:
        (tmp_path / "pyproject.toml").write_text("[tool.rspec-outline.outline]\nshow_lets = false\n")
        (tmp_path / CONFIG_FILENAME).write_text("[outline]\nshow_lets = true\n")
        assert find_config(tmp_path).show_lets is True

    def test_starting_from_a_file(self, tmp_path: Path) -> None:
        (tmp_path / CONFIG_FILENAME).write_text("[outline]\nshow_hooks = false\n")
        spec = tmp_path / "a_spec.rb"
        spec.write_text("")
        assert find_config(spec).show_hooks is False


class TestFileset:
    def test_is_spec_file(self) -> None:
        assert is_spec_file("spec/models/user_spec.rb")
        assert is_spec_file(Path("user_spec.rb"))
        assert not is_spec_file("spec/spec_helper.rb")
        assert not is_spec_file("user_spec.rb.orig")
        assert is_spec_file("user_test.rb", suffix="_test.rb")

    def test_discover(self, spec_project: Path) -> None:
        (spec_project / "spec" / "models" / "zeta_spec.rb").write_text("")
        files = discover_spec_files(spec_project, OutlineConfig())
        assert [f.name for f in files] == ["invoice_spec.rb", "zeta_spec.rb"]

    def test_missing_dirs_are_skipped(self, spec_project: Path) -> None:
        config = OutlineConfig(spec_dirs=["nope/", "spec/"])
        assert len(discover_spec_files(spec_project, config)) == 1


class TestErrors:
    def test_context_location(self) -> None:
        context = ErrorContext(file=Path("rspec_outline.toml"), line=3, column=5)
        assert context.format() == "rspec_outline.toml:3:5"

    def test_context_snippet_marker(self) -> None:
        context = ErrorContext(file=Path("a.toml"), line=1, column=2, snippet="[outline")
        formatted = context.format()
        assert "   1 | [outline" in formatted
        assert formatted.splitlines()[-1] == " " * 8 + "^^^"

    def test_error_message_includes_context(self) -> None:
        error = ConfigError("bad value", ErrorContext(file=Path("x.toml"), line=2))
        assert isinstance(error, OutlineError)
        assert str(error) == "x.toml:2:1\nbad value"
        assert error.message == "bad value"
