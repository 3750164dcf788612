"""
Configuration for rspec-outline.

Settings come from ``rspec_outline.toml`` (searched upward from the working
directory) or from a ``[tool.rspec-outline]`` table in ``pyproject.toml``::

    [outline]
    spec_suffix = "_spec.rb"
    spec_dirs = ["spec/"]
    show_hooks = true
    show_lets = true

    [logging]
    level = "INFO"

``RSPEC_OUTLINE_LOG_LEVEL`` overrides the logging level.
"""

import logging
import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .errors import make_config_error
from .nodes import SPEC_FILE_SUFFIX

CONFIG_FILENAME = "rspec_outline.toml"
PYPROJECT_TABLE = "rspec-outline"
LOG_LEVEL_ENV = "RSPEC_OUTLINE_LOG_LEVEL"

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class OutlineConfig:
    """Outline settings."""

    spec_suffix: str = SPEC_FILE_SUFFIX
    spec_dirs: list[str] = field(default_factory=lambda: ["spec/"])
    show_hooks: bool = True
    show_lets: bool = True
    log_level: str = "INFO"
    source: Path | None = None  # File the settings were read from, if any

    @property
    def log_level_value(self) -> int:
        return logging.getLevelName(self.log_level)


def load_config(path: Path) -> OutlineConfig:
    """Load settings from an ``rspec_outline.toml`` file."""
    data = _read_toml(path)
    return _config_from_mapping(data, path)


def find_config(start: Path | None = None) -> OutlineConfig:
    """
    Locate and load configuration, starting at ``start`` (default: cwd).

    ``rspec_outline.toml`` files win over ``pyproject.toml`` tables at the
    same directory level. Returns defaults when nothing is found.
    """
    start = (start or Path.cwd()).resolve()
    if start.is_file():
        start = start.parent

    for directory in (start, *start.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return load_config(candidate)

        pyproject = directory / "pyproject.toml"
        if pyproject.is_file():
            table = _table(_read_toml(pyproject), "tool", pyproject).get(PYPROJECT_TABLE)
            if table is not None:
                return _config_from_mapping(table, pyproject)

    return _apply_env(OutlineConfig())


def _read_toml(path: Path) -> dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise make_config_error(f"Cannot read {path}: {e}")
    try:
        return tomllib.loads(text)
    except tomllib.TOMLDecodeError as e:
        lineno = getattr(e, "lineno", None)
        if lineno:
            raise make_config_error(
                f"Invalid TOML: {e}",
                file=path,
                line=lineno,
                column=getattr(e, "colno", None),
                snippet=_snippet(text, lineno),
            )
        raise make_config_error(f"{path}: invalid TOML: {e}")


def _snippet(text: str, line: int) -> str:
    # Up to two lines of lead-in, ending at the error line
    lines = text.splitlines()
    return "\n".join(lines[max(0, line - 3) : line])


def _table(data: dict[str, Any], key: str, source: Path) -> dict[str, Any]:
    value = data.get(key, {})
    if not isinstance(value, dict):
        raise make_config_error(f"{source}: [{key}] must be a table")
    return value


def _config_from_mapping(data: dict[str, Any], source: Path) -> OutlineConfig:
    if not isinstance(data, dict):
        raise make_config_error(f"{source}: [tool.{PYPROJECT_TABLE}] must be a table")
    outline = _table(data, "outline", source)
    logging_data = _table(data, "logging", source)
    defaults = OutlineConfig()

    spec_suffix = outline.get("spec_suffix", defaults.spec_suffix)
    if not isinstance(spec_suffix, str) or not spec_suffix:
        raise make_config_error(f"{source}: outline.spec_suffix must be a non-empty string")

    spec_dirs = outline.get("spec_dirs", defaults.spec_dirs)
    if not isinstance(spec_dirs, list) or not all(isinstance(d, str) for d in spec_dirs):
        raise make_config_error(f"{source}: outline.spec_dirs must be a list of strings")

    show_hooks = outline.get("show_hooks", defaults.show_hooks)
    show_lets = outline.get("show_lets", defaults.show_lets)
    for key, value in (("show_hooks", show_hooks), ("show_lets", show_lets)):
        if not isinstance(value, bool):
            raise make_config_error(f"{source}: outline.{key} must be true or false")

    config = OutlineConfig(
        spec_suffix=spec_suffix,
        spec_dirs=spec_dirs,
        show_hooks=show_hooks,
        show_lets=show_lets,
        log_level=_normalize_level(logging_data.get("level", defaults.log_level), source),
        source=source,
    )
    return _apply_env(config)


def _apply_env(config: OutlineConfig) -> OutlineConfig:
    override = os.environ.get(LOG_LEVEL_ENV)
    if override:
        config.log_level = _normalize_level(override, Path(LOG_LEVEL_ENV))
    return config


def _normalize_level(value: Any, source: Path) -> str:
    level = str(value).upper()
    if level not in _LOG_LEVELS:
        raise make_config_error(
            f"{source}: unknown log level {value!r} (expected one of {', '.join(_LOG_LEVELS)})"
        )
    return level
