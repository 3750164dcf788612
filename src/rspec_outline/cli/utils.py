"""
rspec-outline CLI utilities.

Shared helpers used across CLI modules.
"""

import logging
import platform
from pathlib import Path
from typing import NoReturn

import typer
from rich.console import Console
from rich.markup import escape

from rspec_outline._version import get_version
from rspec_outline.core.config import OutlineConfig, find_config, load_config
from rspec_outline.core.errors import OutlineError

console = Console()
err_console = Console(stderr=True)


def version_callback(value: bool) -> None:
    """Display version and environment information."""
    if value:
        python_version = platform.python_version()
        python_impl = platform.python_implementation()

        # Check LSP server availability
        lsp_available = False
        try:
            # Quieten pygls before the import registers its features
            logging.getLogger("pygls").setLevel(logging.ERROR)

            import rspec_outline.lsp.server  # noqa: F401 - availability check

            lsp_available = True
        except ImportError:
            pass

        typer.echo(f"rspec-outline version {get_version()}")
        typer.echo("")
        typer.echo("Environment:")
        typer.echo(f"  Python:        {python_impl} {python_version}")
        typer.echo(f"  Platform:      {platform.system()} {platform.release()}")
        typer.echo("")
        typer.echo("Features:")
        if lsp_available:
            lsp_status = "✓ Available"
        else:
            lsp_status = "✗ Not available (install pygls and lsprotocol)"
        typer.echo(f"  LSP Server:    {lsp_status}")

        raise typer.Exit()


def setup_logging(level: str) -> None:
    if level not in logging.getLevelNamesMapping():
        fail(f"unknown log level {level!r}")
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def resolve_config(config_path: Path | None, start: Path | None = None) -> OutlineConfig:
    """Load an explicit config file, or search upward from ``start``."""
    try:
        if config_path is not None:
            return load_config(config_path)
        return find_config(start)
    except OutlineError as e:
        fail(str(e))


def fail(message: str) -> NoReturn:
    """Print an error in red and exit with status 1."""
    err_console.print(f"[red]Error: {escape(message)}[/red]")
    raise typer.Exit(code=1)
