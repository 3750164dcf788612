"""
rspec-outline CLI application.
"""

import sys
from pathlib import Path

import typer

from rspec_outline.cli.lsp import lsp_app
from rspec_outline.cli.outline import locate_command, scan_command, show_command
from rspec_outline.cli.utils import setup_logging, version_callback

app = typer.Typer(
    help="""rspec-outline – outlines for RSpec files

Commands:
  • show, locate: operate on a single *_spec.rb file
  • scan: summarize the spec directories of a project
  • lsp run: serve document symbols to an editor
""",
    no_args_is_help=True,
)


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool | None = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and environment information",
    ),
    config: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        exists=True,
        dir_okay=False,
        help="Path to rspec_outline.toml (default: search upward from the target)",
    ),
    log_level: str | None = typer.Option(
        None,
        "--log-level",
        help="Override the configured log level (DEBUG, INFO, ...)",
    ),
) -> None:
    """rspec-outline CLI main callback for global options."""
    ctx.obj = {"config_path": config, "log_level": log_level}
    # Without an explicit level, commands configure logging once their config is resolved
    if log_level:
        setup_logging(log_level.upper())


app.command(name="show")(show_command)
app.command(name="scan")(scan_command)
app.command(name="locate")(locate_command)

app.add_typer(lsp_app, name="lsp")


def main(argv: list[str] | None = None) -> None:
    app(args=argv, standalone_mode=True)


if __name__ == "__main__":
    main(sys.argv[1:])
