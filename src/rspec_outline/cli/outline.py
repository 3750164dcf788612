"""
Outline CLI commands.

- show:   print the outline of one spec file (tree or JSON)
- scan:   summarize every spec file under the configured directories
- locate: show which groups and example enclose a line
"""

from __future__ import annotations

import json
from pathlib import Path

import typer
from rich.markup import escape
from rich.table import Table
from rich.tree import Tree

from rspec_outline.core.config import OutlineConfig
from rspec_outline.core.errors import make_spec_file_error
from rspec_outline.core.fileset import discover_spec_files, is_spec_file
from rspec_outline.core.nodes import EXAMPLE_KINDS, GROUP_KINDS, SpecNode
from rspec_outline.core.parser import parse_path, parse_text
from rspec_outline.core.tree import count_by_kind, enclosing_nodes, walk
from rspec_outline.outline import is_visible

from .utils import console, fail, resolve_config, setup_logging


def _config_from_context(ctx: typer.Context, start: Path | None = None) -> OutlineConfig:
    options = ctx.obj or {}
    config = resolve_config(options.get("config_path"), start)
    if not options.get("log_level"):
        setup_logging(config.log_level)
    return config


def _require_spec_file(path: Path, config: OutlineConfig) -> None:
    if not is_spec_file(path, config.spec_suffix):
        fail(str(make_spec_file_error(f"not an RSpec file (expected *{config.spec_suffix})", path)))


def _node_label(node: SpecNode) -> str:
    label = f"[bold]{node.kind.value}[/bold] {escape(node.name)} [dim]:{node.line}[/dim]"
    if node.is_skipped:
        label += " [yellow](skipped)[/yellow]"
    return label


def _add_branches(tree: Tree, nodes: list[SpecNode], config: OutlineConfig) -> None:
    for node in nodes:
        if not is_visible(node, config):
            continue
        branch = tree.add(_node_label(node))
        _add_branches(branch, node.children, config)


def show_command(
    ctx: typer.Context,
    path: Path = typer.Argument(..., help="Spec file to outline"),
    as_json: bool = typer.Option(False, "--json", help="Print the parse result as JSON"),
    hooks: bool | None = typer.Option(None, "--hooks/--no-hooks", help="Show hook nodes"),
    lets: bool | None = typer.Option(None, "--lets/--no-lets", help="Show let declarations"),
) -> None:
    """Print the outline of a spec file."""
    config = _config_from_context(ctx, path.parent)
    _require_spec_file(path, config)
    if hooks is not None:
        config.show_hooks = hooks
    if lets is not None:
        config.show_lets = lets

    result = parse_path(path)

    if as_json:
        typer.echo(json.dumps(result.model_dump(mode="json"), indent=2))
        if not result.success:
            raise typer.Exit(code=1)
        return

    if not result.success:
        fail(f"Failed to parse RSpec file: {result.error}")

    if not result.nodes:
        console.print(f"[yellow]No RSpec nodes found in {escape(str(path))}[/yellow]")
        return

    tree = Tree(f"[cyan]{escape(str(path))}[/cyan]")
    _add_branches(tree, result.nodes, config)
    console.print(tree)


def scan_command(
    ctx: typer.Context,
    root: Path = typer.Argument(Path("."), help="Project root (default: current directory)"),
) -> None:
    """Summarize all spec files under the configured spec directories."""
    config = _config_from_context(ctx, root)
    files = discover_spec_files(root, config)

    if not files:
        console.print(
            f"[yellow]No *{escape(config.spec_suffix)} files found under "
            f"{', '.join(config.spec_dirs)}[/yellow]"
        )
        return

    table = Table(title="RSpec files")
    table.add_column("File")
    table.add_column("Groups", justify="right")
    table.add_column("Examples", justify="right")
    table.add_column("Skipped", justify="right")
    table.add_column("Status")

    failures = 0
    for file in files:
        result = parse_path(file)
        try:
            shown = str(file.relative_to(root.resolve()))
        except ValueError:
            shown = str(file)

        if not result.success:
            failures += 1
            table.add_row(escape(shown), "-", "-", "-", f"[red]{escape(result.error)}[/red]")
            continue

        counts = count_by_kind(result.nodes)
        skipped = sum(1 for _, node in walk(result.nodes) if node.is_skipped)
        table.add_row(
            escape(shown),
            str(sum(counts[kind] for kind in GROUP_KINDS)),
            str(sum(counts[kind] for kind in EXAMPLE_KINDS)),
            str(skipped),
            "[green]ok[/green]",
        )

    console.print(table)
    if failures:
        raise typer.Exit(code=1)


def locate_command(
    ctx: typer.Context,
    path: Path = typer.Argument(..., help="Spec file"),
    line: int = typer.Argument(..., min=1, help="1-based line number"),
) -> None:
    """Show the groups and example that enclose a line."""
    config = _config_from_context(ctx, path.parent)
    _require_spec_file(path, config)

    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        fail(str(make_spec_file_error(f"cannot read file: {e}", path)))

    line_count = len(content.split("\n"))
    if line > line_count:
        message = f"line {line} is outside the file ({line_count} lines)"
        fail(str(make_spec_file_error(message, path)))

    result = parse_text(content, str(path))
    if not result.success:
        fail(f"Failed to parse RSpec file: {result.error}")

    chain = enclosing_nodes(result.nodes, line)
    if not chain:
        fail(str(make_spec_file_error("no RSpec node encloses this line", path, line)))

    typer.echo(" > ".join(node.name for node in chain))
    typer.echo(f"{path}:{chain[-1].line}")
