"""
LSP (Language Server Protocol) CLI commands.

Commands for running the rspec-outline language server.
"""

import typer

lsp_app = typer.Typer(
    help="Language Server Protocol (LSP) commands.",
    no_args_is_help=True,
)


@lsp_app.command("run")
def lsp_run(
    tcp: bool = typer.Option(
        False,
        "--tcp",
        help="Use TCP transport (for debugging)",
    ),
    port: int = typer.Option(
        2087,
        "--port",
        help="TCP port (only used with --tcp)",
    ),
) -> None:
    """
    Start the rspec-outline LSP server.

    By default uses stdio transport for editor integration.
    Use --tcp --port for debugging with a TCP connection.
    """
    try:
        if tcp:
            typer.echo(f"Starting rspec-outline LSP server on TCP port {port}...", err=True)
            from rspec_outline.lsp.server import server

            server.start_tcp("127.0.0.1", port)
        else:
            from rspec_outline.lsp import start_server

            start_server()
    except ImportError as e:
        typer.echo(
            f"Error: LSP dependencies not installed: {e}\n"
            "Install with: pip install pygls lsprotocol",
            err=True,
        )
        raise typer.Exit(code=1)
    except KeyboardInterrupt:
        typer.echo("\nLSP server stopped.", err=True)
    except Exception as e:
        typer.echo(f"Error starting LSP server: {e}", err=True)
        raise typer.Exit(code=1)


@lsp_app.command("check")
def lsp_check() -> None:
    """
    Verify LSP dependencies are installed and show version info.
    """
    errors = []

    try:
        import pygls

        pygls_version = getattr(pygls, "__version__", "unknown")
        typer.echo(f"pygls:        {pygls_version}")
    except ImportError:
        errors.append("pygls")

    try:
        import lsprotocol

        lsprotocol_version = getattr(lsprotocol, "__version__", "unknown")
        typer.echo(f"lsprotocol:   {lsprotocol_version}")
    except ImportError:
        errors.append("lsprotocol")

    if errors:
        typer.echo(
            f"\nMissing dependencies: {', '.join(errors)}\nInstall with: pip install pygls lsprotocol",
            err=True,
        )
        raise typer.Exit(code=1)

    typer.echo("\nAll LSP dependencies installed.")
