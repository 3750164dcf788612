"""
Entry point for the rspec-outline LSP server.

Usage:
    python -m rspec_outline.lsp
"""

from .server import start_server

if __name__ == "__main__":
    start_server()
