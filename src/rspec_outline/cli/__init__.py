"""
rspec-outline CLI package.

- main.py: application and global options
- outline.py: show / scan / locate commands
- lsp.py: language server commands
- utils.py: shared utilities
"""

from rspec_outline.cli.lsp import lsp_app
from rspec_outline.cli.main import app, main
from rspec_outline.cli.utils import version_callback

__all__ = [
    "app",
    "main",
    "lsp_app",
    "version_callback",
]
