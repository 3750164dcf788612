"""
rspec-outline Language Server Protocol implementation.

Provides IDE features for RSpec files:
- Document symbols (outline panel)
- Outline commands for sidebar tree views
- Outline change notifications
"""

from .server import start_server

__all__ = ["start_server"]
