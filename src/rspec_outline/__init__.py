"""
rspec-outline - indentation-based outlines for RSpec files.

Parses ``*_spec.rb`` files into a tree of example groups, examples, hooks
and ``let`` declarations for editor outline views and symbol navigation.
"""

from __future__ import annotations

from ._version import __version__
from .core.errors import ConfigError, OutlineError, SpecFileError
from .core.nodes import NodeKind, ParseFailure, ParseResult, ParseSuccess, SpecNode
from .core.parser import parse_path, parse_text

__all__ = [
    "__version__",
    "NodeKind",
    "SpecNode",
    "ParseSuccess",
    "ParseFailure",
    "ParseResult",
    "parse_text",
    "parse_path",
    "OutlineError",
    "ConfigError",
    "SpecFileError",
]
