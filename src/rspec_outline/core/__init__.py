"""
Core of rspec-outline: node model, structural parser and tree helpers.
"""

from .errors import ConfigError, ErrorContext, OutlineError, SpecFileError
from .nodes import (
    EXAMPLE_KINDS,
    GROUP_KINDS,
    HOOK_KINDS,
    SKIPPED_KINDS,
    SPEC_FILE_SUFFIX,
    VALID_KINDS,
    NodeKind,
    ParseFailure,
    ParseResult,
    ParseSuccess,
    SpecNode,
)
from .parser import StructuralParser, parse_path, parse_text

__all__ = [
    # Errors
    "OutlineError",
    "ConfigError",
    "SpecFileError",
    "ErrorContext",
    # Node model
    "NodeKind",
    "SpecNode",
    "ParseSuccess",
    "ParseFailure",
    "ParseResult",
    "VALID_KINDS",
    "SKIPPED_KINDS",
    "HOOK_KINDS",
    "GROUP_KINDS",
    "EXAMPLE_KINDS",
    "SPEC_FILE_SUFFIX",
    # Parser
    "StructuralParser",
    "parse_text",
    "parse_path",
]
