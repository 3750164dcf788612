"""
Structural parser for RSpec files.

Recovers the outline of a spec file (example groups, examples, hooks and
``let`` declarations) from indentation alone. Each keyword line becomes a
``SpecNode``; its parent is the nearest preceding node whose keyword line is
indented strictly less. Block terminators (``end``, ``}``) are never looked
at, so files in the middle of an edit still produce a useful outline.

Entry points:
    ``parse_text(content, file_path) -> ParseResult``
    ``parse_path(path) -> ParseResult``

Neither raises: any exception during the scan becomes a ``ParseFailure``.
"""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path

from .nodes import (
    HOOK_KINDS,
    VALID_KINDS,
    NodeKind,
    ParseFailure,
    ParseResult,
    ParseSuccess,
    SpecNode,
)

logger = logging.getLogger(__name__)

# Optional ``RSpec.`` / ``Rspec.`` receiver, keyword, whitespace, rest of line.
NODE_PATTERN = re.compile(
    r"^\s*(?:R[sS]pec\.)?"
    r"(describe|context|it|around|before|prepend_before|after|append_after|let"
    r"|xdescribe|xcontext|xit)\s+([^\r\n\u2028\u2029]+)",
    re.IGNORECASE,
)

# Name extraction, tried in order against the text after the keyword.
_QUOTED_NAME = re.compile(r"^[\"']([^\"']+)[\"']")
_BARE_NAME = re.compile(r"^:?(\w+)")
_PAREN_NAME = re.compile(r"^\(([^)]+)\)")
_NAME_PATTERNS = (_QUOTED_NAME, _BARE_NAME, _PAREN_NAME)

_LEADING_WS = re.compile(r"^(\s*)")
_TOKEN_SPLIT = re.compile(r"\s+")
_BRACKETS = re.compile(r"[{}()]")

_VALID_KEYWORDS = frozenset(kind.value for kind in VALID_KINDS)


class StructuralParser:
    """
    Single-pass, indentation-aware scanner.

    The parser holds no state between calls; one instance can be shared
    freely. ``parse`` builds a fresh forest every time.
    """

    def parse(self, content: str, file_path: str) -> ParseResult:
        logger.debug("Parsing file: %s (%d characters)", file_path, len(content))
        try:
            roots = self._scan(content, file_path)
        except Exception as e:
            logger.warning("Parsing failed for %s: %s", file_path, e)
            return ParseFailure(error=str(e) or "Unknown parsing error")

        logger.debug("Parsed %d root nodes from %s", len(roots), file_path)
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "Node tree:\n%s",
                json.dumps([node.model_dump(mode="json") for node in roots], indent=2),
            )
        return ParseSuccess(nodes=roots)

    def _scan(self, content: str, file_path: str) -> list[SpecNode]:
        lines = content.split("\n")
        roots: list[SpecNode] = []
        # Open nodes, outermost first; indentation strictly increases upward.
        stack: list[SpecNode] = []
        logger.debug("Processing %d lines", len(lines))

        for index, line in enumerate(lines):
            line_number = index + 1

            match = NODE_PATTERN.match(line)
            if not match:
                continue

            keyword, rest = match.groups()
            logger.debug("Found RSpec node at line %d: %s", line_number, keyword)
            keyword = keyword.lower()

            if keyword not in _VALID_KEYWORDS:
                continue
            kind = NodeKind(keyword)

            node = SpecNode(
                kind=kind,
                name=extract_name(rest, kind),
                line=line_number,
                file_path=file_path,
            )
            node._indent = indentation_level(line)

            while stack:
                candidate = stack[-1]
                if candidate._indent < node._indent:
                    candidate.children.append(node)
                    break
                stack.pop()
            else:
                roots.append(node)

            stack.append(node)

        return roots


def extract_name(rest: str, kind: NodeKind) -> str:
    """
    Derive the display name from the text following a keyword.

    Hooks are named after their keyword. Otherwise the first of a quoted
    string, a bare word (optionally a ``:symbol``), or a parenthesized group
    wins; failing all three, the first token with brackets removed is used.
    """
    if kind in HOOK_KINDS:
        return kind.value

    for pattern in _NAME_PATTERNS:
        match = pattern.match(rest)
        if match:
            return match.group(1).strip()

    return _BRACKETS.sub("", _TOKEN_SPLIT.split(rest)[0]).strip()


def indentation_level(line: str) -> int:
    """Count leading whitespace characters. Tabs count as one character."""
    match = _LEADING_WS.match(line)
    return len(match.group(1)) if match else 0


_default_parser = StructuralParser()


def parse_text(content: str, file_path: str) -> ParseResult:
    """
    Parse the full text of a spec file.

    Args:
        content: Complete file contents
        file_path: Identifier echoed into every node (never opened)

    Returns:
        ParseSuccess with the root nodes, or ParseFailure with a message
    """
    return _default_parser.parse(content, file_path)


def parse_path(path: Path | str) -> ParseResult:
    """
    Read a spec file from disk and parse it.

    Read errors are reported as a ParseFailure, like parse errors.
    """
    path = Path(path)
    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Failed to read %s: %s", path, e)
        return ParseFailure(error=str(e) or "Failed to read file")
    return parse_text(content, str(path))
