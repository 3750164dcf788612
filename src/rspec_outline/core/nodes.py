"""
Node model for RSpec outlines.

A parse produces a forest of ``SpecNode`` values. Ownership runs one way:
parents hold their ``children``; there is no back-reference. Ancestors are
found through explicit index paths (see :mod:`rspec_outline.core.tree`).
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field, PrivateAttr, computed_field


class NodeKind(str, Enum):
    """Keywords recognized as outline elements."""

    # Example groups
    DESCRIBE = "describe"
    CONTEXT = "context"
    XDESCRIBE = "xdescribe"
    XCONTEXT = "xcontext"

    # Examples
    IT = "it"
    XIT = "xit"

    # Hooks
    BEFORE = "before"
    AFTER = "after"
    AROUND = "around"
    PREPEND_BEFORE = "prepend_before"
    APPEND_AFTER = "append_after"

    # Shared values
    LET = "let"


VALID_KINDS: frozenset[NodeKind] = frozenset(NodeKind)
SKIPPED_KINDS: frozenset[NodeKind] = frozenset(
    {NodeKind.XDESCRIBE, NodeKind.XCONTEXT, NodeKind.XIT}
)
HOOK_KINDS: frozenset[NodeKind] = frozenset(
    {
        NodeKind.BEFORE,
        NodeKind.AFTER,
        NodeKind.AROUND,
        NodeKind.PREPEND_BEFORE,
        NodeKind.APPEND_AFTER,
    }
)
GROUP_KINDS: frozenset[NodeKind] = frozenset(
    {NodeKind.DESCRIBE, NodeKind.CONTEXT, NodeKind.XDESCRIBE, NodeKind.XCONTEXT}
)
EXAMPLE_KINDS: frozenset[NodeKind] = frozenset({NodeKind.IT, NodeKind.XIT})

SPEC_FILE_SUFFIX = "_spec.rb"


class SpecNode(BaseModel):
    """
    One recognized outline element.

    Attributes:
        kind: Keyword that introduced the element
        name: Display label (for hooks, the keyword itself)
        line: 1-based line number of the keyword
        file_path: Identifier of the file the element came from
        children: Nested elements in source order
    """

    kind: NodeKind
    name: str
    line: int = Field(ge=1)
    file_path: str
    children: list[SpecNode] = Field(default_factory=list)

    # Leading whitespace count of the keyword line; only used while parsing.
    _indent: int = PrivateAttr(default=0)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_skipped(self) -> bool:
        return self.kind in SKIPPED_KINDS

    @property
    def is_hook(self) -> bool:
        return self.kind in HOOK_KINDS


class ParseSuccess(BaseModel):
    """Successful parse: the root nodes of the forest."""

    status: Literal["ok"] = "ok"
    nodes: list[SpecNode] = Field(default_factory=list)

    @property
    def success(self) -> bool:
        return True


class ParseFailure(BaseModel):
    """Failed parse. No nodes are returned alongside the error."""

    status: Literal["error"] = "error"
    error: str

    @property
    def success(self) -> bool:
        return False


ParseResult = Annotated[Union[ParseSuccess, ParseFailure], Field(discriminator="status")]
