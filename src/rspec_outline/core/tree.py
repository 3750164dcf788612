"""Traversal helpers over a parsed forest.

Nodes carry no parent pointer. Positions are addressed by index paths from
the forest root: ``(0, 2)`` is the third child of the first root.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterator, Sequence

from .nodes import NodeKind, SpecNode

NodePath = tuple[int, ...]


def walk(roots: Sequence[SpecNode], prefix: NodePath = ()) -> Iterator[tuple[NodePath, SpecNode]]:
    """Yield ``(path, node)`` depth-first in source order."""
    for index, node in enumerate(roots):
        path = prefix + (index,)
        yield path, node
        yield from walk(node.children, path)


def node_at_path(roots: Sequence[SpecNode], path: NodePath) -> SpecNode:
    """Resolve an index path. Raises IndexError for a path outside the forest."""
    if not path:
        raise IndexError("empty node path")
    node = roots[path[0]]
    for index in path[1:]:
        node = node.children[index]
    return node


def ancestors(roots: Sequence[SpecNode], path: NodePath) -> list[SpecNode]:
    """Nodes from the root down to (and including) the node at ``path``."""
    chain: list[SpecNode] = []
    siblings = roots
    for index in path:
        node = siblings[index]
        chain.append(node)
        siblings = node.children
    return chain


def enclosing_nodes(roots: Sequence[SpecNode], line: int) -> list[SpecNode]:
    """
    Return the chain of nodes enclosing ``line``, outermost first.

    A node covers the lines from its keyword up to the next sibling (or, for
    the last child, up to the end of its parent's span). Lines before the
    first node yield an empty chain.
    """
    chain: list[SpecNode] = []
    siblings: Sequence[SpecNode] = roots
    end: float = float("inf")

    while True:
        found = None
        for index, node in enumerate(siblings):
            next_line = siblings[index + 1].line if index + 1 < len(siblings) else end
            if node.line <= line < next_line:
                found = node
                end = next_line
                break
        if found is None:
            return chain
        chain.append(found)
        siblings = found.children


def count_by_kind(roots: Sequence[SpecNode]) -> Counter[NodeKind]:
    return Counter(node.kind for _, node in walk(roots))
