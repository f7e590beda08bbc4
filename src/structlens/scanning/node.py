"""Syntax tree node shape consumed by the extractor, metrics and hashing.

Any object with ``kind``, ``text``, ``children`` and ``start_line`` works as a
node. ``Node`` is the immutable value type for trees built by hand;
``TreeSitterNode`` adapts tree-sitter nodes lazily.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import cached_property
from typing import Any, Iterator, Optional, Protocol, Sequence


class SyntaxNode(Protocol):
    """Read-only view of one syntax tree node."""

    @property
    def kind(self) -> str: ...

    @property
    def text(self) -> str: ...

    @property
    def children(self) -> Sequence["SyntaxNode"]: ...

    @property
    def start_line(self) -> int: ...


@dataclass(frozen=True)
class Node:
    """Immutable syntax node.

    Attributes:
        kind: Grammar node type (e.g. "function_declaration")
        text: Source text spanned by the node
        children: Ordered child nodes
        start_line: 1-indexed line where the node starts
    """

    kind: str
    text: str = ""
    children: tuple[Node, ...] = ()
    start_line: int = 1


def build_node(
    kind: str, *children: Node, text: Optional[str] = None, start_line: int = 1
) -> Node:
    """Build a Node; ``text`` defaults to the children's texts joined by spaces."""
    if text is None:
        text = " ".join(child.text for child in children) if children else kind
    return Node(kind=kind, text=text, children=tuple(children), start_line=start_line)


class TreeSitterNode:
    """Adapter from a ``tree_sitter.Node`` to the SyntaxNode shape.

    Children and text are materialised on first access only.
    """

    def __init__(self, node: Any) -> None:
        self._node = node

    @property
    def kind(self) -> str:
        return self._node.type

    @cached_property
    def text(self) -> str:
        raw = self._node.text
        if raw is None:
            return ""
        return raw.decode("utf-8", errors="replace")

    @cached_property
    def children(self) -> tuple[TreeSitterNode, ...]:
        return tuple(TreeSitterNode(child) for child in self._node.children)

    @property
    def start_line(self) -> int:
        return self._node.start_point[0] + 1

    def __repr__(self) -> str:
        return f"TreeSitterNode({self.kind!r}, line={self.start_line})"


def walk(root: SyntaxNode) -> Iterator[SyntaxNode]:
    """Pre-order traversal that visits every node exactly once.

    Uses an explicit stack so deep trees don't hit the recursion limit.
    """
    stack: list[SyntaxNode] = [root]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children))


def walk_with_depth(root: SyntaxNode) -> Iterator[tuple[SyntaxNode, int]]:
    """Pre-order traversal yielding (node, depth); the root has depth 0."""
    stack: list[tuple[SyntaxNode, int]] = [(root, 0)]
    while stack:
        node, depth = stack.pop()
        yield node, depth
        stack.extend((child, depth + 1) for child in reversed(node.children))


def line_span(node: SyntaxNode) -> int:
    """Number of text lines spanned by a node."""
    return node.text.count("\n") + 1
