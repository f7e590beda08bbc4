"""Structural hashing of function subtrees.

The hash covers node kinds only, never text, and does not descend into
identifier or comment nodes. Two functions that differ only in names,
literals or comments therefore hash identically, while any difference in
control-flow shape changes the hash.
"""

from __future__ import annotations

import hashlib

from .node import SyntaxNode

HASH_LENGTH = 8
SEPARATOR = ":"


def _skipped(kind: str) -> bool:
    return "identifier" in kind or "comment" in kind


def structural_signature(node: SyntaxNode) -> str:
    """Pre-order node-kind sequence joined with ``:``."""
    kinds: list[str] = []
    stack = [node]
    while stack:
        current = stack.pop()
        kinds.append(current.kind)
        stack.extend(child for child in reversed(current.children) if not _skipped(child.kind))
    return SEPARATOR.join(kinds)


def structural_hash(node: SyntaxNode) -> str:
    """Fixed-width digest of the node's structural signature."""
    digest = hashlib.md5(structural_signature(node).encode("utf-8"), usedforsecurity=False)
    return digest.hexdigest()[:HASH_LENGTH]
