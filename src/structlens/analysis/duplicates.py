"""Structural clone detection across files.

Functions are grouped by structural hash (see scanning/hashing.py). This is
a structural notion of similarity: two functions with the same control and
data shape are duplicates even when their names and literals differ, and a
single differing control-flow node separates them.
"""

from __future__ import annotations

from typing import Mapping

from ..scanning.models import FileFacts
from .models import DuplicateGroup, DuplicateMember

DEFAULT_DUPLICATE_LIMIT = 10


def detect_duplicates(
    facts: Mapping[str, FileFacts],
    limit: int = DEFAULT_DUPLICATE_LIMIT,
    min_lines: int = 1,
) -> list[DuplicateGroup]:
    """Group functions by structural hash.

    Args:
        facts: path -> FileFacts
        limit: Maximum number of groups returned
        min_lines: Functions shorter than this are ignored

    Returns:
        Groups with at least two members, largest first. Groups of equal
        size keep the order in which their hash was first seen (path
        order, then function order).
    """
    by_hash: dict[str, list[DuplicateMember]] = {}
    for path in sorted(facts):
        for fn in facts[path].functions:
            if fn.line_count < min_lines:
                continue
            by_hash.setdefault(fn.structural_hash, []).append(
                DuplicateMember(file=path, signature=fn.signature)
            )

    groups = [
        DuplicateGroup(hash=h, members=tuple(members))
        for h, members in by_hash.items()
        if len(members) >= 2
    ]
    groups.sort(key=lambda g: -g.size)
    return groups[:limit]
