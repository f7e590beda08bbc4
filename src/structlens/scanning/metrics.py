"""Structural counts for one syntax tree."""

from __future__ import annotations

from .models import FileMetrics
from .node import SyntaxNode, walk_with_depth

BRANCH_KINDS = frozenset(
    {
        "if_statement",
        "if_expression",
        "if_let_expression",
        "switch_statement",
        "switch_expression",
        "case_statement",
        "conditional_expression",
        "ternary_expression",
        "match_expression",
        "match_statement",
        "expression_switch_statement",
        "type_switch_statement",
        "select_statement",
    }
)

LOOP_KINDS = frozenset(
    {
        "while_statement",
        "for_statement",
        "for_in_statement",
        "for_of_statement",
        "do_statement",
        "enhanced_for_statement",
        "foreach_statement",
        "for_range_loop",
        "loop_expression",
        "while_expression",
        "for_expression",
    }
)

RETURN_KINDS = frozenset({"return_statement", "return_expression"})

# Ruby names these nodes after their keyword; the bare keyword tokens other
# grammars emit are leaves and must not be counted.
KEYWORD_BRANCH_KINDS = frozenset({"if", "unless", "case", "elsif"})
KEYWORD_LOOP_KINDS = frozenset({"while", "until", "for"})
KEYWORD_RETURN_KINDS = frozenset({"return"})

COMMENT_PREFIXES = ("//", "#", "/*", "*")


def compute_metrics(root: SyntaxNode, source: str) -> FileMetrics:
    """Count nodes, depth, branches, loops and returns; measure lines.

    Args:
        root: Tree root (depth 0)
        source: Full source text

    Returns:
        FileMetrics for the tree
    """
    node_count = 0
    max_depth = 0
    branches = loops = returns = 0

    for node, depth in walk_with_depth(root):
        node_count += 1
        if depth > max_depth:
            max_depth = depth
        kind = node.kind
        compound = bool(node.children)
        if kind in BRANCH_KINDS or (compound and kind in KEYWORD_BRANCH_KINDS):
            branches += 1
        elif kind in LOOP_KINDS or (compound and kind in KEYWORD_LOOP_KINDS):
            loops += 1
        elif kind in RETURN_KINDS or (compound and kind in KEYWORD_RETURN_KINDS):
            returns += 1

    lines = source.split("\n")
    loc = len(lines)
    blank = 0
    comments = 0
    for line in lines:
        stripped = line.strip()
        if not stripped:
            blank += 1
        elif stripped.startswith(COMMENT_PREFIXES):
            comments += 1

    return FileMetrics(
        node_count=node_count,
        max_depth=max_depth,
        branch_count=branches,
        loop_count=loops,
        return_count=returns,
        loc=loc,
        sloc=loc - blank - comments,
        blank_lines=blank,
        comment_lines=comments,
        density=node_count / loc,
    )
