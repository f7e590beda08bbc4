"""Dependency graph construction from per-file import facts."""

from __future__ import annotations

from typing import Mapping

from ..logging_config import get_logger
from ..scanning.models import FileFacts
from .models import DependencyGraph, Edge, GraphNode
from .resolver import ImportResolver

logger = get_logger(__name__)


def build_dependency_graph(facts: Mapping[str, FileFacts]) -> DependencyGraph:
    """Resolve every file's raw imports and build the graph.

    One edge is recorded per resolved raw import, self-imports included.
    ``imports_from`` / ``imported_by`` are derived from the edges only, so
    the two views always agree. Imports that resolve to nothing are kept
    per file in ``unresolved``.

    Args:
        facts: path -> FileFacts for every analyzed file

    Returns:
        Immutable DependencyGraph with nodes in path order
    """
    paths = sorted(facts)
    resolver = ImportResolver(paths)

    edges: list[Edge] = []
    unresolved: dict[str, tuple[str, ...]] = {}

    for path in paths:
        missing: list[str] = []
        # Raw imports are a set; sort for a deterministic edge order
        for raw in sorted(facts[path].import_paths):
            target = resolver.resolve(raw, path)
            if target is None:
                missing.append(raw)
            else:
                edges.append(Edge(path, target))
        if missing:
            unresolved[path] = tuple(missing)

    imports_from: dict[str, set[str]] = {p: set() for p in paths}
    imported_by: dict[str, set[str]] = {p: set() for p in paths}
    for edge in edges:
        imports_from[edge.source].add(edge.target)
        imported_by[edge.target].add(edge.source)

    nodes = {
        p: GraphNode(
            imports_from=frozenset(imports_from[p]),
            imported_by=frozenset(imported_by[p]),
            exported_names=facts[p].exported_names,
        )
        for p in paths
    }

    logger.debug(
        f"Graph built: {len(nodes)} files, {len(edges)} edges, "
        f"{sum(len(v) for v in unresolved.values())} unresolved imports"
    )
    return DependencyGraph(nodes=nodes, edges=tuple(edges), unresolved=unresolved)
