"""Dependency graph models.

Edges are directed: an edge (a, b) means file a imports file b. The graph
is built once from the complete FileFacts set and never mutated.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping


@dataclass(frozen=True)
class Edge:
    source: str
    target: str


@dataclass(frozen=True)
class GraphNode:
    """One file in the graph.

    Attributes:
        imports_from: Files this file imports (resolved)
        imported_by: Files importing this file
        exported_names: Names the file exposes (copied from its FileFacts)
    """

    imports_from: frozenset[str] = frozenset()
    imported_by: frozenset[str] = frozenset()
    exported_names: frozenset[str] = frozenset()


@dataclass(frozen=True)
class Coupling:
    inbound: int
    outbound: int
    total: int


@dataclass(frozen=True)
class DependencyGraph:
    """Import graph over the analyzed files.

    ``nodes`` keeps the files in path order. ``edges`` holds one entry per
    resolved raw import, so two imports of the same file give two edges.
    ``unresolved`` lists, per file, the raw imports that produced no edge.
    """

    nodes: Mapping[str, GraphNode] = field(default_factory=dict)
    edges: tuple[Edge, ...] = ()
    unresolved: Mapping[str, tuple[str, ...]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "nodes", MappingProxyType(dict(self.nodes)))
        object.__setattr__(self, "unresolved", MappingProxyType(dict(self.unresolved)))

    @property
    def edge_count(self) -> int:
        return len(self.edges)

    @property
    def orphans(self) -> list[str]:
        """Files nobody imports (dead files or entry points)."""
        return [path for path, node in self.nodes.items() if not node.imported_by]

    @property
    def entry_points(self) -> list[str]:
        """Imported files that import nothing internal (leaf exports)."""
        return [
            path
            for path, node in self.nodes.items()
            if node.imported_by and not node.imports_from
        ]

    @property
    def coupling(self) -> dict[str, Coupling]:
        """Inbound + outbound file count, for files with any coupling."""
        result: dict[str, Coupling] = {}
        for path, node in self.nodes.items():
            total = len(node.imports_from) + len(node.imported_by)
            if total > 0:
                result[path] = Coupling(
                    inbound=len(node.imported_by), outbound=len(node.imports_from), total=total
                )
        return result

    def adjacency(self) -> dict[str, list[str]]:
        """path -> sorted list of imported paths."""
        return {path: sorted(node.imports_from) for path, node in self.nodes.items()}

    def has_edge(self, source: str, target: str) -> bool:
        node = self.nodes.get(source)
        return node is not None and target in node.imports_from


@dataclass(frozen=True)
class Cycle:
    """An import loop ``[f0, ..., fk, f0]``."""

    path: tuple[str, ...]

    @property
    def files(self) -> tuple[str, ...]:
        """Distinct files on the loop, in order."""
        return self.path[:-1]

    def __len__(self) -> int:
        return len(self.files)


@dataclass(frozen=True)
class CycleGroup:
    """A strongly connected component that contains at least one cycle."""

    nodes: frozenset[str]
    internal_edge_count: int = 0
