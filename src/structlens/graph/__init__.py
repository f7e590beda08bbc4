"""Dependency graph: resolution, construction and cycle detection."""

from .builder import build_dependency_graph
from .cycles import cycle_groups, detect_cycles, tarjan_scc
from .models import Coupling, Cycle, CycleGroup, DependencyGraph, Edge, GraphNode
from .resolver import INDEX_FILENAMES, SOURCE_EXTENSIONS, ImportResolver

__all__ = [
    "build_dependency_graph",
    "detect_cycles",
    "tarjan_scc",
    "cycle_groups",
    "DependencyGraph",
    "GraphNode",
    "Edge",
    "Coupling",
    "Cycle",
    "CycleGroup",
    "ImportResolver",
    "SOURCE_EXTENSIONS",
    "INDEX_FILENAMES",
]
