"""Conversion of analysis results into JSON-ready primitives."""

from __future__ import annotations

from dataclasses import asdict
from typing import Any

from ..graph.models import DependencyGraph
from ..scanning.models import FileFacts
from .models import AnalysisResult, CodebaseSummary


def facts_to_dict(facts: FileFacts) -> dict[str, Any]:
    return {
        "path": facts.path,
        "language": facts.language,
        "functions": [asdict(fn) for fn in facts.functions],
        "types": {name: asdict(t) for name, t in facts.types.items()},
        "import_paths": sorted(facts.import_paths),
        "exported_names": sorted(facts.exported_names),
        "patterns": dict(sorted(facts.patterns.items())),
        "constants": sorted(facts.constants),
        "mutable_globals": sorted(facts.mutable_globals),
        "identifiers": dict(sorted(facts.identifiers.items())),
    }


def graph_to_dict(graph: DependencyGraph) -> dict[str, Any]:
    return {
        "nodes": {
            path: {
                "imports_from": sorted(node.imports_from),
                "imported_by": sorted(node.imported_by),
            }
            for path, node in graph.nodes.items()
        },
        "edges": [[e.source, e.target] for e in graph.edges],
        "edge_count": graph.edge_count,
        "orphans": graph.orphans,
        "entry_points": graph.entry_points,
        "coupling": {path: asdict(c) for path, c in graph.coupling.items()},
        "unresolved": {path: list(imports) for path, imports in graph.unresolved.items()},
    }


def summary_to_dict(summary: CodebaseSummary) -> dict[str, Any]:
    data = asdict(summary)
    data["top_calls"] = [{"callee": c, "count": n} for c, n in summary.top_calls]
    data["top_signatures"] = [{"signature": s, "count": n} for s, n in summary.top_signatures]
    data["top_types"] = [{"name": t, "count": n} for t, n in summary.top_types]
    data["top_imports"] = [{"specifier": i, "count": n} for i, n in summary.top_imports]
    data["identifier_counts"] = dict(summary.identifier_counts)
    return data


def result_to_dict(result: AnalysisResult, include_files: bool = True) -> dict[str, Any]:
    """Full result as nested dicts / lists / scalars.

    Args:
        result: Analysis result
        include_files: Include per-file facts and metrics (large on big trees)
    """
    data: dict[str, Any] = {
        "root": result.root,
        "summary": summary_to_dict(result.summary),
        "graph": graph_to_dict(result.graph),
        "cycles": [list(c.path) for c in result.cycles],
        "cycle_groups": [
            {"files": sorted(g.nodes), "internal_edges": g.internal_edge_count}
            for g in result.cycle_groups
        ],
        "duplicates": [
            {
                "hash": group.hash,
                "count": group.size,
                "members": [asdict(m) for m in group.members],
            }
            for group in result.duplicates
        ],
        "dead_code": asdict(result.dead_code),
        "failures": [asdict(f) for f in result.failures],
    }
    if include_files:
        data["files"] = {
            path: {
                "facts": facts_to_dict(facts),
                "metrics": asdict(result.metrics[path]),
            }
            for path, facts in result.facts.items()
        }
    return data
