"""Codebase-level aggregate metrics.

Size buckets (lines per file):
    tiny    < 50
    small   < 200
    medium  < 500
    large   < 1000
    huge    >= 1000
"""

from __future__ import annotations

from collections import Counter
from typing import Optional, Sequence

import numpy as np

from ..config import AnalysisConfig
from ..graph.models import CycleGroup, DependencyGraph
from .models import (
    Aggregate,
    CodebaseSummary,
    Distribution,
    FileSize,
    FunctionRef,
    Hotspot,
    LanguageStats,
    ModuleStats,
)

SIZE_BUCKETS = (("tiny", 50), ("small", 200), ("medium", 500), ("large", 1000))
LARGEST_FILES = 10
TOP_CALLS = 15
TOP_SIGNATURES = 10
TOP_TYPES = 5
TOP_IMPORTS = 10


def size_bucket(lines: int) -> str:
    for name, upper in SIZE_BUCKETS:
        if lines < upper:
            return name
    return "huge"


def gini_coefficient(values: Sequence[float]) -> float:
    """Gini coefficient in [0, 1] with n/(n-1) sample correction.

    G = (2 * sum(i * x_i)) / (n * sum(x_i)) - (n + 1) / n for sorted x.
    0 means all values equal, 1 means one value holds everything.
    """
    n = len(values)
    if n < 2:
        return 0.0
    arr = np.sort(np.asarray(values, dtype=float))
    total = arr.sum()
    if total <= 0:
        return 0.0
    weighted = float(np.sum(np.arange(1, n + 1) * arr))
    gini = (2.0 * weighted) / (n * total) - (n + 1.0) / n
    gini *= n / (n - 1)
    return max(0.0, min(1.0, gini))


def describe(values: Sequence[float]) -> Distribution:
    if not values:
        return Distribution()
    arr = np.asarray(values, dtype=float)
    return Distribution(
        count=len(values),
        mean=float(np.mean(arr)),
        median=float(np.median(arr)),
        p90=float(np.percentile(arr, 90)),
        max=float(np.max(arr)),
        gini=gini_coefficient(values),
    )


def _module_of(path: str) -> str:
    return path.split("/", 1)[0] if "/" in path else "."


def module_stats(graph: DependencyGraph) -> dict[str, ModuleStats]:
    """File and edge counts per top-level directory (``.`` for root files)."""
    files: Counter[str] = Counter(_module_of(p) for p in graph.nodes)
    internal: Counter[str] = Counter()
    outbound: Counter[str] = Counter()
    inbound: Counter[str] = Counter()
    for edge in graph.edges:
        src, dst = _module_of(edge.source), _module_of(edge.target)
        if src == dst:
            internal[src] += 1
        else:
            outbound[src] += 1
            inbound[dst] += 1
    return {
        name: ModuleStats(
            files=files[name],
            internal_edges=internal[name],
            outbound_edges=outbound[name],
            inbound_edges=inbound[name],
        )
        for name in sorted(files)
    }


def _most_common(counter: Counter[str], limit: Optional[int] = None) -> tuple[tuple[str, int], ...]:
    """Entries by descending count, ties broken by name."""
    ranked = sorted(counter.items(), key=lambda kv: (-kv[1], kv[0]))
    return tuple(ranked if limit is None else ranked[:limit])


def summarize(
    aggregate: Aggregate,
    graph: DependencyGraph,
    cycle_groups: Sequence[CycleGroup] = (),
    config: Optional[AnalysisConfig] = None,
) -> CodebaseSummary:
    """Roll per-file facts and metrics up into codebase-level numbers."""
    config = config or AnalysisConfig()

    languages: dict[str, dict[str, int]] = {}
    hotspots: list[Hotspot] = []
    sizes: list[FileSize] = []
    depths: list[int] = []
    fn_lengths: list[int] = []
    fn_params: list[int] = []
    long_fns: list[FunctionRef] = []
    many_params: list[FunctionRef] = []
    nested: list[FunctionRef] = []
    patterns: Counter[str] = Counter()
    signatures: Counter[str] = Counter()
    type_names: Counter[str] = Counter()
    imports: Counter[str] = Counter()
    identifiers: Counter[str] = Counter()
    total_lines = 0
    total_sloc = 0

    for path, facts in aggregate.facts.items():
        metrics = aggregate.metrics[path]
        language = aggregate.languages.get(path, facts.language)

        stats = languages.setdefault(language, dict.fromkeys(LanguageStats.__dataclass_fields__, 0))
        stats["files"] += 1
        stats["lines"] += metrics.loc
        stats["functions"] += len(facts.functions)
        stats["types"] += sum(t.occurrence_count for t in facts.types.values())
        stats["imports"] += len(facts.import_paths)
        stats["exports"] += len(facts.exported_names)
        stats["branches"] += metrics.branch_count

        total_lines += metrics.loc
        total_sloc += metrics.sloc
        depths.append(metrics.max_depth)
        sizes.append(FileSize(file=path, lines=metrics.loc))

        if (
            metrics.branch_count > config.hotspot_branch_threshold
            or metrics.max_depth > config.hotspot_depth_threshold
        ):
            hotspots.append(
                Hotspot(
                    file=path,
                    branches=metrics.branch_count,
                    depth=metrics.max_depth,
                    loc=metrics.loc,
                )
            )

        for fn in facts.functions:
            fn_lengths.append(fn.line_count)
            fn_params.append(fn.param_count)
            if fn.line_count > config.long_function_lines:
                long_fns.append(FunctionRef(path, fn.name, fn.start_line, fn.line_count))
            if fn.param_count > config.many_params_threshold:
                many_params.append(FunctionRef(path, fn.name, fn.start_line, fn.param_count))
            if fn.nesting_depth > config.deep_nesting_threshold:
                nested.append(FunctionRef(path, fn.name, fn.start_line, fn.nesting_depth))

        patterns.update(facts.patterns)
        signatures.update(fn.signature for fn in facts.functions)
        type_names.update({name: t.occurrence_count for name, t in facts.types.items()})
        imports.update(facts.import_paths)
        identifiers.update(facts.identifiers)

    hotspots.sort(key=lambda h: -(h.branches + h.depth))
    sizes.sort(key=lambda s: -s.lines)
    for refs in (long_fns, many_params, nested):
        refs.sort(key=lambda r: -r.value)

    distribution = dict.fromkeys([name for name, _ in SIZE_BUCKETS] + ["huge"], 0)
    for size in sizes:
        distribution[size_bucket(size.lines)] += 1

    calls = Counter({k[len("call:"):]: v for k, v in patterns.items() if k.startswith("call:")})
    other_patterns = {k: v for k, v in sorted(patterns.items()) if not k.startswith("call:")}

    return CodebaseSummary(
        total_files=aggregate.file_count,
        total_lines=total_lines,
        total_sloc=total_sloc,
        failed_files=len(aggregate.failures),
        languages={name: LanguageStats(**values) for name, values in sorted(languages.items())},
        mean_depth=float(np.mean(depths)) if depths else 0.0,
        max_depth=max(depths, default=0),
        hotspots=tuple(hotspots[: config.hotspot_limit]),
        size_distribution=distribution,
        largest_files=tuple(sizes[:LARGEST_FILES]),
        function_lengths=describe(fn_lengths),
        function_params=describe(fn_params),
        long_functions=tuple(long_fns),
        many_param_functions=tuple(many_params),
        deeply_nested_functions=tuple(nested),
        top_calls=tuple(calls.most_common(TOP_CALLS)),
        top_signatures=_most_common(signatures, TOP_SIGNATURES),
        top_types=_most_common(type_names, TOP_TYPES),
        top_imports=_most_common(imports, TOP_IMPORTS),
        identifier_counts=dict(_most_common(identifiers)),
        pattern_totals=other_patterns,
        modules=module_stats(graph),
        edge_count=graph.edge_count,
        unresolved_import_count=sum(len(v) for v in graph.unresolved.values()),
        cycle_member_count=sum(len(g.nodes) for g in cycle_groups),
    )
