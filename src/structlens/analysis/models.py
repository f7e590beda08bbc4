"""Whole-codebase result models.

Everything here is computed once per run from the completed per-file
results and handed back read-only.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

from ..graph.models import Cycle, CycleGroup, DependencyGraph
from ..scanning.models import FileFacts, FileMetrics

# ── Per-file phase fold ────────────────────────────────────────────


@dataclass(frozen=True)
class ParseFailure:
    """A file whose tree could not be produced or processed."""

    path: str
    message: str


@dataclass(frozen=True)
class Aggregate:
    """Fold of all per-file results, keyed by relative path in path order."""

    facts: Mapping[str, FileFacts] = field(default_factory=dict)
    metrics: Mapping[str, FileMetrics] = field(default_factory=dict)
    languages: Mapping[str, str] = field(default_factory=dict)
    failures: tuple[ParseFailure, ...] = ()

    def __post_init__(self) -> None:
        for name in ("facts", "metrics", "languages"):
            value = getattr(self, name)
            if not isinstance(value, MappingProxyType):
                object.__setattr__(self, name, MappingProxyType(dict(value)))

    @property
    def file_count(self) -> int:
        return len(self.facts)


# ── Duplicates ─────────────────────────────────────────────────────


@dataclass(frozen=True)
class DuplicateMember:
    file: str
    signature: str


@dataclass(frozen=True)
class DuplicateGroup:
    """Functions sharing one structural hash (always two or more)."""

    hash: str
    members: tuple[DuplicateMember, ...]

    @property
    def size(self) -> int:
        return len(self.members)

    @property
    def files(self) -> list[str]:
        """Distinct files involved, in member order."""
        return list(dict.fromkeys(m.file for m in self.members))


# ── Dead code ──────────────────────────────────────────────────────


@dataclass(frozen=True)
class DeadCodeReport:
    """Usage classification of the analyzed files.

    ``unused_exports``, ``orphaned_files`` and ``possibly_dead`` never
    share a file, and test files appear in none of them.

    Attributes:
        test_files: Files recognised as tests by path convention
        reexport_aggregators: index/lib/main-style files that re-export
        reexported: Files covered by an aggregator
        unused_exports: Files exporting names nobody really imports
        orphaned_files: Files with no importers and no imports
        possibly_dead: Single-consumer leaves
    """

    test_files: tuple[str, ...] = ()
    reexport_aggregators: tuple[str, ...] = ()
    reexported: tuple[str, ...] = ()
    unused_exports: tuple[str, ...] = ()
    orphaned_files: tuple[str, ...] = ()
    possibly_dead: tuple[str, ...] = ()

    def category(self, path: str) -> str | None:
        """Non-test bucket a file landed in, if any."""
        for name in ("unused_exports", "orphaned_files", "possibly_dead"):
            if path in getattr(self, name):
                return name
        return None


# ── Summary ────────────────────────────────────────────────────────


@dataclass(frozen=True)
class LanguageStats:
    files: int = 0
    lines: int = 0
    functions: int = 0
    types: int = 0
    imports: int = 0
    exports: int = 0
    branches: int = 0


@dataclass(frozen=True)
class Hotspot:
    """A file with many branches or a deep tree."""

    file: str
    branches: int
    depth: int
    loc: int


@dataclass(frozen=True)
class FileSize:
    file: str
    lines: int


@dataclass(frozen=True)
class FunctionRef:
    """A function singled out by a threshold, with the measured value."""

    file: str
    name: str
    start_line: int
    value: int


@dataclass(frozen=True)
class Distribution:
    """Summary statistics of one numeric series."""

    count: int = 0
    mean: float = 0.0
    median: float = 0.0
    p90: float = 0.0
    max: float = 0.0
    gini: float = 0.0


@dataclass(frozen=True)
class ModuleStats:
    """Per top-level directory counts.

    Attributes:
        files: Files under the directory
        internal_edges: Edges between two files of the module
        outbound_edges: Edges leaving the module
        inbound_edges: Edges entering the module
    """

    files: int = 0
    internal_edges: int = 0
    outbound_edges: int = 0
    inbound_edges: int = 0


@dataclass(frozen=True)
class CodebaseSummary:
    """Aggregate metrics over the whole codebase."""

    total_files: int = 0
    total_lines: int = 0
    total_sloc: int = 0
    failed_files: int = 0
    languages: Mapping[str, LanguageStats] = field(default_factory=dict)
    mean_depth: float = 0.0
    max_depth: int = 0
    hotspots: tuple[Hotspot, ...] = ()
    size_distribution: Mapping[str, int] = field(default_factory=dict)
    largest_files: tuple[FileSize, ...] = ()
    function_lengths: Distribution = Distribution()
    function_params: Distribution = Distribution()
    long_functions: tuple[FunctionRef, ...] = ()
    many_param_functions: tuple[FunctionRef, ...] = ()
    deeply_nested_functions: tuple[FunctionRef, ...] = ()
    top_calls: tuple[tuple[str, int], ...] = ()
    top_signatures: tuple[tuple[str, int], ...] = ()
    top_types: tuple[tuple[str, int], ...] = ()
    top_imports: tuple[tuple[str, int], ...] = ()
    identifier_counts: Mapping[str, int] = field(default_factory=dict)
    pattern_totals: Mapping[str, int] = field(default_factory=dict)
    modules: Mapping[str, ModuleStats] = field(default_factory=dict)
    edge_count: int = 0
    unresolved_import_count: int = 0
    cycle_member_count: int = 0


# ── Full result ────────────────────────────────────────────────────


@dataclass(frozen=True)
class AnalysisResult:
    """Everything one run produces."""

    root: str
    aggregate: Aggregate
    graph: DependencyGraph
    cycles: tuple[Cycle, ...]
    cycle_groups: tuple[CycleGroup, ...]
    duplicates: tuple[DuplicateGroup, ...]
    dead_code: DeadCodeReport
    summary: CodebaseSummary

    @property
    def facts(self) -> Mapping[str, FileFacts]:
        return self.aggregate.facts

    @property
    def metrics(self) -> Mapping[str, FileMetrics]:
        return self.aggregate.metrics

    @property
    def failures(self) -> tuple[ParseFailure, ...]:
        return self.aggregate.failures
