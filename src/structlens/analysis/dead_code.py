"""Dead-code classification from the dependency graph and naming conventions.

Order of classification for each file:
  1. test files (path conventions) are set aside first
  2. orphaned: nobody imports it and it imports nothing, not an entry point
  3. unused exports: exports names but has no real importer and no
     re-export cover; entry points and config files are exempt
  4. possibly dead: exactly one real importer and no imports of its own

A *re-export aggregator* is an index/lib/main-style file that both imports
and exports. Files it imports are covered by it, and the aggregator itself
does not count as a real importer of them.
"""

from __future__ import annotations

import posixpath
import re

from ..graph.models import DependencyGraph
from .models import DeadCodeReport

AGGREGATOR_STEMS = frozenset({"index", "lib", "main", "mod", "__init__"})

ENTRY_POINT_STEMS = frozenset(
    {
        "index",
        "main",
        "app",
        "server",
        "cli",
        "__main__",
        "setup",
        "manage",
        "lib",
        "mod",
        "program",
        "bootstrap",
        "entry",
        "run",
        "start",
    }
)

TEST_PATH_PATTERNS = (
    re.compile(r"(^|/)(test|tests|__tests__|spec|specs)/"),
    re.compile(r"(^|/)test_[^/]*$"),
    re.compile(r"_test\.[^/]+$"),
    re.compile(r"\.(test|spec)\.[^/]+$"),
    re.compile(r"Tests?\.(java|cs|kt)$"),
    re.compile(r"_spec\.rb$"),
    re.compile(r"(^|/)conftest\.py$"),
)

CONFIG_NAME = re.compile(
    r"(^|[._-])(config|conf|configuration|settings|rc|constants?|env)([._-]|$)"
)


def _stem(path: str) -> str:
    """Lowercased file name without extension."""
    return posixpath.splitext(posixpath.basename(path))[0].lower()


def is_test_file(path: str) -> bool:
    return any(pattern.search(path) for pattern in TEST_PATH_PATTERNS)


def is_entry_point_name(path: str) -> bool:
    return _stem(path) in ENTRY_POINT_STEMS


def is_config_file(path: str) -> bool:
    name = posixpath.basename(path).lower()
    return bool(CONFIG_NAME.search(posixpath.splitext(name)[0])) or name.startswith(".")


def classify_dead_code(graph: DependencyGraph) -> DeadCodeReport:
    """Partition files into usage buckets.

    Pure function of the graph; the graph is not modified and no edges are
    synthesised for re-export cover.
    """
    aggregators = [
        path
        for path, node in graph.nodes.items()
        if _stem(path) in AGGREGATOR_STEMS and node.imports_from and node.exported_names
    ]
    aggregator_set = set(aggregators)

    reexported: set[str] = set()
    for path in aggregators:
        reexported.update(t for t in graph.nodes[path].imports_from if t != path)

    tests: list[str] = []
    unused: list[str] = []
    orphaned: list[str] = []
    possibly_dead: list[str] = []

    for path, node in graph.nodes.items():
        if is_test_file(path):
            tests.append(path)
            continue

        real_importers = node.imported_by - aggregator_set - {path}
        entry = is_entry_point_name(path)
        covered = path in reexported

        if not node.imported_by and not node.imports_from and not entry:
            orphaned.append(path)
        elif (
            not entry
            and not is_config_file(path)
            and node.exported_names
            and not real_importers
            and not covered
        ):
            unused.append(path)
        elif len(real_importers) == 1 and not node.imports_from and not covered:
            possibly_dead.append(path)

    return DeadCodeReport(
        test_files=tuple(tests),
        reexport_aggregators=tuple(aggregators),
        reexported=tuple(sorted(reexported)),
        unused_exports=tuple(unused),
        orphaned_files=tuple(orphaned),
        possibly_dead=tuple(possibly_dead),
    )
