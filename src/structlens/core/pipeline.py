"""Analysis pipeline: per-file phase, join barrier, then whole-codebase phases.

    files ──► [thread pool] parse + extract_facts + compute_metrics
          ──► fold into Aggregate (path order)
          ──► build_dependency_graph ──► detect_cycles / cycle_groups
                                     └──► classify_dead_code
          ──► detect_duplicates
          ──► summarize

The per-file phase shares nothing between files. The whole-codebase phases
run single-threaded and only after every per-file task has finished.
"""

from __future__ import annotations

import os
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Any, Optional, Sequence

from ..analysis.dead_code import classify_dead_code
from ..analysis.duplicates import detect_duplicates
from ..analysis.models import Aggregate, AnalysisResult, ParseFailure
from ..analysis.summary import summarize
from ..config import AnalysisConfig
from ..graph.builder import build_dependency_graph
from ..graph.cycles import cycle_groups, detect_cycles
from ..logging_config import get_logger
from ..scanning.discovery import discover_files
from ..scanning.extractor import extract_facts
from ..scanning.metrics import compute_metrics
from ..scanning.models import FileFacts, FileMetrics, SourceFile
from ..scanning.treesitter_parser import TreeProvider, TreeSitterProvider

logger = get_logger(__name__)

_DEFAULT_WORKERS = min(os.cpu_count() or 4, 8)

# Below this many files the pool costs more than it saves
_PARALLEL_THRESHOLD = 10

FileResult = tuple[str, str, FileFacts, FileMetrics]


class AnalysisPipeline:
    """Runs the full analysis over a list of source files."""

    def __init__(
        self,
        config: Optional[AnalysisConfig] = None,
        provider: Optional[TreeProvider] = None,
    ) -> None:
        self.config = config or AnalysisConfig()
        self.provider = provider or TreeSitterProvider()
        self._max_workers = self.config.workers or _DEFAULT_WORKERS

    # ── Per-file phase ─────────────────────────────────────────

    def process_file(self, source_file: SourceFile) -> FileResult:
        """Parse, extract and measure one file. Raises on failure."""
        parsed = self.provider.parse(source_file)
        facts = extract_facts(
            parsed.root, parsed.text, source_file.language, path=source_file.relative_path
        )
        metrics = compute_metrics(parsed.root, parsed.text)
        return source_file.relative_path, source_file.language, facts, metrics

    def collect(self, files: Sequence[SourceFile], progress: Any = None) -> Aggregate:
        """Run the per-file phase and fold the results.

        Args:
            files: Files to analyze (relative paths must be unique)
            progress: Optional rich Progress to advance per file

        Returns:
            Aggregate in path order; failing files are listed in ``failures``
        """
        results: list[FileResult] = []
        failures: list[ParseFailure] = []
        task = progress.add_task("Scanning files...", total=len(files)) if progress else None

        def _record(source_file: SourceFile, error: Exception) -> None:
            logger.debug(f"Error analyzing {source_file.relative_path}: {error}")
            failures.append(ParseFailure(path=source_file.relative_path, message=str(error)))

        if self._max_workers == 1 or len(files) < _PARALLEL_THRESHOLD:
            for source_file in files:
                try:
                    results.append(self.process_file(source_file))
                except Exception as e:
                    _record(source_file, e)
                if progress:
                    progress.advance(task)
        else:
            with ThreadPoolExecutor(max_workers=self._max_workers) as executor:
                futures = {executor.submit(self.process_file, sf): sf for sf in files}
                for future in as_completed(futures):
                    try:
                        results.append(future.result())
                    except Exception as e:
                        _record(futures[future], e)
                    if progress:
                        progress.advance(task)

        # Join barrier passed: fold in a deterministic order
        results.sort(key=lambda r: r[0])
        failures.sort(key=lambda f: f.path)

        if failures:
            logger.warning(f"{len(failures)} of {len(files)} files could not be analyzed")
        logger.info(f"Per-file phase complete: {len(results)} files")

        return Aggregate(
            facts={path: facts for path, _, facts, _ in results},
            metrics={path: metrics for path, _, _, metrics in results},
            languages={path: language for path, language, _, _ in results},
            failures=tuple(failures),
        )

    # ── Whole-codebase phase ───────────────────────────────────

    def analyze(self, aggregate: Aggregate, root: str = "") -> AnalysisResult:
        """Graph, cycles, duplicates, dead code and summary from an Aggregate."""
        config = self.config

        graph = build_dependency_graph(aggregate.facts)
        logger.info(f"Dependency graph complete: {graph.edge_count} edges")

        cycles = detect_cycles(graph, limit=config.cycle_limit)
        groups = cycle_groups(graph)
        logger.info(f"Cycle detection complete: {len(groups)} cyclic groups")

        duplicates = detect_duplicates(
            aggregate.facts, limit=config.duplicate_limit, min_lines=config.duplicate_min_lines
        )
        logger.info(f"Duplicate detection complete: {len(duplicates)} groups")

        dead_code = classify_dead_code(graph)
        logger.info("Dead-code classification complete")

        summary = summarize(aggregate, graph, groups, config)

        return AnalysisResult(
            root=root,
            aggregate=aggregate,
            graph=graph,
            cycles=tuple(cycles),
            cycle_groups=tuple(groups),
            duplicates=tuple(duplicates),
            dead_code=dead_code,
            summary=summary,
        )

    def run(self, files: Sequence[SourceFile], root: str = "", progress: Any = None) -> AnalysisResult:
        """Per-file phase followed by the whole-codebase phase."""
        return self.analyze(self.collect(files, progress=progress), root=root)


def analyze_path(
    path: Path | str,
    config: Optional[AnalysisConfig] = None,
    provider: Optional[TreeProvider] = None,
    progress: Any = None,
) -> AnalysisResult:
    """Discover, parse and analyze every source file under ``path``.

    Raises:
        InvalidPathError: If path is not an existing directory
    """
    config = config or AnalysisConfig()
    files = discover_files(path, config)
    pipeline = AnalysisPipeline(config, provider=provider)
    return pipeline.run(files, root=str(Path(path).resolve()), progress=progress)
