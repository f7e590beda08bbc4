"""Analyze command: structural model of a codebase."""

import json
from pathlib import Path
from typing import Optional

import typer
from rich.table import Table

from ..analysis.models import AnalysisResult
from ..analysis.serializers import result_to_dict
from ..core.pipeline import analyze_path
from ..core.progress import ProgressReporter, SilentReporter
from ..exceptions import StructlensError
from ..logging_config import setup_logging
from . import app
from ._common import console, resolve_config

_MAX_ROWS = 10


@app.command()
def analyze(
    path: Path = typer.Argument(
        Path("."),
        help="Path to the codebase directory",
        exists=True,
        file_okay=False,
        dir_okay=True,
    ),
    fmt: str = typer.Option(
        "rich",
        "--format",
        "-f",
        help="Output format: rich (human-readable) or json",
    ),
    workers: Optional[int] = typer.Option(
        None,
        "--workers",
        "-w",
        help="Parallel workers",
        min=1,
        max=32,
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Configuration file (TOML)",
        exists=True,
        file_okay=True,
        dir_okay=False,
    ),
    include_files: bool = typer.Option(
        False,
        "--files",
        help="Include per-file facts and metrics in JSON output",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable debug logging and show full lists",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Suppress logging",
    ),
    log_file: Optional[Path] = typer.Option(
        None,
        "--log-file",
        help="Also write debug-level logs to this file",
        dir_okay=False,
    ),
):
    """
    Extract entities, build the import graph and report cycles, clones and dead code.

    [bold cyan]Examples:[/bold cyan]

      structlens analyze /path/to/codebase

      structlens analyze . --format json --files > model.json

      structlens analyze . --workers 4 --verbose
    """
    log_path = str(log_file) if log_file else None
    logger = setup_logging("verbose" if verbose else "quiet" if quiet else "normal", log_path)

    if fmt not in ("rich", "json"):
        console.print(f"[red]Error:[/red] unknown format '{fmt}' (expected rich or json)")
        raise typer.Exit(2)

    try:
        settings = resolve_config(config=config, workers=workers, verbose=verbose, quiet=quiet)
        logger = setup_logging(settings.verbosity, log_path)
        verbose = settings.verbosity == "verbose"
        quiet = settings.verbosity == "quiet"

        reporter = SilentReporter() if quiet or fmt == "json" else ProgressReporter(console)
        result = reporter.run(
            lambda progress: analyze_path(path, settings, progress=progress)
        )

        if fmt == "json":
            _output_json(result, include_files)
        else:
            _output_rich(result, verbose=verbose)

    except typer.Exit:
        raise
    except StructlensError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    except KeyboardInterrupt:
        logger.info("Analysis interrupted by user")
        raise typer.Exit(130)
    except Exception as e:
        logger.exception("Unexpected error during analysis")
        console.print(f"[red]Unexpected error:[/red] {e}")
        raise typer.Exit(1)


def _output_json(result: AnalysisResult, include_files: bool) -> None:
    # Plain print keeps rich from wrapping or highlighting the JSON
    print(json.dumps(result_to_dict(result, include_files=include_files), indent=2))


def _limit(items, verbose: bool):
    return list(items) if verbose else list(items)[:_MAX_ROWS]


def _output_rich(result: AnalysisResult, verbose: bool = False) -> None:
    summary = result.summary

    console.print()
    console.print("[bold cyan]STRUCTLENS: Structural Analysis[/bold cyan]")
    console.print(
        f"  [green]{summary.total_files}[/green] files, "
        f"[green]{summary.total_lines}[/green] lines, "
        f"[green]{summary.edge_count}[/green] import edges"
        + (f", [red]{summary.failed_files}[/red] failed" if summary.failed_files else "")
    )
    console.print()

    # Languages
    table = Table(title="Languages", show_lines=False)
    table.add_column("Language", style="cyan")
    for column in ("Files", "Lines", "Functions", "Types", "Imports", "Exports", "Branches"):
        table.add_column(column, justify="right")
    for name, stats in summary.languages.items():
        table.add_row(
            name,
            str(stats.files),
            str(stats.lines),
            str(stats.functions),
            str(stats.types),
            str(stats.imports),
            str(stats.exports),
            str(stats.branches),
        )
    console.print(table)

    # Coupling
    coupling = sorted(result.graph.coupling.items(), key=lambda kv: -kv[1].total)
    if coupling:
        table = Table(title="Most Coupled Files")
        table.add_column("File", style="cyan")
        table.add_column("In", justify="right")
        table.add_column("Out", justify="right")
        table.add_column("Total", justify="right", style="bold")
        for file, c in _limit(coupling, verbose):
            table.add_row(file, str(c.inbound), str(c.outbound), str(c.total))
        console.print(table)

    # Cycles
    if result.cycles:
        console.print(f"[bold red]Import cycles[/bold red] ({summary.cycle_member_count} files on cycles)")
        for cycle in result.cycles:
            console.print("  " + " → ".join(cycle.path))
        console.print()

    # Duplicates
    if result.duplicates:
        table = Table(title="Structural Duplicates")
        table.add_column("Hash", style="dim")
        table.add_column("Count", justify="right")
        table.add_column("Members")
        for group in result.duplicates:
            members = ", ".join(f"{m.file}:{m.signature}" for m in _limit(group.members, verbose))
            table.add_row(group.hash, str(group.size), members)
        console.print(table)

    # Dead code
    dead = result.dead_code
    for title, files in (
        ("Orphaned files", dead.orphaned_files),
        ("Unused exports", dead.unused_exports),
        ("Possibly dead (single consumer)", dead.possibly_dead),
    ):
        if files:
            console.print(f"[bold yellow]{title}[/bold yellow] ({len(files)})")
            for file in _limit(files, verbose):
                console.print(f"  {file}")
            console.print()

    # Hotspots
    if summary.hotspots:
        table = Table(title="Complexity Hotspots")
        table.add_column("File", style="cyan")
        table.add_column("Branches", justify="right")
        table.add_column("Depth", justify="right")
        table.add_column("LOC", justify="right")
        for h in summary.hotspots:
            table.add_row(h.file, str(h.branches), str(h.depth), str(h.loc))
        console.print(table)

    # Recurring entities
    for title, column, rows in (
        ("Most Repeated Signatures", "Signature", summary.top_signatures),
        ("Most Frequent Types", "Type", summary.top_types),
        ("Most Common Imports", "Import", summary.top_imports),
    ):
        if rows:
            table = Table(title=title)
            table.add_column(column, style="cyan")
            table.add_column("Count", justify="right")
            for name, count in rows:
                table.add_row(name, str(count))
            console.print(table)

    if summary.identifier_counts:
        top = list(summary.identifier_counts.items())[:_MAX_ROWS]
        console.print("Identifiers: " + ", ".join(f"{name} ({count})" for name, count in top))

    lengths = summary.function_lengths
    if lengths.count:
        console.print(
            f"Functions: {lengths.count}, length mean {lengths.mean:.1f} / "
            f"median {lengths.median:.0f} / p90 {lengths.p90:.0f} / max {lengths.max:.0f}, "
            f"size gini {lengths.gini:.2f}"
        )
    if verbose and result.failures:
        console.print()
        console.print("[bold red]Failures[/bold red]")
        for failure in result.failures:
            console.print(f"  {failure.path}: {failure.message}")
