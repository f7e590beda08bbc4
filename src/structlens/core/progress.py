"""Progress reporting with Rich, or silent."""

from typing import Any, Callable, TypeVar

from rich.console import Console
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeElapsedColumn,
)

T = TypeVar("T")


class ProgressReporter:
    """Rich progress bar wrapper.

    ``run`` hands the live Progress to the callback, which adds its own
    tasks (the pipeline adds one per-file task).
    """

    def __init__(self, console: Console):
        self.console = console

    def run(self, callback: Callable[[Any], T]) -> T:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            MofNCompleteColumn(),
            TimeElapsedColumn(),
            console=self.console,
            transient=True,
        ) as progress:
            return callback(progress)


class SilentReporter:
    """No-op reporter for tests, JSON output and --quiet mode."""

    def run(self, callback: Callable[[Any], T]) -> T:
        return callback(None)
