"""CLI entry point; registers all subcommands."""

import typer

from .. import __version__
from ._common import console

app = typer.Typer(
    name="structlens",
    help="structlens - Structural Codebase Analysis",
    add_completion=False,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"structlens {__version__}")
        raise typer.Exit()


@app.callback()
def _root(
    version: bool = typer.Option(
        False,
        "--version",
        help="Show version and exit",
        callback=_version_callback,
        is_eager=True,
    ),
):
    """Structural model of a multi-language codebase: entities, imports, cycles, clones, dead code."""


# Import subcommands to register them
from .analyze import analyze as _analyze  # noqa: F401, E402
from .languages import languages as _languages  # noqa: F401, E402


def main() -> None:
    app()
