"""Languages command: supported languages and installed grammars."""

from rich.table import Table

from ..scanning.languages import EXTENSION_LANGUAGES, supported_languages
from ..scanning.treesitter_parser import GRAMMARS, installed_languages
from . import app
from ._common import console


@app.command()
def languages():
    """List supported languages, their extensions and whether the grammar is installed."""
    installed = set(installed_languages())

    table = Table(title="Languages")
    table.add_column("Language", style="cyan")
    table.add_column("Extensions")
    table.add_column("Grammar package")
    table.add_column("Installed", justify="center")

    for tag in supported_languages():
        extensions = sorted(ext for ext, lang in EXTENSION_LANGUAGES.items() if lang == tag)
        module_name = GRAMMARS[tag][0].replace("_", "-")
        mark = "[green]yes[/green]" if tag in installed else "[red]no[/red]"
        table.add_row(tag, " ".join(extensions), module_name, mark)

    console.print(table)
