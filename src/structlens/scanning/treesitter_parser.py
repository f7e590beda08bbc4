"""Tree-sitter parse-tree provider.

Grammar packages are imported lazily, the first time a file of that
language is parsed, so only the grammars a codebase actually needs have to
be installed.

Usage:
    provider = TreeSitterProvider()
    parsed = provider.parse(source_file)
    facts = extract_facts(parsed.root, parsed.text, source_file.language)
"""

from __future__ import annotations

import importlib
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol

from ..exceptions import ParsingError, UnsupportedLanguageError
from ..logging_config import get_logger
from .models import SourceFile
from .node import SyntaxNode, TreeSitterNode

logger = get_logger(__name__)

# language tag -> (grammar module, language function)
GRAMMARS: dict[str, tuple[str, str]] = {
    "javascript": ("tree_sitter_javascript", "language"),
    "jsx": ("tree_sitter_javascript", "language"),
    "typescript": ("tree_sitter_typescript", "language_typescript"),
    "tsx": ("tree_sitter_typescript", "language_tsx"),
    "python": ("tree_sitter_python", "language"),
    "go": ("tree_sitter_go", "language"),
    "rust": ("tree_sitter_rust", "language"),
    "java": ("tree_sitter_java", "language"),
    "c": ("tree_sitter_c", "language"),
    "cpp": ("tree_sitter_cpp", "language"),
    "csharp": ("tree_sitter_c_sharp", "language"),
    "ruby": ("tree_sitter_ruby", "language"),
    "php": ("tree_sitter_php", "language_php"),
}


@dataclass(frozen=True)
class ParsedSource:
    """A syntax tree plus the text it was parsed from."""

    root: SyntaxNode
    text: str


class TreeProvider(Protocol):
    """Produces a syntax tree for one source file.

    Implementations raise (ideally ParsingError) when no tree can be
    produced; the pipeline records the failure and moves on.
    """

    def parse(self, source_file: SourceFile) -> ParsedSource: ...


class TreeSitterProvider:
    """TreeProvider backed by the tree-sitter grammar packages.

    Language objects are loaded once and shared; a fresh ``Parser`` is
    created per call because parsers are not safe to share across threads.
    """

    def __init__(self) -> None:
        self._languages: dict[str, Any] = {}
        self._lock = threading.Lock()

    def parse(self, source_file: SourceFile) -> ParsedSource:
        """Read and parse one file.

        Raises:
            UnsupportedLanguageError: If no grammar is known or installed
            ParsingError: If the file cannot be read or parsed
        """
        import tree_sitter

        language = self._language(source_file.language)
        path = Path(source_file.absolute_path)
        try:
            data = path.read_bytes()
        except OSError as e:
            raise ParsingError(source_file.relative_path, source_file.language, str(e))

        try:
            tree = tree_sitter.Parser(language).parse(data)
        except (ValueError, TypeError) as e:
            raise ParsingError(source_file.relative_path, source_file.language, str(e))

        text = data.decode("utf-8", errors="replace")
        return ParsedSource(root=TreeSitterNode(tree.root_node), text=text)

    def parse_text(self, text: str, language: str) -> ParsedSource:
        """Parse in-memory source text."""
        import tree_sitter

        tree = tree_sitter.Parser(self._language(language)).parse(text.encode("utf-8"))
        return ParsedSource(root=TreeSitterNode(tree.root_node), text=text)

    def _language(self, tag: str) -> Any:
        with self._lock:
            cached = self._languages.get(tag)
            if cached is not None:
                return cached

            if tag not in GRAMMARS:
                raise UnsupportedLanguageError(tag, sorted(GRAMMARS))

            import tree_sitter

            module_name, function_name = GRAMMARS[tag]
            try:
                module = importlib.import_module(module_name)
            except ImportError:
                raise UnsupportedLanguageError(tag, installed_languages())

            language = tree_sitter.Language(getattr(module, function_name)())
            self._languages[tag] = language
            logger.debug(f"Loaded {module_name} grammar for {tag}")
            return language


def installed_languages() -> list[str]:
    """Language tags whose grammar package can be imported."""
    available = []
    for tag, (module_name, _) in sorted(GRAMMARS.items()):
        try:
            importlib.import_module(module_name)
        except ImportError:
            continue
        available.append(tag)
    return available
