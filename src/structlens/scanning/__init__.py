"""Per-file scanning: enumeration, parsing, extraction and metrics."""

from .discovery import discover_files
from .extractor import FactsVisitor, extract_facts
from .hashing import structural_hash
from .languages import ADAPTERS, EXTENSION_LANGUAGES, LanguageAdapter, detect_language, get_adapter
from .metrics import compute_metrics
from .models import FileFacts, FileMetrics, FunctionFact, SourceFile, TypeFact
from .node import Node, SyntaxNode, TreeSitterNode, build_node, walk
from .patterns import PATTERN_RULES, PatternRule, match_patterns
from .treesitter_parser import ParsedSource, TreeProvider, TreeSitterProvider

__all__ = [
    # Tree shape
    "SyntaxNode",
    "Node",
    "TreeSitterNode",
    "build_node",
    "walk",
    # Languages
    "LanguageAdapter",
    "ADAPTERS",
    "EXTENSION_LANGUAGES",
    "detect_language",
    "get_adapter",
    # Extraction
    "FactsVisitor",
    "extract_facts",
    "compute_metrics",
    "structural_hash",
    "PatternRule",
    "PATTERN_RULES",
    "match_patterns",
    # Models
    "SourceFile",
    "FileFacts",
    "FileMetrics",
    "FunctionFact",
    "TypeFact",
    # Collaborators
    "discover_files",
    "ParsedSource",
    "TreeProvider",
    "TreeSitterProvider",
]
