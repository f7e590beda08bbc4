"""Per-file models produced by the scanning phase.

FileFacts and FileMetrics are created once per analyzed file and never
mutated afterwards. Collections are tuples, frozensets and read-only
mappings so downstream phases can share them freely across threads.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Literal, Mapping

TypeKind = Literal["struct", "class", "enum", "interface"]


def _frozen_mapping(data: Mapping | None = None) -> Mapping:
    return MappingProxyType(dict(data or {}))


@dataclass(frozen=True)
class SourceFile:
    """One candidate file handed over by the file enumerator.

    Attributes:
        absolute_path: Location on disk
        relative_path: Normalized posix path, the key used everywhere else
        language: Language tag (e.g. "javascript", "python")
    """

    absolute_path: str
    relative_path: str
    language: str


@dataclass(frozen=True)
class FunctionFact:
    """A function or method definition.

    Attributes:
        name: Function name, or the language's anonymous marker
        signature: ``name(param_count)``
        structural_hash: Digest of the node-kind sequence (see hashing.py)
        line_count: Number of source lines spanned
        param_count: Entries in the function's own parameter list
        start_line: 1-indexed starting line
        nesting_depth: Depth of the function body subtree
    """

    name: str
    signature: str
    structural_hash: str
    line_count: int
    param_count: int
    start_line: int
    nesting_depth: int = 0


@dataclass(frozen=True)
class TypeFact:
    """A class, struct, enum or interface definition."""

    kind: TypeKind
    occurrence_count: int
    start_line: int


@dataclass(frozen=True)
class FileFacts:
    """Structured entity facts for one source file.

    Attributes:
        path: Relative path (unique key)
        language: Language tag
        functions: Function definitions in pre-order
        types: Type name -> TypeFact
        import_paths: Raw import specifiers, possibly unresolved
        exported_names: Identifiers the file exposes
        patterns: Pattern name -> occurrence count
        constants: Top-level constant bindings
        mutable_globals: Top-level mutable bindings
        identifiers: Identifier text -> occurrence count
    """

    path: str
    language: str = ""
    functions: tuple[FunctionFact, ...] = ()
    types: Mapping[str, TypeFact] = field(default_factory=_frozen_mapping)
    import_paths: frozenset[str] = frozenset()
    exported_names: frozenset[str] = frozenset()
    patterns: Mapping[str, int] = field(default_factory=_frozen_mapping)
    constants: frozenset[str] = frozenset()
    mutable_globals: frozenset[str] = frozenset()
    identifiers: Mapping[str, int] = field(default_factory=_frozen_mapping)

    def __post_init__(self) -> None:
        if not isinstance(self.types, MappingProxyType):
            object.__setattr__(self, "types", _frozen_mapping(self.types))
        if not isinstance(self.patterns, MappingProxyType):
            object.__setattr__(self, "patterns", _frozen_mapping(self.patterns))
        if not isinstance(self.identifiers, MappingProxyType):
            object.__setattr__(self, "identifiers", _frozen_mapping(self.identifiers))

    @property
    def function_hashes(self) -> dict[str, str]:
        """Signature -> structural hash (last definition wins on a clash)."""
        return {fn.signature: fn.structural_hash for fn in self.functions}


@dataclass(frozen=True)
class FileMetrics:
    """Structural counts for one syntax tree.

    Attributes:
        node_count: Total nodes in the tree
        max_depth: Longest root-to-leaf path (root depth = 0)
        branch_count: Conditional / switch / match nodes
        loop_count: Loop nodes
        return_count: Return nodes
        loc: Physical lines
        sloc: Lines that are neither blank nor comment-only
        blank_lines: Whitespace-only lines
        comment_lines: Lines starting with a comment marker
        density: node_count / loc
    """

    node_count: int = 0
    max_depth: int = 0
    branch_count: int = 0
    loop_count: int = 0
    return_count: int = 0
    loc: int = 0
    sloc: int = 0
    blank_lines: int = 0
    comment_lines: int = 0
    density: float = 0.0
