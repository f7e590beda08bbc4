"""Entity and pattern extraction for a single syntax tree.

``extract_facts`` is a pure function of ``(tree, source, language)``. The
work is done by a ``FactsVisitor`` that owns the accumulator for one file,
walks the tree once in pre-order and hands back a frozen ``FileFacts``.

Malformed or partial trees never raise: a missing name becomes the
language's anonymous marker, a missing parameter list counts as zero.
"""

from __future__ import annotations

import re
from collections import Counter
from typing import Optional

from .hashing import structural_hash
from .languages import (
    LITERAL_KINDS,
    STRING_KINDS,
    LanguageAdapter,
    first_child,
    get_adapter,
    is_identifier_kind,
    unquote,
)
from .models import FileFacts, FunctionFact, TypeFact, TypeKind
from .node import SyntaxNode, line_span, walk, walk_with_depth
from .patterns import callee_text, match_patterns

_IMPORT_CALLEES = frozenset(
    {"require", "import", "importlib.import_module", "__import__", "require_once"}
)
_RELATIVE_IMPORT_CALLEES = frozenset({"require_relative"})
_ARGUMENT_LIST_KINDS = ("arguments", "argument_list")

_CJS_TARGET = re.compile(r"^(?:module\.)?exports\.([A-Za-z_$][\w$]*)$")
_ASSIGNMENT_KINDS = frozenset({"assignment_expression", "assignment"})
_EXPORT_WRAPPERS = frozenset({"export_statement"})
_CONSTANT_NAME = re.compile(r"^[A-Z][A-Z0-9_]*$")
_COUNTED_IDENTIFIER_KINDS = frozenset(
    {"identifier", "property_identifier", "type_identifier", "field_identifier"}
)
MAX_IDENTIFIER_LENGTH = 50


class FactsVisitor:
    """Collects entity facts for one file.

    A visitor is single-use: create one per file, call ``visit`` once.
    """

    def __init__(self, adapter: LanguageAdapter, path: str = "", language: str = "") -> None:
        self.adapter = adapter
        self.path = path
        self.language = language or adapter.name

        self._functions: list[FunctionFact] = []
        self._types: dict[str, TypeFact] = {}
        self._imports: set[str] = set()
        self._exports: set[str] = set()
        self._patterns: Counter[str] = Counter()
        self._constants: set[str] = set()
        self._mutable_globals: set[str] = set()
        self._identifiers: Counter[str] = Counter()

    def visit(self, root: SyntaxNode) -> FileFacts:
        self._visit_top_level(root)
        for node in walk(root):
            self._visit_node(node)
        return FileFacts(
            path=self.path,
            language=self.language,
            functions=tuple(self._functions),
            types=self._types,
            import_paths=frozenset(self._imports),
            exported_names=frozenset(self._exports),
            patterns=dict(self._patterns),
            constants=frozenset(self._constants),
            mutable_globals=frozenset(self._mutable_globals - self._constants),
            identifiers=dict(self._identifiers),
        )

    # ── Per-node dispatch ──────────────────────────────────────

    def _visit_node(self, node: SyntaxNode) -> None:
        adapter = self.adapter

        if node.kind in _COUNTED_IDENTIFIER_KINDS and 0 < len(node.text) < MAX_IDENTIFIER_LENGTH:
            self._identifiers[node.text] += 1

        if adapter.is_function_definition(node):
            self._record_function(node)

        type_kind = adapter.type_kind(node)
        if type_kind is not None:
            self._record_type(node, type_kind)

        if adapter.is_import(node):
            self._imports.update(adapter.import_paths(node))

        if adapter.is_export(node):
            self._exports.update(adapter.export_names(node))
            # `export * from './x'` re-exports through an import
            if node.kind in _EXPORT_WRAPPERS:
                self._imports.update(adapter.import_paths(node))

        if node.kind in _ASSIGNMENT_KINDS:
            self._exports.update(self._commonjs_exports(node))

        import_path = self._call_import(node)
        if import_path:
            self._imports.add(import_path)

        self._patterns.update(match_patterns(node))

    def _record_function(self, node: SyntaxNode) -> None:
        name = self.adapter.function_name(node)
        param_count = self.adapter.param_count(node)
        self._functions.append(
            FunctionFact(
                name=name,
                signature=f"{name}({param_count})",
                structural_hash=structural_hash(node),
                line_count=line_span(node),
                param_count=param_count,
                start_line=node.start_line,
                nesting_depth=_body_depth(node),
            )
        )

    def _record_type(self, node: SyntaxNode, kind: TypeKind) -> None:
        name = self.adapter.type_name(node)
        existing = self._types.get(name)
        if existing is None:
            self._types[name] = TypeFact(kind=kind, occurrence_count=1, start_line=node.start_line)
        else:
            self._types[name] = TypeFact(
                kind=existing.kind,
                occurrence_count=existing.occurrence_count + 1,
                start_line=existing.start_line,
            )

    # ── Text-pattern imports / exports ─────────────────────────

    def _call_import(self, node: SyntaxNode) -> Optional[str]:
        """Specifier of ``require('x')``, ``import('x')`` and friends."""
        callee = callee_text(node)
        if callee is None:
            return None
        relative = callee in _RELATIVE_IMPORT_CALLEES
        if callee not in _IMPORT_CALLEES and not relative:
            return None

        literal = _string_argument(node)
        if literal is None:
            return None
        spec = unquote(literal.text)
        if not spec or "${" in spec:
            return None
        if relative and not spec.startswith("."):
            spec = f"./{spec}"
        return self.adapter.normalize_specifier(spec)

    def _commonjs_exports(self, node: SyntaxNode) -> list[str]:
        """Names assigned through ``module.exports`` / ``exports.x``."""
        if len(node.children) < 2:
            return []
        target = "".join(node.children[0].text.split())

        match = _CJS_TARGET.match(target)
        if match:
            return [match.group(1)]
        if target != "module.exports":
            return []

        value = _assigned_value(node)
        if value is None:
            return []
        if is_identifier_kind(value.kind):
            return [value.text]
        if value.kind != "object":
            return []

        names: list[str] = []
        for entry in value.children:
            if entry.kind == "shorthand_property_identifier":
                names.append(entry.text)
            elif entry.kind in ("pair", "method_definition") and entry.children:
                key = entry.children[0]
                names.append(unquote(key.text) if key.kind in STRING_KINDS else key.text)
        return names

    # ── Top-level bindings ─────────────────────────────────────

    def _visit_top_level(self, root: SyntaxNode) -> None:
        for child in root.children:
            declarations = [child]
            if child.kind in _EXPORT_WRAPPERS:
                declarations = list(child.children)

            for decl in declarations:
                self._exports.update(self.adapter.top_level_exports(decl))
                for name, initializer in self.adapter.bindings(decl):
                    if _CONSTANT_NAME.match(name) or _is_literal(initializer):
                        self._constants.add(name)
                    else:
                        self._mutable_globals.add(name)


def _string_argument(call: SyntaxNode) -> Optional[SyntaxNode]:
    """First string literal passed directly as an argument of ``call``."""
    args = call.children[1:]
    arg_list = first_child(call, _ARGUMENT_LIST_KINDS)
    if arg_list is not None:
        args = arg_list.children
    for node in args:
        if node.kind in STRING_KINDS:
            return node
    return None


def _assigned_value(node: SyntaxNode) -> Optional[SyntaxNode]:
    seen_equals = False
    for child in node.children:
        if seen_equals:
            return child
        if child.kind == "=":
            seen_equals = True
    return node.children[-1] if len(node.children) > 1 else None


def _is_literal(node: Optional[SyntaxNode]) -> bool:
    if node is None:
        return False
    if node.kind in LITERAL_KINDS:
        return "${" not in node.text
    # negative numbers
    if node.kind == "unary_expression" and len(node.children) == 2:
        return node.children[1].kind in LITERAL_KINDS
    return False


def _body_depth(node: SyntaxNode) -> int:
    """Depth of the function body subtree (the node itself when no body)."""
    body = next(
        (c for c in node.children if "block" in c.kind or "body" in c.kind),
        node,
    )
    return max(depth for _, depth in walk_with_depth(body))


def extract_facts(
    root: SyntaxNode, source: str = "", language: str = "", path: str = ""
) -> FileFacts:
    """Extract entity facts from one syntax tree.

    Args:
        root: Tree root
        source: Full source text (unused by the node rules, kept for parity
            with ``compute_metrics``)
        language: Language tag selecting the adapter
        path: Relative path recorded on the facts

    Returns:
        Frozen FileFacts for the file
    """
    visitor = FactsVisitor(get_adapter(language), path=path, language=language)
    return visitor.visit(root)
