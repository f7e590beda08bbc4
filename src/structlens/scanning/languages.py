"""Language adapters: every grammar difference the extractor cares about.

Each grammar names its nodes differently, so every node-kind question the
extractor asks goes through a ``LanguageAdapter``: is this a function, a
type, an import, an export, what is its name, how many parameters does it
take. ``ADAPTERS`` maps language tags to adapter instances.

Adding a new language:
  1. Subclass LanguageAdapter and override the kind sets / hooks that differ.
  2. Register an instance in ADAPTERS and its extensions in EXTENSION_LANGUAGES.
"""

from __future__ import annotations

import posixpath
import re
from typing import Mapping, Optional, Sequence

from .models import TypeKind
from .node import SyntaxNode, walk

EXTENSION_LANGUAGES: dict[str, str] = {
    ".js": "javascript",
    ".mjs": "javascript",
    ".cjs": "javascript",
    ".jsx": "jsx",
    ".ts": "typescript",
    ".tsx": "tsx",
    ".py": "python",
    ".rs": "rust",
    ".go": "go",
    ".c": "c",
    ".h": "c",
    ".cpp": "cpp",
    ".cc": "cpp",
    ".cxx": "cpp",
    ".hpp": "cpp",
    ".java": "java",
    ".cs": "csharp",
    ".rb": "ruby",
    ".php": "php",
}

STRING_KINDS = frozenset(
    {
        "string",
        "string_literal",
        "interpreted_string_literal",
        "raw_string_literal",
        "template_string",
        "encapsed_string",
    }
)

LITERAL_KINDS = STRING_KINDS | frozenset(
    {
        "number",
        "integer",
        "float",
        "true",
        "false",
        "null",
        "none",
        "nil",
        "undefined",
        "integer_literal",
        "float_literal",
        "boolean_literal",
        "char_literal",
        "int_literal",
        "imaginary_literal",
        "rune_literal",
        "number_literal",
        "decimal_integer_literal",
        "decimal_floating_point_literal",
        "null_literal",
        "character_literal",
        "concatenated_string",
    }
)

_QUOTED = re.compile(r"""^[rRbBuUfF]{0,2}(['"`]{1,3})(.*)\1$""", re.DOTALL)
_UPPER_START = re.compile(r"^[A-Z]")


def detect_language(path: str) -> Optional[str]:
    """Language tag for a file path, or None when the extension is unknown."""
    return EXTENSION_LANGUAGES.get(posixpath.splitext(path)[1].lower())


def unquote(text: str) -> str:
    """Strip string delimiters (and Python string prefixes) from a literal."""
    text = text.strip()
    match = _QUOTED.match(text)
    if match:
        return match.group(2)
    return text.strip("'\"`")


def is_identifier_kind(kind: str) -> bool:
    return "identifier" in kind or kind in ("name", "constant")


def is_punctuation(node: SyntaxNode) -> bool:
    return not any(ch.isalnum() for ch in node.kind) or node.kind == "comment"


def first_child(node: SyntaxNode, kinds: Sequence[str] | frozenset[str]) -> Optional[SyntaxNode]:
    for child in node.children:
        if child.kind in kinds:
            return child
    return None


def identifier_child(node: SyntaxNode) -> Optional[SyntaxNode]:
    for child in node.children:
        if is_identifier_kind(child.kind):
            return child
    return None


class LanguageAdapter:
    """Grammar-specific answers to the extractor's node questions.

    The base class implements the cross-grammar rules, so an unknown
    language still yields useful facts.
    """

    name = "generic"
    anonymous_name = "anonymous"
    anonymous_type_name = "Anonymous"

    function_kinds: frozenset[str] = frozenset({"method_definition", "function_item"})
    type_kinds: Mapping[str, TypeKind] = {
        "struct_item": "struct",
        "enum_item": "enum",
        "interface_declaration": "interface",
    }
    import_kinds: frozenset[str] = frozenset(
        {"import_statement", "import_from_statement", "import_declaration", "use_declaration"}
    )
    param_list_kinds: frozenset[str] = frozenset(
        {
            "formal_parameters",
            "parameters",
            "parameter_list",
            "method_parameters",
            "lambda_parameters",
        }
    )

    # ── Classification ─────────────────────────────────────────

    def is_function_definition(self, node: SyntaxNode) -> bool:
        kind = node.kind
        return kind in self.function_kinds or ("function" in kind and "declaration" in kind)

    def type_kind(self, node: SyntaxNode) -> Optional[TypeKind]:
        kind = node.kind
        if kind in self.type_kinds:
            return self.type_kinds[kind]
        if "class" in kind and "declaration" in kind:
            return "class"
        return None

    def is_import(self, node: SyntaxNode) -> bool:
        return node.kind in self.import_kinds

    def is_export(self, node: SyntaxNode) -> bool:
        return "export" in node.kind

    # ── Names ──────────────────────────────────────────────────

    def extract_name(self, node: SyntaxNode) -> Optional[str]:
        """First identifier-typed child, if any."""
        child = identifier_child(node)
        return child.text if child is not None else None

    def function_name(self, node: SyntaxNode) -> str:
        return self.extract_name(node) or self.anonymous_name

    def type_name(self, node: SyntaxNode) -> str:
        return self.extract_name(node) or self.anonymous_type_name

    # ── Imports / exports ──────────────────────────────────────

    def import_paths(self, node: SyntaxNode) -> list[str]:
        """Raw import specifiers for an import-category (or export) node."""
        literal = first_child(node, STRING_KINDS)
        if literal is None:
            return []
        spec = unquote(literal.text)
        if not spec or "${" in spec:
            return []
        return [self.normalize_specifier(spec)]

    def normalize_specifier(self, spec: str) -> str:
        return spec

    def export_names(self, node: SyntaxNode) -> list[str]:
        """Names exposed by an export-category node."""
        name = _declared_name(node)
        return [name] if name else []

    def top_level_exports(self, node: SyntaxNode) -> list[str]:
        """Names a top-level declaration exposes implicitly (visibility rules)."""
        return []

    # ── Signatures and bindings ────────────────────────────────

    def param_count(self, node: SyntaxNode) -> int:
        """Entries of the function's own parameter list, punctuation excluded.

        Parameter-kinded nodes elsewhere in the subtree (nested functions,
        lambdas passed as defaults) are not counted, so ``name(n)``
        signatures reflect the declared arity only.
        """
        params = self._parameter_list(node)
        if params is None:
            return 0
        return sum(1 for child in params.children if not is_punctuation(child))

    def _parameter_list(self, node: SyntaxNode) -> Optional[SyntaxNode]:
        """First parameter list in pre-order, not entering nested functions."""
        stack = list(reversed(node.children))
        while stack:
            current = stack.pop()
            if current.kind in self.param_list_kinds:
                return current
            if self.is_function_definition(current):
                continue
            stack.extend(reversed(current.children))
        return None

    def bindings(self, node: SyntaxNode) -> list[tuple[str, Optional[SyntaxNode]]]:
        """(name, initializer) pairs declared by a top-level statement."""
        return []


def _declared_name(node: SyntaxNode) -> Optional[str]:
    for child in node.children:
        if is_identifier_kind(child.kind):
            return child.text
        if "declaration" in child.kind:
            return _declared_name(child)
    return None


# ── JavaScript / TypeScript ────────────────────────────────────


class JavaScriptAdapter(LanguageAdapter):
    name = "javascript"

    function_kinds = frozenset(
        {"function_declaration", "generator_function_declaration", "method_definition"}
    )
    type_kinds: Mapping[str, TypeKind] = {"class_declaration": "class"}
    import_kinds = frozenset({"import_statement"})

    def is_export(self, node: SyntaxNode) -> bool:
        return node.kind in ("export_statement", "export_specifier")

    def export_names(self, node: SyntaxNode) -> list[str]:
        if node.kind == "export_specifier":
            # `a as b` exposes b
            names = [c.text for c in node.children if is_identifier_kind(c.kind)]
            return names[-1:]

        names: list[str] = []
        for child in node.children:
            if child.kind in ("lexical_declaration", "variable_declaration"):
                names.extend(name for name, _ in self.bindings(child))
            elif "declaration" in child.kind or child.kind in ("class", "function"):
                name = self.extract_name(child)
                if name:
                    names.append(name)
            elif is_identifier_kind(child.kind):
                names.append(child.text)
            elif child.kind == "namespace_export":
                # export * as ns from './x'
                names.extend(c.text for c in child.children if is_identifier_kind(c.kind))
            elif child.kind == "*":
                # export * from './x' re-exports everything
                names.append("*")
        if not names and any(c.kind == "default" for c in node.children):
            names.append("default")
        return names

    def bindings(self, node: SyntaxNode) -> list[tuple[str, Optional[SyntaxNode]]]:
        if node.kind not in ("lexical_declaration", "variable_declaration"):
            return []
        result: list[tuple[str, Optional[SyntaxNode]]] = []
        for declarator in node.children:
            if declarator.kind != "variable_declarator" or not declarator.children:
                continue
            target = declarator.children[0]
            if not is_identifier_kind(target.kind):
                continue
            result.append((target.text, _value_after_equals(declarator)))
        return result


class TypeScriptAdapter(JavaScriptAdapter):
    name = "typescript"

    type_kinds: Mapping[str, TypeKind] = {
        "class_declaration": "class",
        "abstract_class_declaration": "class",
        "interface_declaration": "interface",
        "enum_declaration": "enum",
    }


# ── Python ─────────────────────────────────────────────────────


class PythonAdapter(LanguageAdapter):
    name = "python"
    anonymous_name = "<lambda>"

    function_kinds = frozenset({"function_definition"})
    type_kinds: Mapping[str, TypeKind] = {"class_definition": "class"}
    import_kinds = frozenset({"import_statement", "import_from_statement"})
    param_list_kinds = frozenset({"parameters", "lambda_parameters"})

    def is_function_definition(self, node: SyntaxNode) -> bool:
        return node.kind in self.function_kinds

    def import_paths(self, node: SyntaxNode) -> list[str]:
        modules = [c for c in node.children if c.kind in ("dotted_name", "relative_import")]
        aliased = [c for c in node.children if c.kind == "aliased_import"]

        if node.kind == "import_statement":
            names = [c.text for c in modules]
            names.extend(a.children[0].text for a in aliased if a.children)
            return [self.normalize_specifier(n) for n in names]

        if not modules:
            return []
        module = modules[0]
        paths = [self.normalize_specifier(module.text)]
        # `from . import a, b` names sibling modules
        if module.kind == "relative_import" and set(module.text) == {"."}:
            base = self.normalize_specifier(module.text)
            imported = [c.text for c in modules[1:]]
            imported.extend(a.children[0].text for a in aliased if a.children)
            paths.extend(posixpath.join(base, name.replace(".", "/")) for name in imported)
        return paths

    def normalize_specifier(self, spec: str) -> str:
        """``..pkg.mod`` -> ``../pkg/mod``; ``pkg.mod`` -> ``pkg/mod``."""
        spec = spec.strip()
        dots = len(spec) - len(spec.lstrip("."))
        rest = spec[dots:].replace(".", "/")
        if dots == 0:
            return rest
        prefix = "./" if dots == 1 else "../" * (dots - 1)
        return prefix + rest

    def is_export(self, node: SyntaxNode) -> bool:
        return (
            node.kind == "assignment"
            and bool(node.children)
            and node.children[0].text == "__all__"
        )

    def export_names(self, node: SyntaxNode) -> list[str]:
        value = _value_after_equals(node)
        if value is None:
            return []
        return [unquote(c.text) for c in value.children if c.kind in STRING_KINDS]

    def top_level_exports(self, node: SyntaxNode) -> list[str]:
        """Public (non-underscore) top-level functions and classes."""
        if node.kind == "decorated_definition":
            node = first_child(node, ("function_definition", "class_definition")) or node
        if node.kind not in ("function_definition", "class_definition"):
            return []
        name = self.extract_name(node)
        if not name or name.startswith("_"):
            return []
        return [name]

    def bindings(self, node: SyntaxNode) -> list[tuple[str, Optional[SyntaxNode]]]:
        if node.kind != "expression_statement" or not node.children:
            return []
        assignment = node.children[0]
        if assignment.kind != "assignment" or not assignment.children:
            return []
        target = assignment.children[0]
        if target.kind != "identifier":
            return []
        return [(target.text, _value_after_equals(assignment))]


# ── Go ─────────────────────────────────────────────────────────


class GoAdapter(LanguageAdapter):
    name = "go"
    anonymous_name = "func"

    function_kinds = frozenset({"function_declaration", "method_declaration"})
    import_kinds = frozenset({"import_spec"})

    def type_kind(self, node: SyntaxNode) -> Optional[TypeKind]:
        if node.kind != "type_spec":
            return None
        for child in node.children:
            if child.kind == "struct_type":
                return "struct"
            if child.kind == "interface_type":
                return "interface"
        return None

    def param_count(self, node: SyntaxNode) -> int:
        lists = [c for c in node.children if c.kind == "parameter_list"]
        if not lists:
            return 0
        # method_declaration: receiver list comes first
        params = lists[1] if node.kind == "method_declaration" and len(lists) > 1 else lists[0]
        count = 0
        for decl in params.children:
            if is_punctuation(decl):
                continue
            names = [c for c in decl.children if c.kind == "identifier"]
            count += max(len(names), 1)
        return count

    def top_level_exports(self, node: SyntaxNode) -> list[str]:
        names: list[str] = []
        if node.kind in ("function_declaration", "method_declaration"):
            name = self.extract_name(node)
            if name:
                names.append(name)
        elif node.kind in ("type_declaration", "const_declaration", "var_declaration"):
            for spec in node.children:
                if spec.kind in ("type_spec", "const_spec", "var_spec"):
                    name = self.extract_name(spec)
                    if name:
                        names.append(name)
        return [n for n in names if _UPPER_START.match(n)]

    def bindings(self, node: SyntaxNode) -> list[tuple[str, Optional[SyntaxNode]]]:
        if node.kind not in ("const_declaration", "var_declaration"):
            return []
        result: list[tuple[str, Optional[SyntaxNode]]] = []
        for spec in node.children:
            if spec.kind not in ("const_spec", "var_spec"):
                continue
            value = first_child(spec, ("expression_list",))
            initializer = value.children[0] if value is not None and value.children else value
            for child in spec.children:
                if child.kind == "identifier":
                    result.append((child.text, initializer))
        return result


# ── Rust ───────────────────────────────────────────────────────


class RustAdapter(LanguageAdapter):
    name = "rust"
    anonymous_name = "closure"

    function_kinds = frozenset({"function_item"})
    type_kinds: Mapping[str, TypeKind] = {
        "struct_item": "struct",
        "union_item": "struct",
        "enum_item": "enum",
        "trait_item": "interface",
    }
    import_kinds = frozenset({"use_declaration", "mod_item"})

    _PUBLIC_ITEMS = frozenset(
        {
            "function_item",
            "struct_item",
            "enum_item",
            "trait_item",
            "const_item",
            "static_item",
            "type_item",
            "mod_item",
            "union_item",
        }
    )

    def is_function_definition(self, node: SyntaxNode) -> bool:
        return node.kind in self.function_kinds

    def import_paths(self, node: SyntaxNode) -> list[str]:
        if node.kind == "mod_item":
            # `mod foo;` pulls in a sibling file; `mod foo { ... }` is inline
            if first_child(node, ("declaration_list",)) is not None:
                return []
            name = self.extract_name(node)
            return [f"./{name}"] if name else []

        text = node.text.strip()
        text = re.sub(r"^(pub(\([^)]*\))?\s+)?use\s+", "", text).rstrip(";").strip()
        text = text.split("::{", 1)[0].split(" as ", 1)[0].strip()
        if not text:
            return []
        return [self.normalize_specifier(text)]

    def normalize_specifier(self, spec: str) -> str:
        """``crate::a::b`` -> ``a/b``, ``super::x`` -> ``../x``, ``self::x`` -> ``./x``."""
        segments = [s for s in spec.split("::") if s]
        # trailing type / glob segments name items, not modules
        while len(segments) > 1 and (segments[-1] == "*" or _UPPER_START.match(segments[-1])):
            segments.pop()

        prefix = ""
        if segments and segments[0] == "crate":
            segments = segments[1:]
        elif segments and segments[0] == "self":
            prefix = "./"
            segments = segments[1:]
        elif segments and segments[0] == "super":
            while segments and segments[0] == "super":
                prefix += "../"
                segments = segments[1:]
        return prefix + "/".join(segments)

    def top_level_exports(self, node: SyntaxNode) -> list[str]:
        if node.kind not in self._PUBLIC_ITEMS:
            return []
        if first_child(node, ("visibility_modifier",)) is None:
            return []
        name = self.extract_name(node)
        return [name] if name else []

    def bindings(self, node: SyntaxNode) -> list[tuple[str, Optional[SyntaxNode]]]:
        if node.kind not in ("const_item", "static_item"):
            return []
        name = self.extract_name(node)
        if not name:
            return []
        if node.kind == "static_item" and first_child(node, ("mutable_specifier",)):
            return [(name, None)]
        return [(name, _value_after_equals(node))]


# ── Java / C# ──────────────────────────────────────────────────


class JavaAdapter(LanguageAdapter):
    name = "java"

    function_kinds = frozenset({"method_declaration", "constructor_declaration"})
    type_kinds: Mapping[str, TypeKind] = {
        "class_declaration": "class",
        "record_declaration": "class",
        "interface_declaration": "interface",
        "enum_declaration": "enum",
    }
    import_kinds = frozenset({"import_declaration"})

    def import_paths(self, node: SyntaxNode) -> list[str]:
        target = first_child(node, ("scoped_identifier", "identifier"))
        if target is None:
            return []
        return [target.text.replace(".", "/")]

    def top_level_exports(self, node: SyntaxNode) -> list[str]:
        if self.type_kind(node) is None:
            return []
        modifiers = first_child(node, ("modifiers",))
        if modifiers is None or "public" not in modifiers.text.split():
            return []
        name = self.extract_name(node)
        return [name] if name else []


class CSharpAdapter(JavaAdapter):
    name = "csharp"

    function_kinds = frozenset(
        {"method_declaration", "constructor_declaration", "local_function_statement"}
    )
    type_kinds: Mapping[str, TypeKind] = {
        "class_declaration": "class",
        "record_declaration": "class",
        "struct_declaration": "struct",
        "interface_declaration": "interface",
        "enum_declaration": "enum",
    }
    import_kinds = frozenset({"using_directive"})

    def import_paths(self, node: SyntaxNode) -> list[str]:
        target = first_child(node, ("qualified_name", "identifier"))
        if target is None:
            return []
        return [target.text.replace(".", "/")]

    def top_level_exports(self, node: SyntaxNode) -> list[str]:
        if node.kind in ("namespace_declaration", "file_scoped_namespace_declaration"):
            body = first_child(node, ("declaration_list",))
            members = body.children if body is not None else node.children
            names: list[str] = []
            for member in members:
                names.extend(self.top_level_exports(member))
            return names
        if self.type_kind(node) is None:
            return []
        if not any(c.kind == "modifier" and c.text == "public" for c in node.children):
            return []
        name = self.extract_name(node)
        return [name] if name else []


# ── C / C++ ────────────────────────────────────────────────────


class CAdapter(LanguageAdapter):
    name = "c"

    function_kinds = frozenset({"function_definition"})
    type_kinds: Mapping[str, TypeKind] = {
        "struct_specifier": "struct",
        "union_specifier": "struct",
        "enum_specifier": "enum",
        "class_specifier": "class",
    }
    import_kinds = frozenset({"preproc_include"})

    def is_function_definition(self, node: SyntaxNode) -> bool:
        return node.kind in self.function_kinds

    def type_kind(self, node: SyntaxNode) -> Optional[TypeKind]:
        kind = self.type_kinds.get(node.kind)
        if kind is None:
            return None
        # `struct foo x;` references a type, only a body defines one
        if not any(c.kind.endswith("_list") for c in node.children):
            return None
        return kind

    def extract_name(self, node: SyntaxNode) -> Optional[str]:
        current: Optional[SyntaxNode] = node
        while current is not None:
            child = identifier_child(current)
            if child is not None:
                return child.text
            current = next((c for c in current.children if c.kind.endswith("declarator")), None)
        return None

    def param_count(self, node: SyntaxNode) -> int:
        params = self._parameter_list(node)
        if params is None:
            return 0
        entries = [c for c in params.children if not is_punctuation(c)]
        if len(entries) == 1 and entries[0].text.strip() == "void":
            return 0
        return len(entries)

    def bindings(self, node: SyntaxNode) -> list[tuple[str, Optional[SyntaxNode]]]:
        if node.kind != "declaration":
            return []
        result: list[tuple[str, Optional[SyntaxNode]]] = []
        for child in node.children:
            if child.kind == "init_declarator":
                name = self.extract_name(child)
                if name:
                    result.append((name, _value_after_equals(child)))
            elif child.kind == "identifier":
                result.append((child.text, None))
        return result


# ── Ruby / PHP ─────────────────────────────────────────────────


class RubyAdapter(LanguageAdapter):
    name = "ruby"

    function_kinds = frozenset({"method", "singleton_method"})
    type_kinds: Mapping[str, TypeKind] = {"class": "class"}
    import_kinds = frozenset()

    def is_function_definition(self, node: SyntaxNode) -> bool:
        return node.kind in self.function_kinds

    def is_export(self, node: SyntaxNode) -> bool:
        return False

    def bindings(self, node: SyntaxNode) -> list[tuple[str, Optional[SyntaxNode]]]:
        if node.kind != "assignment" or not node.children:
            return []
        target = node.children[0]
        if target.kind not in ("identifier", "constant", "global_variable"):
            return []
        return [(target.text, _value_after_equals(node))]


class PHPAdapter(LanguageAdapter):
    name = "php"

    function_kinds = frozenset({"function_definition", "method_declaration"})
    type_kinds: Mapping[str, TypeKind] = {
        "class_declaration": "class",
        "interface_declaration": "interface",
        "trait_declaration": "interface",
        "enum_declaration": "enum",
    }
    import_kinds = frozenset(
        {
            "namespace_use_declaration",
            "include_expression",
            "include_once_expression",
            "require_expression",
            "require_once_expression",
        }
    )

    def is_export(self, node: SyntaxNode) -> bool:
        return False

    def import_paths(self, node: SyntaxNode) -> list[str]:
        if node.kind != "namespace_use_declaration":
            return super().import_paths(node)
        paths: list[str] = []
        for clause in walk(node):
            if clause.kind == "qualified_name":
                paths.append(clause.text.lstrip("\\").replace("\\", "/"))
        return paths


def _value_after_equals(node: SyntaxNode) -> Optional[SyntaxNode]:
    """The child following an ``=`` token, if any."""
    seen_equals = False
    for child in node.children:
        if seen_equals and not is_punctuation(child):
            return child
        if child.kind == "=":
            seen_equals = True
    return None


GENERIC_ADAPTER = LanguageAdapter()

_JAVASCRIPT = JavaScriptAdapter()
_TYPESCRIPT = TypeScriptAdapter()
_C = CAdapter()

ADAPTERS: dict[str, LanguageAdapter] = {
    "javascript": _JAVASCRIPT,
    "jsx": _JAVASCRIPT,
    "typescript": _TYPESCRIPT,
    "tsx": _TYPESCRIPT,
    "python": PythonAdapter(),
    "go": GoAdapter(),
    "rust": RustAdapter(),
    "java": JavaAdapter(),
    "csharp": CSharpAdapter(),
    "c": _C,
    "cpp": _C,
    "ruby": RubyAdapter(),
    "php": PHPAdapter(),
}


def get_adapter(language: str) -> LanguageAdapter:
    """Adapter for a language tag; unknown tags get the generic adapter."""
    return ADAPTERS.get(language.lower(), GENERIC_ADAPTER)


def supported_languages() -> list[str]:
    """Language tags with a dedicated adapter."""
    return sorted(ADAPTERS)
