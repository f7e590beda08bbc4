"""Tests for language detection and the per-grammar adapters."""

import pytest

from structlens.scanning.languages import (
    ADAPTERS,
    GENERIC_ADAPTER,
    detect_language,
    get_adapter,
    supported_languages,
    unquote,
)
from structlens.scanning.node import build_node


def _ident(text, kind="identifier"):
    return build_node(kind, text=text)


def _params(*names, kind="formal_parameters"):
    children = [build_node("(", text="(")]
    for i, name in enumerate(names):
        if i:
            children.append(build_node(",", text=","))
        children.append(_ident(name))
    children.append(build_node(")", text=")"))
    return build_node(kind, *children)


# ── detect_language / unquote ────────────────────────────────────────


class TestDetectLanguage:
    @pytest.mark.parametrize(
        "path, expected",
        [
            ("src/a.js", "javascript"),
            ("src/a.mjs", "javascript"),
            ("a.jsx", "jsx"),
            ("a.ts", "typescript"),
            ("a.tsx", "tsx"),
            ("pkg/mod.py", "python"),
            ("main.rs", "rust"),
            ("main.go", "go"),
            ("x.h", "c"),
            ("x.hpp", "cpp"),
            ("A.java", "java"),
            ("A.cs", "csharp"),
            ("a.rb", "ruby"),
            ("a.php", "php"),
            ("A.PY", "python"),
        ],
    )
    def test_known_extensions(self, path, expected):
        assert detect_language(path) == expected

    def test_unknown_extension(self):
        assert detect_language("README.md") is None
        assert detect_language("Makefile") is None


class TestUnquote:
    @pytest.mark.parametrize(
        "literal, expected",
        [
            ("'./b'", "./b"),
            ('"./b"', "./b"),
            ("`./b`", "./b"),
            ('"""doc"""', "doc"),
            ("r'raw'", "raw"),
            ("b'bytes'", "bytes"),
            ("  'x'  ", "x"),
        ],
    )
    def test_strips_delimiters(self, literal, expected):
        assert unquote(literal) == expected


# ── Registry ─────────────────────────────────────────────────────────


class TestAdapterRegistry:
    def test_unknown_language_gets_generic(self):
        assert get_adapter("cobol") is GENERIC_ADAPTER
        assert get_adapter("") is GENERIC_ADAPTER

    def test_lookup_is_case_insensitive(self):
        assert get_adapter("Python") is ADAPTERS["python"]

    def test_supported_languages_sorted(self):
        langs = supported_languages()
        assert langs == sorted(langs)
        assert {"javascript", "python", "go", "rust"} <= set(langs)

    def test_jsx_shares_javascript_adapter(self):
        assert get_adapter("jsx") is get_adapter("javascript")


# ── Generic rules ────────────────────────────────────────────────────


class TestGenericAdapter:
    def test_function_declaration_by_kind_substring(self):
        node = build_node("function_declaration")
        assert GENERIC_ADAPTER.is_function_definition(node)
        assert not GENERIC_ADAPTER.is_function_definition(build_node("call_expression"))

    def test_class_declaration(self):
        assert GENERIC_ADAPTER.type_kind(build_node("class_declaration")) == "class"
        assert GENERIC_ADAPTER.type_kind(build_node("struct_item")) == "struct"
        assert GENERIC_ADAPTER.type_kind(build_node("enum_item")) == "enum"
        assert GENERIC_ADAPTER.type_kind(build_node("interface_declaration")) == "interface"
        assert GENERIC_ADAPTER.type_kind(build_node("if_statement")) is None

    def test_anonymous_markers(self):
        node = build_node("function_declaration", build_node("formal_parameters"))
        assert GENERIC_ADAPTER.function_name(node) == "anonymous"
        assert GENERIC_ADAPTER.type_name(build_node("class_declaration")) == "Anonymous"

    def test_missing_parameter_list_counts_zero(self):
        assert GENERIC_ADAPTER.param_count(build_node("function_declaration")) == 0

    def test_param_count_ignores_punctuation(self):
        node = build_node("function_declaration", _ident("f"), _params("a", "b", "c"))
        assert GENERIC_ADAPTER.param_count(node) == 3

    def test_param_count_skips_nested_functions(self):
        inner = build_node("function_declaration", _ident("g"), _params("x", "y", "z"))
        outer = build_node("function_declaration", _ident("f"), build_node("block", inner))
        assert GENERIC_ADAPTER.param_count(outer) == 0


# ── JavaScript / TypeScript ──────────────────────────────────────────


class TestJavaScriptAdapter:
    adapter = ADAPTERS["javascript"]

    def test_import_statement_path(self):
        node = build_node(
            "import_statement",
            build_node("import"),
            build_node("import_clause", _ident("b")),
            build_node("from"),
            build_node("string", text="'./b'"),
        )
        assert self.adapter.is_import(node)
        assert self.adapter.import_paths(node) == ["./b"]

    def test_template_interpolation_is_not_a_path(self):
        node = build_node("import_statement", build_node("template_string", text="`./${x}`"))
        assert self.adapter.import_paths(node) == []

    def test_export_function(self):
        node = build_node(
            "export_statement",
            build_node("export"),
            build_node("function_declaration", build_node("function"), _ident("add")),
        )
        assert self.adapter.export_names(node) == ["add"]

    def test_export_const(self):
        decl = build_node(
            "lexical_declaration",
            build_node("const"),
            build_node(
                "variable_declarator", _ident("LIMIT"), build_node("="), build_node("number", text="3")
            ),
        )
        node = build_node("export_statement", build_node("export"), decl)
        assert self.adapter.export_names(node) == ["LIMIT"]

    def test_export_specifier_alias(self):
        node = build_node("export_specifier", _ident("a"), build_node("as"), _ident("b"))
        assert self.adapter.export_names(node) == ["b"]

    def test_export_star(self):
        node = build_node(
            "export_statement",
            build_node("export"),
            build_node("*", text="*"),
            build_node("from"),
            build_node("string", text="'./x'"),
        )
        assert self.adapter.export_names(node) == ["*"]
        assert self.adapter.import_paths(node) == ["./x"]

    def test_export_default_expression(self):
        node = build_node(
            "export_statement",
            build_node("export"),
            build_node("default"),
            build_node("arrow_function", text="() => 1"),
        )
        assert self.adapter.export_names(node) == ["default"]

    def test_typescript_types(self):
        ts = ADAPTERS["typescript"]
        assert ts.type_kind(build_node("interface_declaration")) == "interface"
        assert ts.type_kind(build_node("enum_declaration")) == "enum"
        assert ts.type_kind(build_node("abstract_class_declaration")) == "class"


# ── Python ───────────────────────────────────────────────────────────


class TestPythonAdapter:
    adapter = ADAPTERS["python"]

    @pytest.mark.parametrize(
        "spec, expected",
        [
            ("os.path", "os/path"),
            (".utils", "./utils"),
            ("..pkg.mod", "../pkg/mod"),
            ("...x", "../../x"),
            (".", "./"),
        ],
    )
    def test_normalize_specifier(self, spec, expected):
        assert self.adapter.normalize_specifier(spec) == expected

    def test_import_statement(self):
        node = build_node(
            "import_statement",
            build_node("import"),
            build_node("dotted_name", text="os.path"),
            build_node(","),
            build_node("aliased_import", build_node("dotted_name", text="numpy"), build_node("as"), _ident("np")),
        )
        assert self.adapter.import_paths(node) == ["os/path", "numpy"]

    def test_from_import(self):
        node = build_node(
            "import_from_statement",
            build_node("from"),
            build_node("relative_import", text=".models"),
            build_node("import"),
            build_node("dotted_name", text="User"),
        )
        assert self.adapter.import_paths(node) == ["./models"]

    def test_from_dot_import_names_sibling_modules(self):
        node = build_node(
            "import_from_statement",
            build_node("from"),
            build_node("relative_import", build_node("import_prefix", text="."), text="."),
            build_node("import"),
            build_node("dotted_name", text="a"),
            build_node(","),
            build_node("dotted_name", text="b"),
        )
        assert self.adapter.import_paths(node) == ["./", "./a", "./b"]

    def test_dunder_all_exports(self):
        node = build_node(
            "assignment",
            _ident("__all__"),
            build_node("="),
            build_node(
                "list",
                build_node("["),
                build_node("string", text='"load"'),
                build_node(","),
                build_node("string", text='"dump"'),
                build_node("]"),
            ),
        )
        assert self.adapter.is_export(node)
        assert self.adapter.export_names(node) == ["load", "dump"]

    def test_public_top_level_defs_are_exports(self):
        public = build_node("function_definition", build_node("def"), _ident("run"))
        private = build_node("function_definition", build_node("def"), _ident("_helper"))
        decorated = build_node(
            "decorated_definition",
            build_node("decorator", text="@dataclass"),
            build_node("class_definition", build_node("class"), _ident("Point")),
        )
        assert self.adapter.top_level_exports(public) == ["run"]
        assert self.adapter.top_level_exports(private) == []
        assert self.adapter.top_level_exports(decorated) == ["Point"]

    def test_lambda_anonymous_name(self):
        assert self.adapter.anonymous_name == "<lambda>"

    def test_bindings(self):
        stmt = build_node(
            "expression_statement",
            build_node("assignment", _ident("MAX"), build_node("="), build_node("integer", text="3")),
        )
        [(name, value)] = self.adapter.bindings(stmt)
        assert name == "MAX"
        assert value.kind == "integer"


# ── Go / Rust ────────────────────────────────────────────────────────


class TestGoAdapter:
    adapter = ADAPTERS["go"]

    def _param_list(self, *decls):
        return build_node("parameter_list", build_node("("), *decls, build_node(")"))

    def test_grouped_parameters_count_each_name(self):
        # func f(a, b int, c string)
        params = self._param_list(
            build_node("parameter_declaration", _ident("a"), build_node(","), _ident("b"), build_node("type_identifier", text="int")),
            build_node(","),
            build_node("parameter_declaration", _ident("c"), build_node("type_identifier", text="string")),
        )
        node = build_node("function_declaration", build_node("func"), _ident("f"), params)
        assert self.adapter.param_count(node) == 3

    def test_method_receiver_not_counted(self):
        receiver = self._param_list(
            build_node("parameter_declaration", _ident("s"), build_node("type_identifier", text="Server"))
        )
        params = self._param_list(
            build_node("parameter_declaration", _ident("ctx"), build_node("type_identifier", text="Context"))
        )
        node = build_node(
            "method_declaration", build_node("func"), receiver, build_node("field_identifier", text="Run"), params
        )
        assert self.adapter.param_count(node) == 1

    def test_type_spec_kinds(self):
        struct = build_node("type_spec", build_node("type_identifier", text="User"), build_node("struct_type"))
        iface = build_node("type_spec", build_node("type_identifier", text="Store"), build_node("interface_type"))
        alias = build_node("type_spec", build_node("type_identifier", text="ID"), build_node("type_identifier", text="int"))
        assert self.adapter.type_kind(struct) == "struct"
        assert self.adapter.type_kind(iface) == "interface"
        assert self.adapter.type_kind(alias) is None

    def test_capitalised_names_exported(self):
        exported = build_node("function_declaration", build_node("func"), _ident("Serve"))
        private = build_node("function_declaration", build_node("func"), _ident("serve"))
        assert self.adapter.top_level_exports(exported) == ["Serve"]
        assert self.adapter.top_level_exports(private) == []

    def test_import_spec(self):
        node = build_node("import_spec", build_node("interpreted_string_literal", text='"net/http"'))
        assert self.adapter.is_import(node)
        assert self.adapter.import_paths(node) == ["net/http"]


class TestRustAdapter:
    adapter = ADAPTERS["rust"]

    @pytest.mark.parametrize(
        "spec, expected",
        [
            ("crate::graph::models", "graph/models"),
            ("crate::graph::models::Edge", "graph/models"),
            ("self::util", "./util"),
            ("super::super::x", "../../x"),
            ("std::collections::*", "std/collections"),
        ],
    )
    def test_normalize_specifier(self, spec, expected):
        assert self.adapter.normalize_specifier(spec) == expected

    def test_use_declaration(self):
        node = build_node("use_declaration", text="use crate::scan::{walk, Node};")
        assert self.adapter.import_paths(node) == ["scan"]

    def test_mod_declaration_imports_sibling(self):
        node = build_node("mod_item", build_node("mod"), _ident("parser"), build_node(";"))
        assert self.adapter.import_paths(node) == ["./parser"]

    def test_inline_mod_is_not_an_import(self):
        node = build_node("mod_item", build_node("mod"), _ident("tests"), build_node("declaration_list"))
        assert self.adapter.import_paths(node) == []

    def test_pub_items_exported(self):
        public = build_node("function_item", build_node("visibility_modifier", text="pub"), _ident("run"))
        private = build_node("function_item", _ident("helper"))
        assert self.adapter.top_level_exports(public) == ["run"]
        assert self.adapter.top_level_exports(private) == []

    def test_closure_name(self):
        assert self.adapter.anonymous_name == "closure"


# ── C / Java / PHP ───────────────────────────────────────────────────


class TestCAdapter:
    adapter = ADAPTERS["c"]

    def test_name_through_declarators(self):
        node = build_node(
            "function_definition",
            build_node("primitive_type", text="int"),
            build_node(
                "function_declarator",
                _ident("main"),
                build_node("parameter_list", build_node("("), build_node("parameter_declaration", text="void"), build_node(")")),
            ),
            build_node("compound_statement"),
        )
        assert self.adapter.function_name(node) == "main"
        assert self.adapter.param_count(node) == 0

    def test_struct_reference_is_not_a_definition(self):
        ref = build_node("struct_specifier", build_node("struct"), build_node("type_identifier", text="point"))
        body = build_node(
            "struct_specifier",
            build_node("struct"),
            build_node("type_identifier", text="point"),
            build_node("field_declaration_list"),
        )
        assert self.adapter.type_kind(ref) is None
        assert self.adapter.type_kind(body) == "struct"

    def test_include(self):
        node = build_node("preproc_include", build_node("#include"), build_node("string_literal", text='"util.h"'))
        assert self.adapter.import_paths(node) == ["util.h"]


class TestJavaAdapter:
    adapter = ADAPTERS["java"]

    def test_import_dots_become_slashes(self):
        node = build_node(
            "import_declaration", build_node("import"), build_node("scoped_identifier", text="com.acme.Util")
        )
        assert self.adapter.import_paths(node) == ["com/acme/Util"]

    def test_public_class_exported(self):
        node = build_node(
            "class_declaration", build_node("modifiers", text="public final"), _ident("Util")
        )
        assert self.adapter.top_level_exports(node) == ["Util"]


class TestPHPAdapter:
    adapter = ADAPTERS["php"]

    def test_namespace_use(self):
        node = build_node(
            "namespace_use_declaration",
            build_node("use"),
            build_node("namespace_use_clause", build_node("qualified_name", text="\\App\\Models\\User")),
        )
        assert self.adapter.import_paths(node) == ["App/Models/User"]

    def test_require_once(self):
        node = build_node("require_once_expression", build_node("require_once"), build_node("string", text="'lib.php'"))
        assert self.adapter.import_paths(node) == ["lib.php"]
