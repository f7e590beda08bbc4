"""Tests for structural hashing of function subtrees."""

from structlens.scanning.hashing import HASH_LENGTH, structural_hash, structural_signature
from structlens.scanning.node import build_node


def _function(name, a, b, operator="+", comment=None, with_if=False):
    body = [
        build_node(
            "return_statement",
            build_node("return"),
            build_node(
                "binary_expression",
                build_node("identifier", text=a),
                build_node(operator),
                build_node("identifier", text=b),
            ),
        )
    ]
    if comment:
        body.insert(0, build_node("comment", text=comment))
    if with_if:
        body.insert(0, build_node("if_statement", build_node("if"), build_node("identifier", text=a)))
    return build_node(
        "function_declaration",
        build_node("function"),
        build_node("identifier", text=name),
        build_node(
            "formal_parameters",
            build_node("("),
            build_node("identifier", text=a),
            build_node(","),
            build_node("identifier", text=b),
            build_node(")"),
        ),
        build_node("statement_block", build_node("{"), *body, build_node("}")),
    )


class TestStructuralSignature:
    def test_kinds_joined_in_pre_order(self):
        node = build_node("a", build_node("b", build_node("c")), build_node("d"))
        assert structural_signature(node) == "a:b:c:d"

    def test_identifier_children_skipped(self):
        node = build_node("call", build_node("identifier"), build_node("arguments"))
        assert structural_signature(node) == "call:arguments"

    def test_identifier_variants_skipped(self):
        node = build_node(
            "x",
            build_node("property_identifier"),
            build_node("type_identifier"),
            build_node("shorthand_property_identifier"),
        )
        assert structural_signature(node) == "x"

    def test_comment_children_skipped(self):
        node = build_node("block", build_node("comment"), build_node("line_comment"))
        assert structural_signature(node) == "block"


class TestStructuralHash:
    def test_fixed_width_hex(self):
        digest = structural_hash(_function("add", "x", "y"))
        assert len(digest) == HASH_LENGTH == 8
        int(digest, 16)

    def test_stable_across_calls(self):
        node = _function("add", "x", "y")
        assert structural_hash(node) == structural_hash(node)

    def test_rename_does_not_change_hash(self):
        assert structural_hash(_function("add", "x", "y")) == structural_hash(
            _function("sum", "a", "b")
        )

    def test_comment_does_not_change_hash(self):
        assert structural_hash(_function("add", "x", "y")) == structural_hash(
            _function("add", "x", "y", comment="// adds")
        )

    def test_control_flow_changes_hash(self):
        assert structural_hash(_function("add", "x", "y")) != structural_hash(
            _function("add", "x", "y", with_if=True)
        )

    def test_literal_text_ignored(self):
        one = build_node("return_statement", build_node("number", text="1"))
        two = build_node("return_statement", build_node("number", text="2"))
        assert structural_hash(one) == structural_hash(two)

    def test_operator_kind_counts(self):
        # Operators are distinct leaf kinds
        assert structural_hash(_function("f", "x", "y", operator="+")) != structural_hash(
            _function("f", "x", "y", operator="-")
        )
