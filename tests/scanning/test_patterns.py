"""Tests for behavioral pattern rules."""

from structlens.scanning.node import build_node
from structlens.scanning.patterns import (
    MAX_CALLEE_LENGTH,
    callee_text,
    match_patterns,
    pattern_categories,
)


def _call(callee, *args, kind="call_expression"):
    return build_node(
        kind,
        build_node("member_expression" if "." in callee else "identifier", text=callee),
        build_node("arguments", build_node("("), *args, build_node(")")),
    )


def _string(value):
    return build_node("string", text=f"'{value}'")


class TestCalleeText:
    def test_non_call_has_no_callee(self):
        assert callee_text(build_node("identifier", text="x")) is None

    def test_whitespace_collapsed(self):
        node = build_node(
            "call_expression",
            build_node("member_expression", text="a\n  .b"),
            build_node("arguments"),
        )
        assert callee_text(node) == "a .b"


class TestCallRule:
    def test_call_site_counted(self):
        assert "call:foo" in match_patterns(_call("foo"))

    def test_long_callee_ignored(self):
        callee = "x" * MAX_CALLEE_LENGTH
        assert not any(tag.startswith("call:") for tag in match_patterns(_call(callee)))

    def test_python_call_kind(self):
        assert "call:print" in match_patterns(_call("print", kind="call"))


class TestAsyncRule:
    def test_await_token(self):
        assert match_patterns(build_node("await")) == ["async"]

    def test_await_expression_not_double_counted(self):
        # Only the leaf keyword token counts
        node = build_node("await_expression", build_node("await"), build_node("identifier", text="p"))
        assert "async" not in match_patterns(node)

    def test_go_statement(self):
        assert "async" in match_patterns(build_node("go_statement", build_node("go"), _call("work")))


class TestErrorRule:
    def test_try_statement(self):
        assert "error:handler" in match_patterns(build_node("try_statement", build_node("try")))

    def test_except_clause(self):
        assert "error:handler" in match_patterns(build_node("except_clause", build_node("except")))

    def test_throw_with_kind(self):
        node = build_node("throw_statement", text="throw new ValidationError('bad')")
        assert match_patterns(node) == ["error:throw", "error:throw:ValidationError"]

    def test_raise_with_kind(self):
        node = build_node("raise_statement", text="raise KeyError(key)")
        assert "error:throw:KeyError" in match_patterns(node)

    def test_rethrow_without_kind(self):
        node = build_node("throw_statement", text="throw err")
        assert match_patterns(node) == ["error:throw"]


class TestEnvRule:
    def test_process_env_member(self):
        node = build_node("member_expression", text="process.env.API_KEY")
        assert match_patterns(node) == ["env:API_KEY"]

    def test_process_env_subscript(self):
        node = build_node("subscript_expression", text="process.env['DB_URL']")
        assert "env:DB_URL" in match_patterns(node)

    def test_os_environ_get(self):
        node = build_node(
            "call",
            build_node("attribute", text="os.environ.get"),
            build_node("argument_list", _string("HOME"), _string("/tmp")),
            text="os.environ.get('HOME', '/tmp')",
        )
        assert "env:HOME" in match_patterns(node)

    def test_os_getenv_go(self):
        node = build_node("call_expression", build_node("selector_expression", text="os.Getenv"), text='os.Getenv("PORT")')
        assert "env:PORT" in match_patterns(node)

    def test_only_full_expression_matches(self):
        # the enclosing call must not count the lookup a second time
        node = build_node("call_expression", build_node("identifier", text="f"), text="f(process.env.X)")
        assert not any(tag.startswith("env:") for tag in match_patterns(node))


class TestLiteralRule:
    def test_url(self):
        assert match_patterns(_string("https://api.example.com/v1")) == ["literal:url"]

    def test_absolute_path(self):
        assert match_patterns(_string("/var/log/app.log")) == ["literal:path"]

    def test_relative_path_ignored(self):
        assert match_patterns(_string("./b")) == []

    def test_interpolated_ignored(self):
        node = build_node("template_string", text="`https://${host}/x`")
        assert match_patterns(node) == []


class TestEventRule:
    def test_emit(self):
        assert "event:emit" in match_patterns(_call("bus.emit", _string("saved")))

    def test_listen(self):
        assert "event:listen" in match_patterns(_call("button.addEventListener"))

    def test_plain_call_is_not_an_event(self):
        assert not any(t.startswith("event:") for t in match_patterns(_call("compute")))


class TestIORule:
    def test_fetch_is_http(self):
        assert "io:http" in match_patterns(_call("fetch", _string("/x")))

    def test_requests_is_http(self):
        assert "io:http" in match_patterns(_call("requests.get", kind="call"))

    def test_query_is_db(self):
        assert "io:db" in match_patterns(_call("db.query"))

    def test_fs_read(self):
        assert "io:fs" in match_patterns(_call("fs.readFileSync"))

    def test_json_serialize(self):
        assert "io:serialize" in match_patterns(_call("JSON.stringify"))
        assert "io:serialize" in match_patterns(_call("json.dumps", kind="call"))


class TestPatternCategories:
    def test_categories_listed_in_rule_order(self):
        assert pattern_categories() == ["call", "async", "error", "env", "literal", "event", "io"]

    def test_node_can_match_several_rules(self):
        tags = match_patterns(_call("fetch", _string("https://x.io/a")))
        assert "call:fetch" in tags
        assert "io:http" in tags
