"""Tests for structural clone detection."""

from structlens.analysis.duplicates import detect_duplicates
from structlens.scanning.models import FileFacts, FunctionFact


def _fn(name, digest, params=0, lines=3):
    return FunctionFact(
        name=name,
        signature=f"{name}({params})",
        structural_hash=digest,
        line_count=lines,
        param_count=params,
        start_line=1,
    )


def _facts(path, *functions):
    return FileFacts(path=path, functions=tuple(functions))


class TestDetectDuplicates:
    def test_renamed_functions_grouped(self):
        facts = {
            "a.js": _facts("a.js", _fn("add", "aaaa1111", 2)),
            "b.js": _facts("b.js", _fn("sum", "aaaa1111", 2)),
        }
        [group] = detect_duplicates(facts)
        assert group.hash == "aaaa1111"
        assert group.size == 2
        assert [(m.file, m.signature) for m in group.members] == [("a.js", "add(2)"), ("b.js", "sum(2)")]
        assert group.files == ["a.js", "b.js"]

    def test_singletons_dropped(self):
        facts = {"a.js": _facts("a.js", _fn("f", "11111111"), _fn("g", "22222222"))}
        assert detect_duplicates(facts) == []

    def test_same_file_duplicates(self):
        facts = {"a.js": _facts("a.js", _fn("f", "11111111"), _fn("g", "11111111"))}
        [group] = detect_duplicates(facts)
        assert group.files == ["a.js"]
        assert group.size == 2

    def test_largest_first_then_first_seen(self):
        facts = {
            "a.js": _facts("a.js", _fn("p", "pppppppp"), _fn("q", "qqqqqqqq")),
            "b.js": _facts("b.js", _fn("p2", "pppppppp"), _fn("q2", "qqqqqqqq")),
            "c.js": _facts("c.js", _fn("q3", "qqqqqqqq")),
        }
        groups = detect_duplicates(facts)
        assert [g.hash for g in groups] == ["qqqqqqqq", "pppppppp"]

    def test_equal_sizes_keep_path_order(self):
        facts = {
            "b.js": _facts("b.js", _fn("x", "xxxxxxxx"), _fn("y2", "yyyyyyyy")),
            "a.js": _facts("a.js", _fn("y", "yyyyyyyy"), _fn("x2", "xxxxxxxx")),
        }
        groups = detect_duplicates(facts)
        assert [g.hash for g in groups] == ["yyyyyyyy", "xxxxxxxx"]

    def test_limit(self):
        facts = {
            "a.js": _facts("a.js", *[_fn(f"f{i}", f"{i:08d}") for i in range(15)]),
            "b.js": _facts("b.js", *[_fn(f"g{i}", f"{i:08d}") for i in range(15)]),
        }
        assert len(detect_duplicates(facts)) == 10
        assert len(detect_duplicates(facts, limit=3)) == 3

    def test_min_lines(self):
        facts = {
            "a.js": _facts("a.js", _fn("f", "11111111", lines=1)),
            "b.js": _facts("b.js", _fn("g", "11111111", lines=1)),
        }
        assert len(detect_duplicates(facts)) == 1
        assert detect_duplicates(facts, min_lines=2) == []

    def test_members_not_truncated(self):
        facts = {f"f{i}.js": _facts(f"f{i}.js", _fn("h", "hhhhhhhh")) for i in range(25)}
        [group] = detect_duplicates(facts)
        assert group.size == 25
