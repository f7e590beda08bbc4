"""Shared test fixtures for structlens tests."""

import pytest

from structlens.scanning.models import FileFacts


def pytest_addoption(parser):
    """Add --run-slow option for slow tests."""
    parser.addoption(
        "--run-slow",
        action="store_true",
        default=False,
        help="run slow tests",
    )


def pytest_configure(config):
    """Configure slow marker."""
    config.addinivalue_line("markers", "slow: mark test as slow to run")


def pytest_collection_modifyitems(config, items):
    """Skip slow tests unless --run-slow is given."""
    if config.getoption("--run-slow"):
        return
    skip_slow = pytest.mark.skip(reason="need --run-slow option to run")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip_slow)


@pytest.fixture
def cycle_facts():
    """a.js and b.js import each other."""
    return {
        "a.js": FileFacts(path="a.js", import_paths=frozenset({"./b"})),
        "b.js": FileFacts(path="b.js", import_paths=frozenset({"./a"})),
    }


@pytest.fixture
def chain_facts():
    """Chain: a.js -> b.js -> c.js."""
    return {
        "a.js": FileFacts(path="a.js", import_paths=frozenset({"./b"})),
        "b.js": FileFacts(path="b.js", import_paths=frozenset({"./c"})),
        "c.js": FileFacts(path="c.js", exported_names=frozenset({"c"})),
    }


@pytest.fixture
def reexport_facts():
    """index.js re-exports core.js; nothing else imports core.js."""
    return {
        "index.js": FileFacts(
            path="index.js",
            import_paths=frozenset({"./core"}),
            exported_names=frozenset({"add"}),
        ),
        "core.js": FileFacts(path="core.js", exported_names=frozenset({"add"})),
    }


@pytest.fixture
def write_tree(tmp_path):
    """Write {relative path: content} under tmp_path and return the root."""

    def _write(files):
        for rel, content in files.items():
            target = tmp_path / rel
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content)
        return tmp_path

    return _write
