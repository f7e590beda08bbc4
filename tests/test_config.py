"""Tests for configuration loading and validation."""

import os

import pytest

from structlens.config import DEFAULT_EXCLUDE_PATTERNS, AnalysisConfig, load_config
from structlens.exceptions import ConfigurationError, InvalidConfigError


@pytest.fixture(autouse=True)
def _isolated(tmp_path, monkeypatch):
    """Keep user and project config files out of the way."""
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    monkeypatch.chdir(tmp_path)
    for key in list(os.environ):
        if key.startswith("STRUCTLENS_"):
            monkeypatch.delenv(key)


class TestAnalysisConfig:
    def test_defaults(self):
        config = AnalysisConfig()
        assert config.workers is None
        assert config.cycle_limit == 5
        assert config.duplicate_limit == 10
        assert config.exclude_patterns == DEFAULT_EXCLUDE_PATTERNS
        assert config.max_file_size_bytes == 200 * 1024

    def test_frozen(self):
        config = AnalysisConfig()
        with pytest.raises(AttributeError):
            config.cycle_limit = 9

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"workers": 0},
            {"max_file_size_kb": 0},
            {"max_files": 0},
            {"cycle_limit": 0},
            {"duplicate_limit": -1},
            {"long_function_lines": -5},
            {"verbosity": "loud"},
        ],
    )
    def test_invalid_values(self, kwargs):
        with pytest.raises(InvalidConfigError):
            AnalysisConfig(**kwargs)


class TestLoadConfig:
    def test_defaults(self):
        assert load_config() == AnalysisConfig()

    def test_overrides(self):
        config = load_config(workers=2, cycle_limit=20)
        assert config.workers == 2
        assert config.cycle_limit == 20

    def test_none_overrides_ignored(self):
        assert load_config(workers=None).workers is None

    def test_verbose_and_quiet_flags(self):
        assert load_config(verbose=True).verbosity == "verbose"
        assert load_config(quiet=True).verbosity == "quiet"
        assert load_config(verbose=False, quiet=False).verbosity == "normal"

    def test_project_config(self, tmp_path):
        (tmp_path / "structlens.toml").write_text("cycle_limit = 7\n")
        assert load_config().cycle_limit == 7

    def test_structlens_table(self, tmp_path):
        path = tmp_path / "custom.toml"
        path.write_text("[structlens]\nduplicate_limit = 3\nexclude_patterns = ['*.gen.js']\n")
        config = load_config(config_file=path)
        assert config.duplicate_limit == 3
        assert config.exclude_patterns == ["*.gen.js"]

    def test_explicit_file_beats_project_file(self, tmp_path):
        (tmp_path / "structlens.toml").write_text("cycle_limit = 7\n")
        path = tmp_path / "explicit.toml"
        path.write_text("cycle_limit = 9\n")
        assert load_config(config_file=path).cycle_limit == 9

    def test_env_vars(self, monkeypatch):
        monkeypatch.setenv("STRUCTLENS_WORKERS", "3")
        monkeypatch.setenv("STRUCTLENS_ALLOW_HIDDEN_FILES", "yes")
        monkeypatch.setenv("STRUCTLENS_EXCLUDE_PATTERNS", "*.gen.js, vendor/*")
        config = load_config()
        assert config.workers == 3
        assert config.allow_hidden_files is True
        assert config.exclude_patterns == ["*.gen.js", "vendor/*"]

    def test_override_beats_env(self, monkeypatch):
        monkeypatch.setenv("STRUCTLENS_CYCLE_LIMIT", "4")
        assert load_config(cycle_limit=8).cycle_limit == 8

    def test_bad_env_value(self, monkeypatch):
        monkeypatch.setenv("STRUCTLENS_WORKERS", "many")
        with pytest.raises(InvalidConfigError):
            load_config()

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="not found"):
            load_config(config_file=tmp_path / "nope.toml")

    def test_malformed_toml(self, tmp_path):
        path = tmp_path / "broken.toml"
        path.write_text("cycle_limit = = 3\n")
        with pytest.raises(ConfigurationError):
            load_config(config_file=path)

    def test_unknown_key(self, tmp_path):
        path = tmp_path / "extra.toml"
        path.write_text("colour = 'blue'\n")
        with pytest.raises(ConfigurationError, match="Invalid configuration"):
            load_config(config_file=path)
