"""Configuration loading and management for structlens.

Configuration sources are merged in priority order:
    1. Defaults (defined in AnalysisConfig)
    2. Global config (~/.structlens.toml)
    3. Project config (./structlens.toml)
    4. Explicit config file
    5. Environment variables (STRUCTLENS_* prefix)
    6. Keyword overrides (typically CLI flags)

Example:
    >>> config = load_config(workers=2, cycle_limit=10)
    >>> config.cycle_limit
    10
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal, Optional, get_type_hints

from .exceptions import ConfigurationError, InvalidConfigError

Verbosity = Literal["quiet", "normal", "verbose"]

DEFAULT_EXCLUDE_PATTERNS = [
    "*.min.js",
    "*.bundle.js",
    "*.generated.*",
    "*.d.ts",
]


@dataclass(frozen=True)
class AnalysisConfig:
    """Configuration for one analysis run.

    Attributes:
        Performance tuning:
            workers: Parallel extraction workers (None = auto-detect)

        File filtering:
            max_file_size_kb: Larger files are treated as generated and skipped
            max_files: Upper bound on enumerated files
            exclude_patterns: Glob patterns matched against relative paths
            allow_hidden_files: Include dot-files and dot-directories
            follow_symlinks: Follow symbolic links while walking

        Reporting caps:
            cycle_limit: Maximum sampled import cycles
            duplicate_limit: Maximum duplicate groups
            duplicate_min_lines: Ignore functions shorter than this
            hotspot_limit: Maximum complexity hotspots

        Thresholds:
            hotspot_branch_threshold: Branch count above which a file is a hotspot
            hotspot_depth_threshold: Tree depth above which a file is a hotspot
            long_function_lines: Function length reported as long
            many_params_threshold: Parameter count reported as too many
            deep_nesting_threshold: Function nesting depth reported as deep
    """

    # Performance tuning
    workers: Optional[int] = None

    # File filtering
    max_file_size_kb: int = 200
    max_files: int = 10000
    exclude_patterns: list[str] = field(default_factory=lambda: list(DEFAULT_EXCLUDE_PATTERNS))
    allow_hidden_files: bool = False
    follow_symlinks: bool = False

    # Reporting caps
    cycle_limit: int = 5
    duplicate_limit: int = 10
    duplicate_min_lines: int = 1
    hotspot_limit: int = 10

    # Thresholds
    hotspot_branch_threshold: int = 10
    hotspot_depth_threshold: int = 8
    long_function_lines: int = 50
    many_params_threshold: int = 5
    deep_nesting_threshold: int = 5

    # Output control
    verbosity: Verbosity = "normal"

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if self.workers is not None and self.workers < 1:
            raise InvalidConfigError("workers", self.workers, "must be at least 1")
        if self.max_file_size_kb <= 0:
            raise InvalidConfigError("max_file_size_kb", self.max_file_size_kb, "must be positive")
        if self.max_files < 1:
            raise InvalidConfigError("max_files", self.max_files, "must be at least 1")

        for name in ("cycle_limit", "duplicate_limit", "duplicate_min_lines", "hotspot_limit"):
            value = getattr(self, name)
            if value < 1:
                raise InvalidConfigError(name, value, "must be at least 1")

        for name in (
            "hotspot_branch_threshold",
            "hotspot_depth_threshold",
            "long_function_lines",
            "many_params_threshold",
            "deep_nesting_threshold",
        ):
            value = getattr(self, name)
            if value < 0:
                raise InvalidConfigError(name, value, "must be non-negative")

        if self.verbosity not in ("quiet", "normal", "verbose"):
            raise InvalidConfigError("verbosity", self.verbosity, "expected quiet/normal/verbose")

    @property
    def max_file_size_bytes(self) -> int:
        """Get max file size in bytes."""
        return self.max_file_size_kb * 1024


def load_config(config_file: Optional[Path] = None, **overrides) -> AnalysisConfig:
    """Load configuration with auto-discovery and merging.

    Args:
        config_file: Optional explicit config file path
        **overrides: Direct overrides (typically from CLI flags). ``None``
            values are ignored so unset CLI options keep file/env values.

    Returns:
        Validated AnalysisConfig instance

    Raises:
        ConfigurationError: If a config file is missing or invalid
    """
    merged: dict = {}

    global_config = Path.home() / ".structlens.toml"
    if global_config.exists():
        merged.update(_load_toml_file(global_config))

    project_config = Path.cwd() / "structlens.toml"
    if project_config.exists():
        merged.update(_load_toml_file(project_config))

    if config_file is not None:
        if not config_file.exists():
            raise ConfigurationError(f"Config file not found: {config_file}")
        merged.update(_load_toml_file(config_file))

    merged.update(_load_env_vars())

    if overrides.pop("verbose", False):
        overrides["verbosity"] = "verbose"
    if overrides.pop("quiet", False):
        overrides["verbosity"] = "quiet"

    merged.update({k: v for k, v in overrides.items() if v is not None})

    try:
        return AnalysisConfig(**merged)
    except TypeError as e:
        # Unknown field in config
        raise ConfigurationError(f"Invalid configuration: {e}")


def _load_env_vars() -> dict[str, Any]:
    """Load configuration from STRUCTLENS_* environment variables.

    List-valued fields (exclude_patterns) accept a comma-separated string.
    """
    type_hints = get_type_hints(AnalysisConfig)

    result: dict[str, Any] = {}

    for field_name in AnalysisConfig.__dataclass_fields__:
        env_key = f"STRUCTLENS_{field_name.upper()}"
        env_value = os.environ.get(env_key)

        if env_value is None:
            continue

        type_hint = type_hints.get(field_name)
        if type_hint is None:
            continue

        try:
            parsed = _parse_env_value(env_value, type_hint)
        except ValueError as e:
            raise InvalidConfigError(env_key, env_value, str(e))
        if parsed is not None:
            result[field_name] = parsed

    return result


def _parse_env_value(value: str, type_hint: Any) -> Any:
    """Parse environment variable string to the correct type.

    Raises:
        ValueError: If value can't be parsed to expected type
    """
    origin = getattr(type_hint, "__origin__", None)

    # Optional[X] is Union[X, None]
    args = getattr(type_hint, "__args__", ())
    if type(None) in args:
        non_none_types = [t for t in args if t is not type(None)]
        if non_none_types:
            type_hint = non_none_types[0]
            origin = getattr(type_hint, "__origin__", None)

    if origin is list or type_hint is list:
        return [part.strip() for part in value.split(",") if part.strip()]

    if type_hint is bool:
        lower = value.lower()
        if lower in ("true", "1", "yes", "on"):
            return True
        elif lower in ("false", "0", "no", "off"):
            return False
        else:
            raise ValueError(f"expected true/false, got '{value}'")

    if type_hint is int:
        return int(value)

    if type_hint is float:
        return float(value)

    if type_hint is str or origin is Literal:
        return value

    return None


def _load_toml_file(path: Path) -> dict:
    """Load a TOML file, accepting either top-level keys or a [structlens] table."""
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigurationError(f"Invalid config file '{path}': {e}")

    section = data.get("structlens")
    if isinstance(section, dict):
        return section
    return data
