"""Public API for structlens.

Example:
    >>> from structlens import analyze
    >>>
    >>> result = analyze("/path/to/code")
    >>> result.cycles
    >>>
    >>> # With overrides
    >>> result = analyze("/path/to/code", workers=2, cycle_limit=20)
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from .analysis.models import AnalysisResult
from .config import AnalysisConfig, load_config
from .core.pipeline import analyze_path
from .logging_config import get_logger

logger = get_logger(__name__)


def analyze(
    path: str | Path = ".",
    config: Optional[AnalysisConfig] = None,
    config_file: Optional[Path] = None,
    **overrides,
) -> AnalysisResult:
    """Analyze a codebase and return its structural model.

    Args:
        path: Path to codebase root (default: current directory)
        config: Ready-made configuration; when given, config_file and
            overrides are ignored
        config_file: Optional explicit config file path
        **overrides: Configuration overrides (e.g., workers=4)

    Returns:
        AnalysisResult with facts, metrics, graph, cycles, duplicates,
        dead-code report and summary

    Raises:
        ConfigurationError: If configuration is invalid
        InvalidPathError: If path is not an existing directory
    """
    if config is None:
        config = load_config(config_file=config_file, **overrides)
    logger.debug(f"Analyzing {path}")
    return analyze_path(path, config)
