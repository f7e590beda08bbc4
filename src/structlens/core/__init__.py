"""Pipeline orchestration and progress reporting."""

from .pipeline import AnalysisPipeline, analyze_path
from .progress import ProgressReporter, SilentReporter

__all__ = ["AnalysisPipeline", "analyze_path", "ProgressReporter", "SilentReporter"]
