"""
structlens - Structural Codebase Analysis

Derives a structural model of a multi-language codebase from its syntax
trees: per-file entities and metrics, the import graph with coupling,
import cycles, structural clones and a dead-code classification.
"""

__version__ = "0.1.0"

from .api import analyze
from .analysis.models import AnalysisResult
from .config import AnalysisConfig, load_config

__all__ = [
    "analyze",
    "AnalysisResult",
    "AnalysisConfig",
    "load_config",
]
