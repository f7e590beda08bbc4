"""Exception hierarchy for structlens."""

from .analysis import AnalysisError, ParsingError, UnsupportedLanguageError
from .base import StructlensError
from .config import ConfigurationError, InvalidConfigError, InvalidPathError

__all__ = [
    "StructlensError",
    "AnalysisError",
    "ParsingError",
    "UnsupportedLanguageError",
    "ConfigurationError",
    "InvalidPathError",
    "InvalidConfigError",
]
