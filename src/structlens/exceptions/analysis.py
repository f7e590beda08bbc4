"""Analysis-related exceptions: parsing and language support."""

from pathlib import Path
from typing import List, Union

from .base import StructlensError


class AnalysisError(StructlensError):
    """Base class for analysis-related errors."""

    pass


class ParsingError(AnalysisError):
    """Raised when a syntax tree cannot be produced for a file."""

    def __init__(self, filepath: Union[Path, str], language: str, reason: str):
        super().__init__(
            f"Failed to parse {language} file: {filepath}",
            details={"filepath": str(filepath), "language": language, "reason": reason},
        )
        self.filepath = filepath
        self.language = language
        self.reason = reason


class UnsupportedLanguageError(AnalysisError):
    """Raised when no grammar is available for a language tag."""

    def __init__(self, language: str, supported_languages: List[str]):
        super().__init__(
            f"Unsupported language: {language}",
            details={"language": language, "supported": ", ".join(supported_languages)},
        )
        self.language = language
        self.supported_languages = supported_languages
