"""Whole-codebase analysis over the completed per-file results."""

from .dead_code import classify_dead_code
from .duplicates import detect_duplicates
from .models import (
    Aggregate,
    AnalysisResult,
    CodebaseSummary,
    DeadCodeReport,
    DuplicateGroup,
    DuplicateMember,
    ParseFailure,
)
from .serializers import result_to_dict
from .summary import summarize

__all__ = [
    "classify_dead_code",
    "detect_duplicates",
    "summarize",
    "result_to_dict",
    "Aggregate",
    "AnalysisResult",
    "CodebaseSummary",
    "DeadCodeReport",
    "DuplicateGroup",
    "DuplicateMember",
    "ParseFailure",
]
