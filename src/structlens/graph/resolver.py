"""Import-specifier resolution against the set of analyzed files.

Resolution order, first hit wins:

  Relative specifiers (leading ``.``), normalised against the importing
  file's directory:
    1. exact path
    2. path with each of SOURCE_EXTENSIONS (after stripping a known one)
    3. path joined with each of INDEX_FILENAMES

  Bare specifiers (``lodash``, ``pkg/mod``, ``utils/format``):
    4. fuzzy suffix match: a known file whose extension-stripped name equals
       the last segment and whose parent directories agree with the
       specifier's remaining segments, compared right to left until either
       side runs out. Known paths are scanned in sorted order.

The fuzzy match is a heuristic. It can bind ``helpers`` to an unrelated
``vendor/helpers.js`` that merely shares the trailing segment; that loss of
precision is accepted in exchange for resolving package-style and
path-aliased imports without bundler or package-manager configuration.
Unresolved specifiers are not errors; the caller records them.
"""

from __future__ import annotations

import posixpath
from typing import Iterable, Optional

SOURCE_EXTENSIONS = (
    ".js",
    ".ts",
    ".jsx",
    ".tsx",
    ".mjs",
    ".cjs",
    ".py",
    ".rb",
    ".rs",
    ".go",
    ".java",
    ".php",
    ".cs",
)

INDEX_FILENAMES = (
    "index.js",
    "index.ts",
    "index.jsx",
    "index.tsx",
    "__init__.py",
    "mod.rs",
)

_INDEX_STEMS = frozenset(posixpath.splitext(name)[0] for name in INDEX_FILENAMES)


def strip_extension(name: str) -> str:
    """Drop a recognised source extension from a path or filename."""
    root, ext = posixpath.splitext(name)
    return root if ext in SOURCE_EXTENSIONS else name


class ImportResolver:
    """Resolves raw import specifiers to known file paths.

    Pure: the result depends only on (specifier, importing file, known paths).
    """

    def __init__(self, known_paths: Iterable[str]) -> None:
        self._known = frozenset(known_paths)
        self._sorted = sorted(self._known)
        # (stripped segments, path) pairs for the fuzzy pass
        self._candidates = [(self._segments(path), path) for path in self._sorted]
        self._index_candidates = [
            (segments[:-1], path)
            for segments, path in self._candidates
            if len(segments) > 1 and segments[-1] in _INDEX_STEMS
        ]

    @staticmethod
    def _segments(path: str) -> list[str]:
        return [strip_extension(part) for part in path.split("/") if part and part != "."]

    def resolve(self, import_path: str, from_file: str) -> Optional[str]:
        """Resolve one specifier, or None when no analyzed file matches."""
        spec = import_path.strip()
        if not spec:
            return None
        if spec.startswith("."):
            return self._resolve_relative(spec, from_file)
        return self._resolve_bare(spec)

    def _resolve_relative(self, spec: str, from_file: str) -> Optional[str]:
        joined = posixpath.join(posixpath.dirname(from_file), spec)
        normalized = posixpath.normpath(joined)
        if normalized.startswith("./"):
            normalized = normalized[2:]

        if normalized in self._known:
            return normalized

        stem = strip_extension(normalized)
        for ext in SOURCE_EXTENSIONS:
            candidate = stem + ext
            if candidate in self._known:
                return candidate

        base = normalized.rstrip("/")
        for index_name in INDEX_FILENAMES:
            candidate = posixpath.join(base, index_name) if base != "." else index_name
            if candidate in self._known:
                return candidate

        return None

    def _resolve_bare(self, spec: str) -> Optional[str]:
        wanted = self._segments(spec)
        if not wanted:
            return None
        for candidates in (self._candidates, self._index_candidates):
            for segments, path in candidates:
                if _suffix_matches(wanted, segments):
                    return path
        return None


def _suffix_matches(wanted: list[str], segments: list[str]) -> bool:
    """Last segments equal, then pairwise agreement right to left."""
    if not segments or segments[-1] != wanted[-1]:
        return False
    for a, b in zip(reversed(wanted), reversed(segments)):
        if a != b:
            return False
    return True
