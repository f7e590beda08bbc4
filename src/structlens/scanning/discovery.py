"""Default file enumerator.

Walks a directory tree and yields the source files worth analyzing, after
applying the built-in directory ignore list, gitignore-style ignore files
found at the root, glob exclusions and the maximum file size.
"""

from __future__ import annotations

import fnmatch
import os
from pathlib import Path
from typing import Iterable, Optional

from ..config import AnalysisConfig
from ..exceptions import InvalidPathError
from ..logging_config import get_logger
from .languages import detect_language
from .models import SourceFile

logger = get_logger(__name__)

# Build output, dependency caches and editor state
DEFAULT_IGNORED_DIRS = frozenset(
    {
        "node_modules",
        ".git",
        ".svn",
        ".hg",
        "dist",
        "build",
        "out",
        "target",
        "vendor",
        "__pycache__",
        ".pytest_cache",
        ".mypy_cache",
        ".next",
        ".nuxt",
        ".cache",
        ".parcel-cache",
        ".vite",
        ".turbo",
        "coverage",
        ".nyc_output",
        ".firebase",
        ".terraform",
        ".aws",
        ".azure",
        ".gcloud",
        ".vscode",
        ".idea",
        ".vs",
        "bin",
        "obj",
        ".gradle",
        ".mvn",
        "Pods",
        "DerivedData",
        ".bundle",
        ".venv",
        "venv",
        ".tox",
    }
)

IGNORE_FILES = (
    ".gitignore",
    ".dockerignore",
    ".npmignore",
    ".eslintignore",
    ".prettierignore",
    ".structlensignore",
)


def parse_ignore_file(content: str) -> set[str]:
    """Parse gitignore-style content into a set of patterns.

    Comments, blank lines and negations are dropped; trailing slashes and
    trailing ``/**`` wildcards are stripped so directory patterns match the
    directory name itself.
    """
    patterns: set[str] = set()
    for raw in content.splitlines():
        line = raw.strip()
        if not line or line.startswith("#") or line.startswith("!"):
            continue
        line = line.rstrip("/")
        while line.endswith("/*") or line.endswith("/**"):
            line = line.rsplit("/", 1)[0]
        line = line.lstrip("/")
        if line:
            patterns.add(line)
    return patterns


def load_ignore_patterns(root: Path) -> set[str]:
    """Built-in ignores plus every ignore file present at ``root``."""
    patterns = set(DEFAULT_IGNORED_DIRS)
    for name in IGNORE_FILES:
        ignore_file = root / name
        if not ignore_file.is_file():
            continue
        try:
            patterns |= parse_ignore_file(ignore_file.read_text(encoding="utf-8", errors="replace"))
        except OSError as e:
            logger.warning(f"Cannot read {ignore_file}: {e}")
    return patterns


def should_ignore(relative_path: str, patterns: Iterable[str]) -> bool:
    """True when any path segment, or the path itself, matches a pattern."""
    parts = relative_path.split("/")
    for pattern in patterns:
        if "/" in pattern:
            if fnmatch.fnmatchcase(relative_path, pattern) or relative_path.startswith(
                pattern + "/"
            ):
                return True
            continue
        for part in parts:
            if part == pattern or fnmatch.fnmatchcase(part, pattern):
                return True
    return False


def _is_excluded(relative_path: str, exclude_patterns: Iterable[str]) -> bool:
    name = relative_path.rsplit("/", 1)[-1]
    return any(
        fnmatch.fnmatch(relative_path, pattern) or fnmatch.fnmatch(name, pattern)
        for pattern in exclude_patterns
    )


def discover_files(root: Path | str, config: Optional[AnalysisConfig] = None) -> list[SourceFile]:
    """Enumerate analyzable source files under ``root``.

    Args:
        root: Directory to walk
        config: Filtering options (defaults apply when omitted)

    Returns:
        SourceFile entries sorted by relative path

    Raises:
        InvalidPathError: If root does not exist or is not a directory
    """
    config = config or AnalysisConfig()
    root = Path(root)
    if not root.exists():
        raise InvalidPathError(root, "Path does not exist")
    if not root.is_dir():
        raise InvalidPathError(root, "Not a directory")

    root = root.resolve()
    patterns = load_ignore_patterns(root)
    found: list[SourceFile] = []
    skipped = 0

    for dirpath, dirnames, filenames in os.walk(root, followlinks=config.follow_symlinks):
        rel_dir = Path(dirpath).relative_to(root).as_posix()
        rel_dir = "" if rel_dir == "." else rel_dir

        # Prune in place so ignored trees are never entered
        kept = []
        for d in sorted(dirnames):
            rel = f"{rel_dir}/{d}" if rel_dir else d
            if not config.allow_hidden_files and d.startswith("."):
                continue
            if should_ignore(rel, patterns):
                continue
            kept.append(d)
        dirnames[:] = kept

        for filename in sorted(filenames):
            rel = f"{rel_dir}/{filename}" if rel_dir else filename
            language = detect_language(filename)
            if language is None:
                continue
            if not config.allow_hidden_files and filename.startswith("."):
                skipped += 1
                continue
            if should_ignore(rel, patterns) or _is_excluded(rel, config.exclude_patterns):
                skipped += 1
                logger.debug(f"Skipped (pattern): {rel}")
                continue

            absolute = Path(dirpath) / filename
            try:
                size = absolute.stat().st_size
            except OSError as e:
                logger.warning(f"Cannot stat {absolute}: {e}")
                continue
            if size > config.max_file_size_bytes:
                skipped += 1
                logger.debug(f"Skipped (size): {rel} ({size} bytes)")
                continue

            found.append(SourceFile(str(absolute), rel, language))

    found.sort(key=lambda f: f.relative_path)
    if len(found) > config.max_files:
        logger.warning(f"Reached max files limit ({config.max_files})")
        found = found[: config.max_files]

    logger.info(f"Discovered {len(found)} source files ({skipped} skipped)")
    return found
