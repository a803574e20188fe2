"""Glob matching for tsconfig include/exclude and scan include patterns.

Supports ``**`` (any number of directories, including none), ``*`` (any run
of characters within one path segment) and ``?`` (one character).
Relative patterns are matched against the root-relative POSIX path, absolute
patterns against the absolute POSIX path.
"""

from __future__ import annotations

import os
import re
from collections.abc import Iterable
from functools import lru_cache
from pathlib import Path, PurePosixPath


def normalize_path(path: Path | str) -> Path:
    """Absolute path with ``.``/``..`` collapsed. Symlinks are not followed."""
    return Path(os.path.abspath(path))


@lru_cache(maxsize=256)
def compile_glob(pattern: str) -> re.Pattern[str]:
    """Translate a glob into an anchored regular expression.

    >>> bool(compile_glob("**/*.ts").match("app.ts"))
    True
    >>> bool(compile_glob("src/*.ts").match("src/lib/app.ts"))
    False
    """
    parts: list[str] = []
    i = 0
    while i < len(pattern):
        c = pattern[i]
        if c == "*":
            if pattern.startswith("**", i):
                i += 2
                if pattern.startswith("/", i):
                    i += 1
                    parts.append("(?:.*/)?")
                else:
                    parts.append(".*")
                continue
            parts.append("[^/]*")
        elif c == "?":
            parts.append("[^/]")
        else:
            parts.append(re.escape(c))
        i += 1
    return re.compile("".join(parts) + r"\Z")


def is_absolute_pattern(pattern: str) -> bool:
    return PurePosixPath(pattern).is_absolute() or bool(re.match(r"^[A-Za-z]:[\\/]", pattern))


def matches_any(path: Path, patterns: Iterable[str], root: Path) -> bool:
    """True if path matches at least one pattern."""
    absolute = normalize_path(path).as_posix()
    try:
        relative: str | None = normalize_path(path).relative_to(normalize_path(root)).as_posix()
    except ValueError:
        relative = None

    for pattern in patterns:
        pattern = pattern.replace("\\", "/")
        if is_absolute_pattern(pattern):
            if compile_glob(pattern).match(absolute):
                return True
        elif relative is not None:
            if pattern.startswith("./"):
                pattern = pattern[2:]
            if compile_glob(pattern).match(relative):
                return True
    return False


def literal_prefix(pattern: str) -> str:
    """Leading directory part of a glob that contains no wildcard."""
    segments = pattern.replace("\\", "/").split("/")
    literal: list[str] = []
    for segment in segments[:-1]:
        if any(ch in segment for ch in "*?"):
            break
        literal.append(segment)
    return "/".join(literal)
