"""tsconfig.json loading and project file discovery.

Only the parts of tsconfig that decide *which files form the project* and
*how bare import specifiers map to files* are read:

- ``files``, ``include``, ``exclude``
- ``compilerOptions.baseUrl``, ``compilerOptions.paths``, ``compilerOptions.outDir``
- relative ``extends`` chains (child settings override the parent's)

tsconfig files are JSON with comments and trailing commas; both are
stripped before decoding.
"""

from __future__ import annotations

import json
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import structlog

from opsprune.core.errors import ProjectError
from opsprune.parsing.packs import SOURCE_EXTENSIONS
from opsprune.project.globs import literal_prefix, matches_any, normalize_path

log = structlog.get_logger(__name__)

# Never traversed during discovery
PRUNED_DIRS: frozenset[str] = frozenset(
    (".git", ".hg", ".svn", "node_modules", "bower_components", "jspm_packages")
)

_DEFAULT_INCLUDE = ("**/*",)
_DEFAULT_EXCLUDE = ("node_modules", "bower_components", "jspm_packages")

# Strings are matched first so comment markers inside them survive.
_COMMENT_RE = re.compile(r'"(?:\\.|[^"\\])*"|//[^\n]*|/\*.*?\*/', re.DOTALL)
_TRAILING_COMMA_RE = re.compile(r'"(?:\\.|[^"\\])*"|,(?=\s*[}\]])', re.DOTALL)


def strip_jsonc(text: str) -> str:
    """Remove comments and trailing commas from JSON-with-comments text."""

    def _keep_strings(match: re.Match[str]) -> str:
        token = match.group(0)
        return token if token.startswith('"') else ""

    text = _COMMENT_RE.sub(_keep_strings, text)
    return _TRAILING_COMMA_RE.sub(_keep_strings, text)


def _read_jsonc(path: Path) -> dict[str, Any]:
    if not path.is_file():
        raise ProjectError.tsconfig_not_found(str(path))
    try:
        data = json.loads(strip_jsonc(path.read_text(encoding="utf-8-sig")))
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ProjectError.tsconfig_parse_error(str(path), str(e)) from e
    if not isinstance(data, dict):
        raise ProjectError.tsconfig_parse_error(str(path), "top level must be an object")
    return data


def _anchor(base_dir: Path, pattern: str) -> str:
    """Anchor a tsconfig pattern to the directory of the config declaring it.

    A final segment without wildcard or extension names a directory and
    matches everything below it, as tsc does.
    """
    pattern = pattern.replace("\\", "/")
    if pattern.startswith("./"):
        pattern = pattern[2:]
    last = pattern.rstrip("/").rsplit("/", 1)[-1]
    if not any(ch in last for ch in "*?") and "." not in last:
        pattern = pattern.rstrip("/") + "/**/*"
    if not os.path.isabs(pattern):
        pattern = normalize_path(base_dir).as_posix().rstrip("/") + "/" + pattern
    return Path(os.path.normpath(pattern)).as_posix()


@dataclass
class TsConfig:
    """Resolved tsconfig with every path anchored to an absolute location."""

    path: Path
    files: list[Path] | None = None
    include: list[str] | None = None
    exclude: list[str] | None = None
    base_url: Path | None = None
    paths: dict[str, list[str]] = field(default_factory=dict)
    paths_base: Path | None = None
    out_dir: Path | None = None

    @property
    def root_dir(self) -> Path:
        return self.path.parent

    def include_patterns(self) -> list[str]:
        if self.include is not None:
            return self.include
        if self.files is not None:
            return []
        return [_anchor(self.root_dir, p) for p in _DEFAULT_INCLUDE]

    def exclude_patterns(self) -> list[str]:
        if self.exclude is not None:
            return self.exclude
        patterns = [_anchor(self.root_dir, p) for p in _DEFAULT_EXCLUDE]
        if self.out_dir is not None:
            patterns.append(self.out_dir.as_posix().rstrip("/") + "/**/*")
        return patterns

    def source_files(self) -> list[Path]:
        """All TypeScript sources that belong to the project, sorted."""
        found: set[Path] = set()

        for listed in self.files or []:
            if listed.is_file() and _is_source(listed):
                found.add(listed)

        include = self.include_patterns()
        exclude = self.exclude_patterns()
        for walk_root in _walk_roots(include):
            for candidate in _iter_files(walk_root):
                if not _is_source(candidate):
                    continue
                if matches_any(candidate, include, self.root_dir) and not matches_any(
                    candidate, exclude, self.root_dir
                ):
                    found.add(candidate)

        return sorted(found)


def load_tsconfig(path: Path | str) -> TsConfig:
    """Load a tsconfig file, following relative ``extends`` chains.

    Raises:
        ProjectError: If the file (or an extended file) is missing or unparseable.
    """
    return _load(normalize_path(path), seen=set())


def _load(path: Path, seen: set[Path]) -> TsConfig:
    if path in seen:
        raise ProjectError.tsconfig_parse_error(str(path), "circular extends")
    seen.add(path)

    raw = _read_jsonc(path)
    base_dir = path.parent

    config = TsConfig(path=path)
    for parent in _parent_paths(raw.get("extends"), base_dir):
        inherited = _load(parent, seen)
        config.files = inherited.files
        config.include = inherited.include
        config.exclude = inherited.exclude
        config.base_url = inherited.base_url
        config.paths = inherited.paths
        config.paths_base = inherited.paths_base
        config.out_dir = inherited.out_dir

    if isinstance(raw.get("files"), list):
        config.files = [normalize_path(base_dir / f) for f in raw["files"] if isinstance(f, str)]
    if isinstance(raw.get("include"), list):
        config.include = [_anchor(base_dir, p) for p in raw["include"] if isinstance(p, str)]
    if isinstance(raw.get("exclude"), list):
        config.exclude = [_anchor(base_dir, p) for p in raw["exclude"] if isinstance(p, str)]

    options = raw.get("compilerOptions")
    if isinstance(options, dict):
        if isinstance(options.get("baseUrl"), str):
            config.base_url = normalize_path(base_dir / options["baseUrl"])
        if isinstance(options.get("outDir"), str):
            config.out_dir = normalize_path(base_dir / options["outDir"])
        if isinstance(options.get("paths"), dict):
            config.paths = {
                key: [t for t in targets if isinstance(t, str)]
                for key, targets in options["paths"].items()
                if isinstance(targets, list)
            }
            config.paths_base = base_dir
        if config.paths and config.base_url is not None:
            # paths are relative to baseUrl when one is set
            config.paths_base = config.base_url

    log.debug(
        "tsconfig_loaded",
        path=str(path),
        has_paths=bool(config.paths),
        base_url=str(config.base_url) if config.base_url else None,
    )
    return config


def _parent_paths(extends: Any, base_dir: Path) -> list[Path]:
    if isinstance(extends, str):
        specs = [extends]
    elif isinstance(extends, list):
        specs = [e for e in extends if isinstance(e, str)]
    else:
        return []

    parents: list[Path] = []
    for spec in specs:
        if not spec.startswith("."):
            # Package-provided base configs (e.g. @tsconfig/node20) are not resolved
            log.warning("tsconfig_extends_skipped", extends=spec)
            continue
        candidate = normalize_path(base_dir / spec)
        if not candidate.is_file() and not spec.endswith(".json"):
            candidate = normalize_path(base_dir / f"{spec}.json")
        parents.append(candidate)
    return parents


def _is_source(path: Path) -> bool:
    name = path.name.lower()
    if name.endswith(".d.ts") or name.endswith(".d.mts") or name.endswith(".d.cts"):
        return False
    return path.suffix.lower().lstrip(".") in SOURCE_EXTENSIONS


def _walk_roots(patterns: list[str]) -> list[Path]:
    """Smallest set of directories covering the literal prefixes of patterns."""
    roots = sorted({Path(literal_prefix(p) or "/") for p in patterns})
    minimal: list[Path] = []
    for root in roots:
        if not any(root == kept or kept in root.parents for kept in minimal):
            minimal.append(root)
    return minimal


def _iter_files(root: Path) -> list[Path]:
    if root.is_file():
        return [root]
    files: list[Path] = []
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(d for d in dirnames if d not in PRUNED_DIRS)
        files.extend(normalize_path(Path(dirpath) / name) for name in filenames)
    return files
