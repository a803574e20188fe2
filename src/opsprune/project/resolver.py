"""Import specifier resolution: maps module specifiers to project files.

Resolution strategies:

**Relative** (``./client``, ``../lib/client.js``):
  resolved from the importing file's directory with extension probing.

**Path-mapped** (``@/lib/client``):
  matched against tsconfig ``compilerOptions.paths`` (longest prefix first,
  each substitution tried in order), then probed like a relative path.

**baseUrl** (``lib/client``):
  resolved against ``compilerOptions.baseUrl`` when one is set.

Anything else (npm packages) is unresolvable and yields None.
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from opsprune.project.globs import normalize_path

# TypeScript conventionally imports .ts files with a .js extension
_JS_EXTENSIONS = (".js", ".jsx", ".mjs", ".cjs")
_TS_EXTENSIONS = (".ts", ".tsx", ".mts", ".cts")
_INDEX_NAMES = tuple(f"index{ext}" for ext in _TS_EXTENSIONS)


class ImportPathResolver:
    """Resolves import specifiers against a fixed set of project files.

    Usage::

        resolver = ImportPathResolver(project_files, base_url=cfg.base_url, paths=cfg.paths)
        target = resolver.resolve("./amplify-client.js", importer=Path("/app/src/todo.ts"))
    """

    def __init__(
        self,
        files: Iterable[Path],
        *,
        base_url: Path | None = None,
        paths: dict[str, list[str]] | None = None,
        paths_base: Path | None = None,
    ) -> None:
        self._files: set[Path] = {normalize_path(f) for f in files}
        self._base_url = base_url
        self._paths_base = paths_base or base_url
        # Longest literal prefix wins, as in tsc
        self._path_patterns: list[tuple[str, str | None, list[str]]] = sorted(
            ((*_split_pattern(key), targets) for key, targets in (paths or {}).items()),
            key=lambda entry: len(entry[0]),
            reverse=True,
        )

    def resolve(self, specifier: str | None, importer: Path) -> Path | None:
        """Resolve a single specifier to a project file, or None."""
        if not specifier:
            return None

        if specifier.startswith("."):
            return self._probe(normalize_path(importer).parent / specifier)

        if self._paths_base is not None:
            for prefix, suffix, targets in self._path_patterns:
                star = _match_pattern(specifier, prefix, suffix)
                if star is None:
                    continue
                for target in targets:
                    hit = self._probe(self._paths_base / target.replace("*", star, 1))
                    if hit is not None:
                        return hit

        if self._base_url is not None:
            return self._probe(self._base_url / specifier)

        return None

    def _probe(self, raw: Path) -> Path | None:
        resolved = normalize_path(raw)

        # 1. Exact match (already has a TypeScript extension)
        if resolved in self._files:
            return resolved

        # 2. Extension remapping: './foo.js' -> './foo.ts'
        stem = str(resolved)
        for js_ext in _JS_EXTENSIONS:
            if stem.endswith(js_ext):
                stem = stem[: -len(js_ext)]
                break

        # 3. Probe extensions
        for ext in _TS_EXTENSIONS:
            candidate = Path(stem + ext)
            if candidate in self._files:
                return candidate

        # 4. Probe as directory with index file
        for idx in _INDEX_NAMES:
            candidate = resolved / idx
            if candidate in self._files:
                return candidate

        return None


def _split_pattern(pattern: str) -> tuple[str, str | None]:
    """Split a ``paths`` key at its wildcard; exact keys get a None suffix."""
    if "*" not in pattern:
        return pattern, None
    prefix, _, suffix = pattern.partition("*")
    return prefix, suffix


def _match_pattern(specifier: str, prefix: str, suffix: str | None) -> str | None:
    """Wildcard substitution for a ``paths`` key, or None if it does not apply."""
    if suffix is None:
        return "" if specifier == prefix else None
    if len(specifier) < len(prefix) + len(suffix):
        return None
    if specifier.startswith(prefix) and specifier.endswith(suffix):
        return specifier[len(prefix) : len(specifier) - len(suffix)]
    return None
