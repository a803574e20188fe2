"""TypeScript project loading: tsconfig, file discovery, import resolution."""

from opsprune.project.globs import compile_glob, matches_any, normalize_path
from opsprune.project.resolver import ImportPathResolver
from opsprune.project.tsconfig import TsConfig, load_tsconfig, strip_jsonc

__all__ = [
    "ImportPathResolver",
    "TsConfig",
    "compile_glob",
    "load_tsconfig",
    "matches_any",
    "normalize_path",
    "strip_jsonc",
]
