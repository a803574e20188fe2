"""Data types produced while scanning a project for client usage."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal

from opsprune.parsing import ParseResult, SyntacticImport

ClientKind = Literal["variable", "function"]


@dataclass(frozen=True)
class ExportedClient:
    """A file exports a client value, or a function returning one, under some name."""

    defining_file: Path
    local_name: str
    exported_name: str
    kind: ClientKind


@dataclass(frozen=True)
class ClientReference:
    """A local identifier believed to denote a client instance in one file."""

    file: Path
    name: str


@dataclass
class FileAnalysis:
    """Per-file facts gathered once, during export discovery.

    ``variables``/``functions`` hold only direct, in-file matches: a variable
    initialised by a factory call, or a function returning one. Imported and
    derived clients are added later by per-file resolution.
    """

    path: Path
    parsed: ParseResult
    imports: list[SyntacticImport] = field(default_factory=list)
    variables: set[str] = field(default_factory=set)
    functions: set[str] = field(default_factory=set)


@dataclass(frozen=True)
class OperationCall:
    """One ``<client>.models.<Model>.<operation>(...)`` call site."""

    model: str
    operation: str
    file: Path
    line: int
