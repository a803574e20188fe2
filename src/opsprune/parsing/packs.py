"""LanguagePack registry for the grammars opsprune parses.

Each supported language has exactly ONE LanguagePack holding its grammar
module and file detection rules. Only the TypeScript family is
registered: the data client and the schema resource are both TypeScript.

The PACKS registry is the canonical lookup: ``PACKS["typescript"]``.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class LanguagePack:
    """Tree-sitter configuration for a single language."""

    # -- Identity --
    name: str  # Canonical language name ("typescript", "tsx")
    grammar_name: str  # tree-sitter grammar key

    # -- Grammar module --
    grammar_module: str  # Python import ("tree_sitter_typescript")
    # Non-standard function name (e.g. "language_typescript", "language_tsx")
    language_func: str | None = None

    # -- File detection --
    extensions: frozenset[str] = field(default_factory=frozenset)


TYPESCRIPT_PACK = LanguagePack(
    name="typescript",
    grammar_name="typescript",
    grammar_module="tree_sitter_typescript",
    language_func="language_typescript",
    extensions=frozenset({"ts", "mts", "cts"}),
)

TSX_PACK = LanguagePack(
    name="tsx",
    grammar_name="tsx",
    grammar_module="tree_sitter_typescript",
    language_func="language_tsx",
    extensions=frozenset({"tsx"}),
)

_ALL_PACKS: tuple[LanguagePack, ...] = (TYPESCRIPT_PACK, TSX_PACK)

# name -> Pack
PACKS: dict[str, LanguagePack] = {pack.name: pack for pack in _ALL_PACKS}

# Extension -> Pack
_EXT_TO_PACK: dict[str, LanguagePack] = {}
for _pack in _ALL_PACKS:
    for _ext in _pack.extensions:
        _EXT_TO_PACK[_ext] = _pack

SOURCE_EXTENSIONS: frozenset[str] = frozenset(_EXT_TO_PACK)


def get_pack_for_ext(ext: str) -> LanguagePack | None:
    """Get a LanguagePack for a file extension (without leading dot)."""
    return _EXT_TO_PACK.get(ext.lower())


def get_pack(name: str) -> LanguagePack | None:
    """Get a LanguagePack by language name."""
    return PACKS.get(name)
