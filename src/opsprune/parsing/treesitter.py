"""Tree-sitter parsing for syntactic analysis of TypeScript sources.

This module provides:
- Parsing of ``.ts``/``.tsx`` files into traversable syntax trees
- Import extraction (named, default and namespace imports)
- Small node helpers shared by the scanner and the patcher

Note: everything here is syntactic. No type is ever resolved; an identifier
named X is only known to appear at a given place.
"""

from __future__ import annotations

import importlib
from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import structlog
import tree_sitter

from opsprune.parsing.packs import PACKS, LanguagePack, get_pack, get_pack_for_ext

log = structlog.get_logger(__name__)

_QUOTES = ("'", '"', "`")


@dataclass
class SyntacticImport:
    """An import binding extracted via Tree-sitter parsing."""

    imported_name: str  # Exported name on the module side ("default", "*" or a name)
    alias: str | None  # Local alias (None if no alias)
    source_literal: str | None  # Module specifier string
    import_kind: str  # js_import
    start_line: int
    type_only: bool = False

    @property
    def local_name(self) -> str:
        return self.alias or self.imported_name


@dataclass
class ParseResult:
    """Result of parsing a file."""

    path: Path
    tree: Any  # Tree-sitter Tree (not serializable)
    language: str
    error_count: int
    total_nodes: int
    root_node: Any  # Tree-sitter Node
    source: bytes = b""


@dataclass
class TreeSitterParser:
    """
    Tree-sitter parser for TypeScript and TSX.

    Usage::

        parser = TreeSitterParser()
        result = parser.parse(Path("src/client.ts"))
        imports = parser.extract_imports(result)
    """

    _parser: Any = field(default=None, repr=False)
    _languages: dict[str, Any] = field(default_factory=dict, repr=False)

    def __post_init__(self) -> None:
        """Initialize the parser."""
        self._parser = tree_sitter.Parser()
        self._languages = {}

    def _get_language(self, lang_name: str) -> Any:
        """Get or load a Tree-sitter language via its LanguagePack."""
        if lang_name in self._languages:
            return self._languages[lang_name]

        pack = self._find_pack_by_grammar(lang_name)
        if pack is None:
            raise ValueError(f"Language not available: {lang_name}")

        try:
            mod = importlib.import_module(pack.grammar_module)
            lang_fn = getattr(mod, pack.language_func or "language")
            lang = tree_sitter.Language(lang_fn())
        except (ImportError, AttributeError) as err:
            raise ValueError(f"Language not available: {lang_name}") from err

        self._languages[lang_name] = lang
        return lang

    @staticmethod
    def _find_pack_by_grammar(grammar_name: str) -> LanguagePack | None:
        """Find the pack whose grammar_name matches."""
        pack = get_pack(grammar_name)
        if pack is not None and pack.grammar_name == grammar_name:
            return pack
        for p in PACKS.values():
            if p.grammar_name == grammar_name:
                return p
        return None

    def parse(self, path: Path, content: bytes | None = None) -> ParseResult:
        """
        Parse a file with Tree-sitter.

        Args:
            path: Path to file (used for language detection)
            content: File content as bytes. If None, reads from path.

        Returns:
            ParseResult with tree, language, source and error info.
        """
        if content is None:
            content = path.read_bytes()

        ext = path.suffix.lower().lstrip(".")
        pack = get_pack_for_ext(ext)
        if pack is None:
            raise ValueError(f"Unsupported file extension: {ext}")

        self._parser.language = self._get_language(pack.grammar_name)
        tree = self._parser.parse(content)

        error_count = 0
        total_nodes = 0
        for node in walk(tree.root_node):
            total_nodes += 1
            if node.type == "ERROR" or node.is_missing:
                error_count += 1

        if error_count:
            log.debug("parse_errors", path=str(path), error_count=error_count)

        return ParseResult(
            path=path,
            tree=tree,
            language=pack.name,
            error_count=error_count,
            total_nodes=total_nodes,
            root_node=tree.root_node,
            source=content,
        )

    def extract_imports(self, result: ParseResult) -> list[SyntacticImport]:
        """Extract top-level ES import bindings from a parse result."""
        imports: list[SyntacticImport] = []
        for node in result.root_node.named_children:
            if node.type == "import_statement":
                imports.extend(self._process_js_import_node(node))
        return imports

    def _process_js_import_node(self, node: Any) -> list[SyntacticImport]:
        """Process a single import_statement node."""
        imports: list[SyntacticImport] = []

        source_node = node.child_by_field_name("source")
        source = unquote(node_text(source_node)) if source_node is not None else None
        statement_type_only = any(child.type == "type" for child in node.children)
        line = node.start_point[0] + 1

        for child in node.children:
            if child.type != "import_clause":
                continue
            for clause_child in child.children:
                if clause_child.type == "identifier":
                    imports.append(
                        SyntacticImport(
                            imported_name="default",
                            alias=node_text(clause_child),
                            source_literal=source,
                            import_kind="js_import",
                            start_line=line,
                            type_only=statement_type_only,
                        )
                    )
                elif clause_child.type == "named_imports":
                    for spec in clause_child.named_children:
                        if spec.type != "import_specifier":
                            continue
                        name_node = spec.child_by_field_name("name")
                        alias_node = spec.child_by_field_name("alias")
                        if name_node is None:
                            continue
                        imports.append(
                            SyntacticImport(
                                imported_name=unquote(node_text(name_node)),
                                alias=node_text(alias_node) if alias_node is not None else None,
                                source_literal=source,
                                import_kind="js_import",
                                start_line=line,
                                type_only=statement_type_only
                                or any(c.type == "type" for c in spec.children),
                            )
                        )
                elif clause_child.type == "namespace_import":
                    for ns_child in clause_child.named_children:
                        if ns_child.type == "identifier":
                            imports.append(
                                SyntacticImport(
                                    imported_name="*",
                                    alias=node_text(ns_child),
                                    source_literal=source,
                                    import_kind="js_import",
                                    start_line=line,
                                    type_only=statement_type_only,
                                )
                            )

        return imports


# =========================================================================
# Node helpers
# =========================================================================


def node_text(node: Any) -> str:
    """Decoded source text of a node ("" for None)."""
    if node is None or not node.text:
        return ""
    return node.text.decode("utf-8")


def unquote(text: str) -> str:
    """Strip one pair of matching single, double or backtick quotes."""
    if len(text) >= 2 and text[0] == text[-1] and text[0] in _QUOTES:
        return text[1:-1]
    return text


def walk(node: Any) -> Iterator[Any]:
    """Yield node and all its descendants in pre-order (document order)."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children))


def unwrap_parens(node: Any) -> Any:
    """Strip redundant parentheses around an expression."""
    while node is not None and node.type == "parenthesized_expression" and node.named_children:
        node = node.named_children[0]
    return node


def unwrap_await(node: Any) -> Any:
    """Operand of an ``await_expression``, else the node itself.

    ``await f<T>()`` parses as a call whose function is ``await f``, so callee
    checks look through the await.
    """
    if node is not None and node.type == "await_expression":
        for child in node.named_children:
            if child.type != "comment":
                return unwrap_parens(child)
    return node


def call_callee_name(call: Any) -> str | None:
    """Identifier name of a call's callee (``foo`` in ``foo<T>(...)``), else None."""
    if call is None or call.type != "call_expression":
        return None
    callee = unwrap_await(call.child_by_field_name("function"))
    if callee is None or callee.type != "identifier":
        return None
    return node_text(callee)


def member_property_name(member: Any) -> str | None:
    """Property name of a ``a.b`` member expression, else None."""
    if member is None or member.type != "member_expression":
        return None
    prop = member.child_by_field_name("property")
    return node_text(prop) if prop is not None else None


def string_literal_value(node: Any) -> str | None:
    """Value of a string or substitution-free template literal, else None."""
    if node is None:
        return None
    if node.type == "string":
        return unquote(node_text(node))
    if node.type == "template_string":
        if any(child.type == "template_substitution" for child in node.named_children):
            return None
        return unquote(node_text(node))
    return None
