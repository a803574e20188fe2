"""Tree-sitter parsing for TypeScript sources."""

from opsprune.parsing.treesitter import (
    ParseResult,
    SyntacticImport,
    TreeSitterParser,
    call_callee_name,
    member_property_name,
    node_text,
    string_literal_value,
    unquote,
    unwrap_await,
    unwrap_parens,
    walk,
)

__all__ = [
    "ParseResult",
    "SyntacticImport",
    "TreeSitterParser",
    "call_callee_name",
    "member_property_name",
    "node_text",
    "string_literal_value",
    "unquote",
    "unwrap_await",
    "unwrap_parens",
    "walk",
]
