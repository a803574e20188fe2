"""Tests for parsing/treesitter.py.

Covers:
- Language selection by extension (ts, tsx)
- Import extraction (default, named, aliased, namespace, type-only)
- Node helpers used by the scanner and the patcher
"""

from __future__ import annotations

from pathlib import Path

import pytest

from opsprune.parsing import (
    TreeSitterParser,
    call_callee_name,
    member_property_name,
    node_text,
    string_literal_value,
    unquote,
    unwrap_parens,
    walk,
)
from opsprune.parsing.packs import SOURCE_EXTENSIONS, get_pack, get_pack_for_ext


@pytest.fixture
def parser() -> TreeSitterParser:
    return TreeSitterParser()


def _first(root, node_type: str):
    return next(n for n in walk(root) if n.type == node_type)


class TestPacks:
    def test_extensions(self) -> None:
        assert {"ts", "tsx", "mts", "cts"} <= SOURCE_EXTENSIONS
        assert get_pack_for_ext("TSX") is get_pack("tsx")
        assert get_pack_for_ext("py") is None


class TestParse:
    def test_parses_typescript(self, parser: TreeSitterParser) -> None:
        result = parser.parse(Path("client.ts"), b"const client = generateClient<Schema>();\n")

        assert result.language == "typescript"
        assert result.error_count == 0
        assert result.root_node.type == "program"
        assert result.source.startswith(b"const client")

    def test_parses_jsx_in_tsx(self, parser: TreeSitterParser) -> None:
        source = b"export function View() { return <div>{items.length}</div>; }\n"

        result = parser.parse(Path("view.tsx"), source)

        assert result.language == "tsx"
        assert result.error_count == 0

    def test_reads_file_when_no_content(self, parser: TreeSitterParser, tmp_path: Path) -> None:
        path = tmp_path / "a.ts"
        path.write_text("export const x = 1;\n")

        result = parser.parse(path)

        assert result.path == path
        assert result.total_nodes > 0

    def test_counts_errors(self, parser: TreeSitterParser) -> None:
        result = parser.parse(Path("broken.ts"), b"const = = ;\n")
        assert result.error_count > 0

    def test_rejects_unsupported_extension(self, parser: TreeSitterParser) -> None:
        with pytest.raises(ValueError, match="Unsupported"):
            parser.parse(Path("script.py"), b"x = 1\n")


class TestExtractImports:
    def test_named_aliased_default_namespace(self, parser: TreeSitterParser) -> None:
        source = b"""
import { client } from './amplify-client.js';
import { client as amplifyClient, other } from "./lib";
import defaultClient from './default';
import * as api from './api';
"""
        result = parser.parse(Path("a.ts"), source)

        imports = parser.extract_imports(result)

        summary = [(i.imported_name, i.local_name, i.source_literal) for i in imports]
        assert summary == [
            ("client", "client", "./amplify-client.js"),
            ("client", "amplifyClient", "./lib"),
            ("other", "other", "./lib"),
            ("default", "defaultClient", "./default"),
            ("*", "api", "./api"),
        ]
        assert [i.start_line for i in imports] == [2, 3, 3, 4, 5]

    def test_type_only_imports_are_marked(self, parser: TreeSitterParser) -> None:
        source = b"""
import type { Schema } from './resource';
import { type V6Client, client } from './client';
"""
        result = parser.parse(Path("a.ts"), source)

        by_name = {i.imported_name: i for i in parser.extract_imports(result)}

        assert by_name["Schema"].type_only is True
        assert by_name["V6Client"].type_only is True
        assert by_name["client"].type_only is False

    def test_side_effect_import_yields_nothing(self, parser: TreeSitterParser) -> None:
        result = parser.parse(Path("a.ts"), b"import './polyfills';\n")
        assert parser.extract_imports(result) == []


class TestNodeHelpers:
    def test_unquote(self) -> None:
        assert unquote('"Todo"') == "Todo"
        assert unquote("'Todo'") == "Todo"
        assert unquote("`Todo`") == "Todo"
        assert unquote("Todo") == "Todo"
        assert unquote("\"Todo'") == "\"Todo'"

    def test_walk_is_document_order(self, parser: TreeSitterParser) -> None:
        result = parser.parse(Path("a.ts"), b"a(); b(); c();\n")

        callees = [call_callee_name(n) for n in walk(result.root_node) if n.type == "call_expression"]

        assert callees == ["a", "b", "c"]

    def test_call_callee_name_ignores_member_callee(self, parser: TreeSitterParser) -> None:
        result = parser.parse(Path("a.ts"), b"x.generateClient();\n")
        assert call_callee_name(_first(result.root_node, "call_expression")) is None

    def test_call_callee_name_with_type_arguments(self, parser: TreeSitterParser) -> None:
        result = parser.parse(Path("a.ts"), b"generateClient<Schema>();\n")
        assert call_callee_name(_first(result.root_node, "call_expression")) == "generateClient"

    def test_member_property_name(self, parser: TreeSitterParser) -> None:
        result = parser.parse(Path("a.ts"), b"client.models;\n")
        assert member_property_name(_first(result.root_node, "member_expression")) == "models"

    def test_unwrap_parens(self, parser: TreeSitterParser) -> None:
        result = parser.parse(Path("a.ts"), b"const x = ((make()));\n")
        value = _first(result.root_node, "variable_declarator").child_by_field_name("value")

        assert unwrap_parens(value).type == "call_expression"
        assert node_text(unwrap_parens(value)) == "make()"

    @pytest.mark.parametrize(
        ("source", "expected"),
        [
            (b'x["Todo"];\n', "Todo"),
            (b"x['Todo'];\n", "Todo"),
            (b"x[`Todo`];\n", "Todo"),
            (b"x[`${name}`];\n", None),
            (b"x[name];\n", None),
        ],
    )
    def test_string_literal_value(
        self, parser: TreeSitterParser, source: bytes, expected: str | None
    ) -> None:
        result = parser.parse(Path("a.ts"), source)
        index = _first(result.root_node, "subscript_expression").child_by_field_name("index")

        assert string_literal_value(index) == expected
