"""Tests for patch/locator.py model-definition discovery."""

from __future__ import annotations

from pathlib import Path

import pytest

from opsprune.core.errors import ErrorCode, SchemaError
from opsprune.parsing import TreeSitterParser, node_text
from opsprune.patch import find_model_definitions, find_schema_call


def _parse(source: str):
    return TreeSitterParser().parse(Path("resource.ts"), source.encode())


class TestFindSchemaCall:
    def test_member_callee_named_schema(self) -> None:
        result = _parse("const s = a.schema({});\n")
        assert node_text(find_schema_call(result.root_node)) == "a.schema({})"

    def test_bare_schema_call_is_not_matched(self) -> None:
        result = _parse("const s = schema({});\n")
        assert find_schema_call(result.root_node) is None


class TestFindModelDefinitions:
    def test_models_in_declaration_order(self) -> None:
        result = _parse(
            """
const schema = a.schema({
  Todo: a.model({ content: a.string() }),
  "Post": a
    .model({ title: a.string() })
    .authorization((allow) => [allow.owner()]),
  'Comment': a.model({}).secondaryIndexes((index) => [index("text")]),
  Status: a.enum(["open", "done"]),
  Shape: a.customType({ x: a.float() }),
  shorthand,
  ...spread,
});
"""
        )

        definitions = find_model_definitions(result)

        assert [d.name for d in definitions] == ["Todo", "Post", "Comment"]
        assert node_text(definitions[1].root).startswith("a\n    .model(")
        assert node_text(definitions[1].expression).endswith(".authorization((allow) => [allow.owner()])")

    def test_missing_schema_call(self) -> None:
        with pytest.raises(SchemaError) as exc_info:
            find_model_definitions(_parse("export const data = defineData({});\n"))

        assert exc_info.value.code == ErrorCode.SCHEMA_NOT_FOUND
        assert exc_info.value.message == "schema() not found"

    @pytest.mark.parametrize("arg", ["", "models", "[]", '"x"'])
    def test_argument_not_object(self, arg: str) -> None:
        with pytest.raises(SchemaError) as exc_info:
            find_model_definitions(_parse(f"const schema = a.schema({arg});\n"))

        assert exc_info.value.code == ErrorCode.SCHEMA_ARG_NOT_OBJECT
        assert exc_info.value.message == "schema() arg is not object"

    def test_model_root_must_be_member_call(self) -> None:
        result = _parse("const schema = a.schema({ Todo: model({}), Post: a.model({}) });\n")

        assert [d.name for d in find_model_definitions(result)] == ["Post"]
