"""Locating model definitions inside the ``schema({...})`` call."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from opsprune.core.errors import SchemaError
from opsprune.parsing import ParseResult, member_property_name, node_text, unquote, unwrap_parens, walk

SCHEMA_CALLEE = "schema"
MODEL_CALLEE = "model"


@dataclass(frozen=True)
class ModelDefinition:
    """One ``Name: a.model({...})...`` property of the schema object."""

    name: str
    expression: Any  # Full value expression, outermost chain link
    root: Any  # The ``.model(...)`` call the chain is built on


def find_schema_call(root: Any) -> Any | None:
    """First call in document order whose callee is a ``.schema`` access."""
    for node in walk(root):
        if node.type == "call_expression":
            if member_property_name(node.child_by_field_name("function")) == SCHEMA_CALLEE:
                return node
    return None


def chain_links(expression: Any) -> list[Any]:
    """Calls of a method chain, outermost first, ending at the ``model`` root.

    Returns an empty list when no link of the chain is a ``.model(...)`` call.
    """
    links: list[Any] = []
    node = unwrap_parens(expression)
    while node is not None and node.type == "call_expression":
        callee = node.child_by_field_name("function")
        if callee is None or callee.type != "member_expression":
            return []
        links.append(node)
        if member_property_name(callee) == MODEL_CALLEE:
            return links
        node = unwrap_parens(callee.child_by_field_name("object"))
    return []


def _first_argument(call: Any) -> Any | None:
    arguments = call.child_by_field_name("arguments")
    if arguments is None:
        return None
    for child in arguments.named_children:
        if child.type != "comment":
            return child
    return None


def _property_name(key: Any) -> str | None:
    if key is None or key.type == "computed_property_name":
        return None
    return unquote(node_text(key))


def find_model_definitions(result: ParseResult) -> list[ModelDefinition]:
    """Model definitions of the schema object, in declaration order.

    Properties whose value is not built on a ``.model(...)`` call are skipped.

    Raises:
        SchemaError: If there is no schema call, or its first argument is not
            an object literal.
    """
    schema_call = find_schema_call(result.root_node)
    if schema_call is None:
        raise SchemaError.schema_not_found(str(result.path))

    models_obj = unwrap_parens(_first_argument(schema_call))
    if models_obj is None or models_obj.type != "object":
        raise SchemaError.schema_arg_not_object(str(result.path))

    definitions: list[ModelDefinition] = []
    for prop in models_obj.named_children:
        if prop.type != "pair":
            continue
        name = _property_name(prop.child_by_field_name("key"))
        value = prop.child_by_field_name("value")
        if name is None or value is None:
            continue
        links = chain_links(value)
        if not links:
            continue
        definitions.append(ModelDefinition(name=name, expression=value, root=links[-1]))
    return definitions
