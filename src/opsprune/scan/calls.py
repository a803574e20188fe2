"""Operation-call extraction.

Matches only the exact shape ``<client>.models.<Model>.<operation>(...)``
where ``<client>`` is a resolved client identifier for the file. ``<Model>``
may be a plain property or a literal-string subscript (``models["Todo"]``);
destructured or otherwise computed access is not matched.
"""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path
from typing import Any

from opsprune.parsing import (
    member_property_name,
    node_text,
    string_literal_value,
    unquote,
    unwrap_await,
    walk,
)
from opsprune.scan.models import OperationCall

MODELS_PROPERTY = "models"


def _model_access(node: Any) -> tuple[str | None, Any]:
    """(model name, receiver) for ``<receiver>.Model`` / ``<receiver>["Model"]``."""
    if node is None:
        return None, None
    if node.type == "member_expression":
        prop = node.child_by_field_name("property")
        if prop is None:
            return None, None
        return unquote(node_text(prop)), node.child_by_field_name("object")
    if node.type == "subscript_expression":
        value = string_literal_value(node.child_by_field_name("index"))
        if value is None:
            return None, None
        return value, node.child_by_field_name("object")
    return None, None


def iter_operation_calls(root: Any, clients: set[str], path: Path) -> Iterator[OperationCall]:
    """Yield every matching operation call under ``root``."""
    if not clients:
        return
    for node in walk(root):
        if node.type != "call_expression":
            continue
        # `await a.b<T>()` parses as a call on `await a.b`
        callee = unwrap_await(node.child_by_field_name("function"))
        operation = member_property_name(callee)
        if not operation:
            continue
        model, models_expr = _model_access(callee.child_by_field_name("object"))
        if not model or member_property_name(models_expr) != MODELS_PROPERTY:
            continue
        client = models_expr.child_by_field_name("object")
        if client is None or client.type != "identifier" or node_text(client) not in clients:
            continue
        yield OperationCall(
            model=model,
            operation=operation,
            file=path,
            line=node.start_point[0] + 1,
        )
