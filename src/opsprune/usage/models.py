"""OperationName constants and UsageMap construction."""

from __future__ import annotations

from collections.abc import Iterable

# Open string enum: unrecognized operation names pass through unchanged.
OperationName = str

GET: OperationName = "get"
LIST: OperationName = "list"
CREATE: OperationName = "create"
UPDATE: OperationName = "update"
DELETE: OperationName = "delete"
OBSERVE_QUERY: OperationName = "observeQuery"
ON_CREATE: OperationName = "onCreate"
ON_UPDATE: OperationName = "onUpdate"
ON_DELETE: OperationName = "onDelete"

KNOWN_OPERATIONS: frozenset[OperationName] = frozenset(
    (GET, LIST, CREATE, UPDATE, DELETE, OBSERVE_QUERY, ON_CREATE, ON_UPDATE, ON_DELETE)
)

# model name -> ascending, duplicate-free operation names
UsageMap = dict[str, list[OperationName]]


def build_usage_map(pairs: Iterable[tuple[str, OperationName]]) -> UsageMap:
    """Group (model, operation) pairs into a UsageMap.

    Discovery order never affects the result: operations are de-duplicated
    and sorted per model, and models are emitted in ascending order.
    """
    grouped: dict[str, set[OperationName]] = {}
    for model, operation in pairs:
        grouped.setdefault(model, set()).add(operation)
    return {model: sorted(grouped[model]) for model in sorted(grouped)}
