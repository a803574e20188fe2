"""Operation categories and the disable-list rule."""

from __future__ import annotations

from collections.abc import Iterable

from opsprune.usage import (
    CREATE,
    DELETE,
    GET,
    LIST,
    OBSERVE_QUERY,
    ON_CREATE,
    ON_DELETE,
    ON_UPDATE,
    UPDATE,
    OperationName,
)

QUERIES = "queries"
MUTATIONS = "mutations"
SUBSCRIPTIONS = "subscriptions"

# observeQuery needs both queries and subscriptions enabled
QUERY_OPS: frozenset[OperationName] = frozenset((GET, LIST, OBSERVE_QUERY))
MUTATION_OPS: frozenset[OperationName] = frozenset((CREATE, UPDATE, DELETE))
SUBSCRIPTION_OPS: frozenset[OperationName] = frozenset((ON_CREATE, ON_UPDATE, ON_DELETE, OBSERVE_QUERY))

# Fixed output order
CATEGORIES: tuple[tuple[str, frozenset[OperationName]], ...] = (
    (QUERIES, QUERY_OPS),
    (MUTATIONS, MUTATION_OPS),
    (SUBSCRIPTIONS, SUBSCRIPTION_OPS),
)


def build_disable_operations(used: Iterable[OperationName] | None) -> list[str]:
    """Categories none of whose operations appear in ``used``.

    An absent or empty usage disables everything. Unknown operation names
    count toward no category.
    """
    used_set = set(used or ())
    return [name for name, members in CATEGORIES if not used_set & members]
