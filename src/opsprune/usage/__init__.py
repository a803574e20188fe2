"""Operation names and the usage map shared by the scanner and the patcher."""

from opsprune.usage.io import dump_usage_map, load_usage_map
from opsprune.usage.models import (
    CREATE,
    DELETE,
    GET,
    KNOWN_OPERATIONS,
    LIST,
    OBSERVE_QUERY,
    ON_CREATE,
    ON_DELETE,
    ON_UPDATE,
    UPDATE,
    OperationName,
    UsageMap,
    build_usage_map,
)

__all__ = [
    "CREATE",
    "DELETE",
    "GET",
    "KNOWN_OPERATIONS",
    "LIST",
    "OBSERVE_QUERY",
    "ON_CREATE",
    "ON_DELETE",
    "ON_UPDATE",
    "UPDATE",
    "OperationName",
    "UsageMap",
    "build_usage_map",
    "dump_usage_map",
    "load_usage_map",
]
