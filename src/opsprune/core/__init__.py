"""Core module exports."""

from opsprune.core.errors import (
    ConfigError,
    ErrorCode,
    InternalError,
    OpsPruneError,
    ProjectError,
    SchemaError,
    UsageMapError,
)
from opsprune.core.logging import (
    clear_run_id,
    configure_logging,
    get_run_id,
    set_run_id,
)

__all__ = [
    # Errors
    "OpsPruneError",
    "ConfigError",
    "ErrorCode",
    "InternalError",
    "ProjectError",
    "SchemaError",
    "UsageMapError",
    # Logging
    "clear_run_id",
    "configure_logging",
    "get_run_id",
    "set_run_id",
]
