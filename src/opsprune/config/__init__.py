"""Config module exports."""

from opsprune.config.loader import load_config
from opsprune.config.models import (
    ApplyConfig,
    LoggingConfig,
    OpsPruneConfig,
    ScanConfig,
)

__all__ = [
    "load_config",
    "ApplyConfig",
    "LoggingConfig",
    "OpsPruneConfig",
    "ScanConfig",
]
