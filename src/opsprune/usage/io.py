"""Usage-map file I/O (UTF-8 JSON object of string -> string[])."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import structlog

from opsprune.core.errors import UsageMapError
from opsprune.usage.models import UsageMap

log = structlog.get_logger(__name__)


def load_usage_map(path: Path | str) -> UsageMap:
    """Read and validate a usage-map file.

    Raises:
        UsageMapError: If the file is missing or unreadable, is not valid UTF-8
            JSON, or is not an object whose values are arrays of strings.
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise UsageMapError.file_not_found(str(path)) from e
    except UnicodeDecodeError as e:
        raise UsageMapError.parse_error(str(path), f"not valid UTF-8: {e}") from e
    except OSError as e:
        raise UsageMapError.unreadable(str(path), e.strerror or str(e)) from e

    try:
        data: Any = json.loads(text)
    except json.JSONDecodeError as e:
        raise UsageMapError.parse_error(str(path), str(e)) from e

    if not isinstance(data, dict):
        raise UsageMapError.invalid_shape(str(path), f"top level is {type(data).__name__}")

    usage: UsageMap = {}
    for model, ops in data.items():
        if not isinstance(ops, list) or not all(isinstance(op, str) for op in ops):
            raise UsageMapError.invalid_shape(str(path), f"value for '{model}' is not a string array")
        usage[model] = list(ops)

    log.debug("usage_map_loaded", path=str(path), models=len(usage))
    return usage


def dump_usage_map(usage: UsageMap, path: Path | str) -> Path:
    """Write a usage map as pretty JSON, creating parent directories."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(usage, indent=2) + "\n", encoding="utf-8")
    log.debug("usage_map_written", path=str(path), models=len(usage))
    return path
