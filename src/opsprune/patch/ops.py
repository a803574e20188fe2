"""Schema patch entry points: in-memory ``patch_source`` and file-level apply."""

from __future__ import annotations

import shutil
from dataclasses import dataclass, field
from pathlib import Path

import structlog

from opsprune.core.errors import ConfigError, SchemaError
from opsprune.parsing import TreeSitterParser
from opsprune.patch.categories import build_disable_operations
from opsprune.patch.locator import find_model_definitions
from opsprune.patch.rewriter import Edit, ModelAction, apply_edits, rewrite_model
from opsprune.usage import UsageMap, load_usage_map

log = structlog.get_logger(__name__)

ON_EXISTING_CHOICES = ("skip", "overwrite", "merge")


@dataclass
class PatchResult:
    """Outcome of patching one source text."""

    source: bytes
    actions: list[ModelAction] = field(default_factory=list)
    changed: bool = False


@dataclass
class ApplyResult:
    """Outcome of patching one resource file."""

    resource_path: Path
    actions: list[ModelAction] = field(default_factory=list)
    dry_run: bool = False
    saved: bool = False
    backup_path: Path | None = None
    changed: bool = False


def _check_on_existing(on_existing: str) -> None:
    if on_existing not in ON_EXISTING_CHOICES:
        raise ConfigError.invalid_value(
            "on_existing", on_existing, f"expected one of {', '.join(ON_EXISTING_CHOICES)}"
        )


def patch_source(
    source: bytes,
    usage: UsageMap,
    on_existing: str = "skip",
    *,
    path: Path | None = None,
) -> PatchResult:
    """Add, replace or merge ``.disableOperations([...])`` on every model.

    Args:
        source: Resource file content.
        usage: Model name -> used operations.
        on_existing: Policy for models already carrying a disable call.
        path: Used for language detection and error details only.

    Raises:
        SchemaError: No schema call, or its argument is not an object literal.
        ConfigError: Unknown ``on_existing`` policy.
    """
    _check_on_existing(on_existing)
    path = path or Path("resource.ts")
    parsed = TreeSitterParser().parse(path, source)
    definitions = find_model_definitions(parsed)

    edits: list[Edit] = []
    actions: list[ModelAction] = []
    for definition in definitions:
        disable = build_disable_operations(usage.get(definition.name))
        edit, action = rewrite_model(source, definition, disable, on_existing)
        if edit is not None:
            edits.append(edit)
        actions.append(action)
        log.debug("model_processed", model=definition.name, action=action.action, disable=disable)

    patched = apply_edits(source, edits)
    return PatchResult(source=patched, actions=actions, changed=patched != source)


def apply_disable_operations(
    resource_path: Path | str,
    usage_path: Path | str,
    *,
    dry_run: bool = False,
    backup: bool = True,
    on_existing: str = "skip",
    backup_suffix: str = ".bak",
) -> ApplyResult:
    """Patch a schema resource file in place from a usage-map file.

    All structural checks run before anything is written. Unless ``dry_run``,
    the original is first copied to ``<resource><backup_suffix>`` (when
    ``backup``) and the patched content is then written over the resource.

    Raises:
        UsageMapError: Missing or malformed usage map.
        SchemaError: Missing resource file, or no usable schema call.
        ConfigError: Unknown ``on_existing`` policy.
    """
    resource_path = Path(resource_path)
    _check_on_existing(on_existing)
    usage = load_usage_map(usage_path)

    try:
        original = resource_path.read_bytes()
    except FileNotFoundError as e:
        raise SchemaError.resource_not_found(str(resource_path)) from e

    patched = patch_source(original, usage, on_existing, path=resource_path)
    result = ApplyResult(
        resource_path=resource_path,
        actions=patched.actions,
        dry_run=dry_run,
        changed=patched.changed,
    )

    if dry_run:
        log.info("apply_dry_run", path=str(resource_path), changed=patched.changed)
        return result

    if backup:
        backup_path = resource_path.with_name(resource_path.name + backup_suffix)
        shutil.copyfile(resource_path, backup_path)
        result.backup_path = backup_path
        log.debug("backup_written", path=str(backup_path))

    resource_path.write_bytes(patched.source)
    result.saved = True
    log.info("apply_saved", path=str(resource_path), changed=patched.changed)
    return result
