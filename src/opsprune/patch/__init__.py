"""Schema patcher: disable unused operation categories per model."""

from opsprune.patch.categories import (
    MUTATION_OPS,
    QUERY_OPS,
    SUBSCRIPTION_OPS,
    build_disable_operations,
)
from opsprune.patch.locator import ModelDefinition, find_model_definitions, find_schema_call
from opsprune.patch.ops import ApplyResult, PatchResult, apply_disable_operations, patch_source
from opsprune.patch.rewriter import ModelAction, render_disable_call

__all__ = [
    "MUTATION_OPS",
    "QUERY_OPS",
    "SUBSCRIPTION_OPS",
    "ApplyResult",
    "ModelAction",
    "ModelDefinition",
    "PatchResult",
    "apply_disable_operations",
    "build_disable_operations",
    "find_model_definitions",
    "find_schema_call",
    "patch_source",
    "render_disable_call",
]
