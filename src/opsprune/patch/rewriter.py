"""Rewriting model-definition expressions under an on-existing policy.

Existing ``.disableOperations(...)`` links are found structurally by walking
the method chain from the outermost call down to the ``model`` root, so they
are detected wherever they sit in the chain and whatever their argument
contains. Removal splices each link out by byte range, from the end of its
receiver to the end of the call, leaving every other byte of the chain as
written.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Literal

import structlog

from opsprune.core.errors import InternalError
from opsprune.parsing import member_property_name, string_literal_value
from opsprune.patch.locator import ModelDefinition, chain_links

log = structlog.get_logger(__name__)

DISABLE_CALLEE = "disableOperations"

ActionKind = Literal["added", "skipped", "overwritten", "merged", "unchanged", "unparseable"]


@dataclass(frozen=True)
class ModelAction:
    """What happened to one model definition."""

    model: str
    action: ActionKind
    disable: list[str] = field(default_factory=list)  # Final disable-list written
    existing: list[str] | None = None  # Entries of a pre-existing call, when read


@dataclass(frozen=True)
class Edit:
    """Replace ``source[start:end]`` with ``text``."""

    start: int
    end: int
    text: bytes


def render_disable_call(operations: list[str]) -> str:
    """``.disableOperations(["a","b"])``."""
    return f".{DISABLE_CALLEE}({json.dumps(operations, separators=(',', ':'))})"


def disable_links(definition: ModelDefinition) -> list[Any]:
    """``.disableOperations(...)`` calls in the chain above the model root."""
    return [
        link
        for link in chain_links(definition.expression)[:-1]
        if member_property_name(link.child_by_field_name("function")) == DISABLE_CALLEE
    ]


def read_disable_argument(link: Any) -> list[str] | None:
    """Entries of a ``disableOperations([...])`` string array, else None."""
    arguments = link.child_by_field_name("arguments")
    array = None
    if arguments is not None:
        array = next((c for c in arguments.named_children if c.type != "comment"), None)
    if array is None or array.type != "array":
        return None
    entries: list[str] = []
    for element in array.named_children:
        if element.type == "comment":
            continue
        value = string_literal_value(element)
        if value is None:
            return None
        entries.append(value)
    return entries


def _strip_links(source: bytes, definition: ModelDefinition, links: list[Any]) -> bytes:
    """Expression text with the given chain links spliced out."""
    start = definition.expression.start_byte
    text = source[start : definition.expression.end_byte]
    spans = []
    for link in links:
        receiver = link.child_by_field_name("function").child_by_field_name("object")
        spans.append((receiver.end_byte - start, link.end_byte - start))
    for lo, hi in sorted(spans, reverse=True):
        text = text[:lo] + text[hi:]
    return text


def _merge(existing: list[str], new: list[str]) -> list[str]:
    return list(dict.fromkeys([*existing, *new]))


def rewrite_model(
    source: bytes,
    definition: ModelDefinition,
    disable: list[str],
    on_existing: str,
) -> tuple[Edit | None, ModelAction]:
    """Decide and render the rewrite of one model definition.

    Models are independent: the returned edit only spans this model's
    expression.
    """
    expr = definition.expression
    links = disable_links(definition)

    if not links:
        if not disable:
            return None, ModelAction(definition.name, "unchanged")
        text = source[expr.start_byte : expr.end_byte] + render_disable_call(disable).encode()
        return Edit(expr.start_byte, expr.end_byte, text), ModelAction(definition.name, "added", disable)

    if on_existing == "skip":
        log.info("model_skipped", model=definition.name, reason="existing disableOperations")
        return None, ModelAction(definition.name, "skipped")

    if on_existing == "merge":
        existing: list[str] = []
        for link in reversed(links):
            entries = read_disable_argument(link)
            if entries is None:
                log.warning("disable_argument_unparseable", model=definition.name)
                return None, ModelAction(definition.name, "unparseable")
            existing.extend(entries)
        final = _merge(existing, disable)
        action: ActionKind = "merged"
    else:
        existing = []
        final = disable
        action = "overwritten"

    text = _strip_links(source, definition, links)
    if final:
        text += render_disable_call(final).encode()
    log.info(f"model_{action}", model=definition.name, disable=final)
    return (
        Edit(expr.start_byte, expr.end_byte, text),
        ModelAction(definition.name, action, final, existing if action == "merged" else None),
    )


def apply_edits(source: bytes, edits: list[Edit]) -> bytes:
    """Apply non-overlapping edits back to front so offsets stay valid.

    Raises:
        InternalError: If two edits overlap.
    """
    ordered = sorted(edits, key=lambda e: e.start, reverse=True)
    for later, earlier in zip(ordered, ordered[1:]):
        if earlier.end > later.start:
            raise InternalError.unexpected(
                "overlapping edits", spans=[(earlier.start, earlier.end), (later.start, later.end)]
            )
    for edit in ordered:
        source = source[: edit.start] + edit.text + source[edit.end :]
    return source
