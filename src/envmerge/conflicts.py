"""Conflicts between merged sources and an existing destination file.

A conflict is a key the destination already defines with a different value
than the merged sources. Each one is resolved per strategy:

    overwrite    take the source value
    keep         keep the destination value
    interactive  ask the caller (the CLI prompts the user)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from envmerge.finder import find_variable
from envmerge.merger import merge_sources
from envmerge.models import Document

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

    from envmerge.models import VariableBlock

logger = logging.getLogger("envmerge.conflicts")

STRATEGIES = ("interactive", "overwrite", "keep")
RESOLUTIONS = ("overwrite", "keep")


@dataclass
class Conflict:
    key: str
    source_value: str
    destination_value: str


def _conflicting_blocks(
    merged: Document | None, destination: Document | None
) -> Iterator[tuple[VariableBlock, Conflict]]:
    """Yield each destination variable that merged gives a different value, with its Conflict."""
    if merged is None or destination is None:
        return
    for block in destination.variables:
        match = find_variable(merged, block.key)
        if match is None or match.value == block.value:
            continue
        yield block, Conflict(block.key, match.value, block.value)


def find_conflicts(merged: Document | None, destination: Document | None) -> list[Conflict]:
    """Destination variables whose key is in merged with a different value."""
    return [conflict for _, conflict in _conflicting_blocks(merged, destination)]


def resolve_conflicts(
    merged: Document | None,
    destination: Document | None,
    strategy: str,
    ask: Callable[[Conflict], str] | None = None,
) -> tuple[Document | None, list[Conflict]]:
    """Apply strategy to every conflict.

    Returns a copy of destination with overwritten values, plus the list of
    conflicts that were encountered (resolved either way).
    """
    if strategy not in STRATEGIES:
        msg = f"Invalid strategy {strategy!r}. Must be one of: {', '.join(STRATEGIES)}"
        raise ValueError(msg)
    if strategy == "interactive" and ask is None:
        msg = "interactive strategy requires an ask callback"
        raise ValueError(msg)
    if destination is None:
        return None, []

    resolved = destination.copy()
    conflicts: list[Conflict] = []
    for block, conflict in list(_conflicting_blocks(merged, resolved)):
        conflicts.append(conflict)
        decision = ask(conflict) if strategy == "interactive" else strategy  # type: ignore[misc]
        if decision not in RESOLUTIONS:
            msg = f"Invalid resolution {decision!r} for {conflict.key}"
            raise ValueError(msg)
        logger.debug("%s: %s", conflict.key, decision)
        if decision == "overwrite":
            block.set_value(conflict.source_value)
    return resolved, conflicts


def apply_to_destination(merged: Document | None, destination: Document | None) -> Document:
    """Final document: destination values win, sources fill in missing keys and comments."""
    return merge_sources(merged, destination)
