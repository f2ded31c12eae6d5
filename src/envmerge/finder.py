"""Lookups over a Document used by the merger and the CLI."""

from __future__ import annotations

from typing import TYPE_CHECKING

from envmerge.models import VariableBlock

if TYPE_CHECKING:
    from envmerge.models import Block, Document


def find_variable(doc: Document | None, key: str) -> VariableBlock | None:
    """First variable with the given key, or None."""
    if doc is None:
        return None
    for block in doc:
        if isinstance(block, VariableBlock) and block.key == key:
            return block
    return None


def find_next_variable(doc: Document, block: Block) -> VariableBlock | None:
    """First variable strictly after block in doc."""
    idx = doc.index_of(block)
    if idx < 0:
        return None
    for candidate in doc.blocks[idx + 1:]:
        if isinstance(candidate, VariableBlock):
            return candidate
    return None


def find_intersection(doc: Document, start: Block | None, other: Document) -> VariableBlock | None:
    """Scan doc forward from start (inclusive) for a variable whose key exists in other.

    Returns the matching block in *other*, i.e. the point where a block
    preceding start in doc should be inserted to keep source order.
    """
    if start is None:
        return None
    idx = doc.index_of(start)
    if idx < 0:
        return None
    for candidate in doc.blocks[idx:]:
        if isinstance(candidate, VariableBlock):
            match = find_variable(other, candidate.key)
            if match is not None:
                return match
    return None
