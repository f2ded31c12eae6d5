"""Data models for a parsed .env document.

A document is an ordered sequence of blocks:

    VariableBlock   KEY=value, with the comment lines directly above it
    CommentBlock    standalone comment lines (banners, trailing notes)
    BlankBlock      one or more blank lines, always compressed to one block

Blocks compare by identity so splicing can find the exact node; use
blocks_equal() for semantic comparison.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Union

if TYPE_CHECKING:
    from collections.abc import Iterator


@dataclass(eq=False)
class VariableBlock:
    """A KEY=value assignment."""

    key: str
    value: str                          # decoded value (quotes stripped, escapes resolved)
    raw: str                            # serializable KEY=value form
    comments: list[str] = field(default_factory=list)   # comment lines directly above

    def set_value(self, value: str) -> None:
        """Replace the value and re-derive raw."""
        from envmerge.serializer import quote_value

        self.value = value
        self.raw = f"{self.key}={quote_value(value)}"


@dataclass(eq=False)
class CommentBlock:
    """A group of comment lines not owned by a variable.

    An empty-string entry stands for one compressed blank line that sat
    between two comment groups.
    """

    lines: list[str] = field(default_factory=list)


@dataclass(eq=False)
class BlankBlock:
    """One run of blank lines."""


Block = Union[VariableBlock, CommentBlock, BlankBlock]


def blocks_equal(a: Block | None, b: Block | None) -> bool:
    """Semantic equality used to dedupe blocks during merge."""
    if a is None or b is None:
        return False
    if isinstance(a, CommentBlock) and isinstance(b, CommentBlock):
        return "\n".join(a.lines).strip() == "\n".join(b.lines).strip()
    if isinstance(a, BlankBlock) and isinstance(b, BlankBlock):
        return True
    if isinstance(a, VariableBlock) and isinstance(b, VariableBlock):
        return a.key == b.key and a.value == b.value
    return False


@dataclass
class Document:
    """Ordered block sequence for one .env file."""

    blocks: list[Block] = field(default_factory=list)

    def __iter__(self) -> Iterator[Block]:
        return iter(self.blocks)

    def __len__(self) -> int:
        return len(self.blocks)

    @property
    def is_empty(self) -> bool:
        return not self.blocks

    @property
    def variables(self) -> list[VariableBlock]:
        return [b for b in self.blocks if isinstance(b, VariableBlock)]

    def keys(self) -> list[str]:
        return [v.key for v in self.variables]

    def as_dict(self) -> dict[str, str]:
        """KEY -> value, first occurrence wins."""
        result: dict[str, str] = {}
        for v in self.variables:
            result.setdefault(v.key, v.value)
        return result

    def index_of(self, block: Block) -> int:
        """Position of block (by identity), or -1."""
        for i, b in enumerate(self.blocks):
            if b is block:
                return i
        return -1

    def append(self, block: Block) -> None:
        self.blocks.append(block)

    def insert_before(self, target: Block, block: Block) -> None:
        """Splice block in front of target. Appends if target is not in the document."""
        idx = self.index_of(target)
        if idx < 0:
            self.blocks.append(block)
        else:
            self.blocks.insert(idx, block)

    def copy(self) -> Document:
        """Deep copy: no block is shared with the original."""
        return Document(blocks=[copy.deepcopy(b) for b in self.blocks])
