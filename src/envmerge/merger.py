"""Merge parsed .env documents.

merge_sources(a, b, c) folds left to right: a is the base, each later
document is merged in and wins on conflicting keys.

merge_two(base, source) runs two passes over source:

    1. variables  existing keys are overwritten in place (value and comments);
                  new keys are copied in front of the next variable that
                  source and base share, or appended when there is none
    2. comments   each standalone comment block is copied in front of its
                  anchor (the next variable after it in source), or appended
                  when it has no anchor; blocks already present are skipped

Comments go second because their anchors must already sit at their final
position. Both passes skip work that is already done, so merging the same
source twice is a no-op.
"""

from __future__ import annotations

import copy
import logging
from typing import TYPE_CHECKING

from envmerge.finder import find_intersection, find_next_variable, find_variable
from envmerge.models import BlankBlock, CommentBlock, Document, VariableBlock, blocks_equal

if TYPE_CHECKING:
    from envmerge.models import Block

logger = logging.getLogger("envmerge.merger")


# ---------------------------------------------------------------------------
# Pass 1: variables
# ---------------------------------------------------------------------------


def _merge_variables(base: Document, source: Document) -> None:
    for i, block in enumerate(source.blocks):
        if not isinstance(block, VariableBlock):
            continue

        existing = find_variable(base, block.key)
        if existing is not None:
            if existing.value != block.value:
                logger.debug("override %s", block.key)
            existing.set_value(block.value)
            existing.comments = list(block.comments)
            continue

        new_block = copy.deepcopy(block)
        following = source.blocks[i + 1] if i + 1 < len(source.blocks) else None
        point = find_intersection(source, following, base)
        if point is not None:
            logger.debug("insert %s before %s", block.key, point.key)
            base.insert_before(point, new_block)
        else:
            logger.debug("append %s", block.key)
            base.append(new_block)


# ---------------------------------------------------------------------------
# Pass 2: comments
# ---------------------------------------------------------------------------


def _comment_precedes(base: Document, point: Block, comment: CommentBlock, source_keys: set[str]) -> bool:
    """True if an equal comment block already sits in front of point.

    Walks backward over blanks, other comment blocks and variables that
    source does not define; stops at the first variable source defines.
    """
    idx = base.index_of(point)
    # Pass 1 can insert the source's new keys between a base banner and its
    # anchor, so checking only the block right before point would re-add the
    # banner on every re-merge.
    for block in reversed(base.blocks[:max(idx, 0)]):
        if isinstance(block, BlankBlock):
            continue
        if isinstance(block, CommentBlock):
            if blocks_equal(block, comment):
                return True
            continue
        if block.key in source_keys:
            return False
    return False


def _comment_exists(base: Document, comment: CommentBlock) -> bool:
    return any(isinstance(b, CommentBlock) and blocks_equal(b, comment) for b in base)


def _merge_comments(base: Document, source: Document) -> None:
    source_keys = set(source.keys())
    for block in source.blocks:
        if not isinstance(block, CommentBlock):
            continue

        anchor = find_next_variable(source, block)
        point = find_variable(base, anchor.key) if anchor is not None else None
        if point is not None:
            if _comment_precedes(base, point, block, source_keys):
                continue
            logger.debug("insert comment block before %s", point.key)
            base.insert_before(point, copy.deepcopy(block))
            continue

        if _comment_exists(base, block):
            continue
        logger.debug("append comment block")
        base.append(copy.deepcopy(block))


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def _merge_into(base: Document, source: Document) -> Document:
    _merge_variables(base, source)
    _merge_comments(base, source)
    return base


def merge_two(base: Document, source: Document) -> Document:
    """Merge source into a copy of base. Neither argument is modified."""
    return _merge_into(base.copy(), source)


def merge_sources(*documents: Document | None) -> Document:
    """Fold documents left to right; later documents win. None entries are skipped."""
    valid = [d for d in documents if d is not None]
    if not valid:
        return Document()

    result = valid[0].copy()
    for source in valid[1:]:
        result = _merge_into(result, source)
    logger.debug("merged %d document(s) into %d block(s)", len(valid), len(result))
    return result
