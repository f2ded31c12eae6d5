"""Structure-preserving parser and merger for .env files.

    doc = parse(text)                     # text -> Document (never fails)
    merged = merge_sources(a, b, c)       # later documents win
    text = serialize(merged)              # Document -> text

A Document is an ordered list of blocks: VariableBlock (with the comment
lines directly above it), CommentBlock (standalone comment groups) and
BlankBlock (a compressed run of blank lines).
"""

from envmerge.finder import find_variable
from envmerge.merger import merge_sources, merge_two
from envmerge.models import BlankBlock, Block, CommentBlock, Document, VariableBlock
from envmerge.parser import parse
from envmerge.serializer import quote_value, render, serialize

__all__ = [
    "BlankBlock",
    "Block",
    "CommentBlock",
    "Document",
    "VariableBlock",
    "find_variable",
    "merge_sources",
    "merge_two",
    "parse",
    "quote_value",
    "render",
    "serialize",
]
