"""Render a Document back to .env text (inverse of parser.group_lines)."""

from __future__ import annotations

from envmerge.models import BlankBlock, CommentBlock, Document, VariableBlock

_NEEDS_QUOTING = (" ", "\n", "\r", "\t", "#", '"', "'", "\\")

# Escape order matters: backslash first so later escapes are not doubled.
_ESCAPES = (
    ("\\", "\\\\"),
    ('"', '\\"'),
    ("\n", "\\n"),
    ("\r", "\\r"),
    ("\t", "\\t"),
)

LINE_SEPARATOR = "\n"


def quote_value(value: str) -> str:
    """Quote a value for a KEY=value line.

    Plain values are emitted as-is. Values containing whitespace, quotes,
    '#' or backslashes are wrapped in double quotes with escapes.

        >>> quote_value("simple")
        'simple'
        >>> quote_value("value with spaces")
        '"value with spaces"'
    """
    if not any(ch in value for ch in _NEEDS_QUOTING):
        return value
    for char, escaped in _ESCAPES:
        value = value.replace(char, escaped)
    return f'"{value}"'


def render(doc: Document | None) -> list[str]:
    """Expand a document into its physical lines."""
    lines: list[str] = []
    if doc is None:
        return lines
    for block in doc:
        if isinstance(block, VariableBlock):
            lines.extend(block.comments)
            lines.append(f"{block.key}={quote_value(block.value)}")
        elif isinstance(block, CommentBlock):
            lines.extend(block.lines)
        elif isinstance(block, BlankBlock):
            lines.append("")
    return lines


def serialize(doc: Document | None) -> str:
    return LINE_SEPARATOR.join(render(doc))
