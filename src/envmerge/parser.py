"""Parse .env text into a Document.

Two passes over the input:

    1. parse_line()   classifies each physical line (blank / comment / variable)
    2. group_lines()  folds the classified lines into blocks

Grouping rules:
    - Comment lines directly above a variable become that variable's comments.
    - Comments followed by a blank line and then a variable (or EOF) form a
      standalone CommentBlock, followed by one BlankBlock.
    - Blank lines between two comment groups are compressed into a single ""
      entry at the end of the first group; the next comment starts a new group.
    - Any run of blank lines yields exactly one BlankBlock.

Parsing never fails: a line that is neither blank, a comment nor a valid
KEY=value assignment is kept verbatim as a comment line.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from envmerge.models import BlankBlock, CommentBlock, Document, VariableBlock

_LINE_SPLIT_RE = re.compile(r"\r?\n")
_VARIABLE_RE = re.compile(r"^([A-Za-z_][A-Za-z0-9_]*)\s*=\s*(.*)$")

# Unescape order matters: applied left to right after stripping the quotes.
_DOUBLE_QUOTE_ESCAPES = (
    ("\\n", "\n"),
    ("\\r", "\r"),
    ("\\t", "\t"),
    ("\\\\", "\\"),
    ('\\"', '"'),
)


@dataclass
class Line:
    """A single classified source line."""

    kind: str           # blank | comment | variable
    content: str = ""   # original text (comment and variable lines)
    key: str = ""
    value: str = ""

    @property
    def is_blank(self) -> bool:
        return self.kind == "blank"

    @property
    def is_comment(self) -> bool:
        return self.kind == "comment"

    @property
    def is_variable(self) -> bool:
        return self.kind == "variable"


def unquote_value(raw: str) -> str:
    """Decode the right-hand side of an assignment."""
    value = raw.strip()
    if value.startswith("'") and value.endswith("'"):
        return value[1:-1]
    if value.startswith('"') and value.endswith('"'):
        value = value[1:-1]
        for escaped, char in _DOUBLE_QUOTE_ESCAPES:
            value = value.replace(escaped, char)
        return value
    return value


def parse_line(line: str) -> Line:
    stripped = line.strip()
    if not stripped:
        return Line("blank")
    if stripped.startswith("#"):
        return Line("comment", content=line)
    m = _VARIABLE_RE.match(line)
    if m:
        return Line("variable", content=line, key=m.group(1), value=unquote_value(m.group(2)))
    # Unrecognised content is preserved as a comment
    return Line("comment", content=line)


def next_non_blank(lines: list[Line], index: int) -> Line | None:
    """Return the first non-blank line after index, or None at end of input."""
    for line in lines[index + 1:]:
        if not line.is_blank:
            return line
    return None


def group_lines(lines: list[Line]) -> Document:
    """Fold classified lines into a block sequence."""
    doc = Document()
    pending: list[str] = []
    in_blank_run = False        # a blank line was already handled in the current run
    pending_has_marker = False  # pending ends with a compressed blank marker

    def flush_comments() -> None:
        nonlocal pending_has_marker
        doc.append(CommentBlock(lines=list(pending)))
        pending.clear()
        pending_has_marker = False

    for i, line in enumerate(lines):
        if line.is_variable:
            doc.append(VariableBlock(
                key=line.key,
                value=line.value,
                raw=line.content,
                comments=list(pending),
            ))
            pending.clear()
            pending_has_marker = False
            in_blank_run = False

        elif line.is_comment:
            if pending and pending_has_marker:
                flush_comments()
            pending.append(line.content)
            in_blank_run = False

        else:
            if in_blank_run:
                continue
            in_blank_run = True
            if pending:
                upcoming = next_non_blank(lines, i)
                if upcoming is not None and upcoming.is_comment:
                    pending.append("")
                    pending_has_marker = True
                else:
                    flush_comments()
                    doc.append(BlankBlock())
            else:
                doc.append(BlankBlock())

    if pending:
        flush_comments()

    return doc


def parse(text: str) -> Document:
    """Parse .env text. Empty or whitespace-only text yields a single BlankBlock."""
    return group_lines([parse_line(line) for line in _LINE_SPLIT_RE.split(text)])
