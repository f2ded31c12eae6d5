"""Read and write .env files on disk."""

from __future__ import annotations

from pathlib import Path

from envmerge.models import Document
from envmerge.parser import parse
from envmerge.serializer import serialize


def read_env_file(path: Path | str) -> Document:
    """Parse a .env file. Raises FileNotFoundError if it does not exist.

    Bytes that are not valid UTF-8 decode to U+FFFD instead of failing.
    """
    return parse(Path(path).read_text(encoding="utf-8", errors="replace"))


def write_env_file(path: Path | str, doc: Document) -> None:
    """Serialize doc to path (write to tmp then rename)."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_name(path.name + ".tmp")
    try:
        tmp.write_text(serialize(doc), encoding="utf-8")
        tmp.replace(path)
    except BaseException:
        tmp.unlink(missing_ok=True)
        raise
