"""Timestamped backups of the destination file.

A backup is written next to the destination before it is rewritten:

    .env
    .env-backup-envmerge-20260118093000

If the merge leaves the destination byte-identical, the backup is redundant
and cleanup_redundant_backup() removes it.
"""

from __future__ import annotations

import logging
import shutil
from datetime import UTC, datetime
from pathlib import Path

logger = logging.getLogger("envmerge.backup")

DEFAULT_PREFIX = ".env-backup-envmerge-"


def generate_backup_path(path: Path | str, now: datetime | None = None, prefix: str = DEFAULT_PREFIX) -> Path:
    """Backup path in the same directory as path, stamped with UTC YYYYMMDDHHMMSS."""
    stamp = (now or datetime.now(UTC)).strftime("%Y%m%d%H%M%S")
    return Path(path).parent / f"{prefix}{stamp}"


def create_backup(path: Path | str, prefix: str = DEFAULT_PREFIX) -> Path | None:
    """Copy path to a fresh backup file. Returns None if path does not exist."""
    src = Path(path)
    if not src.exists():
        return None
    backup_path = generate_backup_path(src, prefix=prefix)
    shutil.copyfile(src, backup_path)
    logger.debug("backup %s -> %s", src, backup_path)
    return backup_path


def files_identical(a: Path | str, b: Path | str) -> bool:
    a, b = Path(a), Path(b)
    if not a.exists() or not b.exists():
        return False
    return a.read_bytes() == b.read_bytes()


def cleanup_redundant_backup(original: Path | str, backup: Path | str) -> bool:
    """Delete backup if it matches original. Returns True when removed."""
    backup = Path(backup)
    if not backup.exists():
        return False
    if not files_identical(original, backup):
        return False
    backup.unlink()
    logger.debug("removed redundant backup %s", backup)
    return True
