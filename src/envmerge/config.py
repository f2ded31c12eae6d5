"""EnvMergeConfig: optional project-local defaults for the envmerge CLI.

envmerge.toml is looked up from the working directory upward; without one
the built-in defaults apply. Command-line options always win.

envmerge.toml example:

    [envmerge]
    strategy = "overwrite"     # interactive | overwrite | keep
    backup = true

    [backup]
    prefix = ".env-backup-envmerge-"
"""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from envmerge.backup import DEFAULT_PREFIX
from envmerge.conflicts import STRATEGIES

_CONFIG_FILENAME = "envmerge.toml"
_DEFAULT_STRATEGY = "interactive"


class ConfigError(ValueError):
    """envmerge.toml is unreadable or holds an invalid value."""


@dataclass
class BackupConfig:
    enabled: bool = True
    prefix: str = DEFAULT_PREFIX


@dataclass
class EnvMergeConfig:
    """Resolved envmerge settings."""

    path: Path | None = None        # envmerge.toml that was loaded, if any
    strategy: str = _DEFAULT_STRATEGY
    backup: BackupConfig = field(default_factory=BackupConfig)


def _find_config(start: Path) -> Path | None:
    """Walk upward from start looking for envmerge.toml."""
    for directory in (start, *start.parents):
        candidate = directory / _CONFIG_FILENAME
        if candidate.exists():
            return candidate
    return None


def _table(raw: dict[str, Any], name: str, config_path: Path) -> dict[str, Any]:
    value = raw.get(name, {})
    if not isinstance(value, dict):
        msg = f"Invalid {config_path}: [{name}] must be a table"
        raise ConfigError(msg)
    return value


def _typed(section: dict[str, Any], key: str, kind: type, default: Any, config_path: Path) -> Any:
    value = section.get(key, default)
    if not isinstance(value, kind):
        msg = f"Invalid {config_path}: {key} must be a {kind.__name__}, got {value!r}"
        raise ConfigError(msg)
    return value


def load_config(path: Path | str | None = None, start: Path | str | None = None) -> EnvMergeConfig:
    """Load envmerge.toml from path, or search upward from start (default: cwd)."""
    if path is not None:
        config_path: Path | None = Path(path)
        if not config_path.exists():
            msg = f"Config file not found: {config_path}"
            raise ConfigError(msg)
    else:
        config_path = _find_config(Path(start) if start else Path.cwd())

    if config_path is None:
        return EnvMergeConfig()

    try:
        with config_path.open("rb") as f:
            raw: dict[str, Any] = tomllib.load(f)
    except tomllib.TOMLDecodeError as exc:
        msg = f"Invalid {config_path}: {exc}"
        raise ConfigError(msg) from exc

    section = _table(raw, "envmerge", config_path)
    backup_section = _table(raw, "backup", config_path)

    strategy = _typed(section, "strategy", str, _DEFAULT_STRATEGY, config_path)
    if strategy not in STRATEGIES:
        msg = f"Invalid strategy {strategy!r} in {config_path}. Must be one of: {', '.join(STRATEGIES)}"
        raise ConfigError(msg)

    return EnvMergeConfig(
        path=config_path,
        strategy=strategy,
        backup=BackupConfig(
            enabled=_typed(section, "backup", bool, True, config_path),
            prefix=_typed(backup_section, "prefix", str, DEFAULT_PREFIX, config_path),
        ),
    )
