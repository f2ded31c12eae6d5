"""envmerge CLI — merge .env files while preserving comments and layout.

Usage:
    envmerge SOURCE [SOURCE...] DESTINATION

    envmerge .env.base .env                      add missing keys to .env
    envmerge .env.base .env.local .env           later sources win
    envmerge -s overwrite .env.example .env      take source values on conflict
    envmerge --dry-run .env.example .env         print the result, write nothing
"""

from __future__ import annotations

import logging
from pathlib import Path

import click

from envmerge.backup import cleanup_redundant_backup, create_backup
from envmerge.config import ConfigError, EnvMergeConfig, load_config
from envmerge.conflicts import STRATEGIES, Conflict, apply_to_destination, resolve_conflicts
from envmerge.envfile import read_env_file, write_env_file
from envmerge.merger import merge_sources
from envmerge.serializer import quote_value, serialize

logger = logging.getLogger("envmerge.cli")

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _load_cfg(config_path: str | None) -> EnvMergeConfig:
    try:
        return load_config(config_path)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc


def _ask(conflict: Conflict) -> str:
    """Prompt the user for one conflict. Returns 'overwrite' or 'keep'."""
    from rich.console import Console
    from rich.markup import escape as _markup_escape

    console = Console()
    key = _markup_escape(conflict.key)
    console.print(f"\n[bold]Conflict for key:[/bold] {key}")
    console.print(f"  Current (destination): [yellow]{_markup_escape(quote_value(conflict.destination_value))}[/yellow]")
    console.print(f"  New (source):          [green]{_markup_escape(quote_value(conflict.source_value))}[/green]")
    return click.prompt(
        "Which value should be used?",
        type=click.Choice(["overwrite", "keep"]),
        default="overwrite",
        show_choices=True,
    )


# ---------------------------------------------------------------------------
# Command
# ---------------------------------------------------------------------------


@click.command()
@click.argument("files", nargs=-1, required=True, type=click.Path(dir_okay=False))
@click.option("--backup/--no-backup", default=None, help="Back up the destination before writing [default: on]")
@click.option(
    "-s", "--strategy",
    type=click.Choice(STRATEGIES),
    default=None,
    help="Conflict resolution strategy [default: interactive]",
)
@click.option("--config", "config_path", type=click.Path(dir_okay=False), default=None, help="Path to envmerge.toml")
@click.option("--dry-run", is_flag=True, help="Print the merged result instead of writing it")
@click.option("-v", "--verbose", is_flag=True, help="Debug logging")
@click.version_option(package_name="envmerge")
def cli(
    files: tuple[str, ...],
    backup: bool | None,
    strategy: str | None,
    config_path: str | None,
    dry_run: bool,
    verbose: bool,
) -> None:
    """Merge SOURCE .env files into DESTINATION (the last argument)."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(name)s %(levelname)s %(message)s",
    )
    if len(files) < 2:
        raise click.UsageError("At least one source and one destination file are required")

    cfg = _load_cfg(config_path)
    strategy = strategy or cfg.strategy
    do_backup = cfg.backup.enabled if backup is None else backup
    logger.debug("config=%s strategy=%s backup=%s", cfg.path, strategy, do_backup)

    *source_paths, destination_path = (Path(f) for f in files)
    for path in source_paths:
        if not path.exists():
            raise click.ClickException(f"Source file not found: {path}")

    try:
        sources = [read_env_file(p) for p in source_paths]
        destination = read_env_file(destination_path) if destination_path.exists() else None
    except OSError as exc:
        raise click.ClickException(str(exc)) from exc

    merged = merge_sources(*sources)

    try:
        resolved, conflicts = resolve_conflicts(merged, destination, strategy, ask=_ask)
    except click.Abort as exc:
        raise click.ClickException("Operation cancelled by user") from exc

    if not conflicts:
        click.echo("No conflicts detected.")

    final = apply_to_destination(merged, resolved)

    if dry_run:
        click.echo(serialize(final))
        return

    try:
        backup_path = create_backup(destination_path, prefix=cfg.backup.prefix) if do_backup else None
        if backup_path:
            click.echo(f"Created backup: {backup_path}")
        write_env_file(destination_path, final)
        if backup_path and cleanup_redundant_backup(destination_path, backup_path):
            click.echo(f"Removed redundant backup (file unchanged): {backup_path}")
    except OSError as exc:
        raise click.ClickException(str(exc)) from exc

    click.echo(f"\nSuccessfully merged {len(source_paths)} file(s) into {destination_path}")
    if conflicts:
        click.echo(f"Resolved {len(conflicts)} conflict(s)")


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main() -> None:
    cli(standalone_mode=True)


if __name__ == "__main__":
    main()
