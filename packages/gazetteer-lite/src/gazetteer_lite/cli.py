"""CLI entry point for the gazetteer cache."""

from __future__ import annotations

import logging
import sqlite3
import sys
from pathlib import Path
from typing import Annotated

import structlog
import typer
import yaml
from rich import print as rprint
from rich.markup import escape
from rich.syntax import Syntax
from rich.table import Table

from gazetteer_core.cache import DirectoryScanner, EntityKind, GazetteerCache
from gazetteer_core.config import GazetteerConfig, load_config
from gazetteer_core.config.loader import DEFAULT_CONFIG_TEMPLATE
from gazetteer_lite.store import SQLiteNameStore

app = typer.Typer(
    name="gazetteer",
    help="Per-tenant RegexNER gazetteer cache.",
)

config_app = typer.Typer(help="Manage gazetteer configuration.")
app.add_typer(config_app, name="config")

# Global state
_config: GazetteerConfig | None = None

_LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}


# Handler installed on the root logger by setup_logging
_log_handler: logging.Handler | None = None


def _log_formatter(log_format: str) -> logging.Formatter:
    if log_format == "json":
        return structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=[
                structlog.stdlib.add_logger_name,
                structlog.stdlib.add_log_level,
                structlog.processors.TimeStamper(fmt="iso"),
            ],
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                structlog.processors.format_exc_info,
                structlog.processors.JSONRenderer(),
            ],
        )
    return logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")


def setup_logging(cfg: GazetteerConfig) -> None:
    """Configure root logging from the log_level / log_format settings."""
    global _log_handler
    root_logger = logging.getLogger()
    if _log_handler is not None:
        root_logger.removeHandler(_log_handler)

    _log_handler = logging.StreamHandler(sys.stderr)
    _log_handler.setFormatter(_log_formatter(cfg.log_format))
    root_logger.addHandler(_log_handler)
    root_logger.setLevel(_LOG_LEVELS[cfg.log_level])


def _get_config() -> GazetteerConfig:
    if _config is None:
        return load_config()
    return _config


def _build_cache(cfg: GazetteerConfig) -> GazetteerCache:
    store = SQLiteNameStore(db_path=cfg.store.db_path)
    return GazetteerCache(cfg.gazetteer, oracle=store, names=store)


@app.callback()
def main(
    config: Annotated[
        str | None, typer.Option("--config", "-c", help="Path to gazetteer.yaml")
    ] = None,
) -> None:
    """Global options."""
    global _config
    try:
        _config = load_config(config)
    except ValueError as e:
        rprint(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)
    setup_logging(_config)


@app.command()
def resolve(
    tenant: str = typer.Argument(..., help="Tenant identifier"),
) -> None:
    """Print the path of an up-to-date gazetteer for TENANT."""
    cfg = _get_config()
    try:
        path = _build_cache(cfg).resolve(tenant)
    except (OSError, sqlite3.Error, ValueError) as e:
        rprint(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    if path is None:
        rprint(f"[dim]No gazetteer for tenant '{escape(tenant)}'.[/dim]")
        return
    print(path)


@app.command()
def show(
    tenant: str = typer.Argument(..., help="Tenant identifier"),
) -> None:
    """Resolve TENANT and print the gazetteer content."""
    cfg = _get_config()
    try:
        path = _build_cache(cfg).resolve(tenant)
    except (OSError, sqlite3.Error, ValueError) as e:
        rprint(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    if path is None:
        rprint(f"[dim]No gazetteer for tenant '{escape(tenant)}'.[/dim]")
        return
    sys.stdout.write(path.read_text(encoding="utf-8"))


@app.command()
def status() -> None:
    """List cached gazetteers and their freshness timestamps."""
    cfg = _get_config()
    scanner = DirectoryScanner(Path(cfg.gazetteer.directory))
    entries = scanner.entries()

    if not entries:
        rprint("[yellow]No cached gazetteers.[/yellow]")
        return

    table = Table(title=f"Cached gazetteers ({len(entries)})")
    table.add_column("Tenant", style="cyan")
    table.add_column("Source updated", style="green")
    table.add_column("Last checked")
    table.add_column("Names", justify="right")
    table.add_column("Size", justify="right")
    store = SQLiteNameStore(db_path=cfg.store.db_path)
    for entry in entries:
        size = scanner.content_path(entry.tenant).stat().st_size
        names = sum(store.counts(entry.tenant).values())
        table.add_row(
            entry.tenant,
            entry.source_timestamp.strftime("%Y-%m-%d %H:%M:%S"),
            entry.cache_timestamp.strftime("%Y-%m-%d %H:%M:%S"),
            str(names),
            f"{size} B",
        )
    rprint(table)


@app.command()
def add(
    tenant: str = typer.Argument(..., help="Tenant identifier"),
    kind: str = typer.Argument(..., help="organization, person or equipment"),
    name: str = typer.Argument(..., help="Name to recognise"),
) -> None:
    """Add a name to the local store."""
    try:
        entity_kind = EntityKind(kind)
    except ValueError:
        rprint(f"[red]Error:[/red] Unknown kind '{kind}'. Choose organization, person or equipment.")
        raise typer.Exit(1)

    store = SQLiteNameStore(db_path=_get_config().store.db_path)
    row_id = store.add_name(tenant, entity_kind, name)
    rprint(f"[green]Added[/green] {entity_kind.value} #{row_id} for tenant '{tenant}'")


@config_app.command("show")
def config_show() -> None:
    """Show current resolved configuration."""
    cfg = _get_config()
    rprint(Syntax(yaml.dump(cfg.model_dump(), default_flow_style=False), "yaml"))


@config_app.command("init")
def config_init(
    force: bool = typer.Option(False, "--force", help="Overwrite existing config"),
) -> None:
    """Create default gazetteer.yaml in current directory."""
    target = Path("gazetteer.yaml")
    if target.exists() and not force:
        rprint("[yellow]gazetteer.yaml already exists.[/yellow] Use --force to overwrite.")
        raise typer.Exit(1)
    target.write_text(DEFAULT_CONFIG_TEMPLATE)
    rprint(f"[green]Created[/green] {target}")


if __name__ == "__main__":
    app()
