"""
CLI helpers for settings, catalog loading and output formatting.
"""

from __future__ import annotations

import importlib
import json
import sys
from pathlib import Path
from typing import Any

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from stepback.core.errors import ConfigError, InvalidConfigError
from stepback.core.result import Result
from stepback.core.settings import StepbackSettings
from stepback.migrations.catalog import MethodCatalog, MethodInvoker, ReceiverCatalog
from stepback.migrations.channel import ProgressMessage
from stepback.migrations.source import MigrationFile

console = Console()
err_console = Console(stderr=True)


# ── Settings / catalog helpers ───────────────────────────────────────────


def load_settings() -> StepbackSettings:
    """Read ``STEPBACK_*`` settings, exiting with code 2 when they are invalid."""
    try:
        return StepbackSettings()
    except ValidationError as e:
        err_console.print(f"[bold red]Invalid settings[/bold red]: {e}")
        raise typer.Exit(code=2) from e


def load_catalog(reference: str | None) -> MethodInvoker:
    """Resolve a ``module:attribute`` reference to a method catalog.

    The attribute may be a ``MethodInvoker``, a dict of name to callable, a
    class (instantiated without arguments) or any other object whose
    public methods become the catalog.
    """
    if not reference:
        raise ConfigError("No method catalog configured; pass --catalog or set STEPBACK_CATALOG")
    module_name, _, attr_name = reference.partition(":")
    if not module_name or not attr_name:
        raise InvalidConfigError("catalog", reference, "catalog must look like 'package.module:attribute'")

    cwd = str(Path.cwd())
    if cwd not in sys.path:
        sys.path.insert(0, cwd)

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise InvalidConfigError("catalog", reference, f"Cannot import {module_name}: {e}") from e
    try:
        target = getattr(module, attr_name)
    except AttributeError as e:
        raise InvalidConfigError("catalog", reference, f"{module_name} has no attribute {attr_name}") from e

    if isinstance(target, dict):
        return MethodCatalog(target)
    if isinstance(target, type):
        target = target()
    if isinstance(target, MethodInvoker):
        return target
    return ReceiverCatalog(target)


def resolve_migration(file: Path, settings: StepbackSettings) -> MigrationFile:
    """Locate ``file``, falling back to the configured migrations directory."""
    if not file.is_absolute() and not file.exists():
        candidate = settings.migrations_dir / file
        if candidate.exists():
            file = candidate
    return MigrationFile.from_path(file)


# ── Output helpers ───────────────────────────────────────────────────────


def print_message(message: ProgressMessage) -> None:
    """Render one progress channel message."""
    if isinstance(message, Exception):
        err_console.print(f"  [red]✗[/red] {escape(str(message))}")
    else:
        console.print(f"  [cyan]→[/cyan] {escape(message)}")


def output_result(
    result: Result[Any],
    *,
    as_json: bool = False,
    title: str = "",
) -> None:
    """Render a run result and exit non-zero on failure."""
    if as_json:
        console.print_json(json.dumps(result.to_dict(), default=str))
        if result.is_err():
            raise typer.Exit(code=1)
        return

    if result.is_err():
        err_console.print(f"[bold red]Error[/bold red]: {escape(str(result.error))}")
        raise typer.Exit(code=1)

    value = result.unwrap()
    count = len(value) if isinstance(value, (list, tuple)) else 1
    console.print(f"[bold green]{title or 'Done'}[/bold green]: {count} step(s)")


def print_table(rows: list[dict[str, Any]], *, title: str = "") -> None:
    """Render a list of dicts as a rich table."""
    if not rows:
        console.print("[dim]No items.[/dim]")
        return
    table = Table(title=title or None)
    for col in rows[0]:
        table.add_column(col.replace("_", " ").title())
    for row in rows:
        table.add_row(*("" if v is None else str(v) for v in row.values()))
    console.print(table)
