"""
Root Typer application for the stepback CLI.

Commands resolve their options against ``StepbackSettings`` so every flag
can also come from a ``STEPBACK_*`` environment variable.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import typer
from rich.markup import escape
from typer import Typer

from stepback.cli.utils import (
    console,
    err_console,
    load_catalog,
    load_settings,
    output_result,
    print_message,
    print_table,
    resolve_migration,
)
from stepback.core.errors import StepbackError
from stepback.core.logging import configure_logging
from stepback.core.result import Err, Ok
from stepback.migrations.catalog import MethodInvoker
from stepback.migrations.channel import ProgressChannel
from stepback.migrations.runner import Migrator

app = Typer(
    name="stepback",
    help="stepback: run method migrations with best-effort rollback.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


# ── Version callback ─────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        from stepback import __version__

        typer.echo(f"stepback {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(  # noqa: UP007
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
    log_level: str | None = typer.Option(None, "--log-level", help="Override STEPBACK_LOG_LEVEL."),
) -> None:
    """Apply, check and inspect method migrations."""
    settings = load_settings()
    configure_logging(
        level=log_level or settings.log_level,
        json_format=settings.json_logs,
    )


def _catalog_or_exit(reference: str | None) -> MethodInvoker:
    try:
        return load_catalog(reference)
    except StepbackError as e:
        err_console.print(f"[bold red]Error[/bold red]: {escape(str(e))}")
        raise typer.Exit(code=2) from e


# ── Commands ─────────────────────────────────────────────────────────────


@app.command()
def migrate(
    file: Path = typer.Argument(..., help="Migration file (one method name per line)."),
    catalog: str | None = typer.Option(None, "--catalog", "-c", help="Catalog as module:attribute."),
    rollback: bool | None = typer.Option(
        None,
        "--rollback/--no-rollback",
        help="Undo applied methods when one fails (default: STEPBACK_ROLLBACK_ON_FAILURE).",
    ),
    json_out: bool = typer.Option(False, "--json", help="JSON output"),
) -> None:
    """Apply the methods listed in FILE, in order."""
    settings = load_settings()
    invoker = _catalog_or_exit(catalog or settings.catalog)
    migrator = Migrator(
        invoker,
        rollback_on_failure=settings.rollback_on_failure if rollback is None else rollback,
    )
    migration = resolve_migration(file, settings)
    channel = ProgressChannel(maxsize=settings.channel_maxsize)

    def _run():
        try:
            return migrator.migrate(migration, channel)
        finally:
            channel.close()

    if not json_out:
        console.print(f"[bold]Migrating[/bold] {escape(migration.label)}")

    with ThreadPoolExecutor(max_workers=1, thread_name_prefix="stepback-migrate") as pool:
        future = pool.submit(_run)
        for message in channel:
            if not json_out:
                print_message(message)
        result = future.result()

    output_result(result, as_json=json_out, title="Migrated")


@app.command()
def check(
    file: Path = typer.Argument(..., help="Migration file to validate."),
    catalog: str | None = typer.Option(None, "--catalog", "-c", help="Catalog as module:attribute."),
    json_out: bool = typer.Option(False, "--json", help="JSON output"),
) -> None:
    """Validate FILE against the catalog without invoking anything."""
    settings = load_settings()
    migrator = Migrator(_catalog_or_exit(catalog or settings.catalog))
    migration = resolve_migration(file, settings)

    try:
        steps = migrator.plan(migration)
    except StepbackError as e:
        output_result(Err(e), as_json=json_out)
        return

    rows = [
        {"step": index, "method": step.method, "rollback_method": step.rollback_method}
        for index, step in enumerate(steps)
    ]
    if json_out:
        output_result(Ok(rows), as_json=True)
        return
    print_table(rows, title=f"Plan: {migration.label}")
    output_result(Ok(rows), title="Valid")


@app.command()
def methods(
    catalog: str | None = typer.Option(None, "--catalog", "-c", help="Catalog as module:attribute."),
) -> None:
    """List the methods a catalog offers."""
    settings = load_settings()
    invoker = _catalog_or_exit(catalog or settings.catalog)
    names = getattr(invoker, "names", None)
    if names is None:
        err_console.print("[yellow]This catalog cannot list its methods.[/yellow]")
        raise typer.Exit(code=1)
    print_table([{"method": name} for name in names()], title="Methods")
