"""
Shared pytest fixtures for stepback tests.

Provides:
- A recording invoker factory
- Migration files on disk and in memory
- Logging isolation between tests
"""

from pathlib import Path

import pytest
import structlog

from stepback.migrations import MigrationFile, ProgressChannel
from tests._support.catalogs import RecordingInvoker


@pytest.fixture(autouse=True)
def _reset_structlog():
    """Undo any structlog configuration a test (or the CLI) applied."""
    yield
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()


@pytest.fixture()
def make_invoker():
    """Factory: ``make_invoker(names, failing=())`` -> RecordingInvoker."""

    def _make(names, failing=()):
        return RecordingInvoker(names, failing)

    return _make


@pytest.fixture()
def channel() -> ProgressChannel:
    return ProgressChannel()


@pytest.fixture()
def migrations_dir(tmp_path: Path) -> Path:
    d = tmp_path / "migrations"
    d.mkdir()
    return d


@pytest.fixture()
def write_migration(migrations_dir: Path):
    """Factory writing a migration file and returning its ``MigrationFile``."""

    def _write(file_name: str, body: str) -> MigrationFile:
        path = migrations_dir / file_name
        path.write_text(body, encoding="utf-8")
        return MigrationFile.from_path(path)

    return _write
