"""
CLI layer for stepback.

Provides a Typer application that wires settings, a method catalog and the
``Migrator`` together. All migration logic lives in ``stepback.migrations``;
this package handles only terminal transport.

Entry point::

    stepback --help
"""

from stepback.cli.app import app

__all__ = ["app"]
