"""Method migrations for stepback.

Manifesto:
    A migration is an ordered list of named methods. Validate every name
    before touching anything, apply in order, and when a step fails undo
    what was applied through the ``_up``/``_down`` naming convention.

Modules
-------
source     MigrationFile and read_lines()
catalog    MethodInvoker protocol, MethodCatalog, ReceiverCatalog
reversal   rollback_method_name()
channel    ProgressChannel for real-time progress
runner     Migrator with migrate() / plan()

Tags:
    stepback, migrations, rollback, method-catalog

Doc-Types:
    package-overview
"""

from stepback.migrations.catalog import MethodCatalog, MethodInvoker, ReceiverCatalog
from stepback.migrations.channel import ProgressChannel, ProgressMessage
from stepback.migrations.reversal import rollback_method_name
from stepback.migrations.runner import Migrator, PlannedStep
from stepback.migrations.source import Direction, MigrationFile, read_lines

__all__ = [
    "Direction",
    "MethodCatalog",
    "MethodInvoker",
    "MigrationFile",
    "Migrator",
    "PlannedStep",
    "ProgressChannel",
    "ProgressMessage",
    "ReceiverCatalog",
    "read_lines",
    "rollback_method_name",
]
