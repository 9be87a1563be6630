"""
stepback - run method migrations with best-effort rollback.

A migration file lists method names, one per line. ``Migrator`` validates
every name against a method catalog, invokes them in order and, when one
fails, walks back through the applied ``_up``/``_down`` methods.
"""

__version__ = "0.1.0"

from stepback.core.errors import (  # noqa: E402
    MethodInvocationFailedError,
    MissingMethodError,
    RollbackFailedError,
    SourceAccessError,
    StepbackError,
    WrongMethodSignatureError,
)
from stepback.core.result import Err, Ok, Result  # noqa: E402
from stepback.migrations import (  # noqa: E402
    Direction,
    MethodCatalog,
    MethodInvoker,
    MigrationFile,
    Migrator,
    ProgressChannel,
    ReceiverCatalog,
    rollback_method_name,
)

__all__ = [
    "__version__",
    "StepbackError",
    "SourceAccessError",
    "MissingMethodError",
    "WrongMethodSignatureError",
    "MethodInvocationFailedError",
    "RollbackFailedError",
    "Ok",
    "Err",
    "Result",
    "Direction",
    "MethodCatalog",
    "MethodInvoker",
    "MigrationFile",
    "Migrator",
    "ProgressChannel",
    "ReceiverCatalog",
    "rollback_method_name",
]
