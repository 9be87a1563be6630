"""Method migration runner.

Reads method names from a migration file, validates all of them against a
``MethodInvoker`` and then invokes them in file order. When a method fails
and ``rollback_on_failure`` is set, the methods already applied are undone
in reverse order through their ``_up``/``_down`` counterparts.

Run states::

    Running ──fail, no rollback──────────────────────────> Failed
       │  └──fail, rollback──> RollingBack ──done/error──> Failed
       └──all steps ok────────────────────────────────────> Succeeded

``Failed`` always reports the forward failure. A compensating step that
fails is reported on the progress channel only, and stops the rollback.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import partial

from stepback.core.errors import (
    MethodInvocationFailedError,
    MissingMethodError,
    RollbackFailedError,
    SourceAccessError,
)
from stepback.core.logging import LogContext, get_logger
from stepback.core.result import Err, Ok, Result, try_result
from stepback.core.settings import StepbackSettings
from stepback.migrations.catalog import MethodInvoker
from stepback.migrations.channel import ProgressChannel, ProgressSink
from stepback.migrations.reversal import rollback_method_name
from stepback.migrations.source import MigrationFile, read_lines

logger = get_logger(__name__)

COMMENT_PREFIX = "--"


@dataclass(frozen=True)
class PlannedStep:
    """A validated step and the method that would undo it, if any."""

    method: str
    rollback_method: str | None


class Migrator:
    """Runs migration files against a method catalog.

    Parameters
    ----------
    method_invoker
        Catalog used to validate and invoke method names.
    rollback_on_failure
        Undo applied methods in reverse order when one fails.

    Example::

        catalog = ReceiverCatalog(UserMigrations())
        migrator = Migrator(catalog, rollback_on_failure=True)
        channel = ProgressChannel()

        result = migrator.migrate(MigrationFile.from_path("0001_users.up.gm"), channel)
        if result.is_err():
            print(f"migration failed: {result.error}")
    """

    def __init__(
        self,
        method_invoker: MethodInvoker,
        rollback_on_failure: bool = False,
    ) -> None:
        self.method_invoker = method_invoker
        self.rollback_on_failure = rollback_on_failure

    @classmethod
    def from_settings(
        cls, method_invoker: MethodInvoker, settings: StepbackSettings
    ) -> Migrator:
        return cls(method_invoker, rollback_on_failure=settings.rollback_on_failure)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def migrate(
        self,
        migration: MigrationFile,
        channel: ProgressSink | None = None,
    ) -> Result[tuple[str, ...]]:
        """Apply every method listed in ``migration``.

        Method names and errors are sent to ``channel`` as they happen.

        Returns ``Ok`` with the applied method names, or ``Err`` with a
        ``SourceAccessError``, a ``MissingMethodError`` (nothing was
        invoked), or the ``MethodInvocationFailedError`` of the first
        failing method, whatever the rollback did. When a rollback ran, the
        error context carries ``rolled_back``: whether every compensating
        method succeeded.
        """
        sink: ProgressSink = channel if channel is not None else ProgressChannel()

        with LogContext(migration=migration.label):
            try:
                methods = self.get_migration_methods(migration)
            except (SourceAccessError, MissingMethodError) as exc:
                logger.error("migration.rejected", error=str(exc))
                sink.send(exc)
                return Err(exc)

            logger.info(
                "migration.started",
                steps=len(methods),
                rollback_on_failure=self.rollback_on_failure,
            )

            for index, method_name in enumerate(methods):
                sink.send(method_name)
                outcome = try_result(partial(self.method_invoker.invoke, method_name))
                if outcome.is_ok():
                    logger.debug("migration.method_invoked", method=method_name)
                    continue

                error = MethodInvocationFailedError(method_name, outcome.error)
                error.with_context(migration=migration.label)
                sink.send(error)
                logger.error(
                    "migration.method_failed",
                    method=method_name,
                    step=index,
                    error=str(outcome.error),
                )

                if self.rollback_on_failure:
                    rolled_back = self._rollback(methods[:index], sink)
                    error.with_context(rolled_back=rolled_back)
                return Err(error)

            logger.info("migration.completed", steps=len(methods))
            return Ok(methods)

    def get_migration_methods(self, migration: MigrationFile) -> tuple[str, ...]:
        """Read and validate the method names of ``migration``.

        Blank lines and ``--`` comments are skipped. Stops at the first
        unknown name.

        Raises:
            SourceAccessError: The file cannot be read.
            MissingMethodError: A name is not known to the catalog.
        """
        methods: list[str] = []
        for line in read_lines(migration):
            method_name = line.strip()
            if not method_name or method_name.startswith(COMMENT_PREFIX):
                continue
            if not self.method_invoker.is_valid(method_name):
                raise MissingMethodError(method_name).with_context(
                    migration=migration.label
                )
            methods.append(method_name)
        return tuple(methods)

    def plan(self, migration: MigrationFile) -> list[PlannedStep]:
        """Validate ``migration`` and pair each step with its rollback method.

        Nothing is invoked. ``rollback_method`` is ``None`` when the name has
        no ``_up``/``_down`` counterpart or the counterpart is not in the
        catalog, i.e. when a rollback would skip the step.
        """
        return [
            PlannedStep(method=name, rollback_method=self._rollback_target(name))
            for name in self.get_migration_methods(migration)
        ]

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _rollback_target(self, method_name: str) -> str | None:
        target = rollback_method_name(method_name)
        if target is None or not self.method_invoker.is_valid(target):
            return None
        return target

    def _rollback(self, applied: tuple[str, ...], sink: ProgressSink) -> bool:
        """Undo ``applied`` newest first; stop at the first failing undo.

        Returns whether every compensating method that ran succeeded.
        """
        logger.warning("migration.rollback_started", steps=len(applied))

        for method_name in reversed(applied):
            target = self._rollback_target(method_name)
            if target is None:
                logger.debug("migration.rollback_skipped", method=method_name)
                continue

            sink.send(target)
            outcome = try_result(partial(self.method_invoker.invoke, target))
            if outcome.is_err():
                rollback_error = RollbackFailedError(target, outcome.error)
                sink.send(rollback_error)
                logger.error(
                    "migration.rollback_failed",
                    method=target,
                    error=str(outcome.error),
                )
                return False

            logger.debug("migration.rollback_invoked", method=target)

        logger.info("migration.rollback_completed")
        return True


__all__ = ["Migrator", "PlannedStep", "COMMENT_PREFIX"]
