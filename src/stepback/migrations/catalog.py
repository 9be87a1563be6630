"""Method catalogs: the names a migration file may reference.

The runner only needs two things from a catalog, captured by
``MethodInvoker``: a side-effect free membership test and a way to run a
named method. Two implementations ship here:

``MethodCatalog``
    Explicit mapping of name to zero-argument callable, filled through
    ``register`` / ``add``.

``ReceiverCatalog``
    Exposes the public methods of an arbitrary object, so a migrations
    class can be used as-is::

        class UserMigrations:
            def create_users_up(self): ...
            def create_users_down(self): ...

        catalog = ReceiverCatalog(UserMigrations())
"""

from __future__ import annotations

import inspect
from collections.abc import Callable, Iterator
from typing import Any, Protocol, runtime_checkable

from stepback.core.errors import MissingMethodError, WrongMethodSignatureError
from stepback.core.logging import get_logger

logger = get_logger(__name__)

MigrationMethod = Callable[[], Any]


@runtime_checkable
class MethodInvoker(Protocol):
    """
    Contract between the migrator and whatever actually performs steps.

    ``is_valid`` must not have side effects and may be called any number of
    times, including before any ``invoke``. ``invoke`` raises on failure;
    the migrator wraps whatever it raises without interpreting it.
    """

    def is_valid(self, method_name: str) -> bool:
        """Return whether ``method_name`` can be invoked."""
        ...

    def invoke(self, method_name: str) -> None:
        """Run ``method_name``; raise on failure."""
        ...


class MethodCatalog:
    """Name to callable mapping.

    Example::

        catalog = MethodCatalog()

        @catalog.register("create_users_up")
        def create_users_up():
            db.execute("CREATE TABLE users (id INTEGER)")
    """

    def __init__(self, methods: dict[str, MigrationMethod] | None = None) -> None:
        self._methods: dict[str, MigrationMethod] = {}
        for name, method in (methods or {}).items():
            self.add(name, method)

    def register(self, name: str | None = None) -> Callable[[MigrationMethod], MigrationMethod]:
        """Decorator registering a function under ``name`` (default: its ``__name__``)."""

        def decorator(method: MigrationMethod) -> MigrationMethod:
            self.add(name or method.__name__, method)
            return method

        return decorator

    def add(self, name: str, method: MigrationMethod) -> None:
        """Register ``method`` under ``name``; names must be unique."""
        if name in self._methods:
            raise ValueError(f"Method '{name}' is already registered")
        if not callable(method):
            raise TypeError(f"Method '{name}' is not callable")
        self._methods[name] = method
        logger.debug("method_registered", name=name)

    def names(self) -> list[str]:
        """List registered method names, sorted."""
        return sorted(self._methods)

    def is_valid(self, method_name: str) -> bool:
        return method_name in self._methods

    def invoke(self, method_name: str) -> None:
        method = self._methods.get(method_name)
        if method is None:
            raise MissingMethodError(method_name)
        method()

    def __contains__(self, method_name: object) -> bool:
        return method_name in self._methods

    def __iter__(self) -> Iterator[str]:
        return iter(self.names())

    def __len__(self) -> int:
        return len(self._methods)


class ReceiverCatalog:
    """Catalog backed by the public methods of ``receiver``.

    Lookups use ``inspect.getattr_static`` so that checking a name never
    evaluates properties or ``__getattr__`` hooks on the receiver.
    """

    def __init__(self, receiver: Any) -> None:
        self._receiver = receiver

    @property
    def receiver(self) -> Any:
        return self._receiver

    def set_receiver(self, receiver: Any) -> None:
        """Swap the object whose methods are exposed."""
        if receiver is None:
            raise ValueError("receiver must not be None")
        self._receiver = receiver

    def names(self) -> list[str]:
        """Public method names of the receiver, sorted."""
        return sorted(
            name for name in dir(self._receiver) if self.is_valid(name)
        )

    def is_valid(self, method_name: str) -> bool:
        if not method_name or method_name.startswith("_"):
            return False
        try:
            attr = inspect.getattr_static(self._receiver, method_name)
        except AttributeError:
            return False
        return isinstance(attr, (staticmethod, classmethod)) or (
            callable(attr) and not isinstance(attr, type)
        )

    def invoke(self, method_name: str) -> None:
        if not self.is_valid(method_name):
            raise MissingMethodError(method_name)
        method = getattr(self._receiver, method_name)
        if not _takes_no_arguments(method):
            raise WrongMethodSignatureError(method_name)
        method()


def _takes_no_arguments(method: Callable[..., Any]) -> bool:
    try:
        signature = inspect.signature(method)
    except (TypeError, ValueError):
        return False
    for parameter in signature.parameters.values():
        if parameter.kind in (parameter.VAR_POSITIONAL, parameter.VAR_KEYWORD):
            continue
        if parameter.default is parameter.empty:
            return False
    return True


__all__ = ["MethodInvoker", "MethodCatalog", "ReceiverCatalog", "MigrationMethod"]
