"""Naming convention that pairs forward and backward migration methods."""

from __future__ import annotations

UP_SUFFIX = "_up"
DOWN_SUFFIX = "_down"


def rollback_method_name(method_name: str) -> str | None:
    """Return the method that undoes ``method_name``, or ``None``.

    ``create_table_up`` pairs with ``create_table_down`` and vice versa.
    The match is an exact, case-sensitive suffix check; any other name has
    no compensating method and is skipped during rollback.

    >>> rollback_method_name("create_table_up")
    'create_table_down'
    >>> rollback_method_name("create_table_down")
    'create_table_up'
    >>> rollback_method_name("create_table") is None
    True
    """
    if method_name.endswith(UP_SUFFIX):
        return method_name[: -len(UP_SUFFIX)] + DOWN_SUFFIX
    if method_name.endswith(DOWN_SUFFIX):
        return method_name[: -len(DOWN_SUFFIX)] + UP_SUFFIX
    return None
