"""Tests for the _up/_down naming convention."""

import pytest

from stepback.migrations.reversal import rollback_method_name


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("create_table_up", "create_table_down"),
        ("create_table_down", "create_table_up"),
        ("create_table", None),
        ("create_table_UP", None),
        ("create_table_up_", None),
        ("setup", None),
        ("_up", "_down"),
        ("up_down_up", "up_down_down"),
    ],
)
def test_rollback_method_name(name, expected):
    assert rollback_method_name(name) == expected


def test_inverse_of_inverse_is_identity():
    for name in ("users_up", "users_down"):
        assert rollback_method_name(rollback_method_name(name)) == name
