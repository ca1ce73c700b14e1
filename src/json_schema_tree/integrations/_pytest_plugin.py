"""pytest plugin for json-schema-tree.

Auto-discovered by pytest via the pytest11 entry point declared in pyproject.toml.
When the package is installed (even in editable mode), pytest discovers this plugin
automatically -- no conftest.py changes are needed.

Source: https://docs.pytest.org/en/stable/how-to/writing_plugins.html
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import pytest

from json_schema_tree.api import outline
from json_schema_tree.store import TreeStore


@pytest.fixture(scope="session")
def assert_tree_outline() -> Any:
    """Fixture that returns a callable asserter for the visible tree shape.

    The fixture is session-scoped because the returned callable is stateless
    (it only reads the store it is given).

    Usage in tests::

        def test_grouping(assert_tree_outline):
            store = build_tree(records, schema=schema, key_field="id")
            assert_tree_outline(store, [
                "a",
                "  1",
                "b",
                "  2",
            ])

    Returns:
        A callable ``_assert(store, expected, indent="  ") -> None`` that
        raises ``AssertionError`` when the outline of the visible tree differs
        from ``expected``.
    """

    def _assert(store: TreeStore, expected: Sequence[str], indent: str = "  ") -> None:
        """Assert that the visible tree of ``store`` renders as ``expected``.

        Raises:
            AssertionError: When the outlines differ, with both outlines in
                the message.
        """
        actual = outline(store, indent=indent)
        if actual != list(expected):
            rendered_actual = "\n".join(f"    {line}" for line in actual) or "    <empty>"
            rendered_expected = "\n".join(f"    {line}" for line in expected) or "    <empty>"
            raise AssertionError(
                "Tree outline mismatch:\n"
                f"  actual:\n{rendered_actual}\n"
                f"  expected:\n{rendered_expected}"
            )

    return _assert
