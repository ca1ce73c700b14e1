"""Public convenience functions for json-schema-tree.

``build_tree`` materializes one batch into a fresh TreeStore backed by memory;
``outline`` renders the visible part of a store as indented text lines, which
is handy in tests and logs.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

from json_schema_tree.backends.memory import MemoryStateBackend
from json_schema_tree.config import TreeConfig
from json_schema_tree.store import TreeStore

if TYPE_CHECKING:
    from json_schema_tree.schema.nodes import SchemaNode
    from json_schema_tree.tree.nodes import TreeNode

__all__ = ["build_tree", "outline"]


def build_tree(
    records: Iterable[Any],
    schema: tuple[SchemaNode, ...] | None = None,
    key_field: str | None = None,
    config: TreeConfig | None = None,
) -> TreeStore:
    """Build a TreeStore from one batch of records.

    Creates a fresh store (memory backend, built-in formatters and icon
    resolvers) per call, so nothing is shared between calls.

    Args:
        records:   JSON-like records.
        schema:    Root schema levels.  Defaults to ``DEFAULT_SCHEMA``.
        key_field: Overrides ``config.key_field`` for this batch.
        config:    Engine parameters.  Defaults to ``TreeConfig()``.

    Returns:
        The populated store.
    """
    config = config if config is not None else TreeConfig()
    store = TreeStore(schema=schema, state=MemoryStateBackend(), config=config)
    store.populate(records, key_field=key_field)
    return store


def outline(store: TreeStore, node: TreeNode | None = None, indent: str = "  ") -> list[str]:
    """Render the visible subtree under ``node`` (or the whole tree) as lines.

    Each line is the node label prefixed by ``indent`` once per depth level
    below the starting point.
    """
    lines: list[str] = []

    def _render(parent: TreeNode | None, depth: int) -> None:
        for child in store.get_children(parent):
            lines.append(f"{indent * depth}{child.label}")
            _render(child, depth + 1)

    _render(node, 0)
    return lines
