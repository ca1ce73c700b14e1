"""TreeNode dataclass: one materialized node of the schema-driven tree.

A TreeNode is produced by applying a SchemaNode to a record.  Children are
owned through the ``children`` list; the ``parent`` link is a non-owning weak
reference used only for upward traversal (ancestor queries and visibility
propagation), so parent/child cycles never keep a pruned subtree alive.
"""

from __future__ import annotations

import weakref
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from typing import Any

from json_schema_tree.schema.nodes import SchemaNode

__all__ = ["TreeNode", "walk"]


@dataclass(slots=True, weakref_slot=True, eq=False)
class TreeNode:
    """A node in the materialized tree.

    Attributes:
        id:                  Stable identifier derived from the node's position
                             in the schema-to-record mapping.
        label:               Rendered label; also the node's identity among
                             siblings of the same schema level.
        value:               The resolved property value.
        schema:              The SchemaNode this node was produced from.
        key:                 Key-field value of the record that created it.
        record:              The most recent record that matched this node.
        tooltip:             Rendered tooltip, if the schema defines one.
        icon:                Icon name, if any.
        command:             Bound command identifier, if any.
        arguments:           Rendered command arguments.
        children:            Owned child nodes, in display order.
        visible:             Base (filter) visibility.
        changed:             Set by change detection or explicit marking.
        change_tracked:      Mirrors ``schema.change_tracked``.
        marked_for_deletion: Transient mark used by the prune sweep.
    """

    id: str
    label: str
    value: Any
    schema: SchemaNode
    key: Any = None
    record: Any = field(default=None, repr=False)
    tooltip: str | None = None
    icon: str | None = None
    command: str | None = None
    arguments: list[str] = field(default_factory=list)
    children: list[TreeNode] = field(default_factory=list, repr=False)
    visible: bool = True
    changed: bool = False
    change_tracked: bool = False
    marked_for_deletion: bool = False
    _parent_ref: weakref.ReferenceType[TreeNode] | None = field(
        default=None, repr=False
    )

    @property
    def parent(self) -> TreeNode | None:
        """The owning parent, or None for roots (and orphans)."""
        if self._parent_ref is None:
            return None
        return self._parent_ref()

    @parent.setter
    def parent(self, node: TreeNode | None) -> None:
        self._parent_ref = weakref.ref(node) if node is not None else None

    @property
    def property_path(self) -> str:
        return self.schema.path

    @property
    def has_children(self) -> bool:
        return bool(self.children)

    @property
    def depth(self) -> int:
        return sum(1 for _ in self.ancestors())

    def ancestors(self) -> Iterator[TreeNode]:
        """Yield the parent, grandparent, ... up to the root."""
        node = self.parent
        while node is not None:
            yield node
            node = node.parent

    def add_child(self, child: TreeNode) -> None:
        """Append ``child`` and point its parent link at this node."""
        child.parent = self
        self.children.append(child)


def walk(nodes: Iterable[TreeNode]) -> Iterator[TreeNode]:
    """Yield every node of the given forest, children before their parent."""
    for node in nodes:
        yield from walk(node.children)
        yield node
