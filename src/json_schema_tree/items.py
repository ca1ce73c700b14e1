"""TreeItem dataclass: what the presentation layer receives for one node.

This module provides the immutable view type returned by
``TreeStore.to_item`` calls.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum, auto

__all__ = ["CollapsibleState", "TreeItem"]


class CollapsibleState(StrEnum):
    """Collapse state of a rendered node.

    - NONE:      Leaf; nothing to expand.
    - COLLAPSED: Has children, shown collapsed (the default).
    - EXPANDED:  Has children, persisted as expanded.
    """

    NONE = auto()
    COLLAPSED = auto()
    EXPANDED = auto()


@dataclass(frozen=True, slots=True)
class TreeItem:
    """Presentation view of a TreeNode.

    Attributes:
        id: Stable node id.
        label: Rendered label.
        tooltip: Rendered tooltip, if any.
        icon: Icon name, if any.
        collapsible_state: Derived from children and the persisted expansion map.
        has_children: Whether the node currently owns children.
        parent_id: Id of the parent node; None for roots.
        highlighted: True when the node is change-tracked and changed.
        context_value: ``"showMenu"`` when the schema enables a context menu.
        command: Bound command identifier, if any.
        arguments: Rendered command arguments.
    """

    id: str
    label: str
    tooltip: str | None
    icon: str | None
    collapsible_state: CollapsibleState
    has_children: bool
    parent_id: str | None = None
    highlighted: bool = False
    context_value: str | None = None
    command: str | None = None
    arguments: tuple[str, ...] = field(default=())
