"""Pruner: mark-and-sweep removal of nodes a population pass did not produce.

Before a builder pass every existing node is marked pending deletion; the
builder clears the mark on each node it matches or creates.  After the pass,
``prune`` sweeps post-order (children before their parent) and drops every
node still marked.  A parent left with an empty child list is kept when it
was itself re-matched: only never-matched nodes are removed.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable

from json_schema_tree.tree.nodes import TreeNode, walk

__all__ = ["mark_all", "prune"]


def mark_all(nodes: Iterable[TreeNode]) -> None:
    """Mark every node of the forest pending deletion."""
    for node in walk(nodes):
        node.marked_for_deletion = True


def prune(
    nodes: list[TreeNode],
    on_remove: Callable[[TreeNode], None] | None = None,
) -> list[TreeNode]:
    """Return the surviving nodes of ``nodes`` after a post-order sweep.

    Args:
        nodes:     A sibling list (roots or some node's children).
        on_remove: Called once per removed node, deepest nodes first, while
                   the node's parent link is still intact.

    Returns:
        A new list holding the unmarked nodes in their original order.  Child
        lists of survivors are replaced by their own pruned lists.
    """
    survivors: list[TreeNode] = []
    for node in nodes:
        node.children = prune(node.children, on_remove)
        if node.marked_for_deletion:
            if on_remove is not None:
                on_remove(node)
            continue
        survivors.append(node)
    return survivors
