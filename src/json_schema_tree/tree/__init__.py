"""Tree subpackage: materialized nodes and the algorithms that maintain them.

Re-exports the public API for the tree module:
- TreeNode: dataclass for one materialized node (weak parent link)
- SchemaTreeBuilder: builds/reuses nodes from records according to a schema
- mark_all / prune: mark-and-sweep removal of nodes a pass did not reach
- FilterTerm / VisibilityFilter: text filter and changed-only visibility
"""

from json_schema_tree.tree.builder import SchemaTreeBuilder, make_node_id
from json_schema_tree.tree.nodes import TreeNode, walk
from json_schema_tree.tree.pruner import mark_all, prune
from json_schema_tree.tree.visibility import FilterTerm, VisibilityFilter

__all__ = [
    "FilterTerm",
    "SchemaTreeBuilder",
    "TreeNode",
    "VisibilityFilter",
    "make_node_id",
    "mark_all",
    "prune",
    "walk",
]
