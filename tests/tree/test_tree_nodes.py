"""Tests for TreeNode parent links, ancestry and the post-order walk."""

from __future__ import annotations

import gc

from json_schema_tree.schema.nodes import SchemaNode
from json_schema_tree.tree.nodes import TreeNode, walk

SCHEMA = SchemaNode(path="tag")


def _node(node_id: str) -> TreeNode:
    return TreeNode(id=node_id, label=node_id, value=node_id, schema=SCHEMA)


class TestParentLink:
    def test_root_has_no_parent(self) -> None:
        assert _node("a").parent is None

    def test_add_child_sets_parent(self) -> None:
        parent, child = _node("a"), _node("b")
        parent.add_child(child)
        assert child.parent is parent
        assert parent.children == [child]
        assert parent.has_children

    def test_parent_link_is_weak(self) -> None:
        parent, child = _node("a"), _node("b")
        parent.add_child(child)
        del parent
        gc.collect()
        assert child.parent is None

    def test_parent_can_be_cleared(self) -> None:
        parent, child = _node("a"), _node("b")
        parent.add_child(child)
        child.parent = None
        assert child.parent is None


class TestAncestry:
    def test_ancestors_and_depth(self) -> None:
        a, b, c = _node("a"), _node("b"), _node("c")
        a.add_child(b)
        b.add_child(c)
        assert list(c.ancestors()) == [b, a]
        assert c.depth == 2
        assert a.depth == 0

    def test_property_path_mirrors_schema(self) -> None:
        assert _node("a").property_path == "tag"

    def test_identity_equality(self) -> None:
        assert _node("a") != _node("a")


class TestWalk:
    def test_children_before_parents(self) -> None:
        a, b, c, d = _node("a"), _node("b"), _node("c"), _node("d")
        a.add_child(b)
        b.add_child(c)
        a.add_child(d)
        assert [node.id for node in walk([a])] == ["c", "b", "d", "a"]

    def test_forest(self) -> None:
        assert [node.id for node in walk([_node("x"), _node("y")])] == ["x", "y"]
