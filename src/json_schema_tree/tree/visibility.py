"""VisibilityFilter: decides which nodes reach the presentation layer.

Two independent rules combine:

- Text filter.  Applying a FilterTerm turns every node's base ``visible``
  flag off, then back on for each matching node, its whole ancestor chain and
  its whole subtree.
- Changed-only mode.  A node is shown when it, one of its ancestors, or one of
  its descendants is both changed and change-tracked.

The currently selected node is always visible, so the active selection never
disappears from under the viewer.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from cachetools import LRUCache, cached

from json_schema_tree.paths.templater import stringify
from json_schema_tree.tree.nodes import TreeNode, walk

__all__ = ["FilterTerm", "VisibilityFilter", "is_flagged"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class FilterTerm:
    """A text filter, optionally restricted to one schema property.

    Attributes:
        text: Regular expression searched for.  Invalid expressions are
              matched literally.
        key:  Property path to restrict matching to.  When set, the pattern is
              searched in the node value of nodes at that property only; when
              None, it is searched in every node label.
    """

    text: str
    key: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"key": self.key, "text": self.text}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> FilterTerm | None:
        """Rebuild a persisted term; empty or malformed data yields None."""
        if not data or not isinstance(data.get("text"), str) or not data["text"]:
            return None
        key = data.get("key")
        return cls(text=data["text"], key=key if isinstance(key, str) else None)


@cached(cache=LRUCache(maxsize=64))
def _compile(text: str, case_sensitive: bool) -> re.Pattern[str]:
    flags = 0 if case_sensitive else re.IGNORECASE
    try:
        return re.compile(text, flags)
    except re.error as exc:
        logger.warning("Invalid filter expression %r (%s); matching literally", text, exc)
        return re.compile(re.escape(text), flags)


def is_flagged(node: TreeNode) -> bool:
    """A node counts as changed only when it is also change-tracked."""
    return node.change_tracked and node.changed


def has_changed_ancestor(node: TreeNode) -> bool:
    return any(is_flagged(ancestor) for ancestor in node.ancestors())


def has_changed_descendant(node: TreeNode) -> bool:
    return any(
        is_flagged(child) or has_changed_descendant(child) for child in node.children
    )


class VisibilityFilter:
    """Holds the filter term, changed-only mode and selection of one tree.

    Example::

        visibility = VisibilityFilter()
        visibility.apply_filter(FilterTerm("alice", key="owner.name"), roots)
        shown = [node for node in roots if visibility.is_visible(node)]
    """

    def __init__(self, case_sensitive: bool = False) -> None:
        self._case_sensitive = case_sensitive
        self.term: FilterTerm | None = None
        self.changed_only: bool = False
        self.selected_id: str | None = None

    def set_changed_only(self, changed_only: bool) -> None:
        self.changed_only = changed_only

    def apply_filter(self, term: FilterTerm, roots: Iterable[TreeNode]) -> None:
        """Hide every node, then reveal matches with their ancestors and subtrees."""
        roots = list(roots)
        self.term = term
        pattern = _compile(term.text, self._case_sensitive)
        key = term.key.lower() if term.key else None

        for node in walk(roots):
            node.visible = False

        matches = 0
        for node in walk(roots):
            if not self._matches(node, pattern, key):
                continue
            matches += 1
            node.visible = True
            for descendant in walk(node.children):
                descendant.visible = True
            for ancestor in node.ancestors():
                ancestor.visible = True

        logger.debug("Filter %r on %r matched %d node(s)", term.text, term.key, matches)

    def clear_filter(self, roots: Iterable[TreeNode]) -> None:
        self.term = None
        for node in walk(roots):
            node.visible = True

    def is_visible(self, node: TreeNode) -> bool:
        if self.selected_id is not None and node.id == self.selected_id:
            return True
        if not node.visible:
            return False
        if not self.changed_only:
            return True
        return (
            is_flagged(node)
            or has_changed_ancestor(node)
            or has_changed_descendant(node)
        )

    @staticmethod
    def _matches(node: TreeNode, pattern: re.Pattern[str], key: str | None) -> bool:
        if key is None:
            return pattern.search(node.label) is not None
        if node.property_path.lower() != key:
            return False
        return pattern.search(stringify(node.value)) is not None
