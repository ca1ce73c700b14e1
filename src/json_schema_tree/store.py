"""TreeStore: owner of one schema-driven tree and all of its persisted state.

This is the wiring layer between the builder, the pruner, the change detector
and the visibility filter.  Everything a refresh touches -- roots, the reuse
index, expansion state, changed flags, fingerprints, filter and changed-only
mode -- lives on the instance; there is no module-level state, so any number
of independent stores can coexist.

Refresh cycle (``populate``):
1. mark every existing node pending deletion;
2. fingerprint and build every record (SchemaTreeBuilder);
3. prune nodes the pass did not reach, dropping their persisted state;
4. re-apply the persisted filter so new nodes honour it.

State is loaded from the ``StateBackend`` at construction and written back
after every logical mutation.  Callers must serialize refreshes; a store is
not safe for concurrent mutation.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping
from typing import TYPE_CHECKING, Any

from json_schema_tree.backends.memory import MemoryStateBackend
from json_schema_tree.changes import ChangeDetector
from json_schema_tree.config import TreeConfig
from json_schema_tree.items import CollapsibleState, TreeItem
from json_schema_tree.protocols import EXPANDED_NODES, FILTER, SHOW_CHANGED_ONLY
from json_schema_tree.schema.defaults import (
    DEFAULT_SCHEMA,
    default_formatters,
    default_icon_resolvers,
)
from json_schema_tree.tree.builder import SchemaTreeBuilder
from json_schema_tree.tree.nodes import TreeNode, walk
from json_schema_tree.tree.pruner import mark_all, prune
from json_schema_tree.tree.visibility import FilterTerm, VisibilityFilter, is_flagged

if TYPE_CHECKING:
    from json_schema_tree.protocols import StateBackend
    from json_schema_tree.schema.defaults import Formatter, IconResolver
    from json_schema_tree.schema.nodes import SchemaNode

__all__ = ["TreeStore"]

logger = logging.getLogger(__name__)


class TreeStore:
    """A persistent, filterable tree materialized from record batches.

    Example::

        from json_schema_tree import TreeConfig, TreeStore, parse_schema

        store = TreeStore(
            schema=parse_schema({"property": "tag", "children": [{"property": "id"}]}),
            config=TreeConfig(key_field="id"),
        )
        changed = store.populate([{"id": 1, "tag": "a"}, {"id": 2, "tag": "b"}])
        # changed == [1, 2]: first sight of a key counts as a change
        store.set_changed_only(True)
        visible = store.get_children()
    """

    def __init__(
        self,
        schema: tuple[SchemaNode, ...] | None = None,
        state: StateBackend | None = None,
        config: TreeConfig | None = None,
        formatters: Mapping[str, Formatter] | None = None,
        icon_resolvers: Mapping[str, IconResolver] | None = None,
    ) -> None:
        """Initialise the store and load persisted state.

        Args:
            schema: Root schema levels.  Defaults to ``DEFAULT_SCHEMA``.
            state: Persisted-state backend.  Defaults to a fresh
                ``MemoryStateBackend``.
            config: Engine parameters.  Defaults to ``TreeConfig()``.
            formatters: Named label formatters available to the schema.
                Defaults to ``default_formatters()``.
            icon_resolvers: Named icon resolvers available to the schema.
                Defaults to ``default_icon_resolvers(config.approval_threshold)``.
        """
        self._config = config if config is not None else TreeConfig()
        self._state: StateBackend = state if state is not None else MemoryStateBackend()
        self._detector = ChangeDetector(self._state)
        if formatters is None:
            formatters = default_formatters()
        if icon_resolvers is None:
            icon_resolvers = default_icon_resolvers(self._config.approval_threshold)
        self._builder = SchemaTreeBuilder(
            schema if schema is not None else DEFAULT_SCHEMA,
            self._detector,
            sort_order=self._config.sort_order,
            formatters=formatters,
            icon_resolvers=icon_resolvers,
        )
        self._visibility = VisibilityFilter(
            case_sensitive=self._config.filter_case_sensitive
        )
        self._visibility.set_changed_only(self._state.get(SHOW_CHANGED_ONLY, False) is True)
        self._visibility.term = FilterTerm.from_dict(self._state.get(FILTER))
        self._expanded: dict[str, bool] = dict(self._state.get(EXPANDED_NODES) or {})

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def config(self) -> TreeConfig:
        return self._config

    @property
    def schema(self) -> tuple[SchemaNode, ...]:
        return self._builder.schema

    @property
    def roots(self) -> list[TreeNode]:
        """The root nodes, in display order (includes hidden ones)."""
        return self._builder.roots

    @property
    def changed_only(self) -> bool:
        return self._visibility.changed_only

    @property
    def filter_term(self) -> FilterTerm | None:
        return self._visibility.term

    @property
    def selected_id(self) -> str | None:
        return self._visibility.selected_id

    @property
    def detector(self) -> ChangeDetector:
        return self._detector

    # ------------------------------------------------------------------
    # Refresh
    # ------------------------------------------------------------------

    def populate(
        self, records: Iterable[Any], key_field: str | None = None
    ) -> list[Any]:
        """Reconcile the tree with a complete batch of records.

        Args:
            records: The full current batch.  Records absent from it lose
                their nodes.
            key_field: Property path identifying records across refreshes.
                Defaults to ``config.key_field``.

        Returns:
            Key-field values of the records that changed since the last
            refresh (first sight counts as a change).
        """
        records = list(records)
        if key_field is None:
            key_field = self._config.key_field

        mark_all(self._builder.roots)
        changed = self._builder.populate(records, key_field)
        self.prune()

        if self._visibility.term is not None:
            self._visibility.apply_filter(self._visibility.term, self._builder.roots)

        logger.debug(
            "%d records, %d changed%s",
            len(records),
            len(changed),
            f" ({', '.join(str(key) for key in changed)})" if changed else "",
        )
        return changed

    def prune(self) -> None:
        """Remove every node still marked for deletion, with its persisted state.

        Expansion entries and changed flags of removed nodes are dropped, one
        backend write per map.
        """
        removed: list[str] = []
        pruned: list[str] = []

        def _forget(node: TreeNode) -> None:
            self._builder.forget(node)
            pruned.append(node.id)
            if self._expanded.pop(node.id, None) is not None:
                removed.append(node.id)

        self._builder.roots = prune(self._builder.roots, _forget)
        if removed:
            self._state.update(EXPANDED_NODES, self._expanded)
        self._detector.forget(pruned)

    # ------------------------------------------------------------------
    # Visibility
    # ------------------------------------------------------------------

    def apply_filter(self, term: FilterTerm) -> None:
        self._visibility.apply_filter(term, self._builder.roots)
        self._state.update(FILTER, term.to_dict())

    def clear_filter(self) -> None:
        self._visibility.clear_filter(self._builder.roots)
        self._state.update(FILTER, {})

    def set_changed_only(self, changed_only: bool) -> None:
        self._visibility.set_changed_only(changed_only)
        self._state.update(SHOW_CHANGED_ONLY, changed_only)

    def is_visible(self, node: TreeNode) -> bool:
        return self._visibility.is_visible(node)

    def get_children(self, node: TreeNode | None = None) -> list[TreeNode]:
        """Return the visible children of ``node``, or the visible roots.

        With ``config.hide_empty_roots``, roots whose schema declares children
        but which own none are left out.
        """
        if node is not None:
            return [child for child in node.children if self.is_visible(child)]

        roots = self._builder.roots
        if self._config.hide_empty_roots:
            roots = [root for root in roots if root.children or not root.schema.children]
        return [root for root in roots if self.is_visible(root)]

    def get_parent(self, node: TreeNode) -> TreeNode | None:
        return node.parent

    # ------------------------------------------------------------------
    # Expansion state
    # ------------------------------------------------------------------

    def set_expanded(self, node_id: str, expanded: bool) -> None:
        self._expanded[node_id] = expanded
        self._state.update(EXPANDED_NODES, self._expanded)

    def is_expanded(self, node_id: str) -> bool:
        return self._expanded.get(node_id) is True

    def clear_expansion_state(self) -> None:
        self._expanded = {}
        self._state.update(EXPANDED_NODES, self._expanded)

    # ------------------------------------------------------------------
    # Changed flags
    # ------------------------------------------------------------------

    def select(self, node: TreeNode) -> None:
        """Make ``node`` the selection; a change-tracked node is acknowledged."""
        self._visibility.selected_id = node.id
        if node.change_tracked:
            self.set_changed(node, False)

    def set_changed(self, node: TreeNode, changed: bool) -> None:
        """Explicitly mark or acknowledge ``node``.

        Marking also flags every change-tracked ancestor and descendant so the
        node stays reachable in changed-only mode.  Acknowledging clears only
        the node itself.
        """
        if node.change_tracked:
            node.changed = changed

        if not changed:
            self._detector.acknowledge(node.id)
            return

        self._detector.mark(node.id)
        for descendant in walk(node.children):
            if descendant.change_tracked:
                descendant.changed = True
        for ancestor in node.ancestors():
            if ancestor.change_tracked:
                ancestor.changed = True

    def clear_all(self) -> None:
        """Acknowledge every node."""
        for node in walk(self._builder.roots):
            node.changed = False
        self._detector.clear()

    def reset(self) -> None:
        """Forget fingerprints and changed flags; the next refresh reports all keys."""
        for node in walk(self._builder.roots):
            node.changed = False
        self._detector.reset()

    def sync(self) -> None:
        """Reload changed flags and fingerprints written by another store instance."""
        self._detector.sync()

    def has_changed(self) -> bool:
        """True when some visible change-tracked node is flagged changed."""
        return any(is_flagged(node) and node.visible for node in walk(self._builder.roots))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def keys(self) -> set[str]:
        """Every schema property path seen so far (for filter key pickers)."""
        return set(self._builder.keys)

    def walk(self) -> Iterator[TreeNode]:
        return walk(self._builder.roots)

    def find(self, node_id: str) -> TreeNode | None:
        for node in walk(self._builder.roots):
            if node.id == node_id:
                return node
        return None

    def to_item(self, node: TreeNode) -> TreeItem:
        """Build the presentation view of ``node``."""
        if not node.children:
            state = CollapsibleState.NONE
        elif self.is_expanded(node.id):
            state = CollapsibleState.EXPANDED
        else:
            state = CollapsibleState.COLLAPSED

        parent = node.parent
        return TreeItem(
            id=node.id,
            label=node.label,
            tooltip=node.tooltip,
            icon=node.icon,
            collapsible_state=state,
            has_children=node.has_children,
            parent_id=parent.id if parent is not None else None,
            highlighted=is_flagged(node),
            context_value="showMenu" if node.schema.has_context_menu else None,
            command=node.command,
            arguments=tuple(node.arguments),
        )
