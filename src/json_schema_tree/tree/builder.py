"""SchemaTreeBuilder: materializes records into TreeNodes according to a schema.

For every record the builder walks the schema tree top-down.  At each schema
level it resolves the level's property path within the branch context
inherited from the parent level, renders a label per resolved value, and
reuses the sibling with that label (under the same parent and schema level)
or creates it.  Identity is therefore content-derived: the same logical
(schema level, record, branch) triple lands on the same node on every
refresh, whatever the order of the input batch.

Lookup goes through an index keyed by ``(parent id, property path, label)``
so reuse is O(1); display order lives separately in each sibling list.

Branch context:
    Resolving ``patchSets.number`` yields one value per patch set, each
    remembering its list index.  The children of the node created for patch
    set 1 resolve ``patchSets.comments.file`` with ``patchSets`` pinned to
    index 1 and fan out only over ``comments``.  Lists the parent level never
    crossed are fanned out in full.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any
from urllib.parse import quote

from json_schema_tree.config import SortOrder
from json_schema_tree.paths.resolver import PropertyValue, resolve, resolve_unique
from json_schema_tree.paths.templater import expand, expand_all, stringify
from json_schema_tree.tree.nodes import TreeNode

if TYPE_CHECKING:
    from json_schema_tree.changes import ChangeDetector
    from json_schema_tree.schema.defaults import Formatter, IconResolver
    from json_schema_tree.schema.nodes import SchemaNode

__all__ = ["IndexKey", "SchemaTreeBuilder", "make_node_id"]

logger = logging.getLogger(__name__)

IndexKey = tuple[str | None, str, str]


def make_node_id(parent: TreeNode | None, path: str, label: str) -> str:
    """Derive a node id from its parent id, schema property path and label.

    Label text is percent-encoded so that no label can forge a ``/`` segment
    boundary and collide with a node in another branch.
    """
    segment = f"{quote(path, safe='.')}:{quote(label, safe='')}"
    if parent is None:
        return segment
    return f"{parent.id}/{segment}"


def index_key(parent: TreeNode | None, path: str, label: str) -> IndexKey:
    return (parent.id if parent is not None else None, path, label)


class SchemaTreeBuilder:
    """Builds and incrementally updates a forest of TreeNodes.

    The builder owns the root list and the reuse index.  It never deletes
    nodes: removal of nodes a pass did not reach is the pruner's job, run by
    the caller once the whole batch has been built.

    Args:
        schema:         Root schema levels.
        detector:       Change detector consulted for record fingerprints and
                        persisted node changed flags.
        sort_order:     Direction of the shared sibling comparator.
        formatters:     Named label formatters referenced by ``formatter``.
        icon_resolvers: Named icon resolvers referenced by ``icon``.
    """

    def __init__(
        self,
        schema: tuple[SchemaNode, ...],
        detector: ChangeDetector,
        sort_order: SortOrder = SortOrder.ASCENDING,
        formatters: Mapping[str, Formatter] | None = None,
        icon_resolvers: Mapping[str, IconResolver] | None = None,
    ) -> None:
        self.schema = schema
        self.roots: list[TreeNode] = []
        self.index: dict[IndexKey, TreeNode] = {}
        self.keys: set[str] = set()
        self._detector = detector
        self._descending = sort_order == SortOrder.DESCENDING
        self._formatters = dict(formatters or {})
        self._icon_resolvers = dict(icon_resolvers or {})
        # (node, marked_for_deletion, changed) before the current record matched it
        self._touched: list[tuple[TreeNode, bool, bool]] = []

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def populate(self, records: Iterable[Any], key_field: str | None) -> list[Any]:
        """Build every record into the forest.

        Args:
            records:   Batch of JSON-like records.
            key_field: Property path identifying a record across refreshes.
                       None or empty disables change tracking.

        Returns:
            Key-field values of the records whose fingerprint changed, in
            batch order.
        """
        changed_keys: list[Any] = []
        for position, record in enumerate(records):
            if not isinstance(record, Mapping):
                logger.warning(
                    "Skipping record %d: expected an object, got %s",
                    position,
                    type(record).__name__,
                )
                continue
            key = None
            if key_field:
                key = resolve_unique(record, key_field, keep_falsy=True)
            record_changed, new_hash = self._detector.compare(key, record)
            self._touched = []
            try:
                self._expand(record, self.schema, None, {}, key, record_changed)
            except (AttributeError, KeyError, TypeError, ValueError) as exc:
                self._rollback()
                logger.warning("Skipping malformed record %d: %s", position, exc)
                continue

            self._detector.commit(key, new_hash)
            if record_changed:
                changed_keys.append(key)
                self._detector.mark_many(node.id for node, _, _ in self._touched)
        self._touched = []
        return changed_keys

    def forget(self, node: TreeNode) -> None:
        """Drop ``node`` from the reuse index (called for pruned nodes)."""
        key = index_key(node.parent, node.property_path, node.label)
        if self.index.get(key) is node:
            del self.index[key]

    def sort(self, siblings: list[TreeNode]) -> None:
        """Sort a sibling list in place with the shared label comparator."""
        siblings.sort(key=lambda node: node.label, reverse=self._descending)

    # ------------------------------------------------------------------
    # Recursive expansion
    # ------------------------------------------------------------------

    def _expand(
        self,
        record: Mapping[str, Any],
        schemas: tuple[SchemaNode, ...],
        parent: TreeNode | None,
        context: dict[str, int],
        key: Any,
        record_changed: bool,
    ) -> None:
        for schema in schemas:
            self.keys.add(schema.path)
            for value in resolve(record, schema.path, context):
                node = self._match(record, schema, value, parent, key, record_changed)
                if schema.children:
                    self._expand(
                        record,
                        schema.children,
                        node,
                        {**context, **dict(value.branches)},
                        key,
                        record_changed,
                    )

    def _match(
        self,
        record: Mapping[str, Any],
        schema: SchemaNode,
        value: PropertyValue,
        parent: TreeNode | None,
        key: Any,
        record_changed: bool,
    ) -> TreeNode:
        label = self._render_label(schema, record, value)
        node = self.index.get(index_key(parent, schema.path, label))

        if node is None:
            node = TreeNode(
                id=make_node_id(parent, schema.path, label),
                label=label,
                value=value.value,
                schema=schema,
                key=key,
                change_tracked=schema.change_tracked,
            )
            self._touched.append((node, True, False))
            self._attach(node, parent, schema)
        else:
            self._touched.append((node, node.marked_for_deletion, node.changed))
            node.marked_for_deletion = False

        node.value = value.value
        node.record = record
        node.changed = record_changed or self._detector.is_marked(node.id)
        self._bind(node, schema, record, value)
        return node

    def _rollback(self) -> None:
        """Undo the flags set by a record that failed partway through.

        Nodes the record created go back to pending deletion so the next
        prune removes them; reused nodes get their previous flags back.
        """
        for node, marked_for_deletion, changed in reversed(self._touched):
            node.marked_for_deletion = marked_for_deletion
            node.changed = changed
        self._touched = []

    def _attach(
        self, node: TreeNode, parent: TreeNode | None, schema: SchemaNode
    ) -> None:
        if parent is None:
            siblings = self.roots
            siblings.append(node)
        else:
            parent.add_child(node)
            siblings = parent.children
        self.index[index_key(parent, schema.path, node.label)] = node
        if schema.sort:
            self.sort(siblings)

    # ------------------------------------------------------------------
    # Bindings
    # ------------------------------------------------------------------

    def _render_label(
        self, schema: SchemaNode, record: Mapping[str, Any], value: PropertyValue
    ) -> str:
        if schema.label is not None:
            return expand(schema.label, record, value.indexes)
        formatter = self._formatters.get(schema.formatter) if schema.formatter else None
        if formatter is not None:
            return formatter(record, value)
        return stringify(value.value)

    def _bind(
        self,
        node: TreeNode,
        schema: SchemaNode,
        record: Mapping[str, Any],
        value: PropertyValue,
    ) -> None:
        if schema.tooltip is not None:
            node.tooltip = expand(schema.tooltip, record, value.indexes)
        if schema.icon:
            resolver = self._icon_resolvers.get(schema.icon)
            node.icon = resolver(record, value) if resolver else schema.icon
        if schema.command:
            node.command = schema.command
            node.arguments = expand_all(schema.arguments, record, value.indexes)
