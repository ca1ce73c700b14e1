"""json-schema-tree - schema-driven persistent trees over JSON-like records."""

from __future__ import annotations

from json_schema_tree.api import build_tree, outline
from json_schema_tree.backends import JsonFileStateBackend, MemoryStateBackend
from json_schema_tree.changes import ChangeDetector
from json_schema_tree.config import SortOrder, TreeConfig
from json_schema_tree.items import CollapsibleState, TreeItem
from json_schema_tree.paths import PropertyValue, expand, resolve, resolve_unique
from json_schema_tree.protocols import StateBackend
from json_schema_tree.schema import (
    DEFAULT_SCHEMA,
    SchemaError,
    SchemaNode,
    load_schema,
    parse_schema,
)
from json_schema_tree.store import TreeStore
from json_schema_tree.tree import FilterTerm, TreeNode

__version__: str = "0.1.0"
__all__: list[str] = [
    "DEFAULT_SCHEMA",
    "ChangeDetector",
    "CollapsibleState",
    "FilterTerm",
    "JsonFileStateBackend",
    "MemoryStateBackend",
    "PropertyValue",
    "SchemaError",
    "SchemaNode",
    "SortOrder",
    "StateBackend",
    "TreeConfig",
    "TreeItem",
    "TreeNode",
    "TreeStore",
    "build_tree",
    "expand",
    "load_schema",
    "outline",
    "parse_schema",
    "resolve",
    "resolve_unique",
]
