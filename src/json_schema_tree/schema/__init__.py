"""Schema subpackage: declarative tree templates.

Re-exports the public API for the schema module:
- SchemaNode: immutable template for one tree level
- SchemaError: raised for structurally invalid schema data
- parse_schema / load_schema / loads_schema: build schemas from data, files or text
- DEFAULT_SCHEMA: built-in schema used when no source is configured
"""

from json_schema_tree.schema.defaults import (
    DEFAULT_SCHEMA,
    default_formatters,
    default_icon_resolvers,
)
from json_schema_tree.schema.loader import load_schema, loads_schema
from json_schema_tree.schema.nodes import SchemaError, SchemaNode, parse_schema

__all__ = [
    "DEFAULT_SCHEMA",
    "SchemaError",
    "SchemaNode",
    "default_formatters",
    "default_icon_resolvers",
    "load_schema",
    "loads_schema",
    "parse_schema",
]
