"""Paths subpackage: property-path resolution and label templating.

Re-exports the public API:
- PropertyValue: one resolved value plus the list indices chosen to reach it
- resolve / resolve_unique: cross-product and single-branch path resolution
- expand / expand_all: ``${field.path}`` placeholder expansion
"""

from json_schema_tree.paths.resolver import (
    PropertyValue,
    branch_context,
    resolve,
    resolve_unique,
    split_path,
)
from json_schema_tree.paths.templater import expand, expand_all, placeholders, stringify

__all__ = [
    "PropertyValue",
    "branch_context",
    "expand",
    "expand_all",
    "placeholders",
    "resolve",
    "resolve_unique",
    "split_path",
    "stringify",
]
