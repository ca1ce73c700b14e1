"""Integrations subpackage for json-schema-tree.

Contains integration adapters for external frameworks:
- pytest plugin (auto-discovered via pytest11 entry point), providing the
  ``assert_tree_outline`` fixture
"""

from __future__ import annotations

__all__: list[str] = []
