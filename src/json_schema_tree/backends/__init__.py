"""Backends subpackage for json-schema-tree persisted state.

Two backends ship with the base install:

- ``MemoryStateBackend``  -- in-process dict, used by tests and ``build_tree``.
- ``JsonFileStateBackend`` -- one JSON document on disk, rewritten atomically
  on every update.

All backends satisfy the ``StateBackend`` Protocol structurally.
"""

from json_schema_tree.backends.json_file import JsonFileStateBackend
from json_schema_tree.backends.memory import MemoryStateBackend

__all__ = ["JsonFileStateBackend", "MemoryStateBackend"]
