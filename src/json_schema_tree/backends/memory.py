"""MemoryStateBackend: dict-backed StateBackend for tests and one-shot trees.

Values are deep-copied on the way in and on the way out, so neither the engine
nor a caller can mutate persisted state through an aliased dict.
"""

from __future__ import annotations

import copy
from collections.abc import Mapping
from typing import Any


class MemoryStateBackend:
    """In-process key/value store satisfying the ``StateBackend`` Protocol.

    Example::

        from json_schema_tree.backends import MemoryStateBackend

        state = MemoryStateBackend({"showChangedOnly": True})
        state.get("showChangedOnly")        # True
        state.update("hashes", {"1": 42})
        state.snapshot()                    # {"showChangedOnly": True, "hashes": {"1": 42}}
    """

    def __init__(self, initial: Mapping[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = copy.deepcopy(dict(initial or {}))
        self.writes = 0

    def get(self, key: str, default: Any = None) -> Any:
        if key not in self._data:
            return default
        return copy.deepcopy(self._data[key])

    def update(self, key: str, value: Any) -> None:
        self._data[key] = copy.deepcopy(value)
        self.writes += 1

    def snapshot(self) -> dict[str, Any]:
        """Return a deep copy of everything stored."""
        return copy.deepcopy(self._data)
