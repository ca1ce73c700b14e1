"""StateBackend Protocol for persisted tree state.

Defines the structural interface of the key/value store the engine writes its
expansion, changed-flag and fingerprint maps to.  Any class with conformant
``get``/``update`` methods passes ``isinstance`` checks -- no inheritance
required.

Example::

    from json_schema_tree.protocols import StateBackend

    class RedisBackend:
        def get(self, key: str, default: Any = None) -> Any: ...
        def update(self, key: str, value: Any) -> None: ...

    assert isinstance(RedisBackend(), StateBackend)  # True -- structural conformance
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

__all__ = [
    "CHANGED_NODES",
    "EXPANDED_NODES",
    "FILTER",
    "HASHES",
    "SHOW_CHANGED_ONLY",
    "StateBackend",
]

EXPANDED_NODES = "expandedNodes"
CHANGED_NODES = "changedNodes"
HASHES = "hashes"
SHOW_CHANGED_ONLY = "showChangedOnly"
FILTER = "filter"


@runtime_checkable
class StateBackend(Protocol):
    """Structural protocol for persisted-state backends.

    ``update`` must make the value durable before returning; the engine calls
    it after every logical mutation and never batches writes.  Values are
    JSON-compatible (dicts with string keys, bools, ints, strings).
    """

    def get(self, key: str, default: Any = None) -> Any: ...

    def update(self, key: str, value: Any) -> None: ...
