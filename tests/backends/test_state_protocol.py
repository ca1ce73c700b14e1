"""Tests for StateBackend Protocol conformance.

Verifies that:
- User-defined classes with conformant ``get``/``update`` methods satisfy the Protocol.
- Classes missing either method do not satisfy it.
- The shipped backends satisfy the Protocol structurally without inheritance.
- A TreeStore runs against a user-defined backend.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from json_schema_tree.backends import JsonFileStateBackend, MemoryStateBackend
from json_schema_tree.protocols import StateBackend
from json_schema_tree.store import TreeStore


class _UserBackend:
    """Minimal user-defined backend recording every write."""

    def __init__(self) -> None:
        self.data: dict[str, Any] = {}
        self.keys_written: list[str] = []

    def get(self, key: str, default: Any = None) -> Any:
        return self.data.get(key, default)

    def update(self, key: str, value: Any) -> None:
        self.data[key] = value
        self.keys_written.append(key)


class _ReadOnlyBackend:
    """Class with no update method, should NOT satisfy Protocol."""

    def get(self, key: str, default: Any = None) -> Any:
        return default


# ---------------------------------------------------------------------------
# Conformance
# ---------------------------------------------------------------------------


def test_user_defined_backend_passes_isinstance():
    assert isinstance(_UserBackend(), StateBackend) is True


def test_read_only_backend_fails_isinstance():
    assert isinstance(_ReadOnlyBackend(), StateBackend) is False


def test_shipped_backends_pass_isinstance(tmp_path: Path):
    assert isinstance(MemoryStateBackend(), StateBackend)
    assert isinstance(JsonFileStateBackend(tmp_path / "s.json"), StateBackend)


def test_shipped_backends_do_not_inherit():
    assert StateBackend not in MemoryStateBackend.__mro__
    assert StateBackend not in JsonFileStateBackend.__mro__


# ---------------------------------------------------------------------------
# Store over a user-defined backend
# ---------------------------------------------------------------------------


def test_store_writes_through_user_backend(tag_schema):
    backend = _UserBackend()
    store = TreeStore(schema=tag_schema, state=backend)
    store.populate([{"number": 1, "tag": "a"}])
    assert "hashes" in backend.keys_written
    assert "changedNodes" in backend.keys_written
    store.set_expanded(store.roots[0].id, True)
    assert backend.data["expandedNodes"] == {"tag:a": True}
