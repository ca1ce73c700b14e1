"""ChangeDetector: per-record fingerprints and per-node changed flags.

A record is fingerprinted by hashing its canonical JSON serialization (sorted
keys, compact separators) with a 32-bit multiplicative string hash reduced to
``[0, 1_000_000)``.  A record whose fingerprint differs from the stored one
for its key has changed.  Hash collisions can hide a real change; that is an
accepted approximation.

Both maps live in a ``StateBackend`` and are written back after every
mutation, so persisted state never lags behind the in-memory view.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

from json_schema_tree.protocols import CHANGED_NODES, HASHES

if TYPE_CHECKING:
    from json_schema_tree.protocols import StateBackend

__all__ = ["FINGERPRINT_SPACE", "ChangeDetector", "fingerprint", "string_hash"]

logger = logging.getLogger(__name__)

FINGERPRINT_SPACE = 1_000_000


def string_hash(text: str) -> int:
    """Return the ``h = h * 31 + c`` hash of ``text`` as a signed 32-bit int."""
    value = 0
    for char in text:
        value = (value * 31 + ord(char)) & 0xFFFFFFFF
    return value - 0x100000000 if value & 0x80000000 else value


def fingerprint(record: Any) -> int:
    """Fingerprint a record's canonical serialization.

    Raises:
        TypeError: If the record holds values JSON cannot serialize.
        ValueError: If the record contains a reference cycle.
    """
    text = json.dumps(record, sort_keys=True, separators=(",", ":"), ensure_ascii=False)
    return abs(string_hash(text)) % FINGERPRINT_SPACE


class ChangeDetector:
    """Tracks record fingerprints and node changed flags for one tree.

    Args:
        state: Backend the ``hashes`` and ``changedNodes`` maps are loaded
            from at construction and written to on every mutation.
    """

    def __init__(self, state: StateBackend) -> None:
        self._state = state
        self._hashes: dict[str, int] = {}
        self._changed: dict[str, bool] = {}
        self.sync()

    def sync(self) -> None:
        """Reload both maps from the backend."""
        self._hashes = dict(self._state.get(HASHES) or {})
        self._changed = dict(self._state.get(CHANGED_NODES) or {})

    # ------------------------------------------------------------------
    # Record fingerprints
    # ------------------------------------------------------------------

    def compare(self, key: Any, record: Any) -> tuple[bool, int | None]:
        """Fingerprint ``record`` against the stored one for ``key`` without saving.

        Returns:
            ``(changed, fingerprint)``.  A record without a key is never
            change-tracked: ``(False, None)``.  A record that cannot be
            fingerprinted is conservatively reported as changed with a
            ``None`` fingerprint, so ``commit`` leaves the stored one alone.
        """
        if key is None:
            return False, None

        try:
            new_hash = fingerprint(record)
        except (TypeError, ValueError) as exc:
            logger.warning("Cannot fingerprint record %r (%s); treating as changed", key, exc)
            return True, None

        return self._hashes.get(str(key)) != new_hash, new_hash

    def commit(self, key: Any, new_hash: int | None) -> None:
        """Store ``new_hash`` as the fingerprint of ``key``."""
        if key is None or new_hash is None:
            return
        stored_key = str(key)
        if self._hashes.get(stored_key) == new_hash:
            return
        self._hashes[stored_key] = new_hash
        self._state.update(HASHES, self._hashes)

    def check(self, key: Any, record: Any) -> bool:
        """Return True when ``record`` differs from the last one seen for ``key``.

        The new fingerprint is stored right away; see ``compare`` and
        ``commit`` for the two halves.
        """
        changed, new_hash = self.compare(key, record)
        self.commit(key, new_hash)
        return changed

    def fingerprint_of(self, key: Any) -> int | None:
        return self._hashes.get(str(key))

    # ------------------------------------------------------------------
    # Node changed flags
    # ------------------------------------------------------------------

    def is_marked(self, node_id: str) -> bool:
        return self._changed.get(node_id) is True

    def mark(self, node_id: str) -> None:
        """Persist ``node_id`` as changed."""
        self.mark_many((node_id,))

    def mark_many(self, node_ids: Iterable[str]) -> None:
        """Persist every id in ``node_ids`` as changed, in one backend write."""
        added = False
        for node_id in node_ids:
            if self._changed.get(node_id) is not True:
                self._changed[node_id] = True
                added = True
        if added:
            self._state.update(CHANGED_NODES, self._changed)

    def forget(self, node_ids: Iterable[str]) -> None:
        """Drop the changed flags of removed nodes, in one backend write."""
        removed = False
        for node_id in node_ids:
            if self._changed.pop(node_id, None) is not None:
                removed = True
        if removed:
            self._state.update(CHANGED_NODES, self._changed)

    def acknowledge(self, node_id: str) -> None:
        """Forget the changed flag of ``node_id``."""
        if self._changed.pop(node_id, None) is not None:
            self._state.update(CHANGED_NODES, self._changed)

    def clear(self) -> None:
        """Forget every changed flag, keeping fingerprints."""
        self._changed = {}
        self._state.update(CHANGED_NODES, self._changed)

    def reset(self) -> None:
        """Forget fingerprints and changed flags alike."""
        self._hashes = {}
        self._changed = {}
        self._state.update(HASHES, self._hashes)
        self._state.update(CHANGED_NODES, self._changed)

    @property
    def marked(self) -> frozenset[str]:
        return frozenset(node_id for node_id, flag in self._changed.items() if flag)
