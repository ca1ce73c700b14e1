"""Shared fixtures: small schemas, a memory backend and code-review records.

The review records follow the shape the built-in schema expects: one record
per change, keyed by ``number``, with nested patch sets, inline comments and
approvals.
"""

from __future__ import annotations

import copy
from collections.abc import Callable
from typing import Any

import pytest

from json_schema_tree.backends import MemoryStateBackend
from json_schema_tree.config import TreeConfig
from json_schema_tree.schema.defaults import default_formatters, default_icon_resolvers
from json_schema_tree.schema.nodes import SchemaNode, parse_schema
from json_schema_tree.store import TreeStore

REVIEW_RECORDS: list[dict[str, Any]] = [
    {
        "number": "101",
        "project": "core",
        "branch": "main",
        "status": "NEW",
        "subject": "Fix parser",
        "id": "I101",
        "commitMessage": "Fix parser\n\nHandle trailing commas.",
        "createdOn": 1700000000,
        "lastUpdated": 1700003600,
        "owner": {"name": "Alice", "username": "alice", "email": "alice@example.com"},
        "patchSets": [
            {
                "number": 1,
                "revision": "aaa111",
                "comments": [
                    {
                        "file": "src/parser.py",
                        "line": 10,
                        "message": "Typo",
                        "reviewer": {"username": "bob"},
                    }
                ],
            },
            {
                "number": 2,
                "revision": "bbb222",
                "comments": [
                    {
                        "file": "src/parser.py",
                        "line": 12,
                        "message": "Still wrong",
                        "reviewer": {"username": "bob"},
                    },
                    {
                        "file": "src/lexer.py",
                        "line": 3,
                        "message": "Nice",
                        "reviewer": {"username": "carol"},
                    },
                    {
                        "file": "src/parser.py",
                        "line": 40,
                        "message": "Done?",
                        "reviewer": {"username": "carol"},
                    },
                ],
            },
        ],
        "currentPatchSet": {
            "number": 2,
            "approvals": [
                {
                    "type": "Verified",
                    "value": "1",
                    "by": {"name": "CI", "email": "ci@example.com"},
                },
                {
                    "type": "Code-Review",
                    "value": "2",
                    "by": {"name": "Bob", "email": "bob@example.com"},
                },
            ],
        },
        "comments": [
            {"message": "Uploaded patch set 1."},
            {"message": "Uploaded patch set 2."},
        ],
    },
    {
        "number": "102",
        "project": "core",
        "branch": "main",
        "status": "MERGED",
        "subject": "Add lexer",
        "id": "I102",
        "createdOn": 1700100000,
        "lastUpdated": 1700200000,
        "owner": {"name": "Bob", "username": "bob", "email": "bob@example.com"},
        "patchSets": [{"number": 1, "revision": "ccc333"}],
        "currentPatchSet": {"number": 1, "approvals": []},
    },
]


@pytest.fixture
def review_records() -> list[dict[str, Any]]:
    """Deep copies of the sample review records (safe to mutate)."""
    return copy.deepcopy(REVIEW_RECORDS)


@pytest.fixture
def state() -> MemoryStateBackend:
    return MemoryStateBackend()


@pytest.fixture
def tag_schema() -> tuple[SchemaNode, ...]:
    """tag > id, with the id level change-tracked."""
    return parse_schema(
        {
            "property": "tag",
            "sort": True,
            "children": [{"property": "id", "label": "#${id}", "changeTracked": True}],
        }
    )


@pytest.fixture
def make_store(state: MemoryStateBackend) -> Callable[..., TreeStore]:
    """Factory for stores sharing the test's memory backend.

    Keyword arguments are forwarded to ``TreeStore``; ``key_field`` is a
    shortcut for ``config=TreeConfig(key_field=...)``.
    """

    def _make(
        schema: tuple[SchemaNode, ...] | None = None,
        key_field: str = "id",
        **kwargs: Any,
    ) -> TreeStore:
        kwargs.setdefault("config", TreeConfig(key_field=key_field))
        kwargs.setdefault("state", state)
        return TreeStore(schema=schema, **kwargs)

    return _make


@pytest.fixture
def review_store(state: MemoryStateBackend) -> TreeStore:
    """A store over the built-in schema with the built-in formatters and icons."""
    return TreeStore(
        state=state,
        formatters=default_formatters(),
        icon_resolvers=default_icon_resolvers(),
    )
