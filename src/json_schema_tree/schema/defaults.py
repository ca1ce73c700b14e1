"""Built-in schema, label formatters and icon resolvers.

The default schema lays out code-review change records (one record per change,
keyed by ``number``) as::

    project
      branch
        status
          change ("${number} ${subject}")
            patch sets > commented files > comments
            current patch set, approvals, id, created, updated
            owner > email
            comments > messages

It is used whenever no schema source is configured or the configured source
cannot be read.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from datetime import UTC, datetime
from typing import Any

from json_schema_tree.paths.resolver import PropertyValue, resolve_unique
from json_schema_tree.paths.templater import stringify
from json_schema_tree.schema.nodes import SchemaNode, parse_schema

__all__ = [
    "DEFAULT_SCHEMA",
    "DEFAULT_SCHEMA_DATA",
    "Formatter",
    "IconResolver",
    "default_formatters",
    "default_icon_resolvers",
    "score_icon",
]

Formatter = Callable[[Any, PropertyValue], str]
IconResolver = Callable[[Any, PropertyValue], "str | None"]

DEFAULT_SCHEMA_DATA: list[dict[str, Any]] = [
    {
        "property": "project",
        "icon": "beaker",
        "children": [
            {
                "property": "branch",
                "label": "branch: ${branch}",
                "icon": "git-branch",
                "sort": True,
                "children": [
                    {
                        "property": "status",
                        "sort": True,
                        "children": [
                            {
                                "property": "subject",
                                "sort": True,
                                "icon": "overallScore",
                                "changeTracked": True,
                                "label": "${number} ${subject}",
                                "hasContextMenu": True,
                                "tooltip": "${commitMessage}",
                                "children": [
                                    {
                                        "property": "patchSets.number",
                                        "label": "Patch Set ${patchSets.number}",
                                        "sort": True,
                                        "children": [
                                            {
                                                "property": "patchSets.comments.file",
                                                "tooltip": "${patchSets.comments.file}",
                                                "icon": "comment",
                                                "command": "fetch",
                                                "arguments": [
                                                    "${patchSets.comments.file}",
                                                    "${patchSets.revision}",
                                                    "${number}",
                                                    "${patchSets.number}",
                                                ],
                                                "children": [
                                                    {
                                                        "property": "patchSets.comments.message",
                                                        "label": (
                                                            "line ${patchSets.comments.line}, "
                                                            "${patchSets.comments.reviewer.username}: "
                                                            "${patchSets.comments.message}"
                                                        ),
                                                        "tooltip": "${patchSets.comments.message}",
                                                    }
                                                ],
                                            }
                                        ],
                                    },
                                    {
                                        "property": "currentPatchSet.number",
                                        "sort": True,
                                        "label": "Patch set: ${currentPatchSet.number}",
                                        "changeTracked": True,
                                    },
                                    {
                                        "property": "currentPatchSet.approvals.by.name",
                                        "sort": True,
                                        "icon": "score",
                                        "tooltip": "${currentPatchSet.approvals.by.email}",
                                        "changeTracked": True,
                                    },
                                    {"property": "id", "label": "ID: ${id}"},
                                    {"property": "createdOn", "formatter": "created"},
                                    {
                                        "property": "lastUpdated",
                                        "sort": True,
                                        "formatter": "updated",
                                        "changeTracked": True,
                                    },
                                    {
                                        "property": "owner.name",
                                        "label": "Owner: ${owner.name} (${owner.username})",
                                        "children": [{"property": "owner.email"}],
                                    },
                                    {
                                        "property": "comments",
                                        "label": "Comments",
                                        "changeTracked": True,
                                        "children": [
                                            {
                                                "property": "comments.message",
                                                "tooltip": "${comments.message}",
                                            }
                                        ],
                                    },
                                ],
                            }
                        ],
                    }
                ],
            }
        ],
    }
]

DEFAULT_SCHEMA: tuple[SchemaNode, ...] = parse_schema(DEFAULT_SCHEMA_DATA)

_SCORE_NAMES = {-2: "minus-two", -1: "minus-one", 1: "plus-one", 2: "plus-two"}


def _to_int(value: Any) -> int | None:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def score_icon(score: int | None) -> str | None:
    """Map a review score to its icon name; 0 and unknown scores have none."""
    if score is None:
        return None
    return _SCORE_NAMES.get(score)


def _epoch_formatter(prefix: str) -> Formatter:
    def _format(record: Any, value: PropertyValue) -> str:
        seconds = _to_int(value.value)
        if seconds is None:
            return f"{prefix}: {stringify(value.value)}"
        try:
            moment = datetime.fromtimestamp(seconds, tz=UTC)
        except (OverflowError, OSError, ValueError):
            return f"{prefix}: {seconds}"
        return f"{prefix}: {moment:%a %d/%m/%Y, %H:%M}"

    return _format


def default_formatters() -> dict[str, Formatter]:
    """Return the built-in label formatters (``created``, ``updated``)."""
    return {
        "created": _epoch_formatter("Created"),
        "updated": _epoch_formatter("Updated"),
    }


def _score(record: Any, value: PropertyValue) -> str | None:
    raw = resolve_unique(record, "currentPatchSet.approvals.value", value.indexes)
    return score_icon(_to_int(raw))


def _overall_score(record: Any, threshold: int) -> str | None:
    approvals = resolve_unique(record, "currentPatchSet.approvals")
    built = False
    failed = False
    scores: dict[Any, int | None] = {}

    for approval in approvals if isinstance(approvals, list) else []:
        if not isinstance(approval, Mapping):
            continue
        kind = approval.get("type")
        if kind == "Verified":
            built = True
        if failed:
            continue

        score = _to_int(approval.get("value"))
        if kind == "Verified":
            if score == -1:
                failed = True
            continue

        current = scores.setdefault(kind, None)
        level = current or 0
        if score == -2 or current == -2:
            scores[kind] = -2
        elif score == -1 and level < 2:
            scores[kind] = -1
        elif score == 1 and -1 < level < 2:
            scores[kind] = 1
        elif score == 2:
            scores[kind] = 2

    if not built:
        return "building"
    if failed:
        return "failed"

    levels = [score or 0 for score in scores.values()]
    if len(scores) < threshold:
        return score_icon(min([0, *(level for level in levels if level < 2)])) or "verified"
    return score_icon(min(levels, default=0))


def default_icon_resolvers(approval_threshold: int = 2) -> dict[str, IconResolver]:
    """Return the built-in icon resolvers (``score``, ``overallScore``).

    Args:
        approval_threshold: Number of distinct review categories required
            before ``overallScore`` reports the minimum score across them
            rather than ``"verified"``.
    """

    def _overall(record: Any, value: PropertyValue) -> str | None:
        return _overall_score(record, approval_threshold)

    return {"score": _score, "overallScore": _overall}
