"""PathResolver: resolves dotted property paths against JSON-like records.

A property path is a dot-separated sequence of field names, e.g.
``"patchSets.comments.file"``.  Traversal descends field by field.  Whenever
an *intermediate* segment resolves to a list, the resolver branches into every
element of that list and resolves the remainder of the path independently for
each branch.  The result is the full cross-product of resolutions across all
lists encountered along the path.

Every resolved value is returned as a ``PropertyValue`` that remembers which
list index was chosen at each branching point:

- ``indexes``   positional index list, one entry per list traversed.
- ``branches``  the same choices keyed by the list's path prefix, e.g.
                ``(("patchSets", 1), ("patchSets.comments", 3))``.

``branches`` is what lets a child schema level resolve only within the branch
its parent came from: passing it back as ``context`` pins every list whose
prefix it names and fans out only over lists the parent never crossed.

Falsy terminal values (``None``, ``""``, ``0``, ``False``, empty containers)
are never returned: they denote "no node to create".  Missing intermediate
fields short-circuit to an empty result, never to an error.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from cachetools import LRUCache, cached

__all__ = [
    "PropertyValue",
    "branch_context",
    "resolve",
    "resolve_unique",
    "split_path",
]

# Marker appended to a prefix when a list element is itself a list, so nested
# lists at the same field get distinct branch keys.
_NESTED = "[]"


@dataclass(frozen=True, slots=True)
class PropertyValue:
    """One concrete value a property path denotes inside a record.

    Attributes:
        value:          The resolved (truthy) value.  Terminal lists are kept
                        whole; only intermediate lists are branched over.
        indexes:        List indices chosen along the way, in traversal order.
        path:           The property path that was resolved.
        expanded_path:  The path with chosen indices spelled out, e.g.
                        ``"patchSets[1].comments[3].file"``.
        branches:       ``(list prefix, index)`` pairs for every list crossed,
                        including lists pinned by the resolve context.
    """

    value: Any
    indexes: tuple[int, ...]
    path: str
    expanded_path: str = ""
    branches: tuple[tuple[str, int], ...] = ()


@cached(cache=LRUCache(maxsize=512))
def split_path(path: str) -> tuple[str, ...]:
    """Split a dotted property path into its non-empty segments.

    Results are memoized: schemas resolve the same handful of paths for every
    record of every refresh.
    """
    return tuple(segment for segment in path.split(".") if segment)


def branch_context(value: PropertyValue | None) -> dict[str, int]:
    """Return the branch choices of ``value`` as a prefix -> index mapping."""
    if value is None:
        return {}
    return dict(value.branches)


def _is_present(value: Any) -> bool:
    """Terminal values that are falsy or empty produce no node."""
    return bool(value)


def _join(prefix: str, segment: str) -> str:
    return f"{prefix}.{segment}" if prefix else segment


def resolve(
    record: Any,
    path: str,
    context: Mapping[str, int] | None = None,
) -> list[PropertyValue]:
    """Resolve every value ``path`` denotes inside ``record``.

    Args:
        record:  A JSON-like object graph (mappings, lists, scalars).
        path:    Dot-separated property path.
        context: Optional ``list prefix -> index`` mapping.  A list whose
                 prefix appears here is not fanned out; only the pinned
                 element is followed.

    Returns:
        One ``PropertyValue`` per branch that reaches a truthy terminal value,
        in document order.  Empty when any field along the way is missing.
    """
    segments = split_path(path)
    if not segments:
        return []

    results: list[PropertyValue] = []
    _descend(
        record,
        segments,
        0,
        (),
        (),
        "",
        "",
        context or {},
        path,
        results,
    )
    return results


def _descend(
    obj: Any,
    segments: tuple[str, ...],
    position: int,
    indexes: tuple[int, ...],
    branches: tuple[tuple[str, int], ...],
    prefix: str,
    expanded: str,
    context: Mapping[str, int],
    path: str,
    results: list[PropertyValue],
) -> None:
    if isinstance(obj, list):
        pinned = context.get(prefix)
        for index, element in enumerate(obj):
            if pinned is not None and index != pinned:
                continue
            _descend(
                element,
                segments,
                position,
                (*indexes, index),
                (*branches, (prefix, index)),
                prefix + _NESTED if isinstance(element, list) else prefix,
                f"{expanded}[{index}]",
                context,
                path,
                results,
            )
        return

    if not isinstance(obj, Mapping):
        return

    segment = segments[position]
    if segment not in obj:
        return

    child = obj[segment]
    child_prefix = _join(prefix, segment)
    child_expanded = _join(expanded, segment)

    if position == len(segments) - 1:
        if _is_present(child):
            results.append(
                PropertyValue(
                    value=child,
                    indexes=indexes,
                    path=path,
                    expanded_path=child_expanded,
                    branches=branches,
                )
            )
        return

    _descend(
        child,
        segments,
        position + 1,
        indexes,
        branches,
        child_prefix,
        child_expanded,
        context,
        path,
        results,
    )


def resolve_unique(
    record: Any,
    path: str,
    indexes: Sequence[int] | None = None,
    keep_falsy: bool = False,
) -> Any:
    """Resolve ``path`` to a single value by consuming one index per list.

    Used when rendering a template that must pick the *same* branch that
    produced the ``PropertyValue`` being rendered.  Negative entries in
    ``indexes`` are ignored, so index lists padded with ``-1`` placeholders
    are accepted.  With ``keep_falsy`` a present but falsy terminal value
    (``0``, ``""``, ``False``) is returned as is; record keys are looked up
    this way.

    Returns:
        The resolved value, or ``None`` when a field is missing, a list is
        reached with no index left to consume, an index is out of range, or
        the terminal value is falsy (unless ``keep_falsy``).
    """
    segments = split_path(path)
    if not segments:
        return None

    remaining = [index for index in (indexes or ()) if index >= 0]
    last = len(segments) - 1
    obj = record

    for position, segment in enumerate(segments):
        if not isinstance(obj, Mapping):
            return None
        obj = obj.get(segment)
        while position < last and isinstance(obj, list):
            if not remaining:
                return None
            index = remaining.pop(0)
            if index >= len(obj):
                return None
            obj = obj[index]

    if keep_falsy:
        return obj
    return obj if _is_present(obj) else None
