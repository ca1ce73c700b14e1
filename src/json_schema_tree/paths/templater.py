"""Templater: expands ``${field.path}`` placeholders in label templates.

Each placeholder is resolved with ``resolve_unique`` against the record, using
the index list of the ``PropertyValue`` being rendered, so a label, tooltip or
command argument always describes the same list branch as its node.
Unresolvable placeholders render as an empty string; expansion never raises.
"""

from __future__ import annotations

import json
import re
from collections.abc import Iterable, Sequence
from typing import Any

from json_schema_tree.paths.resolver import resolve_unique

__all__ = ["expand", "expand_all", "placeholders", "stringify"]

_PLACEHOLDER = re.compile(r"\$\{(.*?)\}")


def stringify(value: Any) -> str:
    """Render a resolved value for display.

    Containers are rendered as compact JSON; everything else via ``str``.
    ``None`` renders as the empty string.
    """
    if value is None:
        return ""
    if isinstance(value, (dict, list)):
        return json.dumps(value, separators=(",", ":"), default=str)
    return str(value)


def placeholders(template: str) -> list[str]:
    """Return the field paths referenced by ``template``, in order."""
    return [name.strip() for name in _PLACEHOLDER.findall(template)]


def expand(
    template: str,
    record: Any,
    indexes: Sequence[int] | None = None,
) -> str:
    """Replace every ``${path}`` in ``template`` with its resolved value.

    Args:
        template: Text containing zero or more ``${field.path}`` placeholders.
        record:   The record the placeholders are resolved against.
        indexes:  Index context of the value being rendered.

    Returns:
        The expanded text.
    """

    def _substitute(match: re.Match[str]) -> str:
        return stringify(resolve_unique(record, match.group(1).strip(), indexes))

    return _PLACEHOLDER.sub(_substitute, template)


def expand_all(
    templates: Iterable[str],
    record: Any,
    indexes: Sequence[int] | None = None,
) -> list[str]:
    """Expand a list of templates (command arguments) with one index context."""
    return [expand(template, record, indexes) for template in templates]
