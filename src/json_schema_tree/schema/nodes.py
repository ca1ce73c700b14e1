"""SchemaNode: declarative template describing one tree level.

A schema is a tuple of root SchemaNodes; each SchemaNode names a property
path to resolve against a record plus optional rendering bindings, and owns
an ordered tuple of child SchemaNodes.  Schemas are immutable so they can be
shared by every population pass.

The mapping format (as read from a schema file) uses the original camelCase
keys::

    {
        "property": "patchSets.number",
        "label": "Patch Set ${patchSets.number}",
        "sort": true,
        "changeTracked": true,
        "children": [...]
    }
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

__all__ = ["SchemaError", "SchemaNode", "parse_schema"]


class SchemaError(ValueError):
    """Raised when schema data does not describe a valid schema tree."""


def _optional_str(data: Mapping[str, Any], *names: str) -> str | None:
    for name in names:
        value = data.get(name)
        if value is None:
            continue
        if not isinstance(value, str):
            msg = f"schema field {name!r} must be a string, got {type(value).__name__}"
            raise SchemaError(msg)
        return value
    return None


def _flag(data: Mapping[str, Any], *names: str) -> bool:
    return any(data.get(name) is True for name in names)


@dataclass(frozen=True, slots=True)
class SchemaNode:
    """One level of the declarative tree schema.

    Attributes:
        path:             Property path resolved against each record.
        label:            ``${...}`` template for the node label.  When absent
                          the label is the registered formatter's output or the
                          stringified value.
        tooltip:          ``${...}`` template for the tooltip.
        icon:             Icon name, or the name of a registered icon resolver.
        sort:             Sort the sibling list by label when a node is added.
        change_tracked:   Nodes at this level take part in changed-only views.
        has_context_menu: Presentation hint exposed as ``context_value``.
        formatter:        Name of a registered label formatter.
        command:          Command identifier bound to nodes at this level.
        arguments:        ``${...}`` templates rendered as command arguments.
        children:         Child schema levels, in display order.
    """

    path: str
    label: str | None = None
    tooltip: str | None = None
    icon: str | None = None
    sort: bool = False
    change_tracked: bool = False
    has_context_menu: bool = False
    formatter: str | None = None
    command: str | None = None
    arguments: tuple[str, ...] = ()
    children: tuple[SchemaNode, ...] = ()

    @classmethod
    def from_dict(cls, data: Any) -> SchemaNode:
        """Build a SchemaNode (and its subtree) from a schema mapping.

        Raises:
            SchemaError: If ``data`` is not a mapping, ``property`` is missing
                or not a string, or ``children``/``arguments`` are not lists.
        """
        if not isinstance(data, Mapping):
            msg = f"schema node must be a mapping, got {type(data).__name__}"
            raise SchemaError(msg)

        path = data.get("property")
        if not isinstance(path, str) or not path.strip("."):
            msg = f"schema node requires a non-empty 'property' string, got {path!r}"
            raise SchemaError(msg)

        children = data.get("children") or []
        if not isinstance(children, list):
            msg = f"'children' of {path!r} must be a list"
            raise SchemaError(msg)

        arguments = data.get("arguments") or []
        if not isinstance(arguments, list) or not all(
            isinstance(argument, str) for argument in arguments
        ):
            msg = f"'arguments' of {path!r} must be a list of strings"
            raise SchemaError(msg)

        return cls(
            path=path,
            label=_optional_str(data, "label", "format"),
            tooltip=_optional_str(data, "tooltip"),
            icon=_optional_str(data, "icon"),
            sort=_flag(data, "sort"),
            change_tracked=_flag(data, "changeTracked", "showChanged"),
            has_context_menu=_flag(data, "hasContextMenu"),
            formatter=_optional_str(data, "formatter"),
            command=_optional_str(data, "command"),
            arguments=tuple(arguments),
            children=tuple(cls.from_dict(child) for child in children),
        )

    def to_dict(self) -> dict[str, Any]:
        """Return the mapping form of this node, omitting unset fields."""
        data: dict[str, Any] = {"property": self.path}
        for key, value in (
            ("label", self.label),
            ("tooltip", self.tooltip),
            ("icon", self.icon),
            ("formatter", self.formatter),
            ("command", self.command),
        ):
            if value is not None:
                data[key] = value
        for key, flag in (
            ("sort", self.sort),
            ("changeTracked", self.change_tracked),
            ("hasContextMenu", self.has_context_menu),
        ):
            if flag:
                data[key] = True
        if self.arguments:
            data["arguments"] = list(self.arguments)
        if self.children:
            data["children"] = [child.to_dict() for child in self.children]
        return data


def parse_schema(data: Any) -> tuple[SchemaNode, ...]:
    """Parse schema data into a tuple of root SchemaNodes.

    Accepts a single node mapping or a list of node mappings.

    Raises:
        SchemaError: If the data is empty or any node is invalid.
    """
    if isinstance(data, Mapping):
        return (SchemaNode.from_dict(data),)
    if isinstance(data, list) and data:
        return tuple(SchemaNode.from_dict(node) for node in data)
    msg = f"schema must be a node mapping or a non-empty list, got {type(data).__name__}"
    raise SchemaError(msg)
