"""Schema loading with fallback to the built-in default schema.

Schema files are parsed with PyYAML's ``safe_load``: plain JSON documents are
accepted as-is, and YAML documents may carry ``#`` comments.  An unreadable or
malformed source never fails the caller; it is logged and the default schema
is returned instead.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import yaml

from json_schema_tree.schema.defaults import DEFAULT_SCHEMA
from json_schema_tree.schema.nodes import SchemaError, SchemaNode, parse_schema

__all__ = ["load_schema", "loads_schema"]

logger = logging.getLogger(__name__)


def loads_schema(text: str) -> tuple[SchemaNode, ...]:
    """Parse schema text (JSON or YAML).

    Raises:
        yaml.YAMLError: If the text is not parseable.
        SchemaError: If the parsed data is not a valid schema.
    """
    return parse_schema(yaml.safe_load(text))


def load_schema(source: str | os.PathLike[str] | None) -> tuple[SchemaNode, ...]:
    """Load a schema file, falling back to ``DEFAULT_SCHEMA``.

    Args:
        source: Path of the schema file.  ``None`` or ``""`` selects the
            default schema without touching the filesystem.

    Returns:
        The parsed root SchemaNodes.
    """
    if not source:
        return DEFAULT_SCHEMA

    path = Path(source)
    logger.debug("Reading tree schema from %s", path)
    try:
        return loads_schema(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, yaml.YAMLError, SchemaError) as exc:
        logger.warning("Failed to load schema %s: %s; using default schema", path, exc)
        return DEFAULT_SCHEMA
