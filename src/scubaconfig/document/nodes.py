"""Typed accessors over a parsed YAML/JSON document.

A raw document is whatever ``yaml.safe_load`` hands back: nested dicts,
lists and scalars. These helpers check each node's shape as it is read
and raise DocumentStructureError with the dotted path of the node.
"""

from datetime import date, datetime
from typing import Any

from scubaconfig.errors import DocumentStructureError

Scalar = str | int | float | bool | date | None


def child_path(prefix: str, key: Any) -> str:
    """Build a dotted path for a child node."""
    return f"{prefix}.{key}" if prefix else str(key)


def expect_mapping(node: Any, path: str = "") -> dict[str, Any]:
    """Return ``node`` as a mapping with string keys.

    A null node (an empty YAML section) reads as an empty mapping.
    """
    if node is None:
        return {}
    if not isinstance(node, dict):
        raise DocumentStructureError(path, "mapping", node)
    return {str(key): value for key, value in node.items()}


def expect_sequence(node: Any, path: str = "") -> list[Any]:
    """Return ``node`` as a list. Null reads as an empty list."""
    if node is None:
        return []
    if not isinstance(node, list):
        raise DocumentStructureError(path, "sequence", node)
    return list(node)


def expect_scalar(node: Any, path: str = "") -> Scalar:
    """Return ``node`` unchanged if it is a scalar."""
    if isinstance(node, dict | list):
        raise DocumentStructureError(path, "scalar", node)
    return node


def expect_string(node: Any, path: str = "") -> str:
    """Return a scalar node as text.

    YAML happily turns ``2025-01-01`` or ``12`` into non-strings, so
    scalars are converted back rather than rejected.
    """
    value = expect_scalar(node, path)
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, datetime | date):
        return value.isoformat()
    return str(value)


def expect_string_list(node: Any, path: str = "") -> list[str]:
    """Return a sequence of scalars as a list of strings.

    A lone scalar is read as a one-element list.
    """
    if node is None:
        return []
    if not isinstance(node, list):
        return [expect_string(node, path)]
    return [expect_string(item, f"{path}[{idx}]") for idx, item in enumerate(node)]


def lookup(mapping: dict[str, Any], key: str) -> tuple[str, Any] | None:
    """Find ``key`` in ``mapping`` ignoring case.

    Returns the key as spelled in the document together with its value.
    """
    if key in mapping:
        return key, mapping[key]
    folded = key.casefold()
    for candidate, value in mapping.items():
        if candidate.casefold() == folded:
            return candidate, value
    return None
