"""Qualified-name resolution for syntax-tree nodes."""

from __future__ import annotations

from typing import Any

NAMESPACE_SEPARATOR = "."


def _join_parts(parts: Any, separator: str) -> str:
    fqn = ""
    for part in parts or ():
        fqn += f"{part}{separator}"
    return fqn


def get_fqn(node: Any, separator: str = NAMESPACE_SEPARATOR) -> str:
    """Derive the canonical qualified name of a node.

    Resolution order:
    - ``namespaced_name`` set: join its parts.
    - node has a ``name`` field: the first part of that name only.
    - otherwise the node itself is a multi-part path: join its parts.

    Never raises; malformed nodes yield an empty or partial string.

    Args:
        node: Declaration node or Name node.
        separator: Namespace separator to join parts with.

    Returns:
        The qualified name without a trailing separator.
    """
    namespaced_name = getattr(node, "namespaced_name", None)
    if namespaced_name is None:
        if hasattr(node, "name"):
            fqn = _first_name_part(node.name)
        else:
            fqn = _join_parts(getattr(node, "parts", None), separator)
    else:
        fqn = _join_parts(getattr(namespaced_name, "parts", None), separator)
    return fqn.rstrip(separator) if separator else fqn


def _first_name_part(name: Any) -> str:
    parts = getattr(name, "parts", None)
    if parts:
        return str(parts[0])
    short_name = getattr(name, "name", name)
    return short_name if isinstance(short_name, str) else ""
