"""Introspection-side type descriptors and entities.

The runtime's reflection dump describes each entity's type either as a single
named type with a nullability flag or as a union of named types.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union


@dataclass(frozen=True)
class NamedTypeDescriptor:
    name: str
    allows_null: bool = False


@dataclass(frozen=True)
class UnionTypeDescriptor:
    types: tuple[NamedTypeDescriptor, ...]


TypeDescriptor = Union[NamedTypeDescriptor, UnionTypeDescriptor]


@dataclass
class ReflectedEntity:
    """An entity as described by the runtime's introspection layer."""

    name: str
    kind: str
    type: TypeDescriptor | None = None
    value: Any = None
    parent: str | None = None
    interfaces: list[str] = field(default_factory=list)


def descriptor_from_data(data: Any) -> TypeDescriptor | None:
    """Build a type descriptor from reflection dump data.

    Accepts ``{"name": "int", "nullable": true}``, ``{"union": ["int", "string"]}``
    or a bare type name string.

    Args:
        data: Decoded JSON/YAML value, or None.

    Returns:
        The descriptor, or None when data is None.

    Raises:
        ValueError: If the data has an unrecognized shape.
    """
    if data is None:
        return None
    if isinstance(data, str):
        return NamedTypeDescriptor(name=data)
    if isinstance(data, dict):
        if "union" in data:
            members = data["union"]
            if not isinstance(members, list):
                raise ValueError("Reflection union type must be a list of names")
            return UnionTypeDescriptor(
                types=tuple(NamedTypeDescriptor(name=str(m)) for m in members)
            )
        if "name" in data:
            return NamedTypeDescriptor(
                name=str(data["name"]),
                allows_null=bool(data.get("nullable", False)),
            )
    raise ValueError(f"Unrecognized reflection type descriptor: {data!r}")
