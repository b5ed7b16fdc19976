"""Normalization of type information into canonical type lists.

A canonical type is an ordered list of type-name strings. Order follows the
declaration order of unions; a leading ``?`` marks a nullable single type. An
empty list means no type information is available.
"""

from __future__ import annotations

from typing import Any

from stubsync.nodes import DocType, NullableType, UnionType
from stubsync.reflection import NamedTypeDescriptor, TypeDescriptor, UnionTypeDescriptor
from stubsync.resolver.names import NAMESPACE_SEPARATOR

CanonicalType = list[str]

MIXED_TYPE = "mixed"
NULLABLE_PREFIX = "?"
UNION_DELIMITER = "|"


def reflection_type_to_list(type_: TypeDescriptor | None) -> CanonicalType:
    """Normalize an introspection type descriptor.

    ``mixed`` already admits null, so it never gets the ``?`` prefix. Union
    members carry no prefix: the runtime lists ``null`` as an explicit member.

    Args:
        type_: Named or union descriptor, or None.

    Returns:
        Canonical type list.
    """
    reflection_types: CanonicalType = []
    if isinstance(type_, NamedTypeDescriptor):
        if type_.allows_null and type_.name != MIXED_TYPE:
            reflection_types.append(NULLABLE_PREFIX + type_.name)
        else:
            reflection_types.append(type_.name)
    elif isinstance(type_, UnionTypeDescriptor):
        for named_type in type_.types:
            reflection_types.append(named_type.name)
    return reflection_types


def parsed_type_to_list(type_: Any, separator: str = NAMESPACE_SEPARATOR) -> CanonicalType:
    """Normalize a syntax-tree type annotation.

    Args:
        type_: Name, Identifier, NullableType, UnionType, DocType, str or None.
        separator: Namespace separator used to join multi-part names.

    Returns:
        Canonical type list.
    """
    types: CanonicalType = []
    if type_ is None:
        return types
    if isinstance(type_, UnionType):
        for member in type_.types:
            types.extend(parsed_type_to_list(member, separator))
    elif isinstance(type_, DocType):
        types.extend(split_type_expression(str(type_)))
    else:
        types.append(type_name_from_node(type_, separator))
    return types


def split_type_expression(expression: str) -> CanonicalType:
    """Split a textual ``A|B|C`` type into its members, verbatim."""
    return expression.split(UNION_DELIMITER)


def type_name_from_node(type_: Any, separator: str = NAMESPACE_SEPARATOR) -> str:
    """Render a single (possibly nullable) type node as a name.

    A node with neither a short name nor parts yields ``""``.
    """
    nullable = False
    if isinstance(type_, NullableType):
        type_ = type_.type
        nullable = True

    type_name = ""
    short_name = getattr(type_, "name", None)
    if isinstance(short_name, str) and short_name:
        type_name = short_name
    else:
        parts = getattr(type_, "parts", None)
        if parts:
            type_name = separator.join(parts)

    if type_name and nullable:
        type_name = NULLABLE_PREFIX + type_name
    return type_name
