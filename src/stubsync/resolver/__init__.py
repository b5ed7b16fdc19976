"""Resolvers turning parsed and introspected metadata into canonical values."""

from __future__ import annotations

from stubsync.resolver.markers import (
    DEFAULT_TYPE_KEY,
    ELEMENT_AVAILABLE,
    LANGUAGE_LEVEL_TYPE_AWARE,
    MarkerShapeError,
    VersionedTypeMap,
    VersionRange,
    find_available_range,
    find_types_from_marker,
    types_for_version,
)
from stubsync.resolver.names import NAMESPACE_SEPARATOR, get_fqn
from stubsync.resolver.types import (
    CanonicalType,
    parsed_type_to_list,
    reflection_type_to_list,
    split_type_expression,
    type_name_from_node,
)

__all__ = [
    # Names
    "NAMESPACE_SEPARATOR",
    "get_fqn",
    # Types
    "CanonicalType",
    "parsed_type_to_list",
    "reflection_type_to_list",
    "split_type_expression",
    "type_name_from_node",
    # Markers
    "DEFAULT_TYPE_KEY",
    "ELEMENT_AVAILABLE",
    "LANGUAGE_LEVEL_TYPE_AWARE",
    "MarkerShapeError",
    "VersionRange",
    "VersionedTypeMap",
    "find_available_range",
    "find_types_from_marker",
    "types_for_version",
]
