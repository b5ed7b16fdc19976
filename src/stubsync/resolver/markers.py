"""Extraction of version-conditional types and availability ranges from markers.

Two metadata markers carry version information:

- ``LanguageLevelTypeAware``: the declared type differs between language
  levels. Its first argument maps a threshold version to a type expression,
  its second argument is the default type.
- ``PhpStormStubsElementAvailable``: the declaration only exists within a
  range of language levels.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import Any, Literal

from stubsync.logging import get_logger
from stubsync.nodes import ArrayLiteral, Attribute, AttributeGroup, Name, StringLiteral
from stubsync.resolver.types import CanonicalType, split_type_expression
from stubsync.versions import VersionRegistry, format_version, parse_version

logger = get_logger("resolver.markers")

LANGUAGE_LEVEL_TYPE_AWARE = Name(("JetBrains", "PhpStorm", "Internal", "LanguageLevelTypeAware"))
ELEMENT_AVAILABLE = Name(("JetBrains", "PhpStorm", "Internal", "PhpStormStubsElementAvailable"))

DEFAULT_TYPE_KEY = "default"

_ARRAY_OF_PATTERN = re.compile(r"\w+\[]")

VersionedTypeMap = dict[str, CanonicalType]
ArgShape = Literal["pair", "array", "scalar"]


class MarkerShapeError(ValueError):
    """Raised when a metadata marker's arguments have an unexpected shape."""

    def __init__(self, marker: Name, message: str) -> None:
        self.marker = marker
        super().__init__(f"{marker.last()}: {message}")


@dataclass(frozen=True)
class VersionRange:
    """Versions in which a declaration is available.

    ``to_version`` is None when only a lower bound was declared.
    """

    from_version: float
    to_version: float | None = None

    def __post_init__(self) -> None:
        if self.to_version is not None and self.from_version > self.to_version:
            raise ValueError(
                f"Invalid version range: from {self.from_version} > to {self.to_version}"
            )

    def as_dict(self) -> dict[str, float]:
        result = {"from": self.from_version}
        if self.to_version is not None:
            result["to"] = self.to_version
        return result


def iter_markers(attr_groups: Iterable[AttributeGroup], marker: Name) -> Iterator[Attribute]:
    """Yield the attributes across all groups whose name matches ``marker``."""
    for attr_group in attr_groups:
        for attr in attr_group.attrs:
            if tuple(attr.name.parts) == marker.parts:
                yield attr


def _normalize_type_expression(expression: str) -> CanonicalType:
    return split_type_expression(_ARRAY_OF_PATTERN.sub("array", expression))


def _string_value(marker: Name, node: Any, what: str) -> str:
    if not isinstance(node, StringLiteral):
        raise MarkerShapeError(marker, f"{what} must be a string literal, got {node!r}")
    return node.value


def find_types_from_marker(
    attr_groups: Iterable[AttributeGroup],
    registry: VersionRegistry,
) -> VersionedTypeMap:
    """Build the version -> types map from a ``LanguageLevelTypeAware`` marker.

    Each ``threshold => type`` pair assigns its types to every registry
    version at or above the threshold, in the order the pairs are written, so
    a later pair overwrites earlier ones for the versions they share. The
    default argument is stored last under its own argument name.

    Args:
        attr_groups: Marker groups attached to the declaration.
        registry: Known versions.

    Returns:
        Map keyed by one-decimal version strings plus the default key. Empty
        when the declaration carries no such marker.

    Raises:
        MarkerShapeError: If the marker's arguments are malformed.
    """
    attr = next(iter_markers(attr_groups, LANGUAGE_LEVEL_TYPE_AWARE), None)
    if attr is None:
        return {}

    marker = LANGUAGE_LEVEL_TYPE_AWARE
    if len(attr.args) < 2:
        raise MarkerShapeError(marker, "expected a version map and a default type")
    version_types = attr.args[0].value
    if not isinstance(version_types, ArrayLiteral):
        raise MarkerShapeError(marker, "first argument must be an array literal")

    types: VersionedTypeMap = {}
    previous_threshold: float | None = None
    for item in version_types.items:
        threshold_text = _string_value(marker, item.key, "version threshold")
        try:
            first_version_with_type = parse_version(threshold_text)
        except ValueError as e:
            raise MarkerShapeError(marker, str(e)) from e
        if previous_threshold is not None and first_version_with_type < previous_threshold:
            logger.warning(
                "%s thresholds are not in ascending order (%s after %s)",
                marker.last(),
                format_version(first_version_with_type),
                format_version(previous_threshold),
            )
        previous_threshold = first_version_with_type

        item_types = _normalize_type_expression(_string_value(marker, item.value, "type"))
        for version in registry.versions_from(first_version_with_type):
            types[format_version(version)] = list(item_types)

    default_arg = attr.args[1]
    default_key = default_arg.name.name if default_arg.name is not None else DEFAULT_TYPE_KEY
    types[default_key] = _normalize_type_expression(
        _string_value(marker, default_arg.value, "default type")
    )
    return types


def types_for_version(types: VersionedTypeMap, version: float) -> CanonicalType | None:
    """Look up the types for ``version``, falling back to the default entry."""
    found = types.get(format_version(version))
    if found is None:
        found = types.get(DEFAULT_TYPE_KEY)
    return found


def _classify_args(attr: Attribute) -> ArgShape:
    if len(attr.args) == 2:
        return "pair"
    if len(attr.args) == 1:
        if isinstance(attr.args[0].value, ArrayLiteral):
            return "array"
        return "scalar"
    raise MarkerShapeError(ELEMENT_AVAILABLE, f"expected 1 or 2 arguments, got {len(attr.args)}")


def _version_value(node: Any) -> float:
    raw = getattr(node, "value", node)
    try:
        return parse_version(raw)
    except ValueError as e:
        raise MarkerShapeError(ELEMENT_AVAILABLE, str(e)) from e


def find_available_range(
    attr_groups: Iterable[AttributeGroup],
    registry: VersionRegistry,
) -> VersionRange | None:
    """Build the availability range from a ``PhpStormStubsElementAvailable`` marker.

    Payload shapes:
    - ``pair``: ``from`` and ``to`` both named.
    - ``array``: ``['7.4']``, lower bound only; no upper bound is recorded.
    - ``scalar``: unnamed or ``from`` gives ``[value, latest]``; any other
      name gives ``[first, value]``.

    Args:
        attr_groups: Marker groups attached to the declaration.
        registry: Known versions, for the open ends of scalar ranges.

    Returns:
        The range, or None when no marker is present.

    Raises:
        MarkerShapeError: If the marker's arguments are malformed.
    """
    attr = next(iter_markers(attr_groups, ELEMENT_AVAILABLE), None)
    if attr is None:
        return None

    shape = _classify_args(attr)
    if shape == "pair":
        bounds: dict[str, float] = {}
        for arg in attr.args:
            if arg.name is None or arg.name.name not in ("from", "to"):
                raise MarkerShapeError(ELEMENT_AVAILABLE, "both arguments must be named 'from' and 'to'")
            bounds[arg.name.name] = _version_value(arg.value)
        if set(bounds) != {"from", "to"}:
            raise MarkerShapeError(ELEMENT_AVAILABLE, "expected one 'from' and one 'to' argument")
        return _build_range(bounds["from"], bounds["to"])

    arg = attr.args[0]
    if shape == "array":
        items = arg.value.items
        if not items or not isinstance(items[0].value, StringLiteral):
            raise MarkerShapeError(ELEMENT_AVAILABLE, "array argument must start with a string literal")
        return _build_range(_version_value(items[0].value), None)

    value = _version_value(arg.value)
    if arg.name is None or arg.name.name == "from":
        return _build_range(value, registry.latest())
    return _build_range(registry.first(), value)


def _build_range(from_version: float, to_version: float | None) -> VersionRange:
    try:
        return VersionRange(from_version, to_version)
    except ValueError as e:
        raise MarkerShapeError(ELEMENT_AVAILABLE, str(e)) from e
