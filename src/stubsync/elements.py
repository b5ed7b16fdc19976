"""Declared elements populated by the resolver.

Every element shares a common header. Kind-specific data lives in a payload:
typed declarations (functions, methods, properties, parameters) carry type
information, constants carry a value and classes carry their hierarchy.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union

from stubsync.context import ResolverContext
from stubsync.logging import get_logger
from stubsync.muted import MutedProblemMap, is_suppressed
from stubsync.nodes import DeclarationNode
from stubsync.reflection import ReflectedEntity
from stubsync.resolver.markers import (
    MarkerShapeError,
    VersionedTypeMap,
    VersionRange,
    find_available_range,
    find_types_from_marker,
    types_for_version,
)
from stubsync.resolver.names import get_fqn
from stubsync.resolver.types import CanonicalType, parsed_type_to_list, reflection_type_to_list

logger = get_logger("elements")


class ElementKind(str, Enum):
    CLASS = "class"
    FUNCTION = "function"
    METHOD = "method"
    PROPERTY = "property"
    CONSTANT = "constant"
    PARAMETER = "parameter"


TYPED_KINDS = frozenset(
    {ElementKind.FUNCTION, ElementKind.METHOD, ElementKind.PROPERTY, ElementKind.PARAMETER}
)


@dataclass
class TypedPayload:
    """Type information of a function, method, property or parameter.

    Attributes:
        signature_types: Types from the signature annotation.
        doc_types: Types from the doc comment.
        types_from_marker: Version-conditional types; empty without a marker.
        parameters: Parameter elements, for functions and methods.
    """

    signature_types: CanonicalType = field(default_factory=list)
    doc_types: CanonicalType = field(default_factory=list)
    types_from_marker: VersionedTypeMap = field(default_factory=dict)
    parameters: list[DeclaredElement] = field(default_factory=list)


@dataclass
class ConstantPayload:
    value: Any = None


@dataclass
class ClassPayload:
    parent_name: str | None = None
    interfaces: list[str] = field(default_factory=list)


Payload = Union[TypedPayload, ConstantPayload, ClassPayload]


@dataclass
class DeclaredElement:
    """A declaration under validation, from either the stubs or reflection.

    Attributes:
        name: Qualified name.
        kind: Kind of declaration.
        payload: Kind-specific data.
        parse_error: Fault raised while reading the element's markers.
        muted_problems: Problems suppressed for this element.
        available_range: Versions the element is declared for; None means all.
        source_file_path: File the declaration was read from.
        duplicate_other_element: True if this re-declares an earlier element.
        stub_belongs_to_core: True if the declaring file is part of the core.
    """

    name: str
    kind: ElementKind
    payload: Payload
    parse_error: Exception | None = None
    muted_problems: MutedProblemMap = field(default_factory=dict)
    available_range: VersionRange | None = None
    source_file_path: str | None = None
    duplicate_other_element: bool = False
    stub_belongs_to_core: bool = False

    def has_muted_problem(self, problem_kind: int, context: ResolverContext) -> bool:
        """Check whether ``problem_kind`` is muted at the context's version."""
        return is_suppressed(problem_kind, self.muted_problems, context.version)


def _new_payload(kind: ElementKind) -> Payload:
    if kind in TYPED_KINDS:
        return TypedPayload()
    if kind is ElementKind.CONSTANT:
        return ConstantPayload()
    return ClassPayload()


def element_from_stub_node(
    node: DeclarationNode,
    kind: ElementKind,
    context: ResolverContext,
    source_file_path: str | None = None,
) -> DeclaredElement:
    """Build an element from a parsed stub declaration.

    Marker faults do not propagate: they are attached to ``parse_error`` so
    a batch can continue over the remaining declarations.

    Args:
        node: Parsed declaration.
        kind: Kind of declaration.
        context: Resolver context.
        source_file_path: File the declaration was read from.

    Returns:
        The populated element.
    """
    element = DeclaredElement(
        name=get_fqn(node, context.separator),
        kind=kind,
        payload=_new_payload(kind),
        source_file_path=source_file_path,
    )
    payload = element.payload

    if isinstance(payload, TypedPayload):
        payload.signature_types = parsed_type_to_list(node.type, context.separator)
        payload.doc_types = parsed_type_to_list(node.doc_type, context.separator)
        for param in node.params:
            payload.parameters.append(
                element_from_stub_node(param, ElementKind.PARAMETER, context, source_file_path)
            )
    elif isinstance(payload, ConstantPayload):
        payload.value = getattr(node.value, "value", node.value)
    else:
        if node.parent is not None:
            payload.parent_name = get_fqn(node.parent, context.separator)
        payload.interfaces = [get_fqn(i, context.separator) for i in node.interfaces]

    if isinstance(payload, TypedPayload):
        try:
            payload.types_from_marker = find_types_from_marker(node.attr_groups, context.registry)
        except MarkerShapeError as e:
            _record_marker_error(element, e)
    try:
        element.available_range = find_available_range(node.attr_groups, context.registry)
    except MarkerShapeError as e:
        _record_marker_error(element, e)

    return element


def _record_marker_error(element: DeclaredElement, error: MarkerShapeError) -> None:
    logger.warning("Malformed marker on %s %s: %s", element.kind.value, element.name, error)
    # First fault wins
    if element.parse_error is None:
        element.parse_error = error


def element_from_reflection(entity: ReflectedEntity) -> DeclaredElement:
    """Build an element from an introspected entity."""
    kind = ElementKind(entity.kind)
    element = DeclaredElement(name=entity.name, kind=kind, payload=_new_payload(kind))
    payload = element.payload
    if isinstance(payload, TypedPayload):
        payload.signature_types = reflection_type_to_list(entity.type)
    elif isinstance(payload, ConstantPayload):
        payload.value = entity.value
    else:
        payload.parent_name = entity.parent
        payload.interfaces = list(entity.interfaces)
    return element


def resolve_types(element: DeclaredElement, context: ResolverContext) -> CanonicalType:
    """Types of a typed element at the context's version.

    Version-conditional types win when the element carries them; otherwise
    the signature types apply.
    """
    payload = element.payload
    if not isinstance(payload, TypedPayload):
        return []
    if payload.types_from_marker:
        found = types_for_version(payload.types_from_marker, context.version)
        if found is not None:
            return found
    return payload.signature_types


def mark_duplicates(elements: Iterable[DeclaredElement]) -> list[DeclaredElement]:
    """Flag elements that re-declare an earlier element of the same kind and name.

    Returns:
        The flagged elements, in input order.
    """
    seen: set[tuple[ElementKind, str]] = set()
    duplicates: list[DeclaredElement] = []
    for element in elements:
        key = (element.kind, element.name)
        if key in seen:
            element.duplicate_other_element = True
            duplicates.append(element)
        else:
            seen.add(key)
    return duplicates
