"""Tests for stubsync.elements module."""

from __future__ import annotations

import pytest

from stubsync.context import ResolverContext
from stubsync.elements import (
    ClassPayload,
    ConstantPayload,
    DeclaredElement,
    ElementKind,
    TypedPayload,
    element_from_reflection,
    element_from_stub_node,
    mark_duplicates,
    resolve_types,
)
from stubsync.nodes import (
    Arg,
    ArrayItem,
    ArrayLiteral,
    Attribute,
    AttributeGroup,
    DeclarationNode,
    DocType,
    Identifier,
    Name,
    NullableType,
    StringLiteral,
)
from stubsync.reflection import NamedTypeDescriptor, ReflectedEntity
from stubsync.resolver.markers import ELEMENT_AVAILABLE, LANGUAGE_LEVEL_TYPE_AWARE, MarkerShapeError
from stubsync.versions import VersionRegistry


@pytest.fixture
def context() -> ResolverContext:
    return ResolverContext(registry=VersionRegistry([7.4, 8.0, 8.1]), current_version=8.0)


def _type_aware(threshold: str, type_: str, default: str) -> Attribute:
    return Attribute(
        LANGUAGE_LEVEL_TYPE_AWARE,
        (
            Arg(ArrayLiteral((ArrayItem(StringLiteral(type_), key=StringLiteral(threshold)),))),
            Arg(StringLiteral(default), Identifier("default")),
        ),
    )


class TestElementFromStubNode:
    """Tests for element_from_stub_node."""

    def test_function(self, context: ResolverContext) -> None:
        node = DeclarationNode(
            name=Identifier("str_contains"),
            namespaced_name=Name(("str_contains",)),
            type=Identifier("bool"),
            doc_type=DocType("bool"),
            attr_groups=[
                AttributeGroup((Attribute(ELEMENT_AVAILABLE, (Arg(StringLiteral("8.0")),)),))
            ],
            params=[DeclarationNode(name=Identifier("haystack"), type=Identifier("string"))],
        )
        element = element_from_stub_node(node, ElementKind.FUNCTION, context, "standard/standard_1.php")

        assert element.name == "str_contains"
        assert element.kind is ElementKind.FUNCTION
        assert element.source_file_path == "standard/standard_1.php"
        assert element.parse_error is None
        assert element.available_range is not None
        assert element.available_range.as_dict() == {"from": 8.0, "to": 8.1}
        assert isinstance(element.payload, TypedPayload)
        assert element.payload.signature_types == ["bool"]
        assert element.payload.doc_types == ["bool"]
        assert element.payload.types_from_marker == {}
        [param] = element.payload.parameters
        assert param.name == "haystack"
        assert param.kind is ElementKind.PARAMETER
        assert isinstance(param.payload, TypedPayload)
        assert param.payload.signature_types == ["string"]

    def test_property_with_version_types(self, context: ResolverContext) -> None:
        node = DeclarationNode(
            name=Identifier("message"),
            attr_groups=[AttributeGroup((_type_aware("8.1", "string", ""),))],
        )
        element = element_from_stub_node(node, ElementKind.PROPERTY, context)
        assert isinstance(element.payload, TypedPayload)
        assert element.payload.types_from_marker == {"8.1": ["string"], "default": [""]}

    def test_constant(self, context: ResolverContext) -> None:
        node = DeclarationNode(
            name=Identifier("PHP_EOL"),
            namespaced_name=Name(("PHP_EOL",)),
            value=StringLiteral("\n"),
        )
        element = element_from_stub_node(node, ElementKind.CONSTANT, context)
        assert isinstance(element.payload, ConstantPayload)
        assert element.payload.value == "\n"

    def test_class(self, context: ResolverContext) -> None:
        node = DeclarationNode(
            name=Identifier("ArrayIterator"),
            namespaced_name=Name(("ArrayIterator",)),
            parent=None,
            interfaces=[Name(("SeekableIterator",)), Name(("Countable",))],
        )
        element = element_from_stub_node(node, ElementKind.CLASS, context)
        assert isinstance(element.payload, ClassPayload)
        assert element.payload.parent_name is None
        assert element.payload.interfaces == ["SeekableIterator", "Countable"]

    def test_marker_fault_attached_not_raised(self, context: ResolverContext) -> None:
        node = DeclarationNode(
            name=Identifier("broken"),
            attr_groups=[AttributeGroup((Attribute(ELEMENT_AVAILABLE, ()),))],
        )
        element = element_from_stub_node(node, ElementKind.FUNCTION, context)
        assert isinstance(element.parse_error, MarkerShapeError)
        assert element.available_range is None

    def test_type_marker_fault_keeps_availability(self, context: ResolverContext) -> None:
        node = DeclarationNode(
            name=Identifier("array_key_first"),
            attr_groups=[
                AttributeGroup(
                    (
                        Attribute(LANGUAGE_LEVEL_TYPE_AWARE, ()),
                        Attribute(ELEMENT_AVAILABLE, (Arg(StringLiteral("8.0")),)),
                    )
                )
            ],
        )
        element = element_from_stub_node(node, ElementKind.FUNCTION, context)

        assert isinstance(element.parse_error, MarkerShapeError)
        assert element.parse_error.marker == LANGUAGE_LEVEL_TYPE_AWARE
        assert element.available_range is not None
        assert element.available_range.as_dict() == {"from": 8.0, "to": 8.1}

    def test_first_marker_fault_recorded(self, context: ResolverContext) -> None:
        node = DeclarationNode(
            name=Identifier("broken"),
            attr_groups=[
                AttributeGroup(
                    (Attribute(LANGUAGE_LEVEL_TYPE_AWARE, ()), Attribute(ELEMENT_AVAILABLE, ()))
                )
            ],
        )
        element = element_from_stub_node(node, ElementKind.FUNCTION, context)

        assert isinstance(element.parse_error, MarkerShapeError)
        assert element.parse_error.marker == LANGUAGE_LEVEL_TYPE_AWARE
        assert element.available_range is None


class TestElementFromReflection:
    def test_typed(self) -> None:
        entity = ReflectedEntity(
            name="strpos", kind="function", type=NamedTypeDescriptor("int", allows_null=True)
        )
        element = element_from_reflection(entity)
        assert isinstance(element.payload, TypedPayload)
        assert element.payload.signature_types == ["?int"]

    def test_class(self) -> None:
        entity = ReflectedEntity(name="ArrayObject", kind="class", parent=None, interfaces=["Countable"])
        element = element_from_reflection(entity)
        assert isinstance(element.payload, ClassPayload)
        assert element.payload.interfaces == ["Countable"]


class TestResolveTypes:
    """Tests for resolve_types."""

    def test_marker_types_win(self, context: ResolverContext) -> None:
        node = DeclarationNode(
            name=Identifier("f"),
            type=NullableType(Identifier("int")),
            attr_groups=[AttributeGroup((_type_aware("8.0", "int|float", "int"),))],
        )
        element = element_from_stub_node(node, ElementKind.FUNCTION, context)
        assert resolve_types(element, context) == ["int", "float"]

        older = ResolverContext(registry=context.registry, current_version=7.4)
        assert resolve_types(element, older) == ["int"]

    def test_signature_fallback(self, context: ResolverContext) -> None:
        node = DeclarationNode(name=Identifier("f"), type=NullableType(Identifier("int")))
        element = element_from_stub_node(node, ElementKind.FUNCTION, context)
        assert resolve_types(element, context) == ["?int"]

    def test_untyped_kinds(self, context: ResolverContext) -> None:
        element = DeclaredElement(name="C", kind=ElementKind.CONSTANT, payload=ConstantPayload(1))
        assert resolve_types(element, context) == []


class TestMutedProblems:
    def test_has_muted_problem_uses_context_version(self, context: ResolverContext) -> None:
        element = DeclaredElement(
            name="f", kind=ElementKind.FUNCTION, payload=TypedPayload(), muted_problems={6: [8.0]}
        )
        assert element.has_muted_problem(6, context)
        other = ResolverContext(registry=context.registry, current_version=8.1)
        assert not element.has_muted_problem(6, other)


class TestMarkDuplicates:
    def test_flags_later_redeclarations(self) -> None:
        first = DeclaredElement(name="f", kind=ElementKind.FUNCTION, payload=TypedPayload())
        second = DeclaredElement(name="f", kind=ElementKind.FUNCTION, payload=TypedPayload())
        constant = DeclaredElement(name="f", kind=ElementKind.CONSTANT, payload=ConstantPayload())

        duplicates = mark_duplicates([first, second, constant])

        assert duplicates == [second]
        assert not first.duplicate_other_element
        assert second.duplicate_other_element
        assert not constant.duplicate_other_element
