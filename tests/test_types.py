"""Tests for the reflection and syntax-tree type normalizers."""

from __future__ import annotations

from stubsync.nodes import DocType, Identifier, Name, NullableType, UnionType
from stubsync.reflection import NamedTypeDescriptor, UnionTypeDescriptor
from stubsync.resolver.types import (
    parsed_type_to_list,
    reflection_type_to_list,
    type_name_from_node,
)


class TestReflectionTypeToList:
    """Tests for reflection_type_to_list."""

    def test_absent(self) -> None:
        assert reflection_type_to_list(None) == []

    def test_named(self) -> None:
        assert reflection_type_to_list(NamedTypeDescriptor("int")) == ["int"]

    def test_nullable_named(self) -> None:
        assert reflection_type_to_list(NamedTypeDescriptor("int", allows_null=True)) == ["?int"]

    def test_nullable_mixed_has_no_prefix(self) -> None:
        assert reflection_type_to_list(NamedTypeDescriptor("mixed", allows_null=True)) == ["mixed"]

    def test_union_keeps_declared_order(self) -> None:
        union = UnionTypeDescriptor(
            (NamedTypeDescriptor("string"), NamedTypeDescriptor("int"), NamedTypeDescriptor("null"))
        )
        assert reflection_type_to_list(union) == ["string", "int", "null"]

    def test_union_members_never_prefixed(self) -> None:
        union = UnionTypeDescriptor(
            (NamedTypeDescriptor("int", allows_null=True), NamedTypeDescriptor("string"))
        )
        assert reflection_type_to_list(union) == ["int", "string"]


class TestParsedTypeToList:
    """Tests for parsed_type_to_list."""

    def test_absent(self) -> None:
        assert parsed_type_to_list(None) == []

    def test_identifier(self) -> None:
        assert parsed_type_to_list(Identifier("int")) == ["int"]

    def test_qualified_name(self) -> None:
        assert parsed_type_to_list(Name(("Foo", "Bar"))) == ["Foo.Bar"]

    def test_nullable_qualified_name(self) -> None:
        assert parsed_type_to_list(NullableType(Name(("Foo", "Bar")))) == ["?Foo.Bar"]

    def test_nullable_with_custom_separator(self) -> None:
        assert parsed_type_to_list(NullableType(Name(("Foo", "Bar"))), "\\") == ["?Foo\\Bar"]

    def test_union(self) -> None:
        union = UnionType((Identifier("int"), Name(("Foo", "Bar")), Identifier("null")))
        assert parsed_type_to_list(union) == ["int", "Foo.Bar", "null"]

    def test_nested_union_flattened_in_order(self) -> None:
        union = UnionType((Identifier("int"), UnionType((Identifier("string"), Identifier("false")))))
        assert parsed_type_to_list(union) == ["int", "string", "false"]

    def test_doc_type_split_verbatim(self) -> None:
        assert parsed_type_to_list(DocType("int|string|null")) == ["int", "string", "null"]

    def test_doc_type_keeps_nullable_marker(self) -> None:
        assert parsed_type_to_list(DocType("?int")) == ["?int"]

    def test_plain_string_has_no_name(self) -> None:
        assert parsed_type_to_list("int") == [""]

    def test_doc_round_trip_is_idempotent(self) -> None:
        canonical = parsed_type_to_list(
            UnionType((Identifier("int"), NullableType(Name(("Foo", "Bar"))), Identifier("null")))
        )
        again = parsed_type_to_list(DocType("|".join(canonical)))
        assert again == canonical


class TestTypeNameFromNode:
    def test_node_without_name_or_parts(self) -> None:
        assert type_name_from_node(object()) == ""
        assert type_name_from_node(NullableType(Name(()))) == ""

    def test_identifier_preferred_over_parts(self) -> None:
        assert type_name_from_node(NullableType(Identifier("string"))) == "?string"
