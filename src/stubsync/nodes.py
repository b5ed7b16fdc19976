"""Syntax-tree node shapes consumed by the resolver.

The declaration-file parser produces these nodes; stubsync only reads them.
Field names follow the parser's vocabulary (``parts``, ``namespaced_name``,
``attr_groups``) so resolver code can duck-type over them.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Union

_NAME_SPLIT_PATTERN = re.compile(r"[\\.]")


@dataclass(frozen=True)
class Name:
    """A possibly qualified name, stored as its parts."""

    parts: tuple[str, ...]

    @classmethod
    def from_string(cls, text: str) -> Name:
        """Build a name from ``Foo\\Bar`` or ``Foo.Bar`` text."""
        return cls(tuple(p for p in _NAME_SPLIT_PATTERN.split(text.strip()) if p))

    def to_string(self, separator: str = ".") -> str:
        return separator.join(self.parts)

    def last(self) -> str:
        return self.parts[-1] if self.parts else ""


@dataclass(frozen=True)
class Identifier:
    """A single-segment name such as a builtin type (``int``) or member name."""

    name: str


@dataclass(frozen=True)
class NullableType:
    """``?T`` wrapper around a name or identifier."""

    type: Name | Identifier


@dataclass(frozen=True)
class UnionType:
    """``A|B|...`` union of type nodes, in declaration order."""

    types: tuple[Any, ...]


@dataclass(frozen=True)
class DocType:
    """A type taken from a doc comment, kept in its textual form."""

    text: str

    def __str__(self) -> str:
        return self.text


@dataclass(frozen=True)
class StringLiteral:
    value: str


@dataclass(frozen=True)
class NumberLiteral:
    value: int | float


@dataclass(frozen=True)
class ArrayItem:
    """One ``key => value`` (or bare ``value``) entry of an array literal."""

    value: Any
    key: Any = None


@dataclass(frozen=True)
class ArrayLiteral:
    items: tuple[ArrayItem, ...] = ()


@dataclass(frozen=True)
class Arg:
    """A marker argument, optionally named (``from: '7.0'``)."""

    value: Any
    name: Identifier | None = None


@dataclass(frozen=True)
class Attribute:
    """A metadata marker attached to a declaration."""

    name: Name
    args: tuple[Arg, ...] = ()


@dataclass(frozen=True)
class AttributeGroup:
    attrs: tuple[Attribute, ...] = ()


TypeNode = Union[Name, Identifier, NullableType, UnionType, DocType, str, None]


@dataclass
class DeclarationNode:
    """A parsed declaration: class, function, method, property, constant or parameter.

    Attributes:
        name: Short name of the declaration (Identifier) or its Name.
        namespaced_name: Fully resolved name, when the parser provides one.
        type: Signature type annotation (return type for functions).
        doc_type: Type described by the doc comment, if any.
        attr_groups: Metadata markers attached to the declaration.
        value: Constant value, for constants.
        parent: Parent class name, for classes.
        interfaces: Implemented interfaces, for classes.
        params: Parameter nodes, for functions and methods.
    """

    name: Name | Identifier | None = None
    namespaced_name: Name | None = None
    type: TypeNode = None
    doc_type: DocType | None = None
    attr_groups: list[AttributeGroup] = field(default_factory=list)
    value: Any = None
    parent: Name | None = None
    interfaces: list[Name] = field(default_factory=list)
    params: list[DeclarationNode] = field(default_factory=list)
