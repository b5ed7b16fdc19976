"""Loading of pre-parsed declarations from YAML or JSON documents.

The document describes each declaration the way the declaration-file parser
would hand it over: name, type annotation, metadata markers and parameters.
An optional ``reflection`` entry carries the introspection side.

Example::

    declarations:
      - kind: function
        name: array_key_first
        type: "int|string|null"
        attributes:
          - name: PhpStormStubsElementAvailable
            args: [{value: "7.3"}]
        reflection:
          type: {union: [int, string, "null"]}
"""

from __future__ import annotations

import json
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from stubsync.context import ResolverContext
from stubsync.elements import (
    DeclaredElement,
    ElementKind,
    TypedPayload,
    element_from_reflection,
    element_from_stub_node,
    mark_duplicates,
)
from stubsync.logging import get_logger
from stubsync.muted import read_muted_problems
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
    NumberLiteral,
    StringLiteral,
    UnionType,
)
from stubsync.reflection import ReflectedEntity, descriptor_from_data
from stubsync.resolver.markers import ELEMENT_AVAILABLE, LANGUAGE_LEVEL_TYPE_AWARE
from stubsync.resolver.names import get_fqn

logger = get_logger("loader")

# Short marker names resolve the way the stubs' `use` imports would resolve them
KNOWN_MARKERS = {
    LANGUAGE_LEVEL_TYPE_AWARE.last(): LANGUAGE_LEVEL_TYPE_AWARE,
    ELEMENT_AVAILABLE.last(): ELEMENT_AVAILABLE,
}


class LoaderError(Exception):
    """Raised when a declarations document is malformed."""


@dataclass
class LoadedDeclaration:
    """One declaration read from a document.

    Attributes:
        kind: Kind of declaration.
        node: Syntax-tree node for the stub side.
        file: Stub file the declaration belongs to.
        core: Whether the stub file is part of the core.
        reflection: Introspection data for the same entity, if present.
    """

    kind: ElementKind
    node: DeclarationNode
    file: str | None = None
    core: bool = False
    reflection: ReflectedEntity | None = None


def parse_type(value: Any) -> Any:
    """Turn a type written in a document into a type node.

    Strings such as ``?Foo\\Bar`` or ``int|string`` become name, nullable
    and union nodes; ``{doc: "..."}`` becomes a doc-comment type.

    Raises:
        LoaderError: If the value has an unsupported shape.
    """
    if value is None:
        return None
    if isinstance(value, dict):
        if "doc" in value:
            return DocType(str(value["doc"]))
        raise LoaderError(f"Unsupported type mapping: {value!r}")
    if not isinstance(value, str):
        raise LoaderError(f"Type must be a string or mapping, got {value!r}")

    text = value.strip()
    if "|" in text:
        return UnionType(tuple(parse_type(member) for member in text.split("|")))
    if text.startswith("?"):
        return NullableType(_parse_name(text[1:]))
    return _parse_name(text)


def _parse_name(text: str) -> Name | Identifier:
    name = Name.from_string(text)
    if len(name.parts) > 1:
        return name
    return Identifier(text.strip())


def _literal(value: Any) -> Any:
    if isinstance(value, str):
        return StringLiteral(value)
    if isinstance(value, bool):
        raise LoaderError(f"Unsupported literal value: {value!r}")
    if isinstance(value, (int, float)):
        return NumberLiteral(value)
    if isinstance(value, list):
        return ArrayLiteral(tuple(ArrayItem(_literal(v)) for v in value))
    if isinstance(value, dict):
        return ArrayLiteral(
            tuple(ArrayItem(_literal(v), key=StringLiteral(str(k))) for k, v in value.items())
        )
    raise LoaderError(f"Unsupported literal value: {value!r}")


def _parse_arg(data: Any) -> Arg:
    if isinstance(data, dict) and "value" in data:
        name = data.get("name")
        return Arg(_literal(data["value"]), Identifier(str(name)) if name else None)
    return Arg(_literal(data))


def parse_attributes(data: Any) -> list[AttributeGroup]:
    """Parse the ``attributes`` list of a declaration into marker groups."""
    if not data:
        return []
    if not isinstance(data, list):
        raise LoaderError("attributes must be a list")

    attrs: list[Attribute] = []
    for entry in data:
        if not isinstance(entry, dict) or "name" not in entry:
            raise LoaderError(f"Attribute entry needs a name: {entry!r}")
        name = Name.from_string(str(entry["name"]))
        if len(name.parts) == 1:
            name = KNOWN_MARKERS.get(name.parts[0], name)
        args = tuple(_parse_arg(a) for a in entry.get("args", []) or [])
        attrs.append(Attribute(name=name, args=args))
    return [AttributeGroup(tuple(attrs))]


def _parse_node(data: dict[str, Any], qualified: bool) -> DeclarationNode:
    raw_name = str(data.get("name", ""))
    prefix = data.get("namespace") or data.get("class")

    node = DeclarationNode(
        name=Identifier(Name.from_string(raw_name).last()) if raw_name else None,
        type=parse_type(data.get("type")),
        attr_groups=parse_attributes(data.get("attributes")),
        value=data.get("value"),
    )
    if qualified and raw_name:
        parts = Name.from_string(raw_name).parts
        if prefix:
            parts = Name.from_string(str(prefix)).parts + parts
        node.namespaced_name = Name(parts)
    if data.get("doc_type") is not None:
        node.doc_type = DocType(str(data["doc_type"]))
    if data.get("parent"):
        node.parent = Name.from_string(str(data["parent"]))
    node.interfaces = [Name.from_string(str(i)) for i in data.get("interfaces", []) or []]
    node.params = [_parse_node(p, qualified=False) for p in data.get("params", []) or []]
    return node


def parse_declaration(data: Any, separator: str = ".") -> LoadedDeclaration:
    """Parse one declaration entry.

    Raises:
        LoaderError: If the entry is malformed.
    """
    if not isinstance(data, dict):
        raise LoaderError(f"Declaration must be a mapping, got {data!r}")
    try:
        kind = ElementKind(str(data.get("kind", "")))
    except ValueError:
        raise LoaderError(f"Unknown declaration kind: {data.get('kind')!r}") from None
    if kind is ElementKind.PARAMETER:
        raise LoaderError("Parameters must be declared under their function's params")

    node = _parse_node(data, qualified=True)

    reflection = None
    if "reflection" in data:
        reflection_data = data["reflection"] or {}
        try:
            descriptor = descriptor_from_data(reflection_data.get("type"))
        except ValueError as e:
            raise LoaderError(str(e)) from e
        reflection = ReflectedEntity(
            name=get_fqn(node, separator),
            kind=kind.value,
            type=descriptor,
            value=reflection_data.get("value"),
            parent=reflection_data.get("parent"),
            interfaces=list(reflection_data.get("interfaces", []) or []),
        )

    return LoadedDeclaration(
        kind=kind,
        node=node,
        file=data.get("file"),
        core=bool(data.get("core", False)),
        reflection=reflection,
    )


def load_declarations(path: Path, separator: str = ".") -> list[LoadedDeclaration]:
    """Load a declarations document (YAML, or JSON by extension).

    Raises:
        FileNotFoundError: If the file doesn't exist.
        LoaderError: If the document is malformed.
    """
    text = path.read_text(encoding="utf-8")
    try:
        data = json.loads(text) if path.suffix == ".json" else yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise LoaderError(f"Failed to parse {path}: {e}") from e

    if not isinstance(data, dict) or not isinstance(data.get("declarations"), list):
        raise LoaderError(f"{path}: expected a mapping with a 'declarations' list")

    declarations = [parse_declaration(entry, separator) for entry in data["declarations"]]
    logger.debug("Loaded %d declarations from %s", len(declarations), path)
    return declarations


def build_elements(
    declarations: Iterable[LoadedDeclaration],
    context: ResolverContext,
    muted_data: list[Any] | dict[str, Any] | None = None,
) -> list[DeclaredElement]:
    """Resolve loaded declarations into stub elements.

    Populates every element, applies its muted problems and flags
    re-declarations.

    Raises:
        ValueError: If an entry in ``muted_data`` is malformed.
    """
    elements: list[DeclaredElement] = []
    for declaration in declarations:
        element = element_from_stub_node(declaration.node, declaration.kind, context, declaration.file)
        element.stub_belongs_to_core = declaration.core
        if muted_data is not None:
            _apply_muted_problems(element, muted_data)
        elements.append(element)

    mark_duplicates(elements)
    return elements


def _apply_muted_problems(element: DeclaredElement, muted_data: list[Any] | dict[str, Any]) -> None:
    element.muted_problems = read_muted_problems(element.name, muted_data)
    if isinstance(element.payload, TypedPayload):
        # Parameters are listed as "function(parameter)"
        for param in element.payload.parameters:
            param.muted_problems = read_muted_problems(f"{element.name}({param.name})", muted_data)


def build_reflection_elements(declarations: Iterable[LoadedDeclaration]) -> dict[str, DeclaredElement]:
    """Build reflection-side elements keyed by qualified name."""
    return {
        d.reflection.name: element_from_reflection(d.reflection)
        for d in declarations
        if d.reflection is not None
    }
