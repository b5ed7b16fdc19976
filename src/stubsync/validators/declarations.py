"""Data-quality validators for resolved declarations.

- parse-errors: malformed metadata markers
- names: empty qualified names
- types: blank members in the types resolved for the current version
- duplicates: re-declarations whose availability overlaps the original
"""

from __future__ import annotations

from stubsync.availability import available_in_versions
from stubsync.elements import DeclaredElement, TypedPayload, resolve_types
from stubsync.muted import StubProblemType
from stubsync.validators.base import BaseValidator, ValidationIssue


class ParseErrorValidator(BaseValidator):
    """Reports elements whose markers could not be read."""

    name = "parse-errors"

    def check(self, element: DeclaredElement) -> list[ValidationIssue]:
        if element.parse_error is None:
            return []
        return [
            ValidationIssue(
                element=element.name,
                check="parse_error",
                severity="error",
                message=f"Failed to read markers of {element.kind.value} {element.name}: "
                f"{element.parse_error}",
                file=element.source_file_path,
                problem=StubProblemType.PARSE_ERROR,
            )
        ]


class NameValidator(BaseValidator):
    """Reports elements that resolved to an empty name."""

    name = "names"

    def check(self, element: DeclaredElement) -> list[ValidationIssue]:
        issues: list[ValidationIssue] = []
        if not element.name:
            issues.append(
                ValidationIssue(
                    element=element.name,
                    check="empty_name",
                    severity="warning",
                    message=f"A {element.kind.value} resolved to an empty name",
                    file=element.source_file_path,
                    problem=StubProblemType.EMPTY_NAME,
                )
            )
        return issues


class TypeValidator(BaseValidator):
    """Reports typed elements whose union types contain a blank member.

    Only elements declared for the current version are checked. A lone empty
    type (``default: ''``) means untyped and is not reported. Parameter
    problems are muted by the parameter's own entry or by its function's.
    """

    name = "types"

    def check(self, element: DeclaredElement) -> list[ValidationIssue]:
        payload = element.payload
        if not isinstance(payload, TypedPayload):
            return []
        if self.context.version not in available_in_versions(element, self.context.registry):
            return []

        issues: list[ValidationIssue] = []
        types = resolve_types(element, self.context)
        if len(types) > 1 and "" in types:
            issues.append(
                ValidationIssue(
                    element=element.name,
                    check="blank_type",
                    severity="warning",
                    message=f"{element.name} has a blank type member for PHP "
                    f"{self.context.current_key}: {'|'.join(types)!r}",
                    file=element.source_file_path,
                    problem=StubProblemType.MISSING_TYPE,
                )
            )

        for param in payload.parameters:
            for issue in self.check(param):
                if issue.problem is not None and param.has_muted_problem(issue.problem, self.context):
                    continue
                issue.element = f"{element.name}({issue.element})"
                issues.append(issue)
        return issues


class DuplicateValidator(BaseValidator):
    """Reports re-declarations available in the same versions as an earlier one."""

    name = "duplicates"

    def check(self, element: DeclaredElement) -> list[ValidationIssue]:
        if not element.duplicate_other_element:
            return []

        registry = self.context.registry
        own_versions = set(available_in_versions(element, registry))
        overlap: set[float] = set()
        for other in self.elements:
            if other is element:
                # Only earlier declarations count as originals
                break
            if other.kind == element.kind and other.name == element.name:
                overlap |= own_versions & set(available_in_versions(other, registry))

        if not overlap:
            return []
        versions = ", ".join(f"{v:.1f}" for v in sorted(overlap))
        return [
            ValidationIssue(
                element=element.name,
                check="duplicate",
                severity="error",
                message=f"{element.kind.value} {element.name} is declared more than once "
                f"for PHP {versions}",
                file=element.source_file_path,
                problem=StubProblemType.HAS_DUPLICATION,
            )
        ]
