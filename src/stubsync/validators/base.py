"""Base validator classes and models for the stubsync validation framework.

Provides core abstractions for implementing validators that check resolved
declarations for data-quality problems.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Literal

from stubsync.context import ResolverContext
from stubsync.elements import DeclaredElement

Severity = Literal["error", "warning", "info"]


@dataclass
class ValidationIssue:
    """A single validation issue found during checking.

    Attributes:
        element: Qualified name of the element that was checked.
        check: Name of the check that identified the issue (e.g., "parse_error").
        severity: Severity level of the issue ("error", "warning", or "info").
        message: Human-readable description of the issue.
        file: Optional stub file containing the element.
        problem: Optional problem kind, used to honor muted problems.
    """

    element: str
    check: str
    severity: Severity
    message: str
    file: str | None = None
    problem: int | None = None


@dataclass
class ValidatorResult:
    """Result of a single validator run.

    Attributes:
        name: Name of the validator (e.g., "parse-errors").
        status: Overall status ("pass" or "fail").
        issues: List of validation issues found.
        elements_checked: Number of elements checked by this validator.
    """

    name: str
    status: Literal["pass", "fail"]
    issues: list[ValidationIssue]
    elements_checked: int


class BaseValidator(ABC):
    """Abstract base class for all validators.

    Attributes:
        elements: Resolved stub elements to check.
        context: Resolver context (registry and current version).
    """

    name: str = ""

    def __init__(self, elements: list[DeclaredElement], context: ResolverContext) -> None:
        """Initialize validator.

        Args:
            elements: Resolved stub elements to check.
            context: Resolver context.
        """
        self.elements = elements
        self.context = context

    @abstractmethod
    def check(self, element: DeclaredElement) -> list[ValidationIssue]:
        """Check a single element.

        Must be implemented by subclasses.

        Returns:
            Issues found for the element.
        """

    def validate(self) -> ValidatorResult:
        """Run the check over every element, dropping muted problems.

        Returns:
            ValidatorResult containing the validation outcome and any issues found.
        """
        issues: list[ValidationIssue] = []
        for element in self.elements:
            for issue in self.check(element):
                if issue.problem is not None and element.has_muted_problem(issue.problem, self.context):
                    continue
                issues.append(issue)

        has_errors = any(issue.severity == "error" for issue in issues)
        status: Literal["pass", "fail"] = "fail" if has_errors else "pass"
        return ValidatorResult(
            name=self.name,
            status=status,
            issues=issues,
            elements_checked=len(self.elements),
        )
