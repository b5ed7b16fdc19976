"""Validation framework for resolved stub declarations.

Provides validators for checking resolved elements for data-quality
problems before they reach the comparison pipeline.
"""

from __future__ import annotations

from stubsync.validators.base import (
    BaseValidator,
    Severity,
    ValidationIssue,
    ValidatorResult,
)
from stubsync.validators.declarations import (
    DuplicateValidator,
    NameValidator,
    ParseErrorValidator,
    TypeValidator,
)
from stubsync.validators.runner import AggregatedResult, ValidationRunner

__all__ = [
    # Base types
    "BaseValidator",
    "Severity",
    "ValidationIssue",
    "ValidatorResult",
    # Validators
    "DuplicateValidator",
    "NameValidator",
    "ParseErrorValidator",
    "TypeValidator",
    # Runner
    "AggregatedResult",
    "ValidationRunner",
]
