"""Validation runner for orchestrating all validators.

Provides a unified interface to run validators over resolved elements and
aggregate results. Supports parallel execution and selective validator runs.
"""

from __future__ import annotations

import concurrent.futures
from dataclasses import dataclass
from typing import Literal

from stubsync.context import ResolverContext
from stubsync.elements import DeclaredElement
from stubsync.validators.base import BaseValidator, ValidationIssue, ValidatorResult
from stubsync.validators.declarations import (
    DuplicateValidator,
    NameValidator,
    ParseErrorValidator,
    TypeValidator,
)


@dataclass
class AggregatedResult:
    """Aggregated results from running multiple validators.

    Attributes:
        status: Overall status ("pass" if all validators pass, "fail" otherwise).
        validators_run: Number of validators executed.
        total_issues: Total number of issues across all validators.
        errors: Number of error-severity issues.
        warnings: Number of warning-severity issues.
        infos: Number of info-severity issues.
        results: Individual results from each validator.
        all_issues: Flattened list of all issues from all validators.
    """

    status: Literal["pass", "fail"]
    validators_run: int
    total_issues: int
    errors: int
    warnings: int
    infos: int
    results: list[ValidatorResult]
    all_issues: list[ValidationIssue]


class ValidationRunner:
    """Orchestrates running validators over a batch of elements.

    Validators only read the elements and the context, so they can run on
    separate threads without locking.
    """

    # Available validator classes
    VALIDATORS: dict[str, type[BaseValidator]] = {
        "parse-errors": ParseErrorValidator,
        "names": NameValidator,
        "types": TypeValidator,
        "duplicates": DuplicateValidator,
    }

    DEFAULT_VALIDATORS = ["parse-errors", "names", "types", "duplicates"]

    def __init__(
        self,
        elements: list[DeclaredElement],
        context: ResolverContext,
        parallel: bool = True,
    ) -> None:
        """Initialize validation runner.

        Args:
            elements: Resolved stub elements.
            context: Resolver context.
            parallel: Whether to run validators in parallel.
        """
        self.elements = elements
        self.context = context
        self.parallel = parallel

    def run_all(self) -> AggregatedResult:
        """Run all default validators."""
        return self.run_validators(self.DEFAULT_VALIDATORS.copy())

    def run_validators(self, validator_names: list[str]) -> AggregatedResult:
        """Run specific validators by name; unknown names are ignored.

        Args:
            validator_names: List of validator names to run.

        Returns:
            AggregatedResult with combined outcomes.
        """
        valid_names = [name for name in validator_names if name in self.VALIDATORS]

        if not valid_names:
            return self._aggregate_results([])

        if self.parallel and len(valid_names) > 1:
            results = self._run_parallel(valid_names)
        else:
            results = self._run_sequential(valid_names)

        return self._aggregate_results(results)

    def run_single(self, validator_name: str) -> ValidatorResult | None:
        """Run a single validator by name.

        Returns:
            ValidatorResult, or None if validator not found.
        """
        if validator_name not in self.VALIDATORS:
            return None
        return self._create_validator(validator_name).validate()

    def _create_validator(self, name: str) -> BaseValidator:
        validator_class = self.VALIDATORS[name]
        return validator_class(self.elements, self.context)

    @staticmethod
    def _failed_result(name: str, message: str) -> ValidatorResult:
        return ValidatorResult(
            name=name,
            status="fail",
            issues=[
                ValidationIssue(
                    element="",
                    check="validator_error",
                    severity="error",
                    message=message,
                )
            ],
            elements_checked=0,
        )

    def _run_sequential(self, validator_names: list[str]) -> list[ValidatorResult]:
        results: list[ValidatorResult] = []

        for name in validator_names:
            try:
                results.append(self._create_validator(name).validate())
            except Exception as e:
                results.append(self._failed_result(name, f"Validator failed: {e!s}"))

        return results

    def _run_parallel(self, validator_names: list[str]) -> list[ValidatorResult]:
        """Run validators in parallel using ThreadPoolExecutor.

        Results come back in the order validators were requested.
        """
        results: dict[str, ValidatorResult] = {}

        with concurrent.futures.ThreadPoolExecutor(max_workers=len(validator_names)) as executor:
            future_to_name: dict[concurrent.futures.Future[ValidatorResult], str] = {}
            for name in validator_names:
                try:
                    validator = self._create_validator(name)
                    future_to_name[executor.submit(validator.validate)] = name
                except Exception as e:
                    results[name] = self._failed_result(name, f"Failed to create validator: {e!s}")

            for future in concurrent.futures.as_completed(future_to_name):
                name = future_to_name[future]
                try:
                    results[name] = future.result()
                except Exception as e:
                    results[name] = self._failed_result(name, f"Validator failed: {e!s}")

        return [results[name] for name in validator_names if name in results]

    def _aggregate_results(self, results: list[ValidatorResult]) -> AggregatedResult:
        all_issues: list[ValidationIssue] = []
        errors = 0
        warnings = 0
        infos = 0

        for result in results:
            all_issues.extend(result.issues)

        for issue in all_issues:
            if issue.severity == "error":
                errors += 1
            elif issue.severity == "warning":
                warnings += 1
            else:
                infos += 1

        has_failures = any(result.status == "fail" for result in results)
        status: Literal["pass", "fail"] = "fail" if has_failures else "pass"

        return AggregatedResult(
            status=status,
            validators_run=len(results),
            total_issues=len(all_issues),
            errors=errors,
            warnings=warnings,
            infos=infos,
            results=results,
            all_issues=all_issues,
        )
