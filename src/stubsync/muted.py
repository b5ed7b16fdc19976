"""Muted problems: known validation findings suppressed for some versions.

A muted-problem map is ``{problem_kind: [specifier, ...]}`` where a specifier
is either the literal ``"ALL"`` or a concrete version.
"""

from __future__ import annotations

import json
from enum import IntEnum
from pathlib import Path
from typing import Any, Union

ALL_VERSIONS = "ALL"

VersionSpecifier = Union[str, float]
MutedProblemMap = dict[int, list[VersionSpecifier]]


class StubProblemType(IntEnum):
    """Known kinds of validation problems."""

    STUB_IS_MISSED = 0
    FUNCTION_IS_DEPRECATED = 1
    WRONG_FINAL_MODIFIER = 2
    WRONG_STATIC_MODIFIER = 3
    FUNCTION_ACCESS = 4
    FUNCTION_PARAMETER_MISMATCH = 5
    WRONG_RETURN_TYPEHINT = 6
    WRONG_PARAMETER_TYPEHINT = 7
    WRONG_CONSTANT_VALUE = 8
    WRONG_PARENT = 9
    WRONG_INTERFACE = 10
    PARAMETER_NAME_MISMATCH = 11
    HAS_DUPLICATION = 12
    PARSE_ERROR = 13
    EMPTY_NAME = 14
    MISSING_TYPE = 15


def is_suppressed(problem_kind: int, muted: MutedProblemMap, current_version: float) -> bool:
    """Check whether a problem kind is muted for the current version.

    Membership is exact: ``8.1`` does not match ``8.1000001`` or ``8.0``.

    Args:
        problem_kind: Problem kind discriminant.
        muted: Muted-problem map of the element.
        current_version: Targeted runtime version.

    Returns:
        True if the problem is muted for every version or for this one.
    """
    specifiers = muted.get(int(problem_kind))
    if specifiers is None:
        return False
    if ALL_VERSIONS in specifiers:
        return True
    return any(
        not isinstance(s, str) and float(s) == float(current_version) for s in specifiers
    )


def _coerce_specifier(value: Any) -> VersionSpecifier:
    if value == ALL_VERSIONS:
        return ALL_VERSIONS
    if isinstance(value, bool):
        raise ValueError(f"Invalid version specifier: {value!r}")
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValueError(f"Invalid version specifier: {value!r}") from None


def _coerce_kind(value: Any) -> int:
    if isinstance(value, str) and value in StubProblemType.__members__:
        return int(StubProblemType[value])
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValueError(f"Invalid problem kind: {value!r}") from None


def load_muted_problems(data: dict[Any, Any]) -> MutedProblemMap:
    """Load a ``{kind: [specifier, ...]}`` mapping.

    Kinds may be ints, numeric strings (JSON object keys) or problem names.

    Raises:
        ValueError: If a kind or specifier is invalid.
    """
    muted: MutedProblemMap = {}
    for kind, specifiers in data.items():
        if not isinstance(specifiers, list):
            raise ValueError(f"Muted versions for problem {kind!r} must be a list")
        muted[_coerce_kind(kind)] = [_coerce_specifier(s) for s in specifiers]
    return muted


def read_muted_problems(element_name: str, data: list[Any] | dict[str, Any]) -> MutedProblemMap:
    """Read the muted problems recorded for one element.

    Accepts the list form::

        [{"name": "array_map", "problems": [{"type": 6, "versions": ["ALL"]}]}]

    or an object keyed by element name whose values are kind -> versions maps.

    Args:
        element_name: Qualified name of the element.
        data: Decoded muted-problems document.

    Returns:
        The element's muted-problem map (empty if none recorded).

    Raises:
        ValueError: If the element's entry is malformed.
    """
    if isinstance(data, dict):
        entry = data.get(element_name)
        return load_muted_problems(entry) if isinstance(entry, dict) else {}

    muted: MutedProblemMap = {}
    for entry in data:
        if not isinstance(entry, dict) or entry.get("name") != element_name:
            continue
        problems = entry.get("problems", [])
        if not isinstance(problems, list):
            raise ValueError(f"Muted problems for {element_name!r} must be a list")
        for problem in problems:
            if not isinstance(problem, dict):
                raise ValueError(f"Muted problem for {element_name!r} must be an object, got {problem!r}")
            kind = _coerce_kind(problem.get("type"))
            versions = problem.get("versions", [ALL_VERSIONS])
            if not isinstance(versions, list):
                raise ValueError(f"Muted versions for problem {kind!r} must be a list")
            muted.setdefault(kind, []).extend(_coerce_specifier(v) for v in versions)
    return muted


def load_muted_problems_file(path: Path) -> list[Any] | dict[str, Any]:
    """Read a muted-problems JSON document.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        json.JSONDecodeError: If the file is not valid JSON.
        ValueError: If the document is neither an array nor an object.
    """
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, (list, dict)):
        raise ValueError(f"Muted problems file must hold an array or object: {path}")
    return data
