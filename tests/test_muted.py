"""Tests for stubsync.muted module."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from stubsync.muted import (
    ALL_VERSIONS,
    StubProblemType,
    is_suppressed,
    load_muted_problems,
    load_muted_problems_file,
    read_muted_problems,
)


class TestIsSuppressed:
    """Tests for is_suppressed."""

    def test_all_suppresses_every_version(self) -> None:
        muted = {3: [ALL_VERSIONS]}
        for version in (5.3, 7.4, 8.0, 8.3):
            assert is_suppressed(3, muted, version)

    def test_exact_version_only(self) -> None:
        muted = {3: [8.1]}
        assert is_suppressed(3, muted, 8.1)
        assert not is_suppressed(3, muted, 8.1000001)
        assert not is_suppressed(3, muted, 8.0)

    def test_unknown_kind(self) -> None:
        assert not is_suppressed(4, {3: [ALL_VERSIONS]}, 8.1)

    def test_enum_kind(self) -> None:
        muted = {int(StubProblemType.WRONG_RETURN_TYPEHINT): [7.4]}
        assert is_suppressed(StubProblemType.WRONG_RETURN_TYPEHINT, muted, 7.4)


class TestLoadMutedProblems:
    """Tests for load_muted_problems."""

    def test_json_object_keys(self) -> None:
        muted = load_muted_problems(json.loads('{"3": ["ALL"], "6": [8.1, "7.4"]}'))
        assert muted == {3: ["ALL"], 6: [8.1, 7.4]}

    def test_problem_names(self) -> None:
        muted = load_muted_problems({"WRONG_RETURN_TYPEHINT": ["ALL"]})
        assert muted == {int(StubProblemType.WRONG_RETURN_TYPEHINT): ["ALL"]}

    def test_invalid_specifier(self) -> None:
        with pytest.raises(ValueError, match="Invalid version specifier"):
            load_muted_problems({"3": ["latest"]})

    def test_invalid_kind(self) -> None:
        with pytest.raises(ValueError, match="Invalid problem kind"):
            load_muted_problems({"nope": ["ALL"]})

    def test_versions_must_be_list(self) -> None:
        with pytest.raises(ValueError, match="must be a list"):
            load_muted_problems({"3": "ALL"})


class TestReadMutedProblems:
    """Tests for read_muted_problems."""

    def test_list_form_matches_by_name(self) -> None:
        data = [
            {"name": "array_map", "problems": [{"type": 6, "versions": ["ALL"]}]},
            {"name": "strlen", "problems": [{"type": 5, "versions": [7.4, 8.0]}]},
        ]
        assert read_muted_problems("strlen", data) == {5: [7.4, 8.0]}
        assert read_muted_problems("count", data) == {}

    def test_list_form_defaults_to_all_versions(self) -> None:
        data = [{"name": "strlen", "problems": [{"type": 5}]}]
        assert read_muted_problems("strlen", data) == {5: ["ALL"]}

    def test_object_form(self) -> None:
        data = {"strlen": {"5": ["8.0"]}}
        assert read_muted_problems("strlen", data) == {5: [8.0]}
        assert read_muted_problems("count", data) == {}

    @pytest.mark.parametrize(
        ("problems", "match"),
        [
            (["WRONG_RETURN_TYPEHINT"], "must be an object"),
            ({"type": 6}, "must be a list"),
            ([{"type": 6, "versions": "8.0"}], "must be a list"),
            ([{"type": 6, "versions": ["eight"]}], "Invalid version specifier"),
        ],
    )
    def test_list_form_rejects_malformed_entries(self, problems: object, match: str) -> None:
        data = [{"name": "strlen", "problems": problems}]
        with pytest.raises(ValueError, match=match):
            read_muted_problems("strlen", data)

    def test_list_form_ignores_other_elements_entries(self) -> None:
        data = [{"name": "count", "problems": ["bad"]}]
        assert read_muted_problems("strlen", data) == {}


class TestLoadMutedProblemsFile:
    def test_reads_json(self, tmp_path: Path) -> None:
        path = tmp_path / "muted.json"
        path.write_text('[{"name": "strlen", "problems": []}]')
        assert load_muted_problems_file(path) == [{"name": "strlen", "problems": []}]

    def test_rejects_scalar_document(self, tmp_path: Path) -> None:
        path = tmp_path / "muted.json"
        path.write_text("42")
        with pytest.raises(ValueError, match="array or object"):
            load_muted_problems_file(path)
