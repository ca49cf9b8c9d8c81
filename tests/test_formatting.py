"""Tests for calc_versions.formatting."""

from __future__ import annotations

import json
from collections.abc import Callable

import pytest
import yaml

from calc_versions.aggregate import analyze_results
from calc_versions.formatting import format_summary
from calc_versions.models import AggregateResult, ProjectVersion


@pytest.fixture
def result(make_project: Callable[..., ProjectVersion]) -> AggregateResult:
    return analyze_results(
        [
            make_project("A", version="1.2.0", version_changed=True, change_reason="feat"),
            make_project("B", version="2.0.0"),
        ],
        include_test_projects=False,
    )


class TestJson:
    def test_complete_content(self, result: AggregateResult) -> None:
        data = json.loads(format_summary(result, "json"))

        assert data["hasChanges"] is True
        assert [p["project"] for p in data["projects"]] == ["A", "B"]
        assert [p["project"] for p in data["changedProjects"]] == ["A"]
        assert data["summary"] == result.summary
        assert data["projects"][0]["changeReason"] == "feat"

    @pytest.mark.parametrize("fmt", ["xml", "", "JSON"])
    def test_unknown_falls_back_to_json(self, result: AggregateResult, fmt: str) -> None:
        assert format_summary(result, fmt) == format_summary(result, "json")


class TestYaml:
    def test_entries(self, result: AggregateResult) -> None:
        data = yaml.safe_load(format_summary(result, "yaml"))

        assert data == {
            "projects": [
                {"name": "A", "version": "1.2.0", "changed": True, "reason": "feat"},
                {"name": "B", "version": "2.0.0", "changed": False},
            ]
        }

    def test_case_insensitive(self, result: AggregateResult) -> None:
        assert format_summary(result, "YAML") == format_summary(result, "yaml")

    def test_no_projects(self) -> None:
        assert yaml.safe_load(format_summary(AggregateResult(), "yaml")) == {
            "projects": []
        }


class TestText:
    def test_lines(self, result: AggregateResult) -> None:
        assert format_summary(result, "text") == (
            "Project Versions:\n"
            "================\n"
            "CHANGED A: 1.2.0\n"
            "    Reason: feat\n"
            "UNCHANGED B: 2.0.0"
        )
