"""Shared test fixtures."""

from __future__ import annotations

import os
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from calc_versions.models import ProjectVersion

CSPROJ = """\
<Project Sdk="Microsoft.NET.Sdk">
  <PropertyGroup>
    <TargetFramework>net8.0</TargetFramework>
    <Version>1.0.0</Version>
    <VersionMajor>1</VersionMajor>
    <VersionMinor>0</VersionMinor>
    <VersionPatch>0</VersionPatch>
    <VersionSuffix>alpha</VersionSuffix>
  </PropertyGroup>
  <ItemGroup>
    <PackageReference Include="Newtonsoft.Json" Version="13.0.3" />
  </ItemGroup>
</Project>
"""


@pytest.fixture(autouse=True)
def clean_actions_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the runner's own GitHub Actions environment out of the tests."""
    for key in list(os.environ):
        if key.startswith("INPUT_") or key in (
            "GITHUB_ACTIONS",
            "GITHUB_OUTPUT",
            "GITHUB_STEP_SUMMARY",
        ):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def make_project() -> Callable[..., ProjectVersion]:
    """Factory for ProjectVersion records with sensible defaults."""

    def _make(name: str = "App", **fields: Any) -> ProjectVersion:
        fields.setdefault("path", f"/repo/src/{name}/{name}.csproj")
        fields.setdefault("version", "1.0.0")
        return ProjectVersion(name=name, **fields)

    return _make


@pytest.fixture
def tmp_csproj(tmp_path: Path) -> Path:
    """Create a temporary project file with every version property."""
    project_dir = tmp_path / "src" / "App"
    project_dir.mkdir(parents=True)
    csproj = project_dir / "App.csproj"
    csproj.write_text(CSPROJ)
    return csproj


@pytest.fixture
def github_files(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> tuple[Path, Path]:
    """Point GITHUB_OUTPUT and GITHUB_STEP_SUMMARY at temp files."""
    output = tmp_path / "github_output.txt"
    summary = tmp_path / "step_summary.md"
    monkeypatch.setenv("GITHUB_OUTPUT", str(output))
    monkeypatch.setenv("GITHUB_STEP_SUMMARY", str(summary))
    return output, summary


def _read_outputs(path: Path) -> dict[str, str]:
    """Parse a GITHUB_OUTPUT file, including heredoc entries."""
    outputs: dict[str, str] = {}
    lines = path.read_text().splitlines()
    i = 0
    while i < len(lines):
        line = lines[i]
        if "<<" in line and "=" not in line.split("<<", 1)[0]:
            name, delimiter = line.split("<<", 1)
            body: list[str] = []
            i += 1
            while lines[i] != delimiter:
                body.append(lines[i])
                i += 1
            outputs[name] = "\n".join(body)
        else:
            name, value = line.split("=", 1)
            outputs[name] = value
        i += 1
    return outputs


@pytest.fixture
def read_outputs() -> Callable[[Path], dict[str, str]]:
    """Parser for GITHUB_OUTPUT files."""
    return _read_outputs
