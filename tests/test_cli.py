"""Tests for calc_versions.cli."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from click.testing import CliRunner

from calc_versions.cli import cli
from calc_versions.errors import NoChangesDetected, OracleInvocationError


@pytest.fixture
def runner(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> CliRunner:
    monkeypatch.chdir(tmp_path)
    return CliRunner()


class TestRun:
    @patch("calc_versions.cli.run_calculate")
    def test_defaults(self, mock_run: MagicMock, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["run"])

        assert result.exit_code == 0, result.output
        settings = mock_run.call_args[0][0]
        assert settings.projects == "**/*.csproj"
        assert settings.fail_on_no_changes is False

    @patch("calc_versions.cli.run_calculate")
    def test_options_map_to_settings(self, mock_run: MagicMock, runner: CliRunner) -> None:
        result = runner.invoke(
            cli,
            [
                "run",
                "--projects",
                "src/**/*.fsproj",
                "--prerelease-type",
                "beta",
                "--dependencies",
                "shared,build",
                "--output-format",
                "YAML",
                "--max-workers",
                "2",
                "--fail-on-no-changes",
                "--update-project-properties",
                "--dry-run",
            ],
        )

        assert result.exit_code == 0, result.output
        settings = mock_run.call_args[0][0]
        assert settings.projects == "src/**/*.fsproj"
        assert settings.prerelease_type == "beta"
        assert settings.dependencies == ["shared", "build"]
        assert settings.output_format == "yaml"
        assert settings.max_workers == 2
        assert settings.fail_on_no_changes is True
        assert settings.update_project_properties is True
        assert settings.dry_run is True
        assert settings.write_mrversion_props is False

    @patch("calc_versions.cli.run_calculate")
    def test_cli_flag_overrides_action_input(
        self, mock_run: MagicMock, runner: CliRunner, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("INPUT_DRY-RUN", "true")
        monkeypatch.setenv("INPUT_TAG-PREFIX", "rel-")

        result = runner.invoke(cli, ["run", "--no-dry-run"])

        assert result.exit_code == 0, result.output
        settings = mock_run.call_args[0][0]
        assert settings.dry_run is False
        assert settings.tag_prefix == "rel-"

    @patch("calc_versions.cli.run_calculate")
    def test_settings_file(
        self, mock_run: MagicMock, runner: CliRunner, tmp_path: Path
    ) -> None:
        path = tmp_path / "versions.toml"
        path.write_text('[tool.calc-versions]\nprojects = "apps/**/*.csproj"\n')

        result = runner.invoke(cli, ["run", "--settings", str(path)])

        assert result.exit_code == 0, result.output
        assert mock_run.call_args[0][0].projects == "apps/**/*.csproj"

    @patch("calc_versions.cli.run_calculate")
    def test_unknown_output_format_passes_through(
        self, mock_run: MagicMock, runner: CliRunner
    ) -> None:
        result = runner.invoke(cli, ["run", "--output-format", "XML"])

        assert result.exit_code == 0, result.output
        assert mock_run.call_args[0][0].output_format == "xml"

    @patch("calc_versions.cli.run_calculate")
    def test_run_error_exits_nonzero(self, mock_run: MagicMock, runner: CliRunner) -> None:
        mock_run.side_effect = OracleInvocationError("src/A.csproj", 1, "no git repo")

        result = runner.invoke(cli, ["run"])

        assert result.exit_code == 1
        assert "ERROR: Failed to calculate versions: mr-version failed for src/A.csproj" in (
            result.output
        )

    @patch("calc_versions.cli.run_calculate")
    def test_policy_error_exits_nonzero(self, mock_run: MagicMock, runner: CliRunner) -> None:
        mock_run.side_effect = NoChangesDetected()

        result = runner.invoke(cli, ["run"])

        assert result.exit_code == 1
        assert "No version changes detected" in result.output

    @patch("calc_versions.cli.run_calculate")
    def test_invalid_force_version(self, mock_run: MagicMock, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["run", "--force-version", "latest"])

        assert result.exit_code == 1
        assert "force_version" in result.output
        mock_run.assert_not_called()


class TestLocate:
    def test_lists_relative_paths(self, runner: CliRunner, tmp_path: Path) -> None:
        for rel in ("src/A/A.csproj", "src/B/B.vbproj"):
            p = tmp_path / rel
            p.parent.mkdir(parents=True)
            p.write_text("<Project />")

        result = runner.invoke(cli, ["locate", "**/*proj"])

        assert result.exit_code == 0, result.output
        assert result.output.splitlines() == [
            str(Path("src/A/A.csproj")),
            str(Path("src/B/B.vbproj")),
        ]

    def test_nothing_found(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["locate"])
        assert result.exit_code == 0
        assert result.output == ""
