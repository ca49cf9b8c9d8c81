"""CLI entry point for calc-versions."""

from __future__ import annotations

from pathlib import Path

import click

from calc_versions.config import load_settings
from calc_versions.errors import CalcVersionsError
from calc_versions.locate import find_project_files
from calc_versions.pipeline import run_calculate
from calc_versions.shell import fatal


@click.group()
@click.version_option(package_name="calc-versions")
def cli() -> None:
    """Monorepo version calculator — asks mr-version about every project."""


@cli.command()
@click.option("--projects", help="Glob or comma-separated list of project files.")
@click.option("--repository-path", help="Path to the git repository root.")
@click.option("--prerelease-type", help="Prerelease type: none, alpha, beta, rc.")
@click.option("--tag-prefix", help="Prefix of version tags.")
@click.option("--force-version", help="Force this version for every project.")
@click.option("--dependencies", help="Comma-separated dependency paths to track.")
@click.option(
    "--output-format",
    help="Format of the job summary block: json, yaml or text (others fall back to json).",
)
@click.option("--config-file", help="mr-version configuration file.")
@click.option("--oracle-command", help="Version oracle executable.")
@click.option("--max-workers", type=click.IntRange(min=1), help="Parallel oracle calls.")
@click.option(
    "--fail-on-no-changes/--no-fail-on-no-changes",
    default=None,
    help="Fail when no project files or no version changes are found.",
)
@click.option(
    "--update-project-properties/--no-update-project-properties",
    default=None,
    help="Write version properties into project files.",
)
@click.option(
    "--write-mrversion-props/--no-write-mrversion-props",
    default=None,
    help="Write MrVersion.props next to every project file.",
)
@click.option(
    "--dry-run/--no-dry-run",
    default=None,
    help="Show what would be done without changing files.",
)
@click.option(
    "--output-version-information/--no-output-version-information",
    default=None,
    help="Add the results to the job summary.",
)
@click.option(
    "--include-test-projects/--no-include-test-projects",
    default=None,
    help="Keep test projects in the results.",
)
@click.option(
    "--settings",
    "settings_file",
    type=click.Path(exists=True, dir_okay=False),
    help="TOML file with a [tool.calc-versions] table.",
)
def run(settings_file: str | None, **options: object) -> None:
    """Calculate versions for all matching projects (usually called from CI)."""
    try:
        settings = load_settings(settings_file=settings_file, overrides=options)
        run_calculate(settings)
    except CalcVersionsError as exc:
        fatal(f"Failed to calculate versions: {exc}")


@cli.command()
@click.argument("pattern", default="**/*.csproj")
@click.option(
    "--repository-path",
    type=click.Path(exists=True, file_okay=False),
    default=".",
    show_default=True,
    help="Directory the pattern is resolved against.",
)
def locate(pattern: str, repository_path: str) -> None:
    """List the project files a run would version."""
    root = Path(repository_path).resolve()
    for manifest in find_project_files(pattern, root):
        path = Path(manifest)
        click.echo(path.relative_to(root) if path.is_relative_to(root) else path)
