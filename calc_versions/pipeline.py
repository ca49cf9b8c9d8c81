"""Version calculation run: locate → query → aggregate → output → update.

This module orchestrates one calc-versions run:
1. Locate the project manifests matching the configured pattern
2. Ask the version oracle for each manifest's version (in parallel)
3. Aggregate the records into the cross-project view
4. Apply the fail-on-no-changes policy
5. Publish step outputs (project lists, version map, headline version)
6. Optionally write versions back into the project files
7. Optionally add the formatted result to the job summary

Oracle failures abort the run. Problems updating a single project file
are only reported as warnings.
"""

from __future__ import annotations

import json

from .actions import append_step_summary, set_output
from .aggregate import analyze_results, create_version_map, version_outputs
from .config import Settings
from .errors import DiscoveryEmpty, NoChangesDetected
from .formatting import format_summary
from .locate import find_project_files
from .manifest import update_projects
from .models import AggregateResult, ProjectVersion
from .oracle import MrVersionOracle, VersionOracle, query_all
from .shell import info, step, warn


def discover_projects(settings: Settings) -> list[str]:
    """Find the manifests to version.

    Raises:
        DiscoveryEmpty: If nothing matched and fail_on_no_changes is set.
    """
    step("Discovering project files")
    manifests = find_project_files(settings.projects, settings.repository_path)
    info(f"Found {len(manifests)} project files")
    if not settings.include_test_projects:
        info("Test projects will be excluded from results")

    if not manifests:
        if settings.fail_on_no_changes:
            raise DiscoveryEmpty(settings.projects)
        warn("No project files found matching the pattern")
    return manifests


def calculate_versions(
    manifests: list[str], settings: Settings, oracle: VersionOracle | None = None
) -> list[ProjectVersion]:
    """Query the oracle for every manifest, returning records in manifest order."""
    step("Calculating project versions")
    records = query_all(
        manifests,
        settings.query_options(),
        oracle or MrVersionOracle(settings.oracle_command),
        max_workers=settings.max_workers,
    )
    for r in records:
        marker = " (changed)" if r.version_changed else ""
        info(f"{r.name} {r.version}{marker}")
    return records


def publish_outputs(result: AggregateResult) -> None:
    """Expose the aggregate result as step outputs."""
    set_output("projects", json.dumps([p.to_output() for p in result.projects]))
    set_output(
        "changed-projects", json.dumps([p.to_output() for p in result.changed_projects])
    )
    set_output("has-changes", "true" if result.has_changes else "false")
    set_output("summary", result.summary)
    set_output("version-map", json.dumps(create_version_map(result.projects)))
    for name, value in version_outputs(result).items():
        set_output(name, value)


def write_job_summary(result: AggregateResult, output_format: str) -> None:
    """Add the formatted result to the job summary as a fenced code block."""
    fmt = output_format if output_format in ("yaml", "text") else "json"
    body = format_summary(result, fmt)
    append_step_summary(
        f"## Version Calculation Results\n\n```{fmt}\n{body}\n```\n"
    )


def run_calculate(
    settings: Settings, oracle: VersionOracle | None = None
) -> AggregateResult:
    """Execute a full version calculation run.

    Args:
        settings: Run settings.
        oracle: Oracle to query; defaults to the mr-version CLI.

    Returns:
        The aggregate result.

    Raises:
        DiscoveryEmpty: No manifests and fail_on_no_changes is set.
        NoChangesDetected: No version changes and fail_on_no_changes is set.
        OracleError: The oracle failed for some manifest.
    """
    manifests = discover_projects(settings)
    records = calculate_versions(manifests, settings, oracle)

    result = analyze_results(records, settings.include_test_projects)
    if settings.fail_on_no_changes and not result.has_changes:
        raise NoChangesDetected()

    step("Publishing outputs")
    publish_outputs(result)

    if settings.update_project_properties or settings.write_mrversion_props:
        step("Updating project files")
        if settings.dry_run:
            info("[DRY RUN] Would update project properties")
        else:
            report = update_projects(
                result.projects,
                settings.update_project_properties,
                settings.write_mrversion_props,
            )
            if report.failed:
                warn(f"{len(report.failed)} project(s) could not be updated")

    if settings.output_version_information:
        write_job_summary(result, settings.output_format)

    print(
        f"\nAnalyzed {len(records)} projects, "
        f"{len(result.changed_projects)} with changes"
    )
    return result
