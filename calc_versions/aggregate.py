"""Aggregation of per-project version records.

Turns the records returned by the oracle (in discovery order) into the
cross-project view: filtered project list, changed subset, summary and
version map. Everything here is a pure function of its inputs.
"""

from __future__ import annotations

import os
from collections.abc import Sequence

from .errors import VersionPatternMismatch
from .models import AggregateResult, ProjectVersion
from .shell import info
from .versions import parse_version, split_version_loose

# Reported when a run finds no projects at all
DEFAULT_VERSION = "0.1.0"


def analyze_results(
    records: Sequence[ProjectVersion], include_test_projects: bool
) -> AggregateResult:
    """Build the aggregate view of a run.

    Test projects are dropped unless ``include_test_projects`` is set. The
    changed subset keeps the original discovery order.
    """
    test_project_count = sum(1 for r in records if r.is_test_project)
    if include_test_projects:
        projects = list(records)
    else:
        projects = [r for r in records if not r.is_test_project]
        if test_project_count:
            info(f"Filtered out {test_project_count} test project(s)")

    changed = [p for p in projects if p.version_changed]
    return AggregateResult(
        projects=projects,
        changed_projects=changed,
        has_changes=bool(changed),
        summary=generate_summary(projects, changed),
        filtered_test_projects=0 if include_test_projects else test_project_count,
    )


def generate_summary(
    all_projects: Sequence[ProjectVersion], changed_projects: Sequence[ProjectVersion]
) -> str:
    """Render the markdown summary: counts, then changed, then unchanged projects."""
    unchanged = [p for p in all_projects if not p.version_changed]
    lines = [
        "**Version Calculation Summary**",
        f"- Total projects: {len(all_projects)}",
        f"- Projects with changes: {len(changed_projects)}",
        f"- Projects unchanged: {len(all_projects) - len(changed_projects)}",
    ]

    if changed_projects:
        lines.append("")
        lines.append("**Changed Projects:**")
        for p in changed_projects:
            reason = f" _({p.change_reason})_" if p.change_reason else ""
            lines.append(f"- **{p.name}**: {p.version}{reason}")

    if unchanged:
        lines.append("")
        lines.append("**Unchanged Projects:**")
        for p in unchanged:
            lines.append(f"- **{p.name}**: {p.version}")

    return "\n".join(lines)


def create_version_map(
    projects: Sequence[ProjectVersion], cwd: str | None = None
) -> dict[str, str]:
    """Map project names and manifest paths to versions.

    Each record contributes two keys: its name and its path relative to
    ``cwd`` (the current directory by default). When two records share a
    key, the later one wins.
    """
    base = cwd or os.getcwd()
    version_map: dict[str, str] = {}
    for p in projects:
        version_map[p.name] = p.version
        version_map[os.path.relpath(p.path, base)] = p.version
    return version_map


def version_outputs(result: AggregateResult) -> dict[str, str]:
    """Version components of the headline project.

    Uses the first changed project, else the first project. With no
    projects at all, reports DEFAULT_VERSION.
    """
    if result.changed_projects:
        version = result.changed_projects[0].version
    elif result.projects:
        version = result.projects[0].version
    else:
        version = DEFAULT_VERSION

    try:
        parts = parse_version(version)
    except VersionPatternMismatch:
        parts = split_version_loose(version)
    return {
        "version": version,
        "major": parts.major,
        "minor": parts.minor,
        "patch": parts.patch,
        "prerelease": parts.prerelease,
    }
