"""Writing computed versions back into MSBuild project files.

Two independent features:

- update_project_file rewrites the recognized version properties that
  already exist in a project file. It never adds properties, leaves every
  other byte alone and skips the write when nothing changed.
- write_props_file regenerates MrVersion.props next to the project file
  from a fixed template.

Problems with one project are reported as warnings and never stop the
rest of the batch.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from pathlib import Path
from xml.sax.saxutils import escape

from .errors import CalcVersionsError, ManifestWriteError, VersionPatternMismatch
from .models import ProjectVersion, UpdateReport, VersionParts
from .shell import info, warn
from .versions import parse_version

PROPS_FILENAME = "MrVersion.props"

VERSION_PROPERTIES = (
    "Version",
    "VersionMajor",
    "VersionMinor",
    "VersionPatch",
    "VersionSuffix",
)

# <Name attr="..."> text </Name>; the text itself may not contain markup
_PROPERTY_PATTERNS = {
    name: re.compile(rf"(<{name}(?:\s[^>]*)?>)[^<]*(</{name}\s*>)")
    for name in VERSION_PROPERTIES
}


def property_values(parts: VersionParts) -> dict[str, str]:
    """Values for each version property; VersionSuffix only with a prerelease."""
    values = {
        "Version": str(parts),
        "VersionMajor": parts.major,
        "VersionMinor": parts.minor,
        "VersionPatch": parts.patch,
    }
    if parts.prerelease:
        values["VersionSuffix"] = parts.prerelease
    return values


def apply_version_properties(content: str, parts: VersionParts) -> tuple[str, bool]:
    """Replace the text of every recognized version property in content.

    Returns:
        Tuple of (new content, whether anything changed).
    """
    updated = content
    for name, value in property_values(parts).items():
        replacement = escape(value)
        updated = _PROPERTY_PATTERNS[name].sub(
            lambda m, text=replacement: f"{m.group(1)}{text}{m.group(2)}", updated
        )
    return updated, updated != content


def update_project_file(project: ProjectVersion) -> bool:
    """Embed the computed version into the project's manifest.

    The file is read and written as raw UTF-8 so line endings and any BOM
    survive untouched. An unparseable version is reported and skipped.

    Returns:
        True if the file was rewritten.

    Raises:
        ManifestWriteError: If the file can't be read or written.
    """
    try:
        parts = parse_version(project.version, project.name)
    except VersionPatternMismatch as exc:
        warn(str(exc))
        return False

    path = Path(project.path)
    try:
        content = path.read_bytes().decode("utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ManifestWriteError(project.path, exc) from exc

    updated, changed = apply_version_properties(content, parts)
    if not changed:
        return False

    try:
        path.write_bytes(updated.encode("utf-8"))
    except OSError as exc:
        raise ManifestWriteError(project.path, exc) from exc
    info(f"Updated version properties in {project.name}")
    return True


def render_props(project: ProjectVersion, parts: VersionParts) -> str:
    """Render the MrVersion.props body for a project."""
    numeric = f"{parts.core}.0"
    informational = project.version
    if project.commit_sha:
        informational += f"+{project.commit_sha[:7]}"
    suffix = (
        f"\n    <VersionSuffix>{escape(parts.prerelease)}</VersionSuffix>"
        if parts.prerelease
        else ""
    )
    return f"""<Project>
  <!-- Generated by Mister.Version -->
  <PropertyGroup>
    <Version>{escape(str(parts))}</Version>
    <VersionMajor>{parts.major}</VersionMajor>
    <VersionMinor>{parts.minor}</VersionMinor>
    <VersionPatch>{parts.patch}</VersionPatch>{suffix}
    <AssemblyVersion>{numeric}</AssemblyVersion>
    <FileVersion>{numeric}</FileVersion>
    <InformationalVersion>{escape(informational)}</InformationalVersion>
  </PropertyGroup>
</Project>
"""


def write_props_file(project: ProjectVersion) -> Path | None:
    """(Re)generate MrVersion.props in the project's directory.

    Returns:
        Path of the written file, or None if the version is unparseable.

    Raises:
        ManifestWriteError: If the file can't be written.
    """
    try:
        parts = parse_version(project.version, project.name)
    except VersionPatternMismatch as exc:
        warn(str(exc))
        return None

    props_path = Path(project.path).parent / PROPS_FILENAME
    try:
        props_path.write_bytes(render_props(project, parts).encode("utf-8"))
    except OSError as exc:
        raise ManifestWriteError(str(props_path), exc) from exc
    info(f"Created {PROPS_FILENAME} for {project.name}")
    return props_path


def update_projects(
    projects: Sequence[ProjectVersion], update_properties: bool, write_props: bool
) -> UpdateReport:
    """Apply the enabled manifest features to each project in turn.

    A failure for one project is reported as a warning naming the project;
    the remaining projects are still processed.
    """
    report = UpdateReport()
    for project in projects:
        try:
            if update_properties and update_project_file(project):
                report.updated.append(project.name)
            if write_props and write_props_file(project):
                report.props_written.append(project.name)
        except (CalcVersionsError, OSError, ValueError) as exc:
            warn(f"Failed to update project {project.name}: {exc}")
            report.failed.append(project.name)
    return report
