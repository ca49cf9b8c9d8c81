"""Version parsing utilities.

Splits version strings of the form MAJOR.MINOR.PATCH[-PRERELEASE] into
their components. The prerelease suffix is kept verbatim (it is not split
into identifiers), so joining the parts back always reproduces the input.
"""

from __future__ import annotations

import re

import semver

from .errors import VersionPatternMismatch
from .models import VersionParts

VERSION_PATTERN = re.compile(r"([0-9]+)\.([0-9]+)\.([0-9]+)(?:-(.+))?")


def parse_version(version_str: str, project: str | None = None) -> VersionParts:
    """Decompose a version string into major/minor/patch/prerelease.

    Examples:
        "1.2.3" → VersionParts(major="1", minor="2", patch="3")
        "2.0.0-beta.1" → VersionParts(..., prerelease="beta.1")

    Raises:
        VersionPatternMismatch: If the string does not match the pattern.
    """
    match = VERSION_PATTERN.fullmatch(version_str)
    if not match:
        raise VersionPatternMismatch(version_str, project)
    major, minor, patch, prerelease = match.groups()
    return VersionParts(
        major=major, minor=minor, patch=patch, prerelease=prerelease or ""
    )


def split_version_loose(version_str: str) -> VersionParts:
    """Best-effort split on '.' and '-' for versions that don't match the pattern.

    Missing components default to "0"; everything after the third component
    is joined with '.' and reported as the prerelease.

    Examples:
        "1.2" → 1, 2, 0
        "1.2.3-beta-1" → 1, 2, 3, "beta.1"
    """
    parts = re.split(r"[.-]", version_str)
    return VersionParts(
        major=parts[0] or "0",
        minor=parts[1] if len(parts) > 1 and parts[1] else "0",
        patch=parts[2] if len(parts) > 2 and parts[2] else "0",
        prerelease=".".join(parts[3:]),
    )


def is_semver(version_str: str) -> bool:
    """Return True if the string is a valid semantic version (semver 2.0.0)."""
    return semver.Version.is_valid(version_str)
