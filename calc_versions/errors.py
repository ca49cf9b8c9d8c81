"""Exception hierarchy for calc-versions.

Oracle errors are fatal to a run. Pattern mismatches and write failures are
scoped to one project and get downgraded to warnings by the manifest
mutator. DiscoveryEmpty and NoChangesDetected are only raised when the
fail-on-no-changes policy is enabled.
"""

from __future__ import annotations


class CalcVersionsError(Exception):
    """Base class for all calc-versions errors."""


class ConfigurationError(CalcVersionsError):
    """Invalid settings or action inputs."""


class DiscoveryEmpty(CalcVersionsError):
    """No project manifests matched the configured pattern."""

    def __init__(self, pattern: str) -> None:
        self.pattern = pattern
        super().__init__(
            f"No project files found matching {pattern!r} "
            "and fail-on-no-changes is enabled"
        )


class NoChangesDetected(CalcVersionsError):
    """No project has a version change."""

    def __init__(self) -> None:
        super().__init__(
            "No version changes detected and fail-on-no-changes is enabled"
        )


class OracleError(CalcVersionsError):
    """The version oracle could not produce a record for a manifest."""

    def __init__(self, manifest_path: str, message: str) -> None:
        self.manifest_path = manifest_path
        super().__init__(message)


class OracleInvocationError(OracleError):
    """The oracle process could not be started or exited non-zero."""

    def __init__(self, manifest_path: str, returncode: int | None, stderr: str) -> None:
        self.returncode = returncode
        self.stderr = stderr
        detail = stderr.strip() or f"exit code {returncode}"
        super().__init__(manifest_path, f"mr-version failed for {manifest_path}: {detail}")


class OracleResponseError(OracleError):
    """The oracle's output was empty or not a valid version record."""

    def __init__(self, manifest_path: str, reason: str) -> None:
        self.reason = reason
        super().__init__(
            manifest_path,
            f"Failed to parse mr-version output for {manifest_path}: {reason}",
        )


class VersionPatternMismatch(CalcVersionsError):
    """A version string is not MAJOR.MINOR.PATCH[-PRERELEASE]."""

    def __init__(self, version: str, project: str | None = None) -> None:
        self.version = version
        self.project = project
        where = f" for {project}" if project else ""
        super().__init__(f"Cannot parse version {version}{where}")


class ManifestWriteError(CalcVersionsError):
    """Reading or writing a manifest or props file failed."""

    def __init__(self, path: str, cause: Exception) -> None:
        self.path = path
        self.cause = cause
        detail = getattr(cause, "strerror", None) or cause
        super().__init__(f"Cannot update {path}: {detail}")
