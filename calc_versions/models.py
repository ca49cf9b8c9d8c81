"""Data models for calc-versions.

These Pydantic models represent the records exchanged between the version
oracle, the aggregator, the manifest mutator and the output formatter.
Field names are snake_case; the oracle's camelCase JSON keys are accepted
as aliases and used again when the records are serialized as outputs.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ProjectVersion(BaseModel):
    """Version information computed for a single project manifest.

    Instances are built once per run from the oracle's JSON response and
    are never mutated afterwards.

    Attributes:
        name: Project name reported by the oracle. Not guaranteed to be
              unique across manifests.
        path: Path to the project manifest. Unique within a run.
        version: Computed version, normally MAJOR.MINOR.PATCH[-PRERELEASE].
        version_changed: Whether the version differs from the last
              recorded/tagged version.
        change_reason: Explanation for the change, when there is one.
        is_test_project: Test projects are dropped from results unless
              explicitly included.
        dependencies: Dependency identifiers, informational only.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")

    name: str = Field(alias="project")
    path: str
    version: str
    version_changed: bool = Field(default=False, alias="versionChanged")
    change_reason: str | None = Field(default=None, alias="changeReason")
    commit_sha: str | None = Field(default=None, alias="commitSha")
    commit_date: str | None = Field(default=None, alias="commitDate")
    commit_message: str | None = Field(default=None, alias="commitMessage")
    branch_type: str | None = Field(default=None, alias="branchType")
    branch_name: str | None = Field(default=None, alias="branchName")
    is_test_project: bool = Field(default=False, alias="isTestProject")
    is_packable: bool = Field(default=True, alias="isPackable")
    dependencies: list[str] = Field(default_factory=list)

    def to_output(self) -> dict:
        """Serialize with the oracle's JSON keys, omitting unset fields."""
        return self.model_dump(by_alias=True, exclude_none=True)


class AggregateResult(BaseModel):
    """Cross-project view of one run.

    Attributes:
        projects: All records after test-project filtering, in discovery order.
        changed_projects: Sub-sequence of ``projects`` with a changed version.
        has_changes: True when ``changed_projects`` is non-empty.
        summary: Deterministic markdown summary of the above.
        filtered_test_projects: How many test projects were dropped. Kept for
              logging only, not part of the serialized result.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    projects: list[ProjectVersion] = Field(default_factory=list)
    changed_projects: list[ProjectVersion] = Field(
        default_factory=list, alias="changedProjects"
    )
    has_changes: bool = Field(default=False, alias="hasChanges")
    summary: str = ""
    filtered_test_projects: int = Field(default=0, exclude=True)

    def to_output(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


class QueryOptions(BaseModel):
    """Options forwarded to the version oracle for every manifest.

    Attributes:
        repository_path: Root of the git repository.
        prerelease_type: none, alpha, beta, rc (passed through as-is).
        tag_prefix: Prefix of version tags, e.g. "v".
        force_version: Version to force for every project.
        dependencies: Extra paths whose changes count as project changes.
        config_file: Oracle configuration file (mr-version.yml).
        dry_run: Ask the oracle not to make any changes.
    """

    model_config = ConfigDict(frozen=True)

    repository_path: str = "."
    prerelease_type: str = "none"
    tag_prefix: str = "v"
    force_version: str | None = None
    dependencies: list[str] = Field(default_factory=list)
    config_file: str | None = None
    dry_run: bool = False


class VersionParts(BaseModel):
    """A version string split into its components.

    Components are kept as strings so that rejoining them reproduces the
    original text exactly.
    """

    model_config = ConfigDict(frozen=True)

    major: str
    minor: str
    patch: str
    prerelease: str = ""

    @property
    def core(self) -> str:
        """The MAJOR.MINOR.PATCH part, without any prerelease suffix."""
        return f"{self.major}.{self.minor}.{self.patch}"

    def __str__(self) -> str:
        return f"{self.core}-{self.prerelease}" if self.prerelease else self.core


class UpdateReport(BaseModel):
    """Outcome of updating manifests for a batch of projects.

    Attributes:
        updated: Projects whose manifest was rewritten.
        props_written: Projects that received a generated props file.
        failed: Projects that were skipped because of an error.
    """

    updated: list[str] = Field(default_factory=list)
    props_written: list[str] = Field(default_factory=list)
    failed: list[str] = Field(default_factory=list)
