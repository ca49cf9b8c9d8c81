"""Run settings and how they are assembled.

Settings are layered, later layers winning:

1. defaults declared on Settings
2. the [tool.calc-versions] table of a TOML settings file
3. GitHub Actions inputs (INPUT_* environment variables)
4. explicit CLI options

TOML keys and action inputs use the kebab-case input names
(``fail-on-no-changes``), CLI options the Settings field names.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .actions import get_inputs
from .errors import ConfigurationError
from .models import QueryOptions
from .toml import get_tool_settings, load_toml
from .versions import is_semver

TRUE_VALUES = ("true", "True", "TRUE")
FALSE_VALUES = ("false", "False", "FALSE")


class Settings(BaseModel):
    """Everything a run needs, with the action's defaults."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    projects: str = "**/*.csproj"
    repository_path: str = "."
    prerelease_type: str = "none"
    tag_prefix: str = "v"
    force_version: str | None = None
    dependencies: list[str] = Field(default_factory=list)
    output_format: str = "json"
    fail_on_no_changes: bool = False
    update_project_properties: bool = False
    write_mrversion_props: bool = False
    config_file: str | None = None
    dry_run: bool = False
    output_version_information: bool = False
    include_test_projects: bool = False
    oracle_command: str = "mr-version"
    max_workers: int = Field(default=4, ge=1)

    @field_validator("force_version")
    @classmethod
    def _check_force_version(cls, value: str | None) -> str | None:
        if value and not is_semver(value):
            raise ValueError(f"{value!r} is not a valid semantic version")
        return value or None

    @field_validator("dependencies", mode="before")
    @classmethod
    def _split_dependencies(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [d.strip() for d in value.replace("\n", ",").split(",") if d.strip()]
        return value

    @field_validator("output_format")
    @classmethod
    def _lower_format(cls, value: str) -> str:
        return value.strip().lower()

    def query_options(self) -> QueryOptions:
        """Options forwarded to the version oracle."""
        return QueryOptions(
            repository_path=self.repository_path,
            prerelease_type=self.prerelease_type,
            tag_prefix=self.tag_prefix,
            force_version=self.force_version,
            dependencies=self.dependencies,
            config_file=self.config_file,
            dry_run=self.dry_run,
        )


def input_name(field: str) -> str:
    """Settings field name → action input name (dry_run → dry-run)."""
    return field.replace("_", "-")


FIELD_BY_INPUT = {input_name(field): field for field in Settings.model_fields}
BOOL_FIELDS = {
    field for field, info in Settings.model_fields.items() if info.annotation is bool
}


def parse_bool(name: str, value: str) -> bool:
    """Parse a boolean input the way GitHub Actions toolkits do.

    Raises:
        ConfigurationError: For anything other than true/false spellings.
    """
    if value in TRUE_VALUES:
        return True
    if value in FALSE_VALUES:
        return False
    raise ConfigurationError(
        f"Input does not meet YAML 1.2 \"Core Schema\" specification: {name}\n"
        "Support boolean input list: `true | True | TRUE | false | False | FALSE`"
    )


def _from_file(path: Path) -> dict[str, Any]:
    table = get_tool_settings(load_toml(path))
    unknown = sorted(set(table) - set(FIELD_BY_INPUT))
    if unknown:
        raise ConfigurationError(
            f"Unknown settings in {path}: {', '.join(unknown)}"
        )
    return {FIELD_BY_INPUT[key]: value for key, value in table.items()}


def _from_inputs(environ: Mapping[str, str] | None) -> dict[str, Any]:
    values: dict[str, Any] = {}
    for name, raw in get_inputs(environ).items():
        field = FIELD_BY_INPUT.get(name)
        if field is None:
            continue
        values[field] = parse_bool(name, raw) if field in BOOL_FIELDS else raw
    return values


def load_settings(
    *,
    settings_file: str | Path | None = None,
    environ: Mapping[str, str] | None = None,
    overrides: Mapping[str, Any] | None = None,
    cwd: Path | None = None,
) -> Settings:
    """Assemble Settings from all layers.

    Args:
        settings_file: Explicit TOML settings file. When omitted,
            pyproject.toml in ``cwd`` is used if it exists.
        environ: Environment to read action inputs from (os.environ by default).
        overrides: Explicit values, e.g. CLI options; None values are ignored.
        cwd: Directory to look for pyproject.toml in.

    Raises:
        ConfigurationError: On unreadable files, unknown keys or invalid values.
    """
    values: dict[str, Any] = {}

    if settings_file is not None:
        path = Path(settings_file)
        if not path.is_file():
            raise ConfigurationError(f"Settings file not found: {path}")
        values.update(_from_file(path))
    else:
        pyproject = (cwd or Path.cwd()) / "pyproject.toml"
        if pyproject.is_file():
            values.update(_from_file(pyproject))

    values.update(_from_inputs(environ))
    values.update({k: v for k, v in (overrides or {}).items() if v is not None})

    try:
        return Settings.model_validate(values)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid settings: {exc}") from exc
