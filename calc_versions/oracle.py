"""Client for the external version oracle (the ``mr-version`` CLI).

The oracle owns the actual version calculation: git history, conventional
commits and dependency change detection. This module only builds its
argument list, runs it once per manifest and turns the JSON it prints into
a ProjectVersion.
"""

from __future__ import annotations

import json
import os
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Protocol

from pydantic import ValidationError

from .errors import OracleError, OracleInvocationError, OracleResponseError
from .models import ProjectVersion, QueryOptions
from .shell import capture

DEFAULT_COMMAND = "mr-version"


class VersionOracle(Protocol):
    """Anything that can compute the version record of one manifest."""

    def query(self, manifest_path: str, options: QueryOptions) -> ProjectVersion:
        """Compute the version record for a single project manifest.

        Raises:
            OracleError: If no valid record could be produced.
        """
        ...


def build_args(manifest_path: str, options: QueryOptions) -> list[str]:
    """Build the oracle argument list for one manifest.

    The leading arguments are always present; optional flags follow in a
    fixed order and are omitted when unset.
    """
    args = [
        "version",
        "--repo",
        options.repository_path,
        "--project",
        manifest_path,
        "--json",
    ]
    if options.prerelease_type and options.prerelease_type != "none":
        args.extend(["--prerelease-type", options.prerelease_type])
    if options.tag_prefix:
        args.extend(["--tag-prefix", options.tag_prefix])
    if options.force_version:
        args.extend(["--force-version", options.force_version])
    if options.dependencies:
        args.extend(["--dependencies", ",".join(options.dependencies)])
    if options.config_file:
        args.extend(["--config-file", options.config_file])
    if options.dry_run:
        args.append("--dry-run")
    return args


def anchor_record(record: ProjectVersion, repository_path: str) -> ProjectVersion:
    """Make a record's manifest path absolute.

    The oracle may report paths relative to the repository root, which need
    not be the working directory.
    """
    if os.path.isabs(record.path):
        return record
    path = os.path.normpath(os.path.join(os.path.abspath(repository_path), record.path))
    return record.model_copy(update={"path": path})


def parse_response(manifest_path: str, stdout: str) -> ProjectVersion:
    """Parse the oracle's stdout into a ProjectVersion.

    When the oracle omits the manifest path, the queried path is used.

    Raises:
        OracleResponseError: On empty output, invalid JSON, or a payload
            that doesn't have the record shape.
    """
    text = stdout.strip()
    if not text:
        raise OracleResponseError(manifest_path, "mr-version returned empty output")

    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise OracleResponseError(manifest_path, f"invalid JSON: {exc}") from exc
    if not isinstance(payload, dict):
        raise OracleResponseError(manifest_path, "expected a JSON object")

    payload.setdefault("path", manifest_path)
    try:
        return ProjectVersion.model_validate(payload)
    except ValidationError as exc:
        raise OracleResponseError(manifest_path, str(exc)) from exc


class MrVersionOracle:
    """Runs the ``mr-version`` executable as a subprocess, one call per manifest."""

    def __init__(self, command: str = DEFAULT_COMMAND) -> None:
        self.command = command

    def query(self, manifest_path: str, options: QueryOptions) -> ProjectVersion:
        args = build_args(manifest_path, options)
        try:
            result = capture(self.command, *args)
        except OSError as exc:
            raise OracleInvocationError(manifest_path, None, str(exc)) from exc

        if result.returncode != 0:
            raise OracleInvocationError(manifest_path, result.returncode, result.stderr)
        return parse_response(manifest_path, result.stdout)


def query_all(
    manifests: Sequence[str],
    options: QueryOptions,
    oracle: VersionOracle | None = None,
    max_workers: int = 4,
) -> list[ProjectVersion]:
    """Query the oracle for every manifest on a bounded thread pool.

    Queries are independent, so they run concurrently, but the returned
    records are always in the order of ``manifests``, with manifest paths
    made absolute against the repository root. Every query runs to
    completion; if any of them failed, the error of the earliest manifest
    is raised afterwards.

    Args:
        manifests: Manifest paths in discovery order.
        options: Options forwarded to every query.
        oracle: Oracle implementation; defaults to MrVersionOracle().
        max_workers: Upper bound on concurrent oracle processes.

    Raises:
        OracleError: If any manifest could not be queried.
    """
    if not manifests:
        return []
    oracle = oracle or MrVersionOracle()

    results: list[ProjectVersion | None] = [None] * len(manifests)
    errors: dict[int, OracleError] = {}
    with ThreadPoolExecutor(max_workers=min(max_workers, len(manifests))) as pool:
        futures = {
            pool.submit(oracle.query, manifest, options): index
            for index, manifest in enumerate(manifests)
        }
        for future in as_completed(futures):
            index = futures[future]
            try:
                results[index] = anchor_record(future.result(), options.repository_path)
            except OracleError as exc:
                errors[index] = exc

    if errors:
        raise errors[min(errors)]
    return [r for r in results if r is not None]
