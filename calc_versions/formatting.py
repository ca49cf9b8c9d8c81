"""Rendering of an aggregate result for the job summary.

All formats are pure functions of the same AggregateResult.
"""

from __future__ import annotations

import json

import yaml

from .models import AggregateResult

FORMATS = ("json", "yaml", "text")


def format_as_json(result: AggregateResult) -> str:
    return json.dumps(result.to_output(), indent=2)


def format_as_yaml(result: AggregateResult) -> str:
    """One entry per project with name, version, changed flag and reason."""
    entries = []
    for p in result.projects:
        entry: dict[str, object] = {
            "name": p.name,
            "version": p.version,
            "changed": p.version_changed,
        }
        if p.change_reason:
            entry["reason"] = p.change_reason
        entries.append(entry)
    return yaml.safe_dump(
        {"projects": entries}, sort_keys=False, default_flow_style=False
    ).rstrip("\n")


def format_as_text(result: AggregateResult) -> str:
    lines = ["Project Versions:", "================"]
    for p in result.projects:
        status = "CHANGED" if p.version_changed else "UNCHANGED"
        lines.append(f"{status} {p.name}: {p.version}")
        if p.change_reason:
            lines.append(f"    Reason: {p.change_reason}")
    return "\n".join(lines)


def format_summary(result: AggregateResult, fmt: str) -> str:
    """Render result as json, yaml or text. Unknown formats fall back to json."""
    fmt = fmt.lower()
    if fmt == "yaml":
        return format_as_yaml(result)
    if fmt == "text":
        return format_as_text(result)
    return format_as_json(result)
