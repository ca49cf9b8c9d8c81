"""Project manifest discovery.

Resolves the ``projects`` input (a glob, or a comma/newline separated list
of globs and paths) into the MSBuild project files to version.
"""

from __future__ import annotations

import os
import re
from pathlib import Path

# Only MSBuild project files are versioned
PROJECT_EXTENSIONS = (".csproj", ".vbproj", ".fsproj")


def split_patterns(pattern: str) -> list[str]:
    """Split a comma or newline separated input into trimmed, non-empty entries."""
    return [entry.strip() for entry in re.split(r"[,\n]", pattern) if entry.strip()]


def _expand(base: Path, entry: str) -> list[Path]:
    """Expand one glob or path relative to base.

    A matching directory stands for every file beneath it. Directories
    nested in one already expanded are skipped.
    """
    pattern = Path(os.path.normpath(entry))
    if pattern.is_absolute():
        root, rel = Path(pattern.anchor), str(pattern.relative_to(pattern.anchor))
    else:
        root, rel = base, str(pattern)
    matches = [root] if rel == "." else sorted(root.glob(rel))

    paths: list[Path] = []
    expanded: set[Path] = set()
    for match in matches:
        p = match.resolve()
        if p.is_dir():
            if p in expanded or any(parent in expanded for parent in p.parents):
                continue
            expanded.add(p)
            paths.extend(sorted(f for f in p.rglob("*") if f.is_file()))
        elif p.is_file():
            paths.append(p)
    return paths


def find_project_files(pattern: str, base_path: str | Path = ".") -> list[str]:
    """Find project manifests matching a pattern.

    Entries prefixed with ``!`` exclude matching files. The result is
    deduplicated and keeps first-seen order; each glob's matches are sorted
    so the order is stable between runs.

    Args:
        pattern: Glob (e.g. "src/**/*.csproj") or comma/newline separated list.
        base_path: Directory that relative entries are resolved against.

    Returns:
        Absolute paths of matching manifests. Empty when nothing matched.
    """
    base = Path(base_path).resolve()
    includes: list[str] = []
    excludes: list[str] = []
    for entry in split_patterns(pattern):
        if entry.startswith("!"):
            excludes.append(entry[1:].strip())
        else:
            includes.append(entry)

    # dict keeps insertion order and drops duplicates
    found: dict[Path, None] = {}
    for entry in includes:
        for p in _expand(base, entry):
            if p.suffix in PROJECT_EXTENSIONS and p.is_file():
                found.setdefault(p, None)

    excluded = {p for entry in excludes for p in _expand(base, entry)}
    return [str(p) for p in found if p not in excluded]
