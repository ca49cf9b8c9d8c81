"""TOML settings file reading.

Settings live in a ``[tool.calc-versions]`` table, either in the repository's
pyproject.toml or in a dedicated file passed with ``--settings``. Uses tomlkit
so the same parser handles both.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import tomlkit
from tomlkit.exceptions import ParseError

from .errors import ConfigurationError

TOOL_TABLE = "calc-versions"


def load_toml(path: Path) -> tomlkit.TOMLDocument:
    """Load and parse a TOML file.

    Raises:
        ConfigurationError: If the file can't be read or isn't valid TOML.
    """
    try:
        return tomlkit.parse(path.read_text(encoding="utf-8"))
    except (OSError, ParseError) as exc:
        raise ConfigurationError(f"Cannot read settings from {path}: {exc}") from exc


def get_tool_settings(doc: tomlkit.TOMLDocument) -> dict[str, Any]:
    """Extract the [tool.calc-versions] table as plain Python values.

    Returns an empty dict when the table is absent.
    """
    table = doc.get("tool", {}).get(TOOL_TABLE, {})
    # unwrap() turns tomlkit items into builtin str/bool/list values
    return dict(table.unwrap()) if hasattr(table, "unwrap") else dict(table)
