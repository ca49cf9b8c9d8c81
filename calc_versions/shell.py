"""Shell and console utilities.

Provides a thin wrapper around subprocess for running external tools with
captured output, plus console helpers for step headers, progress lines and
warnings.
"""

from __future__ import annotations

import os
import subprocess
import sys


def capture(*args: str, cwd: str | None = None) -> subprocess.CompletedProcess[str]:
    """Run a command and capture its output as text.

    Never raises on a non-zero exit; callers inspect ``returncode`` and
    ``stderr`` themselves so they can attribute the failure.

    Args:
        *args: Command and arguments (e.g., "mr-version", "version", ...).
        cwd: Working directory for the command.

    Raises:
        FileNotFoundError: If the executable does not exist.
    """
    return subprocess.run(args, capture_output=True, text=True, check=False, cwd=cwd)


def step(msg: str) -> None:
    """Print a visually distinct step header.

    Used to separate the phases of a run in terminal output.
    """
    print(f"\n{'─' * 60}\n{msg}\n{'─' * 60}")


def info(msg: str) -> None:
    """Print an indented progress line."""
    print(f"  {msg}")


def warn(msg: str) -> None:
    """Report a recoverable problem.

    Inside GitHub Actions the message is emitted as a ``::warning::``
    workflow command so it shows up as an annotation on the run.
    """
    if os.environ.get("GITHUB_ACTIONS") == "true":
        print(f"::warning::{msg}")
    else:
        print(f"Warning: {msg}", file=sys.stderr)


def fatal(msg: str) -> None:
    """Print an error message and exit with code 1.

    Use for unrecoverable errors that should halt the run.
    """
    print(f"ERROR: {msg}", file=sys.stderr)
    sys.exit(1)
