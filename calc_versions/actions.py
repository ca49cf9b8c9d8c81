"""GitHub Actions plumbing: step outputs, job summary and action inputs."""

from __future__ import annotations

import os
import uuid
from collections.abc import Mapping


def _append(path: str, text: str) -> None:
    with open(path, "a", encoding="utf-8") as fh:
        fh.write(text)


def set_output(name: str, value: str) -> None:
    """Expose a step output.

    Writes to the file named by $GITHUB_OUTPUT; multi-line values use the
    heredoc form. Outside of Actions the output is printed instead.
    """
    output_path = os.environ.get("GITHUB_OUTPUT")
    if not output_path:
        print(f"{name}={value}")
        return

    if "\n" in value:
        delimiter = f"ghadelimiter_{uuid.uuid4()}"
        _append(output_path, f"{name}<<{delimiter}\n{value}\n{delimiter}\n")
    else:
        _append(output_path, f"{name}={value}\n")


def append_step_summary(markdown: str) -> None:
    """Add markdown to the job summary ($GITHUB_STEP_SUMMARY), or print it."""
    summary_path = os.environ.get("GITHUB_STEP_SUMMARY")
    if not summary_path:
        print(markdown)
        return
    _append(summary_path, markdown.rstrip("\n") + "\n")


def get_inputs(environ: Mapping[str, str] | None = None) -> dict[str, str]:
    """Collect action inputs from INPUT_* environment variables.

    The runner upper-cases input names and keeps dashes, so
    ``fail-on-no-changes`` arrives as ``INPUT_FAIL-ON-NO-CHANGES``. Keys are
    returned lower-cased and values stripped; empty inputs are dropped.
    """
    env = os.environ if environ is None else environ
    inputs: dict[str, str] = {}
    for key, value in env.items():
        if key.startswith("INPUT_") and value.strip():
            inputs[key[len("INPUT_"):].lower().replace("_", "-")] = value.strip()
    return inputs
