"""GitHub Actions glue: log lines, annotations and step outputs."""
from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Dict, Optional

LOG_PREFIX = "[phpext-release]"


def _escape_data(value: str) -> str:
    # Workflow command payloads must not contain raw newlines.
    return str(value).replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def info(message: str) -> None:
    print(f"{LOG_PREFIX} {message}", flush=True)


def warning(message: str) -> None:
    print(f"::warning::{_escape_data(message)}", flush=True)


def error(message: str) -> None:
    print(f"::error::{_escape_data(message)}", file=sys.stderr, flush=True)


def set_output(name: str, value: str, *, env: Optional[Dict[str, str]] = None) -> None:
    """Publish a step output.

    Appends `name=value` to the file named by GITHUB_OUTPUT. Outside Actions
    the value is only logged.
    """
    env_map = env if env is not None else os.environ
    output_path = str(env_map.get("GITHUB_OUTPUT", "") or "").strip()
    if not output_path:
        info(f"output {name}={value}")
        return

    if "\n" in str(value):
        delimiter = f"ghadelimiter_{name}"
        line = f"{name}<<{delimiter}\n{value}\n{delimiter}\n"
    else:
        line = f"{name}={value}\n"
    with Path(output_path).open("a", encoding="utf-8", newline="\n") as f:
        f.write(line)
