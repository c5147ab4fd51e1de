from __future__ import annotations

from pathlib import Path
from typing import List, Sequence

from . import actions
from .contracts import CommandRunner
from .errors import BuildError

MODULES_DIR = "modules"


def split_configure_flags(raw: str) -> List[str]:
    # Empty input yields no flags rather than a single empty argument.
    return str(raw or "").split()


def _step(runner: CommandRunner, work_dir: Path, command: str, args: Sequence[str]) -> None:
    res = runner.run(command, args, check=False, capture=False, cwd=work_dir)
    if not res.ok:
        raise BuildError(f"Build step {command} failed with exit code {res.exit_code}", res)


def build_extension(runner: CommandRunner, work_dir: Path, configure_flags: Sequence[str] = ()) -> None:
    """phpize, ./configure <flags>, make. The first failing step aborts."""
    actions.info("Building the extension...")
    _step(runner, work_dir, "phpize", [])
    _step(runner, work_dir, "./configure", list(configure_flags))
    _step(runner, work_dir, "make", [])


def shared_object_path(work_dir: Path, shared_object_filename: str) -> Path:
    return Path(work_dir) / MODULES_DIR / shared_object_filename
