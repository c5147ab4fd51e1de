from __future__ import annotations

import subprocess
from pathlib import Path
from typing import List, Optional, Sequence

from .contracts import CommandRunner
from .errors import CommandFailedError
from .models import CommandResult

# Exit status a POSIX shell reports for a command it cannot find.
COMMAND_NOT_FOUND = 127


def format_command(cmd: Sequence[str]) -> str:
    return " ".join(str(c) for c in cmd)


class SubprocessRunner(CommandRunner):
    """CommandRunner backed by subprocess.run.

    With capture=False the child inherits stdout/stderr so long build output
    streams straight into the job log.
    """

    def __init__(self, *, cwd: Optional[Path] = None, echo: bool = True):
        self.cwd = cwd
        self.echo = echo

    def run(
        self,
        command: str,
        args: Sequence[str] = (),
        *,
        check: bool = True,
        capture: bool = True,
        cwd: Optional[Path] = None,
    ) -> CommandResult:
        cmd: List[str] = [str(command)] + [str(a) for a in args]
        use_cwd = cwd if cwd is not None else self.cwd
        if self.echo:
            print(f"[command] {format_command(cmd)}", flush=True)

        try:
            proc = subprocess.run(
                cmd,
                check=False,
                text=True,
                capture_output=capture,
                cwd=str(use_cwd) if use_cwd is not None else None,
            )
        except FileNotFoundError as e:
            result = CommandResult(command=cmd, exit_code=COMMAND_NOT_FOUND, stderr=str(e))
            if check:
                raise CommandFailedError(f"Command not found: {cmd[0]}", result) from e
            return result

        result = CommandResult(
            command=cmd,
            exit_code=int(proc.returncode),
            stdout=proc.stdout or "",
            stderr=proc.stderr or "",
        )
        if check and not result.ok:
            raise CommandFailedError(
                f"Command failed rc={result.exit_code}: {format_command(cmd)}: {result.stderr.strip()}",
                result,
            )
        return result
