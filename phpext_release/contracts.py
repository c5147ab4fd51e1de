from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Protocol, Sequence

from .models import CommandResult, ReleaseRecord


class CommandRunner(Protocol):
    """Runs external processes.

    Implementations must not raise on a non-zero exit when `check` is False;
    the caller inspects `CommandResult.exit_code` instead.
    """

    def run(
        self,
        command: str,
        args: Sequence[str] = (),
        *,
        check: bool = True,
        capture: bool = True,
        cwd: Optional[Path] = None,
    ) -> CommandResult:
        raise NotImplementedError


class ReleaseClient(Protocol):
    """The two release-hosting calls a run needs."""

    def list_releases(self) -> List[ReleaseRecord]:
        raise NotImplementedError

    def upload_asset(self, release: ReleaseRecord, name: str, data: bytes) -> None:
        raise NotImplementedError
