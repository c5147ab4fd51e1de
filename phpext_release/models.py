from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple

# composer.json `type` values accepted by PIE.
EXTENSION_TYPES: Tuple[str, ...] = ("php-ext", "php-ext-zend")


@dataclass(frozen=True)
class CommandResult:
    """Outcome of one external process invocation."""

    command: List[str]
    exit_code: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.exit_code == 0


@dataclass(frozen=True)
class Manifest:
    """The parts of composer.json this tool reads."""

    type: str = ""
    name: str = ""
    extension_name: Optional[str] = None


@dataclass(frozen=True)
class ExtensionIdentity:
    name: str

    @property
    def shared_object_filename(self) -> str:
        return f"{self.name}.so"


@dataclass(frozen=True)
class PlatformProfile:
    """Host and interpreter facts that end up in the artifact filename."""

    architecture: str
    operating_system: str
    libc_flavour: str
    php_version: str
    debug_suffix: str = ""
    zts_suffix: str = ""
    php_binary: str = "php"


@dataclass(frozen=True)
class ArtifactDescriptor:
    release_tag: str
    shared_object_filename: str
    package_filename: str


@dataclass(frozen=True)
class ReleaseRecord:
    """A GitHub release as returned by the list endpoint."""

    id: int
    tag: str
    name: str = ""
    draft: bool = False
    upload_url: str = ""

    @property
    def display_name(self) -> str:
        return self.name or self.tag


@dataclass(frozen=True)
class PackageResult:
    path: Path
    sha256: str
    bytes_size: int


@dataclass(frozen=True)
class RunResult:
    descriptor: ArtifactDescriptor
    package: PackageResult
    release: ReleaseRecord
    outputs: dict = field(default_factory=dict)
