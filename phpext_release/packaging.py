from __future__ import annotations

import hashlib
import zipfile
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from . import actions
from .build import MODULES_DIR, shared_object_path
from .contracts import CommandRunner
from .errors import BuildError
from .models import ArtifactDescriptor, PackageResult


@dataclass(frozen=True)
class ZipEntry:
    arcname: str
    source_path: Path


def sha256_file(path: Path) -> str:
    h = hashlib.sha256()
    with Path(path).open("rb") as f:
        for chunk in iter(lambda: f.read(1024 * 1024), b""):
            h.update(chunk)
    return h.hexdigest()


def create_zip(*, zip_path: Path, entries: Iterable[ZipEntry]) -> PackageResult:
    """Create a ZIP archive from explicit entries.

    Raises:
        FileNotFoundError: if an entry source does not exist.
    """
    zip_path.parent.mkdir(parents=True, exist_ok=True)

    with zipfile.ZipFile(zip_path, mode="w", compression=zipfile.ZIP_DEFLATED) as zf:
        for e in entries:
            src = e.source_path
            if not src.exists():
                raise FileNotFoundError(f"ZIP entry source not found: {src}")
            zf.write(src, arcname=e.arcname)

    return PackageResult(path=zip_path, sha256=sha256_file(zip_path), bytes_size=int(zip_path.stat().st_size))


def list_build_outputs(runner: CommandRunner, work_dir: Path) -> None:
    # Diagnostic only; the listing ends up in the job log.
    res = runner.run("ls", ["-l", MODULES_DIR], check=False, capture=False, cwd=work_dir)
    if not res.ok:
        actions.warning(f"ls -l {MODULES_DIR} exited with {res.exit_code}")


def package_extension(work_dir: Path, descriptor: ArtifactDescriptor) -> PackageResult:
    """Zip modules/<name>.so, without its directory, into the package file."""
    so_path = shared_object_path(work_dir, descriptor.shared_object_filename)
    if not so_path.is_file():
        raise BuildError(f"Build did not produce {MODULES_DIR}/{descriptor.shared_object_filename}")

    zip_path = Path(work_dir) / descriptor.package_filename
    res = create_zip(zip_path=zip_path, entries=[ZipEntry(arcname=so_path.name, source_path=so_path)])
    actions.info(f"Packaged {res.path.name} ({res.bytes_size} bytes, sha256={res.sha256})")
    return res
