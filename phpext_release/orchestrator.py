from __future__ import annotations

from pathlib import Path
from typing import Optional, Tuple

from . import actions
from .build import build_extension, split_configure_flags
from .config import ActionInputs
from .contracts import CommandRunner, ReleaseClient
from .github.releases import upload_release_asset
from .host import HostInspector
from .manifest import determine_extension_identity
from .models import ArtifactDescriptor, PlatformProfile, RunResult
from .naming import describe_artifact
from .packaging import list_build_outputs, package_extension

OUTPUT_PACKAGE_PATH = "package-path"


def describe_extension(
    release_tag: str,
    *,
    work_dir: Path,
    runner: CommandRunner,
    inspector: Optional[HostInspector] = None,
) -> Tuple[ArtifactDescriptor, PlatformProfile]:
    """Resolve identity and platform facts into the artifact names. Builds nothing."""
    insp = inspector if inspector is not None else HostInspector(runner)
    php_binary = insp.php_binary()
    identity = determine_extension_identity(work_dir)
    profile = insp.profile(php_binary)
    return describe_artifact(identity, profile, release_tag), profile


def run_release(
    inputs: ActionInputs,
    *,
    work_dir: Path,
    runner: CommandRunner,
    client: ReleaseClient,
    inspector: Optional[HostInspector] = None,
) -> RunResult:
    """Describe, build, package, upload, then publish the package-path output.

    Steps run strictly in order; the first error propagates and nothing
    after it runs.
    """
    work_dir = Path(work_dir)
    descriptor, _ = describe_extension(inputs.release_tag, work_dir=work_dir, runner=runner, inspector=inspector)
    actions.info(f"Package filename: {descriptor.package_filename}")

    build_extension(runner, work_dir, split_configure_flags(inputs.configure_flags))

    list_build_outputs(runner, work_dir)
    package = package_extension(work_dir, descriptor)

    release = upload_release_asset(client, descriptor.release_tag, package.path)

    outputs = {OUTPUT_PACKAGE_PATH: descriptor.package_filename}
    for k, v in outputs.items():
        actions.set_output(k, v)

    return RunResult(descriptor=descriptor, package=package, release=release, outputs=outputs)
