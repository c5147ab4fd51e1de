from __future__ import annotations

from .models import ArtifactDescriptor, ExtensionIdentity, PlatformProfile


def package_filename(identity: ExtensionIdentity, profile: PlatformProfile, release_tag: str) -> str:
    """Canonical PIE binary asset name.

    php_<name>-<tag>_php<major.minor>-<arch>-<os>-<libc><debug><zts>.zip
    """
    return (
        f"php_{identity.name}-{release_tag}"
        f"_php{profile.php_version}"
        f"-{profile.architecture}-{profile.operating_system}-{profile.libc_flavour}"
        f"{profile.debug_suffix}{profile.zts_suffix}.zip"
    )


def describe_artifact(identity: ExtensionIdentity, profile: PlatformProfile, release_tag: str) -> ArtifactDescriptor:
    return ArtifactDescriptor(
        release_tag=release_tag,
        shared_object_filename=identity.shared_object_filename,
        package_filename=package_filename(identity, profile, release_tag),
    )
