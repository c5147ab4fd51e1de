from __future__ import annotations

from typing import Optional

from .models import CommandResult


class ReleaseToolError(Exception):
    """Base class for errors that abort a release run."""


class ConfigError(ReleaseToolError):
    """Raised when a required input or environment setting is missing or malformed."""


class ManifestError(ReleaseToolError):
    """Base class for composer.json problems."""


class ManifestMissingError(ManifestError):
    """Raised when composer.json does not exist in the working directory."""


class ManifestInvalidError(ManifestError):
    """Raised when composer.json cannot be parsed or has the wrong shape."""


class InvalidManifestTypeError(ManifestError):
    """Raised when composer.json `type` is not a PHP extension type."""


class NameMissingError(ManifestError):
    """Raised when neither php-ext.extension-name nor name is set."""


class InvalidExtensionNameError(ManifestError):
    """Raised when the resolved extension name fails the naming grammar."""


class UnsupportedPlatformError(ReleaseToolError):
    """Base class for hosts outside the supported build matrix."""


class UnsupportedArchitectureError(UnsupportedPlatformError):
    pass


class UnsupportedOperatingSystemError(UnsupportedPlatformError):
    pass


class CommandFailedError(ReleaseToolError):
    """Raised when an external command exits non-zero."""

    def __init__(self, message: str, result: Optional[CommandResult] = None):
        super().__init__(message)
        self.result = result


class BuildError(CommandFailedError):
    """Raised when a build step fails or produces no shared object."""


class ReleaseNotFoundError(ReleaseToolError):
    """Raised when no release (draft or published) carries the requested tag."""


class GitHubApiError(ReleaseToolError):
    """Raised when the GitHub API answers with a non-success status."""

    def __init__(self, message: str, status_code: int = 0, body: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.body = body
