from .releases import GitHubReleaseClient, find_release, upload_release_asset

__all__ = ["GitHubReleaseClient", "find_release", "upload_release_asset"]
