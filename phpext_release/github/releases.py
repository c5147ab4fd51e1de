from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional

import requests

from .. import actions
from ..contracts import ReleaseClient
from ..errors import GitHubApiError, ReleaseNotFoundError
from ..models import ReleaseRecord

DEFAULT_API_URL = "https://api.github.com"
DEFAULT_UPLOADS_URL = "https://uploads.github.com"

PER_PAGE = 100


def _github_api_headers(token: str) -> Dict[str, str]:
    return {
        "Authorization": f"Bearer {token}",
        "Accept": "application/vnd.github+json",
        "X-GitHub-Api-Version": "2022-11-28",
        "User-Agent": "phpext-release",
    }


def _uploads_base(api_url: str) -> str:
    # GitHub Enterprise serves uploads from the same host under /api/uploads.
    base = str(api_url).rstrip("/")
    if base == DEFAULT_API_URL:
        return DEFAULT_UPLOADS_URL
    if base.endswith("/api/v3"):
        return base[: -len("/api/v3")] + "/api/uploads"
    return base


def _record_from_json(obj: Dict[str, Any]) -> ReleaseRecord:
    return ReleaseRecord(
        id=int(obj.get("id") or 0),
        tag=str(obj.get("tag_name") or ""),
        name=str(obj.get("name") or ""),
        draft=bool(obj.get("draft")),
        upload_url=str(obj.get("upload_url") or ""),
    )


def _raise_for_status(r: requests.Response, what: str, ok: tuple) -> None:
    if r.status_code in ok:
        return
    body = r.text[:2000]
    raise GitHubApiError(f"GitHub API error {what}: {r.status_code}: {body}", status_code=r.status_code, body=body)


class GitHubReleaseClient(ReleaseClient):
    """ReleaseClient over the GitHub REST API.

    Listing goes through every page so releases beyond the first hundred, and
    drafts (visible to tokens with push access), are found.
    """

    def __init__(
        self,
        *,
        repo: str,
        token: str,
        api_url: str = DEFAULT_API_URL,
        session: Optional[requests.Session] = None,
        timeout_s: int = 60,
        upload_timeout_s: int = 120,
    ):
        self.repo = repo
        self.token = token
        self.api_url = str(api_url or DEFAULT_API_URL).rstrip("/")
        self.session = session if session is not None else requests.Session()
        self.timeout_s = timeout_s
        self.upload_timeout_s = upload_timeout_s

    def list_releases(self) -> List[ReleaseRecord]:
        url: Optional[str] = f"{self.api_url}/repos/{self.repo}/releases"
        params: Optional[Dict[str, Any]] = {"per_page": PER_PAGE}
        out: List[ReleaseRecord] = []
        while url:
            r = self.session.get(url, headers=_github_api_headers(self.token), params=params, timeout=self.timeout_s)
            _raise_for_status(r, "listing releases", (200,))
            data = r.json()
            if not isinstance(data, list):
                raise GitHubApiError(f"GitHub API returned non-list release payload for {self.repo}", status_code=r.status_code)
            out.extend(_record_from_json(obj) for obj in data if isinstance(obj, dict))

            # The next link already carries the query string.
            url = (r.links or {}).get("next", {}).get("url")
            params = None
        return out

    def _upload_url(self, release: ReleaseRecord) -> str:
        # Example: https://uploads.github.com/repos/{owner}/{repo}/releases/{id}/assets{?name,label}
        templated = str(release.upload_url or "").split("{", 1)[0]
        if templated:
            return templated
        return f"{_uploads_base(self.api_url)}/repos/{self.repo}/releases/{release.id}/assets"

    def upload_asset(self, release: ReleaseRecord, name: str, data: bytes) -> None:
        headers = _github_api_headers(self.token)
        headers["Content-Type"] = "application/zip"
        r = self.session.post(
            self._upload_url(release),
            headers=headers,
            params={"name": name},
            data=data,
            timeout=self.upload_timeout_s,
        )
        _raise_for_status(r, f"uploading asset {name}", (200, 201))


def find_release(client: ReleaseClient, tag: str) -> ReleaseRecord:
    actions.info(f"Searching for release with tag: {tag} (including drafts)...")
    for rel in client.list_releases():
        if rel.tag == tag:
            return rel
    raise ReleaseNotFoundError(f"No release found for tag: {tag}")


def upload_release_asset(client: ReleaseClient, tag: str, asset_path: Path) -> ReleaseRecord:
    """Attach asset_path to the release tagged `tag` under its file name."""
    actions.info("Uploading release asset...")
    release = find_release(client, tag)
    actions.info(f"Found release {release.display_name} (ID: {release.id})")

    path = Path(asset_path).resolve()
    client.upload_asset(release, path.name, path.read_bytes())
    actions.info("Asset uploaded successfully!")
    return release
