"""Minimal GitHub REST client for release lookups."""

from __future__ import annotations

import json
from typing import Any, Protocol
from urllib.request import Request, urlopen

from release_tooling.config import github_token

GITHUB_API_URL = "https://api.github.com"


class ReleaseSource(Protocol):
    def get_latest_release(self, owner: str, repo: str) -> dict[str, Any]: ...


class GitHubClient:
    """Latest-release lookups against the GitHub API. No retries; HTTP errors propagate."""

    def __init__(
        self,
        token: str | None = None,
        api_url: str = GITHUB_API_URL,
        timeout: float = 10,
    ) -> None:
        self.token = token
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout

    @classmethod
    def from_env(cls) -> GitHubClient:
        """Client authenticated with GH_TOKEN or GITHUB_TOKEN (anonymous when unset)."""
        return cls(token=github_token())

    def _headers(self) -> dict[str, str]:
        headers = {
            "Accept": "application/vnd.github.v3+json",
            "User-Agent": "release-tooling",
        }
        if self.token:
            headers["Authorization"] = f"token {self.token}"
        return headers

    def get_latest_release(self, owner: str, repo: str) -> dict[str, Any]:
        """GET /repos/{owner}/{repo}/releases/latest. Raises HTTPError (404 when no release)."""
        url = f"{self.api_url}/repos/{owner}/{repo}/releases/latest"
        req = Request(url, headers=self._headers())
        with urlopen(req, timeout=self.timeout) as response:
            return json.loads(response.read().decode())
