"""GitHub REST API adapter — implements the RepoFetcher port."""

from __future__ import annotations

import base64
import binascii
import logging
from typing import Any

import httpx

from snippet_seo.domain.exceptions import RepositoryFetchError
from snippet_seo.domain.value_objects import GitHubUrl

logger = logging.getLogger(__name__)

_GITHUB_API = "https://api.github.com"


class GitHubRestAdapter:
    """Concrete RepoFetcher backed by the GitHub v3 REST API."""

    def __init__(self, client: httpx.AsyncClient, token: str | None = None) -> None:
        self._client = client
        self._api_headers: dict[str, str] = {
            "Accept": "application/vnd.github.v3+json",
            "User-Agent": "snippet-seo/1.0",
        }
        if token:
            self._api_headers["Authorization"] = f"Bearer {token}"

    async def fetch_metadata(self, url: GitHubUrl) -> dict[str, Any]:
        """GET /repos/{owner}/{repo}."""
        resp = await self._api_get(f"/repos/{url.owner}/{url.repo}")
        data: dict[str, Any] = resp.json()
        return data

    async def fetch_readme(self, url: GitHubUrl) -> str:
        """GET /repos/{owner}/{repo}/readme → decoded text."""
        resp = await self._api_get(f"/repos/{url.owner}/{url.repo}/readme")
        return _decode_content(resp.json(), "README")

    async def fetch_file_content(self, url: GitHubUrl, path: str) -> str:
        """GET /repos/{owner}/{repo}/contents/{path} → decoded text."""
        resp = await self._api_get(f"/repos/{url.owner}/{url.repo}/contents/{path}")
        return _decode_content(resp.json(), path)

    async def _api_get(self, endpoint: str) -> httpx.Response:
        """Perform a GitHub API GET request, raising on anything but HTTP 200."""
        url = f"{_GITHUB_API}{endpoint}"
        try:
            resp = await self._client.get(url, headers=self._api_headers)
        except httpx.HTTPError as exc:
            raise RepositoryFetchError(f"Network error fetching {url}: {exc}") from exc

        if resp.status_code == 200:
            return resp

        if resp.status_code == 403 and resp.headers.get("x-ratelimit-remaining") == "0":
            raise RepositoryFetchError(
                "GitHub API rate limit exceeded. "
                "Set the GITHUB_TOKEN environment variable to increase the limit."
            )

        raise RepositoryFetchError(f"GitHub API returned HTTP {resp.status_code} for {url}")


def _decode_content(document: Any, label: str) -> str:
    """Decode the base64 ``content`` field of a GitHub contents document."""
    if not isinstance(document, dict):
        raise RepositoryFetchError(f"Unexpected contents payload for {label}")
    content = document.get("content")
    if not content or document.get("encoding") != "base64":
        raise RepositoryFetchError(f"No base64 content for {label}")
    try:
        return base64.b64decode(content).decode("utf-8")
    except (binascii.Error, ValueError) as exc:
        raise RepositoryFetchError(f"Undecodable content for {label}") from exc
