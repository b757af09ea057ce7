"""Port: repository fetcher — defined by the domain, implemented by infrastructure."""

from __future__ import annotations

from typing import Any, Protocol

from snippet_seo.domain.value_objects import GitHubUrl


class RepoFetcher(Protocol):
    """Abstract contract for fetching GitHub repository data."""

    async def fetch_metadata(self, url: GitHubUrl) -> dict[str, Any]:
        """Return the raw repository metadata document."""
        ...

    async def fetch_readme(self, url: GitHubUrl) -> str:
        """Return the decoded README text."""
        ...

    async def fetch_file_content(self, url: GitHubUrl, path: str) -> str:
        """Return the decoded text content of a single file on the default branch."""
        ...
