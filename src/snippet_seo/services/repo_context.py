"""Best-effort repository context for prompt enrichment.

Only the metadata call is mandatory.  README and manifest are fetched
concurrently and each degrades to an empty value on its own.
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any

from snippet_seo.domain.entities import RepoContext
from snippet_seo.domain.exceptions import RepositoryFetchError
from snippet_seo.domain.ports.repo_fetcher import RepoFetcher
from snippet_seo.domain.value_objects import GitHubUrl

logger = logging.getLogger(__name__)

README_MAX_CHARS = 2000
MANIFEST_MAX_CHARS = 1000
MANIFEST_PATH = "package.json"


class RepoContextFetcher:
    """Build a :class:`RepoContext` from a GitHub URL, or ``None``."""

    def __init__(self, repo_fetcher: RepoFetcher) -> None:
        self._fetcher = repo_fetcher

    async def fetch(self, github_url: str) -> RepoContext | None:
        """Never raises: every failure yields ``None`` or an empty field."""
        try:
            return await self._fetch(github_url)
        except RepositoryFetchError as exc:
            logger.warning("No repository context for %s: %s", github_url, exc)
            return None
        except Exception:
            logger.exception("Unexpected error fetching repository context for %s", github_url)
            return None

    async def _fetch(self, github_url: str) -> RepoContext:
        url = GitHubUrl.from_string(github_url)
        logger.info("Fetching repository context for %s", url.full_name)

        metadata = await self._fetcher.fetch_metadata(url)
        readme, manifest = await asyncio.gather(
            self._readme(url),
            self._manifest(url),
        )

        return RepoContext(
            name=str(metadata.get("name") or url.repo),
            description=metadata.get("description") or "",
            language=metadata.get("language") or "",
            stars=int(metadata.get("stargazers_count") or 0),
            topics=[str(topic) for topic in metadata.get("topics") or []],
            readme=readme[:README_MAX_CHARS],
            manifest=manifest[:MANIFEST_MAX_CHARS] if manifest is not None else None,
            owner=url.owner,
            full_name=str(metadata.get("full_name") or url.full_name),
        )

    async def _readme(self, url: GitHubUrl) -> str:
        try:
            return await self._fetcher.fetch_readme(url)
        except Exception as exc:
            logger.debug("README unavailable for %s: %s", url.full_name, exc)
            return ""

    async def _manifest(self, url: GitHubUrl) -> str | None:
        """Compact JSON re-serialisation of the manifest, or ``None``."""
        try:
            raw = await self._fetcher.fetch_file_content(url, MANIFEST_PATH)
            parsed: Any = json.loads(raw)
        except Exception as exc:
            logger.debug("%s unavailable for %s: %s", MANIFEST_PATH, url.full_name, exc)
            return None
        return json.dumps(parsed, separators=(",", ":"), ensure_ascii=False)
