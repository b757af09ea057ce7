"""Value objects — self-validating domain primitives."""

from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import urlsplit

from snippet_seo.domain.exceptions import RepositoryFetchError


@dataclass(frozen=True, slots=True)
class GitHubUrl:
    """Repository coordinates taken from a URL like ``https://github.com/psf/requests``.

    Only the first two path segments matter; anything after them (``/tree/main``,
    ``/blob/...``) is ignored.
    """

    owner: str
    repo: str
    raw: str

    @classmethod
    def from_string(cls, url: str) -> GitHubUrl:
        """Parse a raw URL string, raising when fewer than two path segments exist."""
        url = url.strip()
        try:
            parts = urlsplit(url)
        except ValueError as exc:
            raise RepositoryFetchError(f"Invalid GitHub URL: '{url}'") from exc
        if not parts.scheme or not parts.netloc:
            raise RepositoryFetchError(f"Invalid GitHub URL: '{url}'")

        segments = [part for part in parts.path.split("/") if part]
        if len(segments) < 2:
            raise RepositoryFetchError(
                f"Invalid GitHub URL: '{url}'. "
                "Expected format: https://github.com/<owner>/<repo>"
            )
        repo = segments[1]
        if repo.endswith(".git"):
            repo = repo[: -len(".git")]
        return cls(owner=segments[0], repo=repo, raw=url)

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"
