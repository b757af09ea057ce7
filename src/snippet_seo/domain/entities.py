"""Domain entities — pure data structures with no framework dependencies."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True, slots=True)
class Principal:
    """The authenticated user behind a session."""

    id: str
    email: str | None = None
    provider: str = "email"


@dataclass(frozen=True, slots=True)
class Session:
    """Tokens issued by the auth provider for one signed-in principal."""

    access_token: str
    refresh_token: str
    expires_in: int
    principal: Principal


@dataclass(frozen=True, slots=True)
class RepoContext:
    """Repository facts used to enrich the generation prompt."""

    name: str
    description: str
    language: str
    stars: int
    topics: list[str] = field(default_factory=list)
    readme: str = ""
    manifest: str | None = None
    owner: str = ""
    full_name: str = ""

    @property
    def html_url(self) -> str:
        return f"https://github.com/{self.full_name}"


@dataclass(frozen=True, slots=True)
class GenerationResult:
    """SEO artifacts produced for one code snippet."""

    title: str
    description: str
    explanation: str
    html_output: str
    schema_markup: dict[str, Any]

    def as_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "description": self.description,
            "explanation": self.explanation,
            "html_output": self.html_output,
            "schema_markup": self.schema_markup,
        }


@dataclass(frozen=True, slots=True)
class NewSnippet:
    """A validated generation result the principal asked to persist."""

    code: str
    title: str
    description: str
    explanation: str
    html_output: str
    schema_markup: dict[str, Any]
    language: str | None = None
    github_url: str | None = None

    def to_row(self, user_id: str) -> dict[str, Any]:
        return {
            "user_id": user_id,
            "code": self.code,
            "language": self.language,
            "title": self.title,
            "description": self.description,
            "explanation": self.explanation,
            "html_output": self.html_output,
            "schema_markup": self.schema_markup,
            "github_url": self.github_url,
        }
