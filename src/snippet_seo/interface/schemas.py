"""Pydantic request / response DTOs for the API boundary."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from snippet_seo.domain.entities import GenerationResult, Principal


class GenerateRequest(BaseModel):
    """Request body for ``POST /api/generate``."""

    code: str = Field(min_length=1)
    language: str | None = None


class ContextualGenerateRequest(BaseModel):
    """Request body for ``POST /api/generate-with-context``."""

    model_config = ConfigDict(populate_by_name=True)

    code: str = ""
    language: str | None = None
    github_url: str | None = Field(default=None, alias="githubUrl")


class GenerationResponse(BaseModel):
    """SEO artifacts for one snippet."""

    title: str
    description: str
    explanation: str
    html_output: str
    schema_markup: dict[str, Any]

    @classmethod
    def from_result(cls, result: GenerationResult) -> GenerationResponse:
        return cls(**result.as_dict())


class SnippetListResponse(BaseModel):
    snippets: list[dict[str, Any]]


class SnippetCreatedResponse(BaseModel):
    snippet: dict[str, Any]


class SuccessResponse(BaseModel):
    success: bool = True


class CredentialsRequest(BaseModel):
    """Request body for sign-in and sign-up."""

    email: str = Field(min_length=3)
    password: str = Field(min_length=1)


class UserOut(BaseModel):
    id: str
    email: str | None = None

    @classmethod
    def from_principal(cls, principal: Principal) -> UserOut:
        return cls(id=principal.id, email=principal.email)


class SessionResponse(BaseModel):
    user: UserOut | None = None


class ErrorResponse(BaseModel):
    """Standard error envelope returned on all failure paths."""

    error: str
    details: Any = None
