"""Generation routes — thin controllers that delegate to the use cases."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, BackgroundTasks, Depends

from snippet_seo.domain.entities import GenerationResult, Principal
from snippet_seo.domain.exceptions import PayloadValidationError, SnippetSeoError
from snippet_seo.domain.ports.analytics import AnalyticsSink
from snippet_seo.interface.dependencies import (
    AuthPolicy,
    authenticate,
    get_analytics,
    get_contextual_use_case,
    get_generator,
)
from snippet_seo.interface.schemas import (
    ContextualGenerateRequest,
    ErrorResponse,
    GenerateRequest,
    GenerationResponse,
)
from snippet_seo.services.generate_content import ContextualGenerationUseCase, SeoGenerator

router = APIRouter(prefix="/api")


def distinct_id(principal: Principal | None) -> str:
    return principal.id if principal is not None else "anonymous"


def _success_properties(result: GenerationResult, language: str | None) -> dict[str, Any]:
    return {
        "language": language or "auto-detect",
        "title_length": len(result.title),
        "description_length": len(result.description),
    }


@router.post(
    "/generate",
    response_model=GenerationResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid request body"},
        500: {"model": ErrorResponse, "description": "Server missing CLAUDE_KEY"},
        502: {"model": ErrorResponse, "description": "Model error or non-JSON output"},
    },
)
async def generate(
    body: GenerateRequest,
    background_tasks: BackgroundTasks,
    principal: Principal | None = Depends(authenticate(AuthPolicy.OPTIONAL)),
    generator: SeoGenerator = Depends(get_generator),
    analytics: AnalyticsSink = Depends(get_analytics),
) -> GenerationResponse:
    """Generate SEO content for a snippet. Public; the principal is only used for attribution."""
    try:
        result = await generator.generate_strict(body.code, body.language)
    except SnippetSeoError as exc:
        # Error responses run no background tasks.
        await analytics.capture(
            "snippet_generation_failed",
            distinct_id(principal),
            {"error": str(exc), "language": body.language or "auto-detect"},
        )
        raise

    background_tasks.add_task(
        analytics.capture,
        "snippet_generation_success",
        distinct_id(principal),
        _success_properties(result, body.language),
    )
    return GenerationResponse.from_result(result)


@router.post(
    "/generate-with-context",
    response_model=GenerationResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Missing code"},
        401: {"model": ErrorResponse, "description": "Not signed in"},
    },
)
async def generate_with_context(
    body: ContextualGenerateRequest,
    background_tasks: BackgroundTasks,
    principal: Principal = Depends(authenticate(AuthPolicy.REQUIRED)),
    use_case: ContextualGenerationUseCase = Depends(get_contextual_use_case),
    analytics: AnalyticsSink = Depends(get_analytics),
) -> GenerationResponse:
    """Generate SEO content, enriched with GitHub repository context when a URL is given."""
    if not body.code:
        raise PayloadValidationError("Code snippet is required")

    result = await use_case.execute(body.code, body.language, body.github_url)

    properties = _success_properties(result, body.language)
    properties["with_repository"] = bool(body.github_url)
    background_tasks.add_task(analytics.capture, "snippet_generation_success", principal.id, properties)
    return GenerationResponse.from_result(result)
