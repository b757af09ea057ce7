"""Snippet persistence routes. Every operation is scoped to the caller."""

from __future__ import annotations

from typing import Any, Literal

from fastapi import APIRouter, BackgroundTasks, Body, Depends, Query, Response

from snippet_seo.domain.entities import Principal
from snippet_seo.domain.exceptions import SnippetNotFoundError
from snippet_seo.domain.ports.analytics import AnalyticsSink
from snippet_seo.domain.ports.snippet_repository import SnippetRepository
from snippet_seo.interface.dependencies import get_analytics, get_snippet_store, require_principal
from snippet_seo.interface.schemas import (
    ErrorResponse,
    SnippetCreatedResponse,
    SnippetListResponse,
    SuccessResponse,
)
from snippet_seo.services.snippets import download_filename, export_json, validate_snippet_payload

router = APIRouter(
    prefix="/api/snippets",
    responses={401: {"model": ErrorResponse, "description": "Not signed in"}},
)


@router.get("", response_model=SnippetListResponse)
async def list_snippets(
    principal: Principal = Depends(require_principal),
    store: SnippetRepository = Depends(get_snippet_store),
) -> SnippetListResponse:
    """The caller's snippets, newest first."""
    return SnippetListResponse(snippets=await store.list_for_user(principal.id))


@router.post(
    "",
    status_code=201,
    response_model=SnippetCreatedResponse,
    responses={400: {"model": ErrorResponse, "description": "Missing or invalid fields"}},
)
async def create_snippet(
    background_tasks: BackgroundTasks,
    body: Any = Body(default=None),
    principal: Principal = Depends(require_principal),
    store: SnippetRepository = Depends(get_snippet_store),
    analytics: AnalyticsSink = Depends(get_analytics),
) -> SnippetCreatedResponse:
    snippet = validate_snippet_payload(body)
    created = await store.create(principal.id, snippet)
    background_tasks.add_task(
        analytics.capture,
        "snippet_saved",
        principal.id,
        {"snippet_id": created.get("id"), "language": snippet.language or "unknown"},
    )
    return SnippetCreatedResponse(snippet=created)


@router.delete(
    "/{snippet_id}",
    response_model=SuccessResponse,
    responses={404: {"model": ErrorResponse, "description": "Snippet not found"}},
)
async def delete_snippet(
    snippet_id: str,
    background_tasks: BackgroundTasks,
    principal: Principal = Depends(require_principal),
    store: SnippetRepository = Depends(get_snippet_store),
    analytics: AnalyticsSink = Depends(get_analytics),
) -> SuccessResponse:
    # Someone else's snippet is reported as missing, never as forbidden.
    if await store.get_owned(snippet_id, principal.id) is None:
        raise SnippetNotFoundError()

    await store.delete_owned(snippet_id, principal.id)
    background_tasks.add_task(analytics.capture, "snippet_deleted", principal.id, {"snippet_id": snippet_id})
    return SuccessResponse()


@router.get(
    "/{snippet_id}/download",
    response_class=Response,
    responses={404: {"model": ErrorResponse, "description": "Snippet not found"}},
)
async def download_snippet(
    snippet_id: str,
    background_tasks: BackgroundTasks,
    export_format: Literal["html", "json"] = Query("html", alias="format"),
    principal: Principal = Depends(require_principal),
    store: SnippetRepository = Depends(get_snippet_store),
    analytics: AnalyticsSink = Depends(get_analytics),
) -> Response:
    """Return a stored snippet as an HTML page or a JSON metadata file."""
    snippet = await store.get_owned(snippet_id, principal.id)
    if snippet is None:
        raise SnippetNotFoundError()

    if export_format == "html":
        content = snippet.get("html_output") or ""
        media_type = "text/html; charset=utf-8"
    else:
        content = export_json(snippet)
        media_type = "application/json"

    background_tasks.add_task(
        analytics.capture,
        f"snippet_download_{export_format}",
        principal.id,
        {
            "snippet_id": snippet_id,
            "language": snippet.get("language") or "unknown",
            "file_size": len(content),
        },
    )
    filename = download_filename(snippet.get("title"), export_format)
    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
