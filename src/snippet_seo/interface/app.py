"""FastAPI application factory."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from snippet_seo.infrastructure.config import Settings, get_settings
from snippet_seo.interface.dependencies import shutdown, startup
from snippet_seo.interface.error_handlers import register_error_handlers
from snippet_seo.interface.routes import router as generation_router
from snippet_seo.interface.session_gateway import SessionGatewayMiddleware
from snippet_seo.interface.session_routes import router as session_router
from snippet_seo.interface.snippet_routes import router as snippet_router


@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage startup / shutdown of shared resources."""
    await startup(app.state.settings)
    yield
    await shutdown()


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build and wire the FastAPI application."""
    settings = settings or get_settings()
    app = FastAPI(
        title="Code Snippet SEO Generator",
        version="1.0.0",
        description=(
            "Generates SEO metadata (title, meta description, explanation, "
            "HTML page and JSON-LD) for code snippets, optionally enriched with "
            "GitHub repository context, and stores the results per user."
        ),
        lifespan=_lifespan,
    )

    app.state.settings = settings

    register_error_handlers(app, expose_details=settings.expose_error_details)
    app.add_middleware(SessionGatewayMiddleware, secure_cookies=settings.secure_cookies)
    app.include_router(generation_router)
    app.include_router(snippet_router)
    app.include_router(session_router)

    # ── Health check (simple liveness probe) ────────────────────────────

    @app.get("/health", include_in_schema=False)
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    return app
