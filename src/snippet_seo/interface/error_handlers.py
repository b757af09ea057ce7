"""Global exception handlers — translate domain errors to HTTP responses.

Each domain exception maps to a specific HTTP status code and the
``{"error": "...", "details": ...}`` envelope (``details`` only when present).
"""

from __future__ import annotations

import logging
import traceback
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from snippet_seo.domain.exceptions import (
    AuthenticationRequiredError,
    AuthNotConfiguredError,
    AuthProviderError,
    AuthProviderUnavailableError,
    DataStoreError,
    LlmError,
    MissingCredentialError,
    PayloadValidationError,
    RepositoryFetchError,
    SnippetNotFoundError,
    SnippetSeoError,
)

logger = logging.getLogger(__name__)

_EXCEPTION_STATUS: list[tuple[type[SnippetSeoError], int]] = [
    (AuthenticationRequiredError, 401),
    (AuthProviderError, 401),
    (AuthProviderUnavailableError, 503),
    (AuthNotConfiguredError, 503),
    (PayloadValidationError, 400),
    (SnippetNotFoundError, 404),
    (MissingCredentialError, 500),
    (LlmError, 502),
    (RepositoryFetchError, 502),
]


def _error_json(status_code: int, message: str, details: Any = None) -> JSONResponse:
    content: dict[str, Any] = {"error": message}
    if details is not None:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content)


def register_error_handlers(app: FastAPI, *, expose_details: bool = False) -> None:
    """Attach exception handlers to the FastAPI application.

    ``expose_details`` adds store hints and tracebacks to 500 responses; keep
    it off outside local debugging.
    """

    # ── Domain exceptions ───────────────────────────────────────────────

    for exc_type, code in _EXCEPTION_STATUS:

        def _make_handler(
            status_code: int,
        ):  # type: ignore[no-untyped-def]
            async def handler(request: Request, exc: Exception) -> JSONResponse:
                logger.warning("%s: %s", type(exc).__name__, exc)
                return _error_json(status_code, str(exc), getattr(exc, "details", None))

            return handler

        app.add_exception_handler(exc_type, _make_handler(code))

    # ── Data store errors: message passes through ───────────────────────

    @app.exception_handler(DataStoreError)
    async def data_store_handler(request: Request, exc: DataStoreError) -> JSONResponse:
        logger.error("Data store error on %s: %s", request.url.path, exc)
        details = None
        if expose_details:
            details = {"code": exc.code, "details": exc.details, "hint": exc.hint}
        return _error_json(500, str(exc), details)

    # ── Pydantic / FastAPI validation errors ────────────────────────────

    @app.exception_handler(RequestValidationError)
    async def validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        fields: dict[str, list[str]] = {}
        for err in exc.errors():
            loc = [str(p) for p in err.get("loc", []) if p != "body"]
            fields.setdefault(".".join(loc) or "body", []).append(
                err.get("msg", "validation error")
            )
        return _error_json(400, "Invalid request data", fields)

    # ── Catch-all for unexpected errors ─────────────────────────────────

    @app.exception_handler(Exception)
    async def generic_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled exception")
        details = None
        if expose_details:
            details = {
                "message": str(exc),
                "stack": "".join(traceback.format_exception(exc)),
            }
        return _error_json(500, "Unexpected error", details)
