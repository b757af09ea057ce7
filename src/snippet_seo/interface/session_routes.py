"""Session lifecycle routes: sign-in, sign-up, sign-out and session lookup.

These are the only places a session is created or torn down; the gateway
middleware only refreshes existing ones.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, BackgroundTasks, Depends, Request, Response

from snippet_seo.domain.entities import Principal
from snippet_seo.domain.exceptions import (
    AuthNotConfiguredError,
    AuthProviderError,
    AuthProviderUnavailableError,
)
from snippet_seo.domain.ports.analytics import AnalyticsSink
from snippet_seo.domain.ports.auth_provider import AuthProvider
from snippet_seo.interface.dependencies import get_analytics, get_auth_provider, optional_principal
from snippet_seo.interface.schemas import (
    CredentialsRequest,
    ErrorResponse,
    SessionResponse,
    SuccessResponse,
    UserOut,
)
from snippet_seo.interface.session_cookies import (
    clear_session_cookies,
    read_access_token,
    set_session_cookies,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth")


def _email_domain(email: str) -> str | None:
    _, _, domain = email.partition("@")
    return domain or None


def require_auth_provider(
    auth: AuthProvider | None = Depends(get_auth_provider),
) -> AuthProvider:
    if auth is None:
        raise AuthNotConfiguredError()
    return auth


@router.post(
    "/login",
    response_model=SessionResponse,
    responses={
        401: {"model": ErrorResponse, "description": "Invalid credentials"},
        503: {"model": ErrorResponse, "description": "Authentication unavailable"},
    },
)
async def login(
    body: CredentialsRequest,
    request: Request,
    response: Response,
    background_tasks: BackgroundTasks,
    auth: AuthProvider = Depends(require_auth_provider),
    analytics: AnalyticsSink = Depends(get_analytics),
) -> SessionResponse:
    try:
        session = await auth.sign_in(body.email, body.password)
    except AuthProviderError as exc:
        await analytics.capture(
            "user_sign_in_failed",
            "anonymous",
            {"error": str(exc), "email_domain": _email_domain(body.email)},
        )
        raise

    set_session_cookies(response, session, secure=request.app.state.settings.secure_cookies)
    background_tasks.add_task(
        analytics.capture,
        "user_signed_in",
        session.principal.id,
        {"user_id": session.principal.id, "provider": session.principal.provider},
    )
    return SessionResponse(user=UserOut.from_principal(session.principal))


@router.post(
    "/signup",
    response_model=SessionResponse,
    responses={
        401: {"model": ErrorResponse, "description": "Sign-up rejected"},
        503: {"model": ErrorResponse, "description": "Authentication unavailable"},
    },
)
async def signup(
    body: CredentialsRequest,
    request: Request,
    response: Response,
    background_tasks: BackgroundTasks,
    auth: AuthProvider = Depends(require_auth_provider),
    analytics: AnalyticsSink = Depends(get_analytics),
) -> SessionResponse:
    """Register; cookies are only set when the provider issues a session right away."""
    try:
        principal, session = await auth.sign_up(body.email, body.password)
    except AuthProviderError as exc:
        await analytics.capture(
            "user_sign_up_failed",
            "anonymous",
            {"error": str(exc), "email_domain": _email_domain(body.email)},
        )
        raise

    if session is not None:
        set_session_cookies(response, session, secure=request.app.state.settings.secure_cookies)
    background_tasks.add_task(
        analytics.capture,
        "user_sign_up_success",
        principal.id,
        {"email_domain": _email_domain(body.email)},
    )
    return SessionResponse(user=UserOut.from_principal(principal))


@router.post("/logout", response_model=SuccessResponse)
async def logout(
    request: Request,
    response: Response,
    background_tasks: BackgroundTasks,
    principal: Principal | None = Depends(optional_principal),
    auth: AuthProvider | None = Depends(get_auth_provider),
    analytics: AnalyticsSink = Depends(get_analytics),
) -> SuccessResponse:
    """Revoke the session upstream (best effort) and always clear the cookies."""
    access_token = read_access_token(request)
    if auth is not None and access_token:
        try:
            await auth.sign_out(access_token)
        except (AuthProviderError, AuthProviderUnavailableError) as exc:
            logger.warning("Upstream sign-out failed: %s", exc)

    clear_session_cookies(response)
    if principal is not None:
        background_tasks.add_task(analytics.capture, "user_signed_out", principal.id)
    return SuccessResponse()


@router.get("/session", response_model=SessionResponse)
async def current_session(
    principal: Principal | None = Depends(optional_principal),
) -> SessionResponse:
    if principal is None:
        return SessionResponse(user=None)
    return SessionResponse(user=UserOut.from_principal(principal))
