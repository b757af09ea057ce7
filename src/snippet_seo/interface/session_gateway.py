"""Page-navigation session gateway.

Refreshes expired sessions and applies the redirect rules for browser
navigation.  API routes, static assets and the health probe pass through
untouched; they authenticate per endpoint instead.
"""

from __future__ import annotations

import logging
from urllib.parse import urlencode

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import RedirectResponse, Response
from starlette.types import ASGIApp

from snippet_seo.domain.entities import Principal, Session
from snippet_seo.domain.exceptions import AuthProviderError, AuthProviderUnavailableError
from snippet_seo.domain.ports.auth_provider import AuthProvider
from snippet_seo.interface.dependencies import get_analytics, get_auth_provider, resolve
from snippet_seo.interface.session_cookies import (
    clear_session_cookies,
    read_access_token,
    read_refresh_token,
    set_session_cookies,
)

logger = logging.getLogger(__name__)

LOGIN_PATH = "/auth/login"
_EXEMPT_PREFIXES = ("/api/", "/_next/", "/static/", "/favicon", "/health")


def is_exempt(path: str) -> bool:
    return path.startswith(_EXEMPT_PREFIXES)


def is_protected(path: str) -> bool:
    return path == "/" or path.startswith("/dashboard")


def is_auth_page(path: str) -> bool:
    return path.startswith("/auth/")


def login_redirect(path: str) -> RedirectResponse:
    return RedirectResponse(f"{LOGIN_PATH}?{urlencode({'redirectTo': path})}")


class SessionGatewayMiddleware(BaseHTTPMiddleware):
    """Redirect unauthenticated users to login and signed-in users away from auth pages."""

    def __init__(self, app: ASGIApp, *, secure_cookies: bool = True) -> None:
        super().__init__(app)
        self._secure_cookies = secure_cookies

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        path = request.url.path
        if is_exempt(path):
            return await call_next(request)

        auth = resolve(request, get_auth_provider)
        if auth is None:
            # Fail safe: without an auth provider nobody can sign in.
            if is_protected(path):
                logger.info("Auth provider not configured, redirecting %s to login", path)
                return login_redirect(path)
            return await call_next(request)

        refreshed: Session | None = None
        stale = False
        try:
            principal, refreshed, stale = await self._resolve_session(request, auth)
        except AuthProviderUnavailableError as exc:
            # Session state is unknown: keep the cookies and let the request through.
            logger.warning("Auth provider unavailable on %s: %s", path, exc)
            return await call_next(request)
        except Exception:
            logger.exception("Session gateway error on %s", path)
            return await call_next(request)

        if is_protected(path) and principal is None:
            response: Response = login_redirect(path)
        elif is_auth_page(path) and principal is not None:
            response = RedirectResponse("/")
        else:
            response = await call_next(request)

        if refreshed is not None:
            set_session_cookies(response, refreshed, secure=self._secure_cookies)
        elif stale:
            clear_session_cookies(response)
        return response

    async def _resolve_session(
        self, request: Request, auth: AuthProvider
    ) -> tuple[Principal | None, Session | None, bool]:
        """Return ``(principal, refreshed_session, stale_cookies)``."""
        access_token = read_access_token(request)
        refresh_token = read_refresh_token(request)

        if access_token:
            principal = await auth.get_principal(access_token)
            if principal is not None:
                return principal, None, False

        if not refresh_token:
            return None, None, bool(access_token)

        try:
            session: Session = await auth.refresh(refresh_token)
        except AuthProviderError as exc:
            logger.warning("Session refresh failed: %s", exc)
            return None, None, True

        analytics = resolve(request, get_analytics)
        await analytics.capture("user_session_refreshed", session.principal.id)
        return session.principal, session, False
