"""Session cookie names and helpers shared by the auth gate, gateway and routes."""

from __future__ import annotations

from starlette.requests import HTTPConnection
from starlette.responses import Response

from snippet_seo.domain.entities import Session

ACCESS_COOKIE = "sb-access-token"
REFRESH_COOKIE = "sb-refresh-token"
REFRESH_MAX_AGE = 60 * 60 * 24 * 30


def read_access_token(request: HTTPConnection) -> str | None:
    """Bearer header first, then the access-token cookie."""
    authorization = request.headers.get("authorization", "")
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() == "bearer" and token.strip():
        return token.strip()
    return request.cookies.get(ACCESS_COOKIE) or None


def read_refresh_token(request: HTTPConnection) -> str | None:
    return request.cookies.get(REFRESH_COOKIE) or None


def set_session_cookies(response: Response, session: Session, *, secure: bool) -> None:
    response.set_cookie(
        ACCESS_COOKIE,
        session.access_token,
        max_age=session.expires_in,
        path="/",
        httponly=True,
        secure=secure,
        samesite="lax",
    )
    response.set_cookie(
        REFRESH_COOKIE,
        session.refresh_token,
        max_age=REFRESH_MAX_AGE,
        path="/",
        httponly=True,
        secure=secure,
        samesite="lax",
    )


def clear_session_cookies(response: Response) -> None:
    response.delete_cookie(ACCESS_COOKIE, path="/")
    response.delete_cookie(REFRESH_COOKIE, path="/")
