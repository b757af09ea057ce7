"""Supabase auth adapter — implements the AuthProvider port with the ``supabase`` SDK."""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable

import httpx
from supabase import AsyncClient, AuthApiError, AuthError, AuthRetryableError

from snippet_seo.domain.entities import Principal, Session
from snippet_seo.domain.exceptions import AuthProviderError, AuthProviderUnavailableError

logger = logging.getLogger(__name__)

ClientFactory = Callable[[], Awaitable[AsyncClient]]


def _is_outage(exc: Exception) -> bool:
    """Network failures and 5xx answers say nothing about the credentials."""
    if isinstance(exc, (AuthRetryableError, httpx.HTTPError)):
        return True
    status = getattr(exc, "status", None)
    return isinstance(exc, AuthApiError) and isinstance(status, int) and status >= 500


def _translate(exc: Exception, action: str) -> Exception:
    if _is_outage(exc):
        logger.warning("Auth provider unavailable during %s: %s", action, exc)
        return AuthProviderUnavailableError(f"Auth provider unavailable: {exc}")
    return AuthProviderError(getattr(exc, "message", None) or str(exc))


class SupabaseAuthAdapter:
    """Concrete AuthProvider backed by ``AsyncClient.auth``.

    ``client_factory`` returns a fresh client per call so the SDK's in-memory
    session never leaks between users.
    """

    def __init__(self, client_factory: ClientFactory) -> None:
        self._client_factory = client_factory

    async def get_principal(self, access_token: str) -> Principal | None:
        """``None`` when the token is expired, revoked or malformed.

        Raises AuthProviderUnavailableError when the provider cannot be reached.
        """
        client = await self._client_factory()
        try:
            response = await client.auth.get_user(access_token)
        except (AuthError, httpx.HTTPError) as exc:
            if _is_outage(exc):
                raise _translate(exc, "token lookup") from exc
            logger.debug("Access token rejected: %s", exc)
            return None
        if response is None or response.user is None:
            return None
        return _principal_from_user(response.user)

    async def sign_in(self, email: str, password: str) -> Session:
        client = await self._client_factory()
        try:
            response = await client.auth.sign_in_with_password(
                {"email": email, "password": password}
            )
        except (AuthError, httpx.HTTPError) as exc:
            raise _translate(exc, "sign-in") from exc
        return _session_from_response(response.session)

    async def sign_up(self, email: str, password: str) -> tuple[Principal, Session | None]:
        client = await self._client_factory()
        try:
            response = await client.auth.sign_up({"email": email, "password": password})
        except (AuthError, httpx.HTTPError) as exc:
            raise _translate(exc, "sign-up") from exc
        if response.session is not None:
            session = _session_from_response(response.session)
            return session.principal, session
        # Email confirmation pending: a user without a session.
        if response.user is None:
            raise AuthProviderError("Auth provider returned no user")
        return _principal_from_user(response.user), None

    async def refresh(self, refresh_token: str) -> Session:
        client = await self._client_factory()
        try:
            response = await client.auth.refresh_session(refresh_token)
        except (AuthError, httpx.HTTPError) as exc:
            raise _translate(exc, "refresh") from exc
        return _session_from_response(response.session)

    async def sign_out(self, access_token: str) -> None:
        """Revoke the refresh tokens of this session."""
        client = await self._client_factory()
        try:
            await client.auth.admin.sign_out(access_token)
        except (AuthError, httpx.HTTPError) as exc:
            raise _translate(exc, "sign-out") from exc


def _principal_from_user(user: Any) -> Principal:
    user_id = getattr(user, "id", None)
    if not user_id:
        raise AuthProviderError("Auth provider returned no user")
    app_metadata = getattr(user, "app_metadata", None) or {}
    return Principal(
        id=str(user_id),
        email=getattr(user, "email", None),
        provider=app_metadata.get("provider") or "email",
    )


def _session_from_response(session: Any) -> Session:
    if session is None or not session.access_token or not session.refresh_token:
        raise AuthProviderError("Auth provider returned no session")
    return Session(
        access_token=session.access_token,
        refresh_token=session.refresh_token,
        expires_in=int(session.expires_in or 3600),
        principal=_principal_from_user(session.user),
    )
