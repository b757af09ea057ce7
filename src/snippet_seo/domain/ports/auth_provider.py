"""Port: authentication provider."""

from __future__ import annotations

from typing import Protocol

from snippet_seo.domain.entities import Principal, Session


class AuthProvider(Protocol):
    """Session issuing and validation, backed by an external identity service.

    Rejections raise ``AuthProviderError``; an unreachable provider raises
    ``AuthProviderUnavailableError`` from every method.
    """

    async def get_principal(self, access_token: str) -> Principal | None:
        """Return the principal owning *access_token*, or ``None`` if it is not valid."""
        ...

    async def sign_in(self, email: str, password: str) -> Session:
        ...

    async def sign_up(self, email: str, password: str) -> tuple[Principal, Session | None]:
        """Register a user; the session is ``None`` while email confirmation is pending."""
        ...

    async def refresh(self, refresh_token: str) -> Session:
        ...

    async def sign_out(self, access_token: str) -> None:
        ...
