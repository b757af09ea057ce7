"""Supabase client construction.

Clients are built per request: the auth client keeps the signed-in session in
memory, and the table client carries the caller's access token so row-level
security applies. Neither may be shared between users.
"""

from __future__ import annotations

from typing import Any

from supabase import AsyncClient, AsyncClientOptions, acreate_client


async def create_supabase_client(
    url: str,
    anon_key: str,
    *,
    access_token: str | None = None,
    timeout: float = 30.0,
) -> AsyncClient:
    """Build a client with no persisted session and no background token refresh."""
    options: dict[str, Any] = {
        "auto_refresh_token": False,
        "persist_session": False,
        "postgrest_client_timeout": timeout,
    }
    if access_token:
        options["headers"] = {"Authorization": f"Bearer {access_token}"}
    return await acreate_client(url, anon_key, options=AsyncClientOptions(**options))
