"""Supabase table adapter — implements the SnippetRepository port.

The client carries the caller's access token so row-level security applies on
top of the explicit ``user_id`` filters.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx
from supabase import AsyncClient, PostgrestAPIError

from snippet_seo.domain.entities import NewSnippet
from snippet_seo.domain.exceptions import DataStoreError

logger = logging.getLogger(__name__)

_TABLE = "snippets"

# Lookups that mean "no such row": a malformed uuid, or zero rows for .single().
_NOT_FOUND_CODES = frozenset({"22P02", "PGRST116"})


def _store_error(exc: Exception) -> DataStoreError:
    if isinstance(exc, PostgrestAPIError):
        return DataStoreError(
            exc.message or "Data store rejected the query",
            code=exc.code,
            details=exc.details,
            hint=exc.hint,
        )
    return DataStoreError(f"Data store unreachable: {exc}")


class SupabaseSnippetStore:
    """Concrete SnippetRepository backed by the ``snippets`` table."""

    def __init__(self, client: AsyncClient) -> None:
        self._client = client

    async def list_for_user(self, user_id: str) -> list[dict[str, Any]]:
        try:
            response = await (
                self._client.table(_TABLE)
                .select("*")
                .eq("user_id", user_id)
                .order("created_at", desc=True)
                .execute()
            )
        except (PostgrestAPIError, httpx.HTTPError) as exc:
            raise _store_error(exc) from exc
        rows: list[dict[str, Any]] = response.data or []
        return rows

    async def create(self, user_id: str, snippet: NewSnippet) -> dict[str, Any]:
        try:
            response = await self._client.table(_TABLE).insert(snippet.to_row(user_id)).execute()
        except (PostgrestAPIError, httpx.HTTPError) as exc:
            raise _store_error(exc) from exc
        if not response.data:
            raise DataStoreError("Insert returned no row")
        created: dict[str, Any] = response.data[0]
        logger.info("Stored snippet %s for user %s", created.get("id"), user_id)
        return created

    async def get_owned(self, snippet_id: str, user_id: str) -> dict[str, Any] | None:
        """The owned row, or ``None`` when the id matches nothing the caller owns."""
        try:
            response = await (
                self._client.table(_TABLE)
                .select("*")
                .eq("id", snippet_id)
                .eq("user_id", user_id)
                .limit(1)
                .execute()
            )
        except PostgrestAPIError as exc:
            if exc.code in _NOT_FOUND_CODES:
                logger.debug("Snippet lookup for %r matched nothing (%s)", snippet_id, exc.code)
                return None
            raise _store_error(exc) from exc
        except httpx.HTTPError as exc:
            raise _store_error(exc) from exc
        rows = response.data or []
        return rows[0] if rows else None

    async def delete_owned(self, snippet_id: str, user_id: str) -> None:
        try:
            await (
                self._client.table(_TABLE)
                .delete()
                .eq("id", snippet_id)
                .eq("user_id", user_id)
                .execute()
            )
        except (PostgrestAPIError, httpx.HTTPError) as exc:
            raise _store_error(exc) from exc
        logger.info("Deleted snippet %s for user %s", snippet_id, user_id)
