"""Port: snippet persistence.

Every operation is scoped to the owning principal; implementations must filter
on ``user_id`` for reads and writes alike.
"""

from __future__ import annotations

from typing import Any, Protocol

from snippet_seo.domain.entities import NewSnippet


class SnippetRepository(Protocol):
    """Abstract contract for the ``snippets`` table."""

    async def list_for_user(self, user_id: str) -> list[dict[str, Any]]:
        """Return the user's snippets, newest first."""
        ...

    async def create(self, user_id: str, snippet: NewSnippet) -> dict[str, Any]:
        """Insert one row and return it as stored."""
        ...

    async def get_owned(self, snippet_id: str, user_id: str) -> dict[str, Any] | None:
        ...

    async def delete_owned(self, snippet_id: str, user_id: str) -> None:
        ...
