"""Port: product analytics sink."""

from __future__ import annotations

from typing import Any, Protocol


class AnalyticsSink(Protocol):
    """Fire-and-forget event capture. Implementations must never raise."""

    async def capture(
        self,
        event: str,
        distinct_id: str,
        properties: dict[str, Any] | None = None,
    ) -> None:
        ...
