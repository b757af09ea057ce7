"""PostHog capture adapter — implements the AnalyticsSink port."""

from __future__ import annotations

import logging
from typing import Any

import httpx

logger = logging.getLogger(__name__)


class PostHogAnalytics:
    """Send events to the PostHog ``/capture/`` endpoint."""

    def __init__(self, client: httpx.AsyncClient, api_key: str, host: str) -> None:
        self._client = client
        self._api_key = api_key
        self._capture_url = f"{host.rstrip('/')}/capture/"

    async def capture(
        self,
        event: str,
        distinct_id: str,
        properties: dict[str, Any] | None = None,
    ) -> None:
        payload = {
            "api_key": self._api_key,
            "event": event,
            "distinct_id": distinct_id,
            "properties": properties or {},
        }
        try:
            resp = await self._client.post(self._capture_url, json=payload)
        except httpx.HTTPError as exc:
            logger.warning("Analytics capture of %s failed: %s", event, exc)
            return
        if resp.status_code >= 400:
            logger.warning("Analytics capture of %s returned HTTP %d", event, resp.status_code)


class NullAnalytics:
    """Analytics sink used when no PostHog key is configured."""

    async def capture(
        self,
        event: str,
        distinct_id: str,
        properties: dict[str, Any] | None = None,
    ) -> None:
        logger.debug("Analytics disabled, dropping %s", event)
