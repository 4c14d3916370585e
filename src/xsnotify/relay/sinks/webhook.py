"""
Webhook sink — POST each directive as JSON to an HTTP endpoint.

For overlays fronted by a small HTTP bridge instead of XSOverlay's UDP API.
"""

from __future__ import annotations

import logging

import httpx

from xsnotify.relay.events import DisplayDirective
from xsnotify.relay.sink import OverlaySink

logger = logging.getLogger(__name__)


class WebhookSink(OverlaySink):
    """HTTP sink posting to ``http://{host}:{port}{path}``."""

    name: str = "webhook"

    def __init__(
        self,
        host: str,
        port: int,
        *,
        path: str = "/notify",
        headers: dict[str, str] | None = None,
        timeout: float = 10.0,
    ) -> None:
        self.url = f"http://{host}:{port}{path}"
        self.headers = headers or {}
        self.timeout = timeout
        self._client: httpx.AsyncClient | None = None

    async def connect(self) -> None:
        self._client = httpx.AsyncClient(timeout=self.timeout)

    async def disconnect(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    async def send(self, directive: DisplayDirective) -> None:
        if self._client is None:
            raise ConnectionError("Webhook sink is not connected")
        resp = await self._client.post(
            self.url,
            json=directive.model_dump(mode="json"),
            headers={"Content-Type": "application/json", **self.headers},
        )
        resp.raise_for_status()
        logger.debug("Posted %r to %s", directive.title, self.url)
