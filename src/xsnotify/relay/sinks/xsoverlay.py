"""
XSOverlay sink — sends notifications to XSOverlay's UDP notification API.

XSOverlay listens (by default on port 42069) for JSON datagrams describing a
toast: title, content, timeout, height, opacity, volume and icon.
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any

from xsnotify.relay.events import DisplayDirective
from xsnotify.relay.sink import OverlaySink

logger = logging.getLogger(__name__)

_MIN_HEIGHT = 110.0
_MAX_HEIGHT = 250.0
_CHARS_PER_LINE = 70
_LINE_HEIGHT = 20.0


class _DatagramProtocol(asyncio.DatagramProtocol):
    def __init__(self) -> None:
        self.error: Exception | None = None
        self.closed = False

    def error_received(self, exc: Exception) -> None:
        self.error = exc

    def connection_lost(self, exc: Exception | None) -> None:
        self.closed = True
        if exc is not None:
            self.error = exc


def toast_height(body: str) -> float:
    """Toast height in pixels, growing with the number of wrapped body lines."""
    lines = max(1, -(-len(body) // _CHARS_PER_LINE))
    return min(_MIN_HEIGHT + (lines - 1) * _LINE_HEIGHT, _MAX_HEIGHT)


def build_payload(directive: DisplayDirective, source_app: str = "XSNotify") -> dict[str, Any]:
    return {
        "messageType": 1,
        "index": 0,
        "timeout": directive.timeout,
        "height": toast_height(directive.body),
        "opacity": 1.0,
        "volume": 0.7,
        "audioPath": "default",
        "title": directive.title,
        "content": directive.body,
        "useBase64Icon": False,
        "icon": "default",
        "sourceApp": source_app,
    }


class XSOverlaySink(OverlaySink):
    """UDP sink speaking XSOverlay's notification message format."""

    name: str = "xsoverlay"

    def __init__(self, host: str, port: int) -> None:
        self.host = host
        self.port = port
        self._transport: asyncio.DatagramTransport | None = None
        self._protocol: _DatagramProtocol | None = None

    async def connect(self) -> None:
        loop = asyncio.get_running_loop()
        self._transport, self._protocol = await loop.create_datagram_endpoint(
            _DatagramProtocol, remote_addr=(self.host, self.port)
        )
        logger.info("Connected to XSOverlay at %s:%d", self.host, self.port)

    async def disconnect(self) -> None:
        if self._transport:
            self._transport.close()
            self._transport = None
            self._protocol = None

    async def send(self, directive: DisplayDirective) -> None:
        if self._transport is None or self._protocol is None:
            raise ConnectionError("XSOverlay sink is not connected")
        if self._protocol.error is not None:
            raise ConnectionError("XSOverlay socket error") from self._protocol.error
        if self._protocol.closed:
            raise ConnectionError("XSOverlay socket closed")

        data = json.dumps(build_payload(directive)).encode()
        self._transport.sendto(data)
        logger.debug("Sent %r to XSOverlay (%.1fs)", directive.title, directive.timeout)
