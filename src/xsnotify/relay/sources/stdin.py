"""
Standard-input source — one JSON notification per line.

Lets any platform hook (a D-Bus monitor script, a PowerShell listener, ...)
feed the relay by piping objects like
``{"source_app": "Discord", "title": "Hi", "body": "there"}``.
"""

from __future__ import annotations

import asyncio
import logging
import sys
from typing import TextIO

from pydantic import ValidationError

from xsnotify.relay.events import NotificationEvent
from xsnotify.relay.source import NotificationSource

logger = logging.getLogger(__name__)


class StdinSource(NotificationSource):
    """Listener source reading JSON lines from a text stream."""

    name: str = "stdin"
    supports_listener: bool = True
    supports_polling: bool = False

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream if stream is not None else sys.stdin
        self._closed = False

    async def listen(self) -> NotificationEvent:
        while not self._closed:
            line = await asyncio.to_thread(self._stream.readline)
            if not line:
                self._closed = True
                logger.warning("Input stream closed; no further notifications")
                break
            line = line.strip()
            if not line:
                continue
            try:
                return NotificationEvent.model_validate_json(line)
            except ValidationError as exc:
                logger.warning("Ignoring malformed notification line: %s", exc)

        # A closed pipe never reopens; park the loop instead of spinning restarts.
        await asyncio.Event().wait()
