"""
NotificationSource — abstract base class for notification capture backends,
plus the two strategies the source loop drives them with.

A source implements `listen()` (push: wait for exactly one event), `poll()`
(sample: everything that arrived since the last call), or both, and
advertises which through `supports_listener` / `supports_polling`.
"""

from __future__ import annotations

import asyncio
from abc import ABC

from xsnotify.relay.config import NotificationStrategy, NotifierConfig
from xsnotify.relay.events import NotificationEvent


class NotificationSource(ABC):
    """Base class for notification sources."""

    name: str = "unnamed"
    supports_listener: bool = False
    supports_polling: bool = False

    async def connect(self) -> None:
        """Subscribe / open the capture mechanism. No-op by default."""

    async def disconnect(self) -> None:
        """Release the capture mechanism. No-op by default."""

    async def listen(self) -> NotificationEvent:
        """Wait for the next notification."""
        raise NotImplementedError(f"{self.name} source cannot listen")

    async def poll(self) -> list[NotificationEvent]:
        """Return notifications received since the previous poll."""
        raise NotImplementedError(f"{self.name} source cannot poll")


class ListenerStrategy:
    """Suspends until the source pushes one event."""

    def __init__(self, source: NotificationSource) -> None:
        self.source = source

    async def next_batch(self) -> list[NotificationEvent]:
        return [await self.source.listen()]


class PollingStrategy:
    """Sleeps for the polling interval, then samples the source."""

    def __init__(self, source: NotificationSource, polling_rate_ms: int) -> None:
        self.source = source
        self.interval = polling_rate_ms / 1000

    async def next_batch(self) -> list[NotificationEvent]:
        await asyncio.sleep(self.interval)
        return await self.source.poll()


def build_strategy(
    config: NotifierConfig, source: NotificationSource
) -> ListenerStrategy | PollingStrategy:
    """Pick the capture strategy for `source` from the config."""
    if config.notification_strategy is NotificationStrategy.POLLING:
        if not source.supports_polling:
            raise ValueError(f"The {source.name} source does not support polling")
        return PollingStrategy(source, config.polling_rate)
    if not source.supports_listener:
        raise ValueError(f"The {source.name} source does not support listening")
    return ListenerStrategy(source)
