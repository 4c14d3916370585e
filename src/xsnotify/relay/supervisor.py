"""
RelaySupervisor — runs the source loop and the sink loop side by side.

Each loop is restarted immediately whenever it dies, forever, and
independently of the other one. Both share a single RelayQueue that outlives
every restart.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable

from xsnotify.relay.config import NotifierConfig
from xsnotify.relay.queue import RelayQueue
from xsnotify.relay.sink import OverlaySink
from xsnotify.relay.source import NotificationSource, build_strategy
from xsnotify.relay.timeout import evaluate

logger = logging.getLogger(__name__)


class RelaySupervisor:
    """Owns the relay queue and the two self-restarting loops."""

    def __init__(
        self,
        config: NotifierConfig,
        source: NotificationSource,
        sink: OverlaySink,
        *,
        queue: RelayQueue | None = None,
        redeliver: bool = False,
    ) -> None:
        self.config = config
        self.source = source
        self.sink = sink
        self.queue = queue if queue is not None else RelayQueue()
        self.redeliver = redeliver
        self.strategy = build_strategy(config, source)
        self.restarts: dict[str, int] = {"source": 0, "sink": 0}

    async def run(self) -> None:
        """Run both loops until cancelled."""
        logger.info(
            "Relaying %s notifications from %s to %s at %s:%d",
            self.config.notification_strategy.value,
            self.source.name,
            self.sink.name,
            self.config.host,
            self.config.port,
        )
        await asyncio.gather(
            self._supervise("source", self._run_source),
            self._supervise("sink", self._run_sink),
        )

    async def _supervise(
        self, name: str, loop: Callable[[], Awaitable[None]]
    ) -> None:
        while True:
            try:
                await loop()
                logger.error("%s loop exited unexpectedly, restarting", name)
            except Exception:
                logger.exception("%s loop died unexpectedly, restarting", name)
            self.restarts[name] += 1
            # Yield once so a loop failing without awaiting can't starve the other.
            await asyncio.sleep(0)

    async def _run_source(self) -> None:
        await self.source.connect()
        try:
            while True:
                for event in await self.strategy.next_batch():
                    directive = evaluate(event, self.config)
                    if directive is None:
                        logger.debug("Skipped notification from %s", event.source_app)
                        continue
                    self.queue.put(directive)
                    logger.debug(
                        "Queued %r from %s (%.1fs)",
                        directive.title,
                        event.source_app,
                        directive.timeout,
                    )
        finally:
            await self._safe_disconnect(self.source)

    async def _run_sink(self) -> None:
        await self.sink.connect()
        try:
            while True:
                directive = await self.queue.get()
                try:
                    await self.sink.send(directive)
                except Exception:
                    if self.redeliver:
                        self.queue.requeue(directive)
                    else:
                        logger.warning("Dropped in-flight directive %r", directive.title)
                    raise
        finally:
            await self._safe_disconnect(self.sink)

    async def _safe_disconnect(self, endpoint: NotificationSource | OverlaySink) -> None:
        try:
            await endpoint.disconnect()
        except Exception:
            logger.exception("Failed to disconnect %s", endpoint.name)
