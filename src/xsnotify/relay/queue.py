"""
RelayQueue — ordered channel between the source loop and the sink loop.

The supervisor creates one queue per process and hands it to both loops.
Restarting a loop never replaces the queue, so directives produced while the
overlay is unreachable wait here until the sink reconnects.
"""

from __future__ import annotations

import asyncio
import logging
from collections import deque
from enum import Enum

from xsnotify.relay.events import DisplayDirective

logger = logging.getLogger(__name__)


class DropPolicy(str, Enum):
    DROP_OLDEST = "oldest"
    DROP_NEWEST = "newest"


class RelayQueue:
    """Single-producer/single-consumer FIFO of display directives.

    Unbounded by default. With ``maxsize > 0`` a full queue discards either
    the oldest queued directive or the incoming one, per ``drop_policy``.
    """

    def __init__(
        self,
        maxsize: int = 0,
        drop_policy: DropPolicy = DropPolicy.DROP_OLDEST,
    ) -> None:
        if maxsize < 0:
            raise ValueError("maxsize must be >= 0")
        self.maxsize = maxsize
        self.drop_policy = drop_policy
        self.dropped: int = 0
        self._items: deque[DisplayDirective] = deque()
        self._ready = asyncio.Event()

    def __len__(self) -> int:
        return len(self._items)

    def empty(self) -> bool:
        return not self._items

    def put(self, directive: DisplayDirective) -> DisplayDirective | None:
        """Append a directive without blocking. Returns the dropped one, if any."""
        dropped: DisplayDirective | None = None
        if self.maxsize and len(self._items) >= self.maxsize:
            if self.drop_policy is DropPolicy.DROP_NEWEST:
                self._drop(directive)
                return directive
            dropped = self._items.popleft()
            self._drop(dropped)
        self._items.append(directive)
        self._ready.set()
        return dropped

    def requeue(self, directive: DisplayDirective) -> DisplayDirective | None:
        """Put a directive back at the head, ahead of everything queued.

        The bound still applies. A re-queued directive is older than anything
        queued, so on a full queue DROP_OLDEST discards it and DROP_NEWEST
        discards the tail instead. Returns the dropped one, if any.
        """
        dropped: DisplayDirective | None = None
        if self.maxsize and len(self._items) >= self.maxsize:
            if self.drop_policy is DropPolicy.DROP_OLDEST:
                self._drop(directive)
                return directive
            dropped = self._items.pop()
            self._drop(dropped)
        self._items.appendleft(directive)
        self._ready.set()
        return dropped

    async def get(self) -> DisplayDirective:
        """Wait for and remove the oldest directive."""
        while not self._items:
            self._ready.clear()
            await self._ready.wait()
        return self._items.popleft()

    def _drop(self, directive: DisplayDirective) -> None:
        self.dropped += 1
        logger.warning(
            "Relay queue full (%d), dropped %s directive %r",
            self.maxsize,
            "newest" if self.drop_policy is DropPolicy.DROP_NEWEST else "oldest",
            directive.title,
        )
