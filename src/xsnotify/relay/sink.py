"""
OverlaySink — abstract base class for display backends.

Unlike a best-effort notification channel, a sink lets every connect or send
error propagate: the supervisor treats it as the end of the sink loop and
reconnects.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from xsnotify.relay.events import DisplayDirective


class OverlaySink(ABC):
    """Base class for overlay sinks."""

    name: str = "unnamed"

    @abstractmethod
    async def send(self, directive: DisplayDirective) -> None:
        """Render one directive on the remote display."""
        ...

    async def connect(self) -> None:
        """Establish connection. No-op by default."""

    async def disconnect(self) -> None:
        """Tear down connection. No-op by default."""
