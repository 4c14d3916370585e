"""
Console sink — Rich terminal output for directives.

Handy as a dry run: shows what would be sent to the overlay and for how long.
"""

from __future__ import annotations

from rich.console import Console
from rich.panel import Panel

from xsnotify.relay.events import DisplayDirective
from xsnotify.relay.sink import OverlaySink


class ConsoleSink(OverlaySink):
    """Rich terminal output sink."""

    name: str = "console"

    def __init__(self, console: Console | None = None) -> None:
        self._console = console or Console()

    async def send(self, directive: DisplayDirective) -> None:
        self._console.print(
            Panel(
                directive.body or "[dim](no body)[/dim]",
                title=f"\U0001f514 {directive.title}",
                subtitle=f"{directive.timeout:.1f}s",
                border_style="blue",
            )
        )
