"""
Spool-directory source — each ``*.json`` file dropped in a directory is one
notification.

Writers should create the file under another name and rename it to
``.json`` once complete. Consumed files are deleted; files that fail to
parse or cannot be read are renamed with a ``.bad`` suffix and left for
inspection. An entry that cannot even be renamed is ignored for the life of
the source.
"""

from __future__ import annotations

import asyncio
import logging
from collections import deque
from pathlib import Path

from pydantic import ValidationError

from xsnotify.relay.events import NotificationEvent
from xsnotify.relay.source import NotificationSource

logger = logging.getLogger(__name__)


class SpoolDirectorySource(NotificationSource):
    """Polling (and listening) source backed by a directory of JSON files."""

    name: str = "spool"
    supports_listener: bool = True
    supports_polling: bool = True

    def __init__(self, directory: Path, *, listen_interval: float = 0.25) -> None:
        self.directory = Path(directory)
        self.listen_interval = listen_interval
        self._pending: deque[NotificationEvent] = deque()
        self._skipped: set[str] = set()

    async def connect(self) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)

    async def poll(self) -> list[NotificationEvent]:
        events = list(self._pending)
        self._pending.clear()
        events.extend(await asyncio.to_thread(self._drain))
        return events

    async def listen(self) -> NotificationEvent:
        while not self._pending:
            self._pending.extend(await asyncio.to_thread(self._drain))
            if not self._pending:
                await asyncio.sleep(self.listen_interval)
        return self._pending.popleft()

    def _drain(self) -> list[NotificationEvent]:
        entries = []
        for path in self.directory.glob("*.json"):
            if path.name in self._skipped:
                continue
            try:
                entries.append((path.stat().st_mtime, path.name, path))
            except OSError:
                # Gone since the glob.
                continue

        events: list[NotificationEvent] = []
        for _, _, path in sorted(entries):
            try:
                data = path.read_bytes()
            except OSError as exc:
                logger.warning("Unreadable notification entry %s: %s", path.name, exc)
                self._set_aside(path)
                continue
            try:
                event = NotificationEvent.model_validate_json(data)
            except ValidationError:
                logger.warning("Malformed notification file %s", path.name, exc_info=True)
                self._set_aside(path)
                continue
            events.append(event)
            try:
                path.unlink()
            except FileNotFoundError:
                pass
            except OSError as exc:
                logger.warning("Could not remove consumed file %s: %s", path.name, exc)
                self._skipped.add(path.name)
        return events

    def _set_aside(self, path: Path) -> None:
        try:
            path.rename(path.with_name(path.name + ".bad"))
        except OSError as exc:
            logger.warning("Could not move %s aside (%s); ignoring it from now on", path.name, exc)
            self._skipped.add(path.name)
