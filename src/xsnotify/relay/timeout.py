"""
Filtering and display-duration computation.

Pure functions: given an event and the config snapshot, decide whether the
event is shown and for how long.
"""

from __future__ import annotations

from xsnotify.relay.config import NotifierConfig
from xsnotify.relay.events import DisplayDirective, NotificationEvent


def count_words(text: str) -> int:
    return len(text.split())


def estimate_timeout(title: str, body: str, reading_speed: float) -> float:
    """Seconds needed to read title and body at `reading_speed` words per minute."""
    words = count_words(title) + count_words(body)
    return words * 60.0 / reading_speed


def evaluate(
    event: NotificationEvent, config: NotifierConfig
) -> DisplayDirective | None:
    """Turn an event into a directive, or None if its app is skipped."""
    if event.source_app in config.skipped_apps:
        return None

    if config.dynamic_timeout:
        estimate = estimate_timeout(event.title, event.body, config.reading_speed)
        timeout = min(max(estimate, config.min_timeout), config.max_timeout)
    else:
        timeout = config.default_timeout

    return DisplayDirective(
        title=event.title,
        body=event.body,
        timeout=timeout,
        target_host=config.host,
        target_port=config.port,
    )
