"""
Relay events — the data flowing from the notification source to the overlay.

A NotificationEvent is what the source captured; a DisplayDirective is what
survives filtering and gets shown, annotated with its display duration.
"""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field


class NotificationEvent(BaseModel):
    """A single notification captured from the local machine."""

    model_config = ConfigDict(frozen=True)

    source_app: str
    title: str
    body: str = ""
    received_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )


class DisplayDirective(BaseModel):
    """One timed alert to render on the remote display."""

    model_config = ConfigDict(frozen=True)

    title: str
    body: str
    timeout: float  # seconds
    target_host: str
    target_port: int
