"""
Configuration snapshot for the relay.

A NotifierConfig is built once at startup and shared read-only with the
source and sink loops. Changing a value means building a new snapshot
and restarting the process.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator


class NotificationStrategy(str, Enum):
    LISTENER = "listener"
    POLLING = "polling"


class NotifierConfig(BaseModel):
    """Immutable relay configuration."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    port: int = Field(default=42069, ge=1, le=65535)
    host: str = Field(default="localhost", min_length=1)
    notification_strategy: NotificationStrategy = NotificationStrategy.LISTENER
    polling_rate: int = Field(default=250, gt=0)  # milliseconds

    dynamic_timeout: bool = True
    default_timeout: float = Field(default=5.0, ge=0)  # seconds

    reading_speed: float = Field(default=238.0, gt=0)  # words per minute
    min_timeout: float = Field(default=2.0, ge=0)
    max_timeout: float = Field(default=120.0, ge=0)

    skipped_apps: tuple[str, ...] = ()

    @model_validator(mode="after")
    def _check_timeout_range(self) -> "NotifierConfig":
        if self.min_timeout > self.max_timeout:
            raise ValueError(
                f"min_timeout ({self.min_timeout}) must not exceed "
                f"max_timeout ({self.max_timeout})"
            )
        return self
