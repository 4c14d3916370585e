"""
SettingsEditor — the model behind the interactive settings editor.

Each setter takes the raw text typed by the user, validates it against the
NotifierConfig schema and, when valid, replaces the working snapshot and
saves it. Invalid input is rejected and the previous value is kept.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from xsnotify.core import read_config_file, save_config
from xsnotify.relay.config import NotifierConfig

logger = logging.getLogger(__name__)


class SettingsEditor:
    """Edits a NotifierConfig field by field, persisting each accepted change."""

    def __init__(
        self,
        settings: NotifierConfig | None = None,
        *,
        autosave: bool = True,
    ) -> None:
        self.settings = settings if settings is not None else read_config_file()
        self.current_skipped_app: str = ""
        self.autosave = autosave

    # ------------------------------------------------------------------
    # Field setters
    # ------------------------------------------------------------------

    def set_port(self, value: str) -> bool:
        return self._apply("port", value)

    def set_host(self, value: str) -> bool:
        return self._apply("host", value)

    def set_notification_strategy(self, value: str) -> bool:
        return self._apply("notification_strategy", value)

    def set_polling_rate(self, value: str) -> bool:
        return self._apply("polling_rate", value)

    def set_dynamic_timeout(self, value: bool) -> bool:
        return self._apply("dynamic_timeout", value)

    def set_default_timeout(self, value: str) -> bool:
        return self._apply("default_timeout", value)

    def set_reading_speed(self, value: str) -> bool:
        return self._apply("reading_speed", value)

    def set_min_timeout(self, value: str) -> bool:
        return self._apply("min_timeout", value)

    def set_max_timeout(self, value: str) -> bool:
        return self._apply("max_timeout", value)

    # ------------------------------------------------------------------
    # Skipped apps
    # ------------------------------------------------------------------

    def set_current_app(self, value: str) -> None:
        self.current_skipped_app = value

    def add_skipped_app(self) -> bool:
        """Add the app typed so far to the skip list."""
        app = self.current_skipped_app.strip()
        self.current_skipped_app = ""
        if not app or app in self.settings.skipped_apps:
            return False
        return self._apply("skipped_apps", (*self.settings.skipped_apps, app))

    def remove_skipped_app(self, app: str) -> bool:
        if app not in self.settings.skipped_apps:
            return False
        remaining = tuple(a for a in self.settings.skipped_apps if a != app)
        return self._apply("skipped_apps", remaining)

    # ------------------------------------------------------------------

    def _apply(self, field: str, value: Any) -> bool:
        data = self.settings.model_dump()
        data[field] = value
        try:
            updated = NotifierConfig.model_validate(data)
        except ValidationError as exc:
            logger.warning(
                "Rejected %s=%r: %s", field, value, exc.errors()[0]["msg"]
            )
            return False
        self.settings = updated
        if self.autosave:
            save_config(self.settings)
        return True
