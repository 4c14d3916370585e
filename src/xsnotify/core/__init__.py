"""
Core configuration plumbing for XS Notify.

Provides:
- Path constants (XSNOTIFY_HOME, XSNOTIFY_CONFIG_FILE, XSNOTIFY_SPOOL_DIR)
- First-run creation of the config file from the bundled default
- Layered config loading (defaults < file < XSNOTIF_* env < command line)
- Config saving
"""

from __future__ import annotations

from importlib import resources
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from xsnotify.relay.config import NotificationStrategy, NotifierConfig


# ---------------------------------------------------------------------------
# Path constants
# ---------------------------------------------------------------------------

XSNOTIFY_HOME: Path = Path.home() / ".xsnotify"
XSNOTIFY_CONFIG_FILE: Path = XSNOTIFY_HOME / "config.yaml"
XSNOTIFY_SPOOL_DIR: Path = XSNOTIFY_HOME / "spool"

ENV_PREFIX = "XSNOTIF_"


class ConfigError(Exception):
    """The configuration could not be read, merged or validated."""


# ---------------------------------------------------------------------------
# Environment layer
# ---------------------------------------------------------------------------


class EnvOverrides(BaseSettings):
    """Config values taken from XSNOTIF_* environment variables.

    List values are JSON, e.g. ``XSNOTIF_SKIPPED_APPS='["VRCX", "Steam"]'``.
    """

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        case_sensitive=False,
        extra="ignore",
    )

    port: Optional[int] = None
    host: Optional[str] = None
    notification_strategy: Optional[NotificationStrategy] = None
    polling_rate: Optional[int] = None
    dynamic_timeout: Optional[bool] = None
    default_timeout: Optional[float] = None
    reading_speed: Optional[float] = None
    min_timeout: Optional[float] = None
    max_timeout: Optional[float] = None
    skipped_apps: Optional[list[str]] = None


# ---------------------------------------------------------------------------
# Config loading/saving
# ---------------------------------------------------------------------------


def default_config_text() -> str:
    """The bundled default config file."""
    return resources.files("xsnotify").joinpath("default_config.yaml").read_text()


def ensure_config_file() -> bool:
    """Write the bundled default config if none exists. Returns True if written."""
    if XSNOTIFY_CONFIG_FILE.exists():
        return False
    try:
        XSNOTIFY_CONFIG_FILE.parent.mkdir(parents=True, exist_ok=True)
        XSNOTIFY_CONFIG_FILE.write_text(default_config_text())
    except OSError as exc:
        raise ConfigError(f"Cannot create {XSNOTIFY_CONFIG_FILE}: {exc}") from exc
    return True


def _read_file_layer() -> dict[str, Any]:
    if not XSNOTIFY_CONFIG_FILE.exists():
        return {}
    try:
        data = yaml.safe_load(XSNOTIFY_CONFIG_FILE.read_text())
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigError(f"Cannot read {XSNOTIFY_CONFIG_FILE}: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"{XSNOTIFY_CONFIG_FILE} must contain a mapping of settings")
    return data


def read_config_file() -> NotifierConfig:
    """Load the persisted config alone, without environment or CLI layers."""
    try:
        return NotifierConfig.model_validate(_read_file_layer())
    except ValidationError as exc:
        raise ConfigError(f"Invalid config in {XSNOTIFY_CONFIG_FILE}:\n{exc}") from exc


def load_config(overrides: dict[str, Any] | None = None) -> NotifierConfig:
    """Build the process config snapshot from every layer.

    `overrides` holds command-line values; None entries mean "not given".
    """
    ensure_config_file()
    merged = _read_file_layer()

    try:
        merged.update(EnvOverrides().model_dump(exclude_none=True))
    except ValidationError as exc:
        raise ConfigError(f"Invalid {ENV_PREFIX}* environment variable:\n{exc}") from exc

    merged.update({k: v for k, v in (overrides or {}).items() if v is not None})

    try:
        return NotifierConfig.model_validate(merged)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration:\n{exc}") from exc


def save_config(config: NotifierConfig) -> None:
    """Save configuration to YAML file."""
    XSNOTIFY_CONFIG_FILE.parent.mkdir(parents=True, exist_ok=True)
    XSNOTIFY_CONFIG_FILE.write_text(
        yaml.dump(config.model_dump(mode="json"), default_flow_style=False, sort_keys=False)
    )


__all__ = [
    "XSNOTIFY_HOME",
    "XSNOTIFY_CONFIG_FILE",
    "XSNOTIFY_SPOOL_DIR",
    "ENV_PREFIX",
    "ConfigError",
    "EnvOverrides",
    "NotifierConfig",
    "default_config_text",
    "ensure_config_file",
    "read_config_file",
    "load_config",
    "save_config",
]
