"""
Release check against the project's GitHub releases.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import httpx
from packaging.version import InvalidVersion, Version

logger = logging.getLogger(__name__)

GITHUB_OWNER = "Erallie"
GITHUB_REPO = "xs-notify"
RELEASES_API = f"https://api.github.com/repos/{GITHUB_OWNER}/{GITHUB_REPO}/releases/latest"
RELEASE_PAGE = f"https://github.com/{GITHUB_OWNER}/{GITHUB_REPO}/releases/tag/v{{version}}"


@dataclass
class UpdateStatus:
    current: str
    latest: Optional[str] = None

    @property
    def update_available(self) -> bool:
        if not self.latest:
            return False
        try:
            return Version(self.latest) > Version(self.current)
        except InvalidVersion:
            return False

    @property
    def download_url(self) -> str:
        return RELEASE_PAGE.format(version=self.latest) if self.latest else ""


async def fetch_latest_version(client: httpx.AsyncClient) -> str:
    """Return the latest release version, without its leading "v"."""
    resp = await client.get(
        RELEASES_API,
        headers={"User-Agent": "xs-notify", "Accept": "application/vnd.github+json"},
    )
    resp.raise_for_status()
    tag = resp.json()["tag_name"]
    version = tag[1:] if tag.startswith("v") else tag
    Version(version)  # raises InvalidVersion for junk tags
    return version


async def check_for_update(current: str, timeout: float = 5.0) -> UpdateStatus:
    """Look up the latest release. Failures are logged, never raised."""
    status = UpdateStatus(current=current)
    try:
        async with httpx.AsyncClient(timeout=timeout) as client:
            status.latest = await fetch_latest_version(client)
    except (httpx.HTTPError, InvalidVersion, KeyError, ValueError) as exc:
        logger.warning("Update check failed: %s", exc)
    return status
