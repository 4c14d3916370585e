"""Pytest configuration and fixtures."""

import pytest
from pathlib import Path
import tempfile
import shutil

from xsnotify.relay.config import NotifierConfig
from xsnotify.relay.events import NotificationEvent


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test artifacts."""
    dirpath = tempfile.mkdtemp()
    yield Path(dirpath)
    shutil.rmtree(dirpath, ignore_errors=True)


@pytest.fixture
def config_home(monkeypatch, temp_dir):
    """Point the config file at a temp dir and clear XSNOTIF_* variables."""
    import os

    for key in list(os.environ):
        if key.upper().startswith("XSNOTIF_"):
            monkeypatch.delenv(key)

    home = temp_dir / ".xsnotify"
    monkeypatch.setattr("xsnotify.core.XSNOTIFY_HOME", home)
    monkeypatch.setattr("xsnotify.core.XSNOTIFY_CONFIG_FILE", home / "config.yaml")
    monkeypatch.setattr("xsnotify.core.XSNOTIFY_SPOOL_DIR", home / "spool")
    return home


@pytest.fixture
def sample_config():
    return NotifierConfig(skipped_apps=("VRCX",))


@pytest.fixture
def sample_event():
    return NotificationEvent(source_app="Discord", title="Hi", body="there")
