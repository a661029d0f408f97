"""Pytest configuration and common fixtures for quickterm-installer tests."""

import logging
import os
import sys

import pytest

# Add the project root to the Python path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


@pytest.fixture(autouse=True)
def no_posh_theme(monkeypatch):
    """Keep the developer's own POSH_THEME out of theme resolution."""
    monkeypatch.delenv("POSH_THEME", raising=False)


@pytest.fixture
def user_home(tmp_path, monkeypatch):
    """Point every per-user location at a temporary Windows-like profile."""
    home = tmp_path / "home"
    local = home / "AppData" / "Local"
    roaming = home / "AppData" / "Roaming"
    windir = tmp_path / "Windows"
    for d in (local, roaming, windir / "Fonts"):
        d.mkdir(parents=True)

    monkeypatch.setenv("USERPROFILE", str(home))
    monkeypatch.setenv("LOCALAPPDATA", str(local))
    monkeypatch.setenv("APPDATA", str(roaming))
    monkeypatch.setenv("WINDIR", str(windir))
    return home


@pytest.fixture
def reset_logging():
    """Undo handlers installed by configure_logging()."""
    root = logging.getLogger()
    before = list(root.handlers)
    level = root.level
    yield
    for h in list(root.handlers):
        if h not in before:
            root.removeHandler(h)
            h.close()
    for attr in ("_quickterm_configured", "_quickterm_log_path"):
        if hasattr(root, attr):
            delattr(root, attr)
    root.setLevel(level)
