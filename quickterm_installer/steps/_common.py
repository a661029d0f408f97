from __future__ import annotations

import logging
import os
from typing import Any, Dict, Optional

from ..config import SetupConfig
from ..lib.env import Paths
from ..lib.executables import find_executable, lookup, remember
from ..lib.fonts import load_font_spec
from ..lib.pkg import winget_has_package, winget_install
from ..lib.themes import POSH_THEME_ENV, resolve_theme

logger = logging.getLogger(__name__)


def config_of(state: Dict[str, Any]) -> SetupConfig:
    return SetupConfig(raw=state.get("config") or {})


def paths_of(state: Dict[str, Any]) -> Paths:
    paths = state.get("paths")
    if paths is None:
        paths = state["paths"] = Paths.from_env()
    return paths


def theme_of(state: Dict[str, Any]) -> str:
    theme = state.get("theme")
    if not theme:
        cfg = config_of(state)
        theme = state["theme"] = resolve_theme(cfg.theme, os.environ.get(POSH_THEME_ENV), default=cfg.default_theme)
    return theme


def font_name_of(state: Dict[str, Any]) -> str:
    font = state.get("font") or {}
    if font.get("display_name"):
        return str(font["display_name"])
    cfg = config_of(state)
    return cfg.font_name or load_font_spec(cfg.font_variant).display_name


def install_winget_tool(state: Dict[str, Any], name: str, package_id: str) -> bool:
    """Check for ``name``, install it with winget if missing, and record where it lives."""

    cfg = config_of(state)
    tool_dirs = paths_of(state).tool_dirs()
    search = tool_dirs.get(name, [])

    existing = lookup(state, name, search)
    if existing and not cfg.force:
        logger.info("%s already installed at %s", name, existing)
        return True

    winget = lookup(state, "winget", tool_dirs.get("winget", []))
    if not winget:
        if not cfg.dry_run:
            logger.error("winget not found; cannot install %s", name)
            return False
        winget = "winget"

    if not cfg.force and winget_has_package(winget, package_id, dry_run=cfg.dry_run):
        logger.warning(
            "%s is installed according to winget (%s) but was not found on PATH or in %s",
            name,
            package_id,
            ", ".join(map(str, search)),
        )
        return True

    if not winget_install(winget, package_id, force=cfg.force, dry_run=cfg.dry_run):
        return False

    location: Optional[str] = find_executable(name, search) or existing
    if location is None and cfg.dry_run:
        location = name
    if location is None:
        logger.warning("%s installed but not found on PATH or in %s", name, ", ".join(map(str, search)))
        return False
    remember(state, name, location)
    logger.info("%s installed at %s", name, location)
    return True
