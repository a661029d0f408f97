from __future__ import annotations

import logging
import re
from typing import FrozenSet, Iterable, Optional

from .manifests import load_themes_manifest

logger = logging.getLogger(__name__)

POSH_THEME_ENV = "POSH_THEME"

# ...\themes\atomic.omp.json -> "atomic"
_THEME_FILE = re.compile(r"(?:^|[\\/])(?P<name>[^\\/]+?)\.[^.\\/]+\.json$")
_PATH_CHARS = ("/", "\\", ":")


def load_theme_catalog() -> FrozenSet[str]:
    manifest = load_themes_manifest()
    themes = manifest.get("themes") or []
    if not isinstance(themes, list):
        raise ValueError("themes.yaml: themes must be a list")
    return frozenset(str(t) for t in themes)


def theme_from_env_value(value: Optional[str]) -> Optional[str]:
    """Extract a theme name from a POSH_THEME value, or None if it is malformed.

    Accepts a full path to a theme file (``<name>.<ext>.json``) or a bare
    name without path separators.
    """

    if value is None:
        return None
    value = value.strip().strip('"').strip("'")
    if not value:
        return None

    m = _THEME_FILE.search(value)
    if m:
        return m.group("name")

    if not any(c in value for c in _PATH_CHARS):
        return value

    return None


def default_theme() -> str:
    return str(load_themes_manifest().get("default") or "quick-term")


def resolve_theme(
    cli_theme: Optional[str],
    env_override: Optional[str] = None,
    *,
    catalog: Optional[Iterable[str]] = None,
    default: Optional[str] = None,
) -> str:
    """Pick the theme for this run. Never raises; falls back to ``default``.

    ``default`` is the catalog's default theme unless a variant supplies
    its own. At most one warning is logged per call.
    """

    known = frozenset(catalog) if catalog is not None else load_theme_catalog()
    fallback = default or default_theme()

    candidate = cli_theme
    malformed = False
    if env_override is not None and env_override.strip():
        from_env = theme_from_env_value(env_override)
        if from_env is None:
            malformed = True
        else:
            logger.info("Theme taken from %s: %s", POSH_THEME_ENV, from_env)
            candidate = from_env

    unknown = bool(candidate) and candidate not in known
    if malformed:
        # One warning per call; an unknown theme takes precedence.
        log = logger.info if unknown else logger.warning
        log("Ignoring malformed %s value: %r", POSH_THEME_ENV, env_override)

    if not candidate:
        logger.info("No theme given; using default theme %r", fallback)
        return fallback
    if unknown:
        logger.warning("Unknown theme %r; using default theme %r", candidate, fallback)
        return fallback
    return candidate
