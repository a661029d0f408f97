"""Executable lookup without touching the process PATH.

Freshly installed tools often land in per-user directories that the
running process does not see on PATH. Lookups search PATH first, then
the known install dirs, and the result is recorded in
``state["executables"]`` for later steps.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import Any, Dict, Iterable, Optional

logger = logging.getLogger(__name__)


def find_executable(name: str, extra_dirs: Iterable[Path] = ()) -> Optional[str]:
    found = shutil.which(name)
    if found:
        return found
    for d in extra_dirs:
        found = shutil.which(name, path=str(d))
        if found:
            return found
    return None


def resolved(state: Dict[str, Any]) -> Dict[str, str]:
    return state.setdefault("executables", {})


def remember(state: Dict[str, Any], name: str, location: Optional[str]) -> Optional[str]:
    if location:
        resolved(state)[name] = location
        logger.debug("Resolved %s -> %s", name, location)
    return location


def lookup(state: Dict[str, Any], name: str, extra_dirs: Iterable[Path] = ()) -> Optional[str]:
    """Return the recorded location for ``name``, resolving and recording it if needed."""

    known = resolved(state).get(name)
    if known:
        return known
    return remember(state, name, find_executable(name, extra_dirs))
