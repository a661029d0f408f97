from __future__ import annotations

import ctypes
import logging
import os

logger = logging.getLogger(__name__)


def is_elevated() -> bool:
    """Best-effort check for an administrator (or root) process."""

    if os.name == "nt":
        try:
            return bool(ctypes.windll.shell32.IsUserAnAdmin())  # type: ignore[attr-defined]
        except (AttributeError, OSError):
            return False
    geteuid = getattr(os, "geteuid", None)
    return bool(geteuid and geteuid() == 0)
