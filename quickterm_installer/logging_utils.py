from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

from .lib.env import Paths

_CONFIGURED_ATTR = "_quickterm_configured"
_LOG_PATH_ATTR = "_quickterm_log_path"


def default_log_path() -> str:
    return str(Paths.from_env().default_log_path)


def configure_logging(
    log_path: Optional[str] = None,
    level: int = logging.INFO,
    also_console: bool = True,
) -> str:
    """Configure logging once for the whole run.

    The log file normally lives under ~/.quickterm. If that location is not
    writable we fall back to a file in the working directory.

    Returns the actual file path being used.
    """

    root = logging.getLogger()
    root.setLevel(level)

    requested = log_path or default_log_path()

    # Avoid duplicate handlers if configure_logging() is called multiple times.
    if getattr(root, _CONFIGURED_ATTR, False):
        return getattr(root, _LOG_PATH_ATTR, requested)

    fmt = logging.Formatter(
        fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S%z",
    )

    handlers: list[logging.Handler] = []
    try:
        Path(requested).parent.mkdir(parents=True, exist_ok=True)
        file_handler: logging.Handler = logging.FileHandler(requested, encoding="utf-8")
        chosen_path = requested
    except OSError:
        chosen_path = str(Path.cwd() / "quickterm-installer.log")
        file_handler = logging.FileHandler(chosen_path, encoding="utf-8")
    file_handler.setFormatter(fmt)
    handlers.append(file_handler)

    if also_console:
        console = logging.StreamHandler(sys.stderr)
        console.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
        handlers.append(console)

    for h in handlers:
        root.addHandler(h)

    setattr(root, _CONFIGURED_ATTR, True)
    setattr(root, _LOG_PATH_ATTR, chosen_path)

    logging.getLogger(__name__).info(
        "Logging initialized (requested=%s, actual=%s)", requested, chosen_path
    )
    return chosen_path
