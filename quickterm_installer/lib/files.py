from __future__ import annotations

import logging
import os
import shutil
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

BACKUP_TIMESTAMP_FORMAT = "%Y%m%d-%H%M%S"


def backup_path_for(path: Path, *, now: Optional[datetime] = None) -> Path:
    """Return a free ``<path>.backup.<yyyyMMdd-HHmmss>`` name.

    Two runs inside the same second get a ``-N`` suffix so an earlier
    backup is never overwritten.
    """

    ts = (now or datetime.now()).strftime(BACKUP_TIMESTAMP_FORMAT)
    candidate = path.with_name(f"{path.name}.backup.{ts}")
    n = 1
    while candidate.exists():
        candidate = path.with_name(f"{path.name}.backup.{ts}-{n}")
        n += 1
    return candidate


def backup_file(path: str | Path, *, now: Optional[datetime] = None) -> Optional[Path]:
    """Copy ``path`` to a timestamped sibling; return None if there is nothing to back up."""

    p = Path(path)
    if not p.is_file():
        return None

    dest = backup_path_for(p, now=now)
    shutil.copy2(p, dest)
    logger.info("Backed up %s -> %s", p, dest)
    return dest


def atomic_write_text(path: str | Path, text: str, *, encoding: str = "utf-8") -> None:
    """Write ``text`` to a temp file next to ``path`` and rename it into place."""

    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(prefix=f".{p.name}.", suffix=".tmp", dir=str(p.parent))
    try:
        with os.fdopen(fd, "w", encoding=encoding, newline="") as f:
            f.write(text)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_name, p)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except OSError:
            pass
        raise
