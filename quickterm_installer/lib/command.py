from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from typing import Sequence

logger = logging.getLogger(__name__)

RC_NOT_FOUND = 127
RC_TIMEOUT = 124


@dataclass(frozen=True)
class CmdResult:
    argv: list[str]
    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0


def _display(argv: Sequence[str]) -> str:
    return subprocess.list2cmdline(list(argv))


def _clean_output(text: str | None) -> str:
    """Drop winget/PowerShell progress redraws, keeping the last state of each line."""

    if not text:
        return ""
    lines = [ln.rstrip("\r").rsplit("\r", 1)[-1].rstrip() for ln in text.split("\n")]
    return "\n".join(ln for ln in lines if ln.strip(" -\\|/")) + "\n"


def run_cmd(
    argv: Sequence[str],
    *,
    check: bool = True,
    cwd: str | None = None,
    timeout: float | None = None,
    dry_run: bool = False,
) -> CmdResult:
    """Run an installer command and capture its output.

    Missing executables and timeouts come back as failed results
    (rc 127 and 124), or as RuntimeError when ``check`` is set.
    With ``dry_run`` the command is only logged.
    """

    args = [str(a) for a in argv]
    logger.info("CMD %s", _display(args))

    if dry_run:
        return CmdResult(argv=args, returncode=0, stdout="", stderr="")

    try:
        proc = subprocess.run(
            args,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            cwd=cwd,
            timeout=timeout,
        )
    except FileNotFoundError as e:
        result = CmdResult(argv=args, returncode=RC_NOT_FOUND, stdout="", stderr=str(e))
    except subprocess.TimeoutExpired:
        result = CmdResult(argv=args, returncode=RC_TIMEOUT, stdout="", stderr=f"timed out after {timeout}s")
    else:
        result = CmdResult(
            argv=args,
            returncode=proc.returncode,
            stdout=_clean_output(proc.stdout),
            stderr=_clean_output(proc.stderr),
        )
        if result.stdout.strip():
            logger.debug("stdout: %s", result.stdout.strip())
        if result.stderr.strip():
            logger.debug("stderr: %s", result.stderr.strip())

    if check and not result.ok:
        raise RuntimeError(f"{_display(args)} exited with {result.returncode}: {result.stderr.strip()}")
    return result
