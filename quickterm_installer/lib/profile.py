"""PowerShell profile generation.

The profile is regenerated from scratch on every run. Anything the user
added by hand is only kept in the timestamped backup of the previous
file.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from .files import atomic_write_text, backup_file

logger = logging.getLogger(__name__)

GENERATED_MARKER = "# Auto-generated by quickterm-installer. Changes are overwritten on the next run."


@dataclass(frozen=True)
class ProfileFlags:
    styling: bool = True
    intellisense: bool = True
    verbose: bool = False


def _ps_quote(value: str) -> str:
    return "'" + value.replace("'", "''") + "'"


def _header(theme: str, font: str) -> List[str]:
    return [
        "# " + "=" * 70,
        GENERATED_MARKER,
        f"# Theme: {theme}",
        f"# Font:  {font}",
        "# A backup of the previous profile is written next to this file.",
        "# " + "=" * 70,
        "",
    ]


def _prompt_block(theme: str) -> List[str]:
    return [
        "# Prompt",
        f'oh-my-posh init pwsh --config "$env:POSH_THEMES_PATH\\{theme}.omp.json" | Invoke-Expression',
        "",
    ]


def _fzf_block() -> List[str]:
    return [
        "# Fuzzy finder",
        "if (Get-Module -ListAvailable -Name PSFzf) {",
        "    Import-Module PSFzf",
        "    Set-PsFzfOption -PSReadlineChordProvider 'Ctrl+t' -PSReadlineChordReverseHistory 'Ctrl+r'",
        "}",
        "",
    ]


def _styling_block() -> List[str]:
    return [
        "# PSReadLine colors",
        "Set-PSReadLineOption -Colors @{",
        "    Command   = 'Cyan'",
        "    Parameter = 'DarkCyan'",
        "    String    = 'Green'",
        "    Operator  = 'Magenta'",
        "    Variable  = 'Yellow'",
        "    Comment   = 'DarkGray'",
        "}",
        "",
    ]


def _intellisense_block() -> List[str]:
    return [
        "# Predictive IntelliSense",
        "Set-PSReadLineOption -PredictionSource History",
        "Set-PSReadLineOption -PredictionViewStyle ListView",
        "Set-PSReadLineOption -EditMode Windows",
        "Set-PSReadLineKeyHandler -Key Tab -Function MenuComplete",
        "Set-PSReadLineKeyHandler -Key UpArrow -Function HistorySearchBackward",
        "Set-PSReadLineKeyHandler -Key DownArrow -Function HistorySearchForward",
        "",
    ]


def _verbose_block(theme: str, font: str) -> List[str]:
    return [
        "# Helpers",
        "Set-Alias -Name ll -Value Get-ChildItem",
        "function which($name) { Get-Command $name -ErrorAction SilentlyContinue | Select-Object -ExpandProperty Source }",
        "function Show-TerminalSetup {",
        f"    Write-Host ('Theme: ' + {_ps_quote(theme)})",
        f"    Write-Host ('Font:  ' + {_ps_quote(font)})",
        "}",
        "",
    ]


def render_profile(theme: str, font: str, flags: ProfileFlags) -> str:
    lines: List[str] = []
    lines += _header(theme, font)
    lines += _prompt_block(theme)
    lines += _fzf_block()
    if flags.styling:
        lines += _styling_block()
    if flags.intellisense:
        lines += _intellisense_block()
    if flags.verbose:
        lines += _verbose_block(theme, font)
    return "\n".join(lines).rstrip("\n") + "\n"


def generate_profile(
    profile_path: str | Path,
    theme: str,
    font: str,
    flags: ProfileFlags,
    *,
    dry_run: bool = False,
    now: Optional[datetime] = None,
) -> None:
    """Write a fresh profile, backing up whatever was there before."""

    p = Path(profile_path)
    text = render_profile(theme, font, flags)

    if dry_run:
        logger.info("Would write profile %s (%d lines, theme=%s)", p, text.count("\n"), theme)
        return

    p.parent.mkdir(parents=True, exist_ok=True)
    backup_file(p, now=now)
    atomic_write_text(p, text)
    logger.info("Profile written: %s (theme=%s font=%s)", p, theme, font)
