from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Mapping, Optional

TERMINAL_PACKAGES = (
    "Microsoft.WindowsTerminal_8wekyb3d8bbwe",
    "Microsoft.WindowsTerminalPreview_8wekyb3d8bbwe",
)

# Directory names under %APPDATA% for each supported editor.
EDITOR_DIRS = {
    "code": "Code",
    "code-insiders": "Code - Insiders",
    "cursor": "Cursor",
    "vscodium": "VSCodium",
}

PROFILE_DIRS = {
    "pwsh": "PowerShell",
    "windows-powershell": "WindowsPowerShell",
}
PROFILE_FILENAME = "Microsoft.PowerShell_profile.ps1"


@dataclass(frozen=True)
class Paths:
    home: Path
    local_app_data: Path
    app_data: Path
    windir: Path

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Paths":
        env = os.environ if environ is None else environ
        home = Path(env.get("USERPROFILE") or env.get("HOME") or os.path.expanduser("~"))
        local = Path(env.get("LOCALAPPDATA") or home / "AppData" / "Local")
        roaming = Path(env.get("APPDATA") or home / "AppData" / "Roaming")
        windir = Path(env.get("WINDIR") or env.get("SystemRoot") or "C:/Windows")
        return cls(home=home, local_app_data=local, app_data=roaming, windir=windir)

    @property
    def documents(self) -> Path:
        return self.home / "Documents"

    def terminal_settings_candidates(self) -> List[Path]:
        return [
            self.local_app_data / "Packages" / pkg / "LocalState" / "settings.json"
            for pkg in TERMINAL_PACKAGES
        ]

    def terminal_settings_targets(self) -> List[Path]:
        """Settings files that exist, or the stable terminal's path if none do."""

        candidates = self.terminal_settings_candidates()
        existing = [p for p in candidates if p.exists()]
        return existing or candidates[:1]

    def editor_settings(self, editor: str) -> Path:
        try:
            dirname = EDITOR_DIRS[editor]
        except KeyError:
            raise ValueError(f"Unknown editor: {editor} (known: {', '.join(sorted(EDITOR_DIRS))})") from None
        return self.app_data / dirname / "User" / "settings.json"

    def profile_path(self, target: str = "pwsh") -> Path:
        try:
            dirname = PROFILE_DIRS[target]
        except KeyError:
            raise ValueError(f"Unknown profile target: {target}") from None
        return self.documents / dirname / PROFILE_FILENAME

    @property
    def font_dirs(self) -> List[Path]:
        return [
            self.windir / "Fonts",
            self.local_app_data / "Microsoft" / "Windows" / "Fonts",
        ]

    def tool_dirs(self) -> Dict[str, List[Path]]:
        """Per-user install locations that may not be on PATH yet in this process."""

        winget_links = self.local_app_data / "Microsoft" / "WinGet" / "Links"
        return {
            "oh-my-posh": [
                self.local_app_data / "Programs" / "oh-my-posh" / "bin",
                winget_links,
            ],
            "fzf": [winget_links],
            "winget": [self.local_app_data / "Microsoft" / "WindowsApps"],
            "pwsh": [Path("C:/Program Files/PowerShell/7")],
            "powershell": [self.windir / "System32" / "WindowsPowerShell" / "v1.0"],
        }

    @property
    def default_log_path(self) -> Path:
        return self.home / ".quickterm" / "quickterm-installer.log"
