from __future__ import annotations

import logging
from typing import Any, Dict

from ..lib.executables import lookup
from ..lib.pkg import ps_install_module, ps_module_available
from ..pipeline import set_step_result
from ._common import config_of, paths_of

logger = logging.getLogger(__name__)

MODULE_NAME = "PSFzf"


class InstallPSFzfStep:
    step_id = "40_install_psfzf"
    required = False

    def _shell(self, state: Dict[str, Any]) -> str | None:
        tool_dirs = paths_of(state).tool_dirs()
        # Prefer PowerShell 7; the module path differs between editions.
        for name in ("pwsh", "powershell"):
            exe = lookup(state, name, tool_dirs.get(name, []))
            if exe:
                return exe
        return None

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        cfg = config_of(state)

        shell = self._shell(state)
        if not shell:
            if not cfg.dry_run:
                logger.error("No PowerShell executable found; cannot install %s", MODULE_NAME)
                set_step_result(state, self.step_id, False)
                return state
            shell = "pwsh"

        if not cfg.force and ps_module_available(shell, MODULE_NAME, dry_run=cfg.dry_run):
            logger.info("%s module already installed", MODULE_NAME)
            set_step_result(state, self.step_id, True)
            return state

        ok = ps_install_module(shell, MODULE_NAME, force=cfg.force, dry_run=cfg.dry_run)
        set_step_result(state, self.step_id, ok)
        return state
