from __future__ import annotations

import logging
from typing import Any, Dict

from ..pipeline import set_step_result
from ._common import install_winget_tool

logger = logging.getLogger(__name__)

PACKAGE_ID = "junegunn.fzf"


class InstallFzfStep:
    step_id = "30_install_fzf"
    required = False

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        ok = install_winget_tool(state, "fzf", PACKAGE_ID)
        set_step_result(state, self.step_id, ok)
        return state
