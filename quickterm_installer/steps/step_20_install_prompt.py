from __future__ import annotations

import logging
from typing import Any, Dict

from ..pipeline import set_step_result
from ._common import install_winget_tool

logger = logging.getLogger(__name__)

PACKAGE_ID = "JanDeDobbeleer.OhMyPosh"


class InstallPromptStep:
    """oh-my-posh renders the prompt; the profile is useless without it."""

    step_id = "20_install_prompt"
    required = True

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        ok = install_winget_tool(state, "oh-my-posh", PACKAGE_ID)
        set_step_result(state, self.step_id, ok)
        return state
