from __future__ import annotations

import logging
import os
from typing import Any, Dict

from ..lib.themes import POSH_THEME_ENV, resolve_theme
from ..pipeline import set_step_result
from ._common import config_of

logger = logging.getLogger(__name__)


class ResolveThemeStep:
    step_id = "10_resolve_theme"
    required = False

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        cfg = config_of(state)
        state["theme"] = resolve_theme(cfg.theme, os.environ.get(POSH_THEME_ENV), default=cfg.default_theme)
        logger.info("Theme: %s", state["theme"])
        set_step_result(state, self.step_id, True)
        return state
