from __future__ import annotations

import logging
from typing import Any, Dict

from ..lib.settings import merge_settings, terminal_overrides
from ..pipeline import set_step_result
from ._common import config_of, font_name_of, paths_of

logger = logging.getLogger(__name__)


class ConfigureTerminalStep:
    step_id = "60_configure_terminal"
    required = False

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        cfg = config_of(state)
        if not cfg.terminal_enabled:
            logger.info("Terminal settings disabled by config")
            set_step_result(state, self.step_id, True)
            return state

        overrides = terminal_overrides(
            font_name_of(state),
            cfg.font_size,
            experimental=cfg.terminal_experimental,
        )

        ok = True
        for path in paths_of(state).terminal_settings_targets():
            if not merge_settings(path, overrides, dry_run=cfg.dry_run):
                ok = False
        set_step_result(state, self.step_id, ok)
        return state
