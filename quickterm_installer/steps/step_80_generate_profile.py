from __future__ import annotations

import logging
from typing import Any, Dict

from ..lib.profile import generate_profile
from ..pipeline import set_step_result
from ._common import config_of, font_name_of, paths_of, theme_of

logger = logging.getLogger(__name__)


class GenerateProfileStep:
    step_id = "80_generate_profile"
    required = False

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        cfg = config_of(state)
        paths = paths_of(state)
        theme = theme_of(state)
        font = font_name_of(state)

        ok = True
        for target in cfg.profile_targets:
            try:
                generate_profile(paths.profile_path(target), theme, font, cfg.profile_flags, dry_run=cfg.dry_run)
            except (OSError, ValueError) as e:
                logger.warning("Could not write %s profile: %s", target, e)
                ok = False
        set_step_result(state, self.step_id, ok)
        return state
