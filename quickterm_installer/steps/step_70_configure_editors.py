from __future__ import annotations

import logging
from typing import Any, Dict

from ..lib.settings import editor_overrides, merge_settings
from ..pipeline import set_step_result
from ._common import config_of, font_name_of, paths_of

logger = logging.getLogger(__name__)


class ConfigureEditorsStep:
    step_id = "70_configure_editors"
    required = False

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        cfg = config_of(state)
        paths = paths_of(state)

        overrides = editor_overrides(font_name_of(state), cfg.font_size, editor_font=cfg.editor_font)

        ok = True
        configured: list[str] = []
        for editor in cfg.editors:
            try:
                settings_path = paths.editor_settings(editor)
            except ValueError as e:
                logger.warning("%s", e)
                ok = False
                continue

            # settings.json lives in <APPDATA>/<editor>/User; no app dir means not installed.
            if not settings_path.parent.parent.is_dir():
                logger.info("Skipping %s (not installed)", editor)
                continue

            if merge_settings(settings_path, overrides, dry_run=cfg.dry_run):
                configured.append(editor)
            else:
                ok = False

        state.setdefault("execution", {})["editors_configured"] = configured
        set_step_result(state, self.step_id, ok)
        return state
