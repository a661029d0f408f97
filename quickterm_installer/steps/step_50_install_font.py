from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict

from ..lib.executables import lookup
from ..lib.fonts import font_installed, install_font_auto, install_font_manual, load_font_spec
from ..pipeline import set_step_result
from ._common import config_of, paths_of

logger = logging.getLogger(__name__)


class InstallFontStep:
    step_id = "50_install_font"
    required = False

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        cfg = config_of(state)
        paths = paths_of(state)

        spec = load_font_spec(cfg.font_variant)
        # An explicit --font spelling wins over the catalog's family name.
        display_name = cfg.font_name or spec.display_name
        state["font"] = {"key": spec.key, "display_name": display_name, "installed": False}

        if not cfg.force and font_installed(spec, paths.font_dirs):
            logger.info("%s already installed", spec.display_name)
            state["font"]["installed"] = True
            set_step_result(state, self.step_id, True)
            return state

        if cfg.manual_font_install:
            download_dir = Path(cfg.manual_font_dir) if cfg.manual_font_dir else paths.home / "Downloads"
            ok = install_font_manual(spec, download_dir, dry_run=cfg.dry_run)
        else:
            omp = lookup(state, "oh-my-posh", paths.tool_dirs().get("oh-my-posh", []))
            if not omp:
                logger.error("oh-my-posh is required to install %s automatically", spec.display_name)
                set_step_result(state, self.step_id, False)
                return state
            ok = install_font_auto(omp, spec, dry_run=cfg.dry_run)

        if ok and not cfg.dry_run and not font_installed(spec, paths.font_dirs):
            logger.warning("%s not found in %s after install", spec.display_name, ", ".join(map(str, paths.font_dirs)))

        state["font"]["installed"] = ok
        logger.info("Font: %s (installed=%s)", display_name, ok)
        set_step_result(state, self.step_id, ok)
        return state
