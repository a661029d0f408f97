from __future__ import annotations

import logging
from typing import Any, Dict, List

from ..lib.command import run_cmd
from ..lib.executables import lookup
from ..lib.settings import get_path, load_document
from ..pipeline import add_warning, set_step_result
from ._common import config_of, font_name_of, paths_of, theme_of

logger = logging.getLogger(__name__)


class VerifyStep:
    step_id = "90_verify"
    required = False

    def _check_tools(self, state: Dict[str, Any]) -> List[str]:
        problems: List[str] = []
        tool_dirs = paths_of(state).tool_dirs()
        for name in ("oh-my-posh", "fzf"):
            exe = lookup(state, name, tool_dirs.get(name, []))
            if not exe:
                problems.append(f"{name} not found")
                continue
            r = run_cmd([exe, "--version"], check=False)
            if not r.ok:
                problems.append(f"{name} --version exited with {r.returncode}")
            else:
                logger.info("%s %s", name, r.stdout.strip())
        return problems

    def _check_files(self, state: Dict[str, Any]) -> List[str]:
        cfg = config_of(state)
        paths = paths_of(state)
        theme = theme_of(state)
        font = font_name_of(state)
        problems: List[str] = []

        for target in cfg.profile_targets:
            p = paths.profile_path(target)
            if not p.is_file():
                problems.append(f"profile missing: {p}")
            elif f"{theme}.omp.json" not in p.read_text(encoding="utf-8"):
                problems.append(f"profile {p} does not reference theme {theme}")

        if cfg.terminal_enabled:
            for p in paths.terminal_settings_targets():
                face = get_path(load_document(p), "profiles.defaults.font.face")
                if face != font:
                    problems.append(f"{p}: font face is {face!r}, expected {font!r}")
        return problems

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        cfg = config_of(state)
        if not cfg.verify or cfg.dry_run:
            logger.info("Verification skipped")
            set_step_result(state, self.step_id, True)
            return state

        problems = self._check_tools(state) + self._check_files(state)
        for problem in problems:
            logger.warning("Verify: %s", problem)
            add_warning(state, verify=problem)

        if not problems:
            logger.info("Verification passed")
        set_step_result(state, self.step_id, not problems)
        return state
