from __future__ import annotations

import argparse
import logging
from typing import Any, Callable, Dict, Optional

import yaml

from .config import DEFAULT_VARIANT, SetupConfig, build_config, variant_names
from .lib.env import Paths
from .lib.privileges import is_elevated
from .logging_utils import configure_logging
from .pipeline import SetupAborted, run_pipeline
from .steps import (
    ConfigureEditorsStep,
    ConfigureTerminalStep,
    GenerateProfileStep,
    InstallFontStep,
    InstallFzfStep,
    InstallPromptStep,
    InstallPSFzfStep,
    ResolveThemeStep,
    VerifyStep,
)

logger = logging.getLogger(__name__)


def build_steps():
    return [
        ResolveThemeStep(),
        InstallPromptStep(),
        InstallFzfStep(),
        InstallPSFzfStep(),
        InstallFontStep(),
        ConfigureTerminalStep(),
        ConfigureEditorsStep(),
        GenerateProfileStep(),
        VerifyStep(),
    ]


def confirm_elevated(*, assume_yes: bool = False, prompt: Optional[Callable[[str], str]] = None) -> None:
    """Ask before running as administrator; declining aborts the run."""

    if not is_elevated():
        return

    logger.warning("Running elevated: per-user tools and settings will belong to the administrator account")
    if assume_yes:
        return

    try:
        answer = (prompt or input)("Continue anyway? [y/N] ")
    except EOFError:
        answer = ""
    if answer.strip().lower() not in {"y", "yes"}:
        raise SetupAborted("Declined to continue in an elevated session")


def run(
    *,
    config: SetupConfig,
    log_path: Optional[str] = None,
    start_at: Optional[str] = None,
    stop_after: Optional[str] = None,
    assume_yes: bool = False,
    log_level: int = logging.INFO,
    paths: Optional[Paths] = None,
) -> Dict[str, Any]:
    """Run the setup pipeline and return the final state."""

    actual_log_path = configure_logging(log_path=log_path, level=log_level)

    state: Dict[str, Any] = {
        "config": config.raw,
        "paths": paths or Paths.from_env(),
        "executables": {},
        "execution": {"log_path": actual_log_path, "results": {}, "errors": [], "warnings": []},
    }

    logger.info(
        "Variant %s (theme=%s force=%s dry_run=%s)",
        config.raw.get("variant"),
        config.theme,
        config.force,
        config.dry_run,
    )

    confirm_elevated(assume_yes=assume_yes)

    result = run_pipeline(
        state=state,
        steps=build_steps(),
        start_at=start_at,
        stop_after=stop_after,
        abort_on_failure=config.abort_on_failure,
    )
    state = result.state
    state["execution"]["ran_steps"] = result.ran_steps
    state["execution"]["failed_steps"] = result.failed_steps

    if result.ok:
        logger.info("Setup complete (theme=%s). Restart the terminal to apply.", state.get("theme"))
    else:
        logger.warning(
            "Setup finished with failed steps: %s (see %s)",
            ", ".join(result.failed_steps),
            actual_log_path,
        )
    return state


def _overrides_from_args(args: argparse.Namespace) -> Dict[str, Any]:
    overrides: Dict[str, Any] = {}
    if args.theme is not None:
        overrides["theme"] = args.theme
    if args.force:
        overrides["force"] = True
    if args.dry_run:
        overrides["dry_run"] = True

    font: Dict[str, Any] = {}
    if args.font is not None:
        font["name"] = args.font
    if args.font_variant is not None:
        font["variant"] = args.font_variant
    if args.manual_font:
        font["manual_install"] = True
    if font:
        overrides["font"] = font
    return overrides


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="quickterm-installer",
        description="Install oh-my-posh, fzf, PSFzf and a Nerd Font, then configure the terminal, editors and profile.",
    )
    p.add_argument("--theme", default=None, help="oh-my-posh theme name (POSH_THEME overrides this)")
    p.add_argument("--force", action="store_true", help="Reinstall tools even if already present")
    p.add_argument("--font", default=None, help="Font family name to write into settings")
    p.add_argument("--font-variant", default=None, help="Nerd Font to install (meslo, caskaydia, ...)")
    p.add_argument("--manual-font", action="store_true", help="Install the font by hand; waits for confirmation")
    p.add_argument("--variant", default=DEFAULT_VARIANT, choices=variant_names(), help="Setup preset")
    p.add_argument("--config", default=None, help="YAML file layered over the preset")
    p.add_argument("--log", default=None, help="Path to installer log")
    p.add_argument("--start-at", default=None, help="Start at step_id (e.g. 60_configure_terminal)")
    p.add_argument("--stop-after", default=None, help="Stop after step_id")
    p.add_argument("--dry-run", action="store_true", help="Log what would happen without changing anything")
    p.add_argument("-y", "--yes", action="store_true", help="Do not ask for confirmation when elevated")
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return p


def main(argv: Optional[list[str]] = None) -> int:
    p = build_parser()
    args = p.parse_args(argv)

    try:
        config = build_config(
            variant=args.variant,
            config_path=args.config,
            overrides=_overrides_from_args(args),
        )
    except (OSError, ValueError, yaml.YAMLError) as e:
        p.error(str(e))

    try:
        run(
            config=config,
            log_path=args.log,
            start_at=args.start_at,
            stop_after=args.stop_after,
            assume_yes=bool(args.yes),
            log_level=logging.DEBUG if args.verbose else logging.INFO,
        )
    except SetupAborted as e:
        logger.error("Setup aborted: %s", e)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
