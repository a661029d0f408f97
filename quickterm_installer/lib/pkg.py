from __future__ import annotations

import logging

from .command import run_cmd

logger = logging.getLogger(__name__)

# winget exit codes that mean "nothing to do".
WINGET_ALREADY_INSTALLED = {
    -1978335189,  # 0x8A15002B APPINSTALLER_CLI_ERROR_UPDATE_NOT_APPLICABLE
    -1978335135,  # 0x8A150061 APPINSTALLER_CLI_ERROR_PACKAGE_ALREADY_INSTALLED
}


def winget_has_package(winget: str, package_id: str, *, dry_run: bool = False) -> bool:
    """Return True if winget reports ``package_id`` as installed."""
    if dry_run:
        # Report missing so the plan shows the install command.
        return False
    r = run_cmd(
        [winget, "list", "--id", package_id, "--exact", "--accept-source-agreements"],
        check=False,
    )
    return r.ok and package_id.lower() in r.stdout.lower()


def winget_install(winget: str, package_id: str, *, force: bool = False, dry_run: bool = False) -> bool:
    argv = [
        winget,
        "install",
        "--id",
        package_id,
        "--exact",
        "--source",
        "winget",
        "--accept-package-agreements",
        "--accept-source-agreements",
        "--silent",
    ]
    if force:
        argv.append("--force")

    r = run_cmd(argv, check=False, dry_run=dry_run)
    if r.ok or r.returncode in WINGET_ALREADY_INSTALLED:
        return True
    logger.error("winget install %s failed (%s): %s", package_id, r.returncode, (r.stderr or r.stdout).strip())
    return False


def _ps(shell: str, script: str, *, dry_run: bool = False):
    return run_cmd(
        [shell, "-NoProfile", "-NonInteractive", "-ExecutionPolicy", "Bypass", "-Command", script],
        check=False,
        dry_run=dry_run,
    )


def ps_module_available(shell: str, module: str, *, dry_run: bool = False) -> bool:
    if dry_run:
        return False
    r = _ps(shell, f"if (Get-Module -ListAvailable -Name '{module}') {{ exit 0 }} else {{ exit 1 }}")
    return r.ok


def ps_install_module(shell: str, module: str, *, force: bool = False, dry_run: bool = False) -> bool:
    script = f"Install-Module -Name '{module}' -Scope CurrentUser -AllowClobber -Force"
    if force:
        script += " -SkipPublisherCheck"
    r = _ps(shell, script, dry_run=dry_run)
    if r.ok:
        return True
    logger.error("Install-Module %s failed (%s): %s", module, r.returncode, (r.stderr or r.stdout).strip())
    return False
