from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable, Optional

from .command import run_cmd
from .manifests import load_fonts_manifest

logger = logging.getLogger(__name__)

FONT_SUFFIXES = {".ttf", ".otf", ".ttc"}


@dataclass(frozen=True)
class FontSpec:
    key: str
    package: str
    display_name: str
    file_glob: str


def default_font_key() -> str:
    return str(load_fonts_manifest().get("default") or "meslo")


def load_font_spec(key: Optional[str] = None) -> FontSpec:
    manifest = load_fonts_manifest()
    fonts = manifest.get("fonts") or {}
    key = key or default_font_key()
    entry = fonts.get(key)
    if not isinstance(entry, dict):
        raise ValueError(f"Unknown font variant: {key} (known: {', '.join(sorted(fonts))})")
    return FontSpec(
        key=key,
        package=str(entry["package"]),
        display_name=str(entry["display_name"]),
        file_glob=str(entry.get("file_glob") or "*"),
    )


def download_url(spec: FontSpec) -> str:
    template = str(load_fonts_manifest().get("download_url") or "")
    return template.format(package=spec.package)


def font_installed(spec: FontSpec, font_dirs: Iterable[Path]) -> bool:
    for d in font_dirs:
        if not d.is_dir():
            continue
        for f in d.glob(spec.file_glob):
            if f.suffix.lower() in FONT_SUFFIXES:
                logger.debug("Found font file %s", f)
                return True
    return False


def install_font_auto(oh_my_posh: str, spec: FontSpec, *, dry_run: bool = False) -> bool:
    r = run_cmd([oh_my_posh, "font", "install", spec.package, "--user"], check=False, dry_run=dry_run)
    if r.ok:
        return True
    logger.error("Font install of %s failed (%s): %s", spec.package, r.returncode, (r.stderr or r.stdout).strip())
    return False


def install_font_manual(
    spec: FontSpec,
    download_dir: Path,
    *,
    prompt: Optional[Callable[[str], str]] = None,
    dry_run: bool = False,
) -> bool:
    """Open Explorer and wait for the user to install the font by hand.

    Blocks until the user answers the prompt; there is no timeout.
    """

    logger.info("Download %s from %s", spec.display_name, download_url(spec))
    logger.info("Extract it, select the .ttf files, right-click and choose 'Install for all users'")
    run_cmd(["explorer.exe", str(download_dir)], check=False, dry_run=dry_run)

    if dry_run:
        return True

    try:
        (prompt or input)(f"Press Enter once {spec.display_name} is installed... ")
    except EOFError:
        logger.warning("No interactive input available; cannot wait for manual font install")
        return False
    return True
