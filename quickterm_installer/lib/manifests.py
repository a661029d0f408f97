from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any, Dict

import yaml


def _manifests_dir() -> Path:
    # quickterm_installer/lib/manifests.py -> quickterm_installer/manifests
    return Path(__file__).resolve().parents[1] / "manifests"


def load_yaml_rel(rel_path: str) -> Dict[str, Any]:
    """Load a YAML manifest shipped with the package (manifests/...)."""

    p = _manifests_dir() / rel_path.lstrip("/")
    data = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Manifest must be a mapping/dict: {p}")
    return data


@lru_cache(maxsize=None)
def load_themes_manifest() -> Dict[str, Any]:
    return load_yaml_rel("themes.yaml")


@lru_cache(maxsize=None)
def load_fonts_manifest() -> Dict[str, Any]:
    return load_yaml_rel("fonts.yaml")


@lru_cache(maxsize=None)
def load_variants_manifest() -> Dict[str, Any]:
    return load_yaml_rel("variants.yaml")
