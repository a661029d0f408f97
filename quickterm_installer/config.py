from __future__ import annotations

import copy
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import yaml

from .lib.fonts import load_font_spec
from .lib.manifests import load_variants_manifest
from .lib.profile import ProfileFlags

DEFAULT_VARIANT = "full"

DEFAULT_CONFIG: Dict[str, Any] = {
    "theme": "quick-term",
    # Fallback for an unknown theme; None means the catalog default.
    "default_theme": None,
    "force": False,
    "dry_run": False,
    "font": {
        "variant": None,
        "name": None,
        "size": 11,
        "manual_install": False,
        "download_dir": None,
    },
    "profile": {
        "targets": ["pwsh"],
        "styling": True,
        "intellisense": True,
        "verbose": False,
    },
    "terminal": {
        "enabled": True,
        "experimental": {},
    },
    "editors": {
        "targets": ["code", "code-insiders", "cursor"],
        "editor_font": False,
    },
    "verify": False,
    "abort_on_failure": False,
}


def deep_merge(dst: Dict[str, Any], src: Mapping[str, Any]) -> Dict[str, Any]:
    for key, value in src.items():
        if isinstance(value, Mapping) and isinstance(dst.get(key), dict):
            deep_merge(dst[key], value)
        else:
            dst[key] = copy.deepcopy(value)
    return dst


@dataclass(frozen=True)
class SetupConfig:
    raw: Dict[str, Any]

    def _section(self, name: str) -> Dict[str, Any]:
        return self.raw.get(name) or {}

    @property
    def theme(self) -> str:
        return str(self.raw.get("theme") or DEFAULT_CONFIG["theme"])

    @property
    def default_theme(self) -> Optional[str]:
        value = self.raw.get("default_theme")
        return str(value) if value else None

    @property
    def force(self) -> bool:
        return bool(self.raw.get("force", False))

    @property
    def dry_run(self) -> bool:
        return bool(self.raw.get("dry_run", False))

    @property
    def font_variant(self) -> Optional[str]:
        v = self._section("font").get("variant")
        return str(v) if v else None

    @property
    def font_name(self) -> Optional[str]:
        v = self._section("font").get("name")
        return str(v) if v else None

    @property
    def font_size(self) -> int:
        return int(self._section("font").get("size") or 11)

    @property
    def manual_font_install(self) -> bool:
        return bool(self._section("font").get("manual_install", False))

    @property
    def manual_font_dir(self) -> Optional[str]:
        v = self._section("font").get("download_dir")
        return str(v) if v else None

    @property
    def profile_targets(self) -> List[str]:
        return [str(t) for t in (self._section("profile").get("targets") or [])]

    @property
    def profile_flags(self) -> ProfileFlags:
        p = self._section("profile")
        return ProfileFlags(
            styling=bool(p.get("styling", True)),
            intellisense=bool(p.get("intellisense", True)),
            verbose=bool(p.get("verbose", False)),
        )

    @property
    def terminal_enabled(self) -> bool:
        return bool(self._section("terminal").get("enabled", True))

    @property
    def terminal_experimental(self) -> Dict[str, Any]:
        return dict(self._section("terminal").get("experimental") or {})

    @property
    def editors(self) -> List[str]:
        return [str(e) for e in (self._section("editors").get("targets") or [])]

    @property
    def editor_font(self) -> bool:
        return bool(self._section("editors").get("editor_font", False))

    @property
    def verify(self) -> bool:
        return bool(self.raw.get("verify", False))

    @property
    def abort_on_failure(self) -> bool:
        return bool(self.raw.get("abort_on_failure", False))


def variant_names() -> List[str]:
    return sorted((load_variants_manifest().get("variants") or {}).keys())


def variant_preset(name: str) -> Dict[str, Any]:
    variants = load_variants_manifest().get("variants") or {}
    preset = variants.get(name)
    if not isinstance(preset, dict):
        raise ValueError(f"Unknown variant: {name} (known: {', '.join(variant_names())})")
    return copy.deepcopy(preset)


def load_config_file(path: str) -> Dict[str, Any]:
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(path)

    if p.suffix.lower() not in {".yaml", ".yml"}:
        raise ValueError("setup config must be YAML")

    raw = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    if not isinstance(raw, dict):
        raise ValueError(f"{path} must contain a mapping/object")
    return raw


def build_config(
    *,
    variant: str = DEFAULT_VARIANT,
    config_path: Optional[str] = None,
    overrides: Optional[Mapping[str, Any]] = None,
) -> SetupConfig:
    """Layer defaults, the variant preset, an optional YAML file and CLI overrides."""

    raw = copy.deepcopy(DEFAULT_CONFIG)
    deep_merge(raw, variant_preset(variant))
    if config_path:
        deep_merge(raw, load_config_file(config_path))
    if overrides:
        deep_merge(raw, overrides)
    raw["variant"] = variant
    cfg = SetupConfig(raw=raw)
    # Raises ValueError for an unknown font variant.
    load_font_spec(cfg.font_variant)
    return cfg
