"""Layered merges into JSON settings documents.

Windows Terminal and VS Code both persist JSON with comments and
trailing commas. Documents are read leniently, a fixed set of keys is
upserted, and everything else is left exactly as it was. Comments do
not survive the round trip.
"""

from __future__ import annotations

import json
import logging
import re
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple, Union

from .files import atomic_write_text, backup_file

logger = logging.getLogger(__name__)

KeyPath = Union[str, Tuple[str, ...]]

_TRAILING_COMMA = re.compile(r",(\s*[}\]])")


def _strip_comments(text: str) -> str:
    out: list[str] = []
    i = 0
    n = len(text)
    in_string = False
    while i < n:
        ch = text[i]
        if in_string:
            out.append(ch)
            if ch == "\\" and i + 1 < n:
                out.append(text[i + 1])
                i += 2
                continue
            if ch == '"':
                in_string = False
            i += 1
            continue

        if ch == '"':
            in_string = True
            out.append(ch)
            i += 1
        elif text.startswith("//", i):
            end = text.find("\n", i)
            i = n if end == -1 else end
        elif text.startswith("/*", i):
            end = text.find("*/", i + 2)
            i = n if end == -1 else end + 2
        else:
            out.append(ch)
            i += 1
    return "".join(out)


def _strip_trailing_commas(text: str) -> str:
    out: list[str] = []
    last = 0
    # Only rewrite commas that sit outside string literals.
    for m in re.finditer(r'"(?:\\.|[^"\\])*"', text):
        out.append(_TRAILING_COMMA.sub(r"\1", text[last : m.start()]))
        out.append(m.group(0))
        last = m.end()
    out.append(_TRAILING_COMMA.sub(r"\1", text[last:]))
    return "".join(out)


def parse_jsonc(text: str) -> Any:
    """Parse JSON that may contain ``//`` / ``/* */`` comments and trailing commas."""

    if text.startswith("\ufeff"):
        text = text[1:]
    return json.loads(_strip_trailing_commas(_strip_comments(text)))


def load_document(path: str | Path) -> Dict[str, Any]:
    """Load a settings document, or an empty one if the file is missing or unreadable."""

    p = Path(path)
    if not p.exists():
        return {}

    try:
        data = parse_jsonc(p.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, ValueError) as e:
        logger.warning("Could not parse %s (%s); starting from an empty document", p, e)
        return {}

    if not isinstance(data, dict):
        logger.warning("%s does not contain a JSON object; starting from an empty document", p)
        return {}
    return data


def _split(path: KeyPath) -> Sequence[str]:
    if isinstance(path, tuple):
        parts = list(path)
    else:
        parts = str(path).split(".")
    if not parts or any(not part for part in parts):
        raise ValueError(f"Invalid settings key path: {path!r}")
    return parts


def upsert_path(doc: Dict[str, Any], path: KeyPath, value: Any) -> None:
    """Set ``value`` at ``path``, creating missing containers and keeping siblings.

    A string path is dotted (``"profiles.defaults.font.face"``). A tuple
    path is used segment by segment, so ``("editor.fontFamily",)`` is a
    single flat key.
    """

    parts = _split(path)
    cursor = doc
    for key in parts[:-1]:
        nxt = cursor.get(key)
        if not isinstance(nxt, dict):
            nxt = {}
            cursor[key] = nxt
        cursor = nxt
    cursor[parts[-1]] = value


def get_path(doc: Mapping[str, Any], path: KeyPath, default: Any = None) -> Any:
    cursor: Any = doc
    for key in _split(path):
        if not isinstance(cursor, Mapping) or key not in cursor:
            return default
        cursor = cursor[key]
    return cursor


def apply_overrides(doc: Dict[str, Any], overrides: Mapping[KeyPath, Any]) -> Dict[str, Any]:
    for path, value in overrides.items():
        upsert_path(doc, path, value)
    return doc


def dump_document(doc: Mapping[str, Any]) -> str:
    return json.dumps(doc, indent=4, ensure_ascii=False) + "\n"


def merge_settings(
    path: str | Path,
    overrides: Mapping[KeyPath, Any],
    *,
    dry_run: bool = False,
    now: Optional[datetime] = None,
) -> bool:
    """Merge ``overrides`` into the settings document at ``path``.

    Returns True on success. Errors are logged, never raised, so the
    caller can carry on with the remaining targets.
    """

    p = Path(path)
    existed = p.is_file()

    doc = load_document(p)
    try:
        apply_overrides(doc, overrides)
    except ValueError as e:
        logger.warning("Not merging into %s: %s", p, e)
        return False

    if dry_run:
        logger.info("Would merge %d key(s) into %s", len(overrides), p)
        for key, value in overrides.items():
            logger.debug("  %s = %r", key, value)
        return True

    try:
        text = dump_document(doc)
        p.parent.mkdir(parents=True, exist_ok=True)
        if existed:
            backup_file(p, now=now)
        atomic_write_text(p, text)
    except (OSError, TypeError, ValueError) as e:
        logger.warning("Failed to write settings %s: %s", p, e)
        return False

    logger.info("Merged %d key(s) into %s", len(overrides), p)
    return True


def terminal_overrides(
    font: str,
    size: int,
    *,
    experimental: Optional[Mapping[str, Any]] = None,
) -> Dict[KeyPath, Any]:
    """Keys touched in Windows Terminal's settings.json."""

    overrides: Dict[KeyPath, Any] = {
        "profiles.defaults.font.face": font,
        "profiles.defaults.font.size": size,
    }
    for flag, value in (experimental or {}).items():
        # Terminal profile flags are flat keys such as "experimental.detectURLs".
        overrides[("profiles", "defaults", str(flag))] = value
    return overrides


def editor_overrides(font: str, size: int, *, editor_font: bool = False) -> Dict[KeyPath, Any]:
    """Keys touched in VS Code style settings.json (flat dotted keys)."""

    overrides: Dict[KeyPath, Any] = {
        ("terminal.integrated.fontFamily",): font,
        ("terminal.integrated.fontSize",): size,
    }
    if editor_font:
        overrides[("editor.fontFamily",)] = font
        overrides[("editor.fontLigatures",)] = True
    return overrides
