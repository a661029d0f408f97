"""Tests for settings document merging."""

from __future__ import annotations

import json
import logging
from datetime import datetime
from pathlib import Path

import pytest

from quickterm_installer.lib.files import backup_file
from quickterm_installer.lib.settings import (
    apply_overrides,
    editor_overrides,
    get_path,
    load_document,
    merge_settings,
    parse_jsonc,
    terminal_overrides,
    upsert_path,
)

NOW = datetime(2024, 5, 1, 12, 30, 45)


def _backups(path: Path) -> list[Path]:
    return sorted(path.parent.glob(path.name + ".backup.*"))


def _read(path: Path):
    return json.loads(path.read_text(encoding="utf-8"))


class TestUpsert:
    def test_preserves_siblings(self):
        doc = {"a": 1, "b": {"c": 2}}
        apply_overrides(doc, {"b.d": 3})
        assert doc == {"a": 1, "b": {"c": 2, "d": 3}}

    def test_creates_missing_containers(self):
        doc = {"profiles": {"list": [1, 2]}}
        upsert_path(doc, "profiles.defaults.font.face", "MesloLGM Nerd Font")
        assert doc == {"profiles": {"list": [1, 2], "defaults": {"font": {"face": "MesloLGM Nerd Font"}}}}

    def test_replaces_non_mapping_intermediate(self):
        doc = {"profiles": {"defaults": "oops"}}
        upsert_path(doc, "profiles.defaults.font.size", 11)
        assert doc == {"profiles": {"defaults": {"font": {"size": 11}}}}

    def test_tuple_path_keeps_dotted_key_flat(self):
        doc = {"editor.tabSize": 2}
        upsert_path(doc, ("terminal.integrated.fontFamily",), "Hack Nerd Font")
        assert doc == {"editor.tabSize": 2, "terminal.integrated.fontFamily": "Hack Nerd Font"}

    def test_empty_segment_is_rejected(self):
        with pytest.raises(ValueError):
            upsert_path({}, "a..b", 1)

    def test_get_path(self):
        doc = {"a": {"b": {"c": 1}}}
        assert get_path(doc, "a.b.c") == 1
        assert get_path(doc, "a.x", "missing") == "missing"
        assert get_path(doc, ("a", "b")) == {"c": 1}


class TestParseJsonc:
    def test_comments_and_trailing_commas(self):
        text = """
        // Windows Terminal settings
        {
            "$schema": "https://aka.ms/terminal-profiles-schema", // inline
            /* block
               comment */
            "profiles": {
                "defaults": {},
                "list": [1, 2, 3,],
            },
        }
        """
        assert parse_jsonc(text) == {
            "$schema": "https://aka.ms/terminal-profiles-schema",
            "profiles": {"defaults": {}, "list": [1, 2, 3]},
        }

    def test_comment_markers_inside_strings_are_kept(self):
        text = '{"a": "// not a comment", "b": "x /* y */ z", "c": ",]"}'
        assert parse_jsonc(text) == {"a": "// not a comment", "b": "x /* y */ z", "c": ",]"}

    def test_escaped_quote_inside_string(self):
        assert parse_jsonc('{"a": "say \\"hi\\" // ok",}') == {"a": 'say "hi" // ok'}

    def test_byte_order_mark(self):
        assert parse_jsonc('\ufeff{"a": 1}') == {"a": 1}


class TestMergeSettings:
    def test_missing_file_creates_parents_with_only_overrides(self, tmp_path):
        target = tmp_path / "a" / "b" / "settings.json"
        assert merge_settings(target, {"x.y": 1, "z": True})
        assert _read(target) == {"x": {"y": 1}, "z": True}
        assert _backups(target) == []

    def test_preserves_existing_keys(self, tmp_path):
        target = tmp_path / "settings.json"
        target.write_text(json.dumps({"a": 1, "b": {"c": 2}}), encoding="utf-8")
        assert merge_settings(target, {"b.d": 3}, now=NOW)
        assert _read(target) == {"a": 1, "b": {"c": 2, "d": 3}}

    def test_merge_is_idempotent(self, tmp_path):
        target = tmp_path / "settings.json"
        target.write_text(json.dumps({"keep": [1, 2], "profiles": {"list": []}}), encoding="utf-8")
        overrides = terminal_overrides("MesloLGM Nerd Font", 12, experimental={"experimental.detectURLs": True})

        assert merge_settings(target, overrides)
        once = _read(target)
        assert merge_settings(target, overrides)
        assert _read(target) == once

    def test_backup_has_original_bytes(self, tmp_path):
        target = tmp_path / "settings.json"
        original = b'{\r\n  // keep me\r\n  "a": 1,\r\n}\r\n'
        target.write_bytes(original)

        assert merge_settings(target, {"b": 2}, now=NOW)

        backups = _backups(target)
        assert backups == [tmp_path / "settings.json.backup.20240501-123045"]
        assert backups[0].read_bytes() == original
        assert _read(target) == {"a": 1, "b": 2}

    def test_each_merge_adds_exactly_one_backup(self, tmp_path):
        target = tmp_path / "settings.json"
        target.write_text("{}", encoding="utf-8")

        assert merge_settings(target, {"a": 1}, now=NOW)
        assert len(_backups(target)) == 1
        # Same second again: a distinct name, nothing overwritten.
        assert merge_settings(target, {"a": 2}, now=NOW)
        backups = _backups(target)
        assert len(backups) == 2
        assert {b.read_text(encoding="utf-8") for b in backups} == {"{}", json.dumps({"a": 1}, indent=4) + "\n"}

    def test_malformed_file_is_replaced_with_overrides(self, tmp_path, caplog):
        target = tmp_path / "settings.json"
        target.write_text("{ this is not json", encoding="utf-8")

        with caplog.at_level(logging.WARNING):
            assert merge_settings(target, {"font.face": "Hack Nerd Font"}, now=NOW)

        assert _read(target) == {"font": {"face": "Hack Nerd Font"}}
        assert any("Could not parse" in r.getMessage() for r in caplog.records)
        assert _backups(target)[0].read_text(encoding="utf-8") == "{ this is not json"

    def test_non_object_document_starts_empty(self, tmp_path):
        target = tmp_path / "settings.json"
        target.write_text("[1, 2]", encoding="utf-8")
        assert load_document(target) == {}

    def test_write_failure_returns_false(self, tmp_path, caplog):
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("", encoding="utf-8")
        target = blocker / "settings.json"

        with caplog.at_level(logging.WARNING):
            assert merge_settings(target, {"a": 1}) is False
        assert any("Failed to write settings" in r.getMessage() for r in caplog.records)

    def test_unserializable_value_leaves_file_untouched(self, tmp_path):
        target = tmp_path / "settings.json"
        target.write_text('{"a": 1}', encoding="utf-8")

        assert merge_settings(target, {"b": object()}) is False
        assert target.read_text(encoding="utf-8") == '{"a": 1}'
        assert _backups(target) == []
        assert sorted(p.name for p in tmp_path.iterdir()) == ["settings.json"]

    @pytest.mark.parametrize("dry_run", [False, True])
    def test_invalid_key_path_returns_false(self, tmp_path, caplog, dry_run):
        target = tmp_path / "settings.json"
        target.write_text('{"a": 1}', encoding="utf-8")

        with caplog.at_level(logging.WARNING):
            assert merge_settings(target, {"a..b": 1}, dry_run=dry_run) is False
        assert any("a..b" in r.getMessage() for r in caplog.records)
        assert target.read_text(encoding="utf-8") == '{"a": 1}'
        assert _backups(target) == []

    def test_dry_run_writes_nothing(self, tmp_path):
        target = tmp_path / "nested" / "settings.json"
        assert merge_settings(target, {"a": 1}, dry_run=True)
        assert not target.exists()
        assert not target.parent.exists()

    def test_output_is_indented_and_keeps_key_order(self, tmp_path):
        target = tmp_path / "settings.json"
        target.write_text('{"z": 1, "a": 2}', encoding="utf-8")
        assert merge_settings(target, {"m": 3})
        assert target.read_text(encoding="utf-8") == '{\n    "z": 1,\n    "a": 2,\n    "m": 3\n}\n'


class TestOverrideBuilders:
    def test_terminal_overrides(self):
        doc = apply_overrides({}, terminal_overrides("Hack Nerd Font", 13, experimental={"experimental.detectURLs": False}))
        assert doc == {
            "profiles": {
                "defaults": {
                    "font": {"face": "Hack Nerd Font", "size": 13},
                    "experimental.detectURLs": False,
                }
            }
        }

    def test_editor_overrides(self):
        doc = apply_overrides({"files.autoSave": "off"}, editor_overrides("Hack Nerd Font", 14))
        assert doc == {
            "files.autoSave": "off",
            "terminal.integrated.fontFamily": "Hack Nerd Font",
            "terminal.integrated.fontSize": 14,
        }

    def test_editor_overrides_with_editor_font(self):
        overrides = editor_overrides("Hack Nerd Font", 14, editor_font=True)
        doc = apply_overrides({}, overrides)
        assert doc["editor.fontFamily"] == "Hack Nerd Font"
        assert doc["editor.fontLigatures"] is True


class TestBackupFile:
    def test_missing_file_has_no_backup(self, tmp_path):
        assert backup_file(tmp_path / "absent.json") is None
