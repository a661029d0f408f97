"""Tests for theme resolution."""

import logging

import pytest

from quickterm_installer.lib.themes import (
    default_theme,
    load_theme_catalog,
    resolve_theme,
    theme_from_env_value,
)


def _warnings(caplog):
    return [r for r in caplog.records if r.levelno == logging.WARNING]


def test_catalog_is_loaded():
    catalog = load_theme_catalog()
    assert len(catalog) >= 90
    assert default_theme() in catalog
    assert {"atomic", "jandedobbeleer", "agnoster.minimal"} <= catalog


@pytest.mark.parametrize("name", ["atomic", "dracula", "M365Princess", "agnoster.minimal", "quick-term"])
def test_valid_names_pass_through(name, caplog):
    with caplog.at_level(logging.WARNING):
        assert resolve_theme(name) == name
    assert _warnings(caplog) == []


@pytest.mark.parametrize("name", ["not-a-theme", "Atomic", "atomic ", "../atomic"])
def test_unknown_names_fall_back_with_one_warning(name, caplog):
    with caplog.at_level(logging.WARNING):
        assert resolve_theme(name) == default_theme()
    assert len(_warnings(caplog)) == 1


def test_missing_theme_uses_default_quietly(caplog):
    with caplog.at_level(logging.WARNING):
        assert resolve_theme(None) == default_theme()
    assert _warnings(caplog) == []


def test_env_path_overrides_cli():
    value = r"C:\Users\x\AppData\Local\Programs\oh-my-posh\themes\atomic.omp.json"
    assert resolve_theme("dracula", value) == "atomic"


def test_env_bare_token_overrides_cli():
    assert resolve_theme("dracula", "atomic") == "atomic"


def test_malformed_env_falls_through_to_cli(caplog):
    with caplog.at_level(logging.WARNING):
        assert resolve_theme("dracula", "bad/value:here") == "dracula"
    assert len(_warnings(caplog)) == 1


def test_malformed_env_without_cli_uses_default(caplog):
    with caplog.at_level(logging.WARNING):
        assert resolve_theme(None, "bad/value:here") == default_theme()
    assert len(_warnings(caplog)) == 1


def test_blank_env_is_ignored(caplog):
    with caplog.at_level(logging.WARNING):
        assert resolve_theme("dracula", "   ") == "dracula"
    assert _warnings(caplog) == []


def test_env_name_is_still_validated(caplog):
    with caplog.at_level(logging.WARNING):
        assert resolve_theme("dracula", "/themes/nope.omp.json") == default_theme()
    assert len(_warnings(caplog)) == 1


def test_malformed_env_and_unknown_cli_warn_once(caplog):
    with caplog.at_level(logging.INFO):
        assert resolve_theme("no-such-theme", "bad/value:here") == default_theme()
    warnings = _warnings(caplog)
    assert len(warnings) == 1
    assert "no-such-theme" in warnings[0].getMessage()
    assert any("malformed" in r.getMessage() for r in caplog.records if r.levelno == logging.INFO)


def test_default_comes_from_catalog_manifest():
    assert default_theme() == "quick-term"


def test_custom_catalog_and_default():
    assert resolve_theme("x", catalog={"x", "y"}, default="y") == "x"
    assert resolve_theme("z", catalog={"x", "y"}, default="y") == "y"


@pytest.mark.parametrize(
    "value, expected",
    [
        (r"C:\Users\x\AppData\Local\Programs\oh-my-posh\themes\atomic.omp.json", "atomic"),
        ("/home/x/.poshthemes/agnoster.minimal.omp.json", "agnoster.minimal"),
        ('"C:\\themes\\dracula.omp.json"', "dracula"),
        ("atomic.omp.json", "atomic"),
        ("atomic", "atomic"),
        ("  atomic  ", "atomic"),
        ("bad/value:here", None),
        ("C:\\themes\\atomic.yaml", None),
        ("", None),
        (None, None),
    ],
)
def test_theme_from_env_value(value, expected):
    assert theme_from_env_value(value) == expected
