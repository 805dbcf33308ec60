"""Tests for mdless.settings -- layered configuration."""

from __future__ import annotations

import json
import logging

import pytest

from mdless.settings import Settings, deep_merge_settings, default_settings_path, load_settings, settings_from_env


@pytest.fixture
def settings_file(tmp_path):
    def _write(content) -> str:
        path = tmp_path / "settings.json"
        path.write_text(content if isinstance(content, str) else json.dumps(content))
        return str(path)

    return _write


class TestDeepMerge:
    """Merge semantics shared by every layer."""

    def test_nested_dicts_merge(self) -> None:
        merged = deep_merge_settings({"keybindings": {"quit": "x"}}, {"keybindings": {"top": "t"}})
        assert merged == {"keybindings": {"quit": "x", "top": "t"}}

    def test_primitives_and_lists_replace(self) -> None:
        merged = deep_merge_settings({"theme": "dark", "keys": ["a"]}, {"theme": "light", "keys": ["b"]})
        assert merged == {"theme": "light", "keys": ["b"]}

    def test_none_never_overrides(self) -> None:
        assert deep_merge_settings({"theme": "dark"}, {"theme": None}) == {"theme": "dark"}

    def test_base_untouched(self) -> None:
        base = {"keybindings": {"quit": "x"}}
        deep_merge_settings(base, {"keybindings": {"quit": "y"}})
        assert base == {"keybindings": {"quit": "x"}}


class TestEnvironment:
    """The environment layer."""

    def test_empty_env(self) -> None:
        assert all(value is None for value in settings_from_env({}).values())

    def test_values(self) -> None:
        layer = settings_from_env({"MDLESS_THEME": "light", "MDLESS_TAB_WIDTH": "2", "MDLESS_WIDTH": "60"})
        assert layer["theme"] == "light"
        assert layer["tabWidth"] == 2
        assert layer["width"] == 60

    def test_no_color(self) -> None:
        assert settings_from_env({"NO_COLOR": "1"})["color"] is False
        assert settings_from_env({"NO_COLOR": ""})["color"] is None

    def test_bad_integer_warns(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING):
            assert settings_from_env({"MDLESS_WIDTH": "wide"})["width"] is None
        assert "MDLESS_WIDTH" in caplog.text


class TestLoadSettings:
    """Resolution across defaults, file, environment and overrides."""

    def test_defaults(self, tmp_path) -> None:
        settings = load_settings(settings_path=str(tmp_path / "missing.json"), env={})
        assert settings == Settings()

    def test_file_layer(self, settings_file) -> None:
        path = settings_file({"theme": "light", "tabWidth": 8, "keybindings": {"quit": "x"}})
        settings = load_settings(settings_path=path, env={})
        assert settings.theme == "light"
        assert settings.tab_width == 8
        assert settings.keybindings == {"quit": "x"}

    def test_env_beats_file(self, settings_file) -> None:
        path = settings_file({"theme": "light", "width": 50})
        settings = load_settings(settings_path=path, env={"MDLESS_THEME": "dark"})
        assert settings.theme == "dark"
        assert settings.width == 50

    def test_overrides_beat_env(self, tmp_path) -> None:
        settings = load_settings(
            {"color": True, "width": 30},
            settings_path=str(tmp_path / "missing.json"),
            env={"NO_COLOR": "1", "MDLESS_WIDTH": "90"},
        )
        assert settings.color is True
        assert settings.width == 30

    def test_unset_overrides_keep_lower_layers(self, settings_file) -> None:
        path = settings_file({"theme": "light"})
        settings = load_settings({"theme": None, "color": None}, settings_path=path, env={"NO_COLOR": "x"})
        assert settings.theme == "light"
        assert settings.color is False

    def test_malformed_file_ignored(self, settings_file, caplog: pytest.LogCaptureFixture) -> None:
        path = settings_file("{not json")
        with caplog.at_level(logging.WARNING):
            settings = load_settings(settings_path=path, env={})
        assert settings == Settings()
        assert "Ignoring settings file" in caplog.text

    def test_non_object_file_ignored(self, settings_file, caplog: pytest.LogCaptureFixture) -> None:
        path = settings_file([1, 2])
        with caplog.at_level(logging.WARNING):
            assert load_settings(settings_path=path, env={}) == Settings()
        assert "expected a JSON object" in caplog.text

    def test_bad_values_dropped(self, settings_file, caplog: pytest.LogCaptureFixture) -> None:
        path = settings_file({"tabWidth": 0, "width": "wide", "color": "yes", "theme": 3, "keybindings": []})
        with caplog.at_level(logging.WARNING):
            assert load_settings(settings_path=path, env={}) == Settings()
        for key in ("tabWidth", "width", "color", "theme", "keybindings"):
            assert f"Ignoring {key} setting" in caplog.text

    def test_default_path(self, monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
        monkeypatch.setenv("HOME", str(tmp_path))
        assert default_settings_path() == str(tmp_path / ".mdless" / "settings.json")
