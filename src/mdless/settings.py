"""Layered pager settings.

Precedence, lowest first: built-in defaults, the JSON settings file
(``~/.mdless/settings.json``), environment variables, command-line overrides.
A ``None`` value at any layer means "not set" and never overrides a lower one.
"""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

CONFIG_DIR_NAME = ".mdless"
SETTINGS_FILE_NAME = "settings.json"


@dataclass
class Settings:
    """Resolved settings for one run."""

    theme: str = "dark"
    tab_width: int = 4
    width: int | None = None
    color: bool = True
    keybindings: dict[str, Any] = field(default_factory=dict)


def _settings_defaults() -> dict[str, Any]:
    """Default settings values, keyed as in the settings file."""
    return {
        "theme": "dark",
        "tabWidth": 4,
        "width": None,
        "color": True,
        "keybindings": {},
    }


# --- Deep merge ---


def deep_merge_settings(base: dict[str, Any], overrides: Mapping[str, Any]) -> dict[str, Any]:
    """Recursively merge overrides into base settings.

    For nested dicts, merge recursively. For primitives and arrays,
    override value wins completely. ``None`` never overrides.
    """
    result = dict(base)
    for key, value in overrides.items():
        if value is None:
            continue
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge_settings(result[key], value)
        else:
            result[key] = value
    return result


# --- Layers ---


def default_settings_path() -> str:
    """Default settings file (~/.mdless/settings.json)."""
    return os.path.join(os.path.expanduser("~"), CONFIG_DIR_NAME, SETTINGS_FILE_NAME)


def _load_from_file(path: str) -> tuple[dict[str, Any], Exception | None]:
    """Load settings from a JSON file. Returns (settings, error)."""
    if not os.path.exists(path):
        return {}, None
    try:
        content = Path(path).read_text(encoding="utf-8")
        settings = json.loads(content)
    except (OSError, json.JSONDecodeError) as e:
        return {}, e
    if not isinstance(settings, dict):
        return {}, ValueError(f"expected a JSON object, got {type(settings).__name__}")
    return settings, None


def _env_int(env: Mapping[str, str], name: str) -> int | None:
    raw = env.get(name)
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r: not an integer", name, raw)
        return None


def settings_from_env(env: Mapping[str, str]) -> dict[str, Any]:
    """Read the environment layer.

    ``NO_COLOR`` (any non-empty value) turns colour off.
    """
    return {
        "theme": env.get("MDLESS_THEME") or None,
        "tabWidth": _env_int(env, "MDLESS_TAB_WIDTH"),
        "width": _env_int(env, "MDLESS_WIDTH"),
        "color": False if env.get("NO_COLOR") else None,
    }


# --- Resolution ---


def _coerce(merged: dict[str, Any]) -> Settings:
    """Convert the merged dict into typed settings, dropping bad values."""
    settings = Settings()

    theme = merged.get("theme")
    if isinstance(theme, str) and theme:
        settings.theme = theme
    elif theme is not None:
        logger.warning("Ignoring theme setting %r", theme)

    tab_width = merged.get("tabWidth")
    if isinstance(tab_width, int) and not isinstance(tab_width, bool) and tab_width > 0:
        settings.tab_width = tab_width
    elif tab_width is not None:
        logger.warning("Ignoring tabWidth setting %r", tab_width)

    width = merged.get("width")
    if isinstance(width, int) and not isinstance(width, bool) and width > 0:
        settings.width = width
    elif width is not None:
        logger.warning("Ignoring width setting %r", width)

    color = merged.get("color")
    if isinstance(color, bool):
        settings.color = color
    elif color is not None:
        logger.warning("Ignoring color setting %r", color)

    keybindings = merged.get("keybindings")
    if isinstance(keybindings, dict):
        settings.keybindings = dict(keybindings)
    elif keybindings is not None:
        logger.warning("Ignoring keybindings setting %r", keybindings)

    return settings


def load_settings(
    overrides: Mapping[str, Any] | None = None,
    *,
    settings_path: str | None = None,
    env: Mapping[str, str] | None = None,
) -> Settings:
    """Resolve settings from every layer.

    *overrides* uses the settings-file keys (``theme``, ``tabWidth``,
    ``width``, ``color``). A missing settings file is not an error; a
    malformed one is logged and skipped.
    """
    path = settings_path or default_settings_path()
    file_settings, error = _load_from_file(path)
    if error is not None:
        logger.warning("Ignoring settings file %s: %s", path, error)
    elif file_settings:
        logger.debug("Loaded settings from %s", path)

    merged = _settings_defaults()
    merged = deep_merge_settings(merged, file_settings)
    merged = deep_merge_settings(merged, settings_from_env(os.environ if env is None else env))
    merged = deep_merge_settings(merged, overrides or {})
    return _coerce(merged)
