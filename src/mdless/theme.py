"""Colour themes: a mapping from structural role to ANSI foreground colour."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass

from mdless.model import AnsiColor

logger = logging.getLogger(__name__)


class ThemeMode(enum.Enum):
    DARK = "dark"
    LIGHT = "light"
    NO_COLOR = "no-color"


@dataclass(frozen=True)
class Theme:
    """Colour / style theme for the layout engine."""

    mode: ThemeMode
    text: AnsiColor
    heading: AnsiColor
    link: AnsiColor
    code: AnsiColor
    quote: AnsiColor

    @property
    def no_color(self) -> bool:
        return self.mode is ThemeMode.NO_COLOR


DARK = Theme(
    mode=ThemeMode.DARK,
    text=AnsiColor.WHITE,
    heading=AnsiColor.CYAN,
    link=AnsiColor.BLUE,
    code=AnsiColor.YELLOW,
    quote=AnsiColor.GREEN,
)

LIGHT = Theme(
    mode=ThemeMode.LIGHT,
    text=AnsiColor.BLACK,
    heading=AnsiColor.BLUE,
    link=AnsiColor.MAGENTA,
    code=AnsiColor.RED,
    quote=AnsiColor.GREEN,
)

NO_COLOR = Theme(
    mode=ThemeMode.NO_COLOR,
    text=AnsiColor.DEFAULT,
    heading=AnsiColor.DEFAULT,
    link=AnsiColor.DEFAULT,
    code=AnsiColor.DEFAULT,
    quote=AnsiColor.DEFAULT,
)

THEMES: dict[str, Theme] = {
    "dark": DARK,
    "light": LIGHT,
    "no-color": NO_COLOR,
    "nocolor": NO_COLOR,
    "none": NO_COLOR,
}

THEME_NAMES = ("dark", "light", "no-color")


def theme_by_name(name: str | None) -> Theme:
    """Look up a theme by name; unknown names fall back to ``dark``."""
    if not name:
        return DARK
    theme = THEMES.get(name.strip().lower())
    if theme is None:
        logger.warning("Unknown theme %r, using dark", name)
        return DARK
    return theme
