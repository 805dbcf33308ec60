"""Tests for mdless.theme and mdless.styler."""

from __future__ import annotations

import logging

import pytest

from mdless.model import PLAIN, AnsiColor, Code, Emph, HardBreak, Link, SoftBreak, Span, Strong, Style, Text
from mdless.styler import Styler
from mdless.theme import DARK, LIGHT, NO_COLOR, ThemeMode, theme_by_name


class TestThemeLookup:
    """Theme names."""

    @pytest.mark.parametrize(
        ("name", "theme"),
        [
            ("dark", DARK),
            ("light", LIGHT),
            ("no-color", NO_COLOR),
            ("nocolor", NO_COLOR),
            ("none", NO_COLOR),
            ("LIGHT", LIGHT),
        ],
    )
    def test_known_names(self, name: str, theme) -> None:
        assert theme_by_name(name) is theme

    def test_missing_name_is_dark(self) -> None:
        assert theme_by_name(None) is DARK
        assert theme_by_name("") is DARK

    def test_unknown_name_warns(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING):
            assert theme_by_name("solarized") is DARK
        assert "solarized" in caplog.text


class TestBuiltinThemes:
    """Built-in colour choices."""

    def test_dark(self) -> None:
        assert DARK.text is AnsiColor.WHITE
        assert DARK.heading is AnsiColor.CYAN
        assert DARK.link is AnsiColor.BLUE
        assert DARK.code is AnsiColor.YELLOW
        assert DARK.quote is AnsiColor.GREEN

    def test_light(self) -> None:
        assert LIGHT.text is AnsiColor.BLACK
        assert LIGHT.heading is AnsiColor.BLUE
        assert LIGHT.link is AnsiColor.MAGENTA
        assert LIGHT.code is AnsiColor.RED

    def test_no_color(self) -> None:
        assert NO_COLOR.mode is ThemeMode.NO_COLOR
        assert NO_COLOR.no_color
        assert not DARK.no_color


class TestStyler:
    """Inline tree to styled spans."""

    def test_roles(self) -> None:
        styler = Styler(DARK)
        assert styler.heading() == Style(AnsiColor.CYAN, bold=True)
        assert styler.link() == Style(AnsiColor.BLUE, underline=True)
        assert styler.quote() == Style(AnsiColor.GREEN)

    def test_code_inside_strong(self) -> None:
        spans = Styler(DARK).inlines([Strong((Code("x"),))])
        assert spans == [Span("x", Style(AnsiColor.YELLOW, bold=True))]

    def test_emph_inside_link_keeps_link_colour(self) -> None:
        spans = Styler(DARK).inlines([Link((Emph((Text("a"),)),), "u")])
        assert spans == [Span("a", Style(AnsiColor.BLUE, underline=True))]

    def test_emph_in_heading(self) -> None:
        spans = Styler(LIGHT).inlines([Emph((Text("h"),))], heading=True)
        assert spans == [Span("h", Style(AnsiColor.BLUE, bold=True, underline=True))]

    def test_breaks(self) -> None:
        spans = Styler().inlines([Text("a"), SoftBreak(), Text("b"), HardBreak()])
        assert [s.text for s in spans] == ["a", " ", "b", "\n"]

    def test_empty_text_dropped(self) -> None:
        assert Styler(DARK).inlines([Text("")]) == []

    def test_no_color_is_plain(self) -> None:
        spans = Styler(NO_COLOR).inlines([Strong((Code("x"),)), Link((Text("l"),), "u")])
        assert all(s.style == PLAIN for s in spans)

    def test_default_is_no_color(self) -> None:
        assert Styler().heading() == PLAIN
