"""Tests for mdless.render -- SGR output for screen lines."""

from __future__ import annotations

from mdless.model import AnsiColor, ScreenLine, Span, Style
from mdless.render import (
    line_text,
    render_line,
    render_lines,
    render_with_highlights,
    style_to_sgr,
)


def _line(*spans: Span) -> ScreenLine:
    return ScreenLine(tuple(spans), 1, 0)


class TestStyleToSgr:
    """Style to escape sequence."""

    def test_plain_is_empty(self) -> None:
        assert style_to_sgr(Style()) == ""

    def test_order_bold_underline_colour(self) -> None:
        style = Style(AnsiColor.CYAN, bold=True, underline=True)
        assert style_to_sgr(style) == "\x1b[1;4;36m"

    def test_default_colour(self) -> None:
        assert style_to_sgr(Style(AnsiColor.DEFAULT)) == "\x1b[39m"


class TestRenderLine:
    """Per-span SGR, text, reset."""

    def test_line_text(self) -> None:
        assert line_text(_line(Span("ab"), Span("cd", Style(bold=True)))) == "abcd"

    def test_each_span_reset(self) -> None:
        line = _line(Span("a", Style(AnsiColor.RED)), Span("b", Style(bold=True)))
        assert render_line(line) == "\x1b[31ma\x1b[0m\x1b[1mb\x1b[0m"

    def test_plain_span_still_reset(self) -> None:
        assert render_line(_line(Span("x"))) == "x\x1b[0m"

    def test_without_colour(self) -> None:
        line = _line(Span("a", Style(AnsiColor.RED)), Span("b"))
        assert render_line(line, color=False) == "ab"

    def test_render_lines_adds_newlines(self) -> None:
        lines = [_line(Span("a")), _line(Span("b"))]
        assert render_lines(lines, color=False) == "a\nb\n"


class TestRenderWithHighlights:
    """Underlined match ranges."""

    def test_underline_ranges(self) -> None:
        line = _line(Span("abc abc", Style()))
        out = render_with_highlights([line], [[(0, 2), (4, 6)]])
        assert out == "\x1b[4mabc\x1b[0m \x1b[0m\x1b[4mabc\x1b[0m\n"

    def test_no_ranges_matches_plain_render(self) -> None:
        line = _line(Span("a", Style(AnsiColor.RED)), Span("b"))
        assert render_with_highlights([line], [[]]) == render_line(line) + "\n"

    def test_missing_highlight_entry(self) -> None:
        line = _line(Span("x"))
        assert render_with_highlights([line], []) == "x\x1b[0m\n"

    def test_highlight_keeps_span_colour(self) -> None:
        line = _line(Span("ab", Style(AnsiColor.GREEN)), Span("cd", Style(AnsiColor.RED)))
        out = render_with_highlights([line], [[(1, 2)]])
        assert out == (
            "\x1b[32ma\x1b[0m"
            "\x1b[4;32mb\x1b[0m"
            "\x1b[4;31mc\x1b[0m"
            "\x1b[31md\x1b[0m\n"
        )

    def test_ranges_clamped_and_merged(self) -> None:
        line = _line(Span("abcd"))
        out = render_with_highlights([line], [[(2, 10), (-5, 0), (1, 2)]])
        assert out == "\x1b[4mabcd\x1b[0m\n"

    def test_without_colour_is_plain_text(self) -> None:
        line = _line(Span("abc abc"))
        assert render_with_highlights([line], [[(0, 2)]], color=False) == "abc abc\n"
