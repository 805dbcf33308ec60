"""Turn screen lines into terminal output.

Each styled fragment is written as ``SGR + text + reset`` so a fragment never
inherits attributes from its neighbour, and a line can be cut or cleared
anywhere without leaking style.
"""

from __future__ import annotations

from collections.abc import Sequence

from mdless.model import ScreenLine, Span, Style

ESC = "\x1b["
RESET = f"{ESC}0m"

Range = tuple[int, int]


def line_text(line: ScreenLine) -> str:
    """Concatenated fragment texts, as used for search and measurement."""
    return "".join(span.text for span in line.spans)


def style_to_sgr(style: Style) -> str:
    """Return the SGR sequence for *style*, or ``""`` for the plain style."""
    codes: list[str] = []
    if style.bold:
        codes.append("1")
    if style.underline:
        codes.append("4")
    if style.fg is not None:
        codes.append(str(style.fg.value))
    if not codes:
        return ""
    return f"{ESC}{';'.join(codes)}m"


def _emit(out: list[str], text: str, style: Style, color: bool) -> None:
    if color:
        out.append(style_to_sgr(style))
    out.append(text)
    if color:
        out.append(RESET)


def render_line(line: ScreenLine, color: bool = True) -> str:
    """Render one line without a trailing newline."""
    out: list[str] = []
    for span in line.spans:
        _emit(out, span.text, span.style, color)
    return "".join(out)


def render_lines(lines: Sequence[ScreenLine], color: bool = True) -> str:
    """Render *lines*, each followed by a newline."""
    return "".join(render_line(line, color) + "\n" for line in lines)


# ---------------------------------------------------------------------------
# Highlights
# ---------------------------------------------------------------------------


def _normalize(ranges: Sequence[Range], length: int) -> list[Range]:
    """Clamp inclusive ranges to the text, drop empty ones, merge overlaps."""
    clamped = sorted(
        (max(start, 0), min(end, length - 1))
        for start, end in ranges
        if max(start, 0) <= min(end, length - 1)
    )
    merged: list[Range] = []
    for start, end in clamped:
        if merged and start <= merged[-1][1] + 1:
            merged[-1] = (merged[-1][0], max(merged[-1][1], end))
        else:
            merged.append((start, end))
    return merged


def _highlighted_spans(line: ScreenLine, ranges: Sequence[Range]) -> list[Span]:
    """Split the line's spans at range edges, underlining the covered parts."""
    merged = _normalize(ranges, len(line_text(line)))
    if not merged:
        return list(line.spans)

    edges = sorted({0, *(s for s, _ in merged), *(e + 1 for _, e in merged)})
    spans: list[Span] = []
    offset = 0
    for span in line.spans:
        end = offset + len(span.text)
        cuts = [offset, *(e for e in edges if offset < e < end), end]
        for a, b in zip(cuts, cuts[1:]):
            if a == b:
                continue
            piece = span.text[a - offset : b - offset]
            lit = any(s <= a <= e for s, e in merged)
            style = span.style.combine(Style(underline=True)) if lit else span.style
            spans.append(Span(piece, style))
        offset = end
    return spans


def render_highlighted_line(line: ScreenLine, ranges: Sequence[Range], color: bool = True) -> str:
    """Render one line with *ranges* underlined, without a trailing newline."""
    out: list[str] = []
    for span in _highlighted_spans(line, ranges):
        _emit(out, span.text, span.style, color)
    return "".join(out)


def render_with_highlights(
    lines: Sequence[ScreenLine],
    highlights: Sequence[Sequence[Range]],
    color: bool = True,
) -> str:
    """Render *lines* with inclusive character ranges underlined.

    ``highlights[i]`` holds the ranges for ``lines[i]``; missing entries mean
    no highlights. Highlighted text keeps its fragment's colour and weight.
    """
    out: list[str] = []
    for i, line in enumerate(lines):
        ranges = highlights[i] if i < len(highlights) else ()
        out.append(render_highlighted_line(line, ranges, color))
        out.append("\n")
    return "".join(out)
