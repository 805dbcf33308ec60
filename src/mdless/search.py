"""Case-insensitive substring search over laid-out lines.

Searching works on the current layout generation, so a match is reported as
a logical line index and stays valid only until the next reflow.
"""

from __future__ import annotations

from collections.abc import Sequence

from mdless.model import ScreenLine


def _fold(text: str) -> str:
    # Same length as the input so offsets map back onto the original text.
    return "".join(_fold_char(ch) for ch in text)


def _fold_char(ch: str) -> str:
    lowered = ch.lower()
    return lowered if len(lowered) == 1 else ch


def _line_matches(line: ScreenLine, needle: str) -> bool:
    return needle in _fold(line.text)


def find_next(lines: Sequence[ScreenLine], query: str, from_line_exclusive: int) -> int | None:
    """Return the first line after *from_line_exclusive* containing *query*.

    Pass ``-1`` to search from the top of the document.
    """
    if not query:
        return None
    needle = _fold(query)
    for i in range(max(from_line_exclusive + 1, 0), len(lines)):
        if _line_matches(lines[i], needle):
            return i
    return None


def find_prev(lines: Sequence[ScreenLine], query: str, from_line_exclusive: int) -> int | None:
    """Return the last line before *from_line_exclusive* containing *query*."""
    if not query:
        return None
    needle = _fold(query)
    for i in range(min(from_line_exclusive - 1, len(lines) - 1), -1, -1):
        if _line_matches(lines[i], needle):
            return i
    return None


def compute_matches(lines: Sequence[ScreenLine], query: str) -> list[list[tuple[int, int]]]:
    """Return, per line, the non-overlapping match ranges of *query*.

    Ranges are inclusive ``(start, end)`` character offsets into the line's
    text. An empty query matches nothing.
    """
    result: list[list[tuple[int, int]]] = []
    needle = _fold(query)
    for line in lines:
        ranges: list[tuple[int, int]] = []
        if needle:
            haystack = _fold(line.text)
            start = haystack.find(needle)
            while start >= 0:
                ranges.append((start, start + len(needle) - 1))
                start = haystack.find(needle, start + len(needle))
        result.append(ranges)
    return result
