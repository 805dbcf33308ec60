"""Display-width measurement and tab expansion.

Widths are computed per codepoint with :mod:`wcwidth`; grapheme clusters are
not considered. Every downstream component measures text through these
functions so wrapping, table sizing and code-block splitting agree.
"""

from __future__ import annotations

import wcwidth as _wcwidth

# ---------------------------------------------------------------------------
# Width cache (capped at 512 entries)
# ---------------------------------------------------------------------------

_width_cache: dict[str, int] = {}
_WIDTH_CACHE_MAX = 512


def _cache_width(key: str, value: int) -> int:
    if len(_width_cache) >= _WIDTH_CACHE_MAX:
        _width_cache.clear()
    _width_cache[key] = value
    return value


# ---------------------------------------------------------------------------
# Codepoint / string width
# ---------------------------------------------------------------------------


def char_width(ch: str) -> int:
    """Return the terminal column width of a single codepoint.

    Rules:
    1. Tab counts as one column (tabs are expanded before measuring).
    2. C0/C1 control characters -> 0.
    3. Otherwise ``wcwidth``; non-printable results are clamped to 0.
    """
    cp = ord(ch)
    if cp == 0x09:
        return 1
    if cp < 0x20 or 0x7F <= cp <= 0x9F:
        return 0
    if cp < 0x7F:
        return 1
    return max(_wcwidth.wcwidth(ch), 0)


def string_width(text: str) -> int:
    """Sum of :func:`char_width` over *text*.

    Uses a fast path for printable ASCII and caches non-ASCII results.
    """
    if not text:
        return 0

    if text.isascii() and text.isprintable():
        return len(text)

    cached = _width_cache.get(text)
    if cached is not None:
        return cached

    total = 0
    for ch in text:
        total += char_width(ch)
    return _cache_width(text, total)


def take_prefix_by_columns(text: str, max_cols: int) -> int:
    """Return the end index of the longest prefix of *text* within *max_cols*."""
    if max_cols <= 0:
        return 0
    cols = 0
    i = 0
    for ch in text:
        w = char_width(ch)
        if cols + w > max_cols:
            break
        cols += w
        i += 1
    return i


def split_at_columns(text: str, max_cols: int) -> tuple[str, str]:
    """Split *text* into ``(head, tail)`` where *head* fits in *max_cols*."""
    end = take_prefix_by_columns(text, max_cols)
    return text[:end], text[end:]


# ---------------------------------------------------------------------------
# Tabs
# ---------------------------------------------------------------------------


def expand_tabs(text: str, tab_width: int) -> str:
    """Replace tabs with spaces up to the next multiple of *tab_width*.

    Columns are counted in display width, and reset at each newline.
    A non-positive *tab_width* leaves the text untouched.
    """
    if tab_width <= 0 or "\t" not in text:
        return text

    out: list[str] = []
    col = 0
    for ch in text:
        if ch == "\t":
            spaces = tab_width - (col % tab_width)
            out.append(" " * spaces)
            col += spaces
        elif ch == "\n":
            out.append(ch)
            col = 0
        else:
            out.append(ch)
            col += char_width(ch)
    return "".join(out)
