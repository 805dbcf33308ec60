"""Layout engine: turns one block plus a width into styled screen lines.

Every block yields at least one line, so the pager never sees a block of
height zero. Nested blocks (list items, quoted blocks) are laid out at a
reduced width and their rows are prefixed; all resulting lines belong to the
top-level block that was passed in.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from mdless.model import (
    Block,
    BlockLineCount,
    Blockquote,
    CodeBlock,
    ColAlign,
    Heading,
    Image,
    ListBlock,
    Paragraph,
    ScreenLine,
    Span,
    Style,
    Table,
    ThematicBreak,
)
from mdless.styler import Styler
from mdless.theme import Theme
from mdless.width import expand_tabs, split_at_columns, string_width, take_prefix_by_columns

logger = logging.getLogger(__name__)

_Row = list[Span]

QUOTE_PREFIX = "> "
TABLE_COLUMN_SEP = " | "
LIST_INDENT = "  "


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def layout(
    block: Block,
    width: int,
    tab_width: int = 4,
    theme: Theme | None = None,
) -> list[ScreenLine]:
    """Lay out *block* into lines no wider than *width* columns.

    Without a *theme* every span carries the plain default style.
    """
    return _layout_block(block, max(width, 1), tab_width, Styler(theme))


def layout_document(
    blocks: Sequence[Block],
    width: int,
    tab_width: int = 4,
    theme: Theme | None = None,
) -> tuple[list[ScreenLine], list[BlockLineCount]]:
    """Lay out every block, returning the flat line list and per-block counts.

    Both lists form one generation: callers replace them together.
    """
    width = max(width, 1)
    styler = Styler(theme)
    lines: list[ScreenLine] = []
    counts: list[BlockLineCount] = []
    for block in blocks:
        block_lines = _layout_block(block, width, tab_width, styler)
        lines.extend(block_lines)
        counts.append(BlockLineCount(block.id, len(block_lines)))
    logger.debug("Laid out %d blocks into %d lines at width %d", len(blocks), len(lines), width)
    return lines, counts


def _layout_block(block: Block, width: int, tab_width: int, styler: Styler) -> list[ScreenLine]:
    rows = _layout_rows(block, width, tab_width, styler)
    return [ScreenLine(tuple(row), block.id, r) for r, row in enumerate(rows)]


# ---------------------------------------------------------------------------
# Block dispatch
# ---------------------------------------------------------------------------


def _layout_rows(block: Block, width: int, tab_width: int, styler: Styler) -> list[_Row]:
    kind = block.kind
    if isinstance(kind, Paragraph):
        rows = wrap_spans(styler.inlines(block.inlines), width)
    elif isinstance(kind, Heading):
        rows = wrap_spans(styler.inlines(block.inlines, heading=True), width)
    elif isinstance(kind, CodeBlock):
        rows = _layout_code(kind, width, tab_width, styler)
    elif isinstance(kind, ThematicBreak):
        rows = [[Span("-" * max(width, 1), styler.marker())]]
    elif isinstance(kind, ListBlock):
        rows = _layout_list(kind, width, tab_width, styler, depth=0)
    elif isinstance(kind, Blockquote):
        rows = _layout_quote(kind, width, tab_width, styler)
    elif isinstance(kind, Table):
        rows = _layout_table(kind, width, tab_width, styler)
    elif isinstance(kind, Image):
        rows = wrap_spans([Span(f"[image: {kind.alt}]", styler.text())], width)
    else:
        rows = []
    return rows or [[]]


# ---------------------------------------------------------------------------
# Word wrapping
# ---------------------------------------------------------------------------


@dataclass
class _Word:
    """A run of non-space characters, possibly spanning several styles."""

    frags: list[Span]
    sep: Style  # style of the whitespace that preceded the word


_NEWLINE = None


def _tokenize(spans: Iterable[Span]) -> list[_Word | None]:
    """Split styled text into words; ``None`` marks a forced line break."""
    tokens: list[_Word | None] = []
    frags: list[Span] = []
    sep = Style()
    for span in spans:
        chars: list[str] = []
        for ch in span.text:
            if ch in " \t\n":
                if chars:
                    frags.append(Span("".join(chars), span.style))
                    chars = []
                if frags:
                    tokens.append(_Word(frags, sep))
                    frags = []
                if ch == "\n":
                    tokens.append(_NEWLINE)
                sep = span.style
            else:
                chars.append(ch)
        if chars:
            frags.append(Span("".join(chars), span.style))
    if frags:
        tokens.append(_Word(frags, sep))
    return tokens


def _append(row: _Row, text: str, style: Style) -> None:
    """Append *text* to *row*, merging with the last span when styles match."""
    if not text:
        return
    if row and row[-1].style == style:
        row[-1] = Span(row[-1].text + text, style)
    else:
        row.append(Span(text, style))


def _merged(frags: Iterable[Span]) -> _Row:
    row: _Row = []
    for frag in frags:
        _append(row, frag.text, frag.style)
    return row


def _row_width(row: Sequence[Span]) -> int:
    return string_width("".join(span.text for span in row))


def _split_frags(frags: Sequence[Span], max_cols: int) -> tuple[list[Span], list[Span]]:
    """Split a word at the widest prefix fitting *max_cols* columns."""
    head: list[Span] = []
    cols = 0
    for idx, frag in enumerate(frags):
        fw = string_width(frag.text)
        if cols + fw <= max_cols:
            head.append(frag)
            cols += fw
            continue
        end = take_prefix_by_columns(frag.text, max_cols - cols)
        if end:
            head.append(Span(frag.text[:end], frag.style))
        tail = [Span(frag.text[end:], frag.style), *frags[idx + 1 :]]
        return head, tail
    return head, []


def wrap_spans(spans: Iterable[Span], width: int) -> list[_Row]:
    """Greedy word wrap of styled text to *width* columns.

    Words are joined by one space while ``current + 1 + word <= width``.
    A word wider than *width* is hard-split into full-width chunks, each
    on its own line; the final partial chunk starts the next line. If a
    split makes no progress (a wide character in a one-column line) the
    rest of that word is dropped.
    """
    width = max(width, 1)
    rows: list[_Row] = []
    current: _Row = []
    current_w = 0

    for tok in _tokenize(spans):
        if tok is _NEWLINE:
            rows.append(current)
            current, current_w = [], 0
            continue

        word_w = sum(string_width(f.text) for f in tok.frags)
        if word_w > width:
            if current:
                rows.append(current)
                current, current_w = [], 0
            rest: list[Span] = tok.frags
            while rest:
                head, rest = _split_frags(rest, width)
                if not head:
                    break
                if rest:
                    rows.append(_merged(head))
                else:
                    current = _merged(head)
                    current_w = _row_width(current)
            continue

        if not current:
            current = _merged(tok.frags)
            current_w = word_w
        elif current_w + 1 + word_w <= width:
            _append(current, " ", tok.sep)
            for frag in tok.frags:
                _append(current, frag.text, frag.style)
            current_w = _row_width(current)
        else:
            rows.append(current)
            current = _merged(tok.frags)
            current_w = word_w

    if current:
        rows.append(current)
    return rows


# ---------------------------------------------------------------------------
# Code blocks
# ---------------------------------------------------------------------------


def _layout_code(code: CodeBlock, width: int, tab_width: int, styler: Styler) -> list[_Row]:
    style = styler.code()
    rows: list[_Row] = []
    for source_line in code.text.split("\n"):
        rest = expand_tabs(source_line, tab_width)
        produced = 0
        while rest:
            head, rest = split_at_columns(rest, width)
            if not head:
                break
            rows.append([Span(head, style)])
            produced += 1
        if not produced:
            rows.append([])
    return rows


# ---------------------------------------------------------------------------
# Lists and quotes
# ---------------------------------------------------------------------------


def _layout_list(
    kind: ListBlock,
    width: int,
    tab_width: int,
    styler: Styler,
    depth: int,
) -> list[_Row]:
    rows: list[_Row] = []
    indent = LIST_INDENT * depth
    marker = styler.marker()

    for number, item in enumerate(kind.items, start=1):
        bullet = f"{number}. " if kind.ordered else "- "
        hanging = " " * len(bullet)
        inner_width = max(width - len(indent) - len(bullet), 1)
        first_in_item = True

        for child in item.blocks:
            if isinstance(child.kind, ListBlock):
                rows.extend(_layout_list(child.kind, width, tab_width, styler, depth + 1))
            else:
                for j, child_row in enumerate(_layout_rows(child, inner_width, tab_width, styler)):
                    prefix = indent + (bullet if first_in_item and j == 0 else hanging)
                    rows.append([Span(prefix, marker), *child_row])
            first_in_item = False

    return rows


def _layout_quote(kind: Blockquote, width: int, tab_width: int, styler: Styler) -> list[_Row]:
    prefix = Span(QUOTE_PREFIX, styler.quote())
    inner_width = max(width - len(QUOTE_PREFIX), 1)
    rows: list[_Row] = []
    for child in kind.children:
        for child_row in _layout_rows(child, inner_width, tab_width, styler):
            rows.append([prefix, *child_row])
    return rows


# ---------------------------------------------------------------------------
# Tables
# ---------------------------------------------------------------------------


def fit_columns(desired: Sequence[int], width: int, sep_width: int = len(TABLE_COLUMN_SEP)) -> list[int]:
    """Shrink column widths proportionally so the row fits in *width*.

    Each column gets ``floor(desired * available / total)`` (at least 1);
    then the widest column (first on ties) is decremented until the row
    fits or every column is down to 1.
    """
    cols = len(desired)
    if cols == 0:
        return []
    widths = [max(d, 1) for d in desired]
    seps = sep_width * (cols - 1)
    if sum(widths) + seps <= width:
        return widths

    total = sum(widths)
    available = max(width - seps, cols)
    widths = [max(1, w * available // total) for w in widths]

    while sum(widths) + seps > width:
        widest = max(widths)
        if widest <= 1:
            break
        widths[widths.index(widest)] -= 1
    return widths


def _pad_cell(row: _Row, col_width: int, align: ColAlign, fill: Style) -> _Row:
    padding = max(col_width - _row_width(row), 0)
    if align is ColAlign.RIGHT:
        left, right = padding, 0
    elif align is ColAlign.CENTER:
        left = padding // 2
        right = padding - left
    else:
        left, right = 0, padding
    out: _Row = []
    _append(out, " " * left, fill)
    for span in row:
        _append(out, span.text, span.style)
    _append(out, " " * right, fill)
    return out


def _layout_table(table: Table, width: int, tab_width: int, styler: Styler) -> list[_Row]:
    if not table.rows:
        return []
    cols = max(len(r) for r in table.rows)
    if cols == 0:
        return []

    aligns = [table.aligns[j] if j < len(table.aligns) else ColAlign.LEFT for j in range(cols)]
    cells = [
        [expand_tabs(r[j], tab_width) if j < len(r) else "" for j in range(cols)]
        for r in table.rows
    ]
    desired = [max(1, max(string_width(row[j]) for row in cells)) for j in range(cols)]
    col_widths = fit_columns(desired, width)

    text_style = styler.text()
    header_style = styler.table_header()
    marker = styler.marker()

    rows: list[_Row] = []
    for r, row in enumerate(cells):
        style = header_style if r == 0 else text_style
        wrapped = [wrap_spans([Span(cell, style)], col_widths[j]) or [[]] for j, cell in enumerate(row)]
        height = max(len(w) for w in wrapped)
        for k in range(height):
            line: _Row = []
            for j in range(cols):
                if j > 0:
                    _append(line, TABLE_COLUMN_SEP, marker)
                cell_row = wrapped[j][k] if k < len(wrapped[j]) else []
                for span in _pad_cell(cell_row, col_widths[j], aligns[j], text_style):
                    _append(line, span.text, span.style)
            rows.append(line)
        if r == 0:
            rule = sum(col_widths) + len(TABLE_COLUMN_SEP) * (cols - 1)
            rows.append([Span("-" * max(rule, 1), marker)])
    return rows
