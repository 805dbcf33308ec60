"""Line-oriented Markdown parser for the pragmatic subset mdless renders.

``parse`` is total: it never raises, and any syntax it does not recognise
(or cannot close) degrades to literal text.

Block starters are tried in a fixed priority order. Each starter is a trial
function ``(lines, index, ids) -> (block, next_index) | None``; the first one
that applies wins, and a paragraph is the fallback.
"""

from __future__ import annotations

import re
from typing import Callable, Optional

from mdless.model import (
    Block,
    BlockIds,
    Blockquote,
    Code,
    CodeBlock,
    ColAlign,
    Emph,
    HardBreak,
    Heading,
    Image,
    Inline,
    Link,
    ListBlock,
    ListItem,
    Paragraph,
    SoftBreak,
    Strong,
    Table,
    Text,
    ThematicBreak,
)

_Trial = Optional[tuple[Block, int]]

# ---------------------------------------------------------------------------
# Patterns
# ---------------------------------------------------------------------------

_HEADING_RE = re.compile(r"^(#{1,6})\s+(.*?)(?:\s+#+)?\s*$")
_FENCE_RE = re.compile(r"^(?P<fence>`{3,}|~{3,})\s*(?P<info>[^`]*)$")
_UNORDERED_RE = re.compile(r"^(\s*)([-+*])\s+(.+)$")
_ORDERED_RE = re.compile(r"^(\s*)(\d{1,9})[.)]\s+(.+)$")
_ALIGN_CELL_RE = re.compile(r"^:?-+:?$")
_IMAGE_LINE_RE = re.compile(r"^!\[([^\]]*)\]\(([^)]*)\)$")
_LINK_RE = re.compile(r"\[([^\]]+)\]\(([^)\s]*)(?:\s+\"[^\"]*\")?\)")

_ESCAPABLE = set("!\"#$%&'()*+,-./:;<=>?@[\\]^_`{|}~")


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------


def parse(text: str, ids: BlockIds | None = None) -> list[Block]:
    """Parse *text* into a list of top-level blocks.

    *ids* supplies block identities; a fresh counter starting at 1 is used
    when omitted. Nested blocks (list item paragraphs, quoted blocks) draw
    from the same counter, so every id in the result is unique.
    """
    if ids is None:
        ids = BlockIds()
    normalized = text.replace("\r\n", "\n").replace("\r", "\n")
    return _parse_lines(normalized.split("\n"), ids)


def _parse_lines(lines: list[str], ids: BlockIds) -> list[Block]:
    blocks: list[Block] = []
    i = 0
    while i < len(lines):
        if _is_blank(lines[i]):
            i += 1
            continue

        result: _Trial = None
        for trial in _BLOCK_STARTERS:
            result = trial(lines, i, ids)
            if result is not None:
                break
        if result is None:
            result = _parse_paragraph(lines, i, ids)

        block, i = result
        blocks.append(block)
    return blocks


# ---------------------------------------------------------------------------
# Line predicates
# ---------------------------------------------------------------------------


def _is_blank(line: str) -> bool:
    return not line.strip()


def _indent_of(line: str) -> int:
    return len(line) - len(line.lstrip())


def _is_thematic_break(line: str) -> bool:
    stripped = line.strip()
    if len(stripped) < 3:
        return False
    return stripped == "-" * len(stripped) or stripped == "*" * len(stripped)


def _is_heading(line: str) -> bool:
    return _HEADING_RE.match(line) is not None


def _fence_open(line: str) -> re.Match[str] | None:
    return _FENCE_RE.match(line.strip())


def _is_quote(line: str) -> bool:
    return line.lstrip().startswith(">")


def _list_marker(line: str) -> tuple[bool, int, str] | None:
    """Return ``(ordered, indent, content)`` when *line* starts a list item."""
    m = _UNORDERED_RE.match(line)
    if m:
        return False, len(m.group(1)), m.group(3).rstrip()
    m = _ORDERED_RE.match(line)
    if m:
        return True, len(m.group(1)), m.group(3).rstrip()
    return None


def _starts_table(lines: list[str], i: int) -> bool:
    if i + 1 >= len(lines) or "|" not in lines[i]:
        return False
    aligns = _parse_align_row(lines[i + 1])
    return aligns is not None and len(aligns) == len(_split_row(lines[i]))


def _interrupts_paragraph(lines: list[str], i: int) -> bool:
    line = lines[i]
    return (
        _is_blank(line)
        or _is_thematic_break(line)
        or _is_heading(line)
        or _fence_open(line) is not None
        or _is_quote(line)
        or _list_marker(line) is not None
        or _starts_table(lines, i)
    )


# ---------------------------------------------------------------------------
# Block starters
# ---------------------------------------------------------------------------


def _parse_heading(lines: list[str], i: int, ids: BlockIds) -> _Trial:
    m = _HEADING_RE.match(lines[i])
    if m is None:
        return None
    level = len(m.group(1))
    block = Block(ids.next(), Heading(level), parse_inlines(m.group(2)))
    return block, i + 1


def _parse_thematic_break(lines: list[str], i: int, ids: BlockIds) -> _Trial:
    if not _is_thematic_break(lines[i]):
        return None
    return Block(ids.next(), ThematicBreak()), i + 1


def _parse_fence(lines: list[str], i: int, ids: BlockIds) -> _Trial:
    m = _fence_open(lines[i])
    if m is None:
        return None
    fence = m.group("fence")
    info = m.group("info").strip()
    language = info.split()[0] if info else None

    body: list[str] = []
    j = i + 1
    while j < len(lines) and not _closes_fence(lines[j], fence):
        body.append(lines[j])
        j += 1
    if j < len(lines):
        j += 1  # closing fence
    return Block(ids.next(), CodeBlock(language, "\n".join(body))), j


def _closes_fence(line: str, fence: str) -> bool:
    stripped = line.strip()
    return (
        len(stripped) >= len(fence)
        and stripped == fence[0] * len(stripped)
    )


def _parse_blockquote(lines: list[str], i: int, ids: BlockIds) -> _Trial:
    if not _is_quote(lines[i]):
        return None
    inner: list[str] = []
    j = i
    while j < len(lines) and _is_quote(lines[j]):
        line = lines[j]
        content = line[line.index(">") + 1 :]
        if content.startswith(" "):
            content = content[1:]
        inner.append(content)
        j += 1
    children = _parse_lines(inner, ids)
    return Block(ids.next(), Blockquote(tuple(children))), j


def _parse_list(lines: list[str], i: int, ids: BlockIds) -> _Trial:
    first = _list_marker(lines[i])
    if first is None:
        return None
    ordered, indent, _ = first

    items: list[ListItem] = []
    j = i
    while j < len(lines):
        marker = _list_marker(lines[j])
        if marker is None or marker[0] != ordered or marker[1] != indent:
            break

        item_blocks: list[Block] = []
        para_lines = [marker[2]]
        j += 1
        while j < len(lines):
            line = lines[j]
            if _is_blank(line):
                break
            ind = _indent_of(line)
            nested = _list_marker(line)
            if ind < indent:
                break
            if ind == indent and (nested is not None or _interrupts_paragraph(lines, j)):
                break
            if ind > indent and nested is not None:
                if para_lines:
                    item_blocks.append(_paragraph_block(para_lines, ids))
                    para_lines = []
                sub = _parse_list(lines, j, ids)
                if sub is None:
                    break
                item_blocks.append(sub[0])
                j = sub[1]
                continue
            para_lines.append(line.strip())
            j += 1

        if para_lines:
            item_blocks.append(_paragraph_block(para_lines, ids))
        items.append(ListItem(tuple(item_blocks)))

        if j < len(lines) and _is_blank(lines[j]):
            break

    return Block(ids.next(), ListBlock(ordered, tuple(items))), j


def _parse_table(lines: list[str], i: int, ids: BlockIds) -> _Trial:
    if not _starts_table(lines, i):
        return None
    aligns = _parse_align_row(lines[i + 1]) or []
    rows = [_split_row(lines[i])]
    j = i + 2
    while j < len(lines):
        line = lines[j]
        if _is_blank(line) or "|" not in line:
            break
        rows.append(_split_row(line))
        j += 1
    table = Table(tuple(tuple(r) for r in rows), tuple(aligns))
    return Block(ids.next(), table), j


def _split_row(line: str) -> list[str]:
    t = line.strip()
    if t.startswith("|"):
        t = t[1:]
    if t.endswith("|"):
        t = t[:-1]
    return [cell.strip() for cell in t.split("|")]


def _parse_align_row(line: str) -> list[ColAlign] | None:
    if not line.strip() or any(ch not in "-:| \t" for ch in line):
        return None
    aligns: list[ColAlign] = []
    for cell in _split_row(line):
        if not _ALIGN_CELL_RE.match(cell):
            return None
        left = cell.startswith(":")
        right = cell.endswith(":")
        if left and right:
            aligns.append(ColAlign.CENTER)
        elif right:
            aligns.append(ColAlign.RIGHT)
        else:
            aligns.append(ColAlign.LEFT)
    return aligns


def _parse_image(lines: list[str], i: int, ids: BlockIds) -> _Trial:
    m = _IMAGE_LINE_RE.match(lines[i].strip())
    if m is None:
        return None
    return Block(ids.next(), Image(m.group(1))), i + 1


def _parse_paragraph(lines: list[str], i: int, ids: BlockIds) -> tuple[Block, int]:
    para_lines = [lines[i]]
    j = i + 1
    while j < len(lines) and not _interrupts_paragraph(lines, j):
        para_lines.append(lines[j])
        j += 1
    return _paragraph_block(para_lines, ids), j


_BLOCK_STARTERS: tuple[Callable[[list[str], int, BlockIds], _Trial], ...] = (
    _parse_heading,
    _parse_thematic_break,
    _parse_fence,
    _parse_blockquote,
    _parse_list,
    _parse_table,
    _parse_image,
)


def _paragraph_block(para_lines: list[str], ids: BlockIds) -> Block:
    """Inline-parse each line and join them with soft or hard breaks.

    A line ending in a backslash or two spaces ends with a hard break.
    """
    inlines: list[Inline] = []
    last = len(para_lines) - 1
    for idx, raw in enumerate(para_lines):
        line = raw.lstrip()
        hard = False
        if idx != last:
            if line.endswith("\\") and not line.endswith("\\\\"):
                line = line[:-1]
                hard = True
            elif line.endswith("  "):
                hard = True
        inlines.extend(parse_inlines(line.rstrip()))
        if idx != last:
            inlines.append(HardBreak() if hard else SoftBreak())
    return Block(ids.next(), Paragraph(), tuple(inlines))


# ---------------------------------------------------------------------------
# Inline parsing
# ---------------------------------------------------------------------------


def parse_inlines(text: str) -> tuple[Inline, ...]:
    """Single left-to-right scan over one line of inline content.

    Recognised at each position, in order: backslash escape, code span,
    ``**strong**``, ``*emph*``, image, ``[link](url)``. An opener without a
    closer is literal text.
    """
    out: list[Inline] = []
    buf: list[str] = []

    def flush() -> None:
        if buf:
            out.append(Text("".join(buf)))
            buf.clear()

    i = 0
    n = len(text)
    while i < n:
        ch = text[i]

        if ch == "\\" and i + 1 < n and text[i + 1] in _ESCAPABLE:
            buf.append(text[i + 1])
            i += 2
            continue

        if ch == "`":
            end = _find_unescaped(text, "`", i + 1)
            if end > i + 1:
                flush()
                out.append(Code(text[i + 1 : end]))
                i = end + 1
            else:
                buf.append(ch)
                i += 1
            continue

        if text.startswith("**", i):
            end = text.find("**", i + 2)
            if end >= 0:
                flush()
                out.append(Strong(parse_inlines(text[i + 2 : end])))
                i = end + 2
            else:
                buf.append("**")
                i += 2
            continue

        if ch == "*":
            end = text.find("*", i + 1)
            if end > i + 1:
                flush()
                out.append(Emph(parse_inlines(text[i + 1 : end])))
                i = end + 1
            else:
                buf.append(ch)
                i += 1
            continue

        if ch == "!" and i + 1 < n and text[i + 1] == "[":
            m = _LINK_RE.match(text, i + 1)
            if m:
                flush()
                out.append(Text(f"[image: {m.group(1)}]"))
                i = m.end()
                continue

        if ch == "[":
            m = _LINK_RE.match(text, i)
            if m:
                flush()
                out.append(Link(parse_inlines(m.group(1)), m.group(2)))
                i = m.end()
                continue

        buf.append(ch)
        i += 1

    flush()
    return tuple(out)


def _find_unescaped(text: str, needle: str, start: int) -> int:
    i = text.find(needle, start)
    while i > 0 and text[i - 1] == "\\":
        i = text.find(needle, i + 1)
    return i
